"""Live output targets for a run."""

import sys
from typing import BinaryIO


class Sink:
    """A writable binary stream that receives every chunk as it is read.

    Only owned sinks are closed at the end of a run; the standard process
    streams are wrapped unowned.
    """

    def __init__(self, stream: BinaryIO, owned: bool = False):
        self.stream = stream
        self.owned = owned

    @classmethod
    def stdout(cls) -> "Sink":
        return cls(sys.stdout.buffer, owned=False)

    @classmethod
    def stderr(cls) -> "Sink":
        return cls(sys.stderr.buffer, owned=False)

    @classmethod
    def open(cls, path: str) -> "Sink":
        """Open path for binary writing; the run closes it when done."""
        return cls(open(path, "wb"), owned=True)

    def write(self, chunk: bytes) -> None:
        self.stream.write(chunk)
        self.stream.flush()

    def close(self) -> None:
        if self.owned and not self.stream.closed:
            self.stream.close()
