"""Append-only byte buffer shared between a drainer and the final read."""

import threading


class StreamBuffer:
    """Captured bytes of one child stream.

    Buffers belonging to the same run share a single lock, so both drainers
    serialize through one point and the final snapshot waits for any append
    still holding it.
    """

    def __init__(self, lock: "threading.Lock | None" = None):
        self._lock = lock or threading.Lock()
        self._data = bytearray()

    def append(self, chunk: bytes) -> None:
        with self._lock:
            self._data.extend(chunk)

    def snapshot(self) -> bytes:
        """Return the bytes appended so far."""
        with self._lock:
            return bytes(self._data)

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
