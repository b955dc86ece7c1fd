"""Decode captured streams and turn a termination status into a result."""

NEWLINE = "\n"


def decode(data: bytes) -> str:
    """Decode UTF-8 output, dropping a single trailing newline.

    Undecodable bytes yield an empty string instead of an error.
    """
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        return ""
    if text.endswith(NEWLINE):
        return text[: -len(NEWLINE)]
    return text


class ShellError(Exception):
    """A command finished with a non-zero termination status."""

    __match_args__ = ("termination_status", "error_data", "output_data")

    def __init__(self, termination_status: int, error_data: bytes, output_data: bytes):
        super().__init__(termination_status, error_data, output_data)
        self.termination_status = termination_status
        self.error_data = error_data
        self.output_data = output_data

    @property
    def message(self) -> str:
        """Decoded stderr of the command."""
        return decode(self.error_data)

    @property
    def output(self) -> str:
        """Decoded stdout of the command."""
        return decode(self.output_data)

    def __str__(self) -> str:
        return (
            "Shell encountered an error\n"
            f"Status code: {self.termination_status}\n"
            f'Message: "{self.message}"\n'
            f'Output: "{self.output}"'
        )


def aggregate(status: int, output_data: bytes, error_data: bytes) -> str:
    """Return decoded stdout for status 0, raise ShellError otherwise."""
    if status != 0:
        raise ShellError(status, error_data, output_data)
    return decode(output_data)
