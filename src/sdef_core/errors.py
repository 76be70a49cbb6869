"""Exceptions raised by the SDEF core."""


class SdefError(Exception):
    """Base class for sdef-core errors."""


class DecodeError(SdefError):
    """No encoding strategy produced valid text."""


class ParseError(SdefError):
    """Input is not a well-formed SDEF document.

    Carries the underlying parser diagnostic as its message, and the
    position of the failure when the parser reported one.
    """

    def __init__(self, message: str, *, line: int | None = None, column: int | None = None) -> None:
        super().__init__(message)
        self.line = line
        self.column = column
