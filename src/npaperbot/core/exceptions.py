"""Error taxonomy shared by the catalog, parser and transport layers."""

from typing import Optional


class NPaperBotError(Exception):
    """Base class for all errors raised by npaperbot."""


class FetchError(NPaperBotError):
    """The catalog source could not be reached or answered with an error."""

    def __init__(self, message: str, source: Optional[str] = None) -> None:
        super().__init__(message)
        self.source = source


class DecodeError(NPaperBotError):
    """The catalog payload does not have the expected structure."""

    def __init__(self, message: str, source: Optional[str] = None) -> None:
        super().__init__(message)
        self.source = source


class InvalidPattern(NPaperBotError):
    """A search pattern was rejected by the regular expression engine."""

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"Invalid search pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason


class ParseAmbiguous(NPaperBotError):
    """A mention was opened with a bracket but never validly closed.

    ``offset`` is the position of the offending opening bracket and
    ``remainder`` the text starting there.
    """

    def __init__(self, offset: int, remainder: str) -> None:
        super().__init__(f"Malformed reference at offset {offset}: {remainder[:32]!r}")
        self.offset = offset
        self.remainder = remainder


class TransportError(NPaperBotError):
    """The chat API rejected a request or could not be reached."""
