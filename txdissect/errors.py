"""Exceptions raised by the transaction decoder and script tokenizer."""

from __future__ import annotations


class DecodeError(ValueError):
    """Base class for every structural decoding failure."""


class InvalidHexInput(DecodeError):
    """Raised when the input is not an even-length hexadecimal string."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MalformedTransaction(DecodeError):
    """Raised when a field needs more bytes than remain, or bytes are left over."""

    def __init__(self, offset: int, needed: int, available: int, message: str | None = None) -> None:
        if message is None:
            message = (
                f"malformed transaction at offset {offset}: "
                f"needed {needed} bytes, {available} available"
            )
        super().__init__(message)
        self.offset = offset
        self.needed = needed
        self.available = available


class ScriptTruncated(DecodeError):
    """Raised when a push inside a script declares more bytes than remain."""

    def __init__(self, offset: int, needed: int | None = None, available: int | None = None) -> None:
        message = f"script truncated at offset {offset}"
        if needed is not None and available is not None:
            message += f": push needs {needed} bytes, {available} available"
        super().__init__(message)
        self.offset = offset
        self.needed = needed
        self.available = available
