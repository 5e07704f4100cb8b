"""Sequential reader over an immutable byte buffer."""

from __future__ import annotations

import string
import struct

from .errors import InvalidHexInput, MalformedTransaction

_VARINT_WIDTHS = {0xFD: (2, "<H"), 0xFE: (4, "<I"), 0xFF: (8, "<Q")}
_HEX_DIGITS = frozenset(string.hexdigits)


def bytes_from_hex(value: str) -> bytes:
    """Convert a hex string to bytes, rejecting odd lengths and non-hex characters.

    Surrounding whitespace is ignored; embedded whitespace is not.
    """

    if not isinstance(value, str):
        raise InvalidHexInput(f"expected a hex string, got {type(value).__name__}")
    text = value.strip()
    if len(text) % 2:
        raise InvalidHexInput(f"hex input has odd length {len(text)}")
    bad = next((char for char in text if char not in _HEX_DIGITS), None)
    if bad is not None:
        raise InvalidHexInput(f"hex input contains non-hex character {bad!r}")
    return bytes.fromhex(text)


def as_bytes(value: bytes | bytearray | memoryview | str) -> bytes:
    """Return *value* as bytes, decoding hex strings with :func:`bytes_from_hex`."""

    if isinstance(value, str):
        return bytes_from_hex(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise InvalidHexInput(f"expected bytes or a hex string, got {type(value).__name__}")


class ByteCursor:
    """Read fixed-width integers, CompactSize varints and raw slices.

    Every reader returns the exact bytes it consumed alongside the decoded
    value so that callers can tag the whole span as a single field.
    """

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._offset = 0

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def remaining(self) -> int:
        return len(self._data) - self._offset

    def read(self, n: int) -> bytes:
        """Return the next *n* bytes and advance past them."""

        if n < 0:
            raise ValueError("cannot read a negative number of bytes")
        if n > self.remaining:
            raise MalformedTransaction(self._offset, n, self.remaining)
        chunk = self._data[self._offset : self._offset + n]
        self._offset += n
        return chunk

    def peek(self, n: int) -> bytes:
        """Return up to *n* upcoming bytes without consuming them."""

        return self._data[self._offset : self._offset + n]

    def read_varint(self) -> tuple[int, bytes]:
        """Decode a CompactSize integer, returning ``(value, raw_bytes)``."""

        start = self._offset
        prefix = self.read(1)
        width = _VARINT_WIDTHS.get(prefix[0])
        if width is None:
            return prefix[0], prefix
        size, fmt = width
        if size > self.remaining:
            # report against the start of the varint, the prefix is part of it
            available = self.remaining + 1
            self._offset = start
            raise MalformedTransaction(start, size + 1, available)
        payload = self.read(size)
        return struct.unpack(fmt, payload)[0], prefix + payload

    def read_uint32(self) -> tuple[int, bytes]:
        raw = self.read(4)
        return struct.unpack("<I", raw)[0], raw

    def read_int32(self) -> tuple[int, bytes]:
        raw = self.read(4)
        return struct.unpack("<i", raw)[0], raw

    def read_uint64(self) -> tuple[int, bytes]:
        raw = self.read(8)
        return struct.unpack("<Q", raw)[0], raw
