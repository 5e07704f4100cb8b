"""Tokenize Bitcoin scripts into data pushes and opcodes.

The tokenizer is lenient: any byte that is not a push and not in
the opcode table becomes an ``UNKNOWN`` token. The only failure is a push
whose declared length runs past the end of the script.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterable, List, Optional, Union

from .cursor import ByteCursor, as_bytes
from .errors import DecodeError, MalformedTransaction, ScriptTruncated
from .model import DecodeResult
from .opcodes import (
    MAX_DIRECT_PUSH,
    OP_PUSHDATA1,
    OP_PUSHDATA2,
    OP_PUSHDATA4,
    OpcodeCategory,
    lookup_opcode,
)

logger = logging.getLogger(__name__)

ScriptInput = Union[bytes, bytearray, memoryview, str]


class TokenKind(Enum):
    DATA_PUSH = auto()
    NAMED = auto()
    UNKNOWN = auto()


@dataclass(frozen=True)
class OpcodeToken:
    """A single script element and the exact bytes it was read from.

    ``length`` is set for data pushes, ``mnemonic`` for table opcodes and for
    the ``OP_PUSHDATA`` forms. ``opcode`` is always the leading byte value.
    """

    kind: TokenKind
    hex: str
    opcode: int
    mnemonic: Optional[str] = None
    length: Optional[int] = None
    category: Optional[OpcodeCategory] = None

    @property
    def data(self) -> bytes:
        """Payload of a data push; empty for every other token."""

        if self.kind is not TokenKind.DATA_PUSH or not self.length:
            return b""
        return bytes.fromhex(self.hex)[-self.length :]

    @property
    def size(self) -> int:
        return len(self.hex) // 2

    def asm(self) -> str:
        if self.kind is TokenKind.DATA_PUSH:
            return self.data.hex()
        if self.kind is TokenKind.NAMED:
            return self.mnemonic or ""
        return f"OP_UNKNOWN<0x{self.opcode:02x}>"


_PUSHDATA_PREFIX = {OP_PUSHDATA1: 1, OP_PUSHDATA2: 2, OP_PUSHDATA4: 4}


def tokenize(script: ScriptInput) -> List[OpcodeToken]:
    """Split *script* into ordered tokens.

    Raises :class:`ScriptTruncated` when a push (or the length prefix of an
    ``OP_PUSHDATA`` opcode) needs more bytes than the script holds.
    """

    data = as_bytes(script)
    cursor = ByteCursor(data)
    tokens: List[OpcodeToken] = []
    while cursor.remaining:
        start = cursor.offset
        opcode = cursor.read(1)[0]
        if 0x01 <= opcode <= MAX_DIRECT_PUSH:
            tokens.append(_read_push(cursor, data, start, opcode, None, opcode))
        elif opcode in _PUSHDATA_PREFIX:
            width = _PUSHDATA_PREFIX[opcode]
            try:
                length = int.from_bytes(cursor.read(width), "little")
            except MalformedTransaction as exc:
                raise ScriptTruncated(start, exc.needed, exc.available) from exc
            info = lookup_opcode(opcode)
            tokens.append(_read_push(cursor, data, start, opcode, info.mnemonic, length))
        else:
            info = lookup_opcode(opcode)
            if info is None:
                tokens.append(OpcodeToken(kind=TokenKind.UNKNOWN, hex=f"{opcode:02x}", opcode=opcode))
            else:
                tokens.append(
                    OpcodeToken(
                        kind=TokenKind.NAMED,
                        hex=f"{opcode:02x}",
                        opcode=opcode,
                        mnemonic=info.mnemonic,
                        category=info.category,
                    )
                )
    return tokens


def _read_push(
    cursor: ByteCursor,
    data: bytes,
    start: int,
    opcode: int,
    mnemonic: Optional[str],
    length: int,
) -> OpcodeToken:
    if length > cursor.remaining:
        raise ScriptTruncated(start, length, cursor.remaining)
    cursor.read(length)
    return OpcodeToken(
        kind=TokenKind.DATA_PUSH,
        hex=data[start : cursor.offset].hex(),
        opcode=opcode,
        mnemonic=mnemonic,
        length=length,
        category=OpcodeCategory.PUSH_VALUE,
    )


def try_tokenize(script: ScriptInput) -> DecodeResult[OpcodeToken]:
    """Like :func:`tokenize` but reports failures in the returned result."""

    try:
        return DecodeResult(items=tokenize(script))
    except DecodeError as exc:
        logger.debug("Script tokenization failed: %s", exc)
        return DecodeResult(error=exc)


def to_asm(tokens: Iterable[OpcodeToken]) -> str:
    """Render tokens in the space separated assembly form."""

    return " ".join(token.asm() for token in tokens)


def script_to_asm(script: ScriptInput) -> str:
    return to_asm(tokenize(script))
