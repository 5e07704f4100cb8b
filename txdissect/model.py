"""Domain models produced by the transaction decoder.

A decoded transaction is a flat, ordered list of :class:`DecodedField`
entries. Each entry carries the untouched hex slice it was read from, so the
concatenation of every ``hex`` reproduces the raw transaction, plus a display
value computed once during decoding. Presentation concerns such as labels are
kept in :mod:`txdissect.presentation`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Generic, Iterable, List, Mapping, Optional, TypeVar

from .errors import DecodeError


class FieldKind(Enum):
    """Closed set of structural fields found in a serialized transaction."""

    VERSION = "version"
    MARKER = "marker"
    FLAG = "flag"
    TX_IN_COUNT = "txInCount"
    TX_IN_PREV_HASH = "txInPrevHash"
    TX_IN_PREV_INDEX = "txInPrevIndex"
    TX_IN_SCRIPT_VARINT = "txInScriptVarInt"
    TX_IN_SCRIPT = "txInScript"
    TX_IN_SEQUENCE = "txInSequence"
    TX_OUT_COUNT = "txOutCount"
    TX_OUT_VALUE = "txOutValue"
    TX_OUT_SCRIPT_VARINT = "txOutScriptVarInt"
    TX_OUT_SCRIPT_STANDARD = "txOutScriptStandard"
    TX_OUT_SCRIPT_NON_STANDARD = "txOutScriptNonStandard"
    WITNESS_VARINT = "witnessVarInt"
    WITNESS_ITEMS_VARINT = "witnessItemsVarInt"
    WITNESS_ITEM_EMPTY = "witnessItemEmpty"
    WITNESS_ITEM_PUBKEY = "witnessItemPubkey"
    WITNESS_ITEM_SIGNATURE = "witnessItemSignature"
    WITNESS_ITEM_SCRIPT = "witnessItemScript"
    LOCKTIME = "locktime"

    @property
    def is_witness(self) -> bool:
        return self in WITNESS_KINDS


WITNESS_KINDS = frozenset(
    {
        FieldKind.WITNESS_VARINT,
        FieldKind.WITNESS_ITEMS_VARINT,
        FieldKind.WITNESS_ITEM_EMPTY,
        FieldKind.WITNESS_ITEM_PUBKEY,
        FieldKind.WITNESS_ITEM_SIGNATURE,
        FieldKind.WITNESS_ITEM_SCRIPT,
    }
)

WITNESS_ITEM_KINDS = WITNESS_KINDS - {FieldKind.WITNESS_VARINT, FieldKind.WITNESS_ITEMS_VARINT}


def _freeze(args: Mapping[str, Any] | None) -> Mapping[str, Any]:
    return MappingProxyType(dict(args or {}))


@dataclass(frozen=True)
class DecodedField:
    """One tagged span of a raw transaction."""

    kind: FieldKind
    hex: str
    value: Any
    label_args: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "label_args", _freeze(self.label_args))

    @property
    def raw(self) -> bytes:
        return bytes.fromhex(self.hex)

    @property
    def size(self) -> int:
        return len(self.hex) // 2


@dataclass(frozen=True)
class FieldSpan:
    """Byte offsets ``[start, end)`` of a field within the raw transaction."""

    index: int
    kind: FieldKind
    start: int
    end: int


def field_spans(fields: Iterable[DecodedField]) -> List[FieldSpan]:
    """Return the byte range covered by each field, in emission order."""

    spans: List[FieldSpan] = []
    offset = 0
    for index, item in enumerate(fields):
        spans.append(FieldSpan(index=index, kind=item.kind, start=offset, end=offset + item.size))
        offset += item.size
    return spans


def join_hex(items: Iterable[Any]) -> str:
    """Concatenate the ``hex`` attribute of decoded fields or opcode tokens."""

    return "".join(item.hex for item in items)


T = TypeVar("T")


@dataclass(frozen=True)
class DecodeResult(Generic[T]):
    """Either a complete list of decoded items or the error that stopped decoding."""

    items: Optional[List[T]] = None
    error: Optional[DecodeError] = None

    @property
    def ok(self) -> bool:
        return self.error is None
