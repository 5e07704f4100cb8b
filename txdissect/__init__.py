"""Byte-exact decoding of raw Bitcoin transactions and scripts."""

from .address import address_from_script
from .classifier import ScriptTemplate, classify
from .cursor import ByteCursor
from .decoder import TransactionDecoder, classify_witness_item, decode_from_hex, try_decode_from_hex
from .errors import DecodeError, InvalidHexInput, MalformedTransaction, ScriptTruncated
from .model import DecodedField, DecodeResult, FieldKind, FieldSpan, field_spans, join_hex
from .opcodes import OpcodeCategory
from .script import OpcodeToken, TokenKind, to_asm, tokenize, try_tokenize

__all__ = [
    "ByteCursor",
    "DecodedField",
    "DecodeError",
    "DecodeResult",
    "FieldKind",
    "FieldSpan",
    "InvalidHexInput",
    "MalformedTransaction",
    "OpcodeCategory",
    "OpcodeToken",
    "ScriptTemplate",
    "ScriptTruncated",
    "TokenKind",
    "TransactionDecoder",
    "address_from_script",
    "classify",
    "classify_witness_item",
    "decode_from_hex",
    "field_spans",
    "join_hex",
    "to_asm",
    "tokenize",
    "try_decode_from_hex",
    "try_tokenize",
]
