"""Text and JSON views over decoded fields and script tokens.

Labels are looked up here by :class:`FieldKind` so the decoder never carries
display strings. Colors and layout belong to whatever front end consumes
these helpers.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Sequence

from .model import DecodedField, FieldKind
from .script import OpcodeToken, TokenKind

FIELD_LABELS: dict[FieldKind, str] = {
    FieldKind.VERSION: "Version",
    FieldKind.MARKER: "Segwit marker",
    FieldKind.FLAG: "Segwit flag",
    FieldKind.TX_IN_COUNT: "Input count",
    FieldKind.TX_IN_PREV_HASH: "Input {input} previous output hash",
    FieldKind.TX_IN_PREV_INDEX: "Input {input} previous output index",
    FieldKind.TX_IN_SCRIPT_VARINT: "Input {input} scriptSig length",
    FieldKind.TX_IN_SCRIPT: "Input {input} scriptSig",
    FieldKind.TX_IN_SEQUENCE: "Input {input} sequence",
    FieldKind.TX_OUT_COUNT: "Output count",
    FieldKind.TX_OUT_VALUE: "Output {output} value (sats)",
    FieldKind.TX_OUT_SCRIPT_VARINT: "Output {output} scriptPubKey length",
    FieldKind.TX_OUT_SCRIPT_STANDARD: "Output {output} scriptPubKey ({template})",
    FieldKind.TX_OUT_SCRIPT_NON_STANDARD: "Output {output} scriptPubKey (non-standard)",
    FieldKind.WITNESS_VARINT: "Input {input} witness item count",
    FieldKind.WITNESS_ITEMS_VARINT: "Input {input} witness item {item} length",
    FieldKind.WITNESS_ITEM_EMPTY: "Input {input} witness item {item} (empty)",
    FieldKind.WITNESS_ITEM_PUBKEY: "Input {input} witness item {item} (public key)",
    FieldKind.WITNESS_ITEM_SIGNATURE: "Input {input} witness item {item} (signature)",
    FieldKind.WITNESS_ITEM_SCRIPT: "Input {input} witness item {item} (script)",
    FieldKind.LOCKTIME: "Locktime",
}


def field_label(field: DecodedField) -> str:
    """Return the English label for *field*, filled in from its label arguments."""

    return FIELD_LABELS[field.kind].format(**field.label_args)


def _display_value(value: Any) -> str:
    if value == "":
        return "(empty)"
    return str(value)


def format_field_list(fields: Sequence[DecodedField]) -> str:
    """One line per field: index, label, display value and raw hex."""

    lines: List[str] = []
    width = len(str(max(len(fields) - 1, 0)))
    for index, field in enumerate(fields):
        line = f"[{index:>{width}}] {field_label(field)}: {_display_value(field.value)}"
        address = field.label_args.get("address")
        if address:
            line += f" -> {address}"
        if field.hex and field.hex != field.value:
            line += f"\n{' ' * (width + 3)}hex {field.hex}"
        lines.append(line)
    return "\n".join(lines)


def format_byte_view(fields: Iterable[DecodedField], bytes_per_line: int = 32) -> str:
    """Render the raw bytes grouped by field, wrapping long fields."""

    if bytes_per_line <= 0:
        raise ValueError("bytes_per_line must be positive")
    step = bytes_per_line * 2
    lines: List[str] = []
    for index, field in enumerate(fields):
        label = f"{index:>3} {field.kind.value:<24}"
        if not field.hex:
            lines.append(f"{label} --")
            continue
        chunks = [field.hex[pos : pos + step] for pos in range(0, len(field.hex), step)]
        lines.append(f"{label} {chunks[0]}")
        lines.extend(f"{' ' * len(label)} {chunk}" for chunk in chunks[1:])
    return "\n".join(lines)


def field_to_dict(field: DecodedField) -> dict[str, Any]:
    data: dict[str, Any] = {
        "kind": field.kind.value,
        "label": field_label(field),
        "hex": field.hex,
        "value": field.value,
    }
    if field.label_args:
        data["label_args"] = dict(field.label_args)
    return data


def token_to_dict(token: OpcodeToken) -> dict[str, Any]:
    data: dict[str, Any] = {"kind": token.kind.name.lower(), "hex": token.hex, "opcode": token.opcode}
    if token.mnemonic is not None:
        data["mnemonic"] = token.mnemonic
    if token.length is not None:
        data["length"] = token.length
    if token.category is not None:
        data["category"] = token.category.value
    return data


def format_token_list(tokens: Sequence[OpcodeToken]) -> str:
    """One line per token: position, description and raw hex."""

    lines: List[str] = []
    for index, token in enumerate(tokens):
        if token.kind is TokenKind.DATA_PUSH:
            prefix = f"{token.mnemonic} " if token.mnemonic else ""
            description = f"{prefix}PUSH {token.length} bytes"
        elif token.kind is TokenKind.NAMED:
            description = f"{token.mnemonic} ({token.category.value})"
        else:
            description = token.asm()
        lines.append(f"{index:>3} {description:<40} {token.hex}")
    return "\n".join(lines)
