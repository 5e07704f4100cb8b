"""Decode a raw transaction into an ordered, gapless list of tagged fields.

The walk is strictly sequential::

    version -> [marker, flag] -> inputs -> outputs -> [witnesses] -> locktime

and the only branch is the segwit check right after the version. Every field
keeps the exact bytes it consumed, so joining the ``hex`` of the returned
fields gives back the input transaction.
"""

from __future__ import annotations

import logging
from typing import List

from .address import address_from_script, get_network
from .classifier import ScriptTemplate, classify
from .cursor import ByteCursor, bytes_from_hex
from .errors import DecodeError, MalformedTransaction
from .model import DecodedField, DecodeResult, FieldKind
from .script import script_to_asm

logger = logging.getLogger(__name__)

SEGWIT_MARKER = 0x00
SEGWIT_FLAG = 0x01
DER_SEQUENCE_TAG = 0x30


def classify_witness_item(item: bytes) -> FieldKind:
    """Best-effort display classification of a single witness stack item.

    This is a length and prefix heuristic, not a protocol rule: Taproot
    signatures, annexes and control blocks all end up as scripts.
    """

    if not item:
        return FieldKind.WITNESS_ITEM_EMPTY
    if (len(item) == 33 and item[0] in (0x02, 0x03)) or (len(item) == 65 and item[0] == 0x04):
        return FieldKind.WITNESS_ITEM_PUBKEY
    if item[0] == DER_SEQUENCE_TAG:
        return FieldKind.WITNESS_ITEM_SIGNATURE
    return FieldKind.WITNESS_ITEM_SCRIPT


def _script_display(script: bytes) -> str:
    if not script:
        return ""
    try:
        return script_to_asm(script)
    except DecodeError:
        # arbitrary bytes (coinbase data, witness blobs) still display as hex
        return script.hex()


class TransactionDecoder:
    """Walk a serialized transaction and tag every byte with a :class:`FieldKind`."""

    def __init__(self, network: str = "mainnet") -> None:
        self.network = get_network(network).name

    def decode_from_hex(self, tx_hex: str) -> List[DecodedField]:
        return self.decode(bytes_from_hex(tx_hex))

    def decode(self, raw: bytes) -> List[DecodedField]:
        cursor = ByteCursor(raw)
        fields: List[DecodedField] = []
        try:
            segwit = self._read_header(cursor, fields)
            input_count = self._read_inputs(cursor, fields)
            output_count = self._read_outputs(cursor, fields)
            if segwit:
                self._read_witnesses(cursor, fields, input_count)
            value, chunk = cursor.read_uint32()
            fields.append(DecodedField(FieldKind.LOCKTIME, chunk.hex(), value))
            if cursor.remaining:
                raise MalformedTransaction(
                    cursor.offset,
                    0,
                    cursor.remaining,
                    message=(
                        f"malformed transaction: {cursor.remaining} unexpected bytes "
                        f"after locktime at offset {cursor.offset}"
                    ),
                )
        except DecodeError as exc:
            logger.debug("Transaction decode failed after %d fields: %s", len(fields), exc)
            raise
        logger.debug(
            "Decoded %d-byte transaction: %d inputs, %d outputs, segwit=%s",
            len(raw),
            input_count,
            output_count,
            segwit,
        )
        return fields

    def _read_header(self, cursor: ByteCursor, fields: List[DecodedField]) -> bool:
        version, chunk = cursor.read_int32()
        fields.append(DecodedField(FieldKind.VERSION, chunk.hex(), version))
        if cursor.peek(2) != bytes([SEGWIT_MARKER, SEGWIT_FLAG]):
            return False
        marker = cursor.read(1)
        flag = cursor.read(1)
        fields.append(DecodedField(FieldKind.MARKER, marker.hex(), marker[0]))
        fields.append(DecodedField(FieldKind.FLAG, flag.hex(), flag[0]))
        return True

    def _read_inputs(self, cursor: ByteCursor, fields: List[DecodedField]) -> int:
        count, chunk = cursor.read_varint()
        fields.append(DecodedField(FieldKind.TX_IN_COUNT, chunk.hex(), count))
        for index in range(count):
            args = {"input": index}
            prev_hash = cursor.read(32)
            fields.append(
                DecodedField(FieldKind.TX_IN_PREV_HASH, prev_hash.hex(), prev_hash[::-1].hex(), args)
            )
            prev_index, chunk = cursor.read_uint32()
            fields.append(DecodedField(FieldKind.TX_IN_PREV_INDEX, chunk.hex(), prev_index, args))
            script_len, chunk = cursor.read_varint()
            fields.append(DecodedField(FieldKind.TX_IN_SCRIPT_VARINT, chunk.hex(), script_len, args))
            script = cursor.read(script_len)
            fields.append(
                DecodedField(FieldKind.TX_IN_SCRIPT, script.hex(), _script_display(script), args)
            )
            sequence, chunk = cursor.read_uint32()
            fields.append(DecodedField(FieldKind.TX_IN_SEQUENCE, chunk.hex(), sequence, args))
        return count

    def _read_outputs(self, cursor: ByteCursor, fields: List[DecodedField]) -> int:
        count, chunk = cursor.read_varint()
        fields.append(DecodedField(FieldKind.TX_OUT_COUNT, chunk.hex(), count))
        for index in range(count):
            args = {"output": index}
            satoshis, chunk = cursor.read_uint64()
            fields.append(DecodedField(FieldKind.TX_OUT_VALUE, chunk.hex(), satoshis, args))
            script_len, chunk = cursor.read_varint()
            fields.append(DecodedField(FieldKind.TX_OUT_SCRIPT_VARINT, chunk.hex(), script_len, args))
            script = cursor.read(script_len)
            template = classify(script)
            kind = (
                FieldKind.TX_OUT_SCRIPT_STANDARD
                if template.is_standard
                else FieldKind.TX_OUT_SCRIPT_NON_STANDARD
            )
            script_args = {
                "output": index,
                "template": template.value,
                "address": address_from_script(script, self.network),
            }
            fields.append(DecodedField(kind, script.hex(), _script_display(script), script_args))
        return count

    def _read_witnesses(self, cursor: ByteCursor, fields: List[DecodedField], input_count: int) -> None:
        for index in range(input_count):
            item_count, chunk = cursor.read_varint()
            fields.append(
                DecodedField(FieldKind.WITNESS_VARINT, chunk.hex(), item_count, {"input": index})
            )
            for item_index in range(item_count):
                args = {"input": index, "item": item_index}
                length, chunk = cursor.read_varint()
                fields.append(DecodedField(FieldKind.WITNESS_ITEMS_VARINT, chunk.hex(), length, args))
                item = cursor.read(length)
                kind = classify_witness_item(item)
                if kind is FieldKind.WITNESS_ITEM_SCRIPT:
                    value = _script_display(item)
                else:
                    value = item.hex()
                fields.append(DecodedField(kind, item.hex(), value, args))


def decode_from_hex(tx_hex: str, network: str = "mainnet") -> List[DecodedField]:
    """Decode *tx_hex* into fields, raising :class:`DecodeError` on bad input."""

    return TransactionDecoder(network).decode_from_hex(tx_hex)


def try_decode_from_hex(tx_hex: str, network: str = "mainnet") -> DecodeResult[DecodedField]:
    """Decode *tx_hex* without raising; the result holds either all fields or the error."""

    try:
        return DecodeResult(items=decode_from_hex(tx_hex, network))
    except DecodeError as exc:
        return DecodeResult(error=exc)


def output_template(field: DecodedField) -> ScriptTemplate:
    """Return the template recorded on a TxOut script field."""

    if field.kind not in (FieldKind.TX_OUT_SCRIPT_STANDARD, FieldKind.TX_OUT_SCRIPT_NON_STANDARD):
        raise ValueError(f"{field.kind.value} is not an output script field")
    return ScriptTemplate(field.label_args["template"])
