"""Recognize standard scriptPubKey templates by byte pattern."""

from __future__ import annotations

from enum import Enum

from .cursor import as_bytes
from .opcodes import (
    OP_0,
    OP_1,
    OP_CHECKMULTISIG,
    OP_CHECKSIG,
    OP_DUP,
    OP_EQUAL,
    OP_EQUALVERIFY,
    OP_HASH160,
    OP_RETURN,
    small_int_value,
)

PUBKEY_LENGTHS = (33, 65)


class ScriptTemplate(Enum):
    P2PKH = "p2pkh"
    P2SH = "p2sh"
    P2WPKH = "p2wpkh"
    P2WSH = "p2wsh"
    P2TR = "p2tr"
    BARE_MULTISIG = "bare_multisig"
    OP_RETURN = "op_return"
    NON_STANDARD = "non_standard"

    @property
    def is_standard(self) -> bool:
        return self is not ScriptTemplate.NON_STANDARD


def is_p2pkh(script: bytes) -> bool:
    return (
        len(script) == 25
        and script[0] == OP_DUP
        and script[1] == OP_HASH160
        and script[2] == 20
        and script[23] == OP_EQUALVERIFY
        and script[24] == OP_CHECKSIG
    )


def is_p2sh(script: bytes) -> bool:
    return len(script) == 23 and script[0] == OP_HASH160 and script[1] == 20 and script[22] == OP_EQUAL


def is_p2wpkh(script: bytes) -> bool:
    return len(script) == 22 and script[0] == OP_0 and script[1] == 20


def is_p2wsh(script: bytes) -> bool:
    return len(script) == 34 and script[0] == OP_0 and script[1] == 32


def is_p2tr(script: bytes) -> bool:
    return len(script) == 34 and script[0] == OP_1 and script[1] == 32


def multisig_parameters(script: bytes) -> tuple[int, int] | None:
    """Return ``(m, n)`` for a bare ``OP_m <keys> OP_n OP_CHECKMULTISIG`` script."""

    if len(script) < 3 or script[-1] != OP_CHECKMULTISIG:
        return None
    m = small_int_value(script[0])
    n = small_int_value(script[-2])
    if not m or not n or m > n:
        return None

    keys = 0
    pos = 1
    end = len(script) - 2
    while pos < end:
        length = script[pos]
        if length not in PUBKEY_LENGTHS or pos + 1 + length > end:
            return None
        pos += 1 + length
        keys += 1
    if keys != n:
        return None
    return m, n


def classify(script_pubkey: bytes) -> ScriptTemplate:
    """Label *script_pubkey* with the first matching standard template."""

    script = as_bytes(script_pubkey)
    if is_p2pkh(script):
        return ScriptTemplate.P2PKH
    if is_p2sh(script):
        return ScriptTemplate.P2SH
    if is_p2wpkh(script):
        return ScriptTemplate.P2WPKH
    if is_p2wsh(script):
        return ScriptTemplate.P2WSH
    if is_p2tr(script):
        return ScriptTemplate.P2TR
    if multisig_parameters(script) is not None:
        return ScriptTemplate.BARE_MULTISIG
    if script[:1] == bytes([OP_RETURN]):
        return ScriptTemplate.OP_RETURN
    return ScriptTemplate.NON_STANDARD
