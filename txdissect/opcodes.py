"""Static Bitcoin opcode table keyed by byte value.

Data pushes (``0x01``-``0x4e``) are handled structurally by the tokenizer; the
table still lists the three ``OP_PUSHDATA`` opcodes so their mnemonics can be
reported. Byte values without an entry are unknown opcodes.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class OpcodeCategory(Enum):
    """Opcode families used when describing a script."""

    PUSH_VALUE = "push value"
    CONTROL = "control"
    STACK = "stack ops"
    SPLICE = "splice ops"
    BIT_LOGIC = "bit logic"
    ARITHMETIC = "arithmetic"
    CRYPTO = "crypto"
    EXPANSION = "expansion"
    INVALID = "invalid code"


@dataclass(frozen=True)
class OpcodeInfo:
    value: int
    mnemonic: str
    category: OpcodeCategory


OP_0 = 0x00
OP_PUSHDATA1 = 0x4C
OP_PUSHDATA2 = 0x4D
OP_PUSHDATA4 = 0x4E
OP_1NEGATE = 0x4F
OP_1 = 0x51
OP_16 = 0x60
OP_RETURN = 0x6A
OP_DUP = 0x76
OP_EQUAL = 0x87
OP_EQUALVERIFY = 0x88
OP_HASH160 = 0xA9
OP_CHECKSIG = 0xAC
OP_CHECKMULTISIG = 0xAE

MAX_DIRECT_PUSH = 0x4B


def _entries() -> list[tuple[int, str, OpcodeCategory]]:
    push = OpcodeCategory.PUSH_VALUE
    entries = [
        (OP_0, "OP_0", push),
        (OP_PUSHDATA1, "OP_PUSHDATA1", push),
        (OP_PUSHDATA2, "OP_PUSHDATA2", push),
        (OP_PUSHDATA4, "OP_PUSHDATA4", push),
        (OP_1NEGATE, "OP_1NEGATE", push),
        (0x50, "OP_RESERVED", push),
    ]
    entries.extend((OP_1 + n - 1, f"OP_{n}", push) for n in range(1, 17))

    families = [
        (
            0x61,
            OpcodeCategory.CONTROL,
            ["NOP", "VER", "IF", "NOTIF", "VERIF", "VERNOTIF", "ELSE", "ENDIF", "VERIFY", "RETURN"],
        ),
        (
            0x6B,
            OpcodeCategory.STACK,
            [
                "TOALTSTACK", "FROMALTSTACK", "2DROP", "2DUP", "3DUP", "2OVER", "2ROT",
                "2SWAP", "IFDUP", "DEPTH", "DROP", "DUP", "NIP", "OVER", "PICK", "ROLL",
                "ROT", "SWAP", "TUCK",
            ],
        ),
        (0x7E, OpcodeCategory.SPLICE, ["CAT", "SUBSTR", "LEFT", "RIGHT", "SIZE"]),
        (
            0x83,
            OpcodeCategory.BIT_LOGIC,
            ["INVERT", "AND", "OR", "XOR", "EQUAL", "EQUALVERIFY", "RESERVED1", "RESERVED2"],
        ),
        (
            0x8B,
            OpcodeCategory.ARITHMETIC,
            [
                "1ADD", "1SUB", "2MUL", "2DIV", "NEGATE", "ABS", "NOT", "0NOTEQUAL", "ADD",
                "SUB", "MUL", "DIV", "MOD", "LSHIFT", "RSHIFT", "BOOLAND", "BOOLOR",
                "NUMEQUAL", "NUMEQUALVERIFY", "NUMNOTEQUAL", "LESSTHAN", "GREATERTHAN",
                "LESSTHANOREQUAL", "GREATERTHANOREQUAL", "MIN", "MAX", "WITHIN",
            ],
        ),
        (
            0xA6,
            OpcodeCategory.CRYPTO,
            [
                "RIPEMD160", "SHA1", "SHA256", "HASH160", "HASH256", "CODESEPARATOR",
                "CHECKSIG", "CHECKSIGVERIFY", "CHECKMULTISIG", "CHECKMULTISIGVERIFY",
            ],
        ),
        (
            0xB0,
            OpcodeCategory.EXPANSION,
            [
                "NOP1", "CHECKLOCKTIMEVERIFY", "CHECKSEQUENCEVERIFY", "NOP4", "NOP5",
                "NOP6", "NOP7", "NOP8", "NOP9", "NOP10",
            ],
        ),
        (0xBA, OpcodeCategory.CRYPTO, ["CHECKSIGADD"]),
        (0xFF, OpcodeCategory.INVALID, ["INVALIDOPCODE"]),
    ]
    for first, category, names in families:
        entries.extend((first + i, f"OP_{name}", category) for i, name in enumerate(names))
    return entries


OPCODES: dict[int, OpcodeInfo] = {
    value: OpcodeInfo(value=value, mnemonic=mnemonic, category=category)
    for value, mnemonic, category in _entries()
}


def lookup_opcode(value: int) -> OpcodeInfo | None:
    """Return the table entry for *value*, or ``None`` for unknown opcodes."""

    return OPCODES.get(value)


def small_int_value(opcode: int) -> int | None:
    """Return ``n`` for ``OP_0`` and ``OP_1``..``OP_16``, otherwise ``None``."""

    if opcode == OP_0:
        return 0
    if OP_1 <= opcode <= OP_16:
        return opcode - OP_1 + 1
    return None
