"""Address strings for standard output scripts.

Base58Check covers P2PKH and P2SH, Bech32 (BIP173) covers witness version 0
programs and Bech32m (BIP350) covers Taproot. Nothing here validates keys;
the address is simply a re-encoding of the hash or key already present in
the script.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Iterable, List

from .classifier import ScriptTemplate, classify
from .cursor import as_bytes

b58_digits = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
BECH32_CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
BECH32_CONST = 1
BECH32M_CONST = 0x2BC830A3


@dataclass(frozen=True)
class NetworkParams:
    name: str
    hrp: str
    p2pkh_version: int
    p2sh_version: int


NETWORKS = {
    "mainnet": NetworkParams("mainnet", "bc", 0x00, 0x05),
    "testnet": NetworkParams("testnet", "tb", 0x6F, 0xC4),
    "signet": NetworkParams("signet", "tb", 0x6F, 0xC4),
    "regtest": NetworkParams("regtest", "bcrt", 0x6F, 0xC4),
}


def get_network(name: str) -> NetworkParams:
    try:
        return NETWORKS[name.lower()]
    except KeyError as exc:
        raise ValueError(f"Unknown network: {name}") from exc


def _double_sha256(data: bytes) -> bytes:
    return hashlib.sha256(hashlib.sha256(data).digest()).digest()


def base58_check_encode(payload: bytes, version: int) -> str:
    """Encode ``version || payload`` with a four byte checksum."""

    data = bytes([version]) + payload
    address_bytes = data + _double_sha256(data)[:4]

    value = int.from_bytes(address_bytes, "big")
    output: List[str] = []
    while value > 0:
        value, remainder = divmod(value, 58)
        output.append(b58_digits[remainder])
    encoded = "".join(output[::-1])

    leading_zero_count = 0
    for byte in address_bytes:
        if byte == 0:
            leading_zero_count += 1
        else:
            break
    return b58_digits[0] * leading_zero_count + encoded


def _bech32_polymod(values: Iterable[int]) -> int:
    generator = (0x3B6A57B2, 0x26508E6D, 0x1EA119FA, 0x3D4233DD, 0x2A1462B3)
    chk = 1
    for value in values:
        top = chk >> 25
        chk = ((chk & 0x1FFFFFF) << 5) ^ value
        for i in range(5):
            chk ^= generator[i] if ((top >> i) & 1) else 0
    return chk


def _bech32_hrp_expand(hrp: str) -> List[int]:
    return [ord(x) >> 5 for x in hrp] + [0] + [ord(x) & 31 for x in hrp]


def _bech32_checksum(hrp: str, data: List[int], const: int) -> List[int]:
    values = _bech32_hrp_expand(hrp) + data
    polymod = _bech32_polymod(values + [0] * 6) ^ const
    return [(polymod >> 5 * (5 - i)) & 31 for i in range(6)]


def _convert_bits(data: bytes, from_bits: int, to_bits: int) -> List[int]:
    acc = 0
    bits = 0
    ret: List[int] = []
    maxv = (1 << to_bits) - 1
    for value in data:
        acc = (acc << from_bits) | value
        bits += from_bits
        while bits >= to_bits:
            bits -= to_bits
            ret.append((acc >> bits) & maxv)
    if bits:
        ret.append((acc << (to_bits - bits)) & maxv)
    return ret


def segwit_encode(hrp: str, witness_version: int, program: bytes) -> str:
    """Encode a witness program, using Bech32m for every version above zero."""

    const = BECH32_CONST if witness_version == 0 else BECH32M_CONST
    data = [witness_version] + _convert_bits(program, 8, 5)
    checksum = _bech32_checksum(hrp, data, const)
    return hrp + "1" + "".join(BECH32_CHARSET[d] for d in data + checksum)


def address_from_script(script_pubkey: bytes, network: str = "mainnet") -> str | None:
    """Return the address of a standard single-destination output, if any."""

    params = get_network(network)
    script = as_bytes(script_pubkey)
    template = classify(script)
    if template is ScriptTemplate.P2PKH:
        return base58_check_encode(script[3:23], params.p2pkh_version)
    if template is ScriptTemplate.P2SH:
        return base58_check_encode(script[2:22], params.p2sh_version)
    if template in (ScriptTemplate.P2WPKH, ScriptTemplate.P2WSH):
        return segwit_encode(params.hrp, 0, script[2:])
    if template is ScriptTemplate.P2TR:
        return segwit_encode(params.hrp, 1, script[2:])
    return None
