"""
common.addresses

Address format helpers: legacy Base58Check -> CashAddr conversion and the
containment matcher used to locate the queried address inside raw inputs
and outputs.
"""
from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

import base58

CASHADDR_CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
CASHADDR_PREFIXES = ("bitcoincash", "bchtest", "bchreg")

# legacy version byte -> (cashaddr prefix, address type)
_LEGACY_VERSIONS = {
    0x00: ("bitcoincash", 0),  # P2PKH
    0x05: ("bitcoincash", 1),  # P2SH
    0x6F: ("bchtest", 0),
    0xC4: ("bchtest", 1),
}

_GENERATORS = (0x98F2BC8E61, 0x79B76D99E2, 0xF33E5FB3C4, 0xAE2EABE2A8, 0x1E4F43E470)


def _polymod(values: Iterable[int]) -> int:
    c = 1
    for d in values:
        c0 = c >> 35
        c = ((c & 0x07FFFFFFFF) << 5) ^ d
        for i, g in enumerate(_GENERATORS):
            if (c0 >> i) & 1:
                c ^= g
    return c ^ 1


def _to_5bit(data: bytes) -> List[int]:
    acc = 0
    bits = 0
    out = []
    for b in data:
        acc = (acc << 8) | b
        bits += 8
        while bits >= 5:
            bits -= 5
            out.append((acc >> bits) & 31)
    if bits:
        out.append((acc << (5 - bits)) & 31)
    return out


def split_prefix(address: str) -> Tuple[Optional[str], str]:
    if ":" in address:
        prefix, body = address.split(":", 1)
        return prefix.lower(), body
    return None, address


def is_cash_address(address: str) -> bool:
    prefix, body = split_prefix(address)
    if prefix is not None:
        return prefix in CASHADDR_PREFIXES
    body = body.lower()
    return len(body) == 42 and body[0] in "qp" and all(ch in CASHADDR_CHARSET for ch in body)


def legacy_to_cash_address(legacy: str) -> str:
    try:
        raw = base58.b58decode_check(legacy)
    except ValueError as e:
        raise ValueError(f"not a Base58Check address: {legacy!r}") from e
    if len(raw) != 21 or raw[0] not in _LEGACY_VERSIONS:
        raise ValueError(f"unsupported legacy address: {legacy!r}")
    prefix, addr_type = _LEGACY_VERSIONS[raw[0]]
    # size code 0 -> 160 bit hash
    payload = _to_5bit(bytes([addr_type << 3]) + raw[1:])
    checksum = _polymod([ord(ch) & 31 for ch in prefix] + [0] + payload + [0] * 8)
    payload += [(checksum >> 5 * (7 - i)) & 31 for i in range(8)]
    return prefix + ":" + "".join(CASHADDR_CHARSET[d] for d in payload)


def to_cash_address(address: str) -> str:
    if is_cash_address(address):
        prefix, body = split_prefix(address)
        return f"{prefix or 'bitcoincash'}:{body.lower()}"
    return legacy_to_cash_address(address)


class AddressMatcher:
    """Substring match of one address against raw input/output address strings."""

    def __init__(self, forms: Iterable[str]):
        self.forms = tuple(f for f in dict.fromkeys(forms) if f)
        if not self.forms:
            raise ValueError("AddressMatcher needs at least one address form")

    @classmethod
    def for_bitcoin_cash(cls, address: str, cash_address: Optional[str] = None) -> "AddressMatcher":
        # upstream mixes legacy and prefixed/unprefixed cashaddr strings
        forms = [address]
        if cash_address:
            forms.append(split_prefix(cash_address)[1])
        if is_cash_address(address):
            forms.append(split_prefix(address)[1])
        return cls(forms)

    def matches(self, candidate: Optional[str]) -> bool:
        if not candidate:
            return False
        return any(form in candidate for form in self.forms)

    def matches_any(self, candidates: Optional[Iterable[Optional[str]]]) -> bool:
        return any(self.matches(c) for c in candidates or ())
