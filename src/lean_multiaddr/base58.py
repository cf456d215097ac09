"""
Base58btc encoding for embedded peer identifiers.

Peer identifiers travel inside multiaddrs as raw multihash bytes and are
shown to humans as base58btc text (``Qm...``, ``12D3KooW...``, ``16Uiu2...``).
"""

from __future__ import annotations

from typing import Final

ALPHABET: Final = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
"""Bitcoin alphabet. Excludes the look-alike characters 0, O, I and l."""

_INDEX: Final = {char: index for index, char in enumerate(ALPHABET)}


def b58encode(data: bytes) -> str:
    """
    Encode bytes as a base58btc string.

    Each leading zero byte becomes a leading ``1``.
    """
    stripped = data.lstrip(b"\x00")
    leading_zeros = len(data) - len(stripped)

    num = int.from_bytes(stripped, "big")
    digits: list[str] = []
    while num > 0:
        num, remainder = divmod(num, 58)
        digits.append(ALPHABET[remainder])

    return ALPHABET[0] * leading_zeros + "".join(reversed(digits))


def b58decode(text: str) -> bytes:
    """
    Decode a base58btc string to bytes.

    Each leading ``1`` becomes a leading zero byte.

    Raises:
        ValueError: If the string contains a character outside the alphabet.
    """
    stripped = text.lstrip(ALPHABET[0])
    leading_ones = len(text) - len(stripped)

    num = 0
    for char in stripped:
        index = _INDEX.get(char)
        if index is None:
            raise ValueError(f"Invalid base58 character: {char!r}")
        num = num * 58 + index

    body = num.to_bytes((num.bit_length() + 7) // 8, "big") if num else b""
    return b"\x00" * leading_ones + body
