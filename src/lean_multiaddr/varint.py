"""
Unsigned varint encoding and decoding for multiaddr buffers.

Multiaddr buffers use the multiformats unsigned-varint for protocol codes
and payload lengths. It is LEB128 with two extra rules:

- The encoding must be minimal. No trailing ``0x00`` group is allowed
  after the first byte, so every value has exactly one encoding.
- At most 9 bytes (63 bits of payload) are accepted.

Minimality matters here: two buffers that differ only in varint padding
would describe the same address, breaking the one-buffer-per-address rule.

Byte structure::

    [C|D D D D D D D]
     ^-- Continuation bit (1 = more bytes, 0 = last byte)
       ^-----------^-- 7 bits of data, low-order group first

Examples::

    4     -> 04
    421   -> a5 03
    16384 -> 80 80 01

References:
    https://github.com/multiformats/unsigned-varint
"""

from __future__ import annotations

from typing import Final

from .exceptions import MalformedAddressError

MAX_VARINT_BYTES: Final = 9
"""Longest accepted varint encoding."""

MAX_VARINT_VALUE: Final = 2**63 - 1
"""Largest value representable in MAX_VARINT_BYTES."""


class VarintError(MalformedAddressError):
    """Raised when a varint is malformed (non-minimal, too long or out of range)."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail)


class VarintTruncatedError(VarintError):
    """Raised when the buffer ends before the varint's final byte."""


def encode_varint(value: int) -> bytes:
    """
    Encode a non-negative integer as an unsigned varint.

    Args:
        value: Integer in ``[0, 2**63 - 1]``.

    Returns:
        Minimal varint encoding.

    Raises:
        VarintError: If value is negative or too large.
    """
    if value < 0:
        raise VarintError(f"varint must be non-negative, got {value}")
    if value > MAX_VARINT_VALUE:
        raise VarintError(f"varint {value} exceeds {MAX_VARINT_BYTES} bytes")

    result = bytearray()
    while value >= 0x80:
        result.append((value & 0x7F) | 0x80)
        value >>= 7
    result.append(value)
    return bytes(result)


def decode_varint(data: bytes, offset: int = 0) -> tuple[int, int]:
    """
    Decode a varint from bytes at the given offset.

    Args:
        data: Input bytes containing the varint.
        offset: Starting position in data.

    Returns:
        Tuple of (decoded_value, bytes_consumed).

    Raises:
        VarintTruncatedError: If the input ends before the final byte.
        VarintError: If the encoding is not minimal or exceeds 9 bytes.
    """
    result = 0
    shift = 0
    pos = offset

    while True:
        if pos >= len(data):
            raise VarintTruncatedError("truncated varint")
        if pos - offset >= MAX_VARINT_BYTES:
            raise VarintError(f"varint longer than {MAX_VARINT_BYTES} bytes")

        byte = data[pos]
        pos += 1
        result |= (byte & 0x7F) << shift
        shift += 7

        if not (byte & 0x80):
            # A zero final group after the first byte means padding.
            if byte == 0 and pos - offset > 1:
                raise VarintError("varint is not minimally encoded")
            return result, pos - offset
