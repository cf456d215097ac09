"""Tests for multiformats unsigned-varint encoding and decoding.

Test vectors sourced from:
- multiformats unsigned-varint: https://github.com/multiformats/unsigned-varint
- Protocol Buffers Encoding Guide: https://protobuf.dev/programming-guides/encoding/
"""

from __future__ import annotations

import pytest

from lean_multiaddr.exceptions import MalformedAddressError
from lean_multiaddr.varint import (
    MAX_VARINT_VALUE,
    VarintError,
    VarintTruncatedError,
    decode_varint,
    encode_varint,
)

# Each entry is (integer_value, expected_encoded_bytes).
VARINT_VECTORS: list[tuple[int, bytes]] = [
    (0, b"\x00"),
    (1, b"\x01"),
    (127, b"\x7f"),
    (128, b"\x80\x01"),
    (255, b"\xff\x01"),
    (273, b"\x91\x02"),  # udp
    (300, b"\xac\x02"),
    (400, b"\x90\x03"),  # unix
    (421, b"\xa5\x03"),  # p2p
    (16383, b"\xff\x7f"),
    (16384, b"\x80\x80\x01"),
    (2097151, b"\xff\xff\x7f"),
]


class TestEncodeVarint:
    """Tests for varint encoding against reference vectors."""

    @pytest.mark.parametrize(("value", "expected"), VARINT_VECTORS)
    def test_encode(self, value: int, expected: bytes) -> None:
        """encode_varint produces the expected wire bytes."""
        assert encode_varint(value) == expected

    def test_negative_raises(self) -> None:
        """Negative values are rejected."""
        with pytest.raises(VarintError, match="non-negative"):
            encode_varint(-1)

    def test_max_value_fits_nine_bytes(self) -> None:
        """The largest accepted value takes exactly 9 bytes."""
        assert len(encode_varint(MAX_VARINT_VALUE)) == 9

    def test_too_large_raises(self) -> None:
        """Values needing a 10th byte are rejected."""
        with pytest.raises(VarintError, match="exceeds"):
            encode_varint(MAX_VARINT_VALUE + 1)


class TestDecodeVarint:
    """Tests for varint decoding against reference vectors."""

    @pytest.mark.parametrize(("expected", "data"), VARINT_VECTORS)
    def test_decode(self, expected: int, data: bytes) -> None:
        """decode_varint reconstructs the original value and its length."""
        assert decode_varint(data, 0) == (expected, len(data))

    def test_decode_at_offset(self) -> None:
        """Decoding respects the offset parameter."""
        data = b"prefix\xa5\x03suffix"
        assert decode_varint(data, 6) == (421, 2)

    def test_truncated_raises(self) -> None:
        """Continuation bit on the last byte raises."""
        with pytest.raises(VarintTruncatedError, match="truncated"):
            decode_varint(b"\x80", 0)

    def test_empty_raises(self) -> None:
        """Empty input raises."""
        with pytest.raises(VarintTruncatedError):
            decode_varint(b"", 0)

    def test_too_long_raises(self) -> None:
        """A 10-byte encoding is rejected even if it terminates."""
        with pytest.raises(VarintError, match="longer than"):
            decode_varint(b"\x80" * 9 + b"\x01", 0)

    @pytest.mark.parametrize("data", [b"\x80\x00", b"\x81\x00", b"\xff\x80\x00"])
    def test_non_minimal_raises(self, data: bytes) -> None:
        """Padding with a zero final group is rejected."""
        with pytest.raises(VarintError, match="minimally"):
            decode_varint(data, 0)

    def test_errors_are_malformed_address_errors(self) -> None:
        """Varint failures surface as malformed addresses."""
        assert issubclass(VarintError, MalformedAddressError)
        assert issubclass(VarintTruncatedError, VarintError)


class TestVarintRoundtrip:
    """decode(encode(v)) == v at byte-size boundaries."""

    @pytest.mark.parametrize("power", [7, 14, 21, 28, 35, 42, 49, 56])
    def test_power_of_two_boundaries(self, power: int) -> None:
        """Values at 7-bit group boundaries need one more byte than their predecessor."""
        for value in [2**power - 1, 2**power]:
            encoded = encode_varint(value)
            assert decode_varint(encoded, 0) == (value, len(encoded))

        assert len(encode_varint(2**power)) == len(encode_varint(2**power - 1)) + 1
