"""
Shared pytest fixtures for multiaddr tests.

Provides peer identifiers and common addresses.
"""

from __future__ import annotations

import pytest

from lean_multiaddr import Multiaddr
from lean_multiaddr.base58 import b58encode

# -----------------------------------------------------------------------------
# Peer ID Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def peer_id_bytes() -> bytes:
    """Multihash: sha2-256 code, 32-byte length, digest."""
    return bytes([0x12, 0x20]) + bytes(range(32))


@pytest.fixture
def peer_id(peer_id_bytes: bytes) -> str:
    """Structurally valid sha2-256 peer identifier."""
    return b58encode(peer_id_bytes)


@pytest.fixture
def identity_peer_id() -> str:
    """Identity-multihash peer identifier. Starts with a zero byte, so with '1'."""
    return b58encode(bytes([0x00, 0x24]) + bytes(range(1, 37)))


# -----------------------------------------------------------------------------
# Address Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def local_tcp() -> Multiaddr:
    """Loopback TCP thin waist address."""
    return Multiaddr("/ip4/127.0.0.1/tcp/4001")


@pytest.fixture
def relay_tcp() -> Multiaddr:
    """Public TCP thin waist address."""
    return Multiaddr("/ip4/8.8.8.8/tcp/1080")
