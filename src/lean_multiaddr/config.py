"""
Multiaddr Configuration

Protocol code constants used by the address operations and the structural
bounds applied to embedded peer identifiers.

References:
    - https://github.com/multiformats/multiaddr/blob/master/protocols.csv
    - https://github.com/libp2p/specs/blob/master/peer-ids/peer-ids.md
"""

from typing import Final

from .types import StrictBaseModel

P2P_CODE: Final = 421
"""Code of the embedded peer identifier protocol (``p2p``, alias ``ipfs``)."""

MIN_PEER_ID_BYTES: Final = 3
"""Smallest well-formed multihash: one code byte, one length byte, one digest byte."""

MAX_PEER_ID_BYTES: Final = 128
"""Largest accepted peer identifier. Identity multihashes of ed25519/secp256k1 keys are 36-37."""

LOG_LEVEL_ENV: Final = "LEAN_MULTIADDR_LOG_LEVEL"
"""Environment variable holding the CLI's default log level."""

DEFAULT_LOG_LEVEL: Final = "WARNING"
"""Log level used by the CLI when neither ``--verbose`` nor the environment variable is set."""


class PeerIdConfig(StrictBaseModel):
    """Structural bounds for peer identifiers extracted from multiaddrs."""

    min_bytes: int = MIN_PEER_ID_BYTES
    """Minimum accepted identifier length in bytes."""

    max_bytes: int = MAX_PEER_ID_BYTES
    """Maximum accepted identifier length in bytes."""
