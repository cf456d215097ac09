"""
Self-describing, composable network addresses (multiaddr).

A multiaddr stacks protocol layers into one address with equivalent string
and binary forms::

    /ip4/127.0.0.1/tcp/4001/p2p/QmcgpsyWgH8Y8ajJz1Cu72KnS5uo2Aa2LpzU7kinSupNKC

Components:
    - protocols: registry of known protocol layers
    - codec: string and binary parsing and rendering
    - multiaddr: the immutable Multiaddr value type and its operations
    - resolve: name resolution through an injected resolver
    - policy: observed-address filtering

References:
    - https://github.com/multiformats/multiaddr
"""

from .config import P2P_CODE, PeerIdConfig
from .exceptions import (
    MalformedAddressError,
    MultiaddrError,
    NotThinWaistError,
    ResolutionFailedError,
    TruncatedAddressError,
    UnknownProtocolError,
)
from .multiaddr import Multiaddr
from .policy import ObservedAddressDecision, observed_address_decision
from .protocols import (
    REGISTRY,
    VARIABLE,
    ProtocolDescriptor,
    ProtocolRegistry,
    ValueCodec,
)
from .resolve import Resolver, resolve, resolve_all
from .types import MultiaddrOptions, NodeAddress

__all__ = [
    # Value type
    "Multiaddr",
    "NodeAddress",
    "MultiaddrOptions",
    # Protocol registry
    "REGISTRY",
    "VARIABLE",
    "ProtocolDescriptor",
    "ProtocolRegistry",
    "ValueCodec",
    # Resolution
    "Resolver",
    "resolve",
    "resolve_all",
    # Policy
    "ObservedAddressDecision",
    "observed_address_decision",
    # Configuration
    "P2P_CODE",
    "PeerIdConfig",
    # Exceptions
    "MultiaddrError",
    "UnknownProtocolError",
    "MalformedAddressError",
    "TruncatedAddressError",
    "NotThinWaistError",
    "ResolutionFailedError",
]
