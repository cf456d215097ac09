"""
Protocol Registry
=================

The table of protocol layers a multiaddr may stack.

Each protocol is a plain record: a wire code, a name, the payload width and a
tag naming the value codec. The codec module dispatches on that tag, so adding
a protocol never needs a new class.

Payload widths come in three kinds:

- Fixed (``size > 0``): ``size // 8`` raw bytes follow the code.
- Zero (``size == 0``): nothing follows the code.
- Variable (``size == VARIABLE``): a varint length then that many bytes.

Wire codes are part of the persisted format. Deployed codes are never reused
or removed; new protocols only ever add rows.

References:
    - https://github.com/multiformats/multiaddr/blob/master/protocols.csv
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Final, Iterable, Iterator

from .exceptions import UnknownProtocolError

VARIABLE: Final = -1
"""Size marker for length-prefixed payloads."""


class ValueCodec(Enum):
    """Closed set of value encodings a protocol payload may use."""

    NONE = auto()
    """No payload."""

    IP4 = auto()
    """Dotted quad, 4 bytes."""

    IP6 = auto()
    """Colon-hex, 16 bytes."""

    PORT = auto()
    """Decimal port, 2 bytes big-endian."""

    UTF8 = auto()
    """Single-token UTF-8 text (DNS names, zone ids)."""

    PATH = auto()
    """UTF-8 path spanning all remaining tokens."""

    BASE58 = auto()
    """Base58btc peer identifier."""

    ONION = auto()
    """Tor v2 onion: 10-byte base32 host plus 2-byte port."""

    ONION3 = auto()
    """Tor v3 onion: 35-byte base32 host plus 2-byte port."""


@dataclass(frozen=True, slots=True)
class ProtocolDescriptor:
    """A single row of the protocol table."""

    code: int
    """Wire code, encoded as a varint."""

    name: str
    """Canonical name used in the string form."""

    size: int
    """Payload width in bits, 0 for none, or VARIABLE."""

    codec: ValueCodec = ValueCodec.NONE
    """Value encoding of the payload."""

    path: bool = False
    """Value swallows every remaining ``/``-separated token."""

    resolvable: bool = False
    """Value is a DNS-style name that a resolver can expand."""

    aliases: tuple[str, ...] = ()
    """Extra names accepted on parse. Never emitted."""

    @property
    def is_variable(self) -> bool:
        """Whether the payload is length-prefixed."""
        return self.size == VARIABLE

    @property
    def has_value(self) -> bool:
        """Whether the protocol carries a payload at all."""
        return self.size != 0

    @property
    def byte_width(self) -> int:
        """Fixed payload width in bytes (0 for zero-size and variable protocols)."""
        return self.size // 8 if self.size > 0 else 0


class ProtocolRegistry:
    """
    Immutable lookup table keyed by protocol code and by name.

    Raises ValueError on construction if two descriptors share a code or a name.
    """

    __slots__ = ("_by_code", "_by_name", "_table")

    def __init__(self, descriptors: Iterable[ProtocolDescriptor]) -> None:
        table = tuple(descriptors)
        by_code: dict[int, ProtocolDescriptor] = {}
        by_name: dict[str, ProtocolDescriptor] = {}

        for proto in table:
            if proto.code in by_code:
                raise ValueError(f"Duplicate protocol code: {proto.code}")
            if proto.code < 0:
                raise ValueError(f"Protocol code must be non-negative: {proto.code}")
            if proto.size < VARIABLE or (proto.size > 0 and proto.size % 8):
                raise ValueError(f"Invalid size {proto.size} for protocol {proto.name}")
            by_code[proto.code] = proto

            for name in (proto.name, *proto.aliases):
                if name in by_name:
                    raise ValueError(f"Duplicate protocol name: {name}")
                by_name[name] = proto

        self._table = table
        self._by_code = by_code
        self._by_name = by_name

    def lookup(self, key: int | str) -> ProtocolDescriptor:
        """
        Resolve a protocol by code or by name.

        Args:
            key: Wire code or protocol name (aliases included).

        Returns:
            The matching descriptor.

        Raises:
            UnknownProtocolError: If nothing matches.
        """
        proto = self._by_code.get(key) if isinstance(key, int) else self._by_name.get(key)
        if proto is None:
            raise UnknownProtocolError(key)
        return proto

    def __contains__(self, key: object) -> bool:
        return key in self._by_code or key in self._by_name

    def __iter__(self) -> Iterator[ProtocolDescriptor]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def codes(self) -> list[int]:
        """All registered codes in table order."""
        return [proto.code for proto in self._table]

    def names(self) -> list[str]:
        """All canonical names in table order."""
        return [proto.name for proto in self._table]


DEFAULT_PROTOCOLS: Final[tuple[ProtocolDescriptor, ...]] = (
    ProtocolDescriptor(4, "ip4", 32, ValueCodec.IP4),
    ProtocolDescriptor(6, "tcp", 16, ValueCodec.PORT),
    ProtocolDescriptor(33, "dccp", 16, ValueCodec.PORT),
    ProtocolDescriptor(41, "ip6", 128, ValueCodec.IP6),
    ProtocolDescriptor(42, "ip6zone", VARIABLE, ValueCodec.UTF8),
    ProtocolDescriptor(53, "dns", VARIABLE, ValueCodec.UTF8, resolvable=True),
    ProtocolDescriptor(54, "dns4", VARIABLE, ValueCodec.UTF8, resolvable=True),
    ProtocolDescriptor(55, "dns6", VARIABLE, ValueCodec.UTF8, resolvable=True),
    ProtocolDescriptor(56, "dnsaddr", VARIABLE, ValueCodec.UTF8, resolvable=True),
    ProtocolDescriptor(132, "sctp", 16, ValueCodec.PORT),
    ProtocolDescriptor(273, "udp", 16, ValueCodec.PORT),
    ProtocolDescriptor(275, "p2p-webrtc-star", 0),
    ProtocolDescriptor(276, "p2p-webrtc-direct", 0),
    ProtocolDescriptor(277, "p2p-stardust", 0),
    ProtocolDescriptor(290, "p2p-circuit", 0),
    ProtocolDescriptor(301, "udt", 0),
    ProtocolDescriptor(302, "utp", 0),
    ProtocolDescriptor(400, "unix", VARIABLE, ValueCodec.PATH, path=True),
    ProtocolDescriptor(421, "p2p", VARIABLE, ValueCodec.BASE58, aliases=("ipfs",)),
    ProtocolDescriptor(443, "https", 0),
    ProtocolDescriptor(444, "onion", 96, ValueCodec.ONION),
    ProtocolDescriptor(445, "onion3", 296, ValueCodec.ONION3),
    ProtocolDescriptor(460, "quic", 0),
    ProtocolDescriptor(477, "ws", 0),
    ProtocolDescriptor(478, "wss", 0),
    ProtocolDescriptor(479, "p2p-websocket-star", 0),
    ProtocolDescriptor(480, "http", 0),
)
"""Protocols known to the default registry."""

REGISTRY: Final = ProtocolRegistry(DEFAULT_PROTOCOLS)
"""Process-wide default registry. Built once at import and never mutated."""
