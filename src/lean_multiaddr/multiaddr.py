"""
The Multiaddr value type.

A multiaddr owns a single immutable buffer: its canonical binary encoding.
Everything else (protocols, tuples, the string form) is derived from it.
Instances are hashable, compare by buffer, and every operation returns a
new instance.

Example::

    >>> addr = Multiaddr("/ip4/127.0.0.1/tcp/4001")
    >>> addr
    <Multiaddr 047f000001060fa1 - /ip4/127.0.0.1/tcp/4001>
    >>> addr.proto_names()
    ['ip4', 'tcp']
    >>> addr.encapsulate("/p2p-circuit").decapsulate_code(290) == addr
    True
"""

from __future__ import annotations

import ipaddress
from typing import Any, Final, Mapping, NoReturn

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema
from typing_extensions import Self

from . import codec
from .base58 import b58encode
from .config import P2P_CODE, PeerIdConfig
from .exceptions import MalformedAddressError, MultiaddrError, NotThinWaistError
from .protocols import REGISTRY, ProtocolDescriptor, ProtocolRegistry, ValueCodec
from .types import MultiaddrOptions, NodeAddress
from .varint import VarintError, decode_varint

NETWORK_PROTOCOLS: Final = frozenset({"ip4", "ip6"})
"""Network layer of a thin waist address."""

TRANSPORT_PROTOCOLS: Final = frozenset({"tcp", "udp"})
"""Transport layer of a thin waist address."""


class Multiaddr:
    """A self-describing, composable network address."""

    __slots__ = ("_bytes", "_components", "_registry")

    _bytes: bytes
    _components: tuple[codec.Component, ...]
    _registry: ProtocolRegistry

    def __init__(
        self,
        addr: str | bytes | bytearray | memoryview | Multiaddr = "",
        *,
        registry: ProtocolRegistry = REGISTRY,
    ) -> None:
        """
        Build a multiaddr from its string form, its binary form, or another multiaddr.

        Args:
            addr: ``/proto/value/...`` text, canonical bytes, or a Multiaddr.
            registry: Protocol table used to interpret the address.

        Raises:
            UnknownProtocolError: If a protocol name or code is not registered.
            MalformedAddressError: If the address is invalid.
            TruncatedAddressError: If binary input ends mid-component.
            TypeError: If addr has an unsupported type.
        """
        if isinstance(addr, Multiaddr):
            if addr._registry is registry:
                data, components = addr._bytes, addr._components
            else:
                data = addr._bytes
                components = codec.bytes_to_components(data, registry)
        elif isinstance(addr, str):
            data = codec.string_to_bytes(addr, registry)
            components = codec.bytes_to_components(data, registry)
        elif isinstance(addr, (bytes, bytearray, memoryview)):
            data = bytes(addr)
            components = codec.bytes_to_components(data, registry)
        else:
            raise TypeError(f"Cannot build a Multiaddr from {type(addr).__name__}")

        object.__setattr__(self, "_bytes", data)
        object.__setattr__(self, "_components", components)
        object.__setattr__(self, "_registry", registry)

    @classmethod
    def _from_components(
        cls, data: bytes, components: tuple[codec.Component, ...], registry: ProtocolRegistry
    ) -> Self:
        """Wrap an already-validated buffer without decoding it again."""
        instance = object.__new__(cls)
        object.__setattr__(instance, "_bytes", data)
        object.__setattr__(instance, "_components", components)
        object.__setattr__(instance, "_registry", registry)
        return instance

    @classmethod
    def from_string(cls, text: str, *, registry: ProtocolRegistry = REGISTRY) -> Self:
        """Parse the ``/proto/value/...`` string form."""
        return cls(text, registry=registry)

    @classmethod
    def from_bytes(cls, data: bytes, *, registry: ProtocolRegistry = REGISTRY) -> Self:
        """Parse the canonical binary form."""
        return cls(data, registry=registry)

    def __reduce__(self) -> tuple[Any, ...]:
        registry = None if self._registry is REGISTRY else self._registry
        return (_restore, (type(self), self._bytes, registry))

    def __copy__(self) -> Self:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> Self:
        return self

    def __setattr__(self, name: str, value: Any) -> NoReturn:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> NoReturn:
        raise AttributeError(f"{type(self).__name__} is immutable")

    # -------------------------------------------------------------------------
    # Representations
    # -------------------------------------------------------------------------

    def to_bytes(self) -> bytes:
        """Return the canonical binary encoding."""
        return self._bytes

    def __bytes__(self) -> bytes:
        return self._bytes

    def __str__(self) -> str:
        """Return the canonical string form, e.g. ``/ip4/127.0.0.1/tcp/4001``."""
        return codec.components_to_string(self._components)

    def to_json(self) -> str:
        """JSON representation is the string form."""
        return str(self)

    def __repr__(self) -> str:
        return f"<Multiaddr {self._bytes.hex()} - {self}>"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Multiaddr):
            return NotImplemented
        return self._bytes == other._bytes

    def __hash__(self) -> int:
        return hash(self._bytes)

    def equals(self, other: Multiaddr) -> bool:
        """Check whether both addresses have byte-identical encodings."""
        return self._bytes == other._bytes

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    @property
    def registry(self) -> ProtocolRegistry:
        """Protocol table this address was decoded with."""
        return self._registry

    def protocols(self) -> list[ProtocolDescriptor]:
        """Protocol descriptors in left-to-right order. Repeats are kept."""
        return [component.protocol for component in self._components]

    def proto_codes(self) -> list[int]:
        """Protocol codes in left-to-right order."""
        return [component.protocol.code for component in self._components]

    def proto_names(self) -> list[str]:
        """Protocol names in left-to-right order."""
        return [component.protocol.name for component in self._components]

    def tuples(self) -> list[tuple[int, bytes | None]]:
        """``(code, payload)`` pairs. Payload is None for zero-size protocols."""
        return [(c.protocol.code, c.value) for c in self._components]

    def string_tuples(self) -> list[tuple[int, str | None]]:
        """``(code, value)`` pairs with values in string form."""
        return [(c.protocol.code, c.text) for c in self._components]

    # -------------------------------------------------------------------------
    # Composition
    # -------------------------------------------------------------------------

    def _coerce(self, other: str | bytes | Multiaddr) -> Multiaddr:
        return other if isinstance(other, Multiaddr) else Multiaddr(other, registry=self._registry)

    def _prefix(self, index: int) -> Multiaddr:
        """Address made of the components before ``index``."""
        if index == 0:
            return Multiaddr._from_components(b"", (), self._registry)
        end = self._components[index - 1].end
        return Multiaddr._from_components(
            self._bytes[:end], self._components[:index], self._registry
        )

    def encapsulate(self, other: str | bytes | Multiaddr) -> Multiaddr:
        """
        Wrap ``other`` inside this address.

        The result reads "other, reached via self". Not commutative.
        """
        inner = self._coerce(other)
        return Multiaddr(self._bytes + inner._bytes, registry=self._registry)

    def decapsulate(self, other: str | bytes | Multiaddr) -> Multiaddr:
        """
        Strip ``other`` and everything after it.

        Finds the rightmost run of whole components equal to ``other``'s
        components and returns the prefix before it. Matches never split a
        component. If there is no match the address is returned unchanged.
        """
        needle = self._coerce(other)
        count = len(needle._components)
        if count == 0:
            return self

        components = self._components
        for index in range(len(components) - count, -1, -1):
            start = components[index].start
            end = components[index + count - 1].end
            if self._bytes[start:end] == needle._bytes:
                return self._prefix(index)
        return self

    def decapsulate_code(self, code: int) -> Multiaddr:
        """
        Strip the last component with the given protocol code and everything after it.

        Returns the address unchanged if the code is absent.
        """
        for index in range(len(self._components) - 1, -1, -1):
            if self._components[index].protocol.code == code:
                return self._prefix(index)
        return self

    # -------------------------------------------------------------------------
    # Extraction
    # -------------------------------------------------------------------------

    def get_peer_id(self, config: PeerIdConfig | None = None) -> str | None:
        """
        Extract the peer identifier of the last ``/p2p`` component.

        Only structural checks are made: the payload must fit the configured
        length bounds and be a well-formed multihash. Whether the identifier
        belongs to a real key is for the identity layer to decide.

        Returns:
            Base58 identifier, or None if absent or malformed.
        """
        bounds = config or PeerIdConfig()
        for component in reversed(self._components):
            if component.protocol.code != P2P_CODE:
                continue
            payload = component.value or b""
            if not bounds.min_bytes <= len(payload) <= bounds.max_bytes:
                return None
            if not _is_multihash(payload):
                return None
            return b58encode(payload)
        return None

    def get_path(self) -> str | None:
        """Return the value of the first path component (e.g. ``/unix``), or None."""
        for component in self._components:
            if component.protocol.path:
                return component.text
        return None

    def is_name(self) -> bool:
        """Check whether any component is a DNS-style name a resolver can expand."""
        return any(component.protocol.resolvable for component in self._components)

    # -------------------------------------------------------------------------
    # Thin waist
    # -------------------------------------------------------------------------

    def is_thin_waist_address(self) -> bool:
        """Check for exactly ``{ip4, ip6}`` followed by ``{tcp, udp}``."""
        names = self.proto_names()
        return (
            len(names) == 2
            and names[0] in NETWORK_PROTOCOLS
            and names[1] in TRANSPORT_PROTOCOLS
        )

    def _require_thin_waist(self) -> tuple[codec.Component, codec.Component]:
        if not self.is_thin_waist_address():
            raise NotThinWaistError(str(self))
        network, transport = self._components
        return network, transport

    def node_address(self) -> NodeAddress:
        """
        Project a thin waist address to a socket-style address.

        Raises:
            NotThinWaistError: If the address is not ``{ip4, ip6}/{tcp, udp}``.
        """
        network, transport = self._require_thin_waist()
        return NodeAddress(
            family="IPv4" if network.protocol.name == "ip4" else "IPv6",
            address=network.text or "",
            port=transport.text or "",
        )

    def to_options(self) -> MultiaddrOptions:
        """
        Project a thin waist address to dial options.

        Raises:
            NotThinWaistError: If the address is not ``{ip4, ip6}/{tcp, udp}``.
        """
        network, transport = self._require_thin_waist()
        return MultiaddrOptions(
            family="ipv4" if network.protocol.name == "ip4" else "ipv6",
            host=network.text or "",
            transport=transport.protocol.name,
            port=int(transport.text or 0),
        )

    @classmethod
    def from_node_address(
        cls,
        addr: NodeAddress | Mapping[str, Any],
        transport: str,
        *,
        registry: ProtocolRegistry = REGISTRY,
    ) -> Self:
        """
        Build a two-component address from a socket-style address.

        The network protocol follows the address text. A ``family`` field,
        when given, must agree with it.

        Args:
            addr: NodeAddress, or any mapping with ``address`` and ``port`` keys
                and an optional ``family`` (``IPv4`` or ``IPv6``).
            transport: Port-carrying protocol name such as ``tcp`` or ``udp``.

        Raises:
            MalformedAddressError: If the address, family, port or transport is invalid.
        """
        if isinstance(addr, NodeAddress):
            family, host, port = addr.family, addr.address, addr.port
        else:
            try:
                host, port = addr["address"], addr["port"]
            except KeyError as e:
                raise MalformedAddressError(f"node address is missing {e}") from e
            family = addr.get("family")

        try:
            ip = ipaddress.ip_address(str(host))
        except ValueError as e:
            raise MalformedAddressError(f"invalid node address: {e}") from e

        if family is not None and str(family).lower() != f"ipv{ip.version}":
            raise MalformedAddressError(f"node address family {family!r} does not match {ip}")

        port = str(port)
        if not (port.isascii() and port.isdigit()):
            raise MalformedAddressError(f"invalid node address port: {port!r}")

        protocol = registry.lookup(transport)
        if protocol.codec is not ValueCodec.PORT:
            raise MalformedAddressError(f"/{transport} does not carry a port")

        network = "ip4" if ip.version == 4 else "ip6"
        return cls(f"/{network}/{ip}/{protocol.name}/{port}", registry=registry)

    # -------------------------------------------------------------------------
    # Pydantic integration
    # -------------------------------------------------------------------------

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        """Validate from text, bytes or Multiaddr; serialize to text."""

        def validate(value: Any) -> Multiaddr:
            try:
                return cls(value)
            except (MultiaddrError, TypeError) as e:
                raise ValueError(str(e)) from e

        return core_schema.json_or_python_schema(
            json_schema=core_schema.no_info_after_validator_function(
                validate, core_schema.str_schema()
            ),
            python_schema=core_schema.no_info_plain_validator_function(validate),
            serialization=core_schema.plain_serializer_function_ser_schema(str),
        )


def _is_multihash(data: bytes) -> bool:
    """Check for ``[varint code][varint length][digest]`` filling data exactly."""
    try:
        _, code_len = decode_varint(data, 0)
        length, length_len = decode_varint(data, code_len)
    except VarintError:
        return False
    return length > 0 and code_len + length_len + length == len(data)


def _restore(
    cls: type[Multiaddr], data: bytes, registry: ProtocolRegistry | None
) -> Multiaddr:
    """Unpickle a multiaddr. None stands for the default registry."""
    return cls(data, registry=REGISTRY if registry is None else registry)
