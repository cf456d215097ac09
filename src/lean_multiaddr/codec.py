"""
Address codec: string and binary forms of a multiaddr.

String form::

    /ip4/127.0.0.1/tcp/4001/p2p/QmcgpsyWgH8Y8ajJz1Cu72KnS5uo2Aa2LpzU7kinSupNKC

Binary form is a flat sequence of components, left to right::

    [varint code][payload]                  fixed-size protocols
    [varint code][varint length][payload]   variable-size protocols
    [varint code]                           zero-size protocols

Example::

    /ip4/127.0.0.1/tcp/4001  <->  04 7f000001 06 0fa1

Every valid address has exactly one binary form. Parsing text and re-encoding
may change the text (``/ip6/::FFFF:1`` becomes ``/ip6/::ffff:1``), but the
binary form is stable: ``parse(encode(parse(s)))`` equals ``parse(s)``.
"""

from __future__ import annotations

import base64
import binascii
import ipaddress
from dataclasses import dataclass
from typing import Callable, Final

from .base58 import b58decode, b58encode
from .exceptions import MalformedAddressError, TruncatedAddressError
from .protocols import REGISTRY, ProtocolDescriptor, ProtocolRegistry, ValueCodec
from .varint import VarintTruncatedError, decode_varint, encode_varint

ONION_HOST_BYTES: Final = 10
"""Decoded length of a Tor v2 onion host (16 base32 characters)."""

ONION3_HOST_BYTES: Final = 35
"""Decoded length of a Tor v3 onion host (56 base32 characters)."""


@dataclass(frozen=True, slots=True)
class Component:
    """One decoded protocol layer of a binary multiaddr."""

    protocol: ProtocolDescriptor
    """Descriptor resolved from the wire code."""

    value: bytes | None
    """Raw payload without length prefix. None for zero-size protocols."""

    text: str | None
    """String form of the payload. None for zero-size protocols."""

    start: int
    """Offset of the component's first byte (its code varint)."""

    end: int
    """Offset one past the component's last byte."""


# -----------------------------------------------------------------------------
# Value conversions
# -----------------------------------------------------------------------------


def _ip4_to_bytes(text: str) -> bytes:
    return ipaddress.IPv4Address(text).packed


def _ip4_to_string(data: bytes) -> str:
    return str(ipaddress.IPv4Address(data))


def _ip6_to_bytes(text: str) -> bytes:
    if text.startswith("[") and text.endswith("]"):
        text = text[1:-1]
    # Zones are carried by the separate ip6zone protocol.
    if "%" in text:
        raise ValueError("zone index not allowed, use /ip6zone")
    return ipaddress.IPv6Address(text).packed


def _ip6_to_string(data: bytes) -> str:
    return str(ipaddress.IPv6Address(data))


def _parse_port(text: str, minimum: int = 0) -> int:
    if not (text.isascii() and text.isdigit()):
        raise ValueError(f"port must be a decimal number, got {text!r}")
    port = int(text)
    if not minimum <= port <= 0xFFFF:
        raise ValueError(f"port {port} out of range [{minimum}, 65535]")
    return port


def _port_to_bytes(text: str) -> bytes:
    return _parse_port(text).to_bytes(2, "big")


def _port_to_string(data: bytes) -> str:
    return str(int.from_bytes(data, "big"))


def _utf8_to_bytes(text: str) -> bytes:
    if not text:
        raise ValueError("empty value")
    return text.encode("utf-8")


def _utf8_to_string(data: bytes) -> str:
    text = data.decode("utf-8")
    if not text or "/" in text:
        raise ValueError(f"value {text!r} cannot appear in a single path segment")
    return text


def _canonical_path(text: str) -> str:
    return "/" + "/".join(part for part in text.split("/") if part)


def _path_to_bytes(text: str) -> bytes:
    path = _canonical_path(text)
    if path == "/":
        raise ValueError("empty path")
    return path.encode("utf-8")


def _path_to_string(data: bytes) -> str:
    text = data.decode("utf-8")
    # Anything else would re-parse to a different buffer.
    if text == "/" or text != _canonical_path(text):
        raise ValueError(f"path {text!r} is not in canonical form")
    return text


def _base58_to_bytes(text: str) -> bytes:
    data = b58decode(text)
    if not data:
        raise ValueError("empty peer identifier")
    return data


def _base58_to_string(data: bytes) -> str:
    if not data:
        raise ValueError("empty peer identifier")
    return b58encode(data)


def _make_onion_codec(
    host_bytes: int,
) -> tuple[Callable[[str], bytes], Callable[[bytes], str]]:
    host_chars = host_bytes * 8 // 5

    def to_bytes(text: str) -> bytes:
        host, sep, port = text.partition(":")
        if not sep:
            raise ValueError("missing port")
        if len(host) != host_chars:
            raise ValueError(f"host must be {host_chars} base32 characters, got {len(host)}")
        return base64.b32decode(host.upper()) + _parse_port(port, minimum=1).to_bytes(2, "big")

    def to_string(data: bytes) -> str:
        host = base64.b32encode(data[:host_bytes]).decode("ascii").lower()
        port = int.from_bytes(data[host_bytes:], "big")
        if port < 1:
            raise ValueError("port 0 not allowed")
        return f"{host}:{port}"

    return to_bytes, to_string


_CONVERTERS: Final[dict[ValueCodec, tuple[Callable[[str], bytes], Callable[[bytes], str]]]] = {
    ValueCodec.IP4: (_ip4_to_bytes, _ip4_to_string),
    ValueCodec.IP6: (_ip6_to_bytes, _ip6_to_string),
    ValueCodec.PORT: (_port_to_bytes, _port_to_string),
    ValueCodec.UTF8: (_utf8_to_bytes, _utf8_to_string),
    ValueCodec.PATH: (_path_to_bytes, _path_to_string),
    ValueCodec.BASE58: (_base58_to_bytes, _base58_to_string),
    ValueCodec.ONION: _make_onion_codec(ONION_HOST_BYTES),
    ValueCodec.ONION3: _make_onion_codec(ONION3_HOST_BYTES),
}
"""Value encoder/decoder pair for each codec tag."""


def value_to_bytes(protocol: ProtocolDescriptor, text: str) -> bytes:
    """
    Convert a protocol value from its string form to payload bytes.

    Raises:
        MalformedAddressError: If the value is invalid for the protocol.
    """
    try:
        to_bytes, _ = _CONVERTERS[protocol.codec]
        data = to_bytes(text)
    except (KeyError, ValueError, binascii.Error) as e:
        raise MalformedAddressError(f"invalid /{protocol.name} value {text!r}: {e}") from e

    if not protocol.is_variable and len(data) != protocol.byte_width:
        raise MalformedAddressError(
            f"/{protocol.name} value must be {protocol.byte_width} bytes, got {len(data)}"
        )
    return data


def value_to_string(protocol: ProtocolDescriptor, data: bytes) -> str:
    """
    Convert protocol payload bytes to the value's string form.

    Raises:
        MalformedAddressError: If the payload is invalid for the protocol.
    """
    try:
        _, to_string = _CONVERTERS[protocol.codec]
        return to_string(data)
    except (KeyError, ValueError) as e:
        # UnicodeDecodeError is a ValueError.
        raise MalformedAddressError(f"invalid /{protocol.name} payload {data.hex()}: {e}") from e


# -----------------------------------------------------------------------------
# String form
# -----------------------------------------------------------------------------


def string_to_bytes(text: str, registry: ProtocolRegistry = REGISTRY) -> bytes:
    """
    Parse the string form of a multiaddr into its canonical binary form.

    Empty segments are ignored, so ``/ip4/1.2.3.4/`` and ``//ip4/1.2.3.4``
    parse like ``/ip4/1.2.3.4``. Both ``""`` and ``"/"`` give the empty address.

    Args:
        text: Address such as ``/ip4/127.0.0.1/tcp/4001``.
        registry: Protocol table to resolve names against.

    Returns:
        Canonical binary encoding.

    Raises:
        UnknownProtocolError: If a protocol name is not registered.
        MalformedAddressError: If the text breaks the grammar or a value is invalid.
    """
    if text and not text.startswith("/"):
        raise MalformedAddressError("must start with '/'", address=text)

    tokens = [token for token in text.split("/") if token]
    out = bytearray()
    index = 0

    while index < len(tokens):
        protocol = registry.lookup(tokens[index])
        index += 1
        out += encode_varint(protocol.code)

        if not protocol.has_value:
            continue

        if index >= len(tokens):
            raise MalformedAddressError(f"missing value for /{protocol.name}", address=text)

        # Path protocols swallow the rest of the address.
        if protocol.path:
            value = "/" + "/".join(tokens[index:])
            index = len(tokens)
        else:
            value = tokens[index]
            index += 1

        try:
            payload = value_to_bytes(protocol, value)
        except MalformedAddressError as e:
            raise MalformedAddressError(e.detail, address=text) from e

        if protocol.is_variable:
            out += encode_varint(len(payload))
        out += payload

    return bytes(out)


def components_to_string(components: tuple[Component, ...] | list[Component]) -> str:
    """
    Render decoded components in the canonical string form.

    The empty address renders as ``/``.
    """
    parts: list[str] = []
    for component in components:
        parts.append(component.protocol.name)
        if component.text is None:
            continue
        # Canonical paths already start with "/".
        parts.append(component.text[1:] if component.protocol.path else component.text)
    return "/" + "/".join(parts)


# -----------------------------------------------------------------------------
# Binary form
# -----------------------------------------------------------------------------


def _read_varint(data: bytes, offset: int) -> tuple[int, int]:
    try:
        return decode_varint(data, offset)
    except VarintTruncatedError as e:
        raise TruncatedAddressError(offset, available=len(data) - offset) from e


def bytes_to_components(
    data: bytes, registry: ProtocolRegistry = REGISTRY
) -> tuple[Component, ...]:
    """
    Decode a binary multiaddr into its components.

    The buffer must be consumed exactly. Every payload is validated by
    rendering it to text, so a decoded address always has a string form.

    Args:
        data: Binary multiaddr.
        registry: Protocol table to resolve codes against.

    Returns:
        Components in left-to-right order.

    Raises:
        UnknownProtocolError: If a code is not registered.
        TruncatedAddressError: If a varint, length or fixed payload runs past the end.
        MalformedAddressError: If a varint is non-minimal or a payload is invalid.
    """
    components: list[Component] = []
    offset = 0
    end = len(data)

    while offset < end:
        start = offset
        code, consumed = _read_varint(data, offset)
        offset += consumed
        protocol = registry.lookup(code)

        if not protocol.has_value:
            components.append(Component(protocol, None, None, start, offset))
            continue

        if protocol.is_variable:
            size, consumed = _read_varint(data, offset)
            offset += consumed
        else:
            size = protocol.byte_width

        if offset + size > end:
            raise TruncatedAddressError(offset, needed=size, available=end - offset)

        payload = bytes(data[offset : offset + size])
        offset += size
        text = value_to_string(protocol, payload)
        components.append(Component(protocol, payload, text, start, offset))

    return tuple(components)
