"""Tests for the protocol registry."""

from __future__ import annotations

import pytest

from lean_multiaddr.exceptions import UnknownProtocolError
from lean_multiaddr.protocols import (
    REGISTRY,
    VARIABLE,
    ProtocolDescriptor,
    ProtocolRegistry,
    ValueCodec,
)


class TestDefaultRegistry:
    """Lookups against the process-wide table."""

    @pytest.mark.parametrize(
        ("name", "code", "size"),
        [
            ("ip4", 4, 32),
            ("tcp", 6, 16),
            ("ip6", 41, 128),
            ("dns4", 54, VARIABLE),
            ("udp", 273, 16),
            ("p2p-circuit", 290, 0),
            ("unix", 400, VARIABLE),
            ("p2p", 421, VARIABLE),
            ("onion3", 445, 296),
            ("ws", 477, 0),
        ],
    )
    def test_lookup_by_name_and_code(self, name: str, code: int, size: int) -> None:
        """Name and code resolve to the same descriptor."""
        by_name = REGISTRY.lookup(name)
        by_code = REGISTRY.lookup(code)

        assert by_name is by_code
        assert by_name.code == code
        assert by_name.size == size

    def test_ipfs_is_alias_of_p2p(self) -> None:
        """The legacy name resolves to p2p; the code maps back to the canonical name."""
        assert REGISTRY.lookup("ipfs") is REGISTRY.lookup("p2p")
        assert REGISTRY.lookup(421).name == "p2p"

    def test_unknown_name_raises(self) -> None:
        """Unregistered names fail with the name attached."""
        with pytest.raises(UnknownProtocolError) as exc_info:
            REGISTRY.lookup("foo")
        assert exc_info.value.protocol == "foo"

    def test_unknown_code_raises(self) -> None:
        """Unregistered codes fail with the code attached."""
        with pytest.raises(UnknownProtocolError, match="code: 9999"):
            REGISTRY.lookup(9999)

    def test_codes_and_names_unique(self) -> None:
        """No two descriptors share a code or a canonical name."""
        assert len(set(REGISTRY.codes())) == len(REGISTRY)
        assert len(set(REGISTRY.names())) == len(REGISTRY)

    def test_contains(self) -> None:
        """Membership works for both codes and names."""
        assert "tcp" in REGISTRY
        assert 6 in REGISTRY
        assert "ipfs" in REGISTRY
        assert "bogus" not in REGISTRY

    def test_resolvable_protocols(self) -> None:
        """Only DNS-style protocols are resolvable."""
        resolvable = {proto.name for proto in REGISTRY if proto.resolvable}
        assert resolvable == {"dns", "dns4", "dns6", "dnsaddr"}

    def test_path_protocols(self) -> None:
        """unix is the path protocol."""
        assert [proto.name for proto in REGISTRY if proto.path] == ["unix"]


class TestDescriptor:
    """Derived properties of a descriptor."""

    def test_fixed_width(self) -> None:
        """Fixed-size protocols report their byte width."""
        ip6 = REGISTRY.lookup("ip6")
        assert ip6.byte_width == 16
        assert ip6.has_value
        assert not ip6.is_variable

    def test_variable_width(self) -> None:
        """Variable-size protocols have no fixed width."""
        dns = REGISTRY.lookup("dns")
        assert dns.is_variable
        assert dns.has_value
        assert dns.byte_width == 0

    def test_zero_width(self) -> None:
        """Zero-size protocols carry nothing."""
        ws = REGISTRY.lookup("ws")
        assert not ws.has_value
        assert ws.codec is ValueCodec.NONE

    def test_descriptor_is_frozen(self) -> None:
        """Descriptors cannot be mutated."""
        with pytest.raises(AttributeError):
            REGISTRY.lookup("tcp").code = 7  # type: ignore[misc]


class TestCustomRegistry:
    """Constructing registries."""

    def test_duplicate_code_rejected(self) -> None:
        """Two descriptors with the same code are rejected."""
        with pytest.raises(ValueError, match="Duplicate protocol code"):
            ProtocolRegistry(
                [
                    ProtocolDescriptor(6, "tcp", 16, ValueCodec.PORT),
                    ProtocolDescriptor(6, "tcp2", 16, ValueCodec.PORT),
                ]
            )

    def test_duplicate_alias_rejected(self) -> None:
        """An alias may not shadow another protocol's name."""
        with pytest.raises(ValueError, match="Duplicate protocol name"):
            ProtocolRegistry(
                [
                    ProtocolDescriptor(6, "tcp", 16, ValueCodec.PORT),
                    ProtocolDescriptor(273, "udp", 16, ValueCodec.PORT, aliases=("tcp",)),
                ]
            )

    def test_non_byte_size_rejected(self) -> None:
        """Fixed sizes must be whole bytes."""
        with pytest.raises(ValueError, match="Invalid size"):
            ProtocolRegistry([ProtocolDescriptor(1, "odd", 12, ValueCodec.PORT)])

    def test_subset_registry(self) -> None:
        """A registry only knows what it was built with."""
        registry = ProtocolRegistry([REGISTRY.lookup("ip4")])
        assert len(registry) == 1
        with pytest.raises(UnknownProtocolError):
            registry.lookup("tcp")
