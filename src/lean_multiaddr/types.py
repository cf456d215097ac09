"""Reusable, strict base models and value records for multiaddr projections."""

from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    A base model that converts field names to camel case when serializing.

    Keeps JSON output aligned with the camelCase shapes other libp2p
    implementations emit for the same records.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_default=True,
        arbitrary_types_allowed=True,
    )


class StrictBaseModel(CamelModel):
    """A strict, immutable pydantic base model."""

    model_config = CamelModel.model_config | {
        "extra": "forbid",
        "frozen": True,
        "strict": True,
    }


class NodeAddress(StrictBaseModel):
    """Socket-style view of a thin waist multiaddr."""

    family: Literal["IPv4", "IPv6"]
    """Address family of the network layer."""

    address: str
    """Textual IP address."""

    port: str
    """Decimal port, kept as text to match other libp2p stacks."""


class MultiaddrOptions(StrictBaseModel):
    """Dial options derived from a thin waist multiaddr."""

    family: Literal["ipv4", "ipv6"]
    """Lower-case address family."""

    host: str
    """Textual IP address."""

    transport: str
    """Transport protocol name (``tcp`` or ``udp``)."""

    port: int
    """Numeric port."""
