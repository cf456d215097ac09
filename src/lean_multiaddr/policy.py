"""
Observed-address policy.

Every remote peer reports the address it sees us on. Most of those reports
are only meaningful inside the reporter's own subnet, and storing them all
means handing useless addresses to everybody else ("address explosion").

The rule here: an observed address is worth keeping once it has been reported
before. Bookkeeping of the observation history lives with the caller.
"""

from __future__ import annotations

from enum import Enum
from typing import Collection

from .multiaddr import Multiaddr


class ObservedAddressDecision(Enum):
    """Outcome of evaluating an observed address."""

    KEEP = "keep"
    """Seen before: promote to a known address."""

    DROP = "drop"
    """First sighting: record it as observed, do not advertise it."""


def observed_address_decision(
    observed: Collection[Multiaddr], candidate: Multiaddr
) -> ObservedAddressDecision:
    """Decide whether an observed address should be kept. Pure, never mutates inputs."""
    if candidate in observed:
        return ObservedAddressDecision.KEEP
    return ObservedAddressDecision.DROP
