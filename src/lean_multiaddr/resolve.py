"""
Name resolution for multiaddrs.

Addresses such as ``/dnsaddr/bootstrap.libp2p.io`` or
``/dns4/example.com/tcp/443`` name an endpoint instead of locating it. Turning
them into concrete addresses needs a naming lookup, which this package does
not perform: callers inject a resolver.

This is the only asynchronous seam of the package. Timeouts, retries and
caching are the resolver's business.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, Protocol, Sequence

from .exceptions import MultiaddrError, ResolutionFailedError
from .multiaddr import Multiaddr

logger = logging.getLogger(__name__)


class Resolver(Protocol):
    """
    Async callable expanding a name address into concrete addresses.

    May return Multiaddr instances or anything Multiaddr accepts (text, bytes).
    May raise any exception; it is surfaced as ResolutionFailedError.
    """

    async def __call__(self, addr: Multiaddr) -> Sequence[Multiaddr | str | bytes]:
        """Resolve a name address."""
        ...


async def resolve(addr: Multiaddr, resolver: Resolver) -> list[Multiaddr]:
    """
    Resolve an address to zero or more concrete addresses.

    Addresses without a name component resolve to themselves and the
    resolver is not called.

    Args:
        addr: Address to resolve.
        resolver: Injected naming lookup.

    Returns:
        Concrete addresses, in the order the resolver returned them.

    Raises:
        ResolutionFailedError: If the resolver fails or returns an invalid address.
    """
    if not addr.is_name():
        return [addr]

    logger.debug("Resolving %s", addr)
    try:
        results = await resolver(addr)
    except ResolutionFailedError:
        raise
    except Exception as e:
        logger.debug("Resolver failed for %s: %s", addr, e)
        raise ResolutionFailedError(str(addr), str(e) or type(e).__name__) from e

    try:
        resolved = [Multiaddr(result, registry=addr.registry) for result in results]
    except (MultiaddrError, TypeError) as e:
        raise ResolutionFailedError(str(addr), f"resolver returned an invalid address: {e}") from e

    logger.debug("Resolved %s to %d address(es)", addr, len(resolved))
    return resolved


async def resolve_all(addrs: Iterable[Multiaddr], resolver: Resolver) -> list[Multiaddr]:
    """
    Resolve several addresses concurrently.

    Results are flattened in input order. The first failure propagates.
    """
    batches = await asyncio.gather(*(resolve(addr, resolver) for addr in addrs))
    return [resolved for batch in batches for resolved in batch]
