"""
Multiaddr inspection CLI.

Parse addresses and show their canonical forms.

Usage::

    python -m lean_multiaddr /ip4/127.0.0.1/tcp/4001
    python -m lean_multiaddr --hex 047f000001060fa1
    python -m lean_multiaddr --bytes /dns4/example.com/tcp/443/wss

Options:
    --hex      Treat arguments as hex-encoded binary multiaddrs
    --bytes    Print only the canonical binary form, in hex
    -v         Enable debug logging
"""

from __future__ import annotations

import argparse
import logging
import os
import sys

from lean_multiaddr.config import DEFAULT_LOG_LEVEL, LOG_LEVEL_ENV
from lean_multiaddr.exceptions import MultiaddrError
from lean_multiaddr.multiaddr import Multiaddr

logger = logging.getLogger(__name__)


def log_level(verbose: bool = False) -> int:
    """Pick the CLI log level from the flag, then the environment."""
    if verbose:
        return logging.DEBUG
    level = logging.getLevelName(os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).upper())
    return level if isinstance(level, int) else logging.WARNING


def setup_logging(verbose: bool = False) -> None:
    """Configure root logging for the CLI."""
    logging.basicConfig(
        level=log_level(verbose),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def describe(addr: Multiaddr) -> list[str]:
    """Human-readable lines describing one address."""
    lines = [repr(addr)]
    for code, value in addr.string_tuples():
        name = addr.registry.lookup(code).name
        lines.append(f"  {code:>5} {name}" + (f" {value}" if value is not None else ""))

    peer_id = addr.get_peer_id()
    if peer_id is not None:
        lines.append(f"  peer id: {peer_id}")
    if addr.is_thin_waist_address():
        node = addr.node_address()
        lines.append(f"  node address: {node.family} {node.address} port {node.port}")
    return lines


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Inspect multiaddrs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("addresses", nargs="+", metavar="ADDRESS", help="Addresses to parse")
    parser.add_argument(
        "--hex",
        action="store_true",
        help="Treat arguments as hex-encoded binary multiaddrs",
    )
    parser.add_argument(
        "--bytes",
        action="store_true",
        dest="bytes_only",
        help="Print only the canonical binary form, in hex",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    for raw in args.addresses:
        try:
            addr = Multiaddr(bytes.fromhex(raw)) if args.hex else Multiaddr(raw)
        except ValueError as e:
            # bytes.fromhex rejects non-hex input with a plain ValueError.
            logger.error("Invalid hex %r: %s", raw, e)
            return 1
        except MultiaddrError as e:
            logger.error("%s", e)
            return 1

        logger.debug("Parsed %r into %d bytes", raw, len(addr.to_bytes()))
        if args.bytes_only:
            print(addr.to_bytes().hex())
        else:
            print("\n".join(describe(addr)))

    return 0


if __name__ == "__main__":
    sys.exit(main())
