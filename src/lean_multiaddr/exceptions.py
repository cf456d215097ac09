"""Exception hierarchy for the multiaddr codec."""

from __future__ import annotations


class MultiaddrError(Exception):
    """
    Base exception for all multiaddr-related errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class UnknownProtocolError(MultiaddrError):
    """
    Raised when a protocol name or code is not in the registry.

    Attributes:
        protocol: The name or code that failed to resolve.
    """

    def __init__(self, protocol: int | str) -> None:
        self.protocol = protocol

        if isinstance(protocol, int):
            msg = f"Unknown protocol code: {protocol}"
        else:
            msg = f"Unknown protocol name: {protocol!r}"

        super().__init__(msg)


class MalformedAddressError(MultiaddrError):
    """
    Raised when an address violates the grammar or carries an invalid value.

    Attributes:
        address: The offending address text (or hex for binary input), if known.
        detail: Description of what went wrong.
    """

    def __init__(self, detail: str, *, address: str | None = None) -> None:
        self.address = address
        self.detail = detail

        msg = f"Invalid multiaddr: {detail}"
        if address is not None:
            msg = f"Invalid multiaddr {address!r}: {detail}"

        super().__init__(msg)


class TruncatedAddressError(MultiaddrError):
    """
    Raised when a binary address ends in the middle of a tuple.

    Attributes:
        offset: Byte offset where the incomplete field starts.
        needed: Number of bytes the field declares (if known).
        available: Number of bytes left in the buffer.
    """

    def __init__(
        self,
        offset: int,
        *,
        needed: int | None = None,
        available: int,
    ) -> None:
        self.offset = offset
        self.needed = needed
        self.available = available

        if needed is not None:
            msg = (
                f"Truncated multiaddr at byte offset {offset}: "
                f"needed {needed} bytes, {available} available"
            )
        else:
            msg = f"Truncated multiaddr at byte offset {offset}: incomplete varint"

        super().__init__(msg)


class NotThinWaistError(MultiaddrError):
    """
    Raised when a node address is requested from a non thin-waist multiaddr.

    Attributes:
        address: String form of the offending multiaddr.
    """

    def __init__(self, address: str) -> None:
        self.address = address
        super().__init__(
            f"Multiaddr must be a thin waist address ({{ip4, ip6}}/{{tcp, udp}}): {address}"
        )


class ResolutionFailedError(MultiaddrError):
    """
    Raised when the injected resolver fails to resolve a name address.

    The resolver's own exception is chained as ``__cause__``.

    Attributes:
        address: String form of the name address being resolved.
    """

    def __init__(self, address: str, detail: str) -> None:
        self.address = address
        super().__init__(f"Failed to resolve {address}: {detail}")
