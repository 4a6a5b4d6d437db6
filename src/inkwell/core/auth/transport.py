"""Session transport protocol.

The core only needs to get, set and clear an opaque token string scoped to
the current request. The cookie implementation lives in the API entrypoint.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class SessionTransport(Protocol):
    """Carries the session token between client and server."""

    def get(self) -> str | None:
        """Return the token presented with the request, if any."""
        ...

    def set(self, token: str, max_age: int) -> None:
        """Attach a token to the outgoing response."""
        ...

    def clear(self) -> None:
        """Remove the token from the client. Safe to call repeatedly."""
        ...


class MemoryTransport:
    """Transport holding the token in memory.

    Useful for calling the auth core outside of an HTTP request
    (scripts, tests).
    """

    def __init__(self, token: str | None = None) -> None:
        """Initialize with an optional presented token."""
        self.token = token
        self.max_age: int | None = None

    def get(self) -> str | None:
        """Return the held token."""
        return self.token

    def set(self, token: str, max_age: int) -> None:
        """Hold a new token."""
        self.token = token
        self.max_age = max_age

    def clear(self) -> None:
        """Drop the held token."""
        self.token = None
        self.max_age = None
