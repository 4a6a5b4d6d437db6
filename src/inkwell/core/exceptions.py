"""Domain-specific exceptions.

All exceptions in the inkwell system inherit from InkwellError,
making it easy to catch all system errors while still being able
to handle specific error types.

These exceptions never cross the service boundary: services catch them
and return a typed Failure instead (see inkwell.core.results).
"""

from __future__ import annotations


class InkwellError(Exception):
    """Base exception for all inkwell errors."""

    pass


class ConfigurationError(InkwellError):
    """The deployment is misconfigured.

    Raised at startup (e.g. the default session secret in production) and
    by repositories when an invariant that only an operator can fix is
    broken. Surfaced to end users as a generic "contact administrator"
    message.
    """

    pass


class StoreError(InkwellError):
    """A persistence operation failed.

    Repositories raise this when a write did not produce the expected row.
    Driver exceptions (asyncpg) are not wrapped; services treat both the
    same way.
    """

    pass
