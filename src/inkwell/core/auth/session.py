"""Session token creation and validation.

A session is a signed JWT asserting "this bearer is user U with role R
until time T". Nothing is stored server side. Verification fails closed:
any problem with the token (missing, malformed, bad signature, expired)
yields ``None``, and callers treat every cause the same way.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt
import structlog

from inkwell.core.auth.types import IssuedSession, SessionClaims

logger = structlog.get_logger()

DEFAULT_SECRET = "inkwell-dev-secret-change-in-production"  # pragma: allowlist secret
ALGORITHM = "HS256"
SESSION_TTL_DAYS = 7


@dataclass(frozen=True)
class SessionConfig:
    """Process-wide codec configuration, built once at startup.

    Rotating ``secret`` invalidates every outstanding session.
    """

    secret: str = DEFAULT_SECRET
    algorithm: str = ALGORITHM
    ttl: timedelta = timedelta(days=SESSION_TTL_DAYS)


class SessionCodec:
    """Issues and verifies session tokens."""

    def __init__(self, config: SessionConfig) -> None:
        """Initialize with an immutable configuration.

        Args:
            config: Signing secret, algorithm and token lifetime.
        """
        self._config = config

    @property
    def config(self) -> SessionConfig:
        """The codec configuration."""
        return self._config

    def issue(self, user_id: UUID, role_name: str, now: datetime | None = None) -> IssuedSession:
        """Create a signed session token.

        Args:
            user_id: User identifier.
            role_name: Name of the user's role at issue time.
            now: Issue time, defaults to the current UTC time.

        Returns:
            The issued session including the encoded token.
        """
        issued = now or datetime.now(timezone.utc)
        expire = issued + self._config.ttl

        payload = {
            "sub": str(user_id),
            "role": role_name,
            "iat": int(issued.timestamp()),
            "exp": int(expire.timestamp()),
        }
        token = jwt.encode(payload, self._config.secret, algorithm=self._config.algorithm)

        return IssuedSession(
            token=token,
            user_id=user_id,
            role=role_name,
            expires_at=payload["exp"],
        )

    def verify(self, token: str | None) -> SessionClaims | None:
        """Decode and validate a session token.

        Args:
            token: Encoded token, or None when the transport had none.

        Returns:
            The verified claims, or None when the token is unusable for any reason.
        """
        if not token:
            return None

        try:
            payload = jwt.decode(
                token,
                self._config.secret,
                algorithms=[self._config.algorithm],
                options={"require": ["sub", "exp", "iat"]},
            )
            return SessionClaims(
                user_id=UUID(payload["sub"]),
                role=str(payload.get("role", "")),
                issued_at=int(payload["iat"]),
                expires_at=int(payload["exp"]),
            )
        except jwt.ExpiredSignatureError:
            logger.debug("session_expired")
            return None
        except jwt.InvalidTokenError as e:
            logger.debug("session_invalid", error=str(e))
            return None
        except (KeyError, TypeError, ValueError) as e:
            # Well-signed but with claims we cannot interpret
            logger.debug("session_claims_invalid", error=str(e))
            return None
