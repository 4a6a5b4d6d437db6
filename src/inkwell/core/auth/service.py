"""Auth service for signup, login and logout."""

from typing import Any

import structlog

from inkwell.core.auth.forms import LoginForm, SignupForm
from inkwell.core.auth.password import BCRYPT_ROUNDS, hash_password, verify_password
from inkwell.core.auth.repository import AuthRepository
from inkwell.core.auth.session import SessionCodec
from inkwell.core.auth.transport import SessionTransport
from inkwell.core.auth.types import IssuedSession, UserStatus
from inkwell.core.results import ErrorKind, Failure, Result, Success
from inkwell.core.validation import validate_form

logger = structlog.get_logger()

INVALID_CREDENTIALS = "Invalid email or password."
ACCOUNT_SUSPENDED = "Your account has been suspended. Please contact administrator."
ACCOUNT_INACTIVE = "Your account is inactive. Please contact administrator."
EMAIL_TAKEN = "An account with this email already exists."
NO_DEFAULT_ROLE = "System error: Default role not found. Please contact administrator."


class AuthService:
    """Service for authentication operations."""

    def __init__(
        self,
        repo: AuthRepository,
        codec: SessionCodec,
        bcrypt_rounds: int = BCRYPT_ROUNDS,
    ) -> None:
        """Initialize with auth repository and session codec.

        Args:
            repo: Auth repository for database operations.
            codec: Codec used to issue sessions.
            bcrypt_rounds: Cost factor for new password hashes.
        """
        self._repo = repo
        self._codec = codec
        self._bcrypt_rounds = bcrypt_rounds

    def _start_session(self, transport: SessionTransport, session: IssuedSession) -> None:
        max_age = int(self._codec.config.ttl.total_seconds())
        transport.set(session.token, max_age=max_age)

    async def login(
        self,
        transport: SessionTransport,
        email: Any,
        password: Any,
    ) -> Result[IssuedSession]:
        """Verify credentials and start a session.

        Unknown email and wrong password produce the same failure so the
        response does not reveal which accounts exist. Blocked accounts get
        a specific message; their existence is already established.

        Args:
            transport: Where to put the session token on success.
            email: Submitted email.
            password: Submitted password.

        Returns:
            The issued session, or a typed failure.
        """
        form = validate_form(LoginForm, {"email": email, "password": password})
        if isinstance(form, Failure):
            return form

        try:
            user = await self._repo.get_user_by_email(form.email)
            if user is None:
                logger.info("login_failed", reason="unknown_email")
                return _invalid_credentials()

            if user.status == UserStatus.SUSPENDED:
                logger.info("login_blocked", user_id=str(user.id), status=user.status.value)
                return Failure(ErrorKind.ACCOUNT_SUSPENDED, ACCOUNT_SUSPENDED)

            if user.status == UserStatus.INACTIVE:
                logger.info("login_blocked", user_id=str(user.id), status=user.status.value)
                return Failure(ErrorKind.ACCOUNT_INACTIVE, ACCOUNT_INACTIVE)

            if not verify_password(form.password, user.password_hash):
                logger.info("login_failed", reason="bad_password", user_id=str(user.id))
                return _invalid_credentials()

            role = await self._repo.get_role_with_permissions(user.role_id)
            if role is None:
                logger.error("user_role_missing", user_id=str(user.id))
                return Failure(ErrorKind.CONFIGURATION, NO_DEFAULT_ROLE)
        except Exception:
            logger.exception("login_error")
            return Failure(ErrorKind.STORE, "An error occurred during login. Please try again.")

        session = self._codec.issue(user.id, role.name)
        self._start_session(transport, session)
        logger.info("login_succeeded", user_id=str(user.id), role=role.name)
        return Success(session)

    async def signup(
        self,
        transport: SessionTransport,
        name: Any,
        email: Any,
        password: Any,
        phone: Any = None,
    ) -> Result[IssuedSession]:
        """Register a new user with the default role and start a session.

        Args:
            transport: Where to put the session token on success.
            name: Display name.
            email: Email address (normalized to lowercase).
            password: Plain text password.
            phone: Optional phone number.

        Returns:
            The issued session, or a typed failure.
        """
        form = validate_form(
            SignupForm,
            {"name": name, "email": email, "password": password, "phone": phone or None},
        )
        if isinstance(form, Failure):
            return form

        try:
            existing = await self._repo.get_user_by_email(form.email)
            if existing is not None:
                return Failure(
                    ErrorKind.EMAIL_TAKEN,
                    "Registration failed.",
                    {"email": [EMAIL_TAKEN]},
                )

            default_role = await self._repo.get_default_role()
            if default_role is None:
                logger.error("default_role_missing")
                return Failure(ErrorKind.CONFIGURATION, NO_DEFAULT_ROLE)

            user = await self._repo.create_user(
                email=form.email,
                name=form.name,
                password_hash=hash_password(form.password, rounds=self._bcrypt_rounds),
                role_id=default_role.id,
                phone=form.phone,
            )
        except Exception:
            logger.exception("signup_error")
            return Failure(
                ErrorKind.STORE,
                "An error occurred during registration. Please try again.",
            )

        session = self._codec.issue(user.id, default_role.name)
        self._start_session(transport, session)
        logger.info("signup_succeeded", user_id=str(user.id), role=default_role.name)
        return Success(session)

    def logout(self, transport: SessionTransport) -> None:
        """End the session. Logging out twice is not an error."""
        transport.clear()
        logger.info("logout")


def _invalid_credentials() -> Failure:
    return Failure(
        ErrorKind.INVALID_CREDENTIALS,
        INVALID_CREDENTIALS,
        {"email": [INVALID_CREDENTIALS]},
    )
