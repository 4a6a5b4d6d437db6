"""Route-level session gate.

Runs before any handler. It only checks that a valid session token is
present; whether the user is still active and what they may do is decided
later by the handler through the request context.
"""

from dataclasses import dataclass
from urllib.parse import quote

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response
from starlette.types import ASGIApp

from inkwell.core.auth.session import SessionCodec

logger = structlog.get_logger()

AUTH_ROUTES = frozenset({"/login", "/signup"})
PROTECTED_PREFIXES = ("/dashboard",)

SKIPPED_PREFIXES = ("/api", "/static", "/favicon.ico")
SKIPPED_SUFFIXES = (".png", ".jpg", ".svg")

LOGIN_PATH = "/login"
HOME_PATH = "/dashboard"


@dataclass(frozen=True)
class GateDecision:
    """Outcome of the gate for one request.

    Attributes:
        redirect_to: Where to send the client, or None to let the request through.
    """

    redirect_to: str | None = None

    @property
    def allowed(self) -> bool:
        """Whether the request passes through."""
        return self.redirect_to is None


ALLOW = GateDecision()


def is_skipped(path: str) -> bool:
    """Whether the gate ignores this path entirely."""
    return path.startswith(SKIPPED_PREFIXES) or path.endswith(SKIPPED_SUFFIXES)


def is_protected(path: str) -> bool:
    """Whether this path needs a session."""
    return path.startswith(PROTECTED_PREFIXES)


def login_redirect(path: str) -> str:
    """Login URL that returns to ``path`` after signing in."""
    return f"{LOGIN_PATH}?callbackUrl={quote(path, safe='/')}"


def decide(path: str, authenticated: bool) -> GateDecision:
    """Decide what to do with a request.

    Args:
        path: Request path.
        authenticated: Whether the request carries a valid session token.

    Returns:
        ALLOW, or a decision redirecting to the login page or dashboard.
    """
    if is_skipped(path):
        return ALLOW

    if is_protected(path) and not authenticated:
        return GateDecision(redirect_to=login_redirect(path))

    if path in AUTH_ROUTES and authenticated:
        return GateDecision(redirect_to=HOME_PATH)

    return ALLOW


class RequestGateMiddleware(BaseHTTPMiddleware):
    """Redirects anonymous users away from protected pages and signed-in
    users away from the login and signup pages."""

    def __init__(
        self,
        app: ASGIApp,
        cookie_name: str = "session",
    ) -> None:
        """Initialize the gate.

        Args:
            app: The ASGI application.
            cookie_name: Name of the session cookie.
        """
        super().__init__(app)
        self.cookie_name = cookie_name

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        """Apply the gate decision to the request."""
        path = request.url.path
        if is_skipped(path):
            return await call_next(request)

        codec: SessionCodec = request.app.state.session_codec
        claims = codec.verify(request.cookies.get(self.cookie_name))
        decision = decide(path, authenticated=claims is not None)

        if not decision.allowed:
            logger.debug("gate_redirect", path=path, location=decision.redirect_to)
            return RedirectResponse(decision.redirect_to, status_code=307)

        return await call_next(request)
