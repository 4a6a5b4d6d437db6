"""Cookie-backed session transport."""

from starlette.requests import Request
from starlette.responses import Response


class CookieSessionTransport:
    """Reads the session cookie from the request and writes it to the response.

    The cookie is HttpOnly, SameSite=Lax and scoped to ``/``. ``Secure`` is
    set in production.
    """

    def __init__(
        self,
        request: Request,
        response: Response,
        cookie_name: str = "session",
        secure: bool = False,
    ) -> None:
        """Bind the transport to one request/response pair.

        Args:
            request: Incoming request carrying the presented cookie.
            response: Outgoing response that receives cookie changes.
            cookie_name: Name of the session cookie.
            secure: Whether to mark the cookie Secure.
        """
        self._request = request
        self._response = response
        self._cookie_name = cookie_name
        self._secure = secure
        self._token: str | None = request.cookies.get(cookie_name) or None

    def get(self) -> str | None:
        """Return the current token for this request."""
        return self._token

    def set(self, token: str, max_age: int) -> None:
        """Set the session cookie on the response."""
        self._token = token
        self._response.set_cookie(
            key=self._cookie_name,
            value=token,
            max_age=max_age,
            path="/",
            httponly=True,
            samesite="lax",
            secure=self._secure,
        )

    def clear(self) -> None:
        """Expire the session cookie."""
        self._token = None
        self._response.delete_cookie(
            key=self._cookie_name,
            path="/",
            httponly=True,
            samesite="lax",
            secure=self._secure,
        )
