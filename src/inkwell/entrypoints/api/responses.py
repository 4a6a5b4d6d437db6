"""Mapping of core results onto HTTP responses."""

from typing import Any

from fastapi import Response

from inkwell.core.results import ErrorKind, Failure, Result

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.INVALID_CREDENTIALS: 401,
    ErrorKind.UNAUTHENTICATED: 401,
    ErrorKind.ACCOUNT_SUSPENDED: 403,
    ErrorKind.ACCOUNT_INACTIVE: 403,
    ErrorKind.PERMISSION_DENIED: 403,
    ErrorKind.FORBIDDEN_SELF_DELETE: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.EMAIL_TAKEN: 409,
    ErrorKind.CONFLICT: 409,
    ErrorKind.CONFIGURATION: 500,
    ErrorKind.STORE: 500,
}


def failure_body(failure: Failure, response: Response) -> dict[str, Any]:
    """Set the status for a failure and return its JSON payload."""
    response.status_code = STATUS_BY_KIND[failure.kind]
    return failure.to_dict()


def result_body(
    result: Result[Any],
    response: Response,
    status_code: int = 200,
    key: str = "data",
) -> dict[str, Any]:
    """Render a result as ``{"success": true, <key>: value}`` or a failure payload.

    A success without a value renders as ``{"success": true}``.
    """
    if isinstance(result, Failure):
        return failure_body(result, response)
    response.status_code = status_code
    if result.value is None:
        return {"success": True}
    return {"success": True, key: result.value}


def safe_callback_url(url: str | None, default: str = "/dashboard") -> str:
    """Return ``url`` if it is a local absolute path, otherwise ``default``."""
    if url and url.startswith("/") and not url.startswith("//") and "\\" not in url:
        return url
    return default
