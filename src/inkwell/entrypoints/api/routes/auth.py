"""Auth API routes for signup, login, logout and the current user."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel

from inkwell.core.auth.service import AuthService
from inkwell.core.auth.types import CurrentUser
from inkwell.core.results import Failure
from inkwell.entrypoints.api.deps import (
    RequestContextDep,
    get_auth_service,
    require_current_user,
)
from inkwell.entrypoints.api.middleware.gate import HOME_PATH, LOGIN_PATH
from inkwell.entrypoints.api.responses import failure_body, safe_callback_url

router = APIRouter(prefix="/auth", tags=["auth"])


# Request models. Fields stay loose so the core reports field errors itself.
class SignupRequest(BaseModel):
    """Signup form body."""

    name: Any = None
    email: Any = None
    password: Any = None
    phone: Any = None


class LoginRequest(BaseModel):
    """Login form body."""

    email: Any = None
    password: Any = None
    callback_url: str | None = None


@router.post("/signup", status_code=201)
async def signup(
    body: SignupRequest,
    response: Response,
    ctx: RequestContextDep,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> dict[str, Any]:
    """Register a new user and sign them in.

    Args:
        body: Signup form.
        response: Outgoing response receiving the session cookie.
        ctx: Request context holding the session transport.
        service: Auth service.

    Returns:
        Redirect target on success, or the failure payload.
    """
    result = await service.signup(
        ctx.transport,
        name=body.name,
        email=body.email,
        password=body.password,
        phone=body.phone,
    )
    if isinstance(result, Failure):
        return failure_body(result, response)
    return {"success": True, "redirect_to": HOME_PATH}


@router.post("/login")
async def login(
    body: LoginRequest,
    response: Response,
    ctx: RequestContextDep,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> dict[str, Any]:
    """Verify credentials and sign the user in.

    Args:
        body: Login form with an optional callback URL.
        response: Outgoing response receiving the session cookie.
        ctx: Request context holding the session transport.
        service: Auth service.

    Returns:
        Redirect target on success, or the failure payload.
    """
    result = await service.login(ctx.transport, email=body.email, password=body.password)
    if isinstance(result, Failure):
        return failure_body(result, response)
    return {"success": True, "redirect_to": safe_callback_url(body.callback_url, HOME_PATH)}


@router.post("/logout")
async def logout(
    ctx: RequestContextDep,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> dict[str, Any]:
    """Clear the session cookie. Safe to call without a session."""
    service.logout(ctx.transport)
    return {"success": True, "redirect_to": LOGIN_PATH}


@router.get("/me")
async def me(
    user: Annotated[CurrentUser, Depends(require_current_user)],
) -> dict[str, Any]:
    """Get the current user with their flattened permissions."""
    return {
        "success": True,
        "user": user,
        "permissions": [f"{p.resource}:{p.action}" for p in user.permissions],
    }
