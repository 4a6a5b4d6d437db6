"""User administration and profile routes."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel

from inkwell.core.users.service import UserService
from inkwell.entrypoints.api.deps import RequestContextDep, get_user_service
from inkwell.entrypoints.api.responses import result_body

router = APIRouter(prefix="/users", tags=["users"])


class StatusUpdate(BaseModel):
    """New account status."""

    status: Any = None


class RoleUpdate(BaseModel):
    """New role for a user."""

    role_id: Any = None


class ProfileUpdate(BaseModel):
    """Profile fields the user may change."""

    name: Any = None
    phone: Any = None
    avatar: Any = None


@router.get("")
async def list_users(
    response: Response,
    ctx: RequestContextDep,
    service: Annotated[UserService, Depends(get_user_service)],
) -> dict[str, Any]:
    """List all users. Requires users:read."""
    return result_body(await service.list_users(ctx), response, key="users")


# Registered before the /{user_id} routes so "me" is not taken for an ID
@router.patch("/me")
async def update_profile(
    body: ProfileUpdate,
    response: Response,
    ctx: RequestContextDep,
    service: Annotated[UserService, Depends(get_user_service)],
) -> dict[str, Any]:
    """Update the current user's profile."""
    result = await service.update_profile(
        ctx, name=body.name, phone=body.phone, avatar=body.avatar
    )
    return result_body(result, response, key="user")


@router.patch("/{user_id}/status")
async def update_user_status(
    user_id: str,
    body: StatusUpdate,
    response: Response,
    ctx: RequestContextDep,
    service: Annotated[UserService, Depends(get_user_service)],
) -> dict[str, Any]:
    """Activate, deactivate or suspend a user. Requires users:update."""
    result = await service.update_user_status(ctx, user_id, body.status)
    return result_body(result, response, key="user")


@router.patch("/{user_id}/role")
async def update_user_role(
    user_id: str,
    body: RoleUpdate,
    response: Response,
    ctx: RequestContextDep,
    service: Annotated[UserService, Depends(get_user_service)],
) -> dict[str, Any]:
    """Move a user to another role. Requires users:update."""
    result = await service.update_user_role(ctx, user_id, body.role_id)
    return result_body(result, response, key="user")


@router.delete("/{user_id}")
async def delete_user(
    user_id: str,
    response: Response,
    ctx: RequestContextDep,
    service: Annotated[UserService, Depends(get_user_service)],
) -> dict[str, Any]:
    """Delete a user. Requires users:delete."""
    result = await service.delete_user(ctx, user_id)
    return result_body(result, response)
