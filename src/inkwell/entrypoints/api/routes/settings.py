"""Role and permission administration routes."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel

from inkwell.core.rbac.service import RoleService
from inkwell.entrypoints.api.deps import RequestContextDep, get_role_service
from inkwell.entrypoints.api.responses import result_body

router = APIRouter(prefix="/settings", tags=["settings"])


class RolePermissionsUpdate(BaseModel):
    """The complete new permission set of a role."""

    permission_ids: Any = None


class RoleCreate(BaseModel):
    """New role."""

    name: Any = None
    description: str | None = None


class PermissionCreate(BaseModel):
    """New permission."""

    name: str | None = None
    resource: Any = None
    action: Any = None
    description: str | None = None


@router.get("/roles")
async def list_roles(
    response: Response,
    ctx: RequestContextDep,
    service: Annotated[RoleService, Depends(get_role_service)],
) -> dict[str, Any]:
    """List roles with their permissions and user counts."""
    return result_body(await service.list_roles(ctx), response, key="roles")


@router.get("/permissions")
async def list_permissions(
    response: Response,
    ctx: RequestContextDep,
    service: Annotated[RoleService, Depends(get_role_service)],
) -> dict[str, Any]:
    """List all permissions."""
    return result_body(await service.list_permissions(ctx), response, key="permissions")


@router.put("/roles/{role_id}/permissions")
async def update_role_permissions(
    role_id: str,
    body: RolePermissionsUpdate,
    response: Response,
    ctx: RequestContextDep,
    service: Annotated[RoleService, Depends(get_role_service)],
) -> dict[str, Any]:
    """Replace the permission set of a role."""
    permission_ids = body.permission_ids if body.permission_ids is not None else []
    result = await service.update_role_permissions(ctx, role_id, permission_ids)
    return result_body(result, response, key="permissions")


@router.post("/roles")
async def create_role(
    body: RoleCreate,
    response: Response,
    ctx: RequestContextDep,
    service: Annotated[RoleService, Depends(get_role_service)],
) -> dict[str, Any]:
    """Create a role."""
    result = await service.create_role(ctx, body.name, body.description)
    return result_body(result, response, status_code=201, key="role")


@router.post("/permissions")
async def create_permission(
    body: PermissionCreate,
    response: Response,
    ctx: RequestContextDep,
    service: Annotated[RoleService, Depends(get_role_service)],
) -> dict[str, Any]:
    """Create a permission."""
    result = await service.create_permission(
        ctx,
        name=body.name,
        resource=body.resource,
        action=body.action,
        description=body.description,
    )
    return result_body(result, response, status_code=201, key="permission")
