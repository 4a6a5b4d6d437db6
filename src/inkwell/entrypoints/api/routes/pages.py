"""Page view models.

Each page returns the data its template needs. Pages under ``/dashboard``
re-check the current user: the gate only proves a valid token, so a user
suspended since signing in is sent back to the login page here.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query, Response
from fastapi.responses import RedirectResponse

from inkwell.core.auth.types import CurrentUser
from inkwell.core.posts.service import DASHBOARD_PAGE_SIZE, PUBLIC_PAGE_SIZE, PostService
from inkwell.core.rbac.service import RoleService
from inkwell.core.results import Failure
from inkwell.core.users.service import STATS_PERMISSIONS, UserService
from inkwell.entrypoints.api.deps import (
    RequestContextDep,
    Settings,
    get_settings,
    get_post_service,
    get_role_service,
    get_user_service,
)
from inkwell.entrypoints.api.middleware.gate import HOME_PATH, LOGIN_PATH
from inkwell.entrypoints.api.responses import failure_body, safe_callback_url

router = APIRouter(tags=["pages"])

SettingsDep = Annotated[Settings, Depends(get_settings)]


def _to_login(settings: Settings) -> RedirectResponse:
    # The token still verifies for a suspended or deleted user.
    redirect = RedirectResponse(LOGIN_PATH, status_code=307)
    redirect.delete_cookie(settings.session_cookie_name, path="/")
    return redirect


def _to_dashboard() -> RedirectResponse:
    return RedirectResponse(HOME_PATH, status_code=307)


def _user_view(user: CurrentUser) -> dict[str, Any]:
    return {
        **user.model_dump(mode="json"),
        "permissions": [f"{p.resource}:{p.action}" for p in user.permissions],
    }


@router.get("/", response_model=None)
async def home(
    response: Response,
    ctx: RequestContextDep,
    posts: Annotated[PostService, Depends(get_post_service)],
    page: Annotated[int, Query(ge=1)] = 1,
) -> dict[str, Any]:
    """Public home page: published posts and the signed-in user, if any."""
    user = await ctx.get_current_user()
    result = await posts.list_published(page, PUBLIC_PAGE_SIZE)
    if isinstance(result, Failure):
        return failure_body(result, response)
    return {
        "page": "home",
        "user": _user_view(user) if user else None,
        "posts": result.value,
    }


@router.get("/posts/{post_id}", response_model=None)
async def post_page(
    post_id: str,
    response: Response,
    ctx: RequestContextDep,
    posts: Annotated[PostService, Depends(get_post_service)],
) -> dict[str, Any]:
    """Public post page. Only published posts are shown."""
    result = await posts.get_published_post(post_id)
    if isinstance(result, Failure):
        return failure_body(result, response)

    user = await ctx.get_current_user()
    return {
        "page": "post",
        "user": _user_view(user) if user else None,
        "post": result.value,
    }


@router.get("/login", response_model=None)
async def login_page(
    callback_url: Annotated[str | None, Query(alias="callbackUrl")] = None,
) -> dict[str, Any]:
    """Login form metadata."""
    return {"page": "login", "callback_url": safe_callback_url(callback_url, HOME_PATH)}


@router.get("/signup", response_model=None)
async def signup_page() -> dict[str, Any]:
    """Signup form metadata."""
    return {"page": "signup", "callback_url": HOME_PATH}


@router.get("/dashboard", response_model=None)
async def dashboard(
    response: Response,
    ctx: RequestContextDep,
    settings: SettingsDep,
    users: Annotated[UserService, Depends(get_user_service)],
) -> dict[str, Any] | RedirectResponse:
    """Dashboard overview: navigation permissions and, for staff, site totals."""
    user = await ctx.get_current_user()
    if user is None:
        return _to_login(settings)

    stats = None
    if await ctx.has_any_permission(STATS_PERMISSIONS):
        result = await users.get_dashboard_stats(ctx)
        if isinstance(result, Failure):
            return failure_body(result, response)
        stats = result.value

    return {
        "page": "dashboard",
        "user": _user_view(user),
        "stats": stats,
        "can_view_users": await ctx.has_permission("users", "read"),
        "can_manage_settings": await ctx.has_permission("settings", "manage"),
        "can_create_posts": await ctx.has_permission("posts", "create"),
    }


@router.get("/dashboard/posts", response_model=None)
async def dashboard_posts(
    response: Response,
    ctx: RequestContextDep,
    settings: SettingsDep,
    posts: Annotated[PostService, Depends(get_post_service)],
    page: Annotated[int, Query(ge=1)] = 1,
) -> dict[str, Any] | RedirectResponse:
    """Posts table: every post with posts:read, otherwise the user's own."""
    user = await ctx.get_current_user()
    if user is None:
        return _to_login(settings)

    result = await posts.list_for_dashboard(ctx, page, DASHBOARD_PAGE_SIZE)
    if isinstance(result, Failure):
        return failure_body(result, response)

    return {
        "page": "dashboard_posts",
        "posts": result.value,
        "can_read_all": await ctx.has_permission("posts", "read"),
        "can_create_posts": await ctx.has_permission("posts", "create"),
    }


@router.get("/dashboard/users", response_model=None)
async def dashboard_users(
    response: Response,
    ctx: RequestContextDep,
    settings: SettingsDep,
    users: Annotated[UserService, Depends(get_user_service)],
    roles: Annotated[RoleService, Depends(get_role_service)],
) -> dict[str, Any] | RedirectResponse:
    """Users table with the role choices. Requires users:read."""
    user = await ctx.get_current_user()
    if user is None:
        return _to_login(settings)
    if not await ctx.has_permission("users", "read"):
        return _to_dashboard()

    result = await users.list_users(ctx)
    if isinstance(result, Failure):
        return failure_body(result, response)

    role_choices = await roles.list_roles(ctx)
    return {
        "page": "dashboard_users",
        "users": result.value,
        "roles": (
            [{"id": r.id, "name": r.name} for r in role_choices.value]
            if not isinstance(role_choices, Failure)
            else []
        ),
    }


@router.get("/dashboard/settings", response_model=None)
async def dashboard_settings(
    response: Response,
    ctx: RequestContextDep,
    settings: SettingsDep,
    roles: Annotated[RoleService, Depends(get_role_service)],
) -> dict[str, Any] | RedirectResponse:
    """Role/permission matrix. Requires settings:manage."""
    user = await ctx.get_current_user()
    if user is None:
        return _to_login(settings)
    if not await ctx.has_permission("settings", "manage"):
        return _to_dashboard()

    role_list = await roles.list_roles(ctx)
    if isinstance(role_list, Failure):
        return failure_body(role_list, response)
    permissions = await roles.list_permissions(ctx)
    if isinstance(permissions, Failure):
        return failure_body(permissions, response)

    return {
        "page": "dashboard_settings",
        "roles": role_list.value,
        "permissions": permissions.value,
    }


@router.get("/dashboard/profile", response_model=None)
async def dashboard_profile(
    ctx: RequestContextDep,
    settings: SettingsDep,
) -> dict[str, Any] | RedirectResponse:
    """The current user's profile."""
    user = await ctx.get_current_user()
    if user is None:
        return _to_login(settings)
    return {"page": "dashboard_profile", "user": _user_view(user)}
