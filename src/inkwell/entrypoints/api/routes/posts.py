"""Post routes."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel

from inkwell.core.posts.service import DASHBOARD_PAGE_SIZE, PUBLIC_PAGE_SIZE, PostService
from inkwell.entrypoints.api.deps import RequestContextDep, get_post_service
from inkwell.entrypoints.api.responses import result_body

router = APIRouter(prefix="/posts", tags=["posts"])


class PostBody(BaseModel):
    """Post create/update form."""

    title: Any = None
    content: Any = None
    excerpt: Any = None
    status: Any = None


class PostStatusBody(BaseModel):
    """New post status."""

    status: Any = None


@router.get("/published")
async def list_published(
    response: Response,
    service: Annotated[PostService, Depends(get_post_service)],
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = PUBLIC_PAGE_SIZE,
) -> dict[str, Any]:
    """List published posts. Public."""
    return result_body(await service.list_published(page, limit), response, key="data")


@router.get("")
async def list_posts(
    response: Response,
    ctx: RequestContextDep,
    service: Annotated[PostService, Depends(get_post_service)],
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = DASHBOARD_PAGE_SIZE,
) -> dict[str, Any]:
    """List posts visible on the dashboard."""
    result = await service.list_for_dashboard(ctx, page, limit)
    return result_body(result, response, key="data")


@router.get("/{post_id}")
async def get_post(
    post_id: str,
    response: Response,
    ctx: RequestContextDep,
    service: Annotated[PostService, Depends(get_post_service)],
) -> dict[str, Any]:
    """Get a single post."""
    return result_body(await service.get_post(ctx, post_id), response, key="post")


@router.post("")
async def create_post(
    body: PostBody,
    response: Response,
    ctx: RequestContextDep,
    service: Annotated[PostService, Depends(get_post_service)],
) -> dict[str, Any]:
    """Create a post. Requires posts:create."""
    result = await service.create_post(
        ctx,
        title=body.title,
        content=body.content,
        excerpt=body.excerpt,
        status=body.status,
    )
    return result_body(result, response, status_code=201, key="post")


@router.put("/{post_id}")
async def update_post(
    post_id: str,
    body: PostBody,
    response: Response,
    ctx: RequestContextDep,
    service: Annotated[PostService, Depends(get_post_service)],
) -> dict[str, Any]:
    """Edit a post. Allowed for its author or with posts:update."""
    result = await service.update_post(
        ctx,
        post_id,
        title=body.title,
        content=body.content,
        excerpt=body.excerpt,
        status=body.status,
    )
    return result_body(result, response, key="post")


@router.patch("/{post_id}/status")
async def update_post_status(
    post_id: str,
    body: PostStatusBody,
    response: Response,
    ctx: RequestContextDep,
    service: Annotated[PostService, Depends(get_post_service)],
) -> dict[str, Any]:
    """Change a post's status."""
    result = await service.update_post_status(ctx, post_id, body.status)
    return result_body(result, response, key="post")


@router.delete("/{post_id}")
async def delete_post(
    post_id: str,
    response: Response,
    ctx: RequestContextDep,
    service: Annotated[PostService, Depends(get_post_service)],
) -> dict[str, Any]:
    """Delete a post. Allowed for its author or with posts:delete."""
    result = await service.delete_post(ctx, post_id)
    return result_body(result, response)
