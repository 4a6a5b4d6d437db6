"""API route modules."""

from fastapi import APIRouter

from inkwell.entrypoints.api.routes.auth import router as auth_router
from inkwell.entrypoints.api.routes.pages import router as pages_router
from inkwell.entrypoints.api.routes.posts import router as posts_router
from inkwell.entrypoints.api.routes.settings import router as settings_router
from inkwell.entrypoints.api.routes.users import router as users_router

# Create main API router
api_router = APIRouter()

# Include all route modules
api_router.include_router(auth_router)
api_router.include_router(users_router)
api_router.include_router(settings_router)
api_router.include_router(posts_router)

__all__ = ["api_router", "pages_router"]
