"""Dependency injection and application lifespan management."""

from __future__ import annotations

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import TYPE_CHECKING, Annotated

import structlog
from fastapi import Depends, HTTPException, Request, Response

from inkwell.adapters.auth.postgres import PostgresAuthRepository
from inkwell.adapters.db.app_db import AppDatabase
from inkwell.adapters.db.memory import InMemoryStore
from inkwell.adapters.db.seed import seed_defaults
from inkwell.adapters.posts.postgres import PostgresPostRepository
from inkwell.adapters.rbac.postgres import PostgresRbacRepository
from inkwell.core.auth.context import RequestContext
from inkwell.core.auth.password import BCRYPT_ROUNDS
from inkwell.core.auth.repository import AuthRepository
from inkwell.core.auth.service import AuthService
from inkwell.core.auth.session import DEFAULT_SECRET, SESSION_TTL_DAYS, SessionCodec, SessionConfig
from inkwell.core.auth.types import CurrentUser
from inkwell.core.exceptions import ConfigurationError
from inkwell.core.posts.repository import PostRepository
from inkwell.core.posts.service import PostService
from inkwell.core.rbac.repository import RbacRepository
from inkwell.core.rbac.service import RoleService
from inkwell.core.users.service import UserService
from inkwell.entrypoints.api.transport import CookieSessionTransport
from inkwell.logging import configure_logging

if TYPE_CHECKING:
    from fastapi import FastAPI

logger = structlog.get_logger()


class Settings:
    """Application settings loaded from environment."""

    def __init__(self) -> None:
        """Load settings from environment variables."""
        self.database_url = os.getenv("DATABASE_URL", "postgresql://localhost:5432/inkwell")
        self.store = os.getenv("STORE", "postgres").lower()
        self.environment = os.getenv("ENVIRONMENT", "development").lower()
        self.log_level = os.getenv("LOG_LEVEL", "INFO")

        # Session settings
        self.session_secret = os.getenv("SESSION_SECRET", DEFAULT_SECRET)
        self.session_ttl_days = int(os.getenv("SESSION_TTL_DAYS", str(SESSION_TTL_DAYS)))
        self.session_cookie_name = os.getenv("SESSION_COOKIE_NAME", "session")
        self.bcrypt_rounds = int(os.getenv("BCRYPT_ROUNDS", str(BCRYPT_ROUNDS)))

    @property
    def is_production(self) -> bool:
        """Whether the app runs in production."""
        return self.environment == "production"

    def session_config(self) -> SessionConfig:
        """Build the immutable session codec configuration.

        Raises:
            ConfigurationError: If production runs with the default secret.
        """
        if self.is_production and self.session_secret == DEFAULT_SECRET:
            raise ConfigurationError("SESSION_SECRET must be set in production")
        return SessionConfig(
            secret=self.session_secret,
            ttl=timedelta(days=self.session_ttl_days),
        )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan - setup and teardown.

    This context manager handles:
    - Logging configuration
    - Session codec construction
    - Store selection (PostgreSQL pool, or an in-memory store seeded with
      the standard roles)
    - Service wiring
    """
    settings: Settings = app.state.settings
    configure_logging(settings.log_level, json=settings.is_production)

    codec = SessionCodec(settings.session_config())

    app_db: AppDatabase | None = None
    auth_repo: AuthRepository
    rbac_repo: RbacRepository
    post_repo: PostRepository

    preset: InMemoryStore | None = getattr(app.state, "store", None)
    if preset is not None or settings.store == "memory":
        store = preset
        if store is None:
            store = InMemoryStore()
            await seed_defaults(store)
        app.state.store = store
        auth_repo, rbac_repo, post_repo = store, store, store
    elif settings.store == "postgres":
        app_db = AppDatabase(settings.database_url)
        await app_db.connect()
        auth_repo = PostgresAuthRepository(app_db)
        rbac_repo = PostgresRbacRepository(app_db)
        post_repo = PostgresPostRepository(app_db)
    else:
        raise ConfigurationError(f"Unknown STORE: {settings.store}")

    # Store in app state
    app.state.app_db = app_db
    app.state.session_codec = codec
    app.state.auth_repo = auth_repo
    app.state.auth_service = AuthService(auth_repo, codec, bcrypt_rounds=settings.bcrypt_rounds)
    app.state.role_service = RoleService(rbac_repo)
    app.state.user_service = UserService(auth_repo, rbac_repo)
    app.state.post_service = PostService(post_repo)

    logger.info("app_started", environment=settings.environment, store=settings.store)

    yield

    if app_db is not None:
        await app_db.close()


def get_settings(request: Request) -> Settings:
    """Get application settings from app state."""
    settings: Settings = request.app.state.settings
    return settings


def get_session_codec(request: Request) -> SessionCodec:
    """Get the session codec from app state."""
    codec: SessionCodec = request.app.state.session_codec
    return codec


def get_request_context(
    request: Request,
    response: Response,
    settings: Annotated[Settings, Depends(get_settings)],
    codec: Annotated[SessionCodec, Depends(get_session_codec)],
) -> RequestContext:
    """Create the per-request context.

    FastAPI caches dependencies per request, so every dependency and the
    route handler share one context and one current-user lookup.
    """
    transport = CookieSessionTransport(
        request,
        response,
        cookie_name=settings.session_cookie_name,
        secure=settings.is_production,
    )
    return RequestContext(codec, request.app.state.auth_repo, transport)


async def require_current_user(
    ctx: Annotated[RequestContext, Depends(get_request_context)],
) -> CurrentUser:
    """Get the current user or fail the API call with 401.

    Raises:
        HTTPException: If the request carries no valid session for an active user.
    """
    user = await ctx.get_current_user()
    if user is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user


def get_auth_service(request: Request) -> AuthService:
    """Get auth service from app state."""
    service: AuthService = request.app.state.auth_service
    return service


def get_role_service(request: Request) -> RoleService:
    """Get role service from app state."""
    service: RoleService = request.app.state.role_service
    return service


def get_user_service(request: Request) -> UserService:
    """Get user service from app state."""
    service: UserService = request.app.state.user_service
    return service


def get_post_service(request: Request) -> PostService:
    """Get post service from app state."""
    service: PostService = request.app.state.post_service
    return service


RequestContextDep = Annotated[RequestContext, Depends(get_request_context)]
