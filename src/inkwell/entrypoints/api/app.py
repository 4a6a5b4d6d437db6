"""FastAPI application definition."""

from __future__ import annotations

from fastapi import FastAPI

from inkwell import __version__
from inkwell.adapters.db.memory import InMemoryStore
from inkwell.entrypoints.api.deps import Settings, lifespan
from inkwell.entrypoints.api.middleware.gate import RequestGateMiddleware
from inkwell.entrypoints.api.routes import api_router, pages_router


def create_app(settings: Settings | None = None, store: InMemoryStore | None = None) -> FastAPI:
    """Build the application.

    Args:
        settings: Settings to use; read from the environment when omitted.
        store: Pre-populated in-memory store to serve from instead of
            the store named in the settings.

    Returns:
        The configured FastAPI application.
    """
    settings = settings or Settings()

    app = FastAPI(
        title="inkwell",
        description="Blog with role-based access control",
        version=__version__,
        lifespan=lifespan,
        redirect_slashes=False,
    )
    app.state.settings = settings
    if store is not None:
        app.state.store = store

    app.add_middleware(RequestGateMiddleware, cookie_name=settings.session_cookie_name)

    app.include_router(api_router, prefix="/api")
    app.include_router(pages_router)

    @app.get("/api/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()
