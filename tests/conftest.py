"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterator
from functools import lru_cache
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from inkwell.adapters.db.memory import InMemoryStore
from inkwell.adapters.db.seed import Seed, seed_defaults
from inkwell.core.auth.context import RequestContext
from inkwell.core.auth.password import hash_password
from inkwell.core.auth.session import SessionCodec, SessionConfig
from inkwell.core.auth.transport import MemoryTransport
from inkwell.core.auth.types import User, UserStatus
from inkwell.entrypoints.api.app import create_app
from inkwell.entrypoints.api.deps import Settings

TEST_SECRET = "test-secret-0123456789abcdef0123456789"  # pragma: allowlist secret
TEST_PASSWORD = "Passw0rd!"  # pragma: allowlist secret
FAST_ROUNDS = 4


async def populate(store: InMemoryStore) -> Seed:
    """Create the standard permissions and the admin/moderator/user roles."""
    return await seed_defaults(store)


async def add_user(
    store: InMemoryStore,
    seed: Seed,
    role: str = "user",
    email: str | None = None,
    name: str = "Test User",
    status: UserStatus = UserStatus.ACTIVE,
) -> User:
    """Create a user with the test password."""
    user = await store.create_user(
        email=email or f"{uuid4().hex[:10]}@example.com",
        name=name,
        password_hash=_password_hash(),
        role_id=seed.roles[role].id,
    )
    if status != UserStatus.ACTIVE:
        updated = await store.update_user(user.id, status=status)
        assert updated is not None
        user = updated
    return user


@lru_cache(maxsize=1)
def _password_hash() -> str:
    return hash_password(TEST_PASSWORD, rounds=FAST_ROUNDS)


@pytest.fixture
def password() -> str:
    """Plain text password of every user created by the fixtures."""
    return TEST_PASSWORD


@pytest.fixture
def codec() -> SessionCodec:
    """Session codec with a fixed test secret."""
    return SessionCodec(SessionConfig(secret=TEST_SECRET))


@pytest.fixture
def store() -> InMemoryStore:
    """Empty in-memory store."""
    return InMemoryStore()


@pytest.fixture
async def seed(store: InMemoryStore) -> Seed:
    """Store populated with the standard roles and permissions."""
    return await populate(store)


@pytest.fixture
def make_user(store: InMemoryStore, seed: Seed) -> Callable[..., Awaitable[User]]:
    """Factory creating users in the seeded store."""

    async def _make(**kwargs: object) -> User:
        return await add_user(store, seed, **kwargs)  # type: ignore[arg-type]

    return _make


@pytest.fixture
def context_for(
    codec: SessionCodec, store: InMemoryStore
) -> Callable[[User | None], RequestContext]:
    """Factory building a fresh request context, signed in as ``user`` if given."""

    def _context(user: User | None = None) -> RequestContext:
        token = codec.issue(user.id, "user").token if user else None
        return RequestContext(codec, store, MemoryTransport(token))

    return _context


# HTTP fixtures. TestClient runs the app on its own loop, so the store is
# populated synchronously before the client starts.
@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Settings for an in-memory development app."""
    monkeypatch.setenv("SESSION_SECRET", TEST_SECRET)
    monkeypatch.setenv("STORE", "memory")
    monkeypatch.setenv("ENVIRONMENT", "development")
    monkeypatch.setenv("BCRYPT_ROUNDS", str(FAST_ROUNDS))
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    return Settings()


@pytest.fixture
def app_store() -> tuple[InMemoryStore, Seed]:
    """Seeded store served by the HTTP client."""
    store = InMemoryStore()
    return store, asyncio.run(populate(store))


@pytest.fixture
def client(settings: Settings, app_store: tuple[InMemoryStore, Seed]) -> Iterator[TestClient]:
    """Test client for an app serving ``app_store``."""
    app = create_app(settings, store=app_store[0])
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def app_user(app_store: tuple[InMemoryStore, Seed]) -> Callable[..., User]:
    """Factory creating users in the store served by ``client``."""

    def _make(**kwargs: object) -> User:
        store, seed = app_store
        return asyncio.run(add_user(store, seed, **kwargs))  # type: ignore[arg-type]

    return _make


@pytest.fixture
def login_as(client: TestClient) -> Callable[[User], None]:
    """Sign ``client`` in as a user created by ``app_user``."""

    def _login(user: User) -> None:
        response = client.post(
            "/api/auth/login",
            json={"email": user.email, "password": TEST_PASSWORD},
        )
        assert response.status_code == 200, response.text

    return _login
