"""Pytest configuration and fixtures for agentsites.

Environment defaults are set before any agentsites import so Settings
validates. Repository and API tests run against a per-test SQLite file
(aiosqlite) with tables from Base.metadata.create_all.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./agentsites-test.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-agentsites-only")
os.environ.setdefault("TELEMETRY_ENABLED", "false")
os.environ.setdefault("UBER_ADMIN_EMAILS", "root@agentsites.test")
os.environ.setdefault("PROPAGATION_MAX_CONCURRENCY", "1")

from collections.abc import AsyncIterator  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from agentsites.application.dtos.actor import Actor  # noqa: E402
from agentsites.core.config import get_settings  # noqa: E402
from agentsites.core.limiter import limiter  # noqa: E402
from agentsites.infrastructure.persistence import models  # noqa: E402, F401
from agentsites.infrastructure.persistence.database import (  # noqa: E402
    Base,
    get_db,
    get_db_transactional,
    get_session_factory,
)
from agentsites.infrastructure.persistence.models import AgentSite, UserRole  # noqa: E402
from agentsites.infrastructure.security.jwt import create_access_token  # noqa: E402
from agentsites.main import app  # noqa: E402

UBER_EMAIL = "root@agentsites.test"


@pytest.fixture
def uber_actor() -> Actor:
    return Actor(user_id="uber-1", email=UBER_EMAIL, is_uber_admin=True)


@pytest.fixture
def plain_actor() -> Actor:
    return Actor(user_id="user-1", email="user1@example.com", is_uber_admin=False)


@pytest.fixture
async def engine(tmp_path):
    """Async engine on a fresh SQLite file with all tables created."""
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'agentsites.db'}")
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )


@pytest.fixture
async def db_session(session_factory) -> AsyncIterator[AsyncSession]:
    """Session for repository tests. Callers commit explicitly when needed."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory) -> AsyncIterator[AsyncClient]:
    """Async HTTP client against the FastAPI app with DB dependencies bound to the test engine."""

    async def _get_db() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    async def _get_db_transactional() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            async with session.begin():
                yield session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_db_transactional] = _get_db_transactional
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    limiter.enabled = False
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
    limiter.enabled = True


def _auth_headers(user_id: str, email: str | None = None) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user_id, email)}"}


@pytest.fixture
def uber_headers() -> dict[str, str]:
    return _auth_headers("uber-1", UBER_EMAIL)


@pytest.fixture
def headers_for():
    """Factory: bearer headers for a token signed with the test SECRET_KEY."""
    return _auth_headers


@pytest.fixture
def make_site(session_factory):
    """Factory: insert a site directly and return its id."""

    async def _make(
        display_name: str,
        *,
        is_master: bool = False,
        slug: str | None = None,
        owner_user_id: str | None = None,
    ) -> str:
        async with session_factory() as session:
            async with session.begin():
                site = AgentSite(
                    display_name=display_name,
                    site_slug=slug or display_name.lower().replace(" ", "-"),
                    is_master=is_master,
                    owner_user_id=owner_user_id,
                )
                session.add(site)
                await session.flush()
                return site.id

    return _make


@pytest.fixture
def make_role(session_factory):
    """Factory: insert a role assignment directly (no audit entry)."""

    async def _make(user_id: str, role: str, site_id: str | None) -> None:
        async with session_factory() as session:
            async with session.begin():
                session.add(UserRole(user_id=user_id, role=role, site_id=site_id))

    return _make


@pytest.fixture(autouse=True)
def _settings_cache():
    """Settings come from the env defaults above; reset the cache around each test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
