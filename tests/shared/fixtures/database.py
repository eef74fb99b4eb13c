"""
Database fixtures for credential store tests.

Two backends:
- ``sqlite_engine`` / ``db_session``: in-memory SQLite via aiosqlite, used
  by default everywhere.
- ``postgres_container`` / ``pg_engine`` / ``pg_db_session``: an ephemeral
  PostgreSQL from Testcontainers, for ``@pytest.mark.integration`` tests.

Usage:
    from tests.shared.fixtures.database import db_session

    async def test_something(db_session):
        repo = UserRepositorySQLAlchemy(db_session)
        await repo.create(user)
"""

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool
from testcontainers.postgres import PostgresContainer

from warden_identity.infrastructure.persistence.sqlalchemy import IdentityBase

SQLITE_URL = "sqlite+aiosqlite://"

# Use same Postgres version as production
POSTGRES_IMAGE = "postgres:16-alpine"


@pytest_asyncio.fixture
async def sqlite_engine():
    """In-memory SQLite engine with the identity schema created."""
    engine = create_async_engine(
        SQLITE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(IdentityBase.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_maker(sqlite_engine) -> async_sessionmaker[AsyncSession]:
    """Session factory for tests that need more than one session."""
    return async_sessionmaker(
        sqlite_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest_asyncio.fixture
async def db_session(session_maker):
    """Provide an isolated session on a fresh in-memory database."""
    async with session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture(scope="session")
def postgres_container():
    """
    Start a PostgreSQL container for the test session.

    The container is automatically cleaned up when the session ends.
    """
    with PostgresContainer(POSTGRES_IMAGE) as postgres:
        yield postgres


@pytest.fixture(scope="session")
def pg_engine(postgres_container):
    """Async engine connected to the test container."""
    connection_url = postgres_container.get_connection_url()
    # Testcontainers may return postgresql+psycopg2:// or postgresql://
    async_url = connection_url.replace(
        "postgresql+psycopg2://", "postgresql+asyncpg://"
    )
    async_url = async_url.replace("postgresql://", "postgresql+asyncpg://")

    return create_async_engine(
        async_url,
        echo=False,
        poolclass=NullPool,  # Avoid connection pool issues in tests
    )


@pytest.fixture
def pg_session_maker(pg_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        pg_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest_asyncio.fixture
async def pg_db_session(pg_engine, pg_session_maker):
    """
    Provide an isolated PostgreSQL session for each test.

    Drops and recreates all tables first so each test starts fresh.
    """
    async with pg_engine.begin() as conn:
        await conn.run_sync(IdentityBase.metadata.drop_all)
        await conn.run_sync(IdentityBase.metadata.create_all)

    async with pg_session_maker() as session:
        yield session
        await session.rollback()

    async with pg_engine.begin() as conn:
        await conn.run_sync(IdentityBase.metadata.drop_all)
