"""
Pytest configuration for warden_identity integration tests.

SQLite-backed fixtures run everywhere; the PostgreSQL ones start a
Testcontainers instance and back ``@pytest.mark.integration`` tests.
"""

# Re-export shared database fixtures
from tests.shared.fixtures.database import (
    db_session,
    pg_db_session,
    pg_engine,
    pg_session_maker,
    postgres_container,
    session_maker,
    sqlite_engine,
)

__all__ = [
    "db_session",
    "pg_db_session",
    "pg_engine",
    "pg_session_maker",
    "postgres_container",
    "session_maker",
    "sqlite_engine",
]
