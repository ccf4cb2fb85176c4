"""
Pytest configuration for the records API.

Provides fixtures for:
- An in-memory stand-in for the database session (unit tests)
- Settings with test-specific overrides
- A real PostgreSQL session for integration tests
"""

from __future__ import annotations

import asyncio
import os
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

import psycopg
import pytest

from records_api.config import Settings
from records_api.infrastructure.db_factory import QueryResult
from records_api.infrastructure.schema import CREATE_TABLE_SQL
from records_api.repository import (
    INSERT_SQL,
    SELECT_ALL_SQL,
    SELECT_BY_NAME_SQL,
    RecordRepository,
)
from records_api.router import RequestRouter


class InMemorySession:
    """
    Session double that understands the repository's statements.

    Keeps rows in a list, assigns ids in insertion order, and records every
    statement with its parameters.
    """

    def __init__(self) -> None:
        self.rows: List[Dict[str, Any]] = []
        self.calls: List[tuple] = []
        self.ended = False
        self._next_id = 1

    async def query(self, sql: str, params: Optional[Sequence[Any]] = None) -> QueryResult:
        self.calls.append((sql, tuple(params) if params is not None else None))
        # Yield so concurrent callers interleave like real I/O would.
        await asyncio.sleep(0)

        if sql == CREATE_TABLE_SQL:
            return QueryResult()
        if sql == SELECT_ALL_SQL:
            rows = [dict(row) for row in self.rows]
            return QueryResult(rows=rows, row_count=len(rows))
        if sql == SELECT_BY_NAME_SQL:
            rows = [dict(row) for row in self.rows if row["name"] == params[0]]
            return QueryResult(rows=rows, row_count=len(rows))
        if sql == INSERT_SQL:
            self.rows.append({"id": self._next_id, "name": params[0], "date": datetime.now()})
            self._next_id += 1
            return QueryResult(row_count=1)
        raise AssertionError(f"unexpected statement: {sql!r}")

    async def end(self) -> None:
        self.ended = True


class FailingSession(InMemorySession):
    """Session double whose every statement fails."""

    def __init__(self, message: str = "connection terminated unexpectedly") -> None:
        super().__init__()
        self.message = message

    async def query(self, sql: str, params: Optional[Sequence[Any]] = None) -> QueryResult:
        self.calls.append((sql, tuple(params) if params is not None else None))
        raise psycopg.OperationalError(self.message)


@pytest.fixture
def memory_session() -> InMemorySession:
    return InMemorySession()


@pytest.fixture
def memory_router(memory_session: InMemorySession) -> RequestRouter:
    return RequestRouter(RecordRepository(memory_session))


@pytest.fixture
def failing_session() -> FailingSession:
    return FailingSession()


@pytest.fixture
def failing_router(failing_session: FailingSession) -> RequestRouter:
    return RequestRouter(RecordRepository(failing_session))


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", "postgres"),
        db_name=os.getenv("DB_NAME", "postgres"),
        db_connect_attempts=1,
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def db_connection_available(test_settings: Settings) -> bool:
    """
    Check if database is reachable.

    Used to conditionally skip integration tests when DB is not available.
    """
    try:
        with psycopg.connect(test_settings.dsn, connect_timeout=5) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1;")
                cur.fetchone()
        return True
    except psycopg.Error:
        return False


@pytest.fixture
def clean_records_table(test_settings: Settings, db_connection_available: bool):
    """
    Create the records table if needed and empty it before and after a test.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")

    def _truncate() -> None:
        with psycopg.connect(test_settings.dsn, autocommit=True) as conn:
            conn.execute(CREATE_TABLE_SQL)
            conn.execute("TRUNCATE TABLE my_table RESTART IDENTITY;")

    _truncate()
    yield
    _truncate()
