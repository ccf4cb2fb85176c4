"""
Database session factory for the records API.

Provides the single long-lived `Session` the HTTP server and CLI share: one
psycopg async connection in autocommit mode returning rows as dicts. The
connection's own async lock serializes statements issued concurrently from
different request handlers, so callers never coordinate access themselves.

Includes retry logic for transient connection failures using tenacity.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Sequence, runtime_checkable

import psycopg
from psycopg import AsyncConnection
from psycopg.rows import dict_row
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from records_api.config import Settings, get_settings
from records_api.utils.logging import get_logger

log = get_logger(__name__)


class SessionClosedError(RuntimeError):
    """Raised when a query is issued on a session that has already ended."""


@dataclass(frozen=True)
class QueryResult:
    """
    Outcome of a single statement.

    `rows` is empty for statements that return no result set; `row_count`
    is the driver's rowcount (rows returned by a SELECT, rows affected by
    an INSERT).
    """

    rows: List[Dict[str, Any]] = field(default_factory=list)
    row_count: int = 0


@runtime_checkable
class QuerySession(Protocol):
    """
    What callers need from a database session.

    `Session` below is the production implementation.
    """

    async def query(self, sql: str, params: Optional[Sequence[Any]] = None) -> QueryResult:
        ...

    async def end(self) -> None:
        ...


class Session:
    """
    Thin async wrapper around one psycopg connection.
    """

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    @property
    def closed(self) -> bool:
        return self._conn.closed

    async def query(self, sql: str, params: Optional[Sequence[Any]] = None) -> QueryResult:
        """
        Execute one statement with bound parameters and collect its rows.

        Parameters
        ----------
        sql : str
            Statement text using `%s` placeholders.
        params : Sequence, optional
            Values bound to the placeholders, in order.

        Returns
        -------
        QueryResult
            Rows as dicts plus the driver rowcount.
        """
        if self._conn.closed:
            raise SessionClosedError("Database session has already been closed")

        async with self._conn.cursor(row_factory=dict_row) as cur:
            await cur.execute(sql, params)
            rows = await cur.fetchall() if cur.description is not None else []
            row_count = cur.rowcount if cur.rowcount >= 0 else len(rows)
        return QueryResult(rows=list(rows), row_count=row_count)

    async def end(self) -> None:
        """Close the underlying connection. Safe to call more than once."""
        if not self._conn.closed:
            await self._conn.close()
            log.info("Database session closed.")


async def connect(settings: Optional[Settings] = None) -> Session:
    """
    Open the process-wide database session with automatic retry.

    Retries with exponential backoff on `psycopg.OperationalError` up to
    `settings.db_connect_attempts` times, then re-raises the last error.

    Returns
    -------
    Session
        A connected session in autocommit mode.

    Raises
    ------
    psycopg.OperationalError
        If connection fails after all retry attempts.
    """
    settings = settings or get_settings()

    async for attempt in AsyncRetrying(
        stop=stop_after_attempt(settings.db_connect_attempts),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type(psycopg.OperationalError),
        reraise=True,
    ):
        with attempt:
            attempt_number = attempt.retry_state.attempt_number
            log.debug(
                "Connecting to %s:%s/%s (attempt %d)",
                settings.db_host,
                settings.db_port,
                settings.db_name,
                attempt_number,
            )
            conn = await AsyncConnection.connect(settings.dsn, autocommit=True)

    log.info(
        "Connected to database %s@%s:%s/%s",
        settings.db_user,
        settings.db_host,
        settings.db_port,
        settings.db_name,
    )
    return Session(conn)


__all__ = ["QueryResult", "QuerySession", "Session", "SessionClosedError", "connect"]
