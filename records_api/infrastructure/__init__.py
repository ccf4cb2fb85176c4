"""
Infrastructure package for the records API.

Centralizes database connectivity concerns (session factory, table bootstrap).
Keep this layer focused on I/O and resource management, decoupled from
routing and response shaping.
"""

from records_api.infrastructure.db_factory import (
    QueryResult,
    QuerySession,
    Session,
    SessionClosedError,
    connect,
)
from records_api.infrastructure.schema import ensure_table

__all__ = [
    "QueryResult",
    "QuerySession",
    "Session",
    "SessionClosedError",
    "connect",
    "ensure_table",
]
