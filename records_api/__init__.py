"""
Records API - a minimal PostgreSQL-backed JSON service.

Walks through connecting an application to PostgreSQL, creating and reading
rows, and exposing those operations over HTTP:

- `GET /` lists every record
- `GET /read?name=...` lists records with a given name
- `GET /add?name=...` inserts a record

The database session is opened once per process and injected into the
request router; the CLI reuses the same repository for one-off commands.
"""

from __future__ import annotations

__version__ = "0.1.0"

# Public API exports
from records_api.config import Settings, get_settings
from records_api.domain.models import (
    ApiResponse,
    Confirmation,
    ErrorMessage,
    Record,
    RecordList,
)
from records_api.infrastructure.db_factory import QueryResult, Session, connect
from records_api.repository import RecordRepository
from records_api.router import RequestRouter, RoutedResponse
from records_api.server import create_app, run_app
from records_api.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    # Configuration
    "Settings",
    "get_settings",
    # Data access
    "QueryResult",
    "Session",
    "connect",
    "RecordRepository",
    # Routing
    "RequestRouter",
    "RoutedResponse",
    "create_app",
    "run_app",
    # Responses
    "ApiResponse",
    "Confirmation",
    "ErrorMessage",
    "Record",
    "RecordList",
    # Logging
    "configure_logging",
    "get_logger",
]
