"""
Table bootstrap for the records API.

The DDL is idempotent and runs on every server start as well as from the
`setup-table` CLI command.
"""

from __future__ import annotations

from records_api.infrastructure.db_factory import QuerySession
from records_api.utils.logging import get_logger

log = get_logger(__name__)

TABLE_NAME = "my_table"

CREATE_TABLE_SQL = f"""
    CREATE TABLE IF NOT EXISTS {TABLE_NAME}(
      id BIGSERIAL PRIMARY KEY NOT NULL,
      name varchar,
      date TIMESTAMP NOT NULL DEFAULT current_timestamp
    );
"""


async def ensure_table(session: QuerySession) -> None:
    """Create the records table if it does not exist yet."""
    await session.query(CREATE_TABLE_SQL)
    log.info("Ensured table %s exists.", TABLE_NAME)


__all__ = ["CREATE_TABLE_SQL", "TABLE_NAME", "ensure_table"]
