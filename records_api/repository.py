"""
Data access for the `my_table` records.

All statements bind `name` as a parameter; nothing user supplied is ever
formatted into SQL text.
"""

from __future__ import annotations

from records_api.infrastructure.db_factory import QueryResult, QuerySession
from records_api.infrastructure.schema import TABLE_NAME, ensure_table

SELECT_ALL_SQL = f"SELECT * FROM {TABLE_NAME};"
SELECT_BY_NAME_SQL = f"SELECT * FROM {TABLE_NAME} WHERE name = %s;"
INSERT_SQL = f"INSERT INTO {TABLE_NAME}(name) VALUES(%s);"


class RecordRepository:
    """Repository for the create/read operations on the records table."""

    def __init__(self, session: QuerySession) -> None:
        self.session = session

    async def ensure_table(self) -> None:
        await ensure_table(self.session)

    async def fetch_all(self) -> QueryResult:
        return await self.session.query(SELECT_ALL_SQL)

    async def fetch_by_name(self, name: str) -> QueryResult:
        """Rows whose `name` equals the given value; empty when none match."""
        return await self.session.query(SELECT_BY_NAME_SQL, (name,))

    async def insert(self, name: str) -> int:
        """
        Insert one row with the given name.

        Returns
        -------
        int
            Number of rows inserted, as reported by the driver.
        """
        result = await self.session.query(INSERT_SQL, (name,))
        return result.row_count


__all__ = [
    "INSERT_SQL",
    "QuerySession",
    "RecordRepository",
    "SELECT_ALL_SQL",
    "SELECT_BY_NAME_SQL",
]
