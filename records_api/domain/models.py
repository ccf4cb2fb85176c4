"""
Domain models for the records API.

Defines the `Record` schema aligned with the `my_table` DDL and the three
response shapes the router can produce. Every response variant carries a
`kind` tag and knows how to render its own JSON body.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, Sequence, Union

from pydantic import BaseModel, Field


class Record(BaseModel):
    """
    Representation of a single row in the `my_table` table.
    """

    id: int = Field(..., description="Primary key (BIGSERIAL).")
    name: Optional[str] = Field(None, description="Free-form name, may be NULL.")
    date: datetime = Field(..., description="Insertion timestamp.")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "arbitrary_types_allowed": False,
    }


class RecordList(BaseModel):
    """A JSON array of records."""

    kind: Literal["record_list"] = "record_list"
    records: List[Record] = Field(default_factory=list)

    @classmethod
    def from_rows(cls, rows: Sequence[Dict[str, Any]]) -> "RecordList":
        return cls(records=[Record.model_validate(row) for row in rows])

    def to_json(self) -> List[Dict[str, Any]]:
        return [record.model_dump(mode="json") for record in self.records]


class Confirmation(BaseModel):
    """Acknowledgement of a successful write."""

    kind: Literal["confirmation"] = "confirmation"
    success: bool = True
    message: str

    def to_json(self) -> Dict[str, Any]:
        return {"success": self.success, "message": self.message}


class ErrorMessage(BaseModel):
    """A bare JSON string describing what went wrong."""

    kind: Literal["error_message"] = "error_message"
    message: str

    def to_json(self) -> str:
        return self.message


ApiResponse = Union[RecordList, Confirmation, ErrorMessage]


__all__ = ["ApiResponse", "Confirmation", "ErrorMessage", "Record", "RecordList"]
