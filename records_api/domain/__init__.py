"""
Domain layer: record schema and response variants.
"""

from records_api.domain.models import (
    ApiResponse,
    Confirmation,
    ErrorMessage,
    Record,
    RecordList,
)

__all__ = ["ApiResponse", "Confirmation", "ErrorMessage", "Record", "RecordList"]
