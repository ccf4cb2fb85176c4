from __future__ import annotations

from datetime import datetime

import pytest
from pydantic import ValidationError

from records_api.domain.models import Confirmation, ErrorMessage, Record, RecordList

INSERTED_AT = datetime(2024, 5, 1, 12, 30, 15, 123456)


def test_record_list_serializes_as_array_of_records() -> None:
    rows = [
        {"id": 1, "name": "john", "date": INSERTED_AT},
        {"id": 2, "name": None, "date": INSERTED_AT},
    ]

    body = RecordList.from_rows(rows).to_json()

    assert body == [
        {"id": 1, "name": "john", "date": "2024-05-01T12:30:15.123456"},
        {"id": 2, "name": None, "date": "2024-05-01T12:30:15.123456"},
    ]


def test_empty_record_list_is_empty_array() -> None:
    assert RecordList.from_rows([]).to_json() == []


def test_confirmation_shape() -> None:
    body = Confirmation(message="Inserted 1 row with name 'john'").to_json()

    assert body == {"success": True, "message": "Inserted 1 row with name 'john'"}


def test_error_message_is_bare_string() -> None:
    assert ErrorMessage(message="nope").to_json() == "nope"


def test_variants_carry_distinct_tags() -> None:
    kinds = {
        RecordList().kind,
        Confirmation(message="m").kind,
        ErrorMessage(message="m").kind,
    }

    assert kinds == {"record_list", "confirmation", "error_message"}


def test_record_is_immutable() -> None:
    record = Record(id=1, name="a", date=INSERTED_AT)

    with pytest.raises(ValidationError):
        record.date = datetime.now()  # type: ignore[misc]
