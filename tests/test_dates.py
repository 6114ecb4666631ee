"""Tests for API date decoding."""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError as PydanticValidationError

from insforge import Record
from insforge.models import StoredFile, User
from insforge.utils.dates import parse_timestamp


def test_parse_fractional_seconds_with_zulu():
    # Act
    value = parse_timestamp("2025-01-15T10:30:00.123Z")

    # Assert
    assert value == datetime(2025, 1, 15, 10, 30, 0, 123000, tzinfo=timezone.utc)


def test_parse_whole_seconds_with_offset():
    # Act
    value = parse_timestamp("2025-01-15T10:30:00+02:00")

    # Assert: offset preserved
    assert value.utcoffset() == timedelta(hours=2)
    assert value.astimezone(timezone.utc).hour == 8


def test_parse_date_only_is_midnight_utc():
    assert parse_timestamp("2025-01-15") == datetime(2025, 1, 15, tzinfo=timezone.utc)


def test_parse_truncates_nanoseconds():
    # Arrange: postgres can emit more than 6 fractional digits
    value = parse_timestamp("2025-01-15T10:30:00.123456789Z")

    # Assert
    assert value.microsecond == 123456


def test_parse_rejects_garbage():
    with pytest.raises(ValueError, match="Cannot decode date string"):
        parse_timestamp("15/01/2025")


def test_parse_leaves_non_strings_alone():
    now = datetime.now(timezone.utc)

    assert parse_timestamp(now) is now
    assert parse_timestamp(None) is None


def test_sdk_models_use_the_date_strategy():
    # Act
    user = User.model_validate({"id": "u1", "email": "a@b.c", "createdAt": "2025-01-15"})
    stored = StoredFile.model_validate(
        {"bucket": "b", "key": "k", "size": 1, "uploadedAt": "2025-01-15T10:30:00Z", "url": "/x"}
    )

    # Assert
    assert user.created_at == datetime(2025, 1, 15, tzinfo=timezone.utc)
    assert stored.uploaded_at.tzinfo is not None


def test_timestamps_serialize_as_iso_strings():
    user = User(id="u1", email="a@b.c", created_at=datetime(2025, 1, 15, tzinfo=timezone.utc))

    dumped = user.model_dump(mode="json", by_alias=True)

    assert dumped["createdAt"] == "2025-01-15T00:00:00+00:00"


class Event(Record):
    name: str
    starts_on: datetime
    ends_on: datetime | None = None


def test_record_parses_every_datetime_field():
    # Act
    event = Event.model_validate({"name": "launch", "starts_on": "2025-03-01", "ends_on": "2025-03-02T18:00:00Z"})

    # Assert
    assert event.starts_on == datetime(2025, 3, 1, tzinfo=timezone.utc)
    assert event.ends_on == datetime(2025, 3, 2, 18, tzinfo=timezone.utc)


def test_record_reports_bad_dates_as_validation_errors():
    with pytest.raises(PydanticValidationError):
        Event.model_validate({"name": "launch", "starts_on": "soon"})
