from __future__ import annotations

import types
from datetime import datetime
from typing import Any, Union, get_args, get_origin

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from insforge.utils.dates import parse_timestamp


class APIModel(BaseModel):
    """Base for SDK response models: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


def _is_datetime(annotation: Any) -> bool:
    if annotation is datetime:
        return True
    if get_origin(annotation) in (Union, types.UnionType):
        return any(_is_datetime(arg) for arg in get_args(annotation))
    return False


class Record(BaseModel):
    """Base class for database rows.

    Every ``datetime`` field accepts the API date formats, including bare
    ``YYYY-MM-DD`` values from ``date`` columns. Unknown columns are kept.

    Example::

        class Todo(Record):
            id: str | None = None
            title: str
            due: datetime | None = None
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    @field_validator("*", mode="before")
    @classmethod
    def _parse_dates(cls, value: Any, info: ValidationInfo) -> Any:
        field = cls.model_fields.get(info.field_name) if info.field_name else None
        if field is not None and _is_datetime(field.annotation):
            return parse_timestamp(value)
        return value
