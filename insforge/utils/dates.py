"""Date parsing shared by all decoded models.

The backend returns timestamps as ISO-8601 (with or without fractional
seconds) and PostgreSQL ``date`` columns as bare ``YYYY-MM-DD``.
"""
from __future__ import annotations

import re
import types
from collections import abc
from datetime import date, datetime, timezone
from typing import Annotated, Any, Union, get_args, get_origin

from pydantic import BaseModel, BeforeValidator, PlainSerializer

_FRACTIONAL = "%Y-%m-%dT%H:%M:%S.%f%z"
_WHOLE_SECONDS = "%Y-%m-%dT%H:%M:%S%z"
_DATE_ONLY = "%Y-%m-%d"

# strptime's %f takes at most 6 digits
_LONG_FRACTION = re.compile(r"(\.\d{6})\d+")


def parse_timestamp(value: Any) -> Any:
    """Parse an API date string into an aware ``datetime``.

    Formats are tried in order: fractional seconds with offset, whole seconds
    with offset, then date-only (midnight UTC). Values that are not strings
    are returned untouched so pydantic can validate them.
    """
    if not isinstance(value, str):
        return value
    text = _LONG_FRACTION.sub(r"\1", value.strip())
    for fmt in (_FRACTIONAL, _WHOLE_SECONDS):
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    try:
        return datetime.strptime(text, _DATE_ONLY).replace(tzinfo=timezone.utc)
    except ValueError:
        raise ValueError(
            f"Cannot decode date string {value!r}. "
            "Expected ISO8601 format or date-only format (YYYY-MM-DD)."
        ) from None


def format_timestamp(value: datetime | date) -> str:
    return value.isoformat()


Timestamp = Annotated[
    datetime,
    BeforeValidator(parse_timestamp),
    PlainSerializer(format_timestamp, return_type=str, when_used="json"),
]


def _key_for(field: Any, name: str, data: dict) -> str | None:
    for key in (field.alias, name):
        if key and key in data:
            return key
    return None


def apply_date_strategy(tp: Any, data: Any) -> Any:
    """Parse date strings in decoded JSON wherever ``tp`` expects a ``datetime``.

    Walks ``tp`` (models, lists, dicts, optionals) alongside ``data`` so plain
    pydantic models get the same handling as :class:`Timestamp` fields.
    Strings that do not parse are left for validation to reject.
    """
    if data is None:
        return None
    origin = get_origin(tp)
    args = get_args(tp)
    if origin is Annotated:
        return apply_date_strategy(args[0], data)
    if tp is datetime:
        if isinstance(data, str):
            try:
                return parse_timestamp(data)
            except ValueError:
                return data
        return data
    if origin in (Union, types.UnionType):
        options = [a for a in args if a is not type(None)]
        if len(options) == 1:
            return apply_date_strategy(options[0], data)
        if datetime in options and isinstance(data, str):
            return apply_date_strategy(datetime, data)
        return data
    if origin in (list, set, frozenset, abc.Sequence, abc.Set) and isinstance(data, list):
        item = args[0] if args else Any
        return [apply_date_strategy(item, v) for v in data]
    if origin is tuple and isinstance(data, list):
        if len(args) == 2 and args[1] is Ellipsis:
            return [apply_date_strategy(args[0], v) for v in data]
        return [apply_date_strategy(a, v) for a, v in zip(args, data)] + data[len(args):]
    if origin in (dict, abc.Mapping) and isinstance(data, dict):
        value = args[1] if len(args) == 2 else Any
        return {k: apply_date_strategy(value, v) for k, v in data.items()}
    if isinstance(tp, type) and issubclass(tp, BaseModel) and isinstance(data, dict):
        out = dict(data)
        for name, field in tp.model_fields.items():
            key = _key_for(field, name, out)
            if key is not None:
                out[key] = apply_date_strategy(field.annotation, out[key])
        return out
    return data
