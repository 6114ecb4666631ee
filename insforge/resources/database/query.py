"""Chainable, immutable query builder for ``/api/database/records/{table}``.

Every chain method returns a new builder, so a partially built query can be
reused for several requests::

    todos = client.database.from_("todos").eq("done", False)
    first_page = await todos.order("created_at").range(0, 9).execute(model=Todo)
    await todos.update({"done": True})

Filters compile to PostgREST-style parameters (``column=op.value``) in the
order they were added. Multiple ``order()`` calls are joined into one
``order`` parameter, the first being the primary sort key.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum
from typing import Any, Iterable, Mapping

from pydantic import BaseModel

from insforge.exceptions import EmptyResultError, ValidationError
from insforge.transport.base import Transport
from insforge.resources.base import to_json_body
from insforge.utils.logging import logger

RETURN_REPRESENTATION = {"Prefer": "return=representation"}


class FilterOperator(str, Enum):
    EQ = "eq"
    NEQ = "neq"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"
    LIKE = "like"
    ILIKE = "ilike"
    IN = "in"
    IS = "is"


def format_operand(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return format_operand(value.value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


@dataclass(frozen=True)
class Filter:
    column: str
    operator: FilterOperator
    operand: Any = None

    def __post_init__(self):
        try:
            op = FilterOperator(self.operator)
        except ValueError:
            raise ValidationError(f"unknown operator {self.operator!r}") from None
        object.__setattr__(self, "operator", op)
        if op is FilterOperator.IN:
            if isinstance(self.operand, (str, bytes)) or not isinstance(self.operand, Iterable):
                raise ValidationError(f"'in' filter on {self.column!r} needs a list of values")
            values = tuple(self.operand)
            if not values:
                raise ValidationError(f"'in' filter on {self.column!r} needs at least one value")
            object.__setattr__(self, "operand", values)
        elif op is FilterOperator.IS:
            if self.operand is not None and not isinstance(self.operand, bool):
                raise ValidationError(f"'is' filter on {self.column!r} takes True, False or None")
        elif isinstance(self.operand, (list, tuple, set, frozenset, dict)):
            raise ValidationError(f"'{op.value}' filter on {self.column!r} takes a single value")

    def render(self) -> str:
        if self.operator is FilterOperator.IN:
            return f"in.({','.join(format_operand(v) for v in self.operand)})"
        return f"{self.operator.value}.{format_operand(self.operand)}"


@dataclass(frozen=True)
class Order:
    column: str
    ascending: bool = True

    def render(self) -> str:
        return f"{self.column}.{'asc' if self.ascending else 'desc'}"


def _check_count(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise ValidationError(f"{name} must be >= 0, got {value}")
    return value


@dataclass(frozen=True)
class QueryBuilder:
    path: str
    transport: Transport = field(repr=False, compare=False)
    columns: str = "*"
    filters: tuple[Filter, ...] = ()
    orders: tuple[Order, ...] = ()
    limit_count: int | None = None
    offset_count: int | None = None

    # -------------- select -------------- #
    def select(self, *columns: str) -> "QueryBuilder":
        """Choose returned columns, e.g. ``select("id", "title")`` or ``select("id,title")``."""
        return replace(self, columns=",".join(columns) if columns else "*")

    # -------------- filters -------------- #
    def filter(self, column: str, operator: FilterOperator | str, operand: Any = None) -> "QueryBuilder":
        return replace(self, filters=self.filters + (Filter(column, operator, operand),))

    def eq(self, column: str, value: Any) -> "QueryBuilder":
        return self.filter(column, FilterOperator.EQ, value)

    def neq(self, column: str, value: Any) -> "QueryBuilder":
        return self.filter(column, FilterOperator.NEQ, value)

    def gt(self, column: str, value: Any) -> "QueryBuilder":
        return self.filter(column, FilterOperator.GT, value)

    def gte(self, column: str, value: Any) -> "QueryBuilder":
        return self.filter(column, FilterOperator.GTE, value)

    def lt(self, column: str, value: Any) -> "QueryBuilder":
        return self.filter(column, FilterOperator.LT, value)

    def lte(self, column: str, value: Any) -> "QueryBuilder":
        return self.filter(column, FilterOperator.LTE, value)

    def like(self, column: str, pattern: str) -> "QueryBuilder":
        return self.filter(column, FilterOperator.LIKE, pattern)

    def ilike(self, column: str, pattern: str) -> "QueryBuilder":
        return self.filter(column, FilterOperator.ILIKE, pattern)

    def in_(self, column: str, values: Iterable[Any]) -> "QueryBuilder":
        return self.filter(column, FilterOperator.IN, values)

    def is_(self, column: str, value: bool | None) -> "QueryBuilder":
        return self.filter(column, FilterOperator.IS, value)

    # -------------- ordering & pagination -------------- #
    def order(self, column: str, ascending: bool = True) -> "QueryBuilder":
        return replace(self, orders=self.orders + (Order(column, ascending),))

    def limit(self, count: int) -> "QueryBuilder":
        return replace(self, limit_count=_check_count("limit", count))

    def offset(self, count: int) -> "QueryBuilder":
        return replace(self, offset_count=_check_count("offset", count))

    def range(self, start: int, end: int) -> "QueryBuilder":
        """Rows ``start`` to ``end`` inclusive, as ``offset=start&limit=end-start+1``."""
        _check_count("range start", start)
        _check_count("range end", end)
        if end < start:
            raise ValidationError(f"range end ({end}) must be >= start ({start})")
        return replace(self, offset_count=start, limit_count=end - start + 1)

    # -------------- compilation -------------- #
    def build_params(self, read: bool = True) -> list[tuple[str, str]]:
        """Compile the chain into ordered query parameters.

        Mutations (``read=False``) only carry the row filters.
        """
        params: list[tuple[str, str]] = []
        if read:
            params.append(("select", self.columns))
        params.extend((f.column, f.render()) for f in self.filters)
        if read:
            if self.orders:
                params.append(("order", ",".join(o.render() for o in self.orders)))
            if self.offset_count is not None:
                params.append(("offset", str(self.offset_count)))
            if self.limit_count is not None:
                params.append(("limit", str(self.limit_count)))
        return params

    @staticmethod
    def _rows_type(model: Any) -> Any:
        return list[model] if model is not None else list[dict[str, Any]]

    # -------------- terminals -------------- #
    async def execute(self, model: Any = None) -> list[Any]:
        """Run a SELECT. Returns ``[]`` when nothing matches."""
        resp = await self.transport.arequest("GET", self.path, params=self.build_params())
        return resp.raise_for_status().decode(self._rows_type(model))

    async def insert(self, records: Iterable[Any], model: Any = None) -> list[Any]:
        """Insert rows and return them as stored. Filters are ignored."""
        if isinstance(records, (Mapping, BaseModel, str, bytes)):
            raise ValidationError("insert() takes a list of records; use insert_one() for a single record")
        body = to_json_body(list(records))
        resp = await self.transport.arequest(
            "POST", self.path, json=body, headers=RETURN_REPRESENTATION
        )
        return resp.raise_for_status().decode(self._rows_type(model))

    async def insert_one(self, record: Any, model: Any = None) -> Any:
        """Insert one row.

        :raises EmptyResultError: the backend returned no rows.
        """
        rows = await self.insert([record], model=model)
        if not rows:
            raise EmptyResultError("Insert failed: no rows returned")
        return rows[0]

    async def update(self, patch: Any, model: Any = None) -> list[Any]:
        """Patch every row matching the filters and return the updated rows.

        Without filters this targets the whole table, as the backend does.
        """
        if not self.filters:
            logger.debug(f"Update without filters on {self.path}")
        resp = await self.transport.arequest(
            "PATCH",
            self.path,
            params=self.build_params(read=False),
            json=to_json_body(patch),
            headers=RETURN_REPRESENTATION,
        )
        return resp.raise_for_status().decode(self._rows_type(model))

    async def delete(self) -> None:
        """Delete every row matching the filters (the whole table if none)."""
        if not self.filters:
            logger.debug(f"Delete without filters on {self.path}")
        resp = await self.transport.arequest(
            "DELETE", self.path, params=self.build_params(read=False)
        )
        resp.raise_for_status()
