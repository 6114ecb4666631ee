"""Tests for the database query builder."""

from datetime import datetime, timezone
from enum import Enum

import pytest
from pydantic import BaseModel

from insforge import EmptyResultError, Record, ValidationError
from insforge.resources.database import DatabaseClient, FilterOperator, QueryBuilder

from conftest import body_of


class Todo(Record):
    id: str | None = None
    title: str
    done: bool = False
    due: datetime | None = None


class Reminder(BaseModel):
    id: str
    due: datetime
    snoozed_until: datetime | None = None


class Status(Enum):
    OPEN = "open"


@pytest.fixture
def todos(transport) -> QueryBuilder:
    return DatabaseClient(transport).from_("todos")


def test_build_params_orders_select_filters_order_offset_limit(todos):
    # Arrange: chain in a deliberately scrambled order
    query = todos.limit(10).eq("done", False).order("created_at", ascending=False).select("id", "title").offset(20)

    # Act: compile
    params = query.build_params()

    # Assert: fixed parameter order regardless of chain order
    assert params == [
        ("select", "id,title"),
        ("done", "eq.false"),
        ("order", "created_at.desc"),
        ("offset", "20"),
        ("limit", "10"),
    ]


def test_default_select_is_star(todos):
    assert todos.build_params() == [("select", "*")]


def test_filters_keep_insertion_order_and_repeat_columns(todos):
    # Arrange: two filters on the same column
    query = todos.gte("priority", 2).lte("priority", 5).like("title", "%milk%")

    # Act
    params = query.build_params()

    # Assert: both priority filters survive, in order
    assert params[1:] == [
        ("priority", "gte.2"),
        ("priority", "lte.5"),
        ("title", "like.%milk%"),
    ]


def test_operand_formatting(todos):
    # Arrange
    due = datetime(2025, 1, 15, 10, 30, tzinfo=timezone.utc)
    query = (
        todos.is_("deleted_at", None)
        .is_("archived", True)
        .in_("id", ["a", "b", 3])
        .neq("status", Status.OPEN)
        .lt("due", due)
        .ilike("owner", "PIERRE%")
    )

    # Act
    params = dict(query.build_params()[1:])

    # Assert: null/bool lowercase, list in parens, enums by value, dates ISO
    assert params == {
        "deleted_at": "is.null",
        "archived": "is.true",
        "id": "in.(a,b,3)",
        "status": "neq.open",
        "due": "lt.2025-01-15T10:30:00+00:00",
        "owner": "ilike.PIERRE%",
    }


def test_multiple_orders_compose_primary_first(todos):
    # Act
    params = todos.order("priority", ascending=False).order("title").build_params()

    # Assert: a single order parameter, first call is the primary key
    assert ("order", "priority.desc,title.asc") in params
    assert sum(1 for k, _ in params if k == "order") == 1


def test_range_sets_offset_and_inclusive_limit(todos):
    # Act
    params = todos.range(10, 19).build_params()

    # Assert: 10 rows starting at 10
    assert params[-2:] == [("offset", "10"), ("limit", "10")]


def test_last_write_wins_per_pagination_slot(todos):
    # Act: range then limit overrides only the limit slot
    params = todos.range(0, 49).limit(5).build_params()

    # Assert
    assert params[-2:] == [("offset", "0"), ("limit", "5")]


def test_chain_methods_do_not_mutate_the_receiver(todos):
    # Arrange
    base = todos.eq("done", False)

    # Act: derive two independent queries from the same base
    first = base.order("title")
    second = base.limit(1)

    # Assert: the base and both branches are distinct
    assert base.build_params() == [("select", "*"), ("done", "eq.false")]
    assert ("order", "title.asc") in first.build_params()
    assert ("order", "title.asc") not in second.build_params()
    assert ("limit", "1") not in first.build_params()


@pytest.mark.parametrize(
    "build",
    [
        lambda q: q.limit(-1),
        lambda q: q.offset(-5),
        lambda q: q.range(5, 2),
        lambda q: q.in_("id", []),
        lambda q: q.in_("id", "abc"),
        lambda q: q.is_("done", "yes"),
        lambda q: q.eq("id", [1, 2]),
        lambda q: q.filter("id", "between", 1),
    ],
)
def test_invalid_arguments_raise_validation_error(todos, build):
    # Act & Assert: rejected before anything is sent
    with pytest.raises(ValidationError):
        build(todos)


def test_unknown_operator_names_the_operator(todos):
    with pytest.raises(ValidationError, match="unknown operator 'between'"):
        todos.filter("id", "between", 1)


def test_filter_accepts_operator_strings(todos):
    # Act
    params = todos.filter("id", "eq", 7).build_params()

    # Assert
    assert params[-1] == ("id", "eq.7")
    assert todos.filter("id", "eq", 7).filters[0].operator is FilterOperator.EQ


def test_table_name_is_percent_encoded(transport):
    # Act
    query = DatabaseClient(transport).from_("my table")

    # Assert
    assert query.path == "/api/database/records/my%20table"


async def test_execute_decodes_rows_into_model(router, todos):
    # Arrange: a date column comes back as bare YYYY-MM-DD
    router.add(
        "GET",
        "/api/database/records/todos",
        json=[{"id": "1", "title": "Milk", "done": False, "due": "2025-01-15", "extra": 1}],
    )

    # Act
    rows = await todos.eq("done", False).execute(model=Todo)

    # Assert: typed rows, date parsed to midnight UTC, unknown columns kept
    assert rows[0].title == "Milk"
    assert rows[0].due == datetime(2025, 1, 15, tzinfo=timezone.utc)
    assert rows[0].extra == 1
    assert router.last.url.params.get("done") == "eq.false"


async def test_execute_parses_dates_for_plain_models(router, todos):
    # Arrange: a plain pydantic model, not a Record
    router.add(
        "GET",
        "/api/database/records/todos",
        json=[{"id": "1", "due": "2024-01-15", "snoozed_until": "2024-01-16T08:30:00.123456789Z"}],
    )

    # Act
    rows = await todos.execute(model=Reminder)

    # Assert: date-only is midnight UTC, long fractions are truncated
    assert rows[0].due == datetime(2024, 1, 15, tzinfo=timezone.utc)
    assert rows[0].snoozed_until == datetime(2024, 1, 16, 8, 30, 0, 123456, tzinfo=timezone.utc)


async def test_execute_without_model_returns_dicts(router, todos):
    router.add("GET", "/api/database/records/todos", json=[{"id": "1"}])

    rows = await todos.execute()

    assert rows == [{"id": "1"}]


async def test_execute_empty_result_is_empty_list(router, todos):
    router.add("GET", "/api/database/records/todos", json=[])

    assert await todos.execute(model=Todo) == []


async def test_insert_sends_prefer_header_and_skips_unset_fields(router, todos):
    # Arrange
    router.add("POST", "/api/database/records/todos", status=201, json=[{"id": "9", "title": "Bread"}])

    # Act
    rows = await todos.insert([Todo(title="Bread")], model=Todo)

    # Assert: server-populated fields are not sent
    request = router.last
    assert request.headers["Prefer"] == "return=representation"
    assert body_of(request) == [{"title": "Bread"}]
    assert rows[0].id == "9"


@pytest.mark.parametrize("record", [{"title": "Bread"}, Todo(title="Bread")])
async def test_insert_rejects_a_single_record(router, todos, record):
    # Act & Assert: a lone record is refused before any request
    with pytest.raises(ValidationError, match="insert_one"):
        await todos.insert(record)
    assert router.requests == []


async def test_insert_one_raises_on_empty_result(router, todos):
    router.add("POST", "/api/database/records/todos", status=201, json=[])

    with pytest.raises(EmptyResultError):
        await todos.insert_one({"title": "Bread"})


async def test_update_sends_only_filters(router, todos):
    # Arrange
    router.add("PATCH", "/api/database/records/todos", json=[{"id": "1", "title": "Milk", "done": True}])

    # Act: select, order and limit do not apply to mutations
    rows = await todos.select("id").order("title").limit(1).eq("id", "1").update({"done": True}, model=Todo)

    # Assert
    request = router.last
    assert list(request.url.params.multi_items()) == [("id", "eq.1")]
    assert body_of(request) == {"done": True}
    assert request.headers["Prefer"] == "return=representation"
    assert rows[0].done is True


async def test_update_serializes_dates_and_enums(router, todos):
    # Arrange
    router.add("PATCH", "/api/database/records/todos", json=[])

    # Act
    await todos.eq("id", "1").update({"due": datetime(2025, 1, 15, tzinfo=timezone.utc), "status": Status.OPEN})

    # Assert: JSON-ready values on the wire
    assert body_of(router.last) == {"due": "2025-01-15T00:00:00Z", "status": "open"}


async def test_update_without_filters_is_sent(router, todos):
    router.add("PATCH", "/api/database/records/todos", json=[])

    await todos.update({"done": True})

    assert router.last.url.query == b""


async def test_delete_with_filters(router, todos):
    router.add("DELETE", "/api/database/records/todos", status=204)

    await todos.in_("id", ["1", "2"]).delete()

    assert router.last.url.params.get("id") == "in.(1,2)"
