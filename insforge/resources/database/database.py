"""/api/database endpoints."""
from __future__ import annotations

from insforge.resources.base import BaseAsyncResource
from insforge.resources.database.database_core import _DatabaseCore
from insforge.resources.database.query import QueryBuilder


class DatabaseClient(BaseAsyncResource, _DatabaseCore):
    """
    Table access through PostgREST-style queries.

    Example usage::

        async with insforge.AsyncClient(base_url=URL, api_key=KEY) as client:
            rows = await client.database.from_("todos").eq("done", False).execute()
    """

    def from_(self, table: str) -> QueryBuilder:
        """Start a query on ``table``."""
        return QueryBuilder(path=self.records_path(table), transport=self._t)

    table = from_
