from .database import DatabaseClient
from .query import Filter, FilterOperator, Order, QueryBuilder

__all__ = ["DatabaseClient", "Filter", "FilterOperator", "Order", "QueryBuilder"]
