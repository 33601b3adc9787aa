"""Application interfaces (ports): backend providers and the table query builder."""

from planejar.application.interfaces.providers import (
    IIdentityProvider,
    IObjectStorage,
    IQueryExecutor,
    IRelationalStore,
    ISessionCache,
)
from planejar.application.interfaces.query import (
    NO_SINGLE_ROW_CODE,
    Filter,
    QueryResult,
    TableQuery,
)

__all__ = [
    "Filter",
    "IIdentityProvider",
    "IObjectStorage",
    "IQueryExecutor",
    "IRelationalStore",
    "ISessionCache",
    "NO_SINGLE_ROW_CODE",
    "QueryResult",
    "TableQuery",
]
