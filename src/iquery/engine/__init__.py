"""Query engines — facade interface, registry and the in-memory backend."""

from iquery.engine.base import QueryEngine
from iquery.engine.factory import available_engines, get_query_engine
from iquery.engine.schemas import CollectionStatistics, QueryContext, RankedResultSet

__all__ = [
    "CollectionStatistics",
    "QueryContext",
    "QueryEngine",
    "RankedResultSet",
    "available_engines",
    "get_query_engine",
]
