"""pod-why: answers why one pod depends on another.

The graph core (``podwhy.graph``) builds a dependency graph from records,
enumerates every path between two pods and computes reachable sets in either
direction. ``podwhy.query`` ties these together behind a single query call.
"""

from podwhy.errors import (
    CyclicGraphError,
    DuplicateRecordError,
    PodWhyError,
    RecordCacheError,
    UnknownPodError,
    UnknownVertexError,
)
from podwhy.query import QueryResult, ResultKind, WhyQuery, run_query

__version__ = "0.1.0"

__all__ = [
    "CyclicGraphError",
    "DuplicateRecordError",
    "PodWhyError",
    "QueryResult",
    "RecordCacheError",
    "ResultKind",
    "UnknownPodError",
    "UnknownVertexError",
    "WhyQuery",
    "run_query",
]
