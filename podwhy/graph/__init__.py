"""Graph module for dependency path and reachability queries.

This module provides the directed graph model, construction from dependency
records, memoized path enumeration and BFS-based reachability.
"""

from podwhy.graph.builder import (
    DependencyRecord,
    DuplicatePolicy,
    GraphBuilder,
    build_graph,
    normalize_records,
)
from podwhy.graph.model import Graph
from podwhy.graph.paths import PathEnumerator, all_paths, paths_subgraph
from podwhy.graph.reachability import Depth, Direction, Reachability, reachable
from podwhy.graph.validator import GraphValidator, ValidationReport

__all__ = [
    "DependencyRecord",
    "Depth",
    "Direction",
    "DuplicatePolicy",
    "Graph",
    "GraphBuilder",
    "GraphValidator",
    "PathEnumerator",
    "Reachability",
    "ValidationReport",
    "all_paths",
    "build_graph",
    "normalize_records",
    "paths_subgraph",
    "reachable",
]
