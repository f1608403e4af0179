"""Query entry point: why does a pod depend on another, and what depends on it.

A query names a source pod and optionally a target. With a target, every
dependency path from source to target is enumerated. Without one, the set of
pods reachable from source is computed, following edges forward (what
source depends on) or in reverse (what depends on source).
"""

from collections.abc import Container, Sequence
from dataclasses import dataclass, field
from enum import Enum

import structlog

from podwhy.errors import UnknownPodError
from podwhy.graph.builder import (
    SUBSPEC_SEPARATOR,
    DependencyRecord,
    DuplicatePolicy,
    GraphBuilder,
    normalize_records,
)
from podwhy.graph.model import Graph
from podwhy.graph.paths import all_paths, paths_subgraph
from podwhy.graph.reachability import Depth, Direction, reachable
from podwhy.graph.validator import GraphValidator, ValidationReport

logger = structlog.get_logger(__name__)


class ResultKind(str, Enum):
    """Shape of a query result."""

    PATHS = "paths"
    VERTICES = "vertices"


@dataclass(frozen=True)
class WhyQuery:
    """Parameters of a dependency query.

    Attributes:
        source: Pod the query is about
        target: Optional pod; when set, all paths source -> target are listed
        reverse: List what depends on source instead of what source depends
            on. Ignored when target is set.
        direct_only: Only list direct neighbours. Ignored when target is set.
    """

    source: str
    target: str | None = None
    reverse: bool = False
    direct_only: bool = False

    @property
    def direction(self) -> Direction:
        return Direction.REVERSE if self.reverse else Direction.FORWARD

    @property
    def depth(self) -> Depth:
        return Depth.DIRECT if self.direct_only else Depth.TRANSITIVE

    def pods(self) -> list[str]:
        """Names the query references."""
        return [pod for pod in (self.source, self.target) if pod is not None]


@dataclass
class QueryResult:
    """Outcome of a query.

    Exactly one of ``paths`` and ``vertices`` is meaningful, selected by
    ``kind``. ``subgraph`` is the part of the dependency graph the result
    touches. ``validation`` holds what the graph checks found, such as
    dependencies that have no record of their own.
    """

    query: WhyQuery
    kind: ResultKind
    subgraph: Graph
    paths: list[list[str]] = field(default_factory=list)
    vertices: list[str] = field(default_factory=list)
    validation: ValidationReport = field(default_factory=ValidationReport)

    @property
    def warnings(self) -> list[str]:
        return self.validation.warnings

    @property
    def is_empty(self) -> bool:
        if self.kind is ResultKind.PATHS:
            return not self.paths
        return not self.vertices


def check_pods_exist(query: WhyQuery, known_pods: Container[str]) -> None:
    """Fail fast when the query names a pod without a record.

    Raises:
        UnknownPodError: For the first unknown name (source before target)
    """
    for pod in query.pods():
        if pod not in known_pods:
            logger.error("unknown_pod_in_query", pod=pod)
            raise UnknownPodError(pod)


def run_query(
    records: Sequence[DependencyRecord],
    query: WhyQuery,
    separator: str = SUBSPEC_SEPARATOR,
    duplicate_policy: DuplicatePolicy = DuplicatePolicy.ERROR,
    check_cycles: bool = True,
) -> QueryResult:
    """Build the dependency graph from records and answer a query.

    Args:
        records: Dependency records from any source
        query: What to look up
        separator: Substring marking a subspec dependency
        duplicate_policy: How to treat pods that occur in several records
        check_cycles: Reject cyclic graphs before traversal

    Returns:
        QueryResult with paths (target given) or sorted vertices (no target),
        plus the validation report of the whole graph

    Raises:
        UnknownPodError: If source or target has no record
        DuplicateRecordError: If records conflict under the ERROR policy
        CyclicGraphError: If check_cycles is set and the graph has a cycle,
            or if path enumeration runs into one
    """
    logger.info(
        "query_started",
        source=query.source,
        target=query.target,
        reverse=query.reverse,
        direct_only=query.direct_only,
        record_count=len(records),
    )

    all_dependencies = normalize_records(records, separator, duplicate_policy)
    check_pods_exist(query, all_dependencies)

    graph = GraphBuilder(separator, duplicate_policy).build_from_mapping(all_dependencies)

    report = GraphValidator().validate(
        graph,
        record_names=all_dependencies,
        check_cycles=check_cycles,
    )
    report.raise_for_cycles()

    if query.target is not None:
        result = find_dependency_paths(graph, query)
    else:
        result = find_reachable_pods(graph, query)
    result.validation = report

    logger.info(
        "query_complete",
        kind=result.kind.value,
        result_count=len(result.paths) if result.kind is ResultKind.PATHS else len(result.vertices),
    )

    return result


def find_dependency_paths(graph: Graph, query: WhyQuery) -> QueryResult:
    """Answer "why does source depend on target" with every path between them."""
    if query.target is None:
        msg = "A target is required to enumerate dependency paths"
        raise ValueError(msg)

    paths = all_paths(query.source, query.target, graph)
    return QueryResult(
        query=query,
        kind=ResultKind.PATHS,
        subgraph=paths_subgraph(graph, paths),
        paths=paths,
    )


def find_reachable_pods(graph: Graph, query: WhyQuery) -> QueryResult:
    """Answer "what depends on source" or "what does source depend on"."""
    found = reachable(query.source, graph, query.direction, query.depth)
    return QueryResult(
        query=query,
        kind=ResultKind.VERTICES,
        subgraph=found.subgraph,
        vertices=found.vertices,
    )
