"""Graph construction from dependency records.

A record is a pod name plus the names of the pods it directly depends on.
Subspec dependencies (``Firebase/Core``) are stripped before the graph is
built; their owning pod is expected to have a record of its own.
"""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum

import structlog

from podwhy.errors import DuplicateRecordError
from podwhy.graph.model import Graph

logger = structlog.get_logger(__name__)

SUBSPEC_SEPARATOR = "/"


class DuplicatePolicy(str, Enum):
    """How to treat a pod that appears in more than one record."""

    ERROR = "error"
    LAST_WINS = "last_wins"


@dataclass(frozen=True)
class DependencyRecord:
    """A pod and its direct dependencies.

    Attributes:
        name: Pod name
        dependencies: Names of the pods this pod directly depends on, in
            declaration order
    """

    name: str
    dependencies: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        # Accept any sequence (lists from YAML) but store a tuple
        object.__setattr__(self, "dependencies", tuple(self.dependencies))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Sequence[str]]) -> list["DependencyRecord"]:
        """Build records from a ``{name: [dependencies]}`` mapping."""
        return [cls(name, tuple(deps)) for name, deps in data.items()]


def strip_subspecs(
    dependencies: Iterable[str],
    separator: str = SUBSPEC_SEPARATOR,
) -> list[str]:
    """Drop dependency names that refer to a subspec."""
    return [dep for dep in dependencies if separator not in dep]


def normalize_records(
    records: Iterable[DependencyRecord],
    separator: str = SUBSPEC_SEPARATOR,
    duplicate_policy: DuplicatePolicy = DuplicatePolicy.ERROR,
) -> dict[str, list[str]]:
    """Map every pod name to its direct dependencies, subspecs removed.

    Args:
        records: Dependency records in input order
        separator: Substring marking a subspec dependency
        duplicate_policy: What to do when a name occurs twice

    Returns:
        Mapping of pod names to dependency lists. Pods without dependencies
        map to an empty list.

    Raises:
        DuplicateRecordError: With the ERROR policy, if a name occurs twice
            with different dependency lists. Identical repeats are accepted.
    """
    policy = DuplicatePolicy(duplicate_policy)
    all_dependencies: dict[str, list[str]] = {}

    for record in records:
        dependencies = strip_subspecs(record.dependencies, separator)
        existing = all_dependencies.get(record.name)

        if existing is not None and existing != dependencies:
            if policy is DuplicatePolicy.ERROR:
                logger.error(
                    "duplicate_record_conflict",
                    pod=record.name,
                    first=existing,
                    second=dependencies,
                )
                raise DuplicateRecordError(record.name, existing, dependencies)

            logger.warning(
                "duplicate_record_replaced",
                pod=record.name,
                previous=existing,
                replacement=dependencies,
            )

        all_dependencies[record.name] = dependencies

    return all_dependencies


class GraphBuilder:
    """Builds a Graph from dependency records.

    Example:
        >>> builder = GraphBuilder()
        >>> graph = builder.build([
        ...     DependencyRecord("A", ("B", "C/Sub")),
        ...     DependencyRecord("B", ()),
        ... ])
        >>> graph.edges()
        [('A', 'B')]
    """

    def __init__(
        self,
        separator: str = SUBSPEC_SEPARATOR,
        duplicate_policy: DuplicatePolicy = DuplicatePolicy.ERROR,
    ):
        """Initialize the builder.

        Args:
            separator: Substring marking a subspec dependency
            duplicate_policy: What to do when a pod occurs twice
        """
        if not separator:
            msg = "Subspec separator must be a non-empty string"
            raise ValueError(msg)
        self.separator = separator
        self.duplicate_policy = DuplicatePolicy(duplicate_policy)

    def build(self, records: Iterable[DependencyRecord]) -> Graph:
        """Build a graph with one edge per remaining direct dependency.

        Raises:
            DuplicateRecordError: If records conflict under the ERROR policy
        """
        all_dependencies = normalize_records(records, self.separator, self.duplicate_policy)
        return self.build_from_mapping(all_dependencies)

    def build_from_mapping(self, all_dependencies: Mapping[str, Sequence[str]]) -> Graph:
        """Build a graph from an already normalized name -> dependencies mapping."""
        graph = Graph()

        for name, dependencies in all_dependencies.items():
            if not dependencies:
                graph.add_vertex(name)
                continue
            for dependency in dependencies:
                graph.add_edge(name, dependency)

        logger.info(
            "dependency_graph_built",
            record_count=len(all_dependencies),
            vertex_count=len(graph),
            edge_count=graph.edge_count(),
        )

        return graph


def build_graph(
    records: Iterable[DependencyRecord],
    separator: str = SUBSPEC_SEPARATOR,
    duplicate_policy: DuplicatePolicy = DuplicatePolicy.ERROR,
) -> Graph:
    """Build a dependency graph from records."""
    return GraphBuilder(separator, duplicate_policy).build(records)
