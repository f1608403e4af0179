"""Enumeration of every dependency path between two pods.

Paths are computed with a memoized depth-first search: the list of paths from
a vertex to the target is computed once, when all of its successors are done,
and every later reference to that vertex reuses the stored list. Vertices
where branches reconverge (diamonds) therefore contribute their downstream
paths to every upstream branch instead of only the first one that reaches
them.

The search uses an explicit stack so long dependency chains do not run into
the interpreter's recursion limit.
"""

from collections.abc import Iterable, Iterator, Sequence

import structlog

from podwhy.errors import CyclicGraphError, UnknownVertexError
from podwhy.graph.model import Graph

logger = structlog.get_logger(__name__)

Path = list[str]


class PathEnumerator:
    """Memoized enumerator of all paths ending at a fixed target.

    One enumerator holds the memo table for a single (graph, target) pair, so
    several sources can be queried against it and share the work.

    Example:
        >>> graph = Graph()
        >>> for u, v in [("A", "B"), ("A", "C"), ("B", "D"), ("C", "D")]:
        ...     graph.add_edge(u, v)
        >>> PathEnumerator(graph, "D").paths_from("A")
        [['A', 'B', 'D'], ['A', 'C', 'D']]
    """

    def __init__(self, graph: Graph, target: str):
        """Initialize the enumerator.

        Args:
            graph: A directed acyclic graph
            target: Vertex every enumerated path ends at

        Raises:
            UnknownVertexError: If target is not in the graph
        """
        if not graph.has_vertex(target):
            raise UnknownVertexError(target)

        self.graph = graph
        self.target = target
        self._memo: dict[str, list[tuple[str, ...]]] = {target: [(target,)]}

    @property
    def memo_size(self) -> int:
        """Number of vertices whose downstream paths are already computed."""
        return len(self._memo)

    def paths_from(self, source: str) -> list[Path]:
        """Return every path from source to the target.

        Paths are ordered by successor insertion order, recursively. A source
        equal to the target yields the single one-vertex path ``[source]``.

        Raises:
            UnknownVertexError: If source is not in the graph
            CyclicGraphError: If a cycle is reachable from source
        """
        if not self.graph.has_vertex(source):
            raise UnknownVertexError(source)

        self._compute(source)
        return [list(path) for path in self._memo[source]]

    def _compute(self, source: str) -> None:
        if source in self._memo:
            return

        stack: list[tuple[str, Iterator[str]]] = [
            (source, iter(self.graph.adjacent_vertices(source))),
        ]
        trail = [source]
        on_stack = {source}

        while stack:
            vertex, successors = stack[-1]

            for successor in successors:
                if successor in self._memo:
                    continue
                if successor in on_stack:
                    cycle = [*trail[trail.index(successor):], successor]
                    logger.error("cycle_detected_during_path_search", cycle=cycle)
                    raise CyclicGraphError(cycle)

                # Descend; this vertex resumes from the same iterator later
                stack.append((successor, iter(self.graph.adjacent_vertices(successor))))
                trail.append(successor)
                on_stack.add(successor)
                break
            else:
                stack.pop()
                trail.pop()
                on_stack.discard(vertex)
                self._memo[vertex] = [
                    (vertex, *path)
                    for successor in self.graph.adjacent_vertices(vertex)
                    for path in self._memo[successor]
                ]


def all_paths(source: str, target: str, graph: Graph) -> list[Path]:
    """Return every simple path from source to target in an acyclic graph.

    Args:
        source: Vertex at which every path starts
        target: Vertex at which every path ends
        graph: A directed acyclic graph

    Returns:
        List of paths, each a list of vertex names. Empty if target is not
        reachable from source.

    Raises:
        UnknownVertexError: If source or target is not in the graph
        CyclicGraphError: If a cycle is reachable from source
    """
    if not graph.has_vertex(source):
        raise UnknownVertexError(source)

    enumerator = PathEnumerator(graph, target)
    paths = enumerator.paths_from(source)

    logger.debug(
        "paths_enumerated",
        source=source,
        target=target,
        path_count=len(paths),
        memoized_vertices=enumerator.memo_size,
    )

    return paths


def paths_subgraph(graph: Graph, paths: Iterable[Sequence[str]]) -> Graph:
    """Return the subgraph induced by every vertex that appears on a path."""
    on_path = {vertex for path in paths for vertex in path}
    return graph.induced_subgraph(lambda vertex: vertex in on_path)
