"""Directed graph over pod names.

The Graph class stores an adjacency mapping keyed by vertex name. Successor
sets are kept as insertion-ordered dicts so that adding the same edge twice
is a no-op while traversal order stays reproducible.
"""

from collections.abc import Callable, Iterator

import structlog

from podwhy.errors import UnknownVertexError

logger = structlog.get_logger(__name__)


class Graph:
    """Directed graph with string vertices.

    A graph is filled once (by GraphBuilder or by hand) and then only read.
    Traversal code never mutates it; reverse() and induced_subgraph() return
    new instances.

    Example:
        >>> graph = Graph()
        >>> graph.add_edge("A", "B")
        >>> graph.add_vertex("C")
        >>> graph.adjacent_vertices("A")
        ['B']
        >>> graph.reverse().adjacent_vertices("B")
        ['A']
    """

    def __init__(self):
        """Initialize an empty graph."""
        self._adjacency: dict[str, dict[str, None]] = {}

    def add_vertex(self, vertex: str) -> None:
        """Ensure a vertex exists. Existing edges are left untouched.

        Args:
            vertex: Name of the vertex to add

        Raises:
            ValueError: If the vertex name is empty
        """
        if not vertex:
            msg = "Vertex name must be a non-empty string"
            raise ValueError(msg)
        self._adjacency.setdefault(vertex, {})

    def add_edge(self, source: str, target: str) -> None:
        """Ensure both endpoints and the directed edge source -> target exist.

        Args:
            source: The dependent vertex
            target: The vertex it depends on
        """
        self.add_vertex(source)
        self.add_vertex(target)
        self._adjacency[source][target] = None

    def adjacent_vertices(self, vertex: str) -> list[str]:
        """Return the direct successors of a vertex in insertion order.

        Raises:
            UnknownVertexError: If the vertex is not in the graph
        """
        try:
            return list(self._adjacency[vertex])
        except KeyError:
            raise UnknownVertexError(vertex) from None

    def has_vertex(self, vertex: str) -> bool:
        return vertex in self._adjacency

    def has_edge(self, source: str, target: str) -> bool:
        return target in self._adjacency.get(source, {})

    def vertices(self) -> list[str]:
        """Return all vertices in insertion order."""
        return list(self._adjacency)

    def edges(self) -> list[tuple[str, str]]:
        """Return all edges as (source, target) pairs in insertion order."""
        return [
            (source, target)
            for source, targets in self._adjacency.items()
            for target in targets
        ]

    def edge_count(self) -> int:
        return sum(len(targets) for targets in self._adjacency.values())

    def reverse(self) -> "Graph":
        """Return a new graph with every edge direction flipped.

        Every vertex of this graph is present in the result, including
        isolated ones.
        """
        reversed_graph = Graph()
        for vertex in self._adjacency:
            reversed_graph.add_vertex(vertex)
        for source, target in self.edges():
            reversed_graph.add_edge(target, source)

        logger.debug(
            "graph_reversed",
            vertex_count=len(reversed_graph),
            edge_count=reversed_graph.edge_count(),
        )

        return reversed_graph

    def induced_subgraph(self, predicate: Callable[[str], bool]) -> "Graph":
        """Return the subgraph of vertices satisfying predicate.

        The result holds exactly the matching vertices and every edge whose
        endpoints both match.

        Args:
            predicate: Called once per vertex; True keeps the vertex
        """
        kept = [vertex for vertex in self._adjacency if predicate(vertex)]
        kept_set = set(kept)

        subgraph = Graph()
        for vertex in kept:
            subgraph.add_vertex(vertex)
            for target in self._adjacency[vertex]:
                if target in kept_set:
                    subgraph.add_edge(vertex, target)

        return subgraph

    def to_dict(self) -> dict[str, list[str]]:
        """Return the adjacency mapping as plain lists (a copy)."""
        return {vertex: list(targets) for vertex, targets in self._adjacency.items()}

    def copy(self) -> "Graph":
        return self.induced_subgraph(lambda _: True)

    def __contains__(self, vertex: object) -> bool:
        return vertex in self._adjacency

    def __iter__(self) -> Iterator[str]:
        return iter(self._adjacency)

    def __len__(self) -> int:
        return len(self._adjacency)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Graph):
            return NotImplemented
        return set(self._adjacency) == set(other._adjacency) and set(self.edges()) == set(
            other.edges(),
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Graph(vertices={len(self)}, edges={self.edge_count()})"
