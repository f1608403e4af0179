"""Direct and transitive reachability in either edge direction."""

from collections import deque
from dataclasses import dataclass
from enum import Enum

import structlog

from podwhy.errors import UnknownVertexError
from podwhy.graph.model import Graph

logger = structlog.get_logger(__name__)


class Direction(str, Enum):
    """Edge direction to follow.

    FORWARD answers "what does start depend on", REVERSE answers "what
    depends on start".
    """

    FORWARD = "forward"
    REVERSE = "reverse"


class Depth(str, Enum):
    """How far to follow edges from the start vertex."""

    DIRECT = "direct"
    TRANSITIVE = "transitive"


@dataclass
class Reachability:
    """Result of a reachability query.

    Attributes:
        start: The vertex the query started from
        vertices: Reachable vertices, sorted, never containing start
        subgraph: Subgraph of the original graph induced by start and the
            reachable vertices, with edges in dependency orientation
    """

    start: str
    vertices: list[str]
    subgraph: Graph


def bfs_reachable(graph: Graph, start: str) -> set[str]:
    """Return every vertex reachable from start in one or more hops.

    start itself is only included if it lies on a cycle, which acyclic
    inputs rule out.

    Raises:
        UnknownVertexError: If start is not in the graph
    """
    if not graph.has_vertex(start):
        raise UnknownVertexError(start)

    reached: set[str] = set()
    queue = deque([start])

    while queue:
        current = queue.popleft()
        for successor in graph.adjacent_vertices(current):
            if successor not in reached:
                reached.add(successor)
                queue.append(successor)

    return reached


def reachable(
    start: str,
    graph: Graph,
    direction: Direction = Direction.FORWARD,
    depth: Depth = Depth.TRANSITIVE,
) -> Reachability:
    """Return the vertices reachable from start, sorted, and their subgraph.

    Args:
        start: Vertex to start from
        graph: A directed acyclic graph
        direction: FORWARD follows dependency edges, REVERSE follows them
            backwards (the traversal runs on graph.reverse())
        depth: DIRECT stops after one hop, TRANSITIVE follows any number

    Returns:
        Reachability with the sorted vertex list (start excluded) and the
        subgraph of ``graph`` induced by the vertex list plus start

    Raises:
        UnknownVertexError: If start is not in the graph
    """
    if not graph.has_vertex(start):
        logger.error("reachability_start_unknown", start=start)
        raise UnknownVertexError(start)

    direction = Direction(direction)
    depth = Depth(depth)
    traversed = graph.reverse() if direction is Direction.REVERSE else graph

    if depth is Depth.DIRECT:
        found = set(traversed.adjacent_vertices(start))
    else:
        found = bfs_reachable(traversed, start)

    found.discard(start)
    vertices = sorted(found)

    keep = found | {start}
    subgraph = graph.induced_subgraph(lambda vertex: vertex in keep)

    logger.debug(
        "reachability_computed",
        start=start,
        direction=direction.value,
        depth=depth.value,
        reachable_count=len(vertices),
    )

    return Reachability(start=start, vertices=vertices, subgraph=subgraph)
