"""Rendering of query results as text, YAML snapshots and graph documents.

Everything here is a pure function of its input. Writing the produced
strings to files is left to the caller.
"""

from typing import Any

import yaml

from podwhy.graph.model import Graph
from podwhy.query import QueryResult, ResultKind

PATH_SEPARATOR = " ⟶ "
NO_RESULTS = "No results"
SUPPORTED_GRAPH_FORMATS = ("dot", "mermaid")


def render_paths(paths: list[list[str]]) -> str:
    """Render one arrow-joined line per path."""
    if not paths:
        return NO_RESULTS
    return "\n".join(PATH_SEPARATOR.join(path) for path in paths)


def render_vertices(vertices: list[str]) -> str:
    """Render one pod name per line."""
    if not vertices:
        return NO_RESULTS
    return "\n".join(vertices)


def report_header(result: QueryResult) -> str:
    query = result.query
    if result.kind is ResultKind.PATHS:
        return f"Why does {query.source} depend on {query.target}?"
    if query.reverse:
        header = f"What depends on {query.source}?"
    else:
        header = f"What does {query.source} depend on?"
    if query.direct_only:
        header += " (direct only)"
    return header


def render_report(result: QueryResult) -> str:
    """Render the full text report: a question header followed by the answer."""
    if result.kind is ResultKind.PATHS:
        body = render_paths(result.paths)
    else:
        body = render_vertices(result.vertices)
    return f"{report_header(result)}\n{body}"


def to_snapshot(result: QueryResult) -> list[Any]:
    """Return the structured snapshot: the ordered paths or the ordered names."""
    if result.kind is ResultKind.PATHS:
        return [list(path) for path in result.paths]
    return list(result.vertices)


def to_yaml(result: QueryResult) -> str:
    """Serialize the snapshot as a YAML document."""
    return yaml.safe_dump(to_snapshot(result), default_flow_style=False, allow_unicode=True)


def graph_description(subgraph: Graph) -> dict[str, list]:
    """Return the subgraph as sorted vertex and edge lists."""
    return {
        "vertices": sorted(subgraph.vertices()),
        "edges": [list(edge) for edge in sorted(subgraph.edges())],
    }


def to_dot(subgraph: Graph, name: str = "Dependencies") -> str:
    """Generate a Graphviz DOT document.

    Edges point from a pod to the pod it depends on.
    """

    def escape_dot_string(s: str) -> str:
        return s.replace("\\", "\\\\").replace('"', '\\"')

    description = graph_description(subgraph)
    lines = [f"digraph {name} {{"]
    lines.append("    node [shape=box, style=rounded];")
    lines.extend(f'    "{escape_dot_string(vertex)}";' for vertex in description["vertices"])
    lines.extend(
        f'    "{escape_dot_string(source)}" -> "{escape_dot_string(target)}";'
        for source, target in description["edges"]
    )
    lines.append("}")
    return "\n".join(lines) + "\n"


def to_mermaid(subgraph: Graph) -> str:
    """Generate a Mermaid flowchart document.

    Node ids are the pod names with non-alphanumerics replaced by ``_``. Pods
    that sanitize to an id already taken get a numeric suffix, so every pod
    keeps its own node.
    """

    def sanitize(vertex: str) -> str:
        return "".join(ch if ch.isalnum() else "_" for ch in vertex)

    def escape_label(vertex: str) -> str:
        return vertex.replace('"', "#quot;")

    description = graph_description(subgraph)

    ids: dict[str, str] = {}
    taken: set[str] = set()
    for vertex in description["vertices"]:
        node_id = base = sanitize(vertex)
        suffix = 2
        while node_id in taken:
            node_id = f"{base}_{suffix}"
            suffix += 1
        taken.add(node_id)
        ids[vertex] = node_id

    lines = ["graph TD"]
    lines.extend(
        f'    {ids[vertex]}["{escape_label(vertex)}"]' for vertex in description["vertices"]
    )
    lines.extend(
        f"    {ids[source]} --> {ids[target]}"
        for source, target in description["edges"]
    )
    return "\n".join(lines) + "\n"


def render_graph(subgraph: Graph, output_format: str = "dot") -> str:
    """Render a graph document in the requested format.

    Raises:
        ValueError: If an unsupported format is requested
    """
    output_format = output_format.lower().strip()

    if output_format == "dot":
        return to_dot(subgraph)
    if output_format == "mermaid":
        return to_mermaid(subgraph)
    error_msg = f"Unsupported format: {output_format}. Use 'dot' or 'mermaid'."
    raise ValueError(error_msg)
