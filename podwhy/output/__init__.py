"""Output formatting for query results."""

from podwhy.output.formatter import (
    NO_RESULTS,
    graph_description,
    render_graph,
    render_paths,
    render_report,
    render_vertices,
    to_dot,
    to_mermaid,
    to_snapshot,
    to_yaml,
)

__all__ = [
    "NO_RESULTS",
    "graph_description",
    "render_graph",
    "render_paths",
    "render_report",
    "render_vertices",
    "to_dot",
    "to_mermaid",
    "to_snapshot",
    "to_yaml",
]
