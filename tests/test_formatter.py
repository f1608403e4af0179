"""Unit tests for result formatting."""

import pytest
import yaml

from podwhy.graph.model import Graph
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
from podwhy.query import QueryResult, ResultKind, WhyQuery


@pytest.fixture
def subgraph() -> Graph:
    graph = Graph()
    graph.add_edge("A", "B")
    graph.add_edge("B", "D")
    graph.add_edge("A", "C")
    graph.add_edge("C", "D")
    return graph


@pytest.fixture
def paths_result(subgraph) -> QueryResult:
    return QueryResult(
        query=WhyQuery("A", "D"),
        kind=ResultKind.PATHS,
        subgraph=subgraph,
        paths=[["A", "B", "D"], ["A", "C", "D"]],
    )


@pytest.fixture
def vertices_result(subgraph) -> QueryResult:
    return QueryResult(
        query=WhyQuery("D", reverse=True),
        kind=ResultKind.VERTICES,
        subgraph=subgraph,
        vertices=["A", "B", "C"],
    )


class TestTextRendering:
    """Test human-readable output."""

    def test_render_paths(self):
        """Test one arrow-joined line per path."""
        assert render_paths([["A", "B"], ["A", "C", "B"]]) == "A ⟶ B\nA ⟶ C ⟶ B"

    def test_render_paths_empty(self):
        """Test the no-results sentinel for paths."""
        assert render_paths([]) == NO_RESULTS

    def test_render_vertices(self):
        """Test one name per line."""
        assert render_vertices(["A", "B"]) == "A\nB"

    def test_render_vertices_empty(self):
        """Test the no-results sentinel for vertices."""
        assert render_vertices([]) == NO_RESULTS

    def test_report_for_paths(self, paths_result):
        """Test the path report header and body."""
        report = render_report(paths_result)

        assert report.splitlines() == [
            "Why does A depend on D?",
            "A ⟶ B ⟶ D",
            "A ⟶ C ⟶ D",
        ]

    def test_report_for_reverse_query(self, vertices_result):
        """Test the reverse dependency report."""
        assert render_report(vertices_result).splitlines() == ["What depends on D?", "A", "B", "C"]

    def test_report_for_forward_direct_query(self, subgraph):
        """Test the forward direct header."""
        result = QueryResult(
            query=WhyQuery("A", direct_only=True),
            kind=ResultKind.VERTICES,
            subgraph=subgraph,
            vertices=[],
        )

        assert render_report(result) == f"What does A depend on? (direct only)\n{NO_RESULTS}"


class TestSnapshots:
    """Test structured output."""

    def test_snapshot_of_paths(self, paths_result):
        """Test the snapshot is the ordered path list."""
        assert to_snapshot(paths_result) == [["A", "B", "D"], ["A", "C", "D"]]

    def test_snapshot_of_vertices(self, vertices_result):
        """Test the snapshot is the ordered name list."""
        assert to_snapshot(vertices_result) == ["A", "B", "C"]

    def test_yaml_loads_back(self, paths_result, vertices_result):
        """Test the YAML output parses to the snapshot."""
        assert yaml.safe_load(to_yaml(paths_result)) == to_snapshot(paths_result)
        assert yaml.safe_load(to_yaml(vertices_result)) == ["A", "B", "C"]


class TestGraphDocuments:
    """Test graph descriptions."""

    def test_graph_description(self, subgraph):
        """Test sorted vertices and edges."""
        assert graph_description(subgraph) == {
            "vertices": ["A", "B", "C", "D"],
            "edges": [["A", "B"], ["A", "C"], ["B", "D"], ["C", "D"]],
        }

    def test_dot(self, subgraph):
        """Test DOT output lists every vertex and edge."""
        dot = to_dot(subgraph)

        assert dot.startswith("digraph Dependencies {")
        assert '    "A" -> "B";' in dot
        assert '    "C" -> "D";' in dot
        assert dot.rstrip().endswith("}")

    def test_dot_escapes_quotes(self):
        """Test quotes in names are escaped."""
        graph = Graph()
        graph.add_vertex('we"ird')

        assert '"we\\"ird";' in to_dot(graph)

    def test_dot_empty_graph(self):
        """Test an empty graph still gives a valid document."""
        assert to_dot(Graph()) == "digraph Dependencies {\n    node [shape=box, style=rounded];\n}\n"

    def test_mermaid(self):
        """Test Mermaid output sanitizes identifiers."""
        graph = Graph()
        graph.add_edge("Google-Maps", "GTM.Logger")

        mermaid = to_mermaid(graph)

        assert mermaid.startswith("graph TD")
        assert '    Google_Maps["Google-Maps"]' in mermaid
        assert "    Google_Maps --> GTM_Logger" in mermaid

    def test_mermaid_ids_unique_when_names_sanitize_alike(self):
        """Test pods whose sanitized names collide keep separate nodes."""
        graph = Graph()
        graph.add_edge("App", "React-Core")
        graph.add_vertex("React_Core")

        lines = to_mermaid(graph).splitlines()[1:]
        node_lines = [line for line in lines if "[" in line]
        node_ids = [line.split("[", 1)[0].strip() for line in node_lines]

        assert len(node_ids) == len(set(node_ids)) == 3
        assert '    React_Core["React-Core"]' in lines
        assert '    React_Core_2["React_Core"]' in lines
        assert "    App --> React_Core" in lines

    def test_mermaid_escapes_quotes(self):
        """Test quotes in labels are written as entity codes."""
        graph = Graph()
        graph.add_vertex('Pod"X')

        assert '    Pod_X["Pod#quot;X"]' in to_mermaid(graph).splitlines()

    def test_render_graph_formats(self, subgraph):
        """Test format dispatch is case-insensitive."""
        assert render_graph(subgraph, "DOT") == to_dot(subgraph)
        assert render_graph(subgraph, " mermaid ") == to_mermaid(subgraph)

    def test_render_graph_unsupported(self, subgraph):
        """Test unknown formats are rejected."""
        with pytest.raises(ValueError, match="Unsupported format"):
            render_graph(subgraph, "svg")
