"""Unit tests for the query layer.

Tests cover:
- Path queries and reachability queries end to end
- Pod name validation before any graph work
- Cycle checks and duplicate policies
"""

import pytest

from podwhy.errors import CyclicGraphError, DuplicateRecordError, UnknownPodError
from podwhy.graph.builder import DependencyRecord, DuplicatePolicy
from podwhy.graph.reachability import Depth, Direction
from podwhy.query import ResultKind, WhyQuery, check_pods_exist, find_dependency_paths, run_query


@pytest.fixture
def records() -> list[DependencyRecord]:
    """Two branches from A to G, with C off to the side."""
    return DependencyRecord.from_mapping(
        {
            "A": ["B", "C"],
            "B": ["D", "E"],
            "C": [],
            "D": ["G"],
            "E": ["G"],
            "G": [],
        },
    )


@pytest.fixture
def diamond_records() -> list[DependencyRecord]:
    """Same shape, but C also depends on D."""
    return DependencyRecord.from_mapping(
        {
            "A": ["B", "C"],
            "B": ["D", "E"],
            "C": ["D"],
            "D": ["G"],
            "E": ["G"],
            "G": [],
        },
    )


class TestWhyQuery:
    """Test the query value type."""

    def test_defaults(self):
        """Test a bare query is forward and transitive."""
        query = WhyQuery("A")

        assert query.target is None
        assert query.direction is Direction.FORWARD
        assert query.depth is Depth.TRANSITIVE

    def test_flags(self):
        """Test reverse and direct_only map to direction and depth."""
        query = WhyQuery("A", reverse=True, direct_only=True)

        assert query.direction is Direction.REVERSE
        assert query.depth is Depth.DIRECT

    def test_pods(self):
        """Test the referenced names."""
        assert WhyQuery("A").pods() == ["A"]
        assert WhyQuery("A", "G").pods() == ["A", "G"]


class TestPathQueries:
    """Queries with a target."""

    def test_all_paths(self, records):
        """Test both paths from A to G."""
        result = run_query(records, WhyQuery("A", "G"))

        assert result.kind is ResultKind.PATHS
        assert result.paths == [["A", "B", "D", "G"], ["A", "B", "E", "G"]]
        assert set(result.subgraph.vertices()) == {"A", "B", "D", "E", "G"}

    def test_all_paths_with_shared_vertex(self, diamond_records):
        """Test the path through C is found when C also reaches D."""
        result = run_query(diamond_records, WhyQuery("A", "G"))

        assert result.paths == [
            ["A", "B", "D", "G"],
            ["A", "B", "E", "G"],
            ["A", "C", "D", "G"],
        ]

    def test_reverse_and_direct_ignored_with_target(self, records):
        """Test flags have no effect on path queries."""
        plain = run_query(records, WhyQuery("A", "G"))
        flagged = run_query(records, WhyQuery("A", "G", reverse=True, direct_only=True))

        assert flagged.paths == plain.paths

    def test_no_path(self, records):
        """Test unrelated pods give an empty result."""
        result = run_query(records, WhyQuery("C", "G"))

        assert result.paths == []
        assert result.is_empty
        assert len(result.subgraph) == 0

    def test_source_equals_target(self, records):
        """Test the one-vertex path convention."""
        assert run_query(records, WhyQuery("A", "A")).paths == [["A"]]

    def test_find_dependency_paths_requires_target(self):
        """Test the path helper refuses a query without target."""
        with pytest.raises(ValueError, match="target"):
            find_dependency_paths(None, WhyQuery("A"))


class TestReachabilityQueries:
    """Queries without a target."""

    def test_reverse_dependencies(self, records):
        """Test everything that depends on G."""
        result = run_query(records, WhyQuery("G", reverse=True))

        assert result.kind is ResultKind.VERTICES
        assert result.vertices == ["A", "B", "D", "E"]

    def test_reverse_dependencies_with_shared_vertex(self, diamond_records):
        """Test C shows up once it depends on D."""
        result = run_query(diamond_records, WhyQuery("G", reverse=True))

        assert result.vertices == ["A", "B", "C", "D", "E"]

    def test_forward_dependencies(self, records):
        """Test everything B depends on."""
        assert run_query(records, WhyQuery("B")).vertices == ["D", "E", "G"]

    def test_direct_only(self, records):
        """Test direct dependents of G."""
        result = run_query(records, WhyQuery("G", reverse=True, direct_only=True))

        assert result.vertices == ["D", "E"]

    def test_leaf_has_no_dependencies(self, records):
        """Test a pod without dependencies."""
        result = run_query(records, WhyQuery("G"))

        assert result.vertices == []
        assert result.is_empty


class TestValidation:
    """Unknown pods, duplicates and cycles."""

    def test_unknown_target(self, records):
        """Test an unknown target fails."""
        with pytest.raises(UnknownPodError) as exc_info:
            run_query(records, WhyQuery("A", "Z"))

        assert exc_info.value.pod == "Z"
        assert str(exc_info.value) == "Cannot find pod named Z"

    def test_unknown_source(self, records):
        """Test an unknown source fails."""
        with pytest.raises(UnknownPodError):
            run_query(records, WhyQuery("Z"))

    def test_dependency_without_record_is_unknown(self):
        """Test names are checked against records, not graph vertices."""
        records = [DependencyRecord("A", ("B",))]

        with pytest.raises(UnknownPodError):
            run_query(records, WhyQuery("A", "B"))

    def test_unknown_pod_reported_before_cycle_check(self):
        """Test name validation happens before graph work."""
        records = DependencyRecord.from_mapping({"A": ["B"], "B": ["A"]})

        with pytest.raises(UnknownPodError):
            run_query(records, WhyQuery("Z"))

    def test_check_pods_exist(self):
        """Test the source is checked before the target."""
        with pytest.raises(UnknownPodError) as exc_info:
            check_pods_exist(WhyQuery("X", "Y"), {"A"})

        assert exc_info.value.pod == "X"

    def test_cycle_rejected(self):
        """Test cyclic input fails with the cycle attached."""
        records = DependencyRecord.from_mapping({"A": ["B"], "B": ["C"], "C": ["A"]})

        with pytest.raises(CyclicGraphError) as exc_info:
            run_query(records, WhyQuery("A"))

        assert exc_info.value.cycle == ["A", "B", "C", "A"]

    def test_cycle_check_disabled_path_search_still_detects(self):
        """Test path enumeration reports a cycle even without the up-front check."""
        records = DependencyRecord.from_mapping({"A": ["B"], "B": ["A", "T"], "T": []})

        with pytest.raises(CyclicGraphError):
            run_query(records, WhyQuery("A", "T"), check_cycles=False)

    def test_conflicting_duplicates(self):
        """Test conflicting records fail by default."""
        records = [DependencyRecord("A", ("B",)), DependencyRecord("A", ("C",))]

        with pytest.raises(DuplicateRecordError):
            run_query(records, WhyQuery("A"))

    def test_last_wins(self):
        """Test conflicting records resolve to the later one when allowed."""
        records = [
            DependencyRecord("A", ("B",)),
            DependencyRecord("A", ("C",)),
            DependencyRecord("C"),
        ]

        result = run_query(records, WhyQuery("A"), duplicate_policy=DuplicatePolicy.LAST_WINS)

        assert result.vertices == ["C"]

    def test_missing_record_reported_as_warning(self):
        """Test a dependency without a record of its own is flagged."""
        records = DependencyRecord.from_mapping({"A": ["B", "X"], "B": []})

        result = run_query(records, WhyQuery("A"))

        assert result.vertices == ["B", "X"]
        assert result.validation.missing_records == {"X"}
        assert len(result.warnings) == 1
        assert "X" in result.warnings[0]

    def test_complete_records_have_no_warnings(self, records):
        """Test a graph where every pod has a record is clean."""
        result = run_query(records, WhyQuery("A", "G"))

        assert result.warnings == []
        assert result.validation.is_valid

    def test_subspecs_ignored(self):
        """Test subspec dependencies never appear in results."""
        records = DependencyRecord.from_mapping({"A": ["B", "Firebase/Core"], "B": []})

        assert run_query(records, WhyQuery("A")).vertices == ["B"]
