"""Graph validation with cycle detection and reporting.

Traversals assume an acyclic graph. This module checks that precondition up
front and reports cycles with their full path. It also reports dependency
names that have no record of their own and pods with no edges at all.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

import structlog

from podwhy.errors import CyclicGraphError
from podwhy.graph.model import Graph

logger = structlog.get_logger(__name__)


@dataclass
class ValidationReport:
    """Report containing validation results for a dependency graph.

    Attributes:
        is_valid: Whether the graph passed all validation checks
        errors: List of error messages (critical issues)
        warnings: List of warning messages (potential issues)
        cycles: List of detected cycles, each a list of pod names with the
            first pod repeated at the end
        missing_records: Pods referenced as dependencies but without a record
        isolated_pods: Pods with neither dependencies nor dependents
    """

    is_valid: bool = True
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    cycles: list[list[str]] = field(default_factory=list)
    missing_records: set[str] = field(default_factory=set)
    isolated_pods: set[str] = field(default_factory=set)

    def add_error(self, message: str) -> None:
        """Add an error message and mark validation as failed."""
        self.errors.append(message)
        self.is_valid = False
        logger.error("validation_error", message=message)

    def add_warning(self, message: str) -> None:
        """Add a warning message without failing validation."""
        self.warnings.append(message)
        logger.warning("validation_warning", message=message)

    def raise_for_cycles(self) -> None:
        """Raise if validation found a cycle.

        Raises:
            CyclicGraphError: Carrying the first cycle found
        """
        if self.cycles:
            logger.error("cyclic_graph_rejected", cycle=self.cycles[0])
            raise CyclicGraphError(self.cycles[0])


class GraphValidator:
    """Validator for dependency graphs with detailed error reporting.

    Checks performed:
    - Cycle detection with complete path information
    - Dependencies that have no record (when record names are given)
    - Isolated pods
    """

    def validate(
        self,
        graph: Graph,
        record_names: Iterable[str] | None = None,
        check_cycles: bool = True,
    ) -> ValidationReport:
        """Validate a dependency graph and generate a detailed report.

        Args:
            graph: The graph to validate
            record_names: Names that have a dependency record. When omitted,
                the missing record check is skipped.
            check_cycles: Run cycle detection

        Returns:
            ValidationReport containing all validation results
        """
        logger.info("starting_graph_validation", vertex_count=len(graph))

        report = ValidationReport()

        if check_cycles:
            cycles = self.find_cycles(graph)
            if cycles:
                report.cycles = cycles
                for cycle in cycles:
                    report.add_error(f"Cycle detected: {' -> '.join(cycle)}")

        if record_names is not None:
            missing = set(graph.vertices()) - set(record_names)
            if missing:
                report.missing_records = missing
                report.add_warning(
                    f"Pods referenced as dependencies but without a record: "
                    f"{', '.join(sorted(missing))}",
                )

        isolated = self._find_isolated(graph)
        if isolated:
            report.isolated_pods = isolated
            logger.debug("isolated_pods_found", count=len(isolated))

        logger.info(
            "graph_validation_complete",
            is_valid=report.is_valid,
            error_count=len(report.errors),
            warning_count=len(report.warnings),
        )

        return report

    def find_cycles(self, graph: Graph, first_only: bool = False) -> list[list[str]]:
        """Detect cycles using an iterative DFS.

        Each DFS tree reports at most one cycle, so the result is a sample of
        the graph's cycles rather than an exhaustive list.

        Args:
            graph: The graph to inspect
            first_only: Stop after the first cycle

        Returns:
            List of cycles, each a list of vertices with the first repeated
            at the end
        """
        visited: set[str] = set()
        cycles: list[list[str]] = []

        for root in graph.vertices():
            if root in visited:
                continue
            cycle = self._dfs_cycle_detect(root, graph, visited)
            if cycle:
                cycles.append(cycle)
                if first_only:
                    break

        return cycles

    def _dfs_cycle_detect(
        self,
        root: str,
        graph: Graph,
        visited: set[str],
    ) -> list[str] | None:
        """Walk the DFS tree under root and return the first back edge's cycle."""
        visited.add(root)
        path = [root]
        rec_stack = {root}
        stack: list[Iterator[str]] = [iter(graph.adjacent_vertices(root))]

        while stack:
            for dep in stack[-1]:
                if dep in rec_stack:
                    return [*path[path.index(dep):], dep]
                if dep not in visited:
                    visited.add(dep)
                    rec_stack.add(dep)
                    path.append(dep)
                    stack.append(iter(graph.adjacent_vertices(dep)))
                    break
            else:
                # Backtrack
                stack.pop()
                rec_stack.discard(path.pop())

        return None

    def _find_isolated(self, graph: Graph) -> set[str]:
        has_dependents = {target for _, target in graph.edges()}
        return {
            vertex
            for vertex in graph.vertices()
            if not graph.adjacent_vertices(vertex) and vertex not in has_dependents
        }
