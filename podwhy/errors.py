"""Exception hierarchy for dependency queries.

Every error raised by the graph core, the record cache and the query layer
derives from PodWhyError and carries the offending names as attributes so
callers can build a user-facing message without parsing strings.
"""


class PodWhyError(Exception):
    """Base class for all pod-why errors."""

    def __init__(self, message: str):
        """Initialize the exception with a descriptive message.

        Args:
            message: Description of the error
        """
        super().__init__(message)
        self.message = message


class UnknownVertexError(PodWhyError):
    """Raised when a graph operation references a vertex that is not in the graph."""

    def __init__(self, vertex: str):
        super().__init__(f"Unknown vertex: {vertex}")
        self.vertex = vertex


class UnknownPodError(UnknownVertexError):
    """Raised when a query names a pod that has no dependency record.

    Query names are checked against record names before any graph work, so
    a name that only appears as somebody's dependency is still unknown.
    """

    def __init__(self, pod: str):
        super().__init__(pod)
        self.pod = pod
        self.message = f"Cannot find pod named {pod}"
        self.args = (self.message,)


class DuplicateRecordError(PodWhyError):
    """Raised when the same pod appears twice with conflicting dependency lists."""

    def __init__(self, name: str, first: list[str], second: list[str]):
        super().__init__(
            f"Conflicting records for pod {name}: {first} vs {second}",
        )
        self.name = name
        self.first = first
        self.second = second


class CyclicGraphError(PodWhyError):
    """Raised when a cycle is found in a graph that must be acyclic.

    Attributes:
        cycle: The vertices forming the cycle, with the first vertex repeated
            at the end (e.g. ``["A", "B", "A"]``)
    """

    def __init__(self, cycle: list[str]):
        super().__init__(f"Cycle detected in dependency graph: {' -> '.join(cycle)}")
        self.cycle = cycle


class RecordCacheError(PodWhyError):
    """Raised when a cached record snapshot cannot be loaded."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Invalid record cache {path}: {reason}")
        self.path = path
        self.reason = reason
