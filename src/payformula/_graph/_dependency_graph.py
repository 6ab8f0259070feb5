"""Dependency graph over the nodes of a formula."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Generic, TypeVar

from ._algorithms import find_cycle

if TYPE_CHECKING:
    from payformula._model import Formula

T = TypeVar("T")


def _append_unique(bucket: dict[T, list[T]], key: T, value: T) -> None:
    values = bucket.setdefault(key, [])
    if value not in values:
        values.append(value)


@dataclass(frozen=True, slots=True)
class DependencyGraph(Generic[T]):
    """A directed graph representing dependencies between nodes.

    This is an immutable data structure with query methods. Unlike the
    evaluation engine it looks at every connection at once, so it can
    answer questions about the whole formula (cycles, unreachable nodes)
    without evaluating it.

    The graph represents "depends on" relationships:
    - predecessors[b] = (a,) means "b depends on a"
    - successors[a] = (b,) means "a is depended on by b"

    Neighbours are kept in edge declaration order so that query results
    are deterministic.

    Attributes:
        _predecessors: Mapping from node to its direct dependencies.
        _successors: Mapping from node to nodes that depend on it.

    """

    _predecessors: dict[T, tuple[T, ...]] = field(default_factory=dict)
    _successors: dict[T, tuple[T, ...]] = field(default_factory=dict)

    @classmethod
    def from_edges(cls, edges: list[tuple[T, T]], nodes: list[T] | None = None) -> DependencyGraph[T]:
        """Build a graph from a list of (source, target) edges.

        An edge (a, b) means "b depends on a".

        Args:
            edges: List of (source, target) tuples.
            nodes: Extra nodes to include even if no edge touches them.

        Returns:
            A new DependencyGraph instance.

        Example:
            >>> graph = DependencyGraph.from_edges([("var", "sum"), ("sum", "result")])
            >>> sorted(graph.ancestors("result"))
            ['sum', 'var']

        """
        predecessors: dict[T, list[T]] = {}
        successors: dict[T, list[T]] = {}

        for node in nodes or ():
            predecessors.setdefault(node, [])
            successors.setdefault(node, [])

        for src, dst in edges:
            _append_unique(predecessors, dst, src)
            _append_unique(successors, src, dst)
            predecessors.setdefault(src, [])
            successors.setdefault(dst, [])

        return cls(
            _predecessors={k: tuple(v) for k, v in predecessors.items()},
            _successors={k: tuple(v) for k, v in successors.items()},
        )

    @classmethod
    def from_formula(cls, formula: Formula) -> DependencyGraph[str]:
        """Build the graph of a formula: an edge per connection, source to destination.

        Connections to missing nodes still become edges; reporting them is
        left to the caller.
        """
        edges = [(conn.source_node_id, conn.destination_node_id) for conn in formula.connections]
        return DependencyGraph.from_edges(edges, nodes=list(formula.nodes))

    def ancestors(self, node: T) -> frozenset[T]:
        """Get all transitive dependencies of a node.

        Args:
            node: The node to query.

        Returns:
            Set of all nodes that this node transitively depends on.

        """
        visited: set[T] = set()
        stack = list(self._predecessors.get(node, ()))
        while stack:
            current = stack.pop()
            if current not in visited:
                visited.add(current)
                stack.extend(self._predecessors.get(current, ()))
        return frozenset(visited)

    def find_cycle(self) -> list[T] | None:
        """Find one cycle, as a list of nodes in dependency direction.

        Returns:
            The nodes of the cycle, first and last being the same node,
            or None if the graph is acyclic.

        """
        return find_cycle(self._successors)
