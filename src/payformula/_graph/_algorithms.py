"""Graph algorithms for formula dependency graphs."""

from collections.abc import Collection, Hashable, Mapping
from typing import TypeVar

T = TypeVar("T", bound=Hashable)

_EXHAUSTED = object()


def find_cycle(successors: Mapping[T, Collection[T]]) -> list[T] | None:
    """Find one cycle in a graph.

    Iterative depth-first search, so deep formulas do not hit the
    recursion limit.

    Args:
        successors: Mapping from node to the nodes it has edges to.

    Returns:
        The nodes of a cycle in edge order, starting and ending with the
        same node, or None if the graph is acyclic.

    Example:
        >>> find_cycle({"a": ["b"], "b": ["a"]})
        ['a', 'b', 'a']

    """
    done: set[T] = set()
    for start in successors:
        if start in done:
            continue
        path: list[T] = [start]
        on_path: set[T] = {start}
        stack = [iter(successors.get(start, ()))]
        while stack:
            nxt = next(stack[-1], _EXHAUSTED)
            if nxt is _EXHAUSTED:
                stack.pop()
                finished = path.pop()
                on_path.discard(finished)
                done.add(finished)
                continue
            if nxt in on_path:
                return [*path[path.index(nxt) :], nxt]
            if nxt in done:
                continue
            path.append(nxt)
            on_path.add(nxt)
            stack.append(iter(successors.get(nxt, ())))
    return None
