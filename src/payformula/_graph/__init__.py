"""Graph module providing dependency graph abstractions.

This module contains:
- DependencyGraph[T]: A generic, immutable directed graph
- find_cycle: Algorithm for locating a cycle
"""

from ._algorithms import find_cycle
from ._dependency_graph import DependencyGraph

__all__ = ["DependencyGraph", "find_cycle"]
