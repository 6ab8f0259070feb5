"""Tests for DependencyGraph and graph algorithms."""

from payformula import Connection, Formula, Node, Number, Operation, Operator, Result
from payformula._graph import DependencyGraph, find_cycle


class TestFindCycle:
    def test_acyclic(self) -> None:
        assert find_cycle({"a": ["b", "c"], "b": ["c"], "c": []}) is None

    def test_two_node_cycle(self) -> None:
        assert find_cycle({"a": ["b"], "b": ["a"]}) == ["a", "b", "a"]

    def test_self_loop(self) -> None:
        assert find_cycle({"a": ["a"]}) == ["a", "a"]

    def test_cycle_behind_acyclic_prefix(self) -> None:
        cycle = find_cycle({"start": ["x"], "x": ["y"], "y": ["z"], "z": ["x"]})
        assert cycle == ["x", "y", "z", "x"]

    def test_shared_descendant_is_not_a_cycle(self) -> None:
        assert find_cycle({"a": ["b", "c"], "b": ["d"], "c": ["d"], "d": []}) is None

    def test_deep_chain(self) -> None:
        chain = {i: [i + 1] for i in range(10_000)}
        chain[10_000] = []
        assert find_cycle(chain) is None


class TestDependencyGraph:
    def test_ancestors(self) -> None:
        graph = DependencyGraph.from_edges([("a", "b"), ("b", "c"), ("x", "c")])
        assert graph.ancestors("c") == frozenset({"a", "b", "x"})
        assert graph.ancestors("a") == frozenset()

    def test_isolated_nodes_have_no_ancestors(self) -> None:
        graph = DependencyGraph.from_edges([("a", "b")], nodes=["lonely"])
        assert graph.ancestors("lonely") == frozenset()

    def test_duplicate_edges_collapse(self) -> None:
        graph = DependencyGraph.from_edges([("a", "b"), ("a", "b")])
        assert graph.ancestors("b") == frozenset({"a"})
        assert graph.find_cycle() is None

    def test_find_cycle(self) -> None:
        assert DependencyGraph.from_edges([("a", "b"), ("b", "a")]).find_cycle() == ["a", "b", "a"]
        assert DependencyGraph.from_edges([("a", "b")]).find_cycle() is None

    def test_from_formula(self) -> None:
        formula = Formula.from_parts(
            "f",
            [
                Node("n", Number(1)),
                Node("unused", Number(2)),
                Node("sum", Operation(Operator.SUM)),
                Node("res", Result()),
            ],
            [Connection("c1", "n", "sum"), Connection("c2", "sum", "res")],
        )

        graph = DependencyGraph.from_formula(formula)

        assert graph.ancestors("res") == frozenset({"n", "sum"})
        assert graph.ancestors("unused") == frozenset()

    def test_from_formula_keeps_dangling_connections(self) -> None:
        formula = Formula.from_parts(
            "f",
            [Node("res", Result())],
            [Connection("c1", "ghost", "res")],
        )

        graph = DependencyGraph.from_formula(formula)

        assert graph.ancestors("res") == frozenset({"ghost"})
