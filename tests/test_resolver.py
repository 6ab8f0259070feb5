"""Tests for graph resolution helpers."""

import pytest

from payformula import (
    Connection,
    Formula,
    MissingResultNodeError,
    Node,
    Number,
    Operation,
    Operator,
    Result,
    UnknownNodeReferenceError,
    incoming_connections,
    resolve_result_node,
)
from payformula._resolver import get_node


@pytest.fixture
def formula() -> Formula:
    return Formula.from_parts(
        "f",
        [
            Node("a", Number(1)),
            Node("b", Number(2)),
            Node("sum", Operation(Operator.SUM)),
            Node("res", Result()),
        ],
        [
            Connection("c1", "b", "sum", "output", "input-2"),
            Connection("c2", "sum", "res", "output", "input"),
            Connection("c3", "a", "sum", "output", "input-1"),
        ],
    )


class TestResolveResultNode:
    def test_explicit_id(self) -> None:
        formula = Formula.from_parts("f", [Node("res", Result())], [], result_node_id="other")
        assert resolve_result_node(formula) == "other"

    def test_first_result_kind(self, formula: Formula) -> None:
        assert resolve_result_node(formula) == "res"

    def test_empty_string_id_falls_back_to_scan(self) -> None:
        formula = Formula.from_parts("f", [Node("res", Result())], [], result_node_id="")
        assert resolve_result_node(formula) == "res"

    def test_missing(self) -> None:
        formula = Formula.from_parts("f", [Node("a", Number(1))], [])
        with pytest.raises(MissingResultNodeError, match="no tiene un nodo de resultado"):
            resolve_result_node(formula)


class TestIncomingConnections:
    def test_preserves_declaration_order(self, formula: Formula) -> None:
        conns = incoming_connections(formula, "sum")
        assert [c.id for c in conns] == ["c1", "c3"]

    def test_filters_by_slot(self, formula: Formula) -> None:
        conns = incoming_connections(formula, "sum", "input-1")
        assert [c.id for c in conns] == ["c3"]

    def test_no_incoming(self, formula: Formula) -> None:
        assert incoming_connections(formula, "a") == []


class TestGetNode:
    def test_existing(self, formula: Formula) -> None:
        assert get_node(formula, "a").kind == Number(1)

    def test_unknown(self, formula: Formula) -> None:
        with pytest.raises(UnknownNodeReferenceError) as exc_info:
            get_node(formula, "ghost")
        assert exc_info.value.node_id == "ghost"
