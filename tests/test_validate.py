"""Tests for static formula validation."""

from payformula import (
    Comparator,
    Connection,
    Formula,
    FormulaIssue,
    IssueSeverity,
    Node,
    Number,
    Operation,
    Operator,
    Result,
    Unsupported,
    Variable,
    validate_formula,
)
from payformula._validate import has_errors


def _errors(issues: list[FormulaIssue]) -> list[FormulaIssue]:
    return [issue for issue in issues if issue.severity == IssueSeverity.ERROR]


def _warnings(issues: list[FormulaIssue]) -> list[FormulaIssue]:
    return [issue for issue in issues if issue.severity == IssueSeverity.WARNING]


def test_valid_formula_has_no_issues() -> None:
    formula = Formula.from_parts(
        "f",
        [
            Node("var", Variable("reservaciones")),
            Node("num", Number(10)),
            Node("sum", Operation(Operator.SUM)),
            Node("res", Result()),
        ],
        [
            Connection("c1", "var", "sum", "output", "input-1"),
            Connection("c2", "num", "sum", "output", "input-2"),
            Connection("c3", "sum", "res"),
        ],
    )

    assert validate_formula(formula) == []
    assert not has_errors([])


def test_missing_result_node() -> None:
    formula = Formula.from_parts("f", [Node("num", Number(1))], [])

    issues = validate_formula(formula)

    assert [i.message for i in _errors(issues)] == ["La fórmula no tiene un nodo de resultado definido"]
    assert has_errors(issues)


def test_result_node_id_points_nowhere() -> None:
    formula = Formula.from_parts("f", [Node("num", Number(1))], [], result_node_id="resultado-default")

    issues = _errors(validate_formula(formula))

    assert len(issues) == 1
    assert issues[0].node_id == "resultado-default"


def test_empty_result_node_id_means_unset() -> None:
    formula = Formula.from_parts(
        "f",
        [Node("num", Number(1)), Node("spare", Number(2)), Node("res", Result())],
        [Connection("c1", "num", "res")],
        result_node_id="",
    )

    issues = validate_formula(formula)

    assert not has_errors(issues)
    assert [(i.node_id, i.severity) for i in issues] == [("spare", IssueSeverity.WARNING)]


def test_second_result_node_is_a_warning() -> None:
    formula = Formula.from_parts(
        "f",
        [Node("num", Number(1)), Node("r1", Result()), Node("r2", Result())],
        [Connection("c1", "num", "r1"), Connection("c2", "num", "r2")],
    )

    issues = validate_formula(formula)

    assert not has_errors(issues)
    warnings = _warnings(issues)
    assert any(w.node_id == "r2" and "Solo puede haber" in w.message for w in warnings)
    # r2 does not feed r1, which is the result used
    assert any(w.node_id == "r2" and "no contribuye" in w.message for w in warnings)


def test_dangling_connection() -> None:
    formula = Formula.from_parts(
        "f",
        [Node("res", Result())],
        [Connection("c1", "ghost", "res")],
    )

    issues = _errors(validate_formula(formula))

    assert [i.node_id for i in issues] == ["ghost"]
    assert "c1" in issues[0].message


def test_missing_inputs_reported_per_kind() -> None:
    formula = Formula.from_parts(
        "f",
        [
            Node("sum", Operation(Operator.SUM)),
            Node("cmp", Comparator(Operator.GREATER_THAN)),
            Node("res", Result()),
        ],
        [Connection("c1", "sum", "cmp", "output", "valueA")],
    )

    messages = {(i.node_id, i.message) for i in _errors(validate_formula(formula))}

    assert ("sum", "La operación no tiene entradas") in messages
    assert ("cmp", "El comparador no tiene entrada valueB") in messages
    assert ("res", "El nodo de resultado no tiene una entrada conectada") in messages


def test_unsupported_kinds_and_operators() -> None:
    formula = Formula.from_parts(
        "f",
        [
            Node("a", Number(1)),
            Node("b", Number(2)),
            Node("weird", Unsupported("rama")),
            Node("op", Operation(Operator.MAYOR_QUE)),
            Node("cmp", Comparator(Operator.SUM)),
            Node("res", Result()),
        ],
        [
            Connection("c1", "a", "op"),
            Connection("c2", "weird", "op"),
            Connection("c3", "a", "cmp", "output", "valueA"),
            Connection("c4", "b", "cmp", "output", "valueB"),
            Connection("c5", "op", "res"),
        ],
    )

    flagged = {i.node_id for i in _errors(validate_formula(formula))}

    assert flagged == {"weird", "op", "cmp"}


def test_cycle_is_reported() -> None:
    formula = Formula.from_parts(
        "f",
        [Node("a", Operation(Operator.SUM)), Node("b", Operation(Operator.SUM)), Node("res", Result())],
        [Connection("c1", "a", "b"), Connection("c2", "b", "a"), Connection("c3", "a", "res")],
    )

    cycles = [i for i in _errors(validate_formula(formula)) if i.message.startswith("Ciclo detectado")]

    assert len(cycles) == 1
    assert cycles[0].message == "Ciclo detectado: a -> b -> a"


def test_unused_node_is_a_warning() -> None:
    formula = Formula.from_parts(
        "f",
        [Node("num", Number(1)), Node("spare", Variable("cortesias")), Node("res", Result())],
        [Connection("c1", "num", "res")],
    )

    issues = validate_formula(formula)

    assert not has_errors(issues)
    assert [(i.node_id, i.severity) for i in issues] == [("spare", IssueSeverity.WARNING)]
