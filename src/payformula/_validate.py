"""Static checks of a formula graph.

These checks look at the whole graph without evaluating it, the way the
formula editor checks a formula before saving it. They never change what
``evaluate`` does: a formula with warnings still evaluates, and a formula
with errors still yields a well-formed (failed) result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum, auto
from typing import TYPE_CHECKING

from ._errors import MissingResultNodeError
from ._graph import DependencyGraph
from ._model import INPUT_SLOT, VALUE_A_SLOT, VALUE_B_SLOT, Comparator, Operation, Result, Unsupported
from ._resolver import incoming_connections, resolve_result_node

if TYPE_CHECKING:
    from ._model import Formula

logger = logging.getLogger(__name__)


class IssueSeverity(StrEnum):
    """How serious a formula issue is."""

    ERROR = auto()  # Evaluation will fail (for every input, or when the node is reached)
    WARNING = auto()  # Evaluation works, but the formula is probably not what was meant


@dataclass(frozen=True, slots=True)
class FormulaIssue:
    """A problem found in a formula.

    Attributes:
        severity: ERROR or WARNING.
        message: Human-readable description.
        node_id: The node the issue is about, if any.

    """

    severity: IssueSeverity
    message: str
    node_id: str | None = None


def _check_result_node(formula: Formula) -> list[FormulaIssue]:
    issues: list[FormulaIssue] = []
    result_nodes = [node.id for node in formula.nodes.values() if isinstance(node.kind, Result)]

    if not formula.result_node_id and not result_nodes:
        issues.append(FormulaIssue(IssueSeverity.ERROR, "La fórmula no tiene un nodo de resultado definido"))
    if formula.result_node_id and formula.result_node_id not in formula.nodes:
        issues.append(
            FormulaIssue(
                IssueSeverity.ERROR,
                f"El nodo de resultado {formula.result_node_id} no existe",
                formula.result_node_id,
            ),
        )
    if len(result_nodes) > 1:
        issues.extend(
            FormulaIssue(IssueSeverity.WARNING, "Solo puede haber un nodo de resultado en la fórmula", node_id)
            for node_id in result_nodes[1:]
        )
    return issues


def _check_connections(formula: Formula) -> list[FormulaIssue]:
    issues: list[FormulaIssue] = []
    for conn in formula.connections:
        for endpoint in (conn.source_node_id, conn.destination_node_id):
            if endpoint not in formula.nodes:
                issues.append(
                    FormulaIssue(
                        IssueSeverity.ERROR,
                        f"La conexión {conn.id} referencia un nodo inexistente: {endpoint}",
                        endpoint,
                    ),
                )
    return issues


def _check_node_inputs(formula: Formula) -> list[FormulaIssue]:  # noqa: C901
    issues: list[FormulaIssue] = []
    for node in formula.nodes.values():
        match node.kind:
            case Operation(operator=operator):
                if operator.is_relational:
                    issues.append(
                        FormulaIssue(IssueSeverity.ERROR, f"Operación no soportada: {operator.value}", node.id),
                    )
                if not incoming_connections(formula, node.id):
                    issues.append(FormulaIssue(IssueSeverity.ERROR, "La operación no tiene entradas", node.id))
            case Comparator(condition=condition):
                if not condition.is_relational:
                    issues.append(
                        FormulaIssue(IssueSeverity.ERROR, f"Comparación no soportada: {condition.value}", node.id),
                    )
                for slot in (VALUE_A_SLOT, VALUE_B_SLOT):
                    if not incoming_connections(formula, node.id, slot):
                        issues.append(
                            FormulaIssue(IssueSeverity.ERROR, f"El comparador no tiene entrada {slot}", node.id),
                        )
            case Result():
                if not incoming_connections(formula, node.id, INPUT_SLOT):
                    issues.append(
                        FormulaIssue(
                            IssueSeverity.ERROR,
                            "El nodo de resultado no tiene una entrada conectada",
                            node.id,
                        ),
                    )
            case Unsupported(tag=tag):
                issues.append(FormulaIssue(IssueSeverity.ERROR, f"Tipo de nodo no soportado: {tag}", node.id))
    return issues


def _check_graph(formula: Formula) -> list[FormulaIssue]:
    issues: list[FormulaIssue] = []
    graph = DependencyGraph.from_formula(formula)

    cycle = graph.find_cycle()
    if cycle is not None:
        issues.append(
            FormulaIssue(IssueSeverity.ERROR, f"Ciclo detectado: {' -> '.join(cycle)}", cycle[0]),
        )

    try:
        result_node_id = resolve_result_node(formula)
    except MissingResultNodeError:
        return issues
    if result_node_id not in formula.nodes:
        return issues

    feeding = graph.ancestors(result_node_id) | {result_node_id}
    issues.extend(
        FormulaIssue(IssueSeverity.WARNING, "El nodo no contribuye al resultado", node_id)
        for node_id in formula.nodes
        if node_id not in feeding
    )
    return issues


def validate_formula(formula: Formula) -> list[FormulaIssue]:
    """Check a formula for structural problems.

    Reports a missing or dangling result node, duplicate Result nodes,
    connections to missing nodes, nodes missing required inputs,
    unsupported node kinds or operators, cycles, and nodes that do not
    contribute to the result.

    Args:
        formula: The formula to check.

    Returns:
        The issues found, errors and warnings mixed, in check order.
        An empty list means the formula is well formed.

    """
    issues = [
        *_check_result_node(formula),
        *_check_connections(formula),
        *_check_node_inputs(formula),
        *_check_graph(formula),
    ]
    logger.debug("Formula %s: %d issue(s) found", formula.id, len(issues))
    return issues


def has_errors(issues: list[FormulaIssue]) -> bool:
    """Check if any issue is an error."""
    return any(issue.severity == IssueSeverity.ERROR for issue in issues)
