"""Core evaluation engine for formula graphs."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from payformula._errors import (
    ComparatorMissingInputsError,
    CycleDetectedError,
    FormulaError,
    MissingResultInputError,
    UnsupportedKindError,
)
from payformula._model import (
    INPUT_SLOT,
    VALUE_A_SLOT,
    VALUE_B_SLOT,
    Comparator,
    Number,
    Operation,
    Result,
    Unsupported,
    Variable,
)
from payformula._resolver import get_node, incoming_connections, resolve_result_node
from payformula._trace import EvaluationStep, TraceRecorder, format_number

from ._operators import apply_operation, compare, comparison_symbol

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from payformula._model import Formula, Node, Operator

logger = logging.getLogger(__name__)

# Node id used for the error step when the failure is not tied to a node.
ERROR_NODE_ID = "error"


@dataclass(frozen=True, slots=True)
class EvaluationResult:
    """Result of evaluating a formula.

    Attributes:
        value: The computed amount. Always 0 when evaluation failed.
        steps: The evaluation trace, in the order the steps were recorded.
            On failure, ends with a single error step.
        error: Human-readable error message, or None on success.

    """

    value: float
    steps: tuple[EvaluationStep, ...] = field(default_factory=tuple)
    error: str | None = None

    @property
    def success(self) -> bool:
        """Check if evaluation completed without errors."""
        return self.error is None


@dataclass(slots=True)
class _Evaluation:
    """State of a single ``evaluate`` call.

    Each node moves from unvisited to in-progress to memoized. Re-entering a
    node that is still in progress means the graph depends on itself.
    """

    formula: Formula
    inputs: Mapping[str, float]
    trace: TraceRecorder = field(default_factory=TraceRecorder)
    memo: dict[str, float] = field(default_factory=dict)
    in_progress: set[str] = field(default_factory=set)

    def eval_node(self, node_id: str) -> float:
        if node_id in self.memo:
            logger.debug("Reusing memoized value for %s", node_id)
            return self.memo[node_id]
        if node_id in self.in_progress:
            raise CycleDetectedError(node_id)

        self.in_progress.add(node_id)
        node = get_node(self.formula, node_id)
        logger.debug("Evaluating %s (%s)", node_id, type(node.kind).__name__)

        value = self._dispatch(node)

        self.memo[node_id] = value
        self.in_progress.discard(node_id)
        return value

    def _dispatch(self, node: Node) -> float:
        match node.kind:
            case Variable(name=name):
                value = self.inputs.get(name, 0)
                self.trace.record(node.id, f"Variable {name}: {format_number(value)}", value)
                return value
            case Number(value=value):
                self.trace.record(node.id, f"Número constante: {format_number(value)}", value)
                return value
            case Operation(operator=operator):
                return self._eval_operation(node.id, operator)
            case Comparator(condition=condition):
                return self._eval_comparator(node.id, condition)
            case Result():
                return self._eval_result(node.id)
            case Unsupported(tag=tag):
                raise UnsupportedKindError(node.id, tag)
            case _:
                raise UnsupportedKindError(node.id, type(node.kind).__name__)

    def _eval_operation(self, node_id: str, operator: Operator) -> float:
        operands = [self.eval_node(conn.source_node_id) for conn in incoming_connections(self.formula, node_id)]
        value = apply_operation(node_id, operator, operands)
        listed = ", ".join(format_number(v) for v in operands)
        self.trace.record(node_id, f"Operación {operator.value}: [{listed}] = {format_number(value)}", value)
        return value

    def _eval_comparator(self, node_id: str, condition: Operator) -> float:
        conns_a = incoming_connections(self.formula, node_id, VALUE_A_SLOT)
        conns_b = incoming_connections(self.formula, node_id, VALUE_B_SLOT)
        if not conns_a or not conns_b:
            raise ComparatorMissingInputsError(node_id)

        a = self.eval_node(conns_a[0].source_node_id)
        b = self.eval_node(conns_b[0].source_node_id)
        outcome = compare(node_id, condition, a, b)
        encoded = 1 if outcome else 0
        symbol = comparison_symbol(node_id, condition)
        self.trace.record(
            node_id,
            f"Comparación: {format_number(a)} {symbol} {format_number(b)} = {encoded}",
            outcome,
        )
        return encoded

    def _eval_result(self, node_id: str) -> float:
        conns = incoming_connections(self.formula, node_id, INPUT_SLOT)
        if not conns:
            raise MissingResultInputError(node_id)
        value = self.eval_node(conns[0].source_node_id)
        self.trace.record(node_id, f"Resultado final: {format_number(value)}", value)
        return value


def evaluate(formula: Formula, inputs: Mapping[str, float]) -> EvaluationResult:
    """Evaluate a formula against a map of input metrics.

    This is a pure function: all state lives in a fresh evaluation context,
    so calls against the same formula may run concurrently. No exception
    escapes; failures are reported through ``EvaluationResult.error``.

    Args:
        formula: The formula graph to evaluate.
        inputs: Metric values by name. Metrics absent from the map count as 0.

    Returns:
        EvaluationResult with the computed value and the evaluation trace.

    Example:
        >>> result = evaluate(formula, {"reservaciones": 25})
        >>> if result.success:
        ...     print(result.value)

    """
    evaluation = _Evaluation(formula=formula, inputs=inputs)
    try:
        result_node_id = resolve_result_node(formula)
        value = evaluation.eval_node(result_node_id)
    except FormulaError as e:
        logger.info("Evaluation of formula %s failed: %s", formula.id, e.message)
        evaluation.trace.record_error(e.node_id or ERROR_NODE_ID, e.message)
        return EvaluationResult(value=0, steps=evaluation.trace.steps, error=e.message)
    except RecursionError:
        message = "La fórmula excede la profundidad máxima de evaluación"
        logger.info("Evaluation of formula %s failed: %s", formula.id, message)
        evaluation.trace.record_error(ERROR_NODE_ID, message)
        return EvaluationResult(value=0, steps=evaluation.trace.steps, error=message)

    logger.debug("Formula %s evaluated to %r in %d steps", formula.id, value, len(evaluation.trace))
    return EvaluationResult(value=value, steps=evaluation.trace.steps)


def evaluate_many(
    formula: Formula,
    inputs_seq: Iterable[Mapping[str, float]],
) -> list[EvaluationResult]:
    """Evaluate one formula for each metric map, e.g. every class in a pay period.

    Each evaluation is independent of the others.
    """
    return [evaluate(formula, inputs) for inputs in inputs_seq]
