"""Arithmetic and relational semantics of formula operators."""

import operator as op
from collections.abc import Callable, Sequence

from payformula._errors import (
    ArithmeticOverflowError,
    DivisionByZeroError,
    InsufficientOperandsError,
    UnsupportedKindError,
)
from payformula._model import Operator

_COMPARISONS: dict[Operator, tuple[str, Callable[[float, float], bool]]] = {
    Operator.GREATER_THAN: (">", op.gt),
    Operator.LESS_THAN: ("<", op.lt),
    Operator.EQUAL: ("==", op.eq),
    Operator.GREATER_EQUAL: (">=", op.ge),
    Operator.LESS_EQUAL: ("<=", op.le),
}


def _require(node_id: str, operator: Operator, operands: Sequence[float], count: int) -> None:
    if len(operands) < count:
        raise InsufficientOperandsError(node_id, operator.value, count, len(operands))


def _fold(node_id: str, operator: Operator, operands: Sequence[float]) -> float:
    match operator:
        case Operator.SUM:
            total = 0
            for value in operands:
                total += value
            return total
        case Operator.SUBTRACTION:
            if len(operands) == 1:
                return operands[0]
            return operands[0] - sum(operands[1:])
        case Operator.MULTIPLICATION:
            product = 1
            for value in operands:
                product *= value
            return product
        case Operator.DIVISION:
            _require(node_id, operator, operands, 2)
            if operands[1] == 0:
                raise DivisionByZeroError(node_id)
            return operands[0] / operands[1]
        case Operator.PERCENTAGE:
            _require(node_id, operator, operands, 2)
            return operands[0] * operands[1] / 100
        case _:
            raise UnsupportedKindError(node_id, operator.value)


def apply_operation(node_id: str, operator: Operator, operands: Sequence[float]) -> float:
    """Apply an n-ary arithmetic operator.

    Operands are used in the order given, which is the declaration order of
    the incoming connections.

    Args:
        node_id: The Operation node, for error reporting.
        operator: The arithmetic operator.
        operands: Evaluated operand values.

    Returns:
        The operation result.

    Raises:
        InsufficientOperandsError: With no operands, or fewer than two for
            DIVISION and PERCENTAGE.
        DivisionByZeroError: If the DIVISION divisor is zero.
        ArithmeticOverflowError: If the result does not fit in a float.
        UnsupportedKindError: If the operator is relational.

    """
    _require(node_id, operator, operands, 1)
    try:
        return _fold(node_id, operator, operands)
    except OverflowError:
        raise ArithmeticOverflowError(node_id) from None


def comparison_symbol(node_id: str, condition: Operator) -> str:
    """Get the symbol of a relational operator, e.g. ``>``.

    Raises:
        UnsupportedKindError: If the condition is not relational.

    """
    try:
        return _COMPARISONS[condition][0]
    except KeyError:
        raise UnsupportedKindError(node_id, condition.value) from None


def compare(node_id: str, condition: Operator, a: float, b: float) -> bool:
    """Apply a relational operator to two values.

    Raises:
        UnsupportedKindError: If the condition is not relational.

    """
    try:
        _, fn = _COMPARISONS[condition]
    except KeyError:
        raise UnsupportedKindError(node_id, condition.value) from None
    return fn(a, b)
