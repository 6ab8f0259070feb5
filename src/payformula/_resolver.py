"""Lookups over a formula graph used by the evaluation engine."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ._errors import MissingResultNodeError, UnknownNodeReferenceError
from ._model import Result

if TYPE_CHECKING:
    from ._model import Connection, Formula, Node


def resolve_result_node(formula: Formula) -> str:
    """Find the terminal node of a formula.

    Args:
        formula: The formula to inspect.

    Returns:
        ``formula.result_node_id`` when set, otherwise the id of the first
        node of kind Result.

    Raises:
        MissingResultNodeError: If neither exists.

    """
    if formula.result_node_id:
        return formula.result_node_id
    for node in formula.nodes.values():
        if isinstance(node.kind, Result):
            return node.id
    raise MissingResultNodeError


def get_node(formula: Formula, node_id: str) -> Node:
    """Get a node by id.

    Raises:
        UnknownNodeReferenceError: If the formula has no such node.

    """
    try:
        return formula.nodes[node_id]
    except KeyError:
        raise UnknownNodeReferenceError(node_id) from None


def incoming_connections(
    formula: Formula,
    node_id: str,
    slot: str | None = None,
) -> list[Connection]:
    """Get the connections feeding a node, in declaration order.

    Args:
        formula: The formula to inspect.
        node_id: Destination node.
        slot: If given, only connections into this input slot.

    Returns:
        Matching connections in the order they appear in the formula.

    """
    return [
        conn
        for conn in formula.connections
        if conn.destination_node_id == node_id and (slot is None or conn.input_slot == slot)
    ]
