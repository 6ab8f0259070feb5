"""Data model of a formula graph.

These are pure, immutable data structures without behavior. A Formula is
built by the surrounding graph editor and handed to the evaluation engine
as a read-only value.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Self

INPUT_SLOT = "input"
VALUE_A_SLOT = "valueA"
VALUE_B_SLOT = "valueB"
OUTPUT_SLOT = "output"


class Operator(StrEnum):
    """Operators available to Operation and Comparator nodes.

    The editor stores arithmetic and relational operators in a single
    enumeration, so either kind of node may carry any member.
    """

    SUM = "suma"
    SUBTRACTION = "resta"
    MULTIPLICATION = "multiplicacion"
    DIVISION = "division"
    PERCENTAGE = "porcentaje"
    GREATER_THAN = "mayor_que"
    LESS_THAN = "menor_que"
    EQUAL = "igual"
    GREATER_EQUAL = "mayor_igual"
    LESS_EQUAL = "menor_igual"

    # Names used by the editor
    MAYOR_QUE = "mayor_que"  # noqa: PIE796
    MENOR_QUE = "menor_que"  # noqa: PIE796
    IGUAL = "igual"  # noqa: PIE796
    MAYOR_IGUAL = "mayor_igual"  # noqa: PIE796
    MENOR_IGUAL = "menor_igual"  # noqa: PIE796

    @property
    def is_relational(self) -> bool:
        return self in _RELATIONAL


_RELATIONAL = frozenset({
    Operator.GREATER_THAN,
    Operator.LESS_THAN,
    Operator.EQUAL,
    Operator.GREATER_EQUAL,
    Operator.LESS_EQUAL,
})


class Metric(StrEnum):
    """Metrics the host application collects for a class.

    Values are the keys the host uses in an input map. Variable nodes may
    reference other names too; these are just the ones the editor offers.
    """

    description: str

    def __new__(cls, value: str, description: str = "") -> Self:
        member = str.__new__(cls, value)
        member._value_ = value
        member.description = description
        return member

    RESERVATIONS = "reservaciones", "Total reservations for the class."
    WAITLIST = "listaEspera", "People left on the waiting list."
    COMPLIMENTARY = "cortesias", "Complimentary seats handed out."
    CAPACITY = "capacidad", "Room capacity."
    PAID_RESERVATIONS = "reservasPagadas", "Reservations that were paid for."
    SPOTS = "lugares", "Spots offered for the class."


# Sample data the formula editor evaluates against when testing a formula.
SAMPLE_INPUTS: Mapping[str, float] = MappingProxyType({
    Metric.RESERVATIONS: 30,
    Metric.WAITLIST: 5,
    Metric.COMPLIMENTARY: 2,
    Metric.CAPACITY: 50,
    Metric.PAID_RESERVATIONS: 28,
    Metric.SPOTS: 20,
})


@dataclass(frozen=True, slots=True)
class Variable:
    """Reference to a named input metric."""

    name: str


@dataclass(frozen=True, slots=True)
class Number:
    """Numeric literal."""

    value: float


@dataclass(frozen=True, slots=True)
class Operation:
    """n-ary arithmetic over every incoming connection."""

    operator: Operator


@dataclass(frozen=True, slots=True)
class Comparator:
    """Relational test between the ``valueA`` and ``valueB`` slots."""

    condition: Operator


@dataclass(frozen=True, slots=True)
class Result:
    """Terminal node; passes its ``input`` slot through."""


@dataclass(frozen=True, slots=True)
class Unsupported:
    """A node type or operator this engine does not know.

    Kept so documents written by newer editors still load; evaluating such
    a node fails with an unsupported-kind error.
    """

    tag: str


NodeKind = Variable | Number | Operation | Comparator | Result | Unsupported


@dataclass(frozen=True, slots=True)
class Node:
    """A unit in a formula graph.

    Attributes:
        id: Identifier, unique within its Formula.
        kind: The variant payload describing what the node computes.

    """

    id: str
    kind: NodeKind


@dataclass(frozen=True, slots=True)
class Connection:
    """A directed edge from a node's output to another node's input slot."""

    id: str
    source_node_id: str
    destination_node_id: str
    output_slot: str = OUTPUT_SLOT
    input_slot: str = INPUT_SLOT


@dataclass(frozen=True, slots=True)
class Formula:
    """A node+connection graph with its designated result node.

    Attributes:
        id: Identifier of the formula.
        nodes: Mapping from node id to Node. Iteration order is the order
            nodes were declared in.
        connections: Connections in declaration order. The order is
            meaningful: it fixes the operand order of Operation nodes.
        result_node_id: Explicit terminal node. When None, the first
            Result node is used.
        name: Display name, irrelevant to evaluation.

    """

    id: str
    nodes: Mapping[str, Node] = field(default_factory=dict)
    connections: tuple[Connection, ...] = ()
    result_node_id: str | None = None
    name: str = ""

    @classmethod
    def from_parts(
        cls,
        id: str,  # noqa: A002
        nodes: list[Node],
        connections: list[Connection],
        *,
        result_node_id: str | None = None,
        name: str = "",
    ) -> Formula:
        """Build a formula from node and connection lists.

        Raises:
            ValueError: If two nodes share an id.

        """
        by_id: dict[str, Node] = {}
        for node in nodes:
            if node.id in by_id:
                msg = f"Duplicate node id: {node.id}"
                raise ValueError(msg)
            by_id[node.id] = node
        return cls(
            id=id,
            nodes=MappingProxyType(by_id),
            connections=tuple(connections),
            result_node_id=result_node_id,
            name=name,
        )

    def __hash__(self) -> int:
        """Hash based on the formula ID."""
        return hash(self.id)
