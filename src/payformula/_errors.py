"""Errors raised while evaluating a formula.

Every error is deterministic for a given formula and input map. They are
raised from deep inside the recursive evaluation and caught once, by
``evaluate``, which turns them into an error step and a zero result.
Messages are written in the language of the evaluation trace.
"""


class FormulaError(Exception):
    """Base class for formula evaluation errors.

    Attributes:
        node_id: The node being evaluated when the error was raised, if any.

    """

    def __init__(self, message: str, node_id: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.node_id = node_id


class StructuralError(FormulaError):
    """The formula graph is missing a node it needs."""


class MissingResultNodeError(StructuralError):
    def __init__(self) -> None:
        super().__init__("La fórmula no tiene un nodo de resultado definido")


class UnknownNodeReferenceError(StructuralError):
    def __init__(self, node_id: str) -> None:
        super().__init__(f"Nodo no encontrado: {node_id}", node_id)


class ConnectivityError(FormulaError):
    """A node lacks the incoming connections its kind requires."""


class InsufficientOperandsError(ConnectivityError):
    def __init__(self, node_id: str, operator: str, required: int, given: int) -> None:
        msg = f"La operación {operator} requiere al menos {required} entrada(s), recibió {given}"
        super().__init__(msg, node_id)
        self.required = required
        self.given = given


class ComparatorMissingInputsError(ConnectivityError):
    def __init__(self, node_id: str) -> None:
        super().__init__("El comparador requiere dos entradas (valueA y valueB)", node_id)


class MissingResultInputError(ConnectivityError):
    def __init__(self, node_id: str) -> None:
        super().__init__("El nodo de resultado no tiene una entrada conectada", node_id)


class FormulaArithmeticError(FormulaError):
    """An arithmetic operation has no defined result."""


class DivisionByZeroError(FormulaArithmeticError):
    def __init__(self, node_id: str) -> None:
        super().__init__("División por cero", node_id)


class ArithmeticOverflowError(FormulaArithmeticError):
    def __init__(self, node_id: str) -> None:
        super().__init__("Desbordamiento aritmético", node_id)


class CycleError(FormulaError):
    """The formula graph depends on itself."""


class CycleDetectedError(CycleError):
    def __init__(self, node_id: str) -> None:
        super().__init__(f"Ciclo detectado en el nodo {node_id}", node_id)


class UnsupportedKindError(FormulaError):
    def __init__(self, node_id: str, tag: str) -> None:
        super().__init__(f"Tipo de nodo u operación no soportado: {tag}", node_id)
        self.tag = tag


class FormulaLoadError(Exception):
    """A formula document or input file could not be read."""
