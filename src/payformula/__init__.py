"""Evaluation engine for instructor pay formulas."""

__all__ = [
    "INPUT_SLOT",
    "OUTPUT_SLOT",
    "SAMPLE_INPUTS",
    "VALUE_A_SLOT",
    "VALUE_B_SLOT",
    "ArithmeticOverflowError",
    "Comparator",
    "ComparatorMissingInputsError",
    "Connection",
    "ConnectivityError",
    "CycleDetectedError",
    "CycleError",
    "DependencyGraph",
    "DivisionByZeroError",
    "EvaluationResult",
    "EvaluationStep",
    "Formula",
    "FormulaArithmeticError",
    "FormulaError",
    "FormulaIssue",
    "FormulaLoadError",
    "InsufficientOperandsError",
    "IssueSeverity",
    "Metric",
    "MissingResultInputError",
    "MissingResultNodeError",
    "Node",
    "NodeKind",
    "Number",
    "Operation",
    "Operator",
    "Result",
    "StructuralError",
    "TraceRecorder",
    "UnknownNodeReferenceError",
    "Unsupported",
    "UnsupportedKindError",
    "Variable",
    "evaluate",
    "evaluate_many",
    "export_result",
    "formula_from_document",
    "incoming_connections",
    "load_formula",
    "load_inputs",
    "resolve_result_node",
    "validate_formula",
]

from ._errors import (
    ArithmeticOverflowError,
    ComparatorMissingInputsError,
    ConnectivityError,
    CycleDetectedError,
    CycleError,
    DivisionByZeroError,
    FormulaArithmeticError,
    FormulaError,
    FormulaLoadError,
    InsufficientOperandsError,
    MissingResultInputError,
    MissingResultNodeError,
    StructuralError,
    UnknownNodeReferenceError,
    UnsupportedKindError,
)
from ._eval_engine import EvaluationResult, evaluate, evaluate_many
from ._graph import DependencyGraph
from ._io import export_result, formula_from_document, load_formula, load_inputs
from ._model import (
    INPUT_SLOT,
    OUTPUT_SLOT,
    SAMPLE_INPUTS,
    VALUE_A_SLOT,
    VALUE_B_SLOT,
    Comparator,
    Connection,
    Formula,
    Metric,
    Node,
    NodeKind,
    Number,
    Operation,
    Operator,
    Result,
    Unsupported,
    Variable,
)
from ._resolver import incoming_connections, resolve_result_node
from ._trace import EvaluationStep, TraceRecorder
from ._validate import FormulaIssue, IssueSeverity, validate_formula
