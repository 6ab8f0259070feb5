"""Evaluation engine module for payformula.

This module provides pure functions for evaluating formula graphs. The
engine takes a Formula and a map of input metrics, and produces the
computed amount together with a trace of how it was derived.

Key types:
- EvaluationResult: Computed value, evaluation steps and optional error
- evaluate: Pure function to evaluate a Formula
- evaluate_many: Evaluate one Formula for several input maps
"""

from ._engine import EvaluationResult, evaluate, evaluate_many
from ._operators import apply_operation, compare

__all__ = [
    "EvaluationResult",
    "apply_operation",
    "compare",
    "evaluate",
    "evaluate_many",
]
