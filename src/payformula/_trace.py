"""Recording of evaluation steps.

The trace explains how a computed amount was built. Steps are appended in
post-order: a node's step comes after the steps of everything it depends
on, so the trace reads top to bottom.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class EvaluationStep:
    """One line of the evaluation trace.

    Attributes:
        node_id: The node this step describes.
        description: Human-readable explanation, literal text.
        value: The value the node produced.
        is_error: True for the synthetic step appended on failure.

    """

    node_id: str
    description: str
    value: float | bool
    is_error: bool = False


def format_number(value: float | bool) -> str:
    """Format a value for the trace.

    Integral values print without a decimal part (``35`` rather than
    ``35.0``); other values use the shortest round-tripping repr.
    """
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, int):
        return str(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


@dataclass(slots=True)
class TraceRecorder:
    """Append-only buffer of evaluation steps for a single evaluation."""

    _steps: list[EvaluationStep] = field(default_factory=list)

    def record(self, node_id: str, description: str, value: float | bool) -> EvaluationStep:
        step = EvaluationStep(node_id=node_id, description=description, value=value)
        self._steps.append(step)
        return step

    def record_error(self, node_id: str, message: str) -> EvaluationStep:
        step = EvaluationStep(node_id=node_id, description=f"Error: {message}", value=0, is_error=True)
        self._steps.append(step)
        return step

    @property
    def steps(self) -> tuple[EvaluationStep, ...]:
        return tuple(self._steps)

    def __len__(self) -> int:
        return len(self._steps)
