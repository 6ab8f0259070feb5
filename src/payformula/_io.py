"""Reading formula documents and input metrics, writing evaluation results.

Formula documents use the JSON layout the formula editor stores: Spanish
field names, a ``tipo`` tag per node and a free-form ``datos`` payload.
Layout data (``posicion``) and labels are read but dropped.
"""

from __future__ import annotations

import json
import logging
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Any

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from ._errors import FormulaLoadError
from ._model import (
    Comparator,
    Connection,
    Formula,
    Node,
    NodeKind,
    Number,
    Operation,
    Operator,
    Result,
    Unsupported,
    Variable,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ._eval_engine import EvaluationResult

logger = logging.getLogger(__name__)


class NodeDocument(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    tipo: str
    datos: dict[str, Any] = Field(default_factory=dict)


class ConnectionDocument(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    origen: str
    destino: str
    punto_salida: str = Field(default="", alias="puntoSalida")
    punto_entrada: str = Field(default="", alias="puntoEntrada")


class FormulaDocument(BaseModel):
    """A formula as stored by the formula editor."""

    model_config = ConfigDict(extra="ignore")

    id: str
    nombre: str = ""
    descripcion: str | None = None
    nodos: list[NodeDocument]
    conexiones: list[ConnectionDocument] = Field(default_factory=list)
    nodo_resultado: str | None = Field(default=None, alias="nodoResultado")

    @field_validator("id", mode="before")
    @classmethod
    def _id_to_str(cls, value: Any) -> Any:
        # Formulas saved to the database get integer ids
        if isinstance(value, int):
            return str(value)
        return value


_NUMBER_ADAPTER: TypeAdapter[float] = TypeAdapter(float)
_INPUTS_ADAPTER: TypeAdapter[dict[str, float]] = TypeAdapter(dict[str, float])


def _payload(node: NodeDocument, key: str) -> Any:
    try:
        return node.datos[key]
    except KeyError:
        msg = f"Node '{node.id}' of type '{node.tipo}' has no '{key}' in its data"
        raise FormulaLoadError(msg) from None


def _operator_kind(node: NodeDocument, key: str, kind: type[Operation | Comparator]) -> NodeKind:
    value = _payload(node, key)
    try:
        return kind(Operator(value))
    except ValueError:
        logger.warning("Node '%s' uses unknown operator %r", node.id, value)
        return Unsupported(tag=str(value))


def _node_kind(node: NodeDocument) -> NodeKind:
    match node.tipo:
        case "variable":
            return Variable(name=str(_payload(node, "variable")))
        case "numero":
            value = _payload(node, "valor")
            try:
                return Number(value=_NUMBER_ADAPTER.validate_python(value))
            except ValidationError as e:
                msg = f"Node '{node.id}' has a non-numeric value: {value!r}"
                raise FormulaLoadError(msg) from e
        case "operacion":
            return _operator_kind(node, "operacion", Operation)
        case "comparador":
            return _operator_kind(node, "condicion", Comparator)
        case "resultado":
            return Result()
        case _:
            logger.warning("Node '%s' has unknown type %r", node.id, node.tipo)
            return Unsupported(tag=node.tipo)


def formula_from_document(data: Mapping[str, Any]) -> Formula:
    """Build a Formula from a decoded formula document.

    Unknown node types and operators are kept as Unsupported nodes, so the
    formula loads and fails only when such a node is evaluated.

    Raises:
        FormulaLoadError: If the document is malformed.

    """
    try:
        document = FormulaDocument.model_validate(data)
    except ValidationError as e:
        msg = f"Invalid formula document: {e}"
        raise FormulaLoadError(msg) from e

    nodes = [Node(id=node.id, kind=_node_kind(node)) for node in document.nodos]
    connections = [
        Connection(
            id=conn.id,
            source_node_id=conn.origen,
            destination_node_id=conn.destino,
            output_slot=conn.punto_salida,
            input_slot=conn.punto_entrada,
        )
        for conn in document.conexiones
    ]

    try:
        return Formula.from_parts(
            document.id,
            nodes,
            connections,
            result_node_id=document.nodo_resultado or None,
            name=document.nombre,
        )
    except ValueError as e:
        raise FormulaLoadError(str(e)) from e


def load_formula(path: Path) -> Formula:
    """Load a formula from a JSON document.

    Raises:
        FormulaLoadError: If the file is not valid JSON or not a formula.

    """
    logger.debug("Loading formula from %s", path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        msg = f"Invalid JSON in {path}: {e}"
        raise FormulaLoadError(msg) from e
    return formula_from_document(data)


def load_inputs(path: Path) -> dict[str, float]:
    """Load input metrics from a flat TOML or JSON table of numbers.

    Raises:
        FormulaLoadError: If the file cannot be parsed or holds non-numeric values.

    """
    logger.debug("Loading inputs from %s", path)
    try:
        if path.suffix == ".json":
            data = json.loads(path.read_text(encoding="utf-8"))
        else:
            with path.open("rb") as f:
                data = tomllib.load(f)
    except (json.JSONDecodeError, tomllib.TOMLDecodeError) as e:
        msg = f"Invalid input file {path}: {e}"
        raise FormulaLoadError(msg) from e

    try:
        return _INPUTS_ADAPTER.validate_python(data)
    except ValidationError as e:
        msg = f"Input metrics in {path} must be numbers: {e}"
        raise FormulaLoadError(msg) from e


def result_to_dict(result: EvaluationResult) -> dict[str, Any]:
    """Convert an evaluation result to plain data.

    The ``error`` key is omitted on success, since TOML has no null.
    """
    data: dict[str, Any] = {"value": result.value, "success": result.success}
    if result.error is not None:
        data["error"] = result.error
    data["steps"] = [
        {
            "node_id": step.node_id,
            "description": step.description,
            "value": step.value,
            "is_error": step.is_error,
        }
        for step in result.steps
    ]
    return data


def export_result(result: EvaluationResult, output_path: Path) -> None:
    """Write an evaluation result to a TOML file, or JSON if the suffix is ``.json``."""
    data = result_to_dict(result)
    if output_path.suffix == ".json":
        output_path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
    else:
        with output_path.open("wb") as f:
            tomli_w.dump(data, f)
    logger.debug("Exported evaluation result to %s", output_path)
