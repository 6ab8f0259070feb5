"""Configuration loading from pyproject.toml."""

import tomllib
from dataclasses import dataclass
from pathlib import Path


class ConfigError(Exception):
    """Error in payformula configuration."""


@dataclass(slots=True, frozen=True)
class PayformulaConfig:
    """Configuration loaded from the ``[tool.payformula]`` table of pyproject.toml.

    All relative paths are resolved from the project root (directory containing pyproject.toml).

    Attributes:
        formula: Default formula document to evaluate.
        inputs: Default input metrics file.
        output: Default path to write the evaluation result to.
        project_root: Directory containing the pyproject.toml the config came from.

    """

    formula: Path | None = None
    inputs: Path | None = None
    output: Path | None = None
    project_root: Path | None = None


def find_pyproject_toml(start_dir: Path | None = None) -> Path | None:
    """Find pyproject.toml by walking up from start_dir.

    Args:
        start_dir: Starting directory. Defaults to current working directory.

    Returns:
        Path to pyproject.toml if found, None otherwise.

    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = start_dir.resolve()

    while True:
        candidate = current / "pyproject.toml"
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            return None
        current = parent


def _parse_path(section: dict[str, object], key: str, project_root: Path) -> Path | None:
    if key not in section:
        return None
    value = section[key]
    if not isinstance(value, str):
        msg = f"Invalid [tool.payformula].{key}: expected string path"
        raise ConfigError(msg)
    path = Path(value)
    if not path.is_absolute():
        path = project_root / path
    return path


def load_config(pyproject_path: Path) -> PayformulaConfig:
    """Load and validate [tool.payformula] config from pyproject.toml.

    Args:
        pyproject_path: Path to pyproject.toml

    Returns:
        Parsed PayformulaConfig

    Raises:
        ConfigError: If the configuration is invalid

    """
    project_root = pyproject_path.parent

    with pyproject_path.open("rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            msg = f"Invalid TOML in {pyproject_path}: {e}"
            raise ConfigError(msg) from e

    tool = data.get("tool", {})
    if not isinstance(tool, dict):
        msg = "Invalid [tool]: expected a table"
        raise ConfigError(msg)

    section = tool.get("payformula", {})
    if not isinstance(section, dict):
        msg = "Invalid [tool.payformula]: expected a table"
        raise ConfigError(msg)

    return PayformulaConfig(
        formula=_parse_path(section, "formula", project_root),
        inputs=_parse_path(section, "inputs", project_root),
        output=_parse_path(section, "output", project_root),
        project_root=project_root,
    )


def get_config() -> PayformulaConfig:
    """Get config from pyproject.toml in current directory or parents.

    Returns:
        PayformulaConfig (may be empty if no pyproject.toml or no [tool.payformula] section)

    """
    pyproject_path = find_pyproject_toml()
    if pyproject_path is None:
        return PayformulaConfig()
    return load_config(pyproject_path)
