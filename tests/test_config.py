"""Tests for the configuration module."""

from pathlib import Path

import pytest

from payformula._cli.config import (
    ConfigError,
    PayformulaConfig,
    find_pyproject_toml,
    get_config,
    load_config,
)


class TestFindPyprojectToml:
    """Tests for find_pyproject_toml function."""

    def test_finds_in_current_directory(self, tmp_path: Path) -> None:
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("[project]\nname = 'test'\n")

        assert find_pyproject_toml(tmp_path) == pyproject

    def test_finds_in_parent_directory(self, tmp_path: Path) -> None:
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("[project]\nname = 'test'\n")
        subdir = tmp_path / "formulas" / "2025"
        subdir.mkdir(parents=True)

        assert find_pyproject_toml(subdir) == pyproject


class TestLoadConfig:
    def test_no_section(self, tmp_path: Path) -> None:
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("[project]\nname = 'test'\n")

        config = load_config(pyproject)

        assert config == PayformulaConfig(project_root=tmp_path)

    def test_relative_paths_resolved_from_root(self, tmp_path: Path) -> None:
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text(
            """
[tool.payformula]
formula = "formulas/base.json"
inputs = "data/clase.toml"
output = "out/result.toml"
""",
        )

        config = load_config(pyproject)

        assert config.formula == tmp_path / "formulas" / "base.json"
        assert config.inputs == tmp_path / "data" / "clase.toml"
        assert config.output == tmp_path / "out" / "result.toml"

    def test_absolute_path_kept(self, tmp_path: Path) -> None:
        absolute = tmp_path / "elsewhere" / "f.json"
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text(f'[tool.payformula]\nformula = "{absolute.as_posix()}"\n')

        assert load_config(pyproject).formula == absolute

    def test_non_string_path(self, tmp_path: Path) -> None:
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("[tool.payformula]\ninputs = 3\n")

        with pytest.raises(ConfigError, match="inputs"):
            load_config(pyproject)

    def test_tool_not_a_table(self, tmp_path: Path) -> None:
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("tool = 1\n")

        with pytest.raises(ConfigError, match=r"Invalid \[tool\]"):
            load_config(pyproject)

    def test_section_not_a_table(self, tmp_path: Path) -> None:
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text('[tool]\npayformula = "bono.json"\n')

        with pytest.raises(ConfigError, match=r"Invalid \[tool\.payformula\]"):
            load_config(pyproject)

    def test_invalid_toml(self, tmp_path: Path) -> None:
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("[tool.payformula\n")

        with pytest.raises(ConfigError, match="Invalid TOML"):
            load_config(pyproject)


def test_get_config_from_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / "pyproject.toml").write_text('[tool.payformula]\nformula = "f.json"\n')
    monkeypatch.chdir(tmp_path)

    assert get_config().formula == tmp_path.resolve() / "f.json"
