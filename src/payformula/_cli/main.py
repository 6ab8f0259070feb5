import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from payformula._errors import FormulaLoadError
from payformula._eval_engine import evaluate
from payformula._io import export_result, load_formula, load_inputs
from payformula._model import SAMPLE_INPUTS, Formula
from payformula._trace import format_number
from payformula._validate import has_errors, validate_formula

from .config import ConfigError, PayformulaConfig, get_config
from .render_trace import render_issues, render_result, render_steps

app = typer.Typer()

logger = logging.getLogger(__name__)
# Console for stderr (info/errors)
err_console = Console(stderr=True)
# Console for stdout (results)
out_console = Console()


@app.callback()
def callback(
    *,
    verbose: bool = typer.Option(default=False, help="Enable verbose output"),
) -> None:
    """Payformula CLI."""
    log_level = logging.DEBUG if verbose else logging.INFO

    # Configure rich logging handler to output to stderr
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=err_console,
                show_time=False,
                show_path=verbose,
                rich_tracebacks=True,
            ),
        ],
    )


def _load_config() -> PayformulaConfig:
    try:
        return get_config()
    except ConfigError as e:
        err_console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e


def _load_formula(formula_path: Path | None, config: PayformulaConfig) -> Formula:
    if formula_path is None:
        formula_path = config.formula
    if formula_path is None:
        err_console.print("[red]✗ No formula given and no [tool.payformula].formula configured[/red]")
        raise typer.Exit(code=1)

    err_console.print(f"[cyan]Loading formula from:[/cyan] {formula_path}")
    try:
        formula = load_formula(formula_path)
    except (FormulaLoadError, OSError) as e:
        err_console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e

    if formula.name:
        err_console.print(f"[cyan]Formula:[/cyan] [bold]{escape(formula.name)}[/bold]")
    return formula


@app.command("eval")
def eval_(  # noqa: C901
    formula_path: Annotated[
        Path | None,
        typer.Argument(help="Path to the formula JSON document"),
    ] = None,
    *,
    inputs_path: Annotated[
        Path | None,
        typer.Option("-i", "--inputs", help="Path to a TOML or JSON file with input metrics"),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("-o", "--output", help="Path to write the evaluation result to (TOML, or JSON by suffix)"),
    ] = None,
    sample: Annotated[
        bool,
        typer.Option("--sample", help="Evaluate against the formula editor's sample data"),
    ] = False,
) -> None:
    """Evaluate a formula and show how the amount was computed."""
    err_console.print()
    config = _load_config()
    formula = _load_formula(formula_path, config)

    if inputs_path is None and not sample:
        inputs_path = config.inputs
    if output is None:
        output = config.output

    inputs: dict[str, float] = {}
    if sample:
        inputs = dict(SAMPLE_INPUTS)
    if inputs_path is not None:
        err_console.print(f"[cyan]Loading inputs from:[/cyan] {inputs_path}")
        try:
            inputs.update(load_inputs(inputs_path))
        except (FormulaLoadError, OSError) as e:
            err_console.print(f"[red]✗ {escape(str(e))}[/red]")
            raise typer.Exit(code=1) from e

    if inputs:
        table = Table(show_header=True, header_style="bold cyan", box=None)
        table.add_column("Metric", style="dim")
        table.add_column("Value", justify="right")
        for name, value in inputs.items():
            table.add_row(escape(name), format_number(value))
        err_console.print(Panel(table, title="[bold]Inputs[/bold]", border_style="cyan"))
    err_console.print()

    result = evaluate(formula, inputs)

    render_steps(result, err_console)
    err_console.print()
    render_result(result, err_console)

    if output is not None:
        err_console.print(f"[cyan]Exporting result to:[/cyan] {output}")
        export_result(result, output)

    # The bare value goes to stdout so it can be piped
    out_console.print(format_number(result.value))

    if not result.success:
        raise typer.Exit(code=1)


@app.command()
def check(
    formula_path: Annotated[
        Path | None,
        typer.Argument(help="Path to the formula JSON document"),
    ] = None,
) -> None:
    """Check a formula for structural problems without evaluating it."""
    err_console.print()
    config = _load_config()
    formula = _load_formula(formula_path, config)
    err_console.print()

    issues = validate_formula(formula)
    render_issues(issues, err_console)
    err_console.print()

    if has_errors(issues):
        err_console.print("[red]✗ Formula has errors[/red]")
        raise typer.Exit(code=1)

    err_console.print(
        f"[green]✓ Formula is valid[/green] [dim]({len(formula.nodes)} nodes, "
        f"{len(formula.connections)} connections)[/dim]",
    )


if __name__ == "__main__":
    app()
