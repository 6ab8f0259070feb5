"""Rendering of evaluation traces and formula issues for the terminal."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from payformula._trace import format_number
from payformula._validate import IssueSeverity

if TYPE_CHECKING:
    from rich.console import Console

    from payformula._eval_engine import EvaluationResult
    from payformula._validate import FormulaIssue


def _severity_style(severity: IssueSeverity) -> str:
    match severity:
        case IssueSeverity.ERROR:
            return "red"
        case IssueSeverity.WARNING:
            return "yellow"


def render_steps(result: EvaluationResult, console: Console) -> None:
    """Render the evaluation steps as a Rich table.

    Args:
        result: The evaluation result to render.
        console: Rich console to print to.

    """
    if not result.steps:
        console.print("[dim]No steps recorded[/dim]")
        return

    table = Table(show_header=True, header_style="bold cyan", box=None)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Node", style="dim")
    table.add_column("Step")
    table.add_column("Value", justify="right")

    for index, step in enumerate(result.steps, start=1):
        if step.is_error:
            description = f"[red]{escape(step.description)}[/red]"
        else:
            description = escape(step.description)
        table.add_row(str(index), escape(step.node_id), description, format_number(step.value))

    console.print(table)


def render_result(result: EvaluationResult, console: Console) -> None:
    """Render the outcome of an evaluation as a summary panel."""
    if result.success:
        body = f"[green]✓ Value:[/green] [bold]{format_number(result.value)}[/bold]"
        border = "green"
    else:
        body = f"[red]✗ Error:[/red] {escape(result.error or '')}\n[dim]Value: {format_number(result.value)}[/dim]"
        border = "red"
    console.print(Panel(body, title="Result", border_style=border))


def render_issues(issues: list[FormulaIssue], console: Console) -> None:
    """Render formula issues as a Rich table.

    Args:
        issues: Issues returned by ``validate_formula``.
        console: Rich console to print to.

    """
    if not issues:
        console.print("[green]✓ No issues found[/green]")
        return

    table = Table(show_header=True, header_style="bold cyan", box=None)
    table.add_column("Severity")
    table.add_column("Node", style="dim")
    table.add_column("Message")

    for issue in issues:
        style = _severity_style(issue.severity)
        table.add_row(
            f"[{style}]{issue.severity.upper()}[/{style}]",
            escape(issue.node_id or "-"),
            escape(issue.message),
        )

    console.print(table)
