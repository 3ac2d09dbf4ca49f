"""
Display utilities for resolution traces and directions.

Uses rich tables when rich is installed, plain text otherwise.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from symbiosis.direction import DIRECTIONS

if TYPE_CHECKING:
    from symbiosis.trigger import TraceStep, Trigger

try:
    from rich.console import Console
    from rich.table import Table

    HAS_RICH = True
except ImportError:
    HAS_RICH = False


def trace_to_dicts(steps: list[TraceStep]) -> list[dict[str, Any]]:
    """JSON-compatible form of a resolution trace."""
    return [
        {
            "position": step.position,
            "group": step.group.value,
            "context": step.label,
            "matched": step.matched,
            "winner": step.winner,
        }
        for step in steps
    ]


def display_trace(
    name: str,
    trigger: Trigger,
    steps: list[TraceStep],
    console: Any | None = None,
    plain: bool = False,
) -> None:
    """
    Print how *name* resolves for *trigger*.

    Args:
        name: The member name that was explained.
        trigger: The trigger the trace came from (for the title).
        steps: Output of ``trigger.explain(name)``.
        console: Optional rich Console instance.
        plain: Force plain text output even if rich is available.
    """
    title = f"{name!r} ({trigger.visibility}, {trigger.direction.name})"
    if HAS_RICH and not plain:
        _display_trace_rich(title, steps, console)
    else:
        _display_trace_simple(title, steps)


def _display_trace_rich(title: str, steps: list[TraceStep], console: Any | None) -> None:
    if console is None:
        console = Console()

    table = Table(title=f"Resolution of {title}", show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Group", style="cyan")
    table.add_column("Context")
    table.add_column("Answers", justify="center")

    for step in steps:
        if step.winner:
            answers = "[bold green]winner[/bold green]"
        elif step.matched:
            answers = "[green]yes[/green]"
        else:
            answers = "[dim]no[/dim]"
        table.add_row(str(step.position), step.group.value, step.label, answers)

    console.print(table)
    if not any(step.winner for step in steps):
        console.print("[red]Unresolved: no context can answer this name.[/red]")


def _display_trace_simple(title: str, steps: list[TraceStep]) -> None:
    print(f"Resolution of {title}")
    for step in steps:
        marker = "winner" if step.winner else ("yes" if step.matched else "no")
        print(f"  {step.position:>2}  {step.group.value:<6}  {marker:<6}  {step.label}")
    if not any(step.winner for step in steps):
        print("Unresolved: no context can answer this name.")


def display_directions(console: Any | None = None, plain: bool = False) -> None:
    """Print the six legal directions and their group order."""
    if HAS_RICH and not plain:
        if console is None:
            console = Console()
        table = Table(title="Directions", show_header=True, header_style="bold")
        table.add_column("Name", style="cyan")
        table.add_column("Order")
        for direction in DIRECTIONS:
            table.add_row(direction.name, " => ".join(g.value for g in direction))
        console.print(table)
        return

    for direction in DIRECTIONS:
        print(f"{direction.name}  {' => '.join(g.value for g in direction)}")
