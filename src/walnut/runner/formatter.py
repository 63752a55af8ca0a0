"""Rendering of run results for the terminal."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from walnut.core.models import RunResult, StepResult, StepStatus

_STATUS_STYLE = {
    StepStatus.COMPLETED: ("OK", "green"),
    StepStatus.FAILED: ("!!", "red"),
    StepStatus.SKIPPED: ("--", "yellow"),
}


def format_step_line(result: StepResult) -> str:
    """One plain-text line describing a step outcome."""
    label = result.name
    if result.description:
        label = f"{label} - {result.description}"
    if result.status is StepStatus.COMPLETED:
        return f"PASS {label} ({result.duration_ms:.0f}ms)"
    if result.status is StepStatus.SKIPPED:
        return f"SKIP {label}"
    if result.error is not None:
        return f"FAIL {label}: {result.error.report_line()}"
    return f"{result.status.value.upper()} {label}"


class ConsoleReporter:
    """Prints a run result as a table followed by a summary line."""

    def __init__(self, console: Console | None = None, show_logs: bool = False) -> None:
        self.console = console or Console()
        self.show_logs = show_logs

    def report(self, result: RunResult) -> None:
        table = Table(show_header=False, box=None)
        table.add_column("Status", width=3)
        table.add_column("Step")
        table.add_column("Result")

        for step in result.steps:
            marker, color = _STATUS_STYLE.get(step.status, ("??", "white"))
            if step.status is StepStatus.COMPLETED:
                detail = f"{step.duration_ms:.0f}ms"
            elif step.error is not None:
                detail = step.error.report_line()
            else:
                detail = step.status.value
            table.add_row(f"[{color}]{marker}[/{color}]", escape(step.name), f"[{color}]{escape(detail)}[/{color}]")

            if self.show_logs:
                for entry in step.logs:
                    table.add_row("", f"[dim]{entry.level}[/dim]", f"[dim]{escape(entry.message)}[/dim]")

        self.console.print(table)

        completed = sum(1 for step in result.steps if step.success)
        total = len(result.steps)
        if result.success:
            self.console.print(f"[green]Passed[/green] {completed}/{total} steps in {result.duration_ms:.0f}ms")
        elif result.aborted:
            self.console.print(f"[red]Aborted[/red] ({result.abort_reason}) after {completed}/{total} steps")
        else:
            self.console.print(f"[red]Failed[/red] {len(result.failed_steps)} of {total} steps")
