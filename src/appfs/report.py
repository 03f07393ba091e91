"""
Report formatting.

Renders a ValidationReport for humans with rich, or as JSON for machines.
"""

from typing import Optional

from rich.console import Console
from rich.table import Table

from .validation.models import Severity, ValidationReport, Violation

_SEVERITY_STYLE = {
    Severity.ERROR: "bold red",
    Severity.WARNING: "yellow",
}


def _location(violation: Violation) -> str:
    if violation.paths:
        return "\n".join(violation.paths)
    if violation.path and violation.line:
        return f"{violation.path}:{violation.line}"
    return violation.path or ""


class ReportFormatter:
    """
    Prints a ValidationReport as a table plus a summary line.

    Example:
        ```python
        ReportFormatter(Console()).render(project.validate())
        ```
    """

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def build_table(self, report: ValidationReport, show_warnings: bool = True) -> Table:
        table = Table(title=f"Validation of {report.entry_path} (generation {report.generation})")
        table.add_column("Severity")
        table.add_column("Check", style="cyan")
        table.add_column("Location")
        table.add_column("Message")

        rows = list(report.violations)
        if show_warnings:
            rows.extend(report.warnings)
        for violation in rows:
            table.add_row(
                f"[{_SEVERITY_STYLE[violation.severity]}]{violation.severity.value}[/]",
                violation.kind.value,
                _location(violation),
                violation.message,
            )
        return table

    def render(self, report: ValidationReport, show_warnings: bool = True) -> None:
        if report.violations or (show_warnings and report.warnings):
            self.console.print(self.build_table(report, show_warnings))
        style = "green" if report.ok else "red"
        self.console.print(f"[{style}]{report.summary()}[/{style}]")

    def render_json(self, report: ValidationReport) -> None:
        self.console.print_json(report.to_json())
