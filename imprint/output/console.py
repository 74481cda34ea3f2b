"""
Imprint Console Output
=======================

Rich-powered terminal display for search reports: a summary panel and a
table of matched classes, one row per match.

Uses the ImprintConsole abstraction for consistent styling.
"""

from __future__ import annotations

from rich.markup import escape
from rich.panel import Panel

from shared.console import ImprintConsole

from imprint.core.models import SearchMode, SearchReport


class ImprintConsoleOutput:
    """Render :class:`SearchReport` objects to the terminal.

    Usage::

        output = ImprintConsoleOutput()
        output.display(report)
    """

    def __init__(self, console: ImprintConsole | None = None) -> None:
        self._console = console or ImprintConsole()

    def display(self, report: SearchReport) -> None:
        self._summary(report)
        self._matches(report)

    def _summary(self, report: SearchReport) -> None:
        mode = "exactly one per pattern" if report.mode is SearchMode.EXACT else "all matches"
        body = (
            f"[bold]Archive:[/bold]     {escape(report.archive)}\n"
            f"[bold]Mode:[/bold]        {mode}\n"
            f"[bold]Patterns:[/bold]    {report.pattern_count}\n"
            f"[bold]Candidates:[/bold]  {report.candidates_scanned}\n"
            f"[bold]Matches:[/bold]     {len(report.matches)}\n"
            f"[bold]Duration:[/bold]    {report.duration_seconds:.3f}s"
        )
        self._console.print(
            Panel(body, title="Imprint Search", border_style="bright_cyan", expand=False)
        )

    def _matches(self, report: SearchReport) -> None:
        if not report.matches:
            self._console.warning("No class matched any pattern.")
            return

        rows = [
            (
                m.pattern_index,
                m.pattern_name or "-",
                m.class_name.replace("/", "."),
                (m.super_class or "-").replace("/", "."),
                f"{m.method_count} / {m.field_count}",
                m.entry_name,
            )
            for m in report.matches
        ]
        self._console.table(
            "Matched Classes",
            ["#", "Pattern", "Class", "Superclass", "Methods / Fields", "Entry"],
            rows,
            styles=["dim", "bright_magenta", "bold bright_white", "", "", "dim"],
        )

        missing = report.unmatched_patterns
        if missing and report.mode is SearchMode.ALL:
            self._console.warning(
                "Patterns without a match: " + ", ".join(str(i) for i in missing)
            )
