"""
Imprint Console Interface
==========================

Rich-powered console shared by the Imprint command and its output
renderers: severity-prefixed status lines and match tables, styled
from one theme.

References:
    - Rich library: https://github.com/Textualize/rich
"""

from __future__ import annotations

from typing import Any, Sequence

from rich.console import Console
from rich.table import Table
from rich.theme import Theme

_IMPRINT_THEME = Theme(
    {
        "imprint.success": "bold green",
        "imprint.warning": "bold yellow",
        "imprint.error": "bold red",
        "imprint.header": "bold bright_magenta",
        "imprint.border": "bright_cyan",
    }
)


class ImprintConsole:
    """Terminal output for search results and CLI status messages.

    Message text is Rich markup; callers escape untrusted values such as
    paths and exception messages.

    Usage::

        con = ImprintConsole()
        con.table("Matched Classes", ["#", "Class"], [(0, "a.b")])
        con.success("JSON report saved: matches.json")

    Args:
        record: Keep rendered output for :meth:`export_text`.
    """

    def __init__(self, *, record: bool = False) -> None:
        self._console = Console(theme=_IMPRINT_THEME, record=record, highlight=False)

    # ------------------------------------------------------------------ #
    #  Status lines
    # ------------------------------------------------------------------ #

    def _status_line(self, style: str, marker: str, label: str, message: str) -> None:
        self._console.print(f"[{style}]\\[{marker}] {label}:[/{style}] {message}")

    def success(self, message: str) -> None:
        self._status_line("imprint.success", "✔", "SUCCESS", message)

    def warning(self, message: str) -> None:
        self._status_line("imprint.warning", "⚠", "WARNING", message)

    def error(self, message: str) -> None:
        self._status_line("imprint.error", "✘", "ERROR", message)

    # ------------------------------------------------------------------ #
    #  Tables
    # ------------------------------------------------------------------ #

    def table(
        self,
        title: str,
        columns: Sequence[str],
        rows: Sequence[Sequence[Any]],
        *,
        styles: Sequence[str] | None = None,
    ) -> None:
        """Render *rows* under *columns*; cells are stringified.

        Args:
            styles: Optional per-column Rich style strings.
        """
        tbl = Table(
            title=title,
            border_style="imprint.border",
            header_style="imprint.header",
            show_lines=True,
            padding=(0, 1),
        )
        for idx, name in enumerate(columns):
            tbl.add_column(name, style=styles[idx] if styles and idx < len(styles) else "")
        for row in rows:
            tbl.add_row(*(str(cell) for cell in row))
        self._console.print(tbl)

    def print(self, *args: Any, **kwargs: Any) -> None:
        """Proxy to :meth:`rich.console.Console.print`."""
        self._console.print(*args, **kwargs)

    def export_text(self) -> str:
        """Recorded output as plain text (requires ``record=True``)."""
        return self._console.export_text()
