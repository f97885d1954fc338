"""Console rendering helpers shared by the commands."""

from __future__ import annotations

from enum import Enum

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from .models import CheckResult, CheckStatus


class Progress(str, Enum):
    SUCCESS = "success"
    SKIP = "skip"
    WARN = "warn"
    ERROR = "error"


_ICONS = {
    Progress.SUCCESS: "[green]✔[/green]",
    Progress.SKIP: "[bright_black]•[/bright_black]",
    Progress.WARN: "[yellow]![/yellow]",
    Progress.ERROR: "[red]✖[/red]",
}

_CHECK_PROGRESS = {
    CheckStatus.OK: Progress.SUCCESS,
    CheckStatus.WARN: Progress.WARN,
    CheckStatus.ERROR: Progress.ERROR,
}


def progress_line(console: Console, label: str, detail: str, status: Progress) -> None:
    """Print ``<icon> <label> — <detail>``."""

    detail_text = f"[bright_black] — {escape(detail)}[/bright_black]" if detail else ""
    console.print(f"{_ICONS[status]} {escape(label)}{detail_text}")


def check_line(console: Console, result: CheckResult) -> None:
    progress_line(console, result.label, result.message, _CHECK_PROGRESS[result.status])


def boxed(console: Console, body: str, title: str) -> None:
    console.print(Panel(escape(body), title=title, expand=False))


__all__ = ["Progress", "boxed", "check_line", "progress_line"]
