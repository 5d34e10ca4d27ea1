"""Shared console helpers for Blueprinter.

Rich-based output for commit reports, lists of blueprints and status
messages.  All user-facing output goes through the module-level ``console``
unless a caller passes its own.
"""

from __future__ import annotations

from collections.abc import Iterable

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from blueprinter.scaffolder.models import CommitAction, CommitReport

console = Console()


# ---------------------------------------------------------------------------
# Commit reports
# ---------------------------------------------------------------------------

ACTION_LABELS: dict[CommitAction, tuple[str, str]] = {
    CommitAction.CREATED: ("create", "green"),
    CommitAction.IDENTICAL: ("identical", "dim"),
    CommitAction.OVERWRITTEN: ("overwrite", "yellow"),
    CommitAction.SKIPPED: ("skip", "yellow"),
    CommitAction.CONFLICT: ("conflict", "red"),
    CommitAction.REMOVED: ("remove", "red"),
}


def format_entry(action: CommitAction, path: str) -> Text:
    """One ``  create app/adapters/foo.js`` line, coloured by action."""
    label, style = ACTION_LABELS[action]
    line = Text("  ")
    line.append(label, style=style)
    line.append(f" {path}")
    return line


def print_commit_report(report: CommitReport, out: Console | None = None) -> None:
    """Print every entry, then warnings and hook messages.

    Args:
        report: Report returned by ``Generator.generate`` or ``destroy``.
        out: Console to print to (defaults to the module console).
    """
    out = out or console
    if report.dry_run:
        out.print("[bold cyan]Dry run: no files were changed[/bold cyan]")

    for entry in report.entries:
        out.print(format_entry(entry.action, entry.path))

    for warning in report.warnings:
        out.print(f"[yellow]warning[/yellow] {escape(str(warning))}", highlight=False)

    for message in report.messages:
        out.print(f"  {message}", markup=False, highlight=False)

    if report.aborted:
        out.print("[bold red]Aborted: remaining files were not written[/bold red]")


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------


def print_summary_table(data: dict[str, str], title: str = "Summary", out: Console | None = None) -> None:
    """Print a two-column key/value summary table.

    Args:
        data: Mapping of label -> value.
        title: Table title.
        out: Console to print to (defaults to the module console).
    """
    out = out or console
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Blueprint", style="dim", no_wrap=True)
    table.add_column("Description")

    for key, value in data.items():
        table.add_row(key, str(value))

    out.print(table)


def count_actions(report: CommitReport, actions: Iterable[CommitAction]) -> int:
    wanted = set(actions)
    return sum(1 for e in report.entries if e.action in wanted)


# ---------------------------------------------------------------------------
# Status messages
# ---------------------------------------------------------------------------


def print_success(message: str, out: Console | None = None) -> None:
    """Print a green success message."""
    (out or console).print(f"[bold green]{escape(message)}[/bold green]")


def print_error(message: str, out: Console | None = None) -> None:
    """Print a red error message."""
    (out or console).print(f"[bold red]{escape(message)}[/bold red]")


def print_warning(message: str, out: Console | None = None) -> None:
    """Print a yellow warning message."""
    (out or console).print(f"[bold yellow]{escape(message)}[/bold yellow]")
