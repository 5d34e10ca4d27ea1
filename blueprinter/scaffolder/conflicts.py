"""Conflict detection and commit of planned files.

Classifies each planned file against the project tree (create, identical or
conflict) and commits the set under one of three policies:

- ``normal``  -- conflicts are put to a ``ConflictPrompt`` (overwrite, skip,
  diff, quit); ``quit`` aborts the remaining files of the request.
- ``dry_run`` -- nothing is written; the report shows what would happen.
- ``force``   -- conflicts are overwritten without asking.

Commit is atomic per file, not per request: files committed before an abort
stay on disk.
"""

from __future__ import annotations

import asyncio
import difflib
from collections.abc import Iterable, Sequence
from enum import Enum
from pathlib import Path
from typing import Optional, Protocol

from rich.console import Console
from rich.prompt import Prompt

from blueprinter.errors import BlueprinterError, ConflictAbort, PromptExhausted

from .models import (
    CommitAction,
    CommitEntry,
    CommitMode,
    CommitReport,
    FileStatus,
    PlannedFile,
)


# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------


class ConflictAnswer(str, Enum):
    """Possible answers to an overwrite prompt."""
    OVERWRITE = "overwrite"
    SKIP = "skip"
    DIFF = "diff"
    QUIT = "quit"


class ConflictPrompt(Protocol):
    """External collaborator deciding what to do with a conflicting file."""

    def ask(self, planned: PlannedFile, existing: str) -> ConflictAnswer:
        ...


_SHORTCUTS: dict[str, ConflictAnswer] = {
    "y": ConflictAnswer.OVERWRITE,
    "n": ConflictAnswer.SKIP,
    "d": ConflictAnswer.DIFF,
    "q": ConflictAnswer.QUIT,
}


class InteractivePrompt:
    """Asks on the terminal with ``rich.prompt.Prompt``."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console

    def ask(self, planned: PlannedFile, existing: str) -> ConflictAnswer:
        choice = Prompt.ask(
            f"[bold yellow]Overwrite[/bold yellow] {planned.destination_path}? "
            "(y)es, (n)o, (d)iff, (q)uit",
            choices=list(_SHORTCUTS),
            default="n",
            console=self.console,
        )
        return _SHORTCUTS[choice]


class StaticPrompt:
    """Replays pre-seeded answers; used in tests and non-interactive runs."""

    def __init__(self, answers: Iterable[ConflictAnswer | str]) -> None:
        self.answers = [ConflictAnswer(a) for a in answers]
        self.asked: list[str] = []

    def ask(self, planned: PlannedFile, existing: str) -> ConflictAnswer:
        self.asked.append(planned.destination_path)
        if not self.answers:
            raise PromptExhausted(f"No answer left for {planned.destination_path}")
        return self.answers.pop(0)


def render_diff(existing: str, planned: PlannedFile) -> str:
    """Unified diff from the file on disk to the rendered content."""
    diff = difflib.unified_diff(
        existing.splitlines(keepends=True),
        planned.rendered_content.splitlines(keepends=True),
        fromfile=f"{planned.destination_path} (existing)",
        tofile=f"{planned.destination_path} (new)",
    )
    return "".join(diff)


# ---------------------------------------------------------------------------
# ConflictResolver
# ---------------------------------------------------------------------------


class ConflictResolver:
    """Plans and commits a file set against the project tree."""

    def __init__(
        self,
        project_root: str | Path,
        prompt: ConflictPrompt | None = None,
        console: Console | None = None,
    ) -> None:
        self.project_root = Path(project_root)
        self.console = console or Console()
        self.prompt = prompt or InteractivePrompt(self.console)

    # -- Planning ----------------------------------------------------------

    async def plan(self, files: Sequence[PlannedFile]) -> list[PlannedFile]:
        """Classify every planned file against what is on disk."""
        planned: list[PlannedFile] = []
        for item in files:
            existing = await asyncio.to_thread(_read_existing, self.project_root / item.destination_path)
            if existing is None:
                status = FileStatus.CREATE
            elif existing == item.rendered_content:
                status = FileStatus.IDENTICAL
            else:
                status = FileStatus.CONFLICT
            planned.append(item.model_copy(update={"status": status}))
        return planned

    # -- Commit ------------------------------------------------------------

    async def commit(self, planned: Sequence[PlannedFile], mode: CommitMode) -> CommitReport:
        """Write (or, in dry-run, only report) a classified file set.

        Raises:
            ConflictAbort: If the prompt answers ``quit``.  The exception's
                report holds every entry, with the aborted file and those
                after it marked ``skipped``.
            BlueprinterError: Any other error from the prompt; its
                ``partial_report`` holds the files committed before it.
        """
        report = CommitReport(dry_run=mode is CommitMode.DRY_RUN)

        for index, item in enumerate(planned):
            try:
                action = await self._commit_one(item, mode)
            except BlueprinterError as exc:
                exc.partial_report = report
                raise
            if action is None:
                for rest in planned[index:]:
                    report.entries.append(_entry(rest, CommitAction.SKIPPED))
                report.aborted = True
                raise ConflictAbort(item.destination_path, report)
            report.entries.append(_entry(item, action))

        return report

    async def _commit_one(self, item: PlannedFile, mode: CommitMode) -> Optional[CommitAction]:
        """Commit one file; ``None`` means the prompt asked to quit."""
        if item.status is FileStatus.IDENTICAL:
            return CommitAction.IDENTICAL

        if mode is CommitMode.DRY_RUN:
            if item.status is FileStatus.CREATE:
                return CommitAction.CREATED
            return CommitAction.CONFLICT

        target = self.project_root / item.destination_path
        if item.status is FileStatus.CREATE:
            await asyncio.to_thread(_write_file, target, item.rendered_content)
            return CommitAction.CREATED

        if mode is CommitMode.FORCE:
            await asyncio.to_thread(_write_file, target, item.rendered_content)
            return CommitAction.OVERWRITTEN

        existing = await asyncio.to_thread(_read_existing, target) or ""
        while True:
            answer = await asyncio.to_thread(self.prompt.ask, item, existing)
            if answer is ConflictAnswer.DIFF:
                self.console.print(render_diff(existing, item), markup=False, highlight=False)
                continue
            break

        if answer is ConflictAnswer.QUIT:
            return None
        if answer is ConflictAnswer.SKIP:
            return CommitAction.SKIPPED
        await asyncio.to_thread(_write_file, target, item.rendered_content)
        return CommitAction.OVERWRITTEN

    # -- Removal -----------------------------------------------------------

    async def remove(self, planned: Sequence[PlannedFile], mode: CommitMode) -> CommitReport:
        """Delete the files a request would produce (the inverse of commit).

        Missing files are reported as ``skipped``; removal is idempotent.
        """
        report = CommitReport(dry_run=mode is CommitMode.DRY_RUN)
        for item in planned:
            target = self.project_root / item.destination_path
            if not target.is_file():
                report.entries.append(_entry(item, CommitAction.SKIPPED))
                continue
            if mode is not CommitMode.DRY_RUN:
                await asyncio.to_thread(target.unlink)
            report.entries.append(_entry(item, CommitAction.REMOVED))
        return report


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _entry(item: PlannedFile, action: CommitAction) -> CommitEntry:
    return CommitEntry(
        path=item.destination_path,
        status=item.status,
        action=action,
        blueprint=item.blueprint,
    )


def _read_existing(path: Path) -> Optional[str]:
    if not path.is_file():
        return None
    return path.read_text(encoding="utf-8")


def _write_file(path: Path, content: str) -> None:
    """Synchronous helper: create parent dirs and write content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
