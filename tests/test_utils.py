"""Unit tests for the console helpers in blueprinter.utils."""

from __future__ import annotations

import io

import pytest
from rich.console import Console

from blueprinter.scaffolder.models import (
    CommitAction,
    CommitEntry,
    CommitReport,
    FileStatus,
    TokenWarning,
)
from blueprinter.utils import (
    ACTION_LABELS,
    count_actions,
    format_entry,
    print_commit_report,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
)


def _console() -> Console:
    return Console(file=io.StringIO(), force_terminal=False, width=120)


def _output(console: Console) -> str:
    return console.file.getvalue()


def _report(**kwargs) -> CommitReport:
    entries = [
        CommitEntry(path="app/adapters/foo.js", status=FileStatus.CREATE, action=CommitAction.CREATED),
        CommitEntry(path="app/router.js", status=FileStatus.IDENTICAL, action=CommitAction.IDENTICAL),
        CommitEntry(path="app/models/foo.js", status=FileStatus.CONFLICT, action=CommitAction.SKIPPED),
    ]
    return CommitReport(entries=entries, **kwargs)


class TestFormatEntry:
    @pytest.mark.unit
    def test_every_action_has_a_label(self):
        assert set(ACTION_LABELS) == set(CommitAction)

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "action, label",
        [
            (CommitAction.CREATED, "create"),
            (CommitAction.IDENTICAL, "identical"),
            (CommitAction.OVERWRITTEN, "overwrite"),
            (CommitAction.SKIPPED, "skip"),
            (CommitAction.CONFLICT, "conflict"),
            (CommitAction.REMOVED, "remove"),
        ],
    )
    def test_label(self, action, label):
        assert format_entry(action, "app/foo.js").plain == f"  {label} app/foo.js"


class TestPrintCommitReport:
    @pytest.mark.unit
    def test_prints_each_entry(self):
        console = _console()
        print_commit_report(_report(), console)
        out = _output(console)
        assert "create app/adapters/foo.js" in out
        assert "identical app/router.js" in out
        assert "skip app/models/foo.js" in out

    @pytest.mark.unit
    def test_dry_run_banner(self):
        console = _console()
        print_commit_report(_report(dry_run=True), console)
        assert "Dry run" in _output(console)

    @pytest.mark.unit
    def test_warnings_and_messages(self):
        report = _report(
            warnings=[TokenWarning(token="__foo__", source_path="app/__foo__.js", blueprint="x")],
            messages=["router: add this.route('foo');"],
        )
        console = _console()
        print_commit_report(report, console)
        out = _output(console)
        assert "Unresolved token __foo__" in out
        assert "router: add this.route('foo');" in out

    @pytest.mark.unit
    def test_aborted_banner(self):
        console = _console()
        print_commit_report(_report(aborted=True), console)
        assert "Aborted" in _output(console)


class TestHelpers:
    @pytest.mark.unit
    def test_count_actions(self):
        report = _report()
        assert count_actions(report, [CommitAction.CREATED]) == 1
        assert count_actions(report, [CommitAction.CREATED, CommitAction.SKIPPED]) == 2
        assert count_actions(report, [CommitAction.REMOVED]) == 0

    @pytest.mark.unit
    def test_status_messages(self):
        console = _console()
        print_success("done", console)
        print_warning("careful", console)
        print_error("failed", console)
        out = _output(console)
        assert "done" in out
        assert "careful" in out
        assert "failed" in out

    @pytest.mark.unit
    def test_summary_table(self):
        console = _console()
        print_summary_table({"adapter": "Generates an adapter."}, title="Blueprints", out=console)
        out = _output(console)
        assert "adapter" in out
        assert "Generates an adapter." in out
