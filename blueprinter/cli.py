"""Command-line entry point: ``blueprinter generate|destroy|list``.

Examples::

    blueprinter generate adapter foo
    blueprinter generate model foo firstName:string bars:has-many
    blueprinter generate route foo --path=:foo_id/show --pod
    blueprinter destroy resource foos
    blueprinter list

Options the parser does not know (``--foo-bar`` or ``--foo-bar=value``) are
passed to blueprint hooks as ``foo_bar``.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Optional

from rich.console import Console

from blueprinter.config import find_project_root, load_project_config
from blueprinter.errors import BlueprinterError
from blueprinter.scaffolder.generator import Generator
from blueprinter.scaffolder.models import CommitAction, GenerationRequest, OptionValue
from blueprinter.scaffolder.registry import BlueprintRegistry
from blueprinter.utils import (
    console,
    count_actions,
    print_commit_report,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blueprinter",
        description="Blueprinter -- generate files from named blueprints",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  blueprinter generate adapter foo\n"
            "  blueprinter generate model foo firstName:string bars:has-many\n"
            "  blueprinter generate resource foos --pod\n"
        ),
    )
    parser.add_argument(
        "--project", "-C",
        default=None,
        help="Project directory (default: nearest parent with a project marker)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    for command, help_text in (
        ("generate", "Generate files for a blueprint"),
        ("destroy", "Remove the files a blueprint generates"),
    ):
        cmd = sub.add_parser(command, aliases=[command[0]], help=help_text)
        cmd.add_argument("kind", help="Blueprint kind, e.g. 'adapter' or 'resource'")
        cmd.add_argument("name", help="Entity name, may contain '/' (e.g. 'foo/bar')")
        cmd.add_argument("args", nargs="*", help="Extra tokens, e.g. 'name:type' model attributes")
        layout = cmd.add_mutually_exclusive_group()
        layout.add_argument("--pod", "-p", action="store_true", help="Use the pod layout")
        layout.add_argument("--classic", action="store_true", help="Use the classic layout")
        cmd.add_argument("--dry-run", "-d", action="store_true", help="Report without writing")
        cmd.add_argument("--force", "-f", action="store_true", help="Overwrite without asking")
        cmd.add_argument("--path", default=None, help="Custom URL path for routes")
        cmd.add_argument("--type", default=None, help="Route type: 'route' or 'resource'")
        cmd.add_argument("--base-class", default=None, help="Base class to extend")
        cmd.add_argument("--skip-tests", action="store_true", help="Do not generate companion tests")

    sub.add_parser("list", help="List available blueprints")
    return parser


def parse_extra_options(
    extras: Sequence[str],
) -> tuple[dict[str, OptionValue], list[str]]:
    """Split argv the parser left over into options and positionals.

    ``--foo-bar`` -> ``{'foo_bar': True}``; ``--foo-bar=x`` -> ``{'foo_bar': 'x'}``.
    Plain tokens after an unknown option (``--foo bar:string``) are returned
    as positionals, in order.

    Raises:
        ValueError: For a short option or a bare ``--``.
    """
    options: dict[str, OptionValue] = {}
    positionals: list[str] = []
    for token in extras:
        if not token.startswith("-"):
            positionals.append(token)
            continue
        if not token.startswith("--") or len(token) == 2:
            raise ValueError(f"Unrecognised argument: {token}")
        key, sep, value = token[2:].partition("=")
        options[key.replace("-", "_")] = value if sep else True
    return options, positionals


def request_from_args(args: argparse.Namespace, extras: Sequence[str]) -> GenerationRequest:
    options, positionals = parse_extra_options(extras)
    for key in ("pod", "classic", "dry_run", "force", "skip_tests"):
        if getattr(args, key):
            options[key] = True
    for key in ("path", "type", "base_class"):
        value = getattr(args, key)
        if value is not None:
            options[key] = value
    return GenerationRequest(
        kind=args.kind, name=args.name, options=options, args=[*args.args, *positionals]
    )


def list_blueprints(registry: BlueprintRegistry, out: Console) -> None:
    rows: dict[str, str] = {}
    for kind in registry.available_kinds():
        rows[kind] = registry.resolve(kind).description if registry.has(kind) else "composite"
    print_summary_table(rows, title="Available blueprints", out=out)


def main(argv: Optional[Sequence[str]] = None, out: Optional[Console] = None) -> int:
    """CLI entry point for ``blueprinter``.  Returns the process exit code."""
    out = out or console
    parser = build_parser()
    args, extras = parser.parse_known_args(argv)

    root = find_project_root(Path(args.project) if args.project else None)
    try:
        config = load_project_config(root)
    except BlueprinterError as exc:
        print_error(f"Error: {exc}", out)
        return 1

    if args.command == "list":
        list_blueprints(BlueprintRegistry(root, config), out)
        return 0

    try:
        request = request_from_args(args, extras)
    except ValueError as exc:
        print_error(f"Error: {exc}", out)
        return 2

    generator = Generator(root, config, console=out)
    destroying = args.command in ("destroy", "d")
    try:
        if destroying:
            report = asyncio.run(generator.destroy(request))
        else:
            report = asyncio.run(generator.generate(request))
    except BlueprinterError as exc:
        if exc.partial_report is not None:
            print_commit_report(exc.partial_report, out)
        print_error(f"Error: {exc}", out)
        return 1

    print_commit_report(report, out)
    if report.aborted:
        return 1
    if report.dry_run:
        return 0

    changed = count_actions(
        report, (CommitAction.CREATED, CommitAction.OVERWRITTEN, CommitAction.REMOVED)
    )
    if changed:
        verb = "Removed" if destroying else "Wrote"
        print_success(f"{verb} {changed} file(s)", out)
    else:
        print_warning("Nothing to do", out)
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
