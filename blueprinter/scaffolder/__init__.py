"""Blueprinter scaffolder -- renders named blueprints into a project tree.

A request such as ``generate adapter foo`` is resolved against the layered
blueprint registry (project, addons, built-ins), rendered with token
substitution, checked for conflicts against the files on disk and committed.
Post-install hooks then update shared files such as the router table.

Quick usage::

    from blueprinter.scaffolder import Generator, GenerationRequest

    generator = Generator("/path/to/project")
    report = await generator.generate(
        GenerationRequest(kind="model", name="foo", args=["bars:has-many"])
    )
"""

from blueprinter.scaffolder.conflicts import ConflictAnswer, ConflictResolver, StaticPrompt
from blueprinter.scaffolder.generator import Generator
from blueprinter.scaffolder.models import (
    CommitAction,
    CommitMode,
    CommitReport,
    GenerationRequest,
    LayoutMode,
)
from blueprinter.scaffolder.registry import BlueprintRegistry
from blueprinter.scaffolder.templates import TokenSubstitutionEngine

__all__ = [
    "BlueprintRegistry",
    "CommitAction",
    "CommitMode",
    "CommitReport",
    "ConflictAnswer",
    "ConflictResolver",
    "GenerationRequest",
    "Generator",
    "LayoutMode",
    "StaticPrompt",
    "TokenSubstitutionEngine",
]
