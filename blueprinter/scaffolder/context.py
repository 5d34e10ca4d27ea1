"""The context object handed to blueprint hooks and token functions."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from blueprinter.config import ProjectConfig

from .models import CommitMode, Entity, Structure
from .naming import pluralize

COMPANION_SUFFIXES: tuple[str, ...] = ("-test", "-addon")


def join_path(*parts: str) -> str:
    """Join non-empty path parts with ``/``."""
    return "/".join(p.strip("/") for p in parts if p and p.strip("/"))


def subject_kind_of(kind: str) -> str:
    """``controller-test`` -> ``controller``; primary kinds are returned unchanged."""
    for suffix in COMPANION_SUFFIXES:
        if kind.endswith(suffix) and len(kind) > len(suffix):
            return kind[: -len(suffix)]
    return kind


@dataclass
class HookContext:
    """Everything a blueprint hook can see about the current generation.

    One context is built per blueprint in a sub-request; ``locals`` is filled
    in from the blueprint's ``locals`` hook before rendering, and hooks
    append human-readable notes to ``messages``.
    """

    kind: str
    entity: Entity
    structure: Structure
    config: ProjectConfig
    project_root: Path
    options: dict[str, Any] = field(default_factory=dict)
    args: list[str] = field(default_factory=list)
    mode: CommitMode = CommitMode.NORMAL
    path_tokens: bool = True
    locals: dict[str, Any] = field(default_factory=dict)
    messages: list[str] = field(default_factory=list)

    @property
    def subject_kind(self) -> str:
        """The kind a companion blueprint generates for (``model`` for ``model-test``)."""
        return subject_kind_of(self.kind)

    @property
    def dry_run(self) -> bool:
        return self.mode is CommitMode.DRY_RUN

    @property
    def in_addon(self) -> bool:
        return self.config.is_addon

    def option(self, key: str, default: Any = None) -> Any:
        return self.options.get(key, default)

    def path(self, *parts: str) -> Path:
        """Absolute path of a project-relative location."""
        return self.project_root.joinpath(*parts)

    def bucket(self, kind: str | None = None) -> str:
        """Classic type-bucket directory, e.g. ``controllers``."""
        return pluralize(kind or self.subject_kind)

    def pod_dir(self, *extra: str, test: bool = False) -> str:
        """Pod directory for the entity, under the base (or test) prefix."""
        prefix = self.structure.test_prefix if test else self.structure.base_prefix
        return join_path(prefix, *extra, self.entity.spellings.dash)

    def classic_dir(self, bucket: str | None = None) -> str:
        """Classic directory: the type bucket plus the name's parent segments."""
        return join_path(bucket or self.bucket(), *self.entity.parents)
