"""Blueprint discovery across project, addon and built-in scopes.

A blueprint is a directory named after its kind::

    <blueprints-dir>/<kind>/files/**    token-bearing template tree (optional)
    <blueprints-dir>/<kind>/index.py    optional hooks module

The registry searches an explicit priority list of blueprint directories:
the project's own ``blueprints/`` first, then each addon's ``blueprints/``
with later-registered addons first, then the blueprints bundled with the
package.  ``resolve`` collapses the chain for a kind into one
``ResolvedBlueprint``: the highest definition that ships files supplies the
file set, and hooks-only definitions above it decorate it.
"""

from __future__ import annotations

import importlib.util
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import ModuleType
from typing import Any, Optional

from blueprinter.config import ProjectConfig
from blueprinter.errors import NotFoundError

from .context import HookContext
from .models import BlueprintScope, GenerationRequest, TemplateFile
from .naming import singularize

BUILTIN_BLUEPRINTS_DIR = Path(__file__).resolve().parent.parent / "blueprints"

HOOK_NAMES: tuple[str, ...] = ("locals", "file_map_tokens", "after_install", "after_uninstall")

_IGNORED_PARTS = {"__pycache__", ".DS_Store"}


# ---------------------------------------------------------------------------
# Blueprint definitions
# ---------------------------------------------------------------------------


class BlueprintDefinition:
    """One blueprint directory found in one scope."""

    def __init__(
        self,
        kind: str,
        scope: BlueprintScope,
        source_dir: Path,
        *,
        addon_order: int = 0,
        files: Optional[list[TemplateFile]] = None,
        module: Optional[ModuleType] = None,
    ) -> None:
        self.kind = kind
        self.scope = scope
        self.source_dir = source_dir
        self.addon_order = addon_order
        self.files = files
        self.module = module

    def __repr__(self) -> str:
        return f"BlueprintDefinition({self.kind!r}, scope={self.scope.value}, dir={self.source_dir})"

    @classmethod
    def from_directory(
        cls,
        directory: Path,
        scope: BlueprintScope,
        *,
        addon_order: int = 0,
    ) -> "BlueprintDefinition":
        """Load a blueprint from *directory* (its name is the kind)."""
        files_dir = directory / "files"
        files = _load_template_files(files_dir) if files_dir.is_dir() else None
        index = directory / "index.py"
        module = _load_hooks_module(index, scope, directory.name, addon_order) if index.is_file() else None
        return cls(
            directory.name,
            scope,
            directory,
            addon_order=addon_order,
            files=files,
            module=module,
        )

    @property
    def has_files(self) -> bool:
        return self.files is not None

    @property
    def description(self) -> str:
        return str(getattr(self.module, "description", "") or "")

    def hook(self, name: str) -> Optional[Callable[..., Any]]:
        """Return the named hook function, if the blueprint defines one."""
        if self.module is None:
            return None
        fn = getattr(self.module, name, None)
        return fn if callable(fn) else None


def _load_template_files(files_dir: Path) -> list[TemplateFile]:
    templates: list[TemplateFile] = []
    for path in sorted(files_dir.rglob("*")):
        if not path.is_file() or _IGNORED_PARTS.intersection(path.parts) or path.suffix == ".pyc":
            continue
        templates.append(TemplateFile(
            source_path=path.relative_to(files_dir).as_posix(),
            body=path.read_text(encoding="utf-8"),
        ))
    return templates


def _load_hooks_module(
    index: Path, scope: BlueprintScope, kind: str, addon_order: int
) -> ModuleType:
    """Load a blueprint's ``index.py`` via importlib and return the module."""
    safe_kind = re.sub(r"\W", "_", kind)
    spec = importlib.util.spec_from_file_location(
        f"blueprinter_blueprint_{scope.value}_{addon_order}_{safe_kind}", str(index)
    )
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot load blueprint hooks from {index}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


# ---------------------------------------------------------------------------
# Resolved blueprint
# ---------------------------------------------------------------------------


class ResolvedBlueprint:
    """A kind collapsed across scopes into one file set plus layered hooks.

    ``layers`` is ordered lowest priority first: the definition supplying
    the files, then each hooks-only decorator above it.
    """

    def __init__(self, kind: str, layers: list[BlueprintDefinition]) -> None:
        self.kind = kind
        self.layers = layers

    @property
    def provider(self) -> BlueprintDefinition:
        return self.layers[0]

    @property
    def files(self) -> list[TemplateFile]:
        return self.provider.files or []

    @property
    def path_tokens(self) -> bool:
        """True if any file path carries a pod-aware path token."""
        return any(
            "__path__" in f.source_path or "__testPath__" in f.source_path
            for f in self.files
        )

    @property
    def description(self) -> str:
        for layer in reversed(self.layers):
            if layer.description:
                return layer.description
        return ""

    def hooks(self, name: str) -> list[Callable[..., Any]]:
        """Every layer's *name* hook, lowest priority first."""
        return [fn for fn in (layer.hook(name) for layer in self.layers) if fn is not None]

    def locals(self, context: HookContext) -> dict[str, Any]:
        merged: dict[str, Any] = {}
        for fn in self.hooks("locals"):
            merged.update(fn(context) or {})
        return merged

    def file_map_tokens(self, context: HookContext) -> dict[str, Callable[[HookContext], str]]:
        merged: dict[str, Callable[[HookContext], str]] = {}
        for fn in self.hooks("file_map_tokens"):
            merged.update(fn(context) or {})
        return merged


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SearchPath:
    """One blueprint directory in the registry's priority list."""
    scope: BlueprintScope
    directory: Path
    addon_order: int = 0


class BlueprintRegistry:
    """Finds blueprint definitions by kind across all scopes."""

    def __init__(
        self,
        project_root: str | Path,
        config: ProjectConfig | None = None,
        *,
        builtin_dir: str | Path | None = None,
    ) -> None:
        self.project_root = Path(project_root)
        self.config = config or ProjectConfig()
        self.builtin_dir = Path(builtin_dir) if builtin_dir else BUILTIN_BLUEPRINTS_DIR
        self._cache: dict[tuple[Path, str], Optional[BlueprintDefinition]] = {}

    @property
    def search_paths(self) -> list[SearchPath]:
        """Blueprint directories, highest priority first."""
        paths = [SearchPath(BlueprintScope.PROJECT, self.project_root / self.config.blueprints_dir)]
        # Later-registered addons shadow earlier ones.
        for order, addon in reversed(list(enumerate(self.config.addons))):
            paths.append(SearchPath(
                BlueprintScope.ADDON,
                self.project_root / addon / "blueprints",
                addon_order=order,
            ))
        paths.append(SearchPath(BlueprintScope.BUILTIN, self.builtin_dir))
        return paths

    def _definition(self, search: SearchPath, kind: str) -> Optional[BlueprintDefinition]:
        key = (search.directory, kind)
        if key not in self._cache:
            directory = search.directory / kind
            self._cache[key] = (
                BlueprintDefinition.from_directory(
                    directory, search.scope, addon_order=search.addon_order
                )
                if directory.is_dir()
                else None
            )
        return self._cache[key]

    def lookup_chain(self, kind: str) -> list[BlueprintDefinition]:
        """Every definition of *kind*, highest priority first."""
        chain = []
        for search in self.search_paths:
            definition = self._definition(search, kind)
            if definition is not None:
                chain.append(definition)
        return chain

    def lookup(self, kind: str) -> BlueprintDefinition:
        """The highest-priority definition of *kind*.

        Raises:
            NotFoundError: If no scope defines *kind*.
        """
        chain = self.lookup_chain(kind)
        if not chain:
            raise NotFoundError(kind)
        return chain[0]

    def has(self, kind: str) -> bool:
        return bool(self.lookup_chain(kind))

    def resolve(self, kind: str) -> ResolvedBlueprint:
        """Collapse the chain for *kind* into a single blueprint.

        Walks the chain top-down and stops at the first definition that
        ships files; the hooks-only definitions passed on the way decorate
        it.  A chain made only of hooks-only definitions resolves to an
        empty file set.
        """
        chain = self.lookup_chain(kind)
        if not chain:
            raise NotFoundError(kind)
        collected: list[BlueprintDefinition] = []
        for definition in chain:
            collected.append(definition)
            if definition.has_files:
                break
        return ResolvedBlueprint(kind, list(reversed(collected)))

    def available_kinds(self) -> list[str]:
        """Sorted kinds visible in any scope, composite kinds included."""
        kinds: set[str] = set(COMPOSITE_KINDS)
        for search in self.search_paths:
            if search.directory.is_dir():
                kinds.update(p.name for p in search.directory.iterdir() if p.is_dir())
        return sorted(kinds)


# ---------------------------------------------------------------------------
# Composite kinds
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SubRequestSpec:
    """One entry in a composite kind's expansion."""
    kind: str
    singular: bool = False
    forward_args: bool = False
    options: Mapping[str, Any] = field(default_factory=dict)


COMPOSITE_KINDS: dict[str, tuple[SubRequestSpec, ...]] = {
    "resource": (
        SubRequestSpec("model", singular=True, forward_args=True),
        SubRequestSpec("route", options={"type": "resource"}),
        SubRequestSpec("template"),
    ),
}


def expand_request(request: GenerationRequest) -> list[GenerationRequest]:
    """Expand a composite request into its ordered sub-requests.

    Non-composite requests are returned as a single-element list.
    """
    specs = COMPOSITE_KINDS.get(request.kind)
    if specs is None:
        return [request]
    return [
        GenerationRequest(
            kind=spec.kind,
            name=singularize(request.name) if spec.singular else request.name,
            options={**request.options, **spec.options},
            args=list(request.args) if spec.forward_args else [],
        )
        for spec in specs
    ]
