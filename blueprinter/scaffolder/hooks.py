"""Post-generation side effects and the helpers built-in blueprints share.

- Router table insertion and removal (route, resource).
- Base-class resolution for adapter- and serializer-style blueprints.
- Attribute and relationship parsing for model blueprints.
- ``InstallHookRunner``, which runs each layer's ``after_install`` /
  ``after_uninstall`` hook once files are committed.
"""

from __future__ import annotations

import posixpath
import re
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from blueprinter.errors import AttributeParseError, SelfExtensionError

from .context import HookContext, join_path
from .models import AttributeKind, RelationshipAttribute
from .naming import camelize, classify, dasherize, pluralize, singularize
from .structure import pod_base_prefix

if TYPE_CHECKING:
    from .registry import ResolvedBlueprint


# ---------------------------------------------------------------------------
# Router table
# ---------------------------------------------------------------------------

ROUTER_SUPPRESSED: frozenset[str] = frozenset({"index", "application", "basic"})

_ROUTER_MAP = re.compile(r"Router\.map\(function\(\)\s*\{[^\n]*\n")
_BLOCK_END = re.compile(r"^\}\);[ \t]*$", re.MULTILINE)


def route_statement(name: str, path: Optional[str] = None, *, resource: bool = False) -> str:
    """The router statement for one route or resource entry."""
    method = "resource" if resource else "route"
    if path:
        options = "{\n    path: '%s'\n  }" % path
        if resource:
            return f"  this.{method}('{name}', {options}, function() {{}});"
        return f"  this.{method}('{name}', {options});"
    if resource:
        return f"  this.{method}('{name}', function() {{}});"
    return f"  this.{method}('{name}');"


def insert_statement(content: str, statement: str) -> Optional[str]:
    """Insert *statement* before the closing ``});`` of ``Router.map``.

    Returns the unchanged content when the exact statement is already
    present, or ``None`` when no ``Router.map`` block can be found.
    """
    if statement in content:
        return content
    opening = _ROUTER_MAP.search(content)
    if opening is None:
        return None
    closing = _BLOCK_END.search(content, opening.end())
    if closing is None:
        return None
    return content[: closing.start()] + statement + "\n" + content[closing.start():]


def remove_statement(content: str, statement: str) -> str:
    """Remove *statement* (and its line break) if present."""
    if statement + "\n" in content:
        return content.replace(statement + "\n", "", 1)
    return content.replace(statement, "", 1)


def router_statement_for(context: HookContext) -> Optional[str]:
    """The statement a route hook would write, or ``None`` when suppressed."""
    name = context.entity.spellings.dash
    if name in ROUTER_SUPPRESSED:
        return None
    path = context.option("path")
    return route_statement(
        name,
        path if isinstance(path, str) and path else None,
        resource=context.option("type") == "resource",
    )


def add_route_to_router(context: HookContext) -> bool:
    """``after_install`` for route-style blueprints.  Returns True if the router changed."""
    statement = router_statement_for(context)
    if statement is None:
        return False
    return _edit_router(context, statement, add=True)


def remove_route_from_router(context: HookContext) -> bool:
    """``after_uninstall`` for route-style blueprints.  Returns True if the router changed."""
    statement = router_statement_for(context)
    if statement is None:
        return False
    return _edit_router(context, statement, add=False)


def _edit_router(context: HookContext, statement: str, *, add: bool) -> bool:
    router = context.path(context.config.router_path)
    verb = "add" if add else "remove"
    label = statement.strip().splitlines()[0]

    if not router.is_file():
        context.messages.append(f"router: {context.config.router_path} not found, cannot {verb} {label}")
        return False

    content = router.read_text(encoding="utf-8")
    updated = insert_statement(content, statement) if add else remove_statement(content, statement)
    if updated is None:
        context.messages.append(f"router: no Router.map block in {context.config.router_path}")
        return False
    if updated == content:
        return False
    if context.dry_run:
        context.messages.append(f"router: would {verb} {label}")
        return False

    router.write_text(updated, encoding="utf-8")
    context.messages.append(f"router: {verb} {label}")
    return True


# ---------------------------------------------------------------------------
# Base classes (adapter / serializer)
# ---------------------------------------------------------------------------


def resolve_base_class(
    context: HookContext,
    *,
    default_class: str,
    default_import: str,
) -> dict[str, str]:
    """Locals ``base_class`` and ``base_class_import`` for the parent symbol.

    ``--base-class`` always wins; otherwise an existing ``application``
    module of the same kind is used; otherwise the framework default.

    Raises:
        SelfExtensionError: If ``--base-class`` names the entity itself.
    """
    kind = context.subject_kind
    name = context.entity.spellings.dash
    requested = context.option("base_class")

    if isinstance(requested, str) and requested.strip():
        base = dasherize(requested.strip())
        if base == name:
            raise SelfExtensionError(kind, name)
        return _base_locals(context, base)

    if name != "application" and application_exists(context):
        return _base_locals(context, "application")

    return {"base_class": default_class, "base_class_import": default_import}


def application_exists(context: HookContext) -> bool:
    """Whether an ``application`` module of the context's kind exists, pod or classic."""
    kind = context.subject_kind
    root = context.config.root_dir
    candidates = [
        Path(root, pluralize(kind), "application.js"),
        Path(root, "application", f"{kind}.js"),
    ]
    prefix = pod_base_prefix(context.config)
    if prefix:
        candidates.append(Path(root, prefix, "application", f"{kind}.js"))
    return any(context.path(str(c)).is_file() for c in candidates)


def _base_locals(context: HookContext, base: str) -> dict[str, str]:
    kind = context.subject_kind
    symbol = classify(base) + classify(kind)
    if context.structure.is_pod:
        here = context.pod_dir()
        target = join_path(context.structure.base_prefix, base, kind)
    else:
        here = context.classic_dir()
        target = join_path(context.bucket(), base)
    relative = posixpath.relpath(target, here or ".")
    if not relative.startswith("."):
        relative = "./" + relative
    return {
        "base_class": symbol,
        "base_class_import": f"import {symbol} from '{relative}';",
    }


# ---------------------------------------------------------------------------
# Model attributes
# ---------------------------------------------------------------------------

ATTRIBUTE_ALIASES: dict[str, AttributeKind] = {
    "has-many": AttributeKind.HAS_MANY,
    "hasMany": AttributeKind.HAS_MANY,
    "belongs-to": AttributeKind.BELONGS_TO,
    "belongs_to": AttributeKind.BELONGS_TO,
    "belongsTo": AttributeKind.BELONGS_TO,
}


def parse_attribute(token: str) -> RelationshipAttribute:
    """Parse a ``name[:type]`` token.

    Raises:
        AttributeParseError: On an empty name, or an empty type after ``:``.
    """
    name, sep, raw_type = token.partition(":")
    name, raw_type = name.strip(), raw_type.strip()
    if not name or not camelize(name):
        raise AttributeParseError(token, "missing attribute name")
    if sep and not raw_type:
        raise AttributeParseError(token, "missing type after ':'")

    kind = ATTRIBUTE_ALIASES.get(raw_type, AttributeKind.SCALAR)
    if kind is AttributeKind.HAS_MANY:
        return RelationshipAttribute(
            name=name,
            raw_type=raw_type,
            kind=kind,
            field_name=camelize(pluralize(dasherize(name))),
            target_type=singularize(dasherize(name)),
        )
    if kind is AttributeKind.BELONGS_TO:
        return RelationshipAttribute(
            name=name,
            raw_type=raw_type,
            kind=kind,
            field_name=camelize(name),
            target_type=singularize(dasherize(name)),
        )
    return RelationshipAttribute(name=name, raw_type=raw_type, field_name=camelize(name))


def parse_attributes(tokens: Iterable[str]) -> list[RelationshipAttribute]:
    return [parse_attribute(t) for t in tokens]


def dependency_list(attributes: Sequence[RelationshipAttribute]) -> list[str]:
    """Relationship target types, de-duplicated in first-seen order."""
    seen: list[str] = []
    for attr in attributes:
        if attr.is_relationship and attr.target_type and attr.target_type not in seen:
            seen.append(attr.target_type)
    return seen


def attribute_statement(attr: RelationshipAttribute) -> str:
    """``firstName: DS.attr('string')``, ``bars: DS.hasMany('bar')`` and so on."""
    if attr.kind is AttributeKind.HAS_MANY:
        return f"{attr.field_name}: DS.hasMany('{attr.target_type}')"
    if attr.kind is AttributeKind.BELONGS_TO:
        return f"{attr.field_name}: DS.belongsTo('{attr.target_type}')"
    if attr.raw_type:
        return f"{attr.field_name}: DS.attr('{attr.raw_type}')"
    return f"{attr.field_name}: DS.attr()"


def model_locals(context: HookContext) -> dict[str, str]:
    """Locals shared by the model blueprint and its companion test."""
    attributes = parse_attributes(context.args)
    needs = dependency_list(attributes)
    return {
        "attrs": ",\n  ".join(attribute_statement(a) for a in attributes),
        "needs": ", ".join(f"'model:{n}'" for n in needs),
    }


# ---------------------------------------------------------------------------
# InstallHookRunner
# ---------------------------------------------------------------------------


class InstallHookRunner:
    """Runs a resolved blueprint's post-commit hooks, lowest layer first."""

    def run(self, blueprint: "ResolvedBlueprint", context: HookContext) -> list[str]:
        return self._run(blueprint, context, "after_install")

    def run_uninstall(self, blueprint: "ResolvedBlueprint", context: HookContext) -> list[str]:
        return self._run(blueprint, context, "after_uninstall")

    def _run(self, blueprint: "ResolvedBlueprint", context: HookContext, name: str) -> list[str]:
        start = len(context.messages)
        for hook in blueprint.hooks(name):
            hook(context)
        return context.messages[start:]
