"""Pydantic v2 models shared by the blueprint generation engine.

Defines the value types that flow through a generation request: the resolved
``Entity``, the on-disk ``Structure`` decision, template and planned files,
relationship attributes parsed from model tokens, and the ``CommitReport``
returned to callers.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class LayoutMode(str, Enum):
    """On-disk layout for generated files."""
    POD = "pod"
    CLASSIC = "classic"


class BlueprintScope(str, Enum):
    """Where a blueprint definition was found, highest priority first."""
    PROJECT = "project"
    ADDON = "addon"
    BUILTIN = "builtin"


class FileStatus(str, Enum):
    """Classification of a planned file against the existing tree."""
    CREATE = "create"
    IDENTICAL = "identical"
    CONFLICT = "conflict"


class CommitAction(str, Enum):
    """What actually happened (or would happen, in dry-run) to a file."""
    CREATED = "created"
    IDENTICAL = "identical"
    OVERWRITTEN = "overwritten"
    SKIPPED = "skipped"
    CONFLICT = "conflict"
    REMOVED = "removed"


class CommitMode(str, Enum):
    """Conflict policy used when committing a planned file set."""
    NORMAL = "normal"
    DRY_RUN = "dry_run"
    FORCE = "force"


class AttributeKind(str, Enum):
    """Model attribute classification."""
    SCALAR = "scalar"
    HAS_MANY = "hasMany"
    BELONGS_TO = "belongsTo"


# ---------------------------------------------------------------------------
# Entity
# ---------------------------------------------------------------------------

class Spellings(BaseModel):
    """Every derived spelling of an entity name."""
    model_config = ConfigDict(frozen=True)

    dash: str = Field(..., description="Path-bearing dash-case, e.g. 'foo/bar-baz'")
    camel: str = Field(..., description="Identifier camel-case, e.g. 'fooBarBaz'")
    pascal: str = Field(..., description="Identifier pascal-case, e.g. 'FooBarBaz'")
    underscore: str = Field(..., description="Path-bearing underscore-case, e.g. 'foo/bar_baz'")


class Entity(BaseModel):
    """The resolved, case-normalized representation of a user-supplied name."""
    model_config = ConfigDict(frozen=True)

    raw_name: str
    segments: tuple[str, ...]
    spellings: Spellings
    is_pod: bool = False
    module_prefix: Optional[str] = None

    @property
    def leaf(self) -> str:
        """Dash-case spelling of the last segment."""
        return self.spellings.dash.split("/")[-1]

    @property
    def parents(self) -> tuple[str, ...]:
        """Dash-case spellings of every segment before the leaf."""
        return tuple(self.spellings.dash.split("/")[:-1])


class Structure(BaseModel):
    """Layout decision for a single generation request."""
    model_config = ConfigDict(frozen=True)

    layout: LayoutMode = LayoutMode.CLASSIC
    base_prefix: str = ""
    test_prefix: str = ""

    @property
    def is_pod(self) -> bool:
        return self.layout is LayoutMode.POD


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

OptionValue = Union[str, bool]


class GenerationRequest(BaseModel):
    """A structured ``{kind, name, options}`` request from the command line."""
    kind: str = Field(..., description="Blueprint kind, e.g. 'controller'")
    name: str = Field(..., description="Raw entity name, may contain '/'")
    options: dict[str, OptionValue] = Field(default_factory=dict)
    args: list[str] = Field(
        default_factory=list,
        description="Extra positional tokens, e.g. model 'name:type' attributes",
    )

    def option(self, key: str, default: OptionValue | None = None) -> OptionValue | None:
        return self.options.get(key, default)

    def flag(self, key: str) -> bool:
        return bool(self.options.get(key, False))


# ---------------------------------------------------------------------------
# Templates & planned output
# ---------------------------------------------------------------------------

class TemplateFile(BaseModel):
    """A token-bearing template path and its raw body."""
    model_config = ConfigDict(frozen=True)

    source_path: str = Field(..., description="Relative path, e.g. 'app/__path__/__name__.js'")
    body: str = ""


class PlannedFile(BaseModel):
    """A rendered file waiting to be committed."""
    destination_path: str
    rendered_content: str
    status: FileStatus = FileStatus.CREATE
    blueprint: str = ""


class TokenWarning(BaseModel):
    """An unresolved ``__token__``, or an undefined body variable, found while rendering."""
    token: str
    source_path: str
    blueprint: str = ""
    in_body: bool = False
    variable: bool = False

    def __str__(self) -> str:
        if self.variable:
            return (
                f"Undefined template variable {self.token} in body of "
                f"{self.source_path} ({self.blueprint})"
            )
        where = "body" if self.in_body else "path"
        return f"Unresolved token {self.token} in {where} of {self.source_path} ({self.blueprint})"


class RelationshipAttribute(BaseModel):
    """A parsed ``name:type`` model attribute token."""
    name: str
    raw_type: str = ""
    kind: AttributeKind = AttributeKind.SCALAR
    field_name: str = ""
    target_type: Optional[str] = None

    @property
    def is_relationship(self) -> bool:
        return self.kind is not AttributeKind.SCALAR


# ---------------------------------------------------------------------------
# Commit report
# ---------------------------------------------------------------------------

class CommitEntry(BaseModel):
    """Final status of one file in a request."""
    path: str
    status: FileStatus
    action: CommitAction
    blueprint: str = ""


class CommitReport(BaseModel):
    """Structured record of what the engine did, or would do in dry-run."""
    entries: list[CommitEntry] = Field(default_factory=list)
    warnings: list[TokenWarning] = Field(default_factory=list)
    messages: list[str] = Field(default_factory=list)
    dry_run: bool = False
    aborted: bool = False

    def extend(self, other: "CommitReport") -> None:
        """Merge *other* (a sub-request report) into this report."""
        self.entries.extend(other.entries)
        self.warnings.extend(other.warnings)
        self.messages.extend(other.messages)
        self.aborted = self.aborted or other.aborted

    def paths(self, action: CommitAction | None = None) -> list[str]:
        """Return entry paths, optionally filtered by *action*."""
        return [e.path for e in self.entries if action is None or e.action is action]

    def action_for(self, path: str) -> CommitAction | None:
        for entry in self.entries:
            if entry.path == path:
                return entry.action
        return None
