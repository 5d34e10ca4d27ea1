"""Exception hierarchy for blueprint resolution and generation."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from blueprinter.scaffolder.models import CommitReport


class BlueprinterError(Exception):
    """Base class for every error the engine reports to its caller.

    ``partial_report`` is populated by the generator when an error escapes a
    composite request after earlier sub-requests were already committed.
    """

    partial_report: Optional["CommitReport"] = None


class NotFoundError(BlueprinterError):
    """No scope defines a blueprint for the requested kind."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(f"Unknown blueprint: {kind}")


class SelfExtensionError(BlueprinterError):
    """``--base-class`` names the entity being generated."""

    def __init__(self, kind: str, name: str) -> None:
        self.kind = kind
        self.name = name
        label = kind.capitalize() + "s"
        super().__init__(
            f"{label} cannot extend from themself. To resolve this, remove the "
            f"`--base-class` option or change to a different base-class."
        )


class AttributeParseError(BlueprinterError):
    """A model attribute token is not of the form ``name[:type]``."""

    def __init__(self, token: str, reason: str) -> None:
        self.token = token
        super().__init__(f"Invalid attribute '{token}': {reason}")


class ConflictAbort(BlueprinterError):
    """The conflict prompt answered ``quit``."""

    def __init__(self, path: str, report: "CommitReport") -> None:
        self.path = path
        self.report = report
        super().__init__(f"Aborted at {path}")


class PromptExhausted(BlueprinterError):
    """A pre-seeded prompt was asked more questions than it has answers."""


class ConfigError(BlueprinterError):
    """The project configuration file is unreadable or invalid."""


class InvalidNameError(BlueprinterError):
    """An entity name has no usable segments."""

    def __init__(self, raw_name: str) -> None:
        self.raw_name = raw_name
        super().__init__(f"Invalid entity name: {raw_name!r}")
