"""Blueprinter project configuration.

Typed configuration for a target project, read from ``.blueprinter.json`` at
the project root and overridable from environment variables.  Pydantic v2
validates values at construction time and handles JSON round-tripping.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError

from blueprinter.errors import ConfigError

CONFIG_FILENAME = ".blueprinter.json"

# Files that mark a project root when no config file is present.
ROOT_MARKERS: tuple[str, ...] = (CONFIG_FILENAME, "package.json")

_TRUTHY = {"1", "true", "yes", "on"}


class ProjectConfig(BaseModel):
    """Per-project generation settings.

    Instances are created once per invocation, usually through
    :func:`load_project_config`, and passed to the generator.
    """

    use_pods: bool = Field(default=False, description="Generate pod layout by default")
    pod_module_prefix: Optional[str] = Field(
        default=None, description="Directory pods live under, e.g. 'app/pods'"
    )
    is_addon: bool = Field(default=False, description="Whether the project is an addon package")
    module_prefix: str = Field(
        default="app", description="Module name of the app or addon, used in import paths"
    )
    addons: list[str] = Field(
        default_factory=list,
        description="Addon roots (relative to the project) in registration order",
    )
    blueprints_dir: str = Field(
        default="blueprints", description="Project-local blueprint directory"
    )

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def root_dir(self) -> str:
        """Directory that ``__root__`` resolves to."""
        return "addon" if self.is_addon else "app"

    @property
    def router_path(self) -> str:
        """Relative path of the router artifact."""
        if self.is_addon:
            return "tests/dummy/app/router.js"
        return "app/router.js"

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Args:
            path: Destination file, usually ``<root>/.blueprinter.json``.

        Returns:
            The path that was written.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "ProjectConfig":
        """Load a configuration from JSON.

        Raises:
            ConfigError: If the file cannot be read or fails validation.
        """
        try:
            raw = Path(path).read_text(encoding="utf-8")
            return cls.model_validate_json(raw)
        except (OSError, ValidationError) as exc:
            raise ConfigError(f"Invalid project config {path}: {exc}") from exc

    @classmethod
    def from_env(cls, base: "ProjectConfig | None" = None) -> "ProjectConfig":
        """Apply environment overrides on top of *base* (or the defaults).

        Recognised variables (all optional):
            BLUEPRINTER_USE_PODS, BLUEPRINTER_POD_MODULE_PREFIX,
            BLUEPRINTER_IS_ADDON, BLUEPRINTER_MODULE_PREFIX.
        """
        overrides: dict[str, Any] = {}
        if os.environ.get("BLUEPRINTER_USE_PODS"):
            overrides["use_pods"] = os.environ["BLUEPRINTER_USE_PODS"].lower() in _TRUTHY
        if os.environ.get("BLUEPRINTER_POD_MODULE_PREFIX"):
            overrides["pod_module_prefix"] = os.environ["BLUEPRINTER_POD_MODULE_PREFIX"]
        if os.environ.get("BLUEPRINTER_IS_ADDON"):
            overrides["is_addon"] = os.environ["BLUEPRINTER_IS_ADDON"].lower() in _TRUTHY
        if os.environ.get("BLUEPRINTER_MODULE_PREFIX"):
            overrides["module_prefix"] = os.environ["BLUEPRINTER_MODULE_PREFIX"]

        base = base or cls()
        return base.model_copy(update=overrides)


# ---------------------------------------------------------------------------
# Project discovery
# ---------------------------------------------------------------------------


def find_project_root(start: str | Path | None = None) -> Path:
    """Walk upward from *start* to the nearest directory holding a root marker.

    Falls back to *start* itself when no marker is found, so generation from
    a fresh directory still works.
    """
    origin = Path(start or Path.cwd()).resolve()
    for candidate in (origin, *origin.parents):
        if any((candidate / marker).exists() for marker in ROOT_MARKERS):
            return candidate
    return origin


def load_project_config(root: str | Path) -> ProjectConfig:
    """Read ``.blueprinter.json`` under *root* (if any) and apply env overrides."""
    path = Path(root) / CONFIG_FILENAME
    base = ProjectConfig.load(path) if path.exists() else ProjectConfig()
    return ProjectConfig.from_env(base)
