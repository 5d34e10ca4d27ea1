"""Pod vs classic layout resolution.

Decides, per generation request, whether output is co-located by entity
("pod") or bucketed by file type ("classic"), and computes the directory
prefix that pod output lives under.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from blueprinter.config import ProjectConfig

from .models import LayoutMode, Structure

POD_TEST_PREFIX = "pods"


class StructureResolver:
    """Resolves a ``Structure`` from flags, project config and blueprint capability.

    Precedence, highest first:

    1. ``pod`` / ``classic`` request options.
    2. The project's ``use_pods`` setting.
    3. Classic.

    A blueprint whose files never use ``__path__`` cannot be laid out as a
    pod, so *pod_capable* ``False`` always yields classic.
    """

    def resolve_layout(
        self,
        options: Mapping[str, Any],
        config: ProjectConfig,
        *,
        pod_capable: bool = True,
    ) -> LayoutMode:
        if not pod_capable:
            return LayoutMode.CLASSIC
        if options.get("classic"):
            return LayoutMode.CLASSIC
        if options.get("pod"):
            return LayoutMode.POD
        if config.use_pods:
            return LayoutMode.POD
        return LayoutMode.CLASSIC

    def resolve(
        self,
        kind: str,
        options: Mapping[str, Any],
        config: ProjectConfig,
        *,
        pod_capable: bool = True,
    ) -> Structure:
        """Return the layout decision for generating one *kind*."""
        layout = self.resolve_layout(options, config, pod_capable=pod_capable)
        if layout is not LayoutMode.POD:
            return Structure(layout=layout)

        base_prefix = pod_base_prefix(config)
        return Structure(
            layout=layout,
            base_prefix=base_prefix,
            test_prefix=POD_TEST_PREFIX if base_prefix else "",
        )


def pod_base_prefix(config: ProjectConfig) -> str:
    """Pod module prefix relative to the module root.

    ``app/pods`` and ``<module_prefix>/pods`` both become ``pods``; a bare
    ``pods`` is returned unchanged.
    """
    prefix = (config.pod_module_prefix or "").strip().strip("/")
    if not prefix:
        return ""
    for root in ("app", config.module_prefix):
        if root and prefix.startswith(root + "/"):
            return prefix[len(root) + 1:]
    return prefix
