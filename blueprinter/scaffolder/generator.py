"""Main generation orchestrator.

Takes a ``GenerationRequest`` and runs it through the pipeline::

    expand composite kind
      -> for each sub-request, in order:
           resolve blueprint (+ companion test / addon blueprints)
           resolve structure and entity
           locals -> render -> plan -> commit
           after_install hooks

Every step is awaited in sequence; later sub-requests observe the files
written by earlier ones.  A ``quit`` answer at the conflict prompt stops the
remaining sub-requests; structural errors (unknown kind, self-extension,
malformed attribute) propagate with the report of already-committed
siblings attached as ``partial_report``.
"""

from __future__ import annotations

from pathlib import Path

from rich.console import Console

from blueprinter.config import ProjectConfig, load_project_config
from blueprinter.errors import BlueprinterError, ConflictAbort

from .conflicts import ConflictPrompt, ConflictResolver
from .context import HookContext
from .hooks import InstallHookRunner
from .models import CommitMode, CommitReport, GenerationRequest, PlannedFile
from .naming import NameResolver
from .registry import BlueprintRegistry, ResolvedBlueprint, expand_request
from .structure import StructureResolver
from .templates import TokenSubstitutionEngine


class Generator:
    """Generates (and destroys) blueprint output inside one project."""

    def __init__(
        self,
        project_root: str | Path,
        config: ProjectConfig | None = None,
        *,
        registry: BlueprintRegistry | None = None,
        prompt: ConflictPrompt | None = None,
        console: Console | None = None,
    ) -> None:
        self.project_root = Path(project_root)
        self.config = config or load_project_config(self.project_root)
        self.registry = registry or BlueprintRegistry(self.project_root, self.config)
        self.names = NameResolver()
        self.structures = StructureResolver()
        self.engine = TokenSubstitutionEngine()
        self.conflicts = ConflictResolver(self.project_root, prompt, console)
        self.hooks = InstallHookRunner()

    # -- Public API --------------------------------------------------------

    async def generate(self, request: GenerationRequest) -> CommitReport:
        """Generate every file for *request* and run install hooks.

        Returns:
            The combined report of all sub-requests.  ``aborted`` is set if
            the conflict prompt answered ``quit``.
        """
        mode = commit_mode(request)
        report = CommitReport(dry_run=mode is CommitMode.DRY_RUN)

        for sub in expand_request(request):
            try:
                report.extend(await self._generate_one(sub, mode))
            except ConflictAbort as exc:
                report.extend(exc.report)
                report.aborted = True
                break
            except BlueprinterError as exc:
                if exc.partial_report is not None:
                    report.extend(exc.partial_report)
                exc.partial_report = report
                raise

        return report

    async def destroy(self, request: GenerationRequest) -> CommitReport:
        """Remove the files *request* would generate and run uninstall hooks."""
        mode = commit_mode(request)
        report = CommitReport(dry_run=mode is CommitMode.DRY_RUN)

        for sub in expand_request(request):
            try:
                report.extend(await self._destroy_one(sub, mode))
            except BlueprinterError as exc:
                exc.partial_report = report
                raise

        return report

    async def plan(self, request: GenerationRequest) -> list[PlannedFile]:
        """Render and classify *request* without committing anything."""
        planned: list[PlannedFile] = []
        for sub in expand_request(request):
            prepared = self._prepare(sub, commit_mode(sub))
            sub_report = CommitReport()
            planned.extend(await self.conflicts.plan(self._render(prepared, sub_report)))
        return planned

    # -- Sub-requests ------------------------------------------------------

    async def _generate_one(self, request: GenerationRequest, mode: CommitMode) -> CommitReport:
        prepared = self._prepare(request, mode)
        warnings = CommitReport()
        files = self._render(prepared, warnings)

        planned = await self.conflicts.plan(files)
        try:
            report = await self.conflicts.commit(planned, mode)
        except ConflictAbort as exc:
            exc.report.warnings.extend(warnings.warnings)
            raise
        report.warnings.extend(warnings.warnings)

        for blueprint, context in prepared:
            report.messages.extend(self.hooks.run(blueprint, context))
        return report

    async def _destroy_one(self, request: GenerationRequest, mode: CommitMode) -> CommitReport:
        prepared = self._prepare(request, mode)
        warnings = CommitReport()
        files = self._render(prepared, warnings)

        report = await self.conflicts.remove(files, mode)
        report.warnings.extend(warnings.warnings)

        for blueprint, context in prepared:
            report.messages.extend(self.hooks.run_uninstall(blueprint, context))
        return report

    # -- Preparation -------------------------------------------------------

    def _prepare(
        self, request: GenerationRequest, mode: CommitMode
    ) -> list[tuple[ResolvedBlueprint, HookContext]]:
        """Resolve blueprints, structure, entity and locals for one sub-request.

        Every error raised here happens before anything is written.
        """
        primary = self.registry.resolve(request.kind)
        blueprints = [primary] + [
            self.registry.resolve(kind) for kind in self._companions(request)
        ]

        structure = self.structures.resolve(
            request.kind, request.options, self.config, pod_capable=primary.path_tokens
        )
        entity = self.names.entity(
            request.name,
            is_pod=structure.is_pod,
            module_prefix=self.config.module_prefix,
        )

        prepared: list[tuple[ResolvedBlueprint, HookContext]] = []
        for blueprint in blueprints:
            context = HookContext(
                kind=blueprint.kind,
                entity=entity,
                structure=structure,
                config=self.config,
                project_root=self.project_root,
                options=dict(request.options),
                args=list(request.args),
                mode=mode,
                path_tokens=blueprint.path_tokens,
            )
            context.locals = blueprint.locals(context)
            prepared.append((blueprint, context))
        return prepared

    def _companions(self, request: GenerationRequest) -> list[str]:
        """Companion kinds generated alongside *request*'s primary blueprint."""
        kinds: list[str] = []
        if not request.flag("skip_tests") and not request.kind.endswith("-test"):
            kinds.append(f"{request.kind}-test")
        if self.config.is_addon and not request.kind.endswith("-addon"):
            kinds.append(f"{request.kind}-addon")
        return [k for k in kinds if self.registry.has(k)]

    def _render(
        self,
        prepared: list[tuple[ResolvedBlueprint, HookContext]],
        report: CommitReport,
    ) -> list[PlannedFile]:
        files: list[PlannedFile] = []
        for blueprint, context in prepared:
            result = self.engine.render(blueprint, context, blueprint.file_map_tokens(context))
            files.extend(result.files)
            report.warnings.extend(result.warnings)
        return files


def commit_mode(request: GenerationRequest) -> CommitMode:
    """``dry_run`` beats ``force``; otherwise normal."""
    if request.flag("dry_run"):
        return CommitMode.DRY_RUN
    if request.flag("force"):
        return CommitMode.FORCE
    return CommitMode.NORMAL
