"""Token substitution and Jinja2 body rendering for blueprint files.

Provides the ``TokenSubstitutionEngine`` which turns a resolved blueprint's
template files into ``PlannedFile`` objects.  Destination paths and bodies go
through a single literal pass that replaces every ``__token__`` occurrence;
bodies are first rendered with Jinja2 using EJS-style delimiters
(``<%= expr %>``, ``<% stmt %>``) so that handlebars ``{{ }}`` in templates
is left untouched.

Unknown tokens are not an error: they are left as literal text and reported
as ``TokenWarning`` entries so the caller can surface them.  Body variables
that are not defined render as an empty string and are reported the same way.
"""

from __future__ import annotations

import posixpath
import re
from collections.abc import Callable, Iterable, Mapping
from typing import TYPE_CHECKING, Any, Optional, Protocol

from jinja2 import Environment, Undefined

from .context import HookContext, join_path
from .models import PlannedFile, TokenWarning
from .naming import camelize, classify, dasherize, pluralize, singularize, underscore

if TYPE_CHECKING:
    from .registry import ResolvedBlueprint


TOKEN_PATTERN = re.compile(r"__[A-Za-z][A-Za-z0-9]*__")

TokenFunction = Callable[[HookContext], str]


# ---------------------------------------------------------------------------
# Token resolution
# ---------------------------------------------------------------------------


class TokenResolver(Protocol):
    """Capability interface: return a token's value, or ``None`` if unknown."""

    def resolve_token(self, name: str) -> Optional[str]:
        ...


def _name_token(ctx: HookContext) -> str:
    if ctx.structure.is_pod:
        return ctx.subject_kind
    if ctx.path_tokens:
        return ctx.entity.leaf
    return ctx.entity.spellings.dash


def _path_token(ctx: HookContext) -> str:
    if ctx.structure.is_pod:
        return ctx.pod_dir()
    return ctx.classic_dir()


def _test_token(ctx: HookContext) -> str:
    if ctx.structure.is_pod:
        return f"{ctx.subject_kind}-test"
    return f"{_name_token(ctx)}-test"


def _test_path_token(ctx: HookContext) -> str:
    if ctx.structure.is_pod:
        return ctx.pod_dir(test=True)
    return ctx.classic_dir()


DEFAULT_TOKENS: dict[str, TokenFunction] = {
    "__name__": _name_token,
    "__path__": _path_token,
    "__root__": lambda ctx: ctx.config.root_dir,
    "__test__": _test_token,
    "__testPath__": _test_path_token,
}


class FunctionTokens:
    """Resolves tokens from a ``{token: function(context)}`` mapping."""

    def __init__(self, functions: Mapping[str, TokenFunction], context: HookContext) -> None:
        self.functions = dict(functions)
        self.context = context

    def resolve_token(self, name: str) -> Optional[str]:
        fn = self.functions.get(name)
        if fn is None:
            return None
        return str(fn(self.context))


class LocalsTokens:
    """Exposes every ``locals`` key ``k`` as the token ``__k__``."""

    def __init__(self, values: Mapping[str, Any]) -> None:
        self.values = {f"__{k}__": v for k, v in values.items()}

    def resolve_token(self, name: str) -> Optional[str]:
        if name not in self.values:
            return None
        return str(self.values[name])


class ChainedTokens:
    """Consults each resolver in order; the first non-``None`` value wins."""

    def __init__(self, resolvers: Iterable[TokenResolver]) -> None:
        self.resolvers = list(resolvers)

    def resolve_token(self, name: str) -> Optional[str]:
        for resolver in self.resolvers:
            value = resolver.resolve_token(name)
            if value is not None:
                return value
        return None


def build_token_resolver(
    context: HookContext,
    overrides: Mapping[str, TokenFunction] | None = None,
) -> ChainedTokens:
    """Blueprint overrides first, then the defaults, then locals."""
    return ChainedTokens([
        FunctionTokens(overrides or {}, context),
        FunctionTokens(DEFAULT_TOKENS, context),
        LocalsTokens(context.locals),
    ])


def substitute_tokens(text: str, resolver: TokenResolver) -> tuple[str, list[str]]:
    """Replace every ``__token__`` in *text* in a single pass.

    Returns:
        The substituted text and the list of tokens that could not be
        resolved (left as literal text).
    """
    unresolved: list[str] = []

    def _replace(match: re.Match[str]) -> str:
        token = match.group(0)
        value = resolver.resolve_token(token)
        if value is None:
            unresolved.append(token)
            return token
        return value

    return TOKEN_PATTERN.sub(_replace, text), unresolved


# ---------------------------------------------------------------------------
# TokenSubstitutionEngine
# ---------------------------------------------------------------------------


def recording_undefined(missing: list[str]) -> type[Undefined]:
    """An ``Undefined`` that renders as ``""`` and appends its name to *missing*."""

    class RecordingUndefined(Undefined):
        __slots__ = ()

        def __str__(self) -> str:
            missing.append(self._undefined_name or "<undefined>")
            return ""

    return RecordingUndefined


class RenderResult:
    """Planned files and warnings produced by one ``render`` call."""

    def __init__(self) -> None:
        self.files: list[PlannedFile] = []
        self.warnings: list[TokenWarning] = []


class TokenSubstitutionEngine:
    """Renders a blueprint's files for an entity.

    The Jinja2 environment uses ``<%= %>`` for expressions, ``<% %>`` for
    statements and ``<%# %>`` for comments, and registers the naming helpers
    as filters (``<%= name | camelize %>``).
    """

    def __init__(self) -> None:
        self.env = Environment(
            autoescape=False,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            block_start_string="<%",
            block_end_string="%>",
            variable_start_string="<%=",
            variable_end_string="%>",
            comment_start_string="<%#",
            comment_end_string="%>",
        )
        self.env.filters["dasherize"] = dasherize
        self.env.filters["camelize"] = camelize
        self.env.filters["classify"] = classify
        self.env.filters["underscore"] = underscore
        self.env.filters["pluralize"] = pluralize
        self.env.filters["singularize"] = singularize

    # -- Body rendering ----------------------------------------------------

    def template_context(self, context: HookContext) -> dict[str, Any]:
        """Variables available inside template bodies."""
        spellings = context.entity.spellings
        return {
            "entity": context.entity,
            "kind": context.subject_kind,
            "raw_name": context.entity.raw_name,
            "dasherized_module_name": spellings.dash,
            "camelized_module_name": spellings.camel,
            "classified_module_name": spellings.pascal,
            "underscored_module_name": spellings.underscore,
            "module_prefix": context.config.module_prefix,
            "friendly_test_description": f"{spellings.pascal} {context.subject_kind}",
            **context.locals,
        }

    def render_string(
        self,
        template_string: str,
        variables: dict[str, Any],
        missing: list[str] | None = None,
    ) -> str:
        """Render an inline body with the EJS-style delimiters.

        Variables that are not defined render as an empty string; when
        *missing* is given, their names are appended to it.
        """
        env = self.env
        if missing is not None:
            env = self.env.overlay(undefined=recording_undefined(missing))
        template = env.from_string(template_string)
        return template.render(**variables)

    # -- Blueprint rendering -----------------------------------------------

    def render(
        self,
        blueprint: "ResolvedBlueprint",
        context: HookContext,
        overrides: Mapping[str, TokenFunction] | None = None,
    ) -> RenderResult:
        """Render every template file of *blueprint* into planned files.

        Args:
            blueprint: The collapsed blueprint supplying the file set.
            context: Hook context with ``locals`` already populated.
            overrides: The blueprint's ``file_map_tokens`` result, consulted
                before the default tokens.
        """
        resolver = build_token_resolver(context, overrides)
        variables = self.template_context(context)
        result = RenderResult()

        for template in blueprint.files:
            destination, path_missing = substitute_tokens(template.source_path, resolver)
            undefined: list[str] = []
            body = self.render_string(template.body, variables, undefined)
            content, body_missing = substitute_tokens(body, resolver)

            for name in undefined:
                result.warnings.append(TokenWarning(
                    token=name, source_path=template.source_path,
                    blueprint=blueprint.kind, in_body=True, variable=True,
                ))
            for token in path_missing:
                result.warnings.append(TokenWarning(
                    token=token, source_path=template.source_path, blueprint=blueprint.kind,
                ))
            for token in body_missing:
                result.warnings.append(TokenWarning(
                    token=token, source_path=template.source_path,
                    blueprint=blueprint.kind, in_body=True,
                ))

            result.files.append(PlannedFile(
                destination_path=normalize_destination(destination),
                rendered_content=content,
                blueprint=blueprint.kind,
            ))

        return result


def normalize_destination(path: str) -> str:
    """Collapse empty segments left by empty tokens (``app//foo.js``)."""
    return posixpath.normpath(join_path(*path.split("/")))
