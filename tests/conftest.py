"""Shared pytest fixtures for the Blueprinter test suite.

Provides reusable fixtures for:
- Temporary application and addon projects with a router file
- Quiet consoles for capturing output
- Generator factories wired to pre-seeded conflict prompts
- Helpers for writing project and addon blueprints
"""

from __future__ import annotations

import io
import textwrap
from collections.abc import Callable, Iterable
from pathlib import Path

import pytest
from rich.console import Console

from blueprinter.config import CONFIG_FILENAME, ProjectConfig
from blueprinter.scaffolder.conflicts import StaticPrompt
from blueprinter.scaffolder.generator import Generator


ROUTER_JS = textwrap.dedent("""\
    import Ember from 'ember';
    import config from './config/environment';

    var Router = Ember.Router.extend({
      location: config.locationType
    });

    Router.map(function() {
    });

    export default Router;
    """)


# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep BLUEPRINTER_* variables from the developer's shell out of tests."""
    for key in (
        "BLUEPRINTER_USE_PODS",
        "BLUEPRINTER_POD_MODULE_PREFIX",
        "BLUEPRINTER_IS_ADDON",
        "BLUEPRINTER_MODULE_PREFIX",
    ):
        monkeypatch.delenv(key, raising=False)


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------

def write_project(root: Path, config: ProjectConfig | None = None) -> Path:
    """Lay out a minimal application (or addon) under *root*."""
    config = config or ProjectConfig()
    root.mkdir(parents=True, exist_ok=True)
    (root / "package.json").write_text('{"name": "my-app"}\n', encoding="utf-8")
    router = root / config.router_path
    router.parent.mkdir(parents=True, exist_ok=True)
    router.write_text(ROUTER_JS, encoding="utf-8")
    config.save(root / CONFIG_FILENAME)
    return root


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A classic application project with ``app/router.js``."""
    return write_project(tmp_path / "my-app")


@pytest.fixture
def make_project(tmp_path: Path) -> Callable[..., Path]:
    """Factory for projects with custom configuration.

    Usage::

        def test_pods(make_project):
            root = make_project(use_pods=True, pod_module_prefix="app/pods")
    """
    counter = {"n": 0}

    def factory(**config_kwargs) -> Path:
        counter["n"] += 1
        config = ProjectConfig(**config_kwargs)
        return write_project(tmp_path / f"project-{counter['n']}", config)

    return factory


@pytest.fixture
def write_blueprint() -> Callable[..., Path]:
    """Write a blueprint directory: ``files`` maps relative path -> body.

    ``index`` is the source of the optional ``index.py`` hooks module.
    """

    def factory(
        blueprints_dir: Path,
        kind: str,
        files: dict[str, str] | None = None,
        index: str | None = None,
    ) -> Path:
        directory = blueprints_dir / kind
        directory.mkdir(parents=True, exist_ok=True)
        for rel, body in (files or {}).items():
            target = directory / "files" / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(body, encoding="utf-8")
        if index is not None:
            (directory / "index.py").write_text(textwrap.dedent(index), encoding="utf-8")
        return directory

    return factory


# ---------------------------------------------------------------------------
# Console & prompts
# ---------------------------------------------------------------------------

@pytest.fixture
def quiet_console() -> Console:
    """A Console writing to an in-memory buffer; read it with ``.file.getvalue()``."""
    return Console(file=io.StringIO(), force_terminal=False, width=120)


@pytest.fixture
def make_generator(quiet_console: Console) -> Callable[..., Generator]:
    """Factory for a Generator with a pre-seeded prompt and quiet console."""

    def factory(root: Path, answers: Iterable[str] = (), **kwargs) -> Generator:
        return Generator(root, prompt=StaticPrompt(answers), console=quiet_console, **kwargs)

    return factory

