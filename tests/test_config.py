"""Unit tests for ProjectConfig and project discovery (blueprinter.config).

Tests cover:
- ProjectConfig defaults and derived paths (root_dir, router_path)
- save/load round trip and invalid files
- from_env overrides
- find_project_root and load_project_config
"""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from blueprinter.config import (
    CONFIG_FILENAME,
    ProjectConfig,
    find_project_root,
    load_project_config,
)
from blueprinter.errors import ConfigError


# ---------------------------------------------------------------------------
# ProjectConfig
# ---------------------------------------------------------------------------


class TestProjectConfig:
    @pytest.mark.unit
    def test_defaults(self):
        config = ProjectConfig()
        assert config.use_pods is False
        assert config.pod_module_prefix is None
        assert config.is_addon is False
        assert config.module_prefix == "app"
        assert config.addons == []
        assert config.blueprints_dir == "blueprints"

    @pytest.mark.unit
    def test_root_dir_app(self):
        assert ProjectConfig().root_dir == "app"

    @pytest.mark.unit
    def test_root_dir_addon(self):
        assert ProjectConfig(is_addon=True).root_dir == "addon"

    @pytest.mark.unit
    def test_router_path(self):
        assert ProjectConfig().router_path == "app/router.js"
        assert ProjectConfig(is_addon=True).router_path == "tests/dummy/app/router.js"

    @pytest.mark.unit
    def test_save_and_load(self, tmp_path: Path):
        config = ProjectConfig(use_pods=True, pod_module_prefix="app/pods", addons=["lib/a"])
        path = config.save(tmp_path / CONFIG_FILENAME)
        assert path.exists()

        loaded = ProjectConfig.load(path)
        assert loaded == config

    @pytest.mark.unit
    def test_load_invalid_json_raises_config_error(self, tmp_path: Path):
        path = tmp_path / CONFIG_FILENAME
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid project config"):
            ProjectConfig.load(path)

    @pytest.mark.unit
    def test_load_wrong_type_raises_config_error(self, tmp_path: Path):
        path = tmp_path / CONFIG_FILENAME
        path.write_text('{"addons": "not-a-list"}', encoding="utf-8")
        with pytest.raises(ConfigError):
            ProjectConfig.load(path)

    @pytest.mark.unit
    def test_load_missing_file_raises_config_error(self, tmp_path: Path):
        with pytest.raises(ConfigError):
            ProjectConfig.load(tmp_path / "missing.json")


# ---------------------------------------------------------------------------
# Environment overrides
# ---------------------------------------------------------------------------


class TestFromEnv:
    @pytest.mark.unit
    def test_no_env_returns_defaults(self):
        assert ProjectConfig.from_env() == ProjectConfig()

    @pytest.mark.unit
    def test_env_overrides(self):
        env = {
            "BLUEPRINTER_USE_PODS": "true",
            "BLUEPRINTER_POD_MODULE_PREFIX": "app/pods",
            "BLUEPRINTER_IS_ADDON": "1",
            "BLUEPRINTER_MODULE_PREFIX": "my-addon",
        }
        with patch.dict(os.environ, env):
            config = ProjectConfig.from_env()
        assert config.use_pods is True
        assert config.pod_module_prefix == "app/pods"
        assert config.is_addon is True
        assert config.module_prefix == "my-addon"

    @pytest.mark.unit
    def test_env_false_value(self):
        base = ProjectConfig(use_pods=True)
        with patch.dict(os.environ, {"BLUEPRINTER_USE_PODS": "no"}):
            config = ProjectConfig.from_env(base)
        assert config.use_pods is False

    @pytest.mark.unit
    def test_base_values_kept(self):
        base = ProjectConfig(addons=["lib/a"], module_prefix="dummy")
        with patch.dict(os.environ, {"BLUEPRINTER_USE_PODS": "yes"}):
            config = ProjectConfig.from_env(base)
        assert config.addons == ["lib/a"]
        assert config.module_prefix == "dummy"
        assert config.use_pods is True


# ---------------------------------------------------------------------------
# Project discovery
# ---------------------------------------------------------------------------


class TestProjectDiscovery:
    @pytest.mark.unit
    def test_find_root_from_nested_dir(self, project_dir: Path):
        nested = project_dir / "app" / "controllers"
        nested.mkdir(parents=True)
        assert find_project_root(nested) == project_dir.resolve()

    @pytest.mark.unit
    def test_find_root_falls_back_to_start(self, tmp_path: Path):
        bare = tmp_path / "bare"
        bare.mkdir()
        assert find_project_root(bare) == bare.resolve()

    @pytest.mark.unit
    def test_load_project_config_reads_file(self, make_project):
        root = make_project(use_pods=True)
        assert load_project_config(root).use_pods is True

    @pytest.mark.unit
    def test_load_project_config_without_file(self, tmp_path: Path):
        assert load_project_config(tmp_path) == ProjectConfig()

    @pytest.mark.unit
    def test_env_beats_file(self, make_project):
        root = make_project(use_pods=True)
        with patch.dict(os.environ, {"BLUEPRINTER_USE_PODS": "0"}):
            assert load_project_config(root).use_pods is False
