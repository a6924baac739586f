"""Tests for specroutes.config -- project file, environment, precedence."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from specroutes.config import load_env_config, load_project_config, resolve_config
from specroutes.exceptions import ConfigError
from specroutes.models import CompilerConfig


def _write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


# ---------------------------------------------------------------------------
# Project file
# ---------------------------------------------------------------------------


class TestLoadProjectConfig:
    def test_missing_default_file_is_empty(self, isolated_config: Path) -> None:
        assert load_project_config() == {}

    def test_reads_default_file(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "specroutes.json", {"derive_required": True})
        assert load_project_config() == {"derive_required": True}

    def test_explicit_path(self, tmp_path: Path) -> None:
        path = tmp_path / "conf" / "routes.json"
        _write_json(path, {"filter_depth": 3})
        assert load_project_config(path) == {"filter_depth": 3}

    def test_explicit_missing_path_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_project_config(tmp_path / "missing.json")

    def test_invalid_json_raises(self, isolated_config: Path) -> None:
        (isolated_config / "specroutes.json").write_text("{nope", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid config"):
            load_project_config()

    def test_non_object_raises(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "specroutes.json", ["filter_depth"])
        with pytest.raises(ConfigError, match="expected a JSON object"):
            load_project_config()


# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------


class TestLoadEnvConfig:
    def test_empty_environment(self) -> None:
        assert load_env_config({}) == {}

    def test_all_variables(self) -> None:
        env = {
            "SPECROUTES_FILTER_DEPTH": "2",
            "SPECROUTES_STRICT_SCHEMAS": "off",
            "SPECROUTES_DERIVE_REQUIRED": "Yes",
            "SPECROUTES_JSON_MEDIA_TYPES": "application/json, application/problem+json,",
        }
        assert load_env_config(env) == {
            "filter_depth": 2,
            "strict_schemas": False,
            "derive_required": True,
            "json_media_types": ["application/json", "application/problem+json"],
        }

    @pytest.mark.parametrize("value", ["all", "ALL", "none", "recursive", "unlimited"])
    def test_unlimited_depth(self, value: str) -> None:
        assert load_env_config({"SPECROUTES_FILTER_DEPTH": value}) == {"filter_depth": None}

    def test_bad_depth_raises(self) -> None:
        with pytest.raises(ConfigError, match="SPECROUTES_FILTER_DEPTH"):
            load_env_config({"SPECROUTES_FILTER_DEPTH": "deep"})

    def test_bad_boolean_raises(self) -> None:
        with pytest.raises(ConfigError, match="Invalid boolean for SPECROUTES_STRICT_SCHEMAS"):
            load_env_config({"SPECROUTES_STRICT_SCHEMAS": "maybe"})

    def test_reads_os_environ_by_default(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SPECROUTES_DERIVE_REQUIRED", "1")
        assert load_env_config() == {"derive_required": True}


# ---------------------------------------------------------------------------
# Precedence
# ---------------------------------------------------------------------------


class TestResolveConfig:
    def test_defaults(self, isolated_config: Path) -> None:
        config = resolve_config()
        assert config == CompilerConfig()
        assert config.filter_depth == 1
        assert config.strict_schemas is True
        assert config.derive_required is False
        assert config.json_media_types == ["application/json"]

    def test_file_then_env_then_overrides(self, isolated_config: Path) -> None:
        _write_json(
            isolated_config / "specroutes.json",
            {"filter_depth": 2, "derive_required": True, "strict_schemas": False},
        )
        env = {"SPECROUTES_FILTER_DEPTH": "3", "SPECROUTES_DERIVE_REQUIRED": "false"}
        config = resolve_config(environ=env, filter_depth=4)
        assert config.filter_depth == 4
        assert config.derive_required is False
        assert config.strict_schemas is False

    def test_none_overrides_ignored(self, isolated_config: Path) -> None:
        config = resolve_config(environ={"SPECROUTES_FILTER_DEPTH": "5"}, filter_depth=None)
        assert config.filter_depth == 5

    def test_all_override_means_unlimited(self, isolated_config: Path) -> None:
        assert resolve_config(environ={}, filter_depth="all").filter_depth is None

    def test_null_depth_in_file(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "specroutes.json", {"filter_depth": None})
        assert resolve_config(environ={}).filter_depth is None

    def test_explicit_config_path(self, isolated_config: Path) -> None:
        path = isolated_config / "other.json"
        _write_json(path, {"json_media_types": ["application/vnd.api+json"]})
        config = resolve_config(path, environ={})
        assert config.json_media_types == ["application/vnd.api+json"]

    def test_invalid_depth_raises(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError, match="Invalid configuration"):
            resolve_config(environ={}, filter_depth=0)

    def test_unknown_key_raises(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "specroutes.json", {"filter_dept": 2})
        with pytest.raises(ConfigError, match="Invalid configuration"):
            resolve_config(environ={})

    def test_empty_media_types_raises(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError, match="Invalid configuration"):
            resolve_config(environ={}, json_media_types=[])
