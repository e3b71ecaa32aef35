"""Tests for config/loader.py module.

Covers:
- _load_yaml() function
- _deep_merge() function
- load_config() precedence: defaults < global < repo < env < kwargs
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from gitscope.config.loader import (
    GLOBAL_CONFIG_PATH,
    _deep_merge,
    _load_yaml,
    load_config,
)
from gitscope.core.errors import ConfigError, ErrorCode


def _write_repo_config(root: Path, text: str) -> None:
    config_dir = root / ".gitscope"
    config_dir.mkdir(exist_ok=True)
    (config_dir / "config.yaml").write_text(text)


class TestLoadYaml:
    """Tests for _load_yaml function."""

    def test_returns_empty_dict_for_missing_file(self, tmp_path: Path) -> None:
        assert _load_yaml(tmp_path / "nonexistent.yaml") == {}

    def test_loads_valid_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text("search:\n  max_results: 10\n")

        assert _load_yaml(yaml_file) == {"search": {"max_results": 10}}

    def test_returns_empty_for_empty_file(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "empty.yaml"
        yaml_file.write_text("")

        assert _load_yaml(yaml_file) == {}

    def test_raises_config_error_for_invalid_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "invalid.yaml"
        yaml_file.write_text("search:\n  max_results:\n    - invalid: [unclosed")

        with pytest.raises(ConfigError) as exc_info:
            _load_yaml(yaml_file)
        assert exc_info.value.code == ErrorCode.CONFIG_PARSE_ERROR

    def test_raises_config_error_for_non_mapping(self, tmp_path: Path) -> None:
        """A YAML list at top level is not a config."""
        yaml_file = tmp_path / "list.yaml"
        yaml_file.write_text("- one\n- two\n")

        with pytest.raises(ConfigError, match="mapping"):
            _load_yaml(yaml_file)


class TestDeepMerge:
    """Tests for _deep_merge function."""

    def test_override_wins(self) -> None:
        assert _deep_merge({"a": 1, "b": 2}, {"b": 3}) == {"a": 1, "b": 3}

    def test_nested_merge(self) -> None:
        base = {"search": {"max_results": 50, "preview_chars": 120}}
        override = {"search": {"max_results": 5}}
        assert _deep_merge(base, override) == {"search": {"max_results": 5, "preview_chars": 120}}

    def test_override_replaces_non_dict(self) -> None:
        base: dict[str, Any] = {"a": {"nested": 1}}
        override: dict[str, Any] = {"a": "simple"}
        assert _deep_merge(base, override) == {"a": "simple"}

    def test_does_not_mutate_base(self) -> None:
        base = {"a": 1}
        _deep_merge(base, {"b": 2})
        assert base == {"a": 1}


class TestLoadConfig:
    """Tests for load_config function."""

    def test_defaults_when_no_files(self, tmp_path: Path) -> None:
        with patch("gitscope.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"):
            config = load_config(tmp_path)
        assert config.logging.level == "INFO"
        assert config.search.default_max_commits == 100
        assert config.search.max_results == 50
        assert config.cache.blame_capacity == 50

    def test_loads_repo_config(self, tmp_path: Path) -> None:
        _write_repo_config(tmp_path, "cache:\n  blame_capacity: 7\n")

        with patch("gitscope.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"):
            config = load_config(tmp_path)
        assert config.cache.blame_capacity == 7

    def test_repo_config_overrides_global(self, tmp_path: Path) -> None:
        global_file = tmp_path / "global.yaml"
        global_file.write_text("search:\n  max_results: 20\n  preview_chars: 80\n")
        _write_repo_config(tmp_path, "search:\n  max_results: 30\n")

        with patch("gitscope.config.loader.GLOBAL_CONFIG_PATH", global_file):
            config = load_config(tmp_path)
        assert config.search.max_results == 30
        assert config.search.preview_chars == 80

    def test_env_vars_override_yaml(self, tmp_path: Path) -> None:
        _write_repo_config(tmp_path, "logging:\n  level: INFO\n")

        with (
            patch("gitscope.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"),
            patch.dict(os.environ, {"GITSCOPE__LOGGING__LEVEL": "WARNING"}),
        ):
            config = load_config(tmp_path)
        assert config.logging.level == "WARNING"

    def test_kwargs_override_all(self, tmp_path: Path) -> None:
        from gitscope.config.models import SearchConfig

        _write_repo_config(tmp_path, "search:\n  max_results: 30\n")
        with patch("gitscope.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"):
            config = load_config(tmp_path, search=SearchConfig(max_results=3))
        assert config.search.max_results == 3

    def test_raises_config_error_for_invalid_value(self, tmp_path: Path) -> None:
        _write_repo_config(tmp_path, "diff:\n  rename_threshold: 0\n")

        with (
            patch("gitscope.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"),
            pytest.raises(ConfigError) as exc_info,
        ):
            load_config(tmp_path)
        assert exc_info.value.code == ErrorCode.CONFIG_INVALID_VALUE
        assert "diff" in exc_info.value.details["field"]


class TestGlobalConfigPath:
    def test_is_in_user_config(self) -> None:
        assert isinstance(GLOBAL_CONFIG_PATH, Path)
        assert "gitscope" in str(GLOBAL_CONFIG_PATH)

    def test_env_result_cap_above_limit_rejected(self, tmp_path: Path) -> None:
        with (
            patch("gitscope.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"),
            patch.dict(os.environ, {"GITSCOPE__SEARCH__MAX_RESULTS": "200"}),
            pytest.raises(ConfigError) as exc_info,
        ):
            load_config(tmp_path)
        assert exc_info.value.code == ErrorCode.CONFIG_INVALID_VALUE
