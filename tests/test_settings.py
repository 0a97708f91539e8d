"""
Tests for settings loading, deep merge logic and desktop helpers.

Uses real TOML files on disk; subprocess calls are mocked.
"""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import toml

from termsearch.utils.helpers import (
    _deep_merge,
    get_selected_text,
    load_settings,
    open_url,
    settings_file,
)


class TestDeepMerge:
    """Test the _deep_merge function directly."""

    def test_override_replaces_flat_key(self):
        assert _deep_merge({"a": 1, "b": 2}, {"b": 99}) == {"a": 1, "b": 99}

    def test_override_adds_new_key(self):
        assert _deep_merge({"a": 1}, {"b": 2}) == {"a": 1, "b": 2}

    def test_nested_dicts_are_merged(self):
        base = {"section": {"a": 1, "b": 2}}
        override = {"section": {"b": 99, "c": 3}}
        assert _deep_merge(base, override) == {"section": {"a": 1, "b": 99, "c": 3}}

    def test_base_is_not_mutated(self):
        base = {"a": {"x": 1}}
        _deep_merge(base, {"a": {"x": 2}})
        assert base["a"]["x"] == 1


class TestLoadSettings:
    """Test load_settings with real TOML files."""

    def test_returns_defaults_when_file_missing(self, tmp_path):
        settings = load_settings(tmp_path / "nonexistent.toml")
        assert settings.catalog_path == Path.home() / ".search_config.toml"
        assert settings.log_path == Path.home() / ".search.log"
        assert settings.browser_command == "xdg-open"

    def test_loaded_values_override_defaults(self, tmp_settings, tmp_path):
        settings = load_settings(tmp_settings)
        assert settings.catalog_path == tmp_path / "search_config.toml"
        assert settings.log_path == tmp_path / "search.log"

    def test_partial_file_keeps_other_defaults(self, tmp_path):
        path = tmp_path / "settings.toml"
        path.write_text(toml.dumps({"browser": {"command": "firefox"}, "logging": {"level": "info"}}))

        settings = load_settings(path)
        assert settings.browser_command == "firefox"
        assert settings.log_level == "INFO"
        assert settings.catalog_path == Path.home() / ".search_config.toml"

    def test_invalid_file_falls_back_to_defaults(self, tmp_path):
        path = tmp_path / "settings.toml"
        path.write_text("this is not toml")
        assert load_settings(path).browser_command == "xdg-open"

    def test_user_paths_are_expanded(self, tmp_path):
        path = tmp_path / "settings.toml"
        path.write_text(toml.dumps({"catalog": {"path": "~/engines.toml"}}))
        assert load_settings(path).catalog_path == Path.home() / "engines.toml"

    def test_settings_file_env_override(self, tmp_path, monkeypatch):
        monkeypatch.setenv("TERMSEARCH_SETTINGS", str(tmp_path / "custom.toml"))
        assert settings_file() == tmp_path / "custom.toml"

    def test_settings_file_default_location(self, monkeypatch):
        monkeypatch.delenv("TERMSEARCH_SETTINGS", raising=False)
        assert settings_file() == Path.home() / ".config" / "termsearch" / "settings.toml"


class TestSelection:
    """Test reading the primary selection."""

    def test_first_available_tool_wins(self):
        done = subprocess.CompletedProcess(args=[], returncode=0, stdout="selected", stderr="")
        with patch("termsearch.utils.helpers.subprocess.run", return_value=done) as mock_run:
            assert get_selected_text() == "selected"
        assert mock_run.call_args.args[0][0] == "wl-paste"

    def test_falls_back_to_xclip(self):
        done = subprocess.CompletedProcess(args=[], returncode=0, stdout="from x", stderr="")
        with patch(
            "termsearch.utils.helpers.subprocess.run",
            side_effect=[FileNotFoundError(), done],
        ) as mock_run:
            assert get_selected_text() == "from x"
        assert mock_run.call_args.args[0][0] == "xclip"

    def test_no_tools_returns_empty_string(self):
        with patch("termsearch.utils.helpers.subprocess.run", side_effect=FileNotFoundError()):
            assert get_selected_text() == ""


class TestOpenUrl:
    """Test launching the desktop handler."""

    def test_uses_configured_command(self):
        with patch("termsearch.utils.helpers.subprocess.Popen", return_value=MagicMock()) as mock_popen:
            assert open_url("https://example.com", "firefox") is True
        assert mock_popen.call_args.args[0] == ["firefox", "https://example.com"]

    def test_missing_command_returns_false(self):
        with patch("termsearch.utils.helpers.subprocess.Popen", side_effect=FileNotFoundError()):
            assert open_url("https://example.com") is False
