"""Tests for configuration loading."""

from pathlib import Path
from unittest.mock import patch

import pytest
from folio.config import DEFAULT_WATCH_PATTERNS, Config, ContentConfig


class TestConfigLoad:
    """Tests for Config.load()."""

    def test__explicit_path__loads_config(self, tmp_path: Path) -> None:
        """Load config from explicit path."""
        config_file = tmp_path / "folio.toml"
        config_file.write_text("""
[server]
host = "0.0.0.0"
port = 3000

[content]
root = "site-content"
base_url = "https://cdn.example.com/content"

[site]
default_route = "#about"
title = "Ada Lovelace"

[live_reload]
enabled = true
watch_patterns = ["**/*.md"]
""")

        config = Config.load(config_file)

        assert config.server.host == "0.0.0.0"
        assert config.server.port == 3000
        assert config.content.root == tmp_path / "site-content"
        assert config.content.base_url == "https://cdn.example.com/content"
        assert config.site.default_route == "about"
        assert config.site.title == "Ada Lovelace"
        assert config.live_reload.enabled is True
        assert config.live_reload.watch_patterns == ["**/*.md"]
        assert config.config_path == config_file

    def test__minimal_config__uses_defaults(self, tmp_path: Path) -> None:
        """Load minimal config with defaults relative to config file."""
        config_file = tmp_path / "folio.toml"
        config_file.write_text("")

        config = Config.load(config_file)

        assert config.server.host == "127.0.0.1"
        assert config.server.port == 8080
        assert config.content.root == tmp_path / "content"
        assert config.content.base_url is None
        assert config.site.default_route == "home"
        assert config.live_reload.enabled is False
        assert config.live_reload.watch_patterns == DEFAULT_WATCH_PATTERNS

    def test__missing_explicit_path__raises_error(self, tmp_path: Path) -> None:
        """Raise FileNotFoundError for missing explicit config file."""
        with pytest.raises(FileNotFoundError, match="Configuration file not found"):
            Config.load(tmp_path / "nonexistent.toml")

    def test__no_config_file__returns_defaults(self, tmp_path: Path) -> None:
        """Use defaults when no config file is discovered."""
        with patch("folio.config.Path.cwd", return_value=tmp_path):
            config = Config.load()

        assert config.config_path is None
        assert config.content.root == Path("content")

    def test__config_in_parent__discovered(self, tmp_path: Path) -> None:
        """Discover folio.toml in a parent directory."""
        config_file = tmp_path / "folio.toml"
        config_file.write_text("[server]\nport = 9000\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)

        with patch("folio.config.Path.cwd", return_value=nested):
            config = Config.load()

        assert config.server.port == 9000
        assert config.config_path == config_file

    @pytest.mark.parametrize(
        ("toml", "message"),
        [
            ('server = "x"', "server section must be a dictionary"),
            ("[server]\nport = \"80\"", "server.port must be an integer"),
            ("[server]\nport = true", "server.port must be an integer"),
            ("[content]\nroot = 1", "content.root must be a string"),
            ('[content]\nbase_url = "ftp://x"', r"content.base_url must be an http\(s\) URL"),
            ('[site]\ndefault_route = ""', "site.default_route must be a non-empty string"),
            ('[live_reload]\nenabled = "yes"', "live_reload.enabled must be a boolean"),
            ("[live_reload]\nwatch_patterns = [1]", "live_reload.watch_patterns items must be strings"),
            ("[server", "Invalid TOML"),
        ],
    )
    def test__invalid_values__raise_value_error(self, tmp_path: Path, toml: str, message: str) -> None:
        """Reject values of the wrong type."""
        config_file = tmp_path / "folio.toml"
        config_file.write_text(toml)

        with pytest.raises(ValueError, match=message):
            Config.load(config_file)


class TestConfigWithOverrides:
    """Tests for Config.with_overrides()."""

    def test__overrides__applied_without_mutating_original(self, tmp_path: Path) -> None:
        original = Config(content=ContentConfig(root=tmp_path))

        updated = original.with_overrides(
            host="0.0.0.0",
            port=9999,
            content_root=tmp_path / "other",
            live_reload_enabled=True,
        )

        assert updated.server.host == "0.0.0.0"
        assert updated.server.port == 9999
        assert updated.content.root == tmp_path / "other"
        assert updated.live_reload.enabled is True
        assert original.server.port == 8080
        assert original.content.root == tmp_path
        assert original.live_reload.enabled is False

    def test__none_values__keep_existing(self, tmp_path: Path) -> None:
        original = Config(content=ContentConfig(root=tmp_path, base_url="https://x.example"))

        updated = original.with_overrides(port=1234)

        assert updated.server.host == "127.0.0.1"
        assert updated.content.base_url == "https://x.example"
        assert updated.content.root == tmp_path
