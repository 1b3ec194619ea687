"""Tests for configuration loading."""

import json
from unittest.mock import patch

import pytest

from timed_lyrics.config import (
    CatalogSettings,
    LyricsConfig,
    ParserSettings,
    load_config,
    load_config_or_default,
    save_config,
)
from timed_lyrics.errors import ConfigurationError


class TestDefaults:
    """Tests for default settings."""

    def test_parser_defaults(self):
        """Test parser defaults."""
        settings = ParserSettings()

        assert settings.respect_source_spacing is False
        assert settings.chunk_size == 4096

    def test_catalog_defaults(self):
        """Test catalog defaults."""
        settings = CatalogSettings()

        assert settings.base_url == "https://amp-api.music.apple.com"
        assert settings.storefront == "us"
        assert settings.origin == "https://music.apple.com"
        assert settings.syllable_lyrics is True
        assert settings.max_attempts == 3


class TestLoadConfig:
    """Tests for load_config."""

    def test_partial_file(self, tmp_path):
        """Test that omitted settings keep their defaults."""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"catalog": {"storefront": "fr"}}), encoding="utf-8")

        config = load_config(path)

        assert config.catalog.storefront == "fr"
        assert config.catalog.syllable_lyrics is True
        assert config.parser == ParserSettings()

    def test_missing_file(self, tmp_path):
        """Test that a missing file is a configuration error."""
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(tmp_path / "nope.json")

        assert "Config not found" in exc_info.value.message

    def test_invalid_json(self, tmp_path):
        """Test that a non-JSON file is a configuration error."""
        path = tmp_path / "config.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_invalid_values(self, tmp_path):
        """Test that out-of-range values are rejected."""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"parser": {"chunk_size": 0}}), encoding="utf-8")

        with pytest.raises(ConfigurationError) as exc_info:
            load_config(path)

        assert "Invalid config values" in exc_info.value.message

    def test_not_an_object(self, tmp_path):
        """Test that a top-level list is rejected."""
        path = tmp_path / "config.json"
        path.write_text("[1, 2]", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            load_config(path)


class TestSaveConfig:
    """Tests for save_config."""

    def test_round_trip(self, tmp_path):
        """Test saving then loading a config."""
        config = LyricsConfig(
            parser=ParserSettings(respect_source_spacing=True, chunk_size=64),
            catalog=CatalogSettings(storefront="jp", timeout=5.0),
        )
        path = tmp_path / "nested" / "config.json"

        saved = save_config(path, config)

        assert saved == path
        assert not path.with_name("config.json.tmp").exists()
        assert load_config(path) == config


class TestLoadConfigOrDefault:
    """Tests for load_config_or_default."""

    def test_defaults_without_user_file(self, tmp_path):
        """Test defaults when no user config exists."""
        with patch("timed_lyrics.config.default_config_path", return_value=tmp_path / "c.json"):
            assert load_config_or_default() == LyricsConfig()

    def test_user_file(self, tmp_path):
        """Test that the per-user config is picked up."""
        path = tmp_path / "config.json"
        save_config(path, LyricsConfig(catalog=CatalogSettings(storefront="de")))

        with patch("timed_lyrics.config.default_config_path", return_value=path):
            assert load_config_or_default().catalog.storefront == "de"

    def test_explicit_path_must_exist(self, tmp_path):
        """Test that an explicit path is not silently ignored."""
        with pytest.raises(ConfigurationError):
            load_config_or_default(tmp_path / "missing.json")
