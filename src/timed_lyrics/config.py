"""Configuration loading and management for timed-lyrics.

Handles parser and catalog settings stored as a JSON file.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from timed_lyrics.errors import ConfigurationError


class ParserSettings(BaseModel):
    """Settings for the lyrics markup parser."""

    # Join adjacent spans without a space unless the markup had whitespace
    # between them (syllable-timed documents split words across spans)
    respect_source_spacing: bool = False
    # Bytes fed to the markup tokenizer per step
    chunk_size: int = Field(default=4096, gt=0)


class CatalogSettings(BaseModel):
    """Settings for the catalog lyrics endpoint."""

    base_url: str = "https://amp-api.music.apple.com"
    # Storefront (country code) used in catalog paths
    storefront: str = "us"
    # Origin header the catalog expects on privileged requests
    origin: str = "https://music.apple.com"
    # Word/syllable-timed lyrics instead of line-timed ones
    syllable_lyrics: bool = True
    timeout: float = Field(default=15.0, gt=0)
    max_attempts: int = Field(default=3, ge=1)


class LyricsConfig(BaseModel):
    """Top-level configuration."""

    parser: ParserSettings = Field(default_factory=ParserSettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)


def get_config_root() -> Path:
    """Get the per-user configuration directory."""
    return Path.home() / ".timed-lyrics"


def default_config_path() -> Path:
    """Get the path of the per-user configuration file."""
    return get_config_root() / "config.json"


def load_config(path: Path | str) -> LyricsConfig:
    """Load configuration from a JSON file.

    Args:
        path: Path to the config file

    Returns:
        LyricsConfig with the file's settings

    Raises:
        ConfigurationError: If the file is missing, not JSON, or has invalid values
    """
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigurationError(
            f"Config not found: {config_path}", context={"path": str(config_path)}
        )

    try:
        with open(config_path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Config is not valid JSON: {e}", context={"path": str(config_path)}
        ) from e

    try:
        return LyricsConfig(**data)
    except (ValidationError, TypeError) as e:
        raise ConfigurationError(
            f"Invalid config values: {e}", context={"path": str(config_path)}
        ) from e


def load_config_or_default(path: Path | str | None = None) -> LyricsConfig:
    """Load the given config file, the per-user one, or defaults.

    An explicit path must exist; the per-user file is optional.

    Raises:
        ConfigurationError: If an explicit or existing file cannot be loaded
    """
    if path is not None:
        return load_config(path)

    user_path = default_config_path()
    if user_path.exists():
        return load_config(user_path)

    return LyricsConfig()


def save_config(path: Path | str, config: LyricsConfig) -> Path:
    """Save configuration to a JSON file with atomic write.

    Args:
        path: Destination path
        config: Configuration to save

    Returns:
        Path to the saved config file
    """
    config_path = Path(path)
    config_path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = config_path.with_name(config_path.name + ".tmp")

    # Atomic write: write to temp file, then rename
    with open(temp_path, "w", encoding="utf-8") as f:
        json.dump(config.model_dump(), f, indent=2)

    temp_path.replace(config_path)
    return config_path
