"""Pydantic settings for makeepub configuration."""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from makeepub.books.segmenter import CHAPTER_FOOTER


def get_config_dir() -> Path:
    """Get the configuration directory."""
    return Path.home() / ".makeepub"


def get_config_path() -> Path:
    """Get the path to the config file."""
    return get_config_dir() / "config.yaml"


def _load_yaml_config() -> dict[str, Any]:
    """Load configuration from YAML file if it exists.

    Returns:
        Dictionary of configuration values, or empty dict if file doesn't exist.
    """
    config_path = get_config_path()
    if config_path.exists():
        try:
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}
        except (yaml.YAMLError, OSError):
            # Malformed or unreadable config falls back to defaults
            return {}
        return data if isinstance(data, dict) else {}
    return {}


class SegmentationSettings(BaseModel):
    """Settings for chapter segmentation."""

    chapter_footer: str = CHAPTER_FOOTER.decode()


class OutputSettings(BaseModel):
    """Settings for output."""

    # Base for relative output paths; None keeps them relative to the working directory
    directory: Path | None = None


class Settings(BaseSettings):
    """Main settings model for makeepub."""

    model_config = SettingsConfigDict(
        env_prefix="MAKEEPUB_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    segmentation: SegmentationSettings = Field(default_factory=SegmentationSettings)
    output: OutputSettings = Field(default_factory=OutputSettings)
    log_level: str = "WARNING"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        # Environment beats the YAML values passed to __init__
        return env_settings, init_settings, dotenv_settings, file_secret_settings


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Settings are loaded from (in order of priority, highest first):
    1. Environment variables (MAKEEPUB_* prefix)
    2. YAML config file (~/.makeepub/config.yaml)
    3. Default values
    """
    yaml_config = _load_yaml_config()
    return Settings(**yaml_config)
