"""Configuration: per-book book.ini and tool-wide settings."""

from makeepub.config.book import BookConfig
from makeepub.config.settings import Settings, get_settings

__all__ = ["BookConfig", "Settings", "get_settings"]
