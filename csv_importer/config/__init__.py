"""Configuration module."""

from .settings import DEFAULT_ROW_LIMIT, Settings, get_settings

__all__ = ["DEFAULT_ROW_LIMIT", "Settings", "get_settings"]
