"""
Client configuration using Pydantic settings.

Configuration comes from environment variables or keyword overrides.
"""

from .settings import Settings, get_settings, load_settings

__all__ = ["Settings", "get_settings", "load_settings"]
