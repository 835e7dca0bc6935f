"""
limud-common: Shared library for Limud.

Provides common data models, configuration management, structured
logging, the recordings API client, and formatting helpers used by
the search and status services.
"""

from limud_common.config import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
