"""
Configuration and environment setup.
"""

from .settings import Settings, get_settings, PLACEHOLDER_CALLBACK_URL

__all__ = ["Settings", "get_settings", "PLACEHOLDER_CALLBACK_URL"]
