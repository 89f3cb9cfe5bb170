"""
Configuration module for the Muay Thai events backend.

Provides centralized configuration for:
- Scheduled generation (cron secret, look-ahead)
- Manual generation limits
"""

from backend.src.config.settings import AppSettings, get_settings

__all__ = [
    "AppSettings",
    "get_settings",
]
