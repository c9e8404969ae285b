"""
Configuration Module

Reminder engine configuration settings.
"""

from mamacare.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
