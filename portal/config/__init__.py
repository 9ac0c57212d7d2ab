"""
Configuration package for the reservation portal.
"""

from portal.config.settings import Settings, settings, get_settings

__all__ = ['Settings', 'settings', 'get_settings']
