"""
Configuration for the region grid, team registry and renderer.
"""

from .config import Settings, settings

__all__ = ["Settings", "settings"]
