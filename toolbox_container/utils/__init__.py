"""Utilities for the toolbox launcher."""

from .config_manager import ConfigManager

__all__ = [
    'ConfigManager'
]
