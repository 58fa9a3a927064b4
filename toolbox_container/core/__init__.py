"""Core functionality for the toolbox launcher."""

from .cleanup import stop_on_exit
from .toolbox_runner import ToolboxRunner

__all__ = [
    'ToolboxRunner',
    'stop_on_exit'
]
