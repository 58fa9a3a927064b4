"""Models for the toolbox launcher."""

from .config import ToolboxConfig
from .container import ContainerState, ContainerStatus

__all__ = [
    'ToolboxConfig',
    'ContainerState',
    'ContainerStatus'
]
