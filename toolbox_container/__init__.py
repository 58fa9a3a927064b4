"""Toolbox Container - a pet container full of debugging and admin tools."""

__version__ = "0.1.0"

# Export main CLI for convenience
from .cli.main import cli

__all__ = ['cli']
