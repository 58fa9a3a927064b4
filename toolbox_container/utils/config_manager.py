"""Configuration management utilities."""

import getpass
import logging
import os
import subprocess
from pathlib import Path
from typing import Dict, Mapping, Optional

import click
from dotenv import dotenv_values

from ..core.constants import (
    CONTAINER_NAME_PREFIX,
    DEFAULT_IMAGE,
    DEFAULT_REGISTRY,
    DEFAULT_SHELL,
    OVERRIDABLE_SETTINGS,
    RC_SHELL,
    RUNTIME_URL_ENV,
    TOOLBOXRC_NAME,
)
from ..models.config import ToolboxConfig

logger = logging.getLogger(__name__)

UNRESOLVED_MARKERS = ('$', '"', "'")


def _source_script() -> str:
    """Shell script that sources ``$1`` and prints the recognized keys.

    Each key that ends up set is printed as ``KEY=value`` followed by a NUL.
    Output of the sourced file goes to stderr so it cannot mix with the result.
    """
    expansions = ' '.join(
        f'"${{{key}+{key}=${key}}}"' for key in OVERRIDABLE_SETTINGS
    )
    return f'. "$1" >&2\nprintf \'%s\\0\' {expansions}\n'


class ConfigManager:
    """Resolves toolbox configuration from defaults and ``~/.toolboxrc``."""

    def __init__(
        self,
        rc_file: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        """Initialize config manager.

        Args:
            rc_file: Settings file (defaults to ``~/.toolboxrc``)
            environ: Environment to read the user and runtime URL from
        """
        self.environ = os.environ if environ is None else environ
        self.rc_file = rc_file or Path.home() / TOOLBOXRC_NAME

    def defaults(self) -> Dict[str, str]:
        """Built-in settings, keyed by config field."""
        user = self.environ.get('USER') or getpass.getuser()
        return {
            'registry': DEFAULT_REGISTRY,
            'image': DEFAULT_IMAGE,
            'name': f"{CONTAINER_NAME_PREFIX}-{user}",
            'shell': DEFAULT_SHELL,
        }

    def _source_with_shell(self) -> Optional[Dict[str, Optional[str]]]:
        """Evaluate the settings file with ``sh`` the way a login shell would.

        Returns:
            Recognized keys the file sets, or None if the shell could not
            source the file
        """
        # Settings already exported by the caller must not leak into the result
        env = {
            key: value for key, value in self.environ.items()
            if key not in OVERRIDABLE_SETTINGS
        }
        cmd = [RC_SHELL, '-c', _source_script(), RC_SHELL, str(self.rc_file.absolute())]
        try:
            result = subprocess.run(
                cmd,
                stdout=subprocess.PIPE,
                env=env,
                text=True,
                errors='replace',
                check=False,
            )
        except OSError as e:
            logger.warning(f"Unable to run {RC_SHELL} to read {self.rc_file}: {e}")
            return None
        if result.returncode != 0:
            logger.warning(
                f"{RC_SHELL} exited with {result.returncode} while reading {self.rc_file}"
            )
            return None

        values = {}
        for entry in result.stdout.split('\0'):
            key, sep, value = entry.partition('=')
            if sep:
                values[key] = value
        return values

    def read_overrides(self) -> Dict[str, str]:
        """Read recognized settings from the settings file.

        The file is trusted local configuration written as shell variable
        assignments, so it is sourced by ``sh``. If that fails it is parsed
        as a plain ``KEY=value`` file instead. Unrecognized keys and keys
        without a value are ignored.
        """
        if not self.rc_file.is_file():
            return {}

        click.echo(f"{TOOLBOXRC_NAME} file detected, overriding defaults...")
        values = self._source_with_shell()
        if values is None:
            logger.warning(f"Parsing {self.rc_file} without shell expansion")
            values = dotenv_values(self.rc_file)

        overrides = {}
        for key, value in values.items():
            field = OVERRIDABLE_SETTINGS.get(key)
            if field is None:
                logger.debug(f"Ignoring unrecognized setting {key} in {self.rc_file}")
                continue
            if not value:
                continue
            if any(marker in value for marker in UNRESOLVED_MARKERS):
                logger.warning(f"{key} in {self.rc_file} looks unexpanded: {value!r}")
            overrides[field] = value
        return overrides

    def load(self, privileged: bool = False) -> ToolboxConfig:
        """Resolve the configuration for this invocation."""
        settings = self.defaults()
        settings.update(self.read_overrides())
        config = ToolboxConfig(
            **settings,
            privileged=privileged,
            runtime_url=self.environ.get(RUNTIME_URL_ENV) or None,
        )
        logger.debug(f"Resolved configuration: {config!r}")
        return config
