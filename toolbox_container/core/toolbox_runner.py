"""Provisioning the toolbox container and running sessions in it."""

import logging
import os
from typing import Dict, List, Mapping, Optional

import click

from .constants import FORWARDED_ENV_VARS
from ..models.config import ToolboxConfig
from ..services.exceptions import UnknownContainerStateError
from ..services.runtime import RuntimeService
from .cleanup import stop_on_exit

logger = logging.getLogger(__name__)


class ToolboxRunner:
    """Ensures the toolbox container is running and attaches a session to it."""

    def __init__(
        self,
        config: ToolboxConfig,
        runtime: RuntimeService,
        environ: Optional[Mapping[str, str]] = None,
    ):
        """Initialize toolbox runner."""
        self.config = config
        self.runtime = runtime
        self.environ = os.environ if environ is None else environ

    def run(self, command: List[str]) -> int:
        """Provision the container and run ``command`` (or the shell) in it.

        The container is stopped when this returns or raises.

        Returns:
            Exit code of the session, or 0 when the image's RUN label
            launched the container

        Raises:
            ServiceError: If provisioning fails or the container state is unknown
        """
        name = self.config.name
        image = self.config.image_ref

        with stop_on_exit(self.runtime, name):
            self.ensure_image()
            runlabel = self.runtime.image_runlabel(image)

            if not self.runtime.container_exists(name):
                click.echo(f"Spawning a container '{name}' with image '{image}'")
                if runlabel:
                    click.echo("Detected RUN label in the container image. Using that as the default...")
                    self.runtime.container_runlabel(name, image)
                    return 0
                self.runtime.create_container(name, image)
            else:
                click.echo(f"Container '{name}' already exists. Trying to start...")
                click.echo(
                    "(To remove the container and start with a fresh toolbox, "
                    f"run: {self.runtime.remove_hint(name)})"
                )

            self.ensure_running()
            click.echo("Container started successfully. To exit, type 'exit'.")
            return self.exec_session(command)

    def ensure_image(self) -> None:
        """Pull the toolbox image unless it is already present locally."""
        image = self.config.image_ref
        if self.runtime.image_exists(image):
            logger.debug(f"Image {image} present locally")
            return
        logger.info(f"Image {image} not found locally, pulling")
        self.runtime.pull_image(image)

    def ensure_running(self) -> None:
        """Start the container if it is not already running.

        Raises:
            UnknownContainerStateError: If the runtime reports an unhandled state
            ContainerStartError: If the start fails
        """
        name = self.config.name
        status = self.runtime.container_status(name)
        logger.debug(f"Container {name} is {status.raw!r}")

        if status.needs_start:
            self.runtime.start_container(name)
        elif not status.is_running:
            raise UnknownContainerStateError(name, status.raw)

    def session_environment(self) -> Dict[str, str]:
        """Locale and terminal variables forwarded into the container."""
        return {
            key: self.environ[key]
            for key in FORWARDED_ENV_VARS
            if key in self.environ
        }

    def exec_session(self, command: List[str]) -> int:
        """Run the command, or the configured shell, interactively."""
        cmd = list(command) or [self.config.shell]
        returncode = self.runtime.exec_in_container(
            self.config.name, cmd, self.session_environment()
        )
        # Killed by a signal: report it the way a shell would
        if returncode < 0:
            return 128 - returncode
        return returncode
