"""Podman service for running toolbox operations through the podman CLI."""

import logging
import shlex
import subprocess
from typing import Dict, List, Optional, Sequence

from ..core.constants import (
    CONTAINER_HOSTNAME,
    CONTAINER_NETWORK,
    ELEVATE_COMMAND,
    HOST_ROOT_MOUNT,
    NO_VALUE,
    PODMAN_COMMAND,
    RUN_LABEL,
    SECURITY_OPTS,
)
from ..models.container import ContainerStatus
from .exceptions import (
    ContainerCreateError,
    ContainerRuntimeError,
    ContainerStartError,
    ImagePullError,
    RunlabelError,
)
from .runtime import RuntimeService

logger = logging.getLogger(__name__)


class PodmanService(RuntimeService):
    """Runtime service that shells out to podman, optionally through sudo."""

    def __init__(self, elevated: bool = False, executable: str = PODMAN_COMMAND):
        """Initialize podman service.

        Args:
            elevated: Prefix every podman invocation with sudo
            executable: Name or path of the podman binary
        """
        self.elevated = elevated
        self.executable = executable

    def _command(self, args: List[str]) -> List[str]:
        prefix = list(ELEVATE_COMMAND) if self.elevated else []
        return prefix + [self.executable] + args

    def _run_podman_command(
        self, args: List[str], **kwargs
    ) -> subprocess.CompletedProcess:
        """Run a podman command without checking its return code.

        Args:
            args: Podman command arguments
            **kwargs: Passed through to ``subprocess.run``

        Returns:
            Completed process result

        Raises:
            ContainerRuntimeError: If podman cannot be executed at all
        """
        cmd = self._command(args)
        logger.debug(f"Running: {shlex.join(cmd)}")
        try:
            return subprocess.run(cmd, check=False, **kwargs)
        except OSError as e:
            raise ContainerRuntimeError(
                f"Unable to run {self.executable}: {e}"
            ) from e

    def _query(self, args: List[str]) -> Optional[subprocess.CompletedProcess]:
        """Run a read-only podman command, returning None if podman is unusable."""
        try:
            return self._run_podman_command(
                args, capture_output=True, text=True, errors='replace'
            )
        except ContainerRuntimeError as e:
            logger.warning(f"Container runtime query failed: {e}")
            return None

    def image_exists(self, image: str) -> bool:
        result = self._query(['inspect', '--type', 'image', image])
        return result is not None and result.returncode == 0

    def pull_image(self, image: str) -> None:
        """Pull an image, letting podman report progress and errors directly.

        Raises:
            ImagePullError: With podman's exit code if the pull fails
        """
        result = self._run_podman_command(['pull', image])
        if result.returncode != 0:
            raise ImagePullError(image, exit_code=result.returncode)

    def image_runlabel(self, image: str) -> str:
        result = self._query(
            ['container', 'runlabel', '--display', RUN_LABEL, image]
        )
        if result is None or result.returncode != 0:
            return ""
        label = result.stdout.strip()
        if label.startswith('command:'):
            label = label[len('command:'):].strip()
        if label == NO_VALUE:
            return ""
        return label

    def container_exists(self, name: str) -> bool:
        result = self._query(['inspect', '--type', 'container', name])
        return result is not None and result.returncode == 0

    def container_status(self, name: str) -> ContainerStatus:
        result = self._query(
            ['inspect', '--type', 'container', '--format', '{{.State.Status}}', name]
        )
        if result is None or result.returncode != 0:
            return ContainerStatus.parse("")
        return ContainerStatus.parse(result.stdout)

    def create_container(self, name: str, image: str) -> None:
        """Create the toolbox container with host-level access.

        Raises:
            ContainerCreateError: If podman fails to create the container
        """
        args = [
            'create',
            '--hostname', CONTAINER_HOSTNAME,
            '--name', name,
            '--network', CONTAINER_NETWORK,
            '--privileged',
        ]
        for opt in SECURITY_OPTS:
            args.extend(['--security-opt', opt])
        args.extend([
            '--tty',
            '--volume', f'/:{HOST_ROOT_MOUNT}:rslave',
            image,
        ])
        try:
            result = self._run_podman_command(args, stderr=subprocess.STDOUT)
        except ContainerRuntimeError as e:
            raise ContainerCreateError(name) from e
        if result.returncode != 0:
            raise ContainerCreateError(name)
        logger.info(f"Created container: {name}")

    def start_container(self, name: str) -> None:
        try:
            result = self._run_podman_command(['start', name], stderr=subprocess.STDOUT)
        except ContainerRuntimeError as e:
            raise ContainerStartError(name) from e
        if result.returncode != 0:
            raise ContainerStartError(name)
        logger.info(f"Started container: {name}")

    def stop_container(self, name: str) -> None:
        self._run_podman_command(
            ['stop', name],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )

    def container_runlabel(self, name: str, image: str) -> None:
        try:
            result = self._run_podman_command(
                ['container', 'runlabel', '--name', name, RUN_LABEL, image],
                stderr=subprocess.STDOUT,
            )
        except ContainerRuntimeError as e:
            raise RunlabelError(image) from e
        if result.returncode != 0:
            raise RunlabelError(image)

    def exec_in_container(
        self,
        name: str,
        command: Sequence[str],
        environment: Optional[Dict[str, str]] = None,
    ) -> int:
        args = self.build_exec_args(name, command, environment)
        return self._run_podman_command(args).returncode

    def remove_hint(self, name: str) -> str:
        return shlex.join(self._command(['rm', name]))
