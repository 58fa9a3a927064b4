"""Docker service for running toolbox operations against a Docker-compatible API."""

import logging
import shlex
import subprocess
from string import Template
from typing import Dict, List, Optional, Sequence

import docker
import docker.errors
from docker.utils import parse_repository_tag

from ..core.constants import (
    CONTAINER_HOSTNAME,
    CONTAINER_NETWORK,
    DOCKER_COMMAND,
    ELEVATE_COMMAND,
    HOST_ROOT_MOUNT,
    PODMAN_COMMAND,
    RUN_LABEL,
    SECURITY_OPTS,
)
from ..models.container import ContainerState, ContainerStatus
from .exceptions import (
    ContainerCreateError,
    ContainerRuntimeError,
    ContainerStartError,
    ImagePullError,
    RunlabelError,
)
from .runtime import RuntimeService

logger = logging.getLogger(__name__)

# The compat API reports podman's "configured" containers as "created"
API_STATUS_ALIASES = {
    "created": ContainerState.CONFIGURED.value,
}


class DockerService(RuntimeService):
    """Runtime service backed by the Docker SDK.

    Works with any endpoint speaking the Docker Engine API, including
    podman's API socket. Interactive sessions and run labels still go
    through a CLI, pointed at the same endpoint, because a pseudo-terminal
    cannot be attached through the SDK.

    ``elevated`` only applies to those CLI invocations. SDK calls use the
    caller's own access to the API socket.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        elevated: bool = False,
        executable: str = DOCKER_COMMAND,
    ):
        """Initialize Docker service and test connection.

        Args:
            base_url: API endpoint, e.g. ``unix:///run/podman/podman.sock``;
                the environment (``DOCKER_HOST``) is used when omitted
            elevated: Prefix CLI invocations with sudo; SDK calls are unaffected
            executable: CLI used for interactive sessions
        """
        self.base_url = base_url
        self.elevated = elevated
        self.executable = executable
        try:
            if base_url:
                self.client = docker.DockerClient(base_url=base_url)
            else:
                self.client = docker.from_env()
            self.client.ping()
        except docker.errors.DockerException as e:
            if "connection refused" in str(e).lower() or "cannot connect" in str(e).lower():
                raise ContainerRuntimeError(
                    "Container runtime API is not running. Start the podman or docker service."
                ) from e
            else:
                raise ContainerRuntimeError(
                    f"Failed to connect to container runtime API: {e}"
                ) from e

    def _cli_command(self, args: List[str]) -> List[str]:
        cmd = list(ELEVATE_COMMAND) if self.elevated else []
        cmd.append(self.executable)
        if self.base_url:
            cmd.extend(['--host', self.base_url])
        return cmd + args

    def _run_cli(self, cmd: List[str]) -> int:
        logger.debug(f"Running: {shlex.join(cmd)}")
        try:
            return subprocess.run(cmd, check=False).returncode
        except OSError as e:
            raise ContainerRuntimeError(f"Unable to run {cmd[0]}: {e}") from e

    def image_exists(self, image: str) -> bool:
        try:
            self.client.images.get(image)
            return True
        except docker.errors.ImageNotFound:
            return False
        except docker.errors.DockerException as e:
            logger.warning(f"Error checking image existence: {e}")
            return False

    def pull_image(self, image: str) -> None:
        repository, tag = parse_repository_tag(image)
        logger.info(f"Pulling image: {image}")
        try:
            self.client.images.pull(repository, tag=tag or 'latest')
        except docker.errors.DockerException as e:
            logger.error(f"Pull failed: {e}")
            raise ImagePullError(image) from e

    def image_runlabel(self, image: str) -> str:
        try:
            labels = self.client.images.get(image).labels or {}
        except docker.errors.DockerException:
            return ""
        return (labels.get(RUN_LABEL) or "").strip()

    def container_exists(self, name: str) -> bool:
        try:
            self.client.containers.get(name)
            return True
        except docker.errors.NotFound:
            return False
        except docker.errors.DockerException as e:
            logger.warning(f"Error checking container existence: {e}")
            return False

    def container_status(self, name: str) -> ContainerStatus:
        try:
            status = self.client.containers.get(name).status
        except docker.errors.DockerException as e:
            logger.debug(f"Error inspecting container {name}: {e}")
            return ContainerStatus.parse("")
        return ContainerStatus.parse(API_STATUS_ALIASES.get(status, status))

    def create_container(self, name: str, image: str) -> None:
        try:
            self.client.containers.create(
                image=image,
                name=name,
                hostname=CONTAINER_HOSTNAME,
                network_mode=CONTAINER_NETWORK,
                privileged=True,
                security_opt=list(SECURITY_OPTS),
                tty=True,
                volumes={'/': {'bind': HOST_ROOT_MOUNT, 'mode': 'rw,rslave'}},
            )
        except docker.errors.DockerException as e:
            logger.error(f"Create failed: {e}")
            raise ContainerCreateError(name) from e
        logger.info(f"Created container: {name}")

    def start_container(self, name: str) -> None:
        try:
            self.client.containers.get(name).start()
        except docker.errors.DockerException as e:
            logger.error(f"Start failed: {e}")
            raise ContainerStartError(name) from e
        logger.info(f"Started container: {name}")

    def stop_container(self, name: str) -> None:
        try:
            self.client.containers.get(name).stop()
        except docker.errors.DockerException as e:
            logger.debug(f"Stop of {name} failed: {e}")

    def runlabel_command(self, label: str, name: str, image: str) -> List[str]:
        """Expand a RUN label into the host command it describes.

        ``$IMAGE``/``$NAME`` and bare ``IMAGE``/``NAME`` words are replaced,
        and a leading ``docker`` or ``podman`` is pointed at this endpoint.
        """
        expanded = Template(label).safe_substitute(IMAGE=image, NAME=name)
        words = [
            image if word == 'IMAGE' else name if word == 'NAME' else word
            for word in shlex.split(expanded)
        ]
        if words and words[0] in (DOCKER_COMMAND, PODMAN_COMMAND):
            return self._cli_command(words[1:])
        return words

    def container_runlabel(self, name: str, image: str) -> None:
        label = self.image_runlabel(image)
        if not label:
            raise RunlabelError(image)
        try:
            returncode = self._run_cli(self.runlabel_command(label, name, image))
        except ContainerRuntimeError as e:
            raise RunlabelError(image) from e
        if returncode != 0:
            raise RunlabelError(image)

    def exec_in_container(
        self,
        name: str,
        command: Sequence[str],
        environment: Optional[Dict[str, str]] = None,
    ) -> int:
        return self._run_cli(
            self._cli_command(self.build_exec_args(name, command, environment))
        )

    def remove_hint(self, name: str) -> str:
        return shlex.join(self._cli_command(['rm', name]))
