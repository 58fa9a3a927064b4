"""Interface shared by container runtime services."""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence

from ..models.container import ContainerStatus


class RuntimeService(ABC):
    """Narrow set of operations the launcher needs from a container runtime.

    Queries never raise: a failed query reads as "absent" (or as an empty
    run label). Provisioning operations raise a ``ContainerRuntimeError``
    subclass on failure.
    """

    @abstractmethod
    def image_exists(self, image: str) -> bool:
        """Check if an image is present locally."""

    @abstractmethod
    def pull_image(self, image: str) -> None:
        """Pull an image from its registry."""

    @abstractmethod
    def image_runlabel(self, image: str) -> str:
        """Return the image's RUN label, or an empty string."""

    @abstractmethod
    def container_exists(self, name: str) -> bool:
        """Check if a container exists in any state."""

    @abstractmethod
    def container_status(self, name: str) -> ContainerStatus:
        """Get the current status of a container."""

    @abstractmethod
    def create_container(self, name: str, image: str) -> None:
        """Create the toolbox container."""

    @abstractmethod
    def start_container(self, name: str) -> None:
        """Start an existing container."""

    @abstractmethod
    def stop_container(self, name: str) -> None:
        """Stop a container, discarding all output."""

    @abstractmethod
    def container_runlabel(self, name: str, image: str) -> None:
        """Run the image's RUN label to spawn the container."""

    @abstractmethod
    def exec_in_container(
        self,
        name: str,
        command: Sequence[str],
        environment: Optional[Dict[str, str]] = None,
    ) -> int:
        """Run a command interactively in a running container.

        Returns:
            Exit code of the command
        """

    @abstractmethod
    def remove_hint(self, name: str) -> str:
        """Command line a user can run to remove the container."""

    @staticmethod
    def build_exec_args(
        name: str,
        command: Sequence[str],
        environment: Optional[Dict[str, str]] = None,
    ) -> List[str]:
        """Build ``exec`` arguments understood by both podman and docker CLIs."""
        args = ['exec']
        for key, value in (environment or {}).items():
            args.extend(['--env', f'{key}={value}'])
        args.extend(['--tty', '--interactive', name])
        args.extend(command)
        return args
