"""Service layer for abstracting container runtime operations."""

from .docker_service import DockerService
from .exceptions import (
    ContainerCreateError,
    ContainerRuntimeError,
    ContainerStartError,
    ImagePullError,
    RunlabelError,
    ServiceError,
    UnknownContainerStateError,
)
from .factory import get_runtime_service
from .podman_service import PodmanService
from .runtime import RuntimeService

__all__ = [
    "DockerService",
    "PodmanService",
    "RuntimeService",
    "get_runtime_service",
    "ServiceError",
    "ContainerRuntimeError",
    "ImagePullError",
    "ContainerCreateError",
    "ContainerStartError",
    "RunlabelError",
    "UnknownContainerStateError",
]
