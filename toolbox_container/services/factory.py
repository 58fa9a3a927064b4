"""Selection of the runtime service for a configuration."""

import logging

from ..models.config import ToolboxConfig
from .docker_service import DockerService
from .podman_service import PodmanService
from .runtime import RuntimeService

logger = logging.getLogger(__name__)


def get_runtime_service(config: ToolboxConfig) -> RuntimeService:
    """Build the runtime service matching the configuration.

    Raises:
        ContainerRuntimeError: If the configured API endpoint is unreachable
    """
    if config.runtime_url:
        logger.debug(f"Using container runtime API at {config.runtime_url}")
        return DockerService(base_url=config.runtime_url, elevated=config.privileged)
    return PodmanService(elevated=config.privileged)
