"""Custom exceptions for service layer."""


class ServiceError(Exception):
    """Base exception for all service-related errors."""

    def __init__(self, message: str, exit_code: int = 1):
        super().__init__(message)
        self.exit_code = exit_code


class ContainerRuntimeError(ServiceError):
    """Exception raised when the container runtime cannot be reached."""

    pass


class ImagePullError(ContainerRuntimeError):
    """Exception raised when an image pull fails."""

    def __init__(self, image: str, exit_code: int = 1):
        super().__init__(f"failed to pull image '{image}'", exit_code)
        self.image = image


class ContainerCreateError(ContainerRuntimeError):
    """Exception raised when a container cannot be created."""

    def __init__(self, name: str):
        super().__init__(f"failed to create container '{name}'")
        self.name = name


class ContainerStartError(ContainerRuntimeError):
    """Exception raised when a container cannot be started."""

    def __init__(self, name: str):
        super().__init__(f"failed to start container '{name}'")
        self.name = name


class RunlabelError(ContainerRuntimeError):
    """Exception raised when an image's RUN label cannot be executed."""

    def __init__(self, image: str):
        super().__init__(f"failed to runlabel on image '{image}'")
        self.image = image


class UnknownContainerStateError(ServiceError):
    """Exception raised when a container reports a state we cannot handle."""

    def __init__(self, name: str, state: str):
        super().__init__(f"Container '{name}' in unknown state: '{state}'")
        self.name = name
        self.state = state
