"""Constants used throughout the toolbox launcher."""


# Built-in defaults, overridable from the settings file
DEFAULT_REGISTRY = "registry.fedoraproject.org"
DEFAULT_IMAGE = "fedora-toolbox:latest"
DEFAULT_SHELL = "/bin/bash"
CONTAINER_NAME_PREFIX = "toolbox"

# Settings file
TOOLBOXRC_NAME = ".toolboxrc"
RC_SHELL = "sh"
OVERRIDABLE_SETTINGS = {
    "REGISTRY": "registry",
    "IMAGE": "image",
    "TOOLBOX_NAME": "name",
    "TOOLBOX_SHELL": "shell",
}

# Environment
RUNTIME_URL_ENV = "TOOLBOX_RUNTIME_URL"
LOG_LEVEL_ENV = "TOOLBOX_LOG_LEVEL"
FORWARDED_ENV_VARS = ["LANG", "TERM"]

# Runtime invocation
PODMAN_COMMAND = "podman"
DOCKER_COMMAND = "docker"
ELEVATE_COMMAND = ["sudo"]
RUN_LABEL = "RUN"
NO_VALUE = "<no value>"

# Container creation
CONTAINER_HOSTNAME = "toolbox"
HOST_ROOT_MOUNT = "/media/root"
CONTAINER_NETWORK = "host"
SECURITY_OPTS = ["label=disable"]
