import pytest
from click.testing import CliRunner

from toolbox_container.models.config import ToolboxConfig
from toolbox_container.models.container import ContainerStatus
from toolbox_container.services.exceptions import (
    ContainerCreateError,
    ContainerStartError,
    ImagePullError,
    RunlabelError,
)
from toolbox_container.services.runtime import RuntimeService


class FakeRuntime(RuntimeService):
    """In-memory runtime that records every call it receives."""

    def __init__(self, image_present=True, container_present=False, runlabel="",
                 states=("configured",), fail=(), exec_code=0):
        self.calls = []
        self.image_present = image_present
        self.container_present = container_present
        self.runlabel = runlabel
        self.states = list(states)
        self.fail = set(fail)
        self.exec_code = exec_code

    @property
    def ops(self):
        return [call[0] for call in self.calls]

    def count(self, op):
        return self.ops.count(op)

    def image_exists(self, image):
        self.calls.append(("image_exists", image))
        return self.image_present

    def pull_image(self, image):
        self.calls.append(("pull_image", image))
        if "pull" in self.fail:
            raise ImagePullError(image, exit_code=125)
        self.image_present = True

    def image_runlabel(self, image):
        self.calls.append(("image_runlabel", image))
        return self.runlabel

    def container_exists(self, name):
        self.calls.append(("container_exists", name))
        return self.container_present

    def container_status(self, name):
        self.calls.append(("container_status", name))
        return ContainerStatus.parse(self.states[0])

    def create_container(self, name, image):
        self.calls.append(("create_container", name, image))
        if "create" in self.fail:
            raise ContainerCreateError(name)
        self.container_present = True
        self.states = ["configured"]

    def start_container(self, name):
        self.calls.append(("start_container", name))
        if "start" in self.fail:
            raise ContainerStartError(name)
        self.states = ["running"]

    def stop_container(self, name):
        self.calls.append(("stop_container", name))
        if "stop" in self.fail:
            raise RuntimeError("runtime went away")

    def container_runlabel(self, name, image):
        self.calls.append(("container_runlabel", name, image))
        if "runlabel" in self.fail:
            raise RunlabelError(image)
        self.container_present = True

    def exec_in_container(self, name, command, environment=None):
        self.calls.append(("exec_in_container", name, list(command), dict(environment or {})))
        return self.exec_code

    def remove_hint(self, name):
        return f"podman rm {name}"


@pytest.fixture
def cli_runner():
    """Provides a Click CLI runner for testing commands."""
    return CliRunner()


@pytest.fixture
def make_runtime():
    """Factory for recording fake runtimes."""
    return FakeRuntime


@pytest.fixture
def toolbox_config():
    """Provides a resolved configuration."""
    return ToolboxConfig(
        registry="registry.example.com",
        image="tools:latest",
        name="toolbox-tester",
        shell="/bin/bash",
    )


@pytest.fixture
def home_dir(tmp_path, monkeypatch):
    """Points HOME at an empty temporary directory."""
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USER", "tester")
    monkeypatch.delenv("TOOLBOX_RUNTIME_URL", raising=False)
    return tmp_path
