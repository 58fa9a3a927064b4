"""Tests for Podman service."""

import subprocess
from unittest.mock import patch

import pytest

from toolbox_container.models.container import ContainerState
from toolbox_container.services.exceptions import (
    ContainerCreateError,
    ContainerRuntimeError,
    ContainerStartError,
    ImagePullError,
    RunlabelError,
)
from toolbox_container.services.podman_service import PodmanService

IMAGE = "registry.example.com/tools:latest"
NAME = "toolbox-tester"


def completed(returncode=0, stdout="", stderr=""):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


@patch('toolbox_container.services.podman_service.subprocess.run')
class TestPodmanService:
    """Test cases for PodmanService."""

    def test_image_exists(self, mock_run):
        mock_run.return_value = completed(0)

        assert PodmanService().image_exists(IMAGE) is True
        assert mock_run.call_args[0][0] == ['podman', 'inspect', '--type', 'image', IMAGE]

    def test_image_missing(self, mock_run):
        mock_run.return_value = completed(125, stderr="no such object")

        assert PodmanService().image_exists(IMAGE) is False

    def test_queries_treat_missing_podman_as_absent(self, mock_run):
        mock_run.side_effect = FileNotFoundError("podman")
        service = PodmanService()

        assert service.image_exists(IMAGE) is False
        assert service.container_exists(NAME) is False
        assert service.image_runlabel(IMAGE) == ""
        assert service.container_status(NAME).state is ContainerState.UNKNOWN

    def test_pull_success(self, mock_run):
        mock_run.return_value = completed(0)

        PodmanService().pull_image(IMAGE)

        assert mock_run.call_args[0][0] == ['podman', 'pull', IMAGE]
        assert 'capture_output' not in mock_run.call_args[1]

    def test_pull_failure_keeps_exit_code(self, mock_run):
        mock_run.return_value = completed(125)

        with pytest.raises(ImagePullError) as exc_info:
            PodmanService().pull_image(IMAGE)

        assert exc_info.value.exit_code == 125
        assert IMAGE in str(exc_info.value)

    def test_pull_without_podman(self, mock_run):
        mock_run.side_effect = FileNotFoundError("podman")

        with pytest.raises(ContainerRuntimeError, match="Unable to run podman"):
            PodmanService().pull_image(IMAGE)

    @pytest.mark.parametrize("returncode, stdout, expected", [
        (0, "podman run -it --name NAME IMAGE\n", "podman run -it --name NAME IMAGE"),
        (0, "command: podman run IMAGE\n", "podman run IMAGE"),
        (0, "<no value>\n", ""),
        (0, "", ""),
        (125, "", ""),
    ])
    def test_image_runlabel(self, mock_run, returncode, stdout, expected):
        mock_run.return_value = completed(returncode, stdout=stdout)

        assert PodmanService().image_runlabel(IMAGE) == expected
        assert mock_run.call_args[0][0] == [
            'podman', 'container', 'runlabel', '--display', 'RUN', IMAGE
        ]

    def test_image_runlabel_with_undecodable_output(self, mock_run):
        def run(cmd, **kwargs):
            stdout = b"podman run \xff IMAGE\n".decode('utf-8', kwargs.get('errors', 'strict'))
            return completed(0, stdout=stdout)
        mock_run.side_effect = run

        assert PodmanService().image_runlabel(IMAGE) == "podman run � IMAGE"

    def test_container_exists(self, mock_run):
        mock_run.return_value = completed(0)

        assert PodmanService().container_exists(NAME) is True
        assert mock_run.call_args[0][0] == ['podman', 'inspect', '--type', 'container', NAME]

    @pytest.mark.parametrize("stdout, state", [
        ("configured\n", ContainerState.CONFIGURED),
        ("exited\n", ContainerState.EXITED),
        ("stopped\n", ContainerState.STOPPED),
        ("running\n", ContainerState.RUNNING),
        ("paused\n", ContainerState.UNKNOWN),
    ])
    def test_container_status(self, mock_run, stdout, state):
        mock_run.return_value = completed(0, stdout=stdout)

        status = PodmanService().container_status(NAME)

        assert status.state is state
        assert status.raw == stdout.strip()
        assert mock_run.call_args[0][0] == [
            'podman', 'inspect', '--type', 'container',
            '--format', '{{.State.Status}}', NAME,
        ]

    def test_container_status_when_inspect_fails(self, mock_run):
        mock_run.return_value = completed(125)

        status = PodmanService().container_status(NAME)

        assert status.state is ContainerState.UNKNOWN
        assert status.raw == ""

    def test_create_container_options(self, mock_run):
        mock_run.return_value = completed(0)

        PodmanService().create_container(NAME, IMAGE)

        assert mock_run.call_args[0][0] == [
            'podman', 'create',
            '--hostname', 'toolbox',
            '--name', NAME,
            '--network', 'host',
            '--privileged',
            '--security-opt', 'label=disable',
            '--tty',
            '--volume', '/:/media/root:rslave',
            IMAGE,
        ]
        assert mock_run.call_args[1]['stderr'] == subprocess.STDOUT

    def test_create_failure(self, mock_run):
        mock_run.return_value = completed(125)

        with pytest.raises(ContainerCreateError, match=f"failed to create container '{NAME}'"):
            PodmanService().create_container(NAME, IMAGE)

    def test_start_container(self, mock_run):
        mock_run.return_value = completed(0)

        PodmanService().start_container(NAME)

        assert mock_run.call_args[0][0] == ['podman', 'start', NAME]

    def test_start_failure(self, mock_run):
        mock_run.return_value = completed(1)

        with pytest.raises(ContainerStartError) as exc_info:
            PodmanService().start_container(NAME)

        assert exc_info.value.exit_code == 1

    def test_stop_discards_output_and_failures(self, mock_run):
        mock_run.return_value = completed(125)

        PodmanService().stop_container(NAME)

        assert mock_run.call_args[0][0] == ['podman', 'stop', NAME]
        assert mock_run.call_args[1]['stdout'] == subprocess.DEVNULL
        assert mock_run.call_args[1]['stderr'] == subprocess.DEVNULL

    def test_container_runlabel(self, mock_run):
        mock_run.return_value = completed(0)

        PodmanService().container_runlabel(NAME, IMAGE)

        assert mock_run.call_args[0][0] == [
            'podman', 'container', 'runlabel', '--name', NAME, 'RUN', IMAGE
        ]

    def test_container_runlabel_failure(self, mock_run):
        mock_run.return_value = completed(1)

        with pytest.raises(RunlabelError, match=f"failed to runlabel on image '{IMAGE}'"):
            PodmanService().container_runlabel(NAME, IMAGE)

    def test_exec_in_container(self, mock_run):
        mock_run.return_value = completed(3)

        exit_code = PodmanService().exec_in_container(
            NAME, ['ls', '-la'], {'LANG': 'C.UTF-8', 'TERM': 'xterm'}
        )

        assert exit_code == 3
        assert mock_run.call_args[0][0] == [
            'podman', 'exec',
            '--env', 'LANG=C.UTF-8',
            '--env', 'TERM=xterm',
            '--tty', '--interactive',
            NAME, 'ls', '-la',
        ]

    def test_elevated_prefixes_every_call(self, mock_run):
        mock_run.return_value = completed(0, stdout="running\n")
        service = PodmanService(elevated=True)

        service.image_exists(IMAGE)
        service.pull_image(IMAGE)
        service.image_runlabel(IMAGE)
        service.container_exists(NAME)
        service.container_status(NAME)
        service.create_container(NAME, IMAGE)
        service.start_container(NAME)
        service.container_runlabel(NAME, IMAGE)
        service.exec_in_container(NAME, ['/bin/bash'])
        service.stop_container(NAME)

        assert mock_run.call_count == 10
        for call in mock_run.call_args_list:
            assert call[0][0][:2] == ['sudo', 'podman']

    def test_remove_hint(self, mock_run):
        assert PodmanService().remove_hint(NAME) == f"podman rm {NAME}"
        assert PodmanService(elevated=True).remove_hint(NAME) == f"sudo podman rm {NAME}"
        mock_run.assert_not_called()
