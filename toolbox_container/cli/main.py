"""Main CLI entry point for the toolbox launcher."""

import logging
import os

import click
from rich.console import Console
from rich.logging import RichHandler

from ..core.constants import LOG_LEVEL_ENV
from ..core.toolbox_runner import ToolboxRunner
from ..services.exceptions import ServiceError
from ..services.factory import get_runtime_service
from ..utils.config_manager import ConfigManager

CONTEXT_SETTINGS = dict(
    help_option_names=['-h', '--help'],
    ignore_unknown_options=True,
    allow_interspersed_args=False,
)


def setup_logging() -> None:
    """Configure logging from the TOOLBOX_LOG_LEVEL environment variable."""
    level = logging.getLevelName(os.environ.get(LOG_LEVEL_ENV, 'WARNING').upper())
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_time=False, show_path=False)],
    )


@click.command(context_settings=CONTEXT_SETTINGS)
@click.option('-r', '--root', is_flag=True,
              help='Runs the container runtime via sudo as root. Must come first.')
@click.argument('command', nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def cli(ctx, root, command):
    """Launch a container to bring in your favorite debugging or admin tools.

    The toolbox container is a pet container and will be restarted on
    following runs. To remove the container and start fresh, remove it with
    the container runtime, e.g. `sudo podman rm toolbox-$USER`.

    Without COMMAND the configured shell is started.

    \b
    You may override the following variables in $HOME/.toolboxrc, which is
    sourced by sh:
    - REGISTRY: The registry to pull from. Default: registry.fedoraproject.org
    - IMAGE: The image and tag from the registry to pull. Default: fedora-toolbox:latest
    - TOOLBOX_NAME: The name to use for the local container. Default: toolbox-$USER
    - TOOLBOX_SHELL: Standard shell if no other commands are given. Default: /bin/bash

    \b
    Example toolboxrc:
    REGISTRY=my.special.registry.example.com
    IMAGE=debug-image:latest
    TOOLBOX_NAME=special-debug-container
    TOOLBOX_SHELL=/bin/bash
    """
    setup_logging()
    config = ConfigManager().load(privileged=root)

    try:
        runtime = get_runtime_service(config)
        exit_code = ToolboxRunner(config, runtime).run(list(command))
    except ServiceError as e:
        console = Console(stderr=True)
        console.print(f"Error: {e}", style="red", markup=False, highlight=False, soft_wrap=True)
        ctx.exit(e.exit_code)

    ctx.exit(exit_code)


if __name__ == '__main__':
    cli()
