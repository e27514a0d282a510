"""CLI interface for asl."""

import sys

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from asl import __version__
from asl.config import ConfigError, ConfigStore
from asl.distros import DEFAULT_DISTRO_ID, distro_ids, get_distro
from asl.manager import DistroError, DistroManager
from asl.runtime import ContainerError, ContainerRuntime


console = Console()
err_console = Console(stderr=True)

DISTRO_CHOICE = click.Choice(distro_ids())


class DefaultCommandGroup(click.Group):
    """Click group that falls back to a default command.

    `asl` runs `asl enter`, and `asl ubuntu` runs `asl enter ubuntu`.
    """

    default_command = "enter"

    def parse_args(self, ctx, args):
        if not args or (args[0] not in self.commands and not args[0].startswith("-")):
            args = [self.default_command, *args]
        return super().parse_args(ctx, args)


def _fail(error: Exception) -> None:
    err_console.print(f"[red]Error: {escape(str(error))}[/red]")
    sys.exit(1)


def _prepare(manager: DistroManager) -> None:
    try:
        manager.store.initialize()
    except ConfigError as e:
        _fail(e)


@click.group(cls=DefaultCommandGroup)
@click.version_option(version=__version__, prog_name="asl")
@click.pass_context
def main(ctx: click.Context):
    """asl - Linux distributions as containers.

    asl pulls prebuilt distribution images through the `container` runtime,
    tags them under its own names and drops you into a login shell with
    your home directory mounted at /host.

    Examples:

        asl install debian        # Pull and tag Debian 12
        asl list                  # Show installed distributions
        asl debian                # Enter Debian
        asl                       # Pick an installed distribution
        asl uninstall debian      # Remove it again
    """
    if ctx.obj is None:
        ctx.obj = DistroManager(ConfigStore(), ContainerRuntime(), console=console)


@main.command()
@click.argument("distro", type=DISTRO_CHOICE, default=DEFAULT_DISTRO_ID)
@click.option("--force", "-f", is_flag=True, help="Force reinstall if already installed")
@click.pass_obj
def install(manager: DistroManager, distro: str, force: bool):
    """Install a Linux distribution.

    DISTRO is one of the supported ids (default: ubuntu).
    """
    _prepare(manager)
    try:
        manager.install(get_distro(distro), force=force)
    except (ConfigError, ContainerError, DistroError) as e:
        _fail(e)


@main.command("list")
@click.pass_obj
def list_cmd(manager: DistroManager):
    """List installed distributions."""
    _prepare(manager)
    try:
        installed = manager.list_installed()
    except ConfigError as e:
        _fail(e)

    if not installed:
        manager.report_empty()
        return

    table = Table(title="Installed distributions")
    table.add_column("Name", style="cyan")
    table.add_column("Installed", style="green")
    for name, installed_at in installed:
        table.add_row(name, installed_at)

    console.print(table)


@main.command()
@click.argument("distro", type=DISTRO_CHOICE)
@click.pass_obj
def uninstall(manager: DistroManager, distro: str):
    """Uninstall a distribution."""
    _prepare(manager)
    try:
        manager.uninstall(get_distro(distro))
    except (ConfigError, ContainerError, DistroError) as e:
        _fail(e)


@main.command()
@click.argument("distro", type=DISTRO_CHOICE, required=False)
@click.pass_obj
def enter(manager: DistroManager, distro: str | None):
    """Enter a distribution (interactive if no distro specified).

    On success the container runtime replaces this process, so nothing
    after this command runs.
    """
    _prepare(manager)
    try:
        if distro:
            manager.enter(get_distro(distro))
        else:
            manager.enter_interactive()
    except (ConfigError, ContainerError, DistroError) as e:
        _fail(e)


if __name__ == "__main__":
    main()
