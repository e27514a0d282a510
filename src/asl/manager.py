"""Distro management - install, list, uninstall and enter distributions."""

import uuid
from collections.abc import Callable

from rich.console import Console

from asl.config import Config, ConfigStore, DistroInfo, utcnow
from asl.distros import Distro, get_distro
from asl.runtime import ContainerRuntime

DATE_FORMAT = "%b %d, %Y %I:%M %p"
AFFIRMATIVE = ("y", "yes")


class DistroError(Exception):
    """Error during distro operations."""

    pass


class InstallError(DistroError):
    pass


class UninstallError(DistroError):
    pass


class NotInstalledError(DistroError):
    pass


class InvalidSelectionError(DistroError):
    pass


def _temporary_container_name(distro: Distro) -> str:
    # Unique per attempt so a retried or parallel install never collides
    return f"asl-install-{distro.name}-{uuid.uuid4().hex[:8]}"


class DistroManager:
    """Ties the config store and the container runtime together.

    All state lives in the store; the manager reloads it at the start of
    every operation and writes it back whole after a change.
    """

    def __init__(
        self,
        store: ConfigStore,
        runtime: ContainerRuntime,
        console: Console | None = None,
        read_input: Callable[[str], str] | None = None,
    ):
        self.store = store
        self.runtime = runtime
        self.console = console or Console()
        self.read_input = read_input or self.console.input

    def _ask(self, prompt: str) -> str | None:
        try:
            return self.read_input(prompt)
        except EOFError:
            return None

    def report_empty(self) -> None:
        self.console.print("[yellow]No distributions installed.[/yellow]")
        self.console.print("Install one with: asl install <distro>")

    def install(self, distro: Distro, force: bool = False) -> bool:
        """
        Pull a distro image and tag it as asl-<distro>:latest.

        Returns False when the distro is already installed and force is not
        set, True after a successful install. The config is only written once
        both the pull and the tag succeeded.
        """
        config = self.store.load()

        if distro.name in config.distros and not force:
            self.console.print(
                f"[yellow]Distribution {distro.name} is already installed[/yellow]"
            )
            self.console.print("Use --force to reinstall")
            return False

        self.console.print(f"[blue]Installing {distro.display_name}...[/blue]")
        self.console.print(
            f"[blue]This will pull and run {distro.image} to create the image[/blue]"
        )
        self.console.print(
            "[yellow]First run may take a minute to download the image...[/yellow]"
        )

        result = self.runtime.pull(distro.image, _temporary_container_name(distro))
        if not result.ok:
            raise InstallError(
                "Failed to pull image. Make sure container system is running: "
                "container system start"
            )

        self.console.print(f"Tagging image as {distro.image_name}...")
        result = self.runtime.tag(distro.image, distro.image_name)
        if not result.ok:
            raise InstallError(
                f"Failed to tag {distro.image} as {distro.image_name} "
                f"(exit code {result.returncode})"
            )

        config.distros[distro.name] = DistroInfo(
            path=distro.image_name,
            name=distro.display_name,
            created=utcnow(),
        )
        self.store.save(config)

        self.console.print(f"[green]{distro.display_name} installed successfully[/green]")
        self.console.print(
            f"[yellow]Run 'asl {distro.name}' to enter the distribution[/yellow]"
        )
        return True

    def list_installed(self) -> list[tuple[str, str]]:
        """Installed distro ids with their local install time, sorted by id."""
        config = self.store.load()
        return [
            (name, info.created.astimezone().strftime(DATE_FORMAT))
            for name, info in sorted(config.distros.items())
        ]

    def is_image_present(self, distro: Distro) -> bool:
        result = self.runtime.list_images()
        return distro.image_name in result.stdout

    def uninstall(self, distro: Distro) -> bool:
        """
        Remove a distro's tagged image and forget it.

        Returns False if the user declines the confirmation prompt. The
        config entry is only dropped when the runtime removed the image.
        """
        if not self.is_image_present(distro):
            raise NotInstalledError(f"Distribution '{distro.name}' is not installed")

        response = self._ask(
            f"Are you sure you want to uninstall {distro.name}? (y/N): "
        )
        if response is None or response.strip().lower() not in AFFIRMATIVE:
            self.console.print("Cancelled")
            return False

        self.console.print(f"[yellow]Uninstalling {distro.name}...[/yellow]")

        result = self.runtime.remove_image(distro.image_name)
        if not result.ok:
            raise UninstallError(
                f"Failed to remove image {distro.image_name} "
                f"(exit code {result.returncode})"
            )

        config = self.store.load()
        config.distros.pop(distro.name, None)
        self.store.save(config)

        self.console.print(f"[green]{distro.name} uninstalled[/green]")
        return True

    def enter(self, distro: Distro) -> None:
        """Replace this process with a login shell inside the distro."""
        self.console.print(f"[green]Entering {distro.display_name}...[/green]")
        self.console.print(
            "[yellow]Tip: Your home directory is available at /host[/yellow]"
        )
        self.runtime.exec_interactive(distro.image_name)

    def select(self, names: list[str]) -> str:
        """Show a numbered menu of names and return the one picked."""
        self.console.print("[blue]Select a distribution:[/blue]")
        for index, name in enumerate(names, start=1):
            self.console.print(f"  {index}) {name}")

        response = self._ask("Enter number: ")
        try:
            selection = int(response.strip()) if response is not None else 0
        except ValueError:
            selection = 0

        if not 1 <= selection <= len(names):
            raise InvalidSelectionError("Invalid selection")
        return names[selection - 1]

    def resolve_installed(self, config: Config) -> Distro | None:
        """Pick the distro to enter when none was named on the command line."""
        names = sorted(config.distros)
        if not names:
            return None

        name = names[0] if len(names) == 1 else self.select(names)
        distro = get_distro(name)
        if distro is None:
            raise DistroError(f"Invalid distribution: {name}")
        return distro

    def enter_interactive(self) -> None:
        distro = self.resolve_installed(self.store.load())
        if distro is None:
            self.report_empty()
            return
        self.enter(distro)
