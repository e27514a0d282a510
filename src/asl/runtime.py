"""Runtime execution - drive the external container CLI."""

import os
import subprocess
from dataclasses import dataclass
from pathlib import Path

DEFAULT_CONTAINER_BIN = "/usr/local/bin/container"
DEFAULT_TERM = "xterm-256color"
HOST_MOUNT = "/host"
CONTAINER_WORKDIR = "/root"
LOGIN_SHELL = ["/bin/bash", "-l"]
PULL_MARKER = "Image pulled successfully"


class ContainerError(Exception):
    """Error starting the container runtime."""

    pass


@dataclass
class RuntimeResult:
    returncode: int
    stdout: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def get_container_bin() -> str:
    """Get the path of the container runtime binary."""
    return os.environ.get("ASL_CONTAINER_BIN") or DEFAULT_CONTAINER_BIN


class ContainerRuntime:
    """Thin wrapper around the `container` command line tool.

    Every call blocks until the child exits; no timeout is applied. Non-zero
    exit codes are handed back to the caller, only a failure to start the
    binary at all raises ContainerError.
    """

    def __init__(self, binary: str | None = None):
        self.binary = binary or get_container_bin()

    def call(self, args: list[str], capture: bool = False) -> RuntimeResult:
        """Run the container binary with args and wait for it.

        Without capture the child inherits our stdout and stderr so the user
        sees its progress. With capture, stdout is buffered and returned.
        """
        try:
            result = subprocess.run(
                [self.binary, *args],
                stdout=subprocess.PIPE if capture else None,
                text=True,
            )
        except FileNotFoundError as e:
            raise ContainerError(f"Container runtime not found: {e}") from e
        except PermissionError as e:
            raise ContainerError(f"Permission denied: {e}") from e
        except OSError as e:
            raise ContainerError(f"Failed to run container: {e}") from e
        return RuntimeResult(result.returncode, result.stdout or "")

    def pull(self, image: str, container_name: str) -> RuntimeResult:
        # `container` has no plain pull, running a throwaway container fetches the image
        return self.call(
            ["run", "--rm", "--name", container_name, image, "echo", PULL_MARKER]
        )

    def tag(self, image: str, local_name: str) -> RuntimeResult:
        return self.call(["image", "tag", image, local_name])

    def list_images(self) -> RuntimeResult:
        return self.call(["image", "list"], capture=True)

    def remove_image(self, local_name: str) -> RuntimeResult:
        return self.call(["image", "rm", local_name])

    def interactive_args(
        self,
        local_name: str,
        home: Path | None = None,
        term: str | None = None,
    ) -> list[str]:
        """Build the `run` arguments for an interactive login shell."""
        home = home if home is not None else Path.home()
        if term is None:
            term = os.environ.get("TERM") or DEFAULT_TERM
        return [
            "run",
            "--rm",
            "--interactive",
            "--tty",
            "--volume",
            f"{home}:{HOST_MOUNT}",
            "--workdir",
            CONTAINER_WORKDIR,
            "--env",
            f"TERM={term}",
            local_name,
            *LOGIN_SHELL,
        ]

    def exec_interactive(self, local_name: str) -> None:
        """
        Replace the current process with an interactive container shell.

        The runtime takes over our pid, standard streams and controlling
        terminal, so this only returns by raising when execv itself fails.
        """
        argv = [
            os.path.basename(self.binary),
            *self.interactive_args(local_name),
        ]
        try:
            os.execv(self.binary, argv)
        except OSError as e:
            raise ContainerError(f"Failed to exec container: {e.strerror or e}") from e
