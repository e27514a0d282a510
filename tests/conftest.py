"""Shared fixtures for asl tests."""

import io

import pytest
from rich.console import Console

from asl.config import ConfigStore
from asl.manager import DistroManager
from asl.runtime import ContainerRuntime, RuntimeResult


class FakeRuntime(ContainerRuntime):
    """In-memory container runtime that records every invocation.

    Tagging an image adds it to the `image list` output and removing it
    takes it out again, so install/uninstall sequences behave like the
    real tool. Set `returncodes["pull"]` (or "tag", "list", "rm") to make
    an operation fail.
    """

    def __init__(self, images: list[str] | None = None):
        super().__init__(binary="/fake/bin/container")
        self.images = list(images or [])
        self.calls: list[list[str]] = []
        self.exec_calls: list[str] = []
        self.returncodes: dict[str, int] = {}

    @staticmethod
    def _operation(args: list[str]) -> str:
        return args[1] if args[0] == "image" else args[0]

    def operations(self) -> list[str]:
        return [self._operation(args) for args in self.calls]

    def call(self, args: list[str], capture: bool = False) -> RuntimeResult:
        self.calls.append(list(args))
        operation = self._operation(args)
        returncode = self.returncodes.get(operation, 0)
        if returncode != 0:
            return RuntimeResult(returncode)

        if operation == "tag":
            self.images.append(args[3])
        elif operation == "rm":
            self.images.remove(args[2])
        elif operation == "list":
            lines = ["NAME  TAG  DIGEST"]
            lines += [f"{image}  abc123" for image in self.images]
            return RuntimeResult(0, "\n".join(lines) + "\n")
        return RuntimeResult(0)

    def exec_interactive(self, local_name: str) -> None:
        self.exec_calls.append(local_name)


class ScriptedInput:
    """Answers prompts from a fixed list of responses."""

    def __init__(self, *responses: str):
        self.responses = list(responses)
        self.prompts: list[str] = []

    def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.responses:
            raise EOFError
        return self.responses.pop(0)


@pytest.fixture
def store(tmp_path):
    store = ConfigStore(tmp_path / "asl-home")
    store.initialize()
    return store


@pytest.fixture
def runtime():
    return FakeRuntime()


@pytest.fixture
def output():
    return io.StringIO()


@pytest.fixture
def make_manager(store, runtime, output):
    def factory(*responses: str) -> DistroManager:
        console = Console(file=output, width=120, color_system=None)
        return DistroManager(store, runtime, console=console, read_input=ScriptedInput(*responses))

    return factory
