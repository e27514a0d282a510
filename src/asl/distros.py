"""Distro definitions and metadata."""

from dataclasses import dataclass

IMAGE_PREFIX = "asl"
DEFAULT_DISTRO_ID = "ubuntu"


@dataclass(frozen=True)
class Distro:
    """Represents a supported Linux distribution."""

    name: str  # e.g., "ubuntu-24.04"
    display_name: str  # e.g., "Ubuntu 24.04"
    image: str  # e.g., "docker.io/library/ubuntu:24.04"

    @property
    def image_name(self) -> str:
        """The locally tagged image asl creates for this distro."""
        return f"{IMAGE_PREFIX}-{self.name}:latest"


# Upstream images are pulled through the container runtime and re-tagged
# under the asl- prefix. Adding a distro only means adding an entry here.
DISTROS: dict[str, Distro] = {
    "ubuntu": Distro(
        name="ubuntu",
        display_name="Ubuntu 22.04",
        image="docker.io/library/ubuntu:22.04",
    ),
    "ubuntu-24.04": Distro(
        name="ubuntu-24.04",
        display_name="Ubuntu 24.04",
        image="docker.io/library/ubuntu:24.04",
    ),
    "debian": Distro(
        name="debian",
        display_name="Debian 12",
        image="docker.io/library/debian:12",
    ),
    "alpine": Distro(
        name="alpine",
        display_name="Alpine 3.19",
        image="docker.io/library/alpine:3.19",
    ),
    "fedora": Distro(
        name="fedora",
        display_name="Fedora 39",
        image="docker.io/library/fedora:39",
    ),
}


def get_distro(name: str) -> Distro | None:
    """Get a distro by id, or None if it is not in the catalog."""
    return DISTROS.get(name)


def list_distros() -> list[Distro]:
    """List all available distros."""
    return list(DISTROS.values())


def distro_ids() -> list[str]:
    return list(DISTROS)
