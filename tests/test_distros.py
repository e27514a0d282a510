"""Tests for the distro catalog."""

from asl.distros import DISTROS, distro_ids, get_distro, list_distros


def test_catalog_is_closed():
    assert distro_ids() == ["ubuntu", "ubuntu-24.04", "debian", "alpine", "fedora"]
    assert len(list_distros()) == 5


def test_lookup():
    debian = get_distro("debian")
    assert debian is not None
    assert debian.display_name == "Debian 12"
    assert debian.image == "docker.io/library/debian:12"
    assert debian.image_name == "asl-debian:latest"


def test_lookup_unknown():
    assert get_distro("arch") is None
    assert get_distro("Ubuntu") is None
    assert get_distro("") is None


def test_every_entry_is_keyed_by_its_name():
    for key, distro in DISTROS.items():
        assert distro.name == key
        assert distro.image.startswith("docker.io/library/")
        assert distro.image_name == f"asl-{key}:latest"
