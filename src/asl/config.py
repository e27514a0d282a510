"""Configuration and paths for asl."""

import json
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from asl.distros import DEFAULT_DISTRO_ID


CONFIG_FILENAME = "config.json"
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


class ConfigError(Exception):
    """Error reading or writing the asl state directory."""

    pass


def get_asl_home() -> Path:
    """Get the asl home directory."""
    home = os.environ.get("ASL_HOME")
    if home:
        return Path(home)
    return Path.home() / ".asl"


def format_timestamp(value: datetime) -> str:
    """Encode a timestamp as ISO-8601 UTC with second precision."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def parse_timestamp(value: str) -> datetime:
    """Decode an ISO-8601 timestamp written by format_timestamp."""
    if not isinstance(value, str):
        raise ValueError(f"timestamp must be a string, got {value!r}")
    # fromisoformat only accepts a trailing Z from 3.11 on
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def utcnow() -> datetime:
    """Current time, truncated to what the config file can store."""
    return datetime.now(timezone.utc).replace(microsecond=0)


@dataclass
class DistroInfo:
    """An installed distribution as recorded in config.json."""

    path: str  # tagged local image, e.g. "asl-ubuntu:latest"
    name: str  # e.g. "Ubuntu 22.04"
    created: datetime

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "name": self.name,
            "created": format_timestamp(self.created),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "DistroInfo":
        return cls(
            path=data["path"],
            name=data["name"],
            created=parse_timestamp(data["created"]),
        )


@dataclass
class Config:
    """The whole asl state: a default distro and the installed distros."""

    default_distro: str = DEFAULT_DISTRO_ID
    distros: dict[str, DistroInfo] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "defaultDistro": self.default_distro,
            "distros": {key: info.to_dict() for key, info in self.distros.items()},
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        distros = data.get("distros", {})
        if not isinstance(distros, dict):
            raise ValueError("'distros' must be an object")
        return cls(
            default_distro=data.get("defaultDistro", DEFAULT_DISTRO_ID),
            distros={key: DistroInfo.from_dict(value) for key, value in distros.items()},
        )


class ConfigStore:
    """Reads and writes config.json under the asl home directory.

    The file is always read whole and rewritten whole. There is no locking,
    so two concurrent asl processes can overwrite each other's changes.
    """

    def __init__(self, home: Path | None = None):
        self.home = home if home is not None else get_asl_home()

    @property
    def containers_dir(self) -> Path:
        return self.home / "containers"

    @property
    def images_dir(self) -> Path:
        return self.home / "images"

    @property
    def config_file(self) -> Path:
        return self.home / CONFIG_FILENAME

    def initialize(self) -> None:
        """Create the state directories and a default config if missing."""
        try:
            self.home.mkdir(parents=True, exist_ok=True)
            self.containers_dir.mkdir(parents=True, exist_ok=True)
            self.images_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigError(f"Failed to create {self.home}: {e}") from e

        if not self.config_file.exists():
            self.save(Config())

    def load(self) -> Config:
        try:
            raw = self.config_file.read_bytes()
        except OSError as e:
            raise ConfigError(f"Failed to read {self.config_file}: {e}") from e

        # UnicodeDecodeError and JSONDecodeError are both ValueErrors
        try:
            data = json.loads(raw.decode("utf-8"))
            if not isinstance(data, dict):
                raise ValueError("expected a JSON object")
            return Config.from_dict(data)
        except (ValueError, KeyError, TypeError) as e:
            raise ConfigError(f"Malformed config file {self.config_file}: {e}") from e

    def save(self, config: Config) -> None:
        text = json.dumps(config.to_dict(), indent=2, sort_keys=True)
        try:
            self.config_file.write_text(text + "\n")
        except OSError as e:
            raise ConfigError(f"Failed to write {self.config_file}: {e}") from e
