"""Configuration loading and management for quicker-git."""

import os
import re
import shutil
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

import tomli
import tomli_w

from .ui import warning

CONFIG_DIR_NAME = ".quicker-git"
SETTINGS_FILE = "config.toml"
BACKUP_DIR = "backup"


class ConfigError(Exception):
    """Raised when configuration cannot be written."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


def config_home() -> Path:
    """Directory holding shortcuts, settings and backups.

    QUICKER_GIT_HOME overrides the default ~/.quicker-git.
    """
    override = os.environ.get("QUICKER_GIT_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home() / CONFIG_DIR_NAME


def backup_timestamp(now: Optional[datetime] = None) -> str:
    """UTC ISO 8601 timestamp safe for file names (':' and '.' become '-')."""
    now = now or datetime.now(timezone.utc)
    stamp = now.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")
    return stamp.replace(":", "-").replace(".", "-")


def backup_file(source: Path, backup_dir: Path, kind: str) -> Optional[Path]:
    """Copy `source` to `<backup_dir>/<kind>-<timestamp><suffix>`.

    Args:
        source: File to back up
        backup_dir: Destination directory (created if missing)
        kind: Name prefix, e.g. "shortcuts"

    Returns:
        Path of the backup, or None when `source` does not exist

    Raises:
        OSError: If the copy fails
    """
    if not source.exists():
        return None

    backup_dir.mkdir(parents=True, exist_ok=True)
    target = backup_dir / f"{kind}-{backup_timestamp()}{source.suffix}"
    counter = 1
    while target.exists():
        target = backup_dir / f"{kind}-{backup_timestamp()}-{counter}{source.suffix}"
        counter += 1
    shutil.copy2(source, target)
    return target


def _section(data: dict, name: str) -> dict:
    value = data.get(name, {})
    if isinstance(value, dict):
        return value
    warning(f"Ignoring [{name}] in settings: expected a table")
    return {}


def _setting(section: dict, dotted_key: str, default: Any, kind: type) -> Any:
    """Read one setting, keeping the default when the value has the wrong type.

    Lists must be non-empty lists of strings, integers must be positive and
    strings must be non-empty.
    """
    key = dotted_key.rsplit(".", 1)[-1]
    if key not in section:
        return default

    value = section[key]
    if kind is list:
        valid = bool(value) and isinstance(value, list) and all(isinstance(v, str) for v in value)
        expected = "a non-empty list of strings"
    elif kind is int:
        valid = isinstance(value, int) and not isinstance(value, bool) and value > 0
        expected = "a positive integer"
    else:
        valid = isinstance(value, str) and bool(value)
        expected = "a non-empty string"

    if valid:
        return list(value) if kind is list else value
    warning(f"Ignoring {dotted_key} in settings: expected {expected}")
    return default


@dataclass
class CommitConfig:
    """Commit wizard settings."""

    types: list[str] = field(
        default_factory=lambda: [
            "feat",
            "fix",
            "docs",
            "style",
            "refactor",
            "test",
            "chore",
            "perf",
            "ci",
            "build",
            "revert",
        ]
    )
    description_max_length: int = 100


@dataclass
class BranchConfig:
    """Branch wizard settings."""

    name_pattern: str = r"^[a-zA-Z0-9/_-]+$"
    description_max_length: int = 200


@dataclass
class HistoryConfig:
    """How many commits the history views show."""

    stats_count: int = 10
    cherry_pick_count: int = 20


@dataclass
class QGConfig:
    """quicker-git settings stored in config.toml."""

    commit: CommitConfig = field(default_factory=CommitConfig)
    branch: BranchConfig = field(default_factory=BranchConfig)
    history: HistoryConfig = field(default_factory=HistoryConfig)

    @staticmethod
    def path(config_dir: Optional[Path] = None) -> Path:
        return (config_dir or config_home()) / SETTINGS_FILE

    @classmethod
    def load(cls, config_dir: Optional[Path] = None) -> "QGConfig":
        """Load settings from config.toml, falling back to defaults.

        An unreadable file is reported and ignored so it never blocks a command.
        """
        config_file = cls.path(config_dir)

        if not config_file.exists():
            return cls()

        try:
            with open(config_file, "rb") as f:
                data = tomli.load(f)
        except (OSError, tomli.TOMLDecodeError) as e:
            warning(f"Ignoring unreadable settings file {config_file}: {e}")
            return cls()

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict) -> "QGConfig":
        """Create config from dictionary.

        Sections that are not tables and values of the wrong type are
        reported and replaced by their defaults.
        """
        defaults = cls()

        commit_data = _section(data, "commit")
        commit = CommitConfig(
            types=_setting(commit_data, "commit.types", defaults.commit.types, list),
            description_max_length=_setting(
                commit_data,
                "commit.description_max_length",
                defaults.commit.description_max_length,
                int,
            ),
        )

        branch_data = _section(data, "branch")
        name_pattern = _setting(
            branch_data, "branch.name_pattern", defaults.branch.name_pattern, str
        )
        try:
            re.compile(name_pattern)
        except re.error as e:
            warning(f"Ignoring branch.name_pattern in settings: {e}")
            name_pattern = defaults.branch.name_pattern

        branch = BranchConfig(
            name_pattern=name_pattern,
            description_max_length=_setting(
                branch_data,
                "branch.description_max_length",
                defaults.branch.description_max_length,
                int,
            ),
        )

        history_data = _section(data, "history")
        history = HistoryConfig(
            stats_count=_setting(
                history_data, "history.stats_count", defaults.history.stats_count, int
            ),
            cherry_pick_count=_setting(
                history_data,
                "history.cherry_pick_count",
                defaults.history.cherry_pick_count,
                int,
            ),
        )

        return cls(commit=commit, branch=branch, history=history)

    def to_dict(self) -> dict:
        return {
            "commit": {
                "types": self.commit.types,
                "description_max_length": self.commit.description_max_length,
            },
            "branch": {
                "name_pattern": self.branch.name_pattern,
                "description_max_length": self.branch.description_max_length,
            },
            "history": {
                "stats_count": self.history.stats_count,
                "cherry_pick_count": self.history.cherry_pick_count,
            },
        }

    def save(self, config_dir: Optional[Path] = None) -> Path:
        """Save settings to config.toml.

        Raises:
            ConfigError: If the file cannot be written
        """
        config_file = self.path(config_dir)
        try:
            config_file.parent.mkdir(parents=True, exist_ok=True)
            with open(config_file, "wb") as f:
                tomli_w.dump(self.to_dict(), f)
        except OSError as e:
            raise ConfigError(f"Failed to write {config_file}: {e}") from e
        return config_file
