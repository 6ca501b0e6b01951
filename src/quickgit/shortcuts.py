"""Shortcut store: alias -> command map persisted as JSON with backups."""

import json
from collections import UserDict
from pathlib import Path
from typing import Any, Mapping, Optional

from .config import BACKUP_DIR, backup_file, config_home
from .ui import debug, warning

SHORTCUTS_FILE = "shortcuts.json"

DEFAULT_SHORTCUTS = {
    "gco": "git checkout",
    "gst": "git status",
    "gaa": "git add .",
    "gcm": "git commit -m",
    "gps": "git push",
    "gpl": "git pull",
    "gbr": "git branch -v",
    "gbd": "git branch -d",
    "glog": "git log --oneline -10",
    "gdiff": "git diff",
    "gstash": "git stash",
    "gpop": "git stash pop",
    "greset": "git reset --hard HEAD",
}

COMMAND_DESCRIPTIONS = {
    "git status": "show working tree status",
    "git add .": "stage all files",
    "git commit -m": "commit changes",
    "git push": "push to remote",
    "git pull": "pull from remote",
    "git checkout": "switch branches or restore files",
    "git branch -v": "list branches with details",
    "git branch -d": "delete a branch",
    "git log --oneline -10": "show the last 10 commits",
    "git diff": "show changes",
    "git stash": "stash working tree changes",
    "git stash pop": "restore stashed changes",
    "git reset --hard HEAD": "reset to the last commit",
}


class ShortcutError(Exception):
    """Raised for invalid shortcuts and failed shortcut writes."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


def validate_shortcut_key(key: Any) -> None:
    """Reject keys that are empty, not strings, or contain whitespace.

    Raises:
        ShortcutError: If the key is invalid
    """
    if not isinstance(key, str) or not key:
        raise ShortcutError("Shortcut key must be a non-empty string")
    if any(ch.isspace() for ch in key):
        raise ShortcutError(f"Shortcut key {key!r} must not contain whitespace")


def describe_command(command: str) -> str:
    """Short description for well-known commands."""
    return COMMAND_DESCRIPTIONS.get(command, "custom command")


class ShortcutMap(UserDict):
    """Mapping of shortcut key to command string with validated entries."""

    def __setitem__(self, key: str, command: str) -> None:
        validate_shortcut_key(key)
        if not isinstance(command, str) or not command.strip():
            raise ShortcutError(f"Command for {key!r} must be a non-empty string")
        super().__setitem__(key, command)

    @classmethod
    def from_raw(cls, data: Mapping) -> "ShortcutMap":
        """Build from parsed JSON, dropping invalid entries with a warning."""
        shortcuts = cls()
        for key, command in data.items():
            try:
                shortcuts[key] = command
            except ShortcutError as e:
                warning(f"Skipping invalid shortcut: {e.message}")
        return shortcuts

    def to_json(self) -> str:
        return json.dumps(dict(self.data), indent=2, ensure_ascii=False) + "\n"


class ShortcutStore:
    """Owns shortcuts.json and its backup directory.

    Every call re-reads the file; nothing is cached between calls.
    Single-writer usage is assumed.
    """

    def __init__(self, config_dir: Optional[Path] = None):
        """Initialize the store.

        Args:
            config_dir: Configuration directory (default: config_home())
        """
        self.config_dir = config_dir or config_home()
        self.shortcuts_path = self.config_dir / SHORTCUTS_FILE
        self.backup_dir = self.config_dir / BACKUP_DIR

    def ensure_dirs(self) -> None:
        """Create the configuration and backup directories if missing."""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.backup_dir.mkdir(parents=True, exist_ok=True)

    def load(self) -> ShortcutMap:
        """Read shortcuts from disk.

        Returns:
            The stored shortcuts, or an empty map if the file is missing or
            cannot be parsed (a parse failure is reported, not raised)
        """
        if not self.shortcuts_path.exists():
            return ShortcutMap()

        try:
            data = json.loads(self.shortcuts_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            warning(f"Could not read shortcuts from {self.shortcuts_path}: {e}")
            return ShortcutMap()

        if not isinstance(data, dict):
            warning(f"Ignoring {self.shortcuts_path}: expected a JSON object")
            return ShortcutMap()

        return ShortcutMap.from_raw(data)

    def backup(self) -> Optional[Path]:
        """Copy the current shortcuts file into the backup directory."""
        return backup_file(self.shortcuts_path, self.backup_dir, "shortcuts")

    def save(self, shortcuts: Mapping[str, str]) -> None:
        """Back up the current file, then overwrite it with `shortcuts`.

        Raises:
            ShortcutError: If validation, the backup or the write fails
        """
        validated = shortcuts if isinstance(shortcuts, ShortcutMap) else ShortcutMap(shortcuts)

        try:
            self.ensure_dirs()
            backup_path = self.backup()
            if backup_path:
                debug(f"backed up shortcuts to {backup_path}")
            self.shortcuts_path.write_text(validated.to_json(), encoding="utf-8")
        except OSError as e:
            raise ShortcutError(f"Failed to save shortcuts to {self.shortcuts_path}: {e}") from e

    def get(self, key: str) -> Optional[str]:
        return self.load().get(key)

    def set(self, key: str, command: str) -> None:
        """Add or replace one shortcut and persist."""
        shortcuts = self.load()
        shortcuts[key] = command
        self.save(shortcuts)

    def remove(self, key: str) -> bool:
        """Delete one shortcut.

        Returns:
            True if the key existed and the map was saved, False otherwise
            (nothing is written in that case)
        """
        shortcuts = self.load()
        if key not in shortcuts:
            return False
        del shortcuts[key]
        self.save(shortcuts)
        return True

    def init_defaults(self) -> bool:
        """Seed DEFAULT_SHORTCUTS when no shortcuts file exists yet.

        Returns:
            True if defaults were written
        """
        self.ensure_dirs()
        if self.shortcuts_path.exists():
            return False
        self.save(DEFAULT_SHORTCUTS)
        return True
