"""Setup commands - init, config display and uninstall."""

import json

import click

from ..config import ConfigError, QGConfig, backup_file
from ..prompts import confirm
from ..shortcuts import ShortcutError
from ..ui import console, error, info, key_value, separator, success, title, warning
from .common import get_config, get_store, require_terminal


@click.command("init")
@click.pass_context
def init(ctx: click.Context) -> None:
    """Create the config directory with default shortcuts and settings."""
    store = get_store(ctx)

    try:
        seeded = store.init_defaults()
    except (OSError, ShortcutError) as e:
        error(f"Initialization failed: {e}")
        raise SystemExit(1)

    if seeded:
        success(f"Default shortcuts written to {store.shortcuts_path}")
    else:
        info(f"Shortcuts already exist at {store.shortcuts_path}")

    settings_path = QGConfig.path(store.config_dir)
    if settings_path.exists():
        info(f"Settings already exist at {settings_path}")
    else:
        try:
            QGConfig().save(store.config_dir)
        except ConfigError as e:
            error(e.message)
            raise SystemExit(1)
        success(f"Default settings written to {settings_path}")

    success("quicker-git is ready. Try: gq list")


@click.command("config")
@click.pass_context
def show_config(ctx: click.Context) -> None:
    """Show configuration locations, settings and the raw shortcuts."""
    store = get_store(ctx)
    config = get_config(ctx)
    shortcuts = store.load()

    title("quicker-git configuration")
    key_value("Config directory", str(store.config_dir))
    key_value("Shortcuts file", str(store.shortcuts_path))
    key_value("Backup directory", str(store.backup_dir))
    key_value("Shortcuts", str(len(shortcuts)))

    settings_path = QGConfig.path(store.config_dir)
    key_value("Settings file", f"{settings_path}" + ("" if settings_path.exists() else " (defaults)"))
    key_value("Commit types", ", ".join(config.commit.types))
    key_value("Commit description limit", str(config.commit.description_max_length))
    key_value("Branch name pattern", config.branch.name_pattern)
    key_value("Branch description limit", str(config.branch.description_max_length))
    key_value("Stats commits", str(config.history.stats_count))
    key_value("Cherry-pick commits", str(config.history.cherry_pick_count))

    separator()
    console.print_json(json.dumps(dict(shortcuts)))


@click.command("uninstall")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def uninstall(ctx: click.Context, yes: bool) -> None:
    """Back up and remove shortcuts and settings.

    Backups stay in the backup directory so the configuration can be restored
    by copying them back.
    """
    store = get_store(ctx)
    settings_path = QGConfig.path(store.config_dir)

    live_files = [p for p in (store.shortcuts_path, settings_path) if p.exists()]
    if not live_files:
        warning("Nothing to uninstall")
        return

    if not yes:
        require_terminal("--yes")

    try:
        for path, kind in ((store.shortcuts_path, "shortcuts"), (settings_path, "config")):
            backup_path = backup_file(path, store.backup_dir, kind)
            if backup_path:
                info(f"Backed up {path.name} to {backup_path}")
    except OSError as e:
        error(f"Backup failed, nothing removed: {e}")
        raise SystemExit(1)

    if not yes and not confirm("Remove shortcuts and settings?", default=False):
        info("Cancelled")
        return

    for path in live_files:
        try:
            path.unlink()
        except OSError as e:
            error(f"Failed to remove {path}: {e}")
            raise SystemExit(1)

    success(f"quicker-git configuration removed; backups are in {store.backup_dir}")
