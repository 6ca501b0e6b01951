"""Shortcut commands - list, set, remove and run command aliases."""

import shlex

import click

from ..prompts import confirm
from ..shortcuts import ShortcutError, describe_command, validate_shortcut_key
from ..ui import console, create_table, error, info, success, warning
from .common import get_executor, get_store, require_repo, require_terminal


def _shadows_builtin(ctx: click.Context, key: str) -> bool:
    root = ctx.find_root().command
    return isinstance(root, click.Group) and root.get_command(ctx, key) is not None


@click.command("list")
@click.pass_context
def list_shortcuts(ctx: click.Context) -> None:
    """Show all shortcuts."""
    shortcuts = get_store(ctx).load()

    if not shortcuts:
        warning('No shortcuts yet. Add one with "gq set <key> <command>"')
        return

    table = create_table(title="Shortcuts")
    table.add_column("Key", style="cyan")
    table.add_column("Command", style="green")
    table.add_column("Description", style="dim")

    for key in sorted(shortcuts):
        command = shortcuts[key]
        table.add_row(key, command, describe_command(command))

    console.print(table)
    info(f"{len(shortcuts)} shortcut(s)")


@click.command("set", context_settings={"ignore_unknown_options": True})
@click.argument("key")
@click.argument("command", nargs=-1, required=True, type=click.UNPROCESSED)
@click.option("--yes", "-y", is_flag=True, help="Overwrite without asking")
@click.pass_context
def set_shortcut(ctx: click.Context, key: str, command: tuple[str, ...], yes: bool) -> None:
    """Create or replace a shortcut.

    \b
    Examples:
        gq set gst git status
        gq set glast git log -1 --stat
    """
    store = get_store(ctx)
    command_line = " ".join(command).strip()

    try:
        validate_shortcut_key(key)
    except ShortcutError as e:
        error(e.message)
        raise SystemExit(1)

    existing = store.get(key)
    if existing is not None and not yes:
        require_terminal("--yes")
        if not confirm(f'Shortcut "{key}" already exists ({existing}). Overwrite?', default=False):
            info("Cancelled")
            return

    if _shadows_builtin(ctx, key):
        warning(f'"{key}" is also a built-in command; use "gq run {key}" to run the shortcut')

    try:
        store.set(key, command_line)
    except ShortcutError as e:
        error(e.message)
        raise SystemExit(1)

    success(f"Shortcut saved: {key} -> {command_line}")


@click.command("remove")
@click.argument("key")
@click.option("--yes", "-y", is_flag=True, help="Remove without asking")
@click.pass_context
def remove_shortcut(ctx: click.Context, key: str, yes: bool) -> None:
    """Delete a shortcut."""
    store = get_store(ctx)

    existing = store.get(key)
    if existing is None:
        warning(f'Shortcut "{key}" does not exist')
        return

    if not yes:
        require_terminal("--yes")
        if not confirm(f'Delete shortcut "{key}" ({existing})?', default=False):
            info("Cancelled")
            return

    try:
        removed = store.remove(key)
    except ShortcutError as e:
        error(e.message)
        raise SystemExit(1)

    if removed:
        success(f'Shortcut "{key}" deleted')
    else:
        warning(f'Shortcut "{key}" does not exist')


def build_command_line(command: str, args: tuple[str, ...]) -> str:
    """Append quoted extra arguments to a shortcut's command."""
    if not args:
        return command
    return f"{command} {' '.join(shlex.quote(arg) for arg in args)}"


@click.command("run", context_settings={"ignore_unknown_options": True})
@click.argument("key")
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def run_shortcut(ctx: click.Context, key: str, args: tuple[str, ...]) -> None:
    """Run a shortcut, appending any extra arguments.

    \b
    Examples:
        gq run gco main
        gq gco main          # same thing
    """
    require_repo(ctx)

    command = get_store(ctx).get(key)
    if command is None:
        error(f'Shortcut "{key}" does not exist')
        info('Use "gq list" to see available shortcuts')
        raise SystemExit(1)

    command_line = build_command_line(command, args)
    info(f"Running: {command_line}")

    result = get_executor(ctx).run_sync(command_line)
    if result.data:
        click.echo(result.data)

    if not result.success:
        error(f"Command failed: {result.error}")
        raise SystemExit(1)

    success("Done")
