"""Worktree commands - list, add, remove, prune, status and switch."""

import shlex
import shutil
from pathlib import Path

import click

from ..git_wrapper import Git, RepositoryError, WorktreeRecord
from ..prompts import ask_text, choose, choose_many, confirm
from ..ui import console, create_table, error, info, key_value, separator, success, title, warning
from .common import get_executor, require_repo


def worktree_state(wt: WorktreeRecord) -> str:
    if wt.is_bare:
        return "bare"
    if wt.is_detached:
        return "detached"
    return "normal"


def _load_worktrees(git: Git) -> list[WorktreeRecord]:
    try:
        return git.list_worktrees()
    except RepositoryError as e:
        error(e.message)
        raise SystemExit(1)


def list_worktrees(git: Git) -> None:
    worktrees = _load_worktrees(git)
    if not worktrees:
        warning("No worktrees found")
        return

    table = create_table(title="Worktrees")
    table.add_column("Path", style="cyan")
    table.add_column("Branch", style="green")
    table.add_column("Commit", style="yellow")
    table.add_column("State", style="dim")

    for wt in worktrees:
        table.add_row(wt.path, wt.branch or "-", wt.commit_hash[:8], worktree_state(wt))

    console.print(table)
    info(f"{len(worktrees)} worktree(s)")


def add_worktree(ctx: click.Context, git: Git) -> None:
    """Create a worktree from an existing, new or remote branch."""

    def not_empty(text: str) -> tuple[bool, str]:
        return (bool(text.strip()), "Worktree path cannot be empty")

    try:
        branches = git.list_branches()
        remote = git.remote_branch_names()
        current = git.current_branch()
    except RepositoryError as e:
        error(e.message)
        raise SystemExit(1)

    path = ask_text("Worktree path", validate=not_empty).strip()

    mode = choose(
        "How should the worktree be created?",
        [
            ("From an existing branch", "existing"),
            ("With a new branch", "new"),
            ("From a remote branch", "remote"),
        ],
    )

    branch_options = [(b.name, b.name) for b in branches]

    if mode == "existing":
        if not branch_options:
            warning("No local branches found")
            return
        branch = choose("Branch:", branch_options)
        command_line = f"git worktree add {shlex.quote(path)} {shlex.quote(branch)}"

    elif mode == "new":

        def new_name(text: str) -> tuple[bool, str]:
            name = text.strip()
            if not name:
                return (False, "Branch name cannot be empty")
            if git.branch_exists(name):
                return (False, f'Branch "{name}" already exists')
            return (True, "")

        name = ask_text("New branch name", validate=new_name).strip()
        if not branch_options:
            warning("No local branches to start from")
            return
        base = choose("Base branch:", branch_options, default=current)
        command_line = (
            f"git worktree add -b {shlex.quote(name)} {shlex.quote(path)} {shlex.quote(base)}"
        )

    else:
        if not remote:
            warning("No remote branches found")
            return
        remote_branch = choose("Remote branch:", [(r, r) for r in remote])
        command_line = f"git worktree add {shlex.quote(path)} {shlex.quote(f'origin/{remote_branch}')}"

    info(f"Running: {command_line}")
    result = get_executor(ctx).run_sync(command_line)
    if not result.success:
        error(f"Failed to create worktree: {result.error}")
        raise SystemExit(1)

    success(f"Worktree created: {path}")
    info(f'Enter it with: cd "{path}"')


def remove_worktree(ctx: click.Context, git: Git) -> None:
    """Remove a linked worktree, optionally deleting its directory."""
    cwd = str(Path.cwd())
    removable = [wt for wt in _load_worktrees(git) if not wt.is_bare and wt.path != cwd]

    if not removable:
        warning("No worktrees can be removed")
        return

    target = choose(
        "Worktree to remove:",
        [(f"{wt.path} ({wt.branch or 'detached'})", wt.path) for wt in removable],
    )

    extras = choose_many(
        "Options (Enter for none):",
        [
            ("Force (ignore uncommitted changes)", "force"),
            ("Delete the worktree directory", "remove-dir"),
        ],
        required=False,
    )

    command_line = f"git worktree remove {shlex.quote(target)}"
    if "force" in extras:
        command_line += " --force"

    if not confirm(f'Remove worktree "{target}"?', default=False):
        info("Cancelled")
        return

    result = get_executor(ctx).run_sync(command_line)
    if not result.success:
        error(f"Failed to remove worktree: {result.error}")
        raise SystemExit(1)

    success(f"Worktree removed: {target}")

    if "remove-dir" in extras and Path(target).exists():
        try:
            shutil.rmtree(target)
            success("Worktree directory deleted")
        except OSError as e:
            warning(f"Could not delete the directory, remove it manually: {e}")


def prune_worktrees(ctx: click.Context) -> None:
    info("Pruning stale worktree references...")
    result = get_executor(ctx).run_sync("git worktree prune -v")
    if not result.success:
        error(f"Prune failed: {result.error}")
        raise SystemExit(1)

    if result.data:
        console.print(result.data, highlight=False)
        success("Pruned")
    else:
        info("Nothing to prune")


def worktree_status(git: Git) -> None:
    worktrees = _load_worktrees(git)
    if not worktrees:
        warning("No worktrees found")
        return

    title("Worktree status")
    for wt in worktrees:
        key_value("Path", wt.path)
        key_value("Branch", wt.branch or "detached")
        key_value("Commit", wt.commit_hash[:8] or "-")

        exists = Path(wt.path).is_dir()
        key_value("Directory", "present" if exists else "missing")

        if exists and not wt.is_bare:
            dirty = git.worktree_has_changes(wt.path)
            if dirty is None:
                key_value("Changes", "unknown")
            else:
                key_value("Changes", "uncommitted changes" if dirty else "clean")

        separator()


def switch_worktree(git: Git) -> None:
    cwd = str(Path.cwd())
    others = [wt for wt in _load_worktrees(git) if wt.path != cwd]

    if not others:
        warning("No other worktrees to switch to")
        return

    target = choose(
        "Switch to:",
        [
            (f"{Path(wt.path).name} - {wt.branch or 'detached'} ({wt.path})", wt.path)
            for wt in others
        ],
    )

    info("Run this to switch:")
    click.echo(f'cd "{target}"')


@click.command("worktree")
@click.option("--list", "-l", "do_list", is_flag=True, help="List worktrees (default)")
@click.option("--add", "-a", "do_add", is_flag=True, help="Add a worktree")
@click.option("--remove", "-r", "do_remove", is_flag=True, help="Remove a worktree")
@click.option("--prune", "-p", "do_prune", is_flag=True, help="Prune stale worktree references")
@click.option("--status", "-s", "do_status", is_flag=True, help="Show per-worktree status")
@click.option("--switch", "-w", "do_switch", is_flag=True, help="Print the cd command for a worktree")
@click.pass_context
def worktree(
    ctx: click.Context,
    do_list: bool,
    do_add: bool,
    do_remove: bool,
    do_prune: bool,
    do_status: bool,
    do_switch: bool,
) -> None:
    """Manage git worktrees.

    \b
    Examples:
        gq wt            # list
        gq wt -a         # add interactively
        gq wt -r         # remove
        gq wt -w         # print cd command for another worktree
    """
    git = require_repo(ctx)

    if do_add:
        add_worktree(ctx, git)
    elif do_remove:
        remove_worktree(ctx, git)
    elif do_prune:
        prune_worktrees(ctx)
    elif do_status:
        worktree_status(git)
    elif do_switch:
        switch_worktree(git)
    else:
        list_worktrees(git)
