"""Branch commands - listing, descriptions, batch delete, create and switch."""

import shlex
from pathlib import Path
from typing import Optional

import click
from rich.markup import escape

from ..commit_format import validate_branch_name
from ..git_wrapper import Git, RepositoryError
from ..prompts import ask_text, choose, confirm
from ..ui import bullet_list, console, error, info, separator, success, title, warning
from .common import get_config, get_executor, require_repo, require_terminal


def _describe_validator(max_length: int):
    def validate(text: str) -> tuple[bool, Optional[str]]:
        if not text.strip():
            return (False, "Branch description cannot be empty")
        if len(text) > max_length:
            return (False, f"Branch description must be {max_length} characters or less")
        return (True, None)

    return validate


def describe_branch(
    ctx: click.Context,
    git: Git,
    branch: Optional[str] = None,
    description: Optional[str] = None,
) -> bool:
    """Set a branch description, prompting for missing pieces.

    Returns:
        True if the description was written
    """
    config = get_config(ctx)

    if not branch:
        try:
            branch = git.current_branch()
        except RepositoryError as e:
            error(e.message)
            return False
        if not branch:
            error("HEAD is detached; pass a branch with -b")
            return False
        info(f"Using current branch: {branch}")

    if not git.branch_exists(branch):
        error(f'Branch "{branch}" does not exist')
        return False

    validate = _describe_validator(config.branch.description_max_length)
    if description:
        ok, problem = validate(description)
        if not ok:
            error(problem)
            return False
    else:
        description = ask_text(
            f'Description for "{branch}"',
            default=git.branch_description(branch) or None,
            validate=validate,
        ).strip()

    if not git.set_branch_description(branch, description):
        error("Failed to write branch description")
        return False

    success(f'Description for "{branch}" set: {description}')
    return True


@click.command("gbr")
@click.pass_context
def show_branches(ctx: click.Context) -> None:
    """Show branches with descriptions and linked worktree paths."""
    git = require_repo(ctx)

    try:
        branches = git.list_branches()
        worktrees = git.list_worktrees()
        current = git.current_branch()
    except RepositoryError as e:
        error(e.message)
        raise SystemExit(1)

    if not branches:
        warning("No branches found")
        return

    worktree_paths = {wt.branch: wt.path for wt in worktrees if wt.branch}
    cwd = str(Path.cwd())

    title("Branches")
    for branch in branches:
        description = git.branch_description(branch.name)
        is_current = branch.is_current or branch.name == current

        line = ("* " if is_current else "  ") + branch.name
        if description:
            line += f" - {description}"
        line = escape(line)
        if is_current:
            line = f"[bold green]{line}[/bold green]"

        worktree_path = worktree_paths.get(branch.name)
        if worktree_path and worktree_path != cwd:
            line += f" [dim](worktree: {escape(worktree_path)})[/dim]"

        console.print(line, highlight=False)

    separator()
    info(f"{len(branches)} branch(es)")


@click.command("branch-desc")
@click.argument("description", nargs=-1)
@click.option("--branch", "-b", help="Branch to describe (default: current)")
@click.pass_context
def branch_desc(ctx: click.Context, description: tuple[str, ...], branch: Optional[str]) -> None:
    """Set a branch description (stored in git config).

    \b
    Examples:
        gq branch-desc Login page rework
        gq bdesc -b feature/auth OAuth2 support
    """
    git = require_repo(ctx)
    text = " ".join(description).strip() or None
    if not describe_branch(ctx, git, branch, text):
        raise SystemExit(1)


@click.command("bd")
@click.argument("branches", nargs=-1, required=True)
@click.option("--force", "-f", is_flag=True, help="Delete unmerged branches without asking")
@click.pass_context
def batch_delete(ctx: click.Context, branches: tuple[str, ...], force: bool) -> None:
    """Delete several branches at once.

    \b
    Examples:
        gq bd feature/a feature/b
        gq bd -f spike/old
    """
    git = require_repo(ctx)

    try:
        current = git.current_branch()
    except RepositoryError as e:
        error(e.message)
        raise SystemExit(1)

    valid: list[str] = []
    missing: list[str] = []
    for name in branches:
        if name == current:
            warning(f"Skipping current branch: {name}")
            continue
        if git.branch_exists(name):
            valid.append(name)
        else:
            missing.append(name)

    if missing:
        warning(f"Branches not found: {', '.join(missing)}")

    if not valid:
        warning("No branches to delete")
        return

    title("Branches to delete")
    bullet_list(valid)

    if not force:
        require_terminal("-f")
        if not confirm(f"Delete these {len(valid)} branch(es)?", default=False):
            info("Cancelled")
            return

    flag = "-D" if force else "-d"
    executor = get_executor(ctx)
    deleted: list[str] = []
    failed: list[str] = []

    for name in valid:
        result = executor.run_sync(f"git branch {flag} {shlex.quote(name)}")
        if result.success:
            deleted.append(name)
        else:
            failed.append(name)
            error(f'Failed to delete "{name}": {result.error}')

    if deleted:
        success(f"Deleted {len(deleted)} branch(es): {', '.join(deleted)}")

    if failed:
        error(f"Could not delete {len(failed)} branch(es): {', '.join(failed)}")
        info("Use -f to force-delete unmerged branches")
        raise SystemExit(1)


@click.command("create-branch")
@click.pass_context
def create_branch(ctx: click.Context) -> None:
    """Create a branch interactively."""
    git = require_repo(ctx)
    config = get_config(ctx)

    def validate(name: str) -> tuple[bool, Optional[str]]:
        ok, problem = validate_branch_name(name, config.branch.name_pattern)
        if ok and git.branch_exists(name):
            return (False, f'Branch "{name}" already exists')
        return (ok, problem)

    name = ask_text("New branch name", validate=validate).strip()

    try:
        local = git.list_branches()
        remote = git.remote_branch_names()
        current = git.current_branch()
    except RepositoryError as e:
        error(e.message)
        raise SystemExit(1)

    bases = [(f"{b.name} (local)", b.name) for b in local]
    bases += [(f"{r} (remote)", f"origin/{r}") for r in remote]

    if bases:
        base = choose("Base branch:", bases, default=current)
    else:
        # Unborn HEAD: nothing to branch from
        base = None

    switch = confirm("Switch to the new branch?", default=True)

    if switch:
        command_line = f"git checkout -b {shlex.quote(name)}"
    else:
        command_line = f"git branch {shlex.quote(name)}"
    if base:
        command_line += f" {shlex.quote(base)}"

    result = get_executor(ctx).run_sync(command_line)
    if not result.success:
        error(f"Failed to create branch: {result.error}")
        raise SystemExit(1)

    success(f'Branch "{name}" created')

    if confirm("Add a description for the new branch?", default=True):
        describe_branch(ctx, git, name)


@click.command("switch-branch")
@click.pass_context
def switch_branch(ctx: click.Context) -> None:
    """Pick another local branch and check it out."""
    git = require_repo(ctx)

    try:
        branches = git.list_branches()
        current = git.current_branch()
    except RepositoryError as e:
        error(e.message)
        raise SystemExit(1)

    others = [b for b in branches if b.name != current]
    if not others:
        warning("No other branches to switch to")
        return

    options = []
    for b in others:
        description = git.branch_description(b.name)
        options.append((f"{b.name} - {description}" if description else b.name, b.name))

    target = choose("Switch to:", options)

    result = get_executor(ctx).run_sync(f"git checkout {shlex.quote(target)}")
    if not result.success:
        error(f"Failed to switch branch: {result.error}")
        raise SystemExit(1)

    success(f"Switched to {target}")
