"""Shared lookups for command implementations."""

import click

from .. import ui
from ..config import QGConfig
from ..executor import ProcessExecutor
from ..git_wrapper import Git
from ..shortcuts import ShortcutStore
from ..ui import error


def get_executor(ctx: click.Context) -> ProcessExecutor:
    obj = ctx.ensure_object(dict)
    if "executor" not in obj:
        obj["executor"] = ProcessExecutor()
    return obj["executor"]


def get_git(ctx: click.Context) -> Git:
    obj = ctx.ensure_object(dict)
    if "git" not in obj:
        obj["git"] = Git(executor=get_executor(ctx))
    return obj["git"]


def get_store(ctx: click.Context) -> ShortcutStore:
    obj = ctx.ensure_object(dict)
    if "store" not in obj:
        obj["store"] = ShortcutStore()
    return obj["store"]


def get_config(ctx: click.Context) -> QGConfig:
    obj = ctx.ensure_object(dict)
    if "config" not in obj:
        obj["config"] = QGConfig.load()
    return obj["config"]


def require_repo(ctx: click.Context) -> Git:
    """Return the repository view, exiting with status 1 outside a repository."""
    git = get_git(ctx)
    if not git.is_repo():
        error("Not a git repository")
        raise SystemExit(1)
    return git


def require_terminal(flag: str) -> None:
    """Exit with status 1 when a confirmation is due but nobody can answer it."""
    if not ui.is_interactive():
        error(f"Confirmation needed but no terminal is attached; pass {flag} to proceed")
        raise SystemExit(1)
