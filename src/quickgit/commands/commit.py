"""Commit commands - interactive commit, amend and history summary."""

import click

from ..commit_format import (
    commit_type_choices,
    filter_commit_types,
    format_commit_message,
    validate_description,
)
from ..git_wrapper import RepositoryError
from ..prompts import ask_text, choose, confirm
from ..ui import bullet_list, debug, error, info, key_value, success, title, warning
from .common import get_config, get_executor, require_repo


def pick_commit_type(types: list[str]) -> str:
    """Ask for a commit type, narrowing the list by a search term."""
    while True:
        query = ask_text("Commit type (type to search, Enter for all)", default="")
        matches = filter_commit_types(types, query)
        if not matches:
            error(f'No commit type matches "{query}"')
            continue
        if query.strip() and len(matches) == 1:
            return matches[0]
        return choose("Select commit type:", commit_type_choices(matches))


def _amend(ctx: click.Context, args: list[str], done: str) -> None:
    result = get_executor(ctx).run_interactive("git", ["commit", "--amend", *args])
    if result.success:
        success(done)
    else:
        error(f"Amend failed: {result.error}")
        raise SystemExit(1)


@click.command("commit")
@click.pass_context
def commit(ctx: click.Context) -> None:
    """Interactive commit with a conventional commit type.

    Only staged changes are committed; with nothing staged this does nothing.
    """
    git = require_repo(ctx)
    config = get_config(ctx)

    if not git.has_staged_changes():
        debug("nothing staged, skipping commit")
        return

    commit_type = pick_commit_type(config.commit.types)
    max_length = config.commit.description_max_length
    description = ask_text(
        "Commit description",
        validate=lambda text: validate_description(text, max_length),
    )

    message = format_commit_message(commit_type, description)
    info("Committing...")

    result = get_executor(ctx).run_interactive("git", ["commit", "-m", message])
    if result.success:
        success("Committed!")
    else:
        error(f"Commit failed: {result.error}")
        raise SystemExit(1)


@click.command("amend")
@click.pass_context
def amend(ctx: click.Context) -> None:
    """Amend the last commit: add staged changes and/or edit its message."""
    git = require_repo(ctx)

    last_subject = git.last_commit_subject()
    if last_subject is None:
        error("Could not read the last commit")
        raise SystemExit(1)
    info(f"Last commit: {last_subject}")

    has_staged = git.has_staged_changes()
    has_changes = has_staged or git.has_unstaged_changes()

    def not_empty(text: str) -> tuple[bool, str]:
        return (bool(text.strip()), "Commit message cannot be empty")

    if not has_changes:
        new_message = ask_text("New commit message", default=last_subject, validate=not_empty)
        _amend(ctx, ["-m", new_message], "Commit message updated")
        return

    action = choose(
        "Changes detected. What should be amended (staged changes only)?",
        [
            ("Add staged changes to the last commit", "add"),
            ("Only change the commit message", "message"),
            ("Cancel", "cancel"),
        ],
    )

    if action == "cancel":
        info("Cancelled")
        return

    if action == "add":
        if not has_staged:
            info("Nothing is staged; cancelled")
            return
        if confirm("Change the commit message too?", default=False):
            new_message = ask_text("New commit message", default=last_subject, validate=not_empty)
            _amend(ctx, ["-m", new_message], "Commit amended")
        else:
            _amend(ctx, ["--no-edit"], "Staged changes added to the last commit")
        return

    new_message = ask_text("New commit message", default=last_subject, validate=not_empty)
    _amend(ctx, ["-m", new_message, "--no-verify"], "Commit message updated")


@click.command("stats")
@click.pass_context
def stats(ctx: click.Context) -> None:
    """Show recent commits and the state of the working tree."""
    git = require_repo(ctx)
    config = get_config(ctx)

    try:
        commits = git.recent_commit_summaries(config.history.stats_count)
        branch = git.current_branch()
    except RepositoryError as e:
        error(e.message)
        raise SystemExit(1)

    if not commits:
        warning("No commits yet")
        return

    title("Recent commits")
    bullet_list(commits, bullet="•")

    key_value("Current branch", branch or "(detached HEAD)")
    key_value("Working tree", "uncommitted changes" if git.has_unstaged_changes() else "clean")
    key_value("Index", "staged files" if git.has_staged_changes() else "empty")
