"""Cherry-pick commands - pick, batch, continue, skip, abort and status."""

import shlex

import click

from ..git_wrapper import Git, RepositoryError
from ..prompts import ask_text, choose, choose_many, confirm
from ..ui import bullet_list, console, error, info, separator, success, title, warning
from .common import get_config, get_executor, require_repo

PICK_OPTIONS = [
    ("Do not commit automatically (--no-commit)", "--no-commit"),
    ("Edit the commit message (--edit)", "--edit"),
    ("Record the original commit (-x)", "-x"),
]

RECOVERY_HINTS = [
    "gq cp -c  # continue",
    "gq cp -s  # skip the current commit",
    "gq cp -a  # abort",
]


def is_conflict(output: str) -> bool:
    return "conflict" in output.lower()


def _split_summary(line: str) -> tuple[str, str]:
    commit_hash, _, subject = line.partition(" ")
    return commit_hash, subject


def apply_commits(ctx: click.Context, commits: list[str], options: list[str]) -> bool:
    """Cherry-pick commits one at a time.

    Stops on a conflict; for any other failure asks whether to go on.

    Returns:
        True if every commit was applied
    """
    executor = get_executor(ctx)
    option_text = "".join(f" {opt}" for opt in options)
    total = len(commits)

    for number, commit in enumerate(commits, 1):
        info(f"Cherry-pick {number}/{total}: {commit}")
        result = executor.run_sync(f"git cherry-pick{option_text} {shlex.quote(commit)}")

        if result.success:
            success(f"Applied {commit}")
            continue

        error(f"Cherry-pick of {commit} failed: {result.error}")

        if is_conflict(f"{result.error or ''}\n{result.data or ''}"):
            warning("Conflicts detected. Resolve them, then run one of:")
            bullet_list(RECOVERY_HINTS)
            return False

        if not confirm("Continue with the remaining commits?", default=False):
            info("Cherry-pick stopped")
            return False

    success("All commits cherry-picked!")
    return True


def _require_in_progress(git: Git) -> bool:
    if not git.is_cherry_pick_in_progress():
        warning("No cherry-pick in progress")
        return False
    return True


def continue_pick(ctx: click.Context, git: Git) -> None:
    if not _require_in_progress(git):
        return

    conflicts = git.conflicted_paths()
    if conflicts:
        error("Unresolved conflicts remain:")
        bullet_list(conflicts)
        info("Resolve them and stage the files before continuing")
        raise SystemExit(1)

    info("Continuing cherry-pick...")
    # --continue may open an editor
    result = get_executor(ctx).run_interactive("git", ["cherry-pick", "--continue"])
    if not result.success:
        error(f"Continue failed: {result.error}")
        raise SystemExit(1)
    success("Cherry-pick continued")


def skip_pick(ctx: click.Context, git: Git) -> None:
    if not _require_in_progress(git):
        return

    if not confirm("Skip the current commit?", default=False):
        info("Cancelled")
        return

    result = get_executor(ctx).run_sync("git cherry-pick --skip")
    if not result.success:
        error(f"Skip failed: {result.error}")
        raise SystemExit(1)
    success("Current commit skipped")


def abort_pick(ctx: click.Context, git: Git) -> None:
    if not _require_in_progress(git):
        return

    if not confirm("Abort the cherry-pick? This discards its changes.", default=False):
        info("Cancelled")
        return

    result = get_executor(ctx).run_sync("git cherry-pick --abort")
    if not result.success:
        error(f"Abort failed: {result.error}")
        raise SystemExit(1)
    success("Cherry-pick aborted")


def interactive_pick(ctx: click.Context, git: Git) -> None:
    """Select commits from recent history and apply them."""
    if git.is_cherry_pick_in_progress():
        warning("A cherry-pick is already in progress")
        action = choose(
            "What now?",
            [
                ("Continue the cherry-pick", "continue"),
                ("Skip the current commit", "skip"),
                ("Abort the cherry-pick", "abort"),
            ],
        )
        {"continue": continue_pick, "skip": skip_pick, "abort": abort_pick}[action](ctx, git)
        return

    config = get_config(ctx)
    try:
        summaries = git.recent_commit_summaries(config.history.cherry_pick_count)
    except RepositoryError as e:
        error(e.message)
        raise SystemExit(1)

    if not summaries:
        warning("No commits found")
        return

    options = []
    for line in summaries:
        commit_hash, subject = _split_summary(line)
        options.append((f"{commit_hash} - {subject}", commit_hash))

    commits = choose_many("Commits to cherry-pick:", options)
    pick_options = choose_many("Options (Enter for none):", PICK_OPTIONS, required=False)

    if not confirm(f"Cherry-pick {len(commits)} commit(s)?", default=True):
        info("Cancelled")
        return

    if not apply_commits(ctx, commits, pick_options):
        raise SystemExit(1)


def batch_pick(ctx: click.Context, git: Git) -> None:
    """Cherry-pick a whole revision range in one git call."""

    def not_empty(text: str) -> tuple[bool, str]:
        return (bool(text.strip()), "Commit range cannot be empty")

    commit_range = ask_text(
        "Commit range (e.g. abc123..def456 or abc123^..def456)",
        validate=not_empty,
    ).strip()

    try:
        commits = git.range_commit_summaries(commit_range)
    except RepositoryError as e:
        error(f"Invalid commit range: {e.stderr or e.message}")
        raise SystemExit(1)

    if not commits:
        warning("No commits in that range")
        return

    title("Commits to cherry-pick")
    bullet_list(commits, bullet="•")

    if not confirm(f"Cherry-pick these {len(commits)} commit(s)?", default=True):
        info("Cancelled")
        return

    info(f"Cherry-picking {commit_range}...")
    result = get_executor(ctx).run_sync(f"git cherry-pick {shlex.quote(commit_range)}")
    if not result.success:
        error(f"Batch cherry-pick failed: {result.error}")
        if is_conflict(f"{result.error or ''}\n{result.data or ''}"):
            bullet_list(RECOVERY_HINTS)
        raise SystemExit(1)

    success("Batch cherry-pick complete")


def show_status(git: Git) -> None:
    if not git.is_cherry_pick_in_progress():
        info("No cherry-pick in progress")
        return

    title("Cherry-pick status")
    status = git.status_text()
    if status:
        console.print(status, highlight=False, markup=False)

    separator()
    info("Available actions:")
    bullet_list(RECOVERY_HINTS, bullet="•")


@click.command("cherry-pick")
@click.option("--pick", "-p", "do_pick", is_flag=True, help="Pick commits interactively (default)")
@click.option("--continue", "-c", "do_continue", is_flag=True, help="Continue after resolving conflicts")
@click.option("--skip", "-s", "do_skip", is_flag=True, help="Skip the current commit")
@click.option("--abort", "-a", "do_abort", is_flag=True, help="Abort the cherry-pick")
@click.option("--batch", "-b", "do_batch", is_flag=True, help="Cherry-pick a commit range")
@click.option("--status", "do_status", is_flag=True, help="Show cherry-pick status")
@click.pass_context
def cherry_pick(
    ctx: click.Context,
    do_pick: bool,
    do_continue: bool,
    do_skip: bool,
    do_abort: bool,
    do_batch: bool,
    do_status: bool,
) -> None:
    """Cherry-pick commits with recovery helpers.

    \b
    Examples:
        gq cp            # choose commits from recent history
        gq cp -b         # apply a range such as a1b2c3..d4e5f6
        gq cp -c         # continue after resolving conflicts
    """
    git = require_repo(ctx)

    if do_continue:
        continue_pick(ctx, git)
    elif do_skip:
        skip_pick(ctx, git)
    elif do_abort:
        abort_pick(ctx, git)
    elif do_batch:
        batch_pick(ctx, git)
    elif do_status:
        show_status(git)
    else:
        interactive_pick(ctx, git)
