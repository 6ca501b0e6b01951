"""Main CLI entry point for quicker-git."""

from typing import Any, Optional

import click

from . import __version__
from .commands import branch, cherry_pick, commit, config_cmd, shortcuts, worktree
from .commands.common import get_store
from .help_formatter import show_categorized_help
from .prompts import PromptCancelled
from .ui import console, debug, error, is_debug, set_verbose, warning

# alias -> command name
ALIASES = {
    "ls": "list",
    "rm": "remove",
    "c": "commit",
    "bdesc": "branch-desc",
    "cb": "create-branch",
    "sb": "switch-branch",
    "wt": "worktree",
    "cp": "cherry-pick",
    "info": "config",
}


class QGGroup(click.Group):
    """Click group with command aliases, shortcut dispatch and top-level error reporting."""

    def get_command(self, ctx: click.Context, cmd_name: str) -> Optional[click.Command]:
        cmd = super().get_command(ctx, cmd_name)
        if cmd is None and cmd_name in ALIASES:
            cmd = super().get_command(ctx, ALIASES[cmd_name])
        return cmd

    def resolve_command(self, ctx: click.Context, args: list[str]):
        """Treat an unknown first argument that names a shortcut as `run <key>`."""
        cmd_name = args[0] if args else None
        if cmd_name and self.get_command(ctx, cmd_name) is None:
            if get_store(ctx).get(cmd_name) is not None:
                debug(f"dispatching shortcut {cmd_name}")
                return "run", self.get_command(ctx, "run"), list(args)
        return super().resolve_command(ctx, args)

    def invoke(self, ctx: click.Context) -> Any:
        try:
            return super().invoke(ctx)
        except PromptCancelled:
            console.print()
            warning("Cancelled")
            raise SystemExit(1)
        except (click.exceptions.Exit, click.exceptions.Abort, click.ClickException):
            raise
        except Exception as e:
            if is_debug():
                console.print_exception()
            error(f"Command failed: {e}")
            raise SystemExit(1)


@click.group(cls=QGGroup, invoke_without_command=True)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose debug output")
@click.version_option(__version__, prog_name="quicker-git")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """quicker-git - shortcuts and interactive wizards on top of git.

    Any shortcut key can be used directly as a command: `gq gst`.
    """
    ctx.ensure_object(dict)
    set_verbose(verbose)

    if ctx.invoked_subcommand is None:
        show_categorized_help(__version__)


# Shortcuts
main.add_command(shortcuts.list_shortcuts)
main.add_command(shortcuts.set_shortcut)
main.add_command(shortcuts.remove_shortcut)
main.add_command(shortcuts.run_shortcut)

# Commits
main.add_command(commit.commit)
main.add_command(commit.amend)
main.add_command(commit.stats)

# Branches
main.add_command(branch.show_branches)
main.add_command(branch.branch_desc)
main.add_command(branch.batch_delete)
main.add_command(branch.create_branch)
main.add_command(branch.switch_branch)

# Worktrees and cherry-pick
main.add_command(worktree.worktree)
main.add_command(cherry_pick.cherry_pick)

# Setup
main.add_command(config_cmd.init)
main.add_command(config_cmd.show_config)
main.add_command(config_cmd.uninstall)


if __name__ == "__main__":
    main()
