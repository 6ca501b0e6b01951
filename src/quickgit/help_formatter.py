"""Categorized help shown when gq runs without a command."""

from typing import Dict, List, Tuple

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .ui import console

# Command categories: (title, color, [(command, description)])
CATEGORIES: Dict[str, Tuple[str, str, List[Tuple[str, str]]]] = {
    "shortcuts": (
        "⚡ Shortcuts",
        "cyan",
        [
            ("list, ls", "Show all shortcuts"),
            ("set", "Create or replace a shortcut"),
            ("remove, rm", "Delete a shortcut"),
            ("run", "Run a shortcut (or just: gq <key>)"),
        ],
    ),
    "commit": (
        "📝 Commits",
        "green",
        [
            ("commit, c", "Conventional commit wizard"),
            ("amend", "Amend the last commit"),
            ("stats", "Recent commits and tree state"),
        ],
    ),
    "branch": (
        "🌿 Branches",
        "yellow",
        [
            ("gbr", "Branches with descriptions"),
            ("branch-desc, bdesc", "Set a branch description"),
            ("bd", "Delete several branches"),
            ("create-branch, cb", "Create a branch"),
            ("switch-branch, sb", "Switch branch"),
        ],
    ),
    "advanced": (
        "🍒 Worktrees & Cherry-pick",
        "magenta",
        [
            ("worktree, wt", "List/add/remove/prune/status/switch worktrees"),
            ("cherry-pick, cp", "Pick/batch/continue/skip/abort"),
        ],
    ),
    "setup": (
        "🔧 Setup",
        "blue",
        [
            ("init", "Create default shortcuts and settings"),
            ("config, info", "Show configuration"),
            ("uninstall", "Back up and remove configuration"),
        ],
    ),
}


def show_categorized_help(version: str) -> None:
    """Display commands grouped into colored panels.

    Args:
        version: Version string to display
    """
    header = Text()
    header.append("quicker-git", "bold green")
    header.append(f"  v{version}\n", "dim")
    header.append("Shortcuts and interactive wizards on top of git", "blue")
    console.print(header)
    console.print()

    for title, color, commands in CATEGORIES.values():
        table = Table(show_header=False, box=None, padding=(0, 1))
        table.add_column("Command", style=f"bold {color}", width=20)
        table.add_column("Description", style="dim")

        for cmd_name, cmd_desc in commands:
            table.add_row(f"  {cmd_name}", cmd_desc)

        console.print(
            Panel(
                table,
                title=f"[bold {color}]{title}[/bold {color}]",
                border_style=color,
                padding=(0, 1),
            )
        )

    footer = Text()
    footer.append("First run? ", "dim")
    footer.append("gq init", "bold cyan")
    footer.append("   More help: ", "dim")
    footer.append("gq <command> --help", "bold cyan")
    footer.append("   Debug output: ", "dim")
    footer.append("--verbose", "bold yellow")
    console.print(footer)
