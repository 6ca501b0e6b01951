"""Interactive prompt helpers on top of click.prompt / click.confirm."""

from typing import Callable, Optional, Sequence, TypeVar

import click
from rich.markup import escape

from .ui import console, error

T = TypeVar("T")

Validator = Callable[[str], tuple[bool, Optional[str]]]


class PromptCancelled(Exception):
    """Raised when the user aborts a prompt (Ctrl-C / EOF)."""


def confirm(message: str, default: bool = False) -> bool:
    """Ask a yes/no question."""
    try:
        return click.confirm(message, default=default)
    except click.exceptions.Abort as e:
        raise PromptCancelled() from e


def ask_text(
    message: str,
    default: Optional[str] = None,
    validate: Optional[Validator] = None,
) -> str:
    """Ask for text, re-prompting until `validate` accepts it."""
    while True:
        try:
            answer = click.prompt(message, default=default, show_default=bool(default))
        except click.exceptions.Abort as e:
            raise PromptCancelled() from e

        answer = answer or ""
        if validate is None:
            return answer
        ok, problem = validate(answer)
        if ok:
            return answer
        error(problem or "Invalid input")


def _print_options(options: Sequence[tuple[str, T]]) -> None:
    for index, (label, _) in enumerate(options, 1):
        console.print(f"  [cyan]{index:>2}[/cyan]. {escape(label)}", highlight=False)


def choose(
    message: str,
    options: Sequence[tuple[str, T]],
    default: Optional[T] = None,
) -> T:
    """Pick one option by number.

    Args:
        message: Question shown above the list
        options: (label, value) pairs
        default: Value preselected when the user just presses Enter

    Returns:
        The chosen value
    """
    if not options:
        raise ValueError("choose() needs at least one option")

    default_index = 1
    for index, (_, value) in enumerate(options, 1):
        if value == default:
            default_index = index
            break

    console.print(escape(message))
    _print_options(options)

    while True:
        try:
            picked = click.prompt("Select", type=int, default=default_index)
        except click.exceptions.Abort as e:
            raise PromptCancelled() from e
        if 1 <= picked <= len(options):
            return options[picked - 1][1]
        error(f"Enter a number between 1 and {len(options)}")


def parse_selection(answer: str, count: int) -> Optional[list[int]]:
    """Parse "1,3 5-7" into zero-based indices; None if malformed."""
    indices: list[int] = []
    for token in answer.replace(",", " ").split():
        if "-" in token:
            start_text, _, end_text = token.partition("-")
            if not (start_text.isdigit() and end_text.isdigit()):
                return None
            start, end = int(start_text), int(end_text)
            if start > end:
                return None
            numbers = range(start, end + 1)
        elif token.isdigit():
            numbers = range(int(token), int(token) + 1)
        else:
            return None

        for number in numbers:
            if not 1 <= number <= count:
                return None
            if number - 1 not in indices:
                indices.append(number - 1)
    return indices


def choose_many(
    message: str,
    options: Sequence[tuple[str, T]],
    required: bool = True,
) -> list[T]:
    """Pick several options by number ("1,3 5-7"); empty input picks none."""
    console.print(escape(message))
    _print_options(options)

    while True:
        try:
            answer = click.prompt("Select (e.g. 1,3 5-7)", default="", show_default=False)
        except click.exceptions.Abort as e:
            raise PromptCancelled() from e

        indices = parse_selection(answer or "", len(options))
        if indices is None:
            error("Invalid selection")
            continue
        if required and not indices:
            error("Select at least one item")
            continue
        return [options[i][1] for i in indices]
