"""Tests for prompt helpers - selection parsing, validation loops and cancellation."""

from unittest.mock import patch

import click
import pytest

from quickgit.prompts import (
    PromptCancelled,
    ask_text,
    choose,
    choose_many,
    confirm,
    parse_selection,
)


class TestParseSelection:
    """Tests for "1,3 5-7" style selections."""

    def test_single_and_list(self) -> None:
        """Test commas and spaces as separators."""
        assert parse_selection("1", 5) == [0]
        assert parse_selection("1,3 5", 5) == [0, 2, 4]

    def test_ranges(self) -> None:
        """Test inclusive ranges."""
        assert parse_selection("2-4", 5) == [1, 2, 3]
        assert parse_selection("1, 3-4", 5) == [0, 2, 3]

    def test_duplicates_collapse(self) -> None:
        """Test that repeated numbers are kept once, in first-seen order."""
        assert parse_selection("3 1-3", 5) == [2, 0, 1]

    def test_empty(self) -> None:
        """Test that no input selects nothing."""
        assert parse_selection("", 5) == []
        assert parse_selection("  ", 5) == []

    @pytest.mark.parametrize("answer", ["0", "6", "a", "1-", "4-2", "1-9", "-1", "1.5"])
    def test_invalid(self, answer: str) -> None:
        """Test malformed and out-of-range selections."""
        assert parse_selection(answer, 5) is None


class TestPrompts:
    """Tests for prompt wrappers."""

    @patch("click.prompt")
    def test_ask_text_reprompts_until_valid(self, mock_ask) -> None:
        """Test that invalid answers are asked again."""
        mock_ask.side_effect = ["", "  ", "fix login"]

        answer = ask_text("Description", validate=lambda s: (bool(s.strip()), "empty"))

        assert answer == "fix login"
        assert mock_ask.call_count == 3

    @patch("click.prompt")
    def test_ask_text_interrupt(self, mock_ask) -> None:
        """Test that an aborted prompt becomes PromptCancelled."""
        mock_ask.side_effect = click.exceptions.Abort()

        with pytest.raises(PromptCancelled):
            ask_text("Anything")

    @patch("click.confirm")
    def test_confirm_eof(self, mock_ask) -> None:
        """Test that EOF on a confirmation becomes PromptCancelled."""
        mock_ask.side_effect = click.exceptions.Abort()

        with pytest.raises(PromptCancelled):
            confirm("Sure?")

    @patch("click.prompt")
    def test_choose_returns_value(self, mock_ask) -> None:
        """Test that the picked number maps to its value."""
        mock_ask.side_effect = [9, 2]

        assert choose("Pick", [("First", "a"), ("Second", "b")]) == "b"
        assert mock_ask.call_count == 2

    @patch("click.prompt")
    def test_choose_default_index(self, mock_ask) -> None:
        """Test that the default value is preselected by position."""
        mock_ask.return_value = 2

        choose("Pick", [("main", "main"), ("dev", "dev")], default="dev")

        assert mock_ask.call_args.kwargs["default"] == 2

    def test_choose_requires_options(self) -> None:
        """Test that an empty option list is a programming error."""
        with pytest.raises(ValueError):
            choose("Pick", [])

    @patch("click.prompt")
    def test_choose_many(self, mock_ask) -> None:
        """Test multi-select with a retry after an empty answer."""
        mock_ask.side_effect = ["", "1,3"]

        picked = choose_many("Pick", [("a", 1), ("b", 2), ("c", 3)])

        assert picked == [1, 3]

    @patch("click.prompt")
    def test_choose_many_optional(self, mock_ask) -> None:
        """Test that an empty answer is allowed when not required."""
        mock_ask.return_value = ""

        assert choose_many("Options", [("x", "--x")], required=False) == []
