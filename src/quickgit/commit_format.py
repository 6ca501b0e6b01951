"""Conventional commit types and message helpers for the commit wizard."""

import re
from typing import Optional

COMMIT_TYPE_DESCRIPTIONS = {
    "feat": "new feature",
    "fix": "bug fix",
    "docs": "documentation",
    "style": "formatting, no code change",
    "refactor": "code restructuring",
    "test": "tests",
    "chore": "build process or tooling",
    "perf": "performance improvement",
    "ci": "CI/CD configuration",
    "build": "build system",
    "revert": "revert a commit",
}


def commit_type_choices(types: list[str]) -> list[tuple[str, str]]:
    """(label, value) pairs for the configured commit types."""
    return [
        (f"{t} - {COMMIT_TYPE_DESCRIPTIONS.get(t, 'custom type')}", t)
        for t in types
    ]


def filter_commit_types(types: list[str], query: str) -> list[str]:
    """Commit types whose name or description contains `query` (case-insensitive)."""
    query = query.strip().lower()
    if not query:
        return list(types)
    return [
        t
        for t in types
        if query in t.lower() or query in COMMIT_TYPE_DESCRIPTIONS.get(t, "").lower()
    ]


def validate_description(description: str, max_length: int = 100) -> tuple[bool, Optional[str]]:
    """Validate a commit description.

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not description.strip():
        return (False, "Commit description cannot be empty")
    if len(description) > max_length:
        return (False, f"Commit description must be {max_length} characters or less")
    return (True, None)


def validate_branch_name(name: str, pattern: str) -> tuple[bool, Optional[str]]:
    """Validate a new branch name against the configured pattern."""
    if not name.strip():
        return (False, "Branch name cannot be empty")
    if not re.match(pattern, name):
        return (False, "Branch name may only contain letters, digits, '/', '-' and '_'")
    return (True, None)


def format_commit_message(type_: str, description: str, scope: Optional[str] = None) -> str:
    """Format "type(scope): description"."""
    first = type_
    if scope:
        first += f"({scope})"
    return f"{first}: {description.strip()}"
