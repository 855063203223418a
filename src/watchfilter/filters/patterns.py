"""Glob pattern filter matched against file base names."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import TYPE_CHECKING, List

from .paths import base_name, normalize_path

if TYPE_CHECKING:
    from ..config import PatternConfig

# Common temporary and system files
DEFAULT_IGNORED_PATTERNS: List[str] = [
    "*.tmp",
    "*.log",
    ".DS_Store",
    "Thumbs.db",
    "*~",
    "*.swp",
    "*.bak",
    "*.cache",
]


@lru_cache(maxsize=256)
def glob_to_regex(pattern: str) -> re.Pattern[str]:
    """Convert a glob pattern to an anchored regular expression.

    Only ``*`` (any run of characters) and ``?`` (one character) are
    wildcards. Everything else, brackets included, matches literally, so
    every input string yields a valid expression.
    """
    parts = []
    for char in pattern:
        if char == "*":
            parts.append(".*")
        elif char == "?":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile("^" + "".join(parts) + "$", re.DOTALL)


def matches_ignored_pattern(file_path: str, config: "PatternConfig") -> bool:
    """Check whether a file's base name matches any ignored pattern.

    Args:
        file_path: Path of the changed file
        config: Pattern filter configuration

    Returns:
        True if the file should be filtered out
    """
    if not config.enabled or not config.ignored_patterns:
        return False

    name = base_name(normalize_path(file_path))
    return any(glob_to_regex(pattern).match(name) for pattern in config.ignored_patterns)
