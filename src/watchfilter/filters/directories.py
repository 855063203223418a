"""Ignored directory filter."""

from __future__ import annotations

from typing import TYPE_CHECKING, List

from .paths import normalize_path

if TYPE_CHECKING:
    from ..config import DirectoryConfig

# Build output, VCS metadata and dependency folders
DEFAULT_IGNORED_DIRECTORIES: List[str] = [
    "node_modules",
    ".git",
    "dist",
    "build",
    "out",
    ".next",
    "coverage",
    ".cache",
    "tmp",
    "temp",
]


def is_under_directory(path: str, directory: str) -> bool:
    """True if ``path`` equals ``directory`` or lies beneath it.

    ``/foo/bar`` contains ``/foo/bar/baz`` but not ``/foo/barbell``.
    """
    normalized_path = normalize_path(path)
    normalized_dir = normalize_path(directory)
    return normalized_path == normalized_dir or normalized_path.startswith(normalized_dir + "/")


def is_in_ignored_directory(file_path: str, config: "DirectoryConfig") -> bool:
    """Check whether a path is in or under any ignored directory.

    Args:
        file_path: Path of the changed file
        config: Directory filter configuration

    Returns:
        True if the file should be filtered out
    """
    if not config.enabled or not config.ignored_directories:
        return False

    return any(is_under_directory(file_path, directory) for directory in config.ignored_directories)
