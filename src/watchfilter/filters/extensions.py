"""File extension include/exclude filter."""

from __future__ import annotations

from typing import TYPE_CHECKING, List

from .paths import base_name, normalize_path

if TYPE_CHECKING:
    from ..config import ExtensionConfig

DEFAULT_WATCHED_EXTENSIONS: List[str] = [
    ".js",
    ".jsx",
    ".ts",
    ".tsx",
    ".html",
    ".css",
    ".scss",
    ".json",
    ".md",
    ".yaml",
    ".yml",
]


def get_file_extension(file_path: str) -> str:
    """Return the lower-cased extension including the dot, or "".

    Hidden files whose only dot is the leading one (``.gitignore``) have no
    extension.
    """
    name = base_name(normalize_path(file_path))
    dot = name.rfind(".")
    if dot <= 0:
        return ""
    return name[dot:].lower()


def matches_extension_filter(file_path: str, config: "ExtensionConfig") -> bool:
    """Check a file against the watched extensions.

    In ``include`` mode only listed extensions pass; in ``exclude`` mode
    everything except listed extensions passes. Files without an extension
    pass only in ``exclude`` mode.

    Returns:
        True if the file should be kept
    """
    if not config.enabled or not config.watched_extensions:
        return True

    extension = get_file_extension(file_path)
    if not extension:
        return config.mode == "exclude"

    listed = extension in config.watched_extensions
    return listed if config.mode == "include" else not listed
