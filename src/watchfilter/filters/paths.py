"""Path helpers shared by the path-based filters."""

from __future__ import annotations


def normalize_path(path: str) -> str:
    """Use forward slashes and drop a single trailing slash."""
    normalized = path.replace("\\", "/")
    if normalized.endswith("/"):
        normalized = normalized[:-1]
    return normalized


def base_name(path: str) -> str:
    """Return the part of ``path`` after the last ``/``."""
    return path.rsplit("/", 1)[-1]
