"""Event types for file change filtering."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ChangeKind(str, Enum):
    """Canonical kind of file system change."""
    CREATED = "created"
    MODIFIED = "modified"
    REMOVED = "removed"
    RENAMED = "renamed"
    ACCESSED = "accessed"


class RepoType(str, Enum):
    """Repository types with a filter preset.

    Declaration order is the tie-break order used by repository detection.
    """
    JAVASCRIPT = "javascript"
    TYPESCRIPT = "typescript"
    PYTHON = "python"
    JAVA = "java"
    CSHARP = "csharp"
    CPP = "cpp"
    GO = "go"
    RUST = "rust"
    PHP = "php"
    RUBY = "ruby"
    GENERIC = "generic"


@dataclass(frozen=True)
class FileChangeEvent:
    """A file system change notification.

    ``kind`` is free-form ("Create", "changed", "unlink", ...) and is
    normalized by the event type filter. ``path`` may use either separator.
    """
    path: str
    kind: str
    watch_id: str = ""


@dataclass
class RecentChange:
    """Last unsuppressed occurrence of a (path, kind) pair."""
    timestamp: float  # milliseconds, from the pipeline clock
    event: FileChangeEvent
