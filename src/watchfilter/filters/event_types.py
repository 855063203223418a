"""Event kind normalization and allow-list filter."""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List

from ..events import ChangeKind

if TYPE_CHECKING:
    from ..config import EventTypeConfig

# Synonyms reported by different watchers, mapped to canonical kinds.
# Kinds missing from this table pass through lower-cased.
EVENT_KIND_SYNONYMS: Dict[str, ChangeKind] = {
    "create": ChangeKind.CREATED,
    "created": ChangeKind.CREATED,
    "add": ChangeKind.CREATED,
    "added": ChangeKind.CREATED,
    "new": ChangeKind.CREATED,

    "modify": ChangeKind.MODIFIED,
    "modified": ChangeKind.MODIFIED,
    "change": ChangeKind.MODIFIED,
    "changed": ChangeKind.MODIFIED,
    "update": ChangeKind.MODIFIED,
    "updated": ChangeKind.MODIFIED,

    "delete": ChangeKind.REMOVED,
    "deleted": ChangeKind.REMOVED,
    "remove": ChangeKind.REMOVED,
    "removed": ChangeKind.REMOVED,
    "unlink": ChangeKind.REMOVED,

    "rename": ChangeKind.RENAMED,
    "renamed": ChangeKind.RENAMED,
    "move": ChangeKind.RENAMED,
    "moved": ChangeKind.RENAMED,

    "access": ChangeKind.ACCESSED,
    "accessed": ChangeKind.ACCESSED,
}

DEFAULT_ALLOWED_EVENT_TYPES: List[str] = [
    ChangeKind.CREATED.value,
    ChangeKind.MODIFIED.value,
    ChangeKind.REMOVED.value,
]


def normalize_event_type(kind: str) -> str:
    """Map an event kind to its canonical name, or lower-case it if unknown."""
    lowered = kind.lower()
    canonical = EVENT_KIND_SYNONYMS.get(lowered)
    return canonical.value if canonical is not None else lowered


def is_allowed_event_type(kind: str, config: "EventTypeConfig") -> bool:
    """Check whether an event kind passes the allow-list.

    An empty allow-list allows everything.

    Returns:
        True if the event should be kept
    """
    if not config.enabled or not config.allowed_types:
        return True

    return normalize_event_type(kind) in config.allowed_types
