"""Time-window debounce for repeated (path, kind) events."""

from __future__ import annotations

import logging
import threading
import time
from typing import TYPE_CHECKING, Callable, Dict, Optional

from ..events import FileChangeEvent, RecentChange

if TYPE_CHECKING:
    from ..config import DebounceConfig

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_TIME_MS = 300

# Periodic cleanup cadence and how many windows an entry is kept for.
# Keeping several windows tolerates the window being changed mid-burst.
SWEEP_INTERVAL_SECONDS = 30.0
RETENTION_FACTOR = 10

Clock = Callable[[], float]


def monotonic_ms() -> float:
    """Default debounce clock in milliseconds."""
    return time.monotonic() * 1000.0


def create_debounce_key(event: FileChangeEvent) -> str:
    """Key identifying repeats of the same change."""
    return f"{event.path}:{event.kind}"


class RecentChanges:
    """Recent unsuppressed changes, keyed by ``path:kind``.

    Each pipeline owns one instance. All access goes through the internal
    lock so a sweep thread can run alongside event evaluation.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, RecentChange] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def get(self, key: str) -> Optional[RecentChange]:
        with self._lock:
            return self._entries.get(key)

    def check_and_record(self, event: FileChangeEvent, now: float, window_ms: float) -> bool:
        """Record ``event`` unless a prior entry is still inside the window.

        A suppressed event leaves the prior timestamp alone, so a burst is
        silenced until the first occurrence's window elapses.

        Returns:
            True if the event falls inside an open window (suppress it)
        """
        key = create_debounce_key(event)
        with self._lock:
            prior = self._entries.get(key)
            if prior is not None and now - prior.timestamp < window_ms:
                return True
            self._entries[key] = RecentChange(timestamp=now, event=event)
            return False

    def sweep(self, max_age_ms: float, now: float) -> int:
        """Drop entries older than ``max_age_ms``; returns how many were dropped."""
        with self._lock:
            stale = [key for key, change in self._entries.items() if now - change.timestamp > max_age_ms]
            for key in stale:
                del self._entries[key]
        return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


def should_debounce_event(
    event: FileChangeEvent,
    recent_changes: RecentChanges,
    config: "DebounceConfig",
    now: Optional[float] = None,
) -> bool:
    """Check whether an event repeats a change seen within the window.

    Args:
        event: Incoming change event
        recent_changes: Debounce state owned by the caller
        config: Debounce filter configuration
        now: Current time in milliseconds (defaults to the monotonic clock)

    Returns:
        True if the event should be dropped
    """
    if not config.enabled:
        return False

    if now is None:
        now = monotonic_ms()
    suppressed = recent_changes.check_and_record(event, now, config.time_window_ms)
    if suppressed:
        logger.debug("Debounced %s (%s)", event.path, event.kind)
    return suppressed


def cleanup_recent_changes(
    recent_changes: RecentChanges,
    max_age_ms: float,
    now: Optional[float] = None,
) -> int:
    """Remove entries older than ``max_age_ms`` from the debounce state."""
    if now is None:
        now = monotonic_ms()
    removed = recent_changes.sweep(max_age_ms, now)
    if removed:
        logger.debug("Swept %d stale debounce entries", removed)
    return removed
