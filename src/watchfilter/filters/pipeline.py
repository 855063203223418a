"""Combined filter pipeline."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, List, Optional

from ..events import FileChangeEvent
from .debounce import Clock, RecentChanges, monotonic_ms, should_debounce_event
from .directories import is_in_ignored_directory
from .event_types import is_allowed_event_type
from .extensions import matches_extension_filter
from .patterns import matches_ignored_pattern

if TYPE_CHECKING:
    from ..config import FilterConfig

logger = logging.getLogger(__name__)


def apply_all_filters(
    event: FileChangeEvent,
    config: "FilterConfig",
    recent_changes: RecentChanges,
    now: Optional[float] = None,
) -> bool:
    """Run every filter stage over an event.

    Stages run in a fixed order and the first rejection wins. Debounce runs
    last so only events that survived the structural checks reach the
    debounce state.

    Args:
        event: Incoming change event
        config: Filter configuration
        recent_changes: Debounce state
        now: Current time in milliseconds, for the debounce stage

    Returns:
        True if the event should be shown
    """
    path = event.path

    if matches_ignored_pattern(path, config.patterns):
        logger.debug("Filtered %s: ignored pattern", path)
        return False

    if is_in_ignored_directory(path, config.directories):
        logger.debug("Filtered %s: ignored directory", path)
        return False

    if not is_allowed_event_type(event.kind, config.event_types):
        logger.debug("Filtered %s: event type %r", path, event.kind)
        return False

    if not matches_extension_filter(path, config.extensions):
        logger.debug("Filtered %s: extension", path)
        return False

    if should_debounce_event(event, recent_changes, config.debounce, now):
        return False

    return True


def filter_events(
    events: Iterable[FileChangeEvent],
    config: "FilterConfig",
    recent_changes: RecentChanges,
    now: Optional[float] = None,
) -> List[FileChangeEvent]:
    """Keep the events that pass all filters, in input order."""
    return [event for event in events if apply_all_filters(event, config, recent_changes, now)]


class FilterPipeline:
    """Filter pipeline bound to its own debounce state.

    Example:
        pipeline = FilterPipeline()
        if pipeline.evaluate(event, config):
            show(event)
    """

    def __init__(
        self,
        recent_changes: Optional[RecentChanges] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        """Initialize pipeline.

        Args:
            recent_changes: Debounce state; a fresh one is created if omitted
            clock: Callable returning the current time in milliseconds
        """
        self.recent_changes = recent_changes if recent_changes is not None else RecentChanges()
        self._clock = clock or monotonic_ms

    def evaluate(self, event: FileChangeEvent, config: "FilterConfig") -> bool:
        """Return True if ``event`` should be shown."""
        return apply_all_filters(event, config, self.recent_changes, self._clock())

    def filter_list(
        self,
        events: Iterable[FileChangeEvent],
        config: "FilterConfig",
    ) -> List[FileChangeEvent]:
        """Evaluate events in order and return the survivors."""
        return [event for event in events if self.evaluate(event, config)]

    def sweep(self, max_age_ms: float) -> int:
        """Drop debounce entries older than ``max_age_ms``."""
        return self.recent_changes.sweep(max_age_ms, self._clock())
