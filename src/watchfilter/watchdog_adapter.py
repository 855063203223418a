"""Adapter feeding watchdog events through a filter session."""

from __future__ import annotations

import logging
import os
from typing import Callable, Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler

from .events import ChangeKind, FileChangeEvent
from .session import FilterSession

logger = logging.getLogger(__name__)

# watchdog event_type -> canonical kind
_WATCHDOG_KINDS = {
    "created": ChangeKind.CREATED,
    "modified": ChangeKind.MODIFIED,
    "deleted": ChangeKind.REMOVED,
    "moved": ChangeKind.RENAMED,
}


def to_change_event(event: FileSystemEvent, watch_id: str = "") -> Optional[FileChangeEvent]:
    """Convert a watchdog event into a FileChangeEvent.

    Moves are reported at their destination path. Directory events and
    event types without a canonical kind (opened, closed) yield None.
    """
    if event.is_directory:
        return None

    kind = _WATCHDOG_KINDS.get(event.event_type)
    if kind is None:
        return None

    path = event.src_path
    if kind is ChangeKind.RENAMED and getattr(event, "dest_path", ""):
        path = event.dest_path

    return FileChangeEvent(path=os.fsdecode(path), kind=kind.value, watch_id=watch_id)


class FilteringEventHandler(FileSystemEventHandler):
    """watchdog handler that forwards only the events a session shows.

    Scheduling the handler on an observer is left to the caller:

        handler = FilteringEventHandler(session, on_event, watch_id="w1")
        observer.schedule(handler, str(root), recursive=True)
    """

    def __init__(
        self,
        session: FilterSession,
        on_event: Callable[[FileChangeEvent], None],
        watch_id: str = "",
    ) -> None:
        super().__init__()
        self._session = session
        self._on_event = on_event
        self.watch_id = watch_id

    def on_created(self, event) -> None:
        self._emit(event)

    def on_modified(self, event) -> None:
        self._emit(event)

    def on_deleted(self, event) -> None:
        self._emit(event)

    def on_moved(self, event) -> None:
        self._emit(event)

    def _emit(self, raw_event: FileSystemEvent) -> None:
        event = to_change_event(raw_event, self.watch_id)
        if event is None or not self._session.should_show(event):
            return

        try:
            self._on_event(event)
        except Exception as exc:
            logger.error("Error in on_event callback: %s", exc)
