"""Filter session: configuration, debounce state and periodic cleanup."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from .config import FilterConfig
from .detection import detect_repo_type_from_directory, list_directory
from .events import FileChangeEvent, RepoType
from .filters.debounce import Clock, RecentChanges
from .filters.pipeline import FilterPipeline
from .settings import WatchFilterSettings
from .storage import FilterConfigStore, JsonFileStore

logger = logging.getLogger(__name__)


class FilterSession:
    """Filtering for one watch session.

    Each session owns its debounce state, so two sessions never suppress
    each other's events. Events are evaluated one at a time under a lock,
    in the order they are delivered.

    Example:
        with FilterSession.open() as session:
            session.auto_detect_and_apply(Path("."))
            if session.should_show(FileChangeEvent("src/app.ts", "modified", "w1")):
                print("changed")
    """

    def __init__(
        self,
        config_store: Optional[FilterConfigStore] = None,
        settings: Optional[WatchFilterSettings] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        """Initialize session.

        Args:
            config_store: Source of the filter configuration (in-memory if omitted)
            settings: Runtime settings (defaults if omitted)
            clock: Millisecond clock used for debouncing and sweeps
        """
        self.settings = settings or WatchFilterSettings()
        self.config_store = config_store or FilterConfigStore(key=self.settings.config_key)

        self.recent_changes = RecentChanges()
        self.pipeline = FilterPipeline(self.recent_changes, clock)

        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._sweep_thread: Optional[threading.Thread] = None

    @classmethod
    def open(
        cls,
        settings: Optional[WatchFilterSettings] = None,
        root_path: Path | str | None = None,
        clock: Optional[Clock] = None,
    ) -> "FilterSession":
        """Create a session persisting its configuration under ``settings.data_dir``.

        When ``root_path`` is given and ``settings.auto_detect`` is set, the
        preset for the detected repository type is applied.
        """
        settings = settings or WatchFilterSettings()
        store = FilterConfigStore(JsonFileStore(settings.state_path), key=settings.config_key)
        session = cls(config_store=store, settings=settings, clock=clock)
        if root_path is not None and settings.auto_detect:
            session.auto_detect_and_apply(root_path)
        return session

    @property
    def config(self) -> FilterConfig:
        return self.config_store.config

    @property
    def active_filters_count(self) -> int:
        return self.config_store.active_filters_count

    def should_show(self, event: FileChangeEvent) -> bool:
        """Run one event through the pipeline."""
        with self._lock:
            return self.pipeline.evaluate(event, self.config_store.config)

    def filter_events(self, events: Iterable[FileChangeEvent]) -> List[FileChangeEvent]:
        """Run a batch through the pipeline, keeping input order."""
        with self._lock:
            return self.pipeline.filter_list(events, self.config_store.config)

    def sweep_now(self) -> int:
        """Drop debounce entries older than ``retention_factor`` windows.

        Does nothing while debouncing is disabled.
        """
        debounce = self.config_store.config.debounce
        if not debounce.enabled:
            return 0
        max_age_ms = debounce.time_window_ms * self.settings.retention_factor
        removed = self.pipeline.sweep(max_age_ms)
        if removed:
            logger.debug("Swept %d debounce entries older than %d ms", removed, max_age_ms)
        return removed

    def _sweep_loop(self) -> None:
        """Background thread running the periodic sweep."""
        while not self._stop_event.wait(self.settings.sweep_interval_s):
            try:
                self.sweep_now()
            except Exception as exc:
                logger.error("Debounce sweep failed: %s", exc)

    def start(self) -> None:
        """Start the periodic debounce sweep. Non-blocking."""
        if self._sweep_thread is not None and self._sweep_thread.is_alive():
            logger.warning("Filter session already running")
            return

        self._stop_event.clear()
        self._sweep_thread = threading.Thread(
            target=self._sweep_loop,
            daemon=True,
            name="FilterSession-Sweep",
        )
        self._sweep_thread.start()
        logger.info("Filter session started (sweep every %.1fs)", self.settings.sweep_interval_s)

    def stop(self) -> None:
        """Stop the periodic sweep and wait for it to finish."""
        self._stop_event.set()
        if self._sweep_thread is not None:
            self._sweep_thread.join(timeout=2.0)
            self._sweep_thread = None
            logger.info("Filter session stopped")

    @property
    def is_running(self) -> bool:
        return self._sweep_thread is not None and self._sweep_thread.is_alive()

    def __enter__(self) -> "FilterSession":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    def apply_preset(self, repo_type: RepoType | str) -> FilterConfig:
        with self._lock:
            return self.config_store.apply_preset(repo_type)

    def auto_detect_and_apply(
        self,
        directory_path: Path | str,
        lister: Callable[[str], List[str]] = list_directory,
    ) -> Optional[RepoType]:
        """Detect the repository type of a directory and apply its preset.

        Returns:
            The applied repository type, or None if nothing specific was found
        """
        if not directory_path:
            return None

        detected = detect_repo_type_from_directory(directory_path, lister)
        logger.info("Detected repository type for %s: %s", directory_path, detected.value)
        if detected is RepoType.GENERIC:
            return None

        self.apply_preset(detected)
        return detected

    def reset(self) -> FilterConfig:
        """Restore default filters and forget all debounce state."""
        with self._lock:
            config = self.config_store.reset()
            self.recent_changes.clear()
        return config
