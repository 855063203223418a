"""Key-value persistence and the filter configuration store."""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional

from .config import (
    FilterConfig,
    FilterType,
    ExtensionMode,
    default_filter_config,
    toggle_filter,
    update_stage,
)
from .errors import StorageError
from .events import RepoType
from .presets import apply_repo_type_preset

logger = logging.getLogger(__name__)

# Storage keys
STORAGE_KEY_PREFIX = "fileWatcher"
FILTER_CONFIG_KEY = f"{STORAGE_KEY_PREFIX}.filterConfig"


class KeyValueStore(ABC):
    """Minimal string key-value store.

    Implementations raise ``StorageError`` when the backing medium fails.
    """

    @abstractmethod
    def load(self, key: str) -> Optional[str]:
        """Return the stored value, or None if the key is absent."""
        ...

    @abstractmethod
    def save(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``."""
        ...


class MemoryStore(KeyValueStore):
    """In-process store, mostly for tests and ephemeral sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._values: Dict[str, str] = dict(initial or {})

    def load(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def save(self, key: str, value: str) -> None:
        self._values[key] = value


class JsonFileStore(KeyValueStore):
    """Store backed by a single JSON object on disk.

    Writes go to a temporary file in the same directory which then replaces
    the target, so readers never see a half-written file.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            raise StorageError(
                f"Failed to read {self.path} [{type(exc).__name__}]: {exc}"
            ) from exc
        if not isinstance(data, dict):
            raise StorageError(f"Expected a JSON object in {self.path}, got {type(data).__name__}")
        return data

    def load(self, key: str) -> Optional[str]:
        with self._lock:
            value = self._read_all().get(key)
        if value is not None and not isinstance(value, str):
            raise StorageError(f"Value for {key!r} in {self.path} is not a string")
        return value

    def save(self, key: str, value: str) -> None:
        with self._lock:
            try:
                values = self._read_all()
            except StorageError as exc:
                logger.warning("Overwriting unreadable store %s: %s", self.path, exc)
                values = {}
            values[key] = value
            tmp_name = None
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                fd, tmp_name = tempfile.mkstemp(prefix=self.path.name, suffix=".tmp", dir=self.path.parent)
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(values, f, indent=2)
                os.replace(tmp_name, self.path)
            except OSError as exc:
                if tmp_name is not None:
                    try:
                        os.unlink(tmp_name)
                    except FileNotFoundError:
                        pass
                raise StorageError(
                    f"Failed to write {self.path} [{type(exc).__name__}]: {exc}"
                ) from exc


class FilterConfigStore:
    """Holds the current FilterConfig and persists every change.

    Loading never raises: a missing, corrupt or unreadable value is logged
    and replaced by the default configuration.

    Example:
        store = FilterConfigStore(JsonFileStore(Path("~/.watchfilter/state.json").expanduser()))
        store.toggle_filter(FilterType.DEBOUNCE, True)
        store.apply_preset(RepoType.RUST)
    """

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        key: str = FILTER_CONFIG_KEY,
    ) -> None:
        self.store = store if store is not None else MemoryStore()
        self.key = key
        self.config = self.load()

    def load(self) -> FilterConfig:
        """Read the persisted configuration, falling back to the default."""
        try:
            raw = self.store.load(self.key)
        except StorageError as exc:
            logger.error("Failed to load filter configuration: %s", exc)
            return default_filter_config()

        if raw is None:
            return default_filter_config()

        try:
            return FilterConfig.from_json(raw)
        except ValueError as exc:
            logger.warning(
                "Ignoring corrupt filter configuration under %r (%s): %s",
                self.key,
                type(exc).__name__,
                exc,
            )
            return default_filter_config()

    def reload(self) -> FilterConfig:
        """Replace the in-memory configuration with the persisted one."""
        self.config = self.load()
        return self.config

    def save(self, config: Optional[FilterConfig] = None) -> None:
        """Persist ``config`` (or the current configuration).

        Write failures are logged, not raised; the in-memory configuration
        stays authoritative for the session.
        """
        if config is not None:
            self.config = config
        try:
            self.store.save(self.key, self.config.to_json())
        except StorageError as exc:
            logger.error("Failed to save filter configuration: %s", exc)

    def _set(self, config: FilterConfig) -> FilterConfig:
        self.save(config)
        return self.config

    def toggle_filter(self, filter_type: FilterType | str, enabled: bool) -> FilterConfig:
        """Enable or disable one filter stage."""
        return self._set(toggle_filter(self.config, filter_type, enabled))

    def apply_preset(self, repo_type: RepoType | str) -> FilterConfig:
        """Merge a repository type preset into the current configuration."""
        return self._set(apply_repo_type_preset(self.config, repo_type))

    def reset(self) -> FilterConfig:
        """Restore the default configuration."""
        return self._set(default_filter_config())

    def update_patterns(self, patterns: List[str]) -> FilterConfig:
        return self._set(update_stage(self.config, FilterType.PATTERNS, ignored_patterns=list(patterns)))

    def update_directories(self, directories: List[str]) -> FilterConfig:
        return self._set(
            update_stage(self.config, FilterType.DIRECTORIES, ignored_directories=list(directories))
        )

    def update_event_types(self, event_types: List[str]) -> FilterConfig:
        return self._set(update_stage(self.config, FilterType.EVENT_TYPES, allowed_types=list(event_types)))

    def update_extensions(self, extensions: List[str]) -> FilterConfig:
        return self._set(
            update_stage(self.config, FilterType.EXTENSIONS, watched_extensions=list(extensions))
        )

    def update_extension_mode(self, mode: ExtensionMode) -> FilterConfig:
        return self._set(update_stage(self.config, FilterType.EXTENSIONS, mode=mode))

    def update_debounce_time(self, time_window_ms: int) -> FilterConfig:
        return self._set(update_stage(self.config, FilterType.DEBOUNCE, time_window_ms=time_window_ms))

    @property
    def active_filters_count(self) -> int:
        """Number of enabled filter stages."""
        return self.config.active_filters_count
