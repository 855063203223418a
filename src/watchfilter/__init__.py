"""watchfilter: filtering and repository presets for file change events."""

from .config import (
    DebounceConfig,
    DirectoryConfig,
    EventTypeConfig,
    ExtensionConfig,
    FilterConfig,
    FilterType,
    PatternConfig,
    PresetConfig,
    default_filter_config,
    toggle_filter,
)
from .detection import (
    REPO_TYPE_SIGNATURES,
    RepoTypeSignature,
    detect_repo_type,
    detect_repo_type_async,
    detect_repo_type_from_directory,
)
from .errors import ConfigError, ListingUnavailableError, StorageError, WatchFilterError
from .events import ChangeKind, FileChangeEvent, RecentChange, RepoType
from .filters import FilterPipeline, RecentChanges, apply_all_filters, filter_events
from .presets import REPO_TYPE_PRESETS, apply_repo_type_preset
from .session import FilterSession
from .settings import WatchFilterSettings, load_settings
from .storage import FilterConfigStore, JsonFileStore, KeyValueStore, MemoryStore

__version__ = "0.1.0"

__all__ = [
    "ChangeKind",
    "ConfigError",
    "DebounceConfig",
    "DirectoryConfig",
    "EventTypeConfig",
    "ExtensionConfig",
    "FileChangeEvent",
    "FilterConfig",
    "FilterConfigStore",
    "FilterPipeline",
    "FilterSession",
    "FilterType",
    "JsonFileStore",
    "KeyValueStore",
    "ListingUnavailableError",
    "MemoryStore",
    "PatternConfig",
    "PresetConfig",
    "REPO_TYPE_PRESETS",
    "REPO_TYPE_SIGNATURES",
    "RecentChange",
    "RecentChanges",
    "RepoType",
    "RepoTypeSignature",
    "StorageError",
    "WatchFilterError",
    "WatchFilterSettings",
    "apply_all_filters",
    "apply_repo_type_preset",
    "default_filter_config",
    "detect_repo_type",
    "detect_repo_type_async",
    "detect_repo_type_from_directory",
    "filter_events",
    "load_settings",
    "toggle_filter",
]
