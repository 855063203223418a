"""Individual filter stages and the pipeline that combines them."""

from .debounce import (
    DEFAULT_DEBOUNCE_TIME_MS,
    RecentChanges,
    cleanup_recent_changes,
    create_debounce_key,
    should_debounce_event,
)
from .directories import DEFAULT_IGNORED_DIRECTORIES, is_in_ignored_directory
from .event_types import DEFAULT_ALLOWED_EVENT_TYPES, is_allowed_event_type, normalize_event_type
from .extensions import DEFAULT_WATCHED_EXTENSIONS, get_file_extension, matches_extension_filter
from .paths import normalize_path
from .patterns import DEFAULT_IGNORED_PATTERNS, glob_to_regex, matches_ignored_pattern
from .pipeline import FilterPipeline, apply_all_filters, filter_events

__all__ = [
    "DEFAULT_ALLOWED_EVENT_TYPES",
    "DEFAULT_DEBOUNCE_TIME_MS",
    "DEFAULT_IGNORED_DIRECTORIES",
    "DEFAULT_IGNORED_PATTERNS",
    "DEFAULT_WATCHED_EXTENSIONS",
    "FilterPipeline",
    "RecentChanges",
    "apply_all_filters",
    "cleanup_recent_changes",
    "create_debounce_key",
    "filter_events",
    "get_file_extension",
    "glob_to_regex",
    "is_allowed_event_type",
    "is_in_ignored_directory",
    "matches_extension_filter",
    "matches_ignored_pattern",
    "normalize_event_type",
    "normalize_path",
    "should_debounce_event",
]
