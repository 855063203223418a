"""Pydantic models for the filter configuration.

Python attributes are snake_case; the persisted JSON uses camelCase
keys (``ignoredPatterns``, ``timeWindowMs``, ...).
Models are treated as values: helpers here return updated copies.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from .events import RepoType
from .filters.debounce import DEFAULT_DEBOUNCE_TIME_MS
from .filters.directories import DEFAULT_IGNORED_DIRECTORIES
from .filters.event_types import DEFAULT_ALLOWED_EVENT_TYPES
from .filters.extensions import DEFAULT_WATCHED_EXTENSIONS
from .filters.patterns import DEFAULT_IGNORED_PATTERNS

ExtensionMode = Literal["include", "exclude"]


class FilterType(str, Enum):
    """Identifiers of the toggleable filter stages."""
    PATTERNS = "patterns"
    DIRECTORIES = "directories"
    EVENT_TYPES = "eventTypes"
    EXTENSIONS = "extensions"
    DEBOUNCE = "debounce"


# FilterType -> FilterConfig attribute, in pipeline order
STAGE_ATTRIBUTES: Dict[FilterType, str] = {
    FilterType.PATTERNS: "patterns",
    FilterType.DIRECTORIES: "directories",
    FilterType.EVENT_TYPES: "event_types",
    FilterType.EXTENSIONS: "extensions",
    FilterType.DEBOUNCE: "debounce",
}


class PatternConfig(BaseModel):
    """Glob patterns matched against file base names."""

    enabled: bool = False
    ignored_patterns: List[str] = Field(
        default_factory=lambda: list(DEFAULT_IGNORED_PATTERNS), alias="ignoredPatterns"
    )

    model_config = {"populate_by_name": True, "extra": "ignore"}


class DirectoryConfig(BaseModel):
    """Directories whose contents are ignored."""

    enabled: bool = True
    ignored_directories: List[str] = Field(
        default_factory=lambda: list(DEFAULT_IGNORED_DIRECTORIES), alias="ignoredDirectories"
    )

    model_config = {"populate_by_name": True, "extra": "ignore"}


class EventTypeConfig(BaseModel):
    """Allow-list of canonical event kinds."""

    enabled: bool = False
    allowed_types: List[str] = Field(
        default_factory=lambda: list(DEFAULT_ALLOWED_EVENT_TYPES), alias="allowedTypes"
    )

    model_config = {"populate_by_name": True, "extra": "ignore"}


class ExtensionConfig(BaseModel):
    """Extensions to include (or exclude) from the output."""

    enabled: bool = False
    watched_extensions: List[str] = Field(
        default_factory=lambda: list(DEFAULT_WATCHED_EXTENSIONS), alias="watchedExtensions"
    )
    mode: ExtensionMode = "include"

    model_config = {"populate_by_name": True, "extra": "ignore"}


class DebounceConfig(BaseModel):
    """Suppression window for repeated (path, kind) events."""

    enabled: bool = False
    time_window_ms: int = Field(default=DEFAULT_DEBOUNCE_TIME_MS, alias="timeWindowMs", ge=0)

    model_config = {"populate_by_name": True, "extra": "ignore"}


class FilterConfig(BaseModel):
    """Configuration of every filter stage.

    Example JSON:
        {
          "patterns": {"enabled": false, "ignoredPatterns": ["*.tmp"]},
          "directories": {"enabled": true, "ignoredDirectories": ["node_modules"]},
          "eventTypes": {"enabled": false, "allowedTypes": ["created"]},
          "extensions": {"enabled": false, "watchedExtensions": [".ts"], "mode": "include"},
          "debounce": {"enabled": false, "timeWindowMs": 300},
          "activePreset": "typescript"
        }
    """

    patterns: PatternConfig = Field(default_factory=PatternConfig)
    directories: DirectoryConfig = Field(default_factory=DirectoryConfig)
    event_types: EventTypeConfig = Field(default_factory=EventTypeConfig, alias="eventTypes")
    extensions: ExtensionConfig = Field(default_factory=ExtensionConfig)
    debounce: DebounceConfig = Field(default_factory=DebounceConfig)
    active_preset: Optional[RepoType] = Field(default=None, alias="activePreset")

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @property
    def active_filters_count(self) -> int:
        """Number of enabled stages."""
        return sum(1 for attr in STAGE_ATTRIBUTES.values() if getattr(self, attr).enabled)

    def to_json(self) -> str:
        """Serialize using the persisted (camelCase) key names."""
        return self.model_dump_json(by_alias=True, exclude_none=True)

    @classmethod
    def from_json(cls, data: str) -> "FilterConfig":
        """Parse persisted JSON; raises ``ValueError`` on malformed input."""
        return cls.model_validate_json(data)


class PresetConfig(BaseModel):
    """A partial FilterConfig: stages left as None are not touched."""

    patterns: Optional[PatternConfig] = None
    directories: Optional[DirectoryConfig] = None
    event_types: Optional[EventTypeConfig] = Field(default=None, alias="eventTypes")
    extensions: Optional[ExtensionConfig] = None
    debounce: Optional[DebounceConfig] = None

    model_config = {"populate_by_name": True, "extra": "ignore"}


def default_filter_config() -> FilterConfig:
    """Return a fresh copy of the default configuration.

    Only the directory filter is enabled by default.
    """
    return FilterConfig()


def merge_stages(config: FilterConfig, preset: PresetConfig) -> FilterConfig:
    """Overlay the stages present in ``preset`` onto ``config``.

    Within a stage only the fields the preset explicitly sets replace the
    current values. Stages the preset leaves as None keep their current
    values. ``config`` itself is not modified.
    """
    updates = {}
    for attr in STAGE_ATTRIBUTES.values():
        preset_stage = getattr(preset, attr)
        if preset_stage is None:
            continue
        current_stage = getattr(config, attr)
        updates[attr] = current_stage.model_copy(
            deep=True, update=preset_stage.model_dump(exclude_unset=True)
        )
    return config.model_copy(deep=True, update=updates)


def toggle_filter(config: FilterConfig, filter_type: FilterType | str, enabled: bool) -> FilterConfig:
    """Return a copy of ``config`` with one stage switched on or off."""
    attr = STAGE_ATTRIBUTES[FilterType(filter_type)]
    stage = getattr(config, attr).model_copy(deep=True, update={"enabled": enabled})
    return config.model_copy(deep=True, update={attr: stage})


def update_stage(config: FilterConfig, filter_type: FilterType | str, **changes) -> FilterConfig:
    """Return a copy of ``config`` with fields of one stage replaced.

    ``changes`` are validated against the stage model, so an invalid mode or
    negative window raises ``pydantic.ValidationError``.
    """
    attr = STAGE_ATTRIBUTES[FilterType(filter_type)]
    current = getattr(config, attr)
    stage = type(current).model_validate({**current.model_dump(), **changes})
    return config.model_copy(deep=True, update={attr: stage})
