"""Runtime settings for watchfilter sessions.

These are process-level knobs (where state lives, how often the debounce
state is swept). The per-user filter configuration is a ``FilterConfig``
kept in a key-value store.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .errors import ConfigError
from .filters.debounce import RETENTION_FACTOR, SWEEP_INTERVAL_SECONDS
from .storage import FILTER_CONFIG_KEY

# Settings file names; JSON takes priority over YAML
SETTINGS_JSON_NAME = "settings.json"
SETTINGS_YAML_NAME = "settings.yaml"

# Key-value store file holding the persisted filter configuration
STATE_FILE_NAME = "state.json"

log = logging.getLogger(__name__)


def _default_data_dir() -> Path:
    """Get global watchfilter data directory."""
    env_override = os.getenv("WATCHFILTER_DATA_DIR")
    if env_override:
        return Path(env_override).expanduser().resolve()
    return (Path.home() / ".watchfilter").resolve()


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in {"true", "1", "yes", "on"}


@dataclass
class WatchFilterSettings:
    """Runtime settings.

    - data_dir: Directory holding settings files and the state store.
    - config_key: Key the FilterConfig is persisted under.
    - sweep_interval_s: Seconds between debounce state sweeps.
    - retention_factor: Sweep drops entries older than this many windows.
    - auto_detect: Apply the detected repository preset on session setup.
    """

    data_dir: Path = field(default_factory=_default_data_dir)
    config_key: str = FILTER_CONFIG_KEY
    sweep_interval_s: float = SWEEP_INTERVAL_SECONDS
    retention_factor: int = RETENTION_FACTOR
    auto_detect: bool = True

    def __post_init__(self) -> None:
        self.data_dir = Path(self.data_dir).expanduser()
        if self.sweep_interval_s <= 0:
            raise ConfigError(f"sweep_interval_s must be positive, got {self.sweep_interval_s}")
        if self.retention_factor < 1:
            raise ConfigError(f"retention_factor must be at least 1, got {self.retention_factor}")

    @property
    def state_path(self) -> Path:
        """Path of the JSON key-value store."""
        return self.data_dir / STATE_FILE_NAME

    def apply_mapping(self, values: Mapping[str, Any], source: str) -> None:
        """Apply known keys from a parsed settings document."""
        if "config_key" in values:
            self.config_key = str(values["config_key"])
        if "sweep_interval_s" in values:
            try:
                interval = float(values["sweep_interval_s"])
            except (TypeError, ValueError):
                interval = 0.0
            if interval > 0:
                self.sweep_interval_s = interval
            else:
                log.warning("Invalid sweep_interval_s in %s: %r", source, values["sweep_interval_s"])
        if "retention_factor" in values:
            try:
                factor = int(values["retention_factor"])
            except (TypeError, ValueError):
                factor = 0
            if factor >= 1:
                self.retention_factor = factor
            else:
                log.warning("Invalid retention_factor in %s: %r", source, values["retention_factor"])
        if "auto_detect" in values:
            value = values["auto_detect"]
            self.auto_detect = _parse_bool(value) if isinstance(value, str) else bool(value)

    def apply_env_overrides(self, environ: Optional[Mapping[str, str]] = None) -> None:
        """Apply environment variable overrides.

        Priority: default -> settings file -> environment (highest)

        Supported variables:
            WATCHFILTER_SWEEP_INTERVAL: Seconds between debounce sweeps
            WATCHFILTER_RETENTION_FACTOR: Debounce windows kept by a sweep
            WATCHFILTER_AUTO_DETECT: Apply detected presets (true/false)
        """
        env = os.environ if environ is None else environ

        if "WATCHFILTER_SWEEP_INTERVAL" in env:
            try:
                interval = float(env["WATCHFILTER_SWEEP_INTERVAL"])
                if interval <= 0:
                    raise ValueError(interval)
                self.sweep_interval_s = interval
                log.debug("Overriding sweep_interval_s from environment: %s", interval)
            except ValueError:
                log.warning("Invalid WATCHFILTER_SWEEP_INTERVAL: %r", env["WATCHFILTER_SWEEP_INTERVAL"])

        if "WATCHFILTER_RETENTION_FACTOR" in env:
            try:
                factor = int(env["WATCHFILTER_RETENTION_FACTOR"])
                if factor < 1:
                    raise ValueError(factor)
                self.retention_factor = factor
                log.debug("Overriding retention_factor from environment: %s", factor)
            except ValueError:
                log.warning("Invalid WATCHFILTER_RETENTION_FACTOR: %r", env["WATCHFILTER_RETENTION_FACTOR"])

        if "WATCHFILTER_AUTO_DETECT" in env:
            self.auto_detect = _parse_bool(env["WATCHFILTER_AUTO_DETECT"])
            log.debug("Overriding auto_detect from environment: %s", self.auto_detect)


def _read_settings_file(path: Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        if path.suffix == ".json":
            data = json.load(f)
        else:
            data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"expected a mapping, got {type(data).__name__}")
    return data


def load_settings(
    settings_path: Path | str | None = None,
    environ: Optional[Mapping[str, str]] = None,
) -> WatchFilterSettings:
    """Load settings from JSON or YAML, then apply environment overrides.

    Priority order for the file:
    1. Explicit settings_path if provided
    2. <data_dir>/settings.json
    3. <data_dir>/settings.yaml
    4. Defaults

    Raises:
        ConfigError: If an explicitly given settings file is missing or invalid
    """
    settings = WatchFilterSettings()

    if settings_path is not None:
        path = Path(settings_path)
        try:
            values = _read_settings_file(path)
        except Exception as exc:
            raise ConfigError(f"Failed to load settings from {path}: {exc}") from exc
        if "data_dir" in values:
            settings.data_dir = Path(str(values["data_dir"])).expanduser()
        settings.apply_mapping(values, str(path))
    else:
        for name in (SETTINGS_JSON_NAME, SETTINGS_YAML_NAME):
            path = settings.data_dir / name
            if not path.exists():
                continue
            try:
                values = _read_settings_file(path)
            except Exception as exc:
                log.warning(
                    "Failed to load settings from %s (%s): %s",
                    path,
                    type(exc).__name__,
                    exc,
                )
                continue
            settings.apply_mapping(values, str(path))
            break

    settings.apply_env_overrides(environ)
    return settings
