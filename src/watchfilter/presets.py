"""Filter presets per repository type."""

from __future__ import annotations

import logging
from typing import Dict, List

from .config import (
    DebounceConfig,
    DirectoryConfig,
    EventTypeConfig,
    ExtensionConfig,
    FilterConfig,
    PatternConfig,
    PresetConfig,
    default_filter_config,
    merge_stages,
)
from .events import RepoType

logger = logging.getLogger(__name__)


def _language_preset(ignored_directories: List[str], watched_extensions: List[str]) -> PresetConfig:
    """Preset that ignores build folders and includes only source extensions."""
    return PresetConfig(
        directories=DirectoryConfig(enabled=True, ignored_directories=ignored_directories),
        extensions=ExtensionConfig(enabled=True, watched_extensions=watched_extensions, mode="include"),
    )


def _generic_preset() -> PresetConfig:
    """Every stage of the default configuration."""
    defaults = default_filter_config()
    return PresetConfig(
        patterns=PatternConfig.model_validate(defaults.patterns.model_dump()),
        directories=DirectoryConfig.model_validate(defaults.directories.model_dump()),
        event_types=EventTypeConfig.model_validate(defaults.event_types.model_dump()),
        extensions=ExtensionConfig.model_validate(defaults.extensions.model_dump()),
        debounce=DebounceConfig.model_validate(defaults.debounce.model_dump()),
    )


REPO_TYPE_PRESETS: Dict[RepoType, PresetConfig] = {
    RepoType.JAVASCRIPT: _language_preset(
        ["node_modules", "dist", "build", "coverage", ".cache"],
        [".js", ".jsx", ".json", ".html", ".css", ".scss"],
    ),
    RepoType.TYPESCRIPT: _language_preset(
        ["node_modules", "dist", "build", "coverage", ".cache"],
        [".ts", ".tsx", ".js", ".jsx", ".json", ".html", ".css", ".scss"],
    ),
    RepoType.PYTHON: _language_preset(
        ["__pycache__", ".venv", "venv", "dist", "build", ".pytest_cache"],
        [".py", ".ipynb", ".json", ".yml", ".yaml"],
    ),
    RepoType.JAVA: _language_preset(
        ["target", "build", ".gradle", "out", "bin"],
        [".java", ".kt", ".xml", ".properties", ".gradle"],
    ),
    RepoType.CSHARP: _language_preset(
        ["bin", "obj", "packages", ".vs"],
        [".cs", ".csproj", ".sln", ".xaml", ".config", ".json"],
    ),
    RepoType.CPP: _language_preset(
        ["build", "bin", "lib", "obj", ".vs"],
        [".c", ".cpp", ".h", ".hpp", ".cc", ".cxx", ".cmake", ".txt"],
    ),
    RepoType.GO: _language_preset(
        ["vendor", "bin", "pkg"],
        [".go", ".mod", ".sum", ".proto"],
    ),
    RepoType.RUST: _language_preset(
        ["target", "dist", "build"],
        [".rs", ".toml", ".lock"],
    ),
    # ".blade.php" never matches: extensions start at the last dot
    RepoType.PHP: _language_preset(
        ["vendor", "node_modules", "public/build", "storage"],
        [".php", ".blade.php", ".twig", ".json", ".yml"],
    ),
    RepoType.RUBY: _language_preset(
        ["vendor", "tmp", "log", "public/assets"],
        [".rb", ".erb", ".rake", ".yml", ".json"],
    ),
    RepoType.GENERIC: _generic_preset(),
}


def get_preset(repo_type: RepoType | str) -> PresetConfig:
    """Look up the preset for a repository type.

    Raises:
        ValueError: If ``repo_type`` is not a known repository type
    """
    return REPO_TYPE_PRESETS[RepoType(repo_type)]


def apply_repo_type_preset(config: FilterConfig, repo_type: RepoType | str) -> FilterConfig:
    """Apply a repository type preset to a configuration.

    Only the stages the preset defines are replaced; the result records the
    preset as ``active_preset``.
    """
    repo_type = RepoType(repo_type)
    merged = merge_stages(config, get_preset(repo_type))
    merged.active_preset = repo_type
    logger.info("Applied %s filter preset", repo_type.value)
    return merged
