"""Heuristic repository type detection from top-level directory entries."""

from __future__ import annotations

import inspect
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, Dict, Iterable, List, Optional, Tuple, Union

from .errors import ListingUnavailableError
from .events import RepoType
from .filters.paths import base_name, normalize_path

logger = logging.getLogger(__name__)

DirectoryLister = Callable[[str], Union[List[str], Awaitable[List[str]]]]


@dataclass(frozen=True)
class RepoTypeSignature:
    """Characteristic top-level names of a repository type."""
    files: Tuple[str, ...] = ()
    directories: Tuple[str, ...] = ()


# Ordered: on equal scores the earlier entry wins.
REPO_TYPE_SIGNATURES: Tuple[Tuple[RepoType, RepoTypeSignature], ...] = (
    (RepoType.JAVASCRIPT, RepoTypeSignature(
        files=("package.json", "package-lock.json", "yarn.lock", "node_modules"),
        directories=("node_modules",),
    )),
    (RepoType.TYPESCRIPT, RepoTypeSignature(
        files=("tsconfig.json", "package.json", "node_modules"),
        directories=("node_modules",),
    )),
    (RepoType.PYTHON, RepoTypeSignature(
        files=("requirements.txt", "setup.py", "pyproject.toml", "Pipfile"),
        directories=("__pycache__", ".venv", "venv"),
    )),
    (RepoType.JAVA, RepoTypeSignature(
        files=("pom.xml", "build.gradle", "gradlew", ".classpath"),
        directories=("target", "build", ".gradle"),
    )),
    (RepoType.CSHARP, RepoTypeSignature(
        files=(".sln", ".csproj", "packages.config"),
        directories=("bin", "obj", "packages"),
    )),
    (RepoType.CPP, RepoTypeSignature(
        files=("CMakeLists.txt", "Makefile", ".vcxproj"),
        directories=("build", "bin", "lib"),
    )),
    (RepoType.GO, RepoTypeSignature(
        files=("go.mod", "go.sum", "main.go"),
        directories=("vendor", "pkg"),
    )),
    (RepoType.RUST, RepoTypeSignature(
        files=("Cargo.toml", "Cargo.lock"),
        directories=("target", "src"),
    )),
    (RepoType.PHP, RepoTypeSignature(
        files=("composer.json", "composer.lock", "artisan"),
        directories=("vendor", "app"),
    )),
    (RepoType.RUBY, RepoTypeSignature(
        files=("Gemfile", "Rakefile", "config.ru"),
        directories=("vendor", "lib", "app"),
    )),
    (RepoType.GENERIC, RepoTypeSignature()),
)

# Directory-name keywords, checked in order, used when no listing is possible
NAME_KEYWORDS: Tuple[Tuple[RepoType, Tuple[str, ...]], ...] = (
    (RepoType.JAVASCRIPT, ("node", "js", "javascript")),
    (RepoType.TYPESCRIPT, ("ts", "typescript")),
    (RepoType.PYTHON, ("py", "python")),
    (RepoType.JAVA, ("java",)),
    (RepoType.CSHARP, ("cs", "csharp", "dotnet")),
    (RepoType.CPP, ("cpp", "c++")),
    (RepoType.GO, ("go", "golang")),
    (RepoType.RUST, ("rust", "rs")),
    (RepoType.PHP, ("php",)),
    (RepoType.RUBY, ("ruby", "rb")),
)


def score_repo_types(entries: Iterable[str]) -> Dict[RepoType, int]:
    """Score every repository type against a set of entry names.

    Entries are not split into files and directories: both signature lists
    are checked against every entry name. Entries may be bare names or paths.
    """
    names = {base_name(normalize_path(entry)).lower() for entry in entries}
    scores: Dict[RepoType, int] = {}
    for repo_type, signature in REPO_TYPE_SIGNATURES:
        score = sum(1 for name in signature.files if name.lower() in names)
        score += sum(1 for name in signature.directories if name.lower() in names)
        scores[repo_type] = score
    return scores


def detect_repo_type(entries: Iterable[str]) -> RepoType:
    """Pick the repository type whose signature best matches ``entries``.

    Args:
        entries: File and directory names from a non-recursive listing

    Returns:
        The highest scoring type. Ties go to the earlier declared type,
        except that TypeScript beats an equal JavaScript score when
        ``tsconfig.json`` is present. ``GENERIC`` when nothing scores.
    """
    entries = list(entries)
    scores = score_repo_types(entries)

    best_match = RepoType.GENERIC
    highest_score = 0
    for repo_type, _ in REPO_TYPE_SIGNATURES:
        if scores[repo_type] > highest_score:
            highest_score = scores[repo_type]
            best_match = repo_type

    javascript = scores[RepoType.JAVASCRIPT]
    typescript = scores[RepoType.TYPESCRIPT]
    if javascript == typescript and typescript > 0 and best_match is RepoType.JAVASCRIPT:
        names = {base_name(normalize_path(entry)).lower() for entry in entries}
        if "tsconfig.json" in names:
            best_match = RepoType.TYPESCRIPT

    logger.debug("Repository type scores: %s -> %s", scores, best_match.value)
    return best_match


def guess_repo_type_from_name(directory_path: str) -> RepoType:
    """Guess a repository type from the directory's own name.

    Plain substring matching, so it is only a last resort.
    """
    name = base_name(normalize_path(directory_path)).lower()
    for repo_type, keywords in NAME_KEYWORDS:
        if any(keyword in name for keyword in keywords):
            return repo_type
    return RepoType.GENERIC


def list_directory(directory_path: str) -> List[str]:
    """Non-recursive listing of entry names in ``directory_path``."""
    return sorted(os.listdir(directory_path))


def detect_repo_type_from_directory(
    directory_path: Path | str,
    lister: Callable[[str], List[str]] = list_directory,
) -> RepoType:
    """List a directory and detect its repository type.

    Listing errors are logged and yield ``GENERIC``.
    """
    path = str(directory_path)
    try:
        entries = lister(path)
    except Exception as exc:
        logger.warning("Failed to list %s for repository detection: %s", path, exc)
        return RepoType.GENERIC

    if not isinstance(entries, (list, tuple)):
        logger.warning("Directory lister returned %s, expected a list", type(entries).__name__)
        return RepoType.GENERIC

    return detect_repo_type(entries)


async def detect_repo_type_async(
    directory_path: Path | str,
    lister: Optional[DirectoryLister] = list_directory,
) -> RepoType:
    """Detect the repository type with a possibly asynchronous lister.

    When no lister is available (``lister`` is None or raises
    ``ListingUnavailableError``) the directory name is used as a hint. Any
    other listing failure yields ``GENERIC``; this never raises.
    """
    path = str(directory_path)
    if lister is None:
        return guess_repo_type_from_name(path)

    try:
        entries = lister(path)
        if inspect.isawaitable(entries):
            entries = await entries
    except ListingUnavailableError as exc:
        logger.warning("Directory listing not available (%s), guessing from name", exc)
        return guess_repo_type_from_name(path)
    except Exception as exc:
        logger.error("Error detecting repository type for %s: %s", path, exc)
        return RepoType.GENERIC

    if not isinstance(entries, (list, tuple)):
        logger.warning("Directory lister returned %s, expected a list", type(entries).__name__)
        return RepoType.GENERIC

    return detect_repo_type(entries)
