"""Phase 1: File walking.

Collects the supported source files under a directory, pruning ignored
directories and applying exclude patterns to paths relative to the root.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from layermap.config.ignore import matches_exclude_pattern, normalize_path, should_ignore_dir
from layermap.config.languages import get_language

logger = logging.getLogger(__name__)


@dataclass
class FileEntry:
    """A source file found by the walker."""

    path: str  # absolute, forward slashes
    relative: str
    language: str


def _on_walk_error(error: OSError) -> None:
    logger.debug("Skipping unreadable directory %s: %s", error.filename, error.strerror)


def walk_sources(
    root: Path,
    exclude: list[str] | None = None,
    languages: frozenset[str] | None = None,
) -> list[FileEntry]:
    """Return every supported file under *root*, sorted by path.

    Args:
        root: Directory to scan.
        exclude: Glob patterns matched against root-relative paths.
        languages: When given, only files of these languages are kept.
    """
    root = root.resolve()
    entries: list[FileEntry] = []

    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_walk_error):
        dirnames[:] = sorted(d for d in dirnames if not should_ignore_dir(d))
        for filename in sorted(filenames):
            language = get_language(filename)
            if language is None:
                continue
            if languages is not None and language not in languages:
                continue
            full = Path(dirpath) / filename
            relative = normalize_path(str(full.relative_to(root)))
            if matches_exclude_pattern(relative, exclude):
                logger.info("Excluding %s", relative)
                continue
            entries.append(
                FileEntry(path=full.as_posix(), relative=relative, language=language)
            )

    entries.sort(key=lambda e: e.path)
    return entries


def read_source(entry: FileEntry) -> str | None:
    """Read *entry* as UTF-8, or log a warning and return ``None``."""
    try:
        return Path(entry.path).read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        logger.warning("Cannot read %s: %s", entry.relative, exc)
        return None
