"""Directory ignore rules and glob-style exclude patterns."""

from __future__ import annotations

import re
from collections.abc import Iterable
from functools import lru_cache

# Directories never descended into while scanning for sources.
DEFAULT_IGNORE_DIRS: frozenset[str] = frozenset(
    {
        "node_modules",
        ".git",
        ".build",
        "Pods",
        "build",
        "bin",
        "cdk.out",
        "dist",
        "coverage",
    }
)


def should_ignore_dir(name: str) -> bool:
    """Return ``True`` for directories the walker should prune."""
    return name in DEFAULT_IGNORE_DIRS or (name.startswith(".") and name not in (".", ".."))


def normalize_path(path: str) -> str:
    """Forward slashes and no leading ``./``."""
    path = path.replace("\\", "/")
    while path.startswith("./"):
        path = path[2:]
    return path


@lru_cache(maxsize=256)
def _compile(pattern: str) -> re.Pattern[str]:
    """Translate a glob into an anchored regex.

    ``**/`` matches an optional directory prefix, ``**`` anything,
    ``*`` anything except ``/`` and ``?`` one non-slash character.
    """
    out: list[str] = []
    i = 0
    while i < len(pattern):
        if pattern.startswith("**/", i):
            out.append("(.*/)?")
            i += 3
        elif pattern.startswith("**", i):
            out.append(".*")
            i += 2
        elif pattern[i] == "*":
            out.append("[^/]*")
            i += 1
        elif pattern[i] == "?":
            out.append("[^/]")
            i += 1
        else:
            out.append(re.escape(pattern[i]))
            i += 1
    return re.compile("^" + "".join(out) + "$")


def matches_exclude_pattern(path: str, patterns: str | Iterable[str] | None) -> bool:
    """Return ``True`` if the normalized *path* matches any of *patterns*."""
    if not patterns:
        return False
    if isinstance(patterns, str):
        patterns = [patterns]
    candidate = normalize_path(path)
    return any(_compile(normalize_path(p)).match(candidate) for p in patterns if p)
