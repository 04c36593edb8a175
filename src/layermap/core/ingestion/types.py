"""Phase 3 (Swift): Type reference resolution.

Two passes over the Swift files: the first records which file declares
each type name (the first declaration wins), the second turns every
reference to a type declared elsewhere into a ``(source, target)`` pair.
"""

from __future__ import annotations

import logging

from layermap.core.ingestion.walker import FileEntry, read_source
from layermap.core.parsers.base import ParseResult
from layermap.core.parsers.swift import SwiftParser

logger = logging.getLogger(__name__)


def process_types(files: list[FileEntry]) -> list[tuple[str, str]]:
    """Return file pairs linked by type references between Swift files."""
    parser = SwiftParser()
    parsed: dict[str, ParseResult] = {}

    for entry in files:
        if entry.language != "swift":
            continue
        content = read_source(entry)
        if content is None:
            continue
        try:
            parsed[entry.path] = parser.parse(content, entry.path)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Failed to parse Swift file %s: %s", entry.relative, exc)

    definitions: dict[str, str] = {}
    for path, result in parsed.items():
        for name in result.types.definitions:
            definitions.setdefault(name, path)

    pairs: list[tuple[str, str]] = []
    for path, result in parsed.items():
        for name in result.types.usages:
            target = definitions.get(name)
            if target is not None and target != path:
                pairs.append((path, target))
    return pairs
