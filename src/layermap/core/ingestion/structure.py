"""Phase 2: Structure processing.

Builds the container tree from every distinct file path and adds one
edge per ``(source, target)`` pair.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from layermap.core.graph.graph import Graph, split_path

logger = logging.getLogger(__name__)


def process_structure(
    pairs: Iterable[tuple[str, str]],
    files: Iterable[str] = (),
) -> Graph:
    """Build a graph from the given paths and pairs.

    Args:
        pairs: ``(source, target)`` file paths.
        files: Extra paths to include even when they take part in no pair.

    Returns:
        The populated graph.
    """
    graph = Graph()
    pairs = list(pairs)

    seen: set[str] = set()
    ordered: list[str] = []
    for path in [*files, *(p for pair in pairs for p in pair)]:
        if path and path not in seen:
            seen.add(path)
            ordered.append(path)

    logger.debug("Structure: %d files, %d pairs", len(ordered), len(pairs))
    for path in ordered:
        graph.add_file(path, split_path(path))

    for source, target in pairs:
        if not source or not target:
            continue
        graph.upsert_edge(graph.get_leaf(source), graph.get_leaf(target))

    return graph
