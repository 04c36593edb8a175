"""DOT ingestion: load a parsed digraph into a :class:`Graph`."""

from __future__ import annotations

import logging
from pathlib import Path

from layermap.config.ignore import matches_exclude_pattern
from layermap.core.errors import MissingInputError
from layermap.core.graph.graph import Graph, split_path
from layermap.core.parsers.dot import parse_dot

logger = logging.getLogger(__name__)


def load_dot(content: str, graph: Graph | None = None, exclude: list[str] | None = None) -> Graph:
    """Build the container tree and edges described by DOT *content*.

    Node names are split on ``/`` or ``\\`` into folders; the last segment
    names the leaf.  A single-segment node with a ``label`` attribute is
    displayed under that label.

    Raises:
        InputFormatError: If *content* has no ``digraph`` declaration.
    """
    if graph is None:
        graph = Graph()

    dot = parse_dot(content)
    dot.strip_leading_slash()

    kept: list[str] = []
    for name in dot.nodes:
        if matches_exclude_pattern(name, exclude):
            logger.info("Excluding node: %s", name)
            continue
        kept.append(name)

    for name in kept:
        segments = split_path(name)
        if not segments:
            continue
        leaf = graph.add_file(name, segments)
        if len(segments) == 1 and dot.labels.get(name):
            leaf.name = dot.labels[name]

    kept_set = set(kept)
    for source, target in dot.edges:
        if source not in kept_set or target not in kept_set:
            continue
        source_node = graph.get_leaf(source)
        target_node = graph.get_leaf(target)
        if source_node is not None and target_node is not None:
            graph.upsert_edge(source_node, target_node)

    return graph


def load_dot_file(path: Path, graph: Graph | None = None, exclude: list[str] | None = None) -> Graph:
    """Read *path* and pass it to :func:`load_dot`.

    Raises:
        MissingInputError: If *path* does not exist.
    """
    if not path.is_file():
        raise MissingInputError(f"DOT file not found: {path}")
    logger.info("Reading DOT file: %s", path)
    return load_dot(path.read_text(encoding="utf-8"), graph=graph, exclude=exclude)
