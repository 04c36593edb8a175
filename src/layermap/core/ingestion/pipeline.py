"""Pipeline orchestrator for layermap.

Detects what kind of input was given, runs the matching ingestion
phases, prepares the edges and returns the graph with a summary.

Phases executed:
    1. File walking (source directories only)
    2. Dependency extraction (imports, Swift type references, DOT text
       or ``dart pub deps``)
    3. Structure processing (container tree + edges)
    4. Twin merging (``.js`` leaves folded into their ``.ts`` sibling)
    5. Edge preparation (circular flags, layers, up-dependencies)
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from layermap.config.languages import is_script
from layermap.config.options import RenderOptions
from layermap.core.errors import EmptyGraphError, MissingInputError
from layermap.core.graph.graph import Graph
from layermap.core.ingestion.dot import load_dot_file
from layermap.core.ingestion.imports import merge_script_twins, process_imports
from layermap.core.ingestion.pubspec import fetch_pub_deps, load_pub_deps
from layermap.core.ingestion.structure import process_structure
from layermap.core.ingestion.types import process_types
from layermap.core.ingestion.walker import FileEntry, walk_sources

logger = logging.getLogger(__name__)


class InputKind(str, Enum):
    DOT = "dot"
    PUBSPEC = "pubspec"
    SWIFT = "swift"
    SCRIPT = "script"


@dataclass
class PipelineResult:
    """Summary of a pipeline run."""

    kind: InputKind = InputKind.SCRIPT
    files: int = 0
    nodes: int = 0
    edges: int = 0
    orphans: int = 0
    up_dependencies: int = 0
    circular: int = 0
    duration_seconds: float = 0.0


def detect_input_kind(path: Path) -> InputKind:
    """Decide which ingestion applies to *path*.

    A ``.dot`` file wins, then a ``pubspec.yaml`` in the directory, then a
    Swift package or Xcode project; everything else is scanned for
    TypeScript and JavaScript.
    """
    if path.suffix == ".dot":
        return InputKind.DOT
    if path.is_dir():
        if (path / "pubspec.yaml").is_file():
            return InputKind.PUBSPEC
        if (path / "Package.swift").is_file() or any(path.glob("*.xcodeproj")):
            return InputKind.SWIFT
    return InputKind.SCRIPT


def run_pipeline(
    input_path: Path,
    options: RenderOptions,
    progress_callback: Callable[[str, float], None] | None = None,
    file_callback: Callable[[list[FileEntry]], None] | None = None,
) -> tuple[Graph, PipelineResult]:
    """Build and prepare the dependency graph for *input_path*.

    Parameters
    ----------
    input_path:
        A source directory or a ``.dot`` file.
    options:
        Render options; ``exclude``, ``externals`` and ``dev`` affect
        ingestion.
    progress_callback:
        Optional ``(phase_name, progress)`` callback where *progress* is a
        float in ``[0.0, 1.0]``.
    file_callback:
        Optional callback receiving the walked source files.

    Returns
    -------
    tuple[Graph, PipelineResult]
        The prepared graph and a summary with counts and timings.

    Raises
    ------
    MissingInputError
        If *input_path* does not exist.
    EmptyGraphError
        If no nodes were discovered.
    """
    start = time.monotonic()

    def report(phase: str, pct: float) -> None:
        if progress_callback is not None:
            progress_callback(phase, pct)

    if not input_path.exists():
        raise MissingInputError(f"Input not found: {input_path}")

    kind = detect_input_kind(input_path)
    result = PipelineResult(kind=kind)
    logger.debug("Input %s detected as %s", input_path, kind.value)

    if kind == InputKind.DOT:
        report("Reading DOT file", 0.0)
        graph = load_dot_file(input_path, exclude=options.exclude)
        report("Reading DOT file", 1.0)

    elif kind == InputKind.PUBSPEC:
        report("Listing packages", 0.0)
        document = asyncio.run(fetch_pub_deps(input_path))
        report("Listing packages", 1.0)
        graph = load_pub_deps(document, externals=options.externals, dev=options.dev)

    else:
        # ------------------------------------------------------------------
        # Phase 1: Walk files
        # ------------------------------------------------------------------
        report("Walking files", 0.0)
        languages = (
            frozenset({"swift"})
            if kind == InputKind.SWIFT
            else frozenset({"typescript", "tsx", "javascript", "swift"})
        )
        files = walk_sources(input_path, options.exclude, languages)
        if kind == InputKind.SCRIPT and files and all(f.language == "swift" for f in files):
            kind = result.kind = InputKind.SWIFT
        elif kind == InputKind.SCRIPT:
            files = [f for f in files if is_script(f.path)]
        result.files = len(files)
        report("Walking files", 1.0)
        if file_callback is not None:
            file_callback(files)

        # ------------------------------------------------------------------
        # Phase 2: Dependencies
        # ------------------------------------------------------------------
        report("Resolving dependencies", 0.0)
        pairs = process_types(files) if kind == InputKind.SWIFT else process_imports(files)
        report("Resolving dependencies", 1.0)

        # ------------------------------------------------------------------
        # Phase 3-4: Structure and twins
        # ------------------------------------------------------------------
        report("Processing structure", 0.0)
        relative = {f.path: f.relative for f in files}
        graph = process_structure(
            [(relative[s], relative[t]) for s, t in pairs],
            [f.relative for f in files],
        )
        if kind == InputKind.SCRIPT:
            merge_script_twins(graph)
        report("Processing structure", 1.0)

    if not graph.root.sub_ids:
        raise EmptyGraphError("No files found")

    # ------------------------------------------------------------------
    # Phase 5: Edge preparation
    # ------------------------------------------------------------------
    report("Preparing edges", 0.0)
    graph.prepare_edges()
    report("Preparing edges", 1.0)

    if options.debug:
        logger.debug("Container tree:\n%s", graph.root.format_tree())
        for edge in graph.edges:
            logger.debug("%r", edge)

    result.nodes = len(graph.get_all_nodes())
    result.edges = len(graph.edges)
    result.orphans = len(graph.get_orphan_nodes())
    result.up_dependencies = graph.get_up_dependencies_count()
    result.circular = graph.get_circular_dependencies_count()
    result.duration_seconds = time.monotonic() - start
    return graph, result
