"""Dart/Flutter dependency ingestion from ``dart pub deps --json``.

Each package becomes a leaf inside a group container (``direct``,
``dev``, ``transitive`` or its source kind), and each package
dependency becomes an edge.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

from layermap.core.errors import DependencyCommandError, InputFormatError
from layermap.core.graph.graph import Graph

logger = logging.getLogger(__name__)

PUB_DEPS_COMMAND: tuple[str, ...] = ("dart", "pub", "deps", "--json")

# The framework itself is implied by every Flutter package.
_SKIPPED_PACKAGES: frozenset[str] = frozenset({"flutter"})


async def fetch_pub_deps(project_dir: Path) -> dict:
    """Run ``dart pub deps --json`` in *project_dir* and decode its output.

    Raises:
        DependencyCommandError: If the command cannot start or exits non-zero.
        InputFormatError: If its output is not a JSON object.
    """
    command = " ".join(PUB_DEPS_COMMAND)
    try:
        process = await asyncio.create_subprocess_exec(
            *PUB_DEPS_COMMAND,
            cwd=str(project_dir),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        raise DependencyCommandError(command, -1, str(exc)) from exc

    stdout, stderr = await process.communicate()
    if process.returncode != 0:
        raise DependencyCommandError(
            command, process.returncode, stderr.decode("utf-8", errors="replace")
        )
    try:
        document = json.loads(stdout.decode("utf-8", errors="replace"))
    except json.JSONDecodeError as exc:
        raise InputFormatError(f"Invalid output from {command!r}: {exc}") from exc
    if not isinstance(document, dict):
        raise InputFormatError(f"Invalid output from {command!r}: expected a JSON object")
    return document


def group_name(package: dict) -> str:
    """Name of the container a package is filed under."""
    kind = package.get("kind")
    source = package.get("source")
    if kind == "dev":
        return "dev"
    if source in ("git", "path"):
        return "direct"
    if kind == "transitive":
        return "transitive"
    if kind == "direct" or source == "sdk":
        return "direct"
    return str(source or kind or "unknown")


def load_pub_deps(
    document: dict,
    graph: Graph | None = None,
    externals: bool = False,
    dev: bool = False,
) -> Graph:
    """Build a graph from decoded ``dart pub deps --json`` output.

    Args:
        document: The decoded JSON, with a ``packages`` list.
        graph: Graph to populate; a new one is created when omitted.
        externals: Keep the ``transitive`` group.
        dev: Keep the ``dev`` group.
    """
    if graph is None:
        graph = Graph()
    packages = [
        p for p in document.get("packages", []) if p.get("name") not in _SKIPPED_PACKAGES
    ]

    for package in packages:
        group = graph.root.upsert(group_name(package))
        leaf = group.upsert(package["name"], package.get("version"))
        leaf.set_as_leaf(package["name"])

    for package in packages:
        for dependency in package.get("dependencies", []):
            if dependency in _SKIPPED_PACKAGES:
                continue
            graph.upsert_edge_by_payload(package["name"], dependency)

    dropped_groups = []
    if not externals:
        dropped_groups.append("transitive")
    if not dev:
        dropped_groups.append("dev")
    for name in dropped_groups:
        container = graph.root.get_by_name(name)
        if container is not None:
            graph.drop_subtree(container)

    return graph
