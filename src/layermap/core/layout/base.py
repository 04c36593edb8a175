"""Layout strategy protocol and the selection of a strategy by view kind."""

from __future__ import annotations

from typing import Protocol

from layermap.config.options import RenderOptions, ViewKind
from layermap.core.graph.edges import Edge
from layermap.core.graph.graph import Graph
from layermap.core.graph.model import Container, Rectangle
from layermap.core.layout.types import Diagram, DiagramEdge


class LayoutStrategy(Protocol):
    """Turns a graph into a :class:`~layermap.core.layout.types.Diagram`."""

    def layout(self, graph: Graph, options: RenderOptions) -> Diagram:
        """Compute the geometry of *graph* for the given *options*."""
        ...


def get_strategy(view: ViewKind) -> LayoutStrategy:
    from layermap.core.layout.grid import GridLayout
    from layermap.core.layout.layers import LayersLayout
    from layermap.core.layout.poster import PosterLayout

    strategies: dict[ViewKind, type] = {
        ViewKind.GRID: GridLayout,
        ViewKind.LAYERS: LayersLayout,
        ViewKind.POSTER: PosterLayout,
    }
    return strategies[ViewKind(view)]()


def leaf_edges(edges: list[Edge], placed: dict[int, Rectangle]) -> list[DiagramEdge]:
    """One diagram edge per graph edge whose two ends were placed."""
    result: list[DiagramEdge] = []
    for edge in edges:
        source = placed.get(edge.source.id)
        target = placed.get(edge.target.id)
        if source is None or target is None:
            continue
        result.append(
            DiagramEdge(
                source=source,
                target=target,
                is_circular=edge.is_circular,
                is_up_dependency=edge.is_up_dependency,
            )
        )
    return result


def aggregated_edges(
    edges: list[Edge],
    owner_of,
    placed: dict[int, Rectangle],
    is_folder: bool,
) -> list[DiagramEdge]:
    """Collapse edges onto the containers returned by *owner_of*.

    Edges whose two owners are the same container, or are not placed, are
    skipped.  Flags of the collapsed edges are OR-ed together.
    """
    merged: dict[tuple[int, int], DiagramEdge] = {}
    for edge in edges:
        source: Container | None = owner_of(edge.source)
        target: Container | None = owner_of(edge.target)
        if source is None or target is None or source is target:
            continue
        if source.id not in placed or target.id not in placed:
            continue
        key = (source.id, target.id)
        item = merged.get(key)
        if item is None:
            item = DiagramEdge(
                source=placed[source.id], target=placed[target.id], is_folder=is_folder
            )
            merged[key] = item
        item.is_circular = item.is_circular or edge.is_circular
        item.is_up_dependency = item.is_up_dependency or edge.is_up_dependency
    return list(merged.values())


def scoped_edges(
    graph: Graph, options: RenderOptions, placed: dict[int, Rectangle]
) -> list[DiagramEdge]:
    """File edges, parent-folder edges, or both, depending on ``options.edges``."""
    edges = list(graph.edges)
    result: list[DiagramEdge] = []
    if options.draws_folder_edges:
        result.extend(aggregated_edges(edges, lambda n: n.parent, placed, is_folder=True))
    if options.draws_file_edges:
        result.extend(leaf_edges(edges, placed))
    return result
