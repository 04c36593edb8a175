"""Directed edges between containers.

:class:`EdgeCollection` is a plain set of relationships keyed by the
ordered ``(source, target)`` pair.  Roll-up onto ancestor folders is the
caller's job (see :meth:`layermap.core.graph.graph.Graph.upsert_edge`).
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from layermap.core.graph.model import Container


@dataclass(eq=False)
class Edge:
    """A dependency from *source* to *target*."""

    source: Container
    target: Container
    is_circular: bool = False
    is_up_dependency: bool = False

    @property
    def key(self) -> tuple[int, int]:
        return (self.source.id, self.target.id)

    @property
    def is_self(self) -> bool:
        return self.source is self.target

    @property
    def is_violation(self) -> bool:
        return self.is_circular or self.is_up_dependency

    def __repr__(self) -> str:
        flags = ""
        if self.is_circular:
            flags += " circular"
        if self.is_up_dependency:
            flags += " up"
        return f"<Edge {self.source.name} -> {self.target.name}{flags}>"


class EdgeCollection:
    """De-duplicated, ordered collection of :class:`Edge` objects."""

    def __init__(self) -> None:
        self._edges: list[Edge] = []
        self._index: dict[tuple[int, int], Edge] = {}

    def __len__(self) -> int:
        return len(self._edges)

    def __iter__(self) -> Iterator[Edge]:
        return iter(self._edges)

    def __getitem__(self, position: int) -> Edge:
        return self._edges[position]

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def upsert_edge(self, source: Container, target: Container) -> tuple[Edge, bool]:
        """Return the edge for ``(source, target)``, creating it if missing.

        Returns:
            A ``(edge, created)`` tuple.
        """
        key = (source.id, target.id)
        edge = self._index.get(key)
        if edge is not None:
            return edge, False
        edge = Edge(source=source, target=target)
        self._edges.append(edge)
        self._index[key] = edge
        return edge, True

    def drop_edges_with_source(self, node: Container) -> int:
        return self._drop(lambda e: e.source is node)

    def drop_edges_with_target(self, node: Container) -> int:
        return self._drop(lambda e: e.target is node)

    def drop_edges_touching(self, nodes: Iterable[Container]) -> int:
        """Drop every edge whose source or target is in *nodes*."""
        ids = {n.id for n in nodes}
        return self._drop(lambda e: e.source.id in ids or e.target.id in ids)

    def redirect(self, old: Container, new: Container) -> None:
        """Rewrite every edge endpoint *old* as *new*, merging duplicates."""
        edges = self._edges
        self._edges = []
        self._index = {}
        for edge in edges:
            source = new if edge.source is old else edge.source
            target = new if edge.target is old else edge.target
            self.upsert_edge(source, target)

    def sort_by_name(self) -> None:
        """Stable sort by source name, then target name."""
        self._edges.sort(key=lambda e: (e.source.name, e.target.name))

    def _drop(self, predicate) -> int:
        kept = [e for e in self._edges if not predicate(e)]
        dropped = len(self._edges) - len(kept)
        if dropped:
            self._edges = kept
            self._index = {e.key: e for e in kept}
        return dropped

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_edge(self, source: Container, target: Container) -> Edge | None:
        return self._index.get((source.id, target.id))

    def is_circular(self, a: Container, b: Container) -> bool:
        """``True`` when edges exist in both directions between distinct nodes."""
        if a is b:
            return False
        return (a.id, b.id) in self._index and (b.id, a.id) in self._index

    def get_total_matching_target_for_this_source(
        self, node: Container, candidates: Iterable[Container]
    ) -> int:
        """Count edges from *node* into any container of *candidates*."""
        ids = {c.id for c in candidates}
        return sum(
            1 for e in self._edges if e.source is node and e.target.id in ids
        )
