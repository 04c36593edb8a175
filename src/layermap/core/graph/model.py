"""Container tree for layermap.

Every folder segment and every file of the analysed project becomes a
:class:`Container`.  Containers live in an arena owned by a
:class:`ContainerTree`: each one is addressed by its integer ``id`` and
refers to its parent and children by id.  The tree also owns the leaf
registry that maps a leaf payload (normally the full file path) to the
container that represents it, so that two ingestion passes naming the
same file end up on the same leaf.
"""

from __future__ import annotations

import logging
import posixpath
from collections.abc import Iterator
from dataclasses import dataclass, field

from layermap.core.constants import NODE_MIN_HEIGHT, NODE_MIN_WIDTH
from layermap.core.errors import GraphStructureError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------


@dataclass
class Rectangle:
    """Axis-aligned box in diagram units."""

    x: int = 0
    y: int = 0
    w: int = NODE_MIN_WIDTH
    h: int = NODE_MIN_HEIGHT

    @property
    def right(self) -> int:
        return self.x + self.w

    @property
    def bottom(self) -> int:
        return self.y + self.h

    @property
    def center_x(self) -> int:
        return self.x + self.w // 2

    @property
    def center_y(self) -> int:
        return self.y + self.h // 2

    def contains(self, other: Rectangle) -> bool:
        """Return ``True`` if *other* lies entirely inside this rectangle."""
        return (
            other.x >= self.x
            and other.y >= self.y
            and other.right <= self.right
            and other.bottom <= self.bottom
        )

    def reset(self) -> None:
        self.x = 0
        self.y = 0
        self.w = NODE_MIN_WIDTH
        self.h = NODE_MIN_HEIGHT


# ---------------------------------------------------------------------------
# Arena
# ---------------------------------------------------------------------------


class ContainerTree:
    """Arena of containers plus the leaf registry of one graph.

    Container ids are list indices, so they are unique and increase in
    creation order.  Detached containers keep their slot; only their
    parent link is cleared.
    """

    def __init__(self, root_name: str = "") -> None:
        self._nodes: list[Container] = []
        self._leaves: dict[str, int] = {}
        self.root = self.new_container(root_name, parent_id=None)

    def __len__(self) -> int:
        return len(self._nodes)

    def new_container(
        self, name: str, parent_id: int | None, version: str | None = None
    ) -> Container:
        container = Container(
            tree=self,
            id=len(self._nodes),
            name=name,
            parent_id=parent_id,
            version=version,
        )
        self._nodes.append(container)
        return container

    def get(self, node_id: int) -> Container:
        return self._nodes[node_id]

    def lookup_leaf(self, payload: str) -> Container | None:
        """Return the leaf registered under *payload*, if any."""
        node_id = self._leaves.get(payload)
        return None if node_id is None else self._nodes[node_id]

    def register_leaf(self, payload: str, container: Container) -> Container:
        """Register *container* for *payload* unless another one got there first."""
        existing = self.lookup_leaf(payload)
        if existing is not None:
            return existing
        self._leaves[payload] = container.id
        return container

    def unregister(self, container: Container) -> None:
        """Forget every leaf payload registered inside *container*'s subtree."""
        for leaf in container.iter_leaves(include_self=True):
            if leaf.data and self._leaves.get(leaf.data) == leaf.id:
                del self._leaves[leaf.data]


# ---------------------------------------------------------------------------
# Container
# ---------------------------------------------------------------------------


@dataclass(eq=False)
class Container:
    """One folder or file of the dependency tree.

    ``target_nodes`` and ``source_nodes`` hold the rolled-up view: a
    folder lists every container that any of its descendants points to
    (or is pointed to by).  Equality and hashing are by identity.
    """

    tree: ContainerTree = field(repr=False)
    id: int
    name: str
    parent_id: int | None = None
    is_leaf: bool = False
    data: str = ""
    version: str | None = None
    sub_ids: list[int] = field(default_factory=list, repr=False)
    rect: Rectangle = field(default_factory=Rectangle, repr=False)
    target_nodes: list[Container] = field(default_factory=list, repr=False)
    source_nodes: list[Container] = field(default_factory=list, repr=False)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    @property
    def parent(self) -> Container | None:
        return None if self.parent_id is None else self.tree.get(self.parent_id)

    @property
    def sub(self) -> list[Container]:
        """Children in discovery order."""
        return [self.tree.get(i) for i in self.sub_ids]

    def ancestors(self) -> Iterator[Container]:
        """Yield the parent, grandparent, ... up to the root."""
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    def is_descendant_of(self, other: Container) -> bool:
        return any(a is other for a in self.ancestors())

    def get_path(self) -> list[str]:
        """Names from the first named ancestor down to this container."""
        names = [a.name for a in self.ancestors() if a.name]
        names.reverse()
        names.append(self.name)
        return names

    def path_string(self) -> str:
        """Slash-joined names from the root, root name included."""
        names = [a.name for a in self.ancestors()]
        names.reverse()
        names.append(self.name)
        return "/".join(names)

    def get_by_name(self, name: str) -> Container | None:
        for child in self.sub:
            if child.name == name:
                return child
        return None

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def upsert(self, name: str, version: str | None = None) -> Container:
        """Return the child called *name*, creating it if needed.

        Raises:
            GraphStructureError: If this container is a leaf.
        """
        existing = self.get_by_name(name)
        if existing is not None:
            return existing
        if self.is_leaf:
            raise GraphStructureError(
                f"Cannot add {name!r} under leaf {self.name!r}"
            )
        child = self.tree.new_container(name, parent_id=self.id, version=version)
        self.sub_ids.append(child.id)
        return child

    def create_path_mapping(self, segments: list[str], payload: str) -> Container:
        """Upsert one container per segment and make the last one a leaf.

        Intermediate containers keep the longest directory shared by every
        payload routed through them in their ``data``.

        Args:
            segments: Path segments, e.g. ``["src", "lib", "a.ts"]``.
            payload: The full path stored on the leaf.

        Returns:
            The leaf for *payload*.  When the payload was already registered
            elsewhere, that earlier leaf is returned.
        """
        existing = self.tree.lookup_leaf(payload) if payload else None
        if existing is not None:
            return existing
        if not segments:
            return self.set_as_leaf(payload)

        node = self.upsert(segments[0])
        if len(segments) == 1:
            return node.set_as_leaf(payload)

        directory = posixpath.dirname(payload)
        if node.data:
            node.data = _common_directory(node.data, directory)
        else:
            node.data = directory
        return node.create_path_mapping(segments[1:], payload)

    def set_as_leaf(self, payload: str) -> Container:
        """Mark this container as a leaf carrying *payload*.

        Returns the registered leaf for *payload*, which is ``self`` unless
        another container claimed the payload first.

        Raises:
            GraphStructureError: If this container already has children.
        """
        if payload:
            existing = self.tree.lookup_leaf(payload)
            if existing is not None:
                return existing
        if self.is_leaf and self.data:
            # Same file reached under another spelling; keep the first payload.
            if payload:
                self.tree.register_leaf(payload, self)
            return self
        if self.sub_ids:
            raise GraphStructureError(
                f"Container {self.name!r} has children and cannot become a leaf"
            )
        self.is_leaf = True
        self.data = payload
        if payload:
            self.tree.register_leaf(payload, self)
        return self

    # ------------------------------------------------------------------
    # Roll-up
    # ------------------------------------------------------------------

    def rollup_is_calling_this_node(self, target: Container) -> None:
        """Record *target* as called by this container and all its ancestors."""
        node: Container | None = self
        while node is not None:
            node.target_nodes.append(target)
            node = node.parent

    def rollup_is_being_called_by_this_node(self, source: Container) -> None:
        """Record *source* as a caller of this container and all its ancestors."""
        node: Container | None = self
        while node is not None:
            node.source_nodes.append(source)
            node = node.parent

    def clear_rollup(self) -> None:
        self.target_nodes.clear()
        self.source_nodes.clear()

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def iter_leaves(self, include_self: bool = False) -> Iterator[Container]:
        """Yield every leaf under this container, depth first."""
        if self.is_leaf:
            if include_self:
                yield self
            return
        for child in self.sub:
            if child.is_leaf:
                yield child
            else:
                yield from child.iter_leaves()

    def get_flat_list_of_nodes(self) -> Iterator[Container]:
        """Lazily yield all leaf descendants; recomputed on every call."""
        return self.iter_leaves()

    def iter_descendants(self) -> Iterator[Container]:
        """Yield every descendant in pre-order."""
        for child in self.sub:
            yield child
            yield from child.iter_descendants()

    def get_flatter_list(self) -> list[Container]:
        """This container followed by its leaves, without duplicates."""
        result = [self]
        result.extend(leaf for leaf in self.iter_leaves() if leaf is not self)
        return result

    def remove_node_descendant(self, node: Container) -> bool:
        """Detach *node* wherever it appears under this container.

        Returns:
            ``True`` if *node* was found and detached.
        """
        found = False
        if node.id in self.sub_ids:
            self.sub_ids = [i for i in self.sub_ids if i != node.id]
            node.parent_id = None
            found = True
        for child in self.sub:
            if child.remove_node_descendant(node):
                found = True
        return found

    def get_first_non_common_root(self) -> Container:
        """Walk down single-child chains to the first branching container."""
        node = self
        while len(node.sub_ids) == 1:
            only = node.sub[0]
            if only.is_leaf:
                break
            node = only
        return node

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_weight(self) -> int:
        return len(self.target_nodes) + len(self.source_nodes)

    def get_external_targets(self) -> list[Container]:
        """Targets that live outside this container's subtree."""
        return _unique(
            t for t in self.target_nodes if t is not self and not t.is_descendant_of(self)
        )

    def get_external_sources(self) -> list[Container]:
        """Sources that live outside this container's subtree."""
        return _unique(
            s for s in self.source_nodes if s is not self and not s.is_descendant_of(self)
        )

    def version_to_string(self) -> str:
        return f"v{self.version}" if self.version else ""

    def label(self) -> str:
        """Display label including the version, when one is known."""
        version = self.version_to_string()
        return f"{self.name} {version}" if version else self.name

    def to_dict(self) -> dict:
        """Nested dict of names (and payloads for leaves)."""
        result: dict = {"name": self.name}
        if self.is_leaf:
            result["data"] = self.data
        if self.version:
            result["version"] = self.version
        if self.sub_ids:
            result["nodes"] = [child.to_dict() for child in self.sub]
        return result

    def format_tree(self, indent: int = 0) -> str:
        """Indented text dump of the subtree, one container per line."""
        kind = "file" if self.is_leaf else "folder"
        lines = [
            f"{'  ' * indent}{self.label() or '<root>'} "
            f"({kind}, in={len(self.source_nodes)}, out={len(self.target_nodes)})"
        ]
        for child in self.sub:
            lines.append(child.format_tree(indent + 1))
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _common_directory(a: str, b: str) -> str:
    """Longest shared directory of two paths, split on ``/``."""
    parts_a = a.split("/")
    parts_b = b.split("/")
    shared: list[str] = []
    for left, right in zip(parts_a, parts_b):
        if left != right:
            break
        shared.append(left)
    return "/".join(shared)


def _unique(items) -> list[Container]:
    seen: set[int] = set()
    result: list[Container] = []
    for item in items:
        if item.id not in seen:
            seen.add(item.id)
            result.append(item)
    return result
