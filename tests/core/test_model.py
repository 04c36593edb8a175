"""Tests for the container tree (model.py)."""

from __future__ import annotations

import types

import pytest

from layermap.core.errors import GraphStructureError
from layermap.core.graph.graph import Graph
from layermap.core.graph.model import Rectangle

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def graph() -> Graph:
    return Graph()


# ---------------------------------------------------------------------------
# 1. Rectangle
# ---------------------------------------------------------------------------


class TestRectangle:
    def test_defaults_are_node_size(self) -> None:
        rect = Rectangle()
        assert (rect.x, rect.y, rect.w, rect.h) == (0, 0, 300, 80)

    def test_edges_and_centers(self) -> None:
        rect = Rectangle(10, 20, 100, 40)
        assert rect.right == 110
        assert rect.bottom == 60
        assert rect.center_x == 60
        assert rect.center_y == 40

    def test_contains(self) -> None:
        outer = Rectangle(0, 0, 200, 200)
        assert outer.contains(Rectangle(10, 10, 50, 50))
        assert not outer.contains(Rectangle(190, 10, 50, 50))

    def test_reset(self) -> None:
        rect = Rectangle(5, 5, 10, 10)
        rect.reset()
        assert (rect.x, rect.y, rect.w, rect.h) == (0, 0, 300, 80)


# ---------------------------------------------------------------------------
# 2. Upsert
# ---------------------------------------------------------------------------


class TestUpsert:
    def test_same_name_returns_same_object(self, graph: Graph) -> None:
        first = graph.root.upsert("src")
        second = graph.root.upsert("src")
        assert first is second
        assert len(graph.root.sub) == 1

    def test_children_keep_discovery_order(self, graph: Graph) -> None:
        for name in ("b", "a", "c"):
            graph.root.upsert(name)
        assert [c.name for c in graph.root.sub] == ["b", "a", "c"]

    def test_ids_are_unique_and_increasing(self, graph: Graph) -> None:
        a = graph.root.upsert("a")
        b = a.upsert("b")
        c = graph.root.upsert("c")
        assert graph.root.id < a.id < b.id < c.id

    def test_upsert_under_leaf_raises(self, graph: Graph) -> None:
        leaf = graph.add_file("a.ts")
        with pytest.raises(GraphStructureError):
            leaf.upsert("child")

    def test_version_is_kept(self, graph: Graph) -> None:
        node = graph.root.upsert("http", "1.2.0")
        assert node.version_to_string() == "v1.2.0"
        assert node.label() == "http v1.2.0"

    def test_no_version_label_is_name(self, graph: Graph) -> None:
        node = graph.root.upsert("http")
        assert node.version_to_string() == ""
        assert node.label() == "http"


# ---------------------------------------------------------------------------
# 3. Leaves and the registry
# ---------------------------------------------------------------------------


class TestLeaves:
    def test_create_path_mapping_builds_folders(self, graph: Graph) -> None:
        leaf = graph.add_file("src/lib/a.ts")
        assert leaf.is_leaf
        assert leaf.data == "src/lib/a.ts"
        assert leaf.get_path() == ["src", "lib", "a.ts"]
        assert leaf.parent.name == "lib"
        assert not leaf.parent.is_leaf

    def test_folder_data_is_common_directory(self, graph: Graph, find) -> None:
        graph.add_file("src/lib/a.ts")
        assert find(graph, "src").data == "src/lib"
        graph.add_file("src/b.ts")
        assert find(graph, "src").data == "src"
        assert find(graph, "src/lib").data == "src/lib"

    def test_same_payload_maps_to_same_leaf(self, graph: Graph) -> None:
        first = graph.add_file("src/a.ts")
        size = len(graph.tree)
        second = graph.add_file("src/a.ts")
        assert first is second
        assert len(graph.tree) == size

    def test_first_writer_wins(self, graph: Graph) -> None:
        x = graph.root.upsert("x").set_as_leaf("shared")
        y_folder = graph.root.upsert("y")
        result = y_folder.set_as_leaf("shared")
        assert result is x
        assert not y_folder.is_leaf
        assert graph.get_leaf("shared") is x

    def test_empty_payload_is_not_registered(self, graph: Graph) -> None:
        leaf = graph.root.upsert("x").set_as_leaf("")
        assert leaf.is_leaf
        assert graph.get_leaf("") is None

    def test_set_as_leaf_with_children_raises(self, graph: Graph) -> None:
        folder = graph.root.upsert("folder")
        folder.upsert("child")
        with pytest.raises(GraphStructureError):
            folder.set_as_leaf("folder")

    def test_leaf_never_has_children(self, graph: Graph) -> None:
        graph.add_file("a/b.ts")
        with pytest.raises(GraphStructureError):
            graph.add_file("a/b.ts/c.ts")


# ---------------------------------------------------------------------------
# 4. Roll-up
# ---------------------------------------------------------------------------


class TestRollup:
    def test_rollup_reaches_every_ancestor(self, graph: Graph, find) -> None:
        x = graph.add_file("src/a/x.ts")
        y = graph.add_file("lib/y.ts")
        graph.upsert_edge(x, y)

        for name in ("src/a/x.ts", "src/a", "src"):
            assert y in find(graph, name).target_nodes
        assert y in graph.root.target_nodes

        for name in ("lib/y.ts", "lib"):
            assert x in find(graph, name).source_nodes
        assert x in graph.root.source_nodes

    def test_weight_counts_both_directions(self, graph: Graph) -> None:
        a = graph.add_file("a.ts")
        b = graph.add_file("b.ts")
        c = graph.add_file("c.ts")
        graph.upsert_edge(a, b)
        graph.upsert_edge(c, a)
        assert a.get_weight() == 2
        assert b.get_weight() == 1

    def test_external_targets_skip_own_subtree(self, graph: Graph, find) -> None:
        a = graph.add_file("src/a.ts")
        b = graph.add_file("src/b.ts")
        c = graph.add_file("lib/c.ts")
        graph.upsert_edge(a, b)
        graph.upsert_edge(a, c)
        assert find(graph, "src").get_external_targets() == [c]
        assert a.get_external_targets() == [b, c]
        assert c.get_external_sources() == [a]


# ---------------------------------------------------------------------------
# 5. Traversal
# ---------------------------------------------------------------------------


class TestTraversal:
    def test_flat_list_is_lazy_and_fresh(self, graph: Graph) -> None:
        graph.add_file("src/a.ts")
        leaves = graph.root.get_flat_list_of_nodes()
        assert isinstance(leaves, types.GeneratorType)
        assert [n.data for n in leaves] == ["src/a.ts"]

        graph.add_file("src/b.ts")
        assert [n.data for n in graph.root.get_flat_list_of_nodes()] == [
            "src/a.ts",
            "src/b.ts",
        ]

    def test_flatter_list_starts_with_self(self, graph: Graph, find) -> None:
        graph.add_file("src/a.ts")
        graph.add_file("src/b.ts")
        src = find(graph, "src")
        assert [n.name for n in src.get_flatter_list()] == ["src", "a.ts", "b.ts"]

    def test_remove_node_descendant(self, graph: Graph, find) -> None:
        graph.add_file("src/lib/a.ts")
        lib = find(graph, "src/lib")
        assert graph.root.remove_node_descendant(lib)
        assert find(graph, "src").sub == []
        assert lib.parent is None
        assert not graph.root.remove_node_descendant(lib)

    def test_first_non_common_root_skips_single_chain(self, graph: Graph, find) -> None:
        graph.add_file("app/src/a.ts")
        graph.add_file("app/src/b.ts")
        assert graph.root.get_first_non_common_root() is find(graph, "app/src")

    def test_first_non_common_root_stops_above_single_leaf(self, graph: Graph, find) -> None:
        graph.add_file("app/main.ts")
        assert graph.root.get_first_non_common_root() is find(graph, "app")

    def test_path_string_includes_root(self, graph: Graph) -> None:
        leaf = graph.add_file("src/a.ts")
        assert leaf.path_string() == "/src/a.ts"

    def test_format_tree_lists_every_container(self, graph: Graph) -> None:
        graph.add_file("src/a.ts")
        dump = graph.root.format_tree()
        assert dump.splitlines()[0].startswith("<root>")
        assert "  src (folder" in dump
        assert "    a.ts (file" in dump

    def test_to_dict(self, graph: Graph) -> None:
        graph.add_file("src/a.ts")
        assert graph.root.to_dict() == {
            "name": "",
            "nodes": [{"name": "src", "nodes": [{"name": "a.ts", "data": "src/a.ts"}]}],
        }
