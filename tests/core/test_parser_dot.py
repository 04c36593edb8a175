"""Tests for the DOT reader and DOT ingestion."""

from __future__ import annotations

from pathlib import Path

import pytest

from layermap.core.errors import InputFormatError, MissingInputError
from layermap.core.ingestion.dot import load_dot, load_dot_file
from layermap.core.parsers.dot import parse_dot, strip_comments

HIERARCHICAL = """
digraph G {
  "/lib/main.dart" [label="main"];
  "/lib/utils/helper.dart" [label="helper"];
  "/lib/home_screen.dart" [label="home"];
  "/test/widget_test.dart";
  "/lib/main.dart" -> "/lib/home_screen.dart";
  "/lib/main.dart" -> "/lib/utils/helper.dart";
  "/test/widget_test.dart" -> "/lib/main.dart";
}
"""

# ---------------------------------------------------------------------------
# 1. parse_dot
# ---------------------------------------------------------------------------


class TestParseDot:
    def test_missing_digraph_raises(self) -> None:
        with pytest.raises(InputFormatError, match="no digraph found"):
            parse_dot("graph G { a -- b; }")

    def test_quoted_nodes_labels_and_edges(self) -> None:
        dot = parse_dot(HIERARCHICAL)
        assert dot.nodes[:3] == [
            "/lib/main.dart",
            "/lib/utils/helper.dart",
            "/lib/home_screen.dart",
        ]
        assert dot.labels["/lib/main.dart"] == "main"
        assert ("/lib/main.dart", "/lib/home_screen.dart") in dot.edges
        assert len(dot.edges) == 3

    def test_bare_edges(self) -> None:
        dot = parse_dot("digraph deps {\n  a -> b;\n  b -> c [color=red];\n}")
        assert dot.nodes == ["a", "b", "c"]
        assert dot.edges == [("a", "b"), ("b", "c")]

    def test_edge_endpoints_become_nodes(self) -> None:
        dot = parse_dot('digraph G { "x" -> "y"; }')
        assert dot.nodes == ["x", "y"]

    def test_graph_attributes_are_ignored(self) -> None:
        dot = parse_dot(
            'digraph G {\n  rankdir=LR;\n  node [shape=box];\n  "a" -> "b";\n}'
        )
        assert dot.nodes == ["a", "b"]

    def test_subgraphs_are_removed(self) -> None:
        dot = parse_dot(
            'digraph G {\n  subgraph cluster_0 { "hidden"; }\n  "a" -> "b";\n}'
        )
        assert "hidden" not in dot.nodes

    def test_comments_are_stripped(self) -> None:
        text = '# header\n// note\ndigraph G {\n/* "ghost" -> "a"; */\n"a" -> "b";\n}'
        assert "#" not in strip_comments(text)
        dot = parse_dot(text)
        assert dot.edges == [("a", "b")]

    def test_leading_slash_stripped_only_when_universal(self) -> None:
        dot = parse_dot(HIERARCHICAL)
        dot.strip_leading_slash()
        assert dot.nodes[0] == "lib/main.dart"
        assert dot.labels["lib/main.dart"] == "main"
        assert ("lib/main.dart", "lib/home_screen.dart") in dot.edges

        mixed = parse_dot('digraph G { "/a" -> "b"; }')
        mixed.strip_leading_slash()
        assert mixed.nodes == ["/a", "b"]


# ---------------------------------------------------------------------------
# 2. load_dot
# ---------------------------------------------------------------------------


class TestLoadDot:
    def test_hierarchical_nodes_with_exclude(self) -> None:
        graph = load_dot(HIERARCHICAL, exclude=["**/test/**"])
        leaves = sorted(n.name for n in graph.get_all_nodes() if n.is_leaf)
        assert leaves == ["helper.dart", "home_screen.dart", "main.dart"]

        assert len(graph.edges) == 2
        assert sorted(e.source.name for e in graph.edges) == ["main.dart", "main.dart"]
        assert sorted(e.target.name for e in graph.edges) == [
            "helper.dart",
            "home_screen.dart",
        ]

    def test_folders_follow_path_segments(self, find) -> None:
        graph = load_dot(HIERARCHICAL)
        assert find(graph, "lib/utils/helper.dart").is_leaf
        assert find(graph, "test/widget_test.dart").is_leaf

    def test_single_segment_uses_label(self) -> None:
        graph = load_dot('digraph G {\n"pkg_a" [label="Package A"];\n"pkg_a" -> "pkg_b";\n}')
        names = sorted(n.name for n in graph.root.sub)
        assert names == ["Package A", "pkg_b"]
        assert graph.get_leaf("pkg_a").name == "Package A"

    def test_load_dot_file(self, tmp_path: Path) -> None:
        path = tmp_path / "deps.dot"
        path.write_text('digraph G { "a" -> "b"; "b" -> "a"; }', encoding="utf-8")
        graph = load_dot_file(path)
        assert len(graph.edges) == 2

    def test_load_dot_file_missing(self, tmp_path: Path) -> None:
        with pytest.raises(MissingInputError, match="DOT file not found"):
            load_dot_file(tmp_path / "nope.dot")
