"""Tests for the JSON form of a graph."""

from __future__ import annotations

import json
from pathlib import Path

from layermap.core.graph.graph import Graph
from layermap.core.graph.serialize import graph_to_dict, graph_to_json, load_graph, write_json


def _leaves(graph: Graph) -> list[str]:
    return sorted(n.data for n in graph.get_all_nodes() if n.is_leaf)


def _sample() -> Graph:
    graph = Graph()
    graph.upsert_edge_by_payload("src/b.ts", "src/a.ts")
    graph.upsert_edge_by_payload("src/a.ts", "lib/c.ts")
    graph.add_file("src/lonely.ts")
    return graph


def test_nodes_are_sorted_unique_payloads() -> None:
    document = graph_to_dict(_sample())
    assert document["nodes"] == ["lib/c.ts", "src/a.ts", "src/b.ts", "src/lonely.ts"]


def test_edges_sorted_by_source_then_target() -> None:
    document = graph_to_dict(_sample())
    assert document["edges"] == [
        {"source": "src/a.ts", "target": "lib/c.ts"},
        {"source": "src/b.ts", "target": "src/a.ts"},
    ]


def test_json_text_ends_with_newline() -> None:
    text = graph_to_json(_sample())
    assert text.endswith("}\n")
    assert json.loads(text) == graph_to_dict(_sample())


def test_round_trip_counts(tmp_path: Path) -> None:
    graph = _sample()
    path = tmp_path / "layermap.json"
    write_json(graph, path)

    loaded = load_graph(path.read_text(encoding="utf-8"))
    assert len(loaded.edges) == len(graph.edges)
    assert len(loaded.get_all_nodes()) == len(graph.get_all_nodes())
    assert _leaves(loaded) == _leaves(graph)

    document = json.loads(path.read_text(encoding="utf-8"))
    assert len(document["nodes"]) == len(_leaves(graph))
    assert len(document["edges"]) == len(graph.edges)


def test_farm_graph_serializes(farm_graph: Graph) -> None:
    document = graph_to_dict(farm_graph)
    assert document["nodes"] == ["Potato", "Yam"]
    assert len(document["edges"]) == 4
