"""JSON form of a graph: sorted leaf payloads and sorted payload edges."""

from __future__ import annotations

import json
from pathlib import Path

from layermap.core.graph.graph import Graph


def graph_to_dict(graph: Graph) -> dict:
    """Return ``{"nodes": [...], "edges": [{"source", "target"}, ...]}``.

    Nodes are the unique non-empty leaf payloads, sorted.
    Edges are sorted by source payload, then target payload.
    """
    nodes = sorted({n.data for n in graph.get_all_nodes() if n.is_leaf and n.data.strip()})
    edges = [
        {"source": e.source.data, "target": e.target.data} for e in graph.edges
    ]
    edges.sort(key=lambda e: (e["source"], e["target"]))
    return {"nodes": nodes, "edges": edges}


def graph_to_json(graph: Graph, indent: int = 2) -> str:
    return json.dumps(graph_to_dict(graph), indent=indent) + "\n"


def write_json(graph: Graph, path: Path) -> None:
    path.write_text(graph_to_json(graph), encoding="utf-8")


def load_graph(document: dict | str, root_name: str = "") -> Graph:
    """Rebuild a :class:`Graph` from :func:`graph_to_dict` output.

    Args:
        document: The decoded dict, or its JSON text.
        root_name: Name given to the new root container.
    """
    if isinstance(document, str):
        document = json.loads(document)

    graph = Graph(root_name)
    for payload in document.get("nodes", []):
        graph.add_file(payload)
    for item in document.get("edges", []):
        graph.upsert_edge_by_payload(item["source"], item["target"])
    return graph
