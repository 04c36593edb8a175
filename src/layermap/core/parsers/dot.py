"""Regex-based reader for the subset of Graphviz DOT used by dependency tools.

Supports ``digraph NAME { ... }`` with quoted or bare node statements,
optional ``[...]`` attribute lists and ``->`` edges.  Subgraph blocks and
graph-level attribute statements are ignored.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from layermap.core.errors import InputFormatError

_BLOCK_COMMENT = re.compile(r"/\*[\s\S]*?\*/")
_DIGRAPH = re.compile(r"digraph\s+[\"\w]+\s*\{([\s\S]*)\}")
_SUBGRAPH = re.compile(r"subgraph\s+[^}]*\{[^}]*\}")
# rankdir=LR;  node [shape=box];  graph [...];  edge [...];
_GRAPH_ATTRIBUTE = re.compile(r"(?:(?<=[;{\n])|\A)\s*(?:\w+\s*=\s*[^;\n]*|(?:graph|node|edge)\s*\[[^\]]*\])\s*;")

_NODE_WITH_ATTRS = re.compile(r'"([^"]+)"\s*\[([^\]]*)\]\s*;')
_SIMPLE_NODE = re.compile(r'"([^"]+)"\s*;|\b(\w+)\s*;')
_QUOTED_EDGE = re.compile(r'"([^"]+)"\s*->\s*"([^"]+)"(?:\s*\[([^\]]*)\])?\s*;')
_BARE_EDGE = re.compile(r"(\w+)\s*->\s*(\w+)\s*(?:\[[^\]]*\])?\s*;")
_LABEL = re.compile(r'label\s*=\s*(?:"([^"]*)"|(\w+))')


@dataclass
class DotGraph:
    """Nodes (first-seen order), their labels and the edges of a digraph."""

    nodes: list[str] = field(default_factory=list)
    labels: dict[str, str] = field(default_factory=dict)
    edges: list[tuple[str, str]] = field(default_factory=list)

    def add_node(self, name: str) -> None:
        if name not in self.nodes:
            self.nodes.append(name)

    def strip_leading_slash(self) -> None:
        """Drop a leading ``/`` from every name when all nodes start with one."""
        if not self.nodes or not all(n.startswith("/") for n in self.nodes):
            return
        self.nodes = [n[1:] for n in self.nodes]
        self.labels = {k[1:]: v for k, v in self.labels.items()}
        self.edges = [
            (s[1:] if s.startswith("/") else s, t[1:] if t.startswith("/") else t)
            for s, t in self.edges
        ]


def strip_comments(content: str) -> str:
    """Remove ``#`` and ``//`` comment lines, blank lines and ``/* */`` blocks."""
    kept = []
    for line in content.split("\n"):
        stripped = line.strip()
        if stripped and not stripped.startswith(("#", "//")):
            kept.append(line)
    return _BLOCK_COMMENT.sub("", "\n".join(kept))


def parse_dot(content: str) -> DotGraph:
    """Parse DOT text into a :class:`DotGraph`.

    Raises:
        InputFormatError: If no ``digraph`` declaration is found.
    """
    cleaned = strip_comments(content)
    match = _DIGRAPH.search(cleaned)
    if match is None:
        raise InputFormatError("Invalid DOT format: no digraph found")

    body = _SUBGRAPH.sub("", match.group(1))
    body = _GRAPH_ATTRIBUTE.sub("\n", body)
    graph = DotGraph()

    for node_match in _NODE_WITH_ATTRS.finditer(body):
        name = node_match.group(1)
        graph.add_node(name)
        label = _LABEL.search(node_match.group(2))
        if label is not None:
            graph.labels[name] = label.group(1) if label.group(1) is not None else label.group(2)

    statements = _BARE_EDGE.sub("\n", _QUOTED_EDGE.sub("\n", _NODE_WITH_ATTRS.sub("\n", body)))
    for node_match in _SIMPLE_NODE.finditer(statements):
        graph.add_node(node_match.group(1) or node_match.group(2))

    for edge_match in _QUOTED_EDGE.finditer(body):
        graph.edges.append((edge_match.group(1), edge_match.group(2)))

    if not graph.edges:
        for edge_match in _BARE_EDGE.finditer(body):
            source, target = edge_match.group(1), edge_match.group(2)
            graph.add_node(source)
            graph.add_node(target)
            graph.edges.append((source, target))

    # Edge endpoints never declared on their own still count as nodes.
    for source, target in graph.edges:
        graph.add_node(source)
        graph.add_node(target)

    return graph
