"""Helpers shared by every layout strategy."""

from __future__ import annotations

from collections.abc import Iterable

from layermap.config.options import Align
from layermap.core.constants import (
    CHAR_WIDTH,
    COLOR_PILL_IN,
    COLOR_PILL_OUT,
    EXTERNAL_GROUP,
    PILL_OFFSET,
    PILL_SIZE,
    TEXT_PADDING,
)
from layermap.core.graph.graph import Graph
from layermap.core.graph.model import Container, Rectangle
from layermap.core.layout.types import Pill

_ELLIPSIS = "…"
_MAX_LABEL_LINES = 2


def sort_by_weight(nodes: Iterable[Container]) -> list[Container]:
    """Heaviest first, ties broken by name."""
    return sorted(nodes, key=lambda n: (-n.get_weight(), n.name))


def reset_rects(graph: Graph) -> None:
    for node in graph.get_all_nodes():
        node.rect.reset()


def align_offset(available: int, used: int, align: Align) -> int:
    """Horizontal shift that places a row of width *used* inside *available*."""
    spare = max(0, available - used)
    if align == Align.RIGHT:
        return spare
    if align == Align.CENTER:
        return spare // 2
    return 0


def max_chars(width: int) -> int:
    return max(1, (width - 2 * TEXT_PADDING) // CHAR_WIDTH)


def fit_label(text: str, width: int) -> list[str]:
    """Break *text* into at most two lines that fit inside *width*.

    Breaks on the last space, dash, dot or slash when one is available,
    and truncates the second line with an ellipsis.
    """
    limit = max_chars(width)
    if len(text) <= limit:
        return [text]

    lines: list[str] = []
    rest = text
    while rest and len(lines) < _MAX_LABEL_LINES:
        if len(rest) <= limit:
            lines.append(rest)
            rest = ""
            break
        cut = max(rest.rfind(sep, 0, limit) for sep in (" ", "-", ".", "/", "_"))
        cut = cut + 1 if cut > 0 else limit
        lines.append(rest[:cut].rstrip())
        rest = rest[cut:].lstrip()

    if rest:
        last = lines[-1]
        lines[-1] = last[: max(0, limit - 1)] + _ELLIPSIS
    return lines


def get_node_list_as_tooltip(nodes: Iterable[Container]) -> str:
    """Numbered, sorted list of paths with external entries last."""
    paths = sorted(n.path_string() for n in nodes)
    marker = f"/{EXTERNAL_GROUP}/"
    internal = [p for p in paths if not p.startswith(marker)]
    external = [p for p in paths if p.startswith(marker)]
    return "\n".join(f"{i} {p}" for i, p in enumerate(internal + external, start=1))


def count_pills(node: Container, rect: Rectangle) -> list[Pill]:
    """In/out count badges pinned to the top corners of *rect*."""
    pills: list[Pill] = []
    incoming = len(node.get_external_sources())
    outgoing = len(node.get_external_targets())
    y = max(0, rect.y - PILL_SIZE // 2)
    if incoming:
        pills.append(Pill(str(incoming), COLOR_PILL_IN, rect.x + PILL_OFFSET, y))
    if outgoing:
        pills.append(
            Pill(str(outgoing), COLOR_PILL_OUT, rect.right - PILL_OFFSET - PILL_SIZE, y)
        )
    return pills


def details_text(node: Container) -> str:
    incoming = len(node.get_external_sources())
    outgoing = len(node.get_external_targets())
    if node.is_leaf:
        return f"in {incoming} · out {outgoing}"
    files = sum(1 for _ in node.iter_leaves())
    return f"files {files} · in {incoming} · out {outgoing}"
