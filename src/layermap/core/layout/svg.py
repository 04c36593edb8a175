"""SVG writer: serializes a :class:`Diagram` to a standalone SVG string."""

from __future__ import annotations

from layermap.config.options import LineEffect, LineStyle, RenderOptions
from layermap.core.constants import (
    COLOR_BACKGROUND,
    COLOR_BAND_FILL,
    COLOR_EDGE,
    COLOR_EDGE_FOLDER,
    COLOR_ERROR,
    COLOR_FOLDER_FILL,
    COLOR_FOLDER_STROKE,
    COLOR_LEAF_FILL,
    COLOR_LEAF_STROKE,
    COLOR_ORPHAN_FILL,
    COLOR_TEXT,
    COLOR_TEXT_DIM,
    COLOR_WARNING,
    FONT_SIZE,
    GAP,
    PADDING,
    PILL_SIZE,
    SMALL_FONT_SIZE,
    STROKE_EDGE,
    STROKE_VIOLATION,
    TEXT_PADDING,
)
from layermap.core.graph.model import Rectangle
from layermap.core.layout.geometry import fit_label
from layermap.core.layout.paths import edge_path
from layermap.core.layout.types import Diagram, DiagramBand, DiagramEdge, DiagramNode, Pill

FONT_FAMILY = "Helvetica, Arial, sans-serif"
LINE_HEIGHT = FONT_SIZE + 4

# Marker id -> arrow head color.
_MARKERS: dict[str, str] = {
    "arrow": COLOR_EDGE,
    "arrow-folder": COLOR_EDGE_FOLDER,
    "arrow-warning": COLOR_WARNING,
    "arrow-error": COLOR_ERROR,
}

_OUTLINE_EXTRA = 4


def _escape(s: str) -> str:
    return (
        s.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def _font(size: int = FONT_SIZE) -> str:
    return f'font-family="{FONT_FAMILY}" font-size="{size}"'


def _inset(rect: Rectangle) -> tuple[int, int, int, int]:
    """Drawn box: the layout rectangle shrunk so siblings show a gap."""
    half = GAP // 2
    return rect.x + half, rect.y + half, max(0, rect.w - GAP), max(0, rect.h - GAP)


# ─── Defs ───────────────────────────────────────────────────────────────────


def _render_defs(options: RenderOptions) -> str:
    parts = ["<defs>"]
    for marker_id, color in _MARKERS.items():
        parts.append(
            f'<marker id="{marker_id}" viewBox="0 0 10 10" refX="9" refY="5" '
            f'markerWidth="8" markerHeight="8" orient="auto-start-reverse">'
            f'<path d="M 0 0 L 10 5 L 0 10 z" fill="{color}"/></marker>'
        )
    if options.line_effect == LineEffect.SHADOW:
        parts.append(
            '<filter id="shadow" x="-20%" y="-20%" width="140%" height="140%">'
            '<feDropShadow dx="2" dy="2" stdDeviation="2" flood-opacity="0.35"/>'
            "</filter>"
        )
    parts.append("</defs>")
    return "\n".join(parts)


# ─── Bands and nodes ────────────────────────────────────────────────────────


def _render_band(band: DiagramBand) -> str:
    r = band.rect
    fill = COLOR_BAND_FILL if band.depth % 2 == 0 else COLOR_BACKGROUND
    return "\n".join(
        [
            f'<rect x="{r.x}" y="{r.y}" width="{r.w}" height="{r.h}" fill="{fill}"/>',
            f'<text x="{r.x + TEXT_PADDING}" y="{r.y + PADDING // 2 + SMALL_FONT_SIZE // 2}" '
            f'{_font(SMALL_FONT_SIZE)} fill="{COLOR_TEXT_DIM}">Layer {band.depth}</text>',
        ]
    )


def _render_pill(pill: Pill) -> str:
    radius = PILL_SIZE // 2
    cx, cy = pill.x + radius, pill.y + radius
    return (
        f'<circle cx="{cx}" cy="{cy}" r="{radius}" fill="{pill.color}"/>\n'
        f'<text x="{cx}" y="{cy}" dominant-baseline="central" text-anchor="middle" '
        f'{_font(SMALL_FONT_SIZE)} fill="white">{_escape(pill.text)}</text>'
    )


def _render_node(node: DiagramNode) -> str:
    x, y, w, h = _inset(node.rect)
    if node.is_orphan:
        fill = COLOR_ORPHAN_FILL
    elif node.is_folder:
        fill = COLOR_FOLDER_FILL
    else:
        fill = COLOR_LEAF_FILL
    stroke = COLOR_FOLDER_STROKE if node.is_folder else COLOR_LEAF_STROKE

    parts = []
    if node.tooltip:
        parts.append(f"<g><title>{_escape(node.tooltip)}</title>")
    parts.append(
        f'<rect x="{x}" y="{y}" width="{w}" height="{h}" rx="4" '
        f'fill="{fill}" stroke="{stroke}" stroke-width="1"/>'
    )

    lines = fit_label(node.label, w)
    if node.is_folder:
        tx = x + TEXT_PADDING
        ty = y + TEXT_PADDING + FONT_SIZE
        for i, line in enumerate(lines):
            parts.append(
                f'<text x="{tx}" y="{ty + i * LINE_HEIGHT}" {_font()} '
                f'font-weight="bold" fill="{COLOR_TEXT}">{_escape(line)}</text>'
            )
        if node.details:
            parts.append(
                f'<text x="{tx}" y="{ty + len(lines) * LINE_HEIGHT}" {_font(SMALL_FONT_SIZE)} '
                f'fill="{COLOR_TEXT_DIM}">{_escape(node.details)}</text>'
            )
    else:
        cx = x + w // 2
        total = len(lines) * LINE_HEIGHT
        start = y + (h - total) // 2 + FONT_SIZE
        for i, line in enumerate(lines):
            parts.append(
                f'<text x="{cx}" y="{start + i * LINE_HEIGHT}" text-anchor="middle" '
                f'{_font()} fill="{COLOR_TEXT}">{_escape(line)}</text>'
            )
        if node.details:
            parts.append(
                f'<text x="{cx}" y="{y + h - TEXT_PADDING}" text-anchor="middle" '
                f'{_font(SMALL_FONT_SIZE)} fill="{COLOR_TEXT_DIM}">{_escape(node.details)}</text>'
            )

    if node.depth is not None:
        parts.append(_render_pill(Pill(str(node.depth), COLOR_TEXT_DIM, x + w - PILL_SIZE - GAP, y + GAP)))
    if node.tooltip:
        parts.append("</g>")
    return "\n".join(parts)


# ─── Edges ──────────────────────────────────────────────────────────────────


def _edge_paint(edge: DiagramEdge) -> tuple[str, int, str]:
    """Return ``(color, stroke width, marker id)`` for *edge*."""
    if edge.is_circular:
        return COLOR_ERROR, STROKE_VIOLATION, "arrow-error"
    if edge.is_up_dependency:
        return COLOR_WARNING, STROKE_VIOLATION, "arrow-warning"
    if edge.is_folder:
        return COLOR_EDGE_FOLDER, STROKE_EDGE, "arrow-folder"
    return COLOR_EDGE, STROKE_EDGE, "arrow"


def _render_edge(edge: DiagramEdge, options: RenderOptions) -> str:
    d = edge_path(edge.source, edge.target, options.lines)
    color, width, marker = _edge_paint(edge)
    parts = []
    if options.line_effect == LineEffect.OUTLINE:
        parts.append(
            f'<path d="{d}" fill="none" stroke="{COLOR_BACKGROUND}" '
            f'stroke-width="{width + _OUTLINE_EXTRA}"/>'
        )
    dash = ' stroke-dasharray="6 4"' if edge.is_folder and not edge.is_violation else ""
    parts.append(
        f'<path d="{d}" fill="none" stroke="{color}" stroke-width="{width}"{dash} '
        f'marker-end="url(#{marker})"/>'
    )
    return "\n".join(parts)


def visible_edges(diagram: Diagram, options: RenderOptions) -> list[DiagramEdge]:
    """Edges to draw for the selected line style, violations last."""
    if options.lines == LineStyle.HIDE:
        return []
    edges = diagram.edges
    if options.lines == LineStyle.WARNINGS:
        edges = [e for e in edges if e.is_violation]
    return sorted(edges, key=lambda e: (e.is_violation, e.is_circular))


# ─── Public renderer ────────────────────────────────────────────────────────


class SvgRenderer:
    """Serialize a laid-out diagram as SVG."""

    def render(self, diagram: Diagram, options: RenderOptions) -> str:
        w, h = diagram.width, diagram.height
        parts = [
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{w}" height="{h}" '
            f'viewBox="0 0 {w} {h}">',
        ]
        if diagram.title:
            parts.append(f"<title>{_escape(diagram.title)}</title>")
        parts.append(_render_defs(options))
        parts.append(f'<rect width="100%" height="100%" fill="{COLOR_BACKGROUND}"/>')

        if diagram.bands:
            parts.append('<g id="layers">')
            parts.extend(_render_band(band) for band in diagram.bands)
            parts.append("</g>")

        parts.append('<g id="nodes">')
        parts.extend(_render_node(node) for node in diagram.nodes)
        parts.append("</g>")

        edges = visible_edges(diagram, options)
        if edges:
            shadow = ' filter="url(#shadow)"' if options.line_effect == LineEffect.SHADOW else ""
            parts.append(f'<g id="edges"{shadow}>')
            parts.extend(_render_edge(edge, options) for edge in edges)
            parts.append("</g>")

        pills = [pill for node in diagram.nodes for pill in node.pills]
        if pills:
            parts.append('<g id="counters">')
            parts.extend(_render_pill(pill) for pill in pills)
            parts.append("</g>")

        parts.append("</svg>")
        return "\n".join(parts) + "\n"


def render_svg(diagram: Diagram, options: RenderOptions) -> str:
    return SvgRenderer().render(diagram, options)
