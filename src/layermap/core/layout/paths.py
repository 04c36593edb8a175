"""SVG path data for edges between two rectangles."""

from __future__ import annotations

from layermap.config.options import LineStyle
from layermap.core.constants import PILL_OFFSET
from layermap.core.graph.model import Rectangle

Point = tuple[int, int]


def anchors(source: Rectangle, target: Rectangle) -> tuple[Point, Point, bool]:
    """Pick the attachment points of an edge.

    Returns:
        ``(start, end, vertical)``.  Edges leave from the bottom (or top)
        when the target sits below (or above) the source, and from the
        sides otherwise.
    """
    if target.y >= source.bottom:
        return (source.center_x, source.bottom), (target.center_x, target.y), True
    if target.bottom <= source.y:
        return (source.center_x, source.y), (target.center_x, target.bottom), True
    if target.x >= source.right:
        return (source.right, source.center_y), (target.x, target.center_y), False
    return (source.x, source.center_y), (target.right, target.center_y), False


def _self_loop(rect: Rectangle) -> str:
    x = rect.right
    top = rect.center_y - PILL_OFFSET // 2
    bottom = rect.center_y + PILL_OFFSET // 2
    reach = PILL_OFFSET * 2
    return f"M {x} {top} C {x + reach} {top - reach} {x + reach} {bottom + reach} {x} {bottom}"


def edge_path(source: Rectangle, target: Rectangle, style: LineStyle) -> str:
    """Return the ``d`` attribute for an edge drawn in *style*.

    ``hide`` and ``warnings`` are filters applied by the caller; they
    draw with the curve shape.
    """
    if source is target:
        return _self_loop(source)

    (sx, sy), (ex, ey), vertical = anchors(source, target)

    if style == LineStyle.STRAIGHT:
        return f"M {sx} {sy} L {ex} {ey}"

    if style == LineStyle.ELBOW:
        if vertical:
            mid = (sy + ey) // 2
            return f"M {sx} {sy} V {mid} H {ex} V {ey}"
        mid = (sx + ex) // 2
        return f"M {sx} {sy} H {mid} V {ey} H {ex}"

    if style == LineStyle.ANGLE:
        if vertical:
            step = PILL_OFFSET if ey >= sy else -PILL_OFFSET
            return f"M {sx} {sy} L {sx} {sy + step} L {ex} {ey - step} L {ex} {ey}"
        step = PILL_OFFSET if ex >= sx else -PILL_OFFSET
        return f"M {sx} {sy} L {sx + step} {sy} L {ex - step} {ey} L {ex} {ey}"

    if vertical:
        bend = (ey - sy) // 2
        return f"M {sx} {sy} C {sx} {sy + bend} {ex} {ey - bend} {ex} {ey}"
    bend = (ex - sx) // 2
    return f"M {sx} {sy} C {sx + bend} {sy} {ex - bend} {ey} {ex} {ey}"
