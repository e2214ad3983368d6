"""Geometric logic for generating puzzle piece outlines."""

from typing import List, Tuple

import numpy as np

from .models import BezierCurve, ClosedPath, EdgeKind, EdgeSet, Point, Rect

# Where the tab profile leaves and rejoins the straight edge (fraction of edge length)
NECK_START = 0.35
NECK_END = 0.65

# Tip height as a fraction of the margin reserved around the base rectangle
TIP_HEIGHT = 0.9

# Control point offsets shaping the neck and the bulb around the tip
NECK_HANDLE = 0.2
SHOULDER_HANDLE = 0.2

_EPSILON = 1e-9


def tab_margins(cell_rect: Rect, tab_ratio: float) -> Tuple[float, float]:
    """Margins reserved on each side of the base rectangle for protruding tabs.

    A frame of width ``base * (1 + 2 * tab_ratio)`` gets ``base * tab_ratio``
    of margin on the left and right, and likewise vertically.

    Args:
        cell_rect: The frame the piece is drawn into.
        tab_ratio: Tab size relative to the base rectangle.

    Returns:
        Tuple of (horizontal margin, vertical margin).
    """
    scale = tab_ratio / (1.0 + 2.0 * tab_ratio)
    return cell_rect.width * scale, cell_rect.height * scale


def generate_tab_edge(
    start: Point,
    end: Point,
    kind: EdgeKind,
    tip_height: float,
) -> List[BezierCurve]:
    """Generate one side of a piece, clockwise from start to end.

    Flat sides are a single straight segment. Tabs and blanks run straight to
    the neck, rise through two cubic curves to the tip and back, and run
    straight again to the far corner.

    Args:
        start: Corner where the side begins.
        end: Corner where the side ends.
        kind: Edge kind of this side.
        tip_height: Distance of the tip from the straight side.

    Returns:
        List of BezierCurve objects forming the side.
    """
    edge_vec = np.array([end[0] - start[0], end[1] - start[1]], dtype=float)
    edge_length = float(np.linalg.norm(edge_vec))

    if kind is EdgeKind.FLAT or edge_length < _EPSILON or tip_height <= 0:
        return [BezierCurve.line(start, end)]

    edge_unit = edge_vec / edge_length
    # Perpendicular pointing away from the piece for a clockwise traversal (y down)
    normal = np.array([edge_unit[1], -edge_unit[0]])
    if kind is EdgeKind.BLANK:
        normal = -normal

    origin = np.array(start, dtype=float)
    neck_left = origin + edge_vec * NECK_START
    neck_right = origin + edge_vec * NECK_END
    tip = origin + edge_vec * 0.5 + normal * tip_height

    neck_handle = normal * tip_height * NECK_HANDLE
    shoulder_handle = edge_unit * edge_length * SHOULDER_HANDLE

    def pt(v: np.ndarray) -> Point:
        return (float(v[0]), float(v[1]))

    return [
        BezierCurve.line(start, pt(neck_left)),
        BezierCurve(pt(neck_left), pt(neck_left + neck_handle), pt(tip - shoulder_handle), pt(tip)),
        BezierCurve(pt(tip), pt(tip + shoulder_handle), pt(neck_right + neck_handle), pt(neck_right)),
        BezierCurve.line(pt(neck_right), end),
    ]


def build_outline(edges: EdgeSet, cell_rect: Rect, tab_ratio: float) -> ClosedPath:
    """Build the closed outline of a piece.

    The base rectangle is ``cell_rect`` inset by the tab margins. The outline
    starts at its top-left corner and runs clockwise through the top, right,
    bottom and left sides, so the last point is the first one again.

    Args:
        edges: Edge kinds of the piece.
        cell_rect: Frame with room for tabs on all sides.
        tab_ratio: Tab size relative to the base rectangle, in [0, 0.5).

    Returns:
        The closed outline.

    Raises:
        ValueError: If tab_ratio is outside [0, 0.5).
    """
    if not 0.0 <= tab_ratio < 0.5:
        raise ValueError(f"tab_ratio must be in [0, 0.5), got {tab_ratio}")

    margin_x, margin_y = tab_margins(cell_rect, tab_ratio)
    base = cell_rect.inset(margin_x, margin_y)
    corners = base.corners

    # Top and bottom bulge vertically, left and right horizontally
    tip_heights = [margin_y * TIP_HEIGHT, margin_x * TIP_HEIGHT] * 2

    segments: List[BezierCurve] = []
    for i, kind in enumerate(edges):
        segments.extend(generate_tab_edge(corners[i], corners[(i + 1) % 4], kind, tip_heights[i]))

    return ClosedPath(segments)

