"""Data models for jigsaw puzzle pieces."""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Tuple

import numpy as np
from PIL import Image

Point = Tuple[float, float]


class EdgeKind(str, Enum):
    """Shape of one side of a puzzle piece."""

    FLAT = "flat"
    TAB = "tab"
    BLANK = "blank"

    @property
    def complement(self) -> "EdgeKind":
        """The kind the neighbouring piece must have on the shared edge."""
        if self is EdgeKind.TAB:
            return EdgeKind.BLANK
        if self is EdgeKind.BLANK:
            return EdgeKind.TAB
        return EdgeKind.FLAT


@dataclass(frozen=True)
class EdgeSet:
    """The four edge kinds of a piece."""

    top: EdgeKind = EdgeKind.FLAT
    right: EdgeKind = EdgeKind.FLAT
    bottom: EdgeKind = EdgeKind.FLAT
    left: EdgeKind = EdgeKind.FLAT

    def __iter__(self) -> Iterator[EdgeKind]:
        """Iterate clockwise, starting at the top edge."""
        return iter((self.top, self.right, self.bottom, self.left))

    @classmethod
    def flat(cls) -> "EdgeSet":
        """Edges of a piece with no neighbours."""
        return cls()

    @property
    def is_flat(self) -> bool:
        return all(kind is EdgeKind.FLAT for kind in self)


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in screen coordinates (y grows downward)."""

    x: float
    y: float
    width: float
    height: float

    @property
    def min_x(self) -> float:
        return self.x

    @property
    def min_y(self) -> float:
        return self.y

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height

    @property
    def corners(self) -> List[Point]:
        """Corners clockwise from the top-left."""
        return [
            (self.min_x, self.min_y),
            (self.max_x, self.min_y),
            (self.max_x, self.max_y),
            (self.min_x, self.max_y),
        ]

    def inset(self, dx: float, dy: float) -> "Rect":
        """Shrink the rectangle by dx on the left and right, dy on the top and bottom."""
        return Rect(self.x + dx, self.y + dy, self.width - 2 * dx, self.height - 2 * dy)


@dataclass
class BezierCurve:
    """A cubic Bezier curve defined by 4 control points."""

    p0: Point  # Start point
    p1: Point  # Control point 1
    p2: Point  # Control point 2
    p3: Point  # End point

    @classmethod
    def line(cls, start: Point, end: Point) -> "BezierCurve":
        """A straight segment as a degenerate curve with control points on the line."""
        return cls(start, start, end, end)

    def evaluate(self, t: float) -> Point:
        """Evaluate the curve at parameter t (0 to 1)."""
        t2 = t * t
        t3 = t2 * t
        mt = 1 - t
        mt2 = mt * mt
        mt3 = mt2 * mt

        x = mt3 * self.p0[0] + 3 * mt2 * t * self.p1[0] + 3 * mt * t2 * self.p2[0] + t3 * self.p3[0]
        y = mt3 * self.p0[1] + 3 * mt2 * t * self.p1[1] + 3 * mt * t2 * self.p2[1] + t3 * self.p3[1]
        return (x, y)

    def get_points(self, num_points: int = 50) -> np.ndarray:
        """Generate points along the curve."""
        t_values = np.linspace(0, 1, num_points)
        points = [self.evaluate(t) for t in t_values]
        return np.array(points)


@dataclass
class ClosedPath:
    """A closed outline made of consecutive cubic segments."""

    segments: List[BezierCurve] = field(default_factory=list)

    @property
    def start(self) -> Point:
        return self.segments[0].p0

    @property
    def end(self) -> Point:
        return self.segments[-1].p3

    @property
    def is_closed(self) -> bool:
        if not self.segments:
            return False
        return bool(np.allclose(self.start, self.end))

    @property
    def vertices(self) -> List[Point]:
        """Segment end points, in traversal order, starting with the path start."""
        if not self.segments:
            return []
        return [self.start] + [segment.p3 for segment in self.segments]

    def bounds(self, points_per_curve: int = 20) -> Rect:
        """Bounding box of the sampled outline."""
        points = np.array(self.to_polygon(points_per_curve))
        x_min, y_min = points.min(axis=0)
        x_max, y_max = points.max(axis=0)
        return Rect(float(x_min), float(y_min), float(x_max - x_min), float(y_max - y_min))

    def to_polygon(self, points_per_curve: int = 20) -> List[Point]:
        """Sample the outline into a closed polygon (last point repeats the first)."""
        polygon: List[Point] = []
        for segment in self.segments:
            points = segment.get_points(points_per_curve)
            # Skip the last point of each segment to avoid duplication
            polygon.extend((float(x), float(y)) for x, y in points[:-1])
        if polygon:
            polygon.append(polygon[0])
        return polygon

    def translated(self, dx: float, dy: float) -> "ClosedPath":
        """Copy of the path moved by (dx, dy)."""

        def move(p: Point) -> Point:
            return (p[0] + dx, p[1] + dy)

        return ClosedPath(
            [BezierCurve(move(s.p0), move(s.p1), move(s.p2), move(s.p3)) for s in self.segments]
        )


@dataclass(eq=False)
class PieceRecord:
    """A single puzzle piece.

    Two pieces are equal only when they share the same id, even if their
    images and edges are identical.
    """

    original_index: int
    grid_size: int
    edges: EdgeSet
    outline: ClosedPath
    image: Optional[Image.Image] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @property
    def row(self) -> int:
        return self.original_index // self.grid_size

    @property
    def col(self) -> int:
        return self.original_index % self.grid_size

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PieceRecord):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


class GameMode(str, Enum):
    """Mini-games that submit scores to the ranking."""

    COLOR = "Colores"
    LETTER = "Letras"
    COLOR_AND_LETTER = "Colores y Letras"
    SHAPE_AND_COLOR = "Figuras y Colores"
    MATH = "Matemáticas"
    PUZZLE = "Puzzle"
