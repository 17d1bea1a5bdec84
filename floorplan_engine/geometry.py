"""Polygon helpers for the floor-plan canvas.

Everything here works in canvas pixel space. Conversion to real-world units
is a caller concern (see :func:`real_area` / :func:`real_perimeter`), which
keeps these routines free of configuration.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, List, NamedTuple, Optional, Sequence, Tuple

import numpy as np

DEFAULT_OBJECT_SIZE = 50.0
EPS = 1e-10


class Point(NamedTuple):
    x: float
    y: float


Polygon = Sequence[Point]
Rect = Tuple[float, float, float, float]


@dataclass(frozen=True)
class SelectableObject:
    """Read-only view of an object-store entry used for hit testing."""

    id: str
    position: Point
    width: Optional[float] = None
    height: Optional[float] = None
    kind: str = ""
    properties: dict = field(default_factory=dict, compare=False)

    def size(self, default: float = DEFAULT_OBJECT_SIZE) -> Tuple[float, float]:
        # A zero or missing extent falls back to the default box.
        w = self.width if self.width else default
        h = self.height if self.height else default
        return float(w), float(h)

    def bounds(self, default: float = DEFAULT_OBJECT_SIZE) -> Rect:
        w, h = self.size(default)
        x, y = float(self.position[0]), float(self.position[1])
        return (x, y, x + w, y + h)

    def corners(self, default: float = DEFAULT_OBJECT_SIZE) -> List[Point]:
        x0, y0, x1, y1 = self.bounds(default)
        return [Point(x0, y0), Point(x1, y0), Point(x1, y1), Point(x0, y1)]

    def center(self, default: float = DEFAULT_OBJECT_SIZE) -> Point:
        x0, y0, x1, y1 = self.bounds(default)
        return Point((x0 + x1) / 2.0, (y0 + y1) / 2.0)


def as_point(value: Sequence[float]) -> Point:
    if isinstance(value, Point):
        return value
    return Point(float(value[0]), float(value[1]))


def _as_array(points: Iterable[Sequence[float]]) -> np.ndarray:
    arr = np.asarray([(float(p[0]), float(p[1])) for p in points], dtype=float)
    if arr.size == 0:
        return np.zeros((0, 2), dtype=float)
    return arr


def euclid_len(p1: Sequence[float], p2: Sequence[float]) -> float:
    """Return the Euclidean distance between two points."""
    return float(math.hypot(float(p2[0]) - float(p1[0]), float(p2[1]) - float(p1[1])))


def polygon_area(points: Polygon) -> float:
    """Return the unsigned shoelace area of a closed ring.

    Rings with fewer than three points have zero area. Self-intersecting rings
    are accepted; their lobes cancel or add according to winding, so the result
    can differ from the visually enclosed area.
    """
    pts = _as_array(points)
    if pts.shape[0] < 3:
        return 0.0
    x = pts[:, 0]
    y = pts[:, 1]
    return float(0.5 * abs(np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1))))


def polygon_perimeter(points: Polygon) -> float:
    """Return the length of the ring including the closing edge."""
    pts = _as_array(points)
    if pts.shape[0] < 2:
        return 0.0
    delta = np.roll(pts, -1, axis=0) - pts
    return float(np.sum(np.hypot(delta[:, 0], delta[:, 1])))


def polyline_length(points: Polygon) -> float:
    """Return the cumulative length of an open polyline."""
    pts = _as_array(points)
    if pts.shape[0] < 2:
        return 0.0
    delta = np.diff(pts, axis=0)
    return float(np.sum(np.hypot(delta[:, 0], delta[:, 1])))


def polygon_centroid(points: Polygon) -> Optional[Point]:
    """Vertex average of the ring, ``None`` for an empty ring."""
    pts = _as_array(points)
    if pts.shape[0] == 0:
        return None
    mean = pts.mean(axis=0)
    return Point(float(mean[0]), float(mean[1]))


def point_in_polygon(point: Sequence[float], polygon: Polygon) -> bool:
    """Even-odd ray casting test.

    A horizontal ray from ``point`` toggles the parity flag at each crossed
    edge. Horizontal edges never satisfy ``(yi > y) != (yj > y)`` and are
    skipped before the division.
    """
    n = len(polygon)
    if n < 3:
        return False
    px, py = float(point[0]), float(point[1])
    inside = False
    j = n - 1
    for i in range(n):
        xi, yi = float(polygon[i][0]), float(polygon[i][1])
        xj, yj = float(polygon[j][0]), float(polygon[j][1])
        if (yi > py) != (yj > py):
            x_cross = (xj - xi) * (py - yi) / (yj - yi) + xi
            if px < x_cross:
                inside = not inside
        j = i
    return inside


def object_intersects_region(
    obj: SelectableObject,
    polygon: Polygon,
    default_size: float = DEFAULT_OBJECT_SIZE,
) -> bool:
    """Return True when a bounding-box corner or the centre lies in ``polygon``.

    This is a membership heuristic rather than an exact overlap test: an object
    whose edges cross the region without any corner or centre inside is not a
    member.
    """
    if len(polygon) < 3:
        return False
    for corner in obj.corners(default_size):
        if point_in_polygon(corner, polygon):
            return True
    return point_in_polygon(obj.center(default_size), polygon)


def rects_overlap(a: Rect, b: Rect) -> bool:
    """Closed-interval overlap of two ``(x0, y0, x1, y1)`` rectangles."""
    return not (a[2] < b[0] or b[2] < a[0] or a[3] < b[1] or b[3] < a[1])


def normalize_rect(rect: Rect) -> Rect:
    x0, y0, x1, y1 = rect
    return (min(x0, x1), min(y0, y1), max(x0, x1), max(y0, y1))


def seg_seg_intersection(p1: Point, p2: Point, q1: Point, q2: Point) -> Optional[Point]:
    """Intersection of two closed segments, ``None`` when parallel or disjoint."""
    x1, y1 = p1
    x2, y2 = p2
    x3, y3 = q1
    x4, y4 = q2
    den = (x1 - x2) * (y3 - y4) - (y1 - y2) * (x3 - x4)
    if abs(den) < EPS:
        return None
    t = ((x1 - x3) * (y3 - y4) - (y1 - y3) * (x3 - x4)) / den
    u = -((x1 - x2) * (y1 - y3) - (y1 - y2) * (x1 - x3)) / den
    if 0.0 <= t <= 1.0 and 0.0 <= u <= 1.0:
        return Point(x1 + t * (x2 - x1), y1 + t * (y2 - y1))
    return None


def real_area(pixel_area: float, scale: float) -> float:
    """Convert a pixel area to square units, ``scale`` being pixels per unit."""
    return pixel_area / (scale * scale)


def real_perimeter(pixel_length: float, scale: float) -> float:
    """Convert a pixel length to units, ``scale`` being pixels per unit."""
    return pixel_length / scale


def svg_number(value: float) -> str:
    """Path-data number: integral values without ``.0``, others at full precision."""
    value = float(value)
    return str(int(value)) if value.is_integer() else repr(value)


def svg_path(points: Polygon, closed: bool = False) -> str:
    """``M x y L x y ...`` path data, empty for fewer than two points."""
    pts = [as_point(p) for p in points]
    if len(pts) < 2:
        return ""
    head, *rest = pts
    parts = [f"M {svg_number(head.x)} {svg_number(head.y)}"]
    parts.extend(f"L {svg_number(p.x)} {svg_number(p.y)}" for p in rest)
    if closed:
        parts.append("Z")
    return " ".join(parts)
