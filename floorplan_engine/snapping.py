"""Snap candidates for drawing tools: grid, object features, guides and wall
intersections.

``snap_point`` gathers every candidate near the cursor and keeps the closest
one strictly inside the snap tolerance. Objects are read from
:class:`~floorplan_engine.geometry.SelectableObject`; circles carry their
``radius`` and lines/walls their ``points`` (``[x1, y1, x2, y2]`` relative to
the object position) in ``properties``.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from .config import EngineConfig
from .geometry import Point, SelectableObject, as_point, euclid_len, seg_seg_intersection


class SnapKind(str, Enum):
    GRID = "grid"
    OBJECT_EDGE = "object-edge"
    OBJECT_CENTER = "object-center"
    OBJECT_CORNER = "object-corner"
    INTERSECTION = "intersection"
    GUIDE = "guide"


class GuideOrientation(str, Enum):
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


@dataclass(frozen=True)
class Guide:
    orientation: GuideOrientation
    offset: float  # x for vertical guides, y for horizontal ones


@dataclass(frozen=True)
class SnapPoint:
    point: Point
    kind: SnapKind
    description: str
    object_id: Optional[str] = None


@dataclass(frozen=True)
class SnapResult:
    point: Point
    snap_points: Tuple[SnapPoint, ...] = ()
    is_snapped: bool = False
    snap_type: Optional[SnapKind] = None


LINE_KINDS = ("line", "wall")
# Objects whose origin is further than this many tolerances away are skipped.
OBJECT_SEARCH_FACTOR = 5.0
INTERSECTION_SEARCH_FACTOR = 2.0


def _round_to(value: float, step: float) -> float:
    return math.floor(value / step + 0.5) * step


def line_endpoints(obj: SelectableObject) -> Tuple[Point, Point]:
    pts = obj.properties.get("points") or (0.0, 0.0, 0.0, 0.0)
    x, y = obj.position
    return (
        Point(x + float(pts[0]), y + float(pts[1])),
        Point(x + float(pts[2]), y + float(pts[3])),
    )


def grid_snap_points(point: Point, grid_size: float) -> List[SnapPoint]:
    if grid_size <= 0:
        return []
    gx = _round_to(point.x, grid_size)
    gy = _round_to(point.y, grid_size)
    return [SnapPoint(Point(gx, gy), SnapKind.GRID, f"Grid ({gx:g}, {gy:g})")]


def _rectangle_points(obj: SelectableObject) -> List[SnapPoint]:
    x, y = obj.position
    w = float(obj.width or 0.0)
    h = float(obj.height or 0.0)
    features = [
        (x, y, SnapKind.OBJECT_CORNER, "Top-left corner"),
        (x + w, y, SnapKind.OBJECT_CORNER, "Top-right corner"),
        (x, y + h, SnapKind.OBJECT_CORNER, "Bottom-left corner"),
        (x + w, y + h, SnapKind.OBJECT_CORNER, "Bottom-right corner"),
        (x + w / 2, y + h / 2, SnapKind.OBJECT_CENTER, "Center"),
        (x + w / 2, y, SnapKind.OBJECT_EDGE, "Top edge center"),
        (x + w / 2, y + h, SnapKind.OBJECT_EDGE, "Bottom edge center"),
        (x, y + h / 2, SnapKind.OBJECT_EDGE, "Left edge center"),
        (x + w, y + h / 2, SnapKind.OBJECT_EDGE, "Right edge center"),
    ]
    return [SnapPoint(Point(px, py), kind, desc, obj.id) for px, py, kind, desc in features]


def _circle_points(obj: SelectableObject) -> List[SnapPoint]:
    x, y = obj.position
    r = float(obj.properties.get("radius") or 0.0)
    features = [
        (x, y, SnapKind.OBJECT_CENTER, "Center"),
        (x + r, y, SnapKind.OBJECT_EDGE, "Right edge"),
        (x - r, y, SnapKind.OBJECT_EDGE, "Left edge"),
        (x, y + r, SnapKind.OBJECT_EDGE, "Bottom edge"),
        (x, y - r, SnapKind.OBJECT_EDGE, "Top edge"),
    ]
    return [SnapPoint(Point(px, py), kind, desc, obj.id) for px, py, kind, desc in features]


def _line_points(obj: SelectableObject) -> List[SnapPoint]:
    start, end = line_endpoints(obj)
    mid = Point((start.x + end.x) / 2, (start.y + end.y) / 2)
    return [
        SnapPoint(start, SnapKind.OBJECT_CORNER, "Line start", obj.id),
        SnapPoint(end, SnapKind.OBJECT_CORNER, "Line end", obj.id),
        SnapPoint(mid, SnapKind.OBJECT_CENTER, "Line midpoint", obj.id),
    ]


_FEATURES = {
    "rectangle": _rectangle_points,
    "circle": _circle_points,
    "line": _line_points,
    "wall": _line_points,
}


def object_snap_points(point: Point, objects: Sequence[SelectableObject], tolerance: float) -> List[SnapPoint]:
    out: List[SnapPoint] = []
    for obj in objects:
        features = _FEATURES.get(obj.kind)
        if features is None:
            continue
        if euclid_len(obj.position, point) > tolerance * OBJECT_SEARCH_FACTOR:
            continue
        out.extend(features(obj))
    return out


def _nearest_guide(guides: Sequence[Guide], orientation: GuideOrientation, coord: float) -> Optional[Guide]:
    matching = [g for g in guides if g.orientation is orientation]
    return min(matching, key=lambda g: abs(g.offset - coord), default=None)


def guide_snap_points(point: Point, guides: Sequence[Guide], tolerance: float = 0.0) -> List[SnapPoint]:
    """Projections onto each guide, or the crossing of the nearest pair.

    When a horizontal and a vertical guide are both within ``tolerance`` the
    crossing replaces the single-axis projections.
    """
    horizontal = _nearest_guide(guides, GuideOrientation.HORIZONTAL, point.y)
    vertical = _nearest_guide(guides, GuideOrientation.VERTICAL, point.x)
    if (
        horizontal is not None
        and vertical is not None
        and abs(horizontal.offset - point.y) < tolerance
        and abs(vertical.offset - point.x) < tolerance
    ):
        return [SnapPoint(Point(vertical.offset, horizontal.offset), SnapKind.GUIDE, "Guide intersection")]
    out: List[SnapPoint] = []
    for index, guide in enumerate(guides, start=1):
        if guide.orientation is GuideOrientation.VERTICAL:
            out.append(SnapPoint(Point(guide.offset, point.y), SnapKind.GUIDE, f"Vertical guide {index}"))
        else:
            out.append(SnapPoint(Point(point.x, guide.offset), SnapKind.GUIDE, f"Horizontal guide {index}"))
    return out


def intersection_snap_points(point: Point, objects: Sequence[SelectableObject], tolerance: float) -> List[SnapPoint]:
    lines = [line_endpoints(obj) for obj in objects if obj.kind in LINE_KINDS]
    out: List[SnapPoint] = []
    for i, (a1, a2) in enumerate(lines):
        for b1, b2 in lines[i + 1:]:
            hit = seg_seg_intersection(a1, a2, b1, b2)
            if hit is None:
                continue
            if euclid_len(hit, point) <= tolerance * INTERSECTION_SEARCH_FACTOR:
                out.append(SnapPoint(hit, SnapKind.INTERSECTION, "Line intersection"))
    return out


def _snap_distance(cand: SnapPoint, point: Point) -> float:
    # Guides pull along their own axis, so a crossing counts per axis.
    if cand.kind is SnapKind.GUIDE:
        return max(abs(cand.point.x - point.x), abs(cand.point.y - point.y))
    return euclid_len(cand.point, point)


def snap_point(
    point: Sequence[float],
    objects: Sequence[SelectableObject] = (),
    config: EngineConfig | None = None,
    guides: Sequence[Guide] = (),
    *,
    snap_to_grid: bool = True,
    snap_to_objects: bool = True,
) -> SnapResult:
    """Return the closest candidate strictly within ``config.snap_tolerance``.

    When nothing is in range the input point comes back together with
    every candidate considered, so a host can still draw indicators.
    """
    config = config or EngineConfig()
    p = as_point(point)
    tol = config.snap_tolerance
    candidates: List[SnapPoint] = []
    if snap_to_grid:
        candidates.extend(grid_snap_points(p, config.grid_size))
    if snap_to_objects:
        candidates.extend(object_snap_points(p, objects, tol))
    candidates.extend(guide_snap_points(p, guides, tol))
    if snap_to_objects:
        candidates.extend(intersection_snap_points(p, objects, tol))

    best: Optional[SnapPoint] = None
    best_dist = tol
    for cand in candidates:
        dist = _snap_distance(cand, p)
        if dist < best_dist:
            best = cand
            best_dist = dist
    if best is None:
        return SnapResult(point=p, snap_points=tuple(candidates))
    return SnapResult(point=best.point, snap_points=(best,), is_snapped=True, snap_type=best.kind)


@dataclass
class AutoConnect:
    """Existing walls the new wall's endpoints should join."""

    start: Optional[SelectableObject] = None
    end: Optional[SelectableObject] = None


def should_auto_connect(
    start: Sequence[float],
    end: Sequence[float],
    walls: Sequence[SelectableObject],
    tolerance: float = 10.0,
) -> AutoConnect:
    """Match a new wall's endpoints against existing wall/line endpoints.

    When several walls qualify the last one wins.
    """
    s = as_point(start)
    e = as_point(end)
    result = AutoConnect()
    for wall in walls:
        if wall.kind not in LINE_KINDS:
            continue
        ends = line_endpoints(wall)
        if any(euclid_len(s, q) <= tolerance for q in ends):
            result.start = wall
        if any(euclid_len(e, q) <= tolerance for q in ends):
            result.end = wall
    return result
