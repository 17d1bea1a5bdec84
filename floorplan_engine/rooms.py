"""Manual room outlines.

Rooms are traced point by point on the canvas. :class:`RoomState` holds the
finished rooms plus the outline being drawn or edited, and every operation
returns a new state. Clicking within ``config.room_close_threshold`` of the
first point of an outline with three or more points finishes the room.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from .config import EngineConfig
from .geometry import Point, as_point, euclid_len, point_in_polygon, polygon_area, svg_path
from .plan_rules import Room
from .snapping import SnapResult

logger = logging.getLogger(__name__)

DEFAULT_WALL_HEIGHT = 96.0  # inches
MIN_ROOM_POINTS = 3

SnapFn = Callable[[Point], SnapResult]


@dataclass(frozen=True)
class RoomBoundary:
    id: str
    name: str
    points: Tuple[Point, ...] = ()
    is_complete: bool = False
    wall_height: float = DEFAULT_WALL_HEIGHT
    area: Optional[float] = None  # px², set when the outline is completed
    properties: Dict[str, Any] = field(default_factory=dict, compare=False)

    def to_room(self) -> Room:
        # Area is left to the plan rules, which scale the outline by the project scale.
        return Room(id=self.id, name=self.name, points=self.points)

    def asdict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "points": [{"x": p.x, "y": p.y} for p in self.points],
            "isComplete": self.is_complete,
            "properties": {**self.properties, "wallHeight": self.wall_height, "area": self.area},
        }


@dataclass(frozen=True)
class RoomState:
    rooms: Tuple[RoomBoundary, ...] = ()
    current: Optional[RoomBoundary] = None
    editing_id: Optional[str] = None

    @property
    def is_defining(self) -> bool:
        return self.current is not None


def _new_room_id() -> str:
    return f"room-{uuid.uuid4().hex[:12]}"


def _snapped(point: Sequence[float], snap: Optional[SnapFn]) -> Point:
    p = as_point(point)
    if snap is None:
        return p
    result = snap(p)
    return result.point if result.is_snapped else p


def start_room(
    state: RoomState,
    name: Optional[str] = None,
    room_id: Optional[str] = None,
    enabled: bool = True,
) -> RoomState:
    """Begin a new empty outline; any outline in progress is discarded."""
    if not enabled:
        return state
    room = RoomBoundary(
        id=room_id or _new_room_id(),
        name=name or f"Room {len(state.rooms) + 1}",
    )
    return replace(state, current=room, editing_id=None)


def complete_room(state: RoomState) -> RoomState:
    """Store the current outline with its shoelace area.

    Outlines with fewer than three points stay open. An edited room keeps its
    place in ``rooms``; a new one is appended.
    """
    current = state.current
    if current is None or len(current.points) < MIN_ROOM_POINTS:
        return state
    done = replace(current, is_complete=True, area=polygon_area(current.points))
    if state.editing_id is not None and any(r.id == state.editing_id for r in state.rooms):
        rooms = tuple(done if r.id == state.editing_id else r for r in state.rooms)
    else:
        rooms = state.rooms + (done,)
    logger.debug("Room %s completed with %d points", done.id, len(done.points))
    return RoomState(rooms=rooms)


def add_room_point(
    state: RoomState,
    point: Sequence[float],
    config: EngineConfig | None = None,
    snap: Optional[SnapFn] = None,
) -> RoomState:
    """Append a point, or finish the room when it lands back on the start."""
    current = state.current
    if current is None:
        return state
    config = config or EngineConfig()
    p = _snapped(point, snap)
    pts = current.points
    if len(pts) >= MIN_ROOM_POINTS and euclid_len(p, pts[0]) < config.room_close_threshold:
        return complete_room(state)
    return replace(state, current=replace(current, points=pts + (p,)))


def cancel_room(state: RoomState) -> RoomState:
    """Drop the outline in progress. A room being edited keeps its stored shape."""
    return RoomState(rooms=state.rooms)


def start_editing_room(state: RoomState, room_id: str) -> RoomState:
    room = find_room(state.rooms, room_id)
    if room is None:
        return state
    return replace(state, current=replace(room, is_complete=False), editing_id=room_id)


def move_room_point(
    state: RoomState,
    index: int,
    point: Sequence[float],
    snap: Optional[SnapFn] = None,
) -> RoomState:
    current = state.current
    if current is None or not 0 <= index < len(current.points):
        return state
    pts = list(current.points)
    pts[index] = _snapped(point, snap)
    return replace(state, current=replace(current, points=tuple(pts)))


def remove_room_point(state: RoomState, index: int) -> RoomState:
    """Delete one vertex; outlines never drop below three points."""
    current = state.current
    if current is None or len(current.points) <= MIN_ROOM_POINTS:
        return state
    if not 0 <= index < len(current.points):
        return state
    pts = current.points[:index] + current.points[index + 1:]
    return replace(state, current=replace(current, points=pts))


def find_room(rooms: Sequence[RoomBoundary], room_id: str) -> Optional[RoomBoundary]:
    return next((r for r in rooms if r.id == room_id), None)


def remove_room(state: RoomState, room_id: str) -> RoomState:
    return replace(state, rooms=tuple(r for r in state.rooms if r.id != room_id))


def rename_room(state: RoomState, room_id: str, name: str) -> RoomState:
    rooms = tuple(replace(r, name=name) if r.id == room_id else r for r in state.rooms)
    return replace(state, rooms=rooms)


def update_room_properties(state: RoomState, room_id: str, **properties: Any) -> RoomState:
    """Merge ``properties`` into a stored room; ``wall_height`` updates the field."""
    wall_height = properties.pop("wall_height", None)
    rooms = []
    for room in state.rooms:
        if room.id == room_id:
            room = replace(room, properties={**room.properties, **properties})
            if wall_height is not None:
                room = replace(room, wall_height=float(wall_height))
        rooms.append(room)
    return replace(state, rooms=tuple(rooms))


def room_at_point(rooms: Sequence[RoomBoundary], point: Sequence[float]) -> Optional[RoomBoundary]:
    """First room whose outline contains ``point``."""
    for room in rooms:
        if point_in_polygon(point, room.points):
            return room
    return None


def room_path(room: RoomBoundary) -> str:
    """SVG path data; completed rooms are closed with ``Z``."""
    return svg_path(room.points, closed=room.is_complete)


class RoomKey(str, Enum):
    START = "start"
    COMPLETE = "complete"
    CANCEL = "cancel"


def handle_room_key(state: RoomState, key: RoomKey, enabled: bool = True) -> RoomState:
    if not enabled:
        return state
    if key is RoomKey.START:
        return start_room(state)
    if key is RoomKey.COMPLETE:
        return complete_room(state)
    if state.is_defining:
        return cancel_room(state)
    return state
