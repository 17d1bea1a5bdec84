"""Viewport zoom/pan value and the non-touch zoom paths (wheel, shortcuts)."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from .config import EngineConfig
from .geometry import Point, as_point


@dataclass(frozen=True)
class ViewState:
    """Canvas transform: ``screen = world * zoom + pan``."""

    zoom: float = 1.0
    pan: Point = Point(0.0, 0.0)

    def world_to_screen(self, point: Sequence[float]) -> Point:
        return Point(point[0] * self.zoom + self.pan.x, point[1] * self.zoom + self.pan.y)

    def screen_to_world(self, point: Sequence[float]) -> Point:
        return Point((point[0] - self.pan.x) / self.zoom, (point[1] - self.pan.y) / self.zoom)


@dataclass(frozen=True)
class ViewUpdate:
    """A zoom/pan pair produced by one input event; apply both together."""

    zoom: float
    pan: Point

    def as_view(self) -> ViewState:
        return ViewState(zoom=self.zoom, pan=self.pan)


class ZoomKey(str, Enum):
    ZOOM_IN = "zoom_in"
    ZOOM_OUT = "zoom_out"
    RESET = "reset"


def zoom_about(
    view: ViewState,
    target_zoom: float,
    pivot: Optional[Sequence[float]],
    config: EngineConfig,
) -> ViewState:
    """Zoom to ``target_zoom`` keeping the screen point ``pivot`` fixed."""
    target_zoom = config.clamp_zoom(target_zoom)
    if abs(target_zoom - view.zoom) <= 1e-9:
        return view
    if pivot is None:
        return ViewState(zoom=target_zoom, pan=view.pan)
    pivot = as_point(pivot)
    pivot_world = view.screen_to_world(pivot)
    pan = Point(pivot.x - pivot_world.x * target_zoom, pivot.y - pivot_world.y * target_zoom)
    return ViewState(zoom=target_zoom, pan=pan)


def wheel_zoom(
    view: ViewState,
    angle_delta: float,
    pivot: Optional[Sequence[float]],
    config: EngineConfig,
) -> ViewState:
    """Zoom by ``wheel_zoom_step`` per 120-unit wheel notch around ``pivot``."""
    if angle_delta == 0:
        return view
    steps = angle_delta / 120.0
    return zoom_about(view, view.zoom * config.wheel_zoom_step ** steps, pivot, config)


def zoom_shortcut(view: ViewState, key: ZoomKey | str, config: EngineConfig) -> ViewState:
    key = ZoomKey(key)
    if key is ZoomKey.ZOOM_IN:
        return zoom_about(view, view.zoom * config.wheel_zoom_step, None, config)
    if key is ZoomKey.ZOOM_OUT:
        return zoom_about(view, view.zoom / config.wheel_zoom_step, None, config)
    return ViewState()
