"""Touch gesture interpretation: one-finger pan, two-finger pinch zoom.

The interpreter is a reducer. The host keeps the :class:`GestureState` value,
passes it in with every touch event together with the current view, and gets
back the next state plus a :class:`GestureEffect` describing what to apply.

Mode is derived from the number of active touches on each event:

* 1 touch  -> ``panning``
* 2 touches -> ``pinching``
* 0 touches -> ``idle``

Whenever the count changes, the references (pan, zoom, distance, touch
centre) are re-recorded from the current view so the content does not jump.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Sequence, Tuple

from .config import EngineConfig
from .geometry import EPS, Point, as_point
from .viewport import ViewState, ViewUpdate

logger = logging.getLogger(__name__)


class GestureMode(str, Enum):
    IDLE = "idle"
    PANNING = "panning"
    PINCHING = "pinching"


class TouchPhase(str, Enum):
    START = "start"
    MOVE = "move"
    END = "end"
    CANCEL = "cancel"


@dataclass(frozen=True)
class TouchEvent:
    """Active touch positions (canvas pixels) after the event took effect."""

    phase: TouchPhase
    touches: Tuple[Point, ...] = ()

    @classmethod
    def of(cls, phase: TouchPhase | str, touches: Sequence[Sequence[float]] = ()) -> "TouchEvent":
        return cls(TouchPhase(phase), tuple(as_point(t) for t in touches))


@dataclass(frozen=True)
class GestureState:
    mode: GestureMode = GestureMode.IDLE
    reference_distance: float = 0.0
    reference_zoom: float = 1.0
    reference_pan: Point = Point(0.0, 0.0)
    reference_touch_center: Point = Point(0.0, 0.0)

    @property
    def is_active(self) -> bool:
        return self.mode is not GestureMode.IDLE


@dataclass(frozen=True)
class GestureEffect:
    """Outcome of one touch event.

    ``update`` is ``None`` when the view does not change. ``prevent_default``
    asks the host to suppress the platform's own scroll/zoom handling.
    """

    update: Optional[ViewUpdate] = None
    prevent_default: bool = False


def touch_distance(a: Point, b: Point) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


def touch_center(a: Point, b: Point) -> Point:
    return Point((a.x + b.x) / 2.0, (a.y + b.y) / 2.0)


def _begin_pan(state: GestureState, touch: Point, view: ViewState) -> GestureState:
    return replace(
        state,
        mode=GestureMode.PANNING,
        reference_pan=view.pan,
        reference_touch_center=touch,
    )


def _begin_pinch(state: GestureState, first: Point, second: Point, view: ViewState) -> GestureState:
    return replace(
        state,
        mode=GestureMode.PINCHING,
        reference_distance=touch_distance(first, second),
        reference_zoom=view.zoom,
        reference_pan=view.pan,
        reference_touch_center=touch_center(first, second),
    )


def _rebaseline(state: GestureState, touches: Tuple[Point, ...], view: ViewState) -> GestureState:
    if len(touches) == 1:
        new_state = _begin_pan(state, touches[0], view)
    elif len(touches) == 2:
        new_state = _begin_pinch(state, touches[0], touches[1], view)
    else:
        return state
    if new_state.mode is not state.mode:
        logger.debug("Gesture %s -> %s", state.mode.value, new_state.mode.value)
    return new_state


def _pan_update(state: GestureState, touch: Point, view: ViewState) -> ViewUpdate:
    ref = state.reference_touch_center
    pan = Point(
        state.reference_pan.x + (touch.x - ref.x),
        state.reference_pan.y + (touch.y - ref.y),
    )
    return ViewUpdate(zoom=view.zoom, pan=pan)


def _pinch_update(
    state: GestureState,
    first: Point,
    second: Point,
    view: ViewState,
    config: EngineConfig,
) -> ViewUpdate:
    distance = touch_distance(first, second)
    center = touch_center(first, second)
    zoom_factor = distance / state.reference_distance
    new_zoom = config.clamp_zoom(state.reference_zoom * zoom_factor)
    zoom_delta = new_zoom - view.zoom
    ref = state.reference_touch_center
    pan = Point(
        view.pan.x + (center.x - ref.x) - center.x * zoom_delta,
        view.pan.y + (center.y - ref.y) - center.y * zoom_delta,
    )
    return ViewUpdate(zoom=new_zoom, pan=pan)


def handle_touch(
    state: GestureState,
    event: TouchEvent,
    view: ViewState,
    config: EngineConfig | None = None,
) -> Tuple[GestureState, GestureEffect]:
    """Advance the gesture by one touch event."""
    config = config or EngineConfig()
    touches = event.touches
    count = len(touches)

    if event.phase is TouchPhase.CANCEL or count == 0:
        if state.is_active:
            logger.debug("Gesture %s -> idle", state.mode.value)
        return replace(state, mode=GestureMode.IDLE), GestureEffect(prevent_default=state.is_active)

    if count > 2:
        # Extra fingers are ignored; keep whatever gesture is running.
        return state, GestureEffect(prevent_default=True)

    expected = GestureMode.PANNING if count == 1 else GestureMode.PINCHING
    if event.phase is not TouchPhase.MOVE or state.mode is not expected:
        return _rebaseline(state, touches, view), GestureEffect(prevent_default=True)

    if expected is GestureMode.PANNING:
        return state, GestureEffect(_pan_update(state, touches[0], view), prevent_default=True)

    if state.reference_distance <= EPS:
        # Both fingers started on the same spot; measure from here instead.
        return _rebaseline(state, touches, view), GestureEffect(prevent_default=True)
    update = _pinch_update(state, touches[0], touches[1], view, config)
    return state, GestureEffect(update, prevent_default=True)


def should_suppress_context_menu(state: GestureState) -> bool:
    """Long-press context menus are swallowed while a gesture runs."""
    return state.is_active
