"""PySide6 glue: turn Qt input events into engine events.

The converters are plain functions so a canvas widget can call them from its
own handlers. :class:`PlanInputController` bundles them with the reducer
state for hosts that prefer to install it as an event filter.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, List, Optional, Sequence

from PySide6.QtCore import QEvent, QObject, Qt, Signal
from PySide6.QtGui import QEventPoint

from .config import EngineConfig
from .geometry import Point, SelectableObject
from .gestures import GestureState, TouchEvent, TouchPhase, handle_touch, should_suppress_context_menu
from .lasso import LassoResult, LassoState, PointerEvent, PointerPhase, handle_pointer, merge_selection
from .rooms import RoomKey
from .viewport import ViewState, ZoomKey, wheel_zoom, zoom_shortcut

logger = logging.getLogger(__name__)

_TOUCH_PHASES = {
    QEvent.Type.TouchBegin: TouchPhase.START,
    QEvent.Type.TouchUpdate: TouchPhase.MOVE,
    QEvent.Type.TouchEnd: TouchPhase.END,
    QEvent.Type.TouchCancel: TouchPhase.CANCEL,
}

_POINTER_PHASES = {
    QEvent.Type.MouseButtonPress: PointerPhase.DOWN,
    QEvent.Type.MouseMove: PointerPhase.MOVE,
    QEvent.Type.MouseButtonRelease: PointerPhase.UP,
}


def _xy(pos) -> Point:
    return Point(float(pos.x()), float(pos.y()))


def touch_event_from_qt(event) -> Optional[TouchEvent]:
    """Active (not yet released) touch points of a Qt touch event."""
    phase = _TOUCH_PHASES.get(event.type())
    if phase is None:
        return None
    touches = [
        _xy(point.position())
        for point in event.points()
        if point.state() != QEventPoint.State.Released
    ]
    return TouchEvent(phase, tuple(touches))


def pointer_from_mouse(event) -> Optional[PointerEvent]:
    phase = _POINTER_PHASES.get(event.type())
    if phase is None:
        return None
    return PointerEvent(phase, _xy(event.position()))


def is_zoom_modifier(modifiers) -> bool:
    return bool(modifiers & Qt.ControlModifier)


def wheel_angle_delta(event) -> float:
    return float(event.angleDelta().y())


def zoom_key_from_qt(event) -> Optional[ZoomKey]:
    if not is_zoom_modifier(event.modifiers()):
        return None
    key = event.key()
    if key in (Qt.Key_Plus, Qt.Key_Equal):
        return ZoomKey.ZOOM_IN
    if key in (Qt.Key_Minus, Qt.Key_Underscore):
        return ZoomKey.ZOOM_OUT
    if key == Qt.Key_0:
        return ZoomKey.RESET
    return None


def room_key_from_qt(event) -> Optional[RoomKey]:
    """Ctrl+R starts a room outline, Enter finishes it, Escape drops it."""
    key = event.key()
    if key in (Qt.Key_Return, Qt.Key_Enter):
        return RoomKey.COMPLETE
    if key == Qt.Key_Escape:
        return RoomKey.CANCEL
    if key == Qt.Key_R and event.modifiers() & Qt.ControlModifier:
        return RoomKey.START
    return None


class PlanInputController(QObject):
    """Owns gesture, lasso and view state for one canvas.

    Each ``handle_*`` method returns True when the event was consumed and the
    widget should not run its default handling.
    """

    view_changed = Signal(object)
    selection_changed = Signal(list)

    def __init__(
        self,
        candidates: Callable[[], Sequence[SelectableObject]],
        config: EngineConfig | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._candidates = candidates
        self.config = config or EngineConfig()
        self.view = ViewState()
        self.gesture = GestureState()
        self.lasso = LassoState()
        self.lasso_enabled = False
        self.selection: List[str] = []
        self.last_lasso: Optional[LassoResult] = None

    def _set_view(self, view: ViewState) -> None:
        if view == self.view:
            return
        self.view = view
        self.view_changed.emit(view)

    def handle_touch_event(self, event) -> bool:
        touch = touch_event_from_qt(event)
        if touch is None:
            return False
        self.gesture, effect = handle_touch(self.gesture, touch, self.view, self.config)
        if effect.update is not None:
            self._set_view(effect.update.as_view())
        return effect.prevent_default

    def handle_mouse_event(self, event) -> bool:
        if not self.lasso_enabled:
            return False
        pointer = pointer_from_mouse(event)
        if pointer is None:
            return False
        if pointer.phase is PointerPhase.DOWN and event.button() != Qt.LeftButton:
            return False
        world = PointerEvent(pointer.phase, self.view.screen_to_world(pointer.point))
        candidates = list(self._candidates())
        # Closure distance is in screen pixels; the path is in world units.
        config = replace(self.config, lasso_close_threshold=self.config.lasso_close_threshold / self.view.zoom)
        self.lasso, effect = handle_pointer(self.lasso, world, candidates, config, self.lasso_enabled)
        if effect.selection is not None:
            self.last_lasso = effect.selection
            modifiers = event.modifiers()
            self.selection = merge_selection(
                self.selection,
                effect.selection.selected_ids,
                [obj.id for obj in candidates],
                additive=bool(modifiers & Qt.ShiftModifier),
                toggle=bool(modifiers & Qt.ControlModifier),
            )
            logger.debug("Selection now %d objects", len(self.selection))
            self.selection_changed.emit(list(self.selection))
        return effect.prevent_default

    def cancel_lasso(self) -> None:
        self.lasso, _effect = handle_pointer(self.lasso, PointerEvent(PointerPhase.CANCEL), [], self.config)

    def handle_wheel_event(self, event) -> bool:
        if not is_zoom_modifier(event.modifiers()):
            return False
        delta = wheel_angle_delta(event)
        if delta != 0:
            self._set_view(wheel_zoom(self.view, delta, _xy(event.position()), self.config))
        return True

    def handle_key_event(self, event) -> bool:
        key = zoom_key_from_qt(event)
        if key is not None:
            self._set_view(zoom_shortcut(self.view, key, self.config))
            return True
        if event.key() == Qt.Key_Escape and self.lasso.is_drawing:
            self.cancel_lasso()
            return True
        return False

    def handle_context_menu(self, event) -> bool:
        return should_suppress_context_menu(self.gesture)

    def eventFilter(self, watched, event):  # pragma: no cover - GUI entry point
        etype = event.type()
        if etype in _TOUCH_PHASES:
            handled = self.handle_touch_event(event)
        elif etype in _POINTER_PHASES:
            handled = self.handle_mouse_event(event)
        elif etype == QEvent.Type.Wheel:
            handled = self.handle_wheel_event(event)
        elif etype == QEvent.Type.KeyPress:
            handled = self.handle_key_event(event)
        elif etype == QEvent.Type.ContextMenu:
            handled = self.handle_context_menu(event)
        else:
            handled = False
        if handled:
            event.accept()
            return True
        return super().eventFilter(watched, event)
