import pytest

from floorplan_engine.config import EngineConfig
from floorplan_engine.geometry import Point
from floorplan_engine.gestures import (
    GestureMode,
    GestureState,
    TouchEvent,
    TouchPhase,
    handle_touch,
    should_suppress_context_menu,
)
from floorplan_engine.viewport import ViewState


def _pinch_started(view=ViewState()):
    state, effect = handle_touch(GestureState(), TouchEvent.of("start", [(0, 0), (100, 0)]), view)
    return state, effect


def test_two_touches_start_pinch():
    state, effect = _pinch_started()
    assert state.mode is GestureMode.PINCHING
    assert state.reference_distance == pytest.approx(100.0)
    assert state.reference_zoom == 1.0
    assert state.reference_touch_center == Point(50.0, 0.0)
    assert effect.update is None
    assert effect.prevent_default is True


def test_doubling_distance_doubles_zoom():
    state, _ = _pinch_started()
    state, effect = handle_touch(state, TouchEvent.of("move", [(-50, 0), (150, 0)]), ViewState())
    assert effect.update.zoom == pytest.approx(2.0)
    # Midpoint unchanged; pan only corrects for the zoom change.
    assert effect.update.pan == pytest.approx((-50.0, 0.0))
    assert effect.prevent_default is True


def test_pinch_clamps_to_max_zoom():
    state, _ = _pinch_started()
    _, effect = handle_touch(state, TouchEvent.of("move", [(0, 0), (5000, 0)]), ViewState())
    assert effect.update.zoom == 10.0


def test_pinch_clamps_to_min_zoom():
    state, _ = _pinch_started()
    _, effect = handle_touch(state, TouchEvent.of("move", [(49, 0), (50, 0)]), ViewState())
    assert effect.update.zoom == 0.1


def test_pinch_respects_configured_bounds():
    config = EngineConfig(min_zoom=0.5, max_zoom=3.0)
    state, _ = handle_touch(GestureState(), TouchEvent.of("start", [(0, 0), (100, 0)]), ViewState(), config)
    _, effect = handle_touch(state, TouchEvent.of("move", [(0, 0), (1000, 0)]), ViewState(), config)
    assert effect.update.zoom == 3.0


def test_pinch_pan_follows_midpoint():
    state, _ = _pinch_started()
    _, effect = handle_touch(state, TouchEvent.of("move", [(0, 20), (100, 20)]), ViewState())
    assert effect.update.zoom == pytest.approx(1.0)
    assert effect.update.pan == pytest.approx((0.0, 20.0))


def test_single_touch_pans():
    view = ViewState(zoom=2.0, pan=Point(5, 5))
    state, effect = handle_touch(GestureState(), TouchEvent.of("start", [(10, 10)]), view)
    assert state.mode is GestureMode.PANNING
    assert effect.prevent_default is True
    state, effect = handle_touch(state, TouchEvent.of("move", [(30, 25)]), view)
    assert effect.update.pan == Point(25.0, 20.0)
    assert effect.update.zoom == 2.0


def test_lifting_one_finger_rebaselines_pan():
    state, _ = _pinch_started()
    view = ViewState(zoom=2.0, pan=Point(-50.0, 0.0))
    state, effect = handle_touch(state, TouchEvent.of("end", [(150, 0)]), view)
    assert state.mode is GestureMode.PANNING
    assert state.reference_pan == Point(-50.0, 0.0)
    assert state.reference_touch_center == Point(150.0, 0.0)
    assert effect.update is None
    _, effect = handle_touch(state, TouchEvent.of("move", [(160, 0)]), view)
    assert effect.update.pan == Point(-40.0, 0.0)
    assert effect.update.zoom == 2.0


def test_adding_second_finger_switches_to_pinch():
    state, _ = handle_touch(GestureState(), TouchEvent.of("start", [(0, 0)]), ViewState())
    state, _ = handle_touch(state, TouchEvent.of("start", [(0, 0), (40, 30)]), ViewState())
    assert state.mode is GestureMode.PINCHING
    assert state.reference_distance == pytest.approx(50.0)


def test_all_fingers_lifted_returns_to_idle():
    state, _ = _pinch_started()
    state, effect = handle_touch(state, TouchEvent.of("end", []), ViewState())
    assert state.mode is GestureMode.IDLE
    assert effect.prevent_default is True
    assert effect.update is None


def test_move_without_gesture_is_noop():
    state, effect = handle_touch(GestureState(), TouchEvent(TouchPhase.MOVE), ViewState())
    assert state == GestureState()
    assert effect.update is None
    assert effect.prevent_default is False


def test_cancel_resets_to_idle():
    state, _ = _pinch_started()
    state, effect = handle_touch(state, TouchEvent.of("cancel", [(0, 0), (100, 0)]), ViewState())
    assert state.mode is GestureMode.IDLE
    assert effect.update is None


def test_extra_fingers_are_ignored():
    state, _ = _pinch_started()
    new_state, effect = handle_touch(state, TouchEvent.of("start", [(0, 0), (1, 1), (2, 2)]), ViewState())
    assert new_state == state
    assert effect.update is None


def test_coincident_pinch_start_rebaselines_instead_of_dividing():
    state, _ = handle_touch(GestureState(), TouchEvent.of("start", [(5, 5), (5, 5)]), ViewState())
    assert state.reference_distance == 0.0
    state, effect = handle_touch(state, TouchEvent.of("move", [(0, 5), (10, 5)]), ViewState())
    assert effect.update is None
    assert state.reference_distance == pytest.approx(10.0)


def test_context_menu_suppressed_only_while_active():
    assert should_suppress_context_menu(GestureState()) is False
    state, _ = _pinch_started()
    assert should_suppress_context_menu(state) is True
