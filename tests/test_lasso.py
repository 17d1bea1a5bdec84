from floorplan_engine.config import EngineConfig
from floorplan_engine.geometry import Point, SelectableObject
from floorplan_engine.lasso import (
    LassoState,
    PointerEvent,
    cancel_lasso,
    close_path,
    complete_lasso,
    handle_pointer,
    lasso_path,
    merge_selection,
    objects_in_rect,
    start_lasso,
    update_lasso,
)

INSIDE = SelectableObject("inside", Point(10, 10), width=20, height=20)
OUTSIDE = SelectableObject("outside", Point(500, 500), width=20, height=20)


def _draw(points):
    state = start_lasso(LassoState(), points[0])
    for pt in points[1:]:
        state = update_lasso(state, pt)
    return state


def test_start_records_first_point():
    state = start_lasso(LassoState(), (3, 4))
    assert state.is_active and state.is_drawing
    assert state.points == (Point(3, 4),)
    assert state.start == Point(3, 4)


def test_start_while_disabled_is_noop():
    state = LassoState()
    assert start_lasso(state, (3, 4), enabled=False) is state


def test_update_without_start_is_noop():
    state = LassoState()
    assert update_lasso(state, (1, 1)) is state


def test_complete_without_start_is_noop():
    state = LassoState()
    new_state, result = complete_lasso(state, (1, 1), [INSIDE])
    assert new_state is state
    assert result is None


def test_release_near_start_closes_ring():
    state = _draw([(0, 0), (100, 0), (100, 100)])
    _, result = complete_lasso(state, (5, 5), [])
    assert result.path[-1] == result.path[0]
    assert len(result.path) == 5


def test_release_far_from_start_leaves_ring_open():
    state = _draw([(0, 0), (100, 0), (100, 100)])
    _, result = complete_lasso(state, (50, 80), [])
    assert result.path[-1] == Point(50, 80)
    assert len(result.path) == 4


def test_closure_threshold_is_configurable():
    state = _draw([(0, 0), (100, 0), (100, 100)])
    _, result = complete_lasso(state, (5, 5), [], EngineConfig(lasso_close_threshold=2.0))
    assert result.path[-1] == Point(5, 5)


def test_triangle_selects_inside_and_excludes_outside():
    state = _draw([(0, 0), (200, 0), (0, 200)])
    new_state, result = complete_lasso(state, (0, 0), [OUTSIDE, INSIDE])
    assert result.selected_ids == ["inside"]
    assert new_state == LassoState()


def test_selection_follows_candidate_order():
    other = SelectableObject("other", Point(20, 20), width=5, height=5)
    state = _draw([(0, 0), (200, 0), (200, 200), (0, 200)])
    _, result = complete_lasso(state, (0, 0), [other, OUTSIDE, INSIDE])
    assert result.selected_ids == ["other", "inside"]


def test_cancel_resets_without_selection():
    state = _draw([(0, 0), (10, 0)])
    assert cancel_lasso(state) == LassoState()


def test_close_path_without_start():
    pts = (Point(0, 0), Point(1, 1))
    assert close_path(pts, None, 20.0) == pts


def test_handle_pointer_sequence():
    state, effect = handle_pointer(LassoState(), PointerEvent.of("down", (0, 0)), [INSIDE])
    assert effect.prevent_default is True
    for pt in [(200, 0), (0, 200)]:
        state, effect = handle_pointer(state, PointerEvent.of("move", pt), [INSIDE])
        assert effect.selection is None
    state, effect = handle_pointer(state, PointerEvent.of("up", (2, 2)), [INSIDE])
    assert effect.selection.selected_ids == ["inside"]
    assert state == LassoState()


def test_handle_pointer_disabled():
    state, effect = handle_pointer(LassoState(), PointerEvent.of("down", (0, 0)), [], enabled=False)
    assert state == LassoState()
    assert effect.prevent_default is False


def test_handle_pointer_cancel():
    state, _ = handle_pointer(LassoState(), PointerEvent.of("down", (0, 0)), [])
    state, effect = handle_pointer(state, PointerEvent.of("cancel"), [])
    assert state == LassoState()
    assert effect.selection is None


def test_lasso_path():
    assert lasso_path(LassoState()) == ""
    state = _draw([(0, 0), (10, 5), (2.5, 7)])
    assert lasso_path(state) == "M 0 0 L 10 5 L 2.5 7"


def test_lasso_path_keeps_large_coordinates_exact():
    state = _draw([(1234567, 0.5), (2345678.25, 10)])
    assert lasso_path(state) == "M 1234567 0.5 L 2345678.25 10"


def test_objects_in_rect_accepts_reversed_corners():
    hits = objects_in_rect([INSIDE, OUTSIDE], (40, 40, 0, 0))
    assert hits == ["inside"]


def test_merge_selection_modes():
    order = ["a", "b", "c", "d"]
    assert merge_selection(["a"], ["c", "b"], order) == ["b", "c"]
    assert merge_selection(["a"], ["c"], order, additive=True) == ["a", "c"]
    assert merge_selection(["a", "b"], ["b", "d"], order, toggle=True) == ["a", "d"]
    assert merge_selection(["a"], [""], order) == []
