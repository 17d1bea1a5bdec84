"""Free-form lasso selection.

Like the gesture interpreter, the lasso is a reducer over an explicit
:class:`LassoState` owned by the host. ``handle_pointer`` is the event entry
point; ``start_lasso`` / ``update_lasso`` / ``complete_lasso`` /
``cancel_lasso`` are the individual steps it is built from.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

from .config import EngineConfig
from .geometry import (
    DEFAULT_OBJECT_SIZE,
    Point,
    Rect,
    SelectableObject,
    as_point,
    euclid_len,
    normalize_rect,
    object_intersects_region,
    rects_overlap,
    svg_path,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LassoState:
    is_active: bool = False
    is_drawing: bool = False
    points: Tuple[Point, ...] = ()
    start: Optional[Point] = None


@dataclass(frozen=True)
class LassoResult:
    selected_ids: List[str]
    path: Tuple[Point, ...]


class PointerPhase(str, Enum):
    DOWN = "down"
    MOVE = "move"
    UP = "up"
    CANCEL = "cancel"


@dataclass(frozen=True)
class PointerEvent:
    phase: PointerPhase
    point: Point = Point(0.0, 0.0)

    @classmethod
    def of(cls, phase: PointerPhase | str, point: Sequence[float] = (0.0, 0.0)) -> "PointerEvent":
        return cls(PointerPhase(phase), as_point(point))


@dataclass(frozen=True)
class LassoEffect:
    """``selection`` is set only when a lasso completed on this event."""

    selection: Optional[LassoResult] = None
    prevent_default: bool = False


def start_lasso(state: LassoState, point: Sequence[float], enabled: bool = True) -> LassoState:
    if not enabled:
        return state
    start = as_point(point)
    return LassoState(is_active=True, is_drawing=True, points=(start,), start=start)


def update_lasso(state: LassoState, point: Sequence[float], enabled: bool = True) -> LassoState:
    if not (state.is_drawing and enabled):
        return state
    return replace(state, points=state.points + (as_point(point),))


def cancel_lasso(state: LassoState) -> LassoState:
    return LassoState()


def close_path(points: Tuple[Point, ...], start: Optional[Point], threshold: float) -> Tuple[Point, ...]:
    """Append ``start`` when the path ends within ``threshold`` of it."""
    if start is None or not points:
        return points
    if euclid_len(points[-1], start) < threshold:
        return points + (start,)
    return points


def select_in_region(
    candidates: Iterable[SelectableObject],
    region: Sequence[Point],
    default_size: float,
) -> List[str]:
    """Ids of candidates inside ``region``, in candidate order."""
    return [obj.id for obj in candidates if object_intersects_region(obj, region, default_size)]


def complete_lasso(
    state: LassoState,
    point: Sequence[float],
    candidates: Sequence[SelectableObject],
    config: EngineConfig | None = None,
    enabled: bool = True,
) -> Tuple[LassoState, Optional[LassoResult]]:
    """Finish the lasso at ``point`` and collect the enclosed candidates."""
    if not (state.is_drawing and enabled):
        return state, None
    config = config or EngineConfig()
    path = close_path(state.points + (as_point(point),), state.start, config.lasso_close_threshold)
    selected = select_in_region(candidates, path, config.default_object_size)
    logger.debug("Lasso closed with %d points, selected %d of %d", len(path), len(selected), len(candidates))
    return LassoState(), LassoResult(selected_ids=selected, path=path)


def handle_pointer(
    state: LassoState,
    event: PointerEvent,
    candidates: Sequence[SelectableObject],
    config: EngineConfig | None = None,
    enabled: bool = True,
) -> Tuple[LassoState, LassoEffect]:
    if event.phase is PointerPhase.CANCEL:
        return cancel_lasso(state), LassoEffect()
    if event.phase is PointerPhase.DOWN:
        new_state = start_lasso(state, event.point, enabled)
        return new_state, LassoEffect(prevent_default=new_state.is_drawing)
    if event.phase is PointerPhase.MOVE:
        new_state = update_lasso(state, event.point, enabled)
        return new_state, LassoEffect(prevent_default=new_state.is_drawing and enabled)
    new_state, result = complete_lasso(state, event.point, candidates, config, enabled)
    return new_state, LassoEffect(selection=result, prevent_default=result is not None)


def lasso_path(state: LassoState) -> str:
    """SVG path data for the in-progress lasso."""
    return svg_path(state.points)


def objects_in_rect(
    candidates: Iterable[SelectableObject],
    rect: Rect,
    default_size: float = DEFAULT_OBJECT_SIZE,
) -> List[str]:
    """Rubber-band selection: ids whose bounding box overlaps ``rect``."""
    area = normalize_rect(rect)
    return [obj.id for obj in candidates if rects_overlap(obj.bounds(default_size), area)]


def merge_selection(
    current: Sequence[str],
    hits: Sequence[str],
    order: Sequence[str],
    *,
    additive: bool = False,
    toggle: bool = False,
) -> List[str]:
    """Combine a new hit list with the current selection.

    ``toggle`` flips membership of each hit, ``additive`` unions, otherwise the
    hits replace the selection. The result follows ``order`` (the object
    store's ordering).
    """
    hits = [sid for sid in hits if sid]
    if toggle:
        selected = set(current)
        for sid in hits:
            if sid in selected:
                selected.remove(sid)
            else:
                selected.add(sid)
    elif additive:
        selected = set(current)
        selected.update(hits)
    else:
        selected = set(hits)
    return [sid for sid in order if sid in selected]
