"""Interaction and measurement engine for 2D floor-plan canvases.

The Qt adapter lives in :mod:`floorplan_engine.qt_input` and is not imported
here so the engine can be used without a display.
"""
from .config import EngineConfig, config_from_dict, load_config
from .geometry import (
    Point,
    SelectableObject,
    object_intersects_region,
    point_in_polygon,
    polygon_area,
    polygon_perimeter,
    real_area,
    real_perimeter,
)
from .gestures import (
    GestureEffect,
    GestureMode,
    GestureState,
    TouchEvent,
    TouchPhase,
    handle_touch,
    should_suppress_context_menu,
)
from .lasso import (
    LassoEffect,
    LassoResult,
    LassoState,
    PointerEvent,
    PointerPhase,
    cancel_lasso,
    complete_lasso,
    handle_pointer,
    lasso_path,
    merge_selection,
    objects_in_rect,
    start_lasso,
    update_lasso,
)
from .logging_config import setup_logging
from .measure import measure_distance, measure_polygon
from .plan_rules import Room, ValidationIssue, run_plan_rules, summarize_issues
from .rooms import (
    RoomBoundary,
    RoomKey,
    RoomState,
    add_room_point,
    cancel_room,
    complete_room,
    room_at_point,
    start_room,
)
from .snapping import Guide, SnapResult, should_auto_connect, snap_point
from .units import (
    DisplayFormat,
    MeasurementFormatter,
    MeasurementValue,
    Unit,
    UnitSystem,
    auto_convert,
    convert,
    format_measurement,
)
from .validation import (
    ValidationFinding,
    ValidationStatus,
    summarize_findings,
    validate_element,
    validate_elements,
)
from .viewport import ViewState, ViewUpdate, ZoomKey, wheel_zoom, zoom_about, zoom_shortcut

__version__ = "0.1.0"
