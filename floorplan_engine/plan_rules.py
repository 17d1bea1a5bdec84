"""Plan-level rules that look at several objects and rooms at once.

Unlike :mod:`floorplan_engine.validation`, which checks one element at a time,
these rules compare objects with each other (overlaps, doors on walls, room
sizes, egress). Each rule is a :class:`PlanRule` that can be switched off; a
rule that raises is logged and skipped so the others still report.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .config import EngineConfig
from .geometry import (
    Point,
    SelectableObject,
    euclid_len,
    point_in_polygon,
    polygon_area,
    polygon_centroid,
    real_area,
    rects_overlap,
)
from .units import CONVERSION_FACTORS, Unit
from .validation import ValidationSummary

logger = logging.getLogger(__name__)


class IssueType(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class IssueCategory(str, Enum):
    GEOMETRY = "geometry"
    ARCHITECTURE = "architecture"
    ACCESSIBILITY = "accessibility"
    BUILDING_CODE = "building_code"


class IssueSeverity(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class Room:
    id: str
    name: str
    points: Tuple[Point, ...] = ()
    area: Optional[float] = None  # square inches, when the store already knows it


@dataclass(frozen=True)
class ValidationIssue:
    id: str
    type: IssueType
    category: IssueCategory
    title: str
    description: str
    object_ids: Tuple[str, ...]
    severity: IssueSeverity
    position: Optional[Point] = None
    suggestion: str = ""

    def asdict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "type": self.type.value,
            "category": self.category.value,
            "title": self.title,
            "description": self.description,
            "object_ids": list(self.object_ids),
            "severity": self.severity.value,
            "position": list(self.position) if self.position is not None else None,
            "suggestion": self.suggestion,
        }


RuleCheck = Callable[[Sequence[SelectableObject], Sequence[Room], EngineConfig], List[ValidationIssue]]


@dataclass(frozen=True)
class PlanRule:
    id: str
    name: str
    category: IssueCategory
    check: RuleCheck = field(compare=False)
    enabled: bool = True


DEFAULT_DOOR_WIDTH = 36.0
MIN_DOOR_WIDTH = 24.0
MAX_DOOR_WIDTH = 48.0
WINDOW_CORNER_CLEARANCE = 12.0
OVERLAP_EXEMPT_KINDS = ("text", "room")

# Minimum room sizes in square feet, checked in this order.
MINIMUM_ROOM_SIZES: Dict[str, float] = {
    "bedroom": 70.0,
    "bathroom": 30.0,
    "kitchen": 70.0,
    "living room": 120.0,
    "dining room": 100.0,
}


def _of_kind(objects: Iterable[SelectableObject], kind: str) -> List[SelectableObject]:
    return [obj for obj in objects if obj.kind == kind]


def _midpoint(a: Point, b: Point) -> Point:
    return Point((a.x + b.x) / 2.0, (a.y + b.y) / 2.0)


def _door_width(door: SelectableObject) -> float:
    return float(door.width) if door.width else DEFAULT_DOOR_WIDTH


def room_area_sq_ft(room: Room, config: EngineConfig) -> float:
    """Room area in square feet.

    A stored area is taken as square inches. Otherwise the outline's pixel
    area is scaled with the configured pixels-per-unit and unit.
    """
    if room.area:
        return room.area / 144.0
    area_units = real_area(polygon_area(room.points), config.pixels_per_unit)
    ratio = CONVERSION_FACTORS[config.unit] / CONVERSION_FACTORS[Unit.FEET]
    return area_units * ratio * ratio


def _room_center(room: Room) -> Optional[Point]:
    return polygon_centroid(room.points)


# ---- Rules -----------------------------------------------------------------

def check_overlapping_objects(objects, rooms, config) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    size = config.default_object_size
    for i, first in enumerate(objects):
        for second in objects[i + 1:]:
            if first.kind in OVERLAP_EXEMPT_KINDS or second.kind in OVERLAP_EXEMPT_KINDS:
                continue
            if not rects_overlap(first.bounds(size), second.bounds(size)):
                continue
            issues.append(ValidationIssue(
                id=f"overlap-{first.id}-{second.id}",
                type=IssueType.WARNING,
                category=IssueCategory.GEOMETRY,
                title="Overlapping Objects",
                description=f"{first.kind} and {second.kind} are overlapping",
                object_ids=(first.id, second.id),
                severity=IssueSeverity.MEDIUM,
                position=_midpoint(first.center(size), second.center(size)),
                suggestion="Move objects to prevent overlap or check if this is intentional",
            ))
    return issues


def check_door_placement(objects, rooms, config) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    size = config.default_object_size
    walls = _of_kind(objects, "wall")
    for door in _of_kind(objects, "door"):
        center = door.center(size)
        if not any(rects_overlap(door.bounds(size), wall.bounds(size)) for wall in walls):
            issues.append(ValidationIssue(
                id=f"door-no-wall-{door.id}",
                type=IssueType.ERROR,
                category=IssueCategory.ARCHITECTURE,
                title="Door Not on Wall",
                description="Door must be placed on a wall",
                object_ids=(door.id,),
                severity=IssueSeverity.HIGH,
                position=center,
                suggestion="Move door to intersect with a wall",
            ))
        width = _door_width(door)
        if width < MIN_DOOR_WIDTH:
            issues.append(ValidationIssue(
                id=f"door-too-narrow-{door.id}",
                type=IssueType.WARNING,
                category=IssueCategory.ARCHITECTURE,
                title="Door Too Narrow",
                description=f'Door width ({width:g}") is below minimum recommended ({MIN_DOOR_WIDTH:g}")',
                object_ids=(door.id,),
                severity=IssueSeverity.MEDIUM,
                position=center,
                suggestion='Increase door width to at least 24" for accessibility',
            ))
        if width > MAX_DOOR_WIDTH:
            issues.append(ValidationIssue(
                id=f"door-too-wide-{door.id}",
                type=IssueType.INFO,
                category=IssueCategory.ARCHITECTURE,
                title="Very Wide Door",
                description=f'Door width ({width:g}") is unusually wide',
                object_ids=(door.id,),
                severity=IssueSeverity.LOW,
                position=center,
                suggestion="Consider if this door width is intentional",
            ))
    return issues


def check_window_placement(objects, rooms, config) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    size = config.default_object_size
    walls = _of_kind(objects, "wall")
    for window in _of_kind(objects, "window"):
        center = window.center(size)
        hosts = [wall for wall in walls if rects_overlap(window.bounds(size), wall.bounds(size))]
        if not hosts:
            issues.append(ValidationIssue(
                id=f"window-no-wall-{window.id}",
                type=IssueType.ERROR,
                category=IssueCategory.ARCHITECTURE,
                title="Window Not on Wall",
                description="Window must be placed on a wall",
                object_ids=(window.id,),
                severity=IssueSeverity.HIGH,
                position=center,
                suggestion="Move window to intersect with a wall",
            ))
        for wall in hosts:
            x0, y0, x1, y1 = wall.bounds(size)
            near_start = euclid_len(center, (x0, y0)) < WINDOW_CORNER_CLEARANCE
            near_end = euclid_len(center, (x1, y1)) < WINDOW_CORNER_CLEARANCE
            if near_start or near_end:
                issues.append(ValidationIssue(
                    id=f"window-corner-{window.id}",
                    type=IssueType.WARNING,
                    category=IssueCategory.ARCHITECTURE,
                    title="Window Too Close to Corner",
                    description="Window is very close to wall corner",
                    object_ids=(window.id, wall.id),
                    severity=IssueSeverity.MEDIUM,
                    position=center,
                    suggestion='Move window at least 12" from wall corners for structural integrity',
                ))
    return issues


def _match_room_type(name: str) -> Optional[str]:
    lowered = name.lower()
    for room_type in MINIMUM_ROOM_SIZES:
        if room_type in lowered or room_type.replace(" ", "") in lowered:
            return room_type
    return None


def check_room_size(objects, rooms, config) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    for room in rooms:
        room_type = _match_room_type(room.name)
        if room_type is None:
            continue
        minimum = MINIMUM_ROOM_SIZES[room_type]
        area = room_area_sq_ft(room, config)
        if area >= minimum:
            continue
        issues.append(ValidationIssue(
            id=f"room-too-small-{room.id}",
            type=IssueType.WARNING,
            category=IssueCategory.ARCHITECTURE,
            title="Room Below Minimum Size",
            description=(
                f"{room.name} ({round(area)} sq ft) is below minimum recommended size "
                f"({minimum:g} sq ft)"
            ),
            object_ids=(room.id,),
            severity=IssueSeverity.MEDIUM,
            position=_room_center(room),
            suggestion=f"Expand room to at least {minimum:g} sq ft",
        ))
    return issues


def _swing_area(door: SelectableObject, size: float) -> Tuple[float, float, float, float]:
    x0, y0, x1, y1 = door.bounds(size)
    width = _door_width(door)
    if door.properties.get("swingDirection", "inward") == "inward":
        return (x0 - width, y0 - width, x1, y1 + width)
    return (x0, y0 - width, x1 + width, y1 + width)


def check_door_clearance(objects, rooms, config) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    size = config.default_object_size
    others = [obj for obj in objects if obj.kind not in ("door", "wall")]
    for door in _of_kind(objects, "door"):
        swing = _swing_area(door, size)
        for obj in others:
            if not rects_overlap(obj.bounds(size), swing):
                continue
            issues.append(ValidationIssue(
                id=f"door-clearance-{door.id}-{obj.id}",
                type=IssueType.WARNING,
                category=IssueCategory.ACCESSIBILITY,
                title="Door Swing Obstruction",
                description=f"{obj.kind} may obstruct door swing",
                object_ids=(door.id, obj.id),
                severity=IssueSeverity.MEDIUM,
                position=door.center(size),
                suggestion="Ensure clear swing path for door operation",
            ))
    return issues


def check_egress(objects, rooms, config) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    size = config.default_object_size
    doors = _of_kind(objects, "door")
    for room in rooms:
        if room.name.lower() == "closet":
            continue
        if any(point_in_polygon(door.center(size), room.points) for door in doors):
            continue
        issues.append(ValidationIssue(
            id=f"no-egress-{room.id}",
            type=IssueType.ERROR,
            category=IssueCategory.BUILDING_CODE,
            title="No Egress Door",
            description=f"{room.name} has no door for egress",
            object_ids=(room.id,),
            severity=IssueSeverity.CRITICAL,
            position=_room_center(room),
            suggestion="Add at least one door to provide egress from the room",
        ))
    return issues


DEFAULT_RULES: Tuple[PlanRule, ...] = (
    PlanRule("overlapping-objects", "Overlapping Objects", IssueCategory.GEOMETRY, check_overlapping_objects),
    PlanRule("door-placement", "Door Placement", IssueCategory.ARCHITECTURE, check_door_placement),
    PlanRule("window-placement", "Window Placement", IssueCategory.ARCHITECTURE, check_window_placement),
    PlanRule("room-size", "Room Size Validation", IssueCategory.ARCHITECTURE, check_room_size),
    PlanRule("door-clearance", "Door Clearance", IssueCategory.ACCESSIBILITY, check_door_clearance),
    PlanRule("egress-requirements", "Egress Requirements", IssueCategory.BUILDING_CODE, check_egress),
)


def run_plan_rules(
    objects: Sequence[SelectableObject],
    rooms: Sequence[Room] = (),
    rules: Optional[Sequence[PlanRule]] = None,
    *,
    enabled: bool = True,
    config: EngineConfig | None = None,
) -> List[ValidationIssue]:
    if not enabled:
        return []
    config = config or EngineConfig()
    objects = list(objects)
    rooms = list(rooms)
    issues: List[ValidationIssue] = []
    for rule in DEFAULT_RULES if rules is None else rules:
        if not rule.enabled:
            continue
        try:
            issues.extend(rule.check(objects, rooms, config))
        except Exception as exc:
            logger.warning("Plan rule %s failed: %s", rule.id, exc)
    return issues


def issues_by_category(issues: Iterable[ValidationIssue], category: IssueCategory | str) -> List[ValidationIssue]:
    category = IssueCategory(category)
    return [issue for issue in issues if issue.category is category]


def issues_by_severity(issues: Iterable[ValidationIssue], severity: IssueSeverity | str) -> List[ValidationIssue]:
    severity = IssueSeverity(severity)
    return [issue for issue in issues if issue.severity is severity]


def issues_for_object(issues: Iterable[ValidationIssue], object_id: str) -> List[ValidationIssue]:
    return [issue for issue in issues if object_id in issue.object_ids]


def summarize_issues(issues: Iterable[ValidationIssue]) -> ValidationSummary:
    summary = ValidationSummary()
    severity_fields = {
        IssueSeverity.CRITICAL: "critical",
        IssueSeverity.HIGH: "high",
        IssueSeverity.MEDIUM: "medium",
        IssueSeverity.LOW: "low",
    }
    type_fields = {
        IssueType.ERROR: "errors",
        IssueType.WARNING: "warnings",
        IssueType.INFO: "info",
    }
    for issue in issues:
        summary.total += 1
        name = severity_fields[issue.severity]
        setattr(summary, name, getattr(summary, name) + 1)
        name = type_fields[issue.type]
        setattr(summary, name, getattr(summary, name) + 1)
    return summary
