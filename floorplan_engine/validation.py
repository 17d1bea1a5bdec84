"""Rule-based checks for MEP elements and dimension annotations.

Elements are a closed set of typed variants. ``validate_element`` always runs
the position sanity check first and then every rule registered for the
element's kind; rules never short-circuit each other and the result is a new
list on every call.
"""
from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Callable, ClassVar, Dict, Iterable, List, Optional, Tuple, Union

from .geometry import Point


class ValidationStatus(str, Enum):
    VALID = "valid"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class ValidationFinding:
    status: ValidationStatus
    message: str

    def asdict(self) -> Dict[str, str]:
        return {"status": self.status.value, "message": self.message}


class ElementKind(str, Enum):
    ELECTRICAL = "electrical"
    PLUMBING = "plumbing"
    HVAC = "hvac"
    DIMENSION = "dimension"
    OTHER = "other"


# ---- Element variants ------------------------------------------------------

@dataclass(frozen=True)
class ElectricalProperties:
    voltage: Optional[float] = None
    amperage: Optional[float] = None
    circuit_id: Optional[str] = None
    height: float = 0.0
    dedicated: bool = False
    weatherproof: bool = False
    smart_enabled: bool = False


@dataclass(frozen=True)
class ElectricalElement:
    kind: ClassVar[ElementKind] = ElementKind.ELECTRICAL
    id: str
    element_type: str  # outlet, switch, light, panel, junction, gfci, ...
    properties: ElectricalProperties
    position: Optional[Point] = Point(0.0, 0.0)


@dataclass(frozen=True)
class PlumbingProperties:
    pipe_size: Optional[str] = None
    material: str = "copper"  # copper, pex, pvc, cast_iron
    pressure: Optional[float] = None
    flow_rate: Optional[float] = None  # GPM


@dataclass(frozen=True)
class PlumbingElement:
    kind: ClassVar[ElementKind] = ElementKind.PLUMBING
    id: str
    element_type: str  # sink, toilet, shower, bathtub, faucet, ...
    properties: PlumbingProperties
    position: Optional[Point] = Point(0.0, 0.0)
    water_type: str = "cold"


@dataclass(frozen=True)
class HVACProperties:
    duct_size: Optional[str] = None
    airflow: Optional[float] = None  # CFM
    temperature: Optional[float] = None
    zone_id: Optional[str] = None


@dataclass(frozen=True)
class HVACElement:
    kind: ClassVar[ElementKind] = ElementKind.HVAC
    id: str
    element_type: str  # vent, return, unit, duct, thermostat, ...
    properties: HVACProperties
    position: Optional[Point] = Point(0.0, 0.0)
    capacity: Optional[float] = None


class DimensionType(str, Enum):
    LINEAR = "linear"
    ANGULAR = "angular"
    AREA = "area"
    RADIUS = "radius"


@dataclass(frozen=True)
class DimensionElement:
    kind: ClassVar[ElementKind] = ElementKind.DIMENSION
    id: str
    dimension_type: DimensionType
    start_point: Optional[Point]
    end_point: Optional[Point] = None
    center_point: Optional[Point] = None
    points: Tuple[Point, ...] = ()
    value: float = 0.0
    label: str = ""

    @property
    def position(self) -> Optional[Point]:
        return self.start_point


@dataclass(frozen=True)
class GenericElement:
    """Any other plan object (wall, door, text...); only the position is checked."""

    kind: ClassVar[ElementKind] = ElementKind.OTHER
    id: str
    object_type: str
    position: Optional[Point] = Point(0.0, 0.0)
    properties: Dict[str, Any] = field(default_factory=dict, compare=False)


DomainElement = Union[ElectricalElement, PlumbingElement, HVACElement, DimensionElement, GenericElement]


# ---- Rules -----------------------------------------------------------------

VALID_VOLTAGES = (120, 240)
VALID_PIPE_SIZES = ('1/2"', '3/4"', '1"', '1.5"', '2"')
MAX_FIXTURE_FLOW_GPM = 2.5
GFCI_ELEMENT_TYPES = ("outlet", "gfci")
LOW_FLOW_FIXTURES = ("shower", "faucet")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and not math.isnan(value)


def check_position(position: Optional[Point]) -> List[ValidationFinding]:
    if position is None or len(position) < 2 or not (_is_number(position[0]) and _is_number(position[1])):
        return [ValidationFinding(ValidationStatus.ERROR, "Invalid position coordinates")]
    return []


def _validate_electrical(element: ElectricalElement) -> List[ValidationFinding]:
    results: List[ValidationFinding] = []
    props = element.properties
    if props.voltage is None:
        results.append(ValidationFinding(ValidationStatus.ERROR, "Invalid voltage (missing). Must be 120V or 240V"))
    elif props.voltage not in VALID_VOLTAGES:
        results.append(ValidationFinding(
            ValidationStatus.ERROR,
            f"Invalid voltage ({props.voltage:g}V). Must be 120V or 240V",
        ))
    if element.element_type in GFCI_ELEMENT_TYPES and props.weatherproof is True:
        results.append(ValidationFinding(
            ValidationStatus.WARNING,
            "Weatherproof outlets should be GFCI protected",
        ))
    return results


def _validate_plumbing(element: PlumbingElement) -> List[ValidationFinding]:
    results: List[ValidationFinding] = []
    props = element.properties
    if props.pipe_size not in VALID_PIPE_SIZES:
        size = "missing" if props.pipe_size is None else props.pipe_size
        results.append(ValidationFinding(ValidationStatus.ERROR, f"Invalid pipe size: {size}"))
    if (
        props.flow_rate
        and element.element_type in LOW_FLOW_FIXTURES
        and props.flow_rate > MAX_FIXTURE_FLOW_GPM
    ):
        results.append(ValidationFinding(
            ValidationStatus.WARNING,
            f"Flow rate exceeds recommended maximum ({MAX_FIXTURE_FLOW_GPM:g} GPM)",
        ))
    return results


def _validate_hvac(element: HVACElement) -> List[ValidationFinding]:
    results: List[ValidationFinding] = []
    props = element.properties
    if element.element_type == "duct" and not props.duct_size:
        results.append(ValidationFinding(ValidationStatus.ERROR, "Duct size is required for duct elements"))
    if props.airflow is not None and props.airflow < 0:
        results.append(ValidationFinding(ValidationStatus.ERROR, "Airflow cannot be negative"))
    return results


def _validate_dimension(element: DimensionElement) -> List[ValidationFinding]:
    results: List[ValidationFinding] = []
    if element.dimension_type is DimensionType.LINEAR and element.end_point is None:
        results.append(ValidationFinding(ValidationStatus.ERROR, "Linear dimensions require an end point"))
    if element.dimension_type is DimensionType.ANGULAR and element.center_point is None:
        results.append(ValidationFinding(ValidationStatus.ERROR, "Angular dimensions require a center point"))
    return results


_RULES: Dict[ElementKind, Callable[[Any], List[ValidationFinding]]] = {
    ElementKind.ELECTRICAL: _validate_electrical,
    ElementKind.PLUMBING: _validate_plumbing,
    ElementKind.HVAC: _validate_hvac,
    ElementKind.DIMENSION: _validate_dimension,
}


def validate_element(element: DomainElement) -> List[ValidationFinding]:
    results = check_position(element.position)
    rule = _RULES.get(element.kind)
    if rule is not None:
        results.extend(rule(element))
    return results


def validate_elements(elements: Iterable[DomainElement]) -> Dict[str, List[ValidationFinding]]:
    """Findings per element id, in input order."""
    return {element.id: validate_element(element) for element in elements}


# ---- Summary ---------------------------------------------------------------

@dataclass
class ValidationSummary:
    total: int = 0
    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0
    errors: int = 0
    warnings: int = 0
    info: int = 0

    def asdict(self) -> Dict[str, int]:
        return asdict(self)


def summarize_findings(findings: Iterable[ValidationFinding]) -> ValidationSummary:
    """Count findings by status.

    Element findings carry no severity refinement, so only ``total``,
    ``errors`` and ``warnings`` are populated; ``valid`` entries count toward
    ``total`` only.
    """
    summary = ValidationSummary()
    for finding in findings:
        summary.total += 1
        if finding.status is ValidationStatus.ERROR:
            summary.errors += 1
        elif finding.status is ValidationStatus.WARNING:
            summary.warnings += 1
    return summary
