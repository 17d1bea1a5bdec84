"""Pydantic schemas for raw object-store payloads.

The object store hands out JSON-like mappings using the editor's camelCase
keys. These models coerce them into the engine's typed values. Malformed
payloads raise ``ValueError`` (pydantic's ``ValidationError`` subclasses it),
except for positions: an unreadable position is kept as "missing" so that
validation can report it instead of the parser rejecting the element.
"""
from __future__ import annotations

import math
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .geometry import Point, SelectableObject
from .plan_rules import Room
from .validation import (
    DimensionElement,
    DimensionType,
    DomainElement,
    ElectricalElement,
    ElectricalProperties,
    GenericElement,
    HVACElement,
    HVACProperties,
    PlumbingElement,
    PlumbingProperties,
)


def coerce_point(value: Any) -> Optional[Point]:
    """Read ``{"x": .., "y": ..}`` or ``[x, y]``; ``None`` when unreadable."""
    if value is None:
        return None
    try:
        if isinstance(value, dict):
            x, y = value["x"], value["y"]
        else:
            x, y = value[0], value[1]
        if isinstance(x, bool) or isinstance(y, bool):
            return None
        return Point(float(x), float(y))
    except (KeyError, IndexError, TypeError, ValueError):
        return None


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)


class _Positioned(_Payload):
    id: str
    position: Optional[Point] = None

    @field_validator("position", mode="before")
    @classmethod
    def _coerce_position(cls, value: Any) -> Optional[Point]:
        return coerce_point(value)


class ElectricalPropertiesModel(_Payload):
    voltage: Optional[float] = None
    amperage: Optional[float] = None
    circuit_id: Optional[str] = Field(default=None, alias="circuitId")
    height: float = 0.0
    dedicated: bool = False
    weatherproof: bool = False
    smart_enabled: bool = Field(default=False, alias="smartEnabled")


class ElectricalModel(_Positioned):
    element_type: str = Field(alias="elementType")
    properties: ElectricalPropertiesModel = Field(default_factory=ElectricalPropertiesModel)

    def to_element(self) -> ElectricalElement:
        return ElectricalElement(
            id=self.id,
            element_type=self.element_type,
            properties=ElectricalProperties(**self.properties.model_dump()),
            position=self.position,
        )


class PlumbingPropertiesModel(_Payload):
    pipe_size: Optional[str] = Field(default=None, alias="pipeSize")
    material: str = "copper"
    pressure: Optional[float] = None
    flow_rate: Optional[float] = None


class PlumbingModel(_Positioned):
    element_type: str = Field(alias="elementType")
    water_type: str = Field(default="cold", alias="waterType")
    properties: PlumbingPropertiesModel = Field(default_factory=PlumbingPropertiesModel)

    def to_element(self) -> PlumbingElement:
        return PlumbingElement(
            id=self.id,
            element_type=self.element_type,
            properties=PlumbingProperties(**self.properties.model_dump()),
            position=self.position,
            water_type=self.water_type,
        )


class HVACPropertiesModel(_Payload):
    duct_size: Optional[str] = Field(default=None, alias="ductSize")
    airflow: Optional[float] = None
    temperature: Optional[float] = None
    zone_id: Optional[str] = Field(default=None, alias="zoneId")


class HVACModel(_Positioned):
    element_type: str = Field(alias="elementType")
    capacity: Optional[float] = None
    properties: HVACPropertiesModel = Field(default_factory=HVACPropertiesModel)

    def to_element(self) -> HVACElement:
        return HVACElement(
            id=self.id,
            element_type=self.element_type,
            properties=HVACProperties(**self.properties.model_dump()),
            position=self.position,
            capacity=self.capacity,
        )


class DimensionModel(_Payload):
    id: str
    type: DimensionType
    start_point: Optional[Point] = Field(default=None, alias="startPoint")
    end_point: Optional[Point] = Field(default=None, alias="endPoint")
    center_point: Optional[Point] = Field(default=None, alias="centerPoint")
    points: List[Point] = Field(default_factory=list)
    value: float = 0.0
    label: str = ""

    @field_validator("start_point", "end_point", "center_point", mode="before")
    @classmethod
    def _coerce_points(cls, value: Any) -> Optional[Point]:
        return coerce_point(value)

    @field_validator("points", mode="before")
    @classmethod
    def _coerce_point_list(cls, value: Any) -> List[Point]:
        pts: List[Point] = []
        for item in value or []:
            pt = coerce_point(item)
            if pt is None:
                raise ValueError("Dimension points must be 2D coordinates")
            pts.append(pt)
        return pts

    def to_element(self) -> DimensionElement:
        return DimensionElement(
            id=self.id,
            dimension_type=self.type,
            start_point=self.start_point,
            end_point=self.end_point,
            center_point=self.center_point,
            points=tuple(self.points),
            value=self.value,
            label=self.label,
        )


class GenericModel(_Positioned):
    type: str = "object"
    properties: Dict[str, Any] = Field(default_factory=dict)

    def to_element(self) -> GenericElement:
        return GenericElement(
            id=self.id,
            object_type=self.type,
            position=self.position,
            properties=dict(self.properties),
        )


_ELEMENT_MODELS = {
    "electrical": ElectricalModel,
    "plumbing": PlumbingModel,
    "hvac": HVACModel,
}


def parse_element(payload: Dict[str, Any]) -> DomainElement:
    """Turn one object-store mapping into its typed element variant."""
    if not isinstance(payload, dict):
        raise ValueError("Element payload must be a mapping")
    typ = payload.get("type")
    if typ in _ELEMENT_MODELS:
        return _ELEMENT_MODELS[typ].model_validate(payload).to_element()
    if typ == "dimension" or typ in {t.value for t in DimensionType}:
        data = dict(payload)
        if typ == "dimension":
            data["type"] = payload.get("dimensionType", DimensionType.LINEAR.value)
        return DimensionModel.model_validate(data).to_element()
    return GenericModel.model_validate(payload).to_element()


def parse_elements(items: List[Dict[str, Any]]) -> List[DomainElement]:
    return [parse_element(item) for item in items or []]


class SelectableModel(_Payload):
    id: str
    type: str = ""
    position: Optional[Point] = None
    properties: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("position", mode="before")
    @classmethod
    def _coerce_position(cls, value: Any) -> Optional[Point]:
        return coerce_point(value)

    def to_object(self) -> SelectableObject:
        # An unreadable position never lands inside a region.
        position = self.position or Point(math.nan, math.nan)
        return SelectableObject(
            id=self.id,
            position=position,
            width=_optional_float(self.properties.get("width")),
            height=_optional_float(self.properties.get("height")),
            kind=self.type,
            properties=dict(self.properties),
        )


def _optional_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def parse_object(payload: Dict[str, Any]) -> SelectableObject:
    return SelectableModel.model_validate(payload).to_object()


def parse_objects(items: List[Dict[str, Any]]) -> List[SelectableObject]:
    return [parse_object(item) for item in items or []]


class RoomModel(_Payload):
    id: str
    name: str = ""
    points: List[Point] = Field(default_factory=list)
    properties: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("points", mode="before")
    @classmethod
    def _coerce_point_list(cls, value: Any) -> List[Point]:
        pts: List[Point] = []
        for item in value or []:
            pt = coerce_point(item)
            if pt is None:
                raise ValueError("Room points must be 2D coordinates")
            pts.append(pt)
        return pts

    def to_room(self) -> Room:
        return Room(
            id=self.id,
            name=self.name,
            points=tuple(self.points),
            area=_optional_float(self.properties.get("area")),
        )


def parse_rooms(items: List[Dict[str, Any]]) -> List[Room]:
    return [RoomModel.model_validate(item).to_room() for item in items or []]
