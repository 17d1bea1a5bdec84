import math

import pytest

from floorplan_engine.geometry import Point, object_intersects_region
from floorplan_engine.schemas import coerce_point, parse_element, parse_elements, parse_object, parse_rooms
from floorplan_engine.validation import (
    DimensionElement,
    DimensionType,
    ElectricalElement,
    GenericElement,
    HVACElement,
    PlumbingElement,
    validate_element,
)


def test_coerce_point_shapes():
    assert coerce_point({"x": 1, "y": "2"}) == Point(1.0, 2.0)
    assert coerce_point([3, 4]) == Point(3.0, 4.0)
    assert coerce_point(None) is None
    assert coerce_point({"x": 1}) is None
    assert coerce_point(["a", 1]) is None
    assert coerce_point([True, 1]) is None


def test_parse_electrical_payload():
    element = parse_element({
        "id": 7,
        "type": "electrical",
        "elementType": "outlet",
        "position": {"x": 10, "y": 20},
        "properties": {"voltage": 110, "circuitId": "A1", "weatherproof": False},
    })
    assert isinstance(element, ElectricalElement)
    assert element.id == "7"
    assert element.properties.circuit_id == "A1"
    assert element.position == Point(10.0, 20.0)
    assert len(validate_element(element)) == 1


def test_parse_plumbing_payload():
    element = parse_element({
        "id": "p1",
        "type": "plumbing",
        "elementType": "faucet",
        "waterType": "hot",
        "position": [0, 0],
        "properties": {"pipeSize": '3/4"', "flow_rate": 3.0},
    })
    assert isinstance(element, PlumbingElement)
    assert element.water_type == "hot"
    assert element.properties.flow_rate == 3.0
    findings = validate_element(element)
    assert len(findings) == 1


def test_parse_hvac_without_properties():
    element = parse_element({"id": "h1", "type": "hvac", "elementType": "duct", "position": [1, 1]})
    assert isinstance(element, HVACElement)
    assert element.properties.duct_size is None


def test_parse_dimension_with_dimension_type():
    element = parse_element({
        "id": "d1",
        "type": "dimension",
        "dimensionType": "angular",
        "startPoint": {"x": 0, "y": 0},
        "endPoint": {"x": 5, "y": 0},
    })
    assert isinstance(element, DimensionElement)
    assert element.dimension_type is DimensionType.ANGULAR
    assert [f.message for f in validate_element(element)] == ["Angular dimensions require a center point"]


def test_parse_dimension_by_measurement_type():
    element = parse_element({"id": "d2", "type": "linear", "startPoint": [0, 0], "endPoint": [3, 4]})
    assert element.dimension_type is DimensionType.LINEAR
    assert validate_element(element) == []


def test_other_types_become_generic():
    element = parse_element({"id": "w1", "type": "wall", "position": [0, 0], "properties": {"thickness": 6}})
    assert isinstance(element, GenericElement)
    assert element.object_type == "wall"
    assert element.properties == {"thickness": 6}


def test_unreadable_position_is_reported_not_raised():
    element = parse_element({"id": "w2", "type": "wall", "position": {"x": "left", "y": 0}})
    assert element.position is None
    assert [f.message for f in validate_element(element)] == ["Invalid position coordinates"]


def test_missing_voltage_and_pipe_size_become_findings():
    outlet = parse_element({"id": "e2", "type": "electrical", "elementType": "outlet", "position": [0, 0], "properties": {}})
    sink = parse_element({"id": "p2", "type": "plumbing", "elementType": "sink", "position": [0, 0]})
    assert outlet.properties.voltage is None
    assert sink.properties.pipe_size is None
    assert [f.message for f in validate_element(outlet)] == ["Invalid voltage (missing). Must be 120V or 240V"]
    assert [f.message for f in validate_element(sink)] == ["Invalid pipe size: missing"]


def test_non_mapping_payload_raises():
    with pytest.raises(ValueError):
        parse_element(["not", "a", "mapping"])


def test_parse_elements_keeps_order():
    items = [
        {"id": "a", "type": "wall", "position": [0, 0]},
        {"id": "b", "type": "text", "position": [1, 1]},
    ]
    assert [e.id for e in parse_elements(items)] == ["a", "b"]
    assert parse_elements(None) == []


def test_parse_object_reads_size_from_properties():
    obj = parse_object({"id": "c1", "type": "chair", "position": {"x": 5, "y": 5}, "properties": {"width": "30"}})
    assert obj.kind == "chair"
    assert obj.width == 30.0
    assert obj.height is None
    assert obj.bounds() == (5.0, 5.0, 35.0, 55.0)


def test_object_without_position_is_never_selected():
    obj = parse_object({"id": "c2", "type": "chair"})
    assert math.isnan(obj.position.x)
    region = [(-1000, -1000), (1000, -1000), (1000, 1000), (-1000, 1000)]
    assert not object_intersects_region(obj, region)


def test_parse_rooms():
    rooms = parse_rooms([
        {"id": "r1", "name": "Bedroom", "points": [[0, 0], [10, 0], [10, 10]], "properties": {"area": 11520}},
    ])
    assert rooms[0].name == "Bedroom"
    assert rooms[0].points == (Point(0, 0), Point(10, 0), Point(10, 10))
    assert rooms[0].area == 11520.0


def test_room_with_bad_point_raises():
    with pytest.raises(ValueError):
        parse_rooms([{"id": "r2", "points": [[0, 0], "x"]}])
