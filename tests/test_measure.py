import pytest

from floorplan_engine.config import EngineConfig
from floorplan_engine.measure import measure_distance, measure_polygon
from floorplan_engine.units import DisplayFormat, Unit


def _square(side):
    return [(0, 0), (side, 0), (side, side), (0, side)]


def test_measure_polygon_scales_to_units():
    result = measure_polygon(_square(20))
    assert result.pixel_area == pytest.approx(400.0)
    assert result.area == pytest.approx(1.0)
    assert result.perimeter == pytest.approx(4.0)
    assert result.area_text == "1.00 feet²"
    assert result.perimeter_text == "4.00 feet"


def test_measure_polygon_uses_configured_scale_and_unit():
    config = EngineConfig(pixels_per_unit=10, unit=Unit.METERS, precision=1)
    result = measure_polygon(_square(30), config)
    assert result.area == pytest.approx(9.0)
    assert result.area_text == "9.0 meters²"
    assert result.perimeter_text == "12.0 meters"


def test_perimeter_follows_display_format():
    config = EngineConfig(display_format=DisplayFormat.ARCHITECTURAL)
    result = measure_polygon(_square(22.5), config)
    assert result.perimeter_text == "4' 6\""


def test_degenerate_polygon():
    result = measure_polygon([(0, 0), (10, 0)])
    assert result.area == 0.0
    assert result.area_text == "0.00 feet²"


def test_measure_distance():
    result = measure_distance((0, 0), (30, 40))
    assert result.pixels == pytest.approx(50.0)
    assert result.value == pytest.approx(2.5)
    assert result.text == "2.50 feet"
