"""Area and distance measurements in real-world units.

These sit on top of :mod:`floorplan_engine.geometry` (pixel space) and apply
the project scale from :class:`~floorplan_engine.config.EngineConfig`.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Sequence

from .config import EngineConfig
from .geometry import Polygon, as_point, euclid_len, polygon_area, polygon_perimeter, real_area, real_perimeter
from .units import Unit, format_decimal, format_measurement


@dataclass(frozen=True)
class PolygonMeasurement:
    pixel_area: float
    pixel_perimeter: float
    area: float
    perimeter: float
    unit: Unit
    area_text: str
    perimeter_text: str

    def asdict(self) -> Dict[str, object]:
        return {
            "pixel_area": self.pixel_area,
            "pixel_perimeter": self.pixel_perimeter,
            "area": self.area,
            "perimeter": self.perimeter,
            "unit": self.unit.value,
            "area_text": self.area_text,
            "perimeter_text": self.perimeter_text,
        }


@dataclass(frozen=True)
class DistanceMeasurement:
    pixels: float
    value: float
    unit: Unit
    text: str


def measure_polygon(points: Polygon, config: EngineConfig | None = None) -> PolygonMeasurement:
    """Measure a closed outline drawn in canvas pixels.

    Area is always shown as a decimal in squared units; the perimeter follows
    the configured display format.
    """
    config = config or EngineConfig()
    pts = [as_point(p) for p in points]
    px_area = polygon_area(pts)
    px_perimeter = polygon_perimeter(pts)
    area = real_area(px_area, config.pixels_per_unit)
    perimeter = real_perimeter(px_perimeter, config.pixels_per_unit)
    return PolygonMeasurement(
        pixel_area=px_area,
        pixel_perimeter=px_perimeter,
        area=area,
        perimeter=perimeter,
        unit=config.unit,
        area_text=format_decimal(area, f"{config.unit.value}²", config.precision),
        perimeter_text=format_measurement(perimeter, config.unit, config.display_format, config.precision),
    )


def measure_distance(a: Sequence[float], b: Sequence[float], config: EngineConfig | None = None) -> DistanceMeasurement:
    config = config or EngineConfig()
    pixels = euclid_len(a, b)
    value = real_perimeter(pixels, config.pixels_per_unit)
    text = format_measurement(value, config.unit, config.display_format, config.precision)
    return DistanceMeasurement(pixels=pixels, value=value, unit=config.unit, text=text)
