"""Engine configuration.

All tunables travel as an explicit :class:`EngineConfig` value; nothing in the
engine reads module-level settings. ``load_config`` reads the same fields from
a JSON file so a host can keep project preferences next to its documents.
"""
from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict

from .units import DisplayFormat, Unit, UnitSystem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineConfig:
    pixels_per_unit: float = 20.0
    unit: Unit = Unit.FEET
    unit_system: UnitSystem = UnitSystem.IMPERIAL
    display_format: DisplayFormat = DisplayFormat.DECIMAL
    precision: int = 2
    min_zoom: float = 0.1
    max_zoom: float = 10.0
    wheel_zoom_step: float = 1.2    # zoom factor per wheel notch / shortcut press
    lasso_close_threshold: float = 20.0  # pixels
    room_close_threshold: float = 20.0   # pixels, closes a room outline on its start point
    default_object_size: float = 50.0    # pixels, used when width/height is absent
    snap_tolerance: float = 10.0    # pixels
    grid_size: float = 20.0         # pixels

    def __post_init__(self) -> None:
        if self.pixels_per_unit <= 0:
            raise ValueError("pixels_per_unit must be positive")
        if self.min_zoom <= 0 or self.max_zoom < self.min_zoom:
            raise ValueError("zoom bounds must satisfy 0 < min_zoom <= max_zoom")
        if self.precision < 0:
            raise ValueError("precision cannot be negative")

    def clamp_zoom(self, zoom: float) -> float:
        return max(self.min_zoom, min(self.max_zoom, zoom))

    def asdict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["unit"] = self.unit.value
        d["unit_system"] = self.unit_system.value
        d["display_format"] = self.display_format.value
        return d


_ENUM_FIELDS = {
    "unit": Unit,
    "unit_system": UnitSystem,
    "display_format": DisplayFormat,
}


def config_from_dict(data: Dict[str, Any]) -> EngineConfig:
    """Build a config from a mapping, ignoring unknown keys."""
    if not isinstance(data, dict):
        raise ValueError("Configuration must be a JSON object.")
    known = {f.name: f for f in fields(EngineConfig)}
    kwargs: Dict[str, Any] = {}
    for key, value in data.items():
        if key not in known:
            logger.debug("Ignoring unknown config key %r", key)
            continue
        if key in _ENUM_FIELDS:
            try:
                kwargs[key] = _ENUM_FIELDS[key](value)
            except ValueError as exc:
                raise ValueError(f"Invalid value {value!r} for '{key}'") from exc
        elif key == "precision":
            kwargs[key] = int(value)
        else:
            try:
                kwargs[key] = float(value)
            except (TypeError, ValueError) as exc:
                raise ValueError(f"'{key}' must be numeric, got {value!r}") from exc
    return EngineConfig(**kwargs)


def load_config(path: str | Path) -> EngineConfig:
    config_path = Path(path)
    with config_path.open("r", encoding="utf-8") as handle:
        try:
            data = json.load(handle)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Config file {config_path} is not valid JSON: {exc}") from exc
    config = config_from_dict(data)
    logger.info("Loaded engine config from %s", config_path)
    return config
