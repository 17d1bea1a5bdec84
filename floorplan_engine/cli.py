"""Command line interface for floor-plan measurements and checks."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Iterable, List

from .config import EngineConfig, load_config
from .geometry import Point
from .lasso import LassoState, complete_lasso, start_lasso, update_lasso
from .logging_config import setup_logging
from .measure import measure_polygon
from .plan_rules import run_plan_rules, summarize_issues
from .schemas import coerce_point, parse_elements, parse_objects, parse_rooms
from .units import DisplayFormat, Unit, UnitSystem, auto_convert, convert, format_measurement
from .validation import summarize_findings, validate_elements


def _read_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as handle:
        try:
            return json.load(handle)
        except json.JSONDecodeError as exc:
            raise ValueError(f"{path} is not valid JSON: {exc}") from exc


def _read_points(data: Any) -> List[Point]:
    if isinstance(data, dict):
        data = data.get("points", data.get("path"))
    if not isinstance(data, list):
        raise ValueError("Expected a list of point coordinates.")
    pts: List[Point] = []
    for item in data:
        pt = coerce_point(item)
        if pt is None:
            raise ValueError("Each point must be [x, y] or {\"x\": .., \"y\": ..}.")
        pts.append(pt)
    return pts


def _config_from_args(args: argparse.Namespace) -> EngineConfig:
    config = load_config(args.config) if args.config else EngineConfig()
    overrides: Dict[str, Any] = {}
    if getattr(args, "scale", None) is not None:
        overrides["pixels_per_unit"] = args.scale
    if getattr(args, "unit", None):
        overrides["unit"] = Unit(args.unit)
    if getattr(args, "format", None):
        overrides["display_format"] = DisplayFormat(args.format)
    if getattr(args, "precision", None) is not None:
        overrides["precision"] = args.precision
    return replace(config, **overrides) if overrides else config


def _cmd_measure(args: argparse.Namespace) -> None:
    config = _config_from_args(args)
    pts = _read_points(_read_json(Path(args.file)))
    result = measure_polygon(pts, config)
    if args.json:
        print(json.dumps(result.asdict(), indent=2, ensure_ascii=False))
        return
    print(f"Area:      {result.area_text}")
    print(f"Perimeter: {result.perimeter_text}")
    print(f"Pixels:    {result.pixel_area:.0f} px² / {result.pixel_perimeter:.0f} px")


def _cmd_convert(args: argparse.Namespace) -> None:
    if args.auto:
        value, unit = auto_convert(args.value, Unit(args.from_unit), UnitSystem(args.auto))
    else:
        if not args.to_unit:
            raise ValueError("A target unit is required unless --auto is given.")
        unit = Unit(args.to_unit)
        value = convert(args.value, Unit(args.from_unit), unit)
    print(format_measurement(value, unit, args.format, args.precision))


def _load_plan(path: Path) -> Dict[str, list]:
    data = _read_json(path)
    if isinstance(data, list):
        return {"elements": data, "objects": [], "rooms": []}
    if not isinstance(data, dict):
        raise ValueError("Plan file must contain a list of elements or an object.")
    return {
        "elements": data.get("elements", []),
        "objects": data.get("objects", []),
        "rooms": data.get("rooms", []),
    }


def _cmd_validate(args: argparse.Namespace) -> None:
    config = _config_from_args(args)
    plan = _load_plan(Path(args.file))
    findings = validate_elements(parse_elements(plan["elements"]))
    issues = run_plan_rules(parse_objects(plan["objects"]), parse_rooms(plan["rooms"]), config=config)
    summary = summarize_issues(issues)
    element_summary = summarize_findings(f for items in findings.values() for f in items)
    summary.total += element_summary.total
    summary.errors += element_summary.errors
    summary.warnings += element_summary.warnings

    if args.json:
        payload = {
            "elements": {eid: [f.asdict() for f in items] for eid, items in findings.items()},
            "issues": [issue.asdict() for issue in issues],
            "summary": summary.asdict(),
        }
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return

    for eid, items in findings.items():
        for finding in items:
            print(f"[{finding.status.value}] {eid}: {finding.message}")
    for issue in issues:
        print(f"[{issue.severity.value}] {issue.title}: {issue.description}")
    counts = ", ".join(f"{key}={value}" for key, value in summary.asdict().items())
    print(f"Summary: {counts}")


def _cmd_lasso(args: argparse.Namespace) -> None:
    config = _config_from_args(args)
    data = _read_json(Path(args.file))
    if not isinstance(data, dict):
        raise ValueError("Lasso file must contain 'path' and 'objects'.")
    path = _read_points(data.get("path"))
    if len(path) < 2:
        raise ValueError("A lasso path needs at least two points.")
    candidates = parse_objects(data.get("objects", []))

    state = start_lasso(LassoState(), path[0])
    for pt in path[1:-1]:
        state = update_lasso(state, pt)
    _state, result = complete_lasso(state, path[-1], candidates, config)
    for oid in result.selected_ids:
        print(oid)


def _add_config_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", help="Path to a JSON engine configuration")
    parser.add_argument("--scale", type=float, help="Pixels per unit")
    parser.add_argument("--unit", choices=[u.value for u in Unit], help="Drawing unit")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="floorplan-engine",
        description="Floor-plan measurement and validation tools",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    measure = sub.add_parser("measure", help="Area and perimeter of a polygon JSON file")
    measure.add_argument("file", help="JSON list of [x, y] points (canvas pixels)")
    _add_config_options(measure)
    measure.add_argument("--format", choices=[f.value for f in DisplayFormat], help="Perimeter display format")
    measure.add_argument("--precision", type=int, help="Decimal places / fraction bits")
    measure.add_argument("--json", action="store_true", help="Print machine-readable output")
    measure.set_defaults(func=_cmd_measure)

    conv = sub.add_parser("convert", help="Convert a value between units")
    conv.add_argument("value", type=float)
    conv.add_argument("from_unit", choices=[u.value for u in Unit])
    conv.add_argument("to_unit", nargs="?", choices=[u.value for u in Unit])
    conv.add_argument("--auto", choices=[s.value for s in UnitSystem], help="Pick a readable unit of this system")
    conv.add_argument("--format", default=DisplayFormat.DECIMAL.value, choices=[f.value for f in DisplayFormat])
    conv.add_argument("--precision", type=int, default=2)
    conv.set_defaults(func=_cmd_convert)

    validate = sub.add_parser("validate", help="Validate elements and run plan rules")
    validate.add_argument("file", help="JSON with 'elements', 'objects' and 'rooms' lists")
    _add_config_options(validate)
    validate.add_argument("--json", action="store_true", help="Print machine-readable output")
    validate.set_defaults(func=_cmd_validate)

    lasso = sub.add_parser("lasso", help="Select objects inside a lasso path")
    lasso.add_argument("file", help="JSON with a 'path' of points and candidate 'objects'")
    _add_config_options(lasso)
    lasso.set_defaults(func=_cmd_lasso)

    return parser


def main(argv: Iterable[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING, stream=sys.stderr)
    try:
        args.func(args)
    except (OSError, ValueError) as exc:
        parser.error(str(exc))
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
