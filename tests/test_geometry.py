import math

import pytest

from floorplan_engine.geometry import (
    Point,
    SelectableObject,
    object_intersects_region,
    point_in_polygon,
    polygon_area,
    polygon_centroid,
    polygon_perimeter,
    polyline_length,
    real_area,
    real_perimeter,
    rects_overlap,
    seg_seg_intersection,
)

SQUARE = [Point(0, 0), Point(10, 0), Point(10, 10), Point(0, 10)]
PENTAGON = [Point(0, 0), Point(4, 0), Point(5, 3), Point(2, 5), Point(-1, 3)]


def test_unit_right_triangle_area():
    assert polygon_area([(0, 0), (1, 0), (0, 1)]) == pytest.approx(0.5)


def test_rectangle_area_and_perimeter():
    rect = [(0, 0), (3, 0), (3, 4), (0, 4)]
    assert polygon_area(rect) == pytest.approx(12.0)
    assert polygon_perimeter(rect) == pytest.approx(14.0)


def test_regular_hexagon_area():
    r = 2.0
    hexagon = [(r * math.cos(k * math.pi / 3), r * math.sin(k * math.pi / 3)) for k in range(6)]
    assert polygon_area(hexagon) == pytest.approx(3 * math.sqrt(3) / 2 * r * r)


@pytest.mark.parametrize("shift", range(len(PENTAGON)))
def test_rotation_does_not_change_measurements(shift):
    rotated = PENTAGON[shift:] + PENTAGON[:shift]
    assert polygon_area(rotated) == pytest.approx(polygon_area(PENTAGON))
    assert polygon_perimeter(rotated) == pytest.approx(polygon_perimeter(PENTAGON))


def test_reversal_does_not_change_measurements():
    reversed_ring = list(reversed(PENTAGON))
    assert polygon_area(reversed_ring) == pytest.approx(polygon_area(PENTAGON))
    assert polygon_perimeter(reversed_ring) == pytest.approx(polygon_perimeter(PENTAGON))


def test_degenerate_rings():
    assert polygon_area([]) == 0.0
    assert polygon_area([(0, 0), (5, 5)]) == 0.0
    assert polygon_perimeter([(1, 1)]) == 0.0
    # A two-point ring walks out and back.
    assert polygon_perimeter([(0, 0), (3, 4)]) == pytest.approx(10.0)


def test_self_intersecting_bowtie_lobes_cancel():
    bowtie = [(0, 0), (10, 10), (10, 0), (0, 10)]
    assert polygon_area(bowtie) == pytest.approx(0.0)


def test_polyline_length_is_open():
    assert polyline_length([(0, 0), (3, 0), (3, 4)]) == pytest.approx(7.0)


def test_point_in_square():
    assert point_in_polygon((5, 5), SQUARE) is True
    assert point_in_polygon((15, 5), SQUARE) is False


def test_point_on_edge_is_deterministic():
    first = point_in_polygon((10, 5), SQUARE)
    assert all(point_in_polygon((10, 5), SQUARE) == first for _ in range(10))


def test_point_in_polygon_needs_three_points():
    assert point_in_polygon((0, 0), [(0, 0), (1, 1)]) is False


def test_object_default_box():
    obj = SelectableObject("a", Point(0, 0))
    assert obj.bounds() == (0.0, 0.0, 50.0, 50.0)
    assert obj.center() == Point(25.0, 25.0)


def test_zero_width_falls_back_to_default():
    obj = SelectableObject("a", Point(0, 0), width=0, height=10)
    assert obj.size() == (50.0, 10.0)


def test_object_corner_inside_region():
    triangle = [(-5, -5), (20, -5), (-5, 20)]
    near = SelectableObject("near", Point(0, 0), width=30, height=30)
    far = SelectableObject("far", Point(500, 500), width=10, height=10)
    assert object_intersects_region(near, triangle)
    assert not object_intersects_region(far, triangle)


def test_object_straddling_without_corner_or_centre_is_not_member():
    strip = [(4, -100), (6, -100), (6, 100), (4, 100)]
    bar = SelectableObject("bar", Point(0, 0), width=20, height=2)
    assert not object_intersects_region(bar, strip)


def test_rects_overlap_touching_edges():
    assert rects_overlap((0, 0, 10, 10), (10, 0, 20, 10))
    assert not rects_overlap((0, 0, 10, 10), (11, 0, 20, 10))


def test_segment_intersection():
    hit = seg_seg_intersection(Point(0, 0), Point(10, 10), Point(0, 10), Point(10, 0))
    assert hit == pytest.approx((5.0, 5.0))
    assert seg_seg_intersection(Point(0, 0), Point(10, 0), Point(0, 1), Point(10, 1)) is None
    assert seg_seg_intersection(Point(0, 0), Point(1, 1), Point(5, 0), Point(6, -1)) is None


def test_centroid():
    assert polygon_centroid(SQUARE) == Point(5.0, 5.0)
    assert polygon_centroid([]) is None


def test_scaling_helpers():
    assert real_area(400.0, 20.0) == pytest.approx(1.0)
    assert real_perimeter(40.0, 20.0) == pytest.approx(2.0)
