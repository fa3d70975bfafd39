"""Tests for bounds and vertex drag areas."""

import pytest

from quadrilateral_shape.geometry.bounds import (
    BOTTOM,
    RIGHT,
    TOP,
    BoundaryHit,
    Bounds,
    vertex_drag_area,
)
from quadrilateral_shape.geometry.primitives import polygon_contains_point


def test_bounds_validation():
    with pytest.raises(ValueError):
        Bounds(min_x=1.0, max_x=1.0)
    with pytest.raises(ValueError):
        Bounds(min_y=2.0, max_y=-2.0)


def test_contains_is_closed(bounds):
    assert bounds.contains((5.0, -5.0))
    assert bounds.contains((0.0, 0.0))
    assert not bounds.contains((5.0001, 0.0))


def test_corners_counter_clockwise(bounds):
    assert bounds.corners() == ((-5.0, -5.0), (5.0, -5.0), (5.0, 5.0), (-5.0, 5.0))


def test_exit_point_axis_aligned(bounds):
    hit = bounds.exit_point((0.0, 0.0), (1.0, 0.0))
    assert hit.point == (5.0, 0.0)
    assert hit.edge == RIGHT
    assert hit.t == pytest.approx(0.5)


def test_exit_point_oblique(bounds):
    hit = bounds.exit_point((0.0, 1.0), (-1.0, 1.0))
    assert hit.edge == TOP
    assert hit.point == pytest.approx((-4.0, 5.0))
    assert hit.t == pytest.approx(0.9)


def test_exit_point_degenerate_inputs(bounds):
    assert bounds.exit_point((0.0, 0.0), (0.0, 0.0)) is None
    assert bounds.exit_point((6.0, 0.0), (1.0, 0.0)) is None


def test_walk_passes_corners_counter_clockwise(bounds):
    start = BoundaryHit(point=(0.0, -5.0), edge=BOTTOM, t=0.5)
    end = BoundaryHit(point=(0.0, 5.0), edge=TOP, t=0.5)
    assert bounds.walk(start, end) == [(0.0, -5.0), (5.0, -5.0), (5.0, 5.0), (0.0, 5.0)]


def test_walk_along_same_edge(bounds):
    start = BoundaryHit(point=(-1.0, -5.0), edge=BOTTOM, t=0.4)
    end = BoundaryHit(point=(1.0, -5.0), edge=BOTTOM, t=0.6)
    assert bounds.walk(start, end) == [(-1.0, -5.0), (1.0, -5.0)]


def test_walk_same_edge_backwards_goes_all_the_way_round(bounds):
    start = BoundaryHit(point=(1.0, -5.0), edge=BOTTOM, t=0.6)
    end = BoundaryHit(point=(-1.0, -5.0), edge=BOTTOM, t=0.4)
    assert bounds.walk(start, end) == [
        (1.0, -5.0), (5.0, -5.0), (5.0, 5.0), (-5.0, 5.0), (-5.0, -5.0), (-1.0, -5.0)
    ]


def test_drag_area_convex_opposite(bounds):
    # Vertex A of the unit square
    area = vertex_drag_area(
        bounds,
        vertex=(0.0, 0.0),
        following=(1.0, 0.0),
        opposite=(1.0, 1.0),
        previous=(0.0, 1.0),
        opposite_is_reflex=False,
    )
    assert area[0] == (1.0, 1.0)
    assert area[1] == (0.0, 1.0)
    assert area[-1] == (1.0, 0.0)
    assert polygon_contains_point(area, (0.0, 0.0))
    assert polygon_contains_point(area, (-3.0, -3.0))
    assert not polygon_contains_point(area, (3.0, 3.0))


def test_drag_area_reflex_opposite(bounds):
    # Vertex A of the dart (0,0),(2,-1),(1,0),(2,1); C is reflex
    area = vertex_drag_area(
        bounds,
        vertex=(0.0, 0.0),
        following=(2.0, -1.0),
        opposite=(1.0, 0.0),
        previous=(2.0, 1.0),
        opposite_is_reflex=True,
    )
    assert area[0] == (1.0, 0.0)
    assert len(area) == 5
    assert polygon_contains_point(area, (0.0, 0.0))
    assert not polygon_contains_point(area, (2.0, 0.0))


def test_drag_area_empty_when_out_of_bounds(bounds):
    area = vertex_drag_area(
        bounds,
        vertex=(6.0, 0.0),
        following=(1.0, 0.0),
        opposite=(1.0, 1.0),
        previous=(0.0, 1.0),
        opposite_is_reflex=False,
    )
    assert area == []
