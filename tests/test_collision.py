"""Tests for the collision detector."""

from quadrilateral_shape.geometry.bounds import Bounds
from quadrilateral_shape.geometry.collision import (
    BlockedReason,
    CollisionBody,
    CollisionDetector,
)
from quadrilateral_shape.labels import SideLabel, VertexLabel

from conftest import UNIT_SQUARE, as_positions

A, B, C, D = VertexLabel.A, VertexLabel.B, VertexLabel.C, VertexLabel.D

SMALL_SQUARE = [(-0.25, -0.25), (0.25, -0.25), (0.25, 0.25), (-0.25, 0.25)]


def test_bodies_overlap_when_touching():
    first = CollisionBody.square((0.0, 0.0), 1.0)
    touching = CollisionBody.square((1.0, 0.0), 1.0)
    apart = CollisionBody.square((1.5, 0.0), 1.0)
    assert first.overlaps(touching)
    assert not first.overlaps(apart)


def test_point_bodies_compare_by_coincidence():
    assert CollisionBody.point((1.0, 2.0)).overlaps(CollisionBody.point((1.0, 2.0)))
    assert not CollisionBody.point((1.0, 2.0)).overlaps(CollisionBody.point((1.0, 2.5)))


def test_segment_against_square():
    body = CollisionBody.square((0.0, 0.0), 0.1)
    assert body.overlaps(CollisionBody.segment((-1.0, 0.0), (1.0, 0.0)))
    assert not body.overlaps(CollisionBody.segment((-1.0, 0.2), (1.0, 0.2)))


def test_clear_move(detector):
    result = detector.check(as_positions(SMALL_SQUARE), C, (0.5, 0.5))
    assert not result.blocked
    assert result.reason == BlockedReason.NONE


def test_move_outside_bounds(detector):
    result = detector.check(as_positions(SMALL_SQUARE), C, (6.0, 0.25))
    assert result.blocked
    assert result.reason == BlockedReason.BOUNDS_COLLISION


def test_crossing_move_is_shape_collision(detector):
    result = detector.check(as_positions(SMALL_SQUARE), C, (-0.5, 0.0))
    assert result.reason == BlockedReason.SHAPE_COLLISION
    assert result.sides == (SideLabel.BC, SideLabel.DA)


def test_vertex_too_close_to_neighbour(detector):
    result = detector.check(as_positions(SMALL_SQUARE), C, (-0.24, 0.25))
    assert result.reason == BlockedReason.SHAPE_COLLISION
    assert result.vertices == (C, D)
    assert result.sides == (SideLabel.CD,)


def test_vertex_too_close_to_side(detector):
    # C dropped just above side AB of the unit square
    result = detector.check(as_positions(UNIT_SQUARE), C, (0.5, 0.005))
    assert result.reason == BlockedReason.SHAPE_COLLISION


def test_thin_figure_is_degenerate():
    detector = CollisionDetector(Bounds(), min_side_length=1e-5, min_area=1e-4)
    positions = as_positions([(0.0, 0.0), (1.0, 0.0), (1.0, 5e-5), (0.0, 5e-5)])
    assert detector.check_figure(positions).reason == BlockedReason.DEGENERATE


def test_clockwise_figure_is_degenerate(detector):
    positions = as_positions([(0.0, 0.0), (0.0, 1.0), (1.0, 1.0), (1.0, 0.0)])
    assert detector.check_figure(positions).reason == BlockedReason.DEGENERATE


def test_check_figure_reports_vertices_outside(detector):
    positions = as_positions([(4.75, -0.25), (5.25, -0.25), (5.25, 0.25), (4.75, 0.25)])
    result = detector.check_figure(positions)
    assert result.reason == BlockedReason.BOUNDS_COLLISION
    assert result.vertices == (B, C)


def test_point_outside_bounds(detector):
    assert not detector.point_outside_bounds((5.0, 5.0))
    assert detector.point_outside_bounds((5.0, 5.01))
