"""Tests for the Shape aggregate and its entities."""

import math

import pytest

from quadrilateral_shape import InvalidShapeError, Shape
from quadrilateral_shape.labels import SideLabel, VertexLabel

from conftest import DART, UNIT_SQUARE, as_positions

A, B, C, D = VertexLabel.A, VertexLabel.B, VertexLabel.C, VertexLabel.D


def test_valid_square(unit_square):
    assert unit_square.is_valid()
    assert unit_square.invariant_violations() == []
    assert unit_square.area() == pytest.approx(1.0)
    assert unit_square.angle_sum() == pytest.approx(2 * math.pi)


def test_entities_read_through_the_shape(unit_square):
    assert unit_square.vertex(A).angle() == pytest.approx(math.pi / 2)
    assert unit_square.side(SideLabel.BC).endpoints() == ((1.0, 0.0), (1.0, 1.0))
    assert unit_square.side(SideLabel.BC).direction() == (0.0, 1.0)
    assert unit_square.side(SideLabel.DA).vertex_labels == (D, A)


def test_mapping_construction(bounds, tolerances):
    shape = Shape(as_positions(UNIT_SQUARE), bounds, tolerances)
    assert shape.positions()[C] == (1.0, 1.0)


@pytest.mark.parametrize("points", [
    [(0, 0), (0, 1), (1, 1), (1, 0)],            # clockwise
    [(0, 0), (1, 1), (1, 0), (0, 1)],            # self-intersecting
    [(0, 0), (1, 0), (1, 1), (0, 6)],            # out of bounds
    [(0, 0), (1, 0), (1, 0.01), (0, 0.01)],      # too thin
    [(0, 0), (1, 0), (1, 1)],                    # too few vertices
])
def test_invalid_figures_are_rejected(points, bounds, tolerances):
    with pytest.raises(InvalidShapeError):
        Shape(points, bounds, tolerances)


def test_missing_vertex_in_mapping(bounds, tolerances):
    positions = as_positions(UNIT_SQUARE)
    del positions[D]
    with pytest.raises(InvalidShapeError):
        Shape(positions, bounds, tolerances)


def test_invalid_shape_error_is_value_error():
    assert issubclass(InvalidShapeError, ValueError)


def test_drag_areas_built_on_construction(unit_square):
    for vertex in unit_square.vertices:
        assert len(vertex.drag_area) >= 3
        assert vertex.can_reach(vertex.position)
    assert not unit_square.vertex(A).can_reach((3.0, 3.0))


def test_drag_area_with_reflex_opposite(bounds, tolerances):
    dart = Shape(DART, bounds, tolerances)
    assert dart.vertex(A).drag_area[0] == (1.0, 0.0)
    assert dart.vertex(A).can_reach((-2.0, 0.0))
    assert not dart.vertex(A).can_reach((3.0, 0.0))


def test_commit_refreshes_drag_areas(unit_square):
    before = list(unit_square.vertex(A).drag_area)
    unit_square.commit_position(C, (1.5, 1.5))
    assert unit_square.vertex(C).position == (1.5, 1.5)
    assert unit_square.vertex(A).drag_area != before


def test_saved_lengths(unit_square):
    assert not unit_square.lengths_equal_to_saved(0.01)

    saved = unit_square.save_side_lengths()
    assert saved[SideLabel.AB] == pytest.approx(1.0)
    assert unit_square.lengths_equal_to_saved(0.01)

    unit_square.commit_position(C, (1.0, 1.5))
    assert not unit_square.lengths_equal_to_saved(0.01)

    unit_square.clear_saved_lengths()
    assert unit_square.side(SideLabel.AB).saved_length is None


def test_movement_state_flags(unit_square):
    movement = unit_square.vertex(B).movement
    assert not movement.blocked
    movement.blocked_by_bounds = True
    assert movement.blocked
    movement.clear_blocks()
    assert not movement.blocked
