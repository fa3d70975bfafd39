"""Tests for ShapeChangeTracker."""

import pytest

from quadrilateral_shape import NamedQuadrilateral, ShapeChangedEvent, ShapeChangeTracker, ShapeSnapshot

from conftest import RECTANGLE, UNIT_SQUARE

SQUARE_SNAP = ShapeSnapshot.from_positions(UNIT_SQUARE)
RECTANGLE_SNAP = ShapeSnapshot.from_positions(RECTANGLE)


def test_first_update_sets_baseline():
    tracker = ShapeChangeTracker()
    assert tracker.category is None
    assert tracker.update(NamedQuadrilateral.SQUARE, SQUARE_SNAP, tick=0) is None
    assert tracker.category == NamedQuadrilateral.SQUARE
    assert len(tracker) == 0


def test_emits_only_on_change():
    tracker = ShapeChangeTracker()
    tracker.update(NamedQuadrilateral.SQUARE, SQUARE_SNAP, tick=0)

    assert tracker.update(NamedQuadrilateral.SQUARE, SQUARE_SNAP, tick=1) is None

    event = tracker.update(NamedQuadrilateral.RECTANGLE, RECTANGLE_SNAP, tick=2)
    assert event.previous == NamedQuadrilateral.SQUARE
    assert event.current == NamedQuadrilateral.RECTANGLE
    assert event.tick == 2
    assert event.snapshot is RECTANGLE_SNAP
    assert len(tracker) == 1

    assert tracker.update(NamedQuadrilateral.RECTANGLE, RECTANGLE_SNAP, tick=3) is None


def test_snapshot_changed():
    tracker = ShapeChangeTracker()
    tracker.update(NamedQuadrilateral.SQUARE, SQUARE_SNAP, tick=0)
    assert not tracker.snapshot_changed(ShapeSnapshot.from_positions(UNIT_SQUARE))
    assert tracker.snapshot_changed(RECTANGLE_SNAP)


def test_reset_forgets_baseline():
    tracker = ShapeChangeTracker()
    tracker.update(NamedQuadrilateral.SQUARE, SQUARE_SNAP, tick=0)
    tracker.update(NamedQuadrilateral.RECTANGLE, RECTANGLE_SNAP, tick=1)

    tracker.reset()
    assert tracker.category is None
    assert len(tracker) == 0
    assert tracker.update(NamedQuadrilateral.SQUARE, SQUARE_SNAP, tick=2) is None


def test_event_requires_a_change():
    with pytest.raises(ValueError):
        ShapeChangedEvent(
            previous=NamedQuadrilateral.SQUARE,
            current=NamedQuadrilateral.SQUARE,
            tick=1,
            snapshot=SQUARE_SNAP,
        )


def test_event_to_dict():
    event = ShapeChangedEvent(
        previous=NamedQuadrilateral.SQUARE,
        current=NamedQuadrilateral.RECTANGLE,
        tick=4,
        snapshot=RECTANGLE_SNAP,
    )
    data = event.to_dict()
    assert data['previous'] == "square"
    assert data['current'] == "rectangle"
    assert data['snapshot']['area'] == pytest.approx(2.0)
