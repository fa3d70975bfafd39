"""Tests for QuadrilateralEngine."""

import math

import pytest

from quadrilateral_shape import (
    BlockedReason,
    EngineConfig,
    InvalidShapeError,
    NamedQuadrilateral,
    QuadrilateralEngine,
    RotationSample,
    ToleranceConfig,
    VertexDeltaSample,
    VertexLabel,
    VertexMoveRequest,
)

A, B, C, D = VertexLabel.A, VertexLabel.B, VertexLabel.C, VertexLabel.D


def stretch_to_rectangle(engine):
    engine.submit(VertexMoveRequest(B, (0.75, -0.25)))
    engine.submit(VertexMoveRequest(C, (0.75, 0.25)))


def test_starts_as_square(engine):
    assert engine.current_category() == NamedQuadrilateral.SQUARE
    assert engine.tracker.category == NamedQuadrilateral.SQUARE
    assert engine.tick_count == 0


def test_invalid_initial_positions_raise():
    config = EngineConfig(initial_positions=((0, 0), (0, 1), (1, 1), (1, 0)))
    with pytest.raises(InvalidShapeError):
        QuadrilateralEngine(config)


def test_idle_tick_emits_nothing(engine):
    events = []
    engine.add_listener(events.append)

    result = engine.tick()

    assert result.tick == 1
    assert result.request_count == 0
    assert result.category == NamedQuadrilateral.SQUARE
    assert not result.category_changed
    assert events == []


def test_one_event_per_tick(engine):
    events = []
    engine.add_listener(events.append)
    stretch_to_rectangle(engine)

    result = engine.tick()

    assert len(result.moves) == 2
    assert result.category == NamedQuadrilateral.RECTANGLE
    assert len(events) == 1
    assert events[0].previous == NamedQuadrilateral.SQUARE
    assert events[0].current == NamedQuadrilateral.RECTANGLE
    assert events[0].tick == 1

    engine.tick()
    assert len(events) == 1


def test_requests_apply_in_fifo_order(engine):
    engine.submit(VertexMoveRequest(C, (0.5, 0.5)))
    engine.submit(VertexMoveRequest(C, (0.3, 0.3)))
    result = engine.tick()

    assert [move.accepted_position for move in result.moves] == [(0.5, 0.5), (0.3, 0.3)]
    assert engine.positions()[C] == (0.3, 0.3)


def test_requests_queued_during_tick_wait_for_next_tick(engine):
    def push_back(event):
        engine.submit(VertexMoveRequest(B, (0.25, -0.25)))

    engine.add_listener(push_back)
    stretch_to_rectangle(engine)
    engine.tick()

    assert engine.pending_requests() == 1
    assert engine.positions()[B] == (0.75, -0.25)

    result = engine.tick()
    assert len(result.moves) == 1
    assert engine.positions()[B] == (0.25, -0.25)


def test_propose_vertex_move_accepts_string_label(engine):
    result = engine.propose_vertex_move("c", (0.4, 0.4))
    assert result.vertex == C
    assert engine.positions()[C] == (0.4, 0.4)


def test_submit_rejects_unknown_requests(engine):
    with pytest.raises(TypeError):
        engine.submit(object())


def test_key_press_moves_one_step(engine):
    engine.key_press("A", "left")
    engine.tick()
    x, y = engine.positions()[A]
    assert x == pytest.approx(-0.30)
    assert y == pytest.approx(-0.25)


def test_key_press_rejects_unknown_direction(engine):
    with pytest.raises(ValueError):
        engine.key_press(A, "sideways")


def test_device_deltas_snap_to_grid():
    engine = QuadrilateralEngine(EngineConfig(tolerances=ToleranceConfig(device_grid_spacing=0.05)))
    engine.submit(VertexDeltaSample(C, (0.04, 0.0), from_device=True))
    engine.submit(VertexDeltaSample(A, (-0.04, 0.0)))
    engine.tick()

    positions = engine.positions()
    assert positions[C] == pytest.approx((0.30, 0.25))
    assert positions[A] == pytest.approx((-0.29, -0.25))
    assert engine.shape.vertex(C).movement.is_active
    assert not engine.shape.vertex(A).movement.is_active


def test_huge_device_delta_is_clipped_at_the_bounds():
    engine = QuadrilateralEngine(EngineConfig(tolerances=ToleranceConfig(device_grid_spacing=0.05)))
    engine.submit(VertexDeltaSample(C, (0.0, 1e308), from_device=True))

    result = engine.tick()

    assert result.moves[0].blocked_reason == BlockedReason.BOUNDS_COLLISION
    assert engine.positions()[C] == pytest.approx((0.25, 5.0), abs=0.01)
    assert engine.shape.vertex(C).movement.blocked_by_bounds


def test_device_holds_the_vertex_it_last_moved(engine):
    engine.submit(VertexMoveRequest(B, (0.3, -0.25), from_device=True))
    engine.tick()
    assert engine.shape.vertex(B).movement.is_active

    engine.submit(VertexDeltaSample(D, (0.0, 0.05), from_device=True))
    engine.tick()
    assert engine.shape.vertex(D).movement.is_active
    assert not engine.shape.vertex(B).movement.is_active

    engine.submit(VertexMoveRequest(A, (-0.3, -0.25)))
    engine.tick()
    assert not engine.shape.vertex(A).movement.is_active


def test_first_rotation_sample_sets_the_baseline(engine):
    before = engine.positions()
    engine.submit(RotationSample(1.0))
    result = engine.tick()

    assert result.rotations[0].applied == 0.0
    assert engine.positions() == before

    engine.submit(RotationSample(1.0 + math.pi / 2))
    result = engine.tick()

    assert result.rotations[0].applied == pytest.approx(math.pi / 2)
    assert engine.positions()[A] == pytest.approx((0.25, -0.25))
    assert result.category == NamedQuadrilateral.SQUARE


def test_reset_restores_initial_figure(engine):
    events = []
    engine.add_listener(events.append)
    stretch_to_rectangle(engine)
    engine.tick()
    engine.submit(VertexMoveRequest(D, (-0.5, 0.5)))

    engine.reset()

    assert engine.pending_requests() == 0
    assert engine.positions()[B] == (0.25, -0.25)

    result = engine.tick()
    assert result.event.previous == NamedQuadrilateral.RECTANGLE
    assert result.event.current == NamedQuadrilateral.SQUARE
    assert len(events) == 2


def test_remove_listener(engine):
    events = []
    engine.add_listener(events.append)
    engine.remove_listener(events.append)
    stretch_to_rectangle(engine)
    engine.tick()
    assert events == []

    with pytest.raises(ValueError):
        engine.remove_listener(events.append)


def test_device_connection_switches_epsilons(engine):
    assert not engine.device_connection
    engine.set_device_connected(True)
    assert engine.device_connection
    assert engine.classifier.angle_epsilon == engine.config.tolerances.device_angle_epsilon


def test_parallel_sides_of_square(engine):
    assert len(engine.parallel_sides()) == 2


def test_saved_lengths_track_moves(engine):
    engine.save_side_lengths()
    assert engine.lengths_maintained()

    engine.propose_vertex_move(C, (0.4, 0.4))
    assert not engine.lengths_maintained()

    engine.clear_saved_lengths()
    assert not engine.lengths_maintained()


def test_set_vertex_active(engine):
    engine.set_vertex_active("B", True)
    assert engine.shape.vertex(B).movement.is_active


def test_drag_area_query(engine):
    area = engine.drag_area("C")
    assert len(area) >= 3
    assert area == engine.shape.vertex(C).drag_area
    assert area is not engine.shape.vertex(C).drag_area
