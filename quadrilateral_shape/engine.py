"""
Quadrilateral Engine Module
===========================

Bounded Context: Orchestration of the constraint-and-classification core.

Design:
- Single writer: every position change goes through the movement solver
- Producers on any thread only submit() requests; tick() drains the queue
  in FIFO order, resolving each request before the next
- After draining, the snapshot is classified and a ShapeChangedEvent is
  sent to listeners at most once per tick, only when the category changed
- Queries (current_category, current_snapshot) always re-derive from the
  current positions

Dependencies:
- quadrilateral_shape.geometry (collision detector)
- quadrilateral_shape.model (shape aggregate, snapshots)
- quadrilateral_shape.analytics (classifier, change tracker)
- quadrilateral_shape.solver (movement constraint solver)
"""

import logging
import queue
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple, Union

from quadrilateral_shape.analytics.classifier import ShapeClassifier
from quadrilateral_shape.analytics.tracker import ShapeChangedEvent, ShapeChangeTracker
from quadrilateral_shape.config import EngineConfig
from quadrilateral_shape.geometry.collision import CollisionDetector
from quadrilateral_shape.geometry.primitives import Point, add
from quadrilateral_shape.labels import NamedQuadrilateral, SideLabel, VertexLabel
from quadrilateral_shape.model.shape import Shape
from quadrilateral_shape.model.snapshot import ShapeSnapshot
from quadrilateral_shape.requests import (
    MovementRequest,
    RotationSample,
    VertexDeltaSample,
    VertexMoveRequest,
)
from quadrilateral_shape.solver import MoveResult, MovementSolver, RotationResult

logger = logging.getLogger(__name__)

ShapeListener = Callable[[ShapeChangedEvent], None]


@dataclass(frozen=True)
class TickResult:
    """
    Everything that happened during one tick.

    Attributes:
        tick: Tick number (starts at 1)
        moves: Vertex move results in the order requests were drained
        rotations: Rotation results in drain order
        category: Category after the tick
        snapshot: Snapshot after the tick
        event: Change event sent to listeners, if any
    """

    tick: int
    moves: Tuple[MoveResult, ...]
    rotations: Tuple[RotationResult, ...]
    category: NamedQuadrilateral
    snapshot: ShapeSnapshot
    event: Optional[ShapeChangedEvent] = None

    @property
    def category_changed(self) -> bool:
        return self.event is not None

    @property
    def request_count(self) -> int:
        return len(self.moves) + len(self.rotations)


class QuadrilateralEngine:
    """
    Owns the figure and everything that reads or writes it.

    Threading Model:
    - submit() is safe from any thread (queue.Queue)
    - tick(), propose_vertex_move() and the other mutators must be called
      from one thread only (the tick thread)

    Usage:
        engine = QuadrilateralEngine(EngineConfig())
        engine.add_listener(lambda event: print(event.previous, "->", event.current))

        engine.submit(VertexMoveRequest(VertexLabel.C, (0.5, 0.25)))
        result = engine.tick()
        result.category
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        """
        Initialize engine and validate the initial figure.

        Args:
            config: Engine configuration (defaults to EngineConfig())

        Raises:
            InvalidShapeError: If the configured initial positions are invalid
        """
        self.config = config or EngineConfig()
        tolerances = self.config.tolerances

        self.detector = CollisionDetector(
            self.config.bounds,
            min_side_length=tolerances.min_side_length,
            min_area=tolerances.min_area,
        )
        self.solver = MovementSolver(self.detector, step_size=tolerances.step_size)
        self.shape = self._build_shape()

        self._device_connection = self.config.device_connection
        self.classifier = ShapeClassifier.from_tolerances(tolerances, self._device_connection)
        self.tracker = ShapeChangeTracker()

        self._requests: "queue.Queue[MovementRequest]" = queue.Queue()
        self._listeners: List[ShapeListener] = []
        self._tick = 0
        self._last_rotation: Optional[float] = None

        # Baseline so the first tick only reports real changes
        self.tracker.update(self.current_category(), self.current_snapshot(), tick=0)

        logger.info(f"QuadrilateralEngine initialized ({self.shape!r}, category={self.tracker.category.value})")

    def _build_shape(self) -> Shape:
        return Shape(
            self.config.initial_positions,
            self.config.bounds,
            self.config.tolerances,
            detector=self.detector,
        )

    # ─────────────────────────────────────────────────────────────────────
    # Mutation entry points
    # ─────────────────────────────────────────────────────────────────────

    def propose_vertex_move(
        self,
        label: Union[VertexLabel, str],
        desired: Point
    ) -> MoveResult:
        """
        Move a vertex as far toward `desired` as the constraints allow.

        This is the only way a vertex position changes.

        Args:
            label: Vertex to move
            desired: Target position

        Returns:
            MoveResult with accepted_position and blocked_reason
        """
        if not isinstance(label, VertexLabel):
            label = VertexLabel.parse(label)
        return self.solver.propose_vertex_move(self.shape, label, desired)

    def submit(self, request: MovementRequest) -> None:
        """
        Queue a request for the next tick (thread-safe).

        Raises:
            TypeError: If request is not a known request type
        """
        if not isinstance(request, (VertexMoveRequest, VertexDeltaSample, RotationSample)):
            raise TypeError(f"Unsupported movement request: {type(request).__name__}")
        self._requests.put(request)

    def key_press(self, label: Union[VertexLabel, str], direction: str) -> None:
        """Queue one discrete keyboard step for a vertex."""
        if not isinstance(label, VertexLabel):
            label = VertexLabel.parse(label)
        self.submit(VertexDeltaSample.key_press(
            label, direction, self.config.tolerances.movement_per_key_press
        ))

    def tick(self) -> TickResult:
        """
        Drain queued requests, classify, and notify on a category change.

        Only requests queued before the tick started are drained; later
        ones wait for the next tick.

        Returns:
            TickResult for this tick
        """
        self._tick += 1

        moves: List[MoveResult] = []
        rotations: List[RotationResult] = []
        for _ in range(self._requests.qsize()):
            try:
                request = self._requests.get_nowait()
            except queue.Empty:
                break

            result = self._apply(request)
            if isinstance(result, RotationResult):
                rotations.append(result)
            else:
                moves.append(result)

        snapshot = self.current_snapshot()
        category = self.classifier.classify(snapshot)
        event = self.tracker.update(category, snapshot, self._tick)

        if event is not None:
            logger.info(
                f"Shape changed: {event.previous.value} -> {event.current.value} (tick={self._tick})"
            )
            for listener in list(self._listeners):
                listener(event)

        return TickResult(
            tick=self._tick,
            moves=tuple(moves),
            rotations=tuple(rotations),
            category=category,
            snapshot=snapshot,
            event=event,
        )

    def _apply(self, request: MovementRequest) -> Union[MoveResult, RotationResult]:
        if isinstance(request, VertexMoveRequest):
            if request.from_device:
                self._hold(request.vertex)
            return self.propose_vertex_move(request.vertex, request.position)

        if isinstance(request, VertexDeltaSample):
            desired = add(self.shape.vertex(request.vertex).position, request.delta)
            if request.from_device:
                self._hold(request.vertex)
                desired = self._snap_to_grid(desired)
            return self.propose_vertex_move(request.vertex, desired)

        return self._apply_rotation(request)

    def _hold(self, label: VertexLabel) -> None:
        # A device holds one vertex at a time
        for vertex in self.shape.vertices:
            vertex.movement.is_active = vertex.label == label

    def _apply_rotation(self, sample: RotationSample) -> RotationResult:
        # The first sample only establishes the reference angle
        if self._last_rotation is None:
            self._last_rotation = sample.rotation
            return RotationResult(requested=0.0, applied=0.0)

        result = self.solver.propose_rotation(self.shape, sample.rotation - self._last_rotation)
        if not result.blocked:
            self._last_rotation = sample.rotation
        return result

    def _snap_to_grid(self, point: Point) -> Point:
        spacing = self.config.tolerances.device_grid_spacing
        if spacing <= 0:
            return point

        # Clamp to one grid cell past the bounds; the target stays outside
        # if it was outside
        bounds = self.config.bounds
        x = min(max(point[0], bounds.min_x - spacing), bounds.max_x + spacing)
        y = min(max(point[1], bounds.min_y - spacing), bounds.max_y + spacing)
        return (round(x / spacing) * spacing, round(y / spacing) * spacing)

    def set_vertex_active(self, label: Union[VertexLabel, str], active: bool) -> None:
        """Mark a vertex as being held by a user or device."""
        if not isinstance(label, VertexLabel):
            label = VertexLabel.parse(label)
        self.shape.vertex(label).movement.is_active = active

    def reset(self) -> None:
        """
        Restore the initial figure and discard pending requests.

        The tracker keeps its baseline, so the next tick reports the
        category change back to the initial shape if there is one.
        """
        discarded = 0
        while True:
            try:
                self._requests.get_nowait()
                discarded += 1
            except queue.Empty:
                break

        self.shape = self._build_shape()
        self._last_rotation = None
        logger.info(f"Engine reset ({discarded} pending requests discarded)")

    # ─────────────────────────────────────────────────────────────────────
    # Queries
    # ─────────────────────────────────────────────────────────────────────

    def current_snapshot(self) -> ShapeSnapshot:
        return self.shape.snapshot()

    def current_category(self) -> NamedQuadrilateral:
        return self.classifier.classify(self.shape.snapshot())

    def positions(self) -> Dict[VertexLabel, Point]:
        return self.shape.positions()

    def drag_area(self, label: Union[VertexLabel, str]) -> List[Point]:
        """Region a vertex can be dragged in, for pointer and device feedback."""
        if not isinstance(label, VertexLabel):
            label = VertexLabel.parse(label)
        return list(self.shape.vertex(label).drag_area)

    def parallel_sides(self) -> List[Tuple[SideLabel, SideLabel]]:
        """Pairs of opposite sides that are currently parallel."""
        pairs = self.classifier.parallel_side_pairs(self.shape.snapshot())
        return [(pair.first, pair.second) for pair in pairs]

    @property
    def tick_count(self) -> int:
        return self._tick

    def pending_requests(self) -> int:
        return self._requests.qsize()

    # ─────────────────────────────────────────────────────────────────────
    # Listeners and settings
    # ─────────────────────────────────────────────────────────────────────

    def add_listener(self, listener: ShapeListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: ShapeListener) -> None:
        """
        Raises:
            ValueError: If listener was never added
        """
        self._listeners.remove(listener)

    @property
    def device_connection(self) -> bool:
        return self._device_connection

    def set_device_connected(self, connected: bool) -> None:
        """Switch between pointer and device comparison tolerances."""
        if connected == self._device_connection:
            return
        self._device_connection = connected
        self.classifier = ShapeClassifier.from_tolerances(self.config.tolerances, connected)
        logger.info(
            f"Device connection {'enabled' if connected else 'disabled'} "
            f"(angle_epsilon={self.classifier.angle_epsilon}, "
            f"length_epsilon={self.classifier.length_epsilon})"
        )

    def save_side_lengths(self) -> Dict[SideLabel, float]:
        return self.shape.save_side_lengths()

    def clear_saved_lengths(self) -> None:
        self.shape.clear_saved_lengths()

    def lengths_maintained(self) -> bool:
        """True if every side still matches the lengths saved earlier."""
        return self.shape.lengths_equal_to_saved(self.classifier.length_epsilon)

    def __repr__(self) -> str:
        """Human-readable representation."""
        return (
            f"QuadrilateralEngine(tick={self._tick}, category={self.tracker.category.value}, "
            f"pending={self.pending_requests()})"
        )
