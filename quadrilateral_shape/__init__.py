"""
Quadrilateral Shape Engine
==========================

Bounded Context: Constraining and naming a four-vertex figure in real time.

Design Philosophy:
- Separation of Concerns: geometry, model, analytics and solver separated
- Single writer: only the movement solver changes positions
- Invariants hold after every commit, not eventually
- Classification is a pure function of an immutable snapshot

Architecture:

    quadrilateral_shape/
    ├── labels.py          # VertexLabel, SideLabel, NamedQuadrilateral, pairs
    ├── geometry/          # Pure geometry (immutable, stateless)
    │   ├── primitives.py  # Vectors, angles, segment intersection, shoelace area
    │   ├── bounds.py      # Bounds, drag areas
    │   └── collision.py   # CollisionDetector (separating-axis tests)
    │
    ├── model/             # Entities (positions are the only mutable state)
    │   ├── entities.py    # Vertex, Side, MovementState
    │   ├── shape.py       # Shape aggregate (invariants)
    │   └── snapshot.py    # ShapeSnapshot
    │
    ├── analytics/         # Naming (stateless) and change tracking (stateful)
    │   ├── classifier.py  # ShapeClassifier
    │   └── tracker.py     # ShapeChangeTracker, ShapeChangedEvent
    │
    ├── requests.py        # Queueable movement requests
    ├── solver.py          # MovementSolver (sole writer of positions)
    ├── config.py          # ToleranceConfig, EngineConfig
    └── engine.py          # QuadrilateralEngine (orchestration)

Usage:

    # 1. Classify four points (stateless)
    from quadrilateral_shape import ShapeSnapshot, ShapeClassifier

    snapshot = ShapeSnapshot.from_positions([(0, 0), (1, 0), (1, 1), (0, 1)])
    ShapeClassifier().classify(snapshot)  # NamedQuadrilateral.SQUARE

    # 2. Drive the engine
    from quadrilateral_shape import QuadrilateralEngine, EngineConfig, VertexLabel

    engine = QuadrilateralEngine(EngineConfig())
    engine.add_listener(lambda event: print(event.previous, "->", event.current))

    result = engine.propose_vertex_move(VertexLabel.C, (0.5, 0.25))
    result.accepted_position, result.blocked_reason

    engine.tick()
"""

# Labels
from quadrilateral_shape.labels import (
    NamedQuadrilateral,
    SideLabel,
    SidePair,
    VertexLabel,
    VertexPair,
)

# Geometry Layer (immutable, stateless)
from quadrilateral_shape.geometry import (
    BlockedReason,
    Bounds,
    CollisionBody,
    CollisionDetector,
    CollisionResult,
)

# Configuration
from quadrilateral_shape.config import EngineConfig, ToleranceConfig

# Model Layer
from quadrilateral_shape.model import (
    InvalidShapeError,
    MovementState,
    Shape,
    ShapeSnapshot,
    Side,
    Vertex,
)

# Analytics Layer
from quadrilateral_shape.analytics import (
    ShapeChangedEvent,
    ShapeChangeTracker,
    ShapeClassifier,
    classify_points,
)

# Solver and orchestration
from quadrilateral_shape.requests import RotationSample, VertexDeltaSample, VertexMoveRequest
from quadrilateral_shape.solver import MoveResult, MovementSolver, RotationResult
from quadrilateral_shape.engine import QuadrilateralEngine, TickResult

__all__ = [
    # Labels
    "NamedQuadrilateral",
    "SideLabel",
    "SidePair",
    "VertexLabel",
    "VertexPair",
    # Geometry
    "BlockedReason",
    "Bounds",
    "CollisionBody",
    "CollisionDetector",
    "CollisionResult",
    # Configuration
    "EngineConfig",
    "ToleranceConfig",
    # Model
    "InvalidShapeError",
    "MovementState",
    "Shape",
    "ShapeSnapshot",
    "Side",
    "Vertex",
    # Analytics
    "ShapeChangedEvent",
    "ShapeChangeTracker",
    "ShapeClassifier",
    "classify_points",
    # Solver and orchestration
    "RotationSample",
    "VertexDeltaSample",
    "VertexMoveRequest",
    "MoveResult",
    "MovementSolver",
    "RotationResult",
    "QuadrilateralEngine",
    "TickResult",
]

__version__ = "1.0.0"
