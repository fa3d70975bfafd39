"""
Model Layer
===========

Bounded Context: The figure's entities and their measurements.

Responsibilities:
- Vertex and Side entities with embedded MovementState
- Shape aggregate enforcing the figure invariants
- Immutable ShapeSnapshot values for classification and change detection
"""

from quadrilateral_shape.model.entities import MovementState, Side, Vertex
from quadrilateral_shape.model.shape import InvalidShapeError, Shape
from quadrilateral_shape.model.snapshot import ShapeSnapshot

__all__ = [
    "MovementState",
    "Side",
    "Vertex",
    "InvalidShapeError",
    "Shape",
    "ShapeSnapshot",
]
