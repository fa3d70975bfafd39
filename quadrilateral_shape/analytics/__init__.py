"""
Analytics Layer
===============

Bounded Context: Naming the figure and noticing when the name changes.

Responsibilities:
- Shape classification (stateless)
- Category change tracking (stateful)
"""

from quadrilateral_shape.analytics.classifier import ShapeClassifier, classify_points
from quadrilateral_shape.analytics.tracker import ShapeChangedEvent, ShapeChangeTracker

__all__ = [
    "ShapeClassifier",
    "classify_points",
    "ShapeChangedEvent",
    "ShapeChangeTracker",
]
