"""Shared test fixtures."""

import math

import pytest

from quadrilateral_shape import (
    Bounds,
    CollisionDetector,
    EngineConfig,
    QuadrilateralEngine,
    Shape,
    ShapeClassifier,
    ToleranceConfig,
    VertexLabel,
)

A, B, C, D = VertexLabel.A, VertexLabel.B, VertexLabel.C, VertexLabel.D

UNIT_SQUARE = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)]
RECTANGLE = [(0.0, 0.0), (2.0, 0.0), (2.0, 1.0), (0.0, 1.0)]
RHOMBUS = [(0.0, 0.0), (2.0, 0.0), (3.0, math.sqrt(3)), (1.0, math.sqrt(3))]
PARALLELOGRAM = [(0.0, 0.0), (2.0, 0.0), (3.0, 1.0), (1.0, 1.0)]
KITE = [(0.0, 0.0), (1.0, -1.0), (3.0, 0.0), (1.0, 1.0)]
ISOSCELES_TRAPEZOID = [(0.0, 0.0), (2.0, 0.0), (1.5, 1.0), (0.5, 1.0)]
RIGHT_TRAPEZOID = [(0.0, 0.0), (2.0, 0.0), (1.5, 1.0), (0.0, 1.0)]
DART = [(0.0, 0.0), (2.0, -1.0), (1.0, 0.0), (2.0, 1.0)]
GENERIC = [(0.0, 0.0), (3.0, 0.0), (2.5, 2.0), (0.3, 1.1)]


def as_positions(points):
    return dict(zip((A, B, C, D), points))


@pytest.fixture
def tolerances() -> ToleranceConfig:
    return ToleranceConfig()


@pytest.fixture
def bounds() -> Bounds:
    return Bounds()


@pytest.fixture
def detector(bounds, tolerances) -> CollisionDetector:
    return CollisionDetector(
        bounds,
        min_side_length=tolerances.min_side_length,
        min_area=tolerances.min_area,
    )


@pytest.fixture
def unit_square(bounds, tolerances, detector) -> Shape:
    return Shape(UNIT_SQUARE, bounds, tolerances, detector=detector)


@pytest.fixture
def classifier() -> ShapeClassifier:
    return ShapeClassifier()


@pytest.fixture
def engine() -> QuadrilateralEngine:
    return QuadrilateralEngine(EngineConfig())
