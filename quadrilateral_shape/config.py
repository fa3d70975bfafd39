"""
Configuration schema for the quadrilateral engine.

This module defines the tolerances, bounding region and initial figure
used by the engine. Values are loaded from YAML and validated at
construction; every config object is immutable (frozen dataclass).
"""

import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Tuple

import yaml

from quadrilateral_shape.geometry.bounds import Bounds
from quadrilateral_shape.geometry.primitives import Point

DEFAULT_INITIAL_POSITIONS: Tuple[Point, Point, Point, Point] = (
    (-0.25, -0.25),
    (0.25, -0.25),
    (0.25, 0.25),
    (-0.25, 0.25),
)


@dataclass(frozen=True)
class ToleranceConfig:
    """
    Numeric tolerances for comparison and movement.

    Angle and length epsilons absorb input jitter; the device variants are
    coarser because physical sensors are noisier than pointer input.
    """

    angle_epsilon: float = 0.01  # radians
    length_epsilon: float = 0.01
    device_angle_epsilon: float = 0.02
    device_length_epsilon: float = 0.02
    step_size: float = 0.005  # solver path sampling resolution
    min_side_length: float = 0.025  # also the vertex collision body size
    min_area: float = 1e-4
    movement_per_key_press: float = 0.05
    device_grid_spacing: float = 0.0  # 0 disables snapping

    def __post_init__(self):
        """Validate tolerances."""
        for name in (
            "angle_epsilon",
            "length_epsilon",
            "device_angle_epsilon",
            "device_length_epsilon",
            "step_size",
            "min_side_length",
            "min_area",
            "movement_per_key_press",
        ):
            value = getattr(self, name)
            if not value > 0:
                raise ValueError(f"{name} must be > 0, got {value}")

        if self.angle_epsilon >= math.pi / 4 or self.device_angle_epsilon >= math.pi / 4:
            raise ValueError(
                f"angle epsilons must be < pi/4, got "
                f"{self.angle_epsilon} / {self.device_angle_epsilon}"
            )

        if self.device_grid_spacing < 0:
            raise ValueError(
                f"device_grid_spacing must be >= 0, got {self.device_grid_spacing}"
            )

        # A coarser step than the vertex body lets a move tunnel through it
        if self.step_size > self.min_side_length:
            raise ValueError(
                f"step_size ({self.step_size}) must not exceed "
                f"min_side_length ({self.min_side_length})"
            )

    def comparison_epsilons(self, device_connection: bool = False) -> Tuple[float, float]:
        """
        Angle and length epsilons for the current input source.

        Returns:
            (angle_epsilon, length_epsilon)
        """
        if device_connection:
            return self.device_angle_epsilon, self.device_length_epsilon
        return self.angle_epsilon, self.length_epsilon


@dataclass(frozen=True)
class EngineConfig:
    """
    Main configuration for QuadrilateralEngine.

    Immutable after construction (frozen dataclass).
    """

    tolerances: ToleranceConfig = field(default_factory=ToleranceConfig)
    bounds: Bounds = field(default_factory=Bounds)
    initial_positions: Tuple[Point, Point, Point, Point] = DEFAULT_INITIAL_POSITIONS
    device_connection: bool = False

    def __post_init__(self):
        """Validate engine configuration."""
        if len(self.initial_positions) != 4:
            raise ValueError(
                f"initial_positions must have exactly 4 points, got {len(self.initial_positions)}"
            )

        for point in self.initial_positions:
            if len(point) != 2:
                raise ValueError(f"Each initial position must be an (x, y) pair, got {point}")
            if not self.bounds.contains(point):
                raise ValueError(
                    f"Initial position {point} lies outside bounds {self.bounds.to_dict()}"
                )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EngineConfig":
        """
        Build configuration from a parsed mapping.

        Missing sections fall back to defaults.
        """
        data = data or {}

        tolerances = ToleranceConfig(**data.get("tolerances", {}))
        bounds = Bounds(**data.get("bounds", {}))

        positions_data = data.get("initial_positions")
        if positions_data is None:
            initial_positions = DEFAULT_INITIAL_POSITIONS
        else:
            initial_positions = tuple(
                (float(point[0]), float(point[1])) for point in positions_data
            )

        return cls(
            tolerances=tolerances,
            bounds=bounds,
            initial_positions=initial_positions,
            device_connection=bool(data.get("device_connection", False)),
        )

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> "EngineConfig":
        """
        Load configuration from YAML file.

        Example YAML:
            tolerances:
              angle_epsilon: 0.01
              length_epsilon: 0.01
              step_size: 0.005

            bounds:
              min_x: -5.0
              min_y: -5.0
              max_x: 5.0
              max_y: 5.0

            initial_positions: [[-0.25, -0.25], [0.25, -0.25], [0.25, 0.25], [-0.25, 0.25]]
            device_connection: false
        """
        with open(yaml_path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data)
