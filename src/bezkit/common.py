"""Central module containing types, settings and errors of the Bezier curve kernel."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum, auto
from typing import Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from bezkit import consts

###############################################################################
# Types
###############################################################################


PointLike = Union[  # Type-Definition for anything accepted as a single 2D/3D point
    Tuple[float, float],
    Tuple[float, float, float],
    Sequence[float],
    NDArray[np.float64],
]

PointsLike = Union[  # Type-Definition for an ordered sequence of control points
    Sequence[Tuple[float, float]],
    Sequence[Tuple[float, float, float]],
    Sequence[Sequence[float]],
    NDArray[np.float64],
]


###############################################################################
# Errors
###############################################################################


class BezierError(Exception):
    """Base exception for errors raised by the curve kernel."""


class InvalidCurveError(BezierError, ValueError):
    """Raised when input points, parameters or lines are malformed."""


class DegenerateGeometryError(BezierError):
    """Raised when an operation has no defined result for the given geometry."""


###############################################################################
# Enums and Settings
###############################################################################


class LengthStrategy(Enum):
    """Enum to select the arc length algorithm."""

    GAUSS_LEGENDRE = auto()
    POLYLINE = auto()


@dataclass(frozen=True)
class CurveSettings:
    """Tunable tolerances and resolutions used by curve operations.

    Attributes:
        lut_steps: Default number of lookup table steps.
        project_lut_steps: Lookup table steps of the coarse projection phase.
        reduce_step: Growth step of the second reduction pass.
        simple_max_angle: Maximum angle (radians) between end normals of a simple segment.
        intersection_threshold: Combined bbox width+height treated as converged.
        intersection_max_depth: Maximum bisection depth of curve-curve intersection.
        intersection_precision: Decimal places used to deduplicate intersections.
        arc_tolerance: Default deviation allowed for arc approximation.
        arc_max_iterations: Safety counter of the arc binary search.
        normal_3d_epsilon: Finite difference offset of 3D normals.
    """

    lut_steps: int = consts.LUT_STEPS
    project_lut_steps: int = consts.PROJECT_LUT_STEPS
    reduce_step: float = consts.REDUCE_STEP
    simple_max_angle: float = consts.SIMPLE_MAX_ANGLE
    intersection_threshold: float = consts.INTERSECTION_THRESHOLD
    intersection_max_depth: int = consts.INTERSECTION_MAX_DEPTH
    intersection_precision: int = consts.INTERSECTION_PRECISION
    arc_tolerance: float = consts.ARC_TOLERANCE
    arc_max_iterations: int = consts.ARC_MAX_ITERATIONS
    normal_3d_epsilon: float = consts.NORMAL_3D_EPSILON

    def __post_init__(self):
        if self.lut_steps < 1 or self.project_lut_steps < 1:
            raise InvalidCurveError("Lookup table steps must be at least 1")
        if not 0.0 < self.reduce_step < 1.0:
            raise InvalidCurveError(f"reduce_step must be in (0, 1), got {self.reduce_step}")
        if self.intersection_max_depth < 1 or self.arc_max_iterations < 1:
            raise InvalidCurveError("Iteration bounds must be at least 1")
        if self.intersection_threshold <= 0.0 or self.arc_tolerance <= 0.0:
            raise InvalidCurveError("Tolerances must be positive")

    def to_dict(self) -> dict:
        """Convert settings to a dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> CurveSettings:
        """Create CurveSettings from a dictionary, missing keys use defaults."""
        defaults = DEFAULT_SETTINGS
        return cls(
            lut_steps=data.get("lut_steps", defaults.lut_steps),
            project_lut_steps=data.get("project_lut_steps", defaults.project_lut_steps),
            reduce_step=data.get("reduce_step", defaults.reduce_step),
            simple_max_angle=data.get("simple_max_angle", defaults.simple_max_angle),
            intersection_threshold=data.get("intersection_threshold", defaults.intersection_threshold),
            intersection_max_depth=data.get("intersection_max_depth", defaults.intersection_max_depth),
            intersection_precision=data.get("intersection_precision", defaults.intersection_precision),
            arc_tolerance=data.get("arc_tolerance", defaults.arc_tolerance),
            arc_max_iterations=data.get("arc_max_iterations", defaults.arc_max_iterations),
            normal_3d_epsilon=data.get("normal_3d_epsilon", defaults.normal_3d_epsilon),
        )


DEFAULT_SETTINGS = CurveSettings()


###############################################################################
# Functions
###############################################################################


def as_point(point: PointLike) -> NDArray[np.float64]:
    """Convert a point-like value into a 1-D float array of 2 or 3 components.

    Raises:
        InvalidCurveError: If the value is not a finite 2D or 3D point.
    """
    arr = np.asarray(point, dtype=np.float64)
    if arr.ndim != 1 or arr.shape[0] not in (2, 3):
        raise InvalidCurveError(f"point must have 2 or 3 components, got shape {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise InvalidCurveError(f"point must be finite, got {arr.tolist()}")
    return arr


def check_parameter(t: float, name: str = "t") -> float:
    """Return t as float, raising InvalidCurveError if it lies outside [0, 1]."""
    value = float(t)
    if not 0.0 <= value <= 1.0:
        raise InvalidCurveError(f"{name} must be in [0, 1], got {value}")
    return value


def main():
    """Main"""


if __name__ == "__main__":
    main()
