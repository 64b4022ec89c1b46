"""Splitting, extrema, bounding boxes and reduction into simple segments."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from bezkit.common import DegenerateGeometryError, InvalidCurveError, check_parameter
from bezkit.consts import ROOT_EPSILON
from bezkit.geom import BoundingBox, GeomMath, Interval
from bezkit.polynomial import PolynomialSolver

if TYPE_CHECKING:
    from bezkit.bezier import BezierCurve

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Extrema:
    """
    Parameters of coordinate extrema.

    Attributes:
        axes: sorted roots per axis (x, y and optionally z)
        values: sorted, deduplicated union of all axes
    """

    axes: Tuple[List[float], ...]
    values: List[float]

    @property
    def x(self) -> List[float]:
        """List[float]: extrema of the x coordinate."""
        return self.axes[0]

    @property
    def y(self) -> List[float]:
        """List[float]: extrema of the y coordinate."""
        return self.axes[1]

    @property
    def z(self) -> Optional[List[float]]:
        """Optional[List[float]]: extrema of the z coordinate, None for 2D curves."""
        return self.axes[2] if len(self.axes) == 3 else None


class Subdivider:
    """Class to provide subdivision related algorithms on BezierCurve instances."""

    @staticmethod
    def hull(points: NDArray[np.float64], t: float) -> List[NDArray[np.float64]]:
        """
        All de Casteljau levels at t.

        Args:
            points: control points, shape (n + 1, dim)
            t: parameter

        Returns:
            List of n + 1 arrays. The first one holds the control points, every next
            level holds one point less, the last level holds the single curve point.
        """
        levels = [points.copy()]
        p = points
        while p.shape[0] > 1:
            p = p[:-1] + (p[1:] - p[:-1]) * t
            levels.append(p)
        return levels

    @classmethod
    def split(
        cls, curve: BezierCurve, t1: float, t2: Optional[float] = None
    ) -> Union[Tuple[BezierCurve, BezierCurve], BezierCurve]:
        """
        Split a curve at t1, or cut out the range [t1, t2].

        The left part consists of the first point of every de Casteljau level, the
        right part of the last point of every level in reverse order. Both parts
        carry their range mapped into the parameter space of the original curve.

        Raises:
            InvalidCurveError: If a parameter is outside [0, 1] or t2 < t1.
        """
        t1 = check_parameter(t1, "t1")
        if t2 is not None:
            t2 = check_parameter(t2, "t2")
            if t2 < t1:
                raise InvalidCurveError(f"t2 must not be smaller than t1, got t1={t1}, t2={t2}")
            if t2 == 1.0:
                return cls.split(curve, t1)[1]
            if t1 == 0.0:
                return cls.split(curve, t2)[0]
            right = cls.split(curve, t1)[1]
            return cls.split(right, GeomMath.map_range(t2, t1, 1.0, 0.0, 1.0))[0]

        levels = cls.hull(curve.points, t1)
        left_points = np.array([level[0] for level in levels])
        right_points = np.array([level[-1] for level in reversed(levels)])
        mid = GeomMath.map_range(t1, 0.0, 1.0, curve.t1, curve.t2)
        left = curve.with_points(left_points, t1=curve.t1, t2=mid)
        right = curve.with_points(right_points, t1=mid, t2=curve.t2)
        return left, right

    @staticmethod
    def extrema(curve: BezierCurve) -> Extrema:
        """
        Derivative roots per axis within [0, 1].

        The first derivative gives the coordinate extrema. Cubic curves also add
        the roots of the second derivative, so that reduce() splits at the points
        where a coordinate changes its bending direction.
        """
        hodograph = curve.hodograph
        axes: List[List[float]] = []
        for dim in range(curve.dim):
            roots = PolynomialSolver.bernstein_roots(hodograph[0][:, dim])
            if curve.order == 3:
                roots += PolynomialSolver.bernstein_roots(hodograph[1][:, dim])
            axes.append(PolynomialSolver.in_unit_interval(roots))
        values = PolynomialSolver.in_unit_interval(t for axis in axes for t in axis)
        return Extrema(tuple(axes), values)

    @classmethod
    def bounding_box(cls, curve: BezierCurve) -> BoundingBox:
        """Tight bounding box: each axis takes min/max over the ends and its own extrema."""
        extrema = cls.extrema(curve)
        intervals: List[Interval] = []
        for dim, roots in enumerate(extrema.axes):
            ts = np.array([0.0, 1.0] + roots, dtype=np.float64)
            values = curve.evaluate_many(ts)[:, dim]
            intervals.append(Interval(float(values.min()), float(values.max())))
        return BoundingBox(tuple(intervals))

    @staticmethod
    def is_simple(curve: BezierCurve) -> bool:
        """
        True if the curve is simple.

        A cubic is not simple if its two inner control points lie on different
        sides of the chord. Any curve is not simple if the angle between its end
        tangents, which equals the angle between its end normals, reaches the
        configured maximum. Curves without a defined tangent are not simple.
        """
        p = curve.points
        if curve.order == 3:
            a1 = GeomMath.angle(p[0], p[3], p[1])
            a2 = GeomMath.angle(p[0], p[3], p[2])
            if (a1 > 0.0 and a2 < 0.0) or (a1 < 0.0 and a2 > 0.0):
                return False
        try:
            n1 = curve.tangent(0.0)
            n2 = curve.tangent(1.0)
        except DegenerateGeometryError:
            logger.debug("Curve without tangent is not simple: %s", curve)
            return False
        s = float(np.clip(np.dot(n1, n2), -1.0, 1.0))
        angle = abs(math.acos(s))
        return angle < curve.settings.simple_max_angle

    @classmethod
    def reduce(cls, curve: BezierCurve) -> List[BezierCurve]:
        """
        Split a curve into simple segments.

        Pass one splits at all extrema. Pass two grows segments of every piece in
        steps of `reduce_step` as long as they stay simple and cuts them right
        before they stop being simple.

        Returns:
            Simple segments tiling [0, 1] in order, each carrying its range of the
            original curve. An empty list if a segment shorter than one step is not
            simple, in which case no reduction can be formed.
        """
        step = curve.settings.reduce_step

        # first pass: split on extrema
        ts = sorted({0.0, 1.0, *curve.extrema().values})
        cuts = [ts[0]]
        for t in ts[1:]:
            if t - cuts[-1] > ROOT_EPSILON:
                cuts.append(t)
        cuts[-1] = 1.0
        pass1 = [cls.split(curve, start, end) for start, end in zip(cuts[:-1], cuts[1:])]

        # second pass: further reduce these segments to simple segments
        pass2: List[BezierCurve] = []
        for piece in pass1:
            t1 = 0.0
            while t1 < 1.0:
                k = 1
                while True:
                    t2 = min(t1 + k * step, 1.0)
                    if not cls.split(piece, t1, t2).is_simple():
                        if k == 1:
                            logger.debug("Cannot reduce %s: segment at t=%s is never simple", curve, t1)
                            return []
                        t2 = min(t1 + (k - 1) * step, 1.0)
                        break
                    if t2 >= 1.0:
                        break
                    k += 1
                pass2.append(cls.split(piece, t1, t2))
                t1 = t2
        return pass2


def main():
    """Main"""


if __name__ == "__main__":
    main()
