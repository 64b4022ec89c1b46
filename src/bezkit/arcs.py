"""Approximation of 2D curves by circular arcs."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator, List, Optional

import numpy as np
from numpy.typing import NDArray

from bezkit.common import InvalidCurveError
from bezkit.consts import ARC_MAX_ARCS
from bezkit.geom import GeomMath

if TYPE_CHECKING:
    from bezkit.bezier import BezierCurve

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Arc:
    """
    Circular arc approximating the curve range [t1, t2].

    Attributes:
        center: Circle center
        radius: Circle radius
        start: Start angle in radians
        end: End angle in radians, start < end; the arc runs counter clockwise from start to end
        t1: Curve parameter at the start of the approximated range
        t2: Curve parameter at the end of the approximated range
    """

    center: NDArray[np.float64] = field(compare=False)
    radius: float
    start: float
    end: float
    t1: float
    t2: float

    @property
    def sweep(self) -> float:
        """float: angular extent in radians."""
        return self.end - self.start

    def point_at(self, angle: float) -> NDArray[np.float64]:
        """Point of the circle at the given angle."""
        return self.center + self.radius * np.array([math.cos(angle), math.sin(angle)], dtype=np.float64)


@dataclass
class ArcApproximation:
    """
    Arcs covering a curve in order.

    Attributes:
        arcs: The arcs found, consecutive in curve parameter
        converged: False if the search for an arc ran out of iterations; arcs then
            hold the partial approximation up to that point.
    """

    arcs: List[Arc] = field(default_factory=list)
    converged: bool = True

    def __len__(self) -> int:
        return len(self.arcs)

    def __iter__(self) -> Iterator[Arc]:
        return iter(self.arcs)

    def __getitem__(self, index: int) -> Arc:
        return self.arcs[index]


class ArcApproximator:
    """Class to approximate curves by arcs using a binary search per arc.

    Starting at parameter s, the arc through B(s), B((s + e) / 2) and B(e) is
    tested against two further curve samples. While the arc is good, e moves up
    by half the current range; while it is bad, e falls back to the middle. The
    search for one arc ends when a good arc turns bad; the last good arc is kept
    and the next search starts at its end.
    """

    @staticmethod
    def _error(
        curve: BezierCurve, center: NDArray[np.float64], start: NDArray[np.float64], s: float, e: float
    ) -> float:
        q = (e - s) / 4.0
        c1 = curve.evaluate(s + q)
        c2 = curve.evaluate(e - q)
        ref = GeomMath.distance(center, start)
        d1 = GeomMath.distance(center, c1)
        d2 = GeomMath.distance(center, c2)
        return abs(d1 - ref) + abs(d2 - ref)

    @classmethod
    def _arc(cls, curve: BezierCurve, s: float, e: float) -> Optional[Arc]:
        circle = GeomMath.circle_through_points(curve.evaluate(s), curve.evaluate((s + e) / 2.0), curve.evaluate(e))
        if circle is None:
            return None
        center, radius, start, end = circle
        return Arc(center, radius, start, end, s, e)

    @classmethod
    def approximate(cls, curve: BezierCurve, tolerance: Optional[float] = None) -> ArcApproximation:
        """
        Approximate a 2D curve by arcs.

        Args:
            curve: The curve to approximate.
            tolerance: Allowed sum of radial deviations at the two test samples of an
                arc, the curve settings' arc_tolerance if None.

        Returns:
            ArcApproximation. A straight curve has no circle through its samples, its
            search runs out of iterations and an empty, non-converged result is returned.
        """
        if curve.dim != 2:
            raise InvalidCurveError("Arc approximation is only defined for 2D curves")
        if tolerance is None:
            tolerance = curve.settings.arc_tolerance
        max_iterations = curve.settings.arc_max_iterations

        arcs: List[Arc] = []
        s = 0.0
        while len(arcs) < ARC_MAX_ARCS:
            # start with the maximum possible arc
            e = 1.0
            start_point = curve.evaluate(s)
            arc: Optional[Arc] = None
            final: Optional[Arc] = None
            curr_good = False
            prev_e = 1.0
            safety = 0
            while safety < max_iterations:
                prev_good = curr_good
                prev_arc = arc
                m = (s + e) / 2.0
                arc = cls._arc(curve, s, e)
                curr_good = arc is not None and cls._error(curve, arc.center, start_point, s, e) <= tolerance
                if prev_good and not curr_good:
                    # the previous arc was the widest good one
                    final = prev_arc
                    break
                prev_e = e

                if curr_good:
                    # if e is already at its maximum, we're done for this arc
                    if e >= 1.0:
                        final = arc
                        break
                    e = min(e + (e - s) / 2.0, 1.0)
                else:
                    e = m
                safety += 1

            if final is None:
                logger.warning("Arc search did not converge after %d iterations at t=%.6f", safety, s)
                return ArcApproximation(arcs, converged=False)

            arcs.append(Arc(final.center, final.radius, final.start, final.end, s, prev_e))
            s = prev_e
            if s >= 1.0:
                return ArcApproximation(arcs)

        logger.warning("Arc approximation stopped after %d arcs at t=%.6f", len(arcs), s)
        return ArcApproximation(arcs, converged=False)


def main():
    """Main"""


if __name__ == "__main__":
    main()
