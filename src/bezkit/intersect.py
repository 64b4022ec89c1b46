"""Intersections of curves with lines, with other curves and with themselves."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator, List, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from bezkit.common import InvalidCurveError
from bezkit.consts import LINE_TOLERANCE, PAIR_TOLERANCE
from bezkit.geom import GeomMath, LineSegment
from bezkit.polynomial import PolynomialSolver

if TYPE_CHECKING:
    from bezkit.bezier import BezierCurve

logger = logging.getLogger(__name__)

Cell = Tuple[float, float, float, float]  # parameter ranges (start1, end1, start2, end2) of a converged bisection cell


###############################################################################
# Result types
###############################################################################


@dataclass(frozen=True)
class LineIntersection:
    """
    Intersection of a curve with a line segment.

    Attributes:
        t: Curve parameter
        point: Curve point at t
    """

    t: float
    point: NDArray[np.float64] = field(compare=False)


@dataclass(frozen=True, order=True)
class CurveIntersection:
    """
    Intersection of two curves.

    Attributes:
        t1: Parameter on the first curve
        t2: Parameter on the second curve
    """

    t1: float
    t2: float


@dataclass
class IntersectionResultSet:
    """
    Sorted intersections of a curve-curve or self intersection test.

    Attributes:
        intersections: Intersection parameter pairs, sorted and deduplicated
        converged: False if at least one candidate pair hit the bisection depth
            limit; the intersections then hold only the converged results.
    """

    intersections: List[CurveIntersection] = field(default_factory=list)
    converged: bool = True

    def __len__(self) -> int:
        return len(self.intersections)

    def __iter__(self) -> Iterator[CurveIntersection]:
        return iter(self.intersections)

    def __getitem__(self, index: int) -> CurveIntersection:
        return self.intersections[index]

    def __bool__(self) -> bool:
        return bool(self.intersections)

    def as_tuples(self) -> List[Tuple[float, float]]:
        """Intersections as (t1, t2) tuples."""
        return [(item.t1, item.t2) for item in self.intersections]


###############################################################################
# IntersectionEngine
###############################################################################


class IntersectionEngine:
    """Class to provide intersection algorithms.

    Line intersections are solved algebraically: the curve is aligned so that the
    line becomes the X axis and the roots of the aligned Y coordinate are the
    intersection parameters.

    Curve intersections are found by recursive bisection: both curves are reduced
    to simple segments, segments with overlapping bounding boxes are paired, and
    each pair is split in halves until both halves are smaller than the
    configured threshold, whose parameter midpoints are then reported.
    """

    @staticmethod
    def _aligned_roots(aligned_y: NDArray[np.float64]) -> List[float]:
        values = [float(v) for v in aligned_y]
        if len(values) == 4:
            pa, pb, pc, pd = values
            a = -pa + 3.0 * pb - 3.0 * pc + pd
            b = 3.0 * pa - 6.0 * pb + 3.0 * pc
            c = -3.0 * pa + 3.0 * pb
            return PolynomialSolver.solve_cubic(a, b, c, pa)
        if len(values) == 3:
            pa, pb, pc = values
            return PolynomialSolver.solve_quadratic(pa - 2.0 * pb + pc, 2.0 * (pb - pa), pa)
        if len(values) == 2:
            pa, pb = values
            return PolynomialSolver.solve_linear(pb - pa, pa)
        return PolynomialSolver.solve(PolynomialSolver.bernstein_to_power(values))

    @classmethod
    def line_intersections(cls, curve: BezierCurve, line: LineSegment) -> List[LineIntersection]:
        """
        Intersections of a 2D curve with a line segment.

        Roots of the aligned curve are filtered to [0, 1] and to points within the
        bounding box of the segment. A curve running along the line reports no
        intersections.

        Raises:
            InvalidCurveError: For 3D curves or lines.
            DegenerateGeometryError: For a zero-length line.
        """
        if curve.dim != 2 or line.dim != 2:
            raise InvalidCurveError("Line intersections are only defined in 2D")
        aligned = GeomMath.align(curve.points, line)
        roots = PolynomialSolver.in_unit_interval(cls._aligned_roots(aligned[:, 1]))

        box = line.bounding_box
        tolerance = LINE_TOLERANCE * max(1.0, line.length)
        result = []
        for t in roots:
            point = curve.evaluate(t)
            if box.contains_point(point, tolerance):
                result.append(LineIntersection(t, point))
        return result

    @classmethod
    def _pair_iteration(cls, c1: BezierCurve, c2: BezierCurve, depth: int) -> Tuple[List[Cell], bool]:
        settings = c1.settings
        threshold = settings.intersection_threshold
        c1b = c1.bounding_box()
        c2b = c2.bounding_box()

        if c1b.extent_sum < threshold and c2b.extent_sum < threshold:
            return [(c1.t1, c1.t2, c2.t1, c2.t2)], True

        if depth >= settings.intersection_max_depth:
            logger.warning(
                "Intersection did not converge within %d bisections near t1=%.6f, t2=%.6f",
                depth,
                (c1.t1 + c1.t2) / 2.0,
                (c2.t1 + c2.t2) / 2.0,
            )
            return [], False

        left1, right1 = c1.split(0.5)
        left2, right2 = c2.split(0.5)
        candidates = [(left1, left2), (left1, right2), (right1, right2), (right1, left2)]

        results: List[Cell] = []
        converged = True
        for a, b in candidates:
            if a.bounding_box().overlaps(b.bounding_box(), PAIR_TOLERANCE):
                found, ok = cls._pair_iteration(a, b, depth + 1)
                results.extend(found)
                converged = converged and ok
        return results, converged

    @staticmethod
    def _local(curve: BezierCurve, t: float) -> float:
        # segments carry ranges of the curve they were cut from, which may itself
        # be a sub-curve with its own range
        span = curve.t2 - curve.t1
        if span <= 0.0:
            return 0.0
        return min(max((t - curve.t1) / span, 0.0), 1.0)

    @staticmethod
    def _touching(a: Cell, b: Cell) -> bool:
        # cells share a bisection boundary or overlap on both curves
        return (
            a[0] <= b[1] + PAIR_TOLERANCE
            and b[0] <= a[1] + PAIR_TOLERANCE
            and a[2] <= b[3] + PAIR_TOLERANCE
            and b[2] <= a[3] + PAIR_TOLERANCE
        )

    @classmethod
    def _deduplicate(cls, curve1: BezierCurve, curve2: BezierCurve, cells: Sequence[Cell]) -> List[CurveIntersection]:
        # Neighbouring bisection cells around one crossing all converge; cells that
        # touch in both parameter ranges are one group and report their mean
        # midpoint. Pairs rounding to the same parameters are identical.
        groups: List[List[Cell]] = []
        for cell in cells:
            joined = [group for group in groups if any(cls._touching(cell, other) for other in group)]
            merged = [cell]
            for group in joined:
                merged.extend(group)
                groups.remove(group)
            groups.append(merged)

        precision = curve1.settings.intersection_precision
        result = set()
        for group in groups:
            t1 = sum((cell[0] + cell[1]) / 2.0 for cell in group) / len(group)
            t2 = sum((cell[2] + cell[3]) / 2.0 for cell in group) / len(group)
            result.add(
                CurveIntersection(
                    round(cls._local(curve1, t1), precision),
                    round(cls._local(curve2, t2), precision),
                )
            )
        return sorted(result)

    @classmethod
    def _segment_pairs(cls, first: Sequence[BezierCurve], second: Sequence[BezierCurve]) -> Tuple[List[Cell], bool]:
        pairs = []
        for a in first:
            for b in second:
                if a.bounding_box().overlaps(b.bounding_box(), PAIR_TOLERANCE):
                    pairs.append((a, b))

        found: List[Cell] = []
        converged = True
        for a, b in pairs:
            result, ok = cls._pair_iteration(a, b, 0)
            found.extend(result)
            converged = converged and ok
        return found, converged

    @staticmethod
    def _segments(curve: BezierCurve) -> List[BezierCurve]:
        reduced = curve.reduce()
        if not reduced:
            logger.debug("Intersecting unreduced curve %s", curve)
            return [curve]
        return reduced

    @classmethod
    def curve_intersections(cls, curve1: BezierCurve, curve2: BezierCurve) -> IntersectionResultSet:
        """
        Intersections of two curves of the same dimension.

        Returns:
            IntersectionResultSet with (t on curve1, t on curve2) pairs.
        """
        if curve1.dim != curve2.dim:
            raise InvalidCurveError(f"Cannot intersect a {curve1.dim}D with a {curve2.dim}D curve")
        if not curve1.bounding_box().overlaps(curve2.bounding_box(), PAIR_TOLERANCE):
            return IntersectionResultSet()
        found, converged = cls._segment_pairs(cls._segments(curve1), cls._segments(curve2))
        return IntersectionResultSet(cls._deduplicate(curve1, curve2, found), converged)

    @classmethod
    def self_intersections(cls, curve: BezierCurve) -> IntersectionResultSet:
        """
        Self intersections of a curve.

        Each simple segment is tested against all segments from the second next
        one on; neighbouring segments only share their end point. Candidates whose
        connecting piece of the curve is shorter than twice the convergence
        threshold are the joint of a short middle segment, not a loop, and are
        dropped.
        """
        reduced = curve.reduce()
        found: List[Cell] = []
        converged = True
        for i in range(len(reduced) - 2):
            partial, ok = cls._segment_pairs(reduced[i : i + 1], reduced[i + 2 :])
            found.extend(partial)
            converged = converged and ok

        min_loop = 2.0 * curve.settings.intersection_threshold
        result = []
        for item in cls._deduplicate(curve, curve, found):
            start, end = min(item.t1, item.t2), max(item.t1, item.t2)
            if end - start <= 0.0 or curve.split(start, end).length() < min_loop:
                logger.debug("Dropping self intersection candidate at %s, no loop between", item)
                continue
            result.append(item)
        return IntersectionResultSet(result, converged)


def main():
    """Main"""


if __name__ == "__main__":
    main()
