"""Offset curves, scaling of simple segments and closed outlines."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Iterator, List, Optional

import numpy as np
import shapely.errors
import shapely.geometry
from numpy.typing import NDArray

from bezkit.common import DegenerateGeometryError, InvalidCurveError
from bezkit.consts import EPSILON
from bezkit.geom import BoundingBox, GeomMath

if TYPE_CHECKING:
    from bezkit.bezier import BezierCurve
    from bezkit.intersect import IntersectionResultSet

logger = logging.getLogger(__name__)

DistanceFunction = Callable[[float], float]  # maps a local parameter in [0, 1] to an offset distance

# Distance of the probe points used to find the scaling origin of a segment
SCALE_PROBE_DISTANCE: float = 10.0


###############################################################################
# Result types
###############################################################################


@dataclass(frozen=True)
class OffsetPoint:
    """
    A point moved along the curve normal.

    Attributes:
        curve_point: The point on the curve
        normal: The unit normal at curve_point
        point: curve_point + distance * normal
    """

    curve_point: NDArray[np.float64]
    normal: NDArray[np.float64]
    point: NDArray[np.float64]


@dataclass
class Outline:
    """
    Closed sequence of curves around a base curve.

    The sequence is [start cap, forward curves..., end cap, back curves...]
    where the back curves run in reverse direction, so that the end of every
    curve is the start of the next one and the last curve ends at the start
    of the first.
    """

    curves: List[BezierCurve]

    def __len__(self) -> int:
        return len(self.curves)

    def __iter__(self) -> Iterator[BezierCurve]:
        return iter(self.curves)

    def __getitem__(self, index: int) -> BezierCurve:
        return self.curves[index]

    def is_closed(self, tolerance: float = 1e-6) -> bool:
        """True if consecutive curves connect end-to-start, including last to first."""
        if not self.curves:
            return False
        for current, following in zip(self.curves, self.curves[1:] + self.curves[:1]):
            if GeomMath.distance(current.points[-1], following.points[0]) > tolerance:
                return False
        return True

    @property
    def bounding_box(self) -> BoundingBox:
        """BoundingBox: union of the boxes of all curves."""
        return BoundingBox.union_all([curve.bounding_box() for curve in self.curves])

    def to_points(self, steps: int = 10) -> NDArray[np.float64]:
        """
        Polygonize the outline.

        Every curve contributes steps + 1 lookup table samples; the first sample of
        each following curve and the closing duplicate of the very first sample are
        dropped.
        """
        chunks = []
        for index, curve in enumerate(self.curves):
            samples = curve.lut(steps).points
            chunks.append(samples if index == 0 else samples[1:])
        points = np.vstack(chunks)
        if points.shape[0] > 1 and np.allclose(points[0], points[-1]):
            points = points[:-1]
        return points

    def to_polygon(self, steps: int = 10) -> shapely.geometry.base.BaseGeometry:
        """
        Convert the outline into a shapely geometry.

        Self-intersecting outlines are repaired with buffer(0), which may return a
        MultiPolygon.

        Raises:
            DegenerateGeometryError: If the outline has no area.
        """
        points = self.to_points(steps)
        if points.shape[0] < 3:
            raise DegenerateGeometryError("Outline has fewer than 3 points")
        polygon = shapely.geometry.Polygon(points[:, :2].tolist())
        if polygon.is_valid:
            return polygon
        try:
            cleaned = polygon.buffer(0)
        except (shapely.errors.ShapelyError, ValueError, TypeError) as e:
            raise DegenerateGeometryError(f"Failed to clean outline polygon: {e}") from e
        if cleaned.is_empty:
            raise DegenerateGeometryError("Outline polygon became empty after buffer(0)")
        return cleaned


@dataclass
class OutlineShape:
    """
    Closed shape around one simple segment of an outline.

    Caps shared with the neighbouring shape are marked virtual: they are not
    part of the final outline and are ignored for intersections.
    """

    start_cap: BezierCurve
    forward: BezierCurve
    end_cap: BezierCurve
    back: BezierCurve
    start_virtual: bool = False
    end_virtual: bool = False

    @property
    def curves(self) -> List[BezierCurve]:
        """List[BezierCurve]: all four edges in drawing order."""
        return [self.start_cap, self.forward, self.end_cap, self.back]

    def edges(self) -> List[BezierCurve]:
        """Edges that are part of the real outline (non-virtual caps, forward and back)."""
        result = [] if self.start_virtual else [self.start_cap]
        result.append(self.forward)
        if not self.end_virtual:
            result.append(self.end_cap)
        result.append(self.back)
        return result

    @property
    def bounding_box(self) -> BoundingBox:
        """BoundingBox: union of the boxes of all edges."""
        return BoundingBox.union_all([curve.bounding_box() for curve in self.curves])

    def intersections(self, other: OutlineShape) -> List[IntersectionResultSet]:
        """Non-empty intersection sets between real edges of both shapes."""
        if not self.bounding_box.overlaps(other.bounding_box):
            return []
        results = []
        for mine in self.edges():
            for theirs in other.edges():
                found = mine.intersect(theirs)
                if found:
                    results.append(found)
        return results


###############################################################################
# OffsetBuilder
###############################################################################


class OffsetBuilder:
    """Class to provide offsetting operations on 2D curves up to cubic order."""

    @staticmethod
    def _check_curve(curve: BezierCurve) -> None:
        if curve.dim != 2:
            raise InvalidCurveError("Offsetting is only defined for 2D curves")
        if curve.order > 3:
            raise InvalidCurveError(f"Offsetting supports curves up to cubic order, got order {curve.order}")

    @staticmethod
    def offset_point(curve: BezierCurve, t: float, d: float) -> OffsetPoint:
        """Point at t moved by d along the unit normal."""
        c = curve.evaluate(t)
        n = curve.normal(t)
        return OffsetPoint(curve_point=c, normal=n, point=c + d * n)

    @staticmethod
    def linear_distance_function(s: float, e: float, tlen: float, alen: float, slen: float) -> DistanceFunction:
        """
        Distance function of one segment of a tapered outline.

        The outline distance grows linearly from s at the start of the full curve to
        e at its end. A segment of length slen starting after alen of the total
        length tlen therefore covers the fraction [alen / tlen, (alen + slen) / tlen]
        of that growth.
        """
        f1 = alen / tlen
        f2 = (alen + slen) / tlen
        d = e - s

        def distance(v: float) -> float:
            return GeomMath.map_range(v, 0.0, 1.0, s + f1 * d, s + f2 * d)

        return distance

    @classmethod
    def _origin(cls, curve: BezierCurve) -> NDArray[np.float64]:
        # intersection of the end normals, the center the segment is scaled around
        v0 = cls.offset_point(curve, 0.0, SCALE_PROBE_DISTANCE)
        v1 = cls.offset_point(curve, 1.0, SCALE_PROBE_DISTANCE)
        o = GeomMath.line_intersection(v0.point, v0.curve_point, v1.point, v1.curve_point)
        if o is None:
            raise DegenerateGeometryError("Cannot scale this curve, its end normals are parallel. Reduce it first.")
        return o

    @classmethod
    def scale(cls, curve: BezierCurve, d: float) -> BezierCurve:
        """
        Offset a simple curve by the fixed distance d.

        The end points move by d along their normals. Each inner control point
        moves to where the offset tangent ray from the neighbouring new end point
        meets the line from the scaling origin through the old control point. For
        quadratics only the start side is used, which determines the single
        control point. Straight curves are translated along their normal.

        Raises:
            InvalidCurveError: For 3D curves or orders above three.
            DegenerateGeometryError: If the end normals or a control ray are parallel.
        """
        cls._check_curve(curve)
        points = curve.points
        if curve.is_linear:
            return curve.with_points(points + d * curve.normal(0.0))

        order = curve.order
        o = cls._origin(curve)
        new_points = points.copy()
        new_points[0] = points[0] + d * curve.normal(0.0)
        new_points[order] = points[order] + d * curve.normal(1.0)

        # move control points to lie on the intersection of the offset
        # derivative vector, and the origin-through-control vector
        for t in (0, 1):
            if order == 2 and t == 1:
                break
            p = new_points[t * order]
            p2 = p + curve.tangent(float(t))
            control = GeomMath.line_intersection(p, p2, o, points[t + 1])
            if control is None:
                raise DegenerateGeometryError(f"Cannot place control point {t + 1} of the scaled curve")
            new_points[t + 1] = control
        return curve.with_points(new_points)

    @classmethod
    def scale_graduated(cls, curve: BezierCurve, distance_fn: DistanceFunction) -> BezierCurve:
        """
        Offset a simple curve by a distance varying along the curve.

        Quadratics are raised to cubics first. The end points move by distance_fn(0)
        and distance_fn(1) along their normals; the inner control points move
        radially away from the scaling origin by distance_fn(1/3) and
        distance_fn(2/3), mirrored for counter clockwise curves.
        """
        cls._check_curve(curve)
        if curve.order == 2:
            return cls.scale_graduated(curve.raise_order(), distance_fn)

        points = curve.points
        order = curve.order
        if curve.is_linear:
            n = curve.normal(0.0)
            offsets = np.array([distance_fn(i / order) for i in range(order + 1)], dtype=np.float64)
            return curve.with_points(points + offsets[:, None] * n)

        o = cls._origin(curve)
        r1 = distance_fn(0.0)
        r2 = distance_fn(1.0)
        new_points = points.copy()
        new_points[0] = points[0] + r1 * curve.normal(0.0)
        new_points[order] = points[order] + r2 * curve.normal(1.0)

        clockwise = curve.clockwise
        for t in (0, 1):
            p = points[t + 1]
            ov = p - o
            m = float(np.linalg.norm(ov))
            if m <= EPSILON:
                raise DegenerateGeometryError(f"Control point {t + 1} coincides with the scaling origin")
            rc = distance_fn((t + 1) / order)
            if not clockwise:
                rc = -rc
            new_points[t + 1] = p + rc * ov / m
        return curve.with_points(new_points)

    @classmethod
    def offset(cls, curve: BezierCurve, d: float) -> List[BezierCurve]:
        """
        Curves at distance d from the given curve.

        Straight curves give one translated curve. All others are reduced to simple
        segments which are scaled one by one. Returns an empty list if the curve
        cannot be reduced.
        """
        cls._check_curve(curve)
        if curve.is_linear:
            return [cls.scale(curve, d)]
        reduced = curve.reduce()
        if not reduced:
            logger.debug("Offset of %s is empty, curve cannot be reduced", curve)
        return [cls.scale(segment, d) for segment in reduced]

    @classmethod
    def outline(
        cls,
        curve: BezierCurve,
        d1: float,
        d2: Optional[float] = None,
        d3: Optional[float] = None,
        d4: Optional[float] = None,
    ) -> Outline:
        """
        Closed outline around a curve.

        Args:
            curve: The base curve.
            d1: Distance of the forward side (along the normal).
            d2: Distance of the back side, defaults to d1.
            d3: Forward distance at the end of a tapered outline.
            d4: Back distance at the end of a tapered outline.
                The outline is tapered only if d3 and d4 are both given.

        Returns:
            Outline [start cap, forward..., end cap, back...]

        Raises:
            DegenerateGeometryError: If the curve cannot be reduced.
        """
        cls._check_curve(curve)
        if d2 is None:
            d2 = d1
        graduated = d3 is not None and d4 is not None

        reduced = curve.reduce()
        if not reduced:
            raise DegenerateGeometryError(f"Cannot outline {curve}: it cannot be reduced to simple segments")

        fcurves: List[BezierCurve] = []
        bcurves: List[BezierCurve] = []
        tlen = curve.length()
        alen = 0.0
        for segment in reduced:
            slen = segment.length()
            if graduated:
                fcurves.append(cls.scale_graduated(segment, cls.linear_distance_function(d1, d3, tlen, alen, slen)))
                bcurves.append(cls.scale_graduated(segment, cls.linear_distance_function(-d2, -d4, tlen, alen, slen)))
            else:
                fcurves.append(cls.scale(segment, d1))
                bcurves.append(cls.scale(segment, -d2))
            alen += slen

        # reverse the "return" outline
        bcurves = [back.with_points(back.points[::-1]) for back in reversed(bcurves)]

        # form the endcaps as lines
        fs = fcurves[0].points[0]
        fe = fcurves[-1].points[-1]
        bs = bcurves[-1].points[-1]
        be = bcurves[0].points[0]
        start_cap = curve.line(bs, fs, curve.settings)
        end_cap = curve.line(fe, be, curve.settings)
        return Outline([start_cap, *fcurves, end_cap, *bcurves])

    @classmethod
    def outline_shapes(cls, curve: BezierCurve, d1: float, d2: Optional[float] = None) -> List[OutlineShape]:
        """One closed shape per simple segment, pairing forward curve i with its back curve."""
        outline = cls.outline(curve, d1, d2)
        count = len(outline)
        half = count // 2
        shapes: List[OutlineShape] = []
        for i in range(1, half):
            forward = outline[i]
            back = outline[count - i]
            shapes.append(
                OutlineShape(
                    start_cap=curve.line(back.points[-1], forward.points[0], curve.settings),
                    forward=forward,
                    end_cap=curve.line(forward.points[-1], back.points[0], curve.settings),
                    back=back,
                    start_virtual=i > 1,
                    end_virtual=i < half - 1,
                )
            )
        return shapes


def main():
    """Main"""


if __name__ == "__main__":
    main()
