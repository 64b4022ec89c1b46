"""Handling geometries: intervals, bounding boxes, line segments and planar helpers"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from bezkit.common import DegenerateGeometryError, InvalidCurveError, PointLike, PointsLike, as_point
from bezkit.consts import EPSILON


###############################################################################
# GeomMath
###############################################################################
class GeomMath:
    """Class to provide various static methods related to geometry handling."""

    @staticmethod
    def lerp(a: NDArray[np.float64], b: NDArray[np.float64], t: float) -> NDArray[np.float64]:
        """Linear interpolation between a and b."""
        return a + (b - a) * t

    @staticmethod
    def map_range(value: float, ds: float, de: float, ts: float, te: float) -> float:
        """Map value from the interval [ds, de] onto [ts, te]."""
        return ts + (te - ts) * ((value - ds) / (de - ds))

    @staticmethod
    def distance(a: NDArray[np.float64], b: NDArray[np.float64]) -> float:
        """Euclidean distance between two points."""
        return float(np.linalg.norm(np.asarray(b, dtype=np.float64) - np.asarray(a, dtype=np.float64)))

    @staticmethod
    def angle(o: NDArray[np.float64], v1: NDArray[np.float64], v2: NDArray[np.float64]) -> float:
        """
        Signed angle between the vectors o->v1 and o->v2, measured in the XY plane.

        Args:
            o: The common origin
            v1: End of the first vector
            v2: End of the second vector

        Returns:
            float: angle in radians within [-pi, pi]
        """
        dx1 = v1[0] - o[0]
        dy1 = v1[1] - o[1]
        dx2 = v2[0] - o[0]
        dy2 = v2[1] - o[1]
        cross = dx1 * dy2 - dy1 * dx2
        dot = dx1 * dx2 + dy1 * dy2
        return float(math.atan2(cross, dot))

    @staticmethod
    def line_intersection(
        p1: NDArray[np.float64],
        p2: NDArray[np.float64],
        p3: NDArray[np.float64],
        p4: NDArray[np.float64],
    ) -> Optional[NDArray[np.float64]]:
        """
        Intersection of the infinite lines through (p1, p2) and (p3, p4) in the XY plane.

        Returns:
            The intersection point (2 components) or None if the lines are parallel.
        """
        x1, y1 = float(p1[0]), float(p1[1])
        x2, y2 = float(p2[0]), float(p2[1])
        x3, y3 = float(p3[0]), float(p3[1])
        x4, y4 = float(p4[0]), float(p4[1])
        d = (x1 - x2) * (y3 - y4) - (y1 - y2) * (x3 - x4)
        scale = max(abs(x1 - x2), abs(y1 - y2), 1.0) * max(abs(x3 - x4), abs(y3 - y4), 1.0)
        if abs(d) <= EPSILON * scale:
            return None
        a = x1 * y2 - y1 * x2
        b = x3 * y4 - y3 * x4
        nx = a * (x3 - x4) - (x1 - x2) * b
        ny = a * (y3 - y4) - (y1 - y2) * b
        return np.array([nx / d, ny / d], dtype=np.float64)

    @staticmethod
    def align(points: NDArray[np.float64], line: LineSegment) -> NDArray[np.float64]:
        """
        Translate and rotate 2D points so that the given line lies on the positive X axis.

        The first point of the line becomes the origin. A point lying on the line
        therefore ends up with a Y component of zero.

        Raises:
            DegenerateGeometryError: If the line has zero length.
        """
        if line.dim != 2 or points.shape[1] != 2:
            raise InvalidCurveError("Alignment is only defined for 2D points and lines")
        if line.length <= EPSILON:
            raise DegenerateGeometryError("Cannot align to a zero-length line")
        tx, ty = line.p1
        dx, dy = line.p2 - line.p1
        a = -math.atan2(dy, dx)
        cos_a = math.cos(a)
        sin_a = math.sin(a)
        shifted = points - np.array([tx, ty], dtype=np.float64)
        rotation = np.array([[cos_a, sin_a], [-sin_a, cos_a]], dtype=np.float64)
        return shifted @ rotation

    @staticmethod
    def circle_through_points(
        p1: NDArray[np.float64], p2: NDArray[np.float64], p3: NDArray[np.float64]
    ) -> Optional[Tuple[NDArray[np.float64], float, float, float]]:
        """
        Circle through three points with start/end angles running over the middle point.

        The center is found by intersecting the perpendicular bisectors of the chords
        p1-p2 and p2-p3. The angles are corrected so that start < end and the arc
        from start to end passes through p2.

        Returns:
            Tuple (center, radius, start_angle, end_angle) or None if the points are collinear.
        """
        quart = math.pi / 2.0
        cos_q = math.cos(quart)
        sin_q = math.sin(quart)
        dx1, dy1 = p2[0] - p1[0], p2[1] - p1[1]
        dx2, dy2 = p3[0] - p2[0], p3[1] - p2[1]
        dx1p = dx1 * cos_q - dy1 * sin_q
        dy1p = dx1 * sin_q + dy1 * cos_q
        dx2p = dx2 * cos_q - dy2 * sin_q
        dy2p = dx2 * sin_q + dy2 * cos_q

        # chord midpoints and their perpendicular offsets
        m1 = np.array([(p1[0] + p2[0]) * 0.5, (p1[1] + p2[1]) * 0.5], dtype=np.float64)
        m2 = np.array([(p2[0] + p3[0]) * 0.5, (p2[1] + p3[1]) * 0.5], dtype=np.float64)
        m1n = m1 + np.array([dx1p, dy1p], dtype=np.float64)
        m2n = m2 + np.array([dx2p, dy2p], dtype=np.float64)

        center = GeomMath.line_intersection(m1, m1n, m2, m2n)
        if center is None:
            return None
        radius = GeomMath.distance(center, p1[:2])

        s = math.atan2(p1[1] - center[1], p1[0] - center[0])
        m = math.atan2(p2[1] - center[1], p2[0] - center[0])
        e = math.atan2(p3[1] - center[1], p3[0] - center[0])
        tau = 2.0 * math.pi

        # cw/ccw correction so that the arc runs over the middle point
        if s < e:
            if s > m or m > e:
                s += tau
            if s > e:
                s, e = e, s
        else:
            if e < m < s:
                s, e = e, s
            else:
                e += tau
        return center, radius, s, e


###############################################################################
# Interval
###############################################################################
@dataclass(frozen=True)
class Interval:
    """
    Closed interval [min, max] of one axis.

    Attributes:
        min (float): lower bound
        max (float): upper bound
    """

    min: float
    max: float

    @property
    def mid(self) -> float:
        """float: center of the interval."""
        return (self.min + self.max) / 2.0

    @property
    def size(self) -> float:
        """float: length of the interval."""
        return self.max - self.min

    def contains(self, value: float, tolerance: float = 0.0) -> bool:
        """True if value lies within [min - tolerance, max + tolerance]."""
        return self.min - tolerance <= value <= self.max + tolerance

    def overlaps(self, other: Interval, tolerance: float = 0.0) -> bool:
        """True if both intervals overlap; merely touching intervals count only with tolerance > 0."""
        return abs(self.mid - other.mid) < (self.size + other.size) / 2.0 + tolerance

    def union(self, other: Interval) -> Interval:
        """Smallest interval containing both intervals."""
        return Interval(min(self.min, other.min), max(self.max, other.max))

    def to_dict(self) -> dict:
        """Convert the interval to a dictionary (min, mid, max, size)."""
        return {"min": self.min, "mid": self.mid, "max": self.max, "size": self.size}


###############################################################################
# BoundingBox
###############################################################################
@dataclass(frozen=True)
class BoundingBox:
    """
    Axis aligned box described by one Interval per axis (2 or 3 axes).

    Attributes:
        axes (Tuple[Interval, ...]): intervals of x, y and optionally z
    """

    axes: Tuple[Interval, ...]

    def __post_init__(self):
        if len(self.axes) not in (2, 3):
            raise InvalidCurveError(f"BoundingBox needs 2 or 3 axes, got {len(self.axes)}")

    @classmethod
    def from_points(cls, points: PointsLike) -> BoundingBox:
        """Create the tightest box around the given points."""
        arr = np.asarray(points, dtype=np.float64)
        if arr.ndim != 2 or arr.shape[0] == 0 or arr.shape[1] not in (2, 3):
            raise InvalidCurveError(f"points must have shape (n, 2) or (n, 3), got {arr.shape}")
        mins = arr.min(axis=0)
        maxs = arr.max(axis=0)
        return cls(tuple(Interval(float(lo), float(hi)) for lo, hi in zip(mins, maxs)))

    @classmethod
    def union_all(cls, boxes: Sequence[BoundingBox]) -> BoundingBox:
        """Smallest box containing all given boxes."""
        if not boxes:
            raise InvalidCurveError("At least one bounding box is required")
        result = boxes[0]
        for box in boxes[1:]:
            result = result.union(box)
        return result

    @property
    def dim(self) -> int:
        """int: number of axes."""
        return len(self.axes)

    @property
    def x(self) -> Interval:
        """Interval: x axis."""
        return self.axes[0]

    @property
    def y(self) -> Interval:
        """Interval: y axis."""
        return self.axes[1]

    @property
    def z(self) -> Optional[Interval]:
        """Optional[Interval]: z axis of 3D boxes, None for 2D boxes."""
        return self.axes[2] if len(self.axes) == 3 else None

    @property
    def xmin(self) -> float:
        """float: The minimum x-coordinate."""
        return self.x.min

    @property
    def ymin(self) -> float:
        """float: The minimum y-coordinate."""
        return self.y.min

    @property
    def xmax(self) -> float:
        """float: The maximum x-coordinate."""
        return self.x.max

    @property
    def ymax(self) -> float:
        """float: The maximum y-coordinate."""
        return self.y.max

    @property
    def width(self) -> float:
        """float: The width of the box (difference between xmax and xmin)."""
        return self.x.size

    @property
    def height(self) -> float:
        """float: The height of the box (difference between ymax and ymin)."""
        return self.y.size

    @property
    def extent_sum(self) -> float:
        """float: sum of all axis sizes, used as a convergence measure."""
        return float(sum(axis.size for axis in self.axes))

    @property
    def centroid(self) -> Tuple[float, ...]:
        """The centroid of the box, one coordinate per axis."""
        return tuple(axis.mid for axis in self.axes)

    def __iter__(self) -> Iterator[Interval]:
        return iter(self.axes)

    def overlaps(self, other: BoundingBox, tolerance: float = 0.0) -> bool:
        """True if the boxes overlap on every shared axis."""
        return all(a.overlaps(b, tolerance) for a, b in zip(self.axes, other.axes))

    def union(self, other: BoundingBox) -> BoundingBox:
        """Smallest box containing both boxes."""
        return BoundingBox(tuple(a.union(b) for a, b in zip(self.axes, other.axes)))

    def contains_point(self, point: PointLike, tolerance: float = 1e-9) -> bool:
        """True if the point lies inside the box (with tolerance)."""
        pt = as_point(point)
        return all(axis.contains(float(v), tolerance) for axis, v in zip(self.axes, pt))

    def to_dict(self) -> dict:
        """Convert the box to a dictionary keyed by axis name."""
        return {name: axis.to_dict() for name, axis in zip("xyz", self.axes)}

    @classmethod
    def from_dict(cls, data: dict) -> BoundingBox:
        """Create a BoundingBox from a dictionary created by to_dict()."""
        axes: List[Interval] = []
        for name in "xyz":
            if name in data:
                axes.append(Interval(float(data[name]["min"]), float(data[name]["max"])))
        return cls(tuple(axes))

    def __str__(self):
        """Returns a string representation of the BoundingBox instance."""
        parts = ", ".join(f"{name}=({axis.min}, {axis.max})" for name, axis in zip("xyz", self.axes))
        return f"BoundingBox({parts})"


###############################################################################
# LineSegment
###############################################################################
@dataclass(frozen=True)
class LineSegment:
    """
    Straight segment between two points of equal dimension.

    Attributes:
        p1 (NDArray): start point
        p2 (NDArray): end point
    """

    p1: NDArray[np.float64]
    p2: NDArray[np.float64]

    def __init__(self, p1: PointLike, p2: PointLike):
        start = as_point(p1)
        end = as_point(p2)
        if start.shape != end.shape:
            raise InvalidCurveError("Line end points must have the same dimension")
        object.__setattr__(self, "p1", start)
        object.__setattr__(self, "p2", end)

    @classmethod
    def from_value(cls, value) -> LineSegment:
        """Accept a LineSegment or a sequence of two points."""
        if isinstance(value, LineSegment):
            return value
        try:
            p1, p2 = value
        except (TypeError, ValueError) as e:
            raise InvalidCurveError("A line must be given as LineSegment or two points") from e
        return cls(p1, p2)

    @property
    def dim(self) -> int:
        """int: number of components of the end points."""
        return int(self.p1.shape[0])

    @property
    def length(self) -> float:
        """float: length of the segment."""
        return GeomMath.distance(self.p1, self.p2)

    @property
    def bounding_box(self) -> BoundingBox:
        """BoundingBox: box spanned by both end points."""
        return BoundingBox.from_points(np.vstack([self.p1, self.p2]))

    def __eq__(self, other) -> bool:
        if not isinstance(other, LineSegment):
            return NotImplemented
        return bool(np.array_equal(self.p1, other.p1) and np.array_equal(self.p2, other.p2))

    def __hash__(self) -> int:
        return hash((tuple(self.p1.tolist()), tuple(self.p2.tolist())))


def main():
    """Main"""


if __name__ == "__main__":
    main()
