"""Bezier curve model with evaluation, differential geometry and sampling."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from bezkit import arcs as arcs_module
from bezkit import intersect, offset, subdivide
from bezkit.common import (
    DEFAULT_SETTINGS,
    CurveSettings,
    DegenerateGeometryError,
    InvalidCurveError,
    LengthStrategy,
    PointLike,
    PointsLike,
    as_point,
    check_parameter,
)
from bezkit.consts import EPSILON, PROJECT_REFINE_FACTOR
from bezkit.geom import BoundingBox, GeomMath, LineSegment
from bezkit.length import ArcLength
from bezkit.polynomial import PolynomialSolver


###############################################################################
# LookupTable / Projection
###############################################################################


@dataclass(frozen=True)
class LookupTable:
    """
    Uniform samples (t, point) of a curve.

    Attributes:
        ts: Parameters, shape (steps + 1,)
        points: Curve points at ts, shape (steps + 1, dim)
    """

    ts: NDArray[np.float64]
    points: NDArray[np.float64]

    @property
    def steps(self) -> int:
        """int: number of intervals of the table."""
        return len(self.ts) - 1

    def __len__(self) -> int:
        return len(self.ts)

    def __iter__(self) -> Iterator[Tuple[float, NDArray[np.float64]]]:
        for t, point in zip(self.ts, self.points):
            yield float(t), point

    def __getitem__(self, index: int) -> Tuple[float, NDArray[np.float64]]:
        return float(self.ts[index]), self.points[index]


@dataclass(frozen=True)
class Projection:
    """
    Closest point on a curve to a query point.

    Attributes:
        point: The closest curve point
        t: Curve parameter of the closest point
        distance: Distance between query point and closest point
    """

    point: NDArray[np.float64]
    t: float
    distance: float


###############################################################################
# CurveCache
###############################################################################


class CurveCache:
    """Memoized derived data of one curve, invalidated through a version counter.

    Every mutation of the owning curve calls `invalidate()`, which bumps the
    version. Reads compare the version the entry was built for with the current
    one and rebuild on mismatch.
    """

    def __init__(self):
        self._version = 0
        self._hodograph: Optional[List[NDArray[np.float64]]] = None
        self._hodograph_version = -1
        self._luts: Dict[int, LookupTable] = {}
        self._lut_version = -1

    @property
    def version(self) -> int:
        """int: current version of the owning curve."""
        return self._version

    def invalidate(self) -> None:
        """Mark all cached data as stale."""
        self._version += 1

    def hodograph(self, builder) -> List[NDArray[np.float64]]:
        """Return the cached hodograph, building it with builder() if stale."""
        if self._hodograph is None or self._hodograph_version != self._version:
            self._hodograph = builder()
            self._hodograph_version = self._version
        return self._hodograph

    def lut(self, steps: int, builder) -> LookupTable:
        """Return the cached lookup table for steps, building it with builder(steps) if stale."""
        if self._lut_version != self._version:
            self._luts.clear()
            self._lut_version = self._version
        if steps not in self._luts:
            self._luts[steps] = builder(steps)
        return self._luts[steps]


###############################################################################
# BezierCurve
###############################################################################


class BezierCurve:
    """Polynomial Bezier curve of arbitrary order in 2D or 3D.

    The curve is defined by its control points. `order` is the number of
    points minus one. Sub-curves created by `split` and `reduce` remember the
    parameter range [t1, t2] they cover in the curve they were cut from, so
    repeated splitting keeps the original parametrization.

    Control points are exposed as a read-only array. Mutation goes through
    `set_point` or the `points` setter, both of which invalidate the cached
    hodograph and lookup table.
    """

    def __init__(
        self,
        points: PointsLike,
        settings: Optional[CurveSettings] = None,
        t1: float = 0.0,
        t2: float = 1.0,
    ):
        """
        Initialize a BezierCurve from control points.

        Args:
            points: a sequence of (x, y) or (x, y, z), at least two points.
            settings: tolerances and resolutions, DEFAULT_SETTINGS if None.
            t1: start of the covered range in the original curve.
            t2: end of the covered range in the original curve.
        """
        self._points = self._validate_points(points)
        self._points.flags.writeable = False
        self._settings = settings if settings is not None else DEFAULT_SETTINGS
        self._t1 = float(t1)
        self._t2 = float(t2)
        self._cache = CurveCache()

    @staticmethod
    def _validate_points(points: PointsLike) -> NDArray[np.float64]:
        try:
            arr = np.array(points, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise InvalidCurveError(f"points must be a sequence of equally sized points: {e}") from e
        if arr.ndim != 2:
            raise InvalidCurveError(f"points must have 2 dimensions, got {arr.ndim}")
        if arr.shape[0] < 2:
            raise InvalidCurveError(f"a curve needs at least 2 points, got {arr.shape[0]}")
        if arr.shape[1] not in (2, 3):
            raise InvalidCurveError(f"points must have shape (n, 2) or (n, 3), got {arr.shape}")
        if not np.all(np.isfinite(arr)):
            raise InvalidCurveError("points must be finite")
        return arr

    ###########################################################################
    # Factories
    ###########################################################################

    @classmethod
    def line(cls, p1: PointLike, p2: PointLike, settings: Optional[CurveSettings] = None) -> BezierCurve:
        """Create a linear curve from p1 to p2."""
        return cls([as_point(p1), as_point(p2)], settings)

    @staticmethod
    def _projection_ratio(t: float, n: int) -> float:
        if t in (0.0, 1.0):
            return t
        top = (1.0 - t) ** n
        bottom = t**n + top
        return top / bottom

    @staticmethod
    def _abc_ratio(t: float, n: int) -> float:
        if t in (0.0, 1.0):
            return t
        bottom = t**n + (1.0 - t) ** n
        top = bottom - 1.0
        return abs(top / bottom)

    @classmethod
    def _abc(
        cls, n: int, start: NDArray[np.float64], b: NDArray[np.float64], end: NDArray[np.float64], t: float
    ) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
        u = cls._projection_ratio(t, n)
        c = u * start + (1.0 - u) * end
        s = cls._abc_ratio(t, n)
        a = b + (b - c) / s
        return a, c

    @classmethod
    def quadratic_from_points(
        cls,
        p1: PointLike,
        p2: PointLike,
        p3: PointLike,
        t: float = 0.5,
        settings: Optional[CurveSettings] = None,
    ) -> BezierCurve:
        """Create the quadratic curve starting at p1, passing p2 at parameter t and ending at p3."""
        start, mid, end = as_point(p1), as_point(p2), as_point(p3)
        t = check_parameter(t)
        if t == 0.0:
            return cls([mid, mid, end], settings)
        if t == 1.0:
            return cls([start, mid, mid], settings)
        a, _ = cls._abc(2, start, mid, end, t)
        return cls([start, a, end], settings)

    @classmethod
    def cubic_from_points(
        cls,
        start: PointLike,
        mid: PointLike,
        end: PointLike,
        t: float = 0.5,
        d1: Optional[float] = None,
        settings: Optional[CurveSettings] = None,
    ) -> BezierCurve:
        """
        Create a cubic curve starting at start, passing mid at parameter t and ending at end.

        The tangent at mid is parallel to the chord start-end. d1 is the distance
        from mid to the first de Casteljau strut point; it defaults to the distance
        between mid and its projection onto the chord.

        Raises:
            InvalidCurveError: If t is not strictly inside (0, 1).
            DegenerateGeometryError: If start and end coincide.
        """
        s, b, e = as_point(start), as_point(mid), as_point(end)
        t = check_parameter(t)
        if t in (0.0, 1.0):
            raise InvalidCurveError("t must lie strictly inside (0, 1)")
        a, c = cls._abc(3, s, b, e, t)
        if d1 is None:
            d1 = GeomMath.distance(b, c)
        d2 = d1 * (1.0 - t) / t

        selen = GeomMath.distance(s, e)
        if selen <= EPSILON:
            raise DegenerateGeometryError("start and end point coincide")
        direction = (e - s) / selen

        # derivation of new hull coordinates
        e1 = b - d1 * direction
        e2 = b + d2 * direction
        v1 = a + (e1 - a) / (1.0 - t)
        v2 = a + (e2 - a) / t
        nc1 = s + (v1 - s) / t
        nc2 = e + (v2 - e) / (1.0 - t)
        return cls([s, nc1, nc2, e], settings)

    @classmethod
    def from_dict(cls, data: dict) -> BezierCurve:
        """Create a BezierCurve from a dictionary created by to_dict()."""
        settings_data = data.get("settings")
        settings = CurveSettings.from_dict(settings_data) if settings_data is not None else None
        return cls(
            data["points"],
            settings=settings,
            t1=data.get("t1", 0.0),
            t2=data.get("t2", 1.0),
        )

    def to_dict(self) -> dict:
        """Convert the curve to a dictionary."""
        return {
            "points": self._points.tolist(),
            "t1": self._t1,
            "t2": self._t2,
            "settings": self._settings.to_dict(),
        }

    def with_points(
        self, points: PointsLike, t1: Optional[float] = None, t2: Optional[float] = None
    ) -> BezierCurve:
        """Create a new curve sharing this curve's settings (and range unless given)."""
        return type(self)(
            points,
            settings=self._settings,
            t1=self._t1 if t1 is None else t1,
            t2=self._t2 if t2 is None else t2,
        )

    def copy(self) -> BezierCurve:
        """Independent copy of this curve."""
        return self.with_points(self._points.copy())

    ###########################################################################
    # Model
    ###########################################################################

    @property
    def points(self) -> NDArray[np.float64]:
        """
        The control points as a read-only numpy array of shape (order + 1, dim).
        """
        return self._points

    @points.setter
    def points(self, points: PointsLike) -> None:
        arr = self._validate_points(points)
        if arr.shape[1] != self.dim:
            raise InvalidCurveError(f"dimension is fixed to {self.dim}, got {arr.shape[1]}")
        arr.flags.writeable = False
        self._points = arr
        self._cache.invalidate()

    def set_point(self, index: int, point: PointLike) -> None:
        """Replace one control point, invalidating cached data."""
        pt = as_point(point)
        if pt.shape[0] != self.dim:
            raise InvalidCurveError(f"dimension is fixed to {self.dim}, got {pt.shape[0]}")
        arr = self._points.copy()
        arr[index] = pt
        arr.flags.writeable = False
        self._points = arr
        self._cache.invalidate()

    @property
    def order(self) -> int:
        """int: polynomial order (number of control points minus one)."""
        return self._points.shape[0] - 1

    @property
    def dim(self) -> int:
        """int: number of components per point, 2 or 3."""
        return self._points.shape[1]

    @property
    def settings(self) -> CurveSettings:
        """CurveSettings: tolerances used by this curve."""
        return self._settings

    @property
    def t1(self) -> float:
        """float: start of the covered range in the original curve."""
        return self._t1

    @property
    def t2(self) -> float:
        """float: end of the covered range in the original curve."""
        return self._t2

    @property
    def version(self) -> int:
        """int: bumped on every mutation of the control points."""
        return self._cache.version

    def _build_hodograph(self) -> List[NDArray[np.float64]]:
        levels: List[NDArray[np.float64]] = []
        p = self._points
        while p.shape[0] > 1:
            k = p.shape[0] - 1
            p = k * (p[1:] - p[:-1])
            p.flags.writeable = False
            levels.append(p)
        return levels

    @property
    def hodograph(self) -> List[NDArray[np.float64]]:
        """
        Control points of all derivatives.

        Entry i holds the control points of derivative i + 1, each level with one
        point less than its predecessor.
        """
        return self._cache.hodograph(self._build_hodograph)

    @property
    def is_linear(self) -> bool:
        """True if every control point lies on the chord from first to last point."""
        p0 = self._points[0]
        chord = self._points[-1] - p0
        scale = max(1.0, float(np.abs(self._points).max()))
        chord_len = float(np.linalg.norm(chord))
        offsets = self._points - p0
        if chord_len <= EPSILON * scale:
            return bool(np.all(np.linalg.norm(offsets, axis=1) <= 1e-9 * scale))
        if self.dim == 2:
            dist = np.abs(offsets[:, 0] * chord[1] - offsets[:, 1] * chord[0]) / chord_len
        else:
            dist = np.linalg.norm(np.cross(offsets, chord), axis=1) / chord_len
        return bool(np.all(dist <= 1e-9 * scale))

    @property
    def clockwise(self) -> bool:
        """True if the first control point turns clockwise off the chord (XY plane)."""
        return GeomMath.angle(self._points[0], self._points[-1], self._points[1]) > 0.0

    ###########################################################################
    # Evaluation
    ###########################################################################

    @staticmethod
    def _evaluate_points(points: NDArray[np.float64], t: float) -> NDArray[np.float64]:
        n = points.shape[0] - 1
        if n == 0 or t == 0.0:
            return points[0].copy()
        if t == 1.0:
            return points[n].copy()

        mt = 1.0 - t
        if n == 1:
            return mt * points[0] + t * points[1]
        if n == 2:
            return mt * mt * points[0] + 2.0 * mt * t * points[1] + t * t * points[2]
        if n == 3:
            mt2 = mt * mt
            t2 = t * t
            return mt2 * mt * points[0] + 3.0 * mt2 * t * points[1] + 3.0 * mt * t2 * points[2] + t2 * t * points[3]

        # higher order curves: de Casteljau
        dcpts = points.copy()
        while dcpts.shape[0] > 1:
            dcpts = dcpts[:-1] + (dcpts[1:] - dcpts[:-1]) * t
        return dcpts[0]

    @staticmethod
    def _evaluate_points_many(points: NDArray[np.float64], ts: NDArray[np.float64]) -> NDArray[np.float64]:
        n = points.shape[0] - 1
        if n == 0:
            return np.repeat(points[:1], len(ts), axis=0)
        # Bernstein weights, shape (len(ts), n + 1)
        i = np.arange(n + 1, dtype=np.float64)
        binom = np.array([math.comb(n, k) for k in range(n + 1)], dtype=np.float64)
        tt = ts[:, None]
        weights = binom * tt**i * (1.0 - tt) ** (n - i)
        result = weights @ points
        # exact end points
        result[ts == 0.0] = points[0]
        result[ts == 1.0] = points[n]
        return result

    def evaluate(self, t: float) -> NDArray[np.float64]:
        """
        Point on the curve at parameter t.

        t = 0 and t = 1 return the first and last control point exactly. Orders up to
        three use the Bernstein closed form, higher orders use de Casteljau.

        Raises:
            InvalidCurveError: If t is outside [0, 1].
        """
        return self._evaluate_points(self._points, check_parameter(t))

    def evaluate_many(self, ts: Union[Sequence[float], NDArray[np.float64]]) -> NDArray[np.float64]:
        """Vectorized evaluation, returns an array of shape (len(ts), dim)."""
        arr = np.asarray(ts, dtype=np.float64).reshape(-1)
        if arr.size and (arr.min() < 0.0 or arr.max() > 1.0 or not np.all(np.isfinite(arr))):
            raise InvalidCurveError("all parameters must be in [0, 1]")
        return self._evaluate_points_many(self._points, arr)

    def derivative(self, t: float, level: int = 1) -> NDArray[np.float64]:
        """Derivative vector of the given level at parameter t."""
        t = check_parameter(t)
        return self._derivative(t, level)

    def _derivative(self, t: float, level: int = 1) -> NDArray[np.float64]:
        if level < 1:
            raise InvalidCurveError(f"derivative level must be >= 1, got {level}")
        if level > self.order:
            return np.zeros(self.dim, dtype=np.float64)
        return self._evaluate_points(self.hodograph[level - 1], t)

    def derivative_many(self, ts: Union[Sequence[float], NDArray[np.float64]]) -> NDArray[np.float64]:
        """Vectorized first derivative, returns an array of shape (len(ts), dim)."""
        arr = np.asarray(ts, dtype=np.float64).reshape(-1)
        return self._evaluate_points_many(self.hodograph[0], arr)

    def _tangent_vector(self, t: float) -> NDArray[np.float64]:
        # Where the first derivative vanishes (coincident control points) the first
        # non-vanishing higher derivative gives the limit direction.
        scale = max(1.0, float(np.abs(self._points).max()))
        for level in range(1, self.order + 1):
            d = self._derivative(t, level)
            if float(np.linalg.norm(d)) > EPSILON * scale:
                if level > 1 and t >= 1.0 and (level - 1) % 2 == 1:
                    d = -d
                return d
        raise DegenerateGeometryError("tangent is undefined: all control points coincide")

    def _unit_tangent(self, t: float) -> NDArray[np.float64]:
        d = self._tangent_vector(t)
        return d / np.linalg.norm(d)

    def tangent(self, t: float) -> NDArray[np.float64]:
        """Unit tangent vector at parameter t."""
        return self._unit_tangent(check_parameter(t))

    def normal(self, t: float) -> NDArray[np.float64]:
        """
        Unit normal vector at parameter t.

        2D curves rotate the unit tangent by +90 degrees, i.e. (-dy, dx).

        3D curves approximate the normal from a finite difference frame: the unit
        tangents at t and t + epsilon span a plane whose normal c serves as the
        rotation axis; the tangent rotated by 90 degrees about c is the normal.
        The approximation degrades near inflection points of the space curve,
        where consecutive tangents become parallel.

        Raises:
            DegenerateGeometryError: If the tangent or the 3D frame is undefined.
        """
        t = check_parameter(t)
        r1 = self._unit_tangent(t)
        if self.dim == 2:
            return np.array([-r1[1], r1[0]], dtype=np.float64)

        r2 = self._unit_tangent(t + self._settings.normal_3d_epsilon)
        c = np.cross(r2, r1)
        m = float(np.linalg.norm(c))
        if m <= EPSILON:
            raise DegenerateGeometryError("3D normal is undefined where consecutive tangents are parallel")
        c = c / m
        rotation = np.outer(c, c) + np.array(
            [
                [0.0, -c[2], c[1]],
                [c[2], 0.0, -c[0]],
                [-c[1], c[0], 0.0],
            ],
            dtype=np.float64,
        )
        return rotation @ r1

    def curvature(self, t: float) -> float:
        """
        Curvature at parameter t, signed for 2D curves (positive for left turns).

        Raises:
            DegenerateGeometryError: If the first derivative vanishes at t.
        """
        t = check_parameter(t)
        d = self._derivative(t, 1)
        dd = self._derivative(t, 2)
        speed = float(np.linalg.norm(d))
        if speed <= EPSILON:
            raise DegenerateGeometryError("curvature is undefined where the derivative vanishes")
        if self.dim == 2:
            num = float(d[0] * dd[1] - d[1] * dd[0])
        else:
            num = float(np.linalg.norm(np.cross(d, dd)))
        return num / speed**3

    def inflections(self) -> List[float]:
        """
        Parameters of inflection points of a 2D curve up to cubic order.

        Inflections are the zeros of cross(B'(t), B''(t)), which is a polynomial
        of degree two for cubic curves and constant otherwise.
        """
        if self.dim != 2 or self.order > 3:
            raise InvalidCurveError("inflections are computed for 2D curves up to cubic order")
        if self.order < 3:
            return []

        def cross(t: float) -> float:
            d = self._derivative(t, 1)
            dd = self._derivative(t, 2)
            return float(d[0] * dd[1] - d[1] * dd[0])

        f0, fh, f1 = cross(0.0), cross(0.5), cross(1.0)
        a = 2.0 * f0 - 4.0 * fh + 2.0 * f1
        b = 4.0 * fh - 3.0 * f0 - f1
        return PolynomialSolver.in_unit_interval(PolynomialSolver.solve_quadratic(a, b, f0))

    def hull(self, t: float) -> List[NDArray[np.float64]]:
        """All de Casteljau levels at t, from the control points down to the curve point."""
        return subdivide.Subdivider.hull(self._points, check_parameter(t))

    def raise_order(self) -> BezierCurve:
        """Equivalent curve with one more control point (degree elevation)."""
        p = self._points
        k = p.shape[0]
        i = np.arange(1, k, dtype=np.float64)[:, None]
        middle = ((k - i) / k) * p[1:] + (i / k) * p[:-1]
        return self.with_points(np.vstack([p[:1], middle, p[-1:]]))

    ###########################################################################
    # Lookup table, length and projection
    ###########################################################################

    def _build_lut(self, steps: int) -> LookupTable:
        ts = np.linspace(0.0, 1.0, steps + 1)
        points = self._evaluate_points_many(self._points, ts)
        ts.flags.writeable = False
        points.flags.writeable = False
        return LookupTable(ts, points)

    def lut(self, steps: Optional[int] = None) -> LookupTable:
        """
        Uniform lookup table with steps + 1 samples (default from settings).

        The table is cached and rebuilt only if steps differ from the cached one or
        the control points changed.
        """
        steps = self._settings.lut_steps if steps is None else int(steps)
        if steps < 1:
            raise InvalidCurveError(f"steps must be at least 1, got {steps}")
        return self._cache.lut(steps, self._build_lut)

    def length(self, strategy: LengthStrategy = LengthStrategy.GAUSS_LEGENDRE, steps: Optional[int] = None) -> float:
        """
        Arc length of the curve.

        GAUSS_LEGENDRE integrates the speed with 24-point quadrature (default).
        POLYLINE sums the chords of the lookup table with the given steps, a
        cheaper approximation that always underestimates the length.
        """
        return ArcLength.compute(self, strategy, steps)

    def project(self, point: PointLike) -> Projection:
        """
        Closest point of the curve to the given point.

        A coarse scan of a fine lookup table finds the nearest sample. If that
        sample is an interior one, the neighbouring interval is swept with a step
        of one tenth of the table resolution.
        """
        pt = as_point(point)
        if pt.shape[0] != self.dim:
            raise InvalidCurveError(f"point must have {self.dim} components, got {pt.shape[0]}")

        table = self.lut(self._settings.project_lut_steps)
        last = table.steps
        distances = np.linalg.norm(table.points - pt, axis=1)
        mpos = int(np.argmin(distances))
        mdist = float(distances[mpos])
        best_t = mpos / last
        if mpos in (0, last):
            return Projection(self.evaluate(best_t), best_t, mdist)

        t1 = (mpos - 1) / last
        t2 = (mpos + 1) / last
        step = PROJECT_REFINE_FACTOR / last
        count = int(round((t2 - t1) / step))
        ts = np.linspace(t1, t2, count + 1)
        fine = np.linalg.norm(self._evaluate_points_many(self._points, ts) - pt, axis=1)
        idx = int(np.argmin(fine))
        if float(fine[idx]) < mdist:
            best_t = float(ts[idx])
            mdist = float(fine[idx])
        return Projection(self.evaluate(best_t), best_t, mdist)

    def on(self, point: PointLike, epsilon: float) -> Optional[float]:
        """Average parameter of lookup table samples closer than epsilon to point, None if none."""
        pt = as_point(point)
        table = self.lut(self._settings.project_lut_steps)
        hits = np.linalg.norm(table.points - pt, axis=1) < epsilon
        if not np.any(hits):
            return None
        return float(table.ts[hits].mean())

    ###########################################################################
    # Subdivision
    ###########################################################################

    def split(self, t1: float, t2: Optional[float] = None) -> Union[Tuple[BezierCurve, BezierCurve], BezierCurve]:
        """
        Split the curve.

        With only t1, returns (left, right) covering [0, t1] and [t1, 1]. With t2,
        returns the single sub-curve covering [t1, t2]. Sub-curves carry their range
        mapped into the original curve's parameter space.
        """
        return subdivide.Subdivider.split(self, t1, t2)

    def extrema(self) -> subdivide.Extrema:
        """Parameters where a coordinate has a derivative root, per axis and combined."""
        return subdivide.Subdivider.extrema(self)

    def bounding_box(self) -> BoundingBox:
        """Tight axis aligned bounding box."""
        return subdivide.Subdivider.bounding_box(self)

    def overlaps(self, other: BezierCurve) -> bool:
        """True if the bounding boxes of both curves overlap."""
        return self.bounding_box().overlaps(other.bounding_box())

    def is_simple(self) -> bool:
        """True if the curve is simple, i.e. safe to offset."""
        return subdivide.Subdivider.is_simple(self)

    def reduce(self) -> List[BezierCurve]:
        """Split the curve into simple segments, empty if no reduction can be formed."""
        return subdivide.Subdivider.reduce(self)

    ###########################################################################
    # Offsetting
    ###########################################################################

    def offset_point(self, t: float, d: float) -> offset.OffsetPoint:
        """Point at t moved by d along the normal."""
        return offset.OffsetBuilder.offset_point(self, t, d)

    def offset(self, d: float) -> List[BezierCurve]:
        """Curves running parallel to this curve at distance d."""
        return offset.OffsetBuilder.offset(self, d)

    def scale(self, d: float) -> BezierCurve:
        """Offset a simple curve by d, see OffsetBuilder.scale."""
        return offset.OffsetBuilder.scale(self, d)

    def outline(
        self, d1: float, d2: Optional[float] = None, d3: Optional[float] = None, d4: Optional[float] = None
    ) -> offset.Outline:
        """Closed outline around the curve, optionally tapered with d3/d4."""
        return offset.OffsetBuilder.outline(self, d1, d2, d3, d4)

    def outline_shapes(self, d1: float, d2: Optional[float] = None) -> List[offset.OutlineShape]:
        """One closed shape per simple segment of the outline."""
        return offset.OffsetBuilder.outline_shapes(self, d1, d2)

    ###########################################################################
    # Intersections and arcs
    ###########################################################################

    def intersect(
        self, other: Union[None, BezierCurve, LineSegment, Sequence[PointLike]] = None
    ) -> Union[intersect.IntersectionResultSet, List[intersect.LineIntersection]]:
        """
        Intersections with another curve, a line or (without argument) with itself.

        Returns an IntersectionResultSet for curves and a list of LineIntersection
        for lines.
        """
        if other is None:
            return intersect.IntersectionEngine.self_intersections(self)
        if isinstance(other, BezierCurve):
            return intersect.IntersectionEngine.curve_intersections(self, other)
        return intersect.IntersectionEngine.line_intersections(self, LineSegment.from_value(other))

    def arcs(self, tolerance: Optional[float] = None) -> arcs_module.ArcApproximation:
        """Approximate the curve by circular arcs deviating less than tolerance."""
        return arcs_module.ArcApproximator.approximate(self, tolerance)

    ###########################################################################
    # Comparison
    ###########################################################################

    def approx_equal(self, other: BezierCurve, rtol: float = 1e-9, atol: float = 1e-12) -> bool:
        """True if both curves have the same shape of control points within tolerance."""
        if not isinstance(other, BezierCurve) or self._points.shape != other.points.shape:
            return False
        return bool(np.allclose(self._points, other.points, rtol=rtol, atol=atol))

    def __eq__(self, other) -> bool:
        if not isinstance(other, BezierCurve):
            return NotImplemented
        return self._points.shape == other.points.shape and bool(np.array_equal(self._points, other.points))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"BezierCurve(order={self.order}, points={self._points.tolist()}, t1={self._t1}, t2={self._t2})"


def main():
    """Main"""


if __name__ == "__main__":
    main()
