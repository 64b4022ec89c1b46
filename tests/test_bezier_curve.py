"""Test module for the BezierCurve model in bezkit.bezier

The tests are run using pytest.
These tests cover construction, evaluation, derivatives, normals,
factories and the cached derived data of BezierCurve.
"""

import math

import numpy as np
import pytest

from bezkit.bezier import BezierCurve
from bezkit.common import DegenerateGeometryError, InvalidCurveError
from bezkit.intersect import IntersectionResultSet, LineIntersection

CUBIC = [(0.0, 0.0), (0.0, 1.0), (1.0, 1.0), (1.0, 0.0)]
QUADRATIC = [(0.0, 0.0), (1.0, 2.0), (2.0, 0.0)]

###############################################################################
# Construction
###############################################################################


class TestConstruction:
    """Test validation of control points."""

    def test_order_and_dim(self):
        """Test order and dimension of 2D and 3D curves."""
        curve = BezierCurve(CUBIC)
        assert curve.order == 3
        assert curve.dim == 2
        curve3d = BezierCurve([(0.0, 0.0, 0.0), (1.0, 1.0, 1.0)])
        assert curve3d.order == 1
        assert curve3d.dim == 3

    @pytest.mark.parametrize(
        "points",
        [
            [(0.0, 0.0)],
            [(0.0, 0.0, 0.0, 0.0), (1.0, 1.0, 1.0, 1.0)],
            [(0.0, math.nan), (1.0, 1.0)],
            [(0.0, 0.0), (1.0,)],
            [0.0, 1.0, 2.0],
        ],
    )
    def test_invalid_points(self, points):
        """Test that malformed points raise InvalidCurveError, which is a ValueError."""
        with pytest.raises(InvalidCurveError):
            BezierCurve(points)
        with pytest.raises(ValueError):
            BezierCurve(points)

    def test_input_is_copied(self):
        """Test that later changes of the input do not affect the curve."""
        points = np.array(CUBIC, dtype=np.float64)
        curve = BezierCurve(points)
        points[0] = [5.0, 5.0]
        assert np.allclose(curve.points[0], [0.0, 0.0])


###############################################################################
# Evaluation
###############################################################################


class TestEvaluation:
    """Test point evaluation."""

    def test_cubic_midpoint(self):
        """Test the cubic (0,0),(0,1),(1,1),(1,0) at t = 0.5."""
        assert np.allclose(BezierCurve(CUBIC).evaluate(0.5), [0.5, 0.75])

    def test_exact_end_points(self):
        """Test that t = 0 and t = 1 return the end points exactly."""
        points = [(0.1, 0.2), (0.3, 0.7), (0.9, 0.4), (1.3, 0.35), (2.7, 1.1)]
        curve = BezierCurve(points)
        assert np.array_equal(curve.evaluate(0.0), np.array(points[0]))
        assert np.array_equal(curve.evaluate(1.0), np.array(points[-1]))
        many = curve.evaluate_many([0.0, 0.5, 1.0])
        assert np.array_equal(many[0], np.array(points[0]))
        assert np.array_equal(many[-1], np.array(points[-1]))

    def test_out_of_range_parameter(self):
        """Test that parameters outside [0, 1] are rejected."""
        curve = BezierCurve(CUBIC)
        with pytest.raises(InvalidCurveError):
            curve.evaluate(1.5)
        with pytest.raises(InvalidCurveError):
            curve.evaluate_many([0.0, -0.1])

    def test_higher_order_matches_vectorized(self):
        """Test that de Casteljau and the Bernstein matrix agree for order 5."""
        curve = BezierCurve([(0.0, 0.0), (1.0, 3.0), (2.0, -1.0), (3.0, 4.0), (4.0, 0.0), (5.0, 2.0)])
        ts = np.linspace(0.0, 1.0, 11)
        expected = np.array([curve.evaluate(t) for t in ts])
        assert np.allclose(curve.evaluate_many(ts), expected)

    def test_raise_order_keeps_shape(self):
        """Test that degree elevation does not change the curve."""
        curve = BezierCurve(QUADRATIC)
        raised = curve.raise_order()
        assert raised.order == 3
        assert np.allclose(raised.points, [(0.0, 0.0), (2.0 / 3.0, 4.0 / 3.0), (4.0 / 3.0, 4.0 / 3.0), (2.0, 0.0)])
        for t in (0.1, 0.5, 0.8):
            assert np.allclose(raised.evaluate(t), curve.evaluate(t))

    def test_hull_levels(self):
        """Test the de Casteljau levels of a quadratic."""
        curve = BezierCurve(QUADRATIC)
        levels = curve.hull(0.5)
        assert [len(level) for level in levels] == [3, 2, 1]
        assert np.allclose(levels[-1][0], curve.evaluate(0.5))


###############################################################################
# Derivatives, normals, curvature
###############################################################################


class TestDerivatives:
    """Test hodograph, derivatives, tangents and normals."""

    def test_hodograph(self):
        """Test derivative control points of a cubic."""
        curve = BezierCurve(CUBIC)
        hodograph = curve.hodograph
        assert [len(level) for level in hodograph] == [3, 2, 1]
        assert np.allclose(hodograph[0], [(0.0, 3.0), (3.0, 0.0), (0.0, -3.0)])
        assert np.allclose(curve.derivative(0.0), [0.0, 3.0])
        assert np.allclose(curve.derivative(0.5, level=4), [0.0, 0.0])

    def test_line_normal(self):
        """Test tangent and normal of a horizontal line."""
        line = BezierCurve.line((0.0, 0.0), (10.0, 0.0))
        assert np.allclose(line.tangent(0.3), [1.0, 0.0])
        assert np.allclose(line.normal(0.3), [0.0, 1.0])

    def test_tangent_at_coincident_start(self):
        """Test the limit tangent where the first control point repeats the start."""
        curve = BezierCurve([(0.0, 0.0), (0.0, 0.0), (1.0, 1.0), (2.0, 0.0)])
        s = math.sqrt(0.5)
        assert np.allclose(curve.tangent(0.0), [s, s])
        assert np.allclose(curve.normal(0.0), [-s, s])

    def test_tangent_at_coincident_end(self):
        """Test the limit tangent where the last control point repeats the end."""
        curve = BezierCurve([(0.0, 0.0), (1.0, 1.0), (2.0, 0.0), (2.0, 0.0)])
        s = math.sqrt(0.5)
        assert np.allclose(curve.tangent(1.0), [s, -s])

    def test_tangent_of_point_curve(self):
        """Test that coincident control points have no tangent."""
        curve = BezierCurve([(1.0, 1.0), (1.0, 1.0), (1.0, 1.0)])
        with pytest.raises(DegenerateGeometryError):
            curve.tangent(0.5)

    def test_normal_3d(self):
        """Test that the 3D normal is a unit vector perpendicular to the tangent."""
        curve = BezierCurve([(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (1.0, 1.0, 0.0), (1.0, 1.0, 1.0)])
        n = curve.normal(0.5)
        assert np.linalg.norm(n) == pytest.approx(1.0)
        assert float(np.dot(n, curve.tangent(0.5))) == pytest.approx(0.0, abs=1e-9)

    def test_normal_3d_straight(self):
        """Test that a straight 3D curve has no finite difference frame."""
        curve = BezierCurve([(0.0, 0.0, 0.0), (1.0, 1.0, 1.0)])
        with pytest.raises(DegenerateGeometryError):
            curve.normal(0.5)

    def test_curvature(self):
        """Test signed curvature at the apex of a parabola."""
        curve = BezierCurve(QUADRATIC)
        assert curve.curvature(0.5) == pytest.approx(-2.0)
        assert BezierCurve.line((0.0, 0.0), (1.0, 0.0)).curvature(0.5) == pytest.approx(0.0)

    def test_inflections(self):
        """Test the inflection of a point symmetric S-curve."""
        curve = BezierCurve([(0.0, 0.0), (1.0, 1.0), (2.0, -1.0), (3.0, 0.0)])
        assert curve.inflections() == [pytest.approx(0.5)]
        assert BezierCurve(QUADRATIC).inflections() == []
        with pytest.raises(InvalidCurveError):
            BezierCurve([(0.0, 0.0, 0.0), (1.0, 1.0, 1.0)]).inflections()


###############################################################################
# Factories
###############################################################################


class TestFactories:
    """Test curves created from points on the curve."""

    def test_line(self):
        """Test the linear factory."""
        line = BezierCurve.line((0.0, 0.0), (1.0, 2.0))
        assert line.order == 1
        assert line.is_linear

    def test_quadratic_from_points(self):
        """Test that the quadratic passes the middle point at t."""
        curve = BezierCurve.quadratic_from_points((0.0, 0.0), (1.0, 1.0), (2.0, 0.0))
        assert np.allclose(curve.points[1], [1.0, 2.0])
        assert np.allclose(curve.evaluate(0.5), [1.0, 1.0])
        skewed = BezierCurve.quadratic_from_points((0.0, 0.0), (1.0, 1.0), (3.0, 0.0), t=0.3)
        assert np.allclose(skewed.evaluate(0.3), [1.0, 1.0])

    def test_cubic_from_points(self):
        """Test that the cubic passes the middle point at t."""
        curve = BezierCurve.cubic_from_points((0.0, 0.0), (1.0, 1.0), (2.0, 0.0))
        assert curve.order == 3
        assert np.allclose(curve.points, [(0.0, 0.0), (-2.0, 4.0 / 3.0), (4.0, 4.0 / 3.0), (2.0, 0.0)])
        assert np.allclose(curve.evaluate(0.5), [1.0, 1.0])

    def test_cubic_from_points_errors(self):
        """Test end parameters and coincident end points."""
        with pytest.raises(InvalidCurveError):
            BezierCurve.cubic_from_points((0.0, 0.0), (1.0, 1.0), (2.0, 0.0), t=0.0)
        with pytest.raises(DegenerateGeometryError):
            BezierCurve.cubic_from_points((0.0, 0.0), (1.0, 1.0), (0.0, 0.0))


###############################################################################
# Model, cache and comparison
###############################################################################


class TestModel:
    """Test read-only points, mutation and caches."""

    def test_points_are_read_only(self):
        """Test that the exposed points cannot be modified."""
        curve = BezierCurve(CUBIC)
        assert not curve.points.flags.writeable
        with pytest.raises(ValueError, match="read-only"):
            curve.points[0, 0] = 5.0

    def test_set_point_invalidates_caches(self):
        """Test that mutation bumps the version and rebuilds cached data."""
        curve = BezierCurve(CUBIC)
        lut = curve.lut(10)
        hodograph = curve.hodograph
        assert curve.lut(10) is lut
        assert curve.hodograph is hodograph

        version = curve.version
        curve.set_point(1, (0.0, 2.0))
        assert curve.version == version + 1
        assert curve.lut(10) is not lut
        assert curve.hodograph is not hodograph
        assert np.allclose(curve.hodograph[0][0], [0.0, 6.0])
        assert not curve.points.flags.writeable

    def test_points_setter(self):
        """Test replacing all points, dimension is fixed."""
        curve = BezierCurve(CUBIC)
        curve.points = QUADRATIC
        assert curve.order == 2
        with pytest.raises(InvalidCurveError):
            curve.points = [(0.0, 0.0, 0.0), (1.0, 1.0, 1.0)]
        with pytest.raises(InvalidCurveError):
            curve.set_point(0, (1.0, 1.0, 1.0))

    def test_copy_is_independent(self):
        """Test that copies do not share mutations."""
        curve = BezierCurve(CUBIC)
        other = curve.copy()
        other.set_point(0, (9.0, 9.0))
        assert np.allclose(curve.points[0], [0.0, 0.0])

    def test_equality(self):
        """Test exact and approximate comparison."""
        curve = BezierCurve(CUBIC)
        assert curve == BezierCurve(CUBIC)
        assert curve != BezierCurve(QUADRATIC)
        nearly = BezierCurve(np.array(CUBIC) + 1e-14)
        assert curve.approx_equal(nearly)
        assert not curve.approx_equal(BezierCurve(QUADRATIC))
        with pytest.raises(TypeError):
            hash(curve)

    def test_dict_round_trip(self):
        """Test conversion to and from dictionaries."""
        curve = BezierCurve(CUBIC)
        restored = BezierCurve.from_dict(curve.to_dict())
        assert restored == curve
        assert restored.settings == curve.settings

    def test_is_linear(self):
        """Test straight and curved curves."""
        assert BezierCurve([(0.0, 0.0), (1.0, 1.0), (2.0, 2.0)]).is_linear
        assert not BezierCurve(QUADRATIC).is_linear
        assert BezierCurve([(0.0, 0.0, 0.0), (1.0, 1.0, 1.0), (3.0, 3.0, 3.0)]).is_linear

    def test_clockwise(self):
        """Test that mirrored curves have opposite direction."""
        assert BezierCurve(QUADRATIC).clockwise
        assert not BezierCurve([(0.0, 0.0), (1.0, -2.0), (2.0, 0.0)]).clockwise

    def test_intersect_dispatch(self):
        """Test the result types of intersect()."""
        curve = BezierCurve(QUADRATIC)
        assert isinstance(curve.intersect(), IntersectionResultSet)
        assert isinstance(curve.intersect(BezierCurve.line((0.0, 0.5), (2.0, 0.5))), IntersectionResultSet)
        found = curve.intersect([(0.0, 0.5), (2.0, 0.5)])
        assert all(isinstance(item, LineIntersection) for item in found)
        assert len(found) == 2
