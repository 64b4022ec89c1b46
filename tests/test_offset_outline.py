"""Test module for offsets, scaling and outlines in bezkit.offset

The tests are run using pytest.
"""

import numpy as np
import pytest
import shapely.geometry

from bezkit.bezier import BezierCurve
from bezkit.common import CurveSettings, DegenerateGeometryError, InvalidCurveError
from bezkit.offset import OffsetBuilder

QUADRATIC = [(0.0, 0.0), (1.0, 2.0), (2.0, 0.0)]
SHALLOW = [(0.0, 0.0), (5.0, 1.0), (10.0, 0.0)]

###############################################################################
# Offset points and scaling
###############################################################################


class TestScale:
    """Test offsetting of single points and simple segments."""

    def test_offset_point(self):
        """Test a point moved along the normal."""
        line = BezierCurve.line((0.0, 0.0), (10.0, 0.0))
        result = line.offset_point(0.5, 2.0)
        assert np.allclose(result.curve_point, [5.0, 0.0])
        assert np.allclose(result.normal, [0.0, 1.0])
        assert np.allclose(result.point, [5.0, 2.0])

    def test_offset_line(self):
        """Test that a line is translated along its normal."""
        line = BezierCurve.line((0.0, 0.0), (10.0, 0.0))
        (up,) = line.offset(2.0)
        assert np.allclose(up.points, [(0.0, 2.0), (10.0, 2.0)])
        (down,) = line.offset(-2.0)
        assert np.allclose(down.points, [(0.0, -2.0), (10.0, -2.0)])

    def test_scale_quadratic(self):
        """Test that a scaled simple quadratic runs at the offset distance."""
        curve = BezierCurve(SHALLOW)
        scaled = curve.scale(1.0)
        assert scaled.order == 2
        assert np.allclose(scaled.points[0], curve.points[0] + curve.normal(0.0))
        assert np.allclose(scaled.points[-1], curve.points[-1] + curve.normal(1.0))
        for t in (0.25, 0.5, 0.75):
            assert curve.project(scaled.evaluate(t)).distance == pytest.approx(1.0, abs=0.05)

    def test_scale_cubic(self):
        """Test that a scaled simple cubic runs at the offset distance."""
        curve = BezierCurve([(0.0, 0.0), (3.0, 1.0), (7.0, 1.0), (10.0, 0.0)])
        scaled = curve.scale(-0.5)
        assert np.allclose(scaled.points[0], curve.points[0] - 0.5 * curve.normal(0.0))
        for t in (0.25, 0.5, 0.75):
            assert curve.project(scaled.evaluate(t)).distance == pytest.approx(0.5, abs=0.05)

    def test_scale_graduated(self):
        """Test a distance growing along a simple curve."""
        curve = BezierCurve(SHALLOW)
        scaled = curve.scale_graduated(lambda v: 1.0 + v)
        assert scaled.order == 3
        assert np.allclose(scaled.points[0], curve.points[0] + curve.normal(0.0))
        assert np.allclose(scaled.points[-1], curve.points[-1] + 2.0 * curve.normal(1.0))

    def test_linear_distance_function(self):
        """Test the share of a segment in a tapered outline."""
        fn = OffsetBuilder.linear_distance_function(1.0, 3.0, 10.0, 5.0, 5.0)
        assert fn(0.0) == pytest.approx(2.0)
        assert fn(1.0) == pytest.approx(3.0)

    def test_offset_curve_segments(self):
        """Test that every offset segment starts at the offset distance."""
        curve = BezierCurve(QUADRATIC)
        curves = curve.offset(0.25)
        assert len(curves) == len(curve.reduce())
        for offset_curve in curves:
            assert curve.project(offset_curve.points[0]).distance == pytest.approx(0.25, abs=1e-2)
            assert curve.project(offset_curve.points[-1]).distance == pytest.approx(0.25, abs=1e-2)

    def test_offset_unreducible(self):
        """Test that a curve without reduction has no offset."""
        curve = BezierCurve(QUADRATIC, settings=CurveSettings(simple_max_angle=1e-9))
        assert curve.offset(1.0) == []

    def test_offset_errors(self):
        """Test unsupported dimensions and orders."""
        with pytest.raises(InvalidCurveError):
            BezierCurve([(0.0, 0.0, 0.0), (1.0, 1.0, 1.0)]).offset(1.0)
        with pytest.raises(InvalidCurveError):
            BezierCurve([(0.0, 0.0), (1.0, 1.0), (2.0, -1.0), (3.0, 1.0), (4.0, 0.0)]).offset(1.0)


###############################################################################
# Outlines
###############################################################################


class TestOutline:
    """Test closed outlines."""

    def test_line_outline(self):
        """Test the rectangle around a line."""
        outline = BezierCurve.line((0.0, 0.0), (10.0, 0.0)).outline(1.0)
        assert len(outline) == 4
        assert outline.is_closed()
        start_cap, forward, end_cap, back = outline.curves
        assert np.allclose(start_cap.points, [(0.0, -1.0), (0.0, 1.0)])
        assert np.allclose(forward.points, [(0.0, 1.0), (10.0, 1.0)])
        assert np.allclose(end_cap.points, [(10.0, 1.0), (10.0, -1.0)])
        assert np.allclose(back.points, [(10.0, -1.0), (0.0, -1.0)])
        polygon = outline.to_polygon()
        assert isinstance(polygon, shapely.geometry.Polygon)
        assert polygon.area == pytest.approx(20.0)

    def test_asymmetric_outline(self):
        """Test different forward and back distances."""
        outline = BezierCurve.line((0.0, 0.0), (10.0, 0.0)).outline(1.0, 3.0)
        assert outline.to_polygon().area == pytest.approx(40.0)

    def test_tapered_outline(self):
        """Test an outline growing from 1 to 3 on both sides."""
        outline = BezierCurve.line((0.0, 0.0), (10.0, 0.0)).outline(1.0, 1.0, 3.0, 3.0)
        assert outline.is_closed()
        assert np.allclose(outline[1].points[-1], [10.0, 3.0])
        assert outline.to_polygon().area == pytest.approx(40.0)

    def test_curve_outline_is_closed(self):
        """Test the outline of a curve with several simple segments."""
        curve = BezierCurve(QUADRATIC)
        outline = curve.outline(0.1)
        assert len(outline) == 2 * len(curve.reduce()) + 2
        assert outline.is_closed()
        points = outline.to_points(8)
        assert points.shape[1] == 2
        assert outline.bounding_box.ymax == pytest.approx(1.1, abs=0.01)

    def test_outline_unreducible(self):
        """Test that an outline needs a reduction."""
        curve = BezierCurve(QUADRATIC, settings=CurveSettings(simple_max_angle=1e-9))
        with pytest.raises(DegenerateGeometryError):
            curve.outline(1.0)


class TestOutlineShapes:
    """Test closed shapes per simple segment."""

    def test_line_shape(self):
        """Test the single shape of a line."""
        shapes = BezierCurve.line((0.0, 0.0), (10.0, 0.0)).outline_shapes(1.0)
        assert len(shapes) == 1
        shape = shapes[0]
        assert not shape.start_virtual
        assert not shape.end_virtual
        assert len(shape.edges()) == 4
        assert shape.bounding_box.height == pytest.approx(2.0)

    def test_virtual_caps(self):
        """Test that inner caps are virtual."""
        curve = BezierCurve(QUADRATIC)
        shapes = curve.outline_shapes(0.1)
        assert len(shapes) == len(curve.reduce())
        assert len(shapes) >= 2
        assert not shapes[0].start_virtual
        assert shapes[0].end_virtual
        assert shapes[-1].start_virtual
        assert not shapes[-1].end_virtual

    def test_shape_intersections(self):
        """Test intersections between crossing shapes."""
        horizontal = BezierCurve.line((0.0, 0.0), (10.0, 0.0)).outline_shapes(1.0)[0]
        vertical = BezierCurve.line((5.0, -5.0), (5.0, 5.0)).outline_shapes(1.0)[0]
        far = BezierCurve.line((50.0, 50.0), (60.0, 50.0)).outline_shapes(1.0)[0]
        assert horizontal.intersections(vertical)
        assert horizontal.intersections(far) == []
