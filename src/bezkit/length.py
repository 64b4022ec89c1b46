"""Arc length of Bezier curves."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import numpy as np

from bezkit.common import InvalidCurveError, LengthStrategy
from bezkit.consts import GAUSS_LEGENDRE_ORDER

if TYPE_CHECKING:
    from bezkit.bezier import BezierCurve

# Abscissae on [-1, 1] and weights, computed once at import
GAUSS_LEGENDRE_ABSCISSAE, GAUSS_LEGENDRE_WEIGHTS = np.polynomial.legendre.leggauss(GAUSS_LEGENDRE_ORDER)


class ArcLength:
    """Class to provide arc length algorithms."""

    @staticmethod
    def gauss_legendre(curve: BezierCurve) -> float:
        """
        Integrate the speed |B'(t)| over [0, 1] with Gauss-Legendre quadrature.

        The abscissae are mapped from [-1, 1] onto [0, 1] via t = (x + 1) / 2, the
        factor 1/2 of that substitution scales the weighted sum.
        """
        ts = 0.5 * GAUSS_LEGENDRE_ABSCISSAE + 0.5
        speeds = np.linalg.norm(curve.derivative_many(ts), axis=1)
        return float(0.5 * np.sum(GAUSS_LEGENDRE_WEIGHTS * speeds))

    @staticmethod
    def polyline(curve: BezierCurve, steps: Optional[int] = None) -> float:
        """Sum of chord lengths of the lookup table."""
        points = curve.lut(steps).points
        return float(np.sum(np.linalg.norm(np.diff(points, axis=0), axis=1)))

    @classmethod
    def compute(cls, curve: BezierCurve, strategy: LengthStrategy, steps: Optional[int] = None) -> float:
        """Arc length of the curve with the given strategy."""
        if strategy is LengthStrategy.GAUSS_LEGENDRE:
            return cls.gauss_legendre(curve)
        if strategy is LengthStrategy.POLYLINE:
            return cls.polyline(curve, steps)
        raise InvalidCurveError(f"Unknown length strategy: {strategy}")


def main():
    """Main"""


if __name__ == "__main__":
    main()
