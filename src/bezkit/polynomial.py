"""Real root solving of linear, quadratic and cubic polynomials."""

from __future__ import annotations

import math
from typing import Iterable, List, Sequence

import numpy as np

from bezkit.consts import (
    CUBIC_PERTURBATION_RATIO,
    CUBIC_POLISH_ITERATIONS,
    EPSILON,
    QUADRATIC_DOMINANCE_RATIO,
    ROOT_EPSILON,
)


class PolynomialSolver:
    """Class to provide real root solvers, closed form up to degree three.

    All solvers return every real root they find, unfiltered and unsorted.
    Callers interested in curve parameters pass the result through
    `in_unit_interval`.
    """

    @staticmethod
    def crt(value: float) -> float:
        """Real cube root preserving the sign of negative arguments."""
        return float(np.cbrt(value))

    @staticmethod
    def solve_linear(a: float, b: float) -> List[float]:
        """Solve a*t + b = 0."""
        if abs(a) < EPSILON:
            return []
        return [-b / a]

    @staticmethod
    def _vanishes(leading: float, *others: float) -> bool:
        # leading coefficient ~0 relative to the magnitude of the others
        return abs(leading) <= EPSILON * max(max((abs(v) for v in others), default=0.0), 1.0)

    @staticmethod
    def _polish(coefficients: Sequence[float], root: float, iterations: int = CUBIC_POLISH_ITERATIONS) -> float:
        """Refine a root by Newton steps on the power form, keeping only improving steps."""
        derivative = np.polyder(np.asarray(coefficients, dtype=np.float64))
        value = abs(float(np.polyval(coefficients, root)))
        for _ in range(iterations):
            slope = float(np.polyval(derivative, root))
            if value == 0.0 or slope == 0.0:
                break
            candidate = root - float(np.polyval(coefficients, root)) / slope
            candidate_value = abs(float(np.polyval(coefficients, candidate)))
            if not candidate_value < value:
                break
            root, value = candidate, candidate_value
        return root

    @classmethod
    def solve_quadratic(cls, a: float, b: float, c: float) -> List[float]:
        """Solve a*t^2 + b*t + c = 0, falling back to the linear case if a ~ 0."""
        if cls._vanishes(a, b, c):
            return cls.solve_linear(b, c)

        discriminant = b * b - 4.0 * a * c
        scale = max(b * b, abs(4.0 * a * c), 1.0)
        if discriminant < -EPSILON * scale:
            return []
        if discriminant <= EPSILON * scale:
            return [-b / (2.0 * a)]

        # Avoid cancellation between b and sqrt(discriminant)
        sq = math.sqrt(discriminant)
        q = -0.5 * (b + math.copysign(sq, b))
        roots = [q / a]
        if q != 0.0:
            roots.append(c / q)
        else:
            roots.append(-b / a - roots[0])
        return roots

    @classmethod
    def solve_cubic(cls, a: float, b: float, c: float, d: float) -> List[float]:
        """Solve a*t^3 + b*t^2 + c*t + d = 0 using Cardano's method.

        The cubic is normalised and depressed to x^3 + p*x + q = 0 and the sign of
        the discriminant (q/2)^2 + (p/3)^3 selects the branch:

            < 0: three real roots, trigonometric form
            = 0: a repeated root, two distinct roots
            > 0: one real root from the cube roots of -q/2 +- sqrt(discriminant)

        A cubic coefficient that is tiny compared to the quadratic one (e.g. rounding
        noise left by aligning a degree-raised quadratic) makes the normalisation
        divide by noise. Such cubics are solved as a perturbed quadratic: its roots
        are Newton-polished on the full cubic and the remaining far root follows
        from the sum of roots, -b/a.

        Args:
            a: Coefficient of t^3. Falls back to the quadratic solver if ~0
                relative to the other coefficients.
            b: Coefficient of t^2.
            c: Coefficient of t.
            d: Constant term.

        Returns:
            List of real roots.
        """
        if cls._vanishes(a, b, c, d):
            return cls.solve_quadratic(b, c, d)

        coefficients = (a, b, c, d)
        scale = max(abs(b), abs(c), abs(d))
        if abs(a) <= CUBIC_PERTURBATION_RATIO * scale and abs(b) >= QUADRATIC_DOMINANCE_RATIO * scale:
            near = [cls._polish(coefficients, root) for root in cls.solve_quadratic(b, c, d)]
            far = cls._polish(coefficients, -b / a + c / b)
            return near + [far]

        return [cls._polish(coefficients, root) for root in cls._cardano(a, b, c, d)]

    @classmethod
    def _cardano(cls, a: float, b: float, c: float, d: float) -> List[float]:
        """Real roots of the cubic by the depressed Cardano form, a must not vanish."""
        # to [t^3 + A*t^2 + B*t + C] form
        coef_a = b / a
        coef_b = c / a
        coef_c = d / a

        p = (3.0 * coef_b - coef_a * coef_a) / 3.0
        p3 = p / 3.0
        q = (2.0 * coef_a * coef_a * coef_a - 9.0 * coef_a * coef_b + 27.0 * coef_c) / 27.0
        q2 = q / 2.0
        discriminant = q2 * q2 + p3 * p3 * p3
        shift = coef_a / 3.0

        if abs(discriminant) < EPSILON:
            u1 = cls.crt(-q2)
            roots = [2.0 * u1 - shift, -u1 - shift]
            if abs(u1) < EPSILON:
                # triple root
                return [roots[0]]
            return roots

        if discriminant < 0.0:
            mp3 = -p / 3.0
            r = math.sqrt(mp3 * mp3 * mp3)
            # IEEE rounding may push the cosine slightly outside [-1, 1]
            cosphi = float(np.clip(-q / (2.0 * r), -1.0, 1.0))
            phi = math.acos(cosphi)
            t1 = 2.0 * cls.crt(r)
            tau = 2.0 * math.pi
            return [
                t1 * math.cos(phi / 3.0) - shift,
                t1 * math.cos((phi + tau) / 3.0) - shift,
                t1 * math.cos((phi + 2.0 * tau) / 3.0) - shift,
            ]

        sd = math.sqrt(discriminant)
        u1 = cls.crt(-q2 + sd)
        v1 = cls.crt(q2 + sd)
        return [u1 - v1 - shift]

    @classmethod
    def bernstein_roots(cls, coefficients: Sequence[float]) -> List[float]:
        """Roots of a polynomial given by Bernstein coefficients.

        Used on single axes of the hodograph to find derivative zeros. Linear and
        quadratic polynomials are solved in closed form, higher degrees through
        their power basis with `solve`.
        """
        if len(coefficients) == 3:
            a, b, c = (float(v) for v in coefficients)
            d = a - 2.0 * b + c
            if abs(d) > EPSILON:
                radicand = b * b - a * c
                if radicand < 0.0:
                    if radicand < -EPSILON * max(b * b, abs(a * c), 1.0):
                        return []
                    radicand = 0.0
                m1 = -math.sqrt(radicand)
                m2 = -a + b
                return [-(m1 + m2) / d, -(-m1 + m2) / d]
            if abs(b - c) > EPSILON:
                return [(2.0 * b - c) / (2.0 * (b - c))]
            return []

        if len(coefficients) == 2:
            a, b = (float(v) for v in coefficients)
            if abs(a - b) > EPSILON:
                return [a / (a - b)]
            return []

        if len(coefficients) > 3:
            return cls.solve(cls.bernstein_to_power(coefficients))

        return []

    @staticmethod
    def bernstein_to_power(coefficients: Sequence[float]) -> List[float]:
        """Convert Bernstein coefficients b_0..b_n to power basis coefficients, highest degree first."""
        n = len(coefficients) - 1
        b = np.asarray(coefficients, dtype=np.float64)
        power = []
        for k in range(n + 1):
            i = np.arange(k + 1)
            signs = (-1.0) ** (k - i)
            binom = np.array([math.comb(k, j) for j in range(k + 1)], dtype=np.float64)
            power.append(math.comb(n, k) * float(np.sum(binom * signs * b[: k + 1])))
        return power[::-1]

    @classmethod
    def solve(cls, coefficients: Sequence[float]) -> List[float]:
        """Real roots of a polynomial given by power coefficients, highest degree first.

        Degrees up to three use the closed form solvers, higher degrees the
        companion matrix eigenvalues of numpy.
        """
        coeffs = [float(v) for v in coefficients]
        # strip vanishing leading coefficients
        while len(coeffs) > 1 and cls._vanishes(coeffs[0], *coeffs[1:]):
            coeffs.pop(0)
        degree = len(coeffs) - 1
        if degree <= 0:
            return []
        if degree == 1:
            return cls.solve_linear(*coeffs)
        if degree == 2:
            return cls.solve_quadratic(*coeffs)
        if degree == 3:
            return cls.solve_cubic(*coeffs)

        roots = np.roots(coeffs)
        scale = max(1.0, float(np.abs(roots).max())) if roots.size else 1.0
        return [float(r.real) for r in roots if abs(r.imag) <= 1e-9 * scale]

    @staticmethod
    def in_unit_interval(roots: Iterable[float], epsilon: float = ROOT_EPSILON) -> List[float]:
        """Keep roots within [0, 1] (with tolerance), clamp, deduplicate and sort them."""
        result: List[float] = []
        for root in roots:
            if not math.isfinite(root) or root < -epsilon or root > 1.0 + epsilon:
                continue
            value = min(max(root, 0.0), 1.0)
            if all(abs(value - existing) > epsilon for existing in result):
                result.append(value)
        result.sort()
        return result


def main():
    """Main"""


if __name__ == "__main__":
    main()
