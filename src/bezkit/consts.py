"""Central module containing numeric defaults for the Bezier curve kernel."""

from __future__ import annotations

import math

###############################################################################
# Sampling
###############################################################################

# Number of steps of the lookup table used by lut() when no value is given
LUT_STEPS: int = 100

# Lookup table resolution used for the coarse phase of project() and on()
PROJECT_LUT_STEPS: int = 1000

# Fine sweep step of project(), relative to one lookup table interval
PROJECT_REFINE_FACTOR: float = 0.1

###############################################################################
# Reduction / simplicity
###############################################################################

# Step width used while growing simple segments in the second reduce() pass
REDUCE_STEP: float = 0.01

# Maximum angle between the end normals of a simple segment
SIMPLE_MAX_ANGLE: float = math.pi / 3.0

###############################################################################
# Intersections
###############################################################################

# Combined width+height below which a pair of segments is treated as converged
INTERSECTION_THRESHOLD: float = 0.5

# Maximum bisection depth of the curve-curve convergence
INTERSECTION_MAX_DEPTH: int = 24

# Decimal places used to deduplicate intersection parameter pairs
INTERSECTION_PRECISION: int = 5

# Relative tolerance used to accept root points lying on a line segment
LINE_TOLERANCE: float = 1.0e-7

# Absolute tolerance by which bisection boxes may touch and still be paired
PAIR_TOLERANCE: float = 1.0e-9

###############################################################################
# Arcs
###############################################################################

# Maximum allowed deviation of an approximating arc from the curve
ARC_TOLERANCE: float = 0.5

# Safety counter of the binary search for one arc
ARC_MAX_ITERATIONS: int = 100

# Upper bound of arcs produced for a single curve
ARC_MAX_ARCS: int = 10000

###############################################################################
# Differential geometry
###############################################################################

# Parameter offset of the finite difference frame of 3D normals
NORMAL_3D_EPSILON: float = 0.01

# Absolute epsilon for "approximately zero" decisions
EPSILON: float = 1.0e-12

# Tolerance used when accepting roots slightly outside [0, 1]
ROOT_EPSILON: float = 1.0e-9

# Number of Gauss-Legendre abscissae used for arc length quadrature
GAUSS_LEGENDRE_ORDER: int = 24

###############################################################################
# Root solving
###############################################################################

# Cubic coefficient, relative to the largest other one, below which a cubic is
# solved as a perturbed quadratic
CUBIC_PERTURBATION_RATIO: float = 1.0e-6

# Minimum relative size of the quadratic coefficient for that perturbed solution
QUADRATIC_DOMINANCE_RATIO: float = 1.0e-3

# Newton steps used to polish closed form cubic roots
CUBIC_POLISH_ITERATIONS: int = 3


def main():
    """Main"""


if __name__ == "__main__":
    main()
