"""Numerical tolerances shared by the kernel and the Lie map engine."""

from flax import struct


@struct.dataclass
class Tolerances:
    """Immutable set of thresholds used across the library.

    Attributes:
        structure: Absolute tolerance for skew-symmetry, orthogonality and
                   block comparisons during classification.
        small_angle: Rotation angle below which closed forms give way to
                     series expansions.
        series: Frobenius norm of a series term below which summation stops.
        series_max_terms: Number of terms (including the leading one) after
                          which a series is truncated.
        pivot: Smallest admissible LU pivot magnitude.
        eigen: Deflation threshold of the shifted QR iteration.
        eigen_max_iterations: Iteration budget of the shifted QR iteration.
    """
    structure: float = struct.field(pytree_node=False, default=1e-12)
    small_angle: float = struct.field(pytree_node=False, default=1e-3)
    series: float = struct.field(pytree_node=False, default=1e-12)
    series_max_terms: int = struct.field(pytree_node=False, default=15)
    pivot: float = struct.field(pytree_node=False, default=1e-10)
    eigen: float = struct.field(pytree_node=False, default=1e-10)
    eigen_max_iterations: int = struct.field(pytree_node=False, default=100)


DEFAULT_TOLERANCES = Tolerances()
