"""Small dense linear algebra: trace, determinant, LU solve and inversion.

The routines are written for the small fixed sizes used by rigid-body
kinematics (up to 6x6). Elimination and substitution loops run on a private
numpy scratch copy; inputs are never modified and results are JAX arrays.
"""

import logging
from typing import Tuple

import jax
import jax.numpy as jnp
import numpy as np
from flax import struct

from ..core.config import DEFAULT_TOLERANCES
from ..core.matrix import ArrayLike, as_matrix, require_square
from ..errors import ShapeError, SingularMatrixError

Array = jax.Array

logger = logging.getLogger(__name__)


def trace(A: ArrayLike) -> float:
    """Sum of the diagonal entries of a square matrix."""
    A = as_matrix(A)
    require_square(A, "Trace")
    return float(jnp.trace(A))


def determinant(A: ArrayLike) -> float:
    """
    Determinant by recursive cofactor expansion along the first row.

    The cost grows as n!, which is acceptable only for the matrices of at
    most 6x6 this library works with. ``LUFactorization.determinant`` is the
    general-purpose alternative.

    Args:
        A: (n, n) matrix

    Returns:
        Determinant of ``A``
    """
    A = as_matrix(A)
    require_square(A, "Determinant")
    return _cofactor_expansion(np.asarray(A))


def _cofactor_expansion(a: np.ndarray) -> float:
    n = a.shape[0]
    if n == 1:
        return float(a[0, 0])
    d = 0.0
    for col in range(n):
        minor = np.delete(a[1:], col, axis=1)
        d += (-1.0) ** col * a[0, col] * _cofactor_expansion(minor)
    return float(d)


@struct.dataclass
class LUFactorization:
    """Doolittle factorization ``P A = L U`` of a square matrix.

    Attributes:
        lu: Array of shape (n, n). The strictly lower part holds the unit
            lower-triangular multipliers, the upper part holds U.
        permutation: Tuple of length n. Row ``i`` of the factorized matrix
                     is row ``permutation[i]`` of the original matrix.
    """
    lu: Array
    permutation: Tuple[int, ...] = struct.field(pytree_node=False)

    @property
    def size(self) -> int:
        return len(self.permutation)

    def solve(self, b: ArrayLike) -> Array:
        """Solve ``A x = b`` for a vector or a matrix of right-hand sides."""
        b = as_matrix(b)
        if b.ndim not in (1, 2) or b.shape[0] != self.size:
            raise ShapeError(f"cannot solve a {self.size}x{self.size} system with right-hand side of shape {b.shape}")
        lu = np.asarray(self.lu)
        rhs = np.asarray(b).reshape(self.size, -1)
        x = np.empty_like(rhs)
        for col in range(rhs.shape[1]):
            x[:, col] = _substitute(lu, self.permutation, rhs[:, col])
        return jnp.asarray(x.reshape(b.shape))

    def invert(self) -> Array:
        """Inverse of the factorized matrix, one identity column at a time."""
        lu = np.asarray(self.lu)
        n = self.size
        inverse = np.empty((n, n))
        for j in range(n):
            unit = np.zeros(n)
            unit[j] = 1.0
            inverse[:, j] = _substitute(lu, self.permutation, unit)
        return jnp.asarray(inverse)

    def determinant(self) -> float:
        """Product of the pivots, signed by the parity of the permutation."""
        sign = 1.0
        seen = [False] * self.size
        for start in range(self.size):
            if seen[start]:
                continue
            # Each cycle of length L contributes L - 1 transpositions.
            length = 0
            i = start
            while not seen[i]:
                seen[i] = True
                i = self.permutation[i]
                length += 1
            if length % 2 == 0:
                sign = -sign
        return sign * float(jnp.prod(jnp.diagonal(self.lu)))


def factorize(A: ArrayLike, tolerance: float = DEFAULT_TOLERANCES.pivot) -> LUFactorization:
    """
    Doolittle LU decomposition with scaled partial pivoting.

    Each row is scaled by its largest absolute entry. At elimination step k
    the pivot is the row (among rows >= k) with the largest scaled magnitude
    in column k; the first such row wins ties.

    Args:
        A: (n, n) matrix
        tolerance: Smallest admissible absolute pivot

    Returns:
        LUFactorization of ``A``

    Raises:
        ShapeError: If ``A`` is not square.
        SingularMatrixError: If a pivot falls below ``tolerance``.
    """
    A = as_matrix(A)
    require_square(A, "LU decomposition")
    lu = np.array(A)
    n = lu.shape[0]
    permutation = list(range(n))
    scale = np.max(np.abs(lu), axis=1)

    for k in range(n - 1):
        with np.errstate(divide="ignore", invalid="ignore"):
            scaled = np.abs(lu[k:, k]) / scale[k:]
        scaled = np.nan_to_num(scaled, nan=0.0)
        p = int(np.argmax(scaled)) + k
        if abs(lu[p, k]) < tolerance:
            logger.debug("LU pivot %g in column %d below tolerance %g", lu[p, k], k, tolerance)
            raise SingularMatrixError(f"pivot in column {k} is smaller than {tolerance}")
        if p != k:
            scale[[k, p]] = scale[[p, k]]
            lu[[k, p]] = lu[[p, k]]
            permutation[k], permutation[p] = permutation[p], permutation[k]

        for i in range(k + 1, n):
            if lu[i, k] != 0.0:
                lam = lu[i, k] / lu[k, k]
                lu[i, k + 1:] -= lam * lu[k, k + 1:]
                lu[i, k] = lam

    if abs(lu[n - 1, n - 1]) < tolerance:
        logger.debug("last LU pivot %g below tolerance %g", lu[n - 1, n - 1], tolerance)
        raise SingularMatrixError(f"pivot in column {n - 1} is smaller than {tolerance}")

    return LUFactorization(lu=jnp.asarray(lu), permutation=tuple(permutation))


def _substitute(lu: np.ndarray, permutation: Tuple[int, ...], b: np.ndarray) -> np.ndarray:
    """Forward then back substitution for a single right-hand side."""
    n = lu.shape[0]
    x = np.empty(n)
    for i in range(n):
        x[i] = b[permutation[i]]
        for k in range(i):
            x[i] -= lu[i, k] * x[k]
    for j in range(n - 1, -1, -1):
        for k in range(j + 1, n):
            x[j] -= lu[j, k] * x[k]
        x[j] /= lu[j, j]
    return x


def solve(A: ArrayLike, b: ArrayLike) -> Array:
    """
    Solve the linear system ``A x = b``.

    Args:
        A: (n, n) matrix of coefficients
        b: (n,), (n, 1) or (n, m) right-hand side

    Returns:
        Solution with the same shape as ``b``

    Raises:
        ShapeError: If ``A`` is not square or ``b`` has the wrong row count.
        SingularMatrixError: If ``A`` is singular to within the pivot tolerance.
    """
    A = as_matrix(A)
    require_square(A, "Linear solve")
    return factorize(A).solve(b)


def invert(A: ArrayLike) -> Array:
    """
    Inverse of a square matrix through its LU factorization.

    Raises:
        ShapeError: If ``A`` is not square.
        SingularMatrixError: If ``A`` is singular to within the pivot tolerance.
    """
    return factorize(A).invert()


__all__ = [
    "trace",
    "determinant",
    "LUFactorization",
    "factorize",
    "solve",
    "invert",
]
