"""Norms, Gram-Schmidt QR and a shifted QR eigenvalue iteration.

The eigenvalue solver targets the small symmetric products (A^T A) needed
for spectral norms. It returns real eigenvalues only.
"""

import logging
import math
from typing import Tuple

import jax
import jax.numpy as jnp
import numpy as np

from ..core.config import DEFAULT_TOLERANCES
from ..core.matrix import ArrayLike, as_matrix, is_vector, require_square
from ..errors import SlowConvergenceError

Array = jax.Array

logger = logging.getLogger(__name__)


def norm(A: ArrayLike) -> float:
    """
    Euclidean norm of a vector, spectral norm of any other matrix.

    Args:
        A: Vector ((n,), (n, 1) or (1, n)) or (m, n) matrix

    Returns:
        ``sqrt(trace(A^T A))`` for vectors, ``sqrt(max eig(A^T A))`` otherwise

    Raises:
        SlowConvergenceError: If the eigenvalues of ``A^T A`` do not converge.
    """
    A = as_matrix(A)
    if is_vector(A):
        return math.sqrt(float(jnp.sum(A * A)))
    return math.sqrt(max(eigenvalues(jnp.matmul(A.T, A))))


def qr_decompose(A: ArrayLike) -> Tuple[Array, Array]:
    """
    QR decomposition by modified Gram-Schmidt.

    Columns are orthonormalized in order; each one has the previously
    computed directions projected out before it is normalized. There is no
    reorthogonalization pass, so nearly dependent columns lose accuracy. A
    column that vanishes after projection stays zero and gets a zero
    diagonal entry in R.

    Args:
        A: (m, n) matrix

    Returns:
        Q of shape (m, min(m, n)) and R of shape (min(m, n), n) with A = Q R
    """
    a = np.array(as_matrix(A))
    rows, cols = a.shape
    m = min(rows, cols)
    q = a[:, :m].copy()
    r = np.zeros((m, cols))

    for k in range(m):
        for j in range(k):
            r[j, k] = q[:, j] @ q[:, k]
            q[:, k] -= r[j, k] * q[:, j]
        r[k, k] = math.sqrt(q[:, k] @ q[:, k])
        if r[k, k] != 0.0:
            q[:, k] /= r[k, k]

    # Columns beyond the square part only need their coordinates in Q.
    for k in range(m, cols):
        v = a[:, k].copy()
        for j in range(m):
            r[j, k] = q[:, j] @ v
            v -= r[j, k] * q[:, j]

    return jnp.asarray(q), jnp.asarray(r)


def eigenvalues(
    A: ArrayLike,
    tolerance: float = DEFAULT_TOLERANCES.eigen,
    max_iterations: int = DEFAULT_TOLERANCES.eigen_max_iterations,
) -> Tuple[float, ...]:
    """
    Real eigenvalues of a square matrix by shifted QR iteration.

    Each step shifts by the bottom-right entry c, factors ``T - cI = QR`` and
    forms ``T' = RQ + cI``. Once the norm of the last row's off-diagonal
    entries drops below ``tolerance``, the diagonal entry is recorded and the
    active block shrinks by one row and column.

    Args:
        A: (n, n) matrix
        tolerance: Deflation threshold on the off-diagonal part of the last row
        max_iterations: Iteration budget shared by all deflations

    Returns:
        Eigenvalues sorted in descending order

    Raises:
        ShapeError: If ``A`` is not square.
        SlowConvergenceError: If the budget runs out before every eigenvalue
                              has been deflated.
    """
    T = as_matrix(A)
    require_square(T, "Eigenvalue decomposition")
    found = []

    for _ in range(max_iterations + 1):
        n = T.shape[0]
        c = T[n - 1, n - 1]
        shift = c * jnp.eye(n, dtype=T.dtype)
        Q, R = qr_decompose(T - shift)
        T = jnp.matmul(R, Q) + shift

        off_diagonal = T[n - 1, : n - 1]
        if math.sqrt(float(jnp.sum(off_diagonal * off_diagonal))) < tolerance:
            found.append(float(T[n - 1, n - 1]))
            logger.debug("deflated eigenvalue %g, %d remaining", found[-1], n - 1)
            if n == 1:
                return tuple(sorted(found, reverse=True))
            T = T[: n - 1, : n - 1]

    logger.debug("eigenvalue iteration stopped with %d of %d eigenvalues", len(found), len(found) + T.shape[0])
    raise SlowConvergenceError(f"eigenvalues did not converge within {max_iterations} iterations")


__all__ = ["norm", "qr_decompose", "eigenvalues"]
