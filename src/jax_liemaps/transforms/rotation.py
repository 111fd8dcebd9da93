"""Rotation matrix / quaternion conversions in JAX.

Quaternions are stored scalar first, (w, x, y, z).
"""

import jax
import jax.numpy as jnp

from ..core.matrix import ArrayLike, as_matrix, flatten_vector
from ..errors import ShapeError

Array = jax.Array


def quaternion_to_matrix(quaternion: ArrayLike) -> Array:
    """
    Convert a quaternion to a rotation matrix.

    Args:
        quaternion: (4,) quaternion in (w, x, y, z) format, normalized here

    Returns:
        (3, 3) rotation matrix
    """
    q = flatten_vector(as_matrix(quaternion))
    if q.shape != (4,):
        raise ShapeError(f"quaternion must have 4 components, got {q.shape[0]}")
    w, x, y, z = normalize_quaternion(q)

    xx, yy, zz = x*x, y*y, z*z
    wx, wy, wz = w*x, w*y, w*z
    xy, xz, yz = x*y, x*z, y*z

    return jnp.stack([
        jnp.stack([1 - 2*(yy + zz), 2*(xy - wz), 2*(xz + wy)]),
        jnp.stack([2*(xy + wz), 1 - 2*(xx + zz), 2*(yz - wx)]),
        jnp.stack([2*(xz - wy), 2*(yz + wx), 1 - 2*(xx + yy)])
    ])


def normalize_quaternion(quaternion: Array) -> Array:
    """Normalize a quaternion to unit length."""
    return quaternion / jnp.linalg.norm(quaternion)


def matrix_to_quaternion(matrix: ArrayLike) -> Array:
    """
    Extract a quaternion from a rotation matrix with Spurrier's algorithm.

    The largest of the trace and the three diagonal entries decides which
    quaternion component is computed from a square root; the remaining
    components are then obtained by dividing by it, which keeps the divisor
    away from zero. The trace wins ties, and among the diagonal entries the
    first maximum wins.

    Args:
        matrix: (3, 3) rotation matrix

    Returns:
        (4,) quaternion in (w, x, y, z) format. It is not renormalized and
        its sign is whatever the selected branch produces.
    """
    R = as_matrix(matrix)
    if R.shape != (3, 3):
        raise ShapeError(f"rotation matrix must be 3x3, got {R.shape}")
    tr = jnp.trace(R)

    # Candidate pivots for w, x, y and z; the selected one is the largest.
    pivots = jnp.sqrt(jnp.maximum(jnp.stack([
        1 + tr,
        2 * R[0, 0] + 1 - tr,
        2 * R[1, 1] + 1 - tr,
        2 * R[2, 2] + 1 - tr,
    ]) / 4, 0.0))
    d = 4 * jnp.where(pivots > 0, pivots, 1.0)

    skew = (R[2, 1] - R[1, 2], R[0, 2] - R[2, 0], R[1, 0] - R[0, 1])
    xy, xz, yz = R[0, 1] + R[1, 0], R[0, 2] + R[2, 0], R[1, 2] + R[2, 1]

    candidates = jnp.stack([
        jnp.stack([pivots[0], skew[0] / d[0], skew[1] / d[0], skew[2] / d[0]]),
        jnp.stack([skew[0] / d[1], pivots[1], xy / d[1], xz / d[1]]),
        jnp.stack([skew[1] / d[2], xy / d[2], pivots[2], yz / d[2]]),
        jnp.stack([skew[2] / d[3], xz / d[3], yz / d[3], pivots[3]]),
    ])
    # argmax returns the first maximum, so the trace wins ties.
    return candidates[jnp.argmax(jnp.stack([tr, R[0, 0], R[1, 1], R[2, 2]]))]


__all__ = ["quaternion_to_matrix", "normalize_quaternion", "matrix_to_quaternion"]
