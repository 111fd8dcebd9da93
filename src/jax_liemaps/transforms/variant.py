"""Structural classification of matrices into Lie groups and algebras.

Classification is purely structural: a matrix is tested against the block
patterns of so(3), SO(3), se(3), SE(3) and the adjoint representations of
se(3)/SE(3), in a fixed order, with an absolute tolerance. The first match
in the order below wins, so degenerate inputs are never reported as linear:
the 3x3 zero matrix is so(3), the 4x4 zero matrix se(3) and the 6x6 zero
matrix ad(se(3)).
"""

from enum import Enum

import jax
import jax.numpy as jnp

from ..core.config import DEFAULT_TOLERANCES
from ..core.matrix import ArrayLike, approx_equal, as_matrix, is_square

Array = jax.Array

TOL = DEFAULT_TOLERANCES.structure


class VectorSpace(str, Enum):
    """Vector space a matrix belongs to."""

    ALGEBRA_SO3 = "so3"
    GROUP_SO3 = "SO3"
    ALGEBRA_SE3 = "se3"
    GROUP_SE3 = "SE3"
    ALGEBRA_AD_SE3 = "ad-se3"
    ALGEBRA_COAD_SE3 = "coad-se3"
    GROUP_AD_SE3 = "Ad-SE3"
    LINEAR = "linear"


def is_skew_symmetric(x: Array, tolerance: float = TOL) -> bool:
    return approx_equal(x, -x.T, tolerance)


def is_orthogonal(x: Array, tolerance: float = TOL) -> bool:
    if not is_square(x):
        return False
    return approx_equal(jnp.matmul(x, x.T), jnp.eye(x.shape[0], dtype=x.dtype), tolerance)


def _is_zero(x: Array, tolerance: float) -> bool:
    return approx_equal(x, jnp.zeros_like(x), tolerance)


def is_in_so3(x: Array, tolerance: float = TOL) -> bool:
    """3x3 skew-symmetric matrix."""
    return x.shape == (3, 3) and is_skew_symmetric(x, tolerance)


def is_in_SO3(x: Array, tolerance: float = TOL) -> bool:
    """3x3 orthogonal matrix."""
    return x.shape == (3, 3) and is_orthogonal(x, tolerance)


def is_in_se3(x: Array, tolerance: float = TOL) -> bool:
    """4x4 twist matrix: skew-symmetric rotation block, zero bottom row."""
    if x.shape != (4, 4):
        return False
    return is_skew_symmetric(x[:3, :3], tolerance) and _is_zero(x[3, :], tolerance)


def is_in_SE3(x: Array, tolerance: float = TOL) -> bool:
    """4x4 homogeneous transform: orthogonal rotation block, bottom row [0, 0, 0, 1]."""
    if x.shape != (4, 4):
        return False
    bottom = jnp.array([0.0, 0.0, 0.0, 1.0], dtype=x.dtype)
    return is_orthogonal(x[:3, :3], tolerance) and approx_equal(x[3, :], bottom, tolerance)


def is_in_ad_se3(x: Array, tolerance: float = TOL) -> bool:
    """6x6 adjoint of a twist: [[W, V], [0, W]] with W, V skew-symmetric."""
    if x.shape != (6, 6):
        return False
    return (
        is_skew_symmetric(x[:3, :3], tolerance)
        and is_skew_symmetric(x[:3, 3:], tolerance)
        and approx_equal(x[:3, :3], x[3:, 3:], tolerance)
        and _is_zero(x[3:, :3], tolerance)
    )


def is_in_coad_se3(x: Array, tolerance: float = TOL) -> bool:
    """6x6 coadjoint of a twist: [[0, V], [V, W]] with W, V skew-symmetric."""
    if x.shape != (6, 6):
        return False
    return (
        is_skew_symmetric(x[3:, :3], tolerance)
        and approx_equal(x[3:, :3], x[:3, 3:], tolerance)
        and is_skew_symmetric(x[3:, 3:], tolerance)
        and _is_zero(x[:3, :3], tolerance)
    )


def is_in_Ad_SE3(x: Array, tolerance: float = TOL) -> bool:
    """6x6 adjoint of a transform: [[R, hat(t) R], [0, R]] with R orthogonal."""
    if x.shape != (6, 6):
        return False
    return (
        is_orthogonal(x[:3, :3], tolerance)
        and approx_equal(x[:3, :3], x[3:, 3:], tolerance)
        and _is_zero(x[3:, :3], tolerance)
    )


# Order matters: the first matching predicate decides.
_CLASSIFIERS = (
    (VectorSpace.ALGEBRA_SO3, is_in_so3),
    (VectorSpace.GROUP_SO3, is_in_SO3),
    (VectorSpace.ALGEBRA_SE3, is_in_se3),
    (VectorSpace.ALGEBRA_AD_SE3, is_in_ad_se3),
    (VectorSpace.ALGEBRA_COAD_SE3, is_in_coad_se3),
    (VectorSpace.GROUP_SE3, is_in_SE3),
    (VectorSpace.GROUP_AD_SE3, is_in_Ad_SE3),
)


def vector_space(x: ArrayLike, tolerance: float = TOL) -> VectorSpace:
    """
    Classify a matrix into the vector space it structurally belongs to.

    Args:
        x: Any array
        tolerance: Absolute tolerance of the structural tests

    Returns:
        The first matching VectorSpace, or ``VectorSpace.LINEAR``
    """
    x = as_matrix(x)
    if x.ndim != 2:
        return VectorSpace.LINEAR
    for space, predicate in _CLASSIFIERS:
        if predicate(x, tolerance):
            return space
    return VectorSpace.LINEAR


__all__ = [
    "VectorSpace",
    "is_skew_symmetric",
    "is_orthogonal",
    "is_in_so3",
    "is_in_SO3",
    "is_in_se3",
    "is_in_SE3",
    "is_in_ad_se3",
    "is_in_coad_se3",
    "is_in_Ad_SE3",
    "vector_space",
]
