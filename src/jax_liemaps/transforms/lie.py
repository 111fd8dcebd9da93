"""Hat, adjoint, exponential, logarithm and tangent maps with structural dispatch.

Every operation classifies its input with ``variant.vector_space`` and
applies the matching closed form from ``so3``/``se3``. Square matrices
without algebraic structure fall back to the power series. Inputs that the
operation has no meaning for raise ``UnsupportedAlgebraElementError``.

For convenience ``exp`` and ``tang`` also accept rotation vectors (length 3)
and twists (length 6), which are mapped through ``hat`` first.
"""

import jax

from ..core.matrix import ArrayLike, as_matrix, is_square, is_vector, vector_length
from ..errors import UnsupportedAlgebraElementError, UnsupportedShapeError
from . import se3, series, so3
from .variant import VectorSpace, vector_space

Array = jax.Array


def hat(x: ArrayLike) -> Array:
    """
    Map a vector from R^3 or R^6 to so(3) or se(3).

    Args:
        x: Vector with 3 or 6 components, as (n,), (n, 1) or (1, n)

    Returns:
        (3, 3) or (4, 4) Lie algebra matrix

    Raises:
        UnsupportedShapeError: For any other shape.
    """
    x = as_matrix(x)
    length = vector_length(x)
    if length == 3:
        return so3.hat(x)
    if length == 6:
        return se3.hat(x)
    raise UnsupportedShapeError(f"hat requires a vector with 3 or 6 components, got shape {x.shape}")


def antihat(x: ArrayLike) -> Array:
    """Map an so(3) or se(3) matrix back to R^3 or R^6."""
    x = as_matrix(x)
    space = vector_space(x)
    if space is VectorSpace.ALGEBRA_SO3:
        return so3.antihat(x)
    if space is VectorSpace.ALGEBRA_SE3:
        return se3.antihat(x)
    raise UnsupportedAlgebraElementError("antihat", space)


def adjoint(x: ArrayLike) -> Array:
    """
    Adjoint representation of a Lie algebra or Lie group element.

    so(3) and SO(3) elements are their own adjoint and are returned as they
    are; se(3) and SE(3) elements map to 6x6 block matrices.
    """
    x = as_matrix(x)
    space = vector_space(x)
    if space in (VectorSpace.ALGEBRA_SO3, VectorSpace.GROUP_SO3):
        return x
    if space is VectorSpace.ALGEBRA_SE3:
        return se3.adjoint_algebra(x)
    if space is VectorSpace.GROUP_SE3:
        return se3.adjoint_group(x)
    raise UnsupportedAlgebraElementError("adjoint", space)


def antiadjoint(x: ArrayLike) -> Array:
    """Inverse of ``adjoint``."""
    x = as_matrix(x)
    space = vector_space(x)
    if space in (VectorSpace.ALGEBRA_SO3, VectorSpace.GROUP_SO3):
        return x
    if space is VectorSpace.ALGEBRA_AD_SE3:
        return se3.antiadjoint_algebra(x)
    if space is VectorSpace.GROUP_AD_SE3:
        return se3.antiadjoint_group(x)
    raise UnsupportedAlgebraElementError("antiadjoint", space)


def coadjoint(x: ArrayLike) -> Array:
    """Coadjoint representation of an so(3) or se(3) element."""
    x = as_matrix(x)
    space = vector_space(x)
    if space is VectorSpace.ALGEBRA_SO3:
        return x
    if space is VectorSpace.ALGEBRA_SE3:
        return se3.coadjoint(x)
    raise UnsupportedAlgebraElementError("coadjoint", space)


def anticoadjoint(x: ArrayLike) -> Array:
    """Inverse of ``coadjoint``."""
    x = as_matrix(x)
    space = vector_space(x)
    if space is VectorSpace.ALGEBRA_SO3:
        return x
    if space is VectorSpace.ALGEBRA_COAD_SE3:
        return se3.anticoadjoint(x)
    raise UnsupportedAlgebraElementError("anticoadjoint", space)


def tilde(x: ArrayLike) -> Array:
    """Adjoint matrix of a vector, ``adjoint(hat(x))``."""
    return adjoint(hat(x))


def antitilde(x: ArrayLike) -> Array:
    """Inverse of ``tilde``."""
    return antihat(antiadjoint(x))


def check(x: ArrayLike) -> Array:
    """Coadjoint matrix of a vector, ``coadjoint(hat(x))``."""
    return coadjoint(hat(x))


def anticheck(x: ArrayLike) -> Array:
    """Inverse of ``check``."""
    return antihat(anticoadjoint(x))


def exp(x: ArrayLike) -> Array:
    """
    Matrix exponential.

    | input                  | result     |
    |------------------------|------------|
    | so(3), R^3             | SO(3)      |
    | se(3), R^6             | SE(3)      |
    | ad(se(3))              | Ad(SE(3))  |
    | other square matrix    | series     |

    The series is truncated after a fixed number of terms without warning.

    Raises:
        UnsupportedAlgebraElementError: For group elements and non-square
                                        matrices.
    """
    x = as_matrix(x)
    space = vector_space(x)
    if space is VectorSpace.ALGEBRA_SO3:
        return so3.exp(x)
    if space is VectorSpace.ALGEBRA_SE3:
        return se3.exp(x)
    if space is VectorSpace.ALGEBRA_AD_SE3:
        return se3.adjoint_group(se3.exp(hat(antitilde(x))))
    if space is VectorSpace.LINEAR:
        if is_vector(x) and x.size == 3:
            return so3.exp(so3.hat(x))
        if is_vector(x) and x.size == 6:
            return se3.exp(se3.hat(x))
        if is_square(x):
            return series.expseries(x)
    raise UnsupportedAlgebraElementError("exp", space)


def tang(x: ArrayLike) -> Array:
    """
    Tangent map of the matrix exponential.

    | input                        | result  |
    |------------------------------|---------|
    | so(3), R^3                   | R^3x3   |
    | se(3), ad(se(3)), R^6        | R^6x6   |
    | other square matrix          | series  |

    Raises:
        UnsupportedAlgebraElementError: For group elements, coadjoint
                                        elements and non-square matrices.
    """
    x = as_matrix(x)
    space = vector_space(x)
    if space is VectorSpace.ALGEBRA_SO3:
        return so3.tang(x)
    if space is VectorSpace.ALGEBRA_AD_SE3:
        return se3.tang(x)
    if space is VectorSpace.ALGEBRA_SE3:
        return se3.tang(se3.adjoint_algebra(x))
    if space is VectorSpace.LINEAR:
        if is_vector(x) and x.size == 3:
            return so3.tang(so3.hat(x))
        if is_vector(x) and x.size == 6:
            return se3.tang(tilde(x))
        if is_square(x):
            return series.tangseries(x)
    raise UnsupportedAlgebraElementError("tang", space)


def log(x: ArrayLike) -> Array:
    """
    Matrix logarithm.

    | input                  | result     |
    |------------------------|------------|
    | SO(3)                  | so(3)      |
    | SE(3)                  | se(3)      |
    | Ad(SE(3))              | ad(se(3))  |
    | other square matrix    | series     |

    Rotation angles are returned in (-pi, pi]. SO(3) uses Spurrier's
    quaternion extraction rather than the arccos formula, which is badly
    conditioned near 0 and pi.

    Raises:
        UnsupportedAlgebraElementError: For algebra elements and non-square
                                        matrices.
    """
    x = as_matrix(x)
    space = vector_space(x)
    if space is VectorSpace.GROUP_SO3:
        return so3.log(x)
    if space is VectorSpace.GROUP_SE3:
        return se3.log(x)
    if space is VectorSpace.GROUP_AD_SE3:
        return se3.adjoint_algebra(se3.log(se3.antiadjoint_group(x)))
    if space is VectorSpace.LINEAR and is_square(x):
        return series.logseries(x)
    raise UnsupportedAlgebraElementError("log", space)


__all__ = [
    "hat",
    "antihat",
    "adjoint",
    "antiadjoint",
    "coadjoint",
    "anticoadjoint",
    "tilde",
    "antitilde",
    "check",
    "anticheck",
    "exp",
    "tang",
    "log",
]
