"""Dense matrix helpers on top of JAX arrays.

JAX arrays are immutable, so every helper here returns a new array and none
of them can alias or modify its input. Vectors are accepted as 1-D arrays,
columns (n, 1) or rows (1, n); vector results are always returned 1-D.
"""

from typing import Sequence, Tuple, Union

import jax
import jax.numpy as jnp

from ..errors import ShapeError
from .config import DEFAULT_TOLERANCES

Array = jax.Array
ArrayLike = Union[Array, Sequence, float]


def as_matrix(x: ArrayLike) -> Array:
    """Copy *x* (nested sequences, numpy or JAX array) into a float64 array."""
    return jnp.array(x, dtype=jnp.float64)


def identity(n: int) -> Array:
    return jnp.eye(n, dtype=jnp.float64)


def zeros(shape: Tuple[int, ...]) -> Array:
    return jnp.zeros(shape, dtype=jnp.float64)


def is_square(x: Array) -> bool:
    return x.ndim == 2 and x.shape[0] == x.shape[1]


def is_vector(x: Array) -> bool:
    """True for 1-D arrays and for 2-D arrays with a single row or column."""
    if x.ndim == 1:
        return True
    return x.ndim == 2 and (x.shape[0] == 1 or x.shape[1] == 1)


def vector_length(x: Array) -> int:
    """Number of components of a vector, or -1 if *x* is not a vector."""
    if not is_vector(x):
        return -1
    return x.size


def flatten_vector(x: Array) -> Array:
    if not is_vector(x):
        raise ShapeError(f"expected a vector, got shape {x.shape}")
    return jnp.reshape(x, (-1,))


def as_column(x: Array) -> Array:
    return jnp.reshape(flatten_vector(x), (-1, 1))


def require_square(x: Array, what: str) -> None:
    if not is_square(x):
        raise ShapeError(f"{what} is defined only on square matrices, got shape {x.shape}")


def matmul(a: Array, b: Array) -> Array:
    """Matrix product with an explicit inner-dimension check."""
    if a.shape[-1] != b.shape[0]:
        raise ShapeError(f"cannot multiply shapes {a.shape} and {b.shape}")
    return jnp.matmul(a, b)


def approx_equal(a: ArrayLike, b: ArrayLike, tolerance: float = DEFAULT_TOLERANCES.structure) -> bool:
    """Elementwise comparison with an absolute tolerance.

    Arrays of different shape are never equal.
    """
    a = jnp.asarray(a)
    b = jnp.asarray(b)
    if a.shape != b.shape:
        return False
    return bool(jnp.all(jnp.abs(a - b) <= tolerance))


def matrix_power(a: Array, exponent: int) -> Array:
    """
    Integer power of a square matrix.

    Args:
        a: (n, n) matrix
        exponent: Power; zero gives the identity, negative powers invert
                  ``a`` first.

    Returns:
        (n, n) matrix ``a**exponent``

    Raises:
        ShapeError: If ``a`` is not square.
        SingularMatrixError: If ``exponent`` is negative and ``a`` is singular.
    """
    require_square(a, "Matrix power")
    if exponent < 0:
        from ..linalg.kernel import invert

        a = invert(a)
        exponent = -exponent

    result = identity(a.shape[0])
    for _ in range(exponent):
        result = jnp.matmul(result, a)
    return result


def frobenius_norm(x: Array) -> Array:
    """sqrt(trace(x x^T)) as a 0-d array."""
    return jnp.sqrt(jnp.sum(x * x))


__all__ = [
    "Array",
    "ArrayLike",
    "as_matrix",
    "identity",
    "zeros",
    "is_square",
    "is_vector",
    "vector_length",
    "flatten_vector",
    "as_column",
    "require_square",
    "matmul",
    "approx_equal",
    "matrix_power",
    "frobenius_norm",
]
