"""SO(3) and so(3) closed forms in JAX.

Algebra elements are 3x3 skew-symmetric matrices; ``hat`` and ``antihat``
convert to and from rotation vectors. The exponential and tangent closed
forms switch to their power series when the rotation angle is below
``DEFAULT_TOLERANCES.small_angle``, where the closed forms lose accuracy.
Both branches are evaluated and selected with ``jnp.where``, so every map
here can be traced by ``jax.jit``.
"""

import jax
import jax.numpy as jnp

from ..core.config import DEFAULT_TOLERANCES
from ..core.matrix import flatten_vector, identity
from . import rotation, series

Array = jax.Array


def hat(v: Array) -> Array:
    """
    Convert a rotation vector to its skew-symmetric matrix.

    Args:
        v: 3-component vector

    Returns:
        (3, 3) skew-symmetric matrix with ``hat(v) @ u == cross(v, u)``
    """
    v = flatten_vector(v)
    zero = jnp.zeros((), dtype=v.dtype)

    return jnp.stack([
        jnp.stack([zero, -v[2], v[1]]),
        jnp.stack([v[2], zero, -v[0]]),
        jnp.stack([-v[1], v[0], zero])
    ])


def antihat(x: Array) -> Array:
    """Rotation vector of a skew-symmetric matrix, shape (3,)."""
    return jnp.stack([x[2, 1], x[0, 2], x[1, 0]])


def angle(x: Array) -> Array:
    """Rotation angle of an so(3) element, ``sqrt(-trace(x^2) / 2)``, as a 0-d array."""
    return jnp.sqrt(jnp.maximum(-0.5 * jnp.trace(jnp.matmul(x, x)), 0.0))


def exp(x: Array) -> Array:
    """
    so(3) exponential map (Rodrigues' formula).

    ``exp(x) = I + sin(n)/n x + (1 - cos(n))/n^2 x^2`` with ``n`` the
    rotation angle.

    Args:
        x: (3, 3) skew-symmetric matrix

    Returns:
        (3, 3) rotation matrix
    """
    n = angle(x)
    small = n < DEFAULT_TOLERANCES.small_angle
    n = jnp.where(small, 1.0, n)
    a = jnp.sin(n) / n
    b = (1 - jnp.cos(n)) / n**2
    closed = identity(3) + a * x + b * jnp.matmul(x, x)
    return jnp.where(small, series.exp_sum(x)[0], closed)


def tang(x: Array) -> Array:
    """
    Tangent map of the so(3) exponential.

    ``T(x) = I - (1 - cos(n))/n^2 x + (1 - sin(n)/n)/n^2 x^2``

    Args:
        x: (3, 3) skew-symmetric matrix

    Returns:
        (3, 3) tangent operator
    """
    n = angle(x)
    small = n < DEFAULT_TOLERANCES.small_angle
    n = jnp.where(small, 1.0, n)
    a = jnp.sin(n) / n
    b = (1 - jnp.cos(n)) / n**2
    closed = identity(3) - b * x + (1 - a) / n**2 * jnp.matmul(x, x)
    return jnp.where(small, series.tang_sum(x)[0], closed)


def log(R: Array) -> Array:
    """
    SO(3) logarithm map.

    The rotation is first converted to a quaternion with Spurrier's
    algorithm; the angle ``2 atan2(|q_v|, q_w)`` is then reduced into
    (-pi, pi].

    Args:
        R: (3, 3) rotation matrix

    Returns:
        (3, 3) skew-symmetric matrix
    """
    q = rotation.matrix_to_quaternion(R)
    qv = q[1:]
    n = jnp.sqrt(jnp.dot(qv, qv))
    theta = jnp.fmod(2 * jnp.arctan2(n, q[0]), 2 * jnp.pi)
    theta = jnp.where(theta > jnp.pi, theta - 2 * jnp.pi, theta)
    theta = jnp.where(theta < -jnp.pi, theta + 2 * jnp.pi, theta)
    # The identity has qv == 0 and maps to the zero matrix.
    scale = jnp.where(n > 0, theta / jnp.where(n > 0, n, 1.0), 0.0)
    return hat(scale * qv)


__all__ = ["hat", "antihat", "angle", "exp", "tang", "log"]
