"""SE(3) and se(3) closed forms in JAX.

Twists are 6-vectors ``(v, w)``: linear part first, angular part last. The
se(3) matrix of a twist is ``[[hat(w), v], [0, 0]]``. Adjoint and coadjoint
representations are 6x6 block matrices acting on twists and wrenches.
"""

import jax
import jax.numpy as jnp

from ..core.config import DEFAULT_TOLERANCES
from ..core.matrix import flatten_vector, identity, matrix_power
from . import series, so3

Array = jax.Array


def from_position_and_rotation(p: Array, R: Array) -> Array:
    """
    Construct SE(3) transform from position and rotation.

    Args:
        p: 3-component position vector
        R: (3, 3) rotation matrix

    Returns:
        (4, 4) homogeneous transformation matrix
    """
    T = identity(4)
    T = T.at[:3, :3].set(R)
    T = T.at[:3, 3].set(flatten_vector(p))
    return T


def get_position(T: Array) -> Array:
    """Translation column of a 4x4 matrix, shape (3,)."""
    return T[:3, 3]


def get_rotation(T: Array) -> Array:
    """Top-left 3x3 block of a 4x4 matrix."""
    return T[:3, :3]


def inverse(T: Array) -> Array:
    """
    Inverse of an SE(3) transformation using its block structure.

    T^-1 = [[R^T, -R^T @ t], [0, 1]]

    Args:
        T: (4, 4) transformation matrix

    Returns:
        (4, 4) inverse transformation matrix
    """
    R_inv = get_rotation(T).T
    return from_position_and_rotation(-jnp.matmul(R_inv, get_position(T)), R_inv)


def hat(twist: Array) -> Array:
    """
    Convert a twist to its se(3) matrix.

    Args:
        twist: 6-component vector [vx, vy, vz, wx, wy, wz]

    Returns:
        (4, 4) matrix with rotation block ``hat(w)``, translation ``v`` and
        a zero bottom row
    """
    twist = flatten_vector(twist)
    X = jnp.zeros((4, 4), dtype=twist.dtype)
    X = X.at[:3, :3].set(so3.hat(twist[3:]))
    X = X.at[:3, 3].set(twist[:3])
    return X


def antihat(X: Array) -> Array:
    """Twist of an se(3) matrix, shape (6,)."""
    return jnp.concatenate([X[:3, 3], so3.antihat(X[:3, :3])])


def adjoint_algebra(X: Array) -> Array:
    """
    Adjoint representation of an se(3) element.

    ad(X) = [[W, hat(v)], [0, W]]

    Args:
        X: (4, 4) se(3) matrix

    Returns:
        (6, 6) matrix
    """
    W = X[:3, :3]
    zeros = jnp.zeros_like(W)
    return jnp.block([[W, so3.hat(X[:3, 3])], [zeros, W]])


def adjoint_group(T: Array) -> Array:
    """
    Adjoint representation of an SE(3) transformation.

    The adjoint matrix is used to transform twists between coordinate frames.
    Ad(T) = [[R, hat(t) R], [0, R]]

    Args:
        T: (4, 4) transformation matrix

    Returns:
        (6, 6) adjoint matrix
    """
    R = get_rotation(T)
    zeros = jnp.zeros_like(R)
    return jnp.block([[R, jnp.matmul(so3.hat(get_position(T)), R)], [zeros, R]])


def antiadjoint_algebra(A: Array) -> Array:
    """se(3) matrix of an ad(se(3)) element."""
    X = jnp.zeros((4, 4), dtype=A.dtype)
    X = X.at[:3, :3].set(A[:3, :3])
    X = X.at[:3, 3].set(so3.antihat(A[:3, 3:]))
    return X


def antiadjoint_group(A: Array) -> Array:
    """SE(3) transformation of an Ad(SE(3)) element."""
    R = A[:3, :3]
    t = so3.antihat(jnp.matmul(A[:3, 3:], R.T))
    return from_position_and_rotation(t, R)


def coadjoint(X: Array) -> Array:
    """
    Coadjoint representation of an se(3) element.

    ad*(X) = [[0, hat(v)], [hat(v), W]]

    Args:
        X: (4, 4) se(3) matrix

    Returns:
        (6, 6) matrix
    """
    V = so3.hat(X[:3, 3])
    return jnp.block([[jnp.zeros_like(V), V], [V, X[:3, :3]]])


def anticoadjoint(A: Array) -> Array:
    """se(3) matrix of an ad*(se(3)) element."""
    X = jnp.zeros((4, 4), dtype=A.dtype)
    X = X.at[:3, :3].set(A[3:, 3:])
    X = X.at[:3, 3].set(so3.antihat(A[:3, 3:]))
    return X


def exp(X: Array) -> Array:
    """
    se(3) exponential map.

    The rotation block is the so(3) exponential of ``W``; the translation is
    ``T(W)^T v`` with ``T`` the so(3) tangent map.

    Args:
        X: (4, 4) se(3) matrix

    Returns:
        (4, 4) transformation matrix
    """
    W = X[:3, :3]
    t = jnp.matmul(so3.tang(W).T, X[:3, 3])
    return from_position_and_rotation(t, so3.exp(W))


def tang(A: Array) -> Array:
    """
    Tangent map of the SE(3) exponential.

    With ``A = [[W, V], [0, W]]``, ``b`` the rotation angle and
    ``c = -tr(W V) / 2``, the result is ``[[T(W), C], [0, T(W)]]`` where

        C = a1 V + a2 (W V + V W) + a3 W + a4 W^2
        a1 = (cos b - 1) / b^2
        a2 = (b - sin b) / b^3
        a3 = c (2 - 2 cos b - b sin b) / b^4
        a4 = -c (2 + cos b - 3 sin b / b) / b^4

    Args:
        A: (6, 6) ad(se(3)) matrix

    Returns:
        (6, 6) tangent operator
    """
    b = jnp.sqrt(jnp.maximum(-0.25 * jnp.trace(jnp.matmul(A, A)), 0.0))
    small = b < DEFAULT_TOLERANCES.small_angle
    b = jnp.where(small, 1.0, b)

    W = A[:3, :3]
    V = A[:3, 3:]
    c = -0.5 * jnp.trace(jnp.matmul(W, V))
    cos_b, sin_b = jnp.cos(b), jnp.sin(b)
    a1 = (cos_b - 1) / b**2
    a2 = (b - sin_b) / b**3
    a3 = c * (2 - 2 * cos_b - b * sin_b) / b**4
    a4 = -c * (2 + cos_b - 3 * sin_b / b) / b**4
    coupling = (
        a1 * V
        + a2 * (jnp.matmul(W, V) + jnp.matmul(V, W))
        + a3 * W
        + a4 * jnp.matmul(W, W)
    )

    E = identity(6)
    E = E.at[:3, :3].set(so3.tang(W))
    E = E.at[3:, 3:].set(so3.tang(A[3:, 3:]))
    E = E.at[:3, 3:].set(coupling)
    return jnp.where(small, series.tang_sum(A)[0], E)


def log(T: Array) -> Array:
    """
    SE(3) logarithm map.

    The rotation block is the SO(3) logarithm ``W``; the translation is
    ``(T(W)^T)^-1 t``. The inverse goes through the LU kernel, so unlike
    ``exp`` and ``tang`` this map runs eagerly and cannot be jitted.

    Args:
        T: (4, 4) transformation matrix

    Returns:
        (4, 4) se(3) matrix
    """
    W = so3.log(get_rotation(T))
    X = jnp.zeros((4, 4), dtype=T.dtype)
    X = X.at[:3, :3].set(W)
    X = X.at[:3, 3].set(jnp.matmul(matrix_power(so3.tang(W).T, -1), get_position(T)))
    return X


__all__ = [
    "from_position_and_rotation",
    "get_position",
    "get_rotation",
    "inverse",
    "hat",
    "antihat",
    "adjoint_algebra",
    "adjoint_group",
    "antiadjoint_algebra",
    "antiadjoint_group",
    "coadjoint",
    "anticoadjoint",
    "exp",
    "tang",
    "log",
]
