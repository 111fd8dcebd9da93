"""Power series for the matrix exponential, its tangent map and logarithm.

These are the fallbacks for inputs without a closed form and for rotation
angles too small for the closed forms to be accurate. Summation stops once a
term's Frobenius norm drops below the tolerance or after a fixed number of
terms. Truncation is not reported to the caller; inputs of large norm (or,
for the logarithm, far from the identity) may come back unconverged.

``exp_sum``, ``tang_sum`` and ``log_sum`` are pure JAX and can be used under
``jax.jit``. They return the partial sum together with a flag telling whether
it converged. ``expseries``, ``tangseries`` and ``logseries`` evaluate them
eagerly and record truncation in the log.
"""

import logging
import math
from typing import Sequence, Tuple

import jax
import jax.numpy as jnp
from jax import lax

from ..core.config import DEFAULT_TOLERANCES
from ..core.matrix import ArrayLike, as_matrix, frobenius_norm, identity, require_square

Array = jax.Array

logger = logging.getLogger(__name__)

_TERMS = range(DEFAULT_TOLERANCES.series_max_terms)

# Term k is base^k divided by entry k. Entry 0 stands for the leading term and is never read.
_EXP_DENOMINATORS = [float(math.factorial(k)) for k in _TERMS]
_TANG_DENOMINATORS = [float(math.factorial(k + 1)) for k in _TERMS]
_LOG_DENOMINATORS = [1.0] + [float((-1) ** (k + 1) * k) for k in _TERMS[1:]]


def _sum_series(start: Array, base: Array, denominators: Sequence[float]) -> Tuple[Array, Array]:
    denominators = jnp.asarray(denominators, dtype=base.dtype)

    def cond(state):
        k, _, _, converged = state
        return jnp.logical_and(k < denominators.shape[0], jnp.logical_not(converged))

    def body(state):
        k, result, power, _ = state
        power = jnp.matmul(power, base)
        term = power / denominators[k]
        return k + 1, result + term, power, frobenius_norm(term) < DEFAULT_TOLERANCES.series

    init = (jnp.asarray(1, dtype=jnp.int32), start, identity(base.shape[0]), jnp.asarray(False))
    _, result, _, converged = lax.while_loop(cond, body, init)
    return result, converged


def exp_sum(x: ArrayLike) -> Tuple[Array, Array]:
    """
    Partial sum of ``sum_k x^k / k!``.

    Args:
        x: (n, n) matrix

    Returns:
        (n, n) approximation of ``exp(x)`` and a boolean 0-d array that is
        False when the series was truncated before converging
    """
    x = as_matrix(x)
    require_square(x, "Exponential series")
    return _sum_series(identity(x.shape[0]), x, _EXP_DENOMINATORS)


def tang_sum(x: ArrayLike) -> Tuple[Array, Array]:
    """Partial sum of ``sum_k (-x)^k / (k + 1)!``, as ``exp_sum``."""
    x = as_matrix(x)
    require_square(x, "Tangent series")
    return _sum_series(identity(x.shape[0]), -x, _TANG_DENOMINATORS)


def log_sum(x: ArrayLike) -> Tuple[Array, Array]:
    """Partial sum of ``sum_k (-1)^(k+1) (x - I)^k / k``, as ``exp_sum``."""
    x = as_matrix(x)
    require_square(x, "Logarithm series")
    return _sum_series(jnp.zeros_like(x), x - identity(x.shape[0]), _LOG_DENOMINATORS)


def _report(name: str, converged: Array) -> None:
    if not bool(converged):
        logger.debug("%s truncated after %d terms", name, DEFAULT_TOLERANCES.series_max_terms)


def expseries(x: ArrayLike) -> Array:
    """
    Matrix exponential as ``sum_k x^k / k!``.

    Args:
        x: (n, n) matrix

    Returns:
        (n, n) approximation of ``exp(x)``
    """
    result, converged = exp_sum(x)
    _report("exponential series", converged)
    return result


def tangseries(x: ArrayLike) -> Array:
    """
    Tangent map of the exponential as ``sum_k (-x)^k / (k + 1)!``.

    Args:
        x: (n, n) matrix

    Returns:
        (n, n) approximation of ``T(x)``
    """
    result, converged = tang_sum(x)
    _report("tangent series", converged)
    return result


def logseries(x: ArrayLike) -> Array:
    """
    Matrix logarithm as ``sum_k (-1)^(k+1) (x - I)^k / k``.

    Only converges for ``x`` close to the identity.

    Args:
        x: (n, n) matrix

    Returns:
        (n, n) approximation of ``log(x)``
    """
    x = as_matrix(x)
    require_square(x, "Logarithm series")
    logger.debug("evaluating logarithm series for a %dx%d matrix", *x.shape)
    result, converged = log_sum(x)
    _report("logarithm series", converged)
    return result


__all__ = ["exp_sum", "tang_sum", "log_sum", "expseries", "tangseries", "logseries"]
