"""
JAX Lie maps: coordinate transforms for rigid-body kinematics.

This library maps between R^3/R^6 and the matrix Lie groups SO(3), SE(3),
their Lie algebras and adjoint representations through hat, adjoint,
exponential, logarithm and tangent maps, on top of a small dense linear
algebra kernel.
"""

import logging

import jax
jax.config.update("jax_enable_x64", True)

# Import core modules
from . import core
from . import errors
from . import linalg
from . import transforms

from .errors import (
    LieMapsError,
    NumericalError,
    ShapeError,
    SingularMatrixError,
    SlowConvergenceError,
    UnsupportedAlgebraElementError,
    UnsupportedShapeError,
)
from .linalg import determinant, eigenvalues, invert, norm, solve, trace
from .transforms import VectorSpace, vector_space
from .transforms.lie import (
    adjoint,
    antiadjoint,
    anticheck,
    anticoadjoint,
    antihat,
    antitilde,
    check,
    coadjoint,
    exp,
    hat,
    log,
    tang,
    tilde,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"
__all__ = [
    "core",
    "errors",
    "linalg",
    "transforms",
    "LieMapsError",
    "NumericalError",
    "ShapeError",
    "SingularMatrixError",
    "SlowConvergenceError",
    "UnsupportedAlgebraElementError",
    "UnsupportedShapeError",
    "VectorSpace",
    "vector_space",
    "trace",
    "determinant",
    "norm",
    "solve",
    "invert",
    "eigenvalues",
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
    "log",
    "tang",
]
