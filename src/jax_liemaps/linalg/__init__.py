"""Small dense linear algebra used by the Lie map engine.

- Numeric kernel (kernel module): trace, determinant, LU solve and inversion
- Eigen solver (eigen module): norms, Gram-Schmidt QR, shifted QR eigenvalues
"""

from . import eigen, kernel
from .eigen import eigenvalues, norm, qr_decompose
from .kernel import LUFactorization, determinant, factorize, invert, solve, trace

__all__ = [
    "eigen",
    "kernel",
    "trace",
    "determinant",
    "LUFactorization",
    "factorize",
    "solve",
    "invert",
    "norm",
    "qr_decompose",
    "eigenvalues",
]
