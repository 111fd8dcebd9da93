"""Exception types raised by jax_liemaps.

Shape and dispatch errors are programmer errors and subclass ValueError.
Numerical failures (singular pivots, eigenvalue iterations that do not
converge) subclass ArithmeticError so callers can branch on them.
"""


class LieMapsError(Exception):
    """Base exception for all jax_liemaps errors."""

    pass


class ShapeError(LieMapsError, ValueError):
    """Input shape violates the precondition of an operation."""

    pass


class UnsupportedShapeError(ShapeError):
    """Vector has a size that has no Lie algebra counterpart."""

    pass


class UnsupportedAlgebraElementError(LieMapsError, ValueError):
    """Matrix does not belong to a vector space the operation is defined on."""

    def __init__(self, operation: str, variant) -> None:
        self.operation = operation
        self.variant = variant
        super().__init__(f"{operation} is not defined on elements of {variant.value}")


class NumericalError(LieMapsError, ArithmeticError):
    """Base class for recoverable numerical failures."""

    pass


class SingularMatrixError(NumericalError):
    """LU pivot smaller than the tolerance."""

    pass


class SlowConvergenceError(NumericalError):
    """Eigenvalue iteration exhausted its iteration budget."""

    pass


__all__ = [
    "LieMapsError",
    "ShapeError",
    "UnsupportedShapeError",
    "UnsupportedAlgebraElementError",
    "NumericalError",
    "SingularMatrixError",
    "SlowConvergenceError",
]
