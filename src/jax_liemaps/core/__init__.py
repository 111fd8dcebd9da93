"""Matrix substrate and configuration shared by all jax_liemaps modules."""

from .config import DEFAULT_TOLERANCES, Tolerances
from . import matrix

__all__ = ["DEFAULT_TOLERANCES", "Tolerances", "matrix"]
