"""
Lie group and Lie algebra maps for rigid-body kinematics.

This module provides:
- SO(3) rotations and so(3) rotation vectors (so3 module)
- SE(3) rigid body transforms and se(3) twists (se3 module)
- Structural classification of matrices (variant module)
- Power series fallbacks (series module)
- Dispatching hat/adjoint/exp/log/tang maps (lie module)

All functions are pure and return new JAX arrays.
"""

from . import lie, rotation, se3, series, so3, variant
from .variant import VectorSpace, vector_space

__all__ = [
    "lie",
    "rotation",
    "se3",
    "series",
    "so3",
    "variant",
    "VectorSpace",
    "vector_space",
]
