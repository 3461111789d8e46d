"""
Dense real linear algebra, just enough for the linear algebra of phrases.

- Matrix: immutable row-major matrices with rank by Gaussian elimination
- EigenSolver: power iteration with deflation and random restarts
- singular_value_decomposition: signed SVD from two eigenbases
"""

from chuk_music_algebra.numeric.matrix import Matrix, Vector, distance, dot, l2_norm, normalize
from chuk_music_algebra.numeric.svd import (
    EigenSolver,
    SingularValueDecomposition,
    rayleigh_quotient,
    singular_value_decomposition,
)

__all__ = [
    # Matrix
    "Matrix",
    "Vector",
    "dot",
    "l2_norm",
    "distance",
    "normalize",
    # Decomposition
    "EigenSolver",
    "SingularValueDecomposition",
    "rayleigh_quotient",
    "singular_value_decomposition",
]
