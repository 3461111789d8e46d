"""
Exact arithmetic - GF(2^12) and polynomials over it.

- FieldElement: 12-bit vectors modulo 1 + x^3 + x^12
- Polynomial: sparse polynomials with FieldElement coefficients
- is_irreducible / random_irreducible: irreducibility testing and search
"""

from chuk_music_algebra.field.gf4096 import FieldElement
from chuk_music_algebra.field.irreducible import (
    is_irreducible,
    random_irreducible,
    random_polynomial,
)
from chuk_music_algebra.field.polynomial import Polynomial

__all__ = [
    "FieldElement",
    "Polynomial",
    "is_irreducible",
    "random_irreducible",
    "random_polynomial",
]
