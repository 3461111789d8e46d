"""
Algebras of musical composition.

- Algebra: the sum / magnify / product / inverse contract
- create_algebra: a variant by name, from settings
- HarmonicAlgebra: arithmetic on chord spectra
- GaloisAlgebra: interpolating polynomials over GF(2^12)
- LinearAlgebra: 12 x n matrices and their pseudo-inverse
- WaveformAlgebra: the harmonic operations on sampled sound
"""

from chuk_music_algebra.algebra.base import Algebra
from chuk_music_algebra.algebra.factory import ALGEBRA_NAMES, create_algebra
from chuk_music_algebra.algebra.galois import DEFAULT_GENERATOR, GaloisAlgebra
from chuk_music_algebra.algebra.harmonic import (
    HarmonicAlgebra,
    difference_key_number,
    sum_key_number,
)
from chuk_music_algebra.algebra.linear import LinearAlgebra
from chuk_music_algebra.algebra.waveform import WaveformAlgebra, harmonic_tone

__all__ = [
    # Contract
    "Algebra",
    "ALGEBRA_NAMES",
    "create_algebra",
    # Harmonic
    "HarmonicAlgebra",
    "sum_key_number",
    "difference_key_number",
    # Galois
    "GaloisAlgebra",
    "DEFAULT_GENERATOR",
    # Linear
    "LinearAlgebra",
    # Waveform
    "WaveformAlgebra",
    "harmonic_tone",
]
