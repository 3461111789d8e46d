"""
chuk-music-algebra - musical composition as algebra.

Phrases of chords are added, scaled, multiplied and inverted under three
interpretations:

- HarmonicAlgebra: chords as spectra of sines
- GaloisAlgebra: phrases as polynomials over GF(2^12)
- LinearAlgebra: phrases as 12 x n matrices
"""

from chuk_music_algebra.algebra import (
    Algebra,
    GaloisAlgebra,
    HarmonicAlgebra,
    LinearAlgebra,
    WaveformAlgebra,
    create_algebra,
)
from chuk_music_algebra.core import Chord, Phrase, Pitch, PitchClass
from chuk_music_algebra.errors import (
    ConvergenceError,
    IncompatiblePhrasesError,
    NoInverseError,
)

__version__ = "0.1.0"

__all__ = [
    # Music
    "PitchClass",
    "Pitch",
    "Chord",
    "Phrase",
    # Algebras
    "Algebra",
    "HarmonicAlgebra",
    "GaloisAlgebra",
    "LinearAlgebra",
    "WaveformAlgebra",
    "create_algebra",
    # Errors
    "IncompatiblePhrasesError",
    "NoInverseError",
    "ConvergenceError",
]
