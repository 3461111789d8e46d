"""
Constants for the phrase algebras.

No magic numbers - reference pitch, field polynomial and numeric defaults
all live here.
"""

import math

# Reference pitch: A4 is key number 57 (12 * 4 + 9) at 440 Hz
REFERENCE_KEY_NUMBER = 57
REFERENCE_ANGULAR_FREQUENCY = 2 * math.pi * 440

# Octave used when an algebra turns a coordinate back into a pitch
DEFAULT_OCTAVE = 4

# Semitones per octave, and the circle-of-fifths step
SEMITONES = 12
FIFTH = 7

# GF(2^12): reduction polynomial M0 = 1 + x^3 + x^12 as a bit mask
FIELD_DEGREE = 12
FIELD_ORDER = 1 << FIELD_DEGREE  # 4096 elements
FIELD_MASK = FIELD_ORDER - 1
FIELD_MODULUS = (1 << 12) | (1 << 3) | 1
MULTIPLICATIVE_ORDER = FIELD_ORDER - 1  # a^4095 == 1 for every nonzero a

# Default Galois generator a = 1 + x + x^3
DEFAULT_GENERATOR_BITS = 0b1011

# Half-step offsets of successive harmonics above a fundamental.
# The list stops where successive harmonics land on the same key number.
HARMONIC_SERIES = (0, 19, 28, 34, 38, 42, 44, 47, 49, 51, 53, 54, 56, 57)
HARMONIC_DYNAMIC = 2.0

# Highest angular frequency rendered by the waveform inverse
MAX_ANGULAR_FREQUENCY = 2 * math.pi * 12500

# Numeric defaults
HARMONIC_EPS = 1e-4
LINEAR_EPS = 1e-3
LINEAR_PMAX = 200
LINEAR_PEPS = 1e-4

# Fraction of each slot used for the linear fade in/out
FADE_FRACTION = 0.01

# Standard sample rate
DEFAULT_SAMPLE_RATE = 44100


class ErrorMessages:
    """Standardized error messages."""

    KEY_MISMATCH = "Cannot mix phrases of different key"
    TEMPO_MISMATCH = "Cannot mix phrases of different tempo"
    DURATION_MISMATCH = "Cannot mix phrases of different duration"
    CPB_MISMATCH = (
        "Phrases have different chords/beat; expand them to their lcm_cpb value first"
    )
    NO_PHRASES = "At least one phrase is required"
    BAD_EXPANSION = "Could not expand: {cpb} is not a multiple of cpb={current}"
    ZERO_INVERSE = "Cannot invert the zero element"
    ZERO_DIVISOR = "Cannot divide by the zero polynomial"
    NO_MODULUS = "This Galois algebra has no modulus M"
    NOT_COPRIME = "Polynomial has no inverse modulo M (common factor {gcd})"
    ZERO_GENERATOR = "The Galois generator must be nonzero"
    SINGULAR_MATRIX = "Matrix is singular over GF(2^12); choose a generator of higher order"
    INVALID_PITCH = "Invalid pitch: '{pitch}'"
    INVALID_DYNAMIC = "Invalid dynamic in '{token}'"
    INVALID_BEAT = "Invalid beat count: '{beat}'"
    INVALID_HEADER = "Phrase text needs a key line and a bpm line"
    NOT_CONVERGED = "Power iteration for vector {index}/{rank} gave up after {restarts} restarts"
