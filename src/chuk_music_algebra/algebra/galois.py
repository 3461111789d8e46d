"""
Galois algebra - phrases as polynomials over GF(2^12).

A chord becomes a field element by setting bit f for every sounding pitch
class, where f is its position on the circle of fifths from the tonic. A
phrase of t chords C_0 .. C_{t-1} becomes the unique polynomial F of degree
< t with F(a^i) = C_i, for a fixed generator a. Solving for the
coefficients means inverting the t x t matrix H[i][j] = a^(i*j).

Going back, a polynomial F is read as the phrase F(a^0), F(a^1), ...

Inverses need a modulus M: F is reduced mod M, the remainder is inverted
with the extended Euclidean algorithm, and the difference is added back so
the quotient part of F is preserved.
"""

from __future__ import annotations

import logging

from chuk_music_algebra.algebra.base import Algebra
from chuk_music_algebra.constants import (
    DEFAULT_GENERATOR_BITS,
    DEFAULT_OCTAVE,
    FIELD_DEGREE,
    MULTIPLICATIVE_ORDER,
    ErrorMessages,
)
from chuk_music_algebra.core.chord import Chord
from chuk_music_algebra.core.phrase import Phrase, lcm_cpb, require_compatible
from chuk_music_algebra.core.pitch import Pitch, PitchClass
from chuk_music_algebra.errors import NoInverseError
from chuk_music_algebra.field.gf4096 import FieldElement
from chuk_music_algebra.field.polynomial import Polynomial
from chuk_music_algebra.models.settings import GaloisSettings

logger = logging.getLogger(__name__)

DEFAULT_GENERATOR = FieldElement(DEFAULT_GENERATOR_BITS)


class GaloisAlgebra(Algebra):
    """
    The Galois algebra over GF(2^12).

    Args:
        generator: The element a whose powers index chord slots
            (default 1 + x + x^3)
        modulus: Polynomial M used by inverse(); without it inverse() raises

    Example:
        >>> algebra = GaloisAlgebra()
        >>> m = algebra.modulus_for(p1, p2)
        >>> GaloisAlgebra(modulus=m).inverse(p1) == p2
        True
    """

    name = "galois"

    def __init__(
        self,
        generator: FieldElement | None = None,
        modulus: Polynomial | None = None,
    ):
        generator = generator if generator is not None else DEFAULT_GENERATOR
        if generator.is_zero():
            raise ValueError(ErrorMessages.ZERO_GENERATOR)
        self.generator = generator
        self.modulus = modulus
        self._powers: list[FieldElement] = [FieldElement.ONE]

    @classmethod
    def from_settings(cls, settings: GaloisSettings) -> GaloisAlgebra:
        modulus = Polynomial.from_dict(settings.modulus) if settings.modulus is not None else None
        return cls(FieldElement(settings.generator), modulus)

    def to_settings(self) -> GaloisSettings:
        """Settings that rebuild this algebra."""
        modulus = self.modulus.to_dict() if self.modulus is not None else None
        return GaloisSettings(generator=self.generator.bits, modulus=modulus)

    def _power(self, i: int) -> FieldElement:
        """a^i, cached; exponents wrap at the multiplicative group order."""
        i %= MULTIPLICATIVE_ORDER
        while len(self._powers) <= i:
            self._powers.append(self._powers[-1] * self.generator)
        return self._powers[i]

    # Music <-> field

    def to_element(self, chord: Chord, key: int) -> FieldElement:
        """Set bit f for each pitch class sounding with positive dynamic."""
        bits = 0
        for pitch, dynamic in chord:
            if dynamic > 0:
                bits |= 1 << pitch.pitch_class.fifths_index(key)
        return FieldElement(bits)

    def to_chord(self, element: FieldElement, key: int) -> Chord:
        """One note per set bit, ascending, in the default octave at dynamic 1."""
        return Chord(
            tuple(
                (Pitch.of(PitchClass.from_fifths_index(i, key), DEFAULT_OCTAVE), 1.0)
                for i in range(FIELD_DEGREE)
                if element.coefficient(i)
            )
        )

    def evaluate(self, poly: Polynomial, i: int) -> FieldElement:
        """F(a^i), using the cached powers of a."""
        y = FieldElement.ZERO
        for degree, c in poly.terms():
            y = y + c * self._power(i * degree)
        return y

    def to_polynomial(self, phrase: Phrase) -> Polynomial:
        """The interpolating polynomial with F(a^i) equal to slot i."""
        values = [self.to_element(chord, phrase.key) for chord in phrase]
        return Polynomial.from_coefficients(self._solve_vandermonde(values))

    def to_phrase(
        self,
        poly: Polynomial,
        key: int,
        bpm: int,
        cpb: int,
        length: int | None = None,
    ) -> Phrase:
        """
        Read a polynomial back as a phrase.

        Args:
            length: Number of slots; defaults to deg(F) + 1
        """
        if length is None:
            length = poly.degree + 1
        chords = tuple(self.to_chord(self.evaluate(poly, i), key) for i in range(length))
        return Phrase(chords, key, bpm, cpb)

    def _solve_vandermonde(self, values: list[FieldElement]) -> list[FieldElement]:
        """
        Solve H V = C for V by Gauss-Jordan elimination over the field.

        Raises:
            ValueError: If H is singular, which happens when a repeats
                within the first t powers
        """
        t = len(values)
        rows = [[self._power(i * j) for j in range(t)] + [values[i]] for i in range(t)]

        for col in range(t):
            pivot = next((r for r in range(col, t) if not rows[r][col].is_zero()), None)
            if pivot is None:
                raise ValueError(ErrorMessages.SINGULAR_MATRIX)
            rows[col], rows[pivot] = rows[pivot], rows[col]

            scale = rows[col][col].invert()
            rows[col] = [c * scale for c in rows[col]]
            for r in range(t):
                factor = rows[r][col]
                if r != col and not factor.is_zero():
                    rows[r] = [c + factor * p for c, p in zip(rows[r], rows[col])]

        return [row[t] for row in rows]

    # Operations

    def sum(self, *phrases: Phrase) -> Phrase:
        """
        Add the phrases' polynomials.

        Only key and tempo must agree; the result is read back at the
        first phrase's chords per beat.
        """
        require_compatible(*phrases, duration=False)
        total = Polynomial.zero()
        for phrase in phrases:
            total = total + self.to_polynomial(phrase)
        first = phrases[0]
        return self.to_phrase(total, first.key, first.bpm, first.cpb)

    def magnify(self, scalar: float, phrase: Phrase) -> Phrase:
        """There is no real scaling in GF(2^12); the phrase is returned as is."""
        return phrase

    def product(self, first: Phrase, second: Phrase) -> Phrase:
        require_compatible(first, second, duration=False)
        cpb = lcm_cpb(first, second)
        poly = self.to_polynomial(first.expand(cpb)) * self.to_polynomial(second.expand(cpb))
        return self.to_phrase(poly, first.key, first.bpm, cpb)

    def inverse(self, phrase: Phrase) -> Phrase:
        """
        F + (x' - x) where x = F mod M and x' is the inverse of x mod M.

        Only the part of F below deg(M) changes, but every slot of the
        result can differ. The result has as many slots as the input.

        Raises:
            NoInverseError: If there is no modulus, or F mod M shares a
                factor with M
        """
        if self.modulus is None:
            raise NoInverseError(ErrorMessages.NO_MODULUS)

        poly = self.to_polynomial(phrase)
        remainder = poly % self.modulus
        inverse = remainder.inverse_mod(self.modulus)
        result = poly + (inverse - remainder)
        return self.to_phrase(result, phrase.key, phrase.bpm, phrase.cpb, length=phrase.length)

    def modulus_for(self, first: Phrase, second: Phrase) -> Polynomial:
        """
        A modulus under which first and second are each other's inverse.

        Returns poly(first) * poly(second) - 1. It need not be irreducible;
        factoring it is up to the caller. Build a new GaloisAlgebra with the
        same generator and this modulus to use it.

        inverse() keeps its input's length, so the phrases must have the
        same number of slots for each to invert to the other.

        Raises:
            IncompatiblePhrasesError: On key, tempo, duration or chords-per-beat
                mismatch
        """
        require_compatible(first, second, cpb=True)
        modulus = self.to_polynomial(first) * self.to_polynomial(second) - Polynomial.one()
        logger.info(f"Derived modulus of degree {modulus.degree}")
        return modulus

    def __repr__(self) -> str:
        degree = self.modulus.degree if self.modulus is not None else None
        return f"GaloisAlgebra(generator={self.generator!r}, modulus_degree={degree})"
