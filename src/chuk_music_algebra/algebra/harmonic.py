"""
Harmonic algebra - composition as arithmetic on spectra.

A chord is read as a sum of sines, one per note, weighted by dynamics:

- sum: add the spectra (dynamics add per key number)
- magnify: scale every dynamic
- product: ring modulation; sin(a) sin(b) splits into components at the
  sum and difference frequencies, each rounded to the nearest key number
- inverse: each note becomes an alternating harmonic series

Phrase operations apply these slot by slot after re-gridding every
operand to the least common multiple of their chords per beat.
"""

from __future__ import annotations

import math
from collections.abc import Iterable

from chuk_music_algebra.algebra.base import Algebra
from chuk_music_algebra.constants import (
    HARMONIC_DYNAMIC,
    HARMONIC_EPS,
    HARMONIC_SERIES,
    SEMITONES,
)
from chuk_music_algebra.core.chord import Chord
from chuk_music_algebra.core.phrase import Phrase, lcm_cpb, require_compatible
from chuk_music_algebra.core.pitch import Pitch
from chuk_music_algebra.models.settings import HarmonicSettings


def sum_key_number(ni: int, nj: int) -> int:
    """Key number nearest the sum of the two notes' frequencies."""
    arg = 2 ** (ni / SEMITONES) + 2 ** (nj / SEMITONES)
    return round(SEMITONES * math.log2(arg))


def difference_key_number(ni: int, nj: int) -> int:
    """
    Key number nearest the difference of the two notes' frequencies.

    The absolute value is taken since cos(a) = cos(-a). Undefined for ni == nj.
    """
    arg = abs(2 ** (ni / SEMITONES) - 2 ** (nj / SEMITONES))
    return round(SEMITONES * math.log2(arg))


class HarmonicAlgebra(Algebra):
    """
    The chromatic harmonic algebra.

    Args:
        eps: Notes whose combined dynamic is smaller than this are dropped
    """

    name = "harmonic"

    def __init__(self, eps: float = HARMONIC_EPS):
        self.eps = eps

    @classmethod
    def from_settings(cls, settings: HarmonicSettings) -> HarmonicAlgebra:
        return cls(eps=settings.eps)

    # Chord level

    def _collect(self, contributions: Iterable[tuple[int, float]]) -> Chord:
        dynamics: dict[int, float] = {}
        for n, dynamic in contributions:
            dynamics[n] = dynamics.get(n, 0.0) + dynamic
        return Chord.from_mapping({n: d for n, d in dynamics.items() if abs(d) >= self.eps})

    def sum_chords(self, *chords: Chord) -> Chord:
        """Union of the chords with dynamics added per key number."""
        return self._collect((pitch.n, dyn) for chord in chords for pitch, dyn in chord)

    def magnify_chord(self, scalar: float, chord: Chord) -> Chord:
        return chord.magnify(scalar)

    def product_chords(self, first: Chord, second: Chord) -> Chord:
        """
        Ring-modulate two chords.

        Each pair of notes contributes di * dj / 2 at the sum and at the
        difference frequency. A note times itself would give cos(0) = 1 as
        the difference term; that constant is dropped.
        """

        def contributions() -> Iterable[tuple[int, float]]:
            for pi, di in first:
                for pj, dj in second:
                    dynamic = di * dj / 2
                    yield sum_key_number(pi.n, pj.n), dynamic
                    if pi.n != pj.n:
                        yield difference_key_number(pi.n, pj.n), dynamic

        return self._collect(contributions())

    def inverse_note(self, pitch: Pitch) -> Chord:
        """The alternating (+2, -2, +2, ...) harmonic series above a note."""
        return Chord(
            tuple(
                (pitch.transpose(offset), HARMONIC_DYNAMIC if i % 2 == 0 else -HARMONIC_DYNAMIC)
                for i, offset in enumerate(HARMONIC_SERIES)
            )
        )

    def inverse_chord(self, chord: Chord) -> Chord:
        return self.sum_chords(*(self.inverse_note(pitch).magnify(dyn) for pitch, dyn in chord))

    # Phrase level

    def sum(self, *phrases: Phrase) -> Phrase:
        require_compatible(*phrases)
        cpb = lcm_cpb(*phrases)
        grids = [p.expand(cpb).chords for p in phrases]
        sums = tuple(self.sum_chords(*slot) for slot in zip(*grids, strict=True))
        return Phrase(sums, phrases[0].key, phrases[0].bpm, cpb)

    def magnify(self, scalar: float, phrase: Phrase) -> Phrase:
        chords = tuple(self.magnify_chord(scalar, chord) for chord in phrase)
        return Phrase(chords, phrase.key, phrase.bpm, phrase.cpb)

    def product(self, first: Phrase, second: Phrase) -> Phrase:
        require_compatible(first, second)
        cpb = lcm_cpb(first, second)
        pairs = zip(first.expand(cpb).chords, second.expand(cpb).chords, strict=True)
        products = tuple(self.product_chords(a, b) for a, b in pairs)
        return Phrase(products, first.key, first.bpm, cpb)

    def inverse(self, phrase: Phrase) -> Phrase:
        chords = tuple(self.inverse_chord(chord) for chord in phrase)
        return Phrase(chords, phrase.key, phrase.bpm, phrase.cpb)

    def __repr__(self) -> str:
        return f"HarmonicAlgebra(eps={self.eps})"
