"""
Waveform algebra - the harmonic algebra computed on sampled sound.

The harmonic algebra rounds every product and inverse back onto keyboard
notes. Here the operations act on the sampled pressure waves instead, so
sum and difference frequencies and the full harmonic series are kept
exactly. The results are sample lists rather than phrases, which is why
this class does not implement Algebra.
"""

from __future__ import annotations

import math

from chuk_music_algebra.constants import DEFAULT_SAMPLE_RATE, MAX_ANGULAR_FREQUENCY
from chuk_music_algebra.core.phrase import Phrase, require_compatible
from chuk_music_algebra.core.pitch import Pitch
from chuk_music_algebra.models.settings import WaveformSettings


def harmonic_tone(pitch: Pitch, dynamic: float, t: float) -> float:
    """
    The alternating harmonic series of a note.

    2d sin(wt) - 2d sin(2wt) + 2d sin(3wt) - ..., for every harmonic below
    the audible limit.
    """
    w = pitch.angular_frequency
    amplitude = 2 * dynamic
    value = 0.0
    harmonic = 1
    while harmonic * w < MAX_ANGULAR_FREQUENCY:
        value += amplitude * math.sin(harmonic * w * t)
        harmonic += 1
        amplitude = -amplitude
    return value


class WaveformAlgebra:
    """
    Sample-level sum, magnify, product and inverse.

    Args:
        sample_rate: Samples per second used to render every phrase
    """

    name = "waveform"

    def __init__(self, sample_rate: int = DEFAULT_SAMPLE_RATE):
        if sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {sample_rate}")
        self.sample_rate = sample_rate

    @classmethod
    def from_settings(cls, settings: WaveformSettings) -> WaveformAlgebra:
        return cls(sample_rate=settings.sample_rate)

    def sum(self, *phrases: Phrase) -> list[float]:
        """Pointwise sum; truncated to the shortest wave when rounding differs."""
        require_compatible(*phrases)
        waves = [p.samples(self.sample_rate) for p in phrases]
        return [math.fsum(values) for values in zip(*waves)]

    def magnify(self, scalar: float, phrase: Phrase) -> list[float]:
        return [scalar * value for value in phrase.samples(self.sample_rate)]

    def product(self, first: Phrase, second: Phrase) -> list[float]:
        """Pointwise product (ring modulation), truncated to the shorter wave."""
        require_compatible(first, second)
        return [
            a * b
            for a, b in zip(first.samples(self.sample_rate), second.samples(self.sample_rate))
        ]

    def inverse(self, phrase: Phrase) -> list[float]:
        """Render every note as its alternating harmonic series."""
        return phrase.render(self.sample_rate, harmonic_tone)

    def __repr__(self) -> str:
        return f"WaveformAlgebra(sample_rate={self.sample_rate})"
