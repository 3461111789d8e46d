"""
Tests for the waveform algebra.
"""

import math

import pytest

from chuk_music_algebra.algebra import WaveformAlgebra, harmonic_tone
from chuk_music_algebra.core import Phrase, Pitch
from chuk_music_algebra.errors import IncompatiblePhrasesError
from chuk_music_algebra.models import WaveformSettings

RATE = 1000


@pytest.fixture
def algebra() -> WaveformAlgebra:
    return WaveformAlgebra(sample_rate=RATE)


class TestHarmonicTone:
    """Tests for the alternating harmonic series."""

    def test_silent_at_zero(self) -> None:
        """Every sine starts at zero."""
        assert harmonic_tone(Pitch(57), 1.0, 0.0) == 0.0

    def test_series_stops_at_audible_limit(self) -> None:
        """A4 has 28 harmonics below 12.5 kHz."""
        t = 0.0001
        w = 2 * math.pi * 440
        expected = sum(2 * (-1) ** (k - 1) * math.sin(k * w * t) for k in range(1, 29))
        assert harmonic_tone(Pitch(57), 1.0, t) == pytest.approx(expected)

    def test_scales_with_dynamic(self) -> None:
        """Amplitude is proportional to the dynamic."""
        t = 0.00123
        assert harmonic_tone(Pitch(48), -0.5, t) == pytest.approx(
            -0.5 * harmonic_tone(Pitch(48), 1.0, t)
        )


class TestWaveformAlgebra:
    """Tests for sample-level operations."""

    def test_sum(self, algebra: WaveformAlgebra, one_second_note: Phrase) -> None:
        """Waves add pointwise."""
        single = one_second_note.samples(RATE)
        assert algebra.sum(one_second_note, one_second_note) == pytest.approx(
            [2 * s for s in single]
        )

    def test_sum_requires_same_duration(self, algebra: WaveformAlgebra) -> None:
        """Different lengths cannot be summed."""
        a = Phrase.parse("C\n60\n1\tC4\n")
        b = Phrase.parse("C\n60\n2\tC4\n")
        with pytest.raises(IncompatiblePhrasesError):
            algebra.sum(a, b)

    def test_magnify(self, algebra: WaveformAlgebra, one_second_note: Phrase) -> None:
        """Waves scale pointwise."""
        single = one_second_note.samples(RATE)
        assert algebra.magnify(-3, one_second_note) == pytest.approx([-3 * s for s in single])

    def test_product(self, algebra: WaveformAlgebra, one_second_note: Phrase) -> None:
        """Waves multiply pointwise."""
        single = one_second_note.samples(RATE)
        result = algebra.product(one_second_note, one_second_note)
        assert len(result) == RATE
        assert result == pytest.approx([s * s for s in single])

    def test_inverse(self, algebra: WaveformAlgebra, one_second_note: Phrase) -> None:
        """Inverse renders the harmonic series with the usual slot fade."""
        result = algebra.inverse(one_second_note)
        assert len(result) == RATE
        assert result[0] == 0.0
        assert result[500] == pytest.approx(harmonic_tone(Pitch(48), 1.0, 0.5))

    def test_invalid_rate(self) -> None:
        """Sample rate must be positive."""
        with pytest.raises(ValueError):
            WaveformAlgebra(sample_rate=0)

    def test_from_settings(self) -> None:
        """Settings carry the sample rate."""
        algebra = WaveformAlgebra.from_settings(WaveformSettings(sample_rate=8000))
        assert algebra.sample_rate == 8000
