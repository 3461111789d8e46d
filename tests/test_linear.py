"""
Tests for the linear algebra.

Tests cover:
- Phrase <-> matrix conversion
- sum, magnify, product and the pseudo-inverse
- Restart handling in the underlying power iteration
"""

import logging

import pytest

from chuk_music_algebra.algebra import LinearAlgebra
from chuk_music_algebra.core import Chord, Phrase, PitchClass
from chuk_music_algebra.errors import ConvergenceError, IncompatiblePhrasesError
from chuk_music_algebra.models import LinearSettings
from chuk_music_algebra.numeric import Matrix

C_THEN_G = "C\n60\n1\tC4\n1\tG4\n"


@pytest.fixture
def algebra() -> LinearAlgebra:
    return LinearAlgebra(seed=0)


def notes(chord: Chord) -> dict[int, float]:
    return {pitch.n: dynamic for pitch, dynamic in chord}


class TestConversions:
    """Tests for phrase <-> matrix conversion."""

    def test_rows_follow_circle_of_fifths(self, algebra: LinearAlgebra) -> None:
        """C is row 0, G row 1, E row 4 in C major."""
        phrase = Phrase.parse("C\n60\n1\tC4 E4:0.5\n1\tG4\n")
        m = algebra.to_matrix(phrase)
        assert m.shape == (12, 2)
        assert m.get(0, 0) == 1.0
        assert m.get(4, 0) == 0.5
        assert m.get(1, 1) == 1.0

    def test_octaves_collapse(self, algebra: LinearAlgebra) -> None:
        """Every octave of a pitch class lands in the same row."""
        phrase = Phrase.parse("C\n60\n1\tC3 C4:0.5 C6:0.25\n")
        assert algebra.to_matrix(phrase).get(0, 0) == 1.75

    def test_rows_are_key_relative(self, algebra: LinearAlgebra) -> None:
        """The tonic is always row 0."""
        phrase = Phrase.parse("D\n60\n1\tD4\n")
        m = algebra.to_matrix(phrase)
        assert m.get(0, 0) == 1.0
        assert algebra.to_phrase(m, PitchClass.D, 60, 1)[0] == Chord.parse("D4")

    def test_small_entries_are_silent(self, algebra: LinearAlgebra) -> None:
        """Entries at or below eps are dropped when reading back."""
        column = [0.0] * 12
        column[0], column[1], column[2] = 0.5, 0.001, -0.25
        chord = algebra.to_chord(column, PitchClass.C)
        assert notes(chord) == {48: 0.5, 50: -0.25}

    def test_read_back_compresses(self, algebra: LinearAlgebra) -> None:
        """Repeated slots collapse when reading a matrix back."""
        m = Matrix.from_columns([[1.0] + [0.0] * 11] * 2, 12)
        phrase = algebra.to_phrase(m, PitchClass.C, 60, 2)
        assert phrase.cpb == 1
        assert phrase.length == 1


class TestOperations:
    """Tests for sum, magnify and product."""

    def test_sum(self, algebra: LinearAlgebra) -> None:
        """Entries add."""
        p = Phrase.parse("C\n60\n1\tC4\n")
        assert notes(algebra.sum(p, p)[0]) == {48: 2.0}

    def test_sum_across_subdivisions(self, algebra: LinearAlgebra) -> None:
        """Operands expand to the lcm cpb; the result is compressed."""
        a = Phrase.parse("C\n60\n1\tC4\n")
        b = Phrase.parse("C\n60\n1/2\tC4\n1/2\tE4\n")
        result = algebra.sum(a, b)
        assert result.cpb == 2
        assert notes(result[0]) == {48: 2.0}
        assert notes(result[1]) == {48: 1.0, 52: 1.0}

        same = algebra.sum(a, a.expand(2))
        assert same.cpb == 1
        assert notes(same[0]) == {48: 2.0}

    def test_sum_requires_same_duration(self, algebra: LinearAlgebra) -> None:
        """Different lengths cannot be summed."""
        a = Phrase.parse("C\n60\n1\tC4\n")
        b = Phrase.parse(C_THEN_G)
        with pytest.raises(IncompatiblePhrasesError, match="duration"):
            algebra.sum(a, b)

    def test_magnify(self, algebra: LinearAlgebra) -> None:
        """Entries scale; scaling by zero silences."""
        p = Phrase.parse(C_THEN_G)
        assert notes(algebra.magnify(0.5, p)[1]) == {55: 0.5}
        assert all(chord.is_rest() for chord in algebra.magnify(0, p))

    def test_product_is_twelve_slots(self, algebra: LinearAlgebra) -> None:
        """X X^t is 12 x 12."""
        p = Phrase.parse(C_THEN_G)
        result = algebra.product(p, p)
        assert result.length == 12
        assert notes(result[0]) == {48: 1.0}
        assert notes(result[1]) == {55: 1.0}
        assert all(chord.is_rest() for chord in result.chords[2:])

    def test_product_requires_same_key(self, algebra: LinearAlgebra) -> None:
        """Different keys cannot be multiplied."""
        p = Phrase.parse(C_THEN_G)
        with pytest.raises(IncompatiblePhrasesError, match="key"):
            algebra.product(p, p.transpose(PitchClass.A))


class TestInverse:
    """Tests for the SVD pseudo-inverse."""

    def test_decompose_reconstructs(self, algebra: LinearAlgebra) -> None:
        """The SVD reproduces the phrase's matrix."""
        p = Phrase.parse("C\n60\n1\tC4 E4 G4\n1\tG4 B4 D4\n")
        svd = algebra.decompose(p)
        assert svd.rank == 2
        assert svd.error(algebra.to_matrix(p)) < 1e-3

    def test_repeated_singular_values(self) -> None:
        """Distinct single notes have equal singular values and still decompose."""
        algebra = LinearAlgebra(seed=1)
        p = Phrase.parse("C\n120\n1\tC4\n1\tG4\n1\tD4\n")
        svd = algebra.decompose(p)
        assert svd.rank == 3
        assert svd.error(algebra.to_matrix(p)) < 1e-3

        result = algebra.inverse(p)
        assert [[pitch.n for pitch in chord.pitches] for chord in result] == [[48], [55], [50]]
        for chord in result:
            assert chord.dynamics == pytest.approx([1.0], abs=1e-3)

    def test_inverse_of_orthonormal_phrase(self, algebra: LinearAlgebra) -> None:
        """Orthonormal columns are their own pseudo-inverse."""
        p = Phrase.parse(C_THEN_G)
        result = algebra.inverse(p)
        assert result.length == 2
        assert [pitch.n for pitch in result[0].pitches] == [48]
        assert [pitch.n for pitch in result[1].pitches] == [55]
        assert result[0].dynamics == pytest.approx([1.0], abs=1e-3)
        assert result[1].dynamics == pytest.approx([1.0], abs=1e-3)

    def test_inverse_inverts_singular_values(self, algebra: LinearAlgebra) -> None:
        """Louder notes invert to quieter ones."""
        p = Phrase.parse("C\n60\n1\tC4:4\n1\tG4:0.5\n")
        result = algebra.inverse(p)
        assert result[0].dynamics == pytest.approx([0.25], abs=1e-3)
        assert result[1].dynamics == pytest.approx([2.0], abs=1e-3)

    def test_inverse_of_rests(self, algebra: LinearAlgebra) -> None:
        """A silent phrase inverts to silence."""
        p = Phrase.parse("C\n60\n1\t\n")
        assert algebra.inverse(p)[0].is_rest()

    def test_restart_is_logged(
        self, algebra: LinearAlgebra, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Failed power iterations are logged and retried."""
        with caplog.at_level(logging.WARNING):
            algebra.inverse(Phrase.parse(C_THEN_G))
        assert "restarting" in caplog.text

    def test_restart_limit(self) -> None:
        """With max_restarts set, exhausting it raises."""
        algebra = LinearAlgebra(max_restarts=0, seed=0)
        with pytest.raises(ConvergenceError):
            algebra.inverse(Phrase.parse(C_THEN_G))


class TestConfiguration:
    """Tests for settings."""

    def test_from_settings(self) -> None:
        """Settings reach the solver."""
        settings = LinearSettings(eps=0.01, pmax=50, peps=1e-6, max_restarts=3, seed=1)
        algebra = LinearAlgebra.from_settings(settings)
        assert algebra.eps == 0.01
        assert algebra.solver.pmax == 50
        assert algebra.solver.peps == 1e-6
        assert algebra.solver.max_restarts == 3
