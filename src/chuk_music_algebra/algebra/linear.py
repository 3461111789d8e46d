"""
Linear algebra - phrases as 12 x n real matrices.

Row f is the pitch class f steps round the circle of fifths from the tonic,
column j is chord slot j, and each entry is the summed dynamic of that
pitch class in that slot. Octaves are discarded: a matrix is read back in
the default octave.

The inverse is the pseudo-inverse L D^-1 R^t from a power-iteration SVD,
which keeps the phrase's shape.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence

from chuk_music_algebra.algebra.base import Algebra
from chuk_music_algebra.constants import (
    DEFAULT_OCTAVE,
    LINEAR_EPS,
    LINEAR_PEPS,
    LINEAR_PMAX,
    SEMITONES,
)
from chuk_music_algebra.core.chord import Chord
from chuk_music_algebra.core.phrase import Phrase, lcm_cpb, require_compatible
from chuk_music_algebra.core.pitch import Pitch, PitchClass
from chuk_music_algebra.models.settings import LinearSettings
from chuk_music_algebra.numeric.matrix import Matrix
from chuk_music_algebra.numeric.svd import (
    EigenSolver,
    SingularValueDecomposition,
    singular_value_decomposition,
)

logger = logging.getLogger(__name__)


class LinearAlgebra(Algebra):
    """
    The linear algebra over 12 x n matrices.

    Args:
        eps: Entries with magnitude at or below this are silent when a
            matrix is read back; also the smallest acceptable eigenvalue
        pmax: Power iteration steps per start vector
        peps: Power iteration convergence distance
        max_restarts: Restarts per eigenvector before ConvergenceError;
            None retries forever
        seed: Seed for the random restart vectors
    """

    name = "linear"

    def __init__(
        self,
        eps: float = LINEAR_EPS,
        pmax: int = LINEAR_PMAX,
        peps: float = LINEAR_PEPS,
        max_restarts: int | None = None,
        seed: int | None = None,
    ):
        self.eps = eps
        self.solver = EigenSolver(
            eps=eps,
            pmax=pmax,
            peps=peps,
            max_restarts=max_restarts,
            rng=random.Random(seed),
        )

    @classmethod
    def from_settings(cls, settings: LinearSettings) -> LinearAlgebra:
        return cls(
            eps=settings.eps,
            pmax=settings.pmax,
            peps=settings.peps,
            max_restarts=settings.max_restarts,
            seed=settings.seed,
        )

    # Music <-> matrices

    def to_matrix(self, phrase: Phrase) -> Matrix:
        rows = [[0.0] * phrase.length for _ in range(SEMITONES)]
        for j, chord in enumerate(phrase):
            for pitch, dynamic in chord:
                rows[pitch.pitch_class.fifths_index(phrase.key)][j] += dynamic
        return Matrix(rows, cols=phrase.length)

    def to_chord(self, column: Sequence[float], key: int) -> Chord:
        """Every entry above eps in magnitude becomes a note with that dynamic."""
        return Chord(
            tuple(
                (Pitch.of(PitchClass.from_fifths_index(f, key), DEFAULT_OCTAVE), float(value))
                for f, value in enumerate(column)
                if abs(value) > self.eps
            )
        )

    def to_phrase(self, m: Matrix, key: int, bpm: int, cpb: int) -> Phrase:
        """Read a matrix back column by column, then compress repeated slots."""
        chords = tuple(self.to_chord(column, key) for column in m.columns())
        return Phrase(chords, key, bpm, cpb).compress()

    def decompose(self, phrase: Phrase) -> SingularValueDecomposition:
        """The signed SVD of a phrase's matrix."""
        return singular_value_decomposition(self.to_matrix(phrase), self.solver)

    # Operations

    def sum(self, *phrases: Phrase) -> Phrase:
        require_compatible(*phrases)
        cpb = lcm_cpb(*phrases)
        total = self.to_matrix(phrases[0].expand(cpb))
        for phrase in phrases[1:]:
            total = total + self.to_matrix(phrase.expand(cpb))
        return self.to_phrase(total, phrases[0].key, phrases[0].bpm, cpb)

    def magnify(self, scalar: float, phrase: Phrase) -> Phrase:
        return self.to_phrase(self.to_matrix(phrase) * scalar, phrase.key, phrase.bpm, phrase.cpb)

    def product(self, first: Phrase, second: Phrase) -> Phrase:
        """
        X1 X2^t.

        The result is always 12 x 12, so it has twelve slots whatever the
        operands' lengths.
        """
        require_compatible(first, second)
        cpb = lcm_cpb(first, second)
        x1 = self.to_matrix(first.expand(cpb))
        x2 = self.to_matrix(second.expand(cpb))
        return self.to_phrase(x1 @ x2.transpose(), first.key, first.bpm, cpb)

    def inverse(self, phrase: Phrase) -> Phrase:
        """
        The pseudo-inverse L D^-1 R^t.

        Rank-deficient phrases only invert their nonzero singular values;
        a phrase of rests inverts to rests.
        """
        svd = self.decompose(phrase)
        logger.debug(f"Inverting phrase of rank {svd.rank}: {svd.singular_values}")
        return self.to_phrase(svd.pseudo_inverse(), phrase.key, phrase.bpm, phrase.cpb)

    def __repr__(self) -> str:
        return (
            f"LinearAlgebra(eps={self.eps}, pmax={self.solver.pmax}, "
            f"peps={self.solver.peps}, max_restarts={self.solver.max_restarts})"
        )
