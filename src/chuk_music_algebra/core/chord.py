"""
Chord primitive - a simultaneity of pitches with relative dynamics.

Dynamics are plain real numbers. They are not clamped to [0, 1]; the
algebras happily produce negative or large values.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass

from chuk_music_algebra.constants import ErrorMessages
from chuk_music_algebra.core.pitch import Pitch


@dataclass(frozen=True)
class Chord:
    """
    An ordered collection of (pitch, dynamic) pairs.

    Equality is structural: two chords are equal only if they hold the same
    pitches with exactly the same dynamics in the same internal order.
    Conceptually identical chords listed in a different order are NOT equal.
    This weak equality is what Phrase.compress() relies on.

    Immutable and hashable.
    """

    notes: tuple[tuple[Pitch, float], ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "notes", tuple((pitch, float(dynamic)) for pitch, dynamic in self.notes)
        )

    @classmethod
    def of(cls, pitches: list[Pitch], dynamics: list[float]) -> Chord:
        """Build a chord from parallel lists of pitches and dynamics."""
        if len(pitches) != len(dynamics):
            raise ValueError("pitches and dynamics must have the same length")
        return cls(tuple(zip(pitches, dynamics, strict=True)))

    @classmethod
    def from_mapping(cls, dynamics: Mapping[int, float]) -> Chord:
        """
        Build a chord from a {key number: dynamic} mapping.

        Notes are ordered by ascending key number so equal mappings
        always give structurally equal chords.
        """
        return cls(tuple((Pitch(n), dynamics[n]) for n in sorted(dynamics)))

    @property
    def pitches(self) -> list[Pitch]:
        return [pitch for pitch, _ in self.notes]

    @property
    def dynamics(self) -> list[float]:
        return [dynamic for _, dynamic in self.notes]

    def is_rest(self) -> bool:
        """A chord with no notes."""
        return not self.notes

    def transpose(self, semitones: int) -> Chord:
        """
        Shift every pitch by a number of half steps.

        For example, C-E-G shifted by 2 becomes D-F#-A.
        """
        return Chord(tuple((pitch.transpose(semitones), dyn) for pitch, dyn in self.notes))

    def magnify(self, scalar: float) -> Chord:
        """Scale every dynamic by a real number."""
        return Chord(tuple((pitch, scalar * dyn) for pitch, dyn in self.notes))

    def normalize(self, eps: float) -> Chord:
        """Set each dynamic to 1.0, or to 0.0 when its magnitude is below eps."""
        return Chord(
            tuple((pitch, 0.0 if abs(dyn) < eps else 1.0) for pitch, dyn in self.notes)
        )

    @classmethod
    def parse(cls, text: str) -> Chord:
        """
        Parse a chord from whitespace-separated '<pitch><octave>[:<dynamic>]' tokens.

        Examples:
            Chord.parse("C4:1.0 E4:1.0 G4:1.0")
            Chord.parse("D4 F#4:0.5 A4")  # dynamic defaults to 1.0
            Chord.parse("")               # a rest
        """
        notes: list[tuple[Pitch, float]] = []
        for token in text.split():
            name, sep, dynamic = token.partition(":")
            value = 1.0
            if sep:
                try:
                    value = float(dynamic)
                except ValueError:
                    raise ValueError(ErrorMessages.INVALID_DYNAMIC.format(token=token)) from None
            notes.append((Pitch.parse(name), value))
        return cls(tuple(notes))

    def __len__(self) -> int:
        return len(self.notes)

    def __iter__(self) -> Iterator[tuple[Pitch, float]]:
        return iter(self.notes)

    def __str__(self) -> str:
        return " ".join(f"{pitch}:{dynamic}" for pitch, dynamic in self.notes)
