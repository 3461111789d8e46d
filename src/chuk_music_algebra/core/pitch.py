"""
Pitch primitives - PitchClass and Pitch.

PitchClass represents the 12 chromatic pitches (octave-independent).
Pitch is a concrete tone: pitch class plus octave, collapsed into a single
key number n = 12 * octave + pitch_class (C4 = 48, A4 = 57).
"""

from __future__ import annotations

import math
import re
from enum import IntEnum
from functools import total_ordering

from chuk_music_algebra.constants import (
    DEFAULT_OCTAVE,
    FIFTH,
    REFERENCE_ANGULAR_FREQUENCY,
    REFERENCE_KEY_NUMBER,
    SEMITONES,
    ErrorMessages,
)

# Display name mappings (module level to avoid IntEnum member issues)
_SHARP_NAMES: list[str] = [
    "C",
    "C#",
    "D",
    "D#",
    "E",
    "F",
    "F#",
    "G",
    "G#",
    "A",
    "A#",
    "B",
]
_FLAT_NAMES: list[str] = [
    "C",
    "Db",
    "D",
    "Eb",
    "E",
    "F",
    "Gb",
    "G",
    "Ab",
    "A",
    "Bb",
    "B",
]

_PITCH_PATTERN = re.compile(r"^([A-Ga-g][#b]?)(-?\d+)?$")


class PitchClass(IntEnum):
    """
    The 12 chromatic pitch classes (0-11).

    Octave-independent - C4 and C5 are both PitchClass.C.
    Enharmonic equivalents share the same value (C# == Db == 1).
    """

    C = 0
    Cs = 1  # C# / Db
    D = 2
    Ds = 3  # D# / Eb
    E = 4
    F = 5
    Fs = 6  # F# / Gb
    G = 7
    Gs = 8  # G# / Ab
    A = 9
    As = 10  # A# / Bb
    B = 11

    def transpose(self, semitones: int) -> PitchClass:
        """Transpose by a number of semitones (positive or negative)."""
        return PitchClass((self.value + semitones) % SEMITONES)

    def fifths_index(self, key: int) -> int:
        """
        Position of this pitch class on the circle of fifths starting at key.

        The tonic is 0, the dominant 1, the supertonic 2, and so on.
        """
        return (FIFTH * (self.value - key)) % SEMITONES

    @classmethod
    def from_fifths_index(cls, index: int, key: int) -> PitchClass:
        """Pitch class found index steps round the circle of fifths from key."""
        return cls((FIFTH * index + key) % SEMITONES)

    def spell(self, prefer_flats: bool = False) -> str:
        """Get human-readable name."""
        names = _FLAT_NAMES if prefer_flats else _SHARP_NAMES
        return names[self.value]

    @classmethod
    def parse(cls, name: str) -> PitchClass:
        """Parse a pitch class from a string like 'C', 'C#', 'Db'."""
        name = name.strip()

        if name in _SHARP_NAMES:
            return cls(_SHARP_NAMES.index(name))

        if name in _FLAT_NAMES:
            return cls(_FLAT_NAMES.index(name))

        # Try enum names (C, Cs, D, Ds, etc.)
        name_upper = name.upper()
        for member in cls:
            if member.name.upper() == name_upper:
                return member

        raise ValueError(ErrorMessages.INVALID_PITCH.format(pitch=name))


@total_ordering
class Pitch:
    """
    A single tone, identified by its key number.

    The octave cycles at each C, so B3 (47) sits directly below C4 (48).
    Negative key numbers are allowed; pitch_class stays in 0-11 and
    octave rounds towards negative infinity.

    Immutable and hashable.
    """

    __slots__ = ("_n",)
    _n: int

    def __init__(self, n: int) -> None:
        """Create a pitch from its key number."""
        object.__setattr__(self, "_n", int(n))

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("Pitch is immutable")

    @classmethod
    def of(cls, pitch_class: int, octave: int) -> Pitch:
        """Create a pitch from a pitch class and an octave."""
        return cls(SEMITONES * octave + int(pitch_class))

    @property
    def n(self) -> int:
        """Key number: 12 * octave + pitch class."""
        return self._n

    @property
    def pitch_class(self) -> PitchClass:
        return PitchClass(self._n % SEMITONES)

    @property
    def octave(self) -> int:
        return self._n // SEMITONES

    @property
    def angular_frequency(self) -> float:
        """Angular frequency (rad/s) of a pure tone at this pitch, equal tempered."""
        return REFERENCE_ANGULAR_FREQUENCY * 2 ** ((self._n - REFERENCE_KEY_NUMBER) / SEMITONES)

    @property
    def frequency(self) -> float:
        """Frequency in Hz."""
        return self.angular_frequency / (2 * math.pi)

    @property
    def midi_note(self) -> int:
        """MIDI note number (C4 here is MIDI 60)."""
        return self._n + SEMITONES

    def transpose(self, semitones: int) -> Pitch:
        """Transpose by a number of semitones."""
        return Pitch(self._n + semitones)

    @classmethod
    def parse(cls, text: str) -> Pitch:
        """
        Parse a pitch from a string like 'C4', 'F#5', 'Bb-1' or 'E'.

        The octave defaults to 4 when omitted.
        """
        match = _PITCH_PATTERN.match(text.strip())
        if not match:
            raise ValueError(ErrorMessages.INVALID_PITCH.format(pitch=text))
        name, octave = match.groups()
        pitch_class = PitchClass.parse(name[0].upper() + name[1:])
        return cls.of(pitch_class, int(octave) if octave is not None else DEFAULT_OCTAVE)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Pitch):
            return NotImplemented
        return self._n == other._n

    def __lt__(self, other: Pitch) -> bool:
        if not isinstance(other, Pitch):
            return NotImplemented
        return self._n < other._n

    def __hash__(self) -> int:
        return hash(self._n)

    def __repr__(self) -> str:
        return f"Pitch({self._n})"

    def __str__(self) -> str:
        return f"{self.pitch_class.spell()}{self.octave}"
