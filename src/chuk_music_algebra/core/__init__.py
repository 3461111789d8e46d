"""
Core music primitives - the value types every algebra shares.

- PitchClass: The 12 chromatic pitch classes (0-11), plus circle-of-fifths coordinates
- Pitch: A concrete tone, n = 12 * octave + pitch class
- Chord: Pitches with relative dynamics (structural equality)
- Phrase: Chord slots sharing key, tempo and chords per beat
"""

from chuk_music_algebra.core.chord import Chord
from chuk_music_algebra.core.phrase import (
    Phrase,
    lcm_cpb,
    pure_tone,
    require_compatible,
    same_duration,
    same_key,
    same_tempo,
)
from chuk_music_algebra.core.pitch import Pitch, PitchClass

__all__ = [
    # Pitch
    "PitchClass",
    "Pitch",
    # Chord
    "Chord",
    # Phrase
    "Phrase",
    "pure_tone",
    "same_key",
    "same_tempo",
    "same_duration",
    "lcm_cpb",
    "require_compatible",
]
