"""
Phrase primitive - a time-ordered sequence of chord slots.

Every slot lasts the same time: 60 / (bpm * cpb) seconds. A phrase never
changes after construction; transpose, expand and compress return new
phrases. Durations are compared exactly using Fraction.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from fractions import Fraction
from pathlib import Path

from chuk_music_algebra.constants import FADE_FRACTION, SEMITONES, ErrorMessages
from chuk_music_algebra.core.chord import Chord
from chuk_music_algebra.core.pitch import Pitch, PitchClass
from chuk_music_algebra.errors import IncompatiblePhrasesError

# A tone maps (pitch, dynamic, seconds into the slot) to an amplitude
Tone = Callable[[Pitch, float, float], float]


def pure_tone(pitch: Pitch, dynamic: float, t: float) -> float:
    """A sine at the pitch's angular frequency, scaled by its dynamic."""
    return dynamic * math.sin(pitch.angular_frequency * t)


@dataclass(frozen=True)
class Phrase:
    """
    A fixed-length sequence of chords sharing a key, tempo and subdivision.

    Attributes:
        chords: One chord per slot
        key: Tonic pitch class (all key changes happen between phrases)
        bpm: Tempo in beats per minute
        cpb: Chord slots per beat

    Each conceptual chord is usually spread over several slots, depending on
    the shortest chord in the phrase.
    """

    chords: tuple[Chord, ...]
    key: PitchClass
    bpm: int
    cpb: int = 1

    def __post_init__(self) -> None:
        object.__setattr__(self, "chords", tuple(self.chords))
        object.__setattr__(self, "key", PitchClass(int(self.key) % SEMITONES))
        if self.bpm <= 0:
            raise ValueError(f"bpm must be positive, got {self.bpm}")
        if self.cpb <= 0:
            raise ValueError(f"cpb must be positive, got {self.cpb}")

    @property
    def length(self) -> int:
        """Number of chord slots."""
        return len(self.chords)

    @property
    def seconds_per_slot(self) -> float:
        return 60.0 / (self.bpm * self.cpb)

    @property
    def duration(self) -> float:
        """Duration of the whole phrase in seconds."""
        return float(self.exact_duration)

    @property
    def exact_duration(self) -> Fraction:
        return Fraction(60 * self.length, self.bpm * self.cpb)

    @property
    def beats(self) -> Fraction:
        return Fraction(self.length, self.cpb)

    def transpose(self, key: int) -> Phrase:
        """Move the phrase into another key, shifting each chord as needed."""
        shift = int(key) - int(self.key)
        chords = tuple(chord.transpose(shift) for chord in self.chords)
        return Phrase(chords, key, self.bpm, self.cpb)

    def expand(self, cpb: int) -> Phrase:
        """
        Re-grid the phrase at a finer subdivision.

        Each chord is replicated cpb / self.cpb times. The result sounds the
        same as this phrase.

        Raises:
            ValueError: If cpb is not a multiple of the current cpb
        """
        if cpb == self.cpb:
            return self
        if cpb <= 0 or cpb % self.cpb != 0:
            raise ValueError(ErrorMessages.BAD_EXPANSION.format(cpb=cpb, current=self.cpb))

        factor = cpb // self.cpb
        chords = tuple(chord for chord in self.chords for _ in range(factor))
        return Phrase(chords, self.key, self.bpm, cpb)

    def compress(self) -> Phrase:
        """
        Collapse repeated slots, undoing a previous expand().

        Tries replication factors from cpb down to 2 and collapses by the
        first one that divides both length and cpb and under which every run
        of consecutive slots is structurally identical. This is a single
        pass, so it finds the largest such factor, not necessarily the
        smallest possible phrase.
        """
        if self.length == 0:
            return self

        for factor in range(self.cpb, 1, -1):
            if self._compressible(factor):
                chords = self.chords[::factor]
                return Phrase(chords, self.key, self.bpm, self.cpb // factor)

        return self

    def _compressible(self, factor: int) -> bool:
        if self.length % factor or self.cpb % factor:
            return False
        for start in range(0, self.length, factor):
            first = self.chords[start]
            if any(self.chords[start + j] != first for j in range(1, factor)):
                return False
        return True

    def samples(self, rate: float) -> list[float]:
        """
        Convert the phrase to a pressure wave.

        Args:
            rate: Samples per second

        Returns:
            round(rate * seconds_per_slot) amplitudes per slot
        """
        return self.render(rate, pure_tone)

    def render(self, rate: float, tone: Tone) -> list[float]:
        """
        Sample the phrase with an arbitrary tone function.

        Time restarts at zero in every slot. The first and last 1% of each
        slot fade linearly to avoid clicks at slot boundaries.
        """
        per_slot = round(rate * self.seconds_per_slot)
        cap = int(per_slot * FADE_FRACTION)

        wave: list[float] = []
        for chord in self.chords:
            for j in range(per_slot):
                t = j / rate
                value = sum(tone(pitch, dynamic, t) for pitch, dynamic in chord)
                if j < cap:
                    value *= j / cap
                if per_slot - j < cap:
                    value *= (per_slot - j) / cap
                wave.append(value)
        return wave

    @classmethod
    def parse(cls, text: str) -> Phrase:
        """
        Parse a phrase from its text form.

        Format:
            C                 <- tonic
            120               <- bpm
            # comment
            1\\tC4 E4 G4       <- <beats>[/<denominator>] then a chord
            1/2\\tD4:0.5

        cpb becomes the least common multiple of all denominators. Blank
        lines and lines starting with '#' are skipped.
        """
        lines = [
            line
            for line in text.splitlines()
            if line.strip() and not line.lstrip().startswith("#")
        ]
        if len(lines) < 2:
            raise ValueError(ErrorMessages.INVALID_HEADER)

        key = PitchClass.parse(lines[0])
        try:
            bpm = int(lines[1].strip())
        except ValueError:
            raise ValueError(f"Invalid bpm: '{lines[1].strip()}'") from None

        entries: list[tuple[Fraction, Chord]] = []
        for line in lines[2:]:
            parts = line.split(maxsplit=1)
            beat = _parse_beat(parts[0])
            chord = Chord.parse(parts[1] if len(parts) == 2 else "")
            entries.append((beat, chord))

        cpb = math.lcm(*(beat.denominator for beat, _ in entries)) if entries else 1
        chords = tuple(chord for beat, chord in entries for _ in range(int(beat * cpb)))
        return cls(chords, key, bpm, cpb)

    def format(self) -> str:
        """Write the phrase in the text form read by parse()."""
        lines = [self.key.spell(), str(self.bpm)]
        lines.extend(f"1/{self.cpb}\t{chord}" for chord in self.chords)
        return "\n".join(lines) + "\n"

    @classmethod
    def load(cls, path: Path) -> Phrase:
        """Read a phrase text file."""
        return cls.parse(Path(path).read_text())

    def save(self, path: Path) -> Path:
        """Write this phrase as a text file."""
        path = Path(path)
        path.write_text(self.format())
        return path

    def __len__(self) -> int:
        return self.length

    def __getitem__(self, index: int) -> Chord:
        return self.chords[index]

    def __iter__(self) -> Iterator[Chord]:
        return iter(self.chords)

    def __str__(self) -> str:
        return f"{self.key.spell()} @ {self.bpm}bpm, {self.length} slots ({self.cpb}/beat)"


def _parse_beat(text: str) -> Fraction:
    numerator, sep, denominator = text.partition("/")
    try:
        beat = Fraction(int(numerator), int(denominator) if sep else 1)
    except (ValueError, ZeroDivisionError):
        raise ValueError(ErrorMessages.INVALID_BEAT.format(beat=text)) from None
    if beat < 0:
        raise ValueError(ErrorMessages.INVALID_BEAT.format(beat=text))
    return beat


def same_key(*phrases: Phrase) -> bool:
    """True if all phrases share a key."""
    return len({p.key for p in phrases}) <= 1


def same_tempo(*phrases: Phrase) -> bool:
    """True if all phrases share a tempo."""
    return len({p.bpm for p in phrases}) <= 1


def same_duration(*phrases: Phrase) -> bool:
    """True if all phrases last exactly as long."""
    return len({p.exact_duration for p in phrases}) <= 1


def lcm_cpb(*phrases: Phrase) -> int:
    """Least common multiple of all chords-per-beat values."""
    return math.lcm(*(p.cpb for p in phrases)) if phrases else 1


def require_compatible(
    *phrases: Phrase, duration: bool = True, cpb: bool = False
) -> None:
    """
    Check that phrases can be combined.

    Key and tempo must always match; duration and cpb only when asked.

    Raises:
        IncompatiblePhrasesError: On the first mismatch found
    """
    if not phrases:
        raise IncompatiblePhrasesError(ErrorMessages.NO_PHRASES)
    if not same_key(*phrases):
        raise IncompatiblePhrasesError(ErrorMessages.KEY_MISMATCH)
    if not same_tempo(*phrases):
        raise IncompatiblePhrasesError(ErrorMessages.TEMPO_MISMATCH)
    if duration and not same_duration(*phrases):
        raise IncompatiblePhrasesError(ErrorMessages.DURATION_MISMATCH)
    if cpb and len({p.cpb for p in phrases}) > 1:
        raise IncompatiblePhrasesError(ErrorMessages.CPB_MISMATCH)
