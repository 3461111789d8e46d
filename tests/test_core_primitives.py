"""
Tests for core music primitives.

Tests cover:
- PitchClass and Pitch (pitch.py)
- Chord (chord.py)
- Phrase, parsing and compatibility checks (phrase.py)
"""

import math
from fractions import Fraction
from pathlib import Path

import pytest

from chuk_music_algebra.core import (
    Chord,
    Phrase,
    Pitch,
    PitchClass,
    lcm_cpb,
    require_compatible,
    same_duration,
)
from chuk_music_algebra.errors import IncompatiblePhrasesError


class TestPitchClass:
    """Tests for PitchClass enum."""

    def test_transpose_wraps(self) -> None:
        """Transposing wraps around the octave."""
        assert PitchClass.B.transpose(1) == PitchClass.C
        assert PitchClass.C.transpose(-1) == PitchClass.B
        assert PitchClass.G.transpose(7) == PitchClass.D

    def test_fifths_index_in_c(self) -> None:
        """Tonic is 0, dominant 1, supertonic 2, subdominant 11."""
        assert PitchClass.C.fifths_index(0) == 0
        assert PitchClass.G.fifths_index(0) == 1
        assert PitchClass.D.fifths_index(0) == 2
        assert PitchClass.E.fifths_index(0) == 4
        assert PitchClass.F.fifths_index(0) == 11

    def test_fifths_index_relative_to_key(self) -> None:
        """The circle starts at the key's tonic."""
        assert PitchClass.G.fifths_index(PitchClass.G) == 0
        assert PitchClass.D.fifths_index(PitchClass.G) == 1

    def test_from_fifths_index_inverts_fifths_index(self) -> None:
        """from_fifths_index undoes fifths_index in every key."""
        for key in range(12):
            for pc in PitchClass:
                assert PitchClass.from_fifths_index(pc.fifths_index(key), key) == pc

    def test_circle_order(self) -> None:
        """Walking the circle from C gives the familiar order."""
        names = [PitchClass.from_fifths_index(i, 0).spell() for i in range(12)]
        assert names == ["C", "G", "D", "A", "E", "B", "F#", "C#", "G#", "D#", "A#", "F"]

    def test_parse(self) -> None:
        """Parse sharps, flats and enum names."""
        assert PitchClass.parse("C") == PitchClass.C
        assert PitchClass.parse("C#") == PitchClass.Cs
        assert PitchClass.parse("Db") == PitchClass.Cs
        assert PitchClass.parse("fs") == PitchClass.Fs

    def test_parse_invalid(self) -> None:
        """Unknown names raise ValueError."""
        with pytest.raises(ValueError, match="Invalid pitch"):
            PitchClass.parse("H")


class TestPitch:
    """Tests for Pitch."""

    def test_key_numbers(self) -> None:
        """n = 12 * octave + pitch class."""
        assert Pitch.parse("C4").n == 48
        assert Pitch.parse("A4").n == 57
        assert Pitch.parse("B3").n == 47
        assert Pitch.of(PitchClass.E, 4).n == 52

    def test_default_octave(self) -> None:
        """A bare pitch name is in octave 4."""
        assert Pitch.parse("G") == Pitch(55)

    def test_a4_is_440(self) -> None:
        """A4 sounds at 440 Hz."""
        assert Pitch(57).frequency == pytest.approx(440.0)
        assert Pitch(57).angular_frequency == pytest.approx(2 * math.pi * 440)
        assert Pitch(69).frequency == pytest.approx(880.0)

    def test_midi_note(self) -> None:
        """C4 is MIDI middle C."""
        assert Pitch(48).midi_note == 60

    def test_negative_key_numbers(self) -> None:
        """Octave floors, pitch class stays in range."""
        pitch = Pitch(-1)
        assert pitch.octave == -1
        assert pitch.pitch_class == PitchClass.B
        assert Pitch.parse("B-1") == pitch

    def test_str(self) -> None:
        """Pitches print as name and octave."""
        assert str(Pitch(49)) == "C#4"
        assert str(Pitch(-1)) == "B-1"

    def test_ordering_and_hash(self) -> None:
        """Pitches compare and hash by key number."""
        assert Pitch(48) < Pitch(50)
        assert Pitch(48) == Pitch.parse("C4")
        assert len({Pitch(48), Pitch.parse("C4")}) == 1

    def test_immutable(self) -> None:
        """Pitches cannot be changed."""
        with pytest.raises(AttributeError):
            Pitch(48)._n = 50  # type: ignore[misc]

    def test_parse_invalid(self) -> None:
        """Malformed pitch strings raise ValueError."""
        with pytest.raises(ValueError, match="Invalid pitch"):
            Pitch.parse("C#x")


class TestChord:
    """Tests for Chord."""

    def test_parse_c_major(self) -> None:
        """Parse explicit dynamics."""
        chord = Chord.parse("C4:1.0 E4:1.0 G4:1.0")
        assert [p.n for p in chord.pitches] == [48, 52, 55]
        assert chord.dynamics == [1.0, 1.0, 1.0]

    def test_parse_default_dynamic(self) -> None:
        """Dynamic defaults to 1.0."""
        chord = Chord.parse("D4 F#4:0.5 A4")
        assert chord.dynamics == [1.0, 0.5, 1.0]

    def test_parse_rest(self) -> None:
        """An empty string is a rest."""
        chord = Chord.parse("")
        assert chord.is_rest()
        assert len(chord) == 0

    def test_parse_invalid_dynamic(self) -> None:
        """Non-numeric dynamics raise ValueError."""
        with pytest.raises(ValueError, match="Invalid dynamic"):
            Chord.parse("C4:loud")

    def test_transpose(self) -> None:
        """C-E-G up two half steps is D-F#-A."""
        chord = Chord.parse("C4 E4 G4").transpose(2)
        assert [p.n for p in chord.pitches] == [50, 54, 57]

    def test_magnify(self) -> None:
        """Dynamics scale, pitches stay."""
        chord = Chord.parse("C4 E4:0.5").magnify(-2)
        assert chord.dynamics == [-2.0, -1.0]

    def test_structural_equality(self) -> None:
        """Same notes in a different order are not equal."""
        assert Chord.parse("C4 E4") == Chord.parse("C4:1 E4:1.0")
        assert Chord.parse("C4 E4") != Chord.parse("E4 C4")

    def test_from_mapping_sorts(self) -> None:
        """Mappings give chords ordered by key number."""
        chord = Chord.from_mapping({55: 1.0, 48: 0.5})
        assert [p.n for p in chord.pitches] == [48, 55]
        assert chord.dynamics == [0.5, 1.0]

    def test_normalize(self) -> None:
        """Dynamics become 1 or 0."""
        chord = Chord.parse("C4:0.3 E4:0.00001").normalize(0.001)
        assert chord.dynamics == [1.0, 0.0]

    def test_str_parses_back(self) -> None:
        """The string form is valid chord text."""
        chord = Chord.parse("C4:0.5 F#5:-1.25")
        assert Chord.parse(str(chord)) == chord


class TestPhrase:
    """Tests for Phrase."""

    def test_parse_two_lines(self, two_chord_phrase: Phrase) -> None:
        """Key, tempo, subdivision and length come from the text."""
        assert two_chord_phrase.key == PitchClass.C
        assert two_chord_phrase.bpm == 120
        assert two_chord_phrase.cpb == 1
        assert two_chord_phrase.length == 2
        assert two_chord_phrase.duration == pytest.approx(1.0)

    def test_parse_fractional_beats(self) -> None:
        """cpb is the lcm of the denominators."""
        phrase = Phrase.parse("D\n60\n1/2\tC4\n1\tD4\n1/3\tE4\n")
        assert phrase.key == PitchClass.D
        assert phrase.cpb == 6
        assert phrase.length == 3 + 6 + 2
        assert phrase.beats == Fraction(11, 6)

    def test_parse_skips_comments_and_blank_lines(self) -> None:
        """Comment and blank lines are ignored anywhere."""
        phrase = Phrase.parse("# header\nG\n\n90\n# body\n1\tG4\n\n1\t\n")
        assert phrase.key == PitchClass.G
        assert phrase.bpm == 90
        assert phrase.length == 2
        assert phrase[1].is_rest()

    def test_parse_missing_header(self) -> None:
        """A key and bpm line are required."""
        with pytest.raises(ValueError, match="key line and a bpm line"):
            Phrase.parse("C\n")

    def test_parse_invalid_beat(self) -> None:
        """Beat counts must be non-negative fractions."""
        with pytest.raises(ValueError, match="Invalid beat count"):
            Phrase.parse("C\n120\n1/0\tC4\n")
        with pytest.raises(ValueError, match="Invalid beat count"):
            Phrase.parse("C\n120\nx\tC4\n")

    def test_invalid_tempo(self) -> None:
        """bpm and cpb must be positive."""
        with pytest.raises(ValueError):
            Phrase((), PitchClass.C, 0)
        with pytest.raises(ValueError):
            Phrase((), PitchClass.C, 120, cpb=0)

    def test_expand_and_compress(self, two_chord_phrase: Phrase) -> None:
        """Expanding doubles the slots; compress undoes it."""
        expanded = two_chord_phrase.expand(2)
        assert expanded.length == 4
        assert expanded.cpb == 2
        assert expanded.exact_duration == two_chord_phrase.exact_duration
        assert expanded[0] == expanded[1] == two_chord_phrase[0]
        assert expanded.compress() == two_chord_phrase

    def test_expand_same_cpb(self, two_chord_phrase: Phrase) -> None:
        """Expanding to the current cpb is a no-op."""
        assert two_chord_phrase.expand(1) is two_chord_phrase

    def test_expand_bad_factor(self) -> None:
        """Target cpb must be a multiple of the current one."""
        phrase = Phrase.parse("C\n120\n1/2\tC4\n1/2\tD4\n")
        with pytest.raises(ValueError, match="Could not expand"):
            phrase.expand(3)

    def test_compress_stops_at_differences(self) -> None:
        """Slots that differ within a run block compression."""
        phrase = Phrase.parse("C\n120\n1/2\tC4\n1/2\tD4\n")
        assert phrase.compress() == phrase

    def test_compress_is_single_pass(self) -> None:
        """Only the largest working factor is applied."""
        phrase = Phrase.parse("C\n120\n1\tC4\n").expand(6)
        compressed = phrase.compress()
        assert compressed.cpb == 1
        assert compressed.length == 1

    def test_transpose(self, two_chord_phrase: Phrase) -> None:
        """Changing key shifts every chord."""
        moved = two_chord_phrase.transpose(PitchClass.D)
        assert moved.key == PitchClass.D
        assert [p.n for p in moved[0].pitches] == [50, 54, 57]

    def test_samples_length(self, one_second_note: Phrase) -> None:
        """One second at 1000 Hz is 1000 samples."""
        samples = one_second_note.samples(1000)
        assert len(samples) == 1000
        assert samples[0] == 0.0
        assert max(abs(s) for s in samples) <= 1.0

    def test_samples_fade(self, one_second_note: Phrase) -> None:
        """The edges of each slot fade in and out."""
        samples = one_second_note.samples(1000)
        w = Pitch(48).angular_frequency
        assert samples[5] == pytest.approx(math.sin(w * 0.005) * 5 / 10)
        assert samples[500] == pytest.approx(math.sin(w * 0.5))

    def test_rest_samples_silent(self) -> None:
        """Rests sample to zeros."""
        phrase = Phrase.parse("C\n120\n1\t\n")
        assert phrase.samples(100) == [0.0] * 50

    def test_render_with_custom_tone(self, one_second_note: Phrase) -> None:
        """Any tone function can be rendered."""
        samples = one_second_note.render(100, lambda pitch, dynamic, t: dynamic)
        assert samples[50] == 1.0

    def test_format_parses_back(self) -> None:
        """format() output parses to the same phrase."""
        phrase = Phrase.parse("F#\n96\n1/2\tC4:0.5 E4\n1\t\n1/2\tB3:-1.5\n")
        assert Phrase.parse(phrase.format()) == phrase

    def test_save_and_load(self, temp_dir: Path, two_chord_phrase: Phrase) -> None:
        """Phrases round trip through files."""
        path = two_chord_phrase.save(temp_dir / "phrase.txt")
        assert Phrase.load(path) == two_chord_phrase

    def test_sequence_protocol(self, two_chord_phrase: Phrase) -> None:
        """Phrases iterate and index over chords."""
        assert len(two_chord_phrase) == 2
        assert list(two_chord_phrase) == list(two_chord_phrase.chords)
        assert two_chord_phrase[1] == Chord.parse("G4 B4 D5")


class TestCompatibility:
    """Tests for the phrase compatibility helpers."""

    def test_same_duration_across_cpb(self) -> None:
        """Duration is compared exactly, whatever the subdivision."""
        a = Phrase.parse("C\n120\n1\tC4\n")
        b = Phrase.parse("C\n120\n1/3\tC4\n1/3\tD4\n1/3\tE4\n")
        assert same_duration(a, b)
        assert lcm_cpb(a, b) == 3
        require_compatible(a, b)

    def test_key_mismatch(self) -> None:
        """Different keys are rejected."""
        a = Phrase.parse("C\n120\n1\tC4\n")
        b = Phrase.parse("G\n120\n1\tC4\n")
        with pytest.raises(IncompatiblePhrasesError, match="different key"):
            require_compatible(a, b)

    def test_tempo_mismatch(self) -> None:
        """Different tempos are rejected."""
        a = Phrase.parse("C\n120\n1\tC4\n")
        b = Phrase.parse("C\n60\n1\tC4\n")
        with pytest.raises(IncompatiblePhrasesError, match="different tempo"):
            require_compatible(a, b)

    def test_duration_mismatch_is_value_error(self) -> None:
        """Incompatibility is a ValueError too."""
        a = Phrase.parse("C\n120\n1\tC4\n")
        b = Phrase.parse("C\n120\n2\tC4\n")
        with pytest.raises(ValueError, match="different duration"):
            require_compatible(a, b)
        require_compatible(a, b, duration=False)

    def test_cpb_mismatch(self) -> None:
        """cpb is only checked on request."""
        a = Phrase.parse("C\n120\n1\tC4\n")
        b = a.expand(2)
        require_compatible(a, b)
        with pytest.raises(IncompatiblePhrasesError, match="chords/beat"):
            require_compatible(a, b, cpb=True)

    def test_no_phrases(self) -> None:
        """At least one phrase is needed."""
        with pytest.raises(IncompatiblePhrasesError):
            require_compatible()
