"""
Pytest configuration and shared fixtures.
"""

import tempfile
from pathlib import Path

import pytest

from chuk_music_algebra.core import Phrase


@pytest.fixture
def temp_dir() -> Path:
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_midi_path(temp_dir: Path) -> Path:
    """Path for a temporary MIDI file."""
    return temp_dir / "test.mid"


@pytest.fixture
def two_chord_phrase() -> Phrase:
    """C major then G major, one beat each at 120 bpm."""
    return Phrase.parse("C\n120\n1\tC4 E4 G4\n1\tG4 B4 D5\n")


@pytest.fixture
def one_second_note() -> Phrase:
    """A single C4 lasting one second (one beat at 60 bpm)."""
    return Phrase.parse("C\n60\n1\tC4\n")
