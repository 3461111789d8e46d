"""
MIDI export - hear the result of an algebra.

Each chord slot becomes a block of simultaneous notes lasting exactly one
slot. Dynamics are unbounded reals, so the velocity is taken from the
magnitude and clamped; the sign of a dynamic has no MIDI equivalent.
All operations are deterministic: same phrase, same file.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from mido import Message, MetaMessage, MidiFile, MidiTrack

if TYPE_CHECKING:
    from collections.abc import Sequence

    from chuk_music_algebra.core.phrase import Phrase

logger = logging.getLogger(__name__)

# Standard ticks per beat (quarter note)
TICKS_PER_BEAT = 480

MIDI_NOTE_RANGE = range(128)


@dataclass(frozen=True)
class MidiEvent:
    """
    A single MIDI note event.

    All times are in ticks (absolute from start of track).
    """

    pitch: int  # MIDI note number (0-127)
    start_ticks: int
    duration_ticks: int
    velocity: int  # 1-127; velocity 0 would be a note off
    channel: int = 0

    def __post_init__(self) -> None:
        if self.pitch not in MIDI_NOTE_RANGE:
            raise ValueError(f"Pitch must be 0-127, got {self.pitch}")
        if not 1 <= self.velocity <= 127:
            raise ValueError(f"Velocity must be 1-127, got {self.velocity}")
        if not 0 <= self.channel <= 15:
            raise ValueError(f"Channel must be 0-15, got {self.channel}")
        if self.start_ticks < 0:
            raise ValueError(f"Start ticks must be >= 0, got {self.start_ticks}")
        if self.duration_ticks < 0:
            raise ValueError(f"Duration ticks must be >= 0, got {self.duration_ticks}")


def dynamic_to_velocity(dynamic: float) -> int:
    """Map |dynamic| (1.0 = full) onto 0-127."""
    return max(0, min(127, int(abs(dynamic) * 127)))


def slot_ticks(slot: int, cpb: int, ticks_per_beat: int = TICKS_PER_BEAT) -> int:
    """Absolute start tick of a chord slot, rounded when cpb does not divide the beat."""
    return round(slot * ticks_per_beat / cpb)


def phrase_to_events(phrase: Phrase, ticks_per_beat: int = TICKS_PER_BEAT) -> list[MidiEvent]:
    """
    Flatten a phrase into note events.

    Notes outside the MIDI range, and notes too quiet to reach velocity 1,
    are skipped.
    """
    events: list[MidiEvent] = []
    skipped = 0
    for i, chord in enumerate(phrase):
        start = slot_ticks(i, phrase.cpb, ticks_per_beat)
        end = slot_ticks(i + 1, phrase.cpb, ticks_per_beat)
        for pitch, dynamic in chord:
            velocity = dynamic_to_velocity(dynamic)
            if pitch.midi_note not in MIDI_NOTE_RANGE or velocity == 0:
                skipped += 1
                continue
            events.append(MidiEvent(pitch.midi_note, start, end - start, velocity))

    if skipped:
        logger.debug(f"Skipped {skipped} notes outside MIDI range or below velocity 1")
    return events


def events_to_midi(
    events: Sequence[MidiEvent],
    tempo_bpm: int = 120,
    ticks_per_beat: int = TICKS_PER_BEAT,
) -> MidiFile:
    """
    Write note events to a single-track MidiFile.

    Args:
        events: Sequence of MidiEvent objects
        tempo_bpm: Tempo in beats per minute
        ticks_per_beat: Resolution (default 480)
    """
    mid = MidiFile(ticks_per_beat=ticks_per_beat)
    track = MidiTrack()
    mid.tracks.append(track)

    track.append(MetaMessage("set_tempo", tempo=int(60_000_000 / tempo_bpm), time=0))

    messages: list[tuple[int, Message]] = []
    for event in events:
        messages.append(
            (
                event.start_ticks,
                Message(
                    "note_on", channel=event.channel, note=event.pitch, velocity=event.velocity
                ),
            )
        )
        messages.append(
            (
                event.start_ticks + event.duration_ticks,
                Message("note_off", channel=event.channel, note=event.pitch, velocity=0),
            )
        )

    # note_off before note_on at the same tick so repeated slots re-strike cleanly
    messages.sort(key=lambda x: (x[0], x[1].type != "note_off"))

    current_time = 0
    for abs_time, msg in messages:
        msg.time = abs_time - current_time
        track.append(msg)
        current_time = abs_time

    track.append(MetaMessage("end_of_track", time=0))
    return mid


def phrase_to_midi(phrase: Phrase, ticks_per_beat: int = TICKS_PER_BEAT) -> MidiFile:
    """
    Convert a phrase to a MidiFile at the phrase's tempo.

    Example:
        midi = phrase_to_midi(HarmonicAlgebra().inverse(phrase))
        midi.save("inverse.mid")
    """
    events = phrase_to_events(phrase, ticks_per_beat)
    return events_to_midi(events, tempo_bpm=phrase.bpm, ticks_per_beat=ticks_per_beat)


def save_phrase_midi(phrase: Phrase, path: Path) -> Path:
    """Convert a phrase and save it as a .mid file."""
    path = Path(path)
    phrase_to_midi(phrase).save(str(path))
    logger.info(f"Wrote {phrase.length} slots to {path}")
    return path
