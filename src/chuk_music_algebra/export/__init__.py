"""
Export - phrases out to MIDI.

- phrase_to_midi: Phrase -> mido.MidiFile
- save_phrase_midi: Phrase -> .mid on disk
"""

from chuk_music_algebra.export.midi import (
    TICKS_PER_BEAT,
    MidiEvent,
    dynamic_to_velocity,
    events_to_midi,
    phrase_to_events,
    phrase_to_midi,
    save_phrase_midi,
)

__all__ = [
    "TICKS_PER_BEAT",
    "MidiEvent",
    "dynamic_to_velocity",
    "events_to_midi",
    "phrase_to_events",
    "phrase_to_midi",
    "save_phrase_midi",
]
