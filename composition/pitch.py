"""Pitch name and duration token utilities."""

import re
from typing import Tuple

# Pitch classes in octave 4 (middle C = 60)
PITCH_CLASSES = {
    "C": 60,
    "C#": 61,
    "Db": 61,
    "D": 62,
    "D#": 63,
    "Eb": 63,
    "E": 64,
    "F": 65,
    "F#": 66,
    "Gb": 66,
    "G": 67,
    "G#": 68,
    "Ab": 68,
    "A": 69,
    "A#": 70,
    "Bb": 70,
    "B": 71,
}

# Note lengths in quarter-note beats
DURATION_BEATS = {
    "1n": 4.0,
    "2n": 2.0,
    "4n": 1.0,
    "8n.": 0.75,
    "8n": 0.5,
    "16n": 0.25,
}

MIDI_MIN = 0
MIDI_MAX = 127

_PITCH_NAME_RE = re.compile(r"^([A-G](?:#|b)?)(-?\d+)$")


def split_pitch_name(pitch_name: str) -> Tuple[str, int]:
    """Split a pitch name into pitch class and octave.

    Args:
        pitch_name: Name such as "C4", "F#3" or "Bb2"

    Returns:
        Tuple of (pitch class, octave)

    Raises:
        ValueError: If the name is not a known pitch class followed by an octave
    """
    match = _PITCH_NAME_RE.match(pitch_name)
    if match is None or match.group(1) not in PITCH_CLASSES:
        raise ValueError(f"Invalid pitch name: {pitch_name!r}")
    return match.group(1), int(match.group(2))


def note_to_pitch(pitch_name: str) -> int:
    """Convert a pitch name to its MIDI note number.

    Args:
        pitch_name: Name such as "C4" (60) or "A2" (45)

    Returns:
        MIDI note number (not clamped)
    """
    pitch_class, octave = split_pitch_name(pitch_name)
    return PITCH_CLASSES[pitch_class] + (octave - 4) * 12


def clamp(value: int, low: int = MIDI_MIN, high: int = MIDI_MAX) -> int:
    """Clamp an integer into [low, high]."""
    return max(low, min(high, value))


def duration_to_beats(token: str) -> float:
    """Convert a duration token ("4n", "8n.", ...) to quarter-note beats.

    Raises:
        ValueError: If the token is unknown
    """
    try:
        return DURATION_BEATS[token]
    except KeyError:
        raise ValueError(f"Unknown duration token: {token!r}") from None
