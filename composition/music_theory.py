"""Static music theory tables.

Scales, genre chord progressions, rhythm sets per complexity level, mood
profiles, and the phrase tables used for titles and structure labels.
Everything here is read-only; generators copy what they need into their
own events.
"""

from dataclasses import dataclass
from typing import Dict, Literal, Tuple

ModeType = Literal["major", "minor"]
OctavePreference = Literal["high", "low", "middle"]
IntervalPolicy = Literal["small", "large", "wide", "smooth"]


@dataclass(frozen=True)
class Scale:
    """Ordered pitch classes allowed for a key."""

    notes: Tuple[str, ...]
    mode: ModeType


@dataclass(frozen=True)
class ChordTemplate:
    """Roman-numeral chord built from 0-based scale degrees."""

    label: str
    degrees: Tuple[int, ...]


@dataclass(frozen=True)
class MoodProfile:
    """Performance parameters derived from a mood.

    Attributes:
        velocity_range: Inclusive (min, max) MIDI velocity
        octave_preference: Direction the melody octave drifts toward
        interval_policy: Name of the melodic step rule
    """

    velocity_range: Tuple[int, int]
    octave_preference: OctavePreference
    interval_policy: IntervalPolicy


SCALES: Dict[str, Scale] = {
    "C": Scale(("C", "D", "E", "F", "G", "A", "B"), "major"),
    "G": Scale(("G", "A", "B", "C", "D", "E", "F#"), "major"),
    "D": Scale(("D", "E", "F#", "G", "A", "B", "C#"), "major"),
    "A": Scale(("A", "B", "C#", "D", "E", "F#", "G#"), "major"),
    "E": Scale(("E", "F#", "G#", "A", "B", "C#", "D#"), "major"),
    "Am": Scale(("A", "B", "C", "D", "E", "F", "G"), "minor"),
    "Em": Scale(("E", "F#", "G", "A", "B", "C", "D"), "minor"),
    "Dm": Scale(("D", "E", "F", "G", "A", "Bb", "C"), "minor"),
}

CHORD_PROGRESSIONS: Dict[str, Tuple[ChordTemplate, ...]] = {
    "classical": (
        ChordTemplate("I", (0, 2, 4)),
        ChordTemplate("IV", (3, 5, 0)),
        ChordTemplate("V", (4, 6, 1)),
        ChordTemplate("I", (0, 2, 4)),
    ),
    "jazz": (
        ChordTemplate("IMaj7", (0, 2, 4, 6)),
        ChordTemplate("vi7", (5, 0, 2, 4)),
        ChordTemplate("ii7", (1, 3, 5, 0)),
        ChordTemplate("V7", (4, 6, 1, 3)),
    ),
    "pop": (
        ChordTemplate("I", (0, 2, 4)),
        ChordTemplate("vi", (5, 0, 2)),
        ChordTemplate("IV", (3, 5, 0)),
        ChordTemplate("V", (4, 6, 1)),
    ),
    "rock": (
        ChordTemplate("I", (0, 2, 4)),
        ChordTemplate("bVII", (6, 1, 3)),
        ChordTemplate("IV", (3, 5, 0)),
        ChordTemplate("I", (0, 2, 4)),
    ),
    "electronic": (
        ChordTemplate("i", (0, 2, 4)),
        ChordTemplate("VI", (5, 0, 2)),
        ChordTemplate("III", (2, 4, 6)),
        ChordTemplate("VII", (6, 1, 3)),
    ),
    "ambient": (
        ChordTemplate("I", (0, 2, 4, 6)),
        ChordTemplate("IV", (3, 5, 0, 2)),
        ChordTemplate("vi", (5, 0, 2, 4)),
        ChordTemplate("I", (0, 2, 4, 6)),
    ),
}

# Duration tokens per complexity level; repeats weight the uniform pick
RHYTHM_PATTERNS: Dict[int, Tuple[str, ...]] = {
    1: ("4n",),
    2: ("4n", "8n"),
    3: ("4n", "8n", "8n"),
    4: ("4n", "8n", "16n", "8n"),
    5: ("8n", "16n", "16n", "8n.", "16n"),
}

MOOD_PROFILES: Dict[str, MoodProfile] = {
    "happy": MoodProfile((80, 127), "high", "large"),
    "sad": MoodProfile((40, 80), "low", "small"),
    "energetic": MoodProfile((100, 127), "high", "large"),
    "calm": MoodProfile((50, 90), "middle", "small"),
    "mysterious": MoodProfile((60, 100), "low", "wide"),
    "romantic": MoodProfile((70, 110), "middle", "smooth"),
}

# Melodic step offsets per interval policy
INTERVAL_OFFSETS: Dict[str, Tuple[int, ...]] = {
    "small": (-1, 0, 1),
    "large": (-3, -2, -1, 1, 2, 3),
    "wide": (-5, -4, -3, 3, 4, 5),
    "smooth": (-2, -1, 0, 1, 2),
}

# Genres whose harmonic rhythm carries the piece without a drum kit
DRUMLESS_GENRES = frozenset({"classical"})

# Genres that add a hi-hat layer on top of kick/snare
HIHAT_GENRES = frozenset({"electronic", "rock"})

# Inclusive velocity ranges per percussion instrument
DRUM_VELOCITY_RANGES: Dict[str, Tuple[int, int]] = {
    "kick": (90, 127),
    "snare": (80, 110),
    "hihat": (50, 80),
}

# General MIDI percussion keys (channel 10)
DRUM_PITCHES: Dict[str, int] = {
    "kick": 36,
    "snare": 38,
    "hihat": 42,
}

GENRE_TITLES: Dict[str, Tuple[str, ...]] = {
    "classical": ("Sonata", "Prelude", "Etude", "Nocturne", "Fantasy"),
    "jazz": ("Blue Note", "Swing Time", "Cool Jazz", "Bebop", "Smooth"),
    "pop": ("Summer Dreams", "City Lights", "Dancing Tonight", "Heartbeat", "Shine"),
    "rock": ("Thunder Road", "Electric Storm", "Rock Anthem", "Power Drive", "Wild Fire"),
    "electronic": (
        "Digital Dreams",
        "Neon Nights",
        "Synth Wave",
        "Cyber Space",
        "Future Pulse",
    ),
    "ambient": (
        "Ethereal Journey",
        "Cosmic Drift",
        "Peaceful Waters",
        "Silent Dawn",
        "Infinite Space",
    ),
}

DEFAULT_TITLES: Tuple[str, ...] = ("Composition",)

MOOD_ADJECTIVES: Dict[str, str] = {
    "happy": "Joyful",
    "sad": "Melancholy",
    "energetic": "Dynamic",
    "calm": "Serene",
    "mysterious": "Enigmatic",
    "romantic": "Tender",
}

STRUCTURES: Dict[str, str] = {
    "classical": "Exposition - Development - Recapitulation",
    "jazz": "Head - Solos - Head Out",
    "pop": "Verse - Chorus - Verse - Chorus - Bridge - Chorus",
    "rock": "Intro - Verse - Chorus - Verse - Chorus - Solo - Chorus",
    "electronic": "Intro - Build - Drop - Break - Build - Drop - Outro",
    "ambient": "Emergence - Evolution - Transformation - Resolution",
}

DEFAULT_STRUCTURE = "Intro - Development - Climax - Resolution"


def list_options() -> Dict[str, list]:
    """List the values accepted for each table-backed parameter.

    Returns:
        Dictionary with genres, keys, moods and complexity levels
    """
    return {
        "genres": list(CHORD_PROGRESSIONS),
        "keys": list(SCALES),
        "moods": list(MOOD_PROFILES),
        "complexity": list(RHYTHM_PATTERNS),
    }
