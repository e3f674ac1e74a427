"""Chord progression expander.

Expands a genre's chord-progression template into voiced, time-stamped
chords. Voices whose degree index runs past the scale wrap to the next
octave up, which spreads four-note voicings across registers.
"""

import logging
import math
import random
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

from composition.music_theory import ChordTemplate, Scale

logger = logging.getLogger(__name__)

# Harmonic grid shared by harmony and bass
CHORDS_PER_SECTION = 4
SECTION_SECONDS = 8
SLOT_TIME = 2


@dataclass(frozen=True)
class ChordEvent:
    """Single chord in the harmony track."""

    pitch_names: Tuple[str, ...]  # Voiced pitches, e.g. ("C3", "E3", "G3")
    duration: str  # Duration token
    velocity: int  # MIDI velocity (0-127)
    time: float  # Offset from composition start (beats)
    label: str  # Roman-numeral chord name

    def to_dict(self) -> dict:
        """Serialize using the public API field names."""
        return {
            "chord": list(self.pitch_names),
            "duration": self.duration,
            "time": self.time,
            "velocity": self.velocity,
            "chordName": self.label,
        }


def sections_needed(duration: float) -> int:
    """Number of four-chord sections covering ``duration`` seconds."""
    return max(0, math.ceil(duration / SECTION_SECONDS))


def iter_progression_slots(
    progression: Sequence[ChordTemplate], duration: float
) -> Iterator[Tuple[float, ChordTemplate]]:
    """Yield (time, template) for every slot of the harmonic grid.

    Args:
        progression: Genre progression, cycled by slot position
        duration: Composition length in seconds

    Yields:
        Slot start time and the chord template playing there
    """
    for section in range(sections_needed(duration)):
        for position in range(CHORDS_PER_SECTION):
            template = progression[position % len(progression)]
            yield (section * CHORDS_PER_SECTION + position) * SLOT_TIME, template


class ChordGenerator:
    """Expands progression templates into voiced chord events."""

    BASE_OCTAVE = 3
    DURATION = "2n"
    VELOCITY_RANGE = (60, 90)

    def __init__(self) -> None:
        """Initialize chord generator."""
        logger.info("Chord generator initialized")

    def generate(
        self,
        scale: Scale,
        progression: Sequence[ChordTemplate],
        duration: float,
        rng: Optional[random.Random] = None,
    ) -> List[ChordEvent]:
        """Generate the harmony track.

        Args:
            scale: Scale used to resolve degree indices
            progression: Genre chord templates
            duration: Composition length in seconds

        Returns:
            ``sections_needed(duration) * 4`` chord events
        """
        rng = rng if rng is not None else random.Random()

        chords: List[ChordEvent] = []
        for time, template in iter_progression_slots(progression, duration):
            chords.append(
                ChordEvent(
                    pitch_names=self.voice(scale, template),
                    duration=self.DURATION,
                    velocity=rng.randint(*self.VELOCITY_RANGE),
                    time=time,
                    label=template.label,
                )
            )

        logger.debug(
            f"Generated {len(chords)} chords over {sections_needed(duration)} sections"
        )

        return chords

    def voice(self, scale: Scale, template: ChordTemplate) -> Tuple[str, ...]:
        """Resolve a template's degrees into pitch names.

        Args:
            scale: Scale to draw pitch classes from
            template: Chord template

        Returns:
            Pitch names in template order
        """
        scale_length = len(scale.notes)
        return tuple(
            f"{scale.notes[degree % scale_length]}{self.BASE_OCTAVE + degree // 7}"
            for degree in template.degrees
        )
