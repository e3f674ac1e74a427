"""Root-note bass line generator."""

import logging
import random
from typing import List, Optional, Sequence

from composition.chord_generator import iter_progression_slots
from composition.melody_generator import NoteEvent
from composition.music_theory import ChordTemplate, Scale
from composition.pitch import note_to_pitch

logger = logging.getLogger(__name__)


class BassGenerator:
    """Plays each chord's root on the harmony grid, two octaves down."""

    OCTAVE = 2
    DURATION = "2n"
    VELOCITY_RANGE = (70, 100)

    def __init__(self) -> None:
        """Initialize bass generator."""
        logger.info("Bass generator initialized")

    def generate(
        self,
        scale: Scale,
        progression: Sequence[ChordTemplate],
        duration: float,
        rng: Optional[random.Random] = None,
    ) -> List[NoteEvent]:
        """Generate the bass track.

        Args:
            scale: Scale used to resolve root degrees
            progression: Genre chord templates
            duration: Composition length in seconds

        Returns:
            One note per harmony slot, aligned with the chord times
        """
        rng = rng if rng is not None else random.Random()

        notes: List[NoteEvent] = []
        for time, template in iter_progression_slots(progression, duration):
            root = template.degrees[0]
            pitch_name = f"{scale.notes[root % len(scale.notes)]}{self.OCTAVE}"
            notes.append(
                NoteEvent(
                    pitch_name=pitch_name,
                    duration=self.DURATION,
                    velocity=rng.randint(*self.VELOCITY_RANGE),
                    time=time,
                    pitch=note_to_pitch(pitch_name),
                )
            )

        logger.debug(f"Generated {len(notes)} bass notes")

        return notes
