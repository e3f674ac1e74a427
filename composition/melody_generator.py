"""Scale-constrained melody generator.

Produces the lead line as a random walk over scale-degree indices. The step
size comes from the mood's interval policy, and the octave drifts toward the
mood's register preference.
"""

import logging
import random
from dataclasses import dataclass
from typing import List, Optional, Sequence

from composition.music_theory import INTERVAL_OFFSETS, MoodProfile, Scale
from composition.pitch import note_to_pitch

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NoteEvent:
    """Single pitched note (melody or bass)."""

    pitch_name: str  # e.g. "E4"
    duration: str  # Duration token ("4n", "8n", ...)
    velocity: int  # MIDI velocity (0-127)
    time: float  # Offset from composition start (beats)
    pitch: int  # MIDI note number

    def to_dict(self) -> dict:
        """Serialize using the public API field names."""
        return {
            "note": self.pitch_name,
            "duration": self.duration,
            "velocity": self.velocity,
            "time": self.time,
            "pitch": self.pitch,
        }


class MelodyGenerator:
    """Generates lead melodies as a constrained walk over scale degrees."""

    START_OCTAVE = 4
    MIN_OCTAVE = 3
    MAX_OCTAVE = 6

    # Spacing between consecutive melody notes
    STEP_TIME = 0.5

    # random() must exceed this for the octave to drift (30% chance)
    OCTAVE_DRIFT_THRESHOLD = 0.7

    def __init__(self) -> None:
        """Initialize melody generator."""
        logger.info("Melody generator initialized")

    @staticmethod
    def note_count(duration: float, tempo: int) -> int:
        """Number of melody notes for a duration/tempo pair (one per two beats)."""
        total_beats = int(duration / 60 * tempo)
        return max(0, total_beats // 2)

    def generate(
        self,
        scale: Scale,
        mood: MoodProfile,
        rhythms: Sequence[str],
        note_count: int,
        rng: Optional[random.Random] = None,
    ) -> List[NoteEvent]:
        """Generate a melody.

        Args:
            scale: Scale the walk moves over
            mood: Mood profile (velocity range, octave preference, interval policy)
            rhythms: Duration tokens to pick from
            note_count: Number of notes to emit
            rng: Random source (a fresh unseeded one if omitted)

        Returns:
            Exactly ``note_count`` notes, STEP_TIME apart starting at 0
        """
        rng = rng if rng is not None else random.Random()

        notes: List[NoteEvent] = []
        current_octave = self.START_OCTAVE
        last_degree = 0
        low_velocity, high_velocity = mood.velocity_range

        for step in range(max(0, note_count)):
            degree = self.choose_next_degree(
                last_degree, len(scale.notes), mood.interval_policy, rng
            )
            current_octave = self._drift_octave(
                current_octave, mood.octave_preference, rng
            )

            pitch_name = f"{scale.notes[degree]}{current_octave}"
            notes.append(
                NoteEvent(
                    pitch_name=pitch_name,
                    duration=rng.choice(rhythms),
                    velocity=rng.randint(low_velocity, high_velocity),
                    time=step * self.STEP_TIME,
                    pitch=note_to_pitch(pitch_name),
                )
            )

            last_degree = degree

        logger.debug(
            f"Generated {len(notes)} melody notes "
            f"(policy={mood.interval_policy}, octave={mood.octave_preference})"
        )

        return notes

    def choose_next_degree(
        self,
        last_degree: int,
        scale_length: int,
        policy: str,
        rng: random.Random,
    ) -> int:
        """Pick the next scale degree from the interval policy.

        The candidate is clamped to the scale rather than wrapped, so large
        jumps near either end settle on the boundary degree.

        Args:
            last_degree: Previous degree index
            scale_length: Number of notes in the scale
            policy: Interval policy name; unknown names pick any degree
            rng: Random source

        Returns:
            Degree index in [0, scale_length - 1]
        """
        offsets = INTERVAL_OFFSETS.get(policy)
        if offsets is None:
            candidate = rng.randrange(scale_length)
        else:
            candidate = last_degree + rng.choice(offsets)

        return max(0, min(scale_length - 1, candidate))

    def _drift_octave(
        self, octave: int, preference: str, rng: random.Random
    ) -> int:
        """Move the octave one step toward the preferred register, sometimes."""
        if preference == "high":
            if rng.random() > self.OCTAVE_DRIFT_THRESHOLD:
                return min(self.MAX_OCTAVE, octave + 1)
        elif preference == "low":
            if rng.random() > self.OCTAVE_DRIFT_THRESHOLD:
                return max(self.MIN_OCTAVE, octave - 1)
        return octave
