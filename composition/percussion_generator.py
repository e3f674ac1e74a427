"""Meter-based percussion generator.

Kick on beats 1 and 3, snare on 2 and 4, plus a hi-hat layer for the
drum-forward genres. Drum-less genres get ``NoDrums`` instead of an empty
pattern so callers have to handle the absence explicitly.
"""

import logging
import random
from dataclasses import dataclass
from typing import List, Literal, Optional, Tuple, Union

from composition.music_theory import DRUM_VELOCITY_RANGES, DRUMLESS_GENRES, HIHAT_GENRES

logger = logging.getLogger(__name__)

Instrument = Literal["kick", "snare", "hihat"]


@dataclass(frozen=True)
class PercussionEvent:
    """Single drum hit."""

    instrument: Instrument
    time: float  # Offset from composition start (beats)
    velocity: int  # MIDI velocity (0-127)

    def to_dict(self) -> dict:
        """Serialize using the public API field names."""
        return {
            "instrument": self.instrument,
            "time": self.time,
            "velocity": self.velocity,
        }


@dataclass(frozen=True)
class DrumPattern:
    """Drum track present; events sorted by time."""

    events: Tuple[PercussionEvent, ...]


@dataclass(frozen=True)
class NoDrums:
    """Marker for a composition without a drum track."""


Drums = Union[DrumPattern, NoDrums]


class PercussionGenerator:
    """Generates kick/snare/hi-hat patterns from tempo and duration."""

    KICK_BEATS = (0, 2)
    SNARE_BEATS = (1, 3)
    BEAT_TIME = 0.25
    HIHAT_TIME = 0.125

    def __init__(self) -> None:
        """Initialize percussion generator."""
        logger.info("Percussion generator initialized")

    def generate(
        self,
        genre: str,
        tempo: int,
        duration: float,
        rng: Optional[random.Random] = None,
    ) -> Drums:
        """Generate the drum track.

        Args:
            genre: Genre name; decides whether drums and hi-hats are used
            tempo: Tempo in BPM
            duration: Composition length in seconds

        Returns:
            DrumPattern, or NoDrums for drum-less genres
        """
        if genre in DRUMLESS_GENRES:
            logger.debug(f"No drums for genre {genre}")
            return NoDrums()

        rng = rng if rng is not None else random.Random()
        with_hihat = genre in HIHAT_GENRES
        total_beats = int(duration / 60 * tempo)

        events: List[PercussionEvent] = []
        for beat in range(max(0, total_beats)):
            position = beat % 4
            if position in self.KICK_BEATS:
                events.append(self._hit("kick", beat * self.BEAT_TIME, rng))
            elif position in self.SNARE_BEATS:
                events.append(self._hit("snare", beat * self.BEAT_TIME, rng))

            if with_hihat:
                events.append(self._hit("hihat", beat * self.HIHAT_TIME, rng))

        # Hi-hats run at a finer grid than kick/snare; stable sort keeps
        # same-time hits in generation order
        events.sort(key=lambda event: event.time)

        logger.debug(
            f"Generated {len(events)} drum hits over {total_beats} beats "
            f"(hihat={with_hihat})"
        )

        return DrumPattern(events=tuple(events))

    def _hit(
        self, instrument: Instrument, time: float, rng: random.Random
    ) -> PercussionEvent:
        return PercussionEvent(
            instrument=instrument,
            time=time,
            velocity=rng.randint(*DRUM_VELOCITY_RANGES[instrument]),
        )
