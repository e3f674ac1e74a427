"""Composition assembler.

Validates parameters against the theory tables, runs the melody, harmony,
bass and percussion generators with one shared random source, and wraps the
result with a title, a structure label and generation metadata.
"""

import logging
import random
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from composition.bass_generator import BassGenerator
from composition.chord_generator import ChordEvent, ChordGenerator
from composition.exceptions import InvalidParameterError
from composition.melody_generator import MelodyGenerator, NoteEvent
from composition.music_theory import (
    CHORD_PROGRESSIONS,
    DEFAULT_STRUCTURE,
    DEFAULT_TITLES,
    GENRE_TITLES,
    MOOD_ADJECTIVES,
    MOOD_PROFILES,
    RHYTHM_PATTERNS,
    SCALES,
    STRUCTURES,
)
from composition.parameters import ParameterSet
from composition.percussion_generator import DrumPattern, Drums, PercussionGenerator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Composition:
    """Generated multi-track composition. Immutable once assembled."""

    title: str
    melody: Tuple[NoteEvent, ...]
    harmony: Tuple[ChordEvent, ...]
    bass_line: Tuple[NoteEvent, ...]
    drums: Drums
    structure: str
    parameters: ParameterSet
    generated_at: datetime

    @property
    def metadata(self) -> Dict[str, Any]:
        """Echo of the parameters plus the generation timestamp."""
        return {
            "genre": self.parameters.genre,
            "key": self.parameters.key,
            "tempo": self.parameters.tempo,
            "mood": self.parameters.mood,
            "duration": self.parameters.duration,
            "complexity": self.parameters.complexity,
            "seed": self.parameters.seed,
            "generatedAt": self.generated_at.isoformat(),
        }

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the JSON shape served by the API.

        Drums serialize to ``None`` when the composition has no drum track.
        """
        drums = None
        if isinstance(self.drums, DrumPattern):
            drums = [event.to_dict() for event in self.drums.events]

        return {
            "title": self.title,
            "melody": [note.to_dict() for note in self.melody],
            "harmony": [chord.to_dict() for chord in self.harmony],
            "bassLine": [note.to_dict() for note in self.bass_line],
            "drums": drums,
            "structure": self.structure,
            "metadata": self.metadata,
        }


class Composer:
    """Assembles compositions from parameter sets."""

    def __init__(
        self,
        melody_generator: Optional[MelodyGenerator] = None,
        chord_generator: Optional[ChordGenerator] = None,
        bass_generator: Optional[BassGenerator] = None,
        percussion_generator: Optional[PercussionGenerator] = None,
    ) -> None:
        """Initialize composer.

        Args:
            melody_generator: Lead melody generator
            chord_generator: Harmony expander
            bass_generator: Bass line generator
            percussion_generator: Drum pattern generator
        """
        self.melody_generator = melody_generator or MelodyGenerator()
        self.chord_generator = chord_generator or ChordGenerator()
        self.bass_generator = bass_generator or BassGenerator()
        self.percussion_generator = percussion_generator or PercussionGenerator()

        logger.info("Composer initialized")

    def compose(
        self, parameters: ParameterSet, rng: Optional[random.Random] = None
    ) -> Composition:
        """Generate a composition.

        Args:
            parameters: Requested genre, key, mood, tempo, duration, complexity
            rng: Random source; defaults to ``random.Random(parameters.seed)``

        Returns:
            Assembled Composition

        Raises:
            InvalidParameterError: If genre, key, mood or complexity is unknown
        """
        self.validate(parameters)

        if rng is None:
            rng = random.Random(parameters.seed)

        scale = SCALES[parameters.key]
        progression = CHORD_PROGRESSIONS[parameters.genre]
        mood = MOOD_PROFILES[parameters.mood]
        rhythms = RHYTHM_PATTERNS[parameters.complexity]

        melody = self.melody_generator.generate(
            scale,
            mood,
            rhythms,
            MelodyGenerator.note_count(parameters.duration, parameters.tempo),
            rng,
        )
        harmony = self.chord_generator.generate(
            scale, progression, parameters.duration, rng
        )
        bass_line = self.bass_generator.generate(
            scale, progression, parameters.duration, rng
        )
        drums = self.percussion_generator.generate(
            parameters.genre, parameters.tempo, parameters.duration, rng
        )

        composition = Composition(
            title=self.make_title(parameters, rng),
            melody=tuple(melody),
            harmony=tuple(harmony),
            bass_line=tuple(bass_line),
            drums=drums,
            structure=self.make_structure(parameters.genre),
            parameters=parameters,
            generated_at=datetime.now(timezone.utc),
        )

        logger.debug(
            f"Composed '{composition.title}': {len(melody)} melody notes, "
            f"{len(harmony)} chords, {len(bass_line)} bass notes",
            extra={"genre": parameters.genre},
        )

        return composition

    def validate(self, parameters: ParameterSet) -> None:
        """Check that every table-backed parameter resolves.

        Raises:
            InvalidParameterError: On the first parameter without a table entry
        """
        lookups = (
            ("genre", parameters.genre, CHORD_PROGRESSIONS),
            ("key", parameters.key, SCALES),
            ("mood", parameters.mood, MOOD_PROFILES),
            ("complexity", parameters.complexity, RHYTHM_PATTERNS),
        )
        for field, value, table in lookups:
            if value not in table:
                available = ", ".join(str(entry) for entry in table)
                raise InvalidParameterError(
                    field,
                    value,
                    f"Unknown {field}: {value!r}. Available: {available}",
                )

    def make_title(self, parameters: ParameterSet, rng: random.Random) -> str:
        """Build "<mood adjective> <genre phrase> in <key>"."""
        base_titles = GENRE_TITLES.get(parameters.genre, DEFAULT_TITLES)
        base_title = rng.choice(base_titles)
        mood_prefix = MOOD_ADJECTIVES[parameters.mood]
        return f"{mood_prefix} {base_title} in {parameters.key}"

    def make_structure(self, genre: str) -> str:
        """Descriptive section layout for a genre."""
        return STRUCTURES.get(genre, DEFAULT_STRUCTURE)
