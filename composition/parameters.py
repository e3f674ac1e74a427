"""Composition parameter definitions."""

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from composition.exceptions import InvalidParameterError


@dataclass(frozen=True)
class ParameterSet:
    """User-chosen parameters for one composition.

    Attributes:
        genre: Genre name ("pop", "jazz", ...), selects progression and title
        key: Key name ("C", "Am", ...), selects the scale
        mood: Mood name ("happy", "sad", ...), selects velocity/octave/intervals
        tempo: Tempo in beats per minute (positive)
        duration: Length in seconds (0 yields an empty composition)
        complexity: Rhythm complexity level (1-5)
        seed: Optional seed for reproducible generation
    """

    genre: str
    key: str
    mood: str
    tempo: int = 120
    duration: float = 30.0
    complexity: int = 3
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate parameter shapes after initialization."""
        for field in ("genre", "key", "mood"):
            value = getattr(self, field)
            if not isinstance(value, str):
                raise InvalidParameterError(
                    field, value, f"Invalid {field}: {value!r} (must be a string)"
                )

        # bool is an int subclass; reject it explicitly
        if isinstance(self.tempo, bool) or not isinstance(self.tempo, int):
            raise InvalidParameterError(
                "tempo", self.tempo, f"Invalid tempo: {self.tempo!r} (must be an integer)"
            )
        if self.tempo <= 0:
            raise InvalidParameterError(
                "tempo", self.tempo, f"Invalid tempo: {self.tempo} (must be positive)"
            )

        if isinstance(self.duration, bool) or not isinstance(self.duration, (int, float)):
            raise InvalidParameterError(
                "duration",
                self.duration,
                f"Invalid duration: {self.duration!r} (must be a number)",
            )
        if not math.isfinite(self.duration):
            raise InvalidParameterError(
                "duration",
                self.duration,
                f"Invalid duration: {self.duration} (must be finite)",
            )
        if self.duration < 0:
            raise InvalidParameterError(
                "duration",
                self.duration,
                f"Invalid duration: {self.duration} (must be >= 0)",
            )

        if isinstance(self.complexity, bool) or not isinstance(self.complexity, int):
            raise InvalidParameterError(
                "complexity",
                self.complexity,
                f"Invalid complexity: {self.complexity!r} (must be an integer)",
            )

        if self.seed is not None and (
            isinstance(self.seed, bool) or not isinstance(self.seed, int)
        ):
            raise InvalidParameterError(
                "seed", self.seed, f"Invalid seed: {self.seed!r} (must be an integer)"
            )

    @property
    def total_beats(self) -> int:
        """Whole beats that fit in the requested duration."""
        return int(self.duration / 60 * self.tempo)

    def to_dict(self) -> Dict[str, Any]:
        """Return parameters as a plain dictionary."""
        return asdict(self)

    @classmethod
    def default(cls) -> "ParameterSet":
        """Create default parameters.

        Returns:
            Default parameters: pop in C, happy, 120 BPM, 30 seconds, complexity 3
        """
        return cls(genre="pop", key="C", mood="happy")
