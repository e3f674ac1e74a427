"""Request models for the Tunesmith HTTP API."""

from typing import Optional

from pydantic import BaseModel, Field

from composition.parameters import ParameterSet


class GenerateRequest(BaseModel):
    """Body of ``POST /api/generate``.

    Only the shape is checked here; table membership (genre, key, mood,
    complexity) is validated by the composer.
    """

    genre: str = Field(min_length=1)
    key: str = Field(min_length=1)
    mood: str = Field(min_length=1)
    tempo: int = Field(default=120, ge=1, le=300)
    duration: float = Field(default=30.0, ge=0.0, allow_inf_nan=False)
    complexity: int = Field(default=3)
    seed: Optional[int] = None

    def to_parameters(self) -> ParameterSet:
        """Convert to the engine's parameter set."""
        return ParameterSet(
            genre=self.genre,
            key=self.key,
            mood=self.mood,
            tempo=self.tempo,
            duration=self.duration,
            complexity=self.complexity,
            seed=self.seed,
        )
