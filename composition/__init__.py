"""Tunesmith Composition - Procedural composition engine.

This module contains the table-driven logic that turns a parameter set into
a melody, harmony, bass line and drum pattern.
"""

from composition.bass_generator import BassGenerator
from composition.chord_generator import ChordEvent, ChordGenerator
from composition.composer import Composer, Composition
from composition.exceptions import CompositionError, InvalidParameterError
from composition.melody_generator import MelodyGenerator, NoteEvent
from composition.parameters import ParameterSet
from composition.percussion_generator import (
    DrumPattern,
    Drums,
    NoDrums,
    PercussionEvent,
    PercussionGenerator,
)

__version__ = "1.0.0"

__all__ = [
    "BassGenerator",
    "ChordEvent",
    "ChordGenerator",
    "Composer",
    "Composition",
    "CompositionError",
    "DrumPattern",
    "Drums",
    "InvalidParameterError",
    "MelodyGenerator",
    "NoDrums",
    "NoteEvent",
    "ParameterSet",
    "PercussionEvent",
    "PercussionGenerator",
]
