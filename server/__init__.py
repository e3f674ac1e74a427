"""Tunesmith Server - HTTP service around the composition engine.

This module contains the FastAPI application, the composition store and
service, MIDI export, configuration, logging and metrics.
"""

from server.composition_service import CompositionService, GeneratedComposition
from server.composition_store import CompositionStore
from server.config import TunesmithConfig, get_config
from server.di_container import DIContainer
from server.metrics import GenerationMetrics
from server.midi_export import MidiExporter

__version__ = "1.0.0"

__all__ = [
    # Core components
    "CompositionService",
    "CompositionStore",
    "DIContainer",
    "MidiExporter",
    # Data structures
    "GeneratedComposition",
    # Configuration
    "TunesmithConfig",
    "get_config",
    # Metrics
    "GenerationMetrics",
]
