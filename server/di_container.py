"""Dependency injection container for Tunesmith server components.

Provides centralized management of service instances with proper lifecycle
and dependency resolution. The container is created per application and
owns the composition store; nothing here is module-global.
"""

import logging
from typing import Any, Optional

from composition.composer import Composer
from server.composition_service import CompositionService
from server.composition_store import CompositionStore
from server.config import TunesmithConfig, get_config
from server.metrics import GenerationMetrics
from server.midi_export import MidiExporter

logger = logging.getLogger(__name__)


class DIContainer:
    """Dependency injection container for server components."""

    def __init__(self, config: Optional[TunesmithConfig] = None) -> None:
        """Initialize DI container.

        Args:
            config: Configuration to use (loaded from the environment if omitted)
        """
        self._config = config or get_config()
        self._instances: dict[str, Any] = {}

        logger.info("DI container initialized")

    def get_config(self) -> TunesmithConfig:
        """Get configuration instance."""
        return self._config

    def get_composer(self) -> Composer:
        """Get or create composer instance."""
        if "composer" not in self._instances:
            self._instances["composer"] = Composer()
        return self._instances["composer"]

    def get_store(self) -> CompositionStore:
        """Get or create composition store instance."""
        if "store" not in self._instances:
            self._instances["store"] = CompositionStore()
        return self._instances["store"]

    def get_metrics(self) -> GenerationMetrics:
        """Get or create metrics collector instance."""
        if "metrics" not in self._instances:
            self._instances["metrics"] = GenerationMetrics()
        return self._instances["metrics"]

    def get_midi_exporter(self) -> MidiExporter:
        """Get or create MIDI exporter instance."""
        if "midi_exporter" not in self._instances:
            self._instances["midi_exporter"] = MidiExporter(
                ticks_per_beat=self._config.midi_ticks_per_beat
            )
        return self._instances["midi_exporter"]

    def get_composition_service(self) -> CompositionService:
        """Get or create composition service instance."""
        if "composition_service" not in self._instances:
            self._instances["composition_service"] = CompositionService(
                composer=self.get_composer(),
                store=self.get_store(),
                metrics=self.get_metrics(),
                max_duration_sec=self._config.max_duration_sec,
            )
        return self._instances["composition_service"]

    def cleanup(self) -> None:
        """Release all managed instances."""
        logger.info(
            f"Cleaning up DI container "
            f"({len(self._instances.get('store', ()))} compositions dropped)"
        )
        self._instances.clear()
