"""Metrics interface definitions."""

from abc import ABC, abstractmethod
from typing import Any


class IMetricsCollector(ABC):
    """Collects and aggregates generation metrics."""

    @abstractmethod
    def record_generation_latency(self, latency_ms: float) -> None:
        """Record composition generation time.

        Args:
            latency_ms: Generation time in milliseconds
        """
        pass

    @abstractmethod
    def increment_invalid_request(self) -> None:
        """Increment rejected-parameter counter."""
        pass

    @abstractmethod
    def increment_lookup_miss(self) -> None:
        """Increment unknown-id lookup counter."""
        pass

    @abstractmethod
    def increment_midi_export(self) -> None:
        """Increment MIDI export counter."""
        pass

    @abstractmethod
    def get_snapshot(self) -> dict[str, Any]:
        """Get current metrics snapshot.

        Returns:
            Dictionary with metrics data:
            - generation_latency_ms: {avg, max, p50, p95, p99, samples}
            - compositions_generated: int
            - invalid_requests: int
            - lookup_misses: int
            - midi_exports: int
            - memory_usage_mb: float
            - uptime_sec: float
            - timestamp: ISO 8601 string
        """
        pass
