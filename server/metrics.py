"""Generation metrics collection and aggregation.

Tracks composition latency, request outcomes and process memory for the
metrics endpoint.
"""

import logging
import threading
import time
from collections import deque
from datetime import datetime
from typing import Any

import numpy as np
import psutil

from server.interfaces.metrics import IMetricsCollector

logger = logging.getLogger(__name__)


class GenerationLatency:
    """Rolling window of composition times with percentile summaries."""

    WINDOW = 1000
    PERCENTILES = (50, 95, 99)

    def __init__(self, window: int = WINDOW):
        self.samples: deque[float] = deque(maxlen=window)

    def record(self, latency_ms: float) -> None:
        self.samples.append(latency_ms)

    def summary(self) -> dict[str, float | int]:
        """Mean, max and p50/p95/p99 over the window, in milliseconds."""
        if not self.samples:
            empty = {f"p{p}": 0.0 for p in self.PERCENTILES}
            return {"avg": 0.0, "max": 0.0, **empty, "samples": 0}

        window = np.fromiter(self.samples, dtype=float)
        ranks = np.percentile(window, self.PERCENTILES)
        return {
            "avg": float(window.mean()),
            "max": float(window.max()),
            **{f"p{p}": float(value) for p, value in zip(self.PERCENTILES, ranks)},
            "samples": int(window.size),
        }


class GenerationMetrics(IMetricsCollector):
    """Collects and aggregates generation metrics."""

    # Warn when a single composition takes longer than this
    SLOW_GENERATION_MS = 250.0

    def __init__(self) -> None:
        """Initialize metrics collector."""
        self.generation_latency = GenerationLatency()

        # Event counters
        self.compositions_generated = 0
        self.invalid_requests = 0
        self.lookup_misses = 0
        self.midi_exports = 0

        self.start_time = time.time()
        self._lock = threading.Lock()

        logger.info("Metrics collector initialized")

    def record_generation_latency(self, latency_ms: float) -> None:
        """Record composition generation time.

        Args:
            latency_ms: Generation time in milliseconds
        """
        with self._lock:
            self.generation_latency.record(latency_ms)
            self.compositions_generated += 1

        if latency_ms > self.SLOW_GENERATION_MS:
            logger.warning(
                f"Generation latency {latency_ms:.1f}ms exceeds "
                f"{self.SLOW_GENERATION_MS:.0f}ms",
                extra={"latency_ms": latency_ms},
            )

    def increment_invalid_request(self) -> None:
        """Increment rejected-parameter counter."""
        with self._lock:
            self.invalid_requests += 1

    def increment_lookup_miss(self) -> None:
        """Increment unknown-id lookup counter."""
        with self._lock:
            self.lookup_misses += 1

    def increment_midi_export(self) -> None:
        """Increment MIDI export counter."""
        with self._lock:
            self.midi_exports += 1

    def get_snapshot(self) -> dict[str, Any]:
        """Get current metrics snapshot.

        Returns:
            Dictionary with all metrics data
        """
        process = psutil.Process()
        memory_mb = process.memory_info().rss / (1024 * 1024)

        with self._lock:
            return {
                "generation_latency_ms": self.generation_latency.summary(),
                "compositions_generated": self.compositions_generated,
                "invalid_requests": self.invalid_requests,
                "lookup_misses": self.lookup_misses,
                "midi_exports": self.midi_exports,
                "memory_usage_mb": memory_mb,
                "uptime_sec": time.time() - self.start_time,
                "timestamp": datetime.now().isoformat(),
            }
