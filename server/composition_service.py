"""Composition service: generate, store and look up compositions.

The service owns no global state; the store and metrics collector are
handed in by the DI container.
"""

import logging
import random
import time
import uuid
from dataclasses import dataclass
from typing import Optional

from composition.composer import Composer, Composition
from composition.exceptions import InvalidParameterError
from composition.parameters import ParameterSet
from server.exceptions import StoreError
from server.interfaces.metrics import IMetricsCollector
from server.interfaces.store import ICompositionStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeneratedComposition:
    """A composition paired with its store identifier."""

    id: str
    composition: Composition

    def to_dict(self) -> dict:
        """Serialize as ``{"id": ..., **composition}``."""
        return {"id": self.id, **self.composition.to_dict()}


def new_composition_id() -> str:
    """Return a new opaque composition identifier."""
    return uuid.uuid4().hex[:12]


class CompositionService:
    """Generates compositions and keeps them in the store."""

    # Fresh ids tried before a collision is treated as a store failure
    MAX_ID_ATTEMPTS = 5

    def __init__(
        self,
        composer: Composer,
        store: ICompositionStore,
        metrics: IMetricsCollector,
        max_duration_sec: Optional[float] = None,
    ) -> None:
        """Initialize composition service.

        Args:
            composer: Composition assembler
            store: Keyed composition store
            metrics: Metrics collector
            max_duration_sec: Longest accepted duration (unbounded if None)
        """
        self.composer = composer
        self.store = store
        self.metrics = metrics
        self.max_duration_sec = max_duration_sec

        logger.info("Composition service initialized")

    def generate(
        self, parameters: ParameterSet, rng: Optional[random.Random] = None
    ) -> GeneratedComposition:
        """Compose and store a new composition.

        Args:
            parameters: Requested parameters
            rng: Optional random source override (tests)

        Returns:
            GeneratedComposition with the new id

        Raises:
            InvalidParameterError: If a parameter is unknown; nothing is stored
        """
        start_time = time.perf_counter()
        try:
            self._check_duration(parameters)
            composition = self.composer.compose(parameters, rng)
        except InvalidParameterError as e:
            self.metrics.increment_invalid_request()
            logger.info(f"Rejected parameters: {e}", extra={"genre": parameters.genre})
            raise
        latency_ms = (time.perf_counter() - start_time) * 1000.0

        composition_id = self._insert(composition)
        self.metrics.record_generation_latency(latency_ms)

        logger.info(
            f"Generated '{composition.title}'",
            extra={
                "composition_id": composition_id,
                "genre": parameters.genre,
                "latency_ms": round(latency_ms, 2),
            },
        )

        return GeneratedComposition(id=composition_id, composition=composition)

    def lookup(self, composition_id: str) -> Optional[Composition]:
        """Find a stored composition.

        Returns:
            The Composition returned by ``generate``, or None if unknown
        """
        composition = self.store.get(composition_id)
        if composition is None:
            self.metrics.increment_lookup_miss()
            logger.debug(
                "Composition not found", extra={"composition_id": composition_id}
            )
        return composition

    def list_compositions(self) -> list[GeneratedComposition]:
        """Return every stored composition in generation order."""
        return [
            GeneratedComposition(id=composition_id, composition=composition)
            for composition_id, composition in self.store.items()
        ]

    def _check_duration(self, parameters: ParameterSet) -> None:
        if self.max_duration_sec is not None and parameters.duration > self.max_duration_sec:
            raise InvalidParameterError(
                "duration",
                parameters.duration,
                f"Invalid duration: {parameters.duration} "
                f"(must be <= {self.max_duration_sec})",
            )

    def _insert(self, composition: Composition) -> str:
        for _ in range(self.MAX_ID_ATTEMPTS - 1):
            composition_id = new_composition_id()
            try:
                self.store.insert(composition_id, composition)
                return composition_id
            except StoreError:
                logger.warning(
                    "Composition id collision, retrying",
                    extra={"composition_id": composition_id},
                )

        composition_id = new_composition_id()
        self.store.insert(composition_id, composition)
        return composition_id
