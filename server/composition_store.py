"""Thread-safe in-memory composition store.

Entries are inserted once and never replaced, so readers only need the lock
to get a consistent view of the mapping.
"""

import logging
import threading
from typing import Optional

from composition.composer import Composition
from server.exceptions import StoreError
from server.interfaces.store import ICompositionStore

logger = logging.getLogger(__name__)


class CompositionStore(ICompositionStore):
    """Insert-once keyed store of generated compositions."""

    def __init__(self) -> None:
        """Initialize an empty store."""
        self._compositions: dict[str, Composition] = {}
        self.lock = threading.Lock()

        logger.info("Composition store initialized")

    def insert(self, composition_id: str, composition: Composition) -> None:
        """Store a composition under a new identifier.

        Args:
            composition_id: Identifier not yet present in the store
            composition: Composition to store

        Raises:
            StoreError: If the identifier is already taken
        """
        with self.lock:
            if composition_id in self._compositions:
                raise StoreError(f"Composition id already exists: {composition_id}")
            self._compositions[composition_id] = composition

        logger.debug(
            f"Stored composition (total: {len(self._compositions)})",
            extra={"composition_id": composition_id},
        )

    def get(self, composition_id: str) -> Optional[Composition]:
        """Look up a composition, None if absent."""
        with self.lock:
            return self._compositions.get(composition_id)

    def items(self) -> list[tuple[str, Composition]]:
        """Return all (id, composition) pairs in insertion order."""
        with self.lock:
            return list(self._compositions.items())

    def __len__(self) -> int:
        with self.lock:
            return len(self._compositions)

    def __contains__(self, composition_id: object) -> bool:
        with self.lock:
            return composition_id in self._compositions
