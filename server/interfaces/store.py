"""Composition store interface definitions."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from composition.composer import Composition


class ICompositionStore(ABC):
    """Insert-once, read-many keyed store of generated compositions."""

    @abstractmethod
    def insert(self, composition_id: str, composition: "Composition") -> None:
        """Store a composition under a new identifier.

        Args:
            composition_id: Identifier not yet present in the store
            composition: Composition to store

        Raises:
            StoreError: If the identifier is already taken

        Thread-safe: Uses internal lock
        """
        pass

    @abstractmethod
    def get(self, composition_id: str) -> Optional["Composition"]:
        """Look up a composition.

        Args:
            composition_id: Identifier returned at insert time

        Returns:
            The stored Composition, or None if absent
        """
        pass

    @abstractmethod
    def items(self) -> list[tuple[str, "Composition"]]:
        """Return all (id, composition) pairs in insertion order."""
        pass

    @abstractmethod
    def __len__(self) -> int:
        """Return number of stored compositions."""
        pass
