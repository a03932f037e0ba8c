"""Mini README: Abstract durable store used by the card registry.

Structure:
    * CardStore - interface persisting and loading the full card set.

Stores hold no business logic. ``load`` returns an empty list when no prior
state exists; ``save`` writes the complete snapshot and raises ``OSError``
when the write fails so the registry can surface the data-loss risk.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Sequence

from ..ledger.models import CardRecord


class CardStore(ABC):
    """Base interface for card persistence backends."""

    store_name: str = "generic"

    @abstractmethod
    def load(self) -> List[CardRecord]:
        """Return every persisted card in registration order."""

    @abstractmethod
    def save(self, cards: Sequence[CardRecord]) -> None:
        """Persist the full card set, replacing any previous snapshot."""

    def describe(self) -> str:
        """Human readable location for log lines."""

        return self.store_name
