"""Mini README: In-memory card store for tests and ephemeral runs.

The store keeps a copy of the last saved snapshot and counts writes so tests
can assert on persistence behaviour. Setting ``fail_saves`` makes ``save``
raise ``OSError`` to exercise the registry's warning path.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from ..ledger.models import CardRecord
from .base import CardStore


class InMemoryCardStore(CardStore):
    """Card store backed by a Python list."""

    store_name = "memory"

    def __init__(self, cards: Optional[Iterable[CardRecord]] = None) -> None:
        self._snapshot: List[CardRecord] = list(cards or [])
        self.save_count = 0
        self.fail_saves = False

    def load(self) -> List[CardRecord]:
        return list(self._snapshot)

    def save(self, cards: Sequence[CardRecord]) -> None:
        if self.fail_saves:
            raise OSError("in-memory store configured to fail")
        self._snapshot = list(cards)
        self.save_count += 1
