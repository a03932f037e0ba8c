"""Mini README: Single-slot holder for the most recent card tap.

Structure:
    * PendingKind - tag for the three slot states.
    * EmptySlot / UnregisteredCard / AwaitingAmount - tagged slot values.
    * PendingSlot - thread-safe holder with last-tap-wins semantics.

The slot is never persisted and is lost on restart. ``AwaitingAmount``
carries a balance snapshot for display only; settlement always re-reads the
card registry.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Dict, Optional, Union

from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


class PendingKind(str, Enum):
    """Enumerate the slot states using the till page's status strings."""

    EMPTY = "empty"
    UNREGISTERED = "not_registered"
    AWAITING_AMOUNT = "waiting_amount"


@dataclass(frozen=True, slots=True)
class EmptySlot:
    """No card is currently pending."""

    @property
    def kind(self) -> PendingKind:
        return PendingKind.EMPTY

    @property
    def card_id(self) -> Optional[str]:
        return None

    def as_dict(self) -> Optional[Dict[str, object]]:
        return None


@dataclass(frozen=True, slots=True)
class UnregisteredCard:
    """A card the registry does not know was tapped."""

    card_id: str
    timestamp: datetime

    @property
    def kind(self) -> PendingKind:
        return PendingKind.UNREGISTERED

    def as_dict(self) -> Dict[str, object]:
        return {
            "uid": self.card_id,
            "status": self.kind.value,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True, slots=True)
class AwaitingAmount:
    """A known card was tapped and is waiting for the cashier's amount."""

    card_id: str
    holder_name: str
    balance_snapshot: int
    timestamp: datetime

    @property
    def kind(self) -> PendingKind:
        return PendingKind.AWAITING_AMOUNT

    def as_dict(self) -> Dict[str, object]:
        return {
            "uid": self.card_id,
            "name": self.holder_name,
            "balance": self.balance_snapshot,
            "status": self.kind.value,
            "timestamp": self.timestamp.isoformat(),
        }


PendingTransaction = Union[EmptySlot, UnregisteredCard, AwaitingAmount]

EMPTY = EmptySlot()


class PendingSlot:
    """Holds at most one pending transaction; each new tap overwrites it."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value: PendingTransaction = EMPTY

    def current(self) -> PendingTransaction:
        """Return the slot contents without changing them."""

        return self._value

    def put(self, value: PendingTransaction) -> PendingTransaction:
        """Replace the slot contents, returning the previous value."""

        with self._lock:
            previous, self._value = self._value, value
        if not isinstance(previous, EmptySlot) and previous.card_id != value.card_id:
            LOGGER.debug("Pending %s for %s overwritten", previous.kind.value, previous.card_id)
        return previous

    def clear(self, card_id: Optional[str] = None) -> bool:
        """Empty the slot; with ``card_id`` only when it refers to that card."""

        with self._lock:
            if isinstance(self._value, EmptySlot):
                return False
            if card_id is not None and self._value.card_id != card_id:
                return False
            self._value = EMPTY
        LOGGER.debug("Pending transaction cleared")
        return True
