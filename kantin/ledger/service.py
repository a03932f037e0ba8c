"""Mini README: Ledger facade wiring the registry, pending slot and payments.

Structure:
    * TapResult - what the card reader learns after a tap.
    * KantinLedger - owns all ledger state and exposes the external operations.

Lifecycle:
    ``open`` loads the card set from the durable store and ``close`` flushes
    it back. The ledger holds its own registry and slot; nothing lives in
    module globals, so tests and the web application each build their own.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Callable, List, Optional

from ..logging_utils import get_logger
from .errors import CardNotFoundError
from .models import CardRecord, CardView, require_text
from .payments import PaymentProcessor, SettlementOutcome
from .pending import AwaitingAmount, PendingSlot, PendingTransaction, UnregisteredCard
from .registry import CardRegistry, Credited, Deleted, Registered, Wiped

if TYPE_CHECKING:
    from ..storage.base import CardStore

LOGGER = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class TapResult:
    """Reply to the card reader for a single tap."""

    known: bool
    card_id: str
    holder_name: Optional[str] = None
    balance: Optional[int] = None


class KantinLedger:
    """Card ledger and transaction state machine."""

    def __init__(
        self,
        store: "CardStore",
        *,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.store = store
        self.registry = CardRegistry(store, clock=clock)
        self.slot = PendingSlot()
        self.payments = PaymentProcessor(self.registry)
        self._tap_lock = threading.Lock()
        self._opened = False

    # ------------------------------------------------------------------
    # lifecycle
    # ------------------------------------------------------------------
    def open(self) -> "KantinLedger":
        """Load persisted cards; safe to call more than once."""

        if not self._opened:
            self.registry.load()
            self._opened = True
        return self

    def close(self) -> bool:
        """Flush the registry to the store."""

        if not self._opened:
            return True
        persisted = self.registry.flush()
        self._opened = False
        LOGGER.info("Ledger closed (persisted=%s)", persisted)
        return persisted

    def __enter__(self) -> "KantinLedger":
        return self.open()

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # tap ingress and pending slot
    # ------------------------------------------------------------------
    def tap(self, card_id: str) -> TapResult:
        """Record a card tap in the pending slot, applying the daily reset."""

        card_id = require_text(card_id, "Card identifier")
        with self._tap_lock:
            LOGGER.info("[CARD TAP] UID: %s", card_id)
            timestamp = self.registry.now()
            try:
                update = self.registry.apply_reset(card_id)
            except CardNotFoundError:
                LOGGER.info("Card %s not registered", card_id)
                self.slot.put(UnregisteredCard(card_id=card_id, timestamp=timestamp))
                return TapResult(known=False, card_id=card_id)

            card = update.card
            self.slot.put(
                AwaitingAmount(
                    card_id=card_id,
                    holder_name=card.holder_name,
                    balance_snapshot=card.balance,
                    timestamp=timestamp,
                )
            )
            LOGGER.info("Card found: %s | Balance: %s", card.holder_name, card.balance)
            return TapResult(
                known=True, card_id=card_id, holder_name=card.holder_name, balance=card.balance
            )

    def pending(self) -> PendingTransaction:
        return self.slot.current()

    def clear_pending(self, card_id: Optional[str] = None) -> bool:
        if card_id is not None:
            card_id = require_text(card_id, "Card identifier")
        return self.slot.clear(card_id)

    # ------------------------------------------------------------------
    # settlement and registry pass-throughs
    # ------------------------------------------------------------------
    def settle(self, card_id: str, amount: object) -> SettlementOutcome:
        return self.payments.settle(card_id, amount)

    def register(self, card_id: str, holder_name: str, daily_allotment: object) -> Registered:
        """Register a card; a pending unregistered notice for it is cleared.

        A slot describing a different card is left as it is.
        """

        outcome = self.registry.register(card_id, holder_name, daily_allotment)
        self.slot.clear(outcome.card.card_id)
        return outcome

    def lookup(self, card_id: str) -> CardRecord:
        return self.registry.lookup(card_id)

    def credit(self, card_id: str, amount: object) -> Credited:
        return self.registry.credit(card_id, amount)

    def delete(self, card_id: str) -> Deleted:
        return self.registry.delete(card_id)

    def wipe(self) -> Wiped:
        return self.registry.wipe()

    def list_cards(self) -> List[CardView]:
        return self.registry.list_cards()
