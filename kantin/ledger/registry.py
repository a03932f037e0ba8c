"""Mini README: Card registry owning every card record.

Structure:
    * Registered / Credited / Deleted / Wiped - mutation outcomes.
    * CardUpdate - result of a reset-aware transactional update.
    * CardRegistry - creation, lookup, top-up, deletion, listing and wipe.

Locking:
    Each card identifier has its own lock so mutations of one card never
    interleave while different cards proceed independently. Records are
    immutable; an update builds a replacement and publishes it under a short
    structure lock, so readers (``lookup`` and ``list_cards``) never wait on
    disk I/O. The whole registry is written through to the store after every
    mutation. A failed write is logged and reported as ``persisted=False``;
    the in-memory state stays authoritative.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import TYPE_CHECKING, Callable, Dict, List, Optional

from ..logging_utils import get_logger
from .errors import CardNotFoundError, DuplicateCardError
from .locks import KeyedLocks
from .models import CardRecord, CardView, parse_allotment, parse_amount, require_text
from .reset_policy import apply_daily_reset, is_reset_due, projected_balance

if TYPE_CHECKING:
    from ..storage.base import CardStore

LOGGER = get_logger(__name__)

Clock = Callable[[], datetime]


@dataclass(frozen=True, slots=True)
class Registered:
    card: CardRecord
    persisted: bool = True


@dataclass(frozen=True, slots=True)
class Credited:
    card_id: str
    balance: int
    persisted: bool = True


@dataclass(frozen=True, slots=True)
class Deleted:
    card_id: str
    persisted: bool = True


@dataclass(frozen=True, slots=True)
class Wiped:
    removed: int
    persisted: bool = True


@dataclass(frozen=True, slots=True)
class CardUpdate:
    """Outcome of ``CardRegistry.transact``."""

    card: CardRecord
    changed: bool
    reset_applied: bool
    persisted: bool = True


class CardRegistry:
    """In-memory card collection with write-through persistence."""

    def __init__(self, store: "CardStore", *, clock: Optional[Clock] = None) -> None:
        self._store = store
        self._clock: Clock = clock or datetime.now
        self._cards: Dict[str, CardRecord] = {}
        self._structure_lock = threading.Lock()
        self._save_lock = threading.Lock()
        self._card_locks = KeyedLocks()

    # ------------------------------------------------------------------
    # lifecycle
    # ------------------------------------------------------------------
    def load(self) -> int:
        """Replace in-memory state with the store's contents."""

        cards = self._store.load()
        with self._structure_lock:
            self._cards = {card.card_id: card for card in cards}
        LOGGER.info("Card registry loaded %s cards from %s", len(cards), self._store.describe())
        return len(cards)

    def flush(self) -> bool:
        """Write the current state to the store."""

        return self._persist()

    def now(self) -> datetime:
        return self._clock()

    def today(self) -> date:
        return self._clock().date()

    # ------------------------------------------------------------------
    # reads
    # ------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self._cards)

    def __contains__(self, card_id: object) -> bool:
        return isinstance(card_id, str) and card_id.strip() in self._cards

    def lookup(self, card_id: str) -> CardRecord:
        """Return the stored record without applying the daily reset."""

        card_id = require_text(card_id, "Card identifier")
        card = self._cards.get(card_id)
        if card is None:
            raise CardNotFoundError(card_id)
        return card

    def list_cards(self) -> List[CardView]:
        """Return reset-aware views in registration order."""

        with self._structure_lock:
            cards = list(self._cards.values())
        today = self.today()
        return [
            CardView(
                card_id=card.card_id,
                holder_name=card.holder_name,
                daily_allotment=card.daily_allotment,
                balance=projected_balance(card, today),
                last_reset_date=card.last_reset_date,
                needs_reset=is_reset_due(card, today),
                last_transaction=card.last_transaction,
            )
            for card in cards
        ]

    # ------------------------------------------------------------------
    # mutations
    # ------------------------------------------------------------------
    def register(self, card_id: str, holder_name: str, daily_allotment: object) -> Registered:
        """Create a card whose balance starts at its daily allotment."""

        card_id = require_text(card_id, "Card identifier")
        holder_name = require_text(holder_name, "Holder name")
        allotment = parse_allotment(daily_allotment)
        with self._card_locks.hold(card_id):
            now = self.now()
            card = CardRecord(
                card_id=card_id,
                holder_name=holder_name,
                daily_allotment=allotment,
                balance=allotment,
                last_reset_date=now.date(),
                registered_at=now,
            )
            with self._structure_lock:
                if card_id in self._cards:
                    raise DuplicateCardError(card_id)
                self._cards[card_id] = card
            LOGGER.info("New card registered: %s (%s) allotment=%s", holder_name, card_id, allotment)
            return Registered(card=card, persisted=self._persist())

    def transact(
        self, card_id: str, change: Callable[[CardRecord], Optional[CardRecord]]
    ) -> CardUpdate:
        """Apply the daily reset and ``change`` to a card as one critical section.

        ``change`` receives the reset-aware record and returns its replacement,
        or ``None`` to leave the card untouched. When ``None`` is returned a
        pending reset is not published either; the stale balance is projected
        to the allotment by readers anyway.
        """

        card_id = require_text(card_id, "Card identifier")
        with self._card_locks.hold(card_id):
            current = self.lookup(card_id)
            candidate, reset_applied = apply_daily_reset(current, self.today())
            updated = change(candidate)
            if updated is None or updated is current:
                return CardUpdate(card=candidate, changed=False, reset_applied=False)
            self._publish(updated)
            if reset_applied:
                LOGGER.info(
                    "Daily reset applied for %s (%s) balance=%s",
                    updated.holder_name,
                    card_id,
                    updated.daily_allotment,
                )
            return CardUpdate(
                card=updated,
                changed=True,
                reset_applied=reset_applied,
                persisted=self._persist(),
            )

    def apply_reset(self, card_id: str) -> CardUpdate:
        """Publish the daily reset for a card if one is due."""

        return self.transact(card_id, lambda card: card)

    def credit(self, card_id: str, amount: object) -> Credited:
        """Add a positive amount to a card after applying any due reset."""

        value = parse_amount(amount)
        update = self.transact(card_id, lambda card: replace(card, balance=card.balance + value))
        LOGGER.info(
            "Top up: %s +%s new balance=%s", update.card.holder_name, value, update.card.balance
        )
        return Credited(
            card_id=update.card.card_id, balance=update.card.balance, persisted=update.persisted
        )

    def delete(self, card_id: str) -> Deleted:
        """Remove a card permanently."""

        card_id = require_text(card_id, "Card identifier")
        with self._card_locks.hold(card_id):
            with self._structure_lock:
                card = self._cards.pop(card_id, None)
            if card is None:
                raise CardNotFoundError(card_id)
            LOGGER.info("Card deleted: %s (%s)", card.holder_name, card_id)
            return Deleted(card_id=card_id, persisted=self._persist())

    def wipe(self) -> Wiped:
        """Remove every card unconditionally."""

        with self._structure_lock:
            removed = len(self._cards)
            self._cards = {}
        LOGGER.warning("All card data wiped (%s cards removed)", removed)
        return Wiped(removed=removed, persisted=self._persist())

    # ------------------------------------------------------------------
    # internals
    # ------------------------------------------------------------------
    def _publish(self, card: CardRecord) -> None:
        with self._structure_lock:
            if card.card_id not in self._cards:
                # wiped while the card lock was held
                raise CardNotFoundError(card.card_id)
            self._cards[card.card_id] = card

    def _persist(self) -> bool:
        with self._save_lock:
            with self._structure_lock:
                snapshot = list(self._cards.values())
            try:
                self._store.save(snapshot)
            except OSError as error:
                LOGGER.warning(
                    "Failed to save %s cards to %s: %s", len(snapshot), self._store.describe(), error
                )
                return False
        LOGGER.debug("Data saved (%s cards)", len(snapshot))
        return True
