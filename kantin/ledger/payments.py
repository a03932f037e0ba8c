"""Mini README: Payment settlement against card balances.

Structure:
    * Settled - debit applied; carries the new balance and the amount paid.
    * Declined - insufficient balance; carries the balance the card holds.
    * PaymentProcessor - validates, resets, checks, and debits atomically.

Settlement runs inside the registry's per-card critical section: the daily
reset and the debit are published as a single record replacement and then
written through to the store. A declined payment changes nothing and writes
nothing. The processor never touches the pending slot; clearing it is up to
the caller once the result has been shown.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Union

from ..logging_utils import get_logger
from .models import CardRecord, LastTransaction, parse_amount, require_text
from .registry import CardRegistry

LOGGER = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Settled:
    new_balance: int
    paid: int
    persisted: bool = True

    @property
    def success(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Declined:
    current_balance: int

    @property
    def success(self) -> bool:
        return False


SettlementOutcome = Union[Settled, Declined]


class PaymentProcessor:
    """The single place where money leaves a card."""

    def __init__(self, registry: CardRegistry) -> None:
        self._registry = registry

    def settle(self, card_id: str, amount: object) -> SettlementOutcome:
        """Debit ``amount`` from the card or decline without side effects.

        Raises ``LedgerValidationError`` for a non-positive or malformed amount
        before the registry is consulted, and ``CardNotFoundError`` when the
        card is unknown.
        """

        card_id = require_text(card_id, "Card identifier")
        value = parse_amount(amount)
        timestamp = self._registry.now()

        def debit(card: CardRecord) -> Optional[CardRecord]:
            if value > card.balance:
                return None
            return replace(
                card,
                balance=card.balance - value,
                last_transaction=LastTransaction(amount=value, timestamp=timestamp),
            )

        update = self._registry.transact(card_id, debit)
        if not update.changed:
            LOGGER.info(
                "Payment declined for %s (%s): amount=%s balance=%s",
                update.card.holder_name,
                card_id,
                value,
                update.card.balance,
            )
            return Declined(current_balance=update.card.balance)

        LOGGER.info(
            "Payment success: %s paid %s, remaining balance=%s",
            update.card.holder_name,
            value,
            update.card.balance,
        )
        return Settled(new_balance=update.card.balance, paid=value, persisted=update.persisted)
