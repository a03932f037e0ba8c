"""Mini README: Card ledger and transaction state machine.

Modules:
    * models - card records, views and input parsing.
    * reset_policy - lazy once-per-day balance reset.
    * registry - card collection with write-through persistence.
    * pending - the single pending-transaction slot.
    * payments - atomic settlement of debits.
    * service - ``KantinLedger`` facade tying the pieces together.
"""

from .errors import CardNotFoundError, DuplicateCardError, LedgerError, LedgerValidationError
from .models import CardRecord, CardView, LastTransaction
from .payments import Declined, PaymentProcessor, Settled
from .pending import (
    AwaitingAmount,
    EmptySlot,
    PendingKind,
    PendingSlot,
    UnregisteredCard,
)
from .registry import CardRegistry, Credited, Deleted, Registered, Wiped
from .service import KantinLedger, TapResult

__all__ = [
    "AwaitingAmount",
    "CardNotFoundError",
    "CardRecord",
    "CardRegistry",
    "CardView",
    "Credited",
    "Declined",
    "Deleted",
    "DuplicateCardError",
    "EmptySlot",
    "KantinLedger",
    "LastTransaction",
    "LedgerError",
    "LedgerValidationError",
    "PaymentProcessor",
    "PendingKind",
    "PendingSlot",
    "Registered",
    "Settled",
    "TapResult",
    "UnregisteredCard",
    "Wiped",
]
