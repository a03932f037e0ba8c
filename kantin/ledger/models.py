"""Mini README: Card record data structures and value parsing helpers.

Structure:
    * LastTransaction - amount and timestamp of the latest successful debit.
    * CardRecord - persisted card state owned by the card registry.
    * CardView - read-time projection returned by listings.
    * parse_amount / parse_allotment / require_text - boundary validation.

Records are treated as immutable values: every balance change produces a new
``CardRecord`` via ``dataclasses.replace`` and the registry swaps the
reference, so a reader never observes a half-applied update.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, Optional

from .errors import LedgerValidationError

_INTEGER_TEXT = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True, slots=True)
class LastTransaction:
    """Most recent successful debit against a card."""

    amount: int
    timestamp: datetime

    def as_dict(self) -> Dict[str, object]:
        return {"amount": self.amount, "timestamp": self.timestamp.isoformat()}


@dataclass(frozen=True, slots=True)
class CardRecord:
    """Persisted state of a single prepaid card."""

    card_id: str
    holder_name: str
    daily_allotment: int
    balance: int
    last_reset_date: date
    registered_at: datetime
    last_transaction: Optional[LastTransaction] = None

    def __post_init__(self) -> None:
        if self.balance < 0:
            raise LedgerValidationError(
                f"Card {self.card_id} balance cannot be negative ({self.balance})"
            )
        if self.daily_allotment < 0:
            raise LedgerValidationError(
                f"Card {self.card_id} daily allotment cannot be negative ({self.daily_allotment})"
            )

    def as_dict(self) -> Dict[str, object]:
        """Export the record with serialisable values."""

        return {
            "card_id": self.card_id,
            "holder_name": self.holder_name,
            "daily_allotment": self.daily_allotment,
            "balance": self.balance,
            "last_reset_date": self.last_reset_date.isoformat(),
            "registered_at": self.registered_at.isoformat(),
            "last_transaction": self.last_transaction.as_dict() if self.last_transaction else None,
        }


@dataclass(frozen=True, slots=True)
class CardView:
    """Reset-aware presentation of a card for listings."""

    card_id: str
    holder_name: str
    daily_allotment: int
    balance: int
    last_reset_date: date
    needs_reset: bool
    last_transaction: Optional[LastTransaction] = None


def _parse_integer(value: object, label: str) -> int:
    """Coerce ints and digit strings into an integer, rejecting everything else."""

    if isinstance(value, bool):
        raise LedgerValidationError(f"{label} must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if _INTEGER_TEXT.fullmatch(text):
            return int(text)
    raise LedgerValidationError(f"{label} must be an integer, got {value!r}")


def parse_amount(value: object) -> int:
    """Validate a payment or top-up amount (strictly positive integer)."""

    amount = _parse_integer(value, "Amount")
    if amount <= 0:
        raise LedgerValidationError(f"Amount must be positive, got {amount}")
    return amount


def parse_allotment(value: object) -> int:
    """Validate a daily allotment (non-negative integer)."""

    allotment = _parse_integer(value, "Daily allotment")
    if allotment < 0:
        raise LedgerValidationError(f"Daily allotment cannot be negative, got {allotment}")
    return allotment


def require_text(value: object, label: str) -> str:
    """Return a stripped, non-empty string or raise a validation error."""

    if not isinstance(value, str) or not value.strip():
        raise LedgerValidationError(f"{label} is required")
    return value.strip()
