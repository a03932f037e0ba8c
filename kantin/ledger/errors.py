"""Mini README: Exception taxonomy shared by the ledger components.

Structure:
    * LedgerError - base class for ledger failures surfaced to callers.
    * CardNotFoundError - the card identifier is unknown to the registry.
    * DuplicateCardError - registration attempted with an existing identifier.
    * LedgerValidationError - malformed identifier, name, or amount.

Insufficient balance is not an error; it is reported through the
``Declined`` outcome of the payment processor. Storage failures stay as
``OSError`` and are downgraded to warnings by the registry.
"""

from __future__ import annotations


class LedgerError(Exception):
    """Base class for ledger failures."""


class CardNotFoundError(LedgerError, KeyError):
    """Raised when a card identifier is not registered."""

    def __init__(self, card_id: str) -> None:
        super().__init__(f"Card {card_id} not found")
        self.card_id = card_id

    def __str__(self) -> str:
        return str(self.args[0])


class DuplicateCardError(LedgerError):
    """Raised when registering a card identifier that already exists."""

    def __init__(self, card_id: str) -> None:
        super().__init__(f"Card {card_id} already registered")
        self.card_id = card_id


class LedgerValidationError(LedgerError, ValueError):
    """Raised when an identifier, name, or amount fails validation."""
