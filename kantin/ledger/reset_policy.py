"""Mini README: Daily balance reset policy.

A card's balance is restored to its daily allotment the first time it is
touched on a new calendar day. The check is date-only in local server time,
idempotent within a day, and never retroactive: a card idle for several days
resets once, to the current allotment.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Tuple

from .models import CardRecord


def is_reset_due(card: CardRecord, today: date) -> bool:
    """Return True when the stored reset date is not ``today``."""

    return card.last_reset_date != today


def apply_daily_reset(card: CardRecord, today: date) -> Tuple[CardRecord, bool]:
    """Return the (possibly reset) record and whether a reset was applied."""

    if not is_reset_due(card, today):
        return card, False
    return replace(card, balance=card.daily_allotment, last_reset_date=today), True


def projected_balance(card: CardRecord, today: date) -> int:
    """Balance a reader should see without mutating the stored record."""

    return card.daily_allotment if is_reset_due(card, today) else card.balance
