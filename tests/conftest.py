"""Mini README: Shared fixtures for the Kantin test-suite.

Structure:
    * ManualClock - callable clock the tests move across day boundaries.
    * clock / store / ledger fixtures - fresh, isolated ledger per test.
"""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from kantin.ledger import KantinLedger
from kantin.storage import InMemoryCardStore


class ManualClock:
    """Clock returning a fixed instant until advanced."""

    def __init__(self, start: datetime) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **delta: float) -> None:
        self.current = self.current + timedelta(**delta)


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock(datetime(2024, 6, 3, 11, 30))


@pytest.fixture
def store() -> InMemoryCardStore:
    return InMemoryCardStore()


@pytest.fixture
def ledger(store: InMemoryCardStore, clock: ManualClock) -> KantinLedger:
    return KantinLedger(store, clock=clock).open()
