"""Mini README: Tests for the JSON card store.

Confirms that saved cards load back unchanged, that a missing file means an
empty registry, that the earlier camelCase file layout is understood, and
that the ledger survives a restart through the file store.
"""

from __future__ import annotations

import json
from datetime import date, datetime

import pytest

from kantin.ledger import CardRecord, KantinLedger, LastTransaction
from kantin.storage import JsonFileStore


def test_missing_file_loads_empty(tmp_path) -> None:
    store = JsonFileStore(tmp_path / "cards.json")

    assert store.load() == []


def test_save_then_load_round_trip(tmp_path) -> None:
    store = JsonFileStore(tmp_path / "nested" / "cards.json")
    cards = [
        CardRecord(
            card_id="CARD1",
            holder_name="Alice",
            daily_allotment=40000,
            balance=25000,
            last_reset_date=date(2024, 6, 3),
            registered_at=datetime(2024, 6, 1, 8, 15),
            last_transaction=LastTransaction(amount=15000, timestamp=datetime(2024, 6, 3, 12, 0)),
        ),
        CardRecord(
            card_id="CARD2",
            holder_name="Bob",
            daily_allotment=0,
            balance=0,
            last_reset_date=date(2024, 6, 2),
            registered_at=datetime(2024, 6, 2, 9, 0),
        ),
    ]

    store.save(cards)

    assert store.load() == cards
    assert not list((tmp_path / "nested").glob("*.tmp"))


def test_loads_legacy_camel_case_layout(tmp_path) -> None:
    path = tmp_path / "cards.json"
    path.write_text(
        json.dumps(
            [
                {
                    "uid": "A1B2C3D4",
                    "name": "Budi",
                    "initialBalance": 40000,
                    "balance": 12000,
                    "lastResetDate": "20240603",
                    "registeredAt": "2024-06-01T02:00:00.000Z",
                    "lastTransaction": {"amount": 28000, "timestamp": "2024-06-03T05:00:00.000Z"},
                }
            ]
        ),
        encoding="utf-8",
    )

    (card,) = JsonFileStore(path).load()

    assert card.card_id == "A1B2C3D4"
    assert card.daily_allotment == 40000
    assert card.balance == 12000
    assert card.last_reset_date == date(2024, 6, 3)
    assert card.last_transaction is not None
    assert card.last_transaction.amount == 28000


def test_rejects_non_array_payload(tmp_path) -> None:
    path = tmp_path / "cards.json"
    path.write_text("{}", encoding="utf-8")

    with pytest.raises(ValueError):
        JsonFileStore(path).load()


def test_ledger_state_survives_restart(tmp_path, clock) -> None:
    path = tmp_path / "cards.json"
    with KantinLedger(JsonFileStore(path), clock=clock) as ledger:
        ledger.register("CARD1", "Alice", 40000)
        ledger.settle("CARD1", 15000)

    with KantinLedger(JsonFileStore(path), clock=clock) as restarted:
        card = restarted.lookup("CARD1")
        assert card.balance == 25000
        assert card.daily_allotment == 40000
        assert card.last_reset_date == date(2024, 6, 3)
        assert card.last_transaction.amount == 15000


def test_unwritable_location_reports_warning(tmp_path, clock) -> None:
    blocker = tmp_path / "not-a-directory"
    blocker.write_text("", encoding="utf-8")
    ledger = KantinLedger(JsonFileStore(blocker / "cards.json"), clock=clock).open()

    outcome = ledger.register("CARD1", "Alice", 40000)

    assert outcome.persisted is False
    assert ledger.lookup("CARD1").balance == 40000
