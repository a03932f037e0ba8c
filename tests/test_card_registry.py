"""Mini README: Tests for card registration, top-up, deletion and listing.

Structure:
    * registration - duplicate and validation failures, initial balance.
    * credit - reset-aware top-ups and scenario 5.
    * listing - registration order and read-time reset projection.
    * persistence warnings - failed saves keep the in-memory mutation.
"""

from __future__ import annotations

from datetime import date

import pytest

from kantin.ledger import (
    CardNotFoundError,
    DuplicateCardError,
    KantinLedger,
    LedgerValidationError,
)
from kantin.storage import InMemoryCardStore


def test_register_sets_balance_to_allotment(ledger: KantinLedger, store: InMemoryCardStore) -> None:
    outcome = ledger.register("CARD1", "Alice", 40000)

    assert outcome.card.balance == 40000
    assert outcome.card.daily_allotment == 40000
    assert outcome.card.last_reset_date == date(2024, 6, 3)
    assert outcome.persisted is True
    assert [card.card_id for card in store.load()] == ["CARD1"]


def test_register_accepts_digit_strings(ledger: KantinLedger) -> None:
    outcome = ledger.register("CARD1", "Alice", "25000")

    assert outcome.card.daily_allotment == 25000


def test_register_rejects_duplicates_without_mutation(
    ledger: KantinLedger, store: InMemoryCardStore
) -> None:
    ledger.register("CARD1", "Alice", 40000)
    saves = store.save_count

    with pytest.raises(DuplicateCardError):
        ledger.register("CARD1", "Mallory", 99999)

    assert ledger.lookup("CARD1").holder_name == "Alice"
    assert store.save_count == saves


@pytest.mark.parametrize("allotment", [-1, "abc", 12.5, None, True, "+-5", "--5", "²"])
def test_register_rejects_bad_allotment(ledger: KantinLedger, allotment: object) -> None:
    with pytest.raises(LedgerValidationError):
        ledger.register("CARD1", "Alice", allotment)
    assert "CARD1" not in ledger.registry


def test_register_requires_identifier_and_name(ledger: KantinLedger) -> None:
    with pytest.raises(LedgerValidationError):
        ledger.register("  ", "Alice", 100)
    with pytest.raises(LedgerValidationError):
        ledger.register("CARD1", "", 100)


def test_lookup_unknown_card_raises(ledger: KantinLedger) -> None:
    with pytest.raises(CardNotFoundError):
        ledger.lookup("NOPE")


def test_lookup_does_not_apply_reset(ledger: KantinLedger, clock) -> None:
    ledger.register("CARD1", "Alice", 40000)
    ledger.settle("CARD1", 15000)
    clock.advance(days=1)

    card = ledger.lookup("CARD1")

    assert card.balance == 25000
    assert card.last_reset_date == date(2024, 6, 3)


def test_credit_adds_to_balance_and_keeps_allotment(ledger: KantinLedger) -> None:
    """Top-up of 10000 on a 25000 balance yields 35000."""

    ledger.register("CARD1", "Alice", 40000)
    ledger.settle("CARD1", 15000)

    outcome = ledger.credit("CARD1", 10000)

    assert outcome.balance == 35000
    assert ledger.lookup("CARD1").daily_allotment == 40000


def test_credit_applies_due_reset_first(ledger: KantinLedger, clock) -> None:
    ledger.register("CARD1", "Alice", 40000)
    ledger.settle("CARD1", 35000)
    clock.advance(days=1)

    outcome = ledger.credit("CARD1", 1000)

    assert outcome.balance == 41000
    assert ledger.lookup("CARD1").last_reset_date == date(2024, 6, 4)


@pytest.mark.parametrize("amount", [0, -5, "ten", "+-5", "²"])
def test_credit_rejects_non_positive_amounts(ledger: KantinLedger, amount: object) -> None:
    ledger.register("CARD1", "Alice", 40000)

    with pytest.raises(LedgerValidationError):
        ledger.credit("CARD1", amount)
    assert ledger.lookup("CARD1").balance == 40000


def test_credit_unknown_card(ledger: KantinLedger) -> None:
    with pytest.raises(CardNotFoundError):
        ledger.credit("NOPE", 100)


def test_delete_removes_card(ledger: KantinLedger, store: InMemoryCardStore) -> None:
    ledger.register("CARD1", "Alice", 40000)

    ledger.delete("CARD1")

    assert "CARD1" not in ledger.registry
    assert store.load() == []
    with pytest.raises(CardNotFoundError):
        ledger.delete("CARD1")


def test_list_preserves_registration_order_and_projects_reset(
    ledger: KantinLedger, clock
) -> None:
    ledger.register("B-CARD", "Bob", 20000)
    ledger.register("A-CARD", "Alice", 40000)
    ledger.settle("A-CARD", 15000)
    clock.advance(days=1)

    views = ledger.list_cards()

    assert [view.card_id for view in views] == ["B-CARD", "A-CARD"]
    assert views[1].balance == 40000
    assert views[1].needs_reset is True
    # projection only, the stored record is untouched
    assert ledger.lookup("A-CARD").balance == 25000


def test_wipe_removes_everything(ledger: KantinLedger, store: InMemoryCardStore) -> None:
    ledger.register("CARD1", "Alice", 40000)
    ledger.register("CARD2", "Bob", 20000)

    outcome = ledger.wipe()

    assert outcome.removed == 2
    assert ledger.list_cards() == []
    assert store.load() == []


def test_failed_save_is_reported_but_not_rolled_back(
    ledger: KantinLedger, store: InMemoryCardStore
) -> None:
    ledger.register("CARD1", "Alice", 40000)
    store.fail_saves = True

    outcome = ledger.credit("CARD1", 500)

    assert outcome.persisted is False
    assert ledger.lookup("CARD1").balance == 40500


def test_identifiers_are_normalised_at_every_entry_point(ledger: KantinLedger) -> None:
    """Surrounding whitespace never changes which card an identifier names."""

    ledger.register(" CARD1 ", "Alice", 40000)

    assert ledger.lookup("CARD1").card_id == "CARD1"
    assert " CARD1 " in ledger.registry
    assert ledger.credit(" CARD1", 500).card_id == "CARD1"
    assert ledger.lookup("CARD1 ").balance == 40500
    assert ledger.delete(" CARD1 ").card_id == "CARD1"
    assert "CARD1" not in ledger.registry


def test_blank_identifier_is_a_validation_error(ledger: KantinLedger) -> None:
    with pytest.raises(LedgerValidationError):
        ledger.lookup("   ")
    with pytest.raises(LedgerValidationError):
        ledger.delete("")
    with pytest.raises(LedgerValidationError):
        ledger.credit(" ", 100)
