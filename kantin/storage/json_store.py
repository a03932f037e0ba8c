"""Mini README: JSON file store for card records.

Structure:
    * JsonFileStore - reads and writes the card list as a JSON array.
    * record_to_json / record_from_json - codec for a single card.

Writes go to a sibling temporary file that is then moved over the target,
so a crash mid-write leaves the previous snapshot intact. Loading also
understands the camelCase layout written by the earlier Node.js till server
(``uid``, ``name``, ``initialBalance``, ``lastResetDate`` as ``YYYYMMDD``) so
an existing ``cards.json`` can be adopted without conversion.
"""

from __future__ import annotations

import json
import os
import tempfile
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from ..ledger.models import CardRecord, LastTransaction
from ..logging_utils import get_logger
from .base import CardStore

LOGGER = get_logger(__name__)


def _parse_date(value: str) -> date:
    """Parse ISO dates as well as compact ``YYYYMMDD`` strings."""

    if len(value) == 8 and value.isdigit():
        return datetime.strptime(value, "%Y%m%d").date()
    return date.fromisoformat(value)


def _parse_timestamp(value: str) -> datetime:
    # JavaScript ISO strings end in "Z"
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


def _last_transaction_from_json(payload: Optional[Dict[str, Any]]) -> Optional[LastTransaction]:
    if not payload:
        return None
    return LastTransaction(
        amount=int(payload["amount"]),
        timestamp=_parse_timestamp(str(payload["timestamp"])),
    )


def record_to_json(card: CardRecord) -> Dict[str, Any]:
    """Serialise a card record into the store's JSON layout."""

    return card.as_dict()


def record_from_json(payload: Dict[str, Any]) -> CardRecord:
    """Build a card record from either the current or the legacy layout."""

    if "uid" in payload:
        registered = payload.get("registeredAt")
        return CardRecord(
            card_id=str(payload["uid"]),
            holder_name=str(payload["name"]),
            daily_allotment=int(payload["initialBalance"]),
            balance=int(payload["balance"]),
            last_reset_date=_parse_date(str(payload["lastResetDate"])),
            registered_at=_parse_timestamp(registered) if registered else datetime.now(),
            last_transaction=_last_transaction_from_json(payload.get("lastTransaction")),
        )
    return CardRecord(
        card_id=str(payload["card_id"]),
        holder_name=str(payload["holder_name"]),
        daily_allotment=int(payload["daily_allotment"]),
        balance=int(payload["balance"]),
        last_reset_date=_parse_date(str(payload["last_reset_date"])),
        registered_at=_parse_timestamp(str(payload["registered_at"])),
        last_transaction=_last_transaction_from_json(payload.get("last_transaction")),
    )


class JsonFileStore(CardStore):
    """Persist cards as a pretty-printed JSON array on disk."""

    store_name = "json"

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def describe(self) -> str:
        return str(self.path)

    def load(self) -> List[CardRecord]:
        """Return stored cards, or an empty list when the file does not exist."""

        if not self.path.exists():
            LOGGER.info("No card file at %s; starting with an empty registry", self.path)
            return []
        with self.path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
        if not isinstance(payload, list):
            raise ValueError(f"Card file {self.path} must contain a JSON array")
        cards = [record_from_json(entry) for entry in payload]
        LOGGER.info("Loaded %s cards from %s", len(cards), self.path)
        return cards

    def save(self, cards: Sequence[CardRecord]) -> None:
        """Atomically replace the card file with the given snapshot."""

        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = [record_to_json(card) for card in cards]
        descriptor, temp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent)
        )
        try:
            with os.fdopen(descriptor, "w", encoding="utf-8") as handle:
                json.dump(payload, handle, indent=2)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(temp_name, self.path)
        except BaseException:
            if os.path.exists(temp_name):
                os.unlink(temp_name)
            raise
        LOGGER.debug("Saved %s cards to %s", len(cards), self.path)
