"""Mini README: Core package initializer for the Kantin card ledger.

The package tracks prepaid canteen cards, resets their balances once per
day, and settles payments triggered by a card reader tap. Sub-packages:

    * ledger - card records, reset policy, pending slot, payments.
    * storage - durable card stores (JSON file and in-memory).
    * interface - FastAPI application exposing the ledger over HTTP.
"""

from .logging_utils import get_logger

__all__ = ["get_logger"]
