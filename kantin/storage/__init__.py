"""Mini README: Durable stores for the card registry.

``base`` defines the ``CardStore`` interface, ``json_store`` the on-disk
implementation used in production, and ``memory_store`` a list-backed
variant for tests and throwaway sessions.
"""

from .base import CardStore
from .json_store import JsonFileStore, record_from_json, record_to_json
from .memory_store import InMemoryCardStore

__all__ = [
    "CardStore",
    "InMemoryCardStore",
    "JsonFileStore",
    "record_from_json",
    "record_to_json",
]
