"""Mini README: Per-key mutual exclusion for card mutations.

``KeyedLocks`` hands out one lock per card identifier so requests against
different cards proceed independently while requests against the same card
serialise. Locks are reference counted and dropped once no holder or waiter
remains, keeping the table bounded by the number of in-flight requests.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Dict, Iterator


class KeyedLocks:
    """Lazily created locks keyed by string."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.Lock] = {}
        self._users: Dict[str, int] = {}

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        """Context manager acquiring the lock for ``key``."""

        with self._guard:
            lock = self._locks.setdefault(key, threading.Lock())
            self._users[key] = self._users.get(key, 0) + 1
        lock.acquire()
        try:
            yield
        finally:
            lock.release()
            with self._guard:
                self._users[key] -= 1
                if self._users[key] == 0:
                    del self._users[key]
                    del self._locks[key]
