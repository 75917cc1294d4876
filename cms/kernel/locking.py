"""
Keyed mutual exclusion for file-backed state.
"""

import threading
from contextlib import contextmanager
from typing import Dict, Iterator


class KeyedLock:
    """
    Registry of re-entrant locks, one per key.

    Keys are absolute paths: a document path serializes archive+overwrite
    for that document, a directory path serializes name allocation in it.
    Re-entrant so an update can hold the document lock while the revision
    engine takes it again for the archive step.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.RLock] = {}

    def _lock_for(self, key: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.RLock()
            return lock

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        lock = self._lock_for(key)
        with lock:
            yield


# Process-wide registries; keys are absolute paths so separate storage roots never contend
document_locks = KeyedLock()
credential_locks = KeyedLock()
