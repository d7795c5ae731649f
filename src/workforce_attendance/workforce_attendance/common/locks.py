from __future__ import annotations

from contextlib import contextmanager
from threading import Lock
from typing import Hashable, Iterator


class _Entry:
    __slots__ = ("lock", "users")

    def __init__(self):
        self.lock = Lock()
        self.users = 0


class KeyedLocks:
    """One mutex per key, created lazily under a guard lock.

    Different keys never contend with each other. An entry lives only while
    someone holds or waits on its key.
    """

    def __init__(self):
        self._guard = Lock()
        self._locks: dict[Hashable, _Entry] = {}

    def _acquire_entry(self, key: Hashable) -> _Entry:
        with self._guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = self._locks[key] = _Entry()
            entry.users += 1
            return entry

    def _release_entry(self, key: Hashable, entry: _Entry) -> None:
        with self._guard:
            entry.users -= 1
            if entry.users == 0:
                del self._locks[key]

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        entry = self._acquire_entry(key)
        try:
            with entry.lock:
                yield
        finally:
            self._release_entry(key, entry)

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
