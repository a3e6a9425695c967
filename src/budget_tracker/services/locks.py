"""Per-user serialization of engine mutations."""

import threading
import weakref
from dataclasses import dataclass, field
from uuid import UUID


@dataclass
class UserLocks:
    """Hands out one re-entrant lock per user id.

    Locks are held weakly and dropped once no caller references them.
    """

    _locks: weakref.WeakValueDictionary = field(
        default_factory=weakref.WeakValueDictionary
    )
    _guard: threading.Lock = field(default_factory=threading.Lock)

    def __len__(self) -> int:
        return len(self._locks)

    def for_user(self, user_id: UUID) -> threading.RLock:
        """Return the lock serializing writes for ``user_id``."""
        with self._guard:
            lock = self._locks.get(user_id)
            if lock is None:
                lock = threading.RLock()
                self._locks[user_id] = lock
            return lock
