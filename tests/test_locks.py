"""Tests for per-user locks."""

import gc
from uuid import uuid4

from budget_tracker.services.locks import UserLocks


def test_same_user_shares_a_lock() -> None:
    locks = UserLocks()
    user_id = uuid4()

    lock = locks.for_user(user_id)

    assert locks.for_user(user_id) is lock
    assert locks.for_user(uuid4()) is not lock
    with lock, locks.for_user(user_id):
        assert len(locks) >= 1


def test_released_locks_are_dropped() -> None:
    locks = UserLocks()
    for _ in range(50):
        with locks.for_user(uuid4()):
            pass

    gc.collect()

    assert len(locks) == 0
