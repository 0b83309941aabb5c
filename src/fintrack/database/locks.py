"""Per-account write locks."""

import threading
from contextlib import contextmanager, ExitStack
from typing import Iterator


class AccountLocks:
    """Registry of re-entrant locks, one per account id.

    ``hold`` always acquires in ascending id order, so two threads locking
    the same pair of accounts in opposite argument order cannot deadlock.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[int, threading.RLock] = {}

    def _lock_for(self, account_id: int) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(account_id)
            if lock is None:
                lock = threading.RLock()
                self._locks[account_id] = lock
            return lock

    @contextmanager
    def hold(self, *account_ids: int) -> Iterator[list[int]]:
        """Hold the locks of ``account_ids`` for the duration of the block.

        Yields the sorted, de-duplicated ids that were locked.
        """
        ordered = sorted({account_id for account_id in account_ids if account_id is not None})
        with ExitStack() as stack:
            for account_id in ordered:
                stack.enter_context(self._lock_for(account_id))
            yield ordered
