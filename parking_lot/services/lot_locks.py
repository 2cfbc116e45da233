# parking_lot/services/lot_locks.py
"""
Per-lot mutual exclusion for state-changing operations.
Allocate, unpark and maintenance toggles on the same lot never interleave;
different lots proceed in parallel. Built once per application and passed
to the services explicitly.
"""

import threading
from contextlib import contextmanager

from fastapi import Request


class LotLockRegistry:
    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[int, threading.Lock] = {}

    def lock_for(self, lot_id: int) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(lot_id)
            if lock is None:
                lock = self._locks[lot_id] = threading.Lock()
            return lock

    @contextmanager
    def hold(self, lot_id: int):
        """Hold the lot's lock for the duration of the block."""
        with self.lock_for(lot_id):
            yield


def get_lot_locks(request: Request) -> LotLockRegistry:
    """FastAPI dependency — the application's shared lock registry."""
    return request.app.state.lot_locks
