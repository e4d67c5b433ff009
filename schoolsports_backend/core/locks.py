# locks.py
# In-process lock table keyed by championship id.
# Generation, bracket and result operations on one championship run one at a time.

import threading
from contextlib import contextmanager

from schoolsports_backend.core.config import LOCK_TIMEOUT_SECONDS

_registry_guard = threading.Lock()
_championship_locks: dict[int, threading.Lock] = {}


class ChampionshipBusyError(Exception):
    """Raised when another operation holds the championship lock for too long."""

    def __init__(self, championship_id: int):
        super().__init__(f"Championship {championship_id} is busy with another operation.")
        self.championship_id = championship_id


def _lock_for(championship_id: int) -> threading.Lock:
    with _registry_guard:
        lock = _championship_locks.get(championship_id)
        if lock is None:
            lock = threading.Lock()
            _championship_locks[championship_id] = lock
        return lock


@contextmanager
def championship_lock(championship_id: int, timeout: float = None):
    """Hold the championship's lock for the duration of the block."""
    lock = _lock_for(championship_id)
    wait = LOCK_TIMEOUT_SECONDS if timeout is None else timeout
    if not lock.acquire(timeout=wait):
        raise ChampionshipBusyError(championship_id)
    try:
        yield
    finally:
        lock.release()


def forget_championship_lock(championship_id: int) -> None:
    """Drop the lock of a deleted championship unless it is currently held."""
    with _registry_guard:
        lock = _championship_locks.get(championship_id)
        if lock is not None and not lock.locked():
            del _championship_locks[championship_id]
