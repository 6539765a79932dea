"""
Per-user serialization for score and achievement updates.

Score credit and achievement awarding are read-modify-write sequences on the
same user row; they must not interleave for one user.
"""
import threading
from contextlib import contextmanager
from typing import Dict, Iterator

_registry_lock = threading.Lock()
_user_locks: Dict[int, threading.RLock] = {}


@contextmanager
def user_lock(user_id: int) -> Iterator[None]:
    """Hold the lock for ``user_id``. Re-entrant within one thread."""
    with _registry_lock:
        lock = _user_locks.get(user_id)
        if lock is None:
            lock = threading.RLock()
            _user_locks[user_id] = lock
    with lock:
        yield
