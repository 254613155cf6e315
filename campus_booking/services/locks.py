"""Per-boardroom mutual exclusion for the booking critical section."""
import threading
from contextlib import contextmanager

from campus_booking.errors import ResourceBusy


class ResourceLockRegistry:

    def __init__(self, timeout=5.0):
        self.timeout = timeout
        self._guard = threading.Lock()
        self._locks = {}

    def lock_for(self, resource_id):
        with self._guard:
            lock = self._locks.get(resource_id)
            if lock is None:
                lock = self._locks[resource_id] = threading.Lock()
            return lock

    @contextmanager
    def hold(self, resource_id):
        """Serialize work on one boardroom; other boardrooms are unaffected."""
        lock = self.lock_for(resource_id)
        if not lock.acquire(timeout=self.timeout):
            raise ResourceBusy(resource_id)
        try:
            yield
        finally:
            lock.release()
