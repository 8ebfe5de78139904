import threading
from contextlib import contextmanager


class ReadWriteLock:
    """Writer-preferring reader/writer lock.

    Any number of readers may hold the lock at once; a writer holds it
    exclusively. Once a writer is waiting, new readers queue behind it so
    writers cannot starve.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self, timeout: float | None = None) -> bool:
        with self._cond:
            if not self._cond.wait_for(self._can_read, timeout=timeout):
                return False
            self._readers += 1
            return True

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self, timeout: float | None = None) -> bool:
        with self._cond:
            self._writers_waiting += 1
            try:
                acquired = self._cond.wait_for(self._can_write, timeout=timeout)
            finally:
                self._writers_waiting -= 1
            if acquired:
                self._writer = True
            else:
                # Readers blocked on this writer may proceed now.
                self._cond.notify_all()
            return acquired

    def release_write(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read_locked(self, timeout: float | None = None):
        if not self.acquire_read(timeout):
            raise TimeoutError("Timed out waiting for read lock")
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self, timeout: float | None = None):
        if not self.acquire_write(timeout):
            raise TimeoutError("Timed out waiting for write lock")
        try:
            yield
        finally:
            self.release_write()

    def _can_read(self) -> bool:
        return not self._writer and self._writers_waiting == 0

    def _can_write(self) -> bool:
        return not self._writer and self._readers == 0
