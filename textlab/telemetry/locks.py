"""
Reader-writer lock for shared telemetry state.

Many threads may hold the shared (read) side at once; the exclusive (write)
side waits for readers to drain. Waiting writers block new readers, so a
steady stream of snapshot() calls cannot starve record().

Usage:
    lock = ReadWriteLock()

    with lock.read_locked():
        data = copy.deepcopy(state)

    with lock.write_locked():
        state.update(...)
"""

import threading
from contextlib import contextmanager


class ReadWriteLock:
    """Writer-preferring reader-writer lock built on threading.Condition."""

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer_active = False
        self._writers_waiting = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer_active or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            if self._readers == 0:
                raise RuntimeError("release_read() called without a matching acquire_read()")
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer_active or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer_active = True

    def release_write(self) -> None:
        with self._cond:
            if not self._writer_active:
                raise RuntimeError("release_write() called without a matching acquire_write()")
            self._writer_active = False
            self._cond.notify_all()

    @contextmanager
    def read_locked(self):
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self):
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()
