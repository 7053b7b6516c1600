"""
Per-student lock registry.

All mutating scoring work for one student runs under that student's
re-entrant lock, so two requests for the same student in this process never
interleave. Different students proceed in parallel. Locks are dropped from
the registry once nobody references them.
"""
import threading
import weakref


class StudentLock:
    """Re-entrant lock usable as a context manager."""

    __slots__ = ('student_id', '_lock', '__weakref__')

    def __init__(self, student_id):
        self.student_id = student_id
        self._lock = threading.RLock()

    def __enter__(self):
        self._lock.acquire()
        return self

    def __exit__(self, exc_type, exc, tb):
        self._lock.release()
        return False


class StudentLockRegistry:
    """Hands out one shared StudentLock per student id."""

    _lock = threading.Lock()

    def __init__(self):
        self._instances = weakref.WeakValueDictionary()

    def lock_for(self, student_id) -> StudentLock:
        with self._lock:
            lock = self._instances.get(student_id)
            if lock is None:
                lock = StudentLock(student_id)
                self._instances[student_id] = lock
            return lock

    def __len__(self):
        return len(self._instances)


student_locks = StudentLockRegistry()
