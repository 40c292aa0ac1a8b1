import threading
from contextlib import contextmanager


class DateLockRegistry:
    """One mutex per calendar date, so admission checks and writes on
    the same date run one at a time within the process.

    A date's lock only lives while some caller holds or waits on it.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks = {}  # date -> [lock, holders and waiters]

    def __len__(self):
        with self._guard:
            return len(self._locks)

    def is_held(self, day) -> bool:
        with self._guard:
            entry = self._locks.get(day)
            return entry is not None and entry[0].locked()

    def _checkout(self, days):
        with self._guard:
            entries = []
            for day in days:
                entry = self._locks.setdefault(day, [threading.Lock(), 0])
                entry[1] += 1
                entries.append(entry)
            return entries

    def _checkin(self, days):
        with self._guard:
            for day in days:
                entry = self._locks[day]
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[day]

    @contextmanager
    def hold(self, *days):
        # Sorted so two callers locking the same pair never deadlock
        days = sorted(set(days))
        entries = self._checkout(days)
        acquired = []
        try:
            for lock, _ in entries:
                lock.acquire()
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()
            self._checkin(days)
