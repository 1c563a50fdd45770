import threading
from contextlib import contextmanager


class KeyedLock:
    """A mutex per key.

    Callers holding the same key run one at a time; distinct keys never block
    each other. Entries are dropped once nobody holds or waits on them.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._entries = {}  # key -> [lock, holders]

    @contextmanager
    def hold(self, key):
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = self._entries[key] = [threading.Lock(), 0]
            entry[1] += 1

        entry[0].acquire()
        try:
            yield
        finally:
            entry[0].release()
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._entries[key]

    def active_keys(self):
        with self._guard:
            return list(self._entries)
