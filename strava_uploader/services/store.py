import threading
from time import time

class AttemptStore:
    """
    In-memory PIN attempt records keyed by client address.

    Each record is ``{count, blocked_until}``; records are created on first
    use and live as long as the process. Callers hold ``lock`` across
    each read-modify-write.
    """
    def __init__(self, clock=time):
        self.clock = clock
        self._records = {}
        self.lock = threading.Lock()

    def now(self) -> float:
        return self.clock()

    def record(self, address):
        rec = self._records.get(address)
        if rec is None:
            rec = {'count': 0, 'blocked_until': None}
            self._records[address] = rec
        return rec

    def reset(self):
        with self.lock:
            self._records.clear()
