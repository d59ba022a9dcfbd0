import threading


class SequenceCounter:
    """Monotonic, thread-safe sequence source for minted flow tags."""

    def __init__(self, start: int = 0):
        self._value = start
        self._lock = threading.Lock()

    @property
    def current(self) -> int:
        return self._value

    def next(self) -> int:
        with self._lock:
            self._value += 1
            return self._value
