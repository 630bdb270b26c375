import threading
from collections import deque


class ClosableQueue:
    """
    unbounded thread-safe FIFO shared between two pipeline stages.
    None is reserved to signal "no item", never push it.
    """
    def __init__(self):
        self.buffer = deque()
        self.lock = threading.Lock()
        self.not_empty = threading.Condition(self.lock)
        self._closed = False

    def push(self, item):
        with self.lock:
            self.buffer.append(item)
            self.not_empty.notify()

    def try_pop(self):
        with self.lock:
            if self.buffer:
                return self.buffer.popleft()
            return None

    def blocking_pop(self):
        """
        waits for an item and returns it,
        returns None only once the queue is closed and drained
        """
        with self.not_empty:
            while not self.buffer and not self._closed:
                self.not_empty.wait()
            if self.buffer:
                return self.buffer.popleft()
            return None

    def close(self):
        with self.lock:
            self._closed = True
            self.not_empty.notify_all()

    def is_empty(self):
        with self.lock:
            return len(self.buffer) == 0

    def get_length(self):
        with self.lock:
            return len(self.buffer)
