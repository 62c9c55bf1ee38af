import threading
import time


class FixedWindowRateLimiter:
    """Counts requests per key inside fixed windows of ``window_s`` seconds."""

    def __init__(self, max_requests: int, window_s: float = 3600.0):
        self.max_requests = max_requests
        self.window_s = window_s
        self._lock = threading.Lock()
        self._windows = {}

    def allow(self, key: str, now: float = None) -> bool:
        now = time.monotonic() if now is None else now
        with self._lock:
            start, count = self._windows.get(key, (now, 0))
            if now - start >= self.window_s:
                start, count = now, 0
            if count >= self.max_requests:
                self._windows[key] = (start, count)
                return False
            self._windows[key] = (start, count + 1)
            # Drop expired windows so idle clients do not accumulate.
            if len(self._windows) > 10_000:
                self._windows = {
                    k: v for k, v in self._windows.items() if now - v[0] < self.window_s
                }
            return True
