import asyncio
import threading
import time
from collections import deque
from collections.abc import Callable


class RateLimiter:
    """
    Strict permit limiter for outbound calls.

    One permit is added every ``1 / requests_per_second`` seconds and at most
    ``capacity`` permits are ever held, so an idle period never banks more
    than ``capacity`` calls. Waiting for a permit is an ordinary await and is
    therefore cancelled together with the calling task.
    """

    def __init__(
        self,
        requests_per_second: float,
        capacity: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if requests_per_second <= 0:
            raise ValueError("requests_per_second must be positive")
        self.interval = 1.0 / requests_per_second
        self.capacity = capacity if capacity is not None else max(1, int(requests_per_second))
        if self.capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._clock = clock
        self._permits = self.capacity
        self._last_refill = clock()
        self._lock = asyncio.Lock()

    @property
    def available(self) -> int:
        self._refill()
        return self._permits

    def _refill(self) -> None:
        now = self._clock()
        ticks = int((now - self._last_refill) // self.interval)
        if ticks > 0:
            self._permits = min(self.capacity, self._permits + ticks)
            # stay on the fixed refill schedule
            self._last_refill += ticks * self.interval

    async def acquire(self) -> None:
        """Wait until a permit is available and take it."""
        async with self._lock:
            while True:
                self._refill()
                if self._permits > 0:
                    self._permits -= 1
                    return
                wait = self._last_refill + self.interval - self._clock()
                await asyncio.sleep(max(wait, 0.0))


class SlidingWindowLimiter:
    """
    Per-client inbound limiter: at most ``limit`` hits per client within any
    ``window`` seconds. Shared between request handlers, so it is lock guarded.
    """

    def __init__(self, limit: int, window: float = 60.0, clock: Callable[[], float] = time.monotonic):
        self.limit = limit
        self.window = window
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}
        self._lock = threading.Lock()

    def allow(self, client_id: str) -> bool:
        """Record a hit for ``client_id`` and report whether it is within the limit."""
        now = self._clock()
        cutoff = now - self.window
        with self._lock:
            hits = self._hits.setdefault(client_id, deque())
            while hits and hits[0] <= cutoff:
                hits.popleft()
            if len(hits) >= self.limit:
                return False
            hits.append(now)
            return True

    def retry_after(self, client_id: str) -> float:
        """Seconds until ``client_id`` gets a free slot again."""
        with self._lock:
            hits = self._hits.get(client_id)
            if not hits or len(hits) < self.limit:
                return 0.0
            return max(0.0, hits[0] + self.window - self._clock())

    def prune(self) -> None:
        """Forget clients with no hits inside the current window."""
        cutoff = self._clock() - self.window
        with self._lock:
            for client_id in [c for c, hits in self._hits.items() if not hits or hits[-1] <= cutoff]:
                del self._hits[client_id]
