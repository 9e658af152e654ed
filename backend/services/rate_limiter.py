"""Per-client sliding-window rate limiter shared by every /api endpoint.

Each client identity (normally the source IP) keeps the timestamps of its
admitted requests inside the trailing window. Identities are kept in
least-recently-admitted order so idle ones can be swept from the front
of the map, and the map never tracks more than ``max_identities`` keys.
"""

import logging
import math
import threading
import time
from collections import OrderedDict, deque
from typing import Callable

logger = logging.getLogger(__name__)


class SlidingWindowRateLimiter:
    """In-process rate limiter.

    Note: this is per-process. With several uvicorn workers each one
    enforces its own window.
    """

    def __init__(
        self,
        window_ms: int = 60_000,
        max_requests: int = 30,
        max_identities: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.window_s = window_ms / 1000
        self.max_requests = max_requests
        self.max_identities = max_identities
        self._clock = clock
        self._hits: OrderedDict[str, deque[float]] = OrderedDict()
        self._lock = threading.Lock()

    def admit(self, identity: str) -> bool:
        """Record and accept a request, or reject it without recording."""
        allowed, _ = self.check(identity)
        return allowed

    def check(self, identity: str) -> tuple[bool, int | None]:
        """Return (allowed, retry_after_seconds) for one request attempt."""
        now = self._clock()
        with self._lock:
            self._sweep(now)
            hits = self._hits.get(identity)
            if hits is None:
                hits = deque()
            else:
                self._prune(hits, now)

            if len(hits) >= self.max_requests:
                retry_after = max(1, math.ceil(hits[0] + self.window_s - now))
                return False, retry_after

            hits.append(now)
            self._hits[identity] = hits
            self._hits.move_to_end(identity)
            while len(self._hits) > self.max_identities:
                evicted, _ = self._hits.popitem(last=False)
                logger.debug("Evicted rate-limit window for %s", evicted)
            return True, None

    def _prune(self, hits: deque[float], now: float) -> None:
        while hits and now - hits[0] >= self.window_s:
            hits.popleft()

    def _sweep(self, now: float) -> None:
        # Front of the map holds the identities admitted least recently
        while self._hits:
            identity, hits = next(iter(self._hits.items()))
            if hits and now - hits[-1] < self.window_s:
                break
            del self._hits[identity]

    def __len__(self) -> int:
        return len(self._hits)
