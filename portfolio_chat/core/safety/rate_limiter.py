"""
Sliding-log rate limiter.

Each client keeps one timestamp log per window. A request is admitted only
if every window still has room, and only admitted requests are recorded.
Client logs live in an LRU bounded by max_tracked_clients.

Dependencies: None (stdlib collections)
System role: Per-client request admission
"""

import logging
import math
import threading
import time
from collections import OrderedDict, deque
from collections.abc import Callable
from dataclasses import dataclass

from portfolio_chat.configs.safety import SafetySettings
from portfolio_chat.core.exceptions import RateLimitedError
from portfolio_chat.core.safety.messages import FallbackType, get_fallback_response
from portfolio_chat.models.safety import RateLimitResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateWindow:
    name: str
    limit: int
    seconds: float


class SlidingWindowRateLimiter:
    """Per-client sliding window limiter over several windows."""

    def __init__(
        self,
        windows: list[RateWindow],
        max_tracked_clients: int = 10000,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Args:
            windows: Windows checked on every request
            max_tracked_clients: Client logs kept before LRU eviction
            clock: Epoch-seconds clock
        """
        if not windows:
            raise ValueError("At least one rate window is required")
        self._windows = windows
        self._max_clients = max_tracked_clients
        self._clock = clock
        self._clients: OrderedDict[str, dict[str, deque[float]]] = OrderedDict()
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: SafetySettings, **kwargs) -> "SlidingWindowRateLimiter":
        return cls(
            windows=[
                RateWindow("minute", settings.requests_per_minute, 60.0),
                RateWindow("hour", settings.requests_per_hour, 3600.0),
            ],
            max_tracked_clients=settings.max_tracked_clients,
            **kwargs,
        )

    @property
    def tracked_clients(self) -> int:
        return len(self._clients)

    def _logs_for(self, client_id: str) -> dict[str, deque[float]]:
        logs = self._clients.get(client_id)
        if logs is None:
            while len(self._clients) >= self._max_clients:
                self._clients.popitem(last=False)
            logs = {window.name: deque() for window in self._windows}
            self._clients[client_id] = logs
        else:
            self._clients.move_to_end(client_id)
        return logs

    def check(self, client_id: str) -> RateLimitResult:
        """
        Check and, if admitted, record one request.

        Args:
            client_id: Client key (usually the caller's IP)

        Returns:
            RateLimitResult: allowed=False with retry_after when any window is full
        """
        with self._lock:
            now = self._clock()
            logs = self._logs_for(client_id)
            for window in self._windows:
                log = logs[window.name]
                while log and log[0] <= now - window.seconds:
                    log.popleft()

            violated = [w for w in self._windows if len(logs[w.name]) >= w.limit]
            if violated:
                waits = {
                    w.name: max(1, math.ceil(logs[w.name][0] + w.seconds - now)) if logs[w.name] else 1
                    for w in violated
                }
                worst = max(violated, key=lambda w: waits[w.name])
                return RateLimitResult(
                    allowed=False,
                    limit=worst.limit,
                    remaining=0,
                    reset_at=now + waits[worst.name],
                    retry_after=waits[worst.name],
                )

            for window in self._windows:
                logs[window.name].append(now)

            tightest = min(self._windows, key=lambda w: w.limit - len(logs[w.name]))
            log = logs[tightest.name]
            return RateLimitResult(
                allowed=True,
                limit=tightest.limit,
                remaining=tightest.limit - len(log),
                reset_at=log[0] + tightest.seconds,
            )

    def enforce(self, client_id: str) -> RateLimitResult:
        """
        Like check(), but raise when the request is rejected.

        Raises:
            RateLimitedError: Carrying retry_after and the X-RateLimit-* headers
        """
        result = self.check(client_id)
        if not result.allowed:
            logger.warning(
                f"{__name__}:enforce - Rate limited client",
                extra={"client_id": client_id, "retry_after": result.retry_after},
            )
            raise RateLimitedError(
                get_fallback_response(FallbackType.RATE_LIMITED),
                retry_after=result.retry_after or 1,
                headers=result.headers(),
            )
        return result
