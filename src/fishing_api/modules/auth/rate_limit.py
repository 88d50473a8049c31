from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from math import ceil
from threading import Lock
from time import monotonic

from fishing_api.common.errors import TooManyAttempts
from fishing_api.config.settings import Settings


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    retry_after_s: int


@dataclass(frozen=True)
class RateLimitPolicy:
    max_requests: int
    window_s: int


ALLOW = RateLimitDecision(allowed=True, retry_after_s=0)


class SlidingWindowLimiter:
    """Per-key sliding window kept in process memory."""

    def __init__(self) -> None:
        self._hits: dict[str, deque[float]] = {}
        self._lock = Lock()

    def hit(self, key: str, policy: RateLimitPolicy) -> RateLimitDecision:
        now = monotonic()
        threshold = now - policy.window_s
        with self._lock:
            bucket = self._hits.setdefault(key, deque())
            while bucket and bucket[0] <= threshold:
                bucket.popleft()
            if len(bucket) >= policy.max_requests:
                retry_after = max(1, ceil(bucket[0] + policy.window_s - now))
                return RateLimitDecision(allowed=False, retry_after_s=retry_after)
            bucket.append(now)
            return ALLOW

    def clear(self) -> None:
        with self._lock:
            self._hits.clear()


class AuthRateLimiter:
    def __init__(
        self,
        *,
        enabled: bool,
        login_max_requests: int,
        login_window_s: int,
        refresh_max_requests: int,
        refresh_window_s: int,
    ) -> None:
        self.enabled = enabled
        self.policies = {
            "login": RateLimitPolicy(login_max_requests, login_window_s),
            "refresh": RateLimitPolicy(refresh_max_requests, refresh_window_s),
        }
        self.backend = SlidingWindowLimiter()

    @classmethod
    def from_settings(cls, settings: Settings) -> AuthRateLimiter:
        return cls(
            enabled=settings.auth_rate_limit_enabled,
            login_max_requests=settings.auth_login_rate_limit_requests,
            login_window_s=settings.auth_login_rate_limit_window_s,
            refresh_max_requests=settings.auth_refresh_rate_limit_requests,
            refresh_window_s=settings.auth_refresh_rate_limit_window_s,
        )

    def check(self, action: str, *, client_ip: str, principal: str) -> RateLimitDecision:
        if not self.enabled:
            return ALLOW
        policy = self.policies[action]
        key = f"auth:{action}:{client_ip}:{principal.lower().strip()}"
        return self.backend.hit(key, policy)

    def enforce(self, action: str, *, client_ip: str, principal: str) -> None:
        decision = self.check(action, client_ip=client_ip, principal=principal)
        if not decision.allowed:
            raise TooManyAttempts(action, decision.retry_after_s)
