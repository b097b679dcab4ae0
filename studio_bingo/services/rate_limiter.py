"""Fixed-window rate limiting backed by the ``ratelimits`` table.

Each rule owns one counter per key. A request passes only if every rule
configured for its operation passes; the first rejection aborts and earlier
hits are kept.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from studio_bingo.errors import RateLimitedError
from studio_bingo.repositories.rate_limit_repository import RateLimitRepository
from studio_bingo.utils.clock import day_key, epoch_seconds

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitRule:
    """``limit`` hits per ``window_seconds`` for keys built from ``prefix``.

    ``per_day`` appends the UTC day so the counter also rolls over at midnight.
    """

    prefix: str
    limit: int
    window_seconds: int
    per_day: bool = False

    @classmethod
    def parse(cls, prefix: str, rate: str, per_day: bool = False) -> "RateLimitRule":
        """Build a rule from ``"<limit>/<window seconds>"``."""

        try:
            limit_raw, window_raw = str(rate).split("/", 1)
            limit, window = int(limit_raw), int(window_raw)
        except ValueError as exc:
            raise ValueError(f"Invalid rate limit {rate!r} for {prefix}, expected '<limit>/<seconds>'") from exc
        if limit <= 0 or window <= 0:
            raise ValueError(f"Invalid rate limit {rate!r} for {prefix}, values must be positive")
        return cls(prefix=prefix, limit=limit, window_seconds=window, per_day=per_day)

    def key_for(self, identity: str, now: int) -> str:
        key = f"{self.prefix}:{identity}"
        if self.per_day:
            key = f"{key}:{day_key(now)}"
        return key


def submit_rules(config: Mapping[str, Any]) -> list[tuple[RateLimitRule, str]]:
    """Rules for submit, paired with the identity kind they key on."""

    return [
        (RateLimitRule.parse("submit:ip", config.get("RATE_LIMIT_SUBMIT_IP", "20/60")), "ip"),
        (RateLimitRule.parse("submit:dev", config.get("RATE_LIMIT_SUBMIT_DEVICE", "10/60")), "device"),
    ]


def scan_rules(config: Mapping[str, Any]) -> list[tuple[RateLimitRule, str]]:
    return [
        (RateLimitRule.parse("scan:ip", config.get("RATE_LIMIT_SCAN_IP", "6/60")), "ip"),
        (RateLimitRule.parse("scan:dev", config.get("RATE_LIMIT_SCAN_DEVICE", "3/60")), "device"),
        (
            RateLimitRule.parse("scan:devday", config.get("RATE_LIMIT_SCAN_DEVICE_DAY", "30/86400"), per_day=True),
            "device",
        ),
    ]


def define_card_rules(config: Mapping[str, Any]) -> list[tuple[RateLimitRule, str]]:
    return [(RateLimitRule.parse("define:ip", config.get("RATE_LIMIT_DEFINE_IP", "5/60")), "ip")]


class RateLimiter:
    """Counts hits per key and rejects once a window is full."""

    def __init__(
        self,
        repository: RateLimitRepository | None = None,
        clock: Callable[[], int] = epoch_seconds,
    ) -> None:
        self._repo = repository or RateLimitRepository()
        self._clock = clock

    def check_and_consume(self, session: Session, key: str, window_seconds: int, limit: int) -> int:
        """Record one hit for ``key``; return the count in the current window.

        Raises RateLimitedError when the window already holds ``limit`` hits.
        The hit is committed right away so that a later failure of the same
        request does not give it back.
        """

        now = int(self._clock())
        count = self._repo.consume(session, key, now=now, window_seconds=window_seconds, limit=limit)
        if count is None:
            reset_at = self._repo.reset_at(session, key)
            session.commit()
            retry_after = max(0, int(reset_at) - now) if reset_at is not None else window_seconds
            logger.info("Rate limited key=%s limit=%s window=%ss", key, limit, window_seconds)
            raise RateLimitedError(key, retry_after=retry_after)

        session.commit()
        return int(count)

    def enforce(self, session: Session, rules: Iterable[tuple[RateLimitRule, str]], identities: Mapping[str, str]) -> None:
        """Apply every rule in order; ``identities`` maps identity kind to value."""

        for rule, kind in rules:
            now = int(self._clock())
            key = rule.key_for(identities[kind], now)
            self.check_and_consume(session, key, rule.window_seconds, rule.limit)

    def purge_expired(self, session: Session) -> int:
        removed = self._repo.purge_expired(session, now=int(self._clock()))
        session.commit()
        return removed
