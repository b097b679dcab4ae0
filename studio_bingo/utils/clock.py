"""Time helpers. All timestamps are UTC."""

from __future__ import annotations

import time
from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def epoch_seconds() -> int:
    return int(time.time())


def isoformat_utc(value: datetime) -> str:
    """ISO-8601 with a ``Z`` suffix. Naive values (SQLite) are taken as UTC."""

    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def day_key(epoch: int) -> str:
    """UTC calendar day as YYYYMMDD."""

    return datetime.fromtimestamp(epoch, tz=timezone.utc).strftime("%Y%m%d")
