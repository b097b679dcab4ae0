"""Custom marshmallow fields."""

from __future__ import annotations

from typing import Any

from marshmallow import fields

from studio_bingo.utils.clock import isoformat_utc
from studio_bingo.utils.text import safe_text


class SafeText(fields.Field):
    """Untrusted text: trimmed and capped, non-strings load as ''.

    Never fails, so emptiness checks stay with the service and its error codes.
    """

    def __init__(self, max_len: int | None, **kwargs: Any) -> None:
        kwargs.setdefault("load_default", "")
        kwargs.setdefault("allow_none", True)
        super().__init__(**kwargs)
        self.max_len = max_len

    def _deserialize(self, value: Any, attr: str | None, data: Any, **kwargs: Any) -> str:
        return safe_text(value, self.max_len)


class UtcDateTime(fields.Field):
    """Serialize datetimes as ISO-8601 UTC with a ``Z`` suffix."""

    def _serialize(self, value: Any, attr: str | None, obj: Any, **kwargs: Any) -> str | None:
        if value is None:
            return None
        return isoformat_utc(value)
