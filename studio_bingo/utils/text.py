"""Untrusted text normalization."""

from __future__ import annotations


def safe_text(value: object, max_len: int | None) -> str:
    """Trimmed string capped at ``max_len`` (``None``: uncapped); anything that is not a string is ''."""

    if not isinstance(value, str):
        return ""
    text = value.strip()
    return text if max_len is None else text[:max_len]
