"""Helpers for reading optional query-string values into typed defaults."""
from __future__ import annotations

import re

from bookshelf.core.validator import ValidationSet

_INT_RE = re.compile(r"[+-]?[0-9]+")


def read_string(value: str | None, default: str) -> str:
    if not value:
        return default
    return value


def read_csv(value: str | None, default: list[str] | None = None) -> list[str]:
    if not value:
        return list(default or [])
    return [part.strip() for part in value.split(",") if part.strip()]


def read_int(value: str | None, key: str, default: int, v: ValidationSet) -> int:
    """
    Parse `value` as an int. On failure record "must be an integer value"
    under `key` and fall back to `default` so other checks still run.
    """
    if value is None or value == "":
        return default
    # int() alone would also take "1_000", padded or non-ASCII digits
    if not _INT_RE.fullmatch(value):
        v.add_error(key, "must be an integer value")
        return default
    return int(value)
