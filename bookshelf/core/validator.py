from __future__ import annotations

from typing import Iterable


class ValidationSet:
    """
    Collects field-level validation failures for a single request.

    Only the first failure per field is kept:
      v.check(page >= 1, "page", "must be greater than zero")
      v.check(page <= 10_000_000, "page", "must be a maximum of 10 million")
      v.valid -> False, v.errors == {"page": "..."}
    """

    def __init__(self) -> None:
        self.errors: dict[str, str] = {}

    @property
    def valid(self) -> bool:
        return not self.errors

    def add_error(self, field: str, message: str) -> None:
        if field not in self.errors:
            self.errors[field] = message

    def check(self, ok: bool, field: str, message: str) -> None:
        if not ok:
            self.add_error(field, message)

    def __repr__(self) -> str:
        return f"ValidationSet(errors={self.errors!r})"


def permitted_value(value: str, *permitted: str) -> bool:
    return value in permitted


def unique(items: Iterable[str]) -> bool:
    seen: set[str] = set()
    for item in items:
        if item in seen:
            return False
        seen.add(item)
    return True
