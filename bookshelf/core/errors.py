"""
Service-level errors.

Every failure that leaves the service layer is a ServiceError tagged with an
ErrorKind. Callers branch on `exc.kind`, never on exception identity, so the
error survives being serialized into an HTTP body and read back elsewhere.
"""

from __future__ import annotations

import enum
from typing import Mapping


class ErrorKind(str, enum.Enum):
    NOT_FOUND = "not_found"
    VALIDATION_FAILED = "validation_failed"
    DUPLICATE = "duplicate"
    EXECUTION = "execution"


_DEFAULT_MESSAGES = {
    ErrorKind.NOT_FOUND: "the requested resource could not be found",
    ErrorKind.VALIDATION_FAILED: "validation failed",
    ErrorKind.DUPLICATE: "a record with these details already exists",
    ErrorKind.EXECUTION: "the server encountered a problem and could not process your request",
}


class ServiceError(Exception):
    """
    - kind: canonical ErrorKind used by callers and the HTTP layer
    - message: human-friendly message (safe to show to clients)
    - errors: optional field -> message map for validation failures
    """

    # Map kind -> HTTP status.
    KIND_TO_STATUS = {
        ErrorKind.NOT_FOUND: 404,
        ErrorKind.VALIDATION_FAILED: 422,
        ErrorKind.DUPLICATE: 409,
        ErrorKind.EXECUTION: 500,
    }

    def __init__(
        self,
        kind: ErrorKind,
        message: str | None = None,
        *,
        errors: Mapping[str, str] | None = None,
    ):
        self.kind = kind
        self.message = message or _DEFAULT_MESSAGES[kind]
        self.errors = dict(errors) if errors else None
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.errors:
            fields = ", ".join(f"{k}: {v}" for k, v in self.errors.items())
            return f"{self.message} ({fields})"
        return self.message

    @classmethod
    def not_found(cls) -> "ServiceError":
        return cls(ErrorKind.NOT_FOUND)

    @classmethod
    def validation_failed(cls, errors: Mapping[str, str]) -> "ServiceError":
        return cls(ErrorKind.VALIDATION_FAILED, errors=errors)

    @classmethod
    def execution(cls) -> "ServiceError":
        return cls(ErrorKind.EXECUTION)

    def to_payload(self) -> dict:
        """
        JSON-serializable body for HTTP responses:
            {"error": {"page_size": "must be a maximum of 100"}}   # validation
            {"error": "the requested resource could not be found"} # everything else
        Execution failures never carry internal detail.
        """
        if self.kind is ErrorKind.VALIDATION_FAILED and self.errors:
            return {"error": dict(self.errors)}
        if self.kind is ErrorKind.EXECUTION:
            return {"error": _DEFAULT_MESSAGES[ErrorKind.EXECUTION]}
        return {"error": self.message}

    def http_status(self) -> int:
        return self.KIND_TO_STATUS.get(self.kind, 500)


__all__ = ["ErrorKind", "ServiceError"]
