from __future__ import annotations

import logging
import logging.config
from typing import Any

_STANDARD_ATTRS = set(logging.LogRecord("", 0, "", 0, "", None, None).__dict__) | {"message", "asctime"}


class ExtraFormatter(logging.Formatter):
    """Appends the record's `extra` fields as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        extras = {k: v for k, v in record.__dict__.items() if k not in _STANDARD_ATTRS}
        if not extras:
            return base
        pairs = " ".join(f"{k}={v!r}" for k, v in sorted(extras.items()))
        return f"{base} {pairs}"


def make_dict_config(level: str = "INFO") -> dict[str, Any]:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "()": ExtraFormatter,
                "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stderr",
            },
        },
        "loggers": {
            "bookshelf": {"level": level.upper(), "handlers": ["console"], "propagate": False},
            "uvicorn.access": {"level": "WARNING"},
        },
        "root": {"level": "WARNING", "handlers": ["console"]},
    }


def setup_logging(level: str = "INFO") -> None:
    logging.config.dictConfig(make_dict_config(level))
