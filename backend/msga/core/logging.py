"""Logging configuration."""
from __future__ import annotations

import logging
import logging.config
from typing import Any

from .config import get_settings

REDACTED = "***REDACTED***"
SENSITIVE_FIELDS = frozenset(
    {"password", "oldPassword", "newPassword", "token", "authorization", "secret_key", "jwt_secret"}
)

# Attributes every LogRecord has; anything else was passed through ``extra``.
_RECORD_ATTRS = frozenset(logging.LogRecord("", 0, "", 0, "", None, None).__dict__) | {"message", "asctime"}


def redact(value: Any) -> Any:
    """Return ``value`` with sensitive mapping entries masked, recursively."""

    if isinstance(value, dict):
        return {
            key: REDACTED if key in SENSITIVE_FIELDS else redact(item)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return type(value)(redact(item) for item in value)
    return value


class RedactingFilter(logging.Filter):
    """Mask sensitive values passed to a logger through ``extra``."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in list(record.__dict__.items()):
            if key in _RECORD_ATTRS:
                continue
            record.__dict__[key] = REDACTED if key in SENSITIVE_FIELDS else redact(value)
        return True


def setup_logging(level: str | None = None) -> None:
    settings = get_settings()
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {"redact": {"()": RedactingFilter}},
            "formatters": {
                "default": {"format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s"},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                    "filters": ["redact"],
                },
            },
            "loggers": {
                "msga": {"handlers": ["console"], "level": (level or settings.log_level).upper()},
            },
        }
    )
