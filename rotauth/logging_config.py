"""
Logging configuration that keeps credential material out of log output
"""

import logging
import logging.config
import re
from typing import Any, Dict

# name=value pairs and bearer tokens whose values must never be logged
_SECRET_PATTERNS = [
    re.compile(r"(?P<name>\b(?:ct0|auth_token|guest_token|csrf_token)[\"']?\s*[=:]\s*[\"']?)[^\s;,\"']+"),
    re.compile(r"(?P<name>\bBearer\s+)[^\s;,\"']+", re.IGNORECASE),
]

REDACTED = "***"


def redact(text: str) -> str:
    """Mask credential values in a piece of text."""
    for pattern in _SECRET_PATTERNS:
        text = pattern.sub(lambda m: m.group("name") + REDACTED, text)
    return text


class SecretRedactionFilter(logging.Filter):
    """Filter that masks cookie and token values in log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Rewrite the record's message with secrets masked. Never drops records."""
        message = record.getMessage()
        redacted = redact(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def get_logging_config(level: str = "INFO") -> Dict[str, Any]:
    """Get logging configuration with secret redaction on every handler."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "secret_filter": {
                "()": SecretRedactionFilter
            }
        },
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            }
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stderr",
                "filters": ["secret_filter"]
            }
        },
        "loggers": {
            "rotauth": {
                "handlers": ["default"],
                "level": level,
                "propagate": False
            },
            "httpx": {
                "handlers": ["default"],
                "level": "WARNING",
                "propagate": False
            }
        },
        "root": {
            "level": level,
            "handlers": ["default"]
        }
    }


def configure_logging(level: str = "INFO") -> None:
    """Apply the logging configuration."""
    logging.config.dictConfig(get_logging_config(level))
