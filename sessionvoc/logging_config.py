"""
Logging configuration for the sessionvoc logger hierarchy.

The library never configures logging on import; applications call
configure_logging() or merge get_logging_config() into their own setup.
"""

import logging
import logging.config
import re
from typing import Any, Dict

_PASSWORD_PATTERN = re.compile(r'("password"\s*:\s*)"(?:[^"\\]|\\.)*"')


class CredentialFilter(logging.Filter):
    """Filter that masks password values in logged request bodies."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = _PASSWORD_PATTERN.sub(r'\1"***"', message)
        if masked != message:
            record.msg = masked
            record.args = None
        return True  # Never drop records, only rewrite them


def get_logging_config(level: str = "INFO") -> Dict[str, Any]:
    """Get logging configuration with credential masking."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "credential_filter": {
                "()": CredentialFilter
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
                "stream": "ext://sys.stdout",
                "filters": ["credential_filter"]
            }
        },
        "loggers": {
            "sessionvoc": {
                "handlers": ["default"],
                "level": level.upper(),
                "propagate": False
            },
            "httpx": {
                "handlers": ["default"],
                "level": "WARNING",
                "propagate": False
            }
        }
    }


def configure_logging(level: str = "INFO") -> None:
    """Apply get_logging_config(level); DEBUG shows every request and status code."""
    logging.config.dictConfig(get_logging_config(level))
