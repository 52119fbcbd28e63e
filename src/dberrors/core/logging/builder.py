# src/dberrors/core/logging/builder.py
"""
Logging builder: create and apply a dictConfig logging configuration.

 - make_dict_config(settings) builds the mapping (formatters, filters, handlers, loggers)
 - setup_logging(settings) creates LOG_DIR when logging to files and applies it

Relevant settings: LOG_LEVEL, LOG_FORMAT, LOG_TO_STDOUT, LOG_DIR, LOG_MAX_BYTES,
LOG_BACKUP_COUNT, ENABLE_SQL_LOGGING, ENV.
"""

from __future__ import annotations

from pathlib import Path
import logging
import logging.config
from dberrors.utils.logging import get_project_name

from .formatters import JsonFormatter, ColorFormatter
from .filters import ExecutionIdFilter, RedactFilter
from .handlers import (
    get_console_handler,
    get_file_handler,
    get_error_file_handler,
    get_error_console_handler,
)

# Settings type (avoid calling get_settings() here to prevent import-time side effects)
from dberrors.config.settings import Settings


def make_dict_config(settings: Settings) -> dict:
    """
    Build the dictConfig mapping using the provided settings.

    Handlers: "console" always, plus "file" and "error_file" when LOG_TO_STDOUT
    is off and LOG_DIR is set. Production deployments that stay on the console
    get "error_console" (JSON, ERROR and above) instead.
    """
    formatters = {
        "standard": {
            # use ColorFormatter only in development
            "()": ColorFormatter if settings.ENV == "development" else logging.Formatter,
            "format": "%(asctime)s | %(levelname)s | %(name)s | %(execution_id)s | %(message)s",
        },
        "json": {
            "()": JsonFormatter,
            "env": settings.ENV,
            "service": get_project_name(),
        },
    }

    filters = {
        "execution_id": {"()": ExecutionIdFilter},
        "redact": {"()": RedactFilter},
    }

    handlers: dict[str, dict] = {"console": get_console_handler(settings)}

    if (not settings.LOG_TO_STDOUT) and (settings.LOG_DIR):
        handlers["file"] = get_file_handler(settings)
        handlers["error_file"] = get_error_file_handler(settings)
    elif settings.ENV == "production":
        handlers["error_console"] = get_error_console_handler(settings)

    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "filters": filters,
        "handlers": handlers,
        "loggers": {
            "": {
                "handlers": list(handlers.keys()),
                "level": settings.LOG_LEVEL,
                "propagate": True,
            },
            # Be cautious with SQL logging (statements may contain sensitive data)
            "sqlalchemy.engine": {
                "level": "DEBUG" if settings.ENABLE_SQL_LOGGING else "WARNING",
                "propagate": True,
            },
        },
    }

    return config


def setup_logging(settings: Settings) -> None:
    """
    Initialize logging from settings.

    Creates LOG_DIR when writing to files, applies the dictConfig, and adds an
    ExecutionIdFilter to the root logger so `%(execution_id)s` is always safe.
    """
    if (not settings.LOG_TO_STDOUT) and (settings.LOG_DIR):
        Path(settings.LOG_DIR).mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(make_dict_config(settings))

    logging.getLogger().addFilter(ExecutionIdFilter())
