# src/dberrors/core/logging/filters.py
"""
Logging filters

Execution ID filter and helpers for logging.

Every `StatementExecutor.run()` call sets a short execution id in a context
variable. `ExecutionIdFilter` copies it onto each LogRecord, so all the lines
written while one statement runs (start, driver adaptation, classification,
report) can be correlated, also when several threads execute statements at the
same time.

Formatters can always reference `%(execution_id)s`: records logged outside an
execution get the sentinel "-".
"""

import logging
from logging import LogRecord
import contextvars

# contextvar for the current execution id (set by StatementExecutor.run).
_execution_id_ctx: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "execution_id", default=None
)


def set_execution_id(execution_id: str | None):
    """
    Set the execution id in the current context and return the token to allow reset.
    """
    return _execution_id_ctx.set(execution_id)


def reset_execution_id(token):
    """
    Reset the contextvar to the previously saved token returned by set_execution_id().
    """
    _execution_id_ctx.reset(token)


def get_execution_id() -> str | None:
    return _execution_id_ctx.get()


class ExecutionIdFilter(logging.Filter):
    """
    Logging filter that guarantees every LogRecord has an `execution_id` attribute.

    Precedence: an explicit `extra={"execution_id": ...}`, then the contextvar,
    then "-". Never drops a record.
    """

    def filter(self, record: LogRecord) -> bool:
        record.execution_id = (
            getattr(record, "execution_id", None) or get_execution_id() or "-"
        )
        return True


# Redact sensitive information
class RedactFilter(logging.Filter):
    """
    Masks record attributes whose name looks sensitive.

    Connection URLs and credentials can end up in `extra` (e.g. when logging the
    engine configuration); their values are replaced before any handler sees them.
    """

    SENSITIVE = {"password", "secret", "token", "database_url", "url", "dsn", "connection_string"}
    MASK = "***REDACTED***"

    def filter(self, record: LogRecord) -> bool:
        for key in list(record.__dict__.keys()):
            if key.lower() in self.SENSITIVE:
                record.__dict__[key] = self.MASK
        return True
