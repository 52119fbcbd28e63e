"""
Reporters: where classified failures end up.

`ConsoleReporter` is the default and writes exactly one line per failure to
standard output, e.g.

    Duplicate Exception: Unique index or primary key violation ... [error code: 23505, SQLSTATE: 23505]

`LoggingReporter` sends the same line through `logging` instead, for services
that collect logs rather than stdout.
"""

import logging
import sys
import threading
from dataclasses import dataclass
from typing import TextIO

from dberrors.exceptions.categories import Category


@dataclass(frozen=True)
class Report:
    category: Category
    message: str

    def render(self) -> str:
        return f"{self.category.label}: {self.message}"


class ConsoleReporter:
    """
    Writes `<label>: <message>` lines to a text stream (stdout by default).

    The stream is resolved at report time when none is given, so redirected or
    captured stdout is honoured. Writes are serialized so concurrent executors
    never interleave partial lines.
    """

    def __init__(self, stream: TextIO | None = None):
        self._stream = stream
        self._lock = threading.Lock()

    def report(self, category: Category, message: str) -> None:
        line = Report(category, message).render()
        stream = self._stream if self._stream is not None else sys.stdout
        with self._lock:
            stream.write(line + "\n")
            stream.flush()


class LoggingReporter:
    """Emits each report as a log record (WARNING by default) with structured extras."""

    def __init__(self, logger: logging.Logger | None = None, level: int = logging.WARNING):
        self.logger = logger or logging.getLogger("dberrors.reports")
        self.level = level

    def report(self, category: Category, message: str) -> None:
        self.logger.log(
            self.level,
            Report(category, message).render(),
            extra={"category": category.value},
        )


__all__ = ["Report", "ConsoleReporter", "LoggingReporter"]
