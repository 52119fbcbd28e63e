"""
Statement executor: run one SQL statement and route driver failures through classification.

Per call the executor goes Idle -> Running -> Succeeded, or, on failure,
Classifying -> Reported / Unclassified / Swallowed, and is back to Idle. It keeps
no state between calls, so one instance can serve many threads as long as the
session factory is thread-safe.

Failure handling:
  - a driver error (raised directly or found in the cause chain) is classified and
    reported as `<label>: <driver error>`; the failure does not propagate;
  - a driver error no code set knows is logged (and reported only when
    `report_unclassified` is set);
  - any other failure propagates unchanged, unless `propagate_unextracted` is
    off, in which case it is logged and swallowed.
"""

import logging
import time
import uuid
from dataclasses import dataclass
from enum import Enum

from dberrors.core.logging.filters import set_execution_id, reset_execution_id
from dberrors.exceptions.categories import Category
from dberrors.exceptions.classifier import ErrorClassifier
from dberrors.exceptions.driver import extract_driver_error

from .interfaces import Reporter, SessionFactory
from .reporters import ConsoleReporter, Report

logger = logging.getLogger(__name__)


class Outcome(str, Enum):
    SUCCEEDED = "succeeded"
    REPORTED = "reported"
    UNCLASSIFIED = "unclassified"
    SWALLOWED = "swallowed"


@dataclass(frozen=True)
class ExecutionResult:
    outcome: Outcome
    report: Report | None = None

    @property
    def category(self) -> Category | None:
        return self.report.category if self.report is not None else None


class StatementExecutor:
    """
    Executes SQL statements through a session factory.

    Args:
        session_factory: provides `open_connection()`; one session per statement.
        classifier: ErrorClassifier bound to the active database product.
        reporter: receives `(category, message)` for each classified failure;
            defaults to a ConsoleReporter writing to stdout.
        report_unclassified: also report driver errors that match no category.
        propagate_unextracted: re-raise failures that carry no driver error.
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        classifier: ErrorClassifier,
        reporter: Reporter | None = None,
        *,
        report_unclassified: bool = False,
        propagate_unextracted: bool = True,
    ):
        self.session_factory = session_factory
        self.classifier = classifier
        self.reporter = reporter if reporter is not None else ConsoleReporter()
        self.report_unclassified = report_unclassified
        self.propagate_unextracted = propagate_unextracted

    def execute(self, sql: str) -> None:
        """Run `sql`; classified driver failures are reported, not raised."""
        self.run(sql)

    def run(self, sql: str) -> ExecutionResult:
        """
        Same as `execute()` but returns what happened.
        """
        token = set_execution_id(uuid.uuid4().hex[:12])
        start = time.perf_counter()
        try:
            # debug: statement length only, statements may carry sensitive literals
            logger.debug("executor.run.start", extra={"sql_length": len(sql)})

            try:
                self._execute_statement(sql)
            except Exception as exc:
                return self._handle_failure(exc)

            duration_ms = int((time.perf_counter() - start) * 1000)
            logger.debug("executor.run.success", extra={"duration_ms": duration_ms})
            return ExecutionResult(Outcome.SUCCEEDED)
        finally:
            reset_execution_id(token)

    def _execute_statement(self, sql: str) -> None:
        session = self.session_factory.open_connection()
        try:
            session.execute(sql)
        finally:
            session.close()

    def _handle_failure(self, exc: Exception) -> ExecutionResult:
        driver_error = extract_driver_error(exc)

        if driver_error is None:
            if self.propagate_unextracted:
                raise exc
            # propagation disabled: log and drop
            logger.warning(
                "executor.run.swallowed",
                extra={"exc_type": type(exc).__name__},
                exc_info=exc,
            )
            return ExecutionResult(Outcome.SWALLOWED)

        category = self.classifier.classify(driver_error)
        report = Report(category, str(driver_error))

        if category is Category.UNCLASSIFIED:
            logger.warning(
                "executor.run.unclassified",
                extra={
                    "product": self.classifier.code_set.product,
                    "error_code": driver_error.error_code,
                    "sql_state": driver_error.sql_state,
                },
            )
            if self.report_unclassified:
                self.reporter.report(report.category, report.message)
            return ExecutionResult(Outcome.UNCLASSIFIED, report)

        logger.info(
            "executor.run.classified",
            extra={
                "category": category.value,
                "error_code": driver_error.error_code,
                "sql_state": driver_error.sql_state,
            },
        )
        self.reporter.report(report.category, report.message)
        return ExecutionResult(Outcome.REPORTED, report)


__all__ = ["Outcome", "ExecutionResult", "StatementExecutor"]
