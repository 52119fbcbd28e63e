from .interfaces import Session, SessionFactory, Reporter
from .reporters import Report, ConsoleReporter, LoggingReporter
from .statement_executor import Outcome, ExecutionResult, StatementExecutor

__all__ = [
    "Session",
    "SessionFactory",
    "Reporter",
    "Report",
    "ConsoleReporter",
    "LoggingReporter",
    "Outcome",
    "ExecutionResult",
    "StatementExecutor",
]
