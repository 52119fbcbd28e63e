"""
dberrors: classify relational database errors into a small, stable taxonomy.

    from dberrors import StatementExecutor, ErrorClassifier, get_error_code_table

    classifier = ErrorClassifier(get_error_code_table(), "H2")
    executor = StatementExecutor(session_factory, classifier)
    executor.execute("INSERT INTO PERSON VALUES('John','Smith','M',35)")
    # -> Duplicate Exception: Unique index or primary key violation ...
"""

from dberrors.exceptions import (
    Category,
    DriverError,
    ErrorClassifier,
    ErrorCodeSet,
    ErrorCodeTable,
    classify,
    extract_driver_error,
    get_error_code_table,
    load_error_code_table,
    db_error_handler,
    DataAccessError,
    BadSqlGrammarError,
    DuplicateKeyError,
    DeadlockLoserError,
    DataIntegrityViolationError,
    UncategorizedDataAccessError,
)
from dberrors.executor import (
    ConsoleReporter,
    LoggingReporter,
    Report,
    ExecutionResult,
    Outcome,
    StatementExecutor,
)

__all__ = [
    "Category",
    "DriverError",
    "ErrorClassifier",
    "ErrorCodeSet",
    "ErrorCodeTable",
    "classify",
    "extract_driver_error",
    "get_error_code_table",
    "load_error_code_table",
    "db_error_handler",
    "DataAccessError",
    "BadSqlGrammarError",
    "DuplicateKeyError",
    "DeadlockLoserError",
    "DataIntegrityViolationError",
    "UncategorizedDataAccessError",
    "ConsoleReporter",
    "LoggingReporter",
    "Report",
    "ExecutionResult",
    "Outcome",
    "StatementExecutor",
]
