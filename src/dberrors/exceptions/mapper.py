import logging
from contextlib import contextmanager

from .base import (
    DataAccessError,
    BadSqlGrammarError,
    DuplicateKeyError,
    DeadlockLoserError,
    DataIntegrityViolationError,
    UncategorizedDataAccessError,
)
from .categories import Category
from .classifier import ErrorClassifier
from .driver import DriverError, extract_driver_error

logger = logging.getLogger(__name__)


CATEGORY_EXCEPTION_MAP: dict[Category, type[DataAccessError]] = {
    Category.BAD_GRAMMAR: BadSqlGrammarError,
    Category.DUPLICATE_KEY: DuplicateKeyError,
    Category.DEADLOCK: DeadlockLoserError,
    Category.DATA_INTEGRITY_VIOLATION: DataIntegrityViolationError,
    Category.UNCLASSIFIED: UncategorizedDataAccessError,
}


def translate_driver_error(error: DriverError, category: Category) -> DataAccessError:
    """
    Build the app-level exception for a classified driver error.
    The driver message is kept as-is; code and SQLSTATE are attached as attributes.
    """
    exception_class = CATEGORY_EXCEPTION_MAP[category]
    return exception_class(error.message, error_code=error.error_code, sql_state=error.sql_state)


def raise_translated_error(exc: BaseException, classifier: ErrorClassifier) -> None:
    """
    Map `exc` to a DataAccessError and raise it (chained to `exc`).

    If no driver error can be found behind `exc` it is re-raised unchanged:
    only database failures are translated.
    """
    driver_error = extract_driver_error(exc)
    if driver_error is None:
        raise exc

    category = classifier.classify(driver_error)

    if category is Category.UNCLASSIFIED:
        logger.warning(
            "mapper.unclassified_driver_error",
            extra={"product": classifier.code_set.product, "error_code": driver_error.error_code,
                   "sql_state": driver_error.sql_state},
        )
    else:
        logger.info(
            "mapper.translated",
            extra={"category": category.value, "error_code": driver_error.error_code,
                   "sql_state": driver_error.sql_state},
        )

    raise translate_driver_error(driver_error, category) from exc


# -----------------------
# Context manager to DRY error handling around database calls
# -----------------------
@contextmanager
def db_error_handler(classifier: ErrorClassifier, session=None):
    """
    Usage:
        with db_error_handler(classifier, connection):
            connection.exec_driver_sql(...)
    Rolls `session` back (when given) on error and raises the translated
    DataAccessError. Exceptions with no driver error behind them propagate unchanged.
    """
    try:
        yield
    except DataAccessError:
        raise
    except Exception as exc:
        if session is not None:
            try:
                session.rollback()
            except Exception:
                logger.exception("Failed to rollback session after database error")
        raise_translated_error(exc, classifier)


__all__ = [
    "CATEGORY_EXCEPTION_MAP",
    "translate_driver_error",
    "raise_translated_error",
    "db_error_handler",
]
