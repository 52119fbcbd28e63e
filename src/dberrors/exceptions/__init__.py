# dberrors/
# │
# ├── exceptions/
# │   ├── __init__.py
# │   ├── base.py            # App-level errors (DataAccessError, DuplicateKeyError, ...)
# │   ├── categories.py      # Category taxonomy + report labels
# │   ├── driver.py          # DriverError, driver adapters, cause-chain extraction
# │   ├── error_codes.py     # ErrorCodeSet / ErrorCodeTable (bundled per-product codes)
# │   ├── classifier.py      # (ErrorCodeSet, DriverError) -> Category
# │   └── mapper.py          # Category -> app-level exception, db_error_handler

from .base import (
    DataAccessError,
    BadSqlGrammarError,
    DuplicateKeyError,
    DeadlockLoserError,
    DataIntegrityViolationError,
    UncategorizedDataAccessError,
    ErrorCodeTableError,
)
from .categories import Category
from .driver import DriverError, as_driver_error, extract_driver_error
from .error_codes import ErrorCodeSet, ErrorCodeTable, load_error_code_table, get_error_code_table
from .classifier import classify, ErrorClassifier
from .mapper import translate_driver_error, raise_translated_error, db_error_handler

__all__ = [
    "DataAccessError",
    "BadSqlGrammarError",
    "DuplicateKeyError",
    "DeadlockLoserError",
    "DataIntegrityViolationError",
    "UncategorizedDataAccessError",
    "ErrorCodeTableError",
    "Category",
    "DriverError",
    "as_driver_error",
    "extract_driver_error",
    "ErrorCodeSet",
    "ErrorCodeTable",
    "load_error_code_table",
    "get_error_code_table",
    "classify",
    "ErrorClassifier",
    "translate_driver_error",
    "raise_translated_error",
    "db_error_handler",
]
