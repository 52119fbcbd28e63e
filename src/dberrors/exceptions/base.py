"""
Custom exceptions for database error translation and configuration.
"""

from .categories import Category

# canonical data-access exception

class DataAccessError(Exception):
    """
    Base exception for translated database failures.

    - message: human-friendly message (the rendered driver error)
    - error_code: vendor-assigned error code of the driver error (0 if absent)
    - sql_state: SQLSTATE of the driver error ("" if absent)
    - category: the Category this failure was classified into
    """

    category: Category = Category.UNCLASSIFIED

    def __init__(self, message: str, *, error_code: int = 0, sql_state: str = "",
                 category: Category | None = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.sql_state = sql_state
        if category is not None:
            self.category = category

    def __str__(self) -> str:
        return f"{self.category.label}: {self.message}"

    def to_payload(self) -> dict:
        """
        Return a JSON-serializable dict describing the failure.
        Standard shape:
            {
                "detail": "Unique index or primary key violation ...",
                "category": "duplicate_key",
                "error_code": 23505,
                "sql_state": "23505",
            }
        """
        payload = {"detail": self.message, "category": self.category.value}
        if self.error_code:
            payload["error_code"] = self.error_code
        if self.sql_state:
            payload["sql_state"] = self.sql_state
        return payload


# Subclasses pin their category so `except DuplicateKeyError` reads naturally at call sites.

class BadSqlGrammarError(DataAccessError):
    category = Category.BAD_GRAMMAR


class DuplicateKeyError(DataAccessError):
    category = Category.DUPLICATE_KEY


class DeadlockLoserError(DataAccessError):
    """The transaction was chosen as the victim of a deadlock (or lock contention)."""
    category = Category.DEADLOCK


class DataIntegrityViolationError(DataAccessError):
    category = Category.DATA_INTEGRITY_VIOLATION


class UncategorizedDataAccessError(DataAccessError):
    """A driver error whose codes are not in the active code set."""
    category = Category.UNCLASSIFIED


class ErrorCodeTableError(Exception):
    """Raised when the error code table description is invalid (overlapping codes, missing default, ...)."""

    def __init__(self, message: str, *, product: str | None = None, codes: list[str] | None = None):
        super().__init__(message)
        self.message = message
        self.product = product
        self.codes = sorted(codes) if codes else None

    def __str__(self) -> str:
        parts = []
        if self.product:
            parts.append(f"product: {self.product}")
        if self.codes:
            parts.append(f"codes: {', '.join(self.codes)}")
        if parts:
            return f"{self.message} ({'; '.join(parts)})"
        return self.message


__all__ = [
    "DataAccessError",
    "BadSqlGrammarError",
    "DuplicateKeyError",
    "DeadlockLoserError",
    "DataIntegrityViolationError",
    "UncategorizedDataAccessError",
    "ErrorCodeTableError",
]
