import logging

from .categories import Category, CLASSIFICATION_ORDER
from .driver import DriverError, extract_driver_error
from .error_codes import ErrorCodeSet, ErrorCodeTable

logger = logging.getLogger(__name__)

# =================================================================================================================
# Classification
# =================================================================================================================

def _render_error_code(error) -> str:
    code = getattr(error, "error_code", 0)
    if isinstance(code, bool) or not isinstance(code, int):
        return ""
    # 0 means "no vendor code"; it must never match a table entry.
    return str(code) if code else ""


def _render_sql_state(error) -> str:
    sql_state = getattr(error, "sql_state", "")
    return sql_state if isinstance(sql_state, str) else ""


def classify(code_set: ErrorCodeSet, error: DriverError) -> Category:
    """
    Classify a driver error against the code set of one product.

    The decimal vendor code and the SQLSTATE are both compared (case-insensitively)
    with each category's codes, in the order bad grammar, duplicate key, deadlock,
    data integrity violation. The first category that matches wins; no match gives
    Category.UNCLASSIFIED.

    Total function: a missing/zero code or an empty SQLSTATE simply cannot match.
    """
    error_code = _render_error_code(error)
    sql_state = _render_sql_state(error)

    for category in CLASSIFICATION_ORDER:
        if code_set.contains(category, error_code) or code_set.contains(category, sql_state):
            return category

    return Category.UNCLASSIFIED


class ErrorClassifier:
    """
    Classifier bound to one product of an ErrorCodeTable.

    The code set is resolved once at construction; the instance is stateless
    afterwards and safe to share between threads.
    """

    def __init__(self, table: ErrorCodeTable, product: str | None):
        self.table = table
        self.product = product
        self.code_set = table.lookup(product)

        if product and product not in table:
            logger.warning(
                "classifier.unknown_product",
                extra={"product": product, "fallback": self.code_set.product},
            )

    def classify(self, error: DriverError) -> Category:
        return classify(self.code_set, error)

    def classify_exception(self, exc: BaseException) -> Category:
        """
        Classify any exception by the driver error found in its cause chain.
        Exceptions without a driver error are UNCLASSIFIED.
        """
        driver_error = extract_driver_error(exc)
        if driver_error is None:
            return Category.UNCLASSIFIED
        return self.classify(driver_error)

    # Thin predicates for call sites that only care about one kind of failure.

    def is_bad_grammar(self, error: DriverError) -> bool:
        return self.classify(error) is Category.BAD_GRAMMAR

    def is_duplicate_key(self, error: DriverError) -> bool:
        return self.classify(error) is Category.DUPLICATE_KEY

    def is_deadlock(self, error: DriverError) -> bool:
        return self.classify(error) is Category.DEADLOCK

    def is_data_integrity_violation(self, error: DriverError) -> bool:
        return self.classify(error) is Category.DATA_INTEGRITY_VIOLATION

    def __repr__(self) -> str:
        return f"{type(self).__name__}(product={self.product!r}, code_set={self.code_set.product!r})"


__all__ = ["classify", "ErrorClassifier"]
