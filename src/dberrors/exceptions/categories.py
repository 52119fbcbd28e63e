"""
Stable taxonomy of database failures.

Every driver error that passes through the classifier ends up in exactly one of
these categories. Callers branch on the category (or on the matching exception
class from `dberrors.exceptions.base`) instead of parsing vendor messages.
"""

from enum import Enum


class Category(str, Enum):
    BAD_GRAMMAR = "bad_grammar"
    DUPLICATE_KEY = "duplicate_key"
    DEADLOCK = "deadlock"
    DATA_INTEGRITY_VIOLATION = "data_integrity_violation"
    UNCLASSIFIED = "unclassified"

    @property
    def label(self) -> str:
        """Human-readable prefix used when a failure of this category is reported."""
        return CATEGORY_LABELS[self]

    @property
    def is_classified(self) -> bool:
        return self is not Category.UNCLASSIFIED


# Report labels. The four classified labels are part of the public output format.
CATEGORY_LABELS = {
    Category.BAD_GRAMMAR: "Bad Grammar Exception",
    Category.DUPLICATE_KEY: "Duplicate Exception",
    Category.DEADLOCK: "Deadlock Exception",
    Category.DATA_INTEGRITY_VIOLATION: "Data Integrity Violation Exception",
    Category.UNCLASSIFIED: "Unclassified Database Exception",
}

# Order in which the classifier tests the code sets; the first match wins.
CLASSIFICATION_ORDER = (
    Category.BAD_GRAMMAR,
    Category.DUPLICATE_KEY,
    Category.DEADLOCK,
    Category.DATA_INTEGRITY_VIOLATION,
)


__all__ = ["Category", "CATEGORY_LABELS", "CLASSIFICATION_ORDER"]
