"""
Per-product error code sets.

The table maps a database product name ("H2", "PostgreSQL", "DB2", ...) to the four
sets of vendor codes / SQLSTATEs the classifier uses. It is loaded once from the
bundled `resources/sql_error_codes.toml` (or a file given in settings) and is
immutable afterwards, so it can be shared freely between threads.
"""

import logging
import re
import tomllib
from dataclasses import dataclass, field
from functools import lru_cache
from importlib import resources
from itertools import combinations
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from .base import ErrorCodeTableError
from .categories import Category, CLASSIFICATION_ORDER

logger = logging.getLogger(__name__)

DEFAULT_PRODUCT = "default"

# TOML key for each category's code list.
CATEGORY_KEYS = {
    Category.BAD_GRAMMAR: "bad_grammar",
    Category.DUPLICATE_KEY: "duplicate_key",
    Category.DEADLOCK: "deadlock_loser",
    Category.DATA_INTEGRITY_VIOLATION: "data_integrity_violation",
}

_BUNDLED_RESOURCE = "resources/sql_error_codes.toml"


def _fold(codes) -> frozenset[str]:
    return frozenset(str(code).casefold() for code in codes)


_NUMERIC_CODE_RE = re.compile(r"[+-]?\d+")


def is_canonical_code(code: str) -> bool:
    """
    Vendor codes are matched by their decimal rendering, so a numeric entry must
    read exactly like `str(int)` ("-7", not "-007"). Five-digit entries are
    SQLSTATEs and keep their leading zeros ("07001").
    """
    if not _NUMERIC_CODE_RE.fullmatch(code):
        return True
    if len(code) == 5 and code.isdigit():
        return True
    return str(int(code)) == code


@dataclass(frozen=True)
class ErrorCodeSet:
    """
    Code sets of a single product.

    All codes are stored case-folded; use `codes_for()` / `contains()` rather than
    comparing against the raw fields.
    """

    product: str
    bad_grammar: frozenset[str] = field(default_factory=frozenset)
    duplicate_key: frozenset[str] = field(default_factory=frozenset)
    deadlock_loser: frozenset[str] = field(default_factory=frozenset)
    data_integrity_violation: frozenset[str] = field(default_factory=frozenset)
    aliases: tuple[str, ...] = ()

    def __post_init__(self):
        # frozen dataclass: normalise through object.__setattr__
        for name in CATEGORY_KEYS.values():
            object.__setattr__(self, name, _fold(getattr(self, name)))
        object.__setattr__(self, "aliases", tuple(self.aliases))

    def codes_for(self, category: Category) -> frozenset[str]:
        if category not in CATEGORY_KEYS:
            return frozenset()
        return getattr(self, CATEGORY_KEYS[category])

    def contains(self, category: Category, code: str | None) -> bool:
        """Case-insensitive membership test; empty codes never match."""
        if not code:
            return False
        return code.casefold() in self.codes_for(category)

    def overlapping_codes(self) -> set[str]:
        """Codes listed under more than one category."""
        overlap: set[str] = set()
        for first, second in combinations(CLASSIFICATION_ORDER, 2):
            overlap |= self.codes_for(first) & self.codes_for(second)
        return overlap

    @classmethod
    def from_mapping(cls, product: str, data: Mapping[str, Any]) -> "ErrorCodeSet":
        unknown = set(data) - set(CATEGORY_KEYS.values()) - {"aliases"}
        if unknown:
            raise ErrorCodeTableError("Unknown keys in error code description", product=product, codes=list(unknown))

        non_canonical = [
            str(code)
            for name in CATEGORY_KEYS.values()
            for code in data.get(name, ())
            if not is_canonical_code(str(code))
        ]
        if non_canonical:
            raise ErrorCodeTableError(
                "Numeric codes must be written in decimal form without leading zeros or '+'",
                product=product,
                codes=non_canonical,
            )

        return cls(
            product=product,
            aliases=tuple(data.get("aliases", ())),
            **{name: data.get(name, ()) for name in CATEGORY_KEYS.values()},
        )


class ErrorCodeTable:
    """
    Read-only mapping: product name -> ErrorCodeSet.

    Lookups are case-insensitive and also match product aliases. Aliases ending in
    "*" match by prefix (e.g. "DB2*" matches "DB2/LINUXX8664"). Unknown products
    resolve to the `default` set.
    """

    def __init__(self, code_sets: Mapping[str, ErrorCodeSet]):
        if DEFAULT_PRODUCT.casefold() not in {name.casefold() for name in code_sets}:
            raise ErrorCodeTableError(f"Error code table has no '{DEFAULT_PRODUCT}' entry")

        by_name: dict[str, ErrorCodeSet] = {}
        prefixes: list[tuple[str, ErrorCodeSet]] = []

        for name, code_set in code_sets.items():
            overlap = code_set.overlapping_codes()
            if overlap:
                raise ErrorCodeTableError(
                    "Error codes listed under more than one category", product=name, codes=list(overlap)
                )

            for key in (name, *code_set.aliases):
                folded = key.casefold()
                if folded.endswith("*"):
                    prefixes.append((folded[:-1], code_set))
                    continue
                if folded in by_name and by_name[folded] is not code_set:
                    raise ErrorCodeTableError(
                        "Product name or alias used by more than one product", product=name, codes=[key]
                    )
                by_name[folded] = code_set

        self._by_name = MappingProxyType(by_name)
        self._prefixes = tuple(prefixes)
        self._products = tuple(code_set.product for code_set in code_sets.values())
        self._default = by_name[DEFAULT_PRODUCT.casefold()]

    @property
    def products(self) -> tuple[str, ...]:
        return self._products

    @property
    def default(self) -> ErrorCodeSet:
        return self._default

    def __contains__(self, product: object) -> bool:
        return isinstance(product, str) and self._find(product) is not None

    def __iter__(self):
        return iter(self._products)

    def __len__(self) -> int:
        return len(self._products)

    def _find(self, product: str) -> ErrorCodeSet | None:
        folded = product.strip().casefold()
        if folded in self._by_name:
            return self._by_name[folded]
        for prefix, code_set in self._prefixes:
            if folded.startswith(prefix):
                return code_set
        return None

    def lookup(self, product: str | None) -> ErrorCodeSet:
        """
        Return the code set for `product`, falling back to the `default` set.

        Never raises: None, empty and unknown names all resolve to `default`.
        """
        if not product:
            return self._default

        code_set = self._find(product)
        if code_set is None:
            logger.debug("table.lookup.default", extra={"product": product})
            return self._default
        return code_set

    # ------------------------
    # Constructors
    # ------------------------
    @classmethod
    def from_mapping(cls, data: Mapping[str, Mapping[str, Any]]) -> "ErrorCodeTable":
        """
        Build a table from a parsed description:
            {"H2": {"bad_grammar": [...], "duplicate_key": [...], ...}, "default": {...}}
        """
        code_sets = {}
        for product, entry in data.items():
            if not isinstance(entry, Mapping):
                raise ErrorCodeTableError("Error code entry must be a table", product=product)
            code_sets[product] = ErrorCodeSet.from_mapping(product, entry)
        return cls(code_sets)

    @classmethod
    def from_file(cls, path: str | Path) -> "ErrorCodeTable":
        """Load a table from a TOML file."""
        path = Path(path)
        try:
            with path.open("rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as exc:
            raise ErrorCodeTableError(f"Cannot read error code table from {path}") from exc

        table = cls.from_mapping(data)
        logger.info("table.load.success", extra={"source": str(path), "products": len(table)})
        return table


def load_error_code_table(path: str | Path | None = None) -> ErrorCodeTable:
    """
    Load the error code table from `path`, or from the bundled resource when no path is given.
    """
    if path is not None:
        return ErrorCodeTable.from_file(path)

    resource = resources.files("dberrors").joinpath(_BUNDLED_RESOURCE)
    with resource.open("rb") as f:
        data = tomllib.load(f)

    table = ErrorCodeTable.from_mapping(data)
    logger.debug("table.load.success", extra={"source": "bundled", "products": len(table)})
    return table


# The bundled table never changes during the lifetime of the process, so build it once.
@lru_cache()
def get_error_code_table() -> ErrorCodeTable:
    return load_error_code_table()


__all__ = [
    "DEFAULT_PRODUCT",
    "CATEGORY_KEYS",
    "ErrorCodeSet",
    "ErrorCodeTable",
    "is_canonical_code",
    "load_error_code_table",
    "get_error_code_table",
]
