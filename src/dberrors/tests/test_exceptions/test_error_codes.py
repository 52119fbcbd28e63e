import dataclasses
from itertools import combinations

import pytest

from dberrors.exceptions.base import ErrorCodeTableError
from dberrors.exceptions.categories import Category, CLASSIFICATION_ORDER
from dberrors.exceptions.error_codes import (
    ErrorCodeSet,
    ErrorCodeTable,
    get_error_code_table,
    is_canonical_code,
    load_error_code_table,
)


H2_BAD_GRAMMAR = {"42000", "42001", "42101", "42102", "42122", "42132"}
H2_DUPLICATE_KEY = {"23001", "23505"}
H2_DEADLOCK = {"40001", "50200"}
H2_DATA_INTEGRITY = {
    "22001", "22003", "22012", "22018", "22025",
    "23000", "23002", "23003", "23502", "23503", "23506", "23507", "23513",
}


def minimal_table_data(**extra) -> dict:
    data = {
        "default": {"bad_grammar": ["42000"], "duplicate_key": ["23505"]},
    }
    data.update(extra)
    return data


class TestBundledTable:

    def test_bundled_table_contains_expected_products(self, error_code_table):
        for product in ("default", "H2", "PostgreSQL", "MySQL", "Oracle", "MS-SQL", "DB2", "SQLite"):
            assert product in error_code_table

    def test_h2_code_sets(self, error_code_table):
        """
        Behavior:
            - The H2 entry carries exactly the codes the H2 driver is known to raise
              for each category.
        """
        h2 = error_code_table.lookup("H2")

        assert h2.product == "H2"
        assert h2.bad_grammar == H2_BAD_GRAMMAR
        assert h2.duplicate_key == H2_DUPLICATE_KEY
        assert h2.deadlock_loser == H2_DEADLOCK
        assert h2.data_integrity_violation == H2_DATA_INTEGRITY

    @pytest.mark.parametrize("product", list(get_error_code_table().products))
    def test_code_sets_are_pairwise_disjoint(self, error_code_table, product):
        code_set = error_code_table.lookup(product)
        for first, second in combinations(CLASSIFICATION_ORDER, 2):
            assert not (code_set.codes_for(first) & code_set.codes_for(second)), (product, first, second)

    def test_get_error_code_table_is_cached(self):
        assert get_error_code_table() is get_error_code_table()

    def test_code_set_is_immutable(self, error_code_table):
        h2 = error_code_table.lookup("H2")
        with pytest.raises(dataclasses.FrozenInstanceError):
            h2.bad_grammar = frozenset()
        assert isinstance(h2.bad_grammar, frozenset)


class TestLookup:

    @pytest.mark.parametrize("name", ["H2", "h2", "  H2  ", "H2 Database", "h2 DATABASE"])
    def test_lookup_is_case_insensitive_and_matches_aliases(self, error_code_table, name):
        assert error_code_table.lookup(name).product == "H2"

    def test_prefix_alias(self, error_code_table):
        # DB2 reports product names like "DB2/LINUXX8664"
        assert error_code_table.lookup("DB2/LINUXX8664").product == "DB2"

    @pytest.mark.parametrize("name", ["NoSuchDatabase", "", None])
    def test_unknown_product_falls_back_to_default(self, error_code_table, name):
        code_set = error_code_table.lookup(name)
        assert code_set is error_code_table.default
        assert code_set.product == "default"

    def test_default_uses_portable_sqlstates(self, error_code_table):
        default = error_code_table.default
        assert default.contains(Category.DUPLICATE_KEY, "23505")
        assert default.contains(Category.DEADLOCK, "40001")
        assert default.contains(Category.BAD_GRAMMAR, "42601")
        assert default.contains(Category.DATA_INTEGRITY_VIOLATION, "23502")

    def test_contains_is_case_insensitive(self, error_code_table):
        derby = error_code_table.lookup("Derby")
        assert derby.contains(Category.BAD_GRAMMAR, "42X01")
        assert derby.contains(Category.BAD_GRAMMAR, "42x01")

    def test_empty_code_never_matches(self, error_code_table):
        h2 = error_code_table.lookup("H2")
        for category in CLASSIFICATION_ORDER:
            assert not h2.contains(category, "")
            assert not h2.contains(category, None)


class TestTableConstruction:

    def test_from_mapping_builds_code_sets(self):
        table = ErrorCodeTable.from_mapping(minimal_table_data(
            Acme={"aliases": ["Acme DB"], "bad_grammar": ["100"], "deadlock_loser": ["ABC01"]},
        ))

        acme = table.lookup("acme db")
        assert acme.product == "Acme"
        assert acme.contains(Category.DEADLOCK, "abc01")
        assert acme.duplicate_key == frozenset()

    def test_overlapping_codes_are_rejected(self):
        with pytest.raises(ErrorCodeTableError) as exc_info:
            ErrorCodeTable.from_mapping(minimal_table_data(
                Acme={"bad_grammar": ["100", "200"], "duplicate_key": ["200"]},
            ))

        assert exc_info.value.product == "Acme"
        assert exc_info.value.codes == ["200"]

    def test_overlap_check_is_case_insensitive(self):
        with pytest.raises(ErrorCodeTableError):
            ErrorCodeTable.from_mapping(minimal_table_data(
                Acme={"bad_grammar": ["42X01"], "data_integrity_violation": ["42x01"]},
            ))

    def test_missing_default_is_rejected(self):
        with pytest.raises(ErrorCodeTableError):
            ErrorCodeTable.from_mapping({"H2": {"bad_grammar": ["42000"]}})

    def test_alias_shared_by_two_products_is_rejected(self):
        with pytest.raises(ErrorCodeTableError):
            ErrorCodeTable.from_mapping(minimal_table_data(
                Acme={"aliases": ["shared"]},
                Other={"aliases": ["SHARED"]},
            ))

    def test_unknown_keys_are_rejected(self):
        with pytest.raises(ErrorCodeTableError):
            ErrorCodeTable.from_mapping(minimal_table_data(Acme={"bad_grammer": ["1"]}))

    @pytest.mark.parametrize("code", ["-007", "+5", "0123", "007"])
    def test_non_canonical_numeric_codes_are_rejected(self, code):
        with pytest.raises(ErrorCodeTableError) as exc_info:
            ErrorCodeTable.from_mapping(minimal_table_data(Acme={"bad_grammar": ["-104", code]}))

        assert exc_info.value.codes == [code]

    @pytest.mark.parametrize("code", ["-7", "1555", "07001", "42X01", "40P01", "0"])
    def test_canonical_codes(self, code):
        assert is_canonical_code(code)

    def test_entry_must_be_a_table(self):
        with pytest.raises(ErrorCodeTableError):
            ErrorCodeTable.from_mapping(minimal_table_data(Acme=["1", "2"]))

    def test_error_code_set_allows_direct_construction(self):
        code_set = ErrorCodeSet("Acme", bad_grammar={"X1"}, duplicate_key=["X2"])
        assert code_set.bad_grammar == {"x1"}
        assert code_set.duplicate_key == {"x2"}


class TestLoadFromFile:

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "codes.toml"
        path.write_text(
            '[default]\n'
            'duplicate_key = ["23505"]\n'
            '\n'
            '[Acme]\n'
            'bad_grammar = ["-1"]\n',
            encoding="utf-8",
        )

        table = load_error_code_table(path)

        assert set(table.products) == {"default", "Acme"}
        assert table.lookup("ACME").contains(Category.BAD_GRAMMAR, "-1")

    def test_missing_file_raises_table_error(self, tmp_path):
        with pytest.raises(ErrorCodeTableError):
            load_error_code_table(tmp_path / "missing.toml")

    def test_invalid_toml_raises_table_error(self, tmp_path):
        path = tmp_path / "broken.toml"
        path.write_text("[default\n", encoding="utf-8")

        with pytest.raises(ErrorCodeTableError):
            ErrorCodeTable.from_file(path)

    def test_bundled_table_loads_without_path(self):
        table = load_error_code_table()
        assert "H2" in table
        assert table is not get_error_code_table()
