import logging

import pytest
from sqlalchemy.exc import IntegrityError as SAIntegrityError

from dberrors.exceptions.base import (
    BadSqlGrammarError,
    DataAccessError,
    DataIntegrityViolationError,
    DeadlockLoserError,
    DuplicateKeyError,
    UncategorizedDataAccessError,
)
from dberrors.exceptions.categories import Category
from dberrors.exceptions.driver import DriverError
from dberrors.exceptions.mapper import (
    CATEGORY_EXCEPTION_MAP,
    db_error_handler,
    raise_translated_error,
    translate_driver_error,
)

from ..test_fixtures.executor_fixtures import h2_error


class FakeSession:
    def __init__(self, fail_rollback: bool = False):
        self.rolled_back = 0
        self.fail_rollback = fail_rollback

    def rollback(self):
        self.rolled_back += 1
        if self.fail_rollback:
            raise RuntimeError("connection already closed")


class TestTranslate:

    def test_every_category_has_an_exception_class(self):
        assert set(CATEGORY_EXCEPTION_MAP) == set(Category)
        for category, exception_class in CATEGORY_EXCEPTION_MAP.items():
            assert exception_class.category is category

    def test_translate_keeps_driver_details(self):
        error = h2_error(23505, "Unique index or primary key violation")

        translated = translate_driver_error(error, Category.DUPLICATE_KEY)

        assert isinstance(translated, DuplicateKeyError)
        assert translated.message == "Unique index or primary key violation"
        assert translated.error_code == 23505
        assert translated.sql_state == "23505"
        assert str(translated) == "Duplicate Exception: Unique index or primary key violation"

    def test_payload(self):
        translated = translate_driver_error(DriverError("locked", error_code=5), Category.DEADLOCK)

        assert translated.to_payload() == {"detail": "locked", "category": "deadlock", "error_code": 5}

    def test_explicit_category_overrides_class_default(self):
        error = DataAccessError("boom", category=Category.BAD_GRAMMAR)
        assert error.category is Category.BAD_GRAMMAR
        assert str(error) == "Bad Grammar Exception: boom"


class TestRaiseTranslatedError:

    @pytest.mark.parametrize(
        "code, expected",
        [
            (42001, BadSqlGrammarError),
            (23505, DuplicateKeyError),
            (40001, DeadlockLoserError),
            (23502, DataIntegrityViolationError),
            (90042, UncategorizedDataAccessError),
        ],
    )
    def test_raises_category_exception(self, h2_classifier, code, expected):
        error = h2_error(code)

        with pytest.raises(expected) as exc_info:
            raise_translated_error(error, h2_classifier)

        assert exc_info.value.__cause__ is error

    def test_non_database_error_is_reraised_unchanged(self, h2_classifier):
        original = ValueError("not a database error")

        with pytest.raises(ValueError) as exc_info:
            raise_translated_error(original, h2_classifier)

        assert exc_info.value is original

    def test_unclassified_is_logged_as_warning(self, h2_classifier, caplog):
        with caplog.at_level(logging.WARNING, logger="dberrors"):
            with pytest.raises(UncategorizedDataAccessError):
                raise_translated_error(h2_error(90042), h2_classifier)

        assert any(r.getMessage() == "mapper.unclassified_driver_error" for r in caplog.records)


class TestDbErrorHandler:

    def test_translates_wrapped_driver_error(self, h2_classifier):
        session = FakeSession()
        orig = h2_error(23505, "Unique index or primary key violation")

        with pytest.raises(DuplicateKeyError) as exc_info:
            with db_error_handler(h2_classifier, session):
                raise SAIntegrityError("INSERT INTO PERSON VALUES(...)", {}, orig)

        assert session.rolled_back == 1
        assert exc_info.value.error_code == 23505
        assert isinstance(exc_info.value.__cause__, SAIntegrityError)

    def test_success_does_not_roll_back(self, h2_classifier):
        session = FakeSession()

        with db_error_handler(h2_classifier, session):
            pass

        assert session.rolled_back == 0

    def test_other_errors_propagate_after_rollback(self, h2_classifier):
        session = FakeSession()

        with pytest.raises(KeyError):
            with db_error_handler(h2_classifier, session):
                raise KeyError("missing")

        assert session.rolled_back == 1

    def test_data_access_error_passes_through(self, h2_classifier):
        session = FakeSession()
        already_translated = DeadlockLoserError("victim")

        with pytest.raises(DeadlockLoserError) as exc_info:
            with db_error_handler(h2_classifier, session):
                raise already_translated

        assert exc_info.value is already_translated
        assert session.rolled_back == 0

    def test_failed_rollback_is_logged_and_translation_still_happens(self, h2_classifier, caplog):
        session = FakeSession(fail_rollback=True)

        with caplog.at_level(logging.ERROR, logger="dberrors"):
            with pytest.raises(BadSqlGrammarError):
                with db_error_handler(h2_classifier, session):
                    raise h2_error(42001)

        assert any("rollback" in r.getMessage() for r in caplog.records)

    def test_without_session(self, h2_classifier):
        with pytest.raises(DataIntegrityViolationError):
            with db_error_handler(h2_classifier):
                raise h2_error(23502)
