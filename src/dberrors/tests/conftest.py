"""
Core pytest configuration for the test suite.

Domain-specific fixtures (tables, classifiers, stub sessions, SQLite engines)
live in tests/test_fixtures/ and are imported at the bottom of this module so
every test module can use them without importing.
"""

from __future__ import annotations

import logging

# -------------------------------
# Early logging tuning (IMPORTANT)
# -------------------------------
# Silence noisy third-party loggers before anything initializes them.
NOISY_LOGGERS = (
    "sqlalchemy",
    "sqlalchemy.engine",
    "sqlalchemy.engine.Engine",
    "sqlalchemy.pool",
)
for _name in NOISY_LOGGERS:
    logging.getLogger(_name).setLevel(logging.WARNING)

import pytest

from dberrors.config.settings import Settings
from dberrors.core.logging.builder import setup_logging


# -------------------------------
# Settings
# -------------------------------

def make_test_settings(**overrides) -> Settings:
    """
    Settings for tests: never read the developer's .env file.
    """
    values = {
        "ENV": "testing",
        "DATABASE_PRODUCT": "H2",
        "DATABASE_URL": "sqlite://",
        "LOG_LEVEL": "DEBUG",
        "LOG_FORMAT": "text",
        "LOG_TO_STDOUT": True,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def test_settings() -> Settings:
    return make_test_settings()


# The `autouse=True` part means that this fixture will be automatically used by pytest
# without explicitly including it in your test function parameters.
@pytest.fixture(scope="session", autouse=True)
def configure_logging():
    """
    Install application logging for the entire test session, the same way the
    application does, so formatters and filters run in every test.
    """
    setup_logging(make_test_settings())
    yield


# Executor / classifier fixtures
from .test_fixtures.executor_fixtures import (  # noqa: E402,F401
    error_code_table,
    h2_classifier,
    collecting_reporter,
    stub_factory,
    h2_executor,
    sqlite_engine,
    sqlite_executor,
)
