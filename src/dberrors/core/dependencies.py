"""
Default wiring: build the table, classifier and executor from Settings.

Applications with their own session factory or reporter construct
`StatementExecutor` directly; these helpers cover the configured default.
"""

from dberrors.config.settings import Settings, get_settings
from dberrors.database.session import EngineSessionFactory, create_engine_from_settings
from dberrors.exceptions.classifier import ErrorClassifier
from dberrors.exceptions.error_codes import ErrorCodeTable, get_error_code_table, load_error_code_table
from dberrors.executor.interfaces import Reporter, SessionFactory
from dberrors.executor.statement_executor import StatementExecutor


def get_error_code_table_for(settings: Settings) -> ErrorCodeTable:
    # The bundled table is cached process-wide; an override file is loaded as given.
    if settings.ERROR_CODES_FILE is not None:
        return load_error_code_table(settings.ERROR_CODES_FILE)
    return get_error_code_table()


def get_classifier(settings: Settings | None = None) -> ErrorClassifier:
    settings = settings or get_settings()
    return ErrorClassifier(get_error_code_table_for(settings), settings.DATABASE_PRODUCT)


def get_statement_executor(
    settings: Settings | None = None,
    *,
    session_factory: SessionFactory | None = None,
    reporter: Reporter | None = None,
) -> StatementExecutor:
    settings = settings or get_settings()
    if session_factory is None:
        session_factory = EngineSessionFactory(create_engine_from_settings(settings))

    return StatementExecutor(
        session_factory,
        get_classifier(settings),
        reporter,
        report_unclassified=settings.REPORT_UNCLASSIFIED,
        propagate_unextracted=settings.PROPAGATE_UNEXTRACTED_ERRORS,
    )
