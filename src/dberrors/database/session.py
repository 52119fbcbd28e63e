"""
SQLAlchemy-backed session factory.

The executor only needs `open_connection()` returning something with
`execute(sql)` and `close()`. `EngineSessionFactory` provides that on top of a
SQLAlchemy Engine: each session is one pooled Connection, the statement is sent
to the driver as-is (`exec_driver_sql`), and closing the session returns the
connection to the pool.
"""

import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, Engine

from dberrors.config.settings import Settings

logger = logging.getLogger(__name__)


# SQLAlchemy dialect name -> product name of the error code table.
DIALECT_PRODUCTS = {
    "h2": "H2",
    "postgresql": "PostgreSQL",
    "mysql": "MySQL",
    "mariadb": "MariaDB",
    "oracle": "Oracle",
    "mssql": "MS-SQL",
    "ibm_db_sa": "DB2",
    "db2": "DB2",
    "derby": "Derby",
    "hsqldb": "HSQL",
    "informix": "Informix",
    "sybase": "Sybase",
    "hana": "HDB",
    "sqlite": "SQLite",
}


class EngineSession:
    """One statement's worth of database access on a pooled connection."""

    def __init__(self, connection: Connection):
        self._connection = connection

    def execute(self, sql: str) -> None:
        self._connection.exec_driver_sql(sql)
        self._connection.commit()

    def rollback(self) -> None:
        self._connection.rollback()

    def close(self) -> None:
        # Returns the connection to the pool; an open transaction is rolled back.
        self._connection.close()

    def __enter__(self) -> "EngineSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class EngineSessionFactory:
    def __init__(self, engine: Engine):
        self.engine = engine

    def open_connection(self) -> EngineSession:
        return EngineSession(self.engine.connect())

    def __repr__(self) -> str:
        # Engine's repr hides the password.
        return f"{type(self).__name__}({self.engine!r})"


def create_engine_from_settings(settings: Settings) -> Engine:
    """
    Create the Engine used by the default session factory.
    """
    return create_engine(
        settings.DATABASE_URL,
        echo=settings.SQLALCHEMY_ECHO,   # Set to False in production
        pool_pre_ping=True,              # Enables connection health checks
    )


def product_for_engine(engine: Engine, default: str = "default") -> str:
    """
    Resolve the error code table product from an engine's dialect.

    Lets the product follow the configured data source instead of a separate setting.
    Unknown dialects resolve to `default`.
    """
    dialect = engine.dialect.name
    product = DIALECT_PRODUCTS.get(dialect.lower())
    if product is None:
        logger.warning("session.unknown_dialect", extra={"dialect": dialect, "fallback": default})
        return default
    return product


__all__ = [
    "DIALECT_PRODUCTS",
    "EngineSession",
    "EngineSessionFactory",
    "create_engine_from_settings",
    "product_for_engine",
]
