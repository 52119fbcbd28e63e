"""
Driver errors and how to find them.

`DriverError` is the failure shape the classifier consumes: a vendor error code,
a SQLSTATE and a message. Real DB-API drivers do not share a common base class or
attribute names, so this module also provides small adapters that turn the
exceptions of the common Python drivers into a `DriverError`, and a chain walker
that digs the driver error out of wrapping exceptions (SQLAlchemy's DBAPIError,
application-level wrappers, `raise ... from ...`).
"""

import logging
import re
from collections import deque
from typing import Callable, Iterator

from .base import DataAccessError

logger = logging.getLogger(__name__)

# Upper bound on how many links of a cause chain are inspected.
MAX_CHAIN_DEPTH = 100


class DriverError(Exception):
    """
    Failure raised by (or adapted from) a relational database driver.

    - message: driver message, carried through to reports unchanged
    - error_code: vendor-assigned code, 0 when the driver does not provide one
    - sql_state: 5-character SQLSTATE, "" when the driver does not provide one
    """

    def __init__(self, message: str = "", *, error_code: int = 0, sql_state: str | None = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or 0
        self.sql_state = sql_state or ""

    def __str__(self) -> str:
        return f"{self.message} [error code: {self.error_code}, SQLSTATE: {self.sql_state or '-'}]"

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, "
            f"error_code={self.error_code!r}, sql_state={self.sql_state!r})"
        )


# =================================================================================================================
# Driver adapters
# =================================================================================================================

_MYSQL_MODULES = ("pymysql", "MySQLdb", "mysql.connector", "mariadb")
_ORACLE_MODULES = ("oracledb", "cx_Oracle")
_ODBC_MODULES = ("pyodbc",)

# pyodbc appends the native error code to the message: "... (2627) (SQLExecDirectW)"
_ODBC_NATIVE_CODE_RE = re.compile(r"\((-?\d+)\)\s*\(SQL\w+\)")


def _from_module(exc: BaseException, modules: tuple[str, ...]) -> bool:
    module = type(exc).__module__ or ""
    return module.startswith(modules)


def _as_int(value) -> int | None:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


def _message_of(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


def _from_sqlite(exc: BaseException) -> DriverError | None:
    # sqlite3 (Python 3.11+) exposes the extended result code; SQLite has no SQLSTATE.
    code = _as_int(getattr(exc, "sqlite_errorcode", None))
    if code is None:
        return None
    return DriverError(_message_of(exc), error_code=code)


def _from_mysql(exc: BaseException) -> DriverError | None:
    if not _from_module(exc, _MYSQL_MODULES):
        return None
    code = _as_int(getattr(exc, "errno", None))
    if code is None and exc.args:
        code = _as_int(exc.args[0])
    sql_state = getattr(exc, "sqlstate", None)
    if code is None and not sql_state:
        return None
    message = exc.args[1] if len(exc.args) > 1 and isinstance(exc.args[1], str) else _message_of(exc)
    return DriverError(message, error_code=code or 0, sql_state=sql_state)


def _from_oracle(exc: BaseException) -> DriverError | None:
    if not _from_module(exc, _ORACLE_MODULES) or not exc.args:
        return None
    error = exc.args[0]
    code = _as_int(getattr(error, "code", None))
    if code is None:
        return None
    message = getattr(error, "message", None) or _message_of(exc)
    return DriverError(message, error_code=code)


def _from_odbc(exc: BaseException) -> DriverError | None:
    if not _from_module(exc, _ODBC_MODULES) or not exc.args:
        return None
    sql_state = exc.args[0] if isinstance(exc.args[0], str) else None
    message = exc.args[1] if len(exc.args) > 1 else _message_of(exc)
    match = _ODBC_NATIVE_CODE_RE.search(str(message))
    code = int(match.group(1)) if match else 0
    return DriverError(str(message), error_code=code, sql_state=sql_state)


def _from_sqlstate_attribute(exc: BaseException) -> DriverError | None:
    # psycopg 3 / asyncpg: `sqlstate`; psycopg2: `pgcode`.
    for attr in ("sqlstate", "pgcode", "sql_state"):
        sql_state = getattr(exc, attr, None)
        if isinstance(sql_state, str) and sql_state:
            code = _as_int(getattr(exc, "error_code", None)) or _as_int(getattr(exc, "errno", None)) or 0
            return DriverError(_message_of(exc), error_code=code, sql_state=sql_state)
    return None


DRIVER_ADAPTERS: tuple[Callable[[BaseException], DriverError | None], ...] = (
    _from_sqlite,
    _from_mysql,
    _from_oracle,
    _from_odbc,
    _from_sqlstate_attribute,
)


def as_driver_error(exc: BaseException) -> DriverError | None:
    """
    Return `exc` as a DriverError, or None if it is not a driver failure.

    A DriverError is returned unchanged. Exceptions of known drivers are adapted into
    a new DriverError whose `__cause__` is the original exception. An already
    translated DataAccessError contributes its codes and bare message; without
    codes it is not a driver failure and the walk moves on to its cause.
    """
    if isinstance(exc, DriverError):
        return exc

    if isinstance(exc, DataAccessError):
        # str() of a DataAccessError carries the category label; use the bare message
        if not exc.error_code and not exc.sql_state:
            return None
        adapted = DriverError(exc.message, error_code=exc.error_code, sql_state=exc.sql_state)
        adapted.__cause__ = exc
        return adapted

    for adapter in DRIVER_ADAPTERS:
        adapted = adapter(exc)
        if adapted is not None:
            adapted.__cause__ = exc
            logger.debug(
                "driver.adapted",
                extra={
                    "exc_type": f"{type(exc).__module__}.{type(exc).__qualname__}",
                    "error_code": adapted.error_code,
                    "sql_state": adapted.sql_state,
                },
            )
            return adapted

    return None


# =================================================================================================================
# Cause chain
# =================================================================================================================

def _successors(exc: BaseException) -> list[BaseException]:
    links = []
    # SQLAlchemy's StatementError keeps the DBAPI exception on `.orig`.
    orig = getattr(exc, "orig", None)
    if isinstance(orig, BaseException):
        links.append(orig)
    if exc.__cause__ is not None:
        links.append(exc.__cause__)
    if exc.__context__ is not None and not exc.__suppress_context__:
        links.append(exc.__context__)
    return links


def iter_exception_chain(exc: BaseException | None) -> Iterator[BaseException]:
    """
    Yield `exc` and its underlying failures, outermost first.

    Every successor of a link (`orig`, `__cause__`, then `__context__`) is
    followed, breadth-first. Each link is visited at most once, so cyclic chains
    terminate; at most MAX_CHAIN_DEPTH links are yielded.
    """
    if exc is None:
        return

    seen: set[int] = {id(exc)}
    queue = deque([exc])
    yielded = 0
    while queue and yielded < MAX_CHAIN_DEPTH:
        current = queue.popleft()
        yield current
        yielded += 1
        for link in _successors(current):
            if id(link) not in seen:
                seen.add(id(link))
                queue.append(link)


def extract_driver_error(exc: BaseException) -> DriverError | None:
    """
    Find the driver error behind `exc`.

    Returns the first link of the chain (root to leaf) that is, or adapts to, a
    DriverError; None if the chain contains no driver failure.
    """
    for link in iter_exception_chain(exc):
        driver_error = as_driver_error(link)
        if driver_error is not None:
            return driver_error
    return None


__all__ = [
    "DriverError",
    "DRIVER_ADAPTERS",
    "MAX_CHAIN_DEPTH",
    "as_driver_error",
    "iter_exception_chain",
    "extract_driver_error",
]
