from __future__ import annotations

from typing import Protocol, runtime_checkable

from dberrors.exceptions.categories import Category


@runtime_checkable
class Session(Protocol):
    """Short-lived database session able to run one SQL statement."""

    def execute(self, sql: str) -> None:
        ...

    def close(self) -> None:
        ...


@runtime_checkable
class SessionFactory(Protocol):
    """Produces sessions; the executor never keeps one beyond a single statement."""

    def open_connection(self) -> Session:
        ...


@runtime_checkable
class Reporter(Protocol):
    """Sink for category-tagged failure reports."""

    def report(self, category: Category, message: str) -> None:
        ...
