"""SQLite persistence implementation."""

from .unit_of_work import SQLiteUnitOfWork, create_sqlite_unit_of_work_factory

__all__ = ["SQLiteUnitOfWork", "create_sqlite_unit_of_work_factory"]
