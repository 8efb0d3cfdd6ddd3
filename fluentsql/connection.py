"""PEP 249 execution adapter.

:class:`Connection` hands compiled ``(sql, bindings)`` pairs to a DB-API
connection whose driver uses the ``qmark`` paramstyle (``sqlite3`` for
example).  It does not map or inspect rows.

Example::

    import sqlite3
    from fluentsql import Connection, QueryBuilder

    conn = Connection(sqlite3.connect(":memory:"))
    qb = QueryBuilder.for_driver("sqlite", connection=conn)
    rows = qb.select("id").from_("users").where("age", ">", 18).get()
"""
from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from fluentsql.compile.compiler import QueryCompiler
    from fluentsql.query.base import BaseQuery

logger = logging.getLogger(__name__)


class Connection:
    """Runs fluentsql queries on a DB-API connection.

    Args:
        dbapi_connection: An open PEP 249 connection.
        compiler: Used for queries that were built without a compiler.
    """

    def __init__(self, dbapi_connection: Any, compiler: QueryCompiler | None = None) -> None:
        self._dbapi = dbapi_connection
        self._compiler = compiler

    @property
    def dbapi_connection(self) -> Any:
        return self._dbapi

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def query(self, query: BaseQuery) -> list[Any] | Iterator[Any]:
        """Run ``query`` and return its rows.

        Returns a list, or a generator fetching one row at a time when the
        query was marked with ``lazy()``.
        """
        cursor = self._run(query)
        if query.is_lazy:
            return self._fetch_lazy(cursor)
        try:
            return cursor.fetchall()
        finally:
            cursor.close()

    def execute(self, query: BaseQuery) -> int:
        """Run ``query`` and return the driver's affected-row count."""
        cursor = self._run(query)
        try:
            return cursor.rowcount
        finally:
            cursor.close()

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def begin(self) -> None:
        cursor = self._dbapi.cursor()
        try:
            cursor.execute("begin")
        finally:
            cursor.close()

    def commit(self) -> None:
        self._dbapi.commit()

    def rollback(self) -> None:
        self._dbapi.rollback()

    @contextmanager
    def transaction(self) -> Iterator[Connection]:
        """Commit on normal exit, roll back and re-raise on error."""
        self.begin()
        try:
            yield self
        except BaseException:
            logger.debug("Rolling back transaction")
            self.rollback()
            raise
        self.commit()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _run(self, query: BaseQuery) -> Any:
        sql, bindings = query.compile(query.compiler or self._compiler).to_tuple()
        logger.debug("Executing %s with %d bindings", sql, len(bindings))
        cursor = self._dbapi.cursor()
        try:
            cursor.execute(sql, bindings)
        except Exception:
            cursor.close()
            raise
        return cursor

    @staticmethod
    def _fetch_lazy(cursor: Any) -> Iterator[Any]:
        try:
            row = cursor.fetchone()
            while row is not None:
                yield row
                row = cursor.fetchone()
        finally:
            cursor.close()
