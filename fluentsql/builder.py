"""Entry point creating statement objects bound to a compiler and connection."""
from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from fluentsql.compile.compiler import QueryCompiler
from fluentsql.compile.registry import GrammarRegistry
from fluentsql.config import CompilerConfig
from fluentsql.connection import Connection
from fluentsql.query.dml import DeleteQuery, InsertQuery, RawQuery, UpdateQuery
from fluentsql.query.select import SelectQuery


class QueryBuilder:
    """Factory for fluent queries.

    Every query created here compiles with ``compiler`` and runs on
    ``connection`` (when given).

    Example::

        qb = QueryBuilder.for_driver("mysql")
        sql, bindings = qb.select("id").from_("users").where("age", ">", 18).compile().to_tuple()
        # "select `id` from `users` where `age` > ?", [18]

    Args:
        compiler: Compiler shared by every query.
        connection: Optional connection for ``get()`` / ``execute()``.
    """

    def __init__(self, compiler: QueryCompiler, connection: Connection | None = None) -> None:
        self._compiler = compiler
        self._connection = connection

    @classmethod
    def for_driver(
        cls,
        driver: str | None = None,
        connection: Connection | None = None,
        config: CompilerConfig | None = None,
        registry: GrammarRegistry | None = None,
    ) -> QueryBuilder:
        """Build a query builder for a registered driver.

        Args:
            driver: Grammar tag; defaults to ``config.driver``.
            connection: Optional connection for executing queries.
            config: Compiler settings.
            registry: Grammar lookup; defaults to :func:`default_registry`.

        Raises:
            UnsupportedDriverError: If the driver is not registered.
        """
        config = config or CompilerConfig()
        compiler = QueryCompiler.for_driver(driver or config.driver, registry, config)
        return cls(compiler, connection)

    @property
    def compiler(self) -> QueryCompiler:
        return self._compiler

    @property
    def connection(self) -> Connection | None:
        return self._connection

    def query(self) -> SelectQuery:
        """Return an empty select query."""
        return SelectQuery(self._compiler, self._connection)

    def select(self, *columns: Any) -> SelectQuery:
        return self.query().select(*columns)

    def select_raw(self, sql: str, bindings: Iterable[Any] = ()) -> SelectQuery:
        return self.query().select_raw(sql, bindings)

    def table(self, table: str, alias: str | None = None) -> SelectQuery:
        return self.query().from_(table, alias)

    def update(self, table: str) -> UpdateQuery:
        return UpdateQuery(table, self._compiler, self._connection)

    def delete(self, table: str) -> DeleteQuery:
        return DeleteQuery(table, self._compiler, self._connection)

    def insert(self, table: str) -> InsertQuery:
        return InsertQuery(table, self._compiler, self._connection)

    def raw(self, sql: str, bindings: Iterable[Any] = ()) -> RawQuery:
        return RawQuery(sql, bindings, self._compiler, self._connection)
