"""Shared query machinery: memoised compilation and connection hooks.

Every statement object derives from :class:`BaseQuery`.  A query compiles at
most once: the first ``compile()`` / ``to_sql()`` / ``get_bindings()`` call
stores the resulting :class:`~fluentsql.schema.expression.Expression`, and
later calls return it unchanged, even if the query has been mutated since.
"""
from __future__ import annotations

import threading
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any, Self

from fluentsql.errors import CompilationError, QueryBuilderError
from fluentsql.query.clauses import WhereClause, WithClause
from fluentsql.query.mixins import MISSING, ColumnArg, WhereAliasMixin
from fluentsql.schema.expression import Expression
from fluentsql.schema.table_reference import QueryType

if TYPE_CHECKING:
    from fluentsql.compile.compiler import QueryCompiler
    from fluentsql.connection import Connection


class BaseQuery:
    """Base class for all statements.

    Args:
        compiler: Compiler used by ``compile()`` when none is passed explicitly.
        connection: Connection used by ``get()`` / ``execute()``.
    """

    query_type: QueryType

    def __init__(
        self,
        compiler: QueryCompiler | None = None,
        connection: Connection | None = None,
    ) -> None:
        self._compiler = compiler
        self._connection = connection
        self._compiled: Expression | None = None
        self._compile_lock = threading.RLock()
        self._compiling = False
        self._lazy = False

    # ------------------------------------------------------------------
    # Compilation
    # ------------------------------------------------------------------

    def compile(self, compiler: QueryCompiler | None = None) -> Expression:
        """Compile once and return the cached expression.

        Args:
            compiler: Overrides the compiler given at construction.  Nested
                queries (union branches, CTE bodies) receive the outer
                query's compiler this way.

        Raises:
            CompilationError: If no compiler is available, the query is
                malformed, or it contains itself as a union branch or CTE.
        """
        if self._compiled is not None:
            return self._compiled
        with self._compile_lock:
            if self._compiled is None:
                if self._compiling:
                    raise CompilationError(
                        f"{type(self).__name__} contains itself as a subquery"
                    )
                compiler = compiler or self._compiler
                if compiler is None:
                    raise CompilationError(
                        f"No compiler configured for {type(self).__name__}"
                    )
                self._compiling = True
                try:
                    self._compiled = compiler.compile(self)
                finally:
                    self._compiling = False
        return self._compiled

    def to_sql(self) -> str:
        return self.compile().sql

    def get_bindings(self) -> list[Any]:
        return list(self.compile().bindings)

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def lazy(self) -> Self:
        """Make ``get()`` stream rows instead of fetching them all."""
        self._lazy = True
        return self

    @property
    def is_lazy(self) -> bool:
        return self._lazy

    @property
    def compiler(self) -> QueryCompiler | None:
        return self._compiler

    @property
    def connection(self) -> Connection | None:
        return self._connection

    def get(self) -> Iterable[Any]:
        """Run the statement and return its rows.

        Raises:
            QueryBuilderError: If the query has no connection.
        """
        return self._require_connection().query(self)

    def execute(self) -> int:
        """Run the statement and return the number of affected rows."""
        return self._require_connection().execute(self)

    def _require_connection(self) -> Connection:
        if self._connection is None:
            raise QueryBuilderError(
                f"{type(self).__name__} has no connection", argument="connection"
            )
        return self._connection


class WhereMixin(WhereAliasMixin):
    """``where`` predicates for statements, delegated to a lazily created clause."""

    _where: WhereClause | None = None

    @property
    def where_clause(self) -> WhereClause | None:
        return self._where

    def get_or_create_where(self) -> WhereClause:
        if self._where is None:
            self._where = WhereClause()
        return self._where

    def where(
        self,
        column: ColumnArg,
        operator_or_value: Any = MISSING,
        value: Any = MISSING,
    ) -> Self:
        self.get_or_create_where().where(column, operator_or_value, value)
        return self

    def or_where(
        self,
        column: ColumnArg,
        operator_or_value: Any = MISSING,
        value: Any = MISSING,
    ) -> Self:
        self.get_or_create_where().or_where(column, operator_or_value, value)
        return self

    def where_raw(self, sql: str, bindings: Iterable[Any] = ()) -> Self:
        self.get_or_create_where().where_raw(sql, bindings)
        return self

    def or_where_raw(self, sql: str, bindings: Iterable[Any] = ()) -> Self:
        self.get_or_create_where().or_where_raw(sql, bindings)
        return self


class CommonTableMixin:
    """``with`` / ``with recursive`` support.

    Hosts implement :meth:`subquery` to supply the select query handed to
    CTE callbacks.
    """

    _cte: WithClause | None = None

    @property
    def cte(self) -> WithClause | None:
        return self._cte

    def with_(self, alias: str, query: BaseQuery | Callable[[Any], Any]) -> Self:
        """Add a common table expression named ``alias``.

        Args:
            alias: CTE name.
            query: A query object, or a callback that fills in a fresh
                select query.
        """
        if not isinstance(alias, str) or not alias.strip():
            raise QueryBuilderError("CTE alias must be a non-empty string", argument="alias")
        if not isinstance(query, BaseQuery):
            callback = query
            query = self.subquery()  # type: ignore[attr-defined]
            callback(query)
        if self._cte is None:
            self._cte = WithClause()
        self._cte.add(alias.strip(), query)
        return self

    def with_recursive(self, alias: str, query: BaseQuery | Callable[[Any], Any]) -> Self:
        self.with_(alias, query)
        self._cte.set_recursive()  # type: ignore[union-attr]
        return self
