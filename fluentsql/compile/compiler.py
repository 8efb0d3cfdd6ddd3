"""Query → SQL compilation.

``QueryCompiler`` is the top-level orchestrator.  It holds no query state:
each ``compile()`` call reads the query's fields, delegates predicate trees to
the :class:`~fluentsql.compile.conditions.ConditionsCompiler`, quotes
identifiers through the dialect :class:`~fluentsql.compile.base.Grammar`, and
assembles one :class:`~fluentsql.schema.expression.Expression`.

Statement layout (SELECT)
-------------------------
::

    [with ...] select [distinct] <cols> from <table>
      [<type> join ...] [where ...] [group by ...] [having ...]
      [order by ...] [limit n] [offset n]
      [union [all] (...)] [order by ...] [limit n] [offset n]

Every clause compiles to an empty fragment when absent, so fragments can be
joined with single spaces without producing stray separators.  Bindings are
concatenated in the same order as the fragments.

Nested queries (CTE bodies, union branches) are compiled through their own
memoised :meth:`~fluentsql.query.base.BaseQuery.compile`, using this compiler.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any

from fluentsql.compile.base import Grammar
from fluentsql.compile.conditions import ConditionsCompiler
from fluentsql.compile.context import CompilationContext
from fluentsql.compile.identifiers import IdentifierWrapper
from fluentsql.compile.registry import GrammarRegistry, default_registry
from fluentsql.config import CompilerConfig
from fluentsql.errors import CompilationError, UnsupportedQueryError
from fluentsql.schema.expression import Expression, ExpressionBuilder
from fluentsql.schema.table_reference import QueryType, TableReference

if TYPE_CHECKING:
    from fluentsql.query.base import BaseQuery
    from fluentsql.query.clauses import JoinClause, WithClause
    from fluentsql.query.dml import DeleteQuery, InsertQuery, RawQuery, UpdateQuery
    from fluentsql.query.select import OrderByItem, SelectQuery

logger = logging.getLogger(__name__)


class QueryCompiler:
    """Compiles fluent query objects to ``(sql, bindings)`` expressions.

    Args:
        grammar: Dialect-specific identifier rules.
        config: Optional compiler settings; defaults to ``CompilerConfig()``.
    """

    def __init__(self, grammar: Grammar, config: CompilerConfig | None = None) -> None:
        self._ctx = CompilationContext(grammar=grammar, config=config or CompilerConfig())
        self._wrap = IdentifierWrapper(grammar)
        self._conditions = ConditionsCompiler(self._ctx, self._wrap)
        self._handlers: dict[QueryType, Callable[[Any], Expression]] = {
            QueryType.SELECT: self._compile_select,
            QueryType.UPDATE: self._compile_update,
            QueryType.DELETE: self._compile_delete,
            QueryType.INSERT: self._compile_insert,
            QueryType.RAW: self._compile_raw,
        }

    @classmethod
    def for_driver(
        cls,
        driver: str,
        registry: GrammarRegistry | None = None,
        config: CompilerConfig | None = None,
    ) -> QueryCompiler:
        """Build a compiler for the grammar registered under ``driver``.

        Raises:
            UnsupportedDriverError: If ``driver`` is not registered.
        """
        registry = registry or default_registry()
        return cls(registry.create(driver), config)

    @property
    def grammar(self) -> Grammar:
        return self._ctx.grammar

    @property
    def config(self) -> CompilerConfig:
        return self._ctx.config

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def compile(self, query: BaseQuery) -> Expression:
        """Compile ``query`` into a single expression.

        Callers normally go through ``query.to_sql()`` / ``query.compile()``,
        which memoise the result; this method always recompiles.

        Raises:
            UnsupportedQueryError: If the query type has no compile routine.
            CompilationError: If the query is malformed.
        """
        query_type = getattr(query, "query_type", None)
        handler = self._handlers.get(query_type)  # type: ignore[arg-type]
        if handler is None:
            raise UnsupportedQueryError(type(query).__name__)
        expr = handler(query)
        logger.debug(
            "Compiled %s query (%d bindings): %s",
            query_type.value,  # type: ignore[union-attr]
            len(expr.bindings),
            expr.sql,
        )
        return expr

    # ------------------------------------------------------------------
    # Statement routines
    # ------------------------------------------------------------------

    def _compile_select(self, query: SelectQuery) -> Expression:
        main = _join(
            self._compile_columns(query),
            self._compile_joins(query.joins),
            self._compile_conditions_clause("where ", query.where_clause),
            self._compile_group_by(query.groups),
            self._compile_conditions_clause("having ", query.having_clause),
            self._compile_order_by(query.orders),
            self._compile_limit(query.limit_count),
            self._compile_offset(query.offset_count),
        )

        unions = self._compile_unions(query)
        if not unions.is_empty:
            main = main.wrap()
            unions = unions.merge(
                self._compile_order_by(query.union_orders),
                self._compile_limit(query.union_limit_count),
                self._compile_offset(query.union_offset_count),
            )

        return _join(self._compile_cte(query.cte), main, unions)

    def _compile_update(self, query: UpdateQuery) -> Expression:
        if not query.values:
            raise CompilationError("Empty update values.", clause="set")
        builder = ExpressionBuilder(prefix="set ", separator=", ")
        for column, value in query.values:
            if column is None:
                builder.add_expression(value)
            elif isinstance(value, Expression):
                builder.add(f"{self._wrap(column)} = {value.sql}", value.bindings)
            else:
                builder.add(f"{self._wrap(column)} = ?", (value,))
        return _join(
            self._compile_cte(query.cte),
            Expression(f"update {self._compile_table(query.table_ref)}"),
            builder.build(),
            self._compile_conditions_clause("where ", query.where_clause),
        )

    def _compile_delete(self, query: DeleteQuery) -> Expression:
        return _join(
            self._compile_cte(query.cte),
            Expression(f"delete from {self._compile_table(query.table_ref)}"),
            self._compile_conditions_clause("where ", query.where_clause),
        )

    def _compile_insert(self, query: InsertQuery) -> Expression:
        rows = query.rows
        if not rows:
            raise CompilationError("Empty insert values.", clause="values")
        columns = list(rows[0])
        column_sql = ", ".join(self._wrap(c) for c in columns)
        row_sql = "(" + ", ".join("?" for _ in columns) + ")"
        bindings = [row[c] for row in rows for c in columns]
        values_sql = ", ".join(row_sql for _ in rows)
        return Expression(
            f"insert into {self._compile_table(query.table_ref)} ({column_sql}) values {values_sql}",
            tuple(bindings),
        )

    @staticmethod
    def _compile_raw(query: RawQuery) -> Expression:
        return query.expression

    # ------------------------------------------------------------------
    # Clause routines
    # ------------------------------------------------------------------

    def _compile_cte(self, cte: WithClause | None) -> Expression:
        if cte is None or cte.is_empty:
            return Expression()
        keyword = "with recursive " if cte.is_recursive else "with "
        builder = ExpressionBuilder(prefix=keyword, separator=", ")
        for alias, subquery in cte.queries.items():
            compiled = subquery.compile(self)
            builder.add(f"{self._wrap(alias)} as ({compiled.sql})", compiled.bindings)
        return builder.build()

    def _compile_columns(self, query: SelectQuery) -> Expression:
        table = self._compile_table(query.table_ref)
        keyword = "select distinct " if query.is_distinct else "select "
        builder = ExpressionBuilder(prefix=keyword, suffix=f" from {table}", separator=", ")
        for column in query.columns:
            if isinstance(column, Expression):
                builder.add_expression(column)
            else:
                builder.add(self._wrap(column))
        compiled = builder.build()
        if compiled.is_empty:
            return Expression(f"{keyword}* from {table}")
        return compiled

    def _compile_table(self, table: TableReference | None) -> str:
        if table is None or not table.table.strip():
            raise CompilationError("Missing from clause", clause="from")
        sql = self._wrap(table.table)
        if table.alias:
            sql = f"{sql} as {self._wrap(table.alias)}"
        return sql

    def _compile_joins(self, joins: Iterable[JoinClause]) -> Expression:
        builder = ExpressionBuilder(separator=" ")
        for join in joins:
            sql = f"{join.join_type.value} join {self._compile_table(join.table)}"
            conditions = self._conditions.compile(join.conditions)
            if conditions.is_empty:
                builder.add(sql)
            else:
                builder.add(f"{sql} on {conditions.sql}", conditions.bindings)
        return builder.build()

    def _compile_conditions_clause(self, keyword: str, clause: Any) -> Expression:
        if clause is None:
            return Expression()
        return self._conditions.compile(clause.conditions).prefix(keyword)

    def _compile_group_by(self, group_by: Iterable[str | Expression]) -> Expression:
        builder = ExpressionBuilder(prefix="group by ", separator=", ")
        for column in group_by:
            if isinstance(column, Expression):
                builder.add_expression(column)
            else:
                builder.add(self._wrap(column))
        return builder.build()

    def _compile_order_by(self, order_by: Iterable[OrderByItem]) -> Expression:
        builder = ExpressionBuilder(prefix="order by ", separator=", ")
        for item in order_by:
            if isinstance(item, Expression):
                builder.add_expression(item)
            else:
                column, direction = item
                builder.add(f"{self._wrap(column)} {direction.value}")
        return builder.build()

    @staticmethod
    def _compile_limit(limit: int | None) -> Expression:
        if limit is None:
            return Expression()
        return Expression(f"limit {limit}")

    @staticmethod
    def _compile_offset(offset: int | None) -> Expression:
        if not offset:
            return Expression()
        return Expression(f"offset {offset}")

    def _compile_unions(self, query: SelectQuery) -> Expression:
        builder = ExpressionBuilder(separator=" ")
        for union in query.unions:
            compiled = union.query.compile(self)
            keyword = "union all" if union.is_all else "union"
            builder.add(f"{keyword} ({compiled.sql})", compiled.bindings)
        return builder.build()


def _join(*fragments: Expression) -> Expression:
    """Space-join fragments, skipping empty ones."""
    return Expression().merge(*fragments)
