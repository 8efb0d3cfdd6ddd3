"""SELECT statement builder.

:class:`SelectQuery` records the clauses of a select statement; the
:class:`~fluentsql.compile.compiler.QueryCompiler` renders them.  Once a union
has been added, ``order_by`` / ``limit`` / ``offset`` apply to the combined
result instead of the first branch::

    (select * from `a` order by `x` asc) union (select * from `b`) limit 5
"""
from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import TYPE_CHECKING, Any, Self

from fluentsql.errors import QueryBuilderError
from fluentsql.query.base import BaseQuery, CommonTableMixin, WhereMixin
from fluentsql.query.clauses import HavingClause, JoinClause, UnionClause
from fluentsql.query.mixins import MISSING, ColumnArg
from fluentsql.schema.expression import Expression
from fluentsql.schema.table_reference import Direction, JoinType, QueryType, TableReference

if TYPE_CHECKING:
    from fluentsql.compile.compiler import QueryCompiler
    from fluentsql.connection import Connection

#: An ORDER BY entry: ``(column, direction)`` or a raw expression.
OrderByItem = tuple[str, Direction] | Expression

#: A select-list entry: a column reference or a raw expression.
SelectColumn = str | Expression


class SelectQuery(WhereMixin, CommonTableMixin, BaseQuery):
    """Fluent builder for ``select`` statements."""

    query_type = QueryType.SELECT

    def __init__(
        self,
        compiler: QueryCompiler | None = None,
        connection: Connection | None = None,
    ) -> None:
        super().__init__(compiler, connection)
        self._table: TableReference | None = None
        self._columns: list[SelectColumn] = []
        self._is_distinct = False
        self._joins: list[JoinClause] = []
        self._groups: list[str | Expression] = []
        self._having: HavingClause | None = None
        self._orders: list[OrderByItem] = []
        self._limit: int | None = None
        self._offset: int | None = None
        self._unions: list[UnionClause] = []
        self._union_orders: list[OrderByItem] = []
        self._union_limit: int | None = None
        self._union_offset: int | None = None

    def new_instance(self) -> SelectQuery:
        """Return an empty select sharing this query's compiler and connection."""
        return SelectQuery(self._compiler, self._connection)

    def subquery(self) -> SelectQuery:
        return self.new_instance()

    # ------------------------------------------------------------------
    # Select list and source
    # ------------------------------------------------------------------

    def select(self, *columns: Any) -> Self:
        """Replace the select list.

        Accepts column names, lists of names, and ``{column: alias}``
        mappings, in any combination::

            select("a", ["b", "c as d"], {"e": "f"})
            # select `a`, `b`, `c` as `d`, `e` as `f`

        An empty call (or empty strings) selects ``*``.

        Raises:
            QueryBuilderError: If an entry is neither a string nor a mapping
                of strings.
        """
        self._columns = _normalize_columns(columns)
        return self

    def select_raw(self, sql: str, bindings: Iterable[Any] = ()) -> Self:
        self._columns.append(Expression(sql, tuple(bindings)))
        return self

    def distinct(self) -> Self:
        self._is_distinct = True
        return self

    def from_(self, table: str, alias: str | None = None) -> Self:
        self._table = TableReference(table.strip(), alias)
        return self

    def table(self, table: str, alias: str | None = None) -> Self:
        return self.from_(table, alias)

    # ------------------------------------------------------------------
    # Joins
    # ------------------------------------------------------------------

    def join(
        self,
        table: str,
        condition: Callable[[JoinClause], Any] | None = None,
        alias: str | None = None,
        join_type: JoinType = JoinType.INNER,
    ) -> Self:
        """Join ``table``; ``condition`` receives the join clause to fill in."""
        clause = JoinClause(TableReference(table.strip(), alias), join_type)
        if condition is not None:
            condition(clause)
        self._joins.append(clause)
        return self

    def left_join(
        self,
        table: str,
        condition: Callable[[JoinClause], Any] | None = None,
        alias: str | None = None,
    ) -> Self:
        return self.join(table, condition, alias, JoinType.LEFT)

    def right_join(
        self,
        table: str,
        condition: Callable[[JoinClause], Any] | None = None,
        alias: str | None = None,
    ) -> Self:
        return self.join(table, condition, alias, JoinType.RIGHT)

    # ------------------------------------------------------------------
    # Grouping
    # ------------------------------------------------------------------

    def group_by(self, *columns: str) -> Self:
        """Append group-by columns; a column already present is not repeated."""
        for column in columns:
            column = column.strip()
            if column and column not in self._groups:
                self._groups.append(column)
        return self

    def group_by_raw(self, sql: str, bindings: Iterable[Any] = ()) -> Self:
        self._groups.append(Expression(sql, tuple(bindings)))
        return self

    def get_or_create_having(self) -> HavingClause:
        if self._having is None:
            self._having = HavingClause()
        return self._having

    def having(
        self,
        column: ColumnArg,
        operator_or_value: Any = MISSING,
        value: Any = MISSING,
    ) -> Self:
        self.get_or_create_having().having(column, operator_or_value, value)
        return self

    def or_having(
        self,
        column: ColumnArg,
        operator_or_value: Any = MISSING,
        value: Any = MISSING,
    ) -> Self:
        self.get_or_create_having().or_having(column, operator_or_value, value)
        return self

    def having_raw(self, sql: str, bindings: Iterable[Any] = ()) -> Self:
        self.get_or_create_having().having_raw(sql, bindings)
        return self

    def or_having_raw(self, sql: str, bindings: Iterable[Any] = ()) -> Self:
        self.get_or_create_having().or_having_raw(sql, bindings)
        return self

    # ------------------------------------------------------------------
    # Ordering and paging
    # ------------------------------------------------------------------

    def order_by(self, column: str, direction: str | Direction = Direction.ASC) -> Self:
        """Order by ``column``; ordering by the same column again replaces its direction.

        Raises:
            QueryBuilderError: If ``direction`` is not ``asc`` / ``desc``.
        """
        direction = Direction.parse(direction)
        column = column.strip()
        orders = self._union_orders if self._unions else self._orders
        for index, item in enumerate(orders):
            if isinstance(item, tuple) and item[0] == column:
                orders[index] = (column, direction)
                return self
        orders.append((column, direction))
        return self

    def order_by_raw(self, sql: str, bindings: Iterable[Any] = ()) -> Self:
        expr = Expression(sql, tuple(bindings))
        if expr.is_empty:
            return self
        orders = self._union_orders if self._unions else self._orders
        orders.append(expr)
        return self

    def limit(self, limit: int) -> Self:
        """Set the row limit.

        Raises:
            QueryBuilderError: If ``limit`` is not a non-negative integer.
        """
        _check_count(limit, "limit")
        if self._unions:
            self._union_limit = limit
        else:
            self._limit = limit
        return self

    def offset(self, offset: int) -> Self:
        """Set the row offset; an offset of 0 is not rendered.

        Raises:
            QueryBuilderError: If ``offset`` is not a non-negative integer.
        """
        _check_count(offset, "offset")
        if self._unions:
            self._union_offset = offset
        else:
            self._offset = offset
        return self

    # ------------------------------------------------------------------
    # Unions
    # ------------------------------------------------------------------

    def union(
        self,
        query: SelectQuery | Callable[[SelectQuery], Any],
        is_all: bool = False,
    ) -> Self:
        """Append a union branch, given as a query or a callback filling a new one."""
        if not isinstance(query, SelectQuery):
            callback = query
            query = self.new_instance()
            callback(query)
        self._unions.append(UnionClause(query, is_all))
        return self

    def union_all(self, query: SelectQuery | Callable[[SelectQuery], Any]) -> Self:
        return self.union(query, is_all=True)

    # ------------------------------------------------------------------
    # Accessors read by the compiler
    # ------------------------------------------------------------------

    @property
    def table_ref(self) -> TableReference | None:
        return self._table

    @property
    def columns(self) -> list[SelectColumn]:
        return list(self._columns)

    @property
    def is_distinct(self) -> bool:
        return self._is_distinct

    @property
    def joins(self) -> list[JoinClause]:
        return list(self._joins)

    @property
    def groups(self) -> list[str | Expression]:
        return list(self._groups)

    @property
    def having_clause(self) -> HavingClause | None:
        return self._having

    @property
    def orders(self) -> list[OrderByItem]:
        return list(self._orders)

    @property
    def limit_count(self) -> int | None:
        return self._limit

    @property
    def offset_count(self) -> int | None:
        return self._offset

    @property
    def unions(self) -> list[UnionClause]:
        return list(self._unions)

    @property
    def union_orders(self) -> list[OrderByItem]:
        return list(self._union_orders)

    @property
    def union_limit_count(self) -> int | None:
        return self._union_limit

    @property
    def union_offset_count(self) -> int | None:
        return self._union_offset


def _check_count(count: Any, argument: str) -> None:
    # bool is an int subclass but never a row count
    if isinstance(count, bool) or not isinstance(count, int):
        raise QueryBuilderError(
            f"{argument.capitalize()} must be an integer, got {type(count).__name__}",
            argument=argument,
        )
    if count < 0:
        raise QueryBuilderError(
            f"{argument.capitalize()} must be greater than 0", argument=argument
        )


def _normalize_columns(columns: tuple[Any, ...]) -> list[SelectColumn]:
    if len(columns) == 1 and isinstance(columns[0], (list, tuple)):
        columns = tuple(columns[0])
    if not columns:
        return ["*"]
    result: list[SelectColumn] = []
    for column in columns:
        if isinstance(column, Expression):
            result.append(column)
        elif isinstance(column, str):
            result.append(column.strip() or "*")
        elif not column:
            result.append("*")
        elif isinstance(column, Mapping):
            for name, alias in column.items():
                if not isinstance(name, str) or not isinstance(alias, str) or not alias.strip():
                    raise _column_error()
                result.append(f"{name.strip() or '*'} as {alias.strip()}")
        elif isinstance(column, (list, tuple)):
            for name in column:
                if not isinstance(name, str):
                    raise _column_error()
                result.append(name.strip() or "*")
        else:
            raise _column_error()
    return result


def _column_error() -> QueryBuilderError:
    return QueryBuilderError("Column must be a string or key-value mapping", argument="columns")
