"""Data-modifying and raw statements: UPDATE, DELETE, INSERT, raw SQL."""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any, Self

from fluentsql.errors import QueryBuilderError
from fluentsql.query.base import BaseQuery, CommonTableMixin, WhereMixin
from fluentsql.query.select import SelectQuery
from fluentsql.schema.expression import Expression
from fluentsql.schema.table_reference import QueryType, TableReference

if TYPE_CHECKING:
    from fluentsql.compile.compiler import QueryCompiler
    from fluentsql.connection import Connection

#: A SET entry: ``(column, value)``, or ``(None, raw_expression)``.
SetItem = tuple[str | None, Any]


class _TableQuery(BaseQuery):
    """A statement against a single table."""

    def __init__(
        self,
        table: str | TableReference,
        compiler: QueryCompiler | None = None,
        connection: Connection | None = None,
    ) -> None:
        super().__init__(compiler, connection)
        if isinstance(table, str):
            table = TableReference(table.strip())
        self._table = table

    @property
    def table_ref(self) -> TableReference:
        return self._table

    def subquery(self) -> SelectQuery:
        return SelectQuery(self._compiler, self._connection)


class UpdateQuery(WhereMixin, CommonTableMixin, _TableQuery):
    """``update <table> set ... [where ...]``.

    Example::

        builder.update("users").set({"name": "x", "age": 3}).where("id", 7)
        # update `users` set `name` = ?, `age` = ? where `id` = ?
    """

    query_type = QueryType.UPDATE

    def __init__(
        self,
        table: str | TableReference,
        compiler: QueryCompiler | None = None,
        connection: Connection | None = None,
    ) -> None:
        super().__init__(table, compiler, connection)
        self._values: list[SetItem] = []

    def set(self, column: str | Mapping[str, Any], value: Any = None) -> Self:
        """Assign one column, or every ``column: value`` pair of a mapping.

        Assigning a column twice keeps its first position and the last value.
        """
        if isinstance(column, Mapping):
            for name, val in column.items():
                self._set_single(name, val)
        else:
            self._set_single(column, value)
        return self

    def set_raw(self, sql: str, bindings: Iterable[Any] = ()) -> Self:
        self._values.append((None, Expression(sql, tuple(bindings))))
        return self

    @property
    def values(self) -> list[SetItem]:
        return list(self._values)

    def _set_single(self, column: str, value: Any) -> None:
        if not isinstance(column, str) or not column.strip():
            raise QueryBuilderError("Column must be a non-empty string", argument="column")
        column = column.strip()
        for index, (name, _) in enumerate(self._values):
            if name == column:
                self._values[index] = (column, value)
                return
        self._values.append((column, value))


class DeleteQuery(WhereMixin, CommonTableMixin, _TableQuery):
    """``delete from <table> [where ...]``."""

    query_type = QueryType.DELETE


class InsertQuery(_TableQuery):
    """``insert into <table> (<cols>) values (...), ...``.

    All rows must carry the same columns as the first row.
    """

    query_type = QueryType.INSERT

    def __init__(
        self,
        table: str | TableReference,
        compiler: QueryCompiler | None = None,
        connection: Connection | None = None,
    ) -> None:
        super().__init__(table, compiler, connection)
        self._rows: list[dict[str, Any]] = []

    def values(self, rows: Mapping[str, Any] | Iterable[Mapping[str, Any]]) -> Self:
        """Append one row (a mapping) or several rows (an iterable of mappings).

        Raises:
            QueryBuilderError: If a row is empty, is not a mapping, or its
                columns differ from the first row's.
        """
        if isinstance(rows, Mapping):
            rows = [rows]
        for row in rows:
            if not isinstance(row, Mapping) or not row:
                raise QueryBuilderError(
                    "Insert row must be a non-empty mapping", argument="values"
                )
            if self._rows and set(row) != set(self._rows[0]):
                raise QueryBuilderError(
                    f"Insert row columns {sorted(row)} differ from {sorted(self._rows[0])}",
                    argument="values",
                )
            self._rows.append(dict(row))
        return self

    def into(self, table: str) -> Self:
        self._table = TableReference(table.strip())
        return self

    @property
    def rows(self) -> list[dict[str, Any]]:
        return list(self._rows)


class RawQuery(BaseQuery):
    """A verbatim statement with positional bindings."""

    query_type = QueryType.RAW

    def __init__(
        self,
        sql: str,
        bindings: Iterable[Any] = (),
        compiler: QueryCompiler | None = None,
        connection: Connection | None = None,
    ) -> None:
        super().__init__(compiler, connection)
        self._expression = Expression(sql, tuple(bindings))

    @property
    def expression(self) -> Expression:
        return self._expression
