"""Clause objects owning a predicate tree or nested queries.

Classes
-------
WhereClause  : ``where ...`` predicates
HavingClause : ``having ...`` predicates
JoinClause   : ``<type> join <table> on ...``
UnionClause  : ``union [all] (<query>)``
WithClause   : ``with [recursive] <alias> as (<query>), ...``

Each predicate clause owns exactly one
:class:`~fluentsql.schema.conditions.ConditionGroup`; it is never shared with
another clause.
"""
from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from fluentsql.query.mixins import MISSING, ColumnArg, ConditionBuilderMixin, WhereAliasMixin
from fluentsql.schema.conditions import ConditionGroup
from fluentsql.schema.expression import Expression
from fluentsql.schema.table_reference import JoinType, TableReference

if TYPE_CHECKING:
    from fluentsql.query.base import BaseQuery


class WhereClause(ConditionBuilderMixin, WhereAliasMixin):
    """Predicates of a ``where`` clause; also the argument of ``where`` callbacks."""

    def __init__(self, conditions: ConditionGroup | None = None) -> None:
        self._conditions = conditions if conditions is not None else ConditionGroup()

    def where(
        self,
        column: ColumnArg,
        operator_or_value: Any = MISSING,
        value: Any = MISSING,
    ) -> WhereClause:
        return self._add(column, operator_or_value, value)

    def or_where(
        self,
        column: ColumnArg,
        operator_or_value: Any = MISSING,
        value: Any = MISSING,
    ) -> WhereClause:
        return self._add(column, operator_or_value, value, is_or=True)

    def where_raw(self, sql: str, bindings: Iterable[Any] = ()) -> WhereClause:
        return self._add_condition(Expression(sql, tuple(bindings)))

    def or_where_raw(self, sql: str, bindings: Iterable[Any] = ()) -> WhereClause:
        return self._add_condition(Expression(sql, tuple(bindings)), is_or=True)


class HavingClause(ConditionBuilderMixin):
    """Predicates of a ``having`` clause; also the argument of ``having`` callbacks."""

    def __init__(self, conditions: ConditionGroup | None = None) -> None:
        self._conditions = conditions if conditions is not None else ConditionGroup()

    def having(
        self,
        column: ColumnArg,
        operator_or_value: Any = MISSING,
        value: Any = MISSING,
    ) -> HavingClause:
        return self._add(column, operator_or_value, value)

    def or_having(
        self,
        column: ColumnArg,
        operator_or_value: Any = MISSING,
        value: Any = MISSING,
    ) -> HavingClause:
        return self._add(column, operator_or_value, value, is_or=True)

    def having_raw(self, sql: str, bindings: Iterable[Any] = ()) -> HavingClause:
        return self._add_condition(Expression(sql, tuple(bindings)))

    def or_having_raw(self, sql: str, bindings: Iterable[Any] = ()) -> HavingClause:
        return self._add_condition(Expression(sql, tuple(bindings)), is_or=True)


class JoinClause(ConditionBuilderMixin, WhereAliasMixin):
    """A joined table and its ``on`` predicates.

    ``on`` / ``or_on`` compare two identifiers (no bindings); ``where`` /
    ``or_where`` and the where aliases compare against bound values::

        query.join("orders", lambda j: j.on("users.id", "orders.user_id")
                                        .where("orders.status", "paid"))

    Args:
        table: The joined table reference.
        join_type: ``inner`` / ``left`` / ``right``.
        conditions: Predicate tree; a fresh group when omitted.
    """

    def __init__(
        self,
        table: TableReference,
        join_type: JoinType = JoinType.INNER,
        conditions: ConditionGroup | None = None,
    ) -> None:
        self._table = table
        self._join_type = join_type
        self._conditions = conditions if conditions is not None else ConditionGroup()

    @property
    def table(self) -> TableReference:
        return self._table

    @property
    def join_type(self) -> JoinType:
        return self._join_type

    def new_instance(self) -> JoinClause:
        return JoinClause(self._table, self._join_type)

    def on(
        self,
        first: ColumnArg,
        operator_or_second: Any = MISSING,
        second: Any = MISSING,
    ) -> JoinClause:
        return self._add(first, operator_or_second, second, right_is_column=True)

    def or_on(
        self,
        first: ColumnArg,
        operator_or_second: Any = MISSING,
        second: Any = MISSING,
    ) -> JoinClause:
        return self._add(first, operator_or_second, second, is_or=True, right_is_column=True)

    def where(
        self,
        column: ColumnArg,
        operator_or_value: Any = MISSING,
        value: Any = MISSING,
    ) -> JoinClause:
        return self._add(column, operator_or_value, value)

    def or_where(
        self,
        column: ColumnArg,
        operator_or_value: Any = MISSING,
        value: Any = MISSING,
    ) -> JoinClause:
        return self._add(column, operator_or_value, value, is_or=True)


class UnionClause:
    """A query appended with ``union`` / ``union all``."""

    def __init__(self, query: BaseQuery, is_all: bool = False) -> None:
        self._query = query
        self._is_all = is_all

    @property
    def query(self) -> BaseQuery:
        return self._query

    @property
    def is_all(self) -> bool:
        return self._is_all


class WithClause:
    """Common table expressions, kept in declaration order."""

    def __init__(self, is_recursive: bool = False) -> None:
        self._queries: dict[str, BaseQuery] = {}
        self._is_recursive = is_recursive

    def add(self, alias: str, query: BaseQuery) -> WithClause:
        self._queries[alias] = query
        return self

    def set_recursive(self, is_recursive: bool = True) -> WithClause:
        self._is_recursive = is_recursive
        return self

    @property
    def queries(self) -> dict[str, BaseQuery]:
        return dict(self._queries)

    @property
    def is_recursive(self) -> bool:
        return self._is_recursive

    @property
    def is_empty(self) -> bool:
        return not self._queries
