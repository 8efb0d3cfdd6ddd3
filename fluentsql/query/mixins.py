"""Fluent predicate API shared by clause objects and queries.

``ConditionBuilderMixin`` owns the algorithm that turns a sequence of
``where`` / ``or_where`` calls into a correctly parenthesised predicate tree:

* AND appends to the current group.
* OR merges the new predicate with the *last* item into an OR group, reusing
  that group when it already is one, so ``a or b or c`` stays flat.
* Single-item groups are squashed into their only item before insertion, so
  callbacks never produce redundant ``((a = 1))`` parentheses.

Because OR binds to the last item only, ``where(a).where(b).or_where(c)``
reads as ``a and (b or c)``.  Use a callback to group differently::

    query.where(lambda w: w.where("a", 1).or_where("b", 2)).where("c", 3)
    # where (`a` = ? or `b` = ?) and `c` = ?
"""
from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any, Self

from fluentsql.errors import QueryBuilderError
from fluentsql.schema.conditions import Condition, ConditionGroup, ConditionItem
from fluentsql.schema.expression import Expression

#: Marks an argument the caller did not pass (``None`` is a meaningful value).
MISSING: Any = object()

#: The column argument of every predicate method.
ColumnArg = str | Expression | Callable[[Any], Any]

#: Operators that, given without a value, compare against null.
_NULL_COMPARISON_OPS = ("=", "!=")


def parse_operator_value(operator_or_value: Any = MISSING, value: Any = MISSING) -> tuple[str, Any]:
    """Resolve the two-or-three argument predicate forms.

    ``where("a")`` → ``("=", None)``; ``where("a", 5)`` → ``("=", 5)``;
    ``where("a", ">", 5)`` → ``(">", 5)``.  A lone ``"="`` or ``"!="`` is an
    operator, not a value: ``where("a", "!=")`` → ``("!=", None)``, which
    compiles to ``a is not null``.
    """
    if value is MISSING:
        if isinstance(operator_or_value, str) and operator_or_value in _NULL_COMPARISON_OPS:
            return operator_or_value, None
        return "=", None if operator_or_value is MISSING else operator_or_value
    if not isinstance(operator_or_value, str):
        raise QueryBuilderError(
            f"Operator must be a string, got {type(operator_or_value).__name__}",
            argument="operator",
        )
    return operator_or_value, value


def squash(item: ConditionItem) -> ConditionItem | None:
    """Collapse a one-item group into that item; an empty group becomes ``None``."""
    while isinstance(item, ConditionGroup) and len(item) <= 1:
        if item.is_empty:
            return None
        item = item.items[0]
    return item


class ConditionBuilderMixin:
    """Turns fluent predicate calls into mutations of ``self._conditions``."""

    _conditions: ConditionGroup

    @property
    def conditions(self) -> ConditionGroup:
        return self._conditions

    def new_instance(self) -> Self:
        """Return an empty sibling clause handed to predicate callbacks."""
        return type(self)()

    def _add(
        self,
        column: ColumnArg,
        operator_or_value: Any = MISSING,
        value: Any = MISSING,
        *,
        is_or: bool = False,
        right_is_column: bool = False,
    ) -> Self:
        if isinstance(column, Expression):
            return self._add_condition(column, is_or)
        if callable(column):
            child = self.new_instance()
            column(child)
            return self._add_condition(child.conditions, is_or)
        if not isinstance(column, str) or not column.strip():
            raise QueryBuilderError(
                "Column must be a non-empty string, an Expression or a callable",
                argument="column",
            )
        operator, value = parse_operator_value(operator_or_value, value)
        return self._add_condition(
            Condition(column.strip(), operator, value, right_is_column), is_or
        )

    def _add_condition(self, item: ConditionItem, is_or: bool = False) -> Self:
        squashed = squash(item)
        if squashed is None or (isinstance(squashed, Expression) and squashed.is_empty):
            return self
        if not is_or:
            self._conditions.add(squashed)
            return self
        last = self._conditions.last
        if isinstance(last, ConditionGroup) and last.is_or:
            last.add(squashed)
            return self
        or_group = ConditionGroup(is_or=True)
        if last is not None:
            self._conditions.pop()
            or_group.add(last)
        or_group.add(squashed)
        self._conditions.add(squash(or_group))  # type: ignore[arg-type]
        return self


class WhereAliasMixin:
    """Shorthand predicates built on the host class's ``where`` / ``or_where``."""

    def where_in(self, column: ColumnArg, values: Iterable[Any]) -> Self:
        return self.where(column, "in", _as_list(values))

    def where_not_in(self, column: ColumnArg, values: Iterable[Any]) -> Self:
        return self.where(column, "not in", _as_list(values))

    def or_where_in(self, column: ColumnArg, values: Iterable[Any]) -> Self:
        return self.or_where(column, "in", _as_list(values))

    def or_where_not_in(self, column: ColumnArg, values: Iterable[Any]) -> Self:
        return self.or_where(column, "not in", _as_list(values))

    def where_between(self, column: ColumnArg, low: Any, high: Any) -> Self:
        return self.where(column, "between", [low, high])

    def where_not_between(self, column: ColumnArg, low: Any, high: Any) -> Self:
        return self.where(column, "not between", [low, high])

    def or_where_between(self, column: ColumnArg, low: Any, high: Any) -> Self:
        return self.or_where(column, "between", [low, high])

    def or_where_not_between(self, column: ColumnArg, low: Any, high: Any) -> Self:
        return self.or_where(column, "not between", [low, high])

    def where_null(self, column: ColumnArg) -> Self:
        return self.where(column, "=", None)

    def where_not_null(self, column: ColumnArg) -> Self:
        return self.where(column, "!=", None)

    def or_where_null(self, column: ColumnArg) -> Self:
        return self.or_where(column, "=", None)

    def or_where_not_null(self, column: ColumnArg) -> Self:
        return self.or_where(column, "!=", None)


def _as_list(values: Iterable[Any]) -> list[Any]:
    if isinstance(values, (str, bytes)):
        raise QueryBuilderError("Expected a collection of values, got a string", argument="values")
    return list(values)
