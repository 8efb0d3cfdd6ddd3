"""Predicate tree compiler.

``ConditionsCompiler`` turns a :class:`~fluentsql.schema.conditions.ConditionGroup`
into a single :class:`~fluentsql.schema.expression.Expression`.  Nested groups
are parenthesised, raw expressions pass through untouched, and every leaf
condition is dispatched on its :class:`~fluentsql.schema.operators.OperatorKind`.

Values never reach the SQL text: each one becomes a ``?`` placeholder and is
appended to the bindings in the same left-to-right order.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from fluentsql.compile.context import CompilationContext
from fluentsql.compile.identifiers import IdentifierWrapper
from fluentsql.config import EmptyInPolicy
from fluentsql.errors import CompilationError
from fluentsql.schema.conditions import Condition, ConditionGroup
from fluentsql.schema.expression import Expression
from fluentsql.schema.operators import (
    EXACT_EQUALITY_OPS,
    NEGATED_OPS,
    Operator,
    OperatorKind,
)

logger = logging.getLogger(__name__)


class ConditionsCompiler:
    """Compiles predicate trees (WHERE / HAVING / JOIN ON) to SQL.

    Args:
        ctx: Compilation context (grammar + config).
        wrap: Identifier wrapper; defaults to one built from ``ctx.grammar``.
    """

    def __init__(
        self,
        ctx: CompilationContext,
        wrap: IdentifierWrapper | None = None,
    ) -> None:
        self._ctx = ctx
        self._wrap = wrap or IdentifierWrapper(ctx.grammar)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def compile(self, group: ConditionGroup) -> Expression:
        """Compile ``group``; an empty or fully-dropped group yields an empty expression.

        A group whose only item is another group compiles as that inner group,
        so ``where(a).or_where(b)`` renders ``a or b`` rather than ``(a or b)``.
        """
        if len(group) == 1 and isinstance(group.last, ConditionGroup):
            return self.compile(group.last)
        return self._join(group, self._compile_items(group))

    def _compile_items(self, group: ConditionGroup) -> list[tuple[Expression, bool]]:
        """Compile each item of ``group``, skipping dropped ones.

        The flag is True for fragments that are safe to embed without
        parentheses: leaf conditions and already parenthesised groups.
        """
        compiled: list[tuple[Expression, bool]] = []
        for item in group:
            if isinstance(item, ConditionGroup):
                expr, atomic = self._compile_nested(item), True
            elif isinstance(item, Expression):
                expr, atomic = item, False
            else:
                expr, atomic = self.compile_condition(item), True
            if not expr.is_empty:
                compiled.append((expr, atomic))
        return compiled

    def _compile_nested(self, group: ConditionGroup) -> Expression:
        # a lone surviving leaf needs no parentheses
        compiled = self._compile_items(group)
        if len(compiled) == 1 and compiled[0][1]:
            return compiled[0][0]
        return self._join(group, compiled).wrap()

    @staticmethod
    def _join(group: ConditionGroup, compiled: list[tuple[Expression, bool]]) -> Expression:
        separator = " or " if group.is_or else " and "
        bindings: list[Any] = []
        for expr, _ in compiled:
            bindings.extend(expr.bindings)
        return Expression(separator.join(expr.sql for expr, _ in compiled), tuple(bindings))

    def compile_condition(self, condition: Condition) -> Expression:
        """Compile a single leaf condition.

        Raises:
            UnsupportedOperatorError: If the operator is not in the allow-list.
            CompilationError: If the value does not fit the operator.
        """
        op = Operator.parse(condition.operator)
        column = self._wrap(condition.column)

        if condition.value is None and op in EXACT_EQUALITY_OPS:
            return self._compile_null(column, op)

        kind = op.kind
        if kind is OperatorKind.MEMBERSHIP:
            return self._compile_in(column, op, condition)
        if kind is OperatorKind.RANGE:
            return self._compile_between(column, op, condition)
        if kind in (OperatorKind.COMPARISON, OperatorKind.PATTERN, OperatorKind.IDENTITY):
            return self._compile_default(column, op, condition)
        raise CompilationError(f"Cannot compile operator '{op.value}'", clause="conditions")

    # ------------------------------------------------------------------
    # Operator handlers
    # ------------------------------------------------------------------

    @staticmethod
    def _compile_null(column: str, op: Operator) -> Expression:
        keyword = "is" if op is Operator.EQ else "is not"
        return Expression(f"{column} {keyword} null")

    def _compile_in(self, column: str, op: Operator, condition: Condition) -> Expression:
        values = self._as_sequence(condition.value, op)
        if not values:
            return self._compile_empty_in(column, op)
        if condition.right_is_column:
            idents = ", ".join(self._wrap(v) for v in values)
            return Expression(f"{column} {op.value} ({idents})")
        placeholders = ", ".join("?" for _ in values)
        return Expression(f"{column} {op.value} ({placeholders})", tuple(values))

    def _compile_empty_in(self, column: str, op: Operator) -> Expression:
        if self._ctx.config.empty_in is EmptyInPolicy.FALSE:
            return Expression("1 = 1" if op in NEGATED_OPS else "0 = 1")
        logger.warning(
            "Empty value list for '%s %s' dropped from the predicate", column, op.value
        )
        return Expression()

    def _compile_between(self, column: str, op: Operator, condition: Condition) -> Expression:
        values = self._as_sequence(condition.value, op)
        if len(values) != 2:
            raise CompilationError(
                "There must be exactly two values for between condition",
                clause="conditions",
            )
        low, high = values
        if condition.right_is_column:
            return Expression(f"{column} {op.value} {self._wrap(low)} and {self._wrap(high)}")
        return Expression(f"{column} {op.value} ? and ?", (low, high))

    def _compile_default(self, column: str, op: Operator, condition: Condition) -> Expression:
        if condition.right_is_column:
            return Expression(f"{column} {op.value} {self._wrap(condition.value)}")
        return Expression(f"{column} {op.value} ?", (condition.value,))

    @staticmethod
    def _as_sequence(value: Any, op: Operator) -> list[Any]:
        if isinstance(value, (str, bytes)) or not isinstance(value, (Sequence, set, frozenset)):
            raise CompilationError(
                f"Operator '{op.value}' requires a sequence of values, got {type(value).__name__}",
                clause="conditions",
            )
        return list(value)
