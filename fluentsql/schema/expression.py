"""SQL fragment value type.

An :class:`Expression` pairs a piece of SQL text with the ordered values bound
to its ``?`` placeholders.  Every transform returns a new value, so fragments
can be composed freely without losing binding order.
"""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from fluentsql.errors import FluentSQLError


@dataclass(frozen=True)
class Expression:
    """An immutable SQL fragment with positional bindings.

    Attributes:
        sql: SQL text, stripped of surrounding whitespace.
        bindings: Values for the ``?`` placeholders in ``sql``, left to right.
    """

    sql: str = ""
    bindings: tuple[Any, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "sql", self.sql.strip())
        object.__setattr__(self, "bindings", tuple(self.bindings))

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_expressions(cls, *expressions: Expression) -> Expression:
        """Merge ``expressions`` left to right into a single fragment.

        Raises:
            FluentSQLError: If no expression is given.
        """
        if not expressions:
            raise FluentSQLError("Empty list of expressions")
        first, *rest = expressions
        return first.merge(*rest)

    # ------------------------------------------------------------------
    # Transforms
    # ------------------------------------------------------------------

    def merge(self, *expressions: Expression | None) -> Expression:
        """Concatenate fragments with single spaces.

        Empty fragments and ``None`` are skipped together with their bindings,
        so the result never gains a stray separator.
        """
        parts: list[str] = []
        bindings: list[Any] = []
        for expr in (self, *expressions):
            if expr is None or expr.is_empty:
                continue
            parts.append(expr.sql)
            bindings.extend(expr.bindings)
        return Expression(" ".join(parts), tuple(bindings))

    def wrap(self, before: str = "(", after: str = ")") -> Expression:
        """Surround the SQL text, by default with parentheses."""
        if self.is_empty:
            return self
        return Expression(f"{before}{self.sql}{after}", self.bindings)

    def prefix(self, text: str) -> Expression:
        """Prepend ``text`` (e.g. ``"where "``) to a non-empty fragment."""
        if self.is_empty:
            return self
        return Expression(f"{text}{self.sql}", self.bindings)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def is_empty(self) -> bool:
        return not self.sql

    def to_tuple(self) -> tuple[str, list[Any]]:
        """Return the ``(sql, bindings)`` pair handed to a database driver."""
        return self.sql, list(self.bindings)


class ExpressionBuilder:
    """Accumulates fragments and renders them as one :class:`Expression`.

    Args:
        prefix: Text placed before the joined fragments.
        suffix: Text placed after the joined fragments.
        separator: Text placed between fragments.
    """

    def __init__(
        self,
        prefix: str = "",
        suffix: str = "",
        separator: str = ", ",
    ) -> None:
        self._prefix = prefix
        self._suffix = suffix
        self._separator = separator
        self._parts: list[str] = []
        self._bindings: list[Any] = []

    def add(self, sql: str, bindings: Iterable[Any] = ()) -> ExpressionBuilder:
        """Append a fragment; blank SQL is ignored together with its bindings."""
        sql = sql.strip()
        if not sql:
            return self
        self._parts.append(sql)
        self._bindings.extend(bindings)
        return self

    def add_expression(self, expr: Expression | None) -> ExpressionBuilder:
        if expr is None:
            return self
        return self.add(expr.sql, expr.bindings)

    def build(self) -> Expression:
        sql = self._separator.join(self._parts)
        if not sql:
            return Expression()
        return Expression(f"{self._prefix}{sql}{self._suffix}", tuple(self._bindings))
