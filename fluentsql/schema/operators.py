"""Condition operators and the groups the compiler dispatches on.

Conditions store their operator as a plain, normalised string so that any
value can be constructed; :meth:`Operator.parse` is the single place where the
allow-list is enforced, at compile time.
"""
from __future__ import annotations

from enum import Enum

from fluentsql.errors import UnsupportedOperatorError

# ---------------------------------------------------------------------------
# Operator kind enum
# ---------------------------------------------------------------------------


class OperatorKind(str, Enum):
    """Closed set of compilation strategies for a single condition."""

    COMPARISON = "comparison"
    MEMBERSHIP = "membership"
    RANGE = "range"
    PATTERN = "pattern"
    IDENTITY = "identity"


# ---------------------------------------------------------------------------
# Operator enum
# ---------------------------------------------------------------------------


class Operator(str, Enum):
    """Every operator a condition may use."""

    EQ = "="
    NE = "!="
    NE_ANSI = "<>"
    LT = "<"
    GT = ">"
    LTE = "<="
    GTE = ">="
    IN = "in"
    NOT_IN = "not in"
    BETWEEN = "between"
    NOT_BETWEEN = "not between"
    LIKE = "like"
    NOT_LIKE = "not like"
    IS = "is"
    IS_NOT = "is not"

    @classmethod
    def parse(cls, raw: str) -> Operator:
        """Return the operator matching ``raw``.

        Args:
            raw: Operator text; surrounding whitespace and case are ignored.

        Raises:
            UnsupportedOperatorError: If ``raw`` is not in the allow-list.
        """
        try:
            return cls(normalize_operator(raw))
        except ValueError:
            raise UnsupportedOperatorError(raw) from None

    @property
    def kind(self) -> OperatorKind:
        return _KINDS[self]


def normalize_operator(raw: str | Operator) -> str:
    """Lower-case ``raw`` and collapse inner whitespace (``"NOT  IN"`` → ``"not in"``)."""
    if isinstance(raw, Operator):
        return raw.value
    return " ".join(str(raw).lower().split())


_KINDS: dict[Operator, OperatorKind] = {
    Operator.EQ: OperatorKind.COMPARISON,
    Operator.NE: OperatorKind.COMPARISON,
    Operator.NE_ANSI: OperatorKind.COMPARISON,
    Operator.LT: OperatorKind.COMPARISON,
    Operator.GT: OperatorKind.COMPARISON,
    Operator.LTE: OperatorKind.COMPARISON,
    Operator.GTE: OperatorKind.COMPARISON,
    Operator.IN: OperatorKind.MEMBERSHIP,
    Operator.NOT_IN: OperatorKind.MEMBERSHIP,
    Operator.BETWEEN: OperatorKind.RANGE,
    Operator.NOT_BETWEEN: OperatorKind.RANGE,
    Operator.LIKE: OperatorKind.PATTERN,
    Operator.NOT_LIKE: OperatorKind.PATTERN,
    Operator.IS: OperatorKind.IDENTITY,
    Operator.IS_NOT: OperatorKind.IDENTITY,
}

# ---------------------------------------------------------------------------
# Operator groups
# ---------------------------------------------------------------------------

#: Operators whose ``None`` right-hand side collapses to ``is [not] null``.
EXACT_EQUALITY_OPS: frozenset[Operator] = frozenset(
    {Operator.EQ, Operator.NE, Operator.NE_ANSI}
)

#: Operators that negate their membership / range test.
NEGATED_OPS: frozenset[Operator] = frozenset(
    {Operator.NOT_IN, Operator.NOT_BETWEEN, Operator.NOT_LIKE, Operator.IS_NOT}
)
