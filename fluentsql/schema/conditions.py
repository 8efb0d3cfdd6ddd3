"""The predicate tree: leaf conditions and AND/OR groups."""
from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, Union

from fluentsql.schema.expression import Expression
from fluentsql.schema.operators import normalize_operator


@dataclass(frozen=True)
class Condition:
    """A single ``column <operator> value`` predicate.

    The operator is normalised but not validated here; an operator outside the
    allow-list fails when the condition is compiled.

    Attributes:
        column: Left-hand identifier (``"age"``, ``"users.age"``).
        operator: Lower-cased, trimmed operator text.
        value: Right-hand value; a sequence for ``in`` / ``between``.
        right_is_column: Treat ``value`` as an identifier instead of a binding.
    """

    column: str
    operator: str
    value: Any = None
    right_is_column: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "operator", normalize_operator(self.operator))


#: Anything a :class:`ConditionGroup` may hold.
ConditionItem = Union[Condition, "ConditionGroup", Expression]


class ConditionGroup:
    """An ordered list of predicates combined by AND, or by OR when ``is_or``.

    Nested groups stand for parenthesised sub-expressions.  Clause objects
    mutate a group while the query is being built; compilers only read it.

    Args:
        is_or: Combine the items with ``or`` instead of ``and``.
    """

    def __init__(self, is_or: bool = False) -> None:
        self._items: list[ConditionItem] = []
        self._is_or = is_or

    def add(self, item: ConditionItem) -> ConditionGroup:
        self._items.append(item)
        return self

    def pop(self) -> ConditionItem | None:
        """Remove and return the last item, or ``None`` when empty."""
        if not self._items:
            return None
        return self._items.pop()

    @property
    def last(self) -> ConditionItem | None:
        return self._items[-1] if self._items else None

    @property
    def items(self) -> tuple[ConditionItem, ...]:
        return tuple(self._items)

    @property
    def is_or(self) -> bool:
        return self._is_or

    @property
    def is_empty(self) -> bool:
        return not self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[ConditionItem]:
        return iter(self._items)

    def __repr__(self) -> str:
        joiner = "or" if self._is_or else "and"
        return f"ConditionGroup({joiner}, {self._items!r})"
