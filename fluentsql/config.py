"""Compiler configuration.

``CompilerConfig`` is a small pydantic model so that plain dictionaries coming
from application settings are validated before they reach the compiler::

    config = CompilerConfig.from_mapping({"driver": "pgsql", "empty_in": "false"})
    compiler = QueryCompiler.for_driver(config.driver, config=config)
"""
from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class EmptyInPolicy(str, Enum):
    """How an ``IN`` / ``NOT IN`` predicate with an empty value list compiles.

    ``DROP``
        The predicate compiles to an empty fragment and disappears from the
        surrounding boolean expression.  This widens the result set: a
        ``where_in("id", [])`` matches every row.
    ``FALSE``
        ``IN ()`` compiles to ``0 = 1`` (never true) and ``NOT IN ()`` to
        ``1 = 1`` (always true), which preserves the logical meaning.
    """

    DROP = "drop"
    FALSE = "false"


class CompilerConfig(BaseModel):
    """Settings shared by every compilation run of a :class:`QueryCompiler`.

    Attributes:
        driver: Grammar tag looked up in a :class:`GrammarRegistry`.
        empty_in: Policy for empty ``IN`` value lists.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    driver: str = "mysql"
    empty_in: EmptyInPolicy = EmptyInPolicy.DROP

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> CompilerConfig:
        """Validate a plain mapping into a :class:`CompilerConfig`."""
        return cls.model_validate(data)
