"""Table references and the small enums shared by queries and compilers."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from fluentsql.errors import QueryBuilderError


@dataclass(frozen=True)
class TableReference:
    """A table name with an optional alias.

    ``table`` may itself carry an inline alias (``"users as u"``); the
    identifier wrapper renders both forms identically.

    Attributes:
        table: Table name, optionally schema-qualified (``"app.users"``).
        alias: Optional alias emitted as ``<table> as <alias>``.
    """

    table: str
    alias: str | None = None

    def __str__(self) -> str:
        if self.alias:
            return f"{self.table} as {self.alias}"
        return self.table


class JoinType(str, Enum):
    """SQL join keyword, emitted as ``<value> join``."""

    INNER = "inner"
    LEFT = "left"
    RIGHT = "right"


class QueryType(str, Enum):
    """Statement kind; selects the compile routine in :class:`QueryCompiler`."""

    SELECT = "select"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
    RAW = "raw"


class Direction(str, Enum):
    """ORDER BY direction."""

    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, raw: str | Direction) -> Direction:
        """Case-insensitively parse ``raw``.

        Raises:
            QueryBuilderError: If ``raw`` is neither ``asc`` nor ``desc``.
        """
        if isinstance(raw, cls):
            return raw
        value = str(raw).strip().lower()
        try:
            return cls(value)
        except ValueError:
            raise QueryBuilderError(
                f"Invalid direction [{value}]", argument="direction"
            ) from None
