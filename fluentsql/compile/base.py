"""Grammar abstraction: the dialect collaborator of the query compiler.

The Strategy pattern is used: :class:`~fluentsql.compile.compiler.QueryCompiler`
owns the statement layout, and a ``Grammar`` supplies the database-specific
identifier quoting.  ``MySqlGrammar``, ``PgSqlGrammar`` and ``SqliteGrammar``
are the built-in strategies.
"""
from __future__ import annotations

from abc import ABC, abstractmethod


class Grammar(ABC):
    """Abstract base for dialect-specific identifier rules."""

    @property
    @abstractmethod
    def quote_char(self) -> str:
        """Return the character that opens and closes a quoted identifier."""

    @property
    @abstractmethod
    def dialect_name(self) -> str:
        """Return the canonical dialect name (e.g. ``'mysql'``)."""

    def wrap_identifier(self, name: str) -> str:
        """Return ``name`` quoted for this dialect.

        Embedded quote characters are doubled, so the result is always a
        single identifier token.

        Args:
            name: A single, unqualified identifier segment.

        Returns:
            Quoted identifier.
        """
        quote = self.quote_char
        escaped = name.replace(quote, quote * 2)
        return f"{quote}{escaped}{quote}"

    def is_wrapped(self, name: str) -> bool:
        """True when ``name`` is exactly one identifier in this dialect's quotes.

        Quote characters inside must be doubled; ``"`a` = 1 or `b`"`` starts
        and ends with a backtick but is not a single quoted identifier.
        """
        quote = self.quote_char
        if len(name) < 2 or not (name.startswith(quote) and name.endswith(quote)):
            return False
        return quote not in name[1:-1].replace(quote * 2, "")

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
