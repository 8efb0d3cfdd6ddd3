"""SQLite grammar."""
from __future__ import annotations

from fluentsql.compile.base import Grammar


class SqliteGrammar(Grammar):
    """Quotes SQLite identifiers with ANSI double quotes.

    Compiled ``?`` placeholders match the ``qmark`` paramstyle of Python's
    built-in ``sqlite3`` module, so ``cursor.execute(sql, bindings)`` works
    as-is.
    """

    @property
    def quote_char(self) -> str:
        return '"'

    @property
    def dialect_name(self) -> str:
        return "sqlite"
