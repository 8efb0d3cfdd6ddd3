"""PostgreSQL grammar."""

from __future__ import annotations

from fluentsql.compile.base import Grammar


class PgSqlGrammar(Grammar):
    """Quotes PostgreSQL identifiers with double quotes.

    Quoted identifiers are case-sensitive in PostgreSQL, so ``"Users"`` and
    ``"users"`` name different tables.
    """

    @property
    def quote_char(self) -> str:
        return '"'

    @property
    def dialect_name(self) -> str:
        return "pgsql"
