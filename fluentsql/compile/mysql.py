"""MySQL grammar."""

from __future__ import annotations

from fluentsql.compile.base import Grammar


class MySqlGrammar(Grammar):
    """Quotes MySQL / MariaDB identifiers with backticks (`` ` ``).

    An embedded backtick is escaped by doubling it, so ``a`b`` becomes
    ``` `a``b` ```.
    """

    @property
    def quote_char(self) -> str:
        return "`"

    @property
    def dialect_name(self) -> str:
        return "mysql"
