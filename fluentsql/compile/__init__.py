"""fluentsql compilation layer: query objects → ``(sql, bindings)``."""
from fluentsql.compile.base import Grammar
from fluentsql.compile.compiler import QueryCompiler
from fluentsql.compile.conditions import ConditionsCompiler
from fluentsql.compile.identifiers import IdentifierWrapper
from fluentsql.compile.mysql import MySqlGrammar
from fluentsql.compile.postgres import PgSqlGrammar
from fluentsql.compile.registry import GrammarRegistry, default_registry
from fluentsql.compile.sqlite import SqliteGrammar

__all__ = [
    "Grammar",
    "QueryCompiler",
    "ConditionsCompiler",
    "IdentifierWrapper",
    "MySqlGrammar",
    "PgSqlGrammar",
    "SqliteGrammar",
    "GrammarRegistry",
    "default_registry",
]
