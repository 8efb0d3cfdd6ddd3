"""fluentsql – a fluent SQL query builder with injection-safe compilation.

Build statements one call at a time, compile them to ``(sql, bindings)``.

Public API
----------
``QueryBuilder``
    Entry point creating select / update / delete / insert / raw queries
    bound to a compiler (and optionally a connection).

``QueryCompiler``
    Turns a query object into an :class:`Expression` using a dialect
    :class:`Grammar`.

``Connection``
    Runs compiled queries on a ``qmark`` DB-API connection.

Example::

    from fluentsql import QueryBuilder

    qb = QueryBuilder.for_driver("mysql")
    query = (
        qb.select("id", "name")
        .from_("users")
        .where("is_active", True)
        .where(lambda w: w.where("role", "admin").or_where("karma", ">", 100))
        .order_by("name")
        .limit(10)
    )
    query.to_sql()
    # select `id`, `name` from `users` where `is_active` = ? and
    # (`role` = ? or `karma` > ?) order by `name` asc limit 10
    query.get_bindings()
    # [True, 'admin', 100]

Extensibility
-------------
Custom dialects are registered on a :class:`GrammarRegistry`::

    registry = default_registry()

    @registry.register("mariadb")
    class MariaDbGrammar(MySqlGrammar):
        ...

    qb = QueryBuilder.for_driver("mariadb", registry=registry)
"""

from __future__ import annotations

from fluentsql.builder import QueryBuilder
from fluentsql.compile.base import Grammar
from fluentsql.compile.compiler import QueryCompiler
from fluentsql.compile.mysql import MySqlGrammar
from fluentsql.compile.postgres import PgSqlGrammar
from fluentsql.compile.registry import GrammarRegistry, default_registry
from fluentsql.compile.sqlite import SqliteGrammar
from fluentsql.config import CompilerConfig, EmptyInPolicy
from fluentsql.connection import Connection
from fluentsql.errors import (
    CompilationError,
    FluentSQLError,
    QueryBuilderError,
    UnsupportedDriverError,
    UnsupportedOperatorError,
    UnsupportedQueryError,
)
from fluentsql.query import (
    DeleteQuery,
    HavingClause,
    InsertQuery,
    JoinClause,
    RawQuery,
    SelectQuery,
    UpdateQuery,
    WhereClause,
)
from fluentsql.schema import Condition, ConditionGroup, Expression, Operator

__all__ = [
    # Entry points
    "QueryBuilder",
    "QueryCompiler",
    "Connection",
    # Configuration
    "CompilerConfig",
    "EmptyInPolicy",
    # Grammars
    "Grammar",
    "GrammarRegistry",
    "default_registry",
    "MySqlGrammar",
    "PgSqlGrammar",
    "SqliteGrammar",
    # Queries and clauses
    "SelectQuery",
    "UpdateQuery",
    "DeleteQuery",
    "InsertQuery",
    "RawQuery",
    "WhereClause",
    "HavingClause",
    "JoinClause",
    # Values
    "Expression",
    "Condition",
    "ConditionGroup",
    "Operator",
    # Errors
    "FluentSQLError",
    "QueryBuilderError",
    "CompilationError",
    "UnsupportedOperatorError",
    "UnsupportedQueryError",
    "UnsupportedDriverError",
]
