"""Shared pytest fixtures for fluentsql unit and integration tests."""
from __future__ import annotations

import pytest

from fluentsql import CompilerConfig, EmptyInPolicy, QueryBuilder, SelectQuery


@pytest.fixture()
def mysql() -> QueryBuilder:
    """Builder for the backtick-quoting MySQL grammar."""
    return QueryBuilder.for_driver("mysql")


@pytest.fixture()
def pgsql() -> QueryBuilder:
    return QueryBuilder.for_driver("pgsql")


@pytest.fixture()
def sqlite_builder() -> QueryBuilder:
    return QueryBuilder.for_driver("sqlite")


@pytest.fixture()
def strict_mysql() -> QueryBuilder:
    """MySQL builder compiling empty IN lists to constant predicates."""
    return QueryBuilder.for_driver(config=CompilerConfig(empty_in=EmptyInPolicy.FALSE))


@pytest.fixture()
def query(mysql: QueryBuilder) -> SelectQuery:
    """``select * from `t``` ready for further clauses."""
    return mysql.select().from_("t")
