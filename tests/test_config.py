"""Unit tests for CompilerConfig."""
from __future__ import annotations

import pytest
from pydantic import ValidationError

from fluentsql import CompilerConfig, EmptyInPolicy, QueryBuilder


def test_defaults():
    config = CompilerConfig()
    assert config.driver == "mysql"
    assert config.empty_in is EmptyInPolicy.DROP


def test_from_mapping_coerces_enum():
    config = CompilerConfig.from_mapping({"driver": "pgsql", "empty_in": "false"})
    assert config.driver == "pgsql"
    assert config.empty_in is EmptyInPolicy.FALSE


def test_unknown_key_rejected():
    with pytest.raises(ValidationError):
        CompilerConfig.from_mapping({"dialect": "mysql"})


def test_invalid_policy_rejected():
    with pytest.raises(ValidationError):
        CompilerConfig(empty_in="explode")


def test_frozen():
    config = CompilerConfig()
    with pytest.raises(ValidationError):
        config.driver = "sqlite"  # type: ignore[misc]


def test_builder_uses_config_driver():
    qb = QueryBuilder.for_driver(config=CompilerConfig(driver="pgsql"))
    assert qb.table("t").to_sql() == 'select * from "t"'
    assert qb.compiler.config.driver == "pgsql"


def test_explicit_driver_overrides_config():
    qb = QueryBuilder.for_driver("sqlite", config=CompilerConfig(driver="mysql"))
    assert qb.compiler.grammar.dialect_name == "sqlite"
