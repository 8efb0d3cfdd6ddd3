"""fluentsql query layer: statement objects and the clauses they own."""
from fluentsql.query.base import BaseQuery
from fluentsql.query.clauses import (
    HavingClause,
    JoinClause,
    UnionClause,
    WhereClause,
    WithClause,
)
from fluentsql.query.dml import DeleteQuery, InsertQuery, RawQuery, UpdateQuery
from fluentsql.query.select import SelectQuery

__all__ = [
    "BaseQuery",
    "SelectQuery",
    "UpdateQuery",
    "DeleteQuery",
    "InsertQuery",
    "RawQuery",
    "WhereClause",
    "HavingClause",
    "JoinClause",
    "UnionClause",
    "WithClause",
]
