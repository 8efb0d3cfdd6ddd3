"""fluentsql schema types: expressions, conditions, operators, table references."""
from fluentsql.schema.conditions import Condition, ConditionGroup, ConditionItem
from fluentsql.schema.expression import Expression, ExpressionBuilder
from fluentsql.schema.operators import Operator, OperatorKind
from fluentsql.schema.table_reference import (
    Direction,
    JoinType,
    QueryType,
    TableReference,
)

__all__ = [
    "Condition",
    "ConditionGroup",
    "ConditionItem",
    "Expression",
    "ExpressionBuilder",
    "Operator",
    "OperatorKind",
    "Direction",
    "JoinType",
    "QueryType",
    "TableReference",
]
