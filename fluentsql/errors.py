"""Custom exception hierarchy for fluentsql.

All public errors inherit from FluentSQLError so callers can catch the base
class for any fluentsql-specific failure.

Two families are distinguished by *when* they surface:

* :class:`QueryBuilderError` is raised immediately at the fluent-call site
  (negative limit, bad column shape, invalid sort direction, ...).
* :class:`CompilationError` is raised when the query is compiled
  (missing FROM table, unsupported operator, bad BETWEEN arity, ...).
"""
from __future__ import annotations


class FluentSQLError(Exception):
    """Base exception for all fluentsql errors."""


class QueryBuilderError(FluentSQLError):
    """Raised when a fluent builder method receives an invalid argument.

    Args:
        message: Human-readable description.
        argument: Name of the offending argument (e.g. ``'limit'``).
    """

    def __init__(self, message: str, argument: str | None = None) -> None:
        super().__init__(message)
        self.argument = argument


class CompilationError(FluentSQLError):
    """Raised when a query cannot be compiled to SQL.

    Args:
        message: Human-readable description.
        clause: The clause being compiled when the error occurred.
    """

    def __init__(self, message: str, clause: str | None = None) -> None:
        super().__init__(message)
        self.clause = clause


class UnsupportedOperatorError(CompilationError):
    """Raised when a condition uses an operator outside the allow-list."""

    def __init__(self, operator: str) -> None:
        super().__init__(f"Unsupported operator '{operator}'", clause="conditions")
        self.operator = operator


class UnsupportedQueryError(CompilationError):
    """Raised when the compiler has no handler for a query type."""

    def __init__(self, query_type: str) -> None:
        super().__init__(f"Cannot compile query: {query_type}")
        self.query_type = query_type


class UnsupportedDriverError(FluentSQLError):
    """Raised when no grammar is registered for a driver name.

    Args:
        driver: The requested driver tag.
        registered: Tags known to the registry at lookup time.
    """

    def __init__(self, driver: str, registered: list[str]) -> None:
        super().__init__(
            f"Unsupported driver '{driver}'. Registered drivers: {registered}."
        )
        self.driver = driver
        self.registered = registered
