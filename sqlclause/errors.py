"""Custom exception hierarchy for sqlclause.

All public errors inherit from SqlClauseError so callers can catch the base
class for any sqlclause-specific failure.
"""
from __future__ import annotations


class SqlClauseError(Exception):
    """Base exception for all sqlclause errors."""


class InvalidClauseError(SqlClauseError):
    """Raised when a clause is malformed at construction time.

    Construction-time validation keeps the compiler total: every clause that
    exists can be rendered.

    Args:
        message: Human-readable description.
        clause: Name of the clause kind being built (e.g. ``'AND'``).
    """

    def __init__(self, message: str, clause: str | None = None) -> None:
        super().__init__(message)
        self.clause = clause


class CompilationError(SqlClauseError):
    """Raised when SQL compilation fails.

    Args:
        message: Human-readable description.
        clause: The clause kind being compiled when the error occurred.
    """

    def __init__(self, message: str, clause: str | None = None) -> None:
        super().__init__(message)
        self.clause = clause


class UnsupportedOperationError(CompilationError):
    """Raised when the selected compiler does not implement an operation.

    The canonical case is UPSERT on the ANSI compiler: there is no portable
    SQL for it, so each dialect must provide its own rendering.

    Args:
        operation: The unsupported operation (e.g. ``'upsert'``).
        dialect: Name of the dialect that was compiling.
    """

    def __init__(self, operation: str, dialect: str) -> None:
        super().__init__(
            f"{operation.upper()} is not implemented by the '{dialect}' compiler; "
            "the dialect must override it.",
            clause=operation,
        )
        self.operation = operation
        self.dialect = dialect


class UnknownDialectError(SqlClauseError):
    """Raised when no dialect is registered under the requested name.

    Args:
        name: The requested dialect name.
        registered: Names that are registered.
    """

    def __init__(self, name: str, registered: list[str]) -> None:
        super().__init__(
            f"Unsupported dialect target: '{name}'. Registered targets: {registered}."
        )
        self.name = name
        self.registered = registered
