"""SQLite dialect."""
from __future__ import annotations

from sqlclause.compile.dialect import Dialect
from sqlclause.compile.postgres import PostgresCompiler


class SQLiteCompiler(PostgresCompiler):
    """SQLite (3.24+) shares PostgreSQL's ``ON CONFLICT`` upsert syntax."""

    excluded_table = "excluded"


class SQLiteDialect(Dialect):
    """SQLite: ``?`` placeholders, ``"`` quoting.

    The ``?`` style matches Python's built-in ``sqlite3`` positional
    execution (``cursor.execute(sql, binds)``).
    """

    compiler_class = SQLiteCompiler

    @property
    def name(self) -> str:
        return "sqlite"

    def placeholder(self) -> str:
        return "?"
