"""PostgreSQL dialect."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlclause.compile.base import SQLCompiler
from sqlclause.compile.dialect import Dialect, DialectOptions
from sqlclause.errors import CompilationError

if TYPE_CHECKING:
    from sqlclause.compile.context import CompilerContext
    from sqlclause.schema.statements import UpsertStmt


class PostgresCompiler(SQLCompiler):
    """Adds ``INSERT ... ON CONFLICT ... DO UPDATE`` upserts."""

    #: Name of the pseudo-table holding the row proposed for insertion.
    excluded_table = "EXCLUDED"

    def visit_upsert(self, ctx: CompilerContext, upsert: UpsertStmt) -> str:
        if not upsert.conflict_keys:
            raise CompilationError(
                "Upsert requires at least one conflict key; call on_conflict().",
                clause="upsert",
            )
        with ctx.default_table(upsert.table.name):
            sql = self._build_insert(ctx, upsert)

            keys = [k.name for k in upsert.conflict_keys]
            conflict = ", ".join(ctx.dialect.escape(k) for k in keys)
            updates = [
                f"{label} = {self.excluded_table}.{label}"
                for label in (
                    ctx.compiler.visit_label(ctx, name)
                    for name in sorted(upsert.values_map)
                    if name not in keys
                )
            ]
            if updates:
                sql += f"\nON CONFLICT ({conflict}) DO UPDATE SET {', '.join(updates)}"
            else:
                sql += f"\nON CONFLICT ({conflict}) DO NOTHING"

            return sql + self._returning(ctx, upsert.returning_columns)


class PostgresDialect(Dialect):
    """PostgreSQL: numbered ``$1, $2, ...`` placeholders, ``"`` quoting.

    Placeholder numbering restarts at ``$1`` after :meth:`reset`.
    """

    compiler_class = PostgresCompiler

    def __init__(self, options: DialectOptions | None = None) -> None:
        super().__init__(options)
        self._counter = 0

    @property
    def name(self) -> str:
        return "postgres"

    def placeholder(self) -> str:
        self._counter += 1
        return f"${self._counter}"

    def reset(self) -> None:
        self._counter = 0
