"""MySQL dialect."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlclause.compile.base import SQLCompiler
from sqlclause.compile.dialect import Dialect
from sqlclause.errors import UnsupportedOperationError

if TYPE_CHECKING:
    from sqlclause.compile.context import CompilerContext
    from sqlclause.schema.statements import UpsertStmt


class MySQLCompiler(SQLCompiler):
    """Adds ``INSERT ... ON DUPLICATE KEY UPDATE`` upserts.

    MySQL resolves conflicts against every unique index of the table, so
    ``conflict_keys`` only decides which columns are left out of the update.
    """

    def visit_upsert(self, ctx: CompilerContext, upsert: UpsertStmt) -> str:
        if upsert.returning_columns:
            raise UnsupportedOperationError("upsert returning", ctx.dialect.name)

        keys = {k.name for k in upsert.conflict_keys}
        updates = [
            f"{label} = VALUES({label})"
            for label in (
                ctx.compiler.visit_label(ctx, name)
                for name in sorted(upsert.values_map)
                if name not in keys
            )
        ]
        with ctx.default_table(upsert.table.name):
            if not updates:
                return self._build_insert(ctx, upsert, keyword="INSERT IGNORE")
            sql = self._build_insert(ctx, upsert)
        return f"{sql}\nON DUPLICATE KEY UPDATE {', '.join(updates)}"


class MySQLDialect(Dialect):
    """MySQL: ``?`` placeholders, backtick quoting.

    ``?`` is the positional style of ``mysql-connector-python`` prepared
    cursors.
    """

    quote_char = "`"
    compiler_class = MySQLCompiler

    @property
    def name(self) -> str:
        return "mysql"

    def placeholder(self) -> str:
        return "?"
