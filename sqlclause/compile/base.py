"""Compiler abstractions: CompiledSQL and the ANSI SQLCompiler visitor.

The Visitor pattern (GoF) is used:
- Each :class:`~sqlclause.schema.elements.Clause` variant dispatches to one
  ``visit_*`` method of the compiler carried by the context.
- ``SQLCompiler`` renders ANSI SQL.  Dialect compilers (see ``postgres.py``,
  ``mysql.py``, ``sqlite.py``) subclass it and override individual steps,
  most notably :meth:`SQLCompiler.visit_upsert`.
"""
from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from sqlclause.errors import UnsupportedOperationError
from sqlclause.schema.elements import Clause
from sqlclause.schema.statements import SelectStmt

if TYPE_CHECKING:
    from sqlclause.compile.context import CompilerContext
    from sqlclause.schema.elements import (
        AliasClause,
        BindClause,
        ColumnElem,
        ListClause,
        TableElem,
        TextClause,
    )
    from sqlclause.schema.expressions import (
        AggregateClause,
        BinaryExpressionClause,
        CombinerClause,
        ExistsClause,
        HavingClause,
        JoinClause,
        OrderByClause,
        WhereClause,
    )
    from sqlclause.schema.statements import (
        DeleteStmt,
        InsertStmt,
        UpdateStmt,
        UpsertStmt,
    )


@dataclass
class CompiledSQL:
    """The output of a successful compilation.

    Unpacks as ``(sql, binds)``::

        sql, binds = compile_clause(stmt, "postgres")

    Attributes:
        sql: The rendered SQL string with dialect placeholders.
        binds: Bound values, one per placeholder, in the order the
            placeholders appear in ``sql``.
        dialect: Name of the dialect that rendered ``sql``.
    """

    sql: str
    binds: list[Any] = field(default_factory=list)
    dialect: str = "default"

    def __iter__(self) -> Iterator[Any]:
        yield self.sql
        yield self.binds


class SQLCompiler:
    """ANSI SQL rendering rules, one ``visit_*`` method per clause kind.

    The compiler is stateless; everything that changes during a compilation
    lives on the :class:`~sqlclause.compile.context.CompilerContext`.
    """

    # ------------------------------------------------------------------
    # Leaves
    # ------------------------------------------------------------------

    def visit_text(self, ctx: CompilerContext, text: TextClause) -> str:
        return text.text

    def visit_label(self, ctx: CompilerContext, label: str) -> str:
        return ctx.dialect.escape(label)

    def visit_table(self, ctx: CompilerContext, table: TableElem) -> str:
        return ctx.compiler.visit_label(ctx, table.name)

    def visit_bind(self, ctx: CompilerContext, bind: BindClause) -> str:
        return ctx.add_bind(bind.value)

    def visit_column(self, ctx: CompilerContext, column: ColumnElem) -> str:
        # Own-table columns are left bare, except in a sub-query where the
        # outer and inner tables may share column names.
        sql = ""
        if ctx.in_sub_query or ctx.default_table_name != column.table:
            sql += ctx.dialect.escape(column.table) + "."
        return sql + ctx.dialect.escape(column.name)

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def visit_alias(self, ctx: CompilerContext, alias: AliasClause) -> str:
        sql = alias.selectable.compile(ctx)
        if isinstance(alias.selectable, SelectStmt):
            sql = f"({sql})"
        return f"{sql} AS {ctx.dialect.escape(alias.name)}"

    def visit_aggregate(self, ctx: CompilerContext, aggregate: AggregateClause) -> str:
        return f"{aggregate.fn}({aggregate.clause.compile(ctx)})"

    def visit_binary(self, ctx: CompilerContext, binary: BinaryExpressionClause) -> str:
        left = binary.left.compile(ctx)
        right = binary.right.compile(ctx)
        return f"{left} {binary.op} {right}"

    def visit_combiner(self, ctx: CompilerContext, combiner: CombinerClause) -> str:
        sqls = [c.compile(ctx) for c in combiner.clauses]
        return "(" + f" {combiner.operator} ".join(sqls) + ")"

    def visit_list(self, ctx: CompilerContext, list_clause: ListClause) -> str:
        return "(" + ", ".join(c.compile(ctx) for c in list_clause.clauses) + ")"

    def visit_exists(self, ctx: CompilerContext, exists: ExistsClause) -> str:
        prefix = "NOT EXISTS" if exists.not_ else "EXISTS"
        with ctx.sub_query():
            return f"{prefix}({exists.select.compile(ctx)})"

    # ------------------------------------------------------------------
    # Clauses
    # ------------------------------------------------------------------

    def visit_join(self, ctx: CompilerContext, join: JoinClause) -> str:
        sql = f"{join.left.compile(ctx)}\n{join.join_type} {join.right.compile(ctx)}"
        if join.on_clause is not None:
            sql += " ON " + join.on_clause.compile(ctx)
        return sql

    def visit_where(self, ctx: CompilerContext, where: WhereClause) -> str:
        return f"WHERE {where.clause.compile(ctx)}"

    def visit_order_by(self, ctx: CompilerContext, order_by: OrderByClause) -> str:
        cols = ", ".join(c.compile(ctx) for c in order_by.columns)
        return f"ORDER BY {cols} {order_by.direction}"

    def visit_having(self, ctx: CompilerContext, having: HavingClause) -> str:
        return f"HAVING {ctx.compiler.visit_having_condition(ctx, having)}"

    def visit_having_condition(self, ctx: CompilerContext, having: HavingClause) -> str:
        """Render one HAVING condition without the keyword.

        Shared by single and combined HAVING lines, so dialects override
        this to change how each condition renders.
        """
        agg_sql = having.aggregate.compile(ctx)
        return f"{agg_sql} {having.op} {ctx.add_bind(having.value)}"

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def visit_select(self, ctx: CompilerContext, select: SelectStmt) -> str:
        if ctx.in_sub_query or select.from_table is None:
            return self._build_select(ctx, select)
        with ctx.default_table(select.from_table.default_name()):
            return self._build_select(ctx, select)

    def _build_select(self, ctx: CompilerContext, select: SelectStmt) -> str:
        lines: list[str] = []

        columns = [c.compile(ctx) for c in select.columns]
        lines.append(f"SELECT {', '.join(columns) if columns else '*'}")

        if select.from_table is not None:
            lines.append(f"FROM {select.from_table.compile(ctx)}")

        if select.where_clause is not None:
            lines.append(select.where_clause.compile(ctx))

        if select.group_by_columns:
            group_by = ", ".join(ctx.dialect.escape(c.name) for c in select.group_by_columns)
            lines.append(f"GROUP BY {group_by}")

        if len(select.having_clauses) == 1:
            lines.append(select.having_clauses[0].compile(ctx))
        elif select.having_clauses:
            conditions = [
                ctx.compiler.visit_having_condition(ctx, h) for h in select.having_clauses
            ]
            lines.append(f"HAVING {' AND '.join(conditions)}")

        if select.order_by_clause is not None:
            lines.append(select.order_by_clause.compile(ctx))

        if select.offset_value is not None and select.count_value is not None:
            lines.append(f"LIMIT {select.count_value} OFFSET {select.offset_value}")

        return "\n".join(lines)

    def visit_insert(self, ctx: CompilerContext, insert: InsertStmt) -> str:
        with ctx.default_table(insert.table.name):
            sql = self._build_insert(ctx, insert)
            return sql + self._returning(ctx, insert.returning_columns)

    def _build_insert(
        self,
        ctx: CompilerContext,
        insert: InsertStmt | UpsertStmt,
        keyword: str = "INSERT",
    ) -> str:
        """Render ``<keyword> INTO ... VALUES ...`` without the RETURNING part."""
        table_sql = insert.table.compile(ctx)
        col_names, values = self._render_values(ctx, insert.values_map)
        return f"{keyword} INTO {table_sql}({', '.join(col_names)})\nVALUES({', '.join(values)})"

    def visit_update(self, ctx: CompilerContext, update: UpdateStmt) -> str:
        sql = "UPDATE " + update.table.compile(ctx)

        col_names, values = self._render_values(ctx, update.values_map)
        sets = [f"{name} = {value}" for name, value in zip(col_names, values)]
        if sets:
            sql += "\nSET " + ", ".join(sets)

        if update.where_clause is not None:
            sql += "\n" + update.where_clause.compile(ctx)

        return sql + self._returning_names(ctx, update.returning_columns)

    def visit_delete(self, ctx: CompilerContext, delete: DeleteStmt) -> str:
        sql = "DELETE FROM " + delete.table.compile(ctx)

        if delete.where_clause is not None:
            sql += "\n" + delete.where_clause.compile(ctx)

        return sql + self._returning_names(ctx, delete.returning_columns)

    def visit_upsert(self, ctx: CompilerContext, upsert: UpsertStmt) -> str:
        raise UnsupportedOperationError("upsert", ctx.dialect.name)

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    def _render_values(
        self, ctx: CompilerContext, values: Mapping[str, Any]
    ) -> tuple[list[str], list[str]]:
        """Render ``values`` as parallel lists of column labels and values.

        Columns are sorted by name so output is deterministic.  Clause
        values are compiled in place; a SELECT value is parenthesised and
        rendered in sub-query scope.  Other values are bound.
        """
        col_names: list[str] = []
        rendered: list[str] = []
        for name in sorted(values):
            value = values[name]
            col_names.append(ctx.compiler.visit_label(ctx, name))
            if isinstance(value, SelectStmt):
                with ctx.sub_query():
                    rendered.append(f"({value.compile(ctx)})")
            elif isinstance(value, Clause):
                rendered.append(value.compile(ctx))
            else:
                rendered.append(ctx.add_bind(value))
        return col_names, rendered

    def _returning(self, ctx: CompilerContext, columns: tuple[ColumnElem, ...]) -> str:
        if not columns:
            return ""
        return "\nRETURNING " + ", ".join(c.compile(ctx) for c in columns)

    def _returning_names(self, ctx: CompilerContext, columns: tuple[ColumnElem, ...]) -> str:
        if not columns:
            return ""
        return "\nRETURNING " + ", ".join(ctx.dialect.escape(c.name) for c in columns)
