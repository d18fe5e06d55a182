"""Statement nodes and their fluent builders.

Builders never mutate: each chained call returns a modified copy, so a
partially configured statement can be reused as a template::

    base = select(users.c("id")).select_from(users)
    active = base.where(users.c("active").eq(True))
    recent = base.order_by(users.c("created_at")).desc().limit(0, 20)
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pydantic import Field

from sqlclause.errors import InvalidClauseError
from sqlclause.schema.elements import Clause, ColumnElem, TableElem
from sqlclause.schema.expressions import (
    AggregateClause,
    HavingClause,
    JoinClause,
    OrderByClause,
    WhereClause,
)

if TYPE_CHECKING:
    from sqlclause.compile.context import CompilerContext


def _as_where(clause: Clause) -> WhereClause:
    if isinstance(clause, WhereClause):
        return clause
    return WhereClause(clause=clause)


def _merge_values(
    current: Mapping[str, Any],
    mapping: Mapping[str, Any] | None,
    kwargs: Mapping[str, Any],
) -> dict[str, Any]:
    merged = dict(current)
    if mapping:
        merged.update(mapping)
    merged.update(kwargs)
    return merged


# ---------------------------------------------------------------------------
# SELECT
# ---------------------------------------------------------------------------


class SelectStmt(Clause):
    """A ``SELECT`` statement.

    Attributes:
        columns: Selected clauses (columns, aggregates, aliases, text).
        from_table: A table, a join tree, or an aliased sub-select.
        where_clause: Optional filter.
        group_by_columns: ``GROUP BY`` columns.
        having_clauses: ``HAVING`` conditions, rendered joined with ``AND``.
        order_by_clause: Optional ordering.
        offset_value: Rows to skip.  Rendered only together with ``count_value``.
        count_value: Maximum rows.  Rendered only together with ``offset_value``.
    """

    columns: tuple[Clause, ...] = ()
    from_table: Clause | None = None
    where_clause: WhereClause | None = None
    group_by_columns: tuple[ColumnElem, ...] = ()
    having_clauses: tuple[HavingClause, ...] = ()
    order_by_clause: OrderByClause | None = None
    offset_value: int | None = None
    count_value: int | None = None

    def compile(self, ctx: CompilerContext) -> str:
        return ctx.compiler.visit_select(ctx, self)

    def default_name(self) -> str:
        return self.from_table.default_name() if self.from_table is not None else ""

    # ------------------------------------------------------------------
    # Builder API
    # ------------------------------------------------------------------

    def select(self, *clauses: Clause) -> SelectStmt:
        """Replace the selected clauses."""
        return self.model_copy(update={"columns": tuple(clauses)})

    def select_from(self, table: Clause) -> SelectStmt:
        return self.model_copy(update={"from_table": table})

    def where(self, clause: Clause) -> SelectStmt:
        return self.model_copy(update={"where_clause": _as_where(clause)})

    def join(
        self,
        join_type: str,
        table: TableElem,
        on_clause: Clause | None = None,
    ) -> SelectStmt:
        """Join ``table`` onto the current FROM target.

        Raises:
            InvalidClauseError: If no FROM target has been set yet.
        """
        if self.from_table is None:
            raise InvalidClauseError(
                "A FROM table must be set before joining.", clause="JOIN"
            )
        joined = JoinClause(
            join_type=join_type, left=self.from_table, right=table, on_clause=on_clause
        )
        return self.model_copy(update={"from_table": joined})

    def inner_join(self, table: TableElem, from_col: ColumnElem, col: ColumnElem) -> SelectStmt:
        return self.join("INNER JOIN", table, from_col.eq(col))

    def left_join(self, table: TableElem, from_col: ColumnElem, col: ColumnElem) -> SelectStmt:
        return self.join("LEFT OUTER JOIN", table, from_col.eq(col))

    def right_join(self, table: TableElem, from_col: ColumnElem, col: ColumnElem) -> SelectStmt:
        return self.join("RIGHT OUTER JOIN", table, from_col.eq(col))

    def cross_join(self, table: TableElem) -> SelectStmt:
        return self.join("CROSS JOIN", table)

    def group_by(self, *columns: ColumnElem) -> SelectStmt:
        return self.model_copy(
            update={"group_by_columns": self.group_by_columns + tuple(columns)}
        )

    def having(self, aggregate: AggregateClause, op: str, value: Any) -> SelectStmt:
        having = HavingClause(aggregate=aggregate, op=op, value=value)
        return self.model_copy(update={"having_clauses": self.having_clauses + (having,)})

    def order_by(self, *columns: ColumnElem) -> SelectStmt:
        """Order by ``columns``, ascending until :meth:`desc` is called."""
        return self.model_copy(
            update={"order_by_clause": OrderByClause(columns=tuple(columns), direction="ASC")}
        )

    def asc(self) -> SelectStmt:
        return self._direction("ASC")

    def desc(self) -> SelectStmt:
        return self._direction("DESC")

    def _direction(self, direction: str) -> SelectStmt:
        if self.order_by_clause is None:
            raise InvalidClauseError(
                f"{direction} requires order_by() to be called first.", clause="ORDER BY"
            )
        order = OrderByClause(columns=self.order_by_clause.columns, direction=direction)
        return self.model_copy(update={"order_by_clause": order})

    def limit(self, offset: int | None, count: int | None) -> SelectStmt:
        """Set the offset and row count.

        Both must be set for ``LIMIT ... OFFSET ...`` to be rendered.
        """
        return self.model_copy(update={"offset_value": offset, "count_value": count})


# ---------------------------------------------------------------------------
# INSERT / UPDATE / DELETE / UPSERT
# ---------------------------------------------------------------------------


class InsertStmt(Clause):
    """``INSERT INTO <table>(<cols>) VALUES(<values>) [RETURNING ...]``.

    Values are keyed by column name.  A value that is a :class:`Clause` is
    compiled in place; anything else is bound.
    """

    table: TableElem
    values_map: dict[str, Any] = Field(default_factory=dict)
    returning_columns: tuple[ColumnElem, ...] = ()

    def compile(self, ctx: CompilerContext) -> str:
        return ctx.compiler.visit_insert(ctx, self)

    def values(self, mapping: Mapping[str, Any] | None = None, **kwargs: Any) -> InsertStmt:
        return self.model_copy(
            update={"values_map": _merge_values(self.values_map, mapping, kwargs)}
        )

    def returning(self, *columns: ColumnElem) -> InsertStmt:
        return self.model_copy(update={"returning_columns": tuple(columns)})


class UpdateStmt(Clause):
    """``UPDATE <table> SET ... [WHERE ...] [RETURNING ...]``."""

    table: TableElem
    values_map: dict[str, Any] = Field(default_factory=dict)
    where_clause: WhereClause | None = None
    returning_columns: tuple[ColumnElem, ...] = ()

    def compile(self, ctx: CompilerContext) -> str:
        return ctx.compiler.visit_update(ctx, self)

    def values(self, mapping: Mapping[str, Any] | None = None, **kwargs: Any) -> UpdateStmt:
        return self.model_copy(
            update={"values_map": _merge_values(self.values_map, mapping, kwargs)}
        )

    def where(self, clause: Clause) -> UpdateStmt:
        return self.model_copy(update={"where_clause": _as_where(clause)})

    def returning(self, *columns: ColumnElem) -> UpdateStmt:
        return self.model_copy(update={"returning_columns": tuple(columns)})


class DeleteStmt(Clause):
    """``DELETE FROM <table> [WHERE ...] [RETURNING ...]``."""

    table: TableElem
    where_clause: WhereClause | None = None
    returning_columns: tuple[ColumnElem, ...] = ()

    def compile(self, ctx: CompilerContext) -> str:
        return ctx.compiler.visit_delete(ctx, self)

    def where(self, clause: Clause) -> DeleteStmt:
        return self.model_copy(update={"where_clause": _as_where(clause)})

    def returning(self, *columns: ColumnElem) -> DeleteStmt:
        return self.model_copy(update={"returning_columns": tuple(columns)})


class UpsertStmt(Clause):
    """An insert that updates the existing row on key conflict.

    There is no ANSI rendering; the base compiler raises
    :class:`~sqlclause.errors.UnsupportedOperationError` and each dialect
    supplies its own syntax.

    Attributes:
        table: Target table.
        values_map: Column name to value.
        conflict_keys: Columns whose uniqueness triggers the update.
        returning_columns: Columns returned by the statement.
    """

    table: TableElem
    values_map: dict[str, Any] = Field(default_factory=dict)
    conflict_keys: tuple[ColumnElem, ...] = ()
    returning_columns: tuple[ColumnElem, ...] = ()

    def compile(self, ctx: CompilerContext) -> str:
        return ctx.compiler.visit_upsert(ctx, self)

    def values(self, mapping: Mapping[str, Any] | None = None, **kwargs: Any) -> UpsertStmt:
        return self.model_copy(
            update={"values_map": _merge_values(self.values_map, mapping, kwargs)}
        )

    def on_conflict(self, *columns: ColumnElem) -> UpsertStmt:
        return self.model_copy(update={"conflict_keys": tuple(columns)})

    def returning(self, *columns: ColumnElem) -> UpsertStmt:
        return self.model_copy(update={"returning_columns": tuple(columns)})


# ---------------------------------------------------------------------------
# Constructors
# ---------------------------------------------------------------------------


def select(*clauses: Clause) -> SelectStmt:
    return SelectStmt(columns=tuple(clauses))


def insert(table: TableElem) -> InsertStmt:
    return InsertStmt(table=table)


def update(table: TableElem) -> UpdateStmt:
    return UpdateStmt(table=table)


def delete(table: TableElem) -> DeleteStmt:
    return DeleteStmt(table=table)


def upsert(table: TableElem) -> UpsertStmt:
    return UpsertStmt(table=table)
