"""Leaf and structural clause nodes of the SQL AST.

Every node is a frozen pydantic model: it is built once (usually through the
helpers at the bottom of this module or the statement builders) and never
mutated afterwards.  Rendering is a double dispatch: ``Clause.compile`` hands the
node to the matching ``visit_*`` method of the compiler carried by the
:class:`~sqlclause.compile.context.CompilerContext`.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict

from sqlclause.errors import InvalidClauseError

if TYPE_CHECKING:
    from sqlclause.compile.base import CompiledSQL
    from sqlclause.compile.context import CompilerContext
    from sqlclause.compile.dialect import Dialect
    from sqlclause.schema.expressions import (
        BinaryExpressionClause,
        OrderByClause,
    )
    from sqlclause.schema.statements import (
        DeleteStmt,
        InsertStmt,
        SelectStmt,
        UpdateStmt,
        UpsertStmt,
    )


class Clause(BaseModel, ABC):
    """Abstract SQL AST node.

    Subclasses implement :meth:`compile`, which must return a complete SQL
    fragment for the node without any statement terminator.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @abstractmethod
    def compile(self, ctx: CompilerContext) -> str:
        """Render this node through ``ctx.compiler``."""

    def default_name(self) -> str:
        """Name used to qualify columns when this clause is a FROM target."""
        return ""

    def build(self, dialect: Dialect | str) -> CompiledSQL:
        """Compile this clause with ``dialect``.

        Shortcut for :func:`~sqlclause.compile.context.compile_clause`.
        """
        from sqlclause.compile.context import compile_clause

        return compile_clause(self, dialect)


def to_clause(value: Any) -> Clause:
    """Return ``value`` unchanged if it is a clause, else wrap it in a bind."""
    if isinstance(value, Clause):
        return value
    return BindClause(value=value)


class TextClause(Clause):
    """Raw SQL passed through verbatim."""

    text: str

    def compile(self, ctx: CompilerContext) -> str:
        return ctx.compiler.visit_text(ctx, self)


class BindClause(Clause):
    """A value rendered as a placeholder and appended to the bind list."""

    value: Any = None

    def compile(self, ctx: CompilerContext) -> str:
        return ctx.compiler.visit_bind(ctx, self)


class ColumnElem(Clause):
    """A column reference; identity is ``(table, name)``.

    Comparison helpers build binary expressions.  Right-hand values that are
    not clauses are bound, never inlined::

        users.c("id").eq(5)            # users.id = ?   binds [5]
        users.c("id").in_(1, 2, 3)     # users.id IN (?, ?, ?)
    """

    table: str
    name: str

    def compile(self, ctx: CompilerContext) -> str:
        return ctx.compiler.visit_column(ctx, self)

    # ------------------------------------------------------------------
    # Expression helpers
    # ------------------------------------------------------------------

    def _binary(self, op: str, right: Any) -> BinaryExpressionClause:
        from sqlclause.schema.expressions import BinaryExpressionClause

        return BinaryExpressionClause(left=self, op=op, right=to_clause(right))

    def eq(self, value: Any) -> BinaryExpressionClause:
        return self._binary("=", value)

    def ne(self, value: Any) -> BinaryExpressionClause:
        return self._binary("!=", value)

    def gt(self, value: Any) -> BinaryExpressionClause:
        return self._binary(">", value)

    def gte(self, value: Any) -> BinaryExpressionClause:
        return self._binary(">=", value)

    def lt(self, value: Any) -> BinaryExpressionClause:
        return self._binary("<", value)

    def lte(self, value: Any) -> BinaryExpressionClause:
        return self._binary("<=", value)

    def like(self, pattern: Any) -> BinaryExpressionClause:
        return self._binary("LIKE", pattern)

    def not_like(self, pattern: Any) -> BinaryExpressionClause:
        return self._binary("NOT LIKE", pattern)

    def in_(self, *values: Any) -> BinaryExpressionClause:
        return self._binary("IN", ListClause(clauses=tuple(to_clause(v) for v in values)))

    def not_in(self, *values: Any) -> BinaryExpressionClause:
        return self._binary("NOT IN", ListClause(clauses=tuple(to_clause(v) for v in values)))

    def is_null(self) -> BinaryExpressionClause:
        return self._binary("IS", TextClause(text="NULL"))

    def is_not_null(self) -> BinaryExpressionClause:
        return self._binary("IS NOT", TextClause(text="NULL"))

    def label(self, name: str) -> AliasClause:
        return AliasClause(selectable=self, name=name)

    def asc(self) -> OrderByClause:
        from sqlclause.schema.expressions import OrderByClause

        return OrderByClause(columns=(self,), direction="ASC")

    def desc(self) -> OrderByClause:
        from sqlclause.schema.expressions import OrderByClause

        return OrderByClause(columns=(self,), direction="DESC")


class TableElem(Clause):
    """A table reference.

    Attributes:
        name: Table name.  Also used as the default table of statements built
            on it, which lets the compiler drop the ``table.`` prefix of its
            own columns.
        columns: Declared column names.  When empty, :meth:`c` accepts any
            name.
    """

    name: str
    columns: tuple[str, ...] = ()

    def compile(self, ctx: CompilerContext) -> str:
        return ctx.compiler.visit_table(ctx, self)

    def default_name(self) -> str:
        return self.name

    def c(self, name: str) -> ColumnElem:
        """Return the column ``name`` of this table.

        Raises:
            InvalidClauseError: If columns are declared and ``name`` is not
                one of them.
        """
        if self.columns and name not in self.columns:
            raise InvalidClauseError(
                f"Table '{self.name}' has no column '{name}'. "
                f"Declared columns: {list(self.columns)}.",
                clause="column",
            )
        return ColumnElem(table=self.name, name=name)

    # ------------------------------------------------------------------
    # Statement shortcuts
    # ------------------------------------------------------------------

    def select(self, *clauses: Clause) -> SelectStmt:
        from sqlclause.schema.statements import select

        return select(*clauses).select_from(self)

    def insert(self) -> InsertStmt:
        from sqlclause.schema.statements import insert

        return insert(self)

    def update(self) -> UpdateStmt:
        from sqlclause.schema.statements import update

        return update(self)

    def delete(self) -> DeleteStmt:
        from sqlclause.schema.statements import delete

        return delete(self)

    def upsert(self) -> UpsertStmt:
        from sqlclause.schema.statements import upsert

        return upsert(self)


class ListClause(Clause):
    """Parenthesised, comma-separated list of clauses."""

    clauses: tuple[Clause, ...]

    def compile(self, ctx: CompilerContext) -> str:
        return ctx.compiler.visit_list(ctx, self)


class AliasClause(Clause):
    """``<selectable> AS <name>``."""

    selectable: Clause
    name: str

    def compile(self, ctx: CompilerContext) -> str:
        return ctx.compiler.visit_alias(ctx, self)

    def default_name(self) -> str:
        return self.name


# ---------------------------------------------------------------------------
# Constructors
# ---------------------------------------------------------------------------


def text(sql: str) -> TextClause:
    return TextClause(text=sql)


def bind(value: Any) -> BindClause:
    return BindClause(value=value)


def column(table: str, name: str) -> ColumnElem:
    return ColumnElem(table=table, name=name)


def table(name: str, *columns: str) -> TableElem:
    """Declare a table, optionally listing its columns::

        users = table("users", "id", "email")
        users.c("email")
    """
    return TableElem(name=name, columns=tuple(columns))


def list_(*clauses: Any) -> ListClause:
    return ListClause(clauses=tuple(to_clause(c) for c in clauses))


def alias(selectable: Clause, name: str) -> AliasClause:
    return AliasClause(selectable=selectable, name=name)
