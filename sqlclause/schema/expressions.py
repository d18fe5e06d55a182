"""Expression and clause-level nodes: operators, combiners, joins, filters.

Combiners are validated at construction time.  An ``AND`` / ``OR`` group
with no members is rejected with :class:`~sqlclause.errors.InvalidClauseError`
instead of being rendered as empty parentheses.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import model_validator

from sqlclause.errors import InvalidClauseError
from sqlclause.schema.elements import Clause, ColumnElem, TableElem, TextClause, to_clause

if TYPE_CHECKING:
    from sqlclause.compile.context import CompilerContext

COMBINER_OPERATORS: frozenset[str] = frozenset({"AND", "OR"})
ORDER_DIRECTIONS: frozenset[str] = frozenset({"ASC", "DESC"})


class BinaryExpressionClause(Clause):
    """``<left> <op> <right>``."""

    left: Clause
    op: str
    right: Clause

    def compile(self, ctx: CompilerContext) -> str:
        return ctx.compiler.visit_binary(ctx, self)


class CombinerClause(Clause):
    """A parenthesised ``AND`` / ``OR`` group of one or more clauses."""

    operator: str
    clauses: tuple[Clause, ...]

    @model_validator(mode="after")
    def _check_shape(self) -> CombinerClause:
        if self.operator not in COMBINER_OPERATORS:
            raise InvalidClauseError(
                f"Unknown combiner operator '{self.operator}'. "
                f"Expected one of {sorted(COMBINER_OPERATORS)}.",
                clause="combiner",
            )
        if not self.clauses:
            raise InvalidClauseError(
                f"{self.operator} requires at least one clause.", clause=self.operator
            )
        return self

    def compile(self, ctx: CompilerContext) -> str:
        return ctx.compiler.visit_combiner(ctx, self)


class ExistsClause(Clause):
    """``[NOT] EXISTS(<select>)``; the select is rendered in sub-query scope."""

    select: Clause
    not_: bool = False

    def compile(self, ctx: CompilerContext) -> str:
        return ctx.compiler.visit_exists(ctx, self)


class AggregateClause(Clause):
    """An aggregate function call such as ``COUNT(users.id)``."""

    fn: str
    clause: Clause

    def compile(self, ctx: CompilerContext) -> str:
        return ctx.compiler.visit_aggregate(ctx, self)


class JoinClause(Clause):
    """``<left>\\n<join_type> <right> [ON <on_clause>]``.

    ``left`` may itself be a join, so chained joins nest to the left.
    """

    join_type: str
    left: Clause
    right: TableElem
    on_clause: Clause | None = None

    def compile(self, ctx: CompilerContext) -> str:
        return ctx.compiler.visit_join(ctx, self)

    def default_name(self) -> str:
        return self.left.default_name()


class OrderByClause(Clause):
    """``ORDER BY <columns> <direction>``."""

    columns: tuple[ColumnElem, ...]
    direction: str = "ASC"

    @model_validator(mode="after")
    def _check_direction(self) -> OrderByClause:
        if self.direction not in ORDER_DIRECTIONS:
            raise InvalidClauseError(
                f"Unknown order direction '{self.direction}'.", clause="ORDER BY"
            )
        return self

    def compile(self, ctx: CompilerContext) -> str:
        return ctx.compiler.visit_order_by(ctx, self)


class HavingClause(Clause):
    """``HAVING <aggregate> <op> <bound value>``."""

    aggregate: AggregateClause
    op: str
    value: Any = None

    def compile(self, ctx: CompilerContext) -> str:
        return ctx.compiler.visit_having(ctx, self)


class WhereClause(Clause):
    """``WHERE <clause>``.

    :meth:`and_` and :meth:`or_` fold the current clause together with new
    ones into a single combiner, so chaining nests to the left::

        where(x).and_(a).or_(b)   # WHERE ((x AND a) OR b)
    """

    clause: Clause

    def compile(self, ctx: CompilerContext) -> str:
        return ctx.compiler.visit_where(ctx, self)

    def and_(self, *clauses: Clause) -> WhereClause:
        return WhereClause(clause=and_(self.clause, *clauses))

    def or_(self, *clauses: Clause) -> WhereClause:
        return WhereClause(clause=or_(self.clause, *clauses))


# ---------------------------------------------------------------------------
# Constructors
# ---------------------------------------------------------------------------


def and_(*clauses: Clause) -> CombinerClause:
    return CombinerClause(operator="AND", clauses=tuple(clauses))


def or_(*clauses: Clause) -> CombinerClause:
    return CombinerClause(operator="OR", clauses=tuple(clauses))


def where(clause: Clause) -> WhereClause:
    return WhereClause(clause=clause)


def binary(left: Any, op: str, right: Any) -> BinaryExpressionClause:
    """Build ``left op right``; non-clause operands are bound."""
    return BinaryExpressionClause(left=to_clause(left), op=op, right=to_clause(right))


def exists(select: Clause) -> ExistsClause:
    return ExistsClause(select=select)


def not_exists(select: Clause) -> ExistsClause:
    return ExistsClause(select=select, not_=True)


def aggregate(fn: str, clause: Clause) -> AggregateClause:
    return AggregateClause(fn=fn, clause=clause)


def count(clause: Clause | None = None) -> AggregateClause:
    """``COUNT(<clause>)``, or ``COUNT(*)`` without an argument."""
    return AggregateClause(fn="COUNT", clause=clause if clause is not None else TextClause(text="*"))


def sum_(clause: Clause) -> AggregateClause:
    return AggregateClause(fn="SUM", clause=clause)


def avg(clause: Clause) -> AggregateClause:
    return AggregateClause(fn="AVG", clause=clause)


def min_(clause: Clause) -> AggregateClause:
    return AggregateClause(fn="MIN", clause=clause)


def max_(clause: Clause) -> AggregateClause:
    return AggregateClause(fn="MAX", clause=clause)


def order_by(*columns: ColumnElem, direction: str = "ASC") -> OrderByClause:
    return OrderByClause(columns=tuple(columns), direction=direction)


def join(
    join_type: str,
    left: Clause,
    right: TableElem,
    on_clause: Clause | None = None,
) -> JoinClause:
    return JoinClause(join_type=join_type, left=left, right=right, on_clause=on_clause)
