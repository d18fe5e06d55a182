"""Unit tests for the ANSI SQLCompiler, CompilerContext and compile_clause."""

from __future__ import annotations

import pytest

from sqlclause.compile.base import CompiledSQL, SQLCompiler
from sqlclause.compile.context import CompilerContext, compile_clause
from sqlclause.compile.dialect import DefaultDialect
from sqlclause.compile.postgres import PostgresDialect
from sqlclause.errors import CompilationError, UnknownDialectError, UnsupportedOperationError
from sqlclause.schema.elements import Clause, alias, bind, column, list_, table, text
from sqlclause.schema.expressions import (
    and_,
    binary,
    count,
    exists,
    not_exists,
    or_,
    sum_,
    where,
)
from sqlclause.schema.statements import insert, select, upsert


def _sql(clause: Clause) -> str:
    return compile_clause(clause, DefaultDialect()).sql


class _Boom(Clause):
    """Clause whose rendering always fails."""

    def compile(self, ctx: CompilerContext) -> str:
        raise CompilationError("boom", clause="test")


# ---------------------------------------------------------------------------
# Leaves and expressions
# ---------------------------------------------------------------------------


def test_text_is_passed_through():
    assert _sql(text("NOW()")) == "NOW()"


def test_bind_returns_placeholder_and_records_value():
    sql, binds = compile_clause(bind(42), DefaultDialect())
    assert sql == "?"
    assert binds == [42]


def test_bind_never_inlines_value():
    r = compile_clause(column("users", "name").eq("Robert'); DROP TABLE users;--"), DefaultDialect())
    assert r.sql == "users.name = ?"
    assert "DROP" not in r.sql


def test_column_outside_statement_is_qualified():
    assert _sql(column("users", "id")) == "users.id"


def test_in_list_binds_each_value(users):
    r = compile_clause(users.c("id").in_(1, 2, 3), DefaultDialect())
    assert r.sql == "users.id IN (?, ?, ?)"
    assert r.binds == [1, 2, 3]


def test_list_clause():
    assert _sql(list_(text("a"), text("b"))) == "(a, b)"


def test_is_null(users):
    assert _sql(users.c("name").is_null()) == "users.name IS NULL"
    assert _sql(users.c("name").is_not_null()) == "users.name IS NOT NULL"


def test_binary_helper_binds_plain_operands():
    r = compile_clause(binary(text("age"), ">=", 18), DefaultDialect())
    assert r.sql == "age >= ?"
    assert r.binds == [18]


def test_alias(users):
    assert _sql(users.c("email").label("mail")) == "users.email AS mail"
    assert _sql(alias(text("1"), "one")) == "1 AS one"


def test_aggregates(users):
    assert _sql(count(users.c("id"))) == "COUNT(users.id)"
    assert _sql(count()) == "COUNT(*)"
    assert _sql(sum_(users.c("id"))) == "SUM(users.id)"


def test_combiner_uses_single_pair_of_parentheses():
    assert _sql(and_(text("a"), text("b"), text("c"))) == "(a AND b AND c)"
    assert _sql(or_(text("a"), and_(text("b"), text("c")))) == "(a OR (b AND c))"


# ---------------------------------------------------------------------------
# Column qualification
# ---------------------------------------------------------------------------


def test_default_table_columns_are_bare(users):
    stmt = select(users.c("id"), users.c("email")).select_from(users)
    assert _sql(stmt) == "SELECT id, email\nFROM users"


def test_foreign_table_columns_are_qualified(users, orders):
    stmt = select(users.c("id"), orders.c("amount")).select_from(users)
    assert _sql(stmt) == "SELECT id, orders.amount\nFROM users"


def test_exists_sub_select_qualifies_every_column(users, orders):
    sub = (
        select(orders.c("id"))
        .select_from(orders)
        .where(orders.c("user_id").eq(users.c("id")))
    )
    stmt = select(users.c("id")).select_from(users).where(exists(sub))
    assert _sql(stmt) == (
        "SELECT id\n"
        "FROM users\n"
        "WHERE EXISTS(SELECT orders.id\n"
        "FROM orders\n"
        "WHERE orders.user_id = users.id)"
    )


def test_exists_sub_select_qualifies_outer_table_columns(users):
    sub = select(users.c("id")).select_from(users).where(users.c("active").eq(True))
    stmt = select(users.c("id")).select_from(users).where(not_exists(sub))
    r = compile_clause(stmt, DefaultDialect())
    assert r.sql == (
        "SELECT id\n"
        "FROM users\n"
        "WHERE NOT EXISTS(SELECT users.id\n"
        "FROM users\n"
        "WHERE users.active = ?)"
    )
    assert r.binds == [True]


def test_sub_query_scope_ends_after_exists(users, orders):
    sub = select(orders.c("id")).select_from(orders)
    stmt = (
        select(users.c("id"))
        .select_from(users)
        .where(and_(exists(sub), users.c("active").eq(True)))
    )
    assert _sql(stmt).endswith("FROM orders) AND active = ?)")


# ---------------------------------------------------------------------------
# SELECT layout
# ---------------------------------------------------------------------------


def test_select_clause_order(users, orders):
    stmt = (
        select(users.c("active"), count(users.c("id")))
        .select_from(users)
        .inner_join(orders, users.c("id"), orders.c("user_id"))
        .where(orders.c("status").eq("paid"))
        .group_by(users.c("active"))
        .having(count(users.c("id")), ">", 2)
        .order_by(users.c("active"))
        .desc()
        .limit(5, 10)
    )
    r = compile_clause(stmt, DefaultDialect())
    assert r.sql == (
        "SELECT active, COUNT(id)\n"
        "FROM users\n"
        "INNER JOIN orders ON id = orders.user_id\n"
        "WHERE orders.status = ?\n"
        "GROUP BY active\n"
        "HAVING COUNT(id) > ?\n"
        "ORDER BY active DESC\n"
        "LIMIT 10 OFFSET 5"
    )
    assert r.binds == ["paid", 2]


def test_absent_clauses_are_omitted(users):
    sql = _sql(select(users.c("id")).select_from(users))
    assert sql.split("\n") == ["SELECT id", "FROM users"]


def test_select_without_columns_selects_star(users):
    assert _sql(select().select_from(users)) == "SELECT *\nFROM users"


def test_limit_requires_offset_and_count(users):
    base = select(users.c("id")).select_from(users).where(users.c("active").eq(True))
    assert _sql(base.limit(10, 20)).endswith("\nLIMIT 20 OFFSET 10")
    assert "LIMIT" not in _sql(base.limit(10, None))
    assert "LIMIT" not in _sql(base.limit(None, 20))


def test_multiple_having_clauses_share_one_line(users):
    stmt = (
        select(users.c("active"))
        .select_from(users)
        .group_by(users.c("active"))
        .having(count(users.c("id")), ">", 10)
        .having(sum_(users.c("id")), "<", 500)
    )
    r = compile_clause(stmt, DefaultDialect())
    assert r.sql.endswith("GROUP BY active\nHAVING COUNT(id) > ? AND SUM(id) < ?")
    assert r.binds == [10, 500]


class _GuardedHavingCompiler(SQLCompiler):
    def visit_having_condition(self, ctx: CompilerContext, having) -> str:
        return f"NOT ({super().visit_having_condition(ctx, having)})"


class _GuardedHavingDialect(DefaultDialect):
    compiler_class = _GuardedHavingCompiler


def test_having_condition_override_applies_to_every_having(users):
    base = select(users.c("email")).select_from(users).group_by(users.c("email"))
    one = base.having(count(users.c("id")), ">", 1)
    two = one.having(count(users.c("id")), "<", 5)

    assert compile_clause(one, _GuardedHavingDialect()).sql.endswith(
        "\nHAVING NOT (COUNT(id) > ?)"
    )
    r = compile_clause(two, _GuardedHavingDialect())
    assert r.sql.endswith("\nHAVING NOT (COUNT(id) > ?) AND NOT (COUNT(id) < ?)")
    assert r.binds == [1, 5]


def test_joins_chain_to_the_left(users, orders):
    stmt = (
        select(users.c("id"))
        .select_from(users)
        .left_join(orders, users.c("id"), orders.c("user_id"))
        .cross_join(table("payments"))
    )
    assert _sql(stmt) == (
        "SELECT id\n"
        "FROM users\n"
        "LEFT OUTER JOIN orders ON id = orders.user_id\n"
        "CROSS JOIN payments"
    )


def test_aliased_sub_select_as_from(users):
    inner = select(users.c("id")).select_from(users)
    stmt = select(column("u", "id")).select_from(alias(inner, "u"))
    assert _sql(stmt) == "SELECT id\nFROM (SELECT id\nFROM users) AS u"


# ---------------------------------------------------------------------------
# Bind ordering
# ---------------------------------------------------------------------------


def test_binds_follow_placeholder_order(users):
    clause = where(
        and_(
            users.c("id").eq(1),
            or_(users.c("name").eq("a"), users.c("email").eq("b")),
        )
    )
    r = compile_clause(clause, PostgresDialect())
    assert r.sql == "WHERE (users.id = $1 AND (users.name = $2 OR users.email = $3))"
    assert r.binds == [1, "a", "b"]


def test_bind_count_matches_placeholder_count(users, orders):
    big_orders = select(orders.c("id")).select_from(orders).where(orders.c("amount").gt(100))
    stmt = (
        select(users.c("id"))
        .select_from(users)
        .where(and_(users.c("id").in_(1, 2), exists(big_orders)))
        .group_by(users.c("id"))
        .having(count(users.c("id")), ">=", 1)
    )
    r = compile_clause(stmt, DefaultDialect())
    assert r.sql.count("?") == len(r.binds) == 4
    assert r.binds == [1, 2, 100, 1]


# ---------------------------------------------------------------------------
# Entry point, reset and idempotence
# ---------------------------------------------------------------------------


def test_compiled_sql_unpacks():
    result = compile_clause(bind("x"), DefaultDialect())
    assert isinstance(result, CompiledSQL)
    sql, binds = result
    assert (sql, binds) == ("?", ["x"])
    assert result.dialect == "default"


def test_dialect_by_name():
    r = compile_clause(bind(1), "postgres")
    assert r.sql == "$1"
    assert r.dialect == "postgres"


def test_unknown_dialect_name():
    with pytest.raises(UnknownDialectError) as exc_info:
        compile_clause(bind(1), "oracle")
    assert "oracle" in str(exc_info.value)
    assert "postgres" in exc_info.value.registered


def test_reusing_dialect_restarts_placeholders(users):
    dialect = PostgresDialect()
    stmt = select(users.c("id")).select_from(users).where(users.c("id").eq(7))
    first = compile_clause(stmt, dialect)
    second = compile_clause(stmt, dialect)
    assert first.sql == second.sql
    assert "$1" in first.sql
    assert first.binds == second.binds == [7]


def test_compiling_same_tree_is_idempotent(users):
    stmt = select(users.c("id")).select_from(users).where(users.c("email").like("%@x"))
    results = {stmt.build(DefaultDialect()).sql for _ in range(3)}
    assert len(results) == 1


def test_dialect_is_reset_after_failure():
    dialect = PostgresDialect()
    with pytest.raises(CompilationError):
        compile_clause(and_(bind(1), bind(2), _Boom()), dialect)
    assert compile_clause(bind(3), dialect).sql == "$1"


def test_upsert_is_unsupported_by_ansi_compiler(users):
    dialect = DefaultDialect()
    stmt = upsert(users).values(id=1).on_conflict(users.c("id"))
    with pytest.raises(UnsupportedOperationError) as exc_info:
        compile_clause(stmt, dialect)
    assert exc_info.value.operation == "upsert"
    assert exc_info.value.dialect == "default"
    assert isinstance(exc_info.value, CompilationError)


# ---------------------------------------------------------------------------
# CompilerContext scoping
# ---------------------------------------------------------------------------


class TestCompilerContext:
    def _ctx(self) -> CompilerContext:
        return CompilerContext.for_dialect(DefaultDialect())

    def test_for_dialect_selects_compiler(self):
        ctx = self._ctx()
        assert isinstance(ctx.compiler, SQLCompiler)
        assert ctx.binds == []
        assert ctx.default_table_name == ""
        assert ctx.in_sub_query is False
        assert ctx.vars == {}

    def test_sub_query_restores_previous_value(self):
        ctx = self._ctx()
        ctx.in_sub_query = True
        with ctx.sub_query():
            assert ctx.in_sub_query is True
        assert ctx.in_sub_query is True

    def test_sub_query_restores_on_error(self):
        ctx = self._ctx()
        with pytest.raises(CompilationError):
            with ctx.sub_query():
                raise CompilationError("boom")
        assert ctx.in_sub_query is False

    def test_default_table_nests(self):
        ctx = self._ctx()
        with ctx.default_table("users"):
            with ctx.default_table("orders"):
                assert ctx.default_table_name == "orders"
            assert ctx.default_table_name == "users"
        assert ctx.default_table_name == ""

    def test_exists_restores_flag(self, users):
        ctx = self._ctx()
        exists(select(users.c("id")).select_from(users)).compile(ctx)
        assert ctx.in_sub_query is False

    def test_insert_restores_default_table(self, users):
        ctx = self._ctx()
        ctx.default_table_name = "orders"
        insert(users).values(id=1).compile(ctx)
        assert ctx.default_table_name == "orders"
        assert ctx.binds == [1]

    def test_select_keeps_default_table_in_sub_query(self, users):
        ctx = self._ctx()
        ctx.default_table_name = "orders"
        with ctx.sub_query():
            sql = select(users.c("id")).select_from(users).compile(ctx)
        assert sql == "SELECT users.id\nFROM users"
        assert ctx.default_table_name == "orders"


def test_clause_without_compile_cannot_be_instantiated():
    class _Unrendered(Clause):
        pass

    with pytest.raises(TypeError):
        _Unrendered()
