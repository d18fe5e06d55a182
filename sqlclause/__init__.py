"""sqlclause: build SQL as a clause tree, compile it per dialect.

Public API
----------
``compile_clause``
    Render a clause tree to a SQL string and its ordered bind values.

Constructors
------------
``table``, ``column``, ``text``, ``bind``, ``alias``, ``list_``, ``where``,
``and_``, ``or_``, ``exists``, ``not_exists``, ``count``, ``sum_``, ``avg``,
``min_``, ``max_``, ``select``, ``insert``, ``update``, ``delete``,
``upsert``.

Example::

    import sqlclause as sc

    users = sc.table("users", "id", "email", "active")
    stmt = (
        sc.select(users.c("id"), users.c("email"))
        .select_from(users)
        .where(sc.and_(users.c("active").eq(True), users.c("email").like("%@acme.io")))
        .order_by(users.c("id"))
        .limit(0, 50)
    )
    sql, binds = sc.compile_clause(stmt, "postgres")

Extensibility
-------------
New dialects can be registered via::

    from sqlclause.compile.registry import DialectFactory

    @DialectFactory.register("oracle")
    class OracleDialect(Dialect):
        ...

After registration, ``compile_clause(stmt, "oracle")`` picks it up.
"""

from __future__ import annotations

from sqlclause.compile.base import CompiledSQL, SQLCompiler
from sqlclause.compile.context import CompilerContext, compile_clause
from sqlclause.compile.dialect import DefaultDialect, Dialect, DialectOptions
from sqlclause.compile.mysql import MySQLCompiler, MySQLDialect
from sqlclause.compile.postgres import PostgresCompiler, PostgresDialect
from sqlclause.compile.registry import DialectFactory
from sqlclause.compile.sqlite import SQLiteCompiler, SQLiteDialect
from sqlclause.errors import (
    CompilationError,
    InvalidClauseError,
    SqlClauseError,
    UnknownDialectError,
    UnsupportedOperationError,
)
from sqlclause.schema.converters import table_from_sqlalchemy, tables_from_sqlalchemy
from sqlclause.schema.elements import (
    AliasClause,
    BindClause,
    Clause,
    ColumnElem,
    ListClause,
    TableElem,
    TextClause,
    alias,
    bind,
    column,
    list_,
    table,
    text,
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
    aggregate,
    and_,
    avg,
    binary,
    count,
    exists,
    join,
    max_,
    min_,
    not_exists,
    or_,
    order_by,
    sum_,
    where,
)
from sqlclause.schema.statements import (
    DeleteStmt,
    InsertStmt,
    SelectStmt,
    UpdateStmt,
    UpsertStmt,
    delete,
    insert,
    select,
    update,
    upsert,
)

# ---------------------------------------------------------------------------
# Register built-in dialects with DialectFactory
# ---------------------------------------------------------------------------

DialectFactory.register_class("default", DefaultDialect)
DialectFactory.register_class("postgres", PostgresDialect)
DialectFactory.register_class("mysql", MySQLDialect)
DialectFactory.register_class("sqlite", SQLiteDialect)

__all__ = [
    # Entry point
    "compile_clause",
    "CompiledSQL",
    "CompilerContext",
    # Dialects
    "Dialect",
    "DialectOptions",
    "DialectFactory",
    "DefaultDialect",
    "PostgresDialect",
    "MySQLDialect",
    "SQLiteDialect",
    # Compilers
    "SQLCompiler",
    "PostgresCompiler",
    "MySQLCompiler",
    "SQLiteCompiler",
    # Clause nodes
    "Clause",
    "TextClause",
    "BindClause",
    "ColumnElem",
    "TableElem",
    "ListClause",
    "AliasClause",
    "BinaryExpressionClause",
    "CombinerClause",
    "ExistsClause",
    "AggregateClause",
    "JoinClause",
    "OrderByClause",
    "HavingClause",
    "WhereClause",
    "SelectStmt",
    "InsertStmt",
    "UpdateStmt",
    "DeleteStmt",
    "UpsertStmt",
    # Constructors
    "text",
    "bind",
    "column",
    "table",
    "list_",
    "alias",
    "binary",
    "where",
    "and_",
    "or_",
    "exists",
    "not_exists",
    "aggregate",
    "count",
    "sum_",
    "avg",
    "min_",
    "max_",
    "order_by",
    "join",
    "select",
    "insert",
    "update",
    "delete",
    "upsert",
    # Converters
    "tables_from_sqlalchemy",
    "table_from_sqlalchemy",
    # Errors
    "SqlClauseError",
    "InvalidClauseError",
    "CompilationError",
    "UnsupportedOperationError",
    "UnknownDialectError",
]
