"""sqlclause compilation layer: Clause tree -> SQL + ordered binds."""
from sqlclause.compile.base import CompiledSQL, SQLCompiler
from sqlclause.compile.context import CompilerContext, compile_clause
from sqlclause.compile.dialect import DefaultDialect, Dialect, DialectOptions
from sqlclause.compile.mysql import MySQLCompiler, MySQLDialect
from sqlclause.compile.postgres import PostgresCompiler, PostgresDialect
from sqlclause.compile.registry import DialectFactory
from sqlclause.compile.sqlite import SQLiteCompiler, SQLiteDialect

__all__ = [
    "CompiledSQL",
    "CompilerContext",
    "compile_clause",
    "SQLCompiler",
    "Dialect",
    "DialectOptions",
    "DialectFactory",
    "DefaultDialect",
    "MySQLCompiler",
    "MySQLDialect",
    "PostgresCompiler",
    "PostgresDialect",
    "SQLiteCompiler",
    "SQLiteDialect",
]
