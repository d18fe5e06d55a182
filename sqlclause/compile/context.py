"""Per-compilation state and the compile entry point.

A single :class:`CompilerContext` is created per :func:`compile_clause` call
and threaded through every ``visit_*`` method.  It is never shared between
compilations.
"""
from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

from sqlclause.compile.base import CompiledSQL, SQLCompiler
from sqlclause.compile.dialect import Dialect
from sqlclause.compile.registry import DialectFactory
from sqlclause.errors import SqlClauseError
from sqlclause.schema.elements import Clause

logger = logging.getLogger(__name__)


@dataclass
class CompilerContext:
    """Mutable state for a single compilation run.

    Attributes:
        dialect: Dialect supplying escaping and placeholders.
        compiler: Compiler selected by the dialect.
        binds: Bound values.  Append-only, in the order their placeholders
            appear in the rendered SQL.
        default_table_name: Primary table of the statement being rendered;
            its columns are not table-qualified outside sub-queries.
        in_sub_query: True while rendering a sub-query (e.g. inside EXISTS).
        vars: Free-form bag for dialect compilers that need to pass data
            between visit methods.
    """

    dialect: Dialect
    compiler: SQLCompiler
    binds: list[Any] = field(default_factory=list)
    default_table_name: str = ""
    in_sub_query: bool = False
    vars: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def for_dialect(cls, dialect: Dialect) -> CompilerContext:
        return cls(dialect=dialect, compiler=dialect.get_compiler())

    def add_bind(self, value: Any) -> str:
        """Record ``value`` and return the placeholder that stands for it."""
        self.binds.append(value)
        return self.dialect.placeholder()

    @contextmanager
    def sub_query(self) -> Iterator[None]:
        """Render the enclosed block in sub-query scope."""
        previous = self.in_sub_query
        self.in_sub_query = True
        try:
            yield
        finally:
            self.in_sub_query = previous

    @contextmanager
    def default_table(self, name: str) -> Iterator[None]:
        """Use ``name`` as the default table for the enclosed block."""
        previous = self.default_table_name
        self.default_table_name = name
        try:
            yield
        finally:
            self.default_table_name = previous


def compile_clause(clause: Clause, dialect: Dialect | str) -> CompiledSQL:
    """Render ``clause`` to SQL and its ordered bind values.

    Args:
        clause: Root of the clause tree.
        dialect: A :class:`Dialect` instance, or the name of a registered
            dialect (a fresh instance is created).

    Returns:
        :class:`~sqlclause.compile.base.CompiledSQL`; unpacks as
        ``(sql, binds)``.

    Raises:
        UnknownDialectError: If ``dialect`` is a name nobody registered.
        UnsupportedOperationError: If the dialect's compiler cannot render
            a clause in the tree (e.g. UPSERT on the default dialect).
    """
    if isinstance(dialect, str):
        dialect = DialectFactory.create(dialect)

    ctx = CompilerContext.for_dialect(dialect)
    try:
        sql = clause.compile(ctx)
    except SqlClauseError as exc:
        logger.debug("Compiling %s with %r failed: %s", type(clause).__name__, dialect, exc)
        raise
    finally:
        dialect.reset()

    logger.debug(
        "Compiled %s with %r (%d binds)", type(clause).__name__, dialect, len(ctx.binds)
    )
    return CompiledSQL(sql=sql, binds=ctx.binds, dialect=dialect.name)
