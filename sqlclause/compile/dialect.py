"""Dialect contract and the ANSI default dialect.

A dialect supplies identifier escaping, placeholder generation and the
compiler used to render clauses.  Placeholder generation may keep a counter
(``$1``, ``$2``, ...), so a dialect instance must be dedicated to one
compilation at a time and :meth:`Dialect.reset` must run after each one.
:func:`~sqlclause.compile.context.compile_clause` takes care of the reset.

Configure a dialect with :class:`DialectOptions`::

    from sqlclause.compile.dialect import DialectOptions
    from sqlclause.compile.postgres import PostgresDialect

    dialect = PostgresDialect(DialectOptions(escaping=True))
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar

from pydantic import BaseModel, ConfigDict

from sqlclause.compile.base import SQLCompiler


class DialectOptions(BaseModel):
    """Configuration shared by all dialects.

    Attributes:
        escaping: Quote identifiers (tables, columns, aliases) with the
            dialect's quote character.  Off by default, so identifiers are
            emitted as written.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    escaping: bool = False


class Dialect(ABC):
    """Abstract base for SQL dialects.

    Subclasses set :attr:`quote_char` and :attr:`compiler_class` and
    implement :meth:`placeholder`.

    Args:
        options: Dialect configuration; defaults to ``DialectOptions()``.
    """

    #: Character used to quote identifiers when escaping is enabled.
    quote_char: ClassVar[str] = '"'

    #: Compiler class returned by :meth:`get_compiler`.
    compiler_class: ClassVar[type[SQLCompiler]] = SQLCompiler

    def __init__(self, options: DialectOptions | None = None) -> None:
        self._options = options or DialectOptions()
        self._escaping = self._options.escaping

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the canonical dialect name (e.g. ``'postgres'``)."""

    @property
    def options(self) -> DialectOptions:
        return self._options

    @property
    def escaping(self) -> bool:
        return self._escaping

    def set_escaping(self, escaping: bool) -> None:
        """Turn identifier quoting on or off."""
        self._escaping = escaping

    def escape(self, identifier: str) -> str:
        """Return ``identifier``, quoted when escaping is enabled.

        Embedded quote characters are doubled.
        """
        if not self._escaping:
            return identifier
        q = self.quote_char
        return f"{q}{identifier.replace(q, q * 2)}{q}"

    @abstractmethod
    def placeholder(self) -> str:
        """Return the next bind placeholder (``?``, ``$3``, ...)."""

    def reset(self) -> None:
        """Clear placeholder state.  Called once after every compilation."""

    def get_compiler(self) -> SQLCompiler:
        """Return the compiler that renders clauses for this dialect."""
        return self.compiler_class()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(escaping={self._escaping})"


class DefaultDialect(Dialect):
    """ANSI SQL with ``?`` placeholders and double-quoted identifiers."""

    @property
    def name(self) -> str:
        return "default"

    def placeholder(self) -> str:
        return "?"
