"""Dialect registry (Open/Closed Principle).

Register a new dialect once; :func:`~sqlclause.compile.context.compile_clause`
then accepts its name in place of an instance.

Usage::

    from sqlclause.compile.registry import DialectFactory

    @DialectFactory.register("oracle")
    class OracleDialect(Dialect):
        ...

    compile_clause(stmt, "oracle")
"""

from __future__ import annotations

from collections.abc import Callable
from typing import ClassVar

from sqlclause.compile.dialect import Dialect, DialectOptions
from sqlclause.errors import UnknownDialectError


class DialectFactory:
    """Registry mapping dialect names to :class:`Dialect` classes."""

    _dialects: ClassVar[dict[str, type[Dialect]]] = {}

    @classmethod
    def register(cls, name: str) -> Callable[[type[Dialect]], type[Dialect]]:
        """Decorator that registers a dialect class under ``name``.

        Args:
            name: The dialect name (e.g. ``"postgres"``).

        Returns:
            A decorator that registers and returns the dialect class.
        """

        def decorator(dialect_cls: type[Dialect]) -> type[Dialect]:
            cls._dialects[name] = dialect_cls
            return dialect_cls

        return decorator

    @classmethod
    def register_class(cls, name: str, dialect_cls: type[Dialect]) -> None:
        """Register a dialect class without using the decorator form."""
        cls._dialects[name] = dialect_cls

    @classmethod
    def create(cls, name: str, options: DialectOptions | None = None) -> Dialect:
        """Instantiate the dialect registered for ``name``.

        Args:
            name: The dialect name.
            options: Optional configuration for the new instance.

        Returns:
            A fresh :class:`Dialect` instance.

        Raises:
            UnknownDialectError: If no dialect is registered for ``name``.
        """
        dialect_cls = cls._dialects.get(name)
        if dialect_cls is None:
            raise UnknownDialectError(name, sorted(cls._dialects))
        return dialect_cls(options)

    @classmethod
    def registered_targets(cls) -> list[str]:
        """Return the sorted list of registered dialect names."""
        return sorted(cls._dialects)
