"""Utilities for building table references from external sources.

SQLAlchemy converter
--------------------
:func:`tables_from_sqlalchemy` reflects a live database engine and returns a
:class:`~sqlclause.schema.elements.TableElem` per table, with its columns
declared so that :meth:`TableElem.c` rejects unknown names.

Install the optional dependency before using this module::

    pip install "sqlclause[sqlalchemy]"

Example::

    from sqlalchemy import create_engine
    from sqlclause.schema.converters import tables_from_sqlalchemy

    engine = create_engine("sqlite:///mydb.db")
    tables = tables_from_sqlalchemy(engine)
    users = tables["users"]
    stmt = users.select(users.c("id")).where(users.c("email").eq(email))
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlclause.schema.elements import TableElem

if TYPE_CHECKING:
    from sqlalchemy import Engine, MetaData, Table


def tables_from_sqlalchemy(
    engine: Engine,
    *,
    include_tables: list[str] | None = None,
    schema: str | None = None,
) -> dict[str, TableElem]:
    """Reflect ``engine`` and return its tables keyed by name.

    Args:
        engine: A connected :class:`sqlalchemy.engine.Engine` instance.
        include_tables: Optional allowlist of table names to reflect.
            When ``None`` all tables in the schema are reflected.
        schema: Optional database schema name (e.g. ``"public"`` for
            PostgreSQL).  Passed directly to
            :meth:`sqlalchemy.schema.MetaData.reflect`.

    Returns:
        Mapping of table name to :class:`TableElem`, in dependency order.

    Raises:
        ImportError: If ``sqlalchemy`` is not installed.
    """
    try:
        from sqlalchemy import MetaData as _MetaData
    except ImportError as exc:
        raise ImportError(
            "SQLAlchemy is required for tables_from_sqlalchemy(). "
            'Install it with: pip install "sqlclause[sqlalchemy]"'
        ) from exc

    metadata = _MetaData()
    with engine.connect() as conn:
        metadata.reflect(bind=conn, only=include_tables, schema=schema)

    return _metadata_to_tables(metadata)


def table_from_sqlalchemy(table: Table) -> TableElem:
    """Convert one SQLAlchemy :class:`~sqlalchemy.schema.Table`.

    Works for reflected tables and for tables declared in application code.
    """
    return TableElem(name=table.name, columns=tuple(col.name for col in table.columns))


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _metadata_to_tables(metadata: MetaData) -> dict[str, TableElem]:
    """Convert a reflected :class:`~sqlalchemy.schema.MetaData`.

    Separated from :func:`tables_from_sqlalchemy` so callers that already
    hold a ``MetaData`` object can reuse it.
    """
    return {table.name: table_from_sqlalchemy(table) for table in metadata.sorted_tables}
