"""Shared pytest fixtures for sqlclause unit and integration tests."""
from __future__ import annotations

import pytest

from sqlclause.compile.dialect import DefaultDialect, DialectOptions
from sqlclause.compile.mysql import MySQLDialect
from sqlclause.compile.postgres import PostgresDialect
from sqlclause.compile.sqlite import SQLiteDialect
from sqlclause.schema.elements import TableElem, table


@pytest.fixture(scope="session")
def users() -> TableElem:
    return table("users", "id", "email", "name", "active")


@pytest.fixture(scope="session")
def orders() -> TableElem:
    return table("orders", "id", "user_id", "amount", "status")


@pytest.fixture()
def default_dialect() -> DefaultDialect:
    return DefaultDialect()


@pytest.fixture()
def pg() -> PostgresDialect:
    return PostgresDialect()


@pytest.fixture()
def pg_escaped() -> PostgresDialect:
    return PostgresDialect(DialectOptions(escaping=True))


@pytest.fixture()
def mysql() -> MySQLDialect:
    return MySQLDialect()


@pytest.fixture()
def sqlite_dialect() -> SQLiteDialect:
    return SQLiteDialect()
