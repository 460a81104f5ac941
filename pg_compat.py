"""PostgreSQL compatibility layer: gives psycopg2 the sqlite3 call shape.

The stores are written against sqlite3 (``?`` placeholders, ``lastrowid``,
``row["col"]``). When DATABASE starts with postgresql:// this module provides
pooled connections that accept the same calls:
  - ? placeholders → %s
  - INSERT statements get ``RETURNING id`` so lastrowid works
  - executescript() → split and execute
  - rows are read-only mappings
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterator, Mapping
from typing import Any

from psycopg2.pool import ThreadedConnectionPool

logger = logging.getLogger(__name__)


class PgRow(Mapping):
    """Read-only row supporting both ``row["name"]`` and ``row[0]``."""

    __slots__ = ("_columns", "_values")

    def __init__(self, columns: list[str], values: tuple):
        self._columns = list(columns)
        self._values = tuple(values)

    def __getitem__(self, key: str | int) -> Any:
        if isinstance(key, int):
            return self._values[key]
        try:
            return self._values[self._columns.index(key)]
        except ValueError:
            raise KeyError(key) from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._columns)

    def __len__(self) -> int:
        return len(self._columns)

    def keys(self) -> list[str]:
        return list(self._columns)

    def __repr__(self) -> str:
        return f"PgRow({dict(zip(self._columns, self._values))})"


def translate_sql(sql: str) -> str:
    """Translate an SQLite statement to PostgreSQL."""
    return sql.replace("?", "%s")


def translate_schema(sql: str) -> str:
    """Translate SQLite DDL to PostgreSQL DDL."""
    translated = re.sub(
        r"(\w+)\s+INTEGER\s+PRIMARY\s+KEY\s+AUTOINCREMENT",
        r"\1 BIGSERIAL PRIMARY KEY",
        sql,
        flags=re.IGNORECASE,
    )
    translated = re.sub(r"\bINTEGER\b", "BIGINT", translated, flags=re.IGNORECASE)
    return re.sub(r"PRAGMA\s+\w+\s*=\s*\w+\s*;?", "", translated, flags=re.IGNORECASE)


class PgCursor:
    """sqlite3.Cursor look-alike over a psycopg2 cursor."""

    def __init__(self, cursor):
        self._cursor = cursor
        self._last_id: int | None = None

    @property
    def lastrowid(self) -> int | None:
        return self._last_id

    @property
    def rowcount(self) -> int:
        return self._cursor.rowcount

    def execute(self, sql: str, params: tuple | list = ()) -> PgCursor:
        translated = translate_sql(sql)
        self._last_id = None
        if translated.lstrip().upper().startswith("INSERT") and "RETURNING" not in translated.upper():
            self._cursor.execute(translated.rstrip().rstrip(";") + " RETURNING id", tuple(params))
            row = self._cursor.fetchone()
            self._last_id = row[0] if row else None
            return self
        self._cursor.execute(translated, tuple(params))
        return self

    def _columns(self) -> list[str]:
        return [desc[0] for desc in self._cursor.description or ()]

    def fetchone(self) -> PgRow | None:
        row = self._cursor.fetchone()
        if row is None:
            return None
        return PgRow(self._columns(), row)

    def fetchall(self) -> list[PgRow]:
        if self._cursor.description is None:
            return []
        columns = self._columns()
        return [PgRow(columns, row) for row in self._cursor.fetchall()]

    def close(self) -> None:
        self._cursor.close()


class PgConnection:
    """sqlite3.Connection look-alike over a pooled psycopg2 connection.

    ``close()`` hands the connection back to its pool instead of closing it.
    """

    def __init__(self, conn, release: Callable[[Any], None]):
        self._conn = conn
        self._conn.autocommit = False
        self._release = release

    def execute(self, sql: str, params: tuple | list = ()) -> PgCursor:
        return PgCursor(self._conn.cursor()).execute(sql, params)

    def executescript(self, sql: str) -> None:
        statements = [s.strip() for s in translate_schema(sql).split(";") if s.strip()]
        with self._conn.cursor() as cursor:
            for stmt in statements:
                cursor.execute(stmt)

    def commit(self) -> None:
        self._conn.commit()

    def rollback(self) -> None:
        self._conn.rollback()

    def close(self) -> None:
        if self._conn is None:
            return
        try:
            self._conn.rollback()
        finally:
            self._release(self._conn)
            self._conn = None


class PgPool:
    """A psycopg2 ThreadedConnectionPool handing out PgConnection wrappers."""

    def __init__(self, database_url: str, minconn: int = 1, maxconn: int = 5):
        self._pool = ThreadedConnectionPool(minconn, maxconn, dsn=database_url)
        logger.info("PostgreSQL pool opened (min=%d, max=%d)", minconn, maxconn)

    def connection(self) -> PgConnection:
        return PgConnection(self._pool.getconn(), self._pool.putconn)

    def close(self) -> None:
        self._pool.closeall()
        logger.info("PostgreSQL pool closed")


def is_postgres_url(url: str) -> bool:
    """Check if a database URL is a PostgreSQL URL."""
    return url.startswith("postgresql://") or url.startswith("postgres://")

