"""
Low-level database helpers (Postgres, with SQLite for local runs and tests).
"""
from __future__ import annotations

import os
import sqlite3
from typing import Iterable

try:
    import psycopg
    from psycopg.rows import dict_row
except Exception as exc:  # pragma: no cover - required dependency
    raise RuntimeError("psycopg is required for Postgres") from exc

_SQLITE_PREFIX = "sqlite:///"


def _resolve_database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL must be set")
    if url.startswith(("postgres://", "postgresql://", _SQLITE_PREFIX)):
        return url
    raise RuntimeError("DATABASE_URL must start with postgres://, postgresql:// or sqlite:///")


def _convert_qmarks(sql: str) -> str:
    if "?" not in sql:
        return sql
    return sql.replace("?", "%s")


def _sqlite_dict_row(cursor, row):
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


class _CursorWrapper:
    def __init__(self, cursor, dialect: str):
        self._cursor = cursor
        self._dialect = dialect

    def execute(self, sql: str, params: Iterable | None = None):
        if self._dialect == "postgres":
            sql = _convert_qmarks(sql)
        if params is None:
            return self._cursor.execute(sql)
        return self._cursor.execute(sql, params)

    def fetchone(self):
        return self._cursor.fetchone()

    def fetchall(self):
        return self._cursor.fetchall()

    @property
    def rowcount(self):
        return getattr(self._cursor, "rowcount", 0)


class _ConnWrapper:
    def __init__(self, conn, dialect: str):
        self._conn = conn
        self.dialect = dialect

    def cursor(self):
        return _CursorWrapper(self._conn.cursor(), self.dialect)

    def commit(self):
        return self._conn.commit()

    def rollback(self):
        return self._conn.rollback()

    def close(self):
        return self._conn.close()


def get_conn():
    """
    Return a DB connection for DATABASE_URL.
    Rows come back as dicts for both dialects.
    """
    url = _resolve_database_url()
    if url.startswith(_SQLITE_PREFIX):
        conn = sqlite3.connect(url[len(_SQLITE_PREFIX):], timeout=30)
        conn.row_factory = _sqlite_dict_row
        conn.execute("PRAGMA foreign_keys = ON")
        return _ConnWrapper(conn, "sqlite")
    conn = psycopg.connect(url, row_factory=dict_row)
    return _ConnWrapper(conn, "postgres")


def is_unique_violation(exc: BaseException) -> bool:
    """True when exc is the storage engine rejecting a duplicate on a UNIQUE column."""
    if isinstance(exc, psycopg.errors.UniqueViolation):
        return True
    return isinstance(exc, sqlite3.IntegrityError) and "UNIQUE" in str(exc).upper()


__all__ = ["get_conn", "is_unique_violation"]
