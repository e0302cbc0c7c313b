"""
Async database access helpers (raw SQL) using asyncpg.

`Database` owns one connection pool. The app factory creates it on startup
(or receives one from the caller) and stores it on `app.state`; routes get
it through the `get_database` dependency (see `api/main.py`).

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import asyncpg
from fastapi import Request

logger = logging.getLogger(__name__)

# Errors that mean "the statement did not run", as opposed to bugs in our code.
_DRIVER_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError)


# Store failures are explicit and separable from other runtime errors.
class DatabaseError(RuntimeError):
    pass


class DatabaseInitError(DatabaseError):
    pass


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


class Database:
    def __init__(self, pool: asyncpg.Pool) -> None:
        self._pool = pool

    @property
    def pool(self) -> asyncpg.Pool:
        return self._pool

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        """
        Run a query and return a single row as a dict (or None).
        """
        try:
            row = await self._pool.fetchrow(sql, *args)
        except _DRIVER_ERRORS as exc:
            raise DatabaseError(str(exc)) from exc
        return _record_to_dict(row) if row is not None else None

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        """
        Run a query and return all rows as a list of dicts.
        """
        try:
            rows = await self._pool.fetch(sql, *args)
        except _DRIVER_ERRORS as exc:
            raise DatabaseError(str(exc)) from exc
        return [_record_to_dict(r) for r in rows]

    async def execute(self, sql: str, *args: Any) -> str:
        """
        Run a statement (INSERT/UPDATE/DELETE/DDL). Returns the status tag, e.g. "DELETE 1".
        """
        try:
            return await self._pool.execute(sql, *args)
        except _DRIVER_ERRORS as exc:
            raise DatabaseError(str(exc)) from exc

    async def ping(self) -> bool:
        try:
            row = await self.fetch_one("SELECT 1 AS ok")
        except DatabaseError:
            logger.warning("database_ping_failed", exc_info=True)
            return False
        return row is not None

    async def close(self) -> None:
        await self._pool.close()


async def connect(
    dsn: str,
    *,
    min_size: int = 1,
    max_size: int = 5,
    command_timeout: float = 30,
) -> Database:
    """
    Create the pool and make sure the server actually answers.
    """
    try:
        pool = await asyncpg.create_pool(
            dsn=dsn,
            min_size=min_size,
            max_size=max_size,
            command_timeout=command_timeout,
        )
    except (*_DRIVER_ERRORS, ValueError) as exc:
        # ValueError covers a malformed DSN.
        raise DatabaseInitError(f"Could not connect to database: {exc}") from exc

    database = Database(pool)
    try:
        await database.fetch_one("SELECT 1 AS ok")
    except DatabaseError as exc:
        await pool.close()
        raise DatabaseInitError(f"Database did not answer: {exc}") from exc

    logger.info("db_pool_created min_size=%s max_size=%s", min_size, max_size)
    return database


def get_database(request: Request) -> Database:
    database = getattr(request.app.state, "db", None)
    if database is None:
        raise RuntimeError("Database is not initialized. Create the app with create_app().")
    return database
