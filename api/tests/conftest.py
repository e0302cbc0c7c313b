"""Shared fixtures: in-memory stand-in for the products table + ASGI test client.

The fake understands exactly the statements products/repository.py sends, so
route tests run the real router -> service -> repository path without a
PostgreSQL server. Prices are stored as Decimal, like NUMERIC comes back from
asyncpg.
"""

from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient

from core.db import DatabaseError
from main import create_app


def _normalize(sql: str) -> str:
    return " ".join(sql.split())


class FakeDatabase:
    def __init__(self):
        self.rows: dict[int, dict] = {}
        self.next_id = 1
        self.calls: list[tuple[str, tuple]] = []
        self.fail_with: str | None = None
        self.closed = False
        self.insert_returns_row = True

    def seed(self, name: str, price: str) -> int:
        product_id = self.next_id
        self.next_id += 1
        self.rows[product_id] = {"id": product_id, "name": name, "price": Decimal(price)}
        return product_id

    def _record(self, sql: str, args: tuple) -> str:
        if self.fail_with is not None:
            raise DatabaseError(self.fail_with)
        stmt = _normalize(sql)
        self.calls.append((stmt, args))
        return stmt

    async def fetch_one(self, sql, *args):
        stmt = self._record(sql, args)
        if stmt == "SELECT 1 AS ok":
            return {"ok": 1}
        if stmt == "SELECT id, name, price FROM products WHERE id = $1":
            row = self.rows.get(args[0])
            return dict(row) if row is not None else None
        if stmt.startswith("INSERT INTO products (name, price)"):
            if not self.insert_returns_row:
                return None
            product_id = self.seed(args[0], str(args[1]))
            return {"id": product_id}
        raise AssertionError(f"unexpected fetch_one: {stmt}")

    async def fetch_all(self, sql, *args):
        stmt = self._record(sql, args)
        if stmt == "SELECT id, name, price FROM products ORDER BY id LIMIT $1 OFFSET $2":
            limit, offset = args
            ordered = [dict(self.rows[k]) for k in sorted(self.rows)]
            return ordered[offset:offset + limit]
        raise AssertionError(f"unexpected fetch_all: {stmt}")

    async def execute(self, sql, *args):
        stmt = self._record(sql, args)
        if stmt.startswith("UPDATE products SET name = $1, price = $2 WHERE id = $3"):
            name, price, product_id = args
            if product_id not in self.rows:
                return "UPDATE 0"
            self.rows[product_id].update(name=name, price=Decimal(price))
            return "UPDATE 1"
        if stmt == "DELETE FROM products WHERE id = $1":
            removed = self.rows.pop(args[0], None)
            return "DELETE 1" if removed is not None else "DELETE 0"
        raise AssertionError(f"unexpected execute: {stmt}")

    async def ping(self):
        return self.fail_with is None

    async def close(self):
        self.closed = True


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def app(fake_db):
    return create_app(database=fake_db)


@pytest.fixture
async def client(app):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
