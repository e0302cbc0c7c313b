"""Tests for products/repository.py: which statement runs, with which arguments."""

from decimal import Decimal

import pytest

from core.db import DatabaseError
from products import repository


class RecordingDatabase:
    """Returns canned results and remembers the last statement."""

    def __init__(self, one=None, many=None):
        self.one = one
        self.many = many or []
        self.sql = None
        self.args = None

    def _keep(self, sql, args):
        self.sql = " ".join(sql.split())
        self.args = args

    async def fetch_one(self, sql, *args):
        self._keep(sql, args)
        return self.one

    async def fetch_all(self, sql, *args):
        self._keep(sql, args)
        return self.many

    async def execute(self, sql, *args):
        self._keep(sql, args)
        return "OK"


async def test_get_product_selects_by_id():
    db = RecordingDatabase(one={"id": 3, "name": "A", "price": Decimal("1.00")})
    row = await repository.get_product(db, 3)
    assert row == {"id": 3, "name": "A", "price": Decimal("1.00")}
    assert db.sql == "SELECT id, name, price FROM products WHERE id = $1"
    assert db.args == (3,)


async def test_get_product_returns_none_when_no_row():
    db = RecordingDatabase(one=None)
    assert await repository.get_product(db, 3) is None


async def test_list_products_binds_limit_then_offset():
    db = RecordingDatabase(many=[{"id": 1, "name": "A", "price": Decimal("1")}])
    rows = await repository.list_products(db, start=4, count=2)
    assert rows == [{"id": 1, "name": "A", "price": Decimal("1")}]
    assert db.sql == "SELECT id, name, price FROM products ORDER BY id LIMIT $1 OFFSET $2"
    assert db.args == (2, 4)


async def test_create_product_returns_generated_id():
    db = RecordingDatabase(one={"id": 12})
    product_id = await repository.create_product(db, name="Widget", price=9.99)
    assert product_id == 12
    assert db.sql == "INSERT INTO products (name, price) VALUES ($1, $2) RETURNING id"
    assert db.args == ("Widget", Decimal("9.99"))


async def test_create_product_without_returned_row_raises():
    db = RecordingDatabase(one=None)
    with pytest.raises(DatabaseError, match="Failed to insert product"):
        await repository.create_product(db, name="Widget", price=1.0)


async def test_update_product_binds_id_last():
    db = RecordingDatabase()
    await repository.update_product(db, 5, name="X", price=1.0)
    assert db.sql == "UPDATE products SET name = $1, price = $2 WHERE id = $3"
    assert db.args == ("X", Decimal("1.0"), 5)


async def test_delete_product_by_id():
    db = RecordingDatabase()
    await repository.delete_product(db, 8)
    assert db.sql == "DELETE FROM products WHERE id = $1"
    assert db.args == (8,)
