"""
Product persistence (raw SQL).

One statement per operation, no transactions: each call autocommits on
whichever pooled connection asyncpg hands out.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from core.db import Database, DatabaseError


def _numeric_arg(value: float) -> Decimal:
    """
    asyncpg encodes NUMERIC parameters through Decimal; Decimal(float) drags
    binary noise along (9.99 -> 9.9900000000000002131...), repr does not.
    """
    return Decimal(repr(float(value)))


async def get_product(db: Database, product_id: int) -> dict[str, Any] | None:
    return await db.fetch_one(
        """
        SELECT id, name, price
        FROM products
        WHERE id = $1
        """,
        product_id,
    )


async def list_products(db: Database, *, start: int, count: int) -> list[dict[str, Any]]:
    return await db.fetch_all(
        """
        SELECT id, name, price
        FROM products
        ORDER BY id
        LIMIT $1
        OFFSET $2
        """,
        count,
        start,
    )


async def create_product(db: Database, *, name: str, price: float) -> int:
    """
    Insert a product and return the id the database assigned.
    """
    row = await db.fetch_one(
        """
        INSERT INTO products (name, price)
        VALUES ($1, $2)
        RETURNING id
        """,
        name,
        _numeric_arg(price),
    )
    if row is None or "id" not in row:
        raise DatabaseError("Failed to insert product.")
    return int(row["id"])


async def update_product(db: Database, product_id: int, *, name: str, price: float) -> None:
    # No existence check: updating a missing id is a no-op, not an error.
    await db.execute(
        """
        UPDATE products
        SET name = $1,
            price = $2
        WHERE id = $3
        """,
        name,
        _numeric_arg(price),
        product_id,
    )


async def delete_product(db: Database, product_id: int) -> None:
    await db.execute(
        """
        DELETE FROM products
        WHERE id = $1
        """,
        product_id,
    )
