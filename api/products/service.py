"""
Product "service layer".

This file contains the request-level rules that sit between routing and SQL:
- Parse identifiers and paging parameters
- Clamp the range read
- Map a missing row to 404
"""

from __future__ import annotations

import logging
import re

from fastapi import HTTPException, status

from core.db import Database

from . import repository, schemas

MAX_PAGE_SIZE = 10

INVALID_ID_MESSAGE = "invalid product ID"
NOT_FOUND_MESSAGE = "Product not found"

# Base-10 integer with optional sign, no whitespace or underscores.
_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

logger = logging.getLogger(__name__)


def parse_int(raw: str | None) -> int | None:
    """
    Strict integer parse. Returns None for anything that isn't a plain
    base-10 integer fitting in 64 bits.
    """
    if raw is None or not _INT_RE.fullmatch(raw):
        return None
    value = int(raw)
    if value < _INT64_MIN or value > _INT64_MAX:
        return None
    return value


def parse_product_id(raw: str) -> int:
    product_id = parse_int(raw)
    if product_id is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_ID_MESSAGE)
    return product_id


def clamp_range(start: int, count: int) -> tuple[int, int]:
    """
    Return (start, count) forced into the allowed window.
    """
    if count < 1 or count > MAX_PAGE_SIZE:
        count = MAX_PAGE_SIZE
    if start < 0:
        start = 0
    return start, count


def _to_product(row: dict) -> schemas.Product:
    return schemas.Product(
        id=int(row["id"]),
        name=str(row["name"]),
        price=float(row["price"]),
    )


async def list_products(db: Database, *, start_raw: str | None, count_raw: str | None) -> list[schemas.Product]:
    # Unparseable paging values are not an error; they count as 0.
    start, count = clamp_range(parse_int(start_raw) or 0, parse_int(count_raw) or 0)
    rows = await repository.list_products(db, start=start, count=count)
    return [_to_product(row) for row in rows]


async def get_product(db: Database, product_id: int) -> schemas.Product:
    row = await repository.get_product(db, product_id)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND_MESSAGE)
    return _to_product(row)


async def create_product(db: Database, payload: schemas.ProductPayload) -> schemas.Product:
    product_id = await repository.create_product(db, name=payload.name, price=payload.price)
    logger.info("product_created id=%s", product_id)
    return schemas.Product(id=product_id, name=payload.name, price=payload.price)


async def update_product(db: Database, product_id: int, payload: schemas.ProductPayload) -> schemas.Product:
    await repository.update_product(db, product_id, name=payload.name, price=payload.price)
    logger.info("product_updated id=%s", product_id)
    return schemas.Product(id=product_id, name=payload.name, price=payload.price)


async def delete_product(db: Database, product_id: int) -> schemas.DeleteResult:
    await repository.delete_product(db, product_id)
    logger.info("product_deleted id=%s", product_id)
    return schemas.DeleteResult()
