"""
Product API endpoints.

Ids arrive as raw path strings and are parsed by the service so that a bad
id gets our own 400 message instead of FastAPI's validation error.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from core.db import Database, get_database

from . import schemas, service

router = APIRouter()


@router.get("/products")
async def list_products(
    start: str | None = Query(default=None),
    count: str | None = Query(default=None),
    db: Database = Depends(get_database),
) -> list[schemas.Product]:
    """
    Range read ordered by id. `count` is forced into 1..10, `start` to >= 0.
    """
    return await service.list_products(db, start_raw=start, count_raw=count)


@router.post("/createproduct", status_code=status.HTTP_201_CREATED)
async def create_product(
    payload: schemas.ProductPayload,
    db: Database = Depends(get_database),
) -> schemas.Product:
    return await service.create_product(db, payload)


@router.get("/getproduct/{product_id}")
async def get_product(
    product_id: str,
    db: Database = Depends(get_database),
) -> schemas.Product:
    return await service.get_product(db, service.parse_product_id(product_id))


@router.put("/updateproduct/{product_id}")
async def update_product(
    product_id: str,
    payload: schemas.ProductPayload,
    db: Database = Depends(get_database),
) -> schemas.Product:
    """
    Overwrite name and price. A missing id is not an error.
    """
    return await service.update_product(db, service.parse_product_id(product_id), payload)


@router.delete("/deleteproduct/{product_id}")
async def delete_product(
    product_id: str,
    db: Database = Depends(get_database),
) -> schemas.DeleteResult:
    return await service.delete_product(db, service.parse_product_id(product_id))


# An empty trailing segment is a malformed id, not an unknown route.
@router.get("/getproduct/", include_in_schema=False)
@router.put("/updateproduct/", include_in_schema=False)
@router.delete("/deleteproduct/", include_in_schema=False)
async def missing_product_id() -> None:
    service.parse_product_id("")
