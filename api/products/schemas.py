"""
Pydantic schemas for product endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class ProductPayload(BaseModel):
    """
    Request body for create/update. Missing fields fall back to zero values;
    unknown fields (including `id`) are ignored. NaN and Infinity are not
    JSON numbers and are rejected.
    """

    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    name: str = ""
    price: float = 0.0


class Product(BaseModel):
    id: int
    name: str
    price: float


class DeleteResult(BaseModel):
    result: str = "success"
