#!/usr/bin/env python
"""
    Catalog Schema for Meeple,
    the board games offered for lending and their local cart flag.

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

from pydantic import BaseModel, Field
from typing import Optional

DEFAULT_CATEGORY = "Strategy"


class CatalogItemIn(BaseModel):
    """Fields accepted when adding or editing a game."""

    name: str = Field(min_length=1)
    description: str = ""
    image_url: str = Field("", alias="imageUrl")
    category: str = DEFAULT_CATEGORY
    is_popular: bool = Field(False, alias="isPopular")
    barcode: Optional[str] = None

    class Config:
        populate_by_name = True


class CatalogItem(CatalogItemIn):

    id: int
    selected: bool = False

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "id": 1,
                "name": "Catan",
                "description": "Trade, build and settle the island of Catan.",
                "imageUrl": "https://picsum.photos/seed/catan/400/300",
                "category": "Strategy",
                "isPopular": True,
                "barcode": "007",
                "selected": False
            }
        }
