"""
Product Domain Model

Represents a product in the catalog. Orders copy unit_price into their
items at creation time and never read it back from here.

Author: TM3
Date: 2025-10-17
"""
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class Product(BaseModel):
    """
    Product domain model

    Fields:
        id: Internal product ID
        name: Product name
        unit_price: Current selling price per unit
    """

    id: int = Field(..., description="Product ID")
    name: str = Field(..., description="Product name")
    unit_price: Decimal = Field(..., description="Price per unit", gt=0)

    model_config = ConfigDict(from_attributes=True)

    def to_dict(self) -> dict:
        data = self.model_dump()
        data['unit_price'] = float(self.unit_price)
        return data
