"""
Customer Domain Model

Author: TM3
Date: 2025-10-17
"""
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class Customer(BaseModel):
    """
    Customer domain model

    Fields:
        id: Internal customer ID
        name: Customer name
        credit_limit: Maximum approved-order value allowed within the rolling window
    """

    id: int = Field(..., description="Customer ID")
    name: str = Field(..., description="Customer name")
    credit_limit: Decimal = Field(..., description="Credit limit", ge=0)

    model_config = ConfigDict(from_attributes=True)

    def to_dict(self) -> dict:
        """Convert to dictionary with Decimal to float conversion"""
        data = self.model_dump()
        data['credit_limit'] = float(self.credit_limit)
        return data
