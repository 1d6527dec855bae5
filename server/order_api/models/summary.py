"""Order summary aggregate model."""
from pydantic import BaseModel, Field, ConfigDict
from typing import Literal


class OrderSummaryResponse(BaseModel):
    """Counts and revenue over today's orders."""

    model_config = ConfigDict(populate_by_name=True)

    date: str
    order_count: int = Field(serialization_alias="orderCount")
    food_counts: dict[str, int] = Field(serialization_alias="foodCounts")
    items_revenue: int = Field(serialization_alias="itemsRevenue")
    delivery_fees: int = Field(serialization_alias="deliveryFees")
    total_revenue: int = Field(serialization_alias="totalRevenue")
    delivery_fee: int = Field(serialization_alias="deliveryFee")
    fee_policy: Literal["per_order"] = Field(default="per_order", serialization_alias="feePolicy")
