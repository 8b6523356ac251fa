"""
Inventory Schemas
"""
from pydantic import BaseModel, Field, field_validator

from app.models.inventory import PlowModel, Variant


class InventoryAdjust(BaseModel):
    model: PlowModel
    serial_number: int = Field(gt=0)
    variant: Variant
    is_schwenkbock: bool = False
    delta: int

    @field_validator("delta")
    @classmethod
    def non_zero(cls, value):
        if value == 0:
            raise ValueError("delta must not be zero")
        return value

class ProductKey(BaseModel):
    model: PlowModel
    serial_number: int = Field(gt=0)

class InventoryItemResponse(BaseModel):
    id: int
    model: str
    serial_number: int
    variant: str
    is_schwenkbock: bool
    quantity: int
    is_manual: bool

    class Config:
        from_attributes = True
