"""
Part Schemas
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime


def _blank_to_none(value):
    if value is None:
        return None
    value = str(value).strip()
    return value or None


class PartCreate(BaseModel):
    name: str = Field(min_length=2)
    stock: int = 0
    unit: str = "Stk"
    shop_url: Optional[str] = None
    shop_name: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return str(value or "").strip()

    @field_validator("shop_url", "shop_name", mode="before")
    @classmethod
    def blank_shop_fields(cls, value):
        return _blank_to_none(value)

class PartUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2)
    unit: Optional[str] = None
    shop_url: Optional[str] = None
    shop_name: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return str(value).strip() if value is not None else None

    @field_validator("shop_url", "shop_name", mode="before")
    @classmethod
    def blank_shop_fields(cls, value):
        return _blank_to_none(value)

class PartAdjust(BaseModel):
    part_id: int
    delta: int
    note: Optional[str] = None

    @field_validator("delta")
    @classmethod
    def non_zero(cls, value):
        if value == 0:
            raise ValueError("delta must not be zero")
        return value

    @field_validator("note", mode="before")
    @classmethod
    def blank_note(cls, value):
        return _blank_to_none(value)

class PartResponse(BaseModel):
    id: int
    name: str
    stock: int
    unit: str
    is_archived: bool
    shop_url: Optional[str]
    shop_name: Optional[str]

    class Config:
        from_attributes = True

class PartMovementResponse(BaseModel):
    id: int
    part_id: int
    delta: int
    reason: str
    shipment_id: Optional[int]
    note: Optional[str]
    created_at: datetime
    part: Optional[PartResponse] = None

    class Config:
        from_attributes = True
