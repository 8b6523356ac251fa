"""
Shipment Schemas
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import date, datetime

from app.models.inventory import PlowModel, Variant
from app.models.shipment import ShipmentStatus, ValveType

CUSTOMER_FIELDS = (
    "company_name",
    "first_name",
    "last_name",
    "street",
    "postal_code",
    "city",
    "country",
)


class ShipmentItemInput(BaseModel):
    model: PlowModel
    serial_number: int = Field(gt=0)
    variant: Variant
    is_schwenkbock: bool = False
    valve_type: ValveType = ValveType.NONE
    bucket_holder: bool = False
    quantity: int = Field(gt=0)
    build_number: str = Field(min_length=1)
    build_date: date
    extra_parts: Optional[str] = None

    @field_validator("build_number", mode="before")
    @classmethod
    def strip_build_number(cls, value):
        return str(value or "").strip()

    @field_validator("extra_parts", mode="before")
    @classmethod
    def blank_extra_parts(cls, value):
        return str(value) if value else None

class ShipmentExtraInput(BaseModel):
    name: str = Field(min_length=2)
    quantity: int = Field(gt=0)
    note: Optional[str] = None
    part_id: Optional[int] = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return str(value or "").strip()

    @field_validator("note", mode="before")
    @classmethod
    def blank_note(cls, value):
        value = str(value).strip() if value is not None else ""
        return value or None

    @field_validator("part_id", mode="before")
    @classmethod
    def positive_part_id(cls, value):
        # Forms send 0 / "" for "no part selected"
        try:
            value = int(value)
        except (TypeError, ValueError):
            return None
        return value if value > 0 else None

class ShipmentCreate(BaseModel):
    company_name: str = ""
    first_name: str = ""
    last_name: str = ""
    street: str = ""
    postal_code: str = ""
    city: str = ""
    country: str = ""
    notes: Optional[str] = None
    status: Optional[ShipmentStatus] = None
    items: List[ShipmentItemInput] = []
    extras: List[ShipmentExtraInput] = []

class ShipmentUpdate(BaseModel):
    company_name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    street: Optional[str] = None
    postal_code: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    notes: Optional[str] = None
    status: Optional[ShipmentStatus] = None
    items: List[ShipmentItemInput] = []
    extras: Optional[List[ShipmentExtraInput]] = None  # None keeps the stored extras

class ShipmentItemResponse(BaseModel):
    id: int
    model: str
    serial_number: int
    variant: str
    is_schwenkbock: bool
    valve_type: str
    bucket_holder: bool
    quantity: int
    build_number: str
    build_date: date
    extra_parts: Optional[str]

    class Config:
        from_attributes = True

class ShipmentExtraResponse(BaseModel):
    id: int
    name: Optional[str]
    part_id: Optional[int]
    quantity: int
    note: Optional[str]

    class Config:
        from_attributes = True

class ShipmentResponse(BaseModel):
    id: int
    company_name: str
    first_name: str
    last_name: str
    street: str
    postal_code: str
    city: str
    country: str
    notes: Optional[str]
    status: str
    created_at: datetime
    items: List[ShipmentItemResponse] = []
    extras: List[ShipmentExtraResponse] = []

    class Config:
        from_attributes = True
