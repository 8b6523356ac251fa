"""
BOM Schemas
"""
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional

from app.models.bom import BomType
from .part import PartResponse


class BomItemInput(BaseModel):
    part_id: int = Field(gt=0)
    qty_per_unit: int = Field(gt=0)

class BomUpdate(BaseModel):
    model_name: str = Field(min_length=1)
    bom_type: BomType
    items: List[BomItemInput] = []

    class Config:
        protected_namespaces = ()

    @field_validator("model_name", mode="before")
    @classmethod
    def strip_model_name(cls, value):
        return str(value or "").strip()

class BomItemResponse(BaseModel):
    id: int
    part_id: int
    qty_per_unit: int
    part: Optional[PartResponse] = None

    class Config:
        from_attributes = True

class BomResponse(BaseModel):
    id: int
    model_name: str
    bom_type: str
    items: List[BomItemResponse] = []

    class Config:
        from_attributes = True
        protected_namespaces = ()
