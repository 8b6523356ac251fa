"""
Finished-Goods Inventory Models
"""
import enum

from sqlalchemy import Column, String, Integer, Boolean, UniqueConstraint
from app.core import Base
from .base import IdMixin, TimestampMixin


class PlowModel(str, enum.Enum):
    FL_640 = "FL_640"
    FL_540 = "FL_540"
    FL_470 = "FL_470"
    FL_400 = "FL_400"
    FL_340 = "FL_340"
    FL_260 = "FL_260"

    @property
    def display_name(self) -> str:
        """BOM model name, e.g. 'FL 540'"""
        return self.value.replace("_", " ")


class Variant(str, enum.Enum):
    ZINC = "ZINC"
    ORANGE = "ORANGE"


class InventoryItem(Base, IdMixin, TimestampMixin):
    """Plows on hand per model / serial / finish / Schwenkbock mount"""
    __tablename__ = "inventory_item"
    __table_args__ = (
        UniqueConstraint("model", "serial_number", "variant", "is_schwenkbock", name="uq_inventory_key"),
    )
    
    model = Column(String(20), nullable=False, index=True)
    serial_number = Column(Integer, nullable=False)
    variant = Column(String(20), nullable=False)
    is_schwenkbock = Column(Boolean, default=False, nullable=False)
    quantity = Column(Integer, default=0, nullable=False)
    is_manual = Column(Boolean, default=False, nullable=False)  # Added by staff, deletable
