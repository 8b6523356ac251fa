"""
Bill of Materials Models
"""
import enum

from sqlalchemy import Column, String, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from app.core import Base
from .base import IdMixin, TimestampMixin


class BomType(str, enum.Enum):
    STANDARD = "STANDARD"
    ADDON_6_2 = "ADDON_6_2"
    SCHWENKBOCK_3000 = "SCHWENKBOCK_3000"
    SCHWENKBOCK_2000 = "SCHWENKBOCK_2000"


# Schwenkbock BOMs are shared by every plow model
GLOBAL_MODEL_NAME = "GLOBAL"
GLOBAL_BOM_TYPES = (BomType.SCHWENKBOCK_3000, BomType.SCHWENKBOCK_2000)


class Bom(Base, IdMixin, TimestampMixin):
    """BOM header, one per (model_name, bom_type)"""
    __tablename__ = "bom"
    __table_args__ = (
        UniqueConstraint("model_name", "bom_type", name="uq_bom_model_type"),
    )
    
    model_name = Column(String(50), nullable=False)  # "FL 540" or "GLOBAL"
    bom_type = Column(String(30), nullable=False)
    
    items = relationship(
        "BomItem",
        back_populates="bom",
        cascade="all, delete-orphan",
        order_by="BomItem.id",
    )

class BomItem(Base, IdMixin):
    """Component line of a BOM"""
    __tablename__ = "bom_item"
    
    bom_id = Column(Integer, ForeignKey("bom.id", ondelete="CASCADE"), nullable=False, index=True)
    part_id = Column(Integer, ForeignKey("part.id"), nullable=False, index=True)
    qty_per_unit = Column(Integer, default=1, nullable=False)
    
    bom = relationship("Bom", back_populates="items")
    part = relationship("Part", back_populates="bom_items")
