"""
Spare Parts Catalog Model
"""
from sqlalchemy import Column, String, Integer, Boolean
from sqlalchemy.orm import relationship
from app.core import Base
from .base import IdMixin, TimestampMixin

class Part(Base, IdMixin, TimestampMixin):
    """Raw component part kept in stock"""
    __tablename__ = "part"
    
    name = Column(String(200), unique=True, nullable=False, index=True)
    stock = Column(Integer, default=0, nullable=False)  # May go negative (oversold)
    unit = Column(String(20), default="Stk", nullable=False)
    is_archived = Column(Boolean, default=False, nullable=False)
    
    # Supplier
    shop_name = Column(String(200))
    shop_url = Column(String(500))
    
    # Relationships
    movements = relationship("PartMovement", back_populates="part")
    bom_items = relationship("BomItem", back_populates="part")
