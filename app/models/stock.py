"""
Part Movement Ledger
"""
import enum

from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core import Base
from .base import IdMixin


class MovementReason(str, enum.Enum):
    MANUAL_ADJUST = "MANUAL_ADJUST"
    READY_SHIPMENT = "READY_SHIPMENT"
    ROLLBACK_SHIPMENT = "ROLLBACK_SHIPMENT"


SHIPMENT_REASONS = (MovementReason.READY_SHIPMENT.value, MovementReason.ROLLBACK_SHIPMENT.value)


class PartMovement(Base, IdMixin):
    """Append-only record of every part stock change"""
    __tablename__ = "part_movement"
    
    part_id = Column(Integer, ForeignKey("part.id"), nullable=False, index=True)
    delta = Column(Integer, nullable=False)  # Positive or negative
    reason = Column(String(30), nullable=False, index=True)
    
    # Reference
    shipment_id = Column(Integer, ForeignKey("shipment.id", ondelete="SET NULL"), index=True)
    
    # Metadata
    note = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    
    # Relationships
    part = relationship("Part", back_populates="movements")
