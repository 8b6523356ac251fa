"""
Shipment Models
"""
import enum

from sqlalchemy import Column, String, Integer, Boolean, Date, ForeignKey, Text
from sqlalchemy.orm import relationship
from app.core import Base
from .base import IdMixin, TimestampMixin


class ShipmentStatus(str, enum.Enum):
    RESERVED = "RESERVED"
    READY = "READY"
    SENT = "SENT"


class ValveType(str, enum.Enum):
    NONE = "NONE"
    SMALL = "SMALL"
    LARGE = "LARGE"


class Shipment(Base, IdMixin, TimestampMixin):
    """Customer shipment"""
    __tablename__ = "shipment"
    
    # Customer
    company_name = Column(String(200), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    
    # Address
    street = Column(String(300), nullable=False)
    postal_code = Column(String(20), nullable=False)
    city = Column(String(100), nullable=False)
    country = Column(String(100), nullable=False)
    
    notes = Column(Text)
    status = Column(String(20), default=ShipmentStatus.RESERVED.value, nullable=False, index=True)
    
    # Relationships
    items = relationship("ShipmentItem", back_populates="shipment", cascade="all, delete-orphan", order_by="ShipmentItem.id")
    extras = relationship("ShipmentExtraItem", back_populates="shipment", cascade="all, delete-orphan", order_by="ShipmentExtraItem.id")

class ShipmentItem(Base, IdMixin):
    """Plow line of a shipment"""
    __tablename__ = "shipment_item"
    
    shipment_id = Column(Integer, ForeignKey("shipment.id", ondelete="CASCADE"), nullable=False, index=True)
    
    model = Column(String(20), nullable=False)
    serial_number = Column(Integer, nullable=False)
    variant = Column(String(20), nullable=False)
    is_schwenkbock = Column(Boolean, default=False, nullable=False)
    valve_type = Column(String(10), default=ValveType.NONE.value, nullable=False)
    bucket_holder = Column(Boolean, default=False, nullable=False)
    quantity = Column(Integer, default=1, nullable=False)
    build_number = Column(String(50), nullable=False)
    build_date = Column(Date, nullable=False)
    extra_parts = Column(Text)
    
    shipment = relationship("Shipment", back_populates="items")

class ShipmentExtraItem(Base, IdMixin):
    """Loose part shipped alongside the plows"""
    __tablename__ = "shipment_extra_item"
    
    shipment_id = Column(Integer, ForeignKey("shipment.id", ondelete="CASCADE"), nullable=False, index=True)
    part_id = Column(Integer, ForeignKey("part.id"), nullable=True)
    name = Column(String(200))
    quantity = Column(Integer, default=1, nullable=False)
    note = Column(Text)
    
    shipment = relationship("Shipment", back_populates="extras")
