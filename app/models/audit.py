"""
Activity Log Model
"""
from sqlalchemy import Column, String, DateTime, JSON, Text
from sqlalchemy.sql import func
from app.core import Base
from .base import IdMixin

class ActivityLog(Base, IdMixin):
    """Audit trail of user-visible changes, pruned after the retention window"""
    __tablename__ = "activity_log"
    
    type = Column(String(50), nullable=False, index=True)  # shipment.create, shipment.status, bom.update, ...
    entity_type = Column(String(50), nullable=False)
    entity_id = Column(String(50), nullable=False, index=True)
    summary = Column(Text, nullable=False)
    meta = Column(JSON)
    
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
