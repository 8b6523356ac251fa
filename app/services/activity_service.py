"""
Activity Service - audit trail for shipments, BOMs and retention cleanup
"""
from sqlalchemy.orm import Session
from sqlalchemy import or_
from typing import List, Optional, Tuple
from datetime import datetime, timedelta, timezone
import logging

from app.core.config import settings
from app.models import ActivityLog

logger = logging.getLogger(__name__)


class ActivityService:
    """Activity log business logic"""
    
    @staticmethod
    def log(
        db: Session,
        type: str,
        entity_type: str,
        entity_id,
        summary: str,
        meta: Optional[dict] = None
    ) -> ActivityLog:
        """Stage an activity entry in the caller's transaction"""
        entry = ActivityLog(
            type=type,
            entity_type=entity_type,
            entity_id=str(entity_id),
            summary=summary,
            meta=meta or {}
        )
        db.add(entry)
        return entry
    
    @staticmethod
    def list_activity(
        db: Session,
        search: Optional[str] = None,
        take: int = 50,
        cursor: Optional[int] = None
    ) -> Tuple[List[ActivityLog], Optional[int]]:
        """Newest first; the returned cursor is the id of the first entry of the next page"""
        query = db.query(ActivityLog)
        
        if search:
            term = f"%{search}%"
            query = query.filter(
                or_(
                    ActivityLog.summary.ilike(term),
                    ActivityLog.type.ilike(term),
                    ActivityLog.entity_type.ilike(term),
                    ActivityLog.entity_id.ilike(term)
                )
            )
        
        # Ids grow with insertion time, so they double as a stable cursor
        if cursor:
            query = query.filter(ActivityLog.id <= cursor)
        
        logs = query.order_by(ActivityLog.id.desc()).limit(take + 1).all()
        
        next_cursor = None
        if len(logs) > take:
            next_cursor = logs.pop().id
        return logs, next_cursor
    
    @staticmethod
    def cleanup(db: Session, retention_days: Optional[int] = None, now: Optional[datetime] = None) -> int:
        """Delete entries older than the retention window"""
        days = retention_days if retention_days is not None else settings.ACTIVITY_RETENTION_DAYS
        cutoff = (now or datetime.now(timezone.utc)) - timedelta(days=days)
        
        deleted = db.query(ActivityLog).filter(
            ActivityLog.created_at < cutoff
        ).delete(synchronize_session=False)
        db.commit()
        
        logger.info(f"Activity cleanup removed {deleted} entries older than {days} days")
        return deleted
