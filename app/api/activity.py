"""
Activity API - audit history for the admin panel
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from app.core import get_db
from app.core.security import require_admin
from app.services import ActivityService

router = APIRouter(prefix="/activity", tags=["Activity"], dependencies=[Depends(require_admin)])


@router.get("")
def list_activity(
    q: Optional[str] = Query(None),
    take: int = Query(50, ge=1, le=100),
    cursor: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db)
):
    search = q.strip() if q else None
    logs, next_cursor = ActivityService.list_activity(db, search, take, cursor)
    return {
        "items": [
            {
                "id": log.id,
                "type": log.type,
                "entity_type": log.entity_type,
                "entity_id": log.entity_id,
                "summary": log.summary,
                "meta": log.meta,
                "created_at": log.created_at.isoformat() if log.created_at else None
            }
            for log in logs
        ],
        "next_cursor": next_cursor
    }

@router.post("/cleanup")
def cleanup_activity(db: Session = Depends(get_db)):
    return {"deleted": ActivityService.cleanup(db)}
