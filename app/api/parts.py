"""
Parts API - catalog, manual adjustments and the movement ledger
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional
from datetime import datetime
import math

from app.core import get_db
from app.core.security import block_if_read_only, require_admin
from app.models import MovementReason
from app.schemas.part import PartCreate, PartUpdate, PartAdjust, PartResponse, PartMovementResponse
from app.services import PartService

router = APIRouter(prefix="/parts", tags=["Parts"])

PAGE_SIZE = 50


def page_payload(items, page: int, per_page: int, total: int) -> dict:
    return {
        "items": items,
        "page": page,
        "total_pages": max(1, math.ceil(total / per_page)),
        "total_count": total
    }


@router.get("")
def list_parts(
    q: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    per: int = Query(PAGE_SIZE, ge=1, le=200),
    include_archived: bool = Query(True),
    db: Session = Depends(get_db)
):
    search = q.strip() if q else None
    parts, total = PartService.get_parts(db, search, page, per, include_archived)
    items = [PartResponse.model_validate(p).model_dump() for p in parts]
    return page_payload(items, page, per, total)

@router.post("", status_code=201, dependencies=[Depends(block_if_read_only), Depends(require_admin)])
def create_part(data: PartCreate, db: Session = Depends(get_db)):
    part = PartService.create_part(db, data)
    return PartResponse.model_validate(part).model_dump()

@router.post("/adjust", dependencies=[Depends(block_if_read_only)])
def adjust_part(data: PartAdjust, db: Session = Depends(get_db)):
    part = PartService.adjust_stock(db, data)
    return PartResponse.model_validate(part).model_dump()

@router.get("/movements", dependencies=[Depends(require_admin)])
def list_movements(
    page: int = Query(1, ge=1),
    per: int = Query(PAGE_SIZE, ge=1, le=200),
    reason: Optional[MovementReason] = Query(None),
    shipment_id: Optional[int] = Query(None),
    part_id: Optional[int] = Query(None),
    date_from: Optional[datetime] = Query(None),
    date_to: Optional[datetime] = Query(None),
    db: Session = Depends(get_db)
):
    movements, total = PartService.get_movements(
        db,
        page=page,
        per_page=per,
        reason=reason.value if reason else None,
        shipment_id=shipment_id,
        part_id=part_id,
        date_from=date_from,
        date_to=date_to
    )
    items = [PartMovementResponse.model_validate(m).model_dump(mode="json") for m in movements]
    return page_payload(items, page, per, total)

@router.patch("/{part_id}", dependencies=[Depends(block_if_read_only), Depends(require_admin)])
def update_part(part_id: int, data: PartUpdate, db: Session = Depends(get_db)):
    part = PartService.update_part(db, part_id, data)
    return PartResponse.model_validate(part).model_dump()

@router.delete("/{part_id}", dependencies=[Depends(block_if_read_only), Depends(require_admin)])
def delete_part(part_id: int, db: Session = Depends(get_db)):
    result = PartService.delete_part(db, part_id)
    return {"ok": True, "result": result}
