"""
BOM API - admin maintenance of bills of materials
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core import get_db
from app.core.security import block_if_read_only, require_admin
from app.models import BomType
from app.schemas.bom import BomUpdate, BomResponse
from app.services import BomService

router = APIRouter(prefix="/bom", tags=["BOM"], dependencies=[Depends(require_admin)])


@router.get("")
def get_bom(
    model_name: str = Query(..., min_length=1),
    bom_type: BomType = Query(...),
    db: Session = Depends(get_db)
):
    """Returns ``{"bom": null}`` when the BOM has not been defined yet"""
    bom = BomService.get_bom(db, model_name.strip(), bom_type)
    return {"bom": BomResponse.model_validate(bom).model_dump() if bom else None}

@router.get("/all")
def list_boms(db: Session = Depends(get_db)):
    return [BomResponse.model_validate(b).model_dump() for b in BomService.list_boms(db)]

@router.put("", dependencies=[Depends(block_if_read_only)])
def replace_bom(data: BomUpdate, db: Session = Depends(get_db)):
    bom = BomService.replace_bom(db, data)
    return {"bom": BomResponse.model_validate(bom).model_dump()}
