"""
BOM Service - bill of materials per plow model and add-on
"""
from sqlalchemy.orm import Session, selectinload
from fastapi import HTTPException, status
from typing import List, Optional
import logging

from app.models import Bom, BomItem, BomType, Part, PlowModel, GLOBAL_MODEL_NAME, GLOBAL_BOM_TYPES
from app.schemas.bom import BomUpdate
from .activity_service import ActivityService

logger = logging.getLogger(__name__)

MODEL_NAMES = {model.display_name for model in PlowModel}


class BomService:
    """BOM business logic"""
    
    @staticmethod
    def get_bom(db: Session, model_name: str, bom_type: BomType) -> Optional[Bom]:
        return db.query(Bom).options(
            selectinload(Bom.items).selectinload(BomItem.part)
        ).filter(
            Bom.model_name == model_name,
            Bom.bom_type == BomType(bom_type).value
        ).first()
    
    @staticmethod
    def list_boms(db: Session) -> List[Bom]:
        return db.query(Bom).options(
            selectinload(Bom.items).selectinload(BomItem.part)
        ).order_by(Bom.model_name, Bom.bom_type).all()
    
    @staticmethod
    def validate_key(model_name: str, bom_type: BomType) -> None:
        """Schwenkbock BOMs are shared (GLOBAL); everything else belongs to one model"""
        if bom_type in GLOBAL_BOM_TYPES:
            if model_name != GLOBAL_MODEL_NAME:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"{bom_type.value} BOMs use model name {GLOBAL_MODEL_NAME}"
                )
        elif model_name not in MODEL_NAMES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Unknown model name: {model_name}"
            )
    
    @staticmethod
    def replace_bom(db: Session, data: BomUpdate) -> Bom:
        """Create or overwrite a BOM; the old item list is dropped wholesale"""
        BomService.validate_key(data.model_name, data.bom_type)
        
        part_ids = sorted({item.part_id for item in data.items})
        if part_ids:
            parts = db.query(Part).filter(Part.id.in_(part_ids)).all()
            found = {part.id for part in parts}
            missing = [pid for pid in part_ids if pid not in found]
            if missing:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Unknown part ids: {missing}"
                )
            archived = [part.name for part in parts if part.is_archived]
            if archived:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Archived parts cannot be used: {', '.join(archived)}"
                )
        
        try:
            bom = db.query(Bom).filter(
                Bom.model_name == data.model_name,
                Bom.bom_type == data.bom_type.value
            ).first()
            if bom is None:
                bom = Bom(model_name=data.model_name, bom_type=data.bom_type.value)
                db.add(bom)
                db.flush()
            
            db.query(BomItem).filter(BomItem.bom_id == bom.id).delete(synchronize_session=False)
            for item in data.items:
                db.add(BomItem(bom_id=bom.id, part_id=item.part_id, qty_per_unit=item.qty_per_unit))
            
            ActivityService.log(
                db,
                type="bom.update",
                entity_type="Bom",
                entity_id=bom.id,
                summary=f"BOM {data.model_name} {data.bom_type.value} saved ({len(data.items)} items)",
                meta={
                    "model_name": data.model_name,
                    "bom_type": data.bom_type.value,
                    "items": [item.model_dump() for item in data.items],
                }
            )
            db.commit()
        except Exception:
            db.rollback()
            raise
        
        db.expire_all()
        logger.info(f"BOM {data.model_name}/{data.bom_type.value} replaced with {len(data.items)} items")
        return BomService.get_bom(db, data.model_name, data.bom_type)
