"""
Part Service - spare parts catalog and manual stock movements
"""
from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException, status
from typing import Dict, List, Optional, Tuple
from datetime import datetime
import logging

from app.models import Part, PartMovement, MovementReason, BomItem, ShipmentExtraItem
from app.schemas.part import PartCreate, PartUpdate, PartAdjust

logger = logging.getLogger(__name__)


def name_key(name: str) -> str:
    """Comparison key for part names; SQLite lower() only folds ASCII"""
    return name.strip().casefold()


def part_ids_by_name(db: Session) -> Dict[str, int]:
    """Map of name key to part id, oldest part winning on a clash"""
    ids = {}
    for row in db.query(Part.id, Part.name).order_by(Part.id):
        ids.setdefault(name_key(row.name), row.id)
    return ids


class PartService:
    """Parts catalog business logic"""
    
    @staticmethod
    def get_part(db: Session, part_id: int) -> Optional[Part]:
        return db.query(Part).filter(Part.id == part_id).first()
    
    @staticmethod
    def get_part_by_name(db: Session, name: str) -> Optional[Part]:
        """Case-insensitive exact match"""
        part_id = part_ids_by_name(db).get(name_key(name))
        return db.get(Part, part_id) if part_id is not None else None
    
    @staticmethod
    def get_parts(
        db: Session,
        search: Optional[str] = None,
        page: int = 1,
        per_page: int = 50,
        include_archived: bool = True
    ) -> Tuple[List[Part], int]:
        """Get parts with name search and pagination"""
        query = db.query(Part)
        
        if not include_archived:
            query = query.filter(Part.is_archived.is_(False))
        
        if search:
            query = query.filter(Part.name.ilike(f"%{search}%"))
        
        total = query.count()
        
        parts = query.order_by(Part.name.asc())\
            .offset((page - 1) * per_page)\
            .limit(per_page)\
            .all()
        
        return parts, total
    
    @staticmethod
    def create_part(db: Session, data: PartCreate) -> Part:
        if PartService.get_part_by_name(db, data.name):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Part '{data.name}' already exists"
            )
        
        part = Part(**data.model_dump())
        db.add(part)
        PartService._commit_unique_name(db, data.name)
        db.refresh(part)
        
        logger.info(f"Created part: {part.name} (ID: {part.id})")
        return part
    
    @staticmethod
    def update_part(db: Session, part_id: int, data: PartUpdate) -> Part:
        part = PartService.get_part(db, part_id)
        if not part:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Part not found")
        
        update_data = data.model_dump(exclude_unset=True)
        if not update_data:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing updates")
        
        if update_data.get("name"):
            existing = PartService.get_part_by_name(db, update_data["name"])
            if existing and existing.id != part_id:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail=f"Part '{update_data['name']}' already exists"
                )
        elif "name" in update_data:
            del update_data["name"]
        
        if "unit" in update_data and not update_data["unit"]:
            del update_data["unit"]
        
        for field, value in update_data.items():
            setattr(part, field, value)
        
        PartService._commit_unique_name(db, part.name)
        db.refresh(part)
        
        logger.info(f"Updated part: {part.name} (ID: {part.id})")
        return part
    
    @staticmethod
    def _commit_unique_name(db: Session, name: str) -> None:
        """Commit, reporting a name clash caught by the unique index as 409"""
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Part '{name}' already exists"
            )
    
    @staticmethod
    def is_referenced(db: Session, part_id: int) -> bool:
        """Whether a BOM, movement or shipment extra points at the part"""
        for model in (BomItem, PartMovement, ShipmentExtraItem):
            if db.query(model.id).filter(model.part_id == part_id).first():
                return True
        return False
    
    @staticmethod
    def delete_part(db: Session, part_id: int) -> str:
        """Hard delete unused parts; archive referenced ones to keep the ledger intact"""
        part = PartService.get_part(db, part_id)
        if not part:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Part not found")
        
        if PartService.is_referenced(db, part_id):
            part.is_archived = True
            result = "archived"
        else:
            db.delete(part)
            result = "deleted"
        db.commit()
        
        logger.info(f"Part {part_id} {result}")
        return result
    
    @staticmethod
    def adjust_stock(db: Session, data: PartAdjust) -> Part:
        """Manual stock correction, recorded as MANUAL_ADJUST"""
        part = PartService.get_part(db, data.part_id)
        if not part:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Part not found")
        if part.is_archived:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Part archived")
        
        try:
            part.stock = Part.stock + data.delta
            db.add(PartMovement(
                part_id=part.id,
                delta=data.delta,
                reason=MovementReason.MANUAL_ADJUST.value,
                note=data.note
            ))
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(part)
        
        logger.info(f"Adjusted stock for {part.name}: {data.delta} (Note: {data.note})")
        return part
    
    @staticmethod
    def get_movements(
        db: Session,
        page: int = 1,
        per_page: int = 50,
        reason: Optional[str] = None,
        shipment_id: Optional[int] = None,
        part_id: Optional[int] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None
    ) -> Tuple[List[PartMovement], int]:
        """Ledger entries, newest first"""
        query = db.query(PartMovement)
        
        if reason:
            query = query.filter(PartMovement.reason == reason)
        if shipment_id:
            query = query.filter(PartMovement.shipment_id == shipment_id)
        if part_id:
            query = query.filter(PartMovement.part_id == part_id)
        if date_from:
            query = query.filter(PartMovement.created_at >= date_from)
        if date_to:
            query = query.filter(PartMovement.created_at <= date_to)
        
        total = query.count()
        
        movements = query.options(joinedload(PartMovement.part))\
            .order_by(PartMovement.created_at.desc(), PartMovement.id.desc())\
            .offset((page - 1) * per_page)\
            .limit(per_page)\
            .all()
        
        return movements, total
