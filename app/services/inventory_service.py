"""
Inventory Service - finished plows on hand
"""
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from collections import defaultdict
from typing import Dict, Iterable, List, Tuple
import logging

from app.models import InventoryItem, PlowModel, Variant
from app.schemas.inventory import InventoryAdjust

logger = logging.getLogger(__name__)

# (model, serial_number, variant, is_schwenkbock)
InventoryKey = Tuple[str, int, str, bool]

# Standard serial per model; these rows always exist and cannot be removed
FIXED_CATALOG = {
    PlowModel.FL_640: 2901,
    PlowModel.FL_540: 2716,
    PlowModel.FL_470: 2404,
    PlowModel.FL_400: 1801,
    PlowModel.FL_340: 1403,
    PlowModel.FL_260: 1203,
}


def inventory_key(item) -> InventoryKey:
    return (
        PlowModel(item.model).value,
        int(item.serial_number),
        Variant(item.variant).value,
        bool(item.is_schwenkbock),
    )


def inventory_totals(items: Iterable) -> Dict[InventoryKey, int]:
    """Sum shipment line quantities per inventory row"""
    totals: Dict[InventoryKey, int] = defaultdict(int)
    for item in items:
        totals[inventory_key(item)] += item.quantity
    return dict(totals)


class InventoryService:
    """Finished-goods inventory business logic"""
    
    @staticmethod
    def list_items(db: Session) -> List[InventoryItem]:
        return db.query(InventoryItem).order_by(
            InventoryItem.model,
            InventoryItem.serial_number,
            InventoryItem.variant,
            InventoryItem.is_schwenkbock
        ).all()
    
    @staticmethod
    def get_or_create_item(db: Session, key: InventoryKey) -> InventoryItem:
        model, serial_number, variant, is_schwenkbock = key
        item = db.query(InventoryItem).filter(
            InventoryItem.model == model,
            InventoryItem.serial_number == serial_number,
            InventoryItem.variant == variant,
            InventoryItem.is_schwenkbock == is_schwenkbock
        ).first()
        if item is None:
            item = InventoryItem(
                model=model,
                serial_number=serial_number,
                variant=variant,
                is_schwenkbock=is_schwenkbock,
                quantity=0
            )
            db.add(item)
            db.flush()
        return item
    
    @staticmethod
    def adjust(db: Session, data: InventoryAdjust) -> InventoryItem:
        """Manual stock correction; finished goods never go below zero"""
        key = inventory_key(data)
        try:
            item = InventoryService.get_or_create_item(db, key)
            next_quantity = item.quantity + data.delta
            if next_quantity < 0:
                raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Insufficient stock")
            item.quantity = next_quantity
            db.commit()
            db.refresh(item)
        except Exception:
            db.rollback()
            raise
        
        logger.info(f"Inventory {key} adjusted by {data.delta} -> {item.quantity}")
        return item
    
    @staticmethod
    def deduct_totals(db: Session, totals: Dict[InventoryKey, int]) -> None:
        """Take plows out of stock for a shipment (no commit)"""
        for key, quantity in totals.items():
            item = InventoryService.get_or_create_item(db, key)
            if item.quantity < quantity:
                raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Insufficient stock")
            item.quantity = item.quantity - quantity
        db.flush()
    
    @staticmethod
    def restore_totals(db: Session, totals: Dict[InventoryKey, int]) -> None:
        """Put a shipment's plows back into stock (no commit)"""
        for key, quantity in totals.items():
            item = InventoryService.get_or_create_item(db, key)
            item.quantity = item.quantity + quantity
        db.flush()
    
    @staticmethod
    def _create_product_rows(db: Session, model: PlowModel, serial_number: int, is_manual: bool) -> int:
        """Create the four variant/mount rows of a product if missing"""
        created = 0
        for variant in Variant:
            for is_schwenkbock in (False, True):
                exists = db.query(InventoryItem.id).filter(
                    InventoryItem.model == model.value,
                    InventoryItem.serial_number == serial_number,
                    InventoryItem.variant == variant.value,
                    InventoryItem.is_schwenkbock == is_schwenkbock
                ).first()
                if exists:
                    continue
                db.add(InventoryItem(
                    model=model.value,
                    serial_number=serial_number,
                    variant=variant.value,
                    is_schwenkbock=is_schwenkbock,
                    quantity=0,
                    is_manual=is_manual
                ))
                created += 1
        db.flush()
        return created
    
    @staticmethod
    def seed_fixed_catalog(db: Session) -> int:
        created = 0
        for model, serial_number in FIXED_CATALOG.items():
            created += InventoryService._create_product_rows(db, model, serial_number, is_manual=False)
        db.commit()
        if created:
            logger.info(f"Seeded {created} fixed inventory rows")
        return created
    
    @staticmethod
    def list_products(db: Session) -> List[dict]:
        """Distinct (model, serial) pairs offered in shipment forms"""
        InventoryService.seed_fixed_catalog(db)
        rows = db.query(
            InventoryItem.model,
            InventoryItem.serial_number,
            InventoryItem.is_manual
        ).distinct().order_by(InventoryItem.model, InventoryItem.serial_number).all()
        
        seen = set()
        products = []
        for row in rows:
            key = (row.model, row.serial_number)
            if key in seen:
                continue
            seen.add(key)
            products.append({
                "model": row.model,
                "serial_number": row.serial_number,
                "is_manual": bool(row.is_manual)
            })
        return products
    
    @staticmethod
    def add_product(db: Session, model: PlowModel, serial_number: int) -> dict:
        try:
            InventoryService._create_product_rows(db, model, serial_number, is_manual=True)
            db.commit()
        except Exception:
            db.rollback()
            raise
        logger.info(f"Added manual product {model.value} {serial_number}")
        return {"model": model.value, "serial_number": serial_number}
    
    @staticmethod
    def delete_product(db: Session, model: PlowModel, serial_number: int) -> int:
        """Only manually added products can be removed"""
        deleted = db.query(InventoryItem).filter(
            InventoryItem.model == model.value,
            InventoryItem.serial_number == serial_number,
            InventoryItem.is_manual.is_(True)
        ).delete(synchronize_session=False)
        if deleted == 0:
            db.rollback()
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Cannot delete fixed item")
        db.commit()
        logger.info(f"Deleted manual product {model.value} {serial_number}")
        return deleted
