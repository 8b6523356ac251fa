"""
Shipment Service - Business Logic for Shipments
"""
from sqlalchemy.orm import Session, selectinload
from fastapi import HTTPException, status
from typing import List, Optional, Tuple
from datetime import datetime
import logging

from app.models import Part, Shipment, ShipmentItem, ShipmentExtraItem, ShipmentStatus
from app.schemas.shipment import (
    CUSTOMER_FIELDS, ShipmentCreate, ShipmentUpdate, ShipmentItemInput, ShipmentExtraInput,
)
from .activity_service import ActivityService
from .inventory_service import InventoryService, inventory_totals
from .parts_ledger import ReconcileResult, reconcile_shipment, rollback_shipment

logger = logging.getLogger(__name__)


def has_duplicate_build_numbers(items: List[ShipmentItemInput]) -> bool:
    seen = set()
    for item in items:
        key = item.build_number.strip()
        if not key:
            continue
        if key in seen:
            return True
        seen.add(key)
    return False


class ShipmentService:
    """Shipment business logic"""

    @staticmethod
    def get_shipments(db: Session, status_filter: Optional[str] = None) -> List[Shipment]:
        query = db.query(Shipment).options(
            selectinload(Shipment.items),
            selectinload(Shipment.extras)
        )
        if status_filter:
            query = query.filter(Shipment.status == status_filter)
        return query.order_by(Shipment.created_at.desc(), Shipment.id.desc()).all()

    @staticmethod
    def get_shipment(db: Session, shipment_id: int) -> Optional[Shipment]:
        return db.query(Shipment).filter(Shipment.id == shipment_id).first()

    @staticmethod
    def _customer_fields(data) -> dict:
        """Required address fields, stripped; 400 on the first blank one"""
        values = {}
        for field in CUSTOMER_FIELDS:
            value = getattr(data, field)
            if value is None or not str(value).strip():
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Missing field: {field}"
                )
            values[field] = str(value).strip()
        values["notes"] = data.notes.strip() if data.notes and data.notes.strip() else None
        return values

    @staticmethod
    def _check_items(items: List[ShipmentItemInput]) -> None:
        if has_duplicate_build_numbers(items):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Duplicate build number")

    @staticmethod
    def _build_items(items: List[ShipmentItemInput]) -> List[ShipmentItem]:
        return [
            ShipmentItem(
                model=item.model.value,
                serial_number=item.serial_number,
                variant=item.variant.value,
                is_schwenkbock=item.is_schwenkbock,
                valve_type=item.valve_type.value,
                bucket_holder=item.bucket_holder,
                quantity=item.quantity,
                build_number=item.build_number,
                build_date=item.build_date,
                extra_parts=item.extra_parts
            )
            for item in items
        ]

    @staticmethod
    def _build_extras(db: Session, extras: List[ShipmentExtraInput]) -> List[ShipmentExtraItem]:
        """Unknown part ids are dropped so the extra falls back to name matching"""
        requested = {extra.part_id for extra in extras if extra.part_id}
        known = set()
        if requested:
            known = {row.id for row in db.query(Part.id).filter(Part.id.in_(sorted(requested)))}

        return [
            ShipmentExtraItem(
                name=extra.name,
                part_id=extra.part_id if extra.part_id in known else None,
                quantity=extra.quantity,
                note=extra.note
            )
            for extra in extras
        ]

    @staticmethod
    def create_shipment(db: Session, data: ShipmentCreate) -> Tuple[Shipment, ReconcileResult]:
        """Create a shipment, take its plows out of stock and book parts if READY"""
        if not data.items and not data.extras:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing items")

        customer = ShipmentService._customer_fields(data)
        ShipmentService._check_items(data.items)

        try:
            InventoryService.deduct_totals(db, inventory_totals(data.items))

            shipment = Shipment(
                **customer,
                status=(data.status or ShipmentStatus.RESERVED).value
            )
            shipment.items = ShipmentService._build_items(data.items)
            shipment.extras = ShipmentService._build_extras(db, data.extras)
            db.add(shipment)
            db.flush()

            result = reconcile_shipment(db, shipment)

            ActivityService.log(
                db,
                type="shipment.create",
                entity_type="Shipment",
                entity_id=shipment.id,
                summary=f"Shipment {shipment.id} created for {shipment.company_name}",
                meta={
                    "shipment_id": shipment.id,
                    "status": shipment.status,
                    "company_name": shipment.company_name,
                    "items_count": len(shipment.items),
                    "extras_count": len(shipment.extras),
                }
            )
            db.commit()
        except Exception:
            db.rollback()
            raise

        db.refresh(shipment)
        logger.info(f"Created shipment {shipment.id} ({shipment.status}) for {shipment.company_name}")
        return shipment, result

    @staticmethod
    def update_shipment(db: Session, shipment_id: int, data: ShipmentUpdate) -> Tuple[Shipment, ReconcileResult]:
        """
        Status change or full edit.

        Without items only the status moves. With items the customer block is
        required; the old plows go back into stock before the new ones are
        taken, then the parts ledger is reconciled for the resulting status.
        """
        shipment = ShipmentService.get_shipment(db, shipment_id)
        if not shipment:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")

        status_only = not data.items and data.status is not None
        if not status_only and not data.items:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing items")

        if not status_only:
            customer = ShipmentService._customer_fields(data)
            ShipmentService._check_items(data.items)

        previous_status = shipment.status
        try:
            if status_only:
                shipment.status = data.status.value
            else:
                InventoryService.restore_totals(db, inventory_totals(shipment.items))
                InventoryService.deduct_totals(db, inventory_totals(data.items))

                for field, value in customer.items():
                    setattr(shipment, field, value)
                if data.status is not None:
                    shipment.status = data.status.value
                shipment.items = ShipmentService._build_items(data.items)
                if data.extras is not None:
                    shipment.extras = ShipmentService._build_extras(db, data.extras)
            db.flush()

            result = reconcile_shipment(db, shipment)

            if status_only or shipment.status != previous_status:
                ActivityService.log(
                    db,
                    type="shipment.status",
                    entity_type="Shipment",
                    entity_id=shipment.id,
                    summary=f"Shipment {shipment.id} status {previous_status} -> {shipment.status}",
                    meta={
                        "shipment_id": shipment.id,
                        "from_status": previous_status,
                        "to_status": shipment.status,
                    }
                )
            db.commit()
        except Exception:
            db.rollback()
            raise

        db.refresh(shipment)
        logger.info(f"Updated shipment {shipment.id}: {previous_status} -> {shipment.status}")
        return shipment, result

    @staticmethod
    def delete_shipment(db: Session, shipment_id: int) -> None:
        """
        Remove a shipment and return its plows to stock.

        Booked parts go back too, unless the shipment was SENT: those parts
        left with the plows.
        """
        shipment = ShipmentService.get_shipment(db, shipment_id)
        if not shipment:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")

        try:
            InventoryService.restore_totals(db, inventory_totals(shipment.items))
            if shipment.status != ShipmentStatus.SENT.value:
                rollback_shipment(db, shipment.id)

            ActivityService.log(
                db,
                type="shipment.delete",
                entity_type="Shipment",
                entity_id=shipment.id,
                summary=f"Shipment {shipment.id} deleted ({shipment.company_name})",
                meta={
                    "shipment_id": shipment.id,
                    "company_name": shipment.company_name,
                    "items_count": len(shipment.items),
                    "extras_count": len(shipment.extras),
                }
            )
            db.delete(shipment)
            db.commit()
        except Exception:
            db.rollback()
            raise

        logger.info(f"Deleted shipment {shipment_id}")

    @staticmethod
    def promote_reserved(db: Session, cutoff: datetime, dry_run: bool = False) -> int:
        """Move RESERVED shipments created before ``cutoff`` to READY, booking their parts"""
        shipments = db.query(Shipment).filter(
            Shipment.status == ShipmentStatus.RESERVED.value,
            Shipment.created_at < cutoff
        ).order_by(Shipment.id).all()

        if dry_run:
            return len(shipments)

        try:
            for shipment in shipments:
                shipment.status = ShipmentStatus.READY.value
                db.flush()
                reconcile_shipment(db, shipment)
                ActivityService.log(
                    db,
                    type="shipment.status",
                    entity_type="Shipment",
                    entity_id=shipment.id,
                    summary=f"Shipment {shipment.id} status RESERVED -> READY (bulk)",
                    meta={"shipment_id": shipment.id, "from_status": "RESERVED", "to_status": "READY"}
                )
            db.commit()
        except Exception:
            db.rollback()
            raise

        logger.info(f"Promoted {len(shipments)} reserved shipments to READY")
        return len(shipments)
