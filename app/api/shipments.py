"""
Shipments API - create, edit, status changes and deletion
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import Optional

from app.core import get_db, get_cache, invalidate, TTLCache
from app.core.security import block_if_read_only
from app.models import ShipmentStatus
from app.schemas.shipment import ShipmentCreate, ShipmentUpdate, ShipmentResponse
from app.services import ShipmentService
from app.services.parts_ledger import ReconcileResult

router = APIRouter(prefix="/shipments", tags=["Shipments"])

# Shipment writes change finished-goods stock
INVENTORY_CACHE_KEYS = ("inventory", "products")


def shipment_payload(shipment, result: ReconcileResult) -> dict:
    payload = ShipmentResponse.model_validate(shipment).model_dump(mode="json")
    payload.update(result.as_dict())
    return payload


@router.get("")
def list_shipments(
    status: Optional[ShipmentStatus] = Query(None),
    db: Session = Depends(get_db)
):
    shipments = ShipmentService.get_shipments(db, status.value if status else None)
    return [ShipmentResponse.model_validate(s).model_dump(mode="json") for s in shipments]

@router.get("/{shipment_id}")
def get_shipment(shipment_id: int, db: Session = Depends(get_db)):
    shipment = ShipmentService.get_shipment(db, shipment_id)
    if not shipment:
        raise HTTPException(status_code=404, detail="Not found")
    return ShipmentResponse.model_validate(shipment).model_dump(mode="json")

@router.post("", status_code=201, dependencies=[Depends(block_if_read_only)])
def create_shipment(
    data: ShipmentCreate,
    db: Session = Depends(get_db),
    cache: TTLCache = Depends(get_cache)
):
    shipment, result = ShipmentService.create_shipment(db, data)
    invalidate(cache, *INVENTORY_CACHE_KEYS)
    return shipment_payload(shipment, result)

@router.patch("/{shipment_id}", dependencies=[Depends(block_if_read_only)])
def update_shipment(
    shipment_id: int,
    data: ShipmentUpdate,
    db: Session = Depends(get_db),
    cache: TTLCache = Depends(get_cache)
):
    shipment, result = ShipmentService.update_shipment(db, shipment_id, data)
    invalidate(cache, *INVENTORY_CACHE_KEYS)
    return shipment_payload(shipment, result)

@router.delete("/{shipment_id}", dependencies=[Depends(block_if_read_only)])
def delete_shipment(
    shipment_id: int,
    db: Session = Depends(get_db),
    cache: TTLCache = Depends(get_cache)
):
    ShipmentService.delete_shipment(db, shipment_id)
    invalidate(cache, *INVENTORY_CACHE_KEYS)
    return {"ok": True}
