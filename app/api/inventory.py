"""
Inventory API - finished plows and the product list
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core import get_db, get_cache, invalidate, TTLCache
from app.core.security import block_if_read_only
from app.schemas.inventory import InventoryAdjust, ProductKey, InventoryItemResponse
from app.services import InventoryService

router = APIRouter(tags=["Inventory"])


@router.get("/inventory")
def list_inventory(db: Session = Depends(get_db), cache: TTLCache = Depends(get_cache)):
    items = cache.get("inventory")
    if items is None:
        items = [InventoryItemResponse.model_validate(i).model_dump() for i in InventoryService.list_items(db)]
        cache["inventory"] = items
    return items

@router.post("/inventory/adjust", dependencies=[Depends(block_if_read_only)])
def adjust_inventory(
    data: InventoryAdjust,
    db: Session = Depends(get_db),
    cache: TTLCache = Depends(get_cache)
):
    item = InventoryService.adjust(db, data)
    invalidate(cache, "inventory")
    return InventoryItemResponse.model_validate(item).model_dump()

@router.get("/products")
def list_products(db: Session = Depends(get_db), cache: TTLCache = Depends(get_cache)):
    products = cache.get("products")
    if products is None:
        products = InventoryService.list_products(db)
        cache["products"] = products
    return products

@router.post("/products", status_code=201, dependencies=[Depends(block_if_read_only)])
def add_product(
    data: ProductKey,
    db: Session = Depends(get_db),
    cache: TTLCache = Depends(get_cache)
):
    result = InventoryService.add_product(db, data.model, data.serial_number)
    invalidate(cache)
    return result

@router.delete("/products", dependencies=[Depends(block_if_read_only)])
def delete_product(
    data: ProductKey,
    db: Session = Depends(get_db),
    cache: TTLCache = Depends(get_cache)
):
    InventoryService.delete_product(db, data.model, data.serial_number)
    invalidate(cache)
    return {"ok": True}
