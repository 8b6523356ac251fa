# Pydantic Schemas Package
from .part import PartCreate, PartUpdate, PartAdjust, PartResponse, PartMovementResponse
from .bom import BomItemInput, BomUpdate, BomResponse
from .shipment import (
    ShipmentItemInput, ShipmentExtraInput, ShipmentCreate, ShipmentUpdate, ShipmentResponse,
    CUSTOMER_FIELDS,
)
from .inventory import InventoryAdjust, ProductKey, InventoryItemResponse

__all__ = [
    "PartCreate", "PartUpdate", "PartAdjust", "PartResponse", "PartMovementResponse",
    "BomItemInput", "BomUpdate", "BomResponse",
    "ShipmentItemInput", "ShipmentExtraInput", "ShipmentCreate", "ShipmentUpdate", "ShipmentResponse",
    "CUSTOMER_FIELDS",
    "InventoryAdjust", "ProductKey", "InventoryItemResponse",
]
