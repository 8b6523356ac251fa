# Services Package
from .activity_service import ActivityService
from .inventory_service import InventoryService
from .part_service import PartService
from .bom_service import BomService
from .shipment_service import ShipmentService
from . import parts_ledger

__all__ = [
    "ActivityService",
    "InventoryService",
    "PartService",
    "BomService",
    "ShipmentService",
    "parts_ledger",
]
