from .base import IdMixin, TimestampMixin
from .inventory import InventoryItem, PlowModel, Variant
from .part import Part
from .stock import PartMovement, MovementReason, SHIPMENT_REASONS
from .bom import Bom, BomItem, BomType, GLOBAL_MODEL_NAME, GLOBAL_BOM_TYPES
from .shipment import Shipment, ShipmentItem, ShipmentExtraItem, ShipmentStatus, ValveType
from .audit import ActivityLog

__all__ = [
    # Base
    "IdMixin", "TimestampMixin",
    # Inventory
    "InventoryItem", "PlowModel", "Variant",
    # Parts
    "Part",
    # Ledger
    "PartMovement", "MovementReason", "SHIPMENT_REASONS",
    # BOM
    "Bom", "BomItem", "BomType", "GLOBAL_MODEL_NAME", "GLOBAL_BOM_TYPES",
    # Shipment
    "Shipment", "ShipmentItem", "ShipmentExtraItem", "ShipmentStatus", "ValveType",
    # Audit
    "ActivityLog",
]
