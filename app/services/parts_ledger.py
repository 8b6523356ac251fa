"""
Parts Ledger - BOM-driven part requirements and stock reconciliation

Every function here runs inside the caller's Session and never commits.
The caller owns the transaction, so a database error rolls back all stock
changes of one shipment update together.
"""
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from app.models import (
    Bom, BomType, GLOBAL_MODEL_NAME, Part, PartMovement, MovementReason,
    SHIPMENT_REASONS, PlowModel, ShipmentStatus, ValveType,
)
from .part_service import name_key, part_ids_by_name

logger = logging.getLogger(__name__)

# Plows that take the 3000 series Schwenkbock mount; the rest take the 2000
SCHWENKBOCK_3000_MODELS = frozenset({
    PlowModel.FL_640,
    PlowModel.FL_540,
    PlowModel.FL_470,
    PlowModel.FL_400,
})


@dataclass(frozen=True)
class BomKey:
    model_name: str
    bom_type: str

    def as_dict(self) -> dict:
        return {"model_name": self.model_name, "bom_type": self.bom_type}


@dataclass
class StockWarning:
    part_id: int
    name: str
    stock: int

    def as_dict(self) -> dict:
        return {"part_id": self.part_id, "name": self.name, "stock": self.stock}


@dataclass
class PartsSummary:
    required_by_part_id: Dict[int, int] = field(default_factory=dict)
    missing_bom: List[BomKey] = field(default_factory=list)
    unmatched_extras: List[str] = field(default_factory=list)


@dataclass
class ReconcileResult:
    summary: PartsSummary = field(default_factory=PartsSummary)
    delta_by_part_id: Dict[int, int] = field(default_factory=dict)
    warnings: List[StockWarning] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            "stock_warnings": [w.as_dict() for w in self.warnings],
            "missing_bom": [key.as_dict() for key in self.summary.missing_bom],
            "unmatched_extras": list(self.summary.unmatched_extras),
        }


def has_valve(valve_type) -> bool:
    return ValveType(valve_type) != ValveType.NONE


def get_bom_keys(item) -> List[BomKey]:
    """BOM rows a shipment line needs: base plow, valve add-on, Schwenkbock mount"""
    model = PlowModel(item.model)
    keys = [BomKey(model.display_name, BomType.STANDARD.value)]
    if has_valve(item.valve_type):
        keys.append(BomKey(model.display_name, BomType.ADDON_6_2.value))
    if item.is_schwenkbock:
        bom_type = BomType.SCHWENKBOCK_3000 if model in SCHWENKBOCK_3000_MODELS else BomType.SCHWENKBOCK_2000
        keys.append(BomKey(GLOBAL_MODEL_NAME, bom_type.value))
    return keys


def load_boms(db: Session, keys: Iterable[BomKey]) -> Dict[BomKey, List]:
    """Fetch the BOM items for each requested key; absent keys are left out"""
    keys = set(keys)
    if not keys:
        return {}
    boms = db.query(Bom).options(selectinload(Bom.items)).filter(
        Bom.model_name.in_(sorted({key.model_name for key in keys})),
        Bom.bom_type.in_(sorted({key.bom_type for key in keys})),
    ).all()
    lookup = {}
    for bom in boms:
        key = BomKey(bom.model_name, bom.bom_type)
        if key in keys:
            lookup[key] = list(bom.items)
    return lookup


def build_parts_summary(db: Session, items: Sequence, extras: Sequence) -> PartsSummary:
    """
    Total part quantities a shipment consumes.

    Lines whose BOM is not defined yet are reported in ``missing_bom`` and
    extras that match no catalog part in ``unmatched_extras``; neither stops
    the shipment.
    """
    required: Dict[int, int] = defaultdict(int)
    missing_bom: List[BomKey] = []

    keys_by_item = [(item, get_bom_keys(item)) for item in items]
    boms = load_boms(db, (key for _, keys in keys_by_item for key in keys))

    for item, keys in keys_by_item:
        for key in keys:
            bom_items = boms.get(key)
            if bom_items is None:
                if key not in missing_bom:
                    missing_bom.append(key)
                continue
            for bom_item in bom_items:
                required[bom_item.part_id] += bom_item.qty_per_unit * item.quantity

    unmatched_extras = _add_extras(db, extras, required)

    if missing_bom:
        logger.warning(
            "Missing BOM definitions: %s",
            ", ".join(f"{key.model_name}/{key.bom_type}" for key in missing_bom),
        )
    if unmatched_extras:
        logger.warning("Extras without a matching part: %s", ", ".join(unmatched_extras))

    return PartsSummary(
        required_by_part_id=dict(required),
        missing_bom=missing_bom,
        unmatched_extras=unmatched_extras,
    )


def _add_extras(db: Session, extras: Sequence, required: Dict[int, int]) -> List[str]:
    """Resolve extras by part id, then by case-insensitive name; return the misses"""
    if not extras:
        return []

    requested_ids = {extra.part_id for extra in extras if extra.part_id}
    known_ids = set()
    if requested_ids:
        known_ids = {row.id for row in db.query(Part.id).filter(Part.id.in_(sorted(requested_ids)))}

    part_by_name = {}
    if any(extra.name and extra.name.strip() for extra in extras):
        part_by_name = part_ids_by_name(db)

    unmatched = []
    for extra in extras:
        part_id: Optional[int] = extra.part_id if extra.part_id in known_ids else None
        if part_id is None and extra.name:
            part_id = part_by_name.get(name_key(extra.name))
        if part_id is None:
            if extra.name:
                unmatched.append(extra.name)
            continue
        required[part_id] += extra.quantity
    return unmatched


def get_applied_by_part_id(db: Session, shipment_id: int) -> Dict[int, int]:
    """Net stock change already booked against a shipment, per part"""
    rows = db.query(
        PartMovement.part_id,
        func.sum(PartMovement.delta).label("applied")
    ).filter(
        PartMovement.shipment_id == shipment_id,
        PartMovement.reason.in_(SHIPMENT_REASONS)
    ).group_by(PartMovement.part_id).all()
    return {row.part_id: int(row.applied or 0) for row in rows}


def calculate_shipment_delta(db: Session, shipment_id: int, required_by_part_id: Dict[int, int]) -> Dict[int, int]:
    """
    Stock change still needed so the shipment's ledger equals ``-required``.

    Parts no longer required get their earlier deduction handed back, so a
    second run over an unchanged shipment returns an empty map.
    """
    applied = get_applied_by_part_id(db, shipment_id)

    delta_by_part_id = {}
    for part_id in sorted(set(required_by_part_id) | set(applied)):
        desired = -required_by_part_id.get(part_id, 0)
        delta = desired - applied.get(part_id, 0)
        if delta:
            delta_by_part_id[part_id] = delta
    return delta_by_part_id


def apply_shipment_part_deltas(db: Session, shipment_id: int, delta_by_part_id: Dict[int, int]) -> List[StockWarning]:
    """Book deltas on part stock and the movement ledger; flag parts driven below zero"""
    warnings = []

    for part_id, delta in delta_by_part_id.items():
        if not delta:
            continue
        part = db.get(Part, part_id)
        if part is None:
            raise LookupError(f"Part {part_id} not found")

        # Increment in SQL so concurrent writers add up instead of overwriting
        part.stock = Part.stock + delta
        reason = MovementReason.READY_SHIPMENT if delta < 0 else MovementReason.ROLLBACK_SHIPMENT
        db.add(PartMovement(
            part_id=part_id,
            delta=delta,
            reason=reason.value,
            shipment_id=shipment_id,
        ))
        db.flush()
        db.refresh(part)

        if part.stock < 0:
            logger.warning(f"Part {part.name} (ID: {part.id}) stock negative: {part.stock}")
            warnings.append(StockWarning(part_id=part.id, name=part.name, stock=part.stock))

    return warnings


def reconcile_shipment(db: Session, shipment) -> ReconcileResult:
    """
    Bring the parts ledger in line with the shipment's current status.

    READY books the current requirement, RESERVED hands everything back and
    SENT leaves the ledger untouched.
    """
    status = ShipmentStatus(shipment.status)
    if status == ShipmentStatus.SENT:
        return ReconcileResult()

    if status == ShipmentStatus.READY:
        summary = build_parts_summary(db, shipment.items, shipment.extras)
    else:
        summary = PartsSummary()

    delta_by_part_id = calculate_shipment_delta(db, shipment.id, summary.required_by_part_id)
    warnings = apply_shipment_part_deltas(db, shipment.id, delta_by_part_id)

    if delta_by_part_id:
        logger.info(f"Shipment {shipment.id} ({status.value}): booked {len(delta_by_part_id)} part deltas")
    return ReconcileResult(summary=summary, delta_by_part_id=delta_by_part_id, warnings=warnings)


def rollback_shipment(db: Session, shipment_id: int) -> List[StockWarning]:
    """Return every part the shipment still holds"""
    delta_by_part_id = calculate_shipment_delta(db, shipment_id, {})
    return apply_shipment_part_deltas(db, shipment_id, delta_by_part_id)
