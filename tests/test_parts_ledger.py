import pytest

from app.models import Part, PartMovement, ShipmentStatus
from app.services.parts_ledger import (
    BomKey,
    apply_shipment_part_deltas,
    build_parts_summary,
    calculate_shipment_delta,
    get_applied_by_part_id,
    get_bom_keys,
    reconcile_shipment,
    rollback_shipment,
)
from tests.conftest import make_bom, make_extra, make_item, make_part, make_shipment


def run_ready(db, shipment):
    summary = build_parts_summary(db, shipment.items, shipment.extras)
    delta = calculate_shipment_delta(db, shipment.id, summary.required_by_part_id)
    warnings = apply_shipment_part_deltas(db, shipment.id, delta)
    return summary, delta, warnings


# ---------- BOM lookup ----------

def test_bom_keys_standard_only():
    keys = get_bom_keys(make_item(model="FL_540"))
    assert keys == [BomKey("FL 540", "STANDARD")]


def test_bom_keys_valve_adds_addon():
    keys = get_bom_keys(make_item(model="FL_340", valve_type="LARGE"))
    assert keys == [BomKey("FL 340", "STANDARD"), BomKey("FL 340", "ADDON_6_2")]


@pytest.mark.parametrize("model, expected", [
    ("FL_640", "SCHWENKBOCK_3000"),
    ("FL_540", "SCHWENKBOCK_3000"),
    ("FL_470", "SCHWENKBOCK_3000"),
    ("FL_400", "SCHWENKBOCK_3000"),
    ("FL_340", "SCHWENKBOCK_2000"),
    ("FL_260", "SCHWENKBOCK_2000"),
])
def test_bom_keys_schwenkbock_mount_by_model(model, expected):
    keys = get_bom_keys(make_item(model=model, is_schwenkbock=True))
    assert keys[-1] == BomKey("GLOBAL", expected)


# ---------- Required parts ----------

def test_required_parts_multiplied_by_quantity(db):
    part_a = make_part(db, "Blade bolt", stock=100)
    make_bom(db, "FL 540", "STANDARD", [(part_a, 3)])
    shipment = make_shipment(db, items=[make_item(quantity=2)])

    summary = build_parts_summary(db, shipment.items, shipment.extras)

    assert summary.required_by_part_id == {part_a.id: 6}
    assert summary.missing_bom == []
    assert summary.unmatched_extras == []


def test_required_parts_sum_over_boms_and_items(db):
    frame = make_part(db, "Frame")
    valve = make_part(db, "Valve 6/2")
    mount = make_part(db, "Mount plate")
    make_bom(db, "FL 540", "STANDARD", [(frame, 1)])
    make_bom(db, "FL 540", "ADDON_6_2", [(valve, 1)])
    make_bom(db, "GLOBAL", "SCHWENKBOCK_3000", [(mount, 2), (frame, 1)])
    shipment = make_shipment(db, items=[
        make_item(quantity=1, valve_type="SMALL", is_schwenkbock=True, build_number="B-1"),
        make_item(quantity=2, build_number="B-2"),
    ])

    summary = build_parts_summary(db, shipment.items, shipment.extras)

    assert summary.required_by_part_id == {frame.id: 4, valve.id: 1, mount.id: 2}


def test_missing_bom_is_reported_not_raised(db):
    frame = make_part(db, "Frame")
    make_bom(db, "FL 540", "STANDARD", [(frame, 1)])
    shipment = make_shipment(db, items=[
        make_item(is_schwenkbock=True, build_number="B-1"),
        make_item(model="FL_260", build_number="B-2"),
        make_item(model="FL_260", build_number="B-3"),
    ])

    summary = build_parts_summary(db, shipment.items, shipment.extras)

    assert summary.required_by_part_id == {frame.id: 1}
    assert summary.missing_bom == [
        BomKey("GLOBAL", "SCHWENKBOCK_3000"),
        BomKey("FL 260", "STANDARD"),
    ]


def test_empty_bom_is_not_missing(db):
    make_bom(db, "FL 540", "STANDARD", [])
    shipment = make_shipment(db, items=[make_item()])

    summary = build_parts_summary(db, shipment.items, shipment.extras)

    assert summary.required_by_part_id == {}
    assert summary.missing_bom == []


def test_extras_matched_by_id_and_name(db):
    wear = make_part(db, "Wear Strip")
    pin = make_part(db, "Pin")
    shipment = make_shipment(db, extras=[
        make_extra(name="anything", quantity=2, part_id=pin.id),
        make_extra(name="WEAR strip", quantity=3),
        make_extra(name="Foo", quantity=1),
    ])

    summary = build_parts_summary(db, shipment.items, shipment.extras)

    assert summary.required_by_part_id == {pin.id: 2, wear.id: 3}
    assert summary.unmatched_extras == ["Foo"]


def test_unknown_part_id_falls_back_to_name(db):
    pin = make_part(db, "Pin")
    extra = make_extra(name="pin", quantity=4)
    extra.part_id = 9999

    summary = build_parts_summary(db, [], [extra])

    assert summary.required_by_part_id == {pin.id: 4}


# ---------- Delta & apply ----------

def test_first_ready_deducts_then_second_is_noop(db):
    part_a = make_part(db, "Blade bolt", stock=10)
    make_bom(db, "FL 540", "STANDARD", [(part_a, 3)])
    shipment = make_shipment(db, items=[make_item(quantity=2)])

    _, first_delta, _ = run_ready(db, shipment)
    assert first_delta == {part_a.id: -6}

    _, second_delta, _ = run_ready(db, shipment)
    assert second_delta == {}

    db.refresh(part_a)
    assert part_a.stock == 4
    movements = db.query(PartMovement).filter(PartMovement.shipment_id == shipment.id).all()
    assert [(m.delta, m.reason) for m in movements] == [(-6, "READY_SHIPMENT")]


def test_quantity_edit_applies_only_the_difference(db):
    part_a = make_part(db, "Blade bolt", stock=20)
    make_bom(db, "FL 540", "STANDARD", [(part_a, 3)])
    shipment = make_shipment(db, items=[make_item(quantity=2)])
    run_ready(db, shipment)

    shipment.items[0].quantity = 3
    db.flush()
    summary, delta, _ = run_ready(db, shipment)

    assert summary.required_by_part_id == {part_a.id: 9}
    assert delta == {part_a.id: -3}
    db.refresh(part_a)
    assert part_a.stock == 11


def test_part_no_longer_required_is_returned(db):
    frame = make_part(db, "Frame", stock=5)
    valve = make_part(db, "Valve 6/2", stock=5)
    make_bom(db, "FL 540", "STANDARD", [(frame, 1)])
    make_bom(db, "FL 540", "ADDON_6_2", [(valve, 1)])
    shipment = make_shipment(db, items=[make_item(valve_type="SMALL")])
    run_ready(db, shipment)

    shipment.items[0].valve_type = "NONE"
    db.flush()
    _, delta, _ = run_ready(db, shipment)

    assert delta == {valve.id: 1}
    movement = db.query(PartMovement).filter(PartMovement.part_id == valve.id).order_by(PartMovement.id.desc()).first()
    assert movement.reason == "ROLLBACK_SHIPMENT"


def test_ledger_matches_requirement(db):
    frame = make_part(db, "Frame", stock=50)
    bolt = make_part(db, "Bolt", stock=50)
    make_bom(db, "FL 540", "STANDARD", [(frame, 1), (bolt, 8)])
    shipment = make_shipment(db, items=[make_item(quantity=2)], extras=[make_extra(name="bolt", quantity=5)])

    for quantity in (2, 4, 1):
        shipment.items[0].quantity = quantity
        db.flush()
        summary, _, _ = run_ready(db, shipment)
        applied = get_applied_by_part_id(db, shipment.id)
        assert applied == {pid: -qty for pid, qty in summary.required_by_part_id.items()}


def test_negative_stock_is_warned_not_blocked(db):
    part_a = make_part(db, "Blade bolt", stock=2)
    make_bom(db, "FL 540", "STANDARD", [(part_a, 3)])
    shipment = make_shipment(db, items=[make_item(quantity=1)])

    _, _, warnings = run_ready(db, shipment)

    assert len(warnings) == 1
    assert warnings[0].part_id == part_a.id
    assert warnings[0].name == "Blade bolt"
    assert warnings[0].stock == -1


def test_apply_unknown_part_raises(db):
    shipment = make_shipment(db)
    with pytest.raises(LookupError):
        apply_shipment_part_deltas(db, shipment.id, {4242: -1})


# ---------- Status policy ----------

def test_back_to_reserved_restores_stock(db):
    part_a = make_part(db, "Blade bolt", stock=10)
    part_b = make_part(db, "Nut", stock=10)
    make_bom(db, "FL 540", "STANDARD", [(part_a, 3), (part_b, 1)])
    shipment = make_shipment(db, items=[make_item(quantity=2)])
    reconcile_shipment(db, shipment)

    shipment.status = ShipmentStatus.RESERVED.value
    db.flush()
    result = reconcile_shipment(db, shipment)

    assert result.delta_by_part_id == {part_a.id: 6, part_b.id: 2}
    db.refresh(part_a)
    db.refresh(part_b)
    assert (part_a.stock, part_b.stock) == (10, 10)
    assert get_applied_by_part_id(db, shipment.id) == {part_a.id: 0, part_b.id: 0}


def test_sent_leaves_ledger_untouched(db):
    part_a = make_part(db, "Blade bolt", stock=10)
    make_bom(db, "FL 540", "STANDARD", [(part_a, 3)])
    shipment = make_shipment(db, items=[make_item(quantity=1)])
    reconcile_shipment(db, shipment)

    shipment.status = ShipmentStatus.SENT.value
    shipment.items[0].quantity = 3
    db.flush()
    result = reconcile_shipment(db, shipment)

    assert result.delta_by_part_id == {}
    assert db.get(Part, part_a.id).stock == 7


def test_rollback_shipment_returns_everything(db):
    part_a = make_part(db, "Blade bolt", stock=10)
    make_bom(db, "FL 540", "STANDARD", [(part_a, 3)])
    shipment = make_shipment(db, items=[make_item(quantity=3)])
    reconcile_shipment(db, shipment)

    rollback_shipment(db, shipment.id)

    db.refresh(part_a)
    assert part_a.stock == 10
    assert calculate_shipment_delta(db, shipment.id, {}) == {}


def test_extras_match_non_ascii_names(db):
    hose = make_part(db, "Ölschlauch")
    street_kit = make_part(db, "Straße Kit")

    summary = build_parts_summary(db, [], [
        make_extra(name="Ölschlauch", quantity=2),
        make_extra(name="ÖLSCHLAUCH", quantity=1),
        make_extra(name="STRASSE kit", quantity=1),
    ])

    assert summary.required_by_part_id == {hose.id: 3, street_kit.id: 1}
    assert summary.unmatched_extras == []
