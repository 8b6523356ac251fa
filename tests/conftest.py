import os

# Settings are read on import; point them at a throwaway database first
os.environ.setdefault("DB_URL", "sqlite://")
os.environ.setdefault("ADMIN_PASSWORD", "test-admin")

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core import Base, create_cache, get_db
from app.core.database import set_sqlite_pragma
from app.models import Bom, BomItem, Part, Shipment, ShipmentItem, ShipmentExtraItem
from main import app

ADMIN_KEY = os.environ["ADMIN_PASSWORD"]
ADMIN_HEADERS = {"X-Admin-Key": ADMIN_KEY}


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine, "connect", set_sqlite_pragma)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.state.cache = create_cache(ttl_seconds=60)
    yield TestClient(app)
    app.dependency_overrides.clear()


# ---------- ORM builders ----------

def make_part(db, name, stock=0, unit="Stk"):
    part = Part(name=name, stock=stock, unit=unit)
    db.add(part)
    db.flush()
    return part


def make_bom(db, model_name, bom_type, lines):
    """lines: [(part, qty_per_unit), ...]"""
    bom = Bom(model_name=model_name, bom_type=bom_type)
    bom.items = [BomItem(part_id=part.id, qty_per_unit=qty) for part, qty in lines]
    db.add(bom)
    db.flush()
    return bom


def make_item(model="FL_540", quantity=1, is_schwenkbock=False, valve_type="NONE", build_number="B-1", variant="ZINC"):
    return ShipmentItem(
        model=model,
        serial_number=2716,
        variant=variant,
        is_schwenkbock=is_schwenkbock,
        valve_type=valve_type,
        quantity=quantity,
        build_number=build_number,
        build_date=date(2026, 1, 15),
    )


def make_shipment(db, items=(), extras=(), status="READY"):
    shipment = Shipment(
        company_name="Alpen Winterdienst GmbH",
        first_name="Anna",
        last_name="Berger",
        street="Talstrasse 4",
        postal_code="6020",
        city="Innsbruck",
        country="AT",
        status=status,
    )
    shipment.items = list(items)
    shipment.extras = list(extras)
    db.add(shipment)
    db.flush()
    return shipment


def make_extra(name=None, quantity=1, part_id=None):
    return ShipmentExtraItem(name=name, quantity=quantity, part_id=part_id)


# ---------- API payloads ----------

def item_payload(**overrides):
    payload = {
        "model": "FL_540",
        "serial_number": 2716,
        "variant": "ZINC",
        "is_schwenkbock": False,
        "valve_type": "NONE",
        "bucket_holder": False,
        "quantity": 1,
        "build_number": "B-100",
        "build_date": "2026-01-15",
    }
    payload.update(overrides)
    return payload


def shipment_payload(items=None, extras=None, **overrides):
    payload = {
        "company_name": "Alpen Winterdienst GmbH",
        "first_name": "Anna",
        "last_name": "Berger",
        "street": "Talstrasse 4",
        "postal_code": "6020",
        "city": "Innsbruck",
        "country": "AT",
        "items": [item_payload()] if items is None else items,
        "extras": extras or [],
    }
    payload.update(overrides)
    return payload
