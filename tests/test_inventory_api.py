from app.services.inventory_service import FIXED_CATALOG


def test_products_seed_fixed_catalog(client):
    products = client.get("/api/products").json()

    assert len(products) == len(FIXED_CATALOG)
    assert {"model": "FL_540", "serial_number": 2716, "is_manual": False} in products
    # Two finishes with and without Schwenkbock per product
    assert len(client.get("/api/inventory").json()) == 4 * len(FIXED_CATALOG)


def test_seeding_is_idempotent(client):
    client.get("/api/products")
    client.app.state.cache.clear()

    client.get("/api/products")

    assert len(client.get("/api/inventory").json()) == 4 * len(FIXED_CATALOG)


def test_add_and_delete_manual_product(client):
    response = client.post("/api/products", json={"model": "FL_340", "serial_number": 1499})
    assert response.status_code == 201

    products = client.get("/api/products").json()
    assert {"model": "FL_340", "serial_number": 1499, "is_manual": True} in products

    response = client.request("DELETE", "/api/products", json={"model": "FL_340", "serial_number": 1499})
    assert response.status_code == 200

    products = client.get("/api/products").json()
    assert all(p["serial_number"] != 1499 for p in products)


def test_fixed_product_cannot_be_deleted(client):
    client.get("/api/products")

    response = client.request("DELETE", "/api/products", json={"model": "FL_540", "serial_number": 2716})

    assert response.status_code == 403
    assert response.json()["detail"] == "Cannot delete fixed item"


def test_adjust_inventory(client):
    key = {"model": "FL_470", "serial_number": 2404, "variant": "ORANGE", "is_schwenkbock": True}

    response = client.post("/api/inventory/adjust", json={**key, "delta": 3})
    assert response.status_code == 200
    assert response.json()["quantity"] == 3

    response = client.post("/api/inventory/adjust", json={**key, "delta": -4})
    assert response.status_code == 409
    assert response.json()["detail"] == "Insufficient stock"

    response = client.post("/api/inventory/adjust", json={**key, "delta": 0})
    assert response.status_code == 400


def test_inventory_listing_is_cached_until_a_write(client):
    key = {"model": "FL_260", "serial_number": 1203, "variant": "ZINC", "is_schwenkbock": False}
    client.post("/api/inventory/adjust", json={**key, "delta": 1})
    assert client.get("/api/inventory").json()[0]["quantity"] == 1
    assert client.app.state.cache.get("inventory") is not None

    client.post("/api/inventory/adjust", json={**key, "delta": 1})

    assert client.get("/api/inventory").json()[0]["quantity"] == 2
