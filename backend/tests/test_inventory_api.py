import pytest

from api_helpers import api_client
from db_helpers import auth_headers


@pytest.mark.anyio
async def test_product_and_stock_movement_flow():
    async with api_client() as (client, users):
        manager = auth_headers(users.manager.id)
        staff = auth_headers(users.staff.id)

        created = await client.post(
            "/api/products",
            json={"code": "BOLT-M6", "name": "Hex bolt M6", "unit": "pcs"},
            headers=manager,
        )
        stock_in = await client.post(
            "/api/stock-in",
            json={
                "code": "IN-0001",
                "date_in": "2025-03-01 08:00:00",
                "products": [{"product_code": "BOLT-M6", "quantity": 12, "unit_price": "0.30"}],
            },
            headers=staff,
        )
        short = await client.post(
            "/api/stock-out",
            json={"code": "OUT-0001", "products": [{"product_code": "BOLT-M6", "quantity": 20}]},
            headers=staff,
        )
        stock_out = await client.post(
            "/api/stock-out",
            json={"code": "OUT-0002", "products": [{"product_code": "BOLT-M6", "quantity": 5}]},
            headers=staff,
        )
        product = await client.get("/api/products/BOLT-M6", headers=staff)
        form = await client.get(f"/api/stock-in/{stock_in.json()['id']}", headers=staff)

    assert created.status_code == 201
    assert created.json()["quantity"] == 0

    assert stock_in.status_code == 201
    assert stock_in.json()["username"] == "staff"

    assert short.status_code == 409
    assert short.json()["error"]["code"] == "INSUFFICIENT_STOCK"
    assert short.json()["error"]["details"]["shortages"][0]["available"] == 12

    assert stock_out.status_code == 201
    assert product.json()["quantity"] == 7
    assert form.json()["items"][0]["quantity"] == 12


@pytest.mark.anyio
async def test_staff_cannot_create_products():
    async with api_client() as (client, users):
        response = await client.post(
            "/api/products",
            json={"code": "BOLT-M6", "name": "Hex bolt M6"},
            headers=auth_headers(users.staff.id),
        )

    assert response.status_code == 403
    assert response.json()["error"]["details"]["required_permission"] == "product.create"


@pytest.mark.anyio
async def test_invalid_snapshot_month_is_a_validation_error():
    async with api_client() as (client, users):
        response = await client.post(
            "/api/inventory-snapshots/2025/13", headers=auth_headers(users.admin.id)
        )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"
