"""Request bodies accept camelCase field names alongside snake_case."""
from datetime import datetime, timedelta

import pytest

from api_helpers import api_client
from db_helpers import auth_headers


def _parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class TestStockFormBodies:
    @pytest.mark.anyio
    async def test_camel_case_form_keeps_date_and_prices(self):
        async with api_client() as (client, users):
            await client.post(
                "/api/products",
                json={"code": "BOLT-M6", "name": "Hex bolt M6"},
                headers=auth_headers(users.manager.id),
            )
            response = await client.post(
                "/api/stock-in",
                json={
                    "code": "IN-0001",
                    "dateIn": "2020-01-15 08:00:00",
                    "products": [{"productCode": "BOLT-M6", "quantity": 3, "unitPrice": "1.25"}],
                },
                headers=auth_headers(users.staff.id),
            )

        assert response.status_code == 201
        body = response.json()
        date_in = _parse_timestamp(body["date_in"])
        assert date_in.replace(tzinfo=None) == datetime(2020, 1, 15, 8, 0, 0)
        assert date_in.utcoffset() == timedelta(0)
        assert body["items"][0]["unit_price"] == "1.25"

    @pytest.mark.anyio
    async def test_stock_out_date_is_returned_in_utc(self):
        async with api_client() as (client, users):
            await client.post(
                "/api/products",
                json={"code": "BOLT-M6", "name": "Hex bolt M6"},
                headers=auth_headers(users.manager.id),
            )
            await client.post(
                "/api/stock-in",
                json={"code": "IN-0001", "products": [{"product_code": "BOLT-M6", "quantity": 3}]},
                headers=auth_headers(users.staff.id),
            )
            response = await client.post(
                "/api/stock-out",
                json={
                    "code": "OUT-0001",
                    "date_out": "2025-03-02T10:30:00+02:00",
                    "products": [{"product_code": "BOLT-M6", "quantity": 1}],
                },
                headers=auth_headers(users.staff.id),
            )

        assert response.status_code == 201
        date_out = _parse_timestamp(response.json()["date_out"])
        assert date_out.utcoffset() == timedelta(0)
        assert date_out.hour == 8

    @pytest.mark.anyio
    async def test_unknown_field_is_rejected(self):
        async with api_client() as (client, users):
            response = await client.post(
                "/api/stock-in",
                json={
                    "code": "IN-0001",
                    "arrivedAt": "2020-01-15 08:00:00",
                    "products": [{"productCode": "BOLT-M6", "quantity": 3}],
                },
                headers=auth_headers(users.staff.id),
            )

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"


class TestUserBodies:
    @pytest.mark.anyio
    async def test_camel_case_user_fields_are_applied(self):
        async with api_client() as (client, users):
            response = await client.post(
                "/api/admin/users",
                json={
                    "username": "newbie",
                    "email": "newbie@example.com",
                    "password": "correct-horse",
                    "fullName": "New Bie",
                    "phoneNumber": "+100200300",
                    "isActive": False,
                    "roleId": users.role_ids["staff"],
                },
                headers=auth_headers(users.admin.id),
            )

        assert response.status_code == 201
        body = response.json()
        assert body["full_name"] == "New Bie"
        assert body["phone_number"] == "+100200300"
        assert body["is_active"] is False
        assert body["role_id"] == users.role_ids["staff"]

    @pytest.mark.anyio
    async def test_snake_case_update_still_works(self):
        async with api_client() as (client, users):
            response = await client.put(
                f"/api/admin/users/{users.staff.id}",
                json={"full_name": "Staff Member", "roleId": users.role_ids["manager"]},
                headers=auth_headers(users.admin.id),
            )

        assert response.status_code == 200
        assert response.json()["full_name"] == "Staff Member"
        assert response.json()["role_id"] == users.role_ids["manager"]
