"""End-to-end permission checks through the /api router."""
from datetime import timedelta

import pytest

from api_helpers import api_client
from db_helpers import access_token, auth_headers


class TestAuthentication:
    @pytest.mark.anyio
    async def test_missing_token_is_rejected(self):
        async with api_client() as (client, _):
            response = await client.get("/api/products")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTH_ERROR"
        assert response.json()["error"]["details"] == "Not authenticated"

    @pytest.mark.anyio
    async def test_expired_token_is_rejected(self):
        async with api_client() as (client, users):
            token = access_token(users.admin.id, expires_in=timedelta(minutes=-1))
            response = await client.get(
                "/api/products", headers={"Authorization": f"Bearer {token}"}
            )

        assert response.status_code == 401
        assert response.json()["error"]["details"] == "Token has expired"


class TestPathPermissions:
    @pytest.mark.anyio
    async def test_admin_reaches_user_detail(self):
        async with api_client() as (client, users):
            response = await client.get(
                f"/api/admin/users/{users.staff.id}", headers=auth_headers(users.admin.id)
            )

        assert response.status_code == 200
        assert response.json()["username"] == "staff"

    @pytest.mark.anyio
    async def test_staff_is_denied_user_detail(self):
        async with api_client() as (client, users):
            response = await client.get(
                f"/api/admin/users/{users.admin.id}", headers=auth_headers(users.staff.id)
            )

        assert response.status_code == 403
        error = response.json()["error"]
        assert error["code"] == "PERMISSION_DENIED"
        assert error["details"]["reason"] == "not_granted"
        assert error["details"]["required_permission"] == "user.view"

    @pytest.mark.anyio
    async def test_product_code_path_is_authorized_before_lookup(self):
        async with api_client() as (client, users):
            response = await client.get(
                "/api/products/SKU-404", headers=auth_headers(users.staff.id)
            )

        # Authorized by product.view, then the product itself is missing
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    @pytest.mark.anyio
    async def test_non_numeric_id_is_not_configured(self):
        async with api_client() as (client, users):
            response = await client.get(
                "/api/admin/users/not-a-number", headers=auth_headers(users.admin.id)
            )

        assert response.status_code == 403
        error = response.json()["error"]
        assert error["message"] == "Access to this endpoint is not configured"
        assert error["details"]["reason"] == "not_configured"

    @pytest.mark.anyio
    async def test_two_placeholder_path_is_authorized(self):
        async with api_client() as (client, users):
            allowed = await client.post(
                "/api/inventory-snapshots/2024/1", headers=auth_headers(users.manager.id)
            )
            denied = await client.post(
                "/api/inventory-snapshots/2024/1", headers=auth_headers(users.staff.id)
            )

        assert allowed.status_code == 201
        assert allowed.json() == []
        assert denied.status_code == 403
        assert denied.json()["error"]["details"]["required_permission"] == "snapshot.create"

    @pytest.mark.anyio
    async def test_user_without_role_is_denied(self):
        async with api_client() as (client, users):
            response = await client.get("/api/me", headers=auth_headers(users.roleless.id))

        assert response.status_code == 403
        assert response.json()["error"]["details"]["reason"] == "not_granted"

    @pytest.mark.anyio
    async def test_granting_permission_takes_effect_on_next_request(self):
        async with api_client() as (client, users):
            admin = auth_headers(users.admin.id)
            staff = auth_headers(users.staff.id)
            target = f"/api/admin/users/{users.manager.id}"

            before = await client.get(target, headers=staff)

            listing = await client.get("/api/admin/permissions?module=user", headers=admin)
            user_view = next(p for p in listing.json() if p["name"] == "user.view")
            granted = await client.post(
                f"/api/admin/roles/{users.role_ids['staff']}/permissions/{user_view['id']}",
                headers=admin,
            )

            after = await client.get(target, headers=staff)

        assert before.status_code == 403
        assert granted.status_code == 201
        assert after.status_code == 200

    @pytest.mark.anyio
    async def test_deactivated_role_loses_access(self):
        async with api_client() as (client, users):
            deactivated = await client.put(
                f"/api/admin/roles/{users.role_ids['staff']}",
                json={"is_active": False},
                headers=auth_headers(users.admin.id),
            )
            response = await client.get("/api/products", headers=auth_headers(users.staff.id))

        assert deactivated.status_code == 200
        assert response.status_code == 403

    @pytest.mark.anyio
    async def test_deleted_permission_makes_endpoint_unconfigured(self):
        async with api_client() as (client, users):
            admin = auth_headers(users.admin.id)
            listing = await client.get("/api/admin/permissions?module=product", headers=admin)
            product_list = next(p for p in listing.json() if p["name"] == "product.list")

            deleted = await client.delete(
                f"/api/admin/permissions/{product_list['id']}", headers=admin
            )
            response = await client.get("/api/products", headers=admin)

        assert deleted.status_code == 204
        assert response.status_code == 403
        assert response.json()["error"]["details"]["reason"] == "not_configured"


class TestCurrentUser:
    @pytest.mark.anyio
    async def test_me_lists_role_permissions(self):
        async with api_client() as (client, users):
            response = await client.get("/api/me", headers=auth_headers(users.staff.id))

        assert response.status_code == 200
        body = response.json()
        assert body["user"]["username"] == "staff"
        assert body["role"]["name"] == "staff"
        names = {permission["name"] for permission in body["permissions"]}
        assert {"stock_in.create", "stock_out.create", "profile.view"} <= names
        assert "user.delete" not in names
