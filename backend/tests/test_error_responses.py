"""Error envelope rendering for framework-raised and validation errors."""
import pytest
from fastapi import status

from api_helpers import api_client
from db_helpers import auth_headers
from warehouse.errors import (
    AuthError,
    InsufficientStockError,
    InternalError,
    NotFoundError,
    PermissionNotConfiguredError,
    error_for_status,
)


class TestErrorClasses:
    def test_defaults_come_from_the_class(self):
        error = PermissionNotConfiguredError()

        assert error.code == "PERMISSION_DENIED"
        assert error.status_code == status.HTTP_403_FORBIDDEN
        assert error.message == "Access to this endpoint is not configured"
        assert error.details is None

    def test_raise_site_message_and_details_override(self):
        error = InsufficientStockError("Not enough bolts", details={"shortages": []})

        assert error.code == "INSUFFICIENT_STOCK"
        assert error.status_code == status.HTTP_409_CONFLICT
        assert str(error) == "Not enough bolts"
        assert error.details == {"shortages": []}

    @pytest.mark.parametrize(
        ("status_code", "expected"),
        [
            (401, (AuthError.code, AuthError.message)),
            (404, (NotFoundError.code, NotFoundError.message)),
            (503, (InternalError.code, InternalError.message)),
            (405, ("HTTP_ERROR", "Request failed")),
        ],
    )
    def test_error_for_status(self, status_code, expected):
        assert error_for_status(status_code) == expected


class TestErrorEnvelope:
    @pytest.mark.anyio
    async def test_unknown_route_uses_the_envelope(self):
        async with api_client() as (client, users):
            response = await client.get("/api/warehouses", headers=auth_headers(users.admin.id))

        assert response.status_code == 404
        assert response.json() == {
            "error": {"code": "NOT_FOUND", "message": "Resource not found", "details": "Not Found"}
        }

    @pytest.mark.anyio
    async def test_custom_validator_failure_is_reported_as_422(self):
        async with api_client() as (client, users):
            response = await client.post(
                "/api/admin/permissions",
                json={
                    "name": "report.view",
                    "apiPath": "/api/reports/",
                    "httpMethod": "GET",
                    "module": "report",
                },
                headers=auth_headers(users.admin.id),
            )

        assert response.status_code == 422
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"][0]["loc"][-1] in {"api_path", "apiPath"}
        assert "api_path must start with '/'" in error["details"][0]["msg"]
