import os

from fastapi import status
from fastapi.testclient import TestClient

# Ensure required environment variables are present for module imports.
# These are defaults used only if not already set, avoiding test isolation issues.
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("ALLOWED_ORIGINS", "http://localhost:3000")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from warehouse.main import app  # noqa: E402


def test_cors_preflight_options_stock_in() -> None:
    """Test that OPTIONS preflight to a protected route answers before authorization runs."""
    client = TestClient(app)

    response = client.options(
        "/api/stock-in",
        headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "content-type",
        },
    )

    # Should return 204 No Content for OPTIONS preflight
    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert response.headers["access-control-allow-origin"] == "http://localhost:3000"
    assert "POST" in response.headers["access-control-allow-methods"]
    assert response.headers["access-control-allow-credentials"] == "true"


def test_cors_preflight_with_disallowed_origin() -> None:
    """Test that OPTIONS preflight with disallowed origin returns 204 without CORS headers."""
    client = TestClient(app)

    response = client.options(
        "/api/products",
        headers={
            "Origin": "http://evil.com",
            "Access-Control-Request-Method": "GET",
        },
    )

    # Should still return 204 (graceful handling)
    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert "access-control-allow-origin" not in response.headers


def test_cors_preflight_with_trailing_slash() -> None:
    """Test that OPTIONS preflight with origin containing trailing slash is handled gracefully."""
    client = TestClient(app)

    response = client.options(
        "/api/products",
        headers={
            "Origin": "http://localhost:3000/",  # Trailing slash
            "Access-Control-Request-Method": "GET",
        },
    )

    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert "access-control-allow-origin" not in response.headers


def test_cors_preflight_echoes_request_headers() -> None:
    """Test that Access-Control-Request-Headers is echoed back in Access-Control-Allow-Headers."""
    client = TestClient(app)

    response = client.options(
        "/api/admin/users/1",
        headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "PUT",
            "Access-Control-Request-Headers": "authorization, content-type",
        },
    )

    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert response.headers["access-control-allow-headers"] == "authorization, content-type"


def test_cors_preflight_without_request_headers_uses_allowlist() -> None:
    """Test that when no Access-Control-Request-Headers is sent, we use a safe allowlist."""
    client = TestClient(app)

    response = client.options(
        "/api/products",
        headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "GET",
        },
    )

    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert response.headers["access-control-allow-headers"] == "authorization, content-type"
    assert response.headers["vary"] == "Origin"


def test_healthcheck_probes_database() -> None:
    """Test that /health is public and reports ok when the database answers."""
    client = TestClient(app)

    response = client.get("/health")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"status": "ok"}
