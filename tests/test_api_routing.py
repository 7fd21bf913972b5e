"""Tests for API routing and error handling."""

import pytest
from httpx import ASGITransport, AsyncClient

from conftest import bearer, image_file, vacation_form
from skyline.main import create_app
from skyline.models.user import Role, User
from skyline.routers.vacations import get_image_store


@pytest.mark.asyncio
async def test_unknown_api_route_returns_404(app_client):
    response = await app_client.get("/api/nonexistent")
    assert response.status_code == 404
    assert response.json() == {"error": "Route /api/nonexistent on method GET not found."}


@pytest.mark.asyncio
async def test_post_to_unknown_api_returns_404_not_405(app_client):
    response = await app_client.post("/api/nonexistent", json={})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_wrong_method_on_known_route_returns_404_not_405(app_client):
    """PUT is not a vacation verb; the route-not-found error wins over 405."""
    response = await app_client.put("/api/vacations", json={})
    assert response.status_code == 404
    assert response.json()["error"] == "Route /api/vacations on method PUT not found."


@pytest.mark.asyncio
async def test_vacations_require_token(app_client):
    response = await app_client.get("/api/vacations")
    assert response.status_code == 401
    assert response.json() == {"error": "Token missing"}


@pytest.mark.asyncio
async def test_garbage_token_rejected(app_client):
    response = await app_client.get("/api/vacations", headers=bearer("not-a-jwt"))
    assert response.status_code == 401
    assert response.json() == {"error": "Invalid or expired token"}


@pytest.mark.asyncio
async def test_non_bearer_scheme_treated_as_missing(app_client, user_token):
    response = await app_client.get(
        "/api/vacations", headers={"Authorization": f"Basic {user_token}"}
    )
    assert response.status_code == 401
    assert response.json()["error"] == "Token missing"


@pytest.mark.asyncio
async def test_malformed_json_body_is_400(app_client):
    response = await app_client.post(
        "/api/login",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert "error" in response.json()


@pytest.mark.asyncio
async def test_image_store_failure_visible_in_development(app_client, admin_token, image_store):
    image_store.fail_uploads = True
    response = await app_client.post(
        "/api/vacations", data=vacation_form(), files=image_file(), headers=bearer(admin_token)
    )
    assert response.status_code == 502
    assert response.json() == {"error": "Image service unavailable."}


@pytest.mark.asyncio
async def test_image_store_failure_masked_in_production(test_settings, image_store):
    """5xx messages are replaced by a generic one in production."""
    settings = test_settings.model_copy(update={"environment": "production"})
    app = create_app(settings)
    app.dependency_overrides[get_image_store] = lambda: image_store
    image_store.fail_uploads = True

    admin = User(
        id="admin-1",
        first_name="Ada",
        last_name="Admin",
        email="ada@example.com",
        password="unused",
        role=Role.ADMIN.value,
    )
    token = app.state.token_service.create_token(admin)

    await app.state.database.create_tables()
    try:
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.post(
                "/api/vacations", data=vacation_form(), files=image_file(), headers=bearer(token)
            )
    finally:
        await app.state.database.close()

    assert response.status_code == 502
    assert response.json() == {"error": "Some error, please try again."}
