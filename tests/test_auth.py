import pytest
from httpx import AsyncClient

from app.auth.security import create_access_token

AMBASSADOR_PASSWORD = "ambassador-pass"


@pytest.mark.asyncio
async def test_admin_login_success(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/auth/login",
        json={"email": "admin@example.com", "password": "admin-password"},
    )
    assert response.status_code == 200
    data = response.json()

    assert data["success"] is True
    assert data["data"]["token_type"] == "bearer"
    assert data["data"]["token"]
    user = data["data"]["user"]
    assert user["role"] == "admin"
    assert user["id"] == "admin"


@pytest.mark.asyncio
async def test_ambassador_login_success(client: AsyncClient, make_ambassador) -> None:
    ambassador = await make_ambassador(email="amb@example.com")

    response = await client.post(
        "/api/v1/auth/login",
        json={"email": "AMB@example.com", "password": AMBASSADOR_PASSWORD},
    )
    assert response.status_code == 200
    user = response.json()["data"]["user"]
    assert user["id"] == str(ambassador.id)
    assert user["role"] == "ambassador"
    assert user["referral_code"] == ambassador.referral_code

    me = await client.get(
        "/api/v1/auth/me",
        headers={"Authorization": f"Bearer {response.json()['data']['token']}"},
    )
    assert me.status_code == 200
    assert me.json()["data"]["email"] == "amb@example.com"


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient, make_ambassador) -> None:
    await make_ambassador(email="amb@example.com")

    response = await client.post(
        "/api/v1/auth/login",
        json={"email": "amb@example.com", "password": "nope"},
    )
    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Invalid email or password"}


@pytest.mark.asyncio
async def test_inactive_ambassador_cannot_login(client: AsyncClient, make_ambassador) -> None:
    await make_ambassador(email="amb@example.com", status="inactive")

    response = await client.post(
        "/api/v1/auth/login",
        json={"email": "amb@example.com", "password": AMBASSADOR_PASSWORD},
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_oauth_form_login(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/auth/login-oauth",
        data={"username": "admin@example.com", "password": "admin-password"},
    )
    assert response.status_code == 200
    assert response.json()["token_type"] == "bearer"
    assert response.json()["access_token"]


@pytest.mark.asyncio
async def test_refresh_and_logout(client: AsyncClient, admin_headers) -> None:
    refreshed = await client.post("/api/v1/auth/refresh", headers=admin_headers)
    logged_out = await client.post("/api/v1/auth/logout", headers=admin_headers)

    assert refreshed.status_code == 200
    assert refreshed.json()["data"]["token"]
    assert logged_out.json()["message"] == "Logged out successfully"


@pytest.mark.asyncio
async def test_garbage_and_expired_tokens_are_rejected(client: AsyncClient) -> None:
    expired = create_access_token(user_id="admin", email="admin@example.com", role="admin", expires_minutes=-1)

    for token in ("garbage", expired):
        response = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "Invalid or expired token"}


@pytest.mark.asyncio
async def test_deactivated_ambassador_token_stops_working(
    client: AsyncClient, make_ambassador, ambassador_headers, admin_headers
) -> None:
    ambassador = await make_ambassador()
    headers = ambassador_headers(ambassador)
    assert (await client.get("/api/v1/auth/me", headers=headers)).status_code == 200

    await client.delete(f"/api/v1/admin/ambassadors/{ambassador.id}", headers=admin_headers)

    assert (await client.get("/api/v1/auth/me", headers=headers)).status_code == 401
