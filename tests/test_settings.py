"""Settings API and its effect on ingestion."""

URL = "/api/v1/admin/settings"


async def test_settings_are_typed_and_secret_masked(client, admin_headers, set_setting) -> None:
    await set_setting("webhook_secret", "super-secret")

    response = await client.get(URL, headers=admin_headers)

    data = response.json()["data"]
    assert data["points_per_referral"] == 1000
    assert data["max_ambassadors"] == 50
    assert data["system_active"] is True
    assert data["webhook_secret"] != "super-secret"
    assert "super-secret" not in response.text


async def test_update_settings(client, admin_headers) -> None:
    response = await client.put(
        URL,
        json={"points_per_referral": 1500, "system_active": False, "general_target_points": 40000},
        headers=admin_headers,
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["points_per_referral"] == 1500
    assert data["system_active"] is False
    assert data["general_target_points"] == 40000
    assert data["max_ambassadors"] == 50


async def test_update_with_nothing_known_is_rejected(client, admin_headers) -> None:
    response = await client.put(URL, json={"unknown_key": 1}, headers=admin_headers)

    assert response.status_code == 400


async def test_negative_values_are_rejected(client, admin_headers) -> None:
    response = await client.put(URL, json={"points_per_referral": -5}, headers=admin_headers)

    assert response.status_code == 400


async def test_turning_system_off_stops_ingestion(client, admin_headers, make_ambassador, webhook_headers) -> None:
    await make_ambassador(referral_code="AMB-SETS2024001")
    await client.put(URL, json={"system_active": False}, headers=admin_headers)

    body = {"name": "Jane", "email": "jane@example.com", "referer": "AMB-SETS2024001"}
    response = await client.post("/api/v1/webhook/referral", json=body, headers=webhook_headers)

    assert response.status_code == 503
