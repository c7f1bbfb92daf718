"""Ambassador self-service endpoints."""

from app.auth.security import verify_password
from app.core.models import Ambassador

URL = "/api/v1/ambassador"


async def refer(client, webhook_headers, code: str, n: int) -> None:
    body = {"name": f"Student {n}", "email": f"student{n}@example.com", "referer": code}
    response = await client.post("/api/v1/webhook/referral", json=body, headers=webhook_headers)
    assert response.status_code == 200


async def test_dashboard_shows_balances_and_targets(
    client, make_ambassador, ambassador_headers, webhook_headers, set_setting
) -> None:
    ambassador = await make_ambassador(referral_code="AMB-PORT2024001", target_referrals=10)
    await set_setting("general_target_referrals", "25")
    await refer(client, webhook_headers, "AMB-PORT2024001", 1)
    await refer(client, webhook_headers, "AMB-PORT2024001", 2)

    response = await client.get(f"{URL}/dashboard", headers=ambassador_headers(ambassador))

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["referral_code"] == "AMB-PORT2024001"
    assert data["total_referrals"] == 2
    assert data["points_balance"] == 2000
    assert data["referrals_this_month"] == 2
    assert data["points_this_month"] == 2000
    assert data["target_referrals"] == 10
    assert data["general_target_referrals"] == 25
    assert data["general_target_points"] == 0


async def test_referrals_are_scoped_to_caller(client, make_ambassador, ambassador_headers, webhook_headers) -> None:
    mine = await make_ambassador(referral_code="AMB-MINE2024001")
    await make_ambassador(referral_code="AMB-OTHR2024001")
    await refer(client, webhook_headers, "AMB-MINE2024001", 1)
    await refer(client, webhook_headers, "AMB-OTHR2024001", 2)
    await refer(client, webhook_headers, "AMB-OTHR2024001", 3)

    response = await client.get(f"{URL}/referrals", headers=ambassador_headers(mine))

    data = response.json()["data"]
    assert data["pagination"]["total"] == 1
    assert data["data"][0]["student_email"] == "student1@example.com"


async def test_payments_are_scoped_to_caller(
    client, make_ambassador, ambassador_headers, admin_headers
) -> None:
    mine = await make_ambassador(total_points_earned=500, points_balance=500)
    other = await make_ambassador(total_points_earned=500, points_balance=500)
    for ambassador in (mine, other):
        body = {"ambassador_id": str(ambassador.id), "amount": 100, "payment_method": "ORANGE", "phone_number": "1"}
        await client.post("/api/v1/admin/payouts", json=body, headers=admin_headers)

    response = await client.get(f"{URL}/payments", headers=ambassador_headers(mine))

    data = response.json()["data"]
    assert data["pagination"] == {"page": 1, "limit": 10, "total": 1, "total_pages": 1}
    assert data["data"][0]["payment_method"] == "ORANGE"


async def test_profile_update(client, make_ambassador, ambassador_headers, reload) -> None:
    ambassador = await make_ambassador()
    headers = ambassador_headers(ambassador)

    updated = await client.put(
        f"{URL}/profile",
        json={"phone": "+237655555555", "social_media": {"instagram": "@amb"}, "email": "hijack@example.com"},
        headers=headers,
    )
    empty = await client.put(f"{URL}/profile", json={"name": ""}, headers=headers)
    profile = await client.get(f"{URL}/profile", headers=headers)

    assert updated.status_code == 200
    assert empty.status_code == 400
    assert profile.json()["data"]["phone"] == "+237655555555"
    assert profile.json()["data"]["social_media"] == {"instagram": "@amb"}
    assert (await reload(Ambassador, ambassador.id)).email == ambassador.email


async def test_change_password(client, make_ambassador, ambassador_headers, reload) -> None:
    ambassador = await make_ambassador()
    headers = ambassador_headers(ambassador)

    wrong = await client.put(
        f"{URL}/password", json={"currentPassword": "bad", "newPassword": "long-enough"}, headers=headers
    )
    short = await client.put(
        f"{URL}/password", json={"currentPassword": "ambassador-pass", "newPassword": "short"}, headers=headers
    )
    ok = await client.put(
        f"{URL}/password", json={"currentPassword": "ambassador-pass", "newPassword": "long-enough"}, headers=headers
    )

    assert wrong.status_code == 401
    assert short.status_code == 400
    assert ok.status_code == 200
    assert verify_password("long-enough", (await reload(Ambassador, ambassador.id)).password_hash)


async def test_admin_cannot_use_portal(client, admin_headers) -> None:
    response = await client.get(f"{URL}/dashboard", headers=admin_headers)

    assert response.status_code == 403
    assert response.json() == {"success": False, "error": "Ambassador access required"}
