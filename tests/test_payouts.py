"""Payout creation and status transitions against the points ledger."""

from uuid import uuid4

from sqlalchemy import func, select

from app.core import ledger
from app.core.models import Ambassador, Payout

URL = "/api/v1/admin/payouts"


def payout_body(ambassador, amount: int, method: str = "MTN") -> dict:
    return {
        "ambassador_id": str(ambassador.id),
        "amount": amount,
        "payment_method": method,
        "phone_number": "+237670000000",
    }


async def funded_ambassador(make_ambassador, points: int = 500):
    return await make_ambassador(total_referrals=1, total_points_earned=points, points_balance=points)


async def test_insufficient_balance_creates_nothing(client, db_session, make_ambassador, admin_headers, reload) -> None:
    ambassador = await funded_ambassador(make_ambassador, 500)

    response = await client.post(URL, json=payout_body(ambassador, 800), headers=admin_headers)

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Insufficient points balance"}
    assert await db_session.scalar(select(func.count(Payout.id))) == 0
    assert (await reload(Ambassador, ambassador.id)).points_balance == 500


async def test_create_holds_points_and_fail_restores_them(client, make_ambassador, admin_headers, reload) -> None:
    ambassador = await funded_ambassador(make_ambassador, 500)

    created = await client.post(URL, json=payout_body(ambassador, 300), headers=admin_headers)

    assert created.status_code == 201
    payout = created.json()["data"]
    assert payout["status"] == "pending"
    assert payout["points_deducted"] == 300
    assert payout["ambassador_name"] == ambassador.name
    assert (await reload(Ambassador, ambassador.id)).points_balance == 200

    failed = await client.put(f"{URL}/{payout['id']}", json={"status": "failed"}, headers=admin_headers)

    assert failed.status_code == 200
    assert failed.json()["data"]["status"] == "failed"
    assert failed.json()["data"]["processed_at"] is None
    assert (await reload(Ambassador, ambassador.id)).points_balance == 500


async def test_failing_twice_restores_once(client, make_ambassador, admin_headers, reload) -> None:
    ambassador = await funded_ambassador(make_ambassador, 500)
    payout_id = (await client.post(URL, json=payout_body(ambassador, 300), headers=admin_headers)).json()["data"]["id"]

    first = await client.put(f"{URL}/{payout_id}", json={"status": "failed"}, headers=admin_headers)
    second = await client.put(f"{URL}/{payout_id}", json={"status": "failed"}, headers=admin_headers)

    assert first.status_code == 200
    assert second.status_code == 200
    assert (await reload(Ambassador, ambassador.id)).points_balance == 500


async def test_setting_current_status_changes_nothing(client, make_ambassador, admin_headers, reload) -> None:
    ambassador = await funded_ambassador(make_ambassador, 500)
    payout_id = (await client.post(URL, json=payout_body(ambassador, 300), headers=admin_headers)).json()["data"]["id"]

    response = await client.put(f"{URL}/{payout_id}", json={"status": "pending"}, headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["data"]["status"] == "pending"
    assert response.json()["data"]["processed_at"] is None
    assert (await reload(Payout, payout_id)).status == "pending"
    assert (await reload(Ambassador, ambassador.id)).points_balance == 200


async def test_complete_stamps_processed_at_once(client, make_ambassador, admin_headers, reload) -> None:
    ambassador = await funded_ambassador(make_ambassador, 500)
    payout_id = (await client.post(URL, json=payout_body(ambassador, 300), headers=admin_headers)).json()["data"]["id"]

    completed = await client.put(f"{URL}/{payout_id}", json={"status": "completed"}, headers=admin_headers)
    processed_at = completed.json()["data"]["processed_at"]
    again = await client.put(f"{URL}/{payout_id}", json={"status": "completed"}, headers=admin_headers)

    assert completed.status_code == 200
    assert processed_at is not None
    assert again.json()["data"]["processed_at"] == processed_at
    assert (await reload(Ambassador, ambassador.id)).points_balance == 200


async def test_completed_payout_cannot_fail(client, make_ambassador, admin_headers, reload) -> None:
    ambassador = await funded_ambassador(make_ambassador, 500)
    payout_id = (await client.post(URL, json=payout_body(ambassador, 300), headers=admin_headers)).json()["data"]["id"]
    await client.put(f"{URL}/{payout_id}", json={"status": "completed"}, headers=admin_headers)

    response = await client.put(f"{URL}/{payout_id}", json={"status": "failed"}, headers=admin_headers)

    assert response.status_code == 400
    assert (await reload(Ambassador, ambassador.id)).points_balance == 200
    assert (await reload(Payout, payout_id)).status == "completed"


async def test_failed_payout_cannot_be_completed(client, make_ambassador, admin_headers) -> None:
    ambassador = await funded_ambassador(make_ambassador, 500)
    payout_id = (await client.post(URL, json=payout_body(ambassador, 300), headers=admin_headers)).json()["data"]["id"]
    await client.put(f"{URL}/{payout_id}", json={"status": "failed"}, headers=admin_headers)

    response = await client.put(f"{URL}/{payout_id}", json={"status": "completed"}, headers=admin_headers)

    assert response.status_code == 400


async def test_invalid_status_and_method_are_validation_errors(client, make_ambassador, admin_headers) -> None:
    ambassador = await funded_ambassador(make_ambassador, 500)

    bad_method = await client.post(URL, json=payout_body(ambassador, 100, method="PAYPAL"), headers=admin_headers)
    payout_id = (await client.post(URL, json=payout_body(ambassador, 100), headers=admin_headers)).json()["data"]["id"]
    bad_status = await client.put(f"{URL}/{payout_id}", json={"status": "refunded"}, headers=admin_headers)
    empty = await client.put(f"{URL}/{payout_id}", json={}, headers=admin_headers)

    assert bad_method.status_code == 400
    assert bad_status.status_code == 400
    assert bad_status.json()["error"] == "Invalid status"
    assert empty.status_code == 400


async def test_non_positive_amount_is_rejected(client, make_ambassador, admin_headers) -> None:
    ambassador = await funded_ambassador(make_ambassador, 500)

    response = await client.post(URL, json=payout_body(ambassador, 0), headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["success"] is False


async def test_unknown_ambassador(client, admin_headers) -> None:
    body = {"ambassador_id": str(uuid4()), "amount": 10, "payment_method": "MTN", "phone_number": "1"}

    response = await client.post(URL, json=body, headers=admin_headers)

    assert response.status_code == 404


async def test_metadata_updates_in_any_state(client, make_ambassador, admin_headers, reload) -> None:
    ambassador = await funded_ambassador(make_ambassador, 500)
    payout_id = (await client.post(URL, json=payout_body(ambassador, 300), headers=admin_headers)).json()["data"]["id"]
    await client.put(f"{URL}/{payout_id}", json={"status": "completed"}, headers=admin_headers)

    response = await client.put(
        f"{URL}/{payout_id}",
        json={"transaction_reference": "MTN-998877", "notes": "sent by hand"},
        headers=admin_headers,
    )

    assert response.status_code == 200
    payout = await reload(Payout, payout_id)
    assert payout.transaction_reference == "MTN-998877"
    assert payout.notes == "sent by hand"
    assert payout.status == "completed"
    assert (await reload(Ambassador, ambassador.id)).points_balance == 200


async def test_failure_while_holding_points_leaves_no_payout(
    client, db_session, make_ambassador, admin_headers, reload, monkeypatch
) -> None:
    ambassador = await funded_ambassador(make_ambassador, 500)

    async def broken_hold(*args, **kwargs):
        raise RuntimeError("disk full")

    monkeypatch.setattr(ledger, "hold_points", broken_hold)

    response = await client.post(URL, json=payout_body(ambassador, 300), headers=admin_headers)

    assert response.status_code == 500
    assert "disk full" not in response.text
    assert await db_session.scalar(select(func.count(Payout.id))) == 0
    assert (await reload(Ambassador, ambassador.id)).points_balance == 500


async def test_balance_matches_ledger_after_mixed_operations(
    client, db_session, make_ambassador, admin_headers, webhook_headers, reload
) -> None:
    ambassador = await make_ambassador(referral_code="AMB-MIXD2024001")
    for n in range(3):
        body = {"name": f"Student {n}", "email": f"s{n}@example.com", "referer": "AMB-MIXD2024001"}
        assert (await client.post("/api/v1/webhook/referral", json=body, headers=webhook_headers)).status_code == 200
        assert (await reload(Ambassador, ambassador.id)).points_balance == await ledger.expected_balance(
            db_session, ambassador.id
        )

    ids = []
    for amount in (500, 700, 900):
        response = await client.post(URL, json=payout_body(ambassador, amount), headers=admin_headers)
        ids.append(response.json()["data"]["id"])

    steps = [(ids[0], "completed"), (ids[1], "failed"), (ids[1], "failed"), (ids[2], "completed"), (ids[0], "failed")]
    for payout_id, target in steps:
        await client.put(f"{URL}/{payout_id}", json={"status": target}, headers=admin_headers)
        current = await reload(Ambassador, ambassador.id)
        assert current.points_balance == await ledger.expected_balance(db_session, ambassador.id)
        assert current.points_balance >= 0

    # 3000 earned, 500 + 900 still held
    assert (await reload(Ambassador, ambassador.id)).points_balance == 1600


async def test_list_and_pending(client, make_ambassador, admin_headers) -> None:
    funded = await funded_ambassador(make_ambassador, 500)
    await make_ambassador()
    await client.post(URL, json=payout_body(funded, 100), headers=admin_headers)

    listing = await client.get(URL, params={"status": "pending"}, headers=admin_headers)
    pending = await client.get(f"{URL}/pending", headers=admin_headers)

    assert listing.status_code == 200
    assert listing.json()["data"]["pagination"]["total"] == 1
    assert listing.json()["data"]["data"][0]["ambassador_name"] == funded.name
    assert [a["id"] for a in pending.json()["data"]] == [str(funded.id)]


async def test_payouts_require_admin(client, make_ambassador, ambassador_headers) -> None:
    ambassador = await make_ambassador()

    anonymous = await client.get(URL)
    as_ambassador = await client.get(URL, headers=ambassador_headers(ambassador))

    assert anonymous.status_code == 401
    assert as_ambassador.status_code == 403
