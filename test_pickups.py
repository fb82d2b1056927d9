"""Pickup request lifecycle tests."""

import pytest
from fastapi.testclient import TestClient

from conftest import auth_headers
from umutisafe.crud import crud_disposal, crud_pickup_request, crud_user
from umutisafe.models import Disposal, PickupRequest


def _pickup_payload(chw, **overrides):
    payload = {
        "chw_id": str(chw.id),
        "medicine_name": "Morphine",
        "reason": "expired",
        "pickup_location": "Remera, Gasabo District",
        "preferred_time": "2026-10-21T09:00:00",
        "consent_given": True,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def disposal(db, citizen):
    row = Disposal(user_id=citizen.id, generic_name="Morphine", risk_level="HIGH", status="pending_review")
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def test_consent_is_required(client, db, citizen, chw):
    response = client.post(
        "/api/pickups",
        json=_pickup_payload(chw, consent_given=False),
        headers=auth_headers(citizen),
    )

    assert response.status_code == 400
    assert db.query(PickupRequest).count() == 0


def test_chw_must_exist_be_chw_and_active(client, db, citizen, make_user):
    not_chw = make_user("plain@gmail.com")
    inactive_chw = make_user("sleepy.chw@gmail.com", role="chw", active=False)

    for target in (not_chw, inactive_chw):
        response = client.post("/api/pickups", json=_pickup_payload(target), headers=auth_headers(citizen))
        assert response.status_code == 404
    assert db.query(PickupRequest).count() == 0


def test_create_links_owned_disposal(client, db, citizen, chw, disposal):
    response = client.post(
        "/api/pickups",
        json=_pickup_payload(chw, disposal_id=str(disposal.id)),
        headers=auth_headers(citizen),
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["status"] == "pending"
    assert data["chw"]["email"] == "claudine.chw@gmail.com"
    assert data["disposal"]["id"] == str(disposal.id)

    db.expire_all()
    linked = crud_disposal.get(db, disposal.id)
    assert linked.status == "pickup_requested"
    assert str(linked.pickup_request_id) == data["id"]


def test_foreign_disposal_is_ignored(client, db, chw, disposal, make_user):
    stranger = make_user("stranger@gmail.com")

    response = client.post(
        "/api/pickups",
        json=_pickup_payload(chw, disposal_id=str(disposal.id)),
        headers=auth_headers(stranger),
    )

    assert response.status_code == 201
    assert response.json()["data"]["disposal"] is None
    db.expire_all()
    untouched = crud_disposal.get(db, disposal.id)
    assert untouched.status == "pending_review"
    assert untouched.pickup_request_id is None


def test_failure_after_insert_rolls_back_everything(app, db, citizen, chw, disposal, monkeypatch):
    def exploding_lookup(*args, **kwargs):
        raise RuntimeError("database went away")

    monkeypatch.setattr(crud_disposal, "get_owned", exploding_lookup)
    client = TestClient(app, raise_server_exceptions=False)

    response = client.post(
        "/api/pickups",
        json=_pickup_payload(chw, disposal_id=str(disposal.id)),
        headers=auth_headers(citizen),
    )

    assert response.status_code == 500
    assert response.json()["success"] is False
    assert "stack" in response.json()

    db.expire_all()
    assert db.query(PickupRequest).count() == 0
    assert crud_disposal.get(db, disposal.id).status == "pending_review"


def _create_pickup(client, citizen, chw):
    response = client.post("/api/pickups", json=_pickup_payload(chw), headers=auth_headers(citizen))
    return response.json()["data"]["id"]


def test_only_assigned_chw_updates_status(client, citizen, chw, make_user):
    pickup_id = _create_pickup(client, citizen, chw)
    other_chw = make_user("other.chw@gmail.com", role="chw")

    assert client.put(
        f"/api/pickups/{pickup_id}/status", json={"status": "scheduled"}, headers=auth_headers(other_chw)
    ).status_code == 404
    assert client.put(
        f"/api/pickups/{pickup_id}/status", json={"status": "scheduled"}, headers=auth_headers(citizen)
    ).status_code == 403

    response = client.put(
        f"/api/pickups/{pickup_id}/status",
        json={"status": "scheduled", "chw_notes": "Coming Tuesday", "scheduled_time": "2026-10-22T10:00:00"},
        headers=auth_headers(chw),
    )
    data = response.json()["data"]
    assert data["status"] == "scheduled"
    assert data["chw_notes"] == "Coming Tuesday"
    assert data["scheduled_time"].startswith("2026-10-22T10:00")


def test_completion_increments_counter_every_time(client, db, citizen, chw):
    pickup_id = _create_pickup(client, citizen, chw)
    headers = auth_headers(chw)

    first = client.put(f"/api/pickups/{pickup_id}/status", json={"status": "completed"}, headers=headers)
    assert first.json()["data"]["completed_at"] is not None
    client.put(f"/api/pickups/{pickup_id}/status", json={"status": "completed"}, headers=headers)

    db.expire_all()
    assert crud_user.get(db, chw.id).completed_pickups == 2


def test_requester_can_cancel_until_closed(client, citizen, chw, make_user):
    pickup_id = _create_pickup(client, citizen, chw)
    stranger = make_user("stranger@gmail.com")

    assert client.put(f"/api/pickups/{pickup_id}/cancel", headers=auth_headers(stranger)).status_code == 404

    response = client.put(f"/api/pickups/{pickup_id}/cancel", headers=auth_headers(citizen))
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "cancelled"

    again = client.put(f"/api/pickups/{pickup_id}/cancel", headers=auth_headers(citizen))
    assert again.status_code == 400


def test_cannot_cancel_completed(client, citizen, chw):
    pickup_id = _create_pickup(client, citizen, chw)
    client.put(f"/api/pickups/{pickup_id}/status", json={"status": "completed"}, headers=auth_headers(chw))

    response = client.put(f"/api/pickups/{pickup_id}/cancel", headers=auth_headers(citizen))
    assert response.status_code == 400


def test_visibility_and_listings(client, citizen, chw, make_user):
    pickup_id = _create_pickup(client, citizen, chw)
    stranger = make_user("stranger@gmail.com")

    assert client.get(f"/api/pickups/{pickup_id}", headers=auth_headers(citizen)).status_code == 200
    assert client.get(f"/api/pickups/{pickup_id}", headers=auth_headers(chw)).status_code == 200
    assert client.get(f"/api/pickups/{pickup_id}", headers=auth_headers(stranger)).status_code == 404

    mine = client.get("/api/pickups", headers=auth_headers(citizen)).json()
    assert [p["id"] for p in mine["data"]] == [pickup_id]
    assert mine["pagination"]["total"] == 1

    assigned = client.get("/api/pickups/chw", headers=auth_headers(chw)).json()
    assert [p["id"] for p in assigned["data"]] == [pickup_id]
    assert assigned["data"][0]["requester"]["email"] == "jean@gmail.com"

    assert client.get("/api/pickups/chw", headers=auth_headers(citizen)).status_code == 403


def test_chw_stats(client, db, citizen, chw):
    first = _create_pickup(client, citizen, chw)
    _create_pickup(client, citizen, chw)
    client.put(f"/api/pickups/{first}/status", json={"status": "scheduled"}, headers=auth_headers(chw))

    stats = client.get("/api/pickups/chw/stats", headers=auth_headers(chw)).json()["data"]
    assert stats == {"pending": 1, "scheduled": 1, "completed": 0, "total": 2}

    assert crud_pickup_request.stats_for_chw(db, chw_id=chw.id)["total"] == 2


@pytest.mark.parametrize("closed_status", ["completed", "cancelled"])
def test_closed_disposal_is_not_reopened(client, db, citizen, chw, closed_status):
    closed = Disposal(user_id=citizen.id, generic_name="Morphine", status=closed_status)
    db.add(closed)
    db.commit()

    response = client.post(
        "/api/pickups",
        json=_pickup_payload(chw, disposal_id=str(closed.id)),
        headers=auth_headers(citizen),
    )

    assert response.status_code == 201
    assert response.json()["data"]["disposal"] is None
    db.expire_all()
    untouched = crud_disposal.get(db, closed.id)
    assert untouched.status == closed_status
    assert untouched.pickup_request_id is None


def test_completed_at_is_stamped_once_across_pickup_requests(client, db, citizen, chw):
    headers = auth_headers(citizen)
    disposal_id = client.post(
        "/api/disposals", json={"generic_name": "Morphine", "risk_level": "high"}, headers=headers
    ).json()["data"]["id"]
    client.post("/api/pickups", json=_pickup_payload(chw, disposal_id=disposal_id), headers=headers)
    first = client.put(f"/api/disposals/{disposal_id}", json={"status": "completed"}, headers=headers)
    stamped = first.json()["data"]["completed_at"]
    assert stamped is not None

    client.post("/api/pickups", json=_pickup_payload(chw, disposal_id=disposal_id), headers=headers)
    again = client.put(f"/api/disposals/{disposal_id}", json={"status": "completed"}, headers=headers)

    assert again.status_code == 200
    assert again.json()["data"]["status"] == "completed"
    assert again.json()["data"]["completed_at"] == stamped


def test_pickup_status_only_moves_forward(client, citizen, chw):
    pickup_id = _create_pickup(client, citizen, chw)
    headers = auth_headers(chw)

    assert client.put(f"/api/pickups/{pickup_id}/status", json={"status": "collected"}, headers=headers).status_code == 200
    assert client.put(f"/api/pickups/{pickup_id}/status", json={"status": "scheduled"}, headers=headers).status_code == 400

    client.put(f"/api/pickups/{pickup_id}/status", json={"status": "completed"}, headers=headers)
    backwards = client.put(f"/api/pickups/{pickup_id}/status", json={"status": "pending"}, headers=headers)

    assert backwards.status_code == 400
    assert client.get(f"/api/pickups/{pickup_id}", headers=headers).json()["data"]["status"] == "completed"


def test_notes_can_be_added_without_changing_status(client, citizen, chw):
    pickup_id = _create_pickup(client, citizen, chw)
    headers = auth_headers(chw)
    client.put(f"/api/pickups/{pickup_id}/status", json={"status": "scheduled"}, headers=headers)

    response = client.put(
        f"/api/pickups/{pickup_id}/status",
        json={"status": "scheduled", "chw_notes": "Gate code 42"},
        headers=headers,
    )

    assert response.status_code == 200
    assert response.json()["data"]["chw_notes"] == "Gate code 42"
