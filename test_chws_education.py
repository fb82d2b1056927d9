"""CHW directory and education tip endpoints."""

from conftest import auth_headers
from umutisafe.models import EducationTip


def test_chw_directory_lists_active_chws_by_rating(client, chw, make_user):
    make_user("top.chw@gmail.com", role="chw", name="Top Rated", sector="Kimironko", rating=4.8)
    make_user("gone.chw@gmail.com", role="chw", active=False)
    make_user("citizen2@gmail.com")

    body = client.get("/api/chws").json()

    assert [c["email"] for c in body["data"]] == ["top.chw@gmail.com", "claudine.chw@gmail.com"]
    assert body["pagination"]["total"] == 2

    filtered = client.get("/api/chws?sector=Remera").json()["data"]
    assert [c["email"] for c in filtered] == ["claudine.chw@gmail.com"]


def test_nearby_only_returns_available_chws(client, chw, make_user):
    make_user("busy.chw@gmail.com", role="chw", sector="Remera", availability="busy")

    data = client.get("/api/chws/nearby?sector=rem").json()["data"]

    assert [c["email"] for c in data] == ["claudine.chw@gmail.com"]


def test_get_chw(client, chw, citizen):
    assert client.get(f"/api/chws/{chw.id}").json()["data"]["name"] == "Claudine Uwase"
    assert client.get(f"/api/chws/{citizen.id}").status_code == 404


def test_chw_updates_own_availability(client, chw, citizen):
    response = client.put("/api/chws/availability", json={"availability": "busy"}, headers=auth_headers(chw))
    assert response.status_code == 200
    assert response.json()["data"]["availability"] == "busy"

    invalid = client.put("/api/chws/availability", json={"availability": "asleep"}, headers=auth_headers(chw))
    assert invalid.status_code == 400

    denied = client.put("/api/chws/availability", json={"availability": "busy"}, headers=auth_headers(citizen))
    assert denied.status_code == 403


def _tip(client, admin, **overrides):
    payload = {
        "title": "Never flush medicines",
        "summary": "Flushing pollutes rivers.",
        "content": "Bring expired medicines to a CHW instead.",
        "category": "disposal",
    }
    payload.update(overrides)
    return client.post("/api/education", json=payload, headers=auth_headers(admin))


def test_tips_are_ordered_and_filtered(client, admin):
    _tip(client, admin, title="Second", display_order=2)
    _tip(client, admin, title="First", display_order=1)
    _tip(client, admin, title="Storage", category="storage", display_order=0)

    titles = [t["title"] for t in client.get("/api/education").json()["data"]]
    assert titles == ["Storage", "First", "Second"]

    disposal_only = client.get("/api/education?category=disposal").json()["data"]
    assert [t["title"] for t in disposal_only] == ["First", "Second"]


def test_tip_maintenance_is_admin_only_and_soft_deletes(client, db, admin, citizen):
    assert _tip(client, citizen).status_code == 403

    created = _tip(client, admin)
    assert created.status_code == 201
    tip_id = created.json()["data"]["id"]

    updated = client.put(f"/api/education/{tip_id}", json={"icon": "droplet"}, headers=auth_headers(admin))
    assert updated.json()["data"]["icon"] == "droplet"

    assert client.delete(f"/api/education/{tip_id}", headers=auth_headers(admin)).status_code == 200
    assert client.get(f"/api/education/{tip_id}").status_code == 404
    assert client.get("/api/education").json()["data"] == []
    assert db.query(EducationTip).count() == 1
