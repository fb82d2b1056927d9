"""Medicine registry: lookup, prediction and CSV import."""

import pytest

from conftest import auth_headers
from umutisafe.crud import crud_medicine
from umutisafe.models import Medicine

REGISTRY_CSV = (
    "Registration Number,Brand Name,Generic Name,Strength,Dosage Form,Category,Risk Level\n"
    "RW-001,Panadol,Paracetamol,500mg,Tablet,Analgesic,LOW\n"
    "RW-002,MST,Morphine,10mg,Tablet,Opioid Analgesic,\n"
    "RW-003,Amoxil,Amoxicillin,250mg,Capsule,,\n"
)


def _upload(client, admin, text, mode="replace", filename="registry.csv", content_type="text/csv"):
    return client.post(
        f"/api/medicines/upload-csv?mode={mode}",
        files={"file": (filename, text.encode("utf-8"), content_type)},
        headers=auth_headers(admin),
    )


def _active_medicines(db):
    db.expire_all()
    return db.query(Medicine).filter(Medicine.is_active.is_(True)).all()


@pytest.fixture
def paracetamol(db):
    medicine = Medicine(
        generic_name="Paracetamol",
        brand_name="Panadol",
        dosage_form="Tablet",
        category="Analgesic",
        risk_level="LOW",
    )
    db.add(medicine)
    db.commit()
    db.refresh(medicine)
    return medicine


def test_replace_import_leaves_exactly_the_file_rows(client, db, admin, paracetamol):
    db.add(Medicine(generic_name="Old Drug", dosage_form="Syrup", category="Legacy", risk_level="LOW"))
    db.commit()

    response = _upload(client, admin, REGISTRY_CSV)

    assert response.status_code == 200
    assert response.json()["data"] == {"mode": "replace", "created": 3, "updated": 0, "skipped": 0}
    names = sorted(m.generic_name for m in _active_medicines(db))
    assert names == ["Amoxicillin", "Morphine", "Paracetamol"]


def test_risk_is_inferred_and_category_defaulted(client, db, admin):
    _upload(client, admin, REGISTRY_CSV)

    by_name = {m.generic_name: m for m in _active_medicines(db)}
    assert by_name["Paracetamol"].risk_level == "LOW"
    assert by_name["Morphine"].risk_level == "HIGH"
    assert by_name["Amoxicillin"].risk_level == "MEDIUM"
    assert by_name["Amoxicillin"].category == "General"


def test_append_upserts_by_registration_number(client, db, admin):
    _upload(client, admin, REGISTRY_CSV)
    update_csv = (
        "Registration Number,Brand Name,Generic Name,Strength,Dosage Form,Category\n"
        "RW-001,Panadol Extra,Paracetamol,1g,Tablet,Analgesic\n"
        "RW-010,Ventolin,Salbutamol,100mcg,Inhaler,Bronchodilator\n"
    )

    response = _upload(client, admin, update_csv, mode="append")

    assert response.json()["data"] == {"mode": "append", "created": 1, "updated": 1, "skipped": 0}
    medicines = _active_medicines(db)
    assert len(medicines) == 4
    paracetamol = next(m for m in medicines if m.registration_number == "RW-001")
    assert paracetamol.brand_name == "Panadol Extra"
    assert paracetamol.strength == "1g"


def test_accented_and_aliased_headers_are_recognized(client, db, admin):
    csv_text = (
        "Reg. No,Trade Name,Génèric Name,Dose,Pharmaceutical Form,Therapeutic Class\n"
        "RW-100,Valium,Diazepam,5mg,Tablet,Controlled Psychotropic\n"
    )

    response = _upload(client, admin, csv_text)

    assert response.status_code == 200
    (diazepam,) = _active_medicines(db)
    assert diazepam.brand_name == "Valium"
    assert diazepam.risk_level == "HIGH"


def test_rows_without_generic_name_or_form_are_skipped(client, db, admin):
    csv_text = (
        "Registration Number,Brand Name,Generic Name,Strength,Dosage Form\n"
        "RW-1,Brand,,5mg,Tablet\n"
        "RW-2,Brand,Ibuprofen,200mg,  \n"
        "RW-3,Brufen,Ibuprofen,400mg,Tablet\n"
    )

    response = _upload(client, admin, csv_text)

    assert response.json()["data"]["skipped"] == 2
    assert response.json()["data"]["created"] == 1


def test_missing_required_columns_is_rejected(client, db, admin, paracetamol):
    response = _upload(client, admin, "Brand Name,Generic Name\nPanadol,Paracetamol\n")

    assert response.status_code == 400
    assert "registration_number" in response.json()["message"]
    assert len(_active_medicines(db)) == 1


def test_non_csv_and_bad_mode_are_rejected(client, admin):
    assert _upload(client, admin, "%PDF", filename="registry.pdf", content_type="application/pdf").status_code == 400
    assert _upload(client, admin, REGISTRY_CSV, mode="merge").status_code == 400


def test_import_requires_admin(client, citizen):
    assert _upload(client, citizen, REGISTRY_CSV).status_code == 403


def test_failed_import_leaves_registry_untouched(db, paracetamol, monkeypatch):
    from umutisafe.crud import medicine as medicine_module

    def infer(explicit, category):
        if category == "Broken":
            raise RuntimeError("bad row")
        return "LOW"

    monkeypatch.setattr(medicine_module, "infer_risk_level", infer)
    rows = [
        {"generic_name": "Ibuprofen", "dosage_form": "Tablet"},
        {"generic_name": "Mystery", "dosage_form": "Tablet", "category": "Broken"},
    ]

    with pytest.raises(RuntimeError):
        crud_medicine.import_rows(db, rows=rows, mode="replace")

    names = [m.generic_name for m in _active_medicines(db)]
    assert names == ["Paracetamol"]


def test_search_needs_two_characters(client, paracetamol):
    assert client.get("/api/medicines/search?q=p").json()["data"] == []

    results = client.get("/api/medicines/search?q=pana").json()["data"]
    assert [m["generic_name"] for m in results] == ["Paracetamol"]


def test_list_filters_by_risk(client, db, paracetamol):
    db.add(Medicine(generic_name="Morphine", dosage_form="Tablet", category="Opioid", risk_level="HIGH"))
    db.commit()

    body = client.get("/api/medicines?risk_level=high").json()
    assert [m["generic_name"] for m in body["data"]] == ["Morphine"]
    assert body["pagination"]["total"] == 1


def test_predict_known_medicine(client, paracetamol):
    response = client.post("/api/medicines/predict/text", json={"generic_name": "paracetamol"})

    data = response.json()["data"]
    assert data["predicted_category"] == "Analgesic"
    assert data["risk_level"] == "LOW"
    assert data["confidence"] == 0.9
    assert data["requires_chw"] is False
    assert data["medicine_info"]["brand_name"] == "N/A"


def test_predict_unknown_medicine_defaults_to_medium(client):
    response = client.post(
        "/api/medicines/predict/text",
        json={"generic_name": "Mysterium", "dosage_form": "Syrup"},
    )

    data = response.json()["data"]
    assert data["predicted_category"] == "Unknown"
    assert data["risk_level"] == "MEDIUM"
    assert data["confidence"] == 0.7
    assert data["medicine_info"]["dosage_form"] == "Syrup"


def test_admin_maintains_registry(client, db, admin, citizen):
    payload = {"generic_name": "Tramadol", "dosage_form": "Capsule", "category": "Opioid", "risk_level": "high"}

    assert client.post("/api/medicines", json=payload, headers=auth_headers(citizen)).status_code == 403

    created = client.post("/api/medicines", json=payload, headers=auth_headers(admin))
    assert created.status_code == 201
    medicine_id = created.json()["data"]["id"]
    assert created.json()["data"]["risk_level"] == "HIGH"

    updated = client.put(
        f"/api/medicines/{medicine_id}", json={"strength": "50mg"}, headers=auth_headers(admin)
    )
    assert updated.json()["data"]["strength"] == "50mg"

    assert client.delete(f"/api/medicines/{medicine_id}", headers=auth_headers(admin)).status_code == 200
    assert client.get(f"/api/medicines/{medicine_id}").status_code == 404
    assert db.query(Medicine).count() == 1
