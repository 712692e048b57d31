import sqlite3
from datetime import datetime


def test_create_then_get_returns_same_record(client, auth_headers):
    body = {
        "name": "A",
        "email": "a@x.com",
        "phone": "555-0100",
        "date_of_birth": "1990-05-17",
        "medical_notes": "Allergic to latex",
    }
    response = client.post("/api/patients", json=body, headers=auth_headers)
    assert response.status_code == 201
    payload = response.json()
    assert payload["success"] is True
    assert payload["message"] == "Patient created successfully"
    created = payload["data"]
    assert isinstance(created["id"], int)
    for field, value in body.items():
        assert created[field] == value

    response = client.get(f"/api/patients/{created['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["data"] == created


def test_create_get_delete_scenario(client, auth_headers):
    response = client.post(
        "/api/patients", json={"name": "A", "email": "a@x.com"}, headers=auth_headers
    )
    assert response.status_code == 201
    patient_id = response.json()["data"]["id"]

    assert client.get(f"/api/patients/{patient_id}", headers=auth_headers).status_code == 200

    response = client.delete(f"/api/patients/{patient_id}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Patient deleted successfully"}

    response = client.get(f"/api/patients/{patient_id}", headers=auth_headers)
    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Patient not found"}


def test_create_records_calling_user_as_creator(client, auth_headers, make_patient, db_path):
    patient = make_patient(name="Owner Check")
    me = client.get("/api/auth/me", headers=auth_headers).json()

    with sqlite3.connect(db_path) as conn:
        (created_by,) = conn.execute(
            "SELECT created_by FROM patients WHERE id = ?", (patient["id"],)
        ).fetchone()
    assert created_by == me["id"]


def test_create_normalizes_fields(make_patient):
    patient = make_patient(name="  Trimmed  ", email="Mixed.Case@X.com", phone="  ", medical_notes="")
    assert patient["name"] == "Trimmed"
    assert patient["email"] == "mixed.case@x.com"
    assert patient["phone"] is None
    assert patient["medical_notes"] is None


def test_create_requires_name(client, auth_headers):
    response = client.post("/api/patients", json={"name": "   "}, headers=auth_headers)
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert {"field": "name", "message": "Name is required"} in body["errors"]


def test_create_rejects_bad_email_and_date(client, auth_headers):
    response = client.post(
        "/api/patients",
        json={"name": "Bob", "email": "not-an-email", "date_of_birth": "yesterday"},
        headers=auth_headers,
    )
    assert response.status_code == 400
    fields = {error["field"] for error in response.json()["errors"]}
    assert fields == {"email", "date_of_birth"}


def test_get_missing_patient_returns_404(client, auth_headers):
    assert client.get("/api/patients/9999", headers=auth_headers).status_code == 404


def test_update_overwrites_all_mutable_fields(client, auth_headers, make_patient):
    patient = make_patient(name="Old Name", email="old@x.com", phone="111", medical_notes="note")

    response = client.put(
        f"/api/patients/{patient['id']}",
        json={"name": "New Name", "date_of_birth": "2001-02-03"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    updated = response.json()["data"]
    assert updated["name"] == "New Name"
    assert updated["date_of_birth"] == "2001-02-03"
    assert updated["email"] is None
    assert updated["phone"] is None
    assert updated["medical_notes"] is None
    assert updated["created_at"] == patient["created_at"]
    assert datetime.fromisoformat(updated["updated_at"]) > datetime.fromisoformat(patient["updated_at"])


def test_update_missing_patient_returns_404(client, auth_headers):
    response = client.put("/api/patients/4242", json={"name": "Nobody"}, headers=auth_headers)
    assert response.status_code == 404


def test_update_validates_before_lookup(client, auth_headers):
    response = client.put("/api/patients/4242", json={"name": ""}, headers=auth_headers)
    assert response.status_code == 400


def test_delete_missing_patient_returns_404(client, auth_headers):
    assert client.delete("/api/patients/4242", headers=auth_headers).status_code == 404


def test_list_defaults_and_newest_first(client, auth_headers, make_patient):
    for i in range(3):
        make_patient(name=f"Patient {i}")

    response = client.get("/api/patients", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert [p["name"] for p in data["patients"]] == ["Patient 2", "Patient 1", "Patient 0"]
    assert data["pagination"] == {
        "page": 1,
        "limit": 10,
        "total": 3,
        "totalPages": 1,
        "hasNext": False,
        "hasPrev": False,
    }


def test_list_second_page_of_twenty_five(client, auth_headers, make_patient):
    for i in range(25):
        make_patient(name=f"Patient {i:02d}")

    response = client.get("/api/patients?page=2&limit=10", headers=auth_headers)
    data = response.json()["data"]
    assert len(data["patients"]) == 10
    assert data["patients"][0]["name"] == "Patient 14"
    assert data["pagination"] == {
        "page": 2,
        "limit": 10,
        "total": 25,
        "totalPages": 3,
        "hasNext": True,
        "hasPrev": True,
    }

    last = client.get("/api/patients?page=3&limit=10", headers=auth_headers).json()["data"]
    assert len(last["patients"]) == 5
    assert last["pagination"]["hasNext"] is False


def test_list_empty_table(client, auth_headers):
    pagination = client.get("/api/patients", headers=auth_headers).json()["data"]["pagination"]
    assert pagination["total"] == 0
    assert pagination["totalPages"] == 0
    assert pagination["hasNext"] is False


def test_search_is_case_insensitive_substring(client, auth_headers, make_patient):
    make_patient(name="Jane Doe", email="jdoe@x.com")
    make_patient(name="John Smith", phone="+1 555 867 5309")
    make_patient(name="Alice", email="ALICE@SMILE.COM")

    def search(term):
        response = client.get("/api/patients", params={"search": term}, headers=auth_headers)
        return [p["name"] for p in response.json()["data"]["patients"]]

    assert search("jane") == ["Jane Doe"]
    assert search("867") == ["John Smith"]
    assert search("smile") == ["Alice"]
    assert search("zzz") == []

    response = client.get("/api/patients", params={"search": "j"}, headers=auth_headers)
    assert response.json()["data"]["pagination"]["total"] == 2


def test_list_falls_back_to_default_paging(client, auth_headers, make_patient):
    for i in range(12):
        make_patient(name=f"Patient {i:02d}")

    def pagination(query):
        response = client.get(f"/api/patients?{query}", headers=auth_headers)
        assert response.status_code == 200
        return response.json()["data"]["pagination"]

    assert pagination("page=0")["page"] == 1
    assert pagination("page=abc")["page"] == 1
    assert pagination("page=-2")["page"] == 1
    assert pagination("limit=0")["limit"] == 10
    assert pagination("limit=abc")["limit"] == 10

    wide = client.get("/api/patients?limit=200", headers=auth_headers).json()["data"]
    assert wide["pagination"]["limit"] == 200
    assert len(wide["patients"]) == 12
