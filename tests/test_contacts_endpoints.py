from __future__ import annotations

import json

ANN = {"name": "Ann", "email": "ann@x.com", "phone": "123"}


def test_create_list_get_contact(client, sandbox_project):
    r = client.post("/api/contacts", json=ANN)
    assert r.status_code == 201
    created = r.json()
    assert {k: created[k] for k in ANN} == ANN
    assert len(created["id"]) == 20
    assert all(ch in "0123456789abcdef" for ch in created["id"])

    r = client.get("/api/contacts")
    assert r.status_code == 200
    assert r.json() == [created]

    r = client.get(f"/api/contacts/{created['id']}")
    assert r.status_code == 200
    assert r.json() == created

    on_disk = json.loads((sandbox_project / "data" / "contacts.json").read_text(encoding="utf-8"))
    assert on_disk == [created]


def test_get_unknown_contact_is_404(client):
    r = client.get("/api/contacts/does-not-exist")
    assert r.status_code == 404
    assert r.json() == {"message": "Not found"}


def test_create_contact_validation(client):
    r = client.post("/api/contacts", json={"name": "Ann", "phone": "123"})
    assert r.status_code == 400
    assert "email" in r.json()["message"]

    r = client.post("/api/contacts", json={**ANN, "email": "not-an-email"})
    assert r.status_code == 400

    r = client.post("/api/contacts", json={"name": "", "email": "ann@x.com", "phone": "  "})
    assert r.status_code == 400
    assert "name" in r.json()["message"]

    assert client.get("/api/contacts").json() == []


def test_update_contact(client):
    cid = client.post("/api/contacts", json=ANN).json()["id"]

    r = client.put(f"/api/contacts/{cid}", json={**ANN, "phone": "999"})
    assert r.status_code == 200
    assert r.json() == {"id": cid, **ANN, "phone": "999"}

    r = client.put("/api/contacts/unknown", json=ANN)
    assert r.status_code == 404
    assert r.json() == {"message": "not found"}


def test_update_contact_requires_every_field(client):
    cid = client.post("/api/contacts", json=ANN).json()["id"]

    for body in ({"phone": "999"}, {}, {**ANN, "nickname": "A"}, {**ANN, "name": ""}, [1, 2]):
        r = client.put(f"/api/contacts/{cid}", json=body)
        assert r.status_code == 400, body
        assert r.json() == {"message": "missing fields"}

    r = client.put(f"/api/contacts/{cid}", content=b"")
    assert r.status_code == 400
    assert r.json() == {"message": "missing fields"}

    assert client.get(f"/api/contacts/{cid}").json() == {"id": cid, **ANN}


def test_delete_contact(client):
    cid = client.post("/api/contacts", json=ANN).json()["id"]

    r = client.delete(f"/api/contacts/{cid}")
    assert r.status_code == 200
    assert r.json() == {"message": "Contact deleted"}

    r = client.delete(f"/api/contacts/{cid}")
    assert r.status_code == 404
    assert client.get("/api/contacts").json() == []


def test_create_contact_rejects_missing_or_non_object_body(client):
    r = client.post("/api/contacts", content=b"")
    assert r.status_code == 400
    assert "message" in r.json()

    r = client.post("/api/contacts", json=[1, 2])
    assert r.status_code == 400
    assert "message" in r.json()

    r = client.post("/api/contacts", content=b"{not json", headers={"Content-Type": "application/json"})
    assert r.status_code == 400
    assert "message" in r.json()

    assert client.get("/api/contacts").json() == []
