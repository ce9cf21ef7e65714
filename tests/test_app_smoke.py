from __future__ import annotations

from fastapi.testclient import TestClient


def test_app_smoke_routes(reload_endpoints, sandbox_project):
    import app as app_module

    client = TestClient(app_module.create_app())

    # create_app seeds an empty contacts file
    assert (sandbox_project / "data" / "contacts.json").exists()

    r = client.get("/api/contacts")
    assert r.status_code == 200
    assert r.json() == []

    r = client.get("/api/nope")
    assert r.status_code == 404
    assert "message" in r.json()


def test_storage_errors_become_500(reload_endpoints, sandbox_project):
    import app as app_module

    client = TestClient(app_module.create_app(), raise_server_exceptions=False)
    (sandbox_project / "data" / "contacts.json").write_text("{not json", encoding="utf-8")

    r = client.get("/api/contacts")
    assert r.status_code == 500
    assert r.json() == {"message": "Storage error"}
