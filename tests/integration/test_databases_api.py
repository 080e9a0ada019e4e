from knowledge_manager.databases.models import Database


def test_create_and_list_databases(client, auth_header_app, users_two):
    u1, _ = users_two
    r = client.post("/databases/", json={"name": "Notes"}, headers=auth_header_app(u1.id))
    assert r.status_code == 201
    database_id = r.get_json()["id"]

    r = client.get("/databases/", headers=auth_header_app(u1.id))
    assert r.status_code == 200
    arr = r.get_json()
    assert [(d["id"], d["name"], d["permission_type"]) for d in arr] == [(database_id, "Notes", "owner")]
    assert arr[0]["posts"] == []


def test_create_database_requires_name(client, auth_header_app, users_two):
    u1, _ = users_two
    r = client.post("/databases/", json={"name": "   "}, headers=auth_header_app(u1.id))
    assert r.status_code == 400
    assert "name" in r.get_json()["errors"]


def test_requires_jwt(client):
    assert client.get("/databases/").status_code == 401


def test_viewer_management_flow(client, auth_header_app, seed_notes):
    u1, u2, database_id = seed_notes["u1"], seed_notes["u2"], seed_notes["database_id"]

    r = client.post(f"/databases/{database_id}/viewers", json={"email": u2.email}, headers=auth_header_app(u1.id))
    assert r.status_code == 201
    assert r.get_json()["email"] == u2.email
    assert "password_digest" not in r.get_json()

    r = client.post(f"/databases/{database_id}/viewers", json={"email": u2.email}, headers=auth_header_app(u1.id))
    assert r.status_code == 409
    assert "email" in r.get_json()["errors"]

    r = client.get("/databases/owned", headers=auth_header_app(u1.id))
    assert r.get_json()[0]["viewers"] == [{"user_id": u2.id, "email": u2.email, "permission_type": "viewer"}]

    r = client.get("/databases/", headers=auth_header_app(u2.id))
    assert r.get_json()[0]["permission_type"] == "viewer"

    r = client.delete(f"/databases/{database_id}/viewers/{u2.id}", headers=auth_header_app(u1.id))
    assert r.status_code == 200
    assert client.get("/databases/", headers=auth_header_app(u2.id)).get_json() == []


def test_add_viewer_unknown_email(client, auth_header_app, seed_notes):
    r = client.post(
        f"/databases/{seed_notes['database_id']}/viewers",
        json={"email": "ghost@example.com"},
        headers=auth_header_app(seed_notes["u1"].id),
    )
    assert r.status_code == 404
    assert "email" in r.get_json()["errors"]


def test_add_viewer_by_non_owner(client, auth_header_app, seed_notes):
    r = client.post(
        f"/databases/{seed_notes['database_id']}/viewers",
        json={"email": "alice@example.com"},
        headers=auth_header_app(seed_notes["u2"].id),
    )
    assert r.status_code == 403
    assert "general" in r.get_json()["errors"]


def test_delete_database(client, auth_header_app, seed_notes):
    database_id = seed_notes["database_id"]
    r = client.delete(f"/databases/{database_id}", headers=auth_header_app(seed_notes["u2"].id))
    assert r.status_code == 403
    assert Database.query.get(database_id) is not None

    r = client.delete(f"/databases/{database_id}", headers=auth_header_app(seed_notes["u1"].id))
    assert r.status_code == 200
    assert client.get("/databases/", headers=auth_header_app(seed_notes["u1"].id)).get_json() == []


def test_create_database_rejects_overlong_name(client, auth_header_app, users_two):
    u1, _ = users_two
    r = client.post("/databases/", json={"name": "n" * 256}, headers=auth_header_app(u1.id))
    assert r.status_code == 400
    assert "name" in r.get_json()["errors"]
    assert Database.query.count() == 0
