# tests/e2e/test_notes_flow.py
"""
End-to-end: Alice builds a database over the API, Bob (no access) tries
to destroy it, then Alice shares it with Bob and finally deletes it.
"""
from knowledge_manager.databases.models import UserDatabaseRel
from knowledge_manager.post.models import Post
from knowledge_manager.tag.models import PostTagRel, Tag, TagDatabaseRel


def _snapshot():
    return (
        Post.query.count(),
        PostTagRel.query.count(),
        TagDatabaseRel.query.count(),
        UserDatabaseRel.query.count(),
    )


def _register(client, name, email):
    resp = client.post("/users/register", json={"name": name, "email": email, "password": "password123"})
    assert resp.status_code == 200
    data = resp.get_json()
    return data["user_id"], {"Authorization": f"Bearer {data['access_token']}"}


def test_notes_flow(client):
    _, alice = _register(client, "alice", "alice@example.com")
    _, bob = _register(client, "bob", "bob@example.com")

    # ---- Alice creates "Notes" and a tagged post
    r = client.post("/databases/", json={"name": "Notes"}, headers=alice)
    database_id = r.get_json()["id"]
    r = client.post(
        "/posts/",
        json={"title": "Hello", "content": "World", "tags": "foo bar", "database_id": database_id},
        headers=alice,
    )
    assert r.status_code == 201
    post_id = r.get_json()["id"]

    assert {t.title for t in Tag.query.all()} == {"Foo", "Bar"}
    assert PostTagRel.query.filter_by(post_id=post_id).count() == 2
    assert TagDatabaseRel.query.filter_by(database_id=database_id).count() == 2

    # ---- Bob has no relation: every destructive call is refused
    before = _snapshot()
    assert client.delete(f"/posts/{post_id}", headers=bob).status_code == 403
    assert client.delete(f"/databases/{database_id}", headers=bob).status_code == 403
    assert _snapshot() == before

    # ---- Shared as viewer, Bob can read but still not delete
    r = client.post(f"/databases/{database_id}/viewers", json={"email": "bob@example.com"}, headers=alice)
    assert r.status_code == 201
    assert client.get(f"/posts/{post_id}", headers=bob).status_code == 200
    assert client.delete(f"/posts/{post_id}", headers=bob).status_code == 403

    # ---- Alice deletes the database; nothing referencing it is left
    assert client.delete(f"/databases/{database_id}", headers=alice).status_code == 200
    assert Post.query.filter_by(database_id=database_id).count() == 0
    assert PostTagRel.query.count() == 0
    assert TagDatabaseRel.query.filter_by(database_id=database_id).count() == 0
    assert UserDatabaseRel.query.filter_by(database_id=database_id).count() == 0
    assert client.get("/databases/", headers=bob).get_json() == []
