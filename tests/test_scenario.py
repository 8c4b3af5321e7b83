"""
tests/test_scenario.py -- End-to-end walk through the publishing flow.

Runs on its own module-scoped database so GET /posts can be compared against
the exact set of posts created here.

  register alice -> login -> create post -> public listing shows
  author {username, name} -> bob cannot delete (403) -> alice deletes (200)
  -> listing no longer contains the post
"""

from __future__ import annotations

from fastapi.testclient import TestClient


def _auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def _login(client: TestClient, username: str, password: str) -> str:
    resp = client.post("/auth/login", json={"username": username, "password": password})
    assert resp.status_code == 200, resp.text
    client.cookies.clear()
    return resp.json()["access_token"]


def test_publish_and_delete_flow(api_client: TestClient) -> None:
    client = api_client

    resp = client.post(
        "/auth/register", json={"username": "alice", "name": "Alice", "email": "a@x.com", "password": "pw1"}
    )
    assert resp.status_code == 201
    resp = client.post("/auth/register", json={"username": "bob", "name": "Bob", "password": "pw2"})
    assert resp.status_code == 201

    alice_token = _login(client, "alice", "pw1")
    bob_token = _login(client, "bob", "pw2")
    alice_id = client.get("/auth/me", headers=_auth(alice_token)).json()["id"]

    resp = client.post("/posts", json={"title": "T", "content": "C"}, headers=_auth(alice_token))
    assert resp.status_code == 201
    post = resp.json()["post"]
    assert post["author_id"] == alice_id

    listing = client.get("/posts").json()["posts"]
    assert [p["id"] for p in listing] == [post["id"]]
    assert listing[0]["author"] == {"id": alice_id, "username": "alice", "name": "Alice"}
    assert "password" not in str(listing)
    assert "a@x.com" not in str(listing)

    resp = client.delete(f"/posts/{post['id']}", headers=_auth(bob_token))
    assert resp.status_code == 403

    resp = client.delete(f"/posts/{post['id']}", headers=_auth(alice_token))
    assert resp.status_code == 200

    assert client.get("/posts").json()["posts"] == []


def test_concurrent_style_duplicate_registration(api_client: TestClient) -> None:
    """Two registrations for one username: exactly one 201, the other 400."""
    body = {"username": "carol", "name": "Carol", "password": "pw"}
    statuses = sorted(api_client.post("/auth/register", json=body).status_code for _ in range(2))
    assert statuses == [201, 400]
