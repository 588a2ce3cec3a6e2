"""Application-level tests: health, error envelope and an end-to-end walkthrough."""

from conftest import API, PASSWORD, login, user_payload


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_unknown_route_uses_envelope(client):
    response = client.get(f"{API}/nope")
    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Not Found"}


def test_routes_live_under_namespace(client):
    assert client.get("/contents").status_code == 404
    assert client.get(f"{API}/contents").status_code == 200


def test_malformed_json_is_bad_request(client):
    response = client.post(
        f"{API}/users", content="{not json", headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 400
    assert response.json()["success"] is False


def test_end_to_end(client, make_client):
    """Register, post, search, follow and read the feed across two users."""
    response = client.post(
        f"{API}/users", json=user_payload("alice", email="alice@x.com", dob="2000-01-01")
    )
    assert response.status_code == 201

    response = client.post(
        f"{API}/users", json=user_payload("alice", email="other@x.com", dob="2000-01-01")
    )
    assert response.status_code == 409
    assert response.json()["success"] is False

    response = login(client, "alice", PASSWORD)
    assert response.status_code == 200
    assert response.json()["success"] is True

    response = client.post(
        f"{API}/contents", data={"title": "Hi", "code": "print(1)", "language": "python"}
    )
    assert response.status_code == 201
    post_id = response.json()["content_id"]

    response = client.get(f"{API}/contents", params={"q": "python"})
    assert response.status_code == 200
    assert [p["id"] for p in response.json()["contents"]] == [post_id]

    client.post(f"{API}/users", json=user_payload("bob"))
    bob = make_client()
    assert login(bob, "bob").status_code == 200

    assert bob.post(f"{API}/follow", json={"username": "alice"}).status_code == 200
    assert bob.post(f"{API}/follow", json={"username": "alice"}).status_code == 409

    feed = bob.get(f"{API}/feed").json()
    assert feed["success"] is True
    assert [p["title"] for p in feed["contents"]] == ["Hi"]
