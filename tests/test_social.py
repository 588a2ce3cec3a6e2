"""Follow graph, stats and profile tests."""

import pytest
from conftest import API, create_post, login
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from codelogs.api.dependencies import get_storage
from codelogs.main import app
from codelogs.models.follow import Follow
from codelogs.services.social_service import SocialGraphService
from codelogs.services.storage import UploadStorage


def test_follow_and_unfollow(alice, bob, db):
    response = bob.post(f"{API}/follow", json={"username": "alice"})
    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "You are now following alice.",
        "following": "alice",
    }
    assert db.query(Follow).count() == 1

    response = bob.request("DELETE", f"{API}/follow", json={"username": "alice"})
    assert response.status_code == 200
    assert response.json()["unfollowed"] == "alice"
    assert db.query(Follow).count() == 0


def test_follow_twice_conflicts(alice, bob, db):
    bob.post(f"{API}/follow", json={"username": "alice"})
    response = bob.post(f"{API}/follow", json={"username": "alice"})
    assert response.status_code == 409
    assert response.json()["message"] == "You are already following alice."
    assert db.query(Follow).count() == 1


def test_unfollow_without_follow(alice, bob):
    response = bob.request("DELETE", f"{API}/follow", json={"username": "alice"})
    assert response.status_code == 404
    assert response.json()["message"] == "You are not following alice."


def test_cannot_follow_self(alice, db):
    response = alice.post(f"{API}/follow", json={"username": "alice"})
    assert response.status_code == 400
    assert response.json()["message"] == "You cannot follow yourself."
    assert db.query(Follow).count() == 0


def test_follow_unknown_user(alice):
    response = alice.post(f"{API}/follow", json={"username": "ghost"})
    assert response.status_code == 404


def test_follow_requires_username(alice):
    response = alice.post(f"{API}/follow", json={})
    assert response.status_code == 400
    assert response.json()["message"] == "Username is required."


def test_follow_requires_login(alice, anonymous):
    response = anonymous.post(f"{API}/follow", json={"username": "alice"})
    assert response.status_code == 401


def test_followers_and_following_lists(alice, bob, register, make_client):
    register("carol")
    carol = make_client()
    login(carol, "carol")

    bob.post(f"{API}/follow", json={"username": "alice"})
    carol.post(f"{API}/follow", json={"username": "alice"})
    carol.post(f"{API}/follow", json={"username": "bob"})
    create_post(carol)

    data = alice.get(f"{API}/users/alice/followers").json()
    assert data["count"] == 2
    assert {u["username"] for u in data["followers"]} == {"bob", "carol"}
    carol_entry = next(u for u in data["followers"] if u["username"] == "carol")
    assert carol_entry["email"] == "carol@example.com"
    assert carol_entry["stats"] == {"posts": 1, "followers": 0, "following": 2}
    assert "password_hash" not in carol_entry

    data = alice.get(f"{API}/users/carol/following").json()
    assert data["count"] == 2
    assert {u["username"] for u in data["following"]} == {"alice", "bob"}

    assert alice.get(f"{API}/users/alice/following").json()["following"] == []


def test_lists_for_unknown_user(alice):
    assert alice.get(f"{API}/users/ghost/followers").status_code == 404
    assert alice.get(f"{API}/users/ghost/following").status_code == 404
    assert alice.get(f"{API}/users/ghost/stats").status_code == 404
    assert alice.get(f"{API}/users/ghost/profile").status_code == 404


def test_stats(alice, bob):
    create_post(alice)
    create_post(alice)
    bob.post(f"{API}/follow", json={"username": "alice"})

    response = bob.get(f"{API}/users/alice/stats")
    assert response.status_code == 200
    assert response.json()["stats"] == {"posts": 2, "followers": 1, "following": 0}

    assert bob.get(f"{API}/users/bob/stats").json()["stats"] == {
        "posts": 0,
        "followers": 0,
        "following": 1,
    }


def test_profile(alice, bob, anonymous):
    post_id = create_post(alice)["content_id"]
    bob.post(f"{API}/posts/{post_id}/like", json={"is_like": True})

    profile = bob.get(f"{API}/users/alice/profile").json()["profile"]
    assert profile["username"] == "alice"
    assert profile["email"] == "alice@example.com"
    assert profile["stats"] == {"posts": 1, "followers": 0, "following": 0, "likes": 1}
    assert profile["is_following"] is False
    assert "password_hash" not in profile

    bob.post(f"{API}/follow", json={"username": "alice"})
    assert bob.get(f"{API}/users/alice/profile").json()["profile"]["is_following"] is True

    # Anonymous viewers and the owner never "follow" the profile
    assert anonymous.get(f"{API}/users/alice/profile").json()["profile"]["is_following"] is False
    assert alice.get(f"{API}/users/alice/profile").json()["profile"]["is_following"] is False


def test_is_following_service(alice, bob, db):
    bob.post(f"{API}/follow", json={"username": "alice"})
    social = SocialGraphService(db)

    assert social.is_following("bob", "alice") is True
    assert social.is_following("alice", "bob") is False
    assert social.is_following(None, "alice") is False
    assert social.is_following("alice", "alice") is False


def test_profile_picture_upload(alice, anonymous):
    response = alice.post(
        f"{API}/upload/profile-picture",
        files={"profile_picture": ("me.png", b"\x89PNG fake", "image/png")},
    )
    assert response.status_code == 200
    url = response.json()["profile_picture_url"]
    assert url.startswith("/assets/uploads/")

    profile = anonymous.get(f"{API}/users/alice/profile").json()["profile"]
    assert profile["profile_picture"] == url
    assert anonymous.get(url).content == b"\x89PNG fake"


def test_profile_picture_must_be_image(alice):
    response = alice.post(
        f"{API}/upload/profile-picture",
        files={"profile_picture": ("notes.txt", b"hello", "text/plain")},
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Only image files are allowed."

    response = alice.post(
        f"{API}/upload/profile-picture",
        files={"profile_picture": ("doc.pdf", b"%PDF", "image/png")},
    )
    assert response.status_code == 400


def test_profile_picture_requires_login(anonymous):
    response = anonymous.post(
        f"{API}/upload/profile-picture",
        files={"profile_picture": ("me.png", b"png", "image/png")},
    )
    assert response.status_code == 401


def test_follow_race_is_conflict(alice, bob, db, monkeypatch):
    """A duplicate edge that slips past the lookup is caught by the unique constraint."""
    assert bob.post(f"{API}/follow", json={"username": "alice"}).status_code == 200
    monkeypatch.setattr(SocialGraphService, "is_following", lambda self, *args: False)

    response = bob.post(f"{API}/follow", json={"username": "alice"})
    assert response.status_code == 409
    assert response.json()["message"] == "You are already following alice."
    assert db.query(Follow).count() == 1


def test_follower_stats_fall_back_to_zeros(alice, bob, monkeypatch):
    """A failing count leaves zeros in the list instead of failing the request."""
    create_post(bob)
    bob.post(f"{API}/follow", json={"username": "alice"})

    def broken_count(self, username):
        raise SQLAlchemyError("stats unavailable")

    monkeypatch.setattr(SocialGraphService, "_count", broken_count)

    response = alice.get(f"{API}/users/alice/followers")
    assert response.status_code == 200
    data = response.json()
    assert data["count"] == 1
    assert data["followers"][0]["username"] == "bob"
    assert data["followers"][0]["stats"] == {"posts": 0, "followers": 0, "following": 0}


def test_profile_picture_replaces_previous_file(alice, tmp_path):
    """Uploading a new picture removes the old file from disk."""
    app.dependency_overrides[get_storage] = lambda: UploadStorage(
        tmp_path, "/assets/uploads", max_bytes=1024
    )

    first = alice.post(
        f"{API}/upload/profile-picture",
        files={"profile_picture": ("one.png", b"first", "image/png")},
    ).json()["profile_picture_url"]
    second = alice.post(
        f"{API}/upload/profile-picture",
        files={"profile_picture": ("two.png", b"second", "image/png")},
    ).json()["profile_picture_url"]

    assert first != second
    assert [p.name for p in tmp_path.iterdir()] == [second.rsplit("/", 1)[1]]


def test_profile_picture_removed_when_save_fails(alice, db, tmp_path, monkeypatch):
    """A failed commit leaves no orphaned upload behind."""
    app.dependency_overrides[get_storage] = lambda: UploadStorage(
        tmp_path, "/assets/uploads", max_bytes=1024
    )

    def failing_commit():
        raise OperationalError("UPDATE users", {}, Exception("database is locked"))

    monkeypatch.setattr(db, "commit", failing_commit)

    with pytest.raises(OperationalError):
        alice.post(
            f"{API}/upload/profile-picture",
            files={"profile_picture": ("me.png", b"png", "image/png")},
        )
    assert list(tmp_path.iterdir()) == []
