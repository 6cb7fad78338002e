"""Integration tests exercising API endpoints via FastAPI's TestClient."""

from __future__ import annotations

from fastapi.testclient import TestClient
from sqlalchemy.exc import DataError

from app.models import Message
from app.services import posts as posts_service


def test_follow_post_like_comment_scenario(client: TestClient, login):
    """Follow a user, like and comment on their post, and see live stats."""

    alice = login("alice")
    bob = login("bob")

    response = client.post(
        "/api/follows",
        json={"following_id": bob["user"]["id"], "action": "follow"},
        headers=alice["headers"],
    )
    assert response.status_code == 200, response.text
    assert response.json() == {
        "success": True,
        "data": {"following_id": bob["user"]["id"], "following": True, "followers_count": 1},
    }

    response = client.post(
        "/api/posts",
        json={"media_url": "media/beach.jpg", "caption": "beach day"},
        headers=bob["headers"],
    )
    assert response.status_code == 201, response.text
    post_id = response.json()["data"]["id"]

    response = client.post("/api/likes", json={"post_id": post_id}, headers=alice["headers"])
    assert response.json()["data"] == {"post_id": post_id, "liked": True, "like_count": 1}
    response = client.post("/api/likes", json={"post_id": post_id}, headers=alice["headers"])
    assert response.json()["data"]["like_count"] == 1

    response = client.post(
        "/api/comments",
        json={"post_id": post_id, "content": "  looks great  "},
        headers=alice["headers"],
    )
    assert response.status_code == 201, response.text
    comment = response.json()["data"]
    assert comment["content"] == "looks great"
    assert comment["author"]["handle"] == "alice"

    response = client.get(f"/api/posts/{post_id}", headers=alice["headers"])
    detail = response.json()["data"]
    assert detail["like_count"] == 1
    assert detail["comment_count"] == 1
    assert detail["is_liked"] is True
    assert detail["owner"]["handle"] == "bob"
    assert [item["id"] for item in detail["comments"]] == [comment["id"]]

    response = client.get(f"/api/users/{bob['user']['id']}", headers=alice["headers"])
    profile = response.json()["data"]
    assert profile["followers_count"] == 1
    assert profile["following_count"] == 0
    assert profile["posts_count"] == 1
    assert profile["is_following"] is True
    assert profile["is_self"] is False

    response = client.request(
        "DELETE", "/api/likes", json={"post_id": post_id}, headers=alice["headers"]
    )
    assert response.json()["data"] == {"post_id": post_id, "liked": False, "like_count": 0}

    response = client.post(
        "/api/follows",
        json={"following_id": bob["user"]["id"], "action": "unfollow"},
        headers=alice["headers"],
    )
    assert response.json()["data"]["followers_count"] == 0


def test_first_message_scenario(client: TestClient, login, session_factory):
    """Messaging a user for the first time opens the conversation lazily."""

    alice = login("alice")
    bob = login("bob")

    response = client.post(
        "/api/messages",
        json={"recipient_id": bob["user"]["id"], "content": "hey bob"},
        headers=alice["headers"],
    )
    assert response.status_code == 201, response.text
    sent = response.json()["data"]
    assert sent["is_from_me"] is True
    conversation_id = sent["conversation_id"]

    response = client.post(
        "/api/conversations",
        json={"other_user_id": alice["user"]["id"]},
        headers=bob["headers"],
    )
    assert response.json()["data"] == {"conversation_id": conversation_id, "is_new": False}

    response = client.get("/api/conversations", headers=bob["headers"])
    (summary,) = response.json()["data"]
    assert summary["unread_count"] == 1
    assert summary["other_user"]["handle"] == "alice"
    assert summary["last_message"]["content"] == "hey bob"

    response = client.get(
        "/api/messages", params={"conversation_id": conversation_id}, headers=bob["headers"]
    )
    history = response.json()["data"]
    assert [item["content"] for item in history] == ["hey bob"]
    assert history[0]["is_from_me"] is False
    assert history[0]["is_read"] is True

    response = client.get("/api/conversations", headers=bob["headers"])
    assert response.json()["data"][0]["unread_count"] == 0

    with session_factory() as session:
        stored = session.get(Message, sent["id"])
        assert stored is not None and stored.is_read is True


def test_outsider_cannot_read_or_post(client: TestClient, login):
    alice = login("alice")
    bob = login("bob")
    mallory = login("mallory")

    response = client.post(
        "/api/conversations",
        json={"other_user_id": bob["user"]["id"]},
        headers=alice["headers"],
    )
    conversation_id = response.json()["data"]["conversation_id"]

    response = client.post(
        "/api/messages",
        json={"conversation_id": conversation_id, "content": "sneaky"},
        headers=mallory["headers"],
    )
    assert response.status_code == 403
    assert response.json()["error"] == "You are not a participant in this conversation"

    response = client.get(
        "/api/messages", params={"conversation_id": conversation_id}, headers=mallory["headers"]
    )
    assert response.status_code == 403


def test_error_envelopes(client: TestClient, login):
    alice = login("alice")

    response = client.post(
        "/api/follows",
        json={"following_id": alice["user"]["id"]},
        headers=alice["headers"],
    )
    assert response.status_code == 400
    assert response.json() == {"error": "You cannot follow yourself", "details": None}

    response = client.get("/api/posts/12345", headers=alice["headers"])
    assert response.status_code == 404
    assert response.json()["details"] == {"post_id": 12345}

    response = client.post(
        "/api/messages",
        json={"content": "no target"},
        headers=alice["headers"],
    )
    assert response.status_code == 422
    body = response.json()
    assert body["error"] == "Invalid request"
    assert isinstance(body["details"], list)

    response = client.get("/api/nope", headers=alice["headers"])
    assert response.status_code == 404
    assert response.json() == {"error": "Not Found", "details": None}


def test_profile_update_enforces_unique_handle(client: TestClient, login):
    alice = login("alice")
    login("bob")

    response = client.patch(
        "/api/users/me",
        json={"handle": "bob"},
        headers=alice["headers"],
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Handle is already taken"

    response = client.patch(
        "/api/users/me",
        json={"handle": "  ally  ", "bio": "hello there"},
        headers=alice["headers"],
    )
    assert response.status_code == 200, response.text
    data = response.json()["data"]
    assert data["handle"] == "ally"
    assert data["bio"] == "hello there"


def test_saved_posts_and_feed(client: TestClient, login):
    alice = login("alice")
    bob = login("bob")
    post_id = client.post(
        "/api/posts", json={"media_url": "media/1.jpg"}, headers=bob["headers"]
    ).json()["data"]["id"]

    response = client.post("/api/saved-posts", json={"post_id": post_id}, headers=alice["headers"])
    assert response.json()["data"] == {"post_id": post_id, "saved": True}

    saved = client.get("/api/saved-posts", headers=alice["headers"]).json()["data"]
    assert [card["id"] for card in saved] == [post_id]
    assert saved[0]["is_saved"] is True

    feed = client.get("/api/posts", params={"limit": 5}, headers=alice["headers"]).json()["data"]
    assert [card["id"] for card in feed] == [post_id]

    own = client.get(f"/api/users/{bob['user']['id']}/posts", headers=alice["headers"]).json()
    assert [card["id"] for card in own["data"]] == [post_id]

    response = client.delete(f"/api/posts/{post_id}", headers=alice["headers"])
    assert response.status_code == 403
    response = client.delete(f"/api/posts/{post_id}", headers=bob["headers"])
    assert response.json() == {"success": True, "data": {"id": post_id, "deleted": True}}
    assert client.get("/api/saved-posts", headers=alice["headers"]).json()["data"] == []


def test_user_search(client: TestClient, login):
    alice = login("alice", name="Alice Liddell")
    login("alicia")
    login("bob", name="Robert Alison")
    login("carol")

    response = client.get("/api/users/search", params={"q": "ALI"}, headers=alice["headers"])
    assert response.status_code == 200, response.text
    handles = [user["handle"] for user in response.json()["data"]]
    assert handles == ["alicia", "bob"]

    response = client.get(
        "/api/users/search", params={"q": "ali", "limit": 1}, headers=alice["headers"]
    )
    assert [user["handle"] for user in response.json()["data"]] == ["alicia"]

    response = client.get("/api/users/search", headers=alice["headers"])
    assert response.json() == {"success": True, "data": []}

    assert client.get("/api/users/search", params={"q": "bob"}).status_code == 401


def test_over_long_fields_are_rejected(client: TestClient, login):
    alice = login("alice")

    response = client.patch(
        "/api/users/me", json={"display_name": "x" * 129}, headers=alice["headers"]
    )
    assert response.status_code == 400
    assert response.json()["details"] == {"max_length": 128, "length": 129}

    response = client.post(
        "/api/posts", json={"media_url": "m" * 1025}, headers=alice["headers"]
    )
    assert response.status_code == 400
    assert response.json()["details"]["max_length"] == 1024


def test_storage_data_errors_map_to_bad_request(client: TestClient, login, monkeypatch):
    alice = login("alice")

    def rejecting_create_post(*args, **kwargs):
        raise DataError("INSERT INTO posts", {}, Exception("Data too long for column"))

    monkeypatch.setattr(posts_service, "create_post", rejecting_create_post)

    response = client.post("/api/posts", json={"media_url": "media/a.jpg"}, headers=alice["headers"])

    assert response.status_code == 400
    assert response.json() == {"error": "A value does not fit its field", "details": None}
