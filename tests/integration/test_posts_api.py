"""Integration tests for posts, likes, comments and reposts."""

import pytest

from tests.integration.test_app import bearer


@pytest.fixture
def alice(register):
    return register("alice")


@pytest.fixture
def bob(register):
    return register("bob")


@pytest.fixture
def post(client, alice):
    response = client.post(
        "/api/v1/posts", json={"content": "First post"}, headers=bearer(alice["accessToken"])
    )
    assert response.status_code == 201
    return response.json()["data"]["post"]


class TestPosts:
    def test_create_post(self, post, alice):
        assert post["authorId"] == alice["user"]["id"]
        assert post["author"]["username"] == "alice"
        assert post["likeCount"] == 0
        assert post["originalPostId"] is None

    def test_create_post_validation(self, client, alice):
        too_long = client.post(
            "/api/v1/posts", json={"content": "x" * 501}, headers=bearer(alice["accessToken"])
        )
        blank = client.post(
            "/api/v1/posts", json={"content": "   "}, headers=bearer(alice["accessToken"])
        )

        assert too_long.status_code == 400
        assert blank.status_code == 400
        assert blank.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_get_post(self, client, post):
        response = client.get(f"/api/v1/posts/{post['id']}")

        assert response.status_code == 200
        assert response.json()["data"]["post"]["content"] == "First post"

    def test_get_missing_post(self, client):
        response = client.get("/api/v1/posts/12345")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "POST_NOT_FOUND"

    def test_delete_by_other_account_forbidden(self, client, post, bob):
        response = client.delete(f"/api/v1/posts/{post['id']}", headers=bearer(bob["accessToken"]))

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "FORBIDDEN"

    def test_delete_by_author(self, client, post, alice, bob):
        client.post(f"/api/v1/posts/{post['id']}/like", headers=bearer(bob["accessToken"]))
        client.post(
            f"/api/v1/posts/{post['id']}/comment",
            json={"content": "Nice"},
            headers=bearer(bob["accessToken"]),
        )

        response = client.delete(
            f"/api/v1/posts/{post['id']}", headers=bearer(alice["accessToken"])
        )

        assert response.status_code == 200
        assert client.get(f"/api/v1/posts/{post['id']}").status_code == 404
        notifications = client.get("/api/v1/notifications", headers=bearer(alice["accessToken"]))
        assert notifications.json()["data"]["notifications"] == []


class TestEngagement:
    def test_like_and_unlike(self, client, post, bob):
        url = f"/api/v1/posts/{post['id']}/like"

        liked = client.post(url, headers=bearer(bob["accessToken"]))
        assert liked.status_code == 200
        assert liked.json()["data"]["post"]["likeCount"] == 1

        again = client.post(url, headers=bearer(bob["accessToken"]))
        assert again.status_code == 409
        assert again.json()["error"]["code"] == "ALREADY_LIKED"

        unliked = client.delete(url, headers=bearer(bob["accessToken"]))
        assert unliked.status_code == 200
        assert unliked.json()["data"]["post"]["likeCount"] == 0

        not_liked = client.delete(url, headers=bearer(bob["accessToken"]))
        assert not_liked.status_code == 400
        assert not_liked.json()["error"]["code"] == "NOT_LIKED"

    def test_like_notifies_author(self, client, post, alice, bob):
        client.post(f"/api/v1/posts/{post['id']}/like", headers=bearer(bob["accessToken"]))

        data = client.get(
            "/api/v1/notifications", headers=bearer(alice["accessToken"])
        ).json()["data"]

        assert data["unreadCount"] == 1
        assert data["notifications"][0]["type"] == "like"
        assert data["notifications"][0]["postId"] == post["id"]

    def test_own_like_does_not_notify(self, client, post, alice):
        client.post(f"/api/v1/posts/{post['id']}/like", headers=bearer(alice["accessToken"]))

        data = client.get(
            "/api/v1/notifications", headers=bearer(alice["accessToken"])
        ).json()["data"]

        assert data["notifications"] == []
        assert data["unreadCount"] == 0

    def test_comments(self, client, post, alice, bob):
        url = f"/api/v1/posts/{post['id']}/comment"
        first = client.post(url, json={"content": "First!"}, headers=bearer(bob["accessToken"]))
        second = client.post(url, json={"content": "Second"}, headers=bearer(alice["accessToken"]))

        assert first.status_code == 201
        assert second.status_code == 201
        assert first.json()["data"]["comment"]["author"]["username"] == "bob"

        listing = client.get(f"/api/v1/posts/{post['id']}/comments?limit=1")
        data = listing.json()["data"]
        assert [comment["content"] for comment in data["comments"]] == ["Second"]
        assert data["pagination"] == {"page": 1, "limit": 1, "total": 2, "pages": 2}

        refreshed = client.get(f"/api/v1/posts/{post['id']}").json()["data"]["post"]
        assert refreshed["commentCount"] == 2

        notifications = client.get(
            "/api/v1/notifications", headers=bearer(alice["accessToken"])
        ).json()["data"]["notifications"]
        assert [n["type"] for n in notifications] == ["comment"]
        assert notifications[0]["commentId"] == first.json()["data"]["comment"]["id"]

    def test_comment_too_long(self, client, post, bob):
        response = client.post(
            f"/api/v1/posts/{post['id']}/comment",
            json={"content": "x" * 281},
            headers=bearer(bob["accessToken"]),
        )

        assert response.status_code == 400

    def test_repost(self, client, post, bob):
        url = f"/api/v1/posts/{post['id']}/repost"

        response = client.post(url, headers=bearer(bob["accessToken"]))
        assert response.status_code == 201
        repost = response.json()["data"]["post"]
        assert repost["originalPostId"] == post["id"]
        assert repost["content"] == post["content"]
        assert repost["authorId"] == bob["user"]["id"]

        original = client.get(f"/api/v1/posts/{post['id']}").json()["data"]["post"]
        assert original["repostCount"] == 1

        again = client.post(url, headers=bearer(bob["accessToken"]))
        assert again.status_code == 409
        assert again.json()["error"]["code"] == "ALREADY_REPOSTED"

    def test_list_and_mark_notifications_read(self, client, post, alice, bob):
        client.post(f"/api/v1/posts/{post['id']}/like", headers=bearer(bob["accessToken"]))
        client.post(f"/api/v1/posts/{post['id']}/repost", headers=bearer(bob["accessToken"]))

        before = client.get("/api/v1/notifications", headers=bearer(alice["accessToken"]))
        assert before.json()["data"]["unreadCount"] == 2
        assert [n["type"] for n in before.json()["data"]["notifications"]] == ["repost", "like"]

        marked = client.put("/api/v1/notifications/read", headers=bearer(alice["accessToken"]))
        assert marked.status_code == 200

        after = client.get("/api/v1/notifications", headers=bearer(alice["accessToken"]))
        assert after.json()["data"]["unreadCount"] == 0
        assert all(n["read"] for n in after.json()["data"]["notifications"])


def write_post(client, account, content):
    response = client.post(
        "/api/v1/posts", json={"content": content}, headers=bearer(account["accessToken"])
    )
    assert response.status_code == 201
    return response.json()["data"]["post"]


class TestListings:
    def test_user_posts_newest_first(self, client, alice, bob):
        first = write_post(client, alice, "one")
        second = write_post(client, alice, "two")
        write_post(client, bob, "not alice")

        response = client.get(f"/api/v1/posts/user/{alice['user']['id']}")

        assert response.status_code == 200
        data = response.json()["data"]
        assert [p["id"] for p in data["posts"]] == [second["id"], first["id"]]
        assert data["pagination"]["total"] == 2

    def test_global_feed_pages(self, client, alice, bob):
        ids = [write_post(client, author, "post")["id"] for author in (alice, bob, alice)]

        response = client.get("/api/v1/posts/feed/global", params={"page": 2, "limit": 2})

        data = response.json()["data"]
        assert [p["id"] for p in data["posts"]] == [ids[0]]
        assert data["pagination"] == {"page": 2, "limit": 2, "total": 3, "pages": 2}

    def test_following_feed_only_followed_authors(self, client, alice, bob, register):
        carol = register("carol")
        followed = write_post(client, alice, "from alice")
        write_post(client, carol, "from carol")
        client.post(f"/api/v1/users/{alice['user']['id']}/follow", headers=bearer(bob["accessToken"]))

        response = client.get("/api/v1/posts/feed/following", headers=bearer(bob["accessToken"]))

        assert response.status_code == 200
        assert [p["id"] for p in response.json()["data"]["posts"]] == [followed["id"]]

    def test_following_feed_requires_token(self, client):
        assert client.get("/api/v1/posts/feed/following").status_code == 401


class TestBookmarks:
    def test_bookmark_and_list(self, client, post, bob):
        response = client.post(
            f"/api/v1/posts/{post['id']}/bookmark", headers=bearer(bob["accessToken"])
        )
        duplicate = client.post(
            f"/api/v1/posts/{post['id']}/bookmark", headers=bearer(bob["accessToken"])
        )

        assert response.status_code == 201
        assert response.json()["message"] == "Post bookmarked successfully"
        assert duplicate.status_code == 409
        assert duplicate.json()["error"]["code"] == "ALREADY_BOOKMARKED"

        listed = client.get("/api/v1/posts/bookmarks/me", headers=bearer(bob["accessToken"]))
        data = listed.json()["data"]
        assert [p["id"] for p in data["bookmarks"]] == [post["id"]]
        assert data["pagination"]["total"] == 1

    def test_bookmark_does_not_notify_author(self, client, post, alice, bob):
        client.post(f"/api/v1/posts/{post['id']}/bookmark", headers=bearer(bob["accessToken"]))

        response = client.get("/api/v1/notifications", headers=bearer(alice["accessToken"]))

        assert response.json()["data"]["notifications"] == []

    def test_bookmark_missing_post(self, client, bob):
        response = client.post("/api/v1/posts/9999/bookmark", headers=bearer(bob["accessToken"]))

        assert response.status_code == 404

    def test_remove_bookmark(self, client, post, bob):
        client.post(f"/api/v1/posts/{post['id']}/bookmark", headers=bearer(bob["accessToken"]))

        removed = client.delete(
            f"/api/v1/posts/{post['id']}/bookmark", headers=bearer(bob["accessToken"])
        )
        again = client.delete(
            f"/api/v1/posts/{post['id']}/bookmark", headers=bearer(bob["accessToken"])
        )

        assert removed.status_code == 200
        assert again.status_code == 404
        assert again.json()["error"]["code"] == "BOOKMARK_NOT_FOUND"
        listed = client.get("/api/v1/posts/bookmarks/me", headers=bearer(bob["accessToken"]))
        assert listed.json()["data"]["bookmarks"] == []
