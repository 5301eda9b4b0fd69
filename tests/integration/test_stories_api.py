"""Integration tests for ephemeral stories."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import update

from socialhub.core.services.stories.models import StoryModel
from socialhub.infrastructure.database.repositories.story_repository import SqlStoryRepository
from tests.integration.test_app import bearer

IMAGE = "https://img.example.com/sunrise.jpg"


@pytest.fixture
def alice(register):
    return register("alice")


@pytest.fixture
def bob(register):
    return register("bob")


@pytest.fixture
def story(client, alice):
    response = client.post(
        "/api/v1/stories", json={"image": IMAGE}, headers=bearer(alice["accessToken"])
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]["story"]


@pytest.fixture
def expire_story(run_db):
    def _expire(story_id: int) -> None:
        async def operation(session):
            await session.execute(
                update(StoryModel)
                .where(StoryModel.id == story_id)
                .values(expires_at=datetime.now(timezone.utc) - timedelta(minutes=1))
            )

        run_db(operation)

    return _expire


def list_stories(client, account):
    response = client.get("/api/v1/stories", headers=bearer(account["accessToken"]))
    assert response.status_code == 200
    return response.json()["data"]["stories"]


def follow(client, follower, followed):
    response = client.post(
        f"/api/v1/users/{followed['user']['id']}/follow",
        headers=bearer(follower["accessToken"]),
    )
    assert response.status_code == 200, response.text


class TestCreateStory:
    def test_create_story(self, story, alice):
        assert story["authorId"] == alice["user"]["id"]
        assert story["image"] == IMAGE
        assert story["author"]["username"] == "alice"
        assert story["isViewed"] is False
        assert story["expiresAt"] > story["createdAt"]

    def test_requires_access_token(self, client):
        response = client.post("/api/v1/stories", json={"image": IMAGE})

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "NO_TOKEN"

    @pytest.mark.parametrize("image", ["", "not-a-url", "ftp://img.example.com/a.jpg"])
    def test_rejects_invalid_image(self, client, alice, image):
        response = client.post(
            "/api/v1/stories", json={"image": image}, headers=bearer(alice["accessToken"])
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"


class TestListStories:
    def test_author_sees_own_story(self, client, story, alice):
        groups = list_stories(client, alice)

        assert len(groups) == 1
        assert groups[0]["author"]["username"] == "alice"
        assert [s["id"] for s in groups[0]["stories"]] == [story["id"]]

    def test_only_followers_see_story(self, client, story, alice, bob, register):
        carol = register("carol")
        follow(client, bob, alice)

        assert [g["author"]["username"] for g in list_stories(client, bob)] == ["alice"]
        assert list_stories(client, carol) == []

    def test_view_marks_story_seen_for_viewer_only(self, client, story, alice, bob):
        follow(client, bob, alice)
        assert list_stories(client, bob)[0]["allViewed"] is False

        response = client.post(
            f"/api/v1/stories/{story['id']}/view", headers=bearer(bob["accessToken"])
        )
        again = client.post(
            f"/api/v1/stories/{story['id']}/view", headers=bearer(bob["accessToken"])
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Story marked as viewed"
        assert again.status_code == 200

        group = list_stories(client, bob)[0]
        assert group["allViewed"] is True
        assert group["stories"][0]["isViewed"] is True
        assert list_stories(client, alice)[0]["stories"][0]["isViewed"] is False

    def test_expired_story_is_hidden(self, client, story, alice, expire_story):
        expire_story(story["id"])

        assert list_stories(client, alice) == []
        response = client.post(
            f"/api/v1/stories/{story['id']}/view", headers=bearer(alice["accessToken"])
        )
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "STORY_NOT_FOUND"


class TestDeleteStory:
    def test_delete_by_other_account_forbidden(self, client, story, bob):
        response = client.delete(
            f"/api/v1/stories/{story['id']}", headers=bearer(bob["accessToken"])
        )

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "FORBIDDEN"

    def test_delete_by_author(self, client, story, alice):
        response = client.delete(
            f"/api/v1/stories/{story['id']}", headers=bearer(alice["accessToken"])
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Story deleted successfully"
        assert list_stories(client, alice) == []

    def test_delete_missing_story(self, client, alice):
        response = client.delete("/api/v1/stories/4242", headers=bearer(alice["accessToken"]))

        assert response.status_code == 404


class TestExpiredStoryCleanup:
    def test_removes_only_expired_stories(self, client, story, alice, run_db, expire_story):
        fresh = client.post(
            "/api/v1/stories", json={"image": IMAGE}, headers=bearer(alice["accessToken"])
        ).json()["data"]["story"]
        client.post(f"/api/v1/stories/{story['id']}/view", headers=bearer(alice["accessToken"]))
        expire_story(story["id"])

        deleted = run_db(
            lambda session: SqlStoryRepository(session).delete_expired(datetime.now(timezone.utc))
        )

        assert deleted == 1
        assert [s["id"] for s in list_stories(client, alice)[0]["stories"]] == [fresh["id"]]
