"""Integration tests for the access, optional and admin gates."""

from datetime import datetime, timedelta, timezone

from jose import jwt

from socialhub.settings import get_settings
from tests.integration.test_app import bearer


class TestAccessGate:
    """The bearer access token gate."""

    def test_missing_header(self, client):
        response = client.get("/api/v1/auth/me")

        assert response.status_code == 401
        assert response.json() == {
            "success": False,
            "error": {"message": "Access token is required", "code": "NO_TOKEN"},
        }

    def test_non_bearer_scheme(self, client, register):
        data = register("alice")

        response = client.get(
            "/api/v1/auth/me", headers={"Authorization": f"Basic {data['accessToken']}"}
        )

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "NO_TOKEN"

    def test_garbage_token(self, client):
        response = client.get("/api/v1/auth/me", headers=bearer("garbage"))

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "INVALID_TOKEN"

    def test_refresh_token_is_not_an_access_token(self, client, register):
        data = register("alice")

        response = client.get("/api/v1/auth/me", headers=bearer(data["refreshToken"]))

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "INVALID_TOKEN"

    def test_expired_access_token(self, client, register):
        data = register("alice")
        settings = get_settings()
        issued = datetime.now(timezone.utc) - timedelta(hours=1)
        expired = jwt.encode(
            {
                "userId": data["user"]["id"],
                "email": "alice@example.com",
                "type": "access",
                "iat": issued,
                "exp": issued + timedelta(minutes=15),
            },
            settings.jwt_access_secret,
            algorithm=settings.jwt_algorithm,
        )

        response = client.get("/api/v1/auth/me", headers=bearer(expired))

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "INVALID_TOKEN"

    def test_valid_token(self, client, register):
        data = register("alice")

        response = client.get("/api/v1/auth/me", headers=bearer(data["accessToken"]))

        assert response.status_code == 200
        user = response.json()["data"]["user"]
        assert user["username"] == "alice"
        assert "password" not in response.text.lower()
        assert "resetPassword" not in response.text

    def test_create_post_end_to_end(self, client, register):
        data = register("alice")

        created = client.post(
            "/api/v1/posts",
            json={"content": "Hello world"},
            headers=bearer(data["accessToken"]),
        )
        anonymous = client.post("/api/v1/posts", json={"content": "Hello world"})

        assert created.status_code == 201
        assert created.json()["data"]["post"]["content"] == "Hello world"
        assert anonymous.status_code == 401
        assert anonymous.json()["error"]["code"] == "NO_TOKEN"


class TestOptionalGate:
    """Routes that personalise the response when a token is present."""

    def test_profile_without_token(self, client, register):
        alice = register("alice")

        response = client.get(f"/api/v1/users/{alice['user']['id']}")

        assert response.status_code == 200
        assert "isFollowing" not in response.json()["data"]["user"]

    def test_profile_with_invalid_token_is_anonymous(self, client, register):
        alice = register("alice")

        response = client.get(f"/api/v1/users/{alice['user']['id']}", headers=bearer("garbage"))

        assert response.status_code == 200
        assert "isFollowing" not in response.json()["data"]["user"]

    def test_profile_with_token(self, client, register):
        alice = register("alice")
        bob = register("bob")

        response = client.get(
            f"/api/v1/users/{alice['user']['id']}", headers=bearer(bob["accessToken"])
        )

        assert response.status_code == 200
        assert response.json()["data"]["user"]["isFollowing"] is False


class TestAdminGate:
    """Admin-only routes."""

    def test_requires_authentication(self, client):
        response = client.get("/api/v1/admin/stats")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "NO_TOKEN"

    def test_non_admin_forbidden(self, client, register):
        data = register("alice")

        response = client.get("/api/v1/admin/stats", headers=bearer(data["accessToken"]))

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "FORBIDDEN"

    def test_admin_allowed(self, client, register, make_admin):
        data = register("alice")
        register("bob")
        make_admin(data["user"]["id"])

        stats = client.get("/api/v1/admin/stats", headers=bearer(data["accessToken"]))
        users = client.get("/api/v1/admin/users", headers=bearer(data["accessToken"]))

        assert stats.status_code == 200
        assert stats.json()["data"]["stats"] == {
            "totalUsers": 2,
            "totalPosts": 0,
            "newUsersThisWeek": 2,
            "onlineUsers": 0,
        }
        assert users.status_code == 200
        assert users.json()["data"]["pagination"]["total"] == 2
        assert {user["username"] for user in users.json()["data"]["users"]} == {"alice", "bob"}
