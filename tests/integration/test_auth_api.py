"""Integration tests for the authentication API."""

from tests.integration.test_app import bearer


class TestRegister:
    """Tests for POST /auth/register."""

    def test_register_success(self, client):
        response = client.post(
            "/api/v1/auth/register",
            json={
                "username": "Alice_01",
                "email": "Alice@Example.com",
                "password": "password123",
                "name": "Alice",
            },
        )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        user = body["data"]["user"]
        assert user["username"] == "alice_01"
        assert user["email"] == "alice@example.com"
        assert user["followerCount"] == 0
        assert user["isAdmin"] is False
        assert body["data"]["accessToken"]
        assert body["data"]["refreshToken"]
        assert "password" not in response.text
        assert "hashedPassword" not in user
        assert "refreshToken" not in user

    def test_register_duplicate_username(self, client, register):
        register("alice")

        response = client.post(
            "/api/v1/auth/register",
            json={
                "username": "ALICE",
                "email": "other@example.com",
                "password": "password123",
                "name": "Other",
            },
        )

        assert response.status_code == 409
        assert response.json()["error"] == {
            "message": "Username already taken",
            "code": "USER_EXISTS",
        }

    def test_register_duplicate_email(self, client, register):
        register("alice")

        response = client.post(
            "/api/v1/auth/register",
            json={
                "username": "someone",
                "email": "alice@example.com",
                "password": "password123",
                "name": "Someone",
            },
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "USER_EXISTS"
        assert response.json()["error"]["message"] == "Email already registered"

    def test_register_validation_errors(self, client):
        response = client.post(
            "/api/v1/auth/register",
            json={"username": "a!", "email": "not-an-email", "password": "short", "name": ""},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "VALIDATION_ERROR"
        fields = {detail["field"] for detail in body["error"]["details"]}
        assert {"username", "email", "password", "name"} <= fields


class TestLoginAndRefresh:
    """Tests for login, refresh and logout."""

    def test_login_success(self, client, register):
        register("alice")

        response = client.post(
            "/api/v1/auth/login",
            json={"email": "alice@example.com", "password": "password123"},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["user"]["username"] == "alice"
        assert data["accessToken"] and data["refreshToken"]

    def test_login_wrong_password_and_unknown_email_look_the_same(self, client, register):
        register("alice")

        wrong_password = client.post(
            "/api/v1/auth/login",
            json={"email": "alice@example.com", "password": "wrong-password"},
        )
        unknown_email = client.post(
            "/api/v1/auth/login",
            json={"email": "nobody@example.com", "password": "password123"},
        )

        assert wrong_password.status_code == unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json()
        assert wrong_password.json()["error"]["code"] == "INVALID_CREDENTIALS"

    def test_refresh_issues_new_access_token(self, client, register):
        data = register("alice")

        response = client.post(
            "/api/v1/auth/refresh", json={"refreshToken": data["refreshToken"]}
        )

        assert response.status_code == 200
        access_token = response.json()["data"]["accessToken"]
        assert access_token != data["accessToken"]

        me = client.get("/api/v1/auth/me", headers=bearer(access_token))
        assert me.status_code == 200
        assert me.json()["data"]["user"]["username"] == "alice"

    def test_refresh_token_is_not_rotated(self, client, register):
        data = register("alice")

        first = client.post("/api/v1/auth/refresh", json={"refreshToken": data["refreshToken"]})
        second = client.post("/api/v1/auth/refresh", json={"refreshToken": data["refreshToken"]})

        assert first.status_code == 200
        assert second.status_code == 200

    def test_second_login_invalidates_first_refresh_token(self, client, register):
        register("alice")
        credentials = {"email": "alice@example.com", "password": "password123"}

        first = client.post("/api/v1/auth/login", json=credentials).json()["data"]
        second = client.post("/api/v1/auth/login", json=credentials).json()["data"]

        stale = client.post("/api/v1/auth/refresh", json={"refreshToken": first["refreshToken"]})
        assert stale.status_code == 401
        assert stale.json()["error"]["code"] == "INVALID_REFRESH_TOKEN"

        current = client.post(
            "/api/v1/auth/refresh", json={"refreshToken": second["refreshToken"]}
        )
        assert current.status_code == 200

    def test_refresh_without_token(self, client):
        response = client.post("/api/v1/auth/refresh", json={})

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "NO_REFRESH_TOKEN"

    def test_refresh_rejects_access_token(self, client, register):
        data = register("alice")

        response = client.post("/api/v1/auth/refresh", json={"refreshToken": data["accessToken"]})

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "INVALID_REFRESH_TOKEN"

    def test_logout_clears_refresh_token(self, client, register):
        data = register("alice")

        response = client.post("/api/v1/auth/logout", headers=bearer(data["accessToken"]))
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Logged out successfully"}

        refresh = client.post("/api/v1/auth/refresh", json={"refreshToken": data["refreshToken"]})
        assert refresh.status_code == 401

        again = client.post("/api/v1/auth/logout", headers=bearer(data["accessToken"]))
        assert again.status_code == 200


class TestPasswordReset:
    """Tests for forgot-password and reset-password."""

    def test_forgot_password_response_does_not_reveal_accounts(
        self, client, register, reset_sender
    ):
        register("alice")

        known = client.post("/api/v1/auth/forgot-password", json={"email": "alice@example.com"})
        unknown = client.post("/api/v1/auth/forgot-password", json={"email": "bob@example.com"})

        assert known.status_code == unknown.status_code == 200
        assert known.json() == unknown.json()
        assert known.json()["success"] is True
        assert "resetToken" not in known.text
        reset_sender.assert_called_once()
        assert reset_sender.call_args.args[0] == "alice@example.com"

    def test_reset_password_flow(self, client, register, reset_sender):
        register("alice")
        client.post("/api/v1/auth/forgot-password", json={"email": "alice@example.com"})
        ticket = reset_sender.call_args.args[1]

        response = client.post(
            "/api/v1/auth/reset-password",
            json={"token": ticket, "newPassword": "new-password-456"},
        )
        assert response.status_code == 200
        assert response.json()["message"] == "Password reset successfully"

        old_login = client.post(
            "/api/v1/auth/login",
            json={"email": "alice@example.com", "password": "password123"},
        )
        new_login = client.post(
            "/api/v1/auth/login",
            json={"email": "alice@example.com", "password": "new-password-456"},
        )
        assert old_login.status_code == 401
        assert new_login.status_code == 200

        reuse = client.post(
            "/api/v1/auth/reset-password",
            json={"token": ticket, "newPassword": "another-password"},
        )
        assert reuse.status_code == 400
        assert reuse.json()["error"]["code"] == "INVALID_RESET_TOKEN"

    def test_reset_password_with_expired_ticket(
        self, client, register, reset_sender, expire_reset_ticket
    ):
        data = register("alice")
        client.post("/api/v1/auth/forgot-password", json={"email": "alice@example.com"})
        ticket = reset_sender.call_args.args[1]
        expire_reset_ticket(data["user"]["id"])

        response = client.post(
            "/api/v1/auth/reset-password",
            json={"token": ticket, "newPassword": "new-password-456"},
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_RESET_TOKEN"

        login = client.post(
            "/api/v1/auth/login",
            json={"email": "alice@example.com", "password": "password123"},
        )
        assert login.status_code == 200

    def test_reset_password_with_unknown_ticket(self, client):
        response = client.post(
            "/api/v1/auth/reset-password",
            json={"token": "0" * 64, "newPassword": "new-password-456"},
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_RESET_TOKEN"

    def test_reset_password_requires_long_password(self, client):
        response = client.post(
            "/api/v1/auth/reset-password",
            json={"token": "abc", "newPassword": "short"},
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"
