"""Integration tests for the realtime WebSocket channel."""

import asyncio

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.websockets import WebSocketDisconnect

from socialhub.core.realtime.dispatcher import RealtimeDispatcher

from tests.integration.test_app import bearer


def ws_url(token: str) -> str:
    return f"/api/v1/ws?token={token}"


def ping(websocket) -> None:
    """Round-trip a ping so every earlier server step has run."""
    websocket.send_json({"event": "ping"})
    assert websocket.receive_json() == {"event": "pong", "data": {}}


def connected_ids(app):
    return asyncio.run(app.state.connection_registry.connected_account_ids())


@pytest.fixture
def alice(register):
    return register("alice")


@pytest.fixture
def bob(register):
    return register("bob")


class TestHandshake:
    def test_rejects_missing_token(self, client):
        with pytest.raises(WebSocketDisconnect) as exc_info:
            with client.websocket_connect("/api/v1/ws"):
                pass

        assert exc_info.value.code == 4401

    def test_rejects_invalid_token(self, client):
        with pytest.raises(WebSocketDisconnect) as exc_info:
            with client.websocket_connect(ws_url("garbage")):
                pass

        assert exc_info.value.code == 4401

    def test_rejects_refresh_token(self, client, alice):
        with pytest.raises(WebSocketDisconnect) as exc_info:
            with client.websocket_connect(ws_url(alice["refreshToken"])):
                pass

        assert exc_info.value.code == 4401

    def test_connect_registers_and_disconnect_unregisters(self, app, client, alice):
        alice_id = alice["user"]["id"]

        with client.websocket_connect(ws_url(alice["accessToken"])) as websocket:
            ping(websocket)
            assert connected_ids(app) == [alice_id]

        assert connected_ids(app) == []


class TestEvents:
    def test_invalid_json_keeps_connection_open(self, client, alice):
        with client.websocket_connect(ws_url(alice["accessToken"])) as websocket:
            websocket.send_text("{not json")
            error = websocket.receive_json()

            assert error["event"] == "error"
            assert error["data"]["error"] == "INVALID_JSON"
            ping(websocket)

    def test_unknown_event(self, client, alice):
        with client.websocket_connect(ws_url(alice["accessToken"])) as websocket:
            websocket.send_json({"event": "dance", "data": {}})
            error = websocket.receive_json()

            assert error == {
                "event": "error",
                "data": {"message": "Unknown event: dance", "error": "UNKNOWN_EVENT"},
            }
            ping(websocket)

    def test_send_message_between_connected_accounts(self, client, alice, bob):
        with client.websocket_connect(ws_url(alice["accessToken"])) as alice_ws, \
                client.websocket_connect(ws_url(bob["accessToken"])) as bob_ws:
            ping(alice_ws)
            ping(bob_ws)

            alice_ws.send_json(
                {
                    "event": "send_message",
                    "data": {"recipientId": bob["user"]["id"], "content": "  hi bob  "},
                }
            )

            ack = alice_ws.receive_json()
            received = bob_ws.receive_json()

            assert ack["event"] == "message_sent"
            assert received["event"] == "receive_message"
            assert ack["data"] == received["data"]
            message = received["data"]["message"]
            assert message["content"] == "hi bob"
            assert message["senderId"] == alice["user"]["id"]
            assert message["recipientId"] == bob["user"]["id"]
            assert message["sender"]["username"] == "alice"
            assert message["seen"] is False

    def test_send_message_to_offline_account_is_stored(self, client, alice, bob):
        with client.websocket_connect(ws_url(alice["accessToken"])) as websocket:
            websocket.send_json(
                {"event": "send_message", "data": {"recipientId": bob["user"]["id"], "content": "hello"}}
            )
            ack = websocket.receive_json()

        assert ack["event"] == "message_sent"

        history = client.get(
            f"/api/v1/messages/{alice['user']['id']}", headers=bearer(bob["accessToken"])
        )
        assert history.status_code == 200
        assert [m["content"] for m in history.json()["data"]["messages"]] == ["hello"]

    def test_send_message_errors(self, client, alice):
        with client.websocket_connect(ws_url(alice["accessToken"])) as websocket:
            websocket.send_json(
                {"event": "send_message", "data": {"recipientId": 999, "content": "hello"}}
            )
            missing = websocket.receive_json()

            websocket.send_json(
                {"event": "send_message", "data": {"recipientId": 999, "content": "   "}}
            )
            empty = websocket.receive_json()

            websocket.send_json({"event": "send_message", "data": {"content": "hello"}})
            no_recipient = websocket.receive_json()

            ping(websocket)

        assert missing["data"]["error"] == "USER_NOT_FOUND"
        assert empty["data"]["error"] == "VALIDATION_ERROR"
        assert no_recipient["data"]["error"] == "VALIDATION_ERROR"

    def test_typing_indicators(self, client, alice, bob):
        with client.websocket_connect(ws_url(alice["accessToken"])) as alice_ws, \
                client.websocket_connect(ws_url(bob["accessToken"])) as bob_ws:
            ping(bob_ws)

            alice_ws.send_json({"event": "typing", "data": {"recipientId": bob["user"]["id"]}})
            assert bob_ws.receive_json() == {
                "event": "user_typing",
                "data": {"userId": alice["user"]["id"]},
            }

            alice_ws.send_json(
                {"event": "stop_typing", "data": {"recipientId": bob["user"]["id"]}}
            )
            assert bob_ws.receive_json() == {
                "event": "user_stopped_typing",
                "data": {"userId": alice["user"]["id"]},
            }

    def test_notification_pushed_to_connected_recipient(self, client, alice, bob):
        with client.websocket_connect(ws_url(alice["accessToken"])) as websocket:
            ping(websocket)

            client.post(
                f"/api/v1/users/{alice['user']['id']}/follow", headers=bearer(bob["accessToken"])
            )
            pushed = websocket.receive_json()

        assert pushed["event"] == "new_notification"
        notification = pushed["data"]["notification"]
        assert notification["type"] == "follow"
        assert notification["actorId"] == bob["user"]["id"]
        assert notification["recipientId"] == alice["user"]["id"]

    def test_mark_seen_notifies_sender(self, client, alice, bob):
        with client.websocket_connect(ws_url(alice["accessToken"])) as websocket:
            websocket.send_json(
                {"event": "send_message", "data": {"recipientId": bob["user"]["id"], "content": "one"}}
            )
            first = websocket.receive_json()["data"]["message"]
            websocket.send_json(
                {"event": "send_message", "data": {"recipientId": bob["user"]["id"], "content": "two"}}
            )
            second = websocket.receive_json()["data"]["message"]

            conversations = client.get(
                "/api/v1/messages/conversations", headers=bearer(bob["accessToken"])
            ).json()["data"]["conversations"]
            assert len(conversations) == 1
            assert conversations[0]["user"]["username"] == "alice"
            assert conversations[0]["lastMessage"]["content"] == "two"
            assert conversations[0]["unreadCount"] == 2

            seen = client.put(
                f"/api/v1/messages/{alice['user']['id']}/seen", headers=bearer(bob["accessToken"])
            )
            assert seen.json()["data"] == {"updated": 2}

            receipts = [websocket.receive_json(), websocket.receive_json()]

        assert receipts == [
            {"event": "message_seen", "data": {"messageId": first["id"]}},
            {"event": "message_seen", "data": {"messageId": second["id"]}},
        ]

        conversations = client.get(
            "/api/v1/messages/conversations", headers=bearer(bob["accessToken"])
        ).json()["data"]["conversations"]
        assert conversations[0]["unreadCount"] == 0


class TestHandlerFailures:
    def test_storage_failure_is_reported_to_sender_only(
        self, client, alice, bob, monkeypatch
    ):
        async def failing_commit(self):
            raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

        with client.websocket_connect(ws_url(alice["accessToken"])) as alice_ws, \
                client.websocket_connect(ws_url(bob["accessToken"])) as bob_ws:
            ping(alice_ws)
            ping(bob_ws)

            monkeypatch.setattr(AsyncSession, "commit", failing_commit)
            alice_ws.send_json(
                {"event": "send_message", "data": {"recipientId": bob["user"]["id"], "content": "hi"}}
            )
            error = alice_ws.receive_json()

            assert error == {
                "event": "error",
                "data": {"message": "Failed to process event", "error": "INTERNAL_ERROR"},
            }
            ping(alice_ws)
            ping(bob_ws)
            monkeypatch.undo()

        history = client.get(
            f"/api/v1/messages/{alice['user']['id']}", headers=bearer(bob["accessToken"])
        )
        assert history.json()["data"]["messages"] == []

    def test_oversized_recipient_id_keeps_connection_open(self, client, alice):
        with client.websocket_connect(ws_url(alice["accessToken"])) as websocket:
            websocket.send_json(
                {"event": "send_message", "data": {"recipientId": 2**70, "content": "hello"}}
            )
            error = websocket.receive_json()

            assert error["event"] == "error"
            assert error["data"]["error"] == "VALIDATION_ERROR"
            ping(websocket)

    def test_unexpected_error_keeps_connection_open(self, client, alice, bob, monkeypatch):
        async def broken_typing(self, connection, recipient_id):
            raise RuntimeError("boom")

        monkeypatch.setattr(RealtimeDispatcher, "typing", broken_typing)

        with client.websocket_connect(ws_url(alice["accessToken"])) as websocket:
            websocket.send_json({"event": "typing", "data": {"recipientId": bob["user"]["id"]}})
            error = websocket.receive_json()

            assert error["data"]["error"] == "INTERNAL_ERROR"
            ping(websocket)
