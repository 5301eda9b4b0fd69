"""Realtime WebSocket endpoint.

Clients connect to ``/ws?token=<access token>`` and exchange JSON frames of
the form ``{"event": <name>, "data": {...}}``.
"""

import json
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from socialhub.api.dependencies import (
    get_connection_registry,
    get_password_service,
    get_session_factory,
    get_token_service,
)
from socialhub.api.schemas import MAX_RESOURCE_ID
from socialhub.core.auth.entities import Account
from socialhub.core.auth.exceptions import AuthenticationException
from socialhub.core.auth.services import AuthenticationService
from socialhub.core.domain.enums import RealtimeEvent
from socialhub.core.exceptions import DomainException, ValidationException
from socialhub.core.realtime.dispatcher import RealtimeDispatcher
from socialhub.core.realtime.registry import ConnectionRegistry
from socialhub.infrastructure.database.repositories.account_repository import SqlAccountRepository
from socialhub.infrastructure.database.repositories.message_repository import SqlMessageRepository
from socialhub.settings import get_settings
from .connection import WebSocketConnection

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Realtime"])

WS_UNAUTHORIZED = 4401

CLIENT_EVENTS = {
    RealtimeEvent.SEND_MESSAGE.value,
    RealtimeEvent.TYPING.value,
    RealtimeEvent.STOP_TYPING.value,
}


async def _authenticate(
    token: Optional[str], session_factory: async_sessionmaker[AsyncSession]
) -> Optional[Account]:
    """Verify the access token the same way the HTTP access gate does."""
    if not token:
        return None

    async with session_factory() as session:
        auth_service = AuthenticationService(
            SqlAccountRepository(session),
            get_password_service(),
            get_token_service(),
            get_settings(),
        )
        try:
            return await auth_service.authenticate_access_token(token)
        except AuthenticationException as e:
            logger.warning("WebSocket connection rejected: %s", e.code)
            return None


def _recipient_id(data: Dict[str, Any]) -> int:
    recipient_id = data.get("recipientId")
    if (
        isinstance(recipient_id, bool)
        or not isinstance(recipient_id, int)
        or not 1 <= recipient_id <= MAX_RESOURCE_ID
    ):
        raise ValidationException(
            errors=[{"field": "recipientId", "message": "recipientId must be a positive integer"}]
        )
    return recipient_id


async def _error(connection: WebSocketConnection, message: str, error: str) -> None:
    await connection.send(RealtimeEvent.ERROR.value, {"message": message, "error": error})


async def _handle_event(
    connection: WebSocketConnection,
    event: str,
    data: Dict[str, Any],
    registry: ConnectionRegistry,
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    """
    Run one client event in its own database session.

    Pushes announcing stored messages go out only after the commit. Any
    failure is reported to this connection as an ``error`` event and the
    socket stays open.
    """
    async with session_factory() as session:
        dispatcher = RealtimeDispatcher(
            registry,
            message_repository=SqlMessageRepository(session),
            account_repository=SqlAccountRepository(session),
            deferred=True,
        )
        try:
            recipient_id = _recipient_id(data)
            if event == RealtimeEvent.SEND_MESSAGE.value:
                content = data.get("content")
                await dispatcher.send_message(
                    connection, recipient_id, content if isinstance(content, str) else ""
                )
            elif event == RealtimeEvent.TYPING.value:
                await dispatcher.typing(connection, recipient_id)
            else:
                await dispatcher.stop_typing(connection, recipient_id)
            await session.commit()
        except DomainException as e:
            dispatcher.discard()
            await session.rollback()
            await _error(connection, e.message, e.code)
            return
        except Exception:
            dispatcher.discard()
            await session.rollback()
            logger.exception("Failed to process %s from account %s", event, connection.account_id)
            await _error(connection, "Failed to process event", "INTERNAL_ERROR")
            return

    await dispatcher.flush()


@router.websocket("/ws")
async def realtime_endpoint(
    websocket: WebSocket,
    token: Optional[str] = Query(None),
    registry: ConnectionRegistry = Depends(get_connection_registry),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
):
    """
    Authenticated realtime channel.

    The access token is checked before the handshake completes; an invalid
    token closes the socket with code 4401. Client events are
    ``send_message``, ``typing``, ``stop_typing`` and ``ping``.
    """
    account = await _authenticate(token, session_factory)
    if account is None:
        await websocket.close(code=WS_UNAUTHORIZED)
        return

    await websocket.accept()
    connection = WebSocketConnection(account.id, websocket)
    await registry.register(connection)
    logger.info("Account %s connected (%s)", account.id, connection.connection_id)

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                frame = json.loads(raw)
            except ValueError:
                await _error(connection, "Invalid JSON payload", "INVALID_JSON")
                continue

            if not isinstance(frame, dict):
                await _error(connection, "Frame must be a JSON object", "INVALID_FRAME")
                continue

            event = frame.get("event")
            data = frame.get("data")
            if not isinstance(data, dict):
                data = {}

            if event == RealtimeEvent.PING.value:
                await connection.send(RealtimeEvent.PONG.value, {})
            elif event in CLIENT_EVENTS:
                await _handle_event(connection, event, data, registry, session_factory)
            else:
                await _error(connection, f"Unknown event: {event}", "UNKNOWN_EVENT")
    except WebSocketDisconnect:
        pass
    finally:
        await registry.unregister(connection)
        logger.info("Account %s disconnected (%s)", account.id, connection.connection_id)
