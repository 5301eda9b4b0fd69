"""Tests for the request-scoped realtime dispatcher dependency."""

import pytest
from unittest.mock import AsyncMock

from sqlalchemy.exc import OperationalError

from socialhub.api.dependencies import get_realtime_dispatcher
from socialhub.core.domain.entities import Notification
from socialhub.core.domain.enums import NotificationType


@pytest.fixture
def notification():
    return Notification(id=7, recipient_id=2, actor_id=1, type=NotificationType.FOLLOW)


@pytest.fixture
def session():
    return AsyncMock()


async def open_dispatcher(session, registry):
    provider = get_realtime_dispatcher(session=session, registry=registry)
    dispatcher = await provider.__anext__()
    return provider, dispatcher


@pytest.mark.asyncio
async def test_pushes_after_commit(session, registry, make_connection, notification):
    bob = make_connection(2)
    await registry.register(bob)
    provider, dispatcher = await open_dispatcher(session, registry)

    await dispatcher.deliver_notification(notification)
    assert bob.sent == []
    session.commit.assert_not_called()

    with pytest.raises(StopAsyncIteration):
        await provider.__anext__()

    session.commit.assert_awaited_once()
    assert [event for event, _ in bob.sent] == ["new_notification"]


@pytest.mark.asyncio
async def test_failed_request_pushes_nothing(session, registry, make_connection, notification):
    bob = make_connection(2)
    await registry.register(bob)
    provider, dispatcher = await open_dispatcher(session, registry)

    await dispatcher.deliver_notification(notification)

    with pytest.raises(RuntimeError):
        await provider.athrow(RuntimeError("handler failed"))

    session.commit.assert_not_called()
    assert bob.sent == []


@pytest.mark.asyncio
async def test_failed_commit_pushes_nothing(session, registry, make_connection, notification):
    bob = make_connection(2)
    await registry.register(bob)
    session.commit.side_effect = OperationalError("COMMIT", {}, Exception("disk I/O error"))
    provider, dispatcher = await open_dispatcher(session, registry)

    await dispatcher.deliver_notification(notification)

    with pytest.raises(OperationalError):
        await provider.__anext__()

    assert bob.sent == []
    assert dispatcher.pending_count == 0
