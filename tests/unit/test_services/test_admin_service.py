"""Tests for admin service."""

import pytest
from unittest.mock import AsyncMock

from socialhub.core.auth.entities import Account
from socialhub.core.realtime.registry import InMemoryConnectionRegistry
from socialhub.core.services.admin_service import AdminService


@pytest.fixture
def mock_account_repository():
    return AsyncMock()


@pytest.fixture
def mock_post_repository():
    return AsyncMock()


@pytest.fixture
def admin_service(mock_account_repository, mock_post_repository):
    return AdminService(mock_account_repository, mock_post_repository, InMemoryConnectionRegistry())


class TestAdminService:
    @pytest.mark.asyncio
    async def test_get_stats(self, admin_service, mock_account_repository, mock_post_repository):
        mock_account_repository.count_users.side_effect = [10, 4]
        mock_post_repository.count_posts.return_value = 25

        stats = await admin_service.get_stats()

        assert stats == {
            "total_users": 10,
            "total_posts": 25,
            "new_users_this_week": 4,
            "online_users": 0,
        }
        assert mock_account_repository.count_users.await_args_list[1].kwargs["created_since"]

    @pytest.mark.asyncio
    async def test_list_users_sanitized(self, admin_service, mock_account_repository):
        mock_account_repository.list_users.return_value = [
            Account(
                id=1,
                username="alice",
                email="alice@example.com",
                name="Alice",
                hashed_password="$2b$04$hashed",
            )
        ]
        mock_account_repository.count_users.return_value = 1

        users, total = await admin_service.list_users(2, 10)

        assert total == 1
        assert users[0].hashed_password is None
        mock_account_repository.list_users.assert_awaited_once_with(10, 10)
