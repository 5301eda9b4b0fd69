"""Administrative reporting service."""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Tuple

from socialhub.core.auth.entities import Account
from socialhub.core.auth.interfaces import AccountRepositoryInterface
from socialhub.core.realtime.registry import ConnectionRegistry
from .interfaces import PostRepositoryInterface


class AdminService:
    """Read-only platform statistics for administrators."""

    def __init__(
        self,
        account_repository: AccountRepositoryInterface,
        post_repository: PostRepositoryInterface,
        registry: ConnectionRegistry,
    ):
        self._account_repository = account_repository
        self._post_repository = post_repository
        self._registry = registry

    async def get_stats(self) -> Dict[str, Any]:
        """
        Collect platform statistics.

        Returns:
            Dictionary with total users, total posts, users created in the
            last seven days and currently connected accounts
        """
        week_ago = datetime.now(timezone.utc) - timedelta(days=7)

        return {
            "total_users": await self._account_repository.count_users(),
            "total_posts": await self._post_repository.count_posts(),
            "new_users_this_week": await self._account_repository.count_users(
                created_since=week_ago
            ),
            "online_users": len(await self._registry.connected_account_ids()),
        }

    async def list_users(self, page: int, limit: int) -> Tuple[List[Account], int]:
        offset = (page - 1) * limit
        accounts = await self._account_repository.list_users(offset, limit)
        total = await self._account_repository.count_users()
        return [account.sanitized() for account in accounts], total
