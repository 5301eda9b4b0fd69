"""Follow graph repository implementation."""

from typing import List

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from socialhub.core.auth.entities import Account
from socialhub.core.services.accounts.models import FollowModel, UserModel
from socialhub.core.services.interfaces import FollowRepositoryInterface
from .account_repository import account_from_model, select_accounts


class SqlFollowRepository(FollowRepositoryInterface):
    """SQLAlchemy implementation of the follow graph."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def add_follow(self, follower_id: int, following_id: int) -> bool:
        if await self.is_following(follower_id, following_id):
            return False

        self._session.add(FollowModel(follower_id=follower_id, following_id=following_id))
        await self._session.flush()
        return True

    async def remove_follow(self, follower_id: int, following_id: int) -> bool:
        result = await self._session.execute(
            delete(FollowModel).where(
                FollowModel.follower_id == follower_id,
                FollowModel.following_id == following_id,
            )
        )
        return bool(result.rowcount)

    async def is_following(self, follower_id: int, following_id: int) -> bool:
        result = await self._session.execute(
            select(func.count(FollowModel.id)).where(
                FollowModel.follower_id == follower_id,
                FollowModel.following_id == following_id,
            )
        )
        return result.scalar_one() > 0

    async def list_followers(self, user_id: int, offset: int, limit: int) -> List[Account]:
        """
        List accounts following ``user_id``.

        Args:
            user_id: Followed account
            offset: Number of edges to skip
            limit: Maximum number of accounts

        Returns:
            Accounts ordered by most recent follow first
        """
        result = await self._session.execute(
            select_accounts()
            .join(FollowModel, FollowModel.follower_id == UserModel.id)
            .where(FollowModel.following_id == user_id)
            .order_by(FollowModel.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return [account_from_model(*row) for row in result.all()]

    async def list_following(self, user_id: int, offset: int, limit: int) -> List[Account]:
        result = await self._session.execute(
            select_accounts()
            .join(FollowModel, FollowModel.following_id == UserModel.id)
            .where(FollowModel.follower_id == user_id)
            .order_by(FollowModel.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return [account_from_model(*row) for row in result.all()]

    async def count_followers(self, user_id: int) -> int:
        result = await self._session.execute(
            select(func.count(FollowModel.id)).where(FollowModel.following_id == user_id)
        )
        return result.scalar_one()

    async def count_following(self, user_id: int) -> int:
        result = await self._session.execute(
            select(func.count(FollowModel.id)).where(FollowModel.follower_id == user_id)
        )
        return result.scalar_one()
