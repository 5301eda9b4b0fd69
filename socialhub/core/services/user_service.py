"""User profile and follow graph service."""

import logging
from typing import Any, Dict, List, Optional, Tuple

from socialhub.core.auth.entities import Account
from socialhub.core.auth.interfaces import AccountRepositoryInterface
from socialhub.core.domain.enums import NotificationType
from socialhub.core.exceptions import (
    BadRequestException,
    ConflictException,
    ResourceNotFoundException,
)
from .interfaces import FollowRepositoryInterface
from .notification_service import NotificationService

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("name", "bio", "website", "location")


class UserService:
    """Profiles and follow relationships."""

    def __init__(
        self,
        account_repository: AccountRepositoryInterface,
        follow_repository: FollowRepositoryInterface,
        notification_service: NotificationService,
    ):
        """
        Initialize user service.

        Args:
            account_repository: Repository for account persistence
            follow_repository: Repository for the follow graph
            notification_service: Service raising follow notifications
        """
        self._account_repository = account_repository
        self._follow_repository = follow_repository
        self._notification_service = notification_service

    async def get_user(self, user_id: int) -> Account:
        """
        Get sanitized account by ID.

        Raises:
            ResourceNotFoundException: If account does not exist
        """
        account = await self._account_repository.get_user_by_id(user_id)
        if account is None:
            raise ResourceNotFoundException("User not found", code="USER_NOT_FOUND")
        return account.sanitized()

    async def get_profile(
        self, user_id: int, viewer: Optional[Account] = None
    ) -> Tuple[Account, Optional[bool]]:
        """
        Get public profile, personalized when a viewer is known.

        Returns:
            Tuple of (account, whether viewer follows it or None for anonymous)
        """
        account = await self.get_user(user_id)

        is_following = None
        if viewer is not None:
            is_following = await self._follow_repository.is_following(viewer.id, user_id)

        return account, is_following

    async def update_profile(self, account: Account, fields: Dict[str, Any]) -> Account:
        changes = {key: value for key, value in fields.items() if key in PROFILE_FIELDS}
        if not changes:
            return await self.get_user(account.id)

        updated = await self._account_repository.update_profile(account.id, changes)
        if updated is None:
            raise ResourceNotFoundException("User not found", code="USER_NOT_FOUND")
        return updated.sanitized()

    async def follow(self, follower: Account, target_id: int) -> None:
        """
        Follow another account and notify it.

        Raises:
            BadRequestException: If follower and target are the same account
            ResourceNotFoundException: If target does not exist
            ConflictException: If already following
        """
        if follower.id == target_id:
            raise BadRequestException("Cannot follow yourself", code="CANNOT_FOLLOW_SELF")

        await self.get_user(target_id)

        if not await self._follow_repository.add_follow(follower.id, target_id):
            raise ConflictException("Already following this user", code="ALREADY_FOLLOWING")

        logger.info("Account %s followed account %s", follower.id, target_id)
        await self._notification_service.create_notification(
            target_id, follower.id, NotificationType.FOLLOW
        )

    async def unfollow(self, follower: Account, target_id: int) -> None:
        if follower.id == target_id:
            raise BadRequestException("Cannot unfollow yourself", code="CANNOT_FOLLOW_SELF")

        await self.get_user(target_id)

        if not await self._follow_repository.remove_follow(follower.id, target_id):
            raise BadRequestException("Not following this user", code="NOT_FOLLOWING")

        logger.info("Account %s unfollowed account %s", follower.id, target_id)

    async def list_followers(
        self, user_id: int, page: int, limit: int
    ) -> Tuple[List[Account], int]:
        await self.get_user(user_id)
        offset = (page - 1) * limit
        followers = await self._follow_repository.list_followers(user_id, offset, limit)
        total = await self._follow_repository.count_followers(user_id)
        return [account.sanitized() for account in followers], total

    async def list_following(
        self, user_id: int, page: int, limit: int
    ) -> Tuple[List[Account], int]:
        await self.get_user(user_id)
        offset = (page - 1) * limit
        following = await self._follow_repository.list_following(user_id, offset, limit)
        total = await self._follow_repository.count_following(user_id)
        return [account.sanitized() for account in following], total
