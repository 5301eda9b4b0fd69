"""Account repository implementation."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import Select, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from socialhub.core.auth.entities import Account
from socialhub.core.auth.exceptions import UserAlreadyExistsException
from socialhub.core.auth.interfaces import AccountRepositoryInterface
from socialhub.core.domain.entities import AccountSummary
from socialhub.core.services.accounts.models import FollowModel, UserModel


def select_accounts() -> Select:
    """Select users together with their follower and following counts."""
    follower_count = (
        select(func.count(FollowModel.id))
        .where(FollowModel.following_id == UserModel.id)
        .correlate(UserModel)
        .scalar_subquery()
    )
    following_count = (
        select(func.count(FollowModel.id))
        .where(FollowModel.follower_id == UserModel.id)
        .correlate(UserModel)
        .scalar_subquery()
    )
    return select(
        UserModel,
        follower_count.label("follower_count"),
        following_count.label("following_count"),
    ).execution_options(populate_existing=True)


def account_from_model(
    model: UserModel, follower_count: int = 0, following_count: int = 0
) -> Account:
    """
    Convert database model to domain entity.

    Args:
        model: User database model
        follower_count: Number of followers
        following_count: Number of followed accounts

    Returns:
        Account domain entity
    """
    return Account(
        id=model.id,
        username=model.username,
        email=model.email,
        name=model.name,
        hashed_password=model.hashed_password,
        bio=model.bio or "",
        profile_image=model.profile_image or "",
        website=model.website or "",
        location=model.location or "",
        is_admin=model.is_admin,
        follower_count=follower_count or 0,
        following_count=following_count or 0,
        refresh_token=model.refresh_token,
        reset_password_token=model.reset_password_token,
        reset_password_expires=model.reset_password_expires,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


def summary_from_model(model: UserModel) -> AccountSummary:
    return AccountSummary(
        id=model.id,
        username=model.username,
        name=model.name,
        profile_image=model.profile_image or "",
    )


class SqlAccountRepository(AccountRepositoryInterface):
    """SQLAlchemy implementation of account repository."""

    def __init__(self, session: AsyncSession):
        """
        Initialize account repository.

        Args:
            session: Database session
        """
        self._session = session

    async def get_user_by_id(self, user_id: int) -> Optional[Account]:
        return await self._get_one(select_accounts().where(UserModel.id == user_id))

    async def get_user_by_username(self, username: str) -> Optional[Account]:
        return await self._get_one(
            select_accounts().where(UserModel.username == username.lower())
        )

    async def get_user_by_email(self, email: str) -> Optional[Account]:
        return await self._get_one(select_accounts().where(UserModel.email == email.lower()))

    async def get_users_by_ids(self, user_ids: List[int]) -> List[Account]:
        if not user_ids:
            return []

        result = await self._session.execute(
            select_accounts().where(UserModel.id.in_(set(user_ids)))
        )
        accounts = {row[0].id: account_from_model(*row) for row in result.all()}
        return [accounts[user_id] for user_id in user_ids if user_id in accounts]

    async def create_user(self, account: Account) -> Account:
        """
        Create new account.

        Args:
            account: Account entity to create

        Returns:
            Created account entity with ID

        Raises:
            UserAlreadyExistsException: If username or email already exists
        """
        user_model = UserModel(
            username=account.username.lower(),
            email=account.email.lower(),
            hashed_password=account.hashed_password,
            name=account.name,
            bio=account.bio,
            profile_image=account.profile_image,
            website=account.website,
            location=account.location,
            is_admin=account.is_admin,
        )

        try:
            self._session.add(user_model)
            await self._session.flush()
            await self._session.refresh(user_model)
            return account_from_model(user_model)
        except IntegrityError:
            await self._session.rollback()
            raise UserAlreadyExistsException("Username or email already registered")

    async def update_profile(self, user_id: int, fields: Dict[str, Any]) -> Optional[Account]:
        await self._update(user_id, **fields)
        return await self.get_user_by_id(user_id)

    async def set_refresh_token(self, user_id: int, token: Optional[str]) -> None:
        await self._update(user_id, refresh_token=token)

    async def set_password(self, user_id: int, hashed_password: str) -> None:
        await self._update(user_id, hashed_password=hashed_password)

    async def set_admin(self, user_id: int, is_admin: bool) -> None:
        await self._update(user_id, is_admin=is_admin)

    async def set_reset_token(
        self, user_id: int, token_hash: str, expires_at: datetime
    ) -> None:
        await self._update(
            user_id, reset_password_token=token_hash, reset_password_expires=expires_at
        )

    async def get_user_by_reset_token(
        self, token_hash: str, now: datetime
    ) -> Optional[Account]:
        """
        Get account by reset ticket hash.

        Args:
            token_hash: SHA-256 hex of the presented ticket
            now: Current time; the stored expiry must be later

        Returns:
            Account entity if a live ticket matches, None otherwise
        """
        return await self._get_one(
            select_accounts().where(
                UserModel.reset_password_token == token_hash,
                UserModel.reset_password_expires > now,
            )
        )

    async def clear_reset_token(self, user_id: int) -> None:
        await self._update(user_id, reset_password_token=None, reset_password_expires=None)

    async def cleanup_expired_reset_tokens(self, now: datetime) -> int:
        result = await self._session.execute(
            update(UserModel)
            .where(
                UserModel.reset_password_expires.is_not(None),
                UserModel.reset_password_expires <= now,
            )
            .values(reset_password_token=None, reset_password_expires=None)
        )
        return result.rowcount or 0

    async def list_users(self, offset: int, limit: int) -> List[Account]:
        result = await self._session.execute(
            select_accounts().order_by(UserModel.id.desc()).offset(offset).limit(limit)
        )
        return [account_from_model(*row) for row in result.all()]

    async def count_users(self, created_since: Optional[datetime] = None) -> int:
        query = select(func.count(UserModel.id))
        if created_since is not None:
            query = query.where(UserModel.created_at >= created_since)
        result = await self._session.execute(query)
        return result.scalar_one()

    async def _get_one(self, query: Select) -> Optional[Account]:
        result = await self._session.execute(query)
        row = result.one_or_none()
        if row is None:
            return None
        return account_from_model(*row)

    async def _update(self, user_id: int, **values: Any) -> None:
        await self._session.execute(
            update(UserModel).where(UserModel.id == user_id).values(**values)
        )
