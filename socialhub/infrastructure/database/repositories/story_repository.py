"""Story repository implementation."""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from socialhub.core.domain.entities import Story
from socialhub.core.services.accounts.models import FollowModel, UserModel
from socialhub.core.services.interfaces import StoryRepositoryInterface
from socialhub.core.services.stories.models import StoryModel, StoryViewModel
from .account_repository import summary_from_model


class SqlStoryRepository(StoryRepositoryInterface):
    """SQLAlchemy implementation of story repository."""

    def __init__(self, session: AsyncSession):
        """
        Initialize story repository.

        Args:
            session: Database session
        """
        self._session = session

    async def create_story(self, story: Story) -> Story:
        story_model = StoryModel(
            author_id=story.author_id,
            image=story.image,
            expires_at=story.expires_at,
        )
        self._session.add(story_model)
        await self._session.flush()

        author = await self._session.get(UserModel, story.author_id)
        return self._model_to_entity(story_model, author)

    async def get_active_story(self, story_id: int, now: datetime) -> Optional[Story]:
        result = await self._session.execute(
            select(StoryModel, UserModel)
            .join(UserModel, UserModel.id == StoryModel.author_id)
            .where(StoryModel.id == story_id, StoryModel.expires_at > now)
        )
        row = result.one_or_none()
        if row is None:
            return None
        return self._model_to_entity(*row)

    async def delete_story(self, story_id: int) -> bool:
        await self._session.execute(
            delete(StoryViewModel).where(StoryViewModel.story_id == story_id)
        )
        result = await self._session.execute(delete(StoryModel).where(StoryModel.id == story_id))
        return bool(result.rowcount)

    async def add_view(self, story_id: int, viewer_id: int) -> bool:
        existing = await self._session.execute(
            select(StoryViewModel.id).where(
                StoryViewModel.story_id == story_id, StoryViewModel.viewer_id == viewer_id
            )
        )
        if existing.scalar_one_or_none() is not None:
            return False

        self._session.add(StoryViewModel(story_id=story_id, viewer_id=viewer_id))
        await self._session.flush()
        return True

    async def list_active_for_viewer(self, viewer_id: int, now: datetime) -> List[Story]:
        """
        List unexpired stories visible to ``viewer_id``.

        Visible stories are the viewer's own and those of accounts it follows.

        Args:
            viewer_id: Requesting account
            now: Reference time for expiry

        Returns:
            Stories ordered oldest first with the per-viewer ``viewed`` flag set
        """
        followed = select(FollowModel.following_id).where(FollowModel.follower_id == viewer_id)
        viewed = (
            select(StoryViewModel.id)
            .where(
                StoryViewModel.story_id == StoryModel.id,
                StoryViewModel.viewer_id == viewer_id,
            )
            .exists()
        )

        result = await self._session.execute(
            select(StoryModel, UserModel, viewed.label("viewed"))
            .join(UserModel, UserModel.id == StoryModel.author_id)
            .where(
                or_(StoryModel.author_id == viewer_id, StoryModel.author_id.in_(followed)),
                StoryModel.expires_at > now,
            )
            .order_by(StoryModel.created_at.asc(), StoryModel.id.asc())
        )
        return [
            self._model_to_entity(story, author, bool(seen))
            for story, author, seen in result.all()
        ]

    async def delete_expired(self, now: datetime) -> int:
        """
        Delete expired stories and their view records.

        Returns:
            Number of stories deleted
        """
        expired = select(StoryModel.id).where(StoryModel.expires_at <= now)
        await self._session.execute(
            delete(StoryViewModel)
            .where(StoryViewModel.story_id.in_(expired))
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(
            delete(StoryModel)
            .where(StoryModel.expires_at <= now)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

    def _model_to_entity(
        self, model: StoryModel, author: Optional[UserModel] = None, viewed: bool = False
    ) -> Story:
        return Story(
            id=model.id,
            author_id=model.author_id,
            image=model.image,
            expires_at=model.expires_at,
            viewed=viewed,
            author=summary_from_model(author) if author else None,
            created_at=model.created_at,
        )
