"""Story service implementation."""

import logging
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from socialhub.core.auth.entities import Account
from socialhub.core.domain.entities import Story, StoryGroup
from socialhub.core.exceptions import PermissionDeniedException, ResourceNotFoundException
from socialhub.settings import Settings
from .interfaces import StoryRepositoryInterface

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class StoryService:
    """
    Ephemeral stories.

    A story is visible to its author and the author's followers until it
    expires; expired stories behave as if they never existed and are purged
    by the hourly cleanup task.
    """

    def __init__(
        self,
        story_repository: StoryRepositoryInterface,
        settings: Settings,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize story service.

        Args:
            story_repository: Repository for stories and their views
            settings: Application settings (story lifetime)
            clock: Source of the current time
        """
        self._story_repository = story_repository
        self._ttl = settings.story_ttl
        self._clock = clock or utc_now

    async def create_story(self, author: Account, image: str) -> Story:
        now = self._clock()
        story = await self._story_repository.create_story(
            Story(id=None, author_id=author.id, image=image, expires_at=now + self._ttl)
        )
        logger.info("Story %s created by account %s", story.id, author.id)
        return story

    async def list_stories(self, viewer: Account) -> List[StoryGroup]:
        """
        Group the active stories visible to ``viewer`` by author.

        Groups appear in the order of each author's oldest active story;
        stories inside a group are oldest first.
        """
        stories = await self._story_repository.list_active_for_viewer(viewer.id, self._clock())

        grouped: Dict[int, List[Story]] = {}
        for story in stories:
            grouped.setdefault(story.author_id, []).append(story)

        return [
            StoryGroup(author=author_stories[0].author, stories=author_stories)
            for author_stories in grouped.values()
        ]

    async def view_story(self, viewer: Account, story_id: int) -> None:
        """
        Mark story as seen by ``viewer``. Repeated views are no-ops.

        Raises:
            ResourceNotFoundException: If story does not exist or has expired
        """
        await self._get_active_story(story_id)
        await self._story_repository.add_view(story_id, viewer.id)

    async def delete_story(self, actor: Account, story_id: int) -> None:
        """
        Delete own story.

        Raises:
            ResourceNotFoundException: If story does not exist or has expired
            PermissionDeniedException: If actor is not the author
        """
        story = await self._get_active_story(story_id)
        if story.author_id != actor.id:
            raise PermissionDeniedException("Not authorized to delete this story")

        await self._story_repository.delete_story(story_id)
        logger.info("Story %s deleted by account %s", story_id, actor.id)

    async def delete_expired_stories(self) -> int:
        deleted = await self._story_repository.delete_expired(self._clock())
        if deleted:
            logger.info("Deleted %d expired stories", deleted)
        return deleted

    async def _get_active_story(self, story_id: int) -> Story:
        story = await self._story_repository.get_active_story(story_id, self._clock())
        if story is None:
            raise ResourceNotFoundException("Story not found", code="STORY_NOT_FOUND")
        return story
