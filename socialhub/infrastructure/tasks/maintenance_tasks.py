"""Celery tasks for system maintenance and cleanup."""

import logging
from datetime import datetime, timezone
from typing import Dict

from socialhub.infrastructure.tasks.celery_app import celery_app
from socialhub.utils.async_helpers import run_async

logger = logging.getLogger(__name__)


@celery_app.task
def cleanup_expired_reset_tokens() -> Dict:
    """
    Clear password reset tickets whose expiry has passed.

    Returns:
        Cleanup result with count of cleared accounts
    """
    try:
        result = run_async(_cleanup_reset_tokens_internal())
        return {
            "status": "COMPLETED",
            "tokens_cleared": result["tokens_cleared"],
            "completed_at": datetime.now(timezone.utc).isoformat(),
        }
    except Exception as e:
        logger.exception("Reset token cleanup failed")
        return {
            "status": "FAILED",
            "error": str(e),
            "failed_at": datetime.now(timezone.utc).isoformat(),
        }


async def _cleanup_reset_tokens_internal() -> Dict:
    """Internal reset token cleanup logic."""
    from socialhub.infrastructure.database.repositories.account_repository import (
        SqlAccountRepository,
    )
    from socialhub.infrastructure.database.session import get_session_maker

    session_maker = get_session_maker()
    async with session_maker() as session:
        account_repo = SqlAccountRepository(session)
        tokens_cleared = await account_repo.cleanup_expired_reset_tokens(
            datetime.now(timezone.utc)
        )
        await session.commit()

        return {"tokens_cleared": tokens_cleared}


@celery_app.task
def cleanup_expired_stories() -> Dict:
    """
    Delete stories whose 24 hour lifetime is over.

    Returns:
        Cleanup result with count of deleted stories
    """
    try:
        result = run_async(_cleanup_stories_internal())
        return {
            "status": "COMPLETED",
            "stories_deleted": result["stories_deleted"],
            "completed_at": datetime.now(timezone.utc).isoformat(),
        }
    except Exception as e:
        logger.exception("Story cleanup failed")
        return {
            "status": "FAILED",
            "error": str(e),
            "failed_at": datetime.now(timezone.utc).isoformat(),
        }


async def _cleanup_stories_internal() -> Dict:
    """Internal expired story cleanup logic."""
    from socialhub.core.services.story_service import StoryService
    from socialhub.infrastructure.database.repositories.story_repository import (
        SqlStoryRepository,
    )
    from socialhub.infrastructure.database.session import get_session_maker
    from socialhub.settings import get_settings

    session_maker = get_session_maker()
    async with session_maker() as session:
        story_service = StoryService(SqlStoryRepository(session), get_settings())
        stories_deleted = await story_service.delete_expired_stories()
        await session.commit()

        return {"stories_deleted": stories_deleted}
