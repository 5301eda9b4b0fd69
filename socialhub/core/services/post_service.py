"""Post service implementation."""

import logging
from typing import List, Tuple

from socialhub.core.auth.entities import Account
from socialhub.core.domain.entities import Comment, Post
from socialhub.core.domain.enums import NotificationType
from socialhub.core.exceptions import (
    BadRequestException,
    ConflictException,
    PermissionDeniedException,
    ResourceNotFoundException,
)
from .interfaces import PostRepositoryInterface
from .notification_service import NotificationService

logger = logging.getLogger(__name__)


class PostService:
    """
    Post lifecycle and engagement service.

    Likes, comments and reposts notify the post author through the
    notification service. Bookmarks are private and notify nobody.
    """

    def __init__(
        self,
        post_repository: PostRepositoryInterface,
        notification_service: NotificationService,
    ):
        """
        Initialize post service.

        Args:
            post_repository: Repository for posts, likes and comments
            notification_service: Service raising engagement notifications
        """
        self._post_repository = post_repository
        self._notification_service = notification_service

    async def create_post(self, author: Account, content: str) -> Post:
        post = await self._post_repository.create_post(
            Post(id=None, author_id=author.id, content=content.strip())
        )
        logger.info("Post %s created by account %s", post.id, author.id)
        return post

    async def get_post(self, post_id: int) -> Post:
        """
        Get post by ID.

        Raises:
            ResourceNotFoundException: If post does not exist
        """
        post = await self._post_repository.get_post(post_id)
        if post is None:
            raise ResourceNotFoundException("Post not found", code="POST_NOT_FOUND")
        return post

    async def delete_post(self, actor: Account, post_id: int) -> None:
        """
        Delete own post.

        Raises:
            ResourceNotFoundException: If post does not exist
            PermissionDeniedException: If actor is not the author
        """
        post = await self.get_post(post_id)
        if post.author_id != actor.id:
            raise PermissionDeniedException("Not authorized to delete this post")

        await self._post_repository.delete_post(post_id)
        logger.info("Post %s deleted by account %s", post_id, actor.id)

    async def like_post(self, actor: Account, post_id: int) -> Post:
        post = await self.get_post(post_id)

        if not await self._post_repository.add_like(post_id, actor.id):
            raise ConflictException("Post already liked", code="ALREADY_LIKED")

        await self._notification_service.create_notification(
            post.author_id, actor.id, NotificationType.LIKE, post_id=post_id
        )
        return await self.get_post(post_id)

    async def unlike_post(self, actor: Account, post_id: int) -> Post:
        await self.get_post(post_id)

        if not await self._post_repository.remove_like(post_id, actor.id):
            raise BadRequestException("Post not liked", code="NOT_LIKED")

        return await self.get_post(post_id)

    async def add_comment(self, actor: Account, post_id: int, content: str) -> Comment:
        post = await self.get_post(post_id)

        comment = await self._post_repository.add_comment(
            Comment(id=None, post_id=post_id, author_id=actor.id, content=content.strip())
        )

        await self._notification_service.create_notification(
            post.author_id,
            actor.id,
            NotificationType.COMMENT,
            post_id=post_id,
            comment_id=comment.id,
        )
        return comment

    async def list_comments(
        self, post_id: int, page: int, limit: int
    ) -> Tuple[List[Comment], int]:
        await self.get_post(post_id)

        offset = (page - 1) * limit
        comments = await self._post_repository.list_comments(post_id, offset, limit)
        total = await self._post_repository.count_comments(post_id)
        return comments, total

    async def repost(self, actor: Account, post_id: int) -> Post:
        """
        Repost a post, copying its content.

        Raises:
            ResourceNotFoundException: If post does not exist
            ConflictException: If actor already reposted it
        """
        original = await self.get_post(post_id)

        if await self._post_repository.has_reposted(post_id, actor.id):
            raise ConflictException("Post already reposted", code="ALREADY_REPOSTED")

        repost = await self._post_repository.create_post(
            Post(
                id=None,
                author_id=actor.id,
                content=original.content,
                original_post_id=post_id,
            )
        )

        await self._notification_service.create_notification(
            original.author_id, actor.id, NotificationType.REPOST, post_id=post_id
        )
        return repost

    async def list_user_posts(
        self, author_id: int, page: int, limit: int
    ) -> Tuple[List[Post], int]:
        offset = (page - 1) * limit
        posts = await self._post_repository.list_posts(offset, limit, author_id=author_id)
        total = await self._post_repository.count_posts(author_id=author_id)
        return posts, total

    async def list_global_feed(self, page: int, limit: int) -> Tuple[List[Post], int]:
        """Every post, newest first."""
        offset = (page - 1) * limit
        posts = await self._post_repository.list_posts(offset, limit)
        total = await self._post_repository.count_posts()
        return posts, total

    async def list_following_feed(
        self, reader: Account, page: int, limit: int
    ) -> Tuple[List[Post], int]:
        """Posts by the accounts ``reader`` follows, newest first."""
        offset = (page - 1) * limit
        posts = await self._post_repository.list_following_feed(reader.id, offset, limit)
        total = await self._post_repository.count_following_feed(reader.id)
        return posts, total

    async def bookmark_post(self, actor: Account, post_id: int) -> None:
        """
        Save a post to the actor's bookmarks.

        Raises:
            ResourceNotFoundException: If post does not exist
            ConflictException: If the post is already bookmarked
        """
        await self.get_post(post_id)

        if not await self._post_repository.add_bookmark(post_id, actor.id):
            raise ConflictException("Post already bookmarked", code="ALREADY_BOOKMARKED")

    async def remove_bookmark(self, actor: Account, post_id: int) -> None:
        if not await self._post_repository.remove_bookmark(post_id, actor.id):
            raise ResourceNotFoundException("Bookmark not found", code="BOOKMARK_NOT_FOUND")

    async def list_bookmarks(
        self, actor: Account, page: int, limit: int
    ) -> Tuple[List[Post], int]:
        offset = (page - 1) * limit
        posts = await self._post_repository.list_bookmarked(actor.id, offset, limit)
        total = await self._post_repository.count_bookmarks(actor.id)
        return posts, total
