"""Post repository implementation."""

from typing import List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from socialhub.core.domain.entities import Comment, Post
from socialhub.core.services.accounts.models import FollowModel, UserModel
from socialhub.core.services.interfaces import PostRepositoryInterface
from socialhub.core.services.notifications.models import NotificationModel
from socialhub.core.services.posts.models import (
    BookmarkModel,
    CommentModel,
    PostLikeModel,
    PostModel,
)
from .account_repository import summary_from_model


class SqlPostRepository(PostRepositoryInterface):
    """SQLAlchemy implementation of post repository."""

    def __init__(self, session: AsyncSession):
        """
        Initialize post repository.

        Args:
            session: Database session
        """
        self._session = session

    async def create_post(self, post: Post) -> Post:
        post_model = PostModel(
            author_id=post.author_id,
            content=post.content,
            original_post_id=post.original_post_id,
        )
        self._session.add(post_model)
        await self._session.flush()

        if post.original_post_id is not None:
            await self._session.execute(
                update(PostModel)
                .where(PostModel.id == post.original_post_id)
                .values(repost_count=PostModel.repost_count + 1)
            )

        return await self.get_post(post_model.id)

    async def get_post(self, post_id: int) -> Optional[Post]:
        """
        Get post by ID with author summary.

        Args:
            post_id: Post identifier

        Returns:
            Post entity if found, None otherwise
        """
        result = await self._session.execute(
            select(PostModel, UserModel)
            .join(UserModel, UserModel.id == PostModel.author_id)
            .where(PostModel.id == post_id)
            .execution_options(populate_existing=True)
        )
        row = result.one_or_none()
        if row is None:
            return None
        return self._model_to_entity(*row)

    async def delete_post(self, post_id: int) -> bool:
        """
        Delete post together with its likes, comments, bookmarks and notifications.

        Reposts of the deleted post are kept and detached from it.
        """
        post_model = await self._session.get(PostModel, post_id)
        if post_model is None:
            return False

        await self._session.execute(
            delete(NotificationModel).where(NotificationModel.post_id == post_id)
        )
        await self._session.execute(delete(CommentModel).where(CommentModel.post_id == post_id))
        await self._session.execute(delete(PostLikeModel).where(PostLikeModel.post_id == post_id))
        await self._session.execute(delete(BookmarkModel).where(BookmarkModel.post_id == post_id))
        await self._session.execute(
            update(PostModel)
            .where(PostModel.original_post_id == post_id)
            .values(original_post_id=None)
        )
        if post_model.original_post_id is not None:
            await self._session.execute(
                update(PostModel)
                .where(PostModel.id == post_model.original_post_id, PostModel.repost_count > 0)
                .values(repost_count=PostModel.repost_count - 1)
            )

        await self._session.delete(post_model)
        await self._session.flush()
        return True

    async def add_like(self, post_id: int, user_id: int) -> bool:
        existing = await self._session.execute(
            select(PostLikeModel.id).where(
                PostLikeModel.post_id == post_id, PostLikeModel.user_id == user_id
            )
        )
        if existing.scalar_one_or_none() is not None:
            return False

        self._session.add(PostLikeModel(post_id=post_id, user_id=user_id))
        await self._session.flush()
        await self._session.execute(
            update(PostModel)
            .where(PostModel.id == post_id)
            .values(like_count=PostModel.like_count + 1)
        )
        return True

    async def remove_like(self, post_id: int, user_id: int) -> bool:
        result = await self._session.execute(
            delete(PostLikeModel).where(
                PostLikeModel.post_id == post_id, PostLikeModel.user_id == user_id
            )
        )
        if not result.rowcount:
            return False

        await self._session.execute(
            update(PostModel)
            .where(PostModel.id == post_id, PostModel.like_count > 0)
            .values(like_count=PostModel.like_count - 1)
        )
        return True

    async def has_reposted(self, post_id: int, user_id: int) -> bool:
        result = await self._session.execute(
            select(func.count(PostModel.id)).where(
                PostModel.original_post_id == post_id, PostModel.author_id == user_id
            )
        )
        return result.scalar_one() > 0

    async def add_comment(self, comment: Comment) -> Comment:
        comment_model = CommentModel(
            post_id=comment.post_id,
            author_id=comment.author_id,
            content=comment.content,
        )
        self._session.add(comment_model)
        await self._session.flush()
        await self._session.execute(
            update(PostModel)
            .where(PostModel.id == comment.post_id)
            .values(comment_count=PostModel.comment_count + 1)
        )

        author = await self._session.get(UserModel, comment.author_id)
        return self._comment_to_entity(comment_model, author)

    async def list_comments(self, post_id: int, offset: int, limit: int) -> List[Comment]:
        result = await self._session.execute(
            select(CommentModel, UserModel)
            .join(UserModel, UserModel.id == CommentModel.author_id)
            .where(CommentModel.post_id == post_id)
            .order_by(CommentModel.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return [self._comment_to_entity(*row) for row in result.all()]

    async def count_comments(self, post_id: int) -> int:
        result = await self._session.execute(
            select(func.count(CommentModel.id)).where(CommentModel.post_id == post_id)
        )
        return result.scalar_one()

    async def list_posts(
        self, offset: int, limit: int, author_id: Optional[int] = None
    ) -> List[Post]:
        query = self._select_posts()
        if author_id is not None:
            query = query.where(PostModel.author_id == author_id)
        return await self._fetch_posts(query.order_by(PostModel.id.desc()), offset, limit)

    async def count_posts(self, author_id: Optional[int] = None) -> int:
        query = select(func.count(PostModel.id))
        if author_id is not None:
            query = query.where(PostModel.author_id == author_id)
        result = await self._session.execute(query)
        return result.scalar_one()

    async def list_following_feed(self, user_id: int, offset: int, limit: int) -> List[Post]:
        """
        List posts written by the accounts ``user_id`` follows.

        Args:
            user_id: Reading account
            offset: Number of posts to skip
            limit: Maximum number of posts

        Returns:
            Posts ordered newest first
        """
        query = (
            self._select_posts()
            .where(PostModel.author_id.in_(self._followed_by(user_id)))
            .order_by(PostModel.id.desc())
        )
        return await self._fetch_posts(query, offset, limit)

    async def count_following_feed(self, user_id: int) -> int:
        result = await self._session.execute(
            select(func.count(PostModel.id)).where(
                PostModel.author_id.in_(self._followed_by(user_id))
            )
        )
        return result.scalar_one()

    async def add_bookmark(self, post_id: int, user_id: int) -> bool:
        existing = await self._session.execute(
            select(BookmarkModel.id).where(
                BookmarkModel.post_id == post_id, BookmarkModel.user_id == user_id
            )
        )
        if existing.scalar_one_or_none() is not None:
            return False

        self._session.add(BookmarkModel(post_id=post_id, user_id=user_id))
        await self._session.flush()
        return True

    async def remove_bookmark(self, post_id: int, user_id: int) -> bool:
        result = await self._session.execute(
            delete(BookmarkModel).where(
                BookmarkModel.post_id == post_id, BookmarkModel.user_id == user_id
            )
        )
        return bool(result.rowcount)

    async def list_bookmarked(self, user_id: int, offset: int, limit: int) -> List[Post]:
        query = (
            self._select_posts()
            .join(BookmarkModel, BookmarkModel.post_id == PostModel.id)
            .where(BookmarkModel.user_id == user_id)
            .order_by(BookmarkModel.id.desc())
        )
        return await self._fetch_posts(query, offset, limit)

    async def count_bookmarks(self, user_id: int) -> int:
        result = await self._session.execute(
            select(func.count(BookmarkModel.id)).where(BookmarkModel.user_id == user_id)
        )
        return result.scalar_one()

    @staticmethod
    def _select_posts():
        return select(PostModel, UserModel).join(UserModel, UserModel.id == PostModel.author_id)

    @staticmethod
    def _followed_by(user_id: int):
        return select(FollowModel.following_id).where(FollowModel.follower_id == user_id)

    async def _fetch_posts(self, query, offset: int, limit: int) -> List[Post]:
        result = await self._session.execute(query.offset(offset).limit(limit))
        return [self._model_to_entity(*row) for row in result.all()]

    def _model_to_entity(self, model: PostModel, author: Optional[UserModel] = None) -> Post:
        """
        Convert database model to domain entity.

        Args:
            model: Post database model
            author: Author database model, if loaded

        Returns:
            Post domain entity
        """
        return Post(
            id=model.id,
            author_id=model.author_id,
            content=model.content,
            original_post_id=model.original_post_id,
            like_count=model.like_count,
            comment_count=model.comment_count,
            repost_count=model.repost_count,
            author=summary_from_model(author) if author else None,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _comment_to_entity(
        self, model: CommentModel, author: Optional[UserModel] = None
    ) -> Comment:
        return Comment(
            id=model.id,
            post_id=model.post_id,
            author_id=model.author_id,
            content=model.content,
            author=summary_from_model(author) if author else None,
            created_at=model.created_at,
        )
