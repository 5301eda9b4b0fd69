"""Story database models."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from socialhub.core.services.accounts.models import utc_now
from socialhub.infrastructure.database.connection import Base


class StoryModel(Base):
    """
    Database model for ephemeral stories.

    Rows past ``expires_at`` are invisible to queries and removed by the
    hourly cleanup task.
    """

    __tablename__ = "stories"
    __table_args__ = (
        Index("ix_stories_author_expires", "author_id", "expires_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    author_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="Author of the story"
    )

    image: Mapped[str] = mapped_column(String(500), nullable=False, doc="Hosted image URL")

    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
        doc="Moment the story stops being visible"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=func.now(),
        doc="Story creation timestamp"
    )

    def __repr__(self) -> str:
        return f"<StoryModel(id={self.id}, author_id={self.author_id})>"


class StoryViewModel(Base):
    """Database model recording that a user has seen a story."""

    __tablename__ = "story_views"
    __table_args__ = (
        UniqueConstraint("story_id", "viewer_id", name="uq_story_views_pair"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    story_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("stories.id", ondelete="CASCADE"), nullable=False, index=True
    )
    viewer_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now, server_default=func.now()
    )
