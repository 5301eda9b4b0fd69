"""Notification database models."""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from socialhub.core.services.accounts.models import utc_now
from socialhub.infrastructure.database.connection import Base


class NotificationModel(Base):
    """Database model for activity notifications."""

    __tablename__ = "notifications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    recipient_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="User being notified"
    )

    actor_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        doc="User who performed the action"
    )

    type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        doc="Notification type (like, comment, follow, repost)"
    )

    post_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=True
    )

    comment_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("comments.id", ondelete="CASCADE"), nullable=True
    )

    read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=func.now(),
        doc="Notification creation timestamp"
    )

    def __repr__(self) -> str:
        """String representation of notification model."""
        return f"<NotificationModel(id={self.id}, type='{self.type}', recipient_id={self.recipient_id})>"
