"""Direct message database models."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from socialhub.core.services.accounts.models import utc_now
from socialhub.infrastructure.database.connection import Base


class MessageModel(Base):
    """
    Database model for direct messages.

    The ``seen`` flag drives unread counts and read receipts.
    """

    __tablename__ = "messages"
    __table_args__ = (
        Index("ix_messages_pair", "sender_id", "recipient_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    sender_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="Sending user"
    )

    recipient_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="Receiving user"
    )

    content: Mapped[str] = mapped_column(Text, nullable=False, doc="Message text")

    seen: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        doc="Whether the recipient has seen the message"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=func.now(),
        doc="Server-assigned send timestamp"
    )

    def __repr__(self) -> str:
        """String representation of message model."""
        return f"<MessageModel(id={self.id}, sender_id={self.sender_id}, recipient_id={self.recipient_id})>"
