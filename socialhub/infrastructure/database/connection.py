"""Declarative base for database models."""

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all database models."""

    metadata = MetaData(
        naming_convention={
            "ix": "ix_%(column_0_label)s",
            "uq": "uq_%(table_name)s_%(column_0_name)s",
            "ck": "ck_%(table_name)s_%(constraint_name)s",
            "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
            "pk": "pk_%(table_name)s",
        }
    )


def load_models() -> type[Base]:
    """
    Import every model module so ``Base.metadata`` knows all tables.

    Returns:
        The declarative base
    """
    from socialhub.core.services.accounts import models as account_models  # noqa: F401
    from socialhub.core.services.messages import models as message_models  # noqa: F401
    from socialhub.core.services.notifications import models as notification_models  # noqa: F401
    from socialhub.core.services.posts import models as post_models  # noqa: F401
    from socialhub.core.services.stories import models as story_models  # noqa: F401

    return Base
