"""Admin API schemas."""

from pydantic import Field

from socialhub.api.schemas import CamelModel


class StatsResponse(CamelModel):
    """Platform statistics."""

    total_users: int = Field(..., examples=[1250])
    total_posts: int = Field(..., examples=[8410])
    new_users_this_week: int = Field(..., examples=[37])
    online_users: int = Field(..., description="Accounts with a live realtime connection", examples=[12])


class StatsData(CamelModel):
    stats: StatsResponse
