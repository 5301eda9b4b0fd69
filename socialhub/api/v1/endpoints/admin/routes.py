"""Admin API routes.

Every route requires a valid access token and the admin flag.
"""

from fastapi import APIRouter, Depends

from socialhub.api.dependencies import (
    get_admin_service,
    get_current_user,
    get_pagination,
    verify_admin,
)
from socialhub.api.schemas import (
    ERROR_RESPONSES,
    AccountListData,
    AccountResponse,
    ErrorResponse,
    PageParams,
    PaginationResponse,
    SuccessResponse,
)
from socialhub.core.services.admin_service import AdminService
from .schemas import StatsData, StatsResponse

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(get_current_user), Depends(verify_admin)],
    responses={
        **ERROR_RESPONSES,
        403: {"model": ErrorResponse, "description": "Admin access required"},
    },
)


@router.get(
    "/stats",
    response_model=SuccessResponse[StatsData],
    summary="Platform statistics",
)
async def get_stats(
    admin_service: AdminService = Depends(get_admin_service),
) -> SuccessResponse[StatsData]:
    stats = await admin_service.get_stats()
    return SuccessResponse(data=StatsData(stats=StatsResponse(**stats)))


@router.get(
    "/users",
    response_model=SuccessResponse[AccountListData],
    summary="List all users",
)
async def list_users(
    paging: PageParams = Depends(get_pagination),
    admin_service: AdminService = Depends(get_admin_service),
) -> SuccessResponse[AccountListData]:
    accounts, total = await admin_service.list_users(paging.page, paging.limit)
    return SuccessResponse(
        data=AccountListData(
            users=[AccountResponse.model_validate(account) for account in accounts],
            pagination=PaginationResponse.build(paging.page, paging.limit, total),
        )
    )
