"""Post API routes."""

from fastapi import APIRouter, Depends, Path, status

from socialhub.api.dependencies import get_current_user, get_pagination, get_post_service
from socialhub.api.schemas import (
    ERROR_RESPONSES,
    MAX_RESOURCE_ID,
    ErrorResponse,
    MessageResponse,
    PageParams,
    PaginationResponse,
    SuccessResponse,
)
from socialhub.core.auth.entities import Account
from socialhub.core.services.post_service import PostService
from .schemas import (
    BookmarkListData,
    CommentCreateRequest,
    CommentData,
    CommentListData,
    CommentResponse,
    PostCreateRequest,
    PostData,
    PostListData,
    PostResponse,
)

router = APIRouter(prefix="/posts", tags=["Posts"])

NOT_FOUND = {404: {"model": ErrorResponse, "description": "Post not found"}}


def _post_list(posts, paging: PageParams, total: int) -> PostListData:
    return PostListData(
        posts=[PostResponse.model_validate(post) for post in posts],
        pagination=PaginationResponse.build(paging.page, paging.limit, total),
    )


@router.post(
    "",
    response_model=SuccessResponse[PostData],
    status_code=status.HTTP_201_CREATED,
    summary="Create post",
    responses=ERROR_RESPONSES,
)
async def create_post(
    post_data: PostCreateRequest,
    current_user: Account = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service),
) -> SuccessResponse[PostData]:
    post = await post_service.create_post(current_user, post_data.content)
    return SuccessResponse(data=PostData(post=PostResponse.model_validate(post)))


@router.get(
    "/feed/following",
    response_model=SuccessResponse[PostListData],
    summary="Posts by followed accounts",
    responses=ERROR_RESPONSES,
)
async def following_feed(
    paging: PageParams = Depends(get_pagination),
    current_user: Account = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service),
) -> SuccessResponse[PostListData]:
    posts, total = await post_service.list_following_feed(current_user, paging.page, paging.limit)
    return SuccessResponse(data=_post_list(posts, paging, total))


@router.get(
    "/feed/global",
    response_model=SuccessResponse[PostListData],
    summary="All posts, newest first",
)
async def global_feed(
    paging: PageParams = Depends(get_pagination),
    post_service: PostService = Depends(get_post_service),
) -> SuccessResponse[PostListData]:
    posts, total = await post_service.list_global_feed(paging.page, paging.limit)
    return SuccessResponse(data=_post_list(posts, paging, total))


@router.get(
    "/bookmarks/me",
    response_model=SuccessResponse[BookmarkListData],
    summary="Bookmarked posts",
    responses=ERROR_RESPONSES,
)
async def list_bookmarks(
    paging: PageParams = Depends(get_pagination),
    current_user: Account = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service),
) -> SuccessResponse[BookmarkListData]:
    posts, total = await post_service.list_bookmarks(current_user, paging.page, paging.limit)
    return SuccessResponse(
        data=BookmarkListData(
            bookmarks=[PostResponse.model_validate(post) for post in posts],
            pagination=PaginationResponse.build(paging.page, paging.limit, total),
        )
    )


@router.get(
    "/user/{user_id}",
    response_model=SuccessResponse[PostListData],
    summary="Posts by one account",
)
async def user_posts(
    user_id: int = Path(..., ge=1, le=MAX_RESOURCE_ID),
    paging: PageParams = Depends(get_pagination),
    post_service: PostService = Depends(get_post_service),
) -> SuccessResponse[PostListData]:
    posts, total = await post_service.list_user_posts(user_id, paging.page, paging.limit)
    return SuccessResponse(data=_post_list(posts, paging, total))


@router.get(
    "/{post_id}",
    response_model=SuccessResponse[PostData],
    summary="Get post",
    responses=NOT_FOUND,
)
async def get_post(
    post_id: int = Path(..., ge=1, le=MAX_RESOURCE_ID),
    post_service: PostService = Depends(get_post_service),
) -> SuccessResponse[PostData]:
    post = await post_service.get_post(post_id)
    return SuccessResponse(data=PostData(post=PostResponse.model_validate(post)))


@router.delete(
    "/{post_id}",
    response_model=MessageResponse,
    summary="Delete own post",
    responses={
        403: {"model": ErrorResponse, "description": "Not the author"},
        **NOT_FOUND,
    },
)
async def delete_post(
    post_id: int = Path(..., ge=1, le=MAX_RESOURCE_ID),
    current_user: Account = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service),
) -> MessageResponse:
    await post_service.delete_post(current_user, post_id)
    return MessageResponse(message="Post deleted successfully")


@router.post(
    "/{post_id}/like",
    response_model=SuccessResponse[PostData],
    summary="Like post",
    responses={409: {"model": ErrorResponse, "description": "Already liked"}, **NOT_FOUND},
)
async def like_post(
    post_id: int = Path(..., ge=1, le=MAX_RESOURCE_ID),
    current_user: Account = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service),
) -> SuccessResponse[PostData]:
    post = await post_service.like_post(current_user, post_id)
    return SuccessResponse(data=PostData(post=PostResponse.model_validate(post)))


@router.delete(
    "/{post_id}/like",
    response_model=SuccessResponse[PostData],
    summary="Unlike post",
    responses=NOT_FOUND,
)
async def unlike_post(
    post_id: int = Path(..., ge=1, le=MAX_RESOURCE_ID),
    current_user: Account = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service),
) -> SuccessResponse[PostData]:
    post = await post_service.unlike_post(current_user, post_id)
    return SuccessResponse(data=PostData(post=PostResponse.model_validate(post)))


@router.post(
    "/{post_id}/comment",
    response_model=SuccessResponse[CommentData],
    status_code=status.HTTP_201_CREATED,
    summary="Comment on post",
    responses=NOT_FOUND,
)
async def add_comment(
    comment_data: CommentCreateRequest,
    post_id: int = Path(..., ge=1, le=MAX_RESOURCE_ID),
    current_user: Account = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service),
) -> SuccessResponse[CommentData]:
    comment = await post_service.add_comment(current_user, post_id, comment_data.content)
    return SuccessResponse(data=CommentData(comment=CommentResponse.model_validate(comment)))


@router.get(
    "/{post_id}/comments",
    response_model=SuccessResponse[CommentListData],
    summary="List comments",
    responses=NOT_FOUND,
)
async def list_comments(
    post_id: int = Path(..., ge=1, le=MAX_RESOURCE_ID),
    paging: PageParams = Depends(get_pagination),
    post_service: PostService = Depends(get_post_service),
) -> SuccessResponse[CommentListData]:
    comments, total = await post_service.list_comments(post_id, paging.page, paging.limit)
    return SuccessResponse(
        data=CommentListData(
            comments=[CommentResponse.model_validate(comment) for comment in comments],
            pagination=PaginationResponse.build(paging.page, paging.limit, total),
        )
    )


@router.post(
    "/{post_id}/repost",
    response_model=SuccessResponse[PostData],
    status_code=status.HTTP_201_CREATED,
    summary="Repost post",
    responses={409: {"model": ErrorResponse, "description": "Already reposted"}, **NOT_FOUND},
)
async def repost(
    post_id: int = Path(..., ge=1, le=MAX_RESOURCE_ID),
    current_user: Account = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service),
) -> SuccessResponse[PostData]:
    post = await post_service.repost(current_user, post_id)
    return SuccessResponse(data=PostData(post=PostResponse.model_validate(post)))


@router.post(
    "/{post_id}/bookmark",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Bookmark post",
    responses={409: {"model": ErrorResponse, "description": "Already bookmarked"}, **NOT_FOUND},
)
async def bookmark_post(
    post_id: int = Path(..., ge=1, le=MAX_RESOURCE_ID),
    current_user: Account = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service),
) -> MessageResponse:
    await post_service.bookmark_post(current_user, post_id)
    return MessageResponse(message="Post bookmarked successfully")


@router.delete(
    "/{post_id}/bookmark",
    response_model=MessageResponse,
    summary="Remove bookmark",
    responses={404: {"model": ErrorResponse, "description": "Bookmark not found"}},
)
async def remove_bookmark(
    post_id: int = Path(..., ge=1, le=MAX_RESOURCE_ID),
    current_user: Account = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service),
) -> MessageResponse:
    await post_service.remove_bookmark(current_user, post_id)
    return MessageResponse(message="Bookmark removed successfully")
