from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from board.api.deps import get_async_db, get_current_user
from board.models.user import User
from board.schemas.comment import CommentCreate, CommentListResponse, CommentResponse
from board.schemas.post import NoticeUpdate, PostCreate, PostListResponse, PostResponse, PostUpdate
from board.schemas.reaction import VoteRequest, VoteStatusResponse
from board.schemas.report import ReportCreate, ReportResponse
from board.services.async_comment import AsyncCommentService
from board.services.async_post import AsyncPostService
from board.services.async_report import AsyncReportService
from board.services.async_search import DEFAULT_SEARCH_TYPE, AsyncSearchService
from board.services.async_vote import AsyncVoteService

router = APIRouter()

# Post ids this client has already been counted for, kept for half an hour
VIEWED_POSTS_COOKIE = "viewed_posts"
VIEWED_POSTS_MAX_AGE = 30 * 60


def _viewed_post_ids(request: Request) -> set:
    raw = request.cookies.get(VIEWED_POSTS_COOKIE, "")
    return {int(part) for part in raw.split(".") if part.isdigit()}


async def _vote_status(db: AsyncSession, post_id: int, user_id: int, like_count: int) -> VoteStatusResponse:
    return VoteStatusResponse(
        post_id=post_id,
        vote=await AsyncVoteService.get_vote_status(db, post_id, user_id),
        like_count=like_count,
        upvote_count=await AsyncVoteService.upvote_count(db, post_id),
        downvote_count=await AsyncVoteService.downvote_count(db, post_id),
    )


@router.get("", response_model=PostListResponse)
async def list_posts(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    category: Optional[str] = None,
    db: AsyncSession = Depends(get_async_db)
):
    """Live posts, notices first."""
    posts, total_count = await AsyncPostService.list_posts(db, limit=limit, offset=offset, category=category)
    return PostListResponse(posts=[PostResponse.from_post(p) for p in posts], total_count=total_count)


@router.get("/search", response_model=PostListResponse)
async def search_posts(
    search_type: str = Query(DEFAULT_SEARCH_TYPE),
    keyword: str = "",
    category: Optional[str] = None,
    author: Optional[str] = None,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_async_db)
):
    """Keyword search over live posts. A blank keyword returns an empty page."""
    posts, total_count = await AsyncSearchService.search(
        db, search_type, keyword, category=category, author=author, limit=limit, offset=offset
    )
    return PostListResponse(posts=[PostResponse.from_post(p) for p in posts], total_count=total_count)


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    post: PostCreate,
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(get_current_user)
):
    created = await AsyncPostService.create_post(
        db, title=post.title, content=post.content, category=post.category, author=current_user
    )
    return PostResponse.from_post(created)


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: int,
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_async_db)
):
    """Read a post. The view counter moves once per client within the cookie lifetime."""
    viewed = _viewed_post_ids(request)
    if post_id in viewed:
        post = await AsyncPostService.get_post(db, post_id)
    else:
        post = await AsyncPostService.increase_view_count(db, post_id)
        viewed.add(post_id)
        response.set_cookie(
            VIEWED_POSTS_COOKIE,
            ".".join(str(i) for i in sorted(viewed)),
            max_age=VIEWED_POSTS_MAX_AGE,
            httponly=True,
        )
    return PostResponse.from_post(post)


@router.put("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: int,
    post: PostUpdate,
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(get_current_user)
):
    updated = await AsyncPostService.update_post(
        db, post_id, title=post.title, content=post.content, category=post.category,
        requesting_user=current_user,
    )
    return PostResponse.from_post(updated)


@router.delete("/{post_id}", response_model=PostResponse)
async def delete_post(
    post_id: int,
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(get_current_user)
):
    """Soft delete. Comments stay as they are."""
    deleted = await AsyncPostService.soft_delete_post(db, post_id, current_user)
    return PostResponse.from_post(deleted)


@router.post("/{post_id}/restore", response_model=PostResponse)
async def restore_post(
    post_id: int,
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(get_current_user)
):
    restored = await AsyncPostService.restore_post(db, post_id, current_user)
    return PostResponse.from_post(restored)


@router.put("/{post_id}/notice", response_model=PostResponse)
async def set_notice(
    post_id: int,
    notice: NoticeUpdate,
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(get_current_user)
):
    post = await AsyncPostService.set_notice(db, post_id, notice.is_notice, current_user)
    return PostResponse.from_post(post)


@router.post("/{post_id}/vote", response_model=VoteStatusResponse)
async def vote(
    post_id: int,
    vote_request: VoteRequest,
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(get_current_user)
):
    user_id = current_user.id
    post = await AsyncVoteService.vote(db, post_id, user_id, vote_request.up)
    return await _vote_status(db, post_id, user_id, post.like_count)


@router.delete("/{post_id}/vote", response_model=VoteStatusResponse)
async def cancel_vote(
    post_id: int,
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(get_current_user)
):
    user_id = current_user.id
    post = await AsyncVoteService.cancel_vote(db, post_id, user_id)
    return await _vote_status(db, post_id, user_id, post.like_count)


@router.get("/{post_id}/vote", response_model=VoteStatusResponse)
async def get_vote_status(
    post_id: int,
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(get_current_user)
):
    post = await AsyncPostService.get_post(db, post_id, include_deleted=True)
    return await _vote_status(db, post_id, current_user.id, post.like_count)


@router.get("/{post_id}/comments", response_model=CommentListResponse)
async def list_comments(
    post_id: int,
    include_replies: bool = False,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_async_db)
):
    """Top-level comments by default; ``include_replies`` returns the whole live thread."""
    if include_replies:
        comments, total_count = await AsyncCommentService.all_comments_by_post(db, post_id, limit=limit, offset=offset)
    else:
        comments, total_count = await AsyncCommentService.comments_by_post(db, post_id, limit=limit, offset=offset)
    return CommentListResponse(
        comments=[CommentResponse.from_comment(c) for c in comments], total_count=total_count
    )


@router.post("/{post_id}/comments", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def create_comment(
    post_id: int,
    comment: CommentCreate,
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(get_current_user)
):
    created = await AsyncCommentService.create_comment(db, post_id, comment.content, current_user)
    return CommentResponse.from_comment(created)


@router.get("/{post_id}/comment-count")
async def comment_count(post_id: int, db: AsyncSession = Depends(get_async_db)) -> Any:
    return {"post_id": post_id, "comment_count": await AsyncPostService.comment_count(db, post_id)}


@router.post("/{post_id}/reports", response_model=ReportResponse, status_code=status.HTTP_201_CREATED)
async def report_post(
    post_id: int,
    report: ReportCreate,
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(get_current_user)
):
    created = await AsyncReportService.report_post(db, post_id, current_user.id, report.reason)
    return ReportResponse.from_report(created)
