from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from board.api.deps import get_async_db, get_current_user
from board.models.user import User
from board.schemas.comment import CommentCreate, CommentResponse, CommentUpdate
from board.schemas.reaction import LikeToggleResponse
from board.schemas.report import ReportCreate, ReportResponse
from board.services.async_comment import AsyncCommentService
from board.services.async_like import AsyncCommentLikeService
from board.services.async_report import AsyncReportService

router = APIRouter()


@router.get("/{comment_id}", response_model=CommentResponse)
async def get_comment(comment_id: int, db: AsyncSession = Depends(get_async_db)):
    comment = await AsyncCommentService.get_comment(db, comment_id)
    return CommentResponse.from_comment(comment)


@router.put("/{comment_id}", response_model=CommentResponse)
async def update_comment(
    comment_id: int,
    comment: CommentUpdate,
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(get_current_user)
):
    updated = await AsyncCommentService.update_comment(db, comment_id, comment.content, current_user)
    return CommentResponse.from_comment(updated)


@router.delete("/{comment_id}", response_model=CommentResponse)
async def delete_comment(
    comment_id: int,
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(get_current_user)
):
    deleted = await AsyncCommentService.soft_delete_comment(db, comment_id, current_user)
    return CommentResponse.from_comment(deleted)


@router.post("/{comment_id}/restore", response_model=CommentResponse)
async def restore_comment(
    comment_id: int,
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(get_current_user)
):
    restored = await AsyncCommentService.restore_comment(db, comment_id, current_user)
    return CommentResponse.from_comment(restored)


@router.post("/{comment_id}/replies", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def create_reply(
    comment_id: int,
    reply: CommentCreate,
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(get_current_user)
):
    created = await AsyncCommentService.create_reply(db, comment_id, reply.content, current_user)
    return CommentResponse.from_comment(created)


@router.get("/{comment_id}/replies", response_model=List[CommentResponse])
async def list_replies(comment_id: int, db: AsyncSession = Depends(get_async_db)):
    replies = await AsyncCommentService.replies_by_parent(db, comment_id)
    return [CommentResponse.from_comment(r) for r in replies]


@router.post("/{comment_id}/like", response_model=LikeToggleResponse)
async def toggle_like(
    comment_id: int,
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(get_current_user)
):
    """Like the comment, or take the like back if already given."""
    user_id = current_user.id
    result = await AsyncCommentLikeService.toggle_like(db, comment_id, user_id)
    return LikeToggleResponse(
        comment_id=comment_id,
        result=result,
        like_count=await AsyncCommentLikeService.like_count(db, comment_id),
    )


@router.post("/{comment_id}/reports", response_model=ReportResponse, status_code=status.HTTP_201_CREATED)
async def report_comment(
    comment_id: int,
    report: ReportCreate,
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(get_current_user)
):
    created = await AsyncReportService.report_comment(db, comment_id, current_user.id, report.reason)
    return ReportResponse.from_report(created)
