"""Moderator console. Every route resolves the acting user through ``get_current_moderator``."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from board.api.deps import get_async_db, get_current_moderator
from board.models.enums import ReportStatus, ReportTargetType
from board.models.user import User
from board.schemas.admin import AdminStatsResponse, UserListResponse
from board.schemas.auth import UserResponse
from board.schemas.comment import CommentListResponse, CommentResponse
from board.schemas.post import PostListResponse, PostResponse
from board.schemas.report import ReportListResponse, ReportResponse, ReportStatsResponse, ReportStatusUpdate
from board.schemas.user import RoleChange
from board.services.async_admin import AsyncAdminService
from board.services.async_report import AsyncReportService

router = APIRouter()


@router.get("/stats", response_model=AdminStatsResponse)
async def admin_stats(
    db: AsyncSession = Depends(get_async_db),
    moderator: User = Depends(get_current_moderator)
):
    return await AsyncAdminService.admin_stats(db, moderator)


@router.get("/posts", response_model=PostListResponse)
async def list_all_posts(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_async_db),
    moderator: User = Depends(get_current_moderator)
):
    posts, total_count = await AsyncAdminService.list_all_posts(db, moderator, limit=limit, offset=offset)
    return PostListResponse(posts=[PostResponse.from_post(p) for p in posts], total_count=total_count)


@router.get("/comments", response_model=CommentListResponse)
async def list_all_comments(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_async_db),
    moderator: User = Depends(get_current_moderator)
):
    comments, total_count = await AsyncAdminService.list_all_comments(db, moderator, limit=limit, offset=offset)
    return CommentListResponse(
        comments=[CommentResponse.from_comment(c) for c in comments], total_count=total_count
    )


@router.get("/users", response_model=UserListResponse)
async def list_all_users(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_async_db),
    moderator: User = Depends(get_current_moderator)
):
    users, total_count = await AsyncAdminService.list_all_users(db, moderator, limit=limit, offset=offset)
    return UserListResponse(users=[UserResponse.model_validate(u) for u in users], total_count=total_count)


@router.delete("/posts/{post_id}", response_model=PostResponse)
async def force_delete_post(
    post_id: int,
    db: AsyncSession = Depends(get_async_db),
    moderator: User = Depends(get_current_moderator)
):
    post = await AsyncAdminService.force_delete_post(db, post_id, moderator)
    return PostResponse.from_post(post)


@router.delete("/comments/{comment_id}", response_model=CommentResponse)
async def force_delete_comment(
    comment_id: int,
    db: AsyncSession = Depends(get_async_db),
    moderator: User = Depends(get_current_moderator)
):
    comment = await AsyncAdminService.force_delete_comment(db, comment_id, moderator)
    return CommentResponse.from_comment(comment)


@router.put("/users/{username}/role", response_model=UserResponse)
async def change_user_role(
    username: str,
    role_change: RoleChange,
    db: AsyncSession = Depends(get_async_db),
    moderator: User = Depends(get_current_moderator)
):
    return await AsyncAdminService.change_user_role(db, username, role_change.role, moderator)


@router.get("/reports/stats", response_model=ReportStatsResponse)
async def report_stats(
    db: AsyncSession = Depends(get_async_db),
    moderator: User = Depends(get_current_moderator)
):
    return await AsyncReportService.report_stats(db)


@router.get("/posts/{post_id}/reports", response_model=List[ReportResponse])
async def reports_for_post(
    post_id: int,
    db: AsyncSession = Depends(get_async_db),
    moderator: User = Depends(get_current_moderator)
):
    reports = await AsyncReportService.reports_for_post(db, post_id)
    return [ReportResponse.from_report(r) for r in reports]


@router.get("/comments/{comment_id}/reports", response_model=List[ReportResponse])
async def reports_for_comment(
    comment_id: int,
    db: AsyncSession = Depends(get_async_db),
    moderator: User = Depends(get_current_moderator)
):
    reports = await AsyncReportService.reports_for_comment(db, comment_id)
    return [ReportResponse.from_report(r) for r in reports]


@router.get("/reports/{target_type}", response_model=ReportListResponse)
async def list_reports(
    target_type: ReportTargetType,
    status: Optional[ReportStatus] = None,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_async_db),
    moderator: User = Depends(get_current_moderator)
):
    """Reports of one target type, newest first. Without ``status`` every report is listed."""
    if status is None:
        reports, total_count = await AsyncReportService.recent_reports(db, target_type, limit=limit, offset=offset)
    else:
        reports, total_count = await AsyncReportService.reports_by_status(
            db, target_type, status, limit=limit, offset=offset
        )
    return ReportListResponse(reports=[ReportResponse.from_report(r) for r in reports], total_count=total_count)


@router.put("/reports/{target_type}/{report_id}", response_model=ReportResponse)
async def update_report_status(
    target_type: ReportTargetType,
    report_id: int,
    status_update: ReportStatusUpdate,
    db: AsyncSession = Depends(get_async_db),
    moderator: User = Depends(get_current_moderator)
):
    report = await AsyncReportService.update_report_status(
        db, target_type, report_id, status_update.status, moderator
    )
    return ReportResponse.from_report(report)
