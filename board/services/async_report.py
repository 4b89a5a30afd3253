"""
Report workflow for posts and comments.

A user may report a given target once. Moderators move reports between
PENDING, RESOLVED and DISMISSED; the status is a plain overwrite with no
transition rules. Reporting a soft-deleted target is allowed.
"""

from typing import Dict, List, Optional, Tuple, Type, Union

from sqlalchemy import desc, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from board.core.config import settings
from board.core.exceptions import AlreadyReportedError, ValidationError
from board.db.base_class import utc_now
from board.models.comment import Comment
from board.models.enums import ReportStatus, ReportTargetType
from board.models.post import Post
from board.models.report import CommentReport, PostReport
from board.models.user import User
from board.services.base import AsyncQueryUtils
from board.services.permissions import require_moderator
from board.utils.logger import report_logger

Report = Union[PostReport, CommentReport]

REPORT_MODELS: Dict[ReportTargetType, Type[Report]] = {
    ReportTargetType.POST: PostReport,
    ReportTargetType.COMMENT: CommentReport,
}


def _target_column(model: Type[Report]):
    return PostReport.post_id if model is PostReport else CommentReport.comment_id


class AsyncReportService:

    @staticmethod
    def validate_reason(reason: Optional[str]) -> None:
        """A reason is required and bounded in length."""
        if reason is None or not reason.strip():
            raise ValidationError("Report reason is required")
        if len(reason) > settings.REPORT_REASON_MAX_LENGTH:
            raise ValidationError(
                f"Report reason cannot exceed {settings.REPORT_REASON_MAX_LENGTH} characters"
            )

    @staticmethod
    async def _create_report(
        db: AsyncSession,
        model: Type[Report],
        target_id: int,
        reporter_id: int,
        reason: str,
    ) -> Report:
        target_column = _target_column(model)
        existing = await db.execute(
            select(model.id).where(target_column == target_id, model.reporter_id == reporter_id)
        )
        if existing.scalar_one_or_none() is not None:
            raise AlreadyReportedError(
                f"{model.target_type.value.capitalize()} {target_id} already reported by user {reporter_id}"
            )

        now = utc_now()
        report = model(
            reporter_id=reporter_id,
            reason=reason,
            status=ReportStatus.PENDING,
            created_at=now,
            updated_at=now,
        )
        setattr(report, target_column.key, target_id)
        db.add(report)

        try:
            await db.commit()
        except IntegrityError as e:
            # Lost the race against an identical report
            await db.rollback()
            raise AlreadyReportedError(
                f"{model.target_type.value.capitalize()} {target_id} already reported by user {reporter_id}",
                original_error=e,
            )

        report_logger.success("Report filed", "REPORT", target_type=model.target_type.value,
                              target_id=target_id, reporter_id=reporter_id, report_id=report.id)
        return report

    @staticmethod
    async def report_post(db: AsyncSession, post_id: int, reporter_id: int, reason: str) -> PostReport:
        """File a PENDING report against a post. A reporter may report a post only once."""
        AsyncReportService.validate_reason(reason)
        await AsyncQueryUtils.get_or_raise(db, Post, post_id, label="Post")
        await AsyncQueryUtils.get_or_raise(db, User, reporter_id, label="User")
        return await AsyncReportService._create_report(db, PostReport, post_id, reporter_id, reason)

    @staticmethod
    async def report_comment(
        db: AsyncSession,
        comment_id: int,
        reporter_id: int,
        reason: str
    ) -> CommentReport:
        """File a PENDING report against a comment. A reporter may report a comment only once."""
        AsyncReportService.validate_reason(reason)
        await AsyncQueryUtils.get_or_raise(db, Comment, comment_id, label="Comment")
        await AsyncQueryUtils.get_or_raise(db, User, reporter_id, label="User")
        return await AsyncReportService._create_report(db, CommentReport, comment_id, reporter_id, reason)

    @staticmethod
    async def update_report_status(
        db: AsyncSession,
        target_type: ReportTargetType,
        report_id: int,
        new_status: ReportStatus,
        moderator: User,
    ) -> Report:
        """Overwrite a report's status. Moderator only."""
        require_moderator(moderator, "change report status")
        model = REPORT_MODELS[target_type]
        report = await AsyncQueryUtils.get_or_raise(db, model, report_id, for_update=True, label="Report")

        previous = report.status
        report.status = new_status
        report.updated_at = utc_now()
        await db.commit()

        report_logger.info("Report status changed", "STATUS", target_type=target_type.value,
                           report_id=report_id, previous=previous.value, status=new_status.value,
                           moderator_id=moderator.id)
        return report

    @staticmethod
    async def reports_by_status(
        db: AsyncSession,
        target_type: ReportTargetType,
        status: ReportStatus,
        limit: int = 20,
        offset: int = 0
    ) -> Tuple[List[Report], int]:
        """Reports of one target type in one status, newest first."""
        model = REPORT_MODELS[target_type]
        total_count = await AsyncQueryUtils.count(db, model, model.status == status)
        result = await db.execute(
            select(model)
            .where(model.status == status)
            .order_by(desc(model.created_at), desc(model.id))
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all()), total_count

    @staticmethod
    async def pending_reports(
        db: AsyncSession,
        target_type: ReportTargetType,
        limit: int = 20,
        offset: int = 0
    ) -> Tuple[List[Report], int]:
        return await AsyncReportService.reports_by_status(
            db, target_type, ReportStatus.PENDING, limit=limit, offset=offset
        )

    @staticmethod
    async def recent_reports(
        db: AsyncSession,
        target_type: ReportTargetType,
        limit: int = 20,
        offset: int = 0
    ) -> Tuple[List[Report], int]:
        """Reports of one target type in any status, newest first."""
        model = REPORT_MODELS[target_type]
        total_count = await AsyncQueryUtils.count(db, model)
        result = await db.execute(
            select(model)
            .order_by(desc(model.created_at), desc(model.id))
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all()), total_count

    @staticmethod
    async def reports_for_post(db: AsyncSession, post_id: int) -> List[PostReport]:
        await AsyncQueryUtils.get_or_raise(db, Post, post_id, label="Post")
        result = await db.execute(
            select(PostReport).where(PostReport.post_id == post_id).order_by(desc(PostReport.created_at))
        )
        return list(result.scalars().all())

    @staticmethod
    async def reports_for_comment(db: AsyncSession, comment_id: int) -> List[CommentReport]:
        await AsyncQueryUtils.get_or_raise(db, Comment, comment_id, label="Comment")
        result = await db.execute(
            select(CommentReport)
            .where(CommentReport.comment_id == comment_id)
            .order_by(desc(CommentReport.created_at))
        )
        return list(result.scalars().all())

    @staticmethod
    async def report_stats(db: AsyncSession) -> Dict[str, int]:
        """
        Count stored reports by status for each target type.

        Keys follow ``<status>_<target>_reports`` plus ``total_<status>_reports``
        summed over both target types.
        """
        stats: Dict[str, int] = {}
        for target_type, model in REPORT_MODELS.items():
            result = await db.execute(
                select(model.status, func.count(model.id)).group_by(model.status)
            )
            counts = {status: count for status, count in result.all()}
            for status in ReportStatus:
                stats[f"{status.value.lower()}_{target_type.value}_reports"] = counts.get(status, 0)

        for status in ReportStatus:
            stats[f"total_{status.value.lower()}_reports"] = sum(
                stats[f"{status.value.lower()}_{target_type.value}_reports"] for target_type in REPORT_MODELS
            )
        return stats
