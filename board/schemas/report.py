from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from board.models.enums import ReportStatus, ReportTargetType


class ReportCreate(BaseModel):
    reason: str


class ReportStatusUpdate(BaseModel):
    status: ReportStatus


class ReportResponse(BaseModel):
    id: int
    target_type: ReportTargetType
    target_id: int
    reporter_id: int
    reason: str
    status: ReportStatus
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_report(cls, report) -> "ReportResponse":
        return cls(
            id=report.id,
            target_type=report.target_type,
            target_id=report.target_id,
            reporter_id=report.reporter_id,
            reason=report.reason,
            status=report.status,
            created_at=report.created_at,
            updated_at=report.updated_at,
        )


class ReportListResponse(BaseModel):
    reports: List[ReportResponse]
    total_count: int


class ReportStatsResponse(BaseModel):
    pending_post_reports: int = Field(default=0)
    pending_comment_reports: int = Field(default=0)
    resolved_post_reports: int = Field(default=0)
    resolved_comment_reports: int = Field(default=0)
    dismissed_post_reports: int = Field(default=0)
    dismissed_comment_reports: int = Field(default=0)
    total_pending_reports: int = Field(default=0)
    total_resolved_reports: int = Field(default=0)
    total_dismissed_reports: int = Field(default=0)
