from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, String, UniqueConstraint

from board.db.base_class import Base, utc_now
from board.models.enums import ReportStatus, ReportTargetType


class PostReport(Base):
    __tablename__ = "post_reports"
    __table_args__ = (
        UniqueConstraint("post_id", "reporter_id", name="uq_post_reports_post_reporter"),
    )

    target_type = ReportTargetType.POST

    id = Column(Integer, primary_key=True, autoincrement=True)
    post_id = Column(Integer, ForeignKey("posts.id"), nullable=False, index=True)
    reporter_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    reason = Column(String(500), nullable=False)
    status = Column(Enum(ReportStatus, native_enum=False, length=20), nullable=False,
                    default=ReportStatus.PENDING, index=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)

    @property
    def target_id(self) -> int:
        return self.post_id


class CommentReport(Base):
    __tablename__ = "comment_reports"
    __table_args__ = (
        UniqueConstraint("comment_id", "reporter_id", name="uq_comment_reports_comment_reporter"),
    )

    target_type = ReportTargetType.COMMENT

    id = Column(Integer, primary_key=True, autoincrement=True)
    comment_id = Column(Integer, ForeignKey("comments.id"), nullable=False, index=True)
    reporter_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    reason = Column(String(500), nullable=False)
    status = Column(Enum(ReportStatus, native_enum=False, length=20), nullable=False,
                    default=ReportStatus.PENDING, index=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)

    @property
    def target_id(self) -> int:
        return self.comment_id
