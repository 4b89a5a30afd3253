from sqlalchemy import Column, DateTime, ForeignKey, Integer, UniqueConstraint

from board.db.base_class import Base, utc_now


class CommentLike(Base):
    """Existence of the row means the user likes the comment."""

    __tablename__ = "comment_likes"
    __table_args__ = (
        UniqueConstraint("comment_id", "user_id", name="uq_comment_likes_comment_user"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    comment_id = Column(Integer, ForeignKey("comments.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
