from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, UniqueConstraint

from board.db.base_class import Base, utc_now


class PostVote(Base):
    """A user's current vote direction on a post. One row per (post, user)."""

    __tablename__ = "post_votes"
    __table_args__ = (
        UniqueConstraint("post_id", "user_id", name="uq_post_votes_post_user"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    post_id = Column(Integer, ForeignKey("posts.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    is_upvote = Column(Boolean, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
