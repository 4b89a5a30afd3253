from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from board.core.config import settings
from board.db.base_class import Base, utc_now


class Post(Base):
    __tablename__ = "posts"
    __table_args__ = (
        CheckConstraint("view_count >= 0", name="ck_posts_view_count_non_negative"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)
    category = Column(String(50), nullable=True, index=True)
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    view_count = Column(Integer, nullable=False, default=0)
    # Running total of upvotes maintained by the vote transitions only.
    like_count = Column(Integer, nullable=False, default=0)
    is_notice = Column(Boolean, nullable=False, default=False)
    deleted = Column(Boolean, nullable=False, default=False, index=True)
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)

    # Many-to-one only; comments are fetched through explicit queries.
    author = relationship("User", lazy="joined", innerjoin=True)

    def is_author(self, user) -> bool:
        return self.author_id == user.id

    def can_modify(self, user) -> bool:
        return self.is_author(user) or user.is_moderator

    def soft_delete(self):
        now = utc_now()
        self.deleted = True
        self.deleted_at = now
        self.updated_at = now

    def restore(self):
        self.deleted = False
        self.deleted_at = None
        self.updated_at = utc_now()

    @property
    def is_popular(self) -> bool:
        return (
            self.view_count >= settings.POPULAR_POST_VIEW_THRESHOLD
            or self.like_count >= settings.POPULAR_POST_LIKE_THRESHOLD
        )
